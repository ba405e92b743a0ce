"""Operations (captures, refunds, voids, ...) performed on orders."""

from __future__ import annotations

from typing import Any

from yandex_pay.resources.base import Resource


class Operations(Resource):
    def get(self, operation_id: str) -> Any:
        return self._client.get(f"{self.basic_path}/operations/{operation_id}")

    def list(self, params: dict[str, Any] | None = None) -> Any:
        """List operations, filtered by query parameters such as ``order_id``."""
        return self._client.get(f"{self.basic_path}/operations", params=params or None)
