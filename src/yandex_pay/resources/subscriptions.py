"""Recurring-payment subscriptions."""

from __future__ import annotations

from typing import Any

from yandex_pay.resources.base import Resource


class Subscriptions(Resource):
    def get(self, subscription_id: str) -> Any:
        return self._client.get(f"{self.basic_path}/subscriptions/{subscription_id}")

    def cancel(self, subscription_id: str, params: dict[str, Any] | None = None) -> Any:
        return self._client.post(
            f"{self.basic_path}/subscriptions/{subscription_id}/cancel", payload=params or {}
        )
