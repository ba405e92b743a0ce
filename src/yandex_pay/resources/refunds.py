"""Refunds (v2 API)."""

from __future__ import annotations

from typing import Any

from yandex_pay.resources.base import Resource


class Refunds(Resource):
    basic_path = "/api/merchant/v2"

    def create(self, order_id: str, params: dict[str, Any] | None = None) -> Any:
        """
        Refund an order, fully or partially.

        Args:
            order_id: Merchant order id
            params: Refund body (refundAmount, orderAmount, cart, ...)
        """
        return self._client.post(f"{self.basic_path}/orders/{order_id}/refund", payload=params or {})
