"""
Orders.

https://pay.yandex.ru/docs/ru/custom/backend/yandex-pay-api/order/
"""

from __future__ import annotations

from typing import Any

from yandex_pay.resources.base import Resource


class Orders(Resource):
    """Create orders and move them through capture, cancel and rollback."""

    def create(self, params: dict[str, Any] | None = None) -> Any:
        """
        Create a new order.

        Args:
            params: Order body (cart, currencyCode, orderId, redirectUrls, ...)
        """
        return self._client.post(f"{self.basic_path}/orders", payload=params or {})

    def get(self, order_id: str) -> Any:
        return self._client.get(f"{self.basic_path}/orders/{order_id}")

    def cancel(self, order_id: str, params: dict[str, Any] | None = None) -> Any:
        return self._client.post(f"{self.basic_path}/orders/{order_id}/cancel", payload=params or {})

    def capture(self, order_id: str, params: dict[str, Any] | None = None) -> Any:
        """Confirm (capture) an authorized payment, fully or partially."""
        return self._client.post(f"{self.basic_path}/orders/{order_id}/capture", payload=params or {})

    def submit(self, order_id: str, params: dict[str, Any] | None = None) -> Any:
        return self._client.post(f"{self.basic_path}/orders/{order_id}/submit", payload=params or {})

    def rollback(self, order_id: str, params: dict[str, Any] | None = None) -> Any:
        return self._client.post(f"{self.basic_path}/orders/{order_id}/rollback", payload=params or {})
