"""REST resource wrappers for the Merchant API."""

from yandex_pay.resources.base import Resource
from yandex_pay.resources.operations import Operations
from yandex_pay.resources.orders import Orders
from yandex_pay.resources.refunds import Refunds
from yandex_pay.resources.subscriptions import Subscriptions

__all__ = [
    "Operations",
    "Orders",
    "Refunds",
    "Resource",
    "Subscriptions",
]
