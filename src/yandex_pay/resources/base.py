"""Base class for REST resource wrappers."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from yandex_pay.core.http_client import ApiClient


class Resource:
    """A group of Merchant API endpoints sharing one ApiClient."""

    basic_path = "/api/merchant/v1"

    def __init__(self, client: ApiClient) -> None:
        self._client = client

    @property
    def client(self) -> ApiClient:
        return self._client
