"""
HTTP client for the Yandex Pay Merchant API.

https://pay.yandex.ru/docs/ru/custom/backend/yandex-pay-api/
"""

from __future__ import annotations

import json
from typing import Any

import httpx

from yandex_pay.core.exceptions import ApiException
from yandex_pay.core.logging import get_logger
from yandex_pay.resilience.retry import DEFAULT_ATTEMPTS, DEFAULT_WAIT, execute_with_retry

logger = get_logger("http_client")

# Provider maximum for a single request
TIMEOUT = 10.0


class ApiClient:
    """
    Thin JSON-over-HTTP client.

    Every call returns the parsed JSON body. The provider reports errors in a
    JSON envelope, so non-2xx responses are returned like any other body;
    only transport and JSON-decoding failures raise ApiException.

    Example:
        >>> client = ApiClient(api_key="...", host="https://sandbox.pay.yandex.ru")
        >>> client.get("/api/merchant/v1/orders/order-123")
    """

    def __init__(
        self,
        api_key: str,
        host: str,
        timeout: float = TIMEOUT,
        http_client: httpx.Client | None = None,
        max_retries: int = DEFAULT_ATTEMPTS,
        retry_wait: float = DEFAULT_WAIT,
    ) -> None:
        """
        Args:
            api_key: Merchant API key
            host: API host, e.g. https://pay.yandex.ru
            timeout: Request timeout in seconds
            http_client: Shared httpx client (owned by the caller)
            max_retries: Attempts made by request_with_retries()
            retry_wait: Seconds between those attempts
        """
        self._default_headers = {
            "Content-Type": "application/json;charset=UTF-8",
            "Accept": "application/json",
            "Authorization": f"Api-Key {api_key}",
        }
        self._host = host.rstrip("/")
        self._timeout = timeout
        self._http_client = http_client
        self._owns_client = False
        self._max_retries = max_retries
        self._retry_wait = retry_wait

    @property
    def host(self) -> str:
        return self._host

    @property
    def default_headers(self) -> dict[str, str]:
        return dict(self._default_headers)

    def _get_client(self) -> httpx.Client:
        """Lazy-init HTTP client."""
        if self._http_client is None:
            self._http_client = httpx.Client(timeout=self._timeout)
            self._owns_client = True
        return self._http_client

    def close(self) -> None:
        """Close owned HTTP client."""
        if self._owns_client and self._http_client:
            self._http_client.close()
            self._http_client = None
            self._owns_client = False

    def __enter__(self) -> ApiClient:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def get(
        self,
        endpoint: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        return self.request("GET", endpoint, params=params, headers=headers)

    def post(
        self,
        endpoint: str,
        payload: Any = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        return self.request("POST", endpoint, payload=payload, headers=headers)

    def put(
        self,
        endpoint: str,
        payload: Any = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        return self.request("PUT", endpoint, payload=payload, headers=headers)

    def delete(self, endpoint: str, headers: dict[str, str] | None = None) -> Any:
        return self.request("DELETE", endpoint, headers=headers)

    def request(
        self,
        method: str,
        endpoint: str,
        payload: Any = None,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """
        Make a request and return the parsed JSON body.

        Raises:
            ApiException: Transport failure or non-JSON response
        """
        url = f"{self._host}{endpoint}"
        content = payload if payload is None or isinstance(payload, (str, bytes)) else json.dumps(payload)
        merged_headers = {**self._default_headers, **(headers or {})}

        logger.debug(f"{method} {url}")
        response: httpx.Response | None = None
        try:
            response = self._get_client().request(
                method,
                url,
                content=content,
                params=params,
                headers=merged_headers,
                timeout=self._timeout,
            )
            return response.json()
        except (httpx.HTTPError, ValueError) as e:
            status_code = response.status_code if response is not None else None
            logger.error(f"{method} {url} failed: {e}")
            raise ApiException(str(e), status_code=status_code, url=url) from e

    def request_with_retries(
        self,
        method: str,
        endpoint: str,
        payload: Any = None,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """
        Like request(), retrying ApiException a fixed number of times.

        Raises:
            ApiException: All attempts failed
        """
        try:
            return execute_with_retry(
                self.request,
                method,
                endpoint,
                payload=payload,
                params=params,
                headers=headers,
                attempts=self._max_retries,
                wait=self._retry_wait,
                retry_on=ApiException,
            )
        except ApiException as e:
            raise ApiException(
                f"Message: {e.message}. Number of connection tries exceed.",
                status_code=e.status_code,
                url=e.url,
            ) from e
