"""YandexPay - Main SDK entry point."""

from __future__ import annotations

import httpx

from yandex_pay.core.config import Config
from yandex_pay.core.http_client import ApiClient
from yandex_pay.core.logging import configure_logging, get_logger
from yandex_pay.core.types import Environment
from yandex_pay.resources import Operations, Orders, Refunds, Subscriptions
from yandex_pay.webhooks import JwksKeyStore, WebhookParser

logger = get_logger("client")


class YandexPay:
    """
    Main client for the Yandex Pay Merchant API.

    Example:
        >>> with YandexPay(api_key="...", environment=Environment.SANDBOX) as pay:
        ...     pay.orders.create({"orderId": "order-123", "currencyCode": "RUB", ...})
        ...     notification = pay.webhooks.handle(request_body, request_headers)
    """

    def __init__(
        self,
        api_key: str | None = None,
        environment: Environment | str | None = None,
        host: str | None = None,
        config: Config | None = None,
        http_client: httpx.Client | None = None,
        key_store: JwksKeyStore | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            api_key: Merchant API key (read from YANDEX_PAY_API_KEY if omitted)
            environment: Production or sandbox (production if not configured)
            host: Custom API host, overrides the environment's host
            config: Full configuration; other arguments are ignored when given
            http_client: Shared httpx client for REST calls
            key_store: JWKS key store for webhook tokens
        """
        if config is None:
            if api_key:
                config = Config(
                    api_key=api_key,
                    environment=environment or Environment.PRODUCTION,
                    host=host,
                )
            else:
                config = Config.from_env(environment=environment, host=host)
        self._config = config
        configure_logging(level=config.log_level)

        self._client = ApiClient(
            api_key=config.api_key,
            host=config.base_url,
            timeout=config.request_timeout,
            http_client=http_client,
            max_retries=config.max_retries,
            retry_wait=config.retry_wait,
        )
        self._orders = Orders(self._client)
        self._refunds = Refunds(self._client)
        self._operations = Operations(self._client)
        self._subscriptions = Subscriptions(self._client)

        if key_store is None and (
            config.jwks_cache_ttl != JwksKeyStore.DEFAULT_TTL
            or config.jwks_connect_timeout != JwksKeyStore.CONNECT_TIMEOUT
            or config.jwks_read_timeout != JwksKeyStore.READ_TIMEOUT
        ):
            key_store = JwksKeyStore(
                ttl=config.jwks_cache_ttl,
                connect_timeout=config.jwks_connect_timeout,
                read_timeout=config.jwks_read_timeout,
            )
        self._webhooks = WebhookParser(
            secret=config.webhook_secret,
            environment=config.environment,
            verify=config.verify_webhooks,
            verify_expiration=config.verify_expiration,
            key_store=key_store,
        )

        logger.debug(
            f"YandexPay client ready (host={config.base_url}, key={config.masked_api_key()})"
        )

    @property
    def config(self) -> Config:
        return self._config

    @property
    def client(self) -> ApiClient:
        return self._client

    @property
    def orders(self) -> Orders:
        return self._orders

    @property
    def refunds(self) -> Refunds:
        return self._refunds

    @property
    def operations(self) -> Operations:
        return self._operations

    @property
    def subscriptions(self) -> Subscriptions:
        return self._subscriptions

    @property
    def webhooks(self) -> WebhookParser:
        return self._webhooks

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> YandexPay:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
