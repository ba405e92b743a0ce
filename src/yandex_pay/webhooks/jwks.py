"""
JWKS key store for webhook token verification.

Fetches the provider's published signing keys and caches them for a
fixed TTL. The cache is per environment and shared process-wide through
``get_default_key_store()``.

Refresh is always inline with the ``resolve()`` call that finds a stale
or missing set; there is no background refresh. No lock guards the
refresh: concurrent callers hitting a cold cache may each fetch, and the
last fetch to finish wins. Every fetch replaces the whole set, so readers
never observe a partial merge.
"""

from __future__ import annotations

import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

import httpx
from jwt import PyJWK
from jwt.exceptions import InvalidKeyError, PyJWKError

from yandex_pay.core.exceptions import (
    JwksFetchError,
    JwksParseError,
    KeyNotFoundError,
)
from yandex_pay.core.logging import get_logger
from yandex_pay.core.types import JWKS_URLS, WEBHOOK_TOKEN_ALGORITHM, Environment

logger = get_logger("webhooks.jwks")


def _as_environment(environment: Environment | str) -> Environment:
    if isinstance(environment, Environment):
        return environment
    return Environment.from_string(environment)


@dataclass(frozen=True)
class SigningKeySet:
    """An immutable snapshot of published keys and when they were fetched."""

    keys: tuple[dict[str, Any], ...]
    fetched_at: float

    def find(self, kid: str) -> dict[str, Any] | None:
        for key in self.keys:
            if key.get("kid") == kid:
                return key
        return None


class JwksKeyStore:
    """
    TTL-bounded cache of webhook signing keys.

    Example:
        >>> store = JwksKeyStore()
        >>> public_key = store.resolve("key-id", Environment.SANDBOX)
    """

    DEFAULT_TTL = 3600.0  # seconds
    CONNECT_TIMEOUT = 5.0
    READ_TIMEOUT = 10.0

    def __init__(
        self,
        ttl: float = DEFAULT_TTL,
        connect_timeout: float = CONNECT_TIMEOUT,
        read_timeout: float = READ_TIMEOUT,
        http_client: httpx.Client | None = None,
        clock: Callable[[], float] = time.time,
        urls: Mapping[Environment, str] | None = None,
    ) -> None:
        """
        Args:
            ttl: Seconds a fetched key set stays usable
            connect_timeout: TCP/TLS connect timeout for key fetches
            read_timeout: Read timeout for key fetches
            http_client: Shared httpx client (owned by the caller)
            clock: Time source, seconds since the epoch
            urls: Per-environment JWKS endpoints
        """
        self._ttl = ttl
        self._timeout = httpx.Timeout(read_timeout, connect=connect_timeout)
        self._http_client = http_client
        self._owns_client = False
        self._clock = clock
        self._urls = dict(urls or JWKS_URLS)
        self._cache: dict[Environment, SigningKeySet] = {}

    @property
    def ttl(self) -> float:
        return self._ttl

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

    def is_fresh(self, environment: Environment | str = Environment.PRODUCTION) -> bool:
        """Whether a cached set exists and is younger than the TTL."""
        key_set = self._cache.get(_as_environment(environment))
        if key_set is None:
            return False
        return (self._clock() - key_set.fetched_at) < self._ttl

    def invalidate(self, environment: Environment | str | None = None) -> None:
        """Drop the cached set for one environment, or for all of them."""
        if environment is None:
            self._cache = {}
        else:
            self._cache.pop(_as_environment(environment), None)

    def fetch(self, environment: Environment | str = Environment.PRODUCTION) -> SigningKeySet:
        """
        Fetch the key set from the network and replace the cached one.

        Raises:
            JwksFetchError: Transport failure or non-2xx response
            JwksParseError: Body is not JSON or has no keys
        """
        env = _as_environment(environment)
        url = self._urls[env]
        client = self._get_client()

        logger.debug(f"Fetching JWKS from {url}")
        try:
            response = client.get(url, headers={"Accept": "application/json"}, timeout=self._timeout)
        except httpx.HTTPError as e:
            logger.warning(f"JWKS fetch from {url} failed: {e}")
            raise JwksFetchError(f"Failed to fetch JWKS: {e}", url=url) from e

        if not response.is_success:
            logger.warning(f"JWKS fetch from {url} returned HTTP {response.status_code}")
            raise JwksFetchError(
                f"JWKS request failed with status {response.status_code}",
                status_code=response.status_code,
                url=url,
            )

        try:
            data = response.json()
        except ValueError as e:
            logger.warning(f"JWKS response from {url} is not valid JSON")
            raise JwksParseError(f"Failed to parse JWKS response: {e}") from e

        keys = data.get("keys") if isinstance(data, dict) else None
        if not isinstance(keys, list):
            raise JwksParseError("No keys found in JWKS response")

        usable = tuple(dict(key) for key in keys if isinstance(key, Mapping))
        if not usable:
            raise JwksParseError("No keys found in JWKS response")

        key_set = SigningKeySet(keys=usable, fetched_at=self._clock())
        self._cache[env] = key_set
        logger.info(f"Loaded {len(usable)} JWKS key(s) for {env.value}")
        return key_set

    def key_set(self, environment: Environment | str = Environment.PRODUCTION) -> SigningKeySet:
        """Return the cached set, re-fetching it first when stale or missing."""
        env = _as_environment(environment)
        # Single read: invalidate() may swap the cache dict concurrently
        key_set = self._cache.get(env)
        if key_set is not None and (self._clock() - key_set.fetched_at) < self._ttl:
            logger.debug(f"JWKS cache hit for {env.value}")
            return key_set
        return self.fetch(env)

    def keys(self, environment: Environment | str = Environment.PRODUCTION) -> list[dict[str, Any]]:
        """Published keys as JWK dicts."""
        return [dict(key) for key in self.key_set(environment).keys]

    def resolve(self, kid: str | None, environment: Environment | str = Environment.PRODUCTION) -> Any:
        """
        Resolve a key id to a public key object.

        Raises:
            KeyNotFoundError: No published key has this key id
            JwksFetchError, JwksParseError: The key set could not be loaded
        """
        if not kid:
            raise KeyNotFoundError("Token header has no key id", kid=kid)

        jwk = self.key_set(environment).find(kid)
        if jwk is None:
            raise KeyNotFoundError(f"Public key not found for kid: {kid}", kid=kid)

        try:
            return PyJWK(jwk, algorithm=WEBHOOK_TOKEN_ALGORITHM).key
        except (PyJWKError, InvalidKeyError, ValueError) as e:
            raise JwksParseError(f"Unusable JWKS key {kid}: {e}") from e


_default_store: JwksKeyStore | None = None


def get_default_key_store() -> JwksKeyStore:
    """Process-wide key store used when no explicit store is supplied."""
    global _default_store
    if _default_store is None:
        _default_store = JwksKeyStore()
    return _default_store


def clear_jwks_cache() -> None:
    """Clear the process-wide key cache (e.g. after a key rotation)."""
    if _default_store is not None:
        _default_store.invalidate()
