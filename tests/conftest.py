import time

import httpx
import jwt
import pytest
from cryptography.hazmat.primitives.asymmetric import ec
from helpers import KID, ORDER_NOTIFICATION, FakeClock, JwksServer, public_jwk

from yandex_pay.webhooks.jwks import JwksKeyStore


@pytest.fixture
def signing_key():
    return ec.generate_private_key(ec.SECP256R1())


@pytest.fixture
def jwks_server(signing_key):
    return JwksServer([public_jwk(signing_key)])


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def key_store(jwks_server, clock):
    http_client = httpx.Client(transport=httpx.MockTransport(jwks_server.handler))
    yield JwksKeyStore(http_client=http_client, clock=clock)
    http_client.close()


@pytest.fixture
def make_token(signing_key):
    """Mint a webhook token; defaults to ES256 signed with the published key."""

    def _make(payload: dict, kid: str | None = KID, key=None, algorithm: str = "ES256") -> str:
        headers = {"kid": kid} if kid is not None else {}
        return jwt.encode(payload, key if key is not None else signing_key, algorithm=algorithm, headers=headers)

    return _make


@pytest.fixture
def order_payload():
    return {**ORDER_NOTIFICATION, "exp": int(time.time()) + 300}
