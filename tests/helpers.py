"""Shared test doubles for webhook tests."""

import json

import httpx
from jwt.algorithms import ECAlgorithm

KID = "test-key-1"

ORDER_NOTIFICATION = {
    "event": "ORDER_STATUS_UPDATED",
    "event_time": "2025-12-10T15:19:07.599093+00:00",
    "merchant_id": "040d2366-16f3-4b8d-948c-0c27c5f4df31",
    "order": {
        "order_id": "order-123",
        "payment_status": "CAPTURED",
    },
}


class FakeClock:
    """Manually advanced time source."""

    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class JwksServer:
    """Serves a JWKS document through httpx.MockTransport and counts hits."""

    def __init__(self, keys: list[dict]) -> None:
        self.keys = keys
        self.status_code = 200
        self.body: bytes | None = None
        self.error: Exception | None = None
        self.requests: list[httpx.Request] = []

    @property
    def calls(self) -> int:
        return len(self.requests)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if self.body is not None:
            return httpx.Response(self.status_code, content=self.body)
        return httpx.Response(self.status_code, json={"keys": self.keys})


def public_jwk(private_key, kid: str = KID) -> dict:
    jwk = json.loads(ECAlgorithm.to_jwk(private_key.public_key()))
    jwk["kid"] = kid
    jwk["alg"] = "ES256"
    return jwk
