"""Tests for signed webhook token decoding."""

import base64
import json
import time

import jwt
import pytest
from cryptography.hazmat.primitives.asymmetric import ec
from helpers import KID, ORDER_NOTIFICATION

from yandex_pay.core.exceptions import (
    DecodeError,
    InvalidSignatureError,
    InvalidTokenError,
    JwksFetchError,
    KeyNotFoundError,
    TokenExpiredError,
)
from yandex_pay.core.types import Environment
from yandex_pay.webhooks.decoder import WebhookTokenDecoder
from yandex_pay.webhooks.notification import ModernNotification


def _b64url(data: dict) -> str:
    return base64.urlsafe_b64encode(json.dumps(data).encode()).rstrip(b"=").decode()


class TestVerifiedDecode:
    def test_decodes_valid_token(self, make_token, key_store, order_payload) -> None:
        token = make_token(order_payload)

        payload = WebhookTokenDecoder(token, key_store=key_store).decode()

        assert payload == order_payload

    def test_to_notification(self, make_token, key_store, order_payload) -> None:
        token = make_token(order_payload)

        notification = WebhookTokenDecoder(token, key_store=key_store).to_notification()

        assert isinstance(notification, ModernNotification)
        assert notification.order_id == "order-123"
        assert notification.is_success is True

    def test_strips_whitespace_and_accepts_bytes(self, make_token, key_store, order_payload) -> None:
        token = make_token(order_payload)

        payload = WebhookTokenDecoder(f"  {token}\n".encode(), key_store=key_store).decode()

        assert payload["event"] == "ORDER_STATUS_UPDATED"

    def test_uses_environment_for_key_lookup(self, make_token, key_store, jwks_server, order_payload) -> None:
        token = make_token(order_payload)

        WebhookTokenDecoder(token, environment=Environment.SANDBOX, key_store=key_store).decode()

        assert str(jwks_server.requests[0].url) == "https://sandbox.pay.yandex.ru/api/jwks"

    def test_key_cached_across_decoders(self, make_token, key_store, jwks_server, order_payload) -> None:
        token = make_token(order_payload)

        WebhookTokenDecoder(token, key_store=key_store).decode()
        WebhookTokenDecoder(token, key_store=key_store).decode()

        assert jwks_server.calls == 1


class TestAlgorithmPinning:
    def test_rejects_hs256(self, make_token, key_store, jwks_server, order_payload) -> None:
        token = make_token(order_payload, key="a-shared-secret-that-is-32-bytes!", algorithm="HS256")

        with pytest.raises(InvalidTokenError, match="Unsupported token algorithm: 'HS256'"):
            WebhookTokenDecoder(token, key_store=key_store).decode()
        assert jwks_server.calls == 0

    def test_rejects_es384_even_with_valid_signature(self, make_token, key_store, order_payload) -> None:
        p384_key = ec.generate_private_key(ec.SECP384R1())
        token = make_token(order_payload, key=p384_key, algorithm="ES384")

        with pytest.raises(InvalidTokenError, match="Unsupported token algorithm"):
            WebhookTokenDecoder(token, key_store=key_store).decode()

    def test_rejects_none_algorithm(self, key_store, order_payload) -> None:
        token = f"{_b64url({'alg': 'none', 'kid': KID})}.{_b64url(order_payload)}."

        with pytest.raises(InvalidTokenError):
            WebhookTokenDecoder(token, key_store=key_store).decode()


class TestSignatureFailures:
    def test_tampered_payload(self, make_token, key_store, order_payload) -> None:
        header, _, signature = make_token(order_payload).split(".")
        forged = {**order_payload, "order": {"order_id": "order-123", "payment_status": "REFUNDED"}}
        token = ".".join([header, _b64url(forged), signature])

        with pytest.raises(InvalidSignatureError):
            WebhookTokenDecoder(token, key_store=key_store).decode()

    def test_signed_by_other_key(self, make_token, key_store, order_payload) -> None:
        attacker_key = ec.generate_private_key(ec.SECP256R1())
        token = make_token(order_payload, key=attacker_key)

        with pytest.raises(InvalidSignatureError):
            WebhookTokenDecoder(token, key_store=key_store).decode()

    def test_unknown_kid(self, make_token, key_store, order_payload) -> None:
        token = make_token(order_payload, kid="unknown")

        with pytest.raises(KeyNotFoundError):
            WebhookTokenDecoder(token, key_store=key_store).decode()

    def test_missing_kid(self, make_token, key_store, order_payload) -> None:
        token = make_token(order_payload, kid=None)

        with pytest.raises(InvalidTokenError):
            WebhookTokenDecoder(token, key_store=key_store).decode()

    def test_jwks_failure_propagates(self, make_token, key_store, jwks_server, order_payload) -> None:
        jwks_server.status_code = 500
        token = make_token(order_payload)

        with pytest.raises(JwksFetchError):
            WebhookTokenDecoder(token, key_store=key_store).decode()


class TestExpiry:
    def test_expired_token(self, make_token, key_store) -> None:
        token = make_token({**ORDER_NOTIFICATION, "exp": int(time.time()) - 60})

        with pytest.raises(TokenExpiredError, match="Token expired"):
            WebhookTokenDecoder(token, key_store=key_store).decode()

    def test_expiry_check_disabled(self, make_token, key_store) -> None:
        token = make_token({**ORDER_NOTIFICATION, "exp": int(time.time()) - 60})

        payload = WebhookTokenDecoder(token, verify_expiration=False, key_store=key_store).decode()

        assert payload["event"] == "ORDER_STATUS_UPDATED"

    def test_leeway(self, make_token, key_store) -> None:
        token = make_token({**ORDER_NOTIFICATION, "exp": int(time.time()) - 5})

        payload = WebhookTokenDecoder(token, key_store=key_store, leeway=60).decode()

        assert payload["event"] == "ORDER_STATUS_UPDATED"

    def test_errors_stay_distinguishable(self) -> None:
        assert not issubclass(TokenExpiredError, InvalidSignatureError)
        assert not issubclass(InvalidSignatureError, InvalidTokenError)
        assert not issubclass(TokenExpiredError, InvalidTokenError)
        for error in (TokenExpiredError, InvalidSignatureError, InvalidTokenError):
            assert issubclass(error, DecodeError)


class TestUnverifiedDecode:
    def test_skips_signature_and_network(self, make_token, key_store, jwks_server, order_payload) -> None:
        attacker_key = ec.generate_private_key(ec.SECP256R1())
        token = make_token(order_payload, key=attacker_key, kid="unknown")

        payload = WebhookTokenDecoder(token, verify=False, key_store=key_store).decode()

        assert payload == order_payload
        assert jwks_server.calls == 0

    def test_ignores_expiry(self, make_token, key_store) -> None:
        token = make_token({**ORDER_NOTIFICATION, "exp": int(time.time()) - 60})

        payload = WebhookTokenDecoder(token, verify=False, key_store=key_store).decode()

        assert payload["order"]["order_id"] == "order-123"

    def test_malformed_payload(self, key_store) -> None:
        token = f"{_b64url({'alg': 'ES256'})}.not-json.sig"

        with pytest.raises(InvalidTokenError):
            WebhookTokenDecoder(token, verify=False, key_store=key_store).decode()


class TestMalformedTokens:
    @pytest.mark.parametrize("token", [None, "", "   ", b""])
    def test_blank(self, token) -> None:
        with pytest.raises(InvalidTokenError, match="Token is blank"):
            WebhookTokenDecoder(token).decode()

    @pytest.mark.parametrize("token", ["abc", "a.b", "a.b.c.d"])
    def test_wrong_segment_count(self, token) -> None:
        with pytest.raises(InvalidTokenError, match="three segments"):
            WebhookTokenDecoder(token).decode()

    def test_unparsable_header(self, key_store) -> None:
        with pytest.raises(InvalidTokenError, match="Failed to parse token header"):
            WebhookTokenDecoder("!!!.e30.sig", key_store=key_store).decode()

    def test_header_must_be_object(self) -> None:
        decoder = WebhookTokenDecoder(f"{base64.urlsafe_b64encode(b'[1]').decode()}.e30.sig")

        with pytest.raises(InvalidTokenError, match="not a JSON object"):
            decoder.header


class TestHeader:
    def test_header_without_verification(self, make_token, order_payload) -> None:
        decoder = WebhookTokenDecoder(make_token(order_payload))

        assert decoder.header["alg"] == "ES256"
        assert decoder.kid == KID
        assert decoder.algorithm == "ES256"

    def test_header_is_cached(self, make_token, order_payload) -> None:
        decoder = WebhookTokenDecoder(make_token(order_payload))

        assert decoder.header is decoder.header

    def test_single_segment(self) -> None:
        with pytest.raises(InvalidTokenError, match="Invalid token format"):
            WebhookTokenDecoder("abc").header

    def test_pyjwt_agrees_on_header(self, make_token, order_payload) -> None:
        token = make_token(order_payload)
        assert WebhookTokenDecoder(token).header == jwt.get_unverified_header(token)
