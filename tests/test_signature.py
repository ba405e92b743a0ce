"""Unit tests for legacy HMAC webhook signatures."""

import hashlib
import hmac

import pytest

from yandex_pay.webhooks.signature import constant_time_equals, sign, verify

SECRET = "webhook-secret"
BODY = '{"status":"1","operation":"approved","mdOrder":"md-1"}'


class TestSign:
    def test_hmac_sha256_hex(self) -> None:
        expected = hmac.new(SECRET.encode(), BODY.encode(), hashlib.sha256).hexdigest()
        assert sign(SECRET, BODY) == expected

    def test_str_and_bytes_agree(self) -> None:
        assert sign(SECRET, BODY) == sign(SECRET.encode(), BODY.encode())

    def test_structure_is_signed_as_compact_json(self) -> None:
        payload = {"status": "1", "operation": "approved", "mdOrder": "md-1"}
        assert sign(SECRET, payload) == sign(SECRET, BODY)

    def test_whitespace_changes_signature(self) -> None:
        assert sign(SECRET, BODY) != sign(SECRET, BODY.replace(",", ", "))


class TestVerify:
    @pytest.mark.parametrize("secret", ["s", "another-secret", "секрет"])
    @pytest.mark.parametrize("body", ["", "{}", BODY, '{"amount":"10.00"}'])
    def test_accepts_own_signature(self, secret, body) -> None:
        assert verify(secret, body, sign(secret, body)) is True

    def test_rejects_every_single_character_mutation(self) -> None:
        signature = sign(SECRET, BODY)
        for i, char in enumerate(signature):
            replacement = "0" if char != "0" else "1"
            mutated = signature[:i] + replacement + signature[i + 1 :]
            assert verify(SECRET, BODY, mutated) is False

    @pytest.mark.parametrize("signature", [None, "", b""])
    def test_missing_signature_is_false(self, signature) -> None:
        assert verify(SECRET, BODY, signature) is False

    def test_length_mismatch_is_false(self) -> None:
        signature = sign(SECRET, BODY)
        assert verify(SECRET, BODY, signature[:-1]) is False
        assert verify(SECRET, BODY, signature + "0") is False

    def test_missing_secret_is_false(self) -> None:
        assert verify("", BODY, sign(SECRET, BODY)) is False

    def test_wrong_secret_is_false(self) -> None:
        assert verify("other", BODY, sign(SECRET, BODY)) is False

    def test_bytes_signature(self) -> None:
        assert verify(SECRET, BODY, sign(SECRET, BODY).encode()) is True

    def test_unserializable_body_is_false(self) -> None:
        assert verify(SECRET, {"value": object()}, "00") is False


class TestConstantTimeEquals:
    def test_equal(self) -> None:
        assert constant_time_equals(b"abc", b"abc") is True
        assert constant_time_equals(b"", b"") is True

    def test_different_content(self) -> None:
        assert constant_time_equals(b"abc", b"abd") is False
        assert constant_time_equals(b"xbc", b"abc") is False

    def test_different_length(self) -> None:
        assert constant_time_equals(b"abc", b"abcd") is False
