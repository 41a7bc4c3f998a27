"""Tests for bearer token issuance and verification."""

import time
from datetime import timedelta

import jwt as pyjwt
import pytest

from docs_wallet.exceptions import UnauthorizedError
from docs_wallet.services.token_service import TokenService

SECRET = "super-secret-signing-key-for-tests-only"


def _make_token(secret: str = SECRET, **claims) -> str:
    now = int(time.time())
    payload = {"email": "a@x.com", "iat": now, "exp": now + 3600, **claims}
    return pyjwt.encode(payload, secret, algorithm="HS256")


class TestIssue:
    def test_round_trip_keeps_payload_fields(self) -> None:
        service = TokenService(SECRET)
        token = service.issue({"email": "a@x.com", "name": "Ada"})

        claim = service.verify(token)
        assert claim.email == "a@x.com"
        assert claim.model_extra["name"] == "Ada"

    def test_expiry_is_one_hour_after_issue(self) -> None:
        service = TokenService(SECRET)
        claim = service.verify(service.issue({"email": "a@x.com"}))
        assert claim.exp - claim.iat == 3600

    def test_client_supplied_expiry_is_replaced(self) -> None:
        service = TokenService(SECRET)
        far_future = int(time.time()) + 10 * 365 * 24 * 3600
        claim = service.verify(service.issue({"email": "a@x.com", "exp": far_future}))
        assert claim.exp < far_future

    def test_issue_does_not_mutate_payload(self) -> None:
        payload = {"email": "a@x.com"}
        TokenService(SECRET).issue(payload)
        assert payload == {"email": "a@x.com"}


class TestVerify:
    def test_valid_token(self) -> None:
        claim = TokenService(SECRET).verify(_make_token())
        assert claim.email == "a@x.com"

    def test_expired_token_raises(self) -> None:
        now = int(time.time())
        token = _make_token(iat=now - 7200, exp=now - 60)
        with pytest.raises(UnauthorizedError):
            TokenService(SECRET).verify(token)

    def test_lifetime_elapsed_raises(self) -> None:
        service = TokenService(SECRET, lifetime=timedelta(seconds=-1))
        with pytest.raises(UnauthorizedError):
            service.verify(service.issue({"email": "a@x.com"}))

    def test_invalid_signature_raises(self) -> None:
        with pytest.raises(UnauthorizedError):
            TokenService(SECRET).verify(_make_token(secret="another-secret-of-sufficient-length"))

    def test_malformed_token_raises(self) -> None:
        with pytest.raises(UnauthorizedError):
            TokenService(SECRET).verify("not-a-jwt")

    def test_missing_email_raises(self) -> None:
        now = int(time.time())
        token = pyjwt.encode({"iat": now, "exp": now + 60}, SECRET, algorithm="HS256")
        with pytest.raises(UnauthorizedError):
            TokenService(SECRET).verify(token)

    def test_missing_exp_raises(self) -> None:
        token = pyjwt.encode({"email": "a@x.com", "iat": int(time.time())}, SECRET, algorithm="HS256")
        with pytest.raises(UnauthorizedError):
            TokenService(SECRET).verify(token)

    def test_every_failure_has_the_same_message(self) -> None:
        service = TokenService(SECRET)
        now = int(time.time())
        tokens = [
            "garbage",
            _make_token(secret="another-secret-of-sufficient-length"),
            _make_token(iat=now - 7200, exp=now - 60),
        ]
        messages = set()
        for token in tokens:
            with pytest.raises(UnauthorizedError) as exc_info:
                service.verify(token)
            messages.add(exc_info.value.message)
        assert messages == {"Unauthorized access"}

    def test_audience_claim_in_payload_still_verifies(self) -> None:
        service = TokenService(SECRET)
        claim = service.verify(service.issue({"email": "a@x.com", "aud": "web"}))
        assert claim.email == "a@x.com"
        assert claim.model_extra["aud"] == "web"
