from datetime import timedelta

import jwt
import pytest

from shopfront.core.exceptions import UnauthorizedError
from shopfront.core.security import PasswordHasher, TokenService
from shopfront.utils.date_utils import DateUtils

SECRET = "current-signing-secret-that-is-long-enough"
OLD_SECRET = "previous-signing-secret-that-is-long-enough"


def test_password_hash_is_salted_and_verifiable():
    hasher = PasswordHasher(rounds=4)
    first = hasher.hash("Abcdefg1")
    second = hasher.hash("Abcdefg1")

    assert first != second
    assert "Abcdefg1" not in first
    assert hasher.verify("Abcdefg1", first)
    assert not hasher.verify("Abcdefg2", first)


def test_verify_rejects_garbage_hash():
    hasher = PasswordHasher(rounds=4)
    assert not hasher.verify("Abcdefg1", "not-a-bcrypt-hash")
    assert not hasher.verify("Abcdefg1", None)


def test_token_round_trip_carries_identity():
    service = TokenService(SECRET)
    claims = service.verify(service.issue("user-1", "alice"))

    assert claims.user_id == "user-1"
    assert claims.username == "alice"


def test_token_expires_after_one_day():
    service = TokenService(SECRET, expiration_hours=24)
    token = service.issue("user-1", "alice", now=DateUtils.now_utc() - timedelta(hours=25))

    with pytest.raises(UnauthorizedError) as exc:
        service.verify(token)
    assert exc.value.message == "Invalid Token"


def test_token_expiry_claim_is_one_day_after_issue():
    service = TokenService(SECRET)
    payload = jwt.decode(service.issue("user-1", "alice"), SECRET, algorithms=["HS256"])
    assert payload["exp"] - payload["iat"] == 24 * 60 * 60


def test_token_signed_with_unknown_secret_is_rejected():
    forged = TokenService("some-other-secret-that-is-long-enough").issue("user-1", "alice")
    with pytest.raises(UnauthorizedError):
        TokenService(SECRET).verify(forged)


def test_malformed_token_is_rejected():
    with pytest.raises(UnauthorizedError):
        TokenService(SECRET).verify("not.a.jwt")


def test_rotated_secret_still_verifies_old_tokens():
    old_token = TokenService(OLD_SECRET).issue("user-1", "alice")
    rotated = TokenService(SECRET, previous_secret_keys=[OLD_SECRET])

    assert rotated.verify(old_token).user_id == "user-1"
    # New tokens are signed with the current secret only
    with pytest.raises(UnauthorizedError):
        TokenService(OLD_SECRET).verify(rotated.issue("user-2", "bob"))


def test_token_without_identity_claims_is_rejected():
    token = jwt.encode(
        {"exp": DateUtils.now_utc() + timedelta(hours=1)}, SECRET, algorithm="HS256"
    )
    with pytest.raises(UnauthorizedError):
        TokenService(SECRET).verify(token)
