# tests/test_utils.py
from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from leaderboard_service.errors import InvalidToken
from leaderboard_service.utils import TokenService, get_password_hash, verify_password


def test_password_hash_roundtrip():
    hashed = get_password_hash("pw123")

    assert hashed != "pw123"
    assert verify_password("pw123", hashed)
    assert not verify_password("pw124", hashed)


def test_verify_password_rejects_empty_values():
    assert not verify_password("", get_password_hash("pw123"))
    assert not verify_password(None, get_password_hash("pw123"))


def test_token_verifies_to_same_user():
    tokens = TokenService("secret")
    assert tokens.verify(tokens.issue(17)) == 17


def test_token_valid_for_seven_days():
    tokens = TokenService("secret")
    almost = datetime.now(timezone.utc) - timedelta(days=7) + timedelta(minutes=1)
    expired = datetime.now(timezone.utc) - timedelta(days=7, seconds=1)

    assert tokens.verify(tokens.issue(17, issued_at=almost)) == 17
    with pytest.raises(InvalidToken):
        tokens.verify(tokens.issue(17, issued_at=expired))


def test_token_signed_with_other_secret_is_rejected():
    token = TokenService("other-secret").issue(17)
    with pytest.raises(InvalidToken):
        TokenService("secret").verify(token)


@pytest.mark.parametrize("token", ["", "garbage", "a.b.c"])
def test_malformed_token_is_rejected(token):
    with pytest.raises(InvalidToken):
        TokenService("secret").verify(token)


def test_token_without_numeric_sub_is_rejected():
    exp = datetime.now(timezone.utc) + timedelta(days=1)
    token = jwt.encode({"sub": "alice", "exp": exp}, "secret", algorithm="HS256")
    with pytest.raises(InvalidToken):
        TokenService("secret").verify(token)
