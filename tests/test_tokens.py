import time
from datetime import datetime, timedelta, timezone

import jwt
import pytest

from rbac_admin.core.config import settings
from rbac_admin.core.exceptions import (
    EmptyClaimsError,
    ExpiredTokenError,
    MalformedTokenError,
    UnsupportedTokenError,
)
from rbac_admin.core.tokens import TokenKind

EMAIL = "someone@example.com"


def _flip_signature(token: str) -> str:
    header, payload, signature = token.split(".")
    i = len(signature) // 2
    replacement = "A" if signature[i] != "A" else "B"
    return ".".join([header, payload, signature[:i] + replacement + signature[i + 1:]])


def _encode(claims: dict, key: str = settings.JWT_SECRET, algorithm: str = "HS256") -> str:
    return jwt.encode(claims, key, algorithm=algorithm)


def test_extract_subject_round_trip(tokens):
    token = tokens.issue_access_token(EMAIL, ["ADMIN"])
    assert tokens.extract_subject(token) == EMAIL


def test_access_token_carries_bare_role_names(tokens):
    token = tokens.issue_access_token(EMAIL, ["MODERATOR"])
    claims = jwt.decode(token, settings.JWT_SECRET, algorithms=["HS256"])

    assert claims["sub"] == EMAIL
    assert claims["roles"] == ["MODERATOR"]
    assert claims["exp"] - claims["iat"] == settings.JWT_EXPIRATION_MS // 1000
    assert jwt.get_unverified_header(token)["alg"] == "HS256"


def test_refresh_token_has_no_roles_and_longer_lifetime(tokens):
    token = tokens.issue_refresh_token(EMAIL)
    claims = jwt.decode(token, settings.JWT_REFRESH_SECRET, algorithms=["HS256"])

    assert "roles" not in claims
    assert claims["exp"] - claims["iat"] == settings.JWT_REFRESH_EXPIRATION_MS // 1000
    assert tokens.extract_subject(token, TokenKind.REFRESH) == EMAIL


def test_refresh_token_is_not_an_access_token_when_keys_differ(tokens):
    refresh_token = tokens.issue_refresh_token(EMAIL)

    with pytest.raises(MalformedTokenError):
        tokens.extract_subject(refresh_token)
    assert tokens.is_valid(refresh_token, EMAIL) is False


def test_is_valid_checks_subject(tokens):
    token = tokens.issue_access_token(EMAIL, ["USER"])

    assert tokens.is_valid(token, EMAIL) is True
    assert tokens.is_valid(token, "other@example.com") is False


def test_token_past_expiry_is_never_valid(tokens):
    past = datetime.now(timezone.utc) - timedelta(minutes=5)
    token = _encode(
        {"sub": EMAIL, "roles": ["USER"], "typ": "access", "iat": past, "exp": past + timedelta(seconds=1)}
    )

    assert tokens.is_valid(token, EMAIL) is False
    with pytest.raises(ExpiredTokenError):
        tokens.validate_strict(token)


def test_expired_token_still_yields_subject(tokens):
    past = datetime.now(timezone.utc) - timedelta(minutes=5)
    token = _encode({"sub": EMAIL, "typ": "access", "iat": past, "exp": past + timedelta(seconds=1)})

    assert tokens.extract_subject(token) == EMAIL


def test_one_millisecond_token_expires(short_lived_tokens):
    token = short_lived_tokens.issue_access_token(EMAIL, ["USER"])
    time.sleep(0.05)

    assert short_lived_tokens.is_valid(token, EMAIL) is False


def test_tampered_signature_is_rejected(tokens):
    token = _flip_signature(tokens.issue_access_token(EMAIL, ["ADMIN"]))

    with pytest.raises(MalformedTokenError):
        tokens.extract_subject(token)
    with pytest.raises(MalformedTokenError):
        tokens.validate_strict(token)
    assert tokens.is_valid(token, EMAIL) is False


def test_garbage_is_malformed(tokens):
    with pytest.raises(MalformedTokenError):
        tokens.extract_subject("not-a-jwt")
    with pytest.raises(MalformedTokenError):
        tokens.validate_strict("not.a.jwt")
    assert tokens.is_valid("not-a-jwt", EMAIL) is False


def test_other_algorithm_is_unsupported(tokens):
    now = datetime.now(timezone.utc)
    token = _encode(
        {"sub": EMAIL, "iat": now, "exp": now + timedelta(minutes=5)},
        algorithm="HS512",
    )

    with pytest.raises(UnsupportedTokenError):
        tokens.validate_strict(token)
    assert tokens.is_valid(token, EMAIL) is False


@pytest.mark.parametrize("token", ["", "   "])
def test_empty_token_has_empty_claims(tokens, token):
    with pytest.raises(EmptyClaimsError):
        tokens.validate_strict(token)


def test_missing_subject_is_empty_claims(tokens):
    now = datetime.now(timezone.utc)
    token = _encode({"iat": now, "exp": now + timedelta(minutes=5)})

    with pytest.raises(EmptyClaimsError):
        tokens.validate_strict(token)
    with pytest.raises(MalformedTokenError):
        tokens.extract_subject(token)


def test_validate_strict_returns_claims(tokens):
    claims = tokens.validate_strict(tokens.issue_access_token(EMAIL, ["USER"]))
    assert claims["sub"] == EMAIL
    assert claims["roles"] == ["USER"]


def test_tokens_carry_their_kind(tokens):
    access = jwt.decode(tokens.issue_access_token(EMAIL, ["USER"]), settings.JWT_SECRET, algorithms=["HS256"])
    refresh = jwt.decode(tokens.issue_refresh_token(EMAIL), settings.JWT_REFRESH_SECRET, algorithms=["HS256"])

    assert access["typ"] == "access"
    assert refresh["typ"] == "refresh"


def test_refresh_token_is_not_an_access_token_with_shared_key(shared_key_tokens):
    refresh_token = shared_key_tokens.issue_refresh_token(EMAIL)

    with pytest.raises(MalformedTokenError):
        shared_key_tokens.extract_subject(refresh_token)
    with pytest.raises(MalformedTokenError):
        shared_key_tokens.validate_strict(refresh_token)
    assert shared_key_tokens.is_valid(refresh_token, EMAIL) is False


def test_access_token_is_not_a_refresh_token_with_shared_key(shared_key_tokens):
    access_token = shared_key_tokens.issue_access_token(EMAIL, ["ADMIN"])

    with pytest.raises(MalformedTokenError):
        shared_key_tokens.extract_subject(access_token, TokenKind.REFRESH)
    assert shared_key_tokens.is_valid(access_token, EMAIL, TokenKind.REFRESH) is False


def test_token_without_kind_is_rejected(tokens):
    now = datetime.now(timezone.utc)
    token = _encode({"sub": EMAIL, "roles": ["ADMIN"], "iat": now, "exp": now + timedelta(minutes=5)})

    with pytest.raises(MalformedTokenError):
        tokens.validate_strict(token)
    assert tokens.is_valid(token, EMAIL) is False
