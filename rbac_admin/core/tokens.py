"""
Issues and verifies the signed access/refresh tokens.

Access tokens carry ``sub`` (email), ``roles`` (bare role names), ``typ``,
``iat`` and ``exp``. Refresh tokens carry the same claims minus ``roles`` and may be
signed with their own key. Neither kind is stored server-side.
"""
import enum
import logging
from collections.abc import Iterable
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

from rbac_admin.core.config import JwtConfig
from rbac_admin.core.exceptions import (
    EmptyClaimsError,
    ExpiredTokenError,
    MalformedTokenError,
    UnsupportedTokenError,
)

logger = logging.getLogger(__name__)

REQUIRED_CLAIMS = ["sub", "iat", "exp"]


class TokenKind(str, enum.Enum):
    ACCESS = "access"
    REFRESH = "refresh"


class TokenService:
    def __init__(self, config: JwtConfig) -> None:
        self._config = config

    @property
    def access_token_lifetime_ms(self) -> int:
        return self._config.expiration_ms

    @property
    def refresh_token_lifetime_ms(self) -> int:
        return self._config.refresh_expiration_ms

    def _key(self, kind: TokenKind) -> str:
        if kind is TokenKind.REFRESH:
            return self._config.refresh_secret
        return self._config.secret

    def _encode(self, claims: dict[str, Any], lifetime_ms: int, kind: TokenKind) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            **claims,
            "typ": kind.value,
            "iat": now,
            "exp": now + timedelta(milliseconds=lifetime_ms),
        }
        return jwt.encode(payload, self._key(kind), algorithm=self._config.algorithm)

    def _decode(self, token: str, kind: TokenKind, verify_exp: bool = True) -> dict[str, Any]:
        claims = jwt.decode(
            token,
            self._key(kind),
            algorithms=[self._config.algorithm],
            options={"require": REQUIRED_CLAIMS, "verify_exp": verify_exp},
        )
        # Access and refresh tokens may share a key; the kind claim keeps them apart
        if claims.get("typ") != kind.value:
            raise jwt.InvalidTokenError(f"Expected a {kind.value} token")
        return claims

    # ── Issuance ───────────────────────────────────────────────────────────

    def issue_access_token(self, subject: str, roles: Iterable[str]) -> str:
        return self._encode(
            {"sub": subject, "roles": list(roles)},
            self._config.expiration_ms,
            TokenKind.ACCESS,
        )

    def issue_refresh_token(self, subject: str) -> str:
        return self._encode(
            {"sub": subject},
            self._config.refresh_expiration_ms,
            TokenKind.REFRESH,
        )

    # ── Verification ───────────────────────────────────────────────────────

    def extract_subject(self, token: str, kind: TokenKind = TokenKind.ACCESS) -> str:
        """Return the ``sub`` claim. Checks format and signature, not expiry."""
        try:
            claims = self._decode(token, kind, verify_exp=False)
        except jwt.InvalidTokenError as exc:
            raise MalformedTokenError("Invalid token") from exc
        return claims["sub"]

    def is_valid(
        self,
        token: str,
        expected_subject: str,
        kind: TokenKind = TokenKind.ACCESS,
    ) -> bool:
        try:
            claims = self._decode(token, kind)
        except jwt.InvalidTokenError:
            return False
        return claims["sub"] == expected_subject

    def validate_strict(self, token: str, kind: TokenKind = TokenKind.ACCESS) -> dict[str, Any]:
        """Decode ``token`` or raise an error naming the kind of failure."""
        if not token or not token.strip():
            logger.warning("JWT claims string is empty")
            raise EmptyClaimsError("Token is empty")

        try:
            claims = self._decode(token, kind)
        except jwt.ExpiredSignatureError as exc:
            logger.warning("JWT token is expired")
            raise ExpiredTokenError("Token expired") from exc
        except jwt.InvalidAlgorithmError as exc:
            logger.warning("JWT token is unsupported: %s", exc)
            raise UnsupportedTokenError("Unsupported token") from exc
        except jwt.MissingRequiredClaimError as exc:
            logger.warning("JWT claims are incomplete: %s", exc)
            raise EmptyClaimsError("Token claims are missing") from exc
        except jwt.InvalidTokenError as exc:
            logger.warning("Invalid JWT token: %s", exc)
            raise MalformedTokenError("Invalid token") from exc

        if not claims.get("sub"):
            logger.warning("JWT token has an empty subject")
            raise EmptyClaimsError("Token claims are missing")
        return claims
