"""
Typed errors raised by the services and rendered by the API as
``{"success": false, "message": ...}``.
"""

from fastapi import status


class RbacError(Exception):
    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(RbacError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(RbacError):
    status_code = status.HTTP_409_CONFLICT


class AlreadyExistsError(ConflictError):
    pass


class RoleInUseError(ConflictError):
    pass


class InvalidCredentialsError(RbacError):
    status_code = status.HTTP_401_UNAUTHORIZED


class PermissionDeniedError(RbacError):
    status_code = status.HTTP_403_FORBIDDEN


class ConfigurationError(RbacError):
    """Required seed data is missing. Deployment defect, never retried."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


# ── Token verification ─────────────────────────────────────────────────────

class TokenError(RbacError):
    status_code = status.HTTP_401_UNAUTHORIZED


class MalformedTokenError(TokenError):
    pass


class ExpiredTokenError(TokenError):
    pass


class UnsupportedTokenError(TokenError):
    pass


class EmptyClaimsError(TokenError):
    pass
