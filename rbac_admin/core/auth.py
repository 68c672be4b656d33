"""
FastAPI dependencies for bearer-token authentication and permission checks.

Each request resolves the caller's permission set once; endpoints then ask
for the (resource, action) pair they need instead of matching role names.
"""
from dataclasses import dataclass

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from rbac_admin.core.database import get_db
from rbac_admin.core.exceptions import InvalidCredentialsError, PermissionDeniedError
from rbac_admin.core.tokens import TokenService
from rbac_admin.models.user import User
from rbac_admin.services import identity_store as store
from rbac_admin.services.roles import effective_permissions_of, permission_keys

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Principal:
    user: User
    permissions: frozenset[tuple[str, str]]

    def can(self, resource: str, action: str) -> bool:
        return (resource, action) in self.permissions


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_current_principal(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: Session = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
) -> Principal:
    """Validates the access token and resolves the caller's permissions."""
    if not credentials:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")

    token = credentials.credentials
    subject = tokens.extract_subject(token)
    user = store.find_user_by_email(db, subject)
    if user is None:
        raise InvalidCredentialsError("User not found")

    if not tokens.is_valid(token, user.email):
        # Re-check strictly so the failure kind is logged and reported
        tokens.validate_strict(token)
        raise InvalidCredentialsError("Invalid token")

    return Principal(user=user, permissions=permission_keys(effective_permissions_of(user)))


def get_current_user(principal: Principal = Depends(get_current_principal)) -> User:
    return principal.user


def require_permission(resource: str, action: str):
    """
    Returns a FastAPI dependency that checks the caller holds ``resource:action``.

    Usage:
        @router.get("/...", dependencies=[Depends(require_permission("USER", "LIST"))])
    """

    def _checker(principal: Principal = Depends(get_current_principal)) -> Principal:
        if not principal.can(resource, action):
            raise PermissionDeniedError(f"Missing permission: {resource}:{action}")
        return principal

    return _checker
