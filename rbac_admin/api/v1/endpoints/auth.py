from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from rbac_admin.api.v1.endpoints.users import user_to_dict
from rbac_admin.core.auth import get_current_user, get_token_service
from rbac_admin.core.database import get_db
from rbac_admin.core.tokens import TokenService
from rbac_admin.models.user import User
from rbac_admin.schemas.auth import (
    JwtResponse,
    LoginRequest,
    LoginResponse,
    RefreshTokenRequest,
    RefreshTokenResponse,
    SignupRequest,
)
from rbac_admin.schemas.common import ApiResponse
from rbac_admin.schemas.user import UserResponse
from rbac_admin.services import auth_flow

router = APIRouter()


@router.post(
    "/auth/signup",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user with the default role",
)
def signup(body: SignupRequest, db: Session = Depends(get_db)) -> dict:
    user = auth_flow.signup(db, body.full_name, body.email, body.password)
    return user_to_dict(user)


@router.post(
    "/auth/login",
    response_model=LoginResponse,
    summary="Login and obtain an access/refresh token pair",
)
def login(
    body: LoginRequest,
    db: Session = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
) -> dict:
    result = auth_flow.login(db, tokens, body.email, body.password)
    return {
        "token": result.access_token,
        "refresh_token": result.refresh_token,
        "expires_in": result.expires_in,
    }


@router.post(
    "/auth/signin",
    response_model=JwtResponse,
    summary="Login and obtain tokens with the user's profile",
)
def signin(
    body: LoginRequest,
    db: Session = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
) -> dict:
    result = auth_flow.login(db, tokens, body.email, body.password)
    user = result.user
    return {
        "token": result.access_token,
        "refresh_token": result.refresh_token,
        "type": "Bearer",
        "id": user.id,
        "full_name": user.full_name,
        "email": user.email,
        "role": user.role.name,
    }


@router.post(
    "/auth/refresh",
    response_model=RefreshTokenResponse,
    summary="Exchange a refresh token for a new access token",
)
def refresh(
    body: RefreshTokenRequest,
    db: Session = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
) -> dict:
    result = auth_flow.refresh(db, tokens, body.refresh_token)
    return {"access_token": result.access_token, "expires_in": result.expires_in}


@router.post("/auth/signout", response_model=ApiResponse, summary="Sign out")
def signout() -> ApiResponse:
    # Tokens are stateless; the client discards them
    return ApiResponse.ok("Logged out successfully")


@router.get(
    "/auth/me",
    response_model=UserResponse,
    summary="Get current authenticated user",
)
def get_me(current_user: User = Depends(get_current_user)) -> dict:
    return user_to_dict(current_user)
