import uuid

from pydantic import BaseModel, EmailStr, Field

from rbac_admin.models.role import RoleName


class SignupRequest(BaseModel):
    full_name: str = Field(min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(min_length=6)


class LoginRequest(BaseModel):
    email: str
    password: str


class LoginResponse(BaseModel):
    token: str
    refresh_token: str
    expires_in: int


class JwtResponse(BaseModel):
    token: str
    refresh_token: str
    type: str = "Bearer"
    id: uuid.UUID
    full_name: str
    email: str
    role: RoleName


class RefreshTokenRequest(BaseModel):
    refresh_token: str


class RefreshTokenResponse(BaseModel):
    access_token: str
    expires_in: int
