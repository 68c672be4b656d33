from pydantic import BaseModel, ConfigDict, field_validator, model_validator
from pydantic_settings import BaseSettings


class JwtConfig(BaseModel):
    """Signing material and lifetimes handed to the token service at startup."""

    model_config = ConfigDict(frozen=True)

    secret: str
    refresh_secret: str
    expiration_ms: int
    refresh_expiration_ms: int
    algorithm: str = "HS256"


class Settings(BaseSettings):
    DATABASE_URL: str = "postgresql://rbac:rbac_pass@db:5432/rbac_admin"
    ENVIRONMENT: str = "development"
    PORT: int = 8000

    # jwt.secret / jwt.expirationMs / jwt.refreshExpirationMs
    JWT_SECRET: str = "change-me-to-a-random-secret-key-of-at-least-32-bytes"
    JWT_REFRESH_SECRET: str = ""
    JWT_EXPIRATION_MS: int = 86_400_000  # 24 hours
    JWT_REFRESH_EXPIRATION_MS: int = 604_800_000  # 7 days

    BCRYPT_ROUNDS: int = 12

    # Only read by scripts/seed.py
    ADMIN_EMAIL: str = "admin@example.com"
    ADMIN_PASSWORD: str = "admin123"
    ADMIN_FULL_NAME: str = "Admin User"

    model_config = {"env_file": ".env", "extra": "ignore"}

    @field_validator("JWT_EXPIRATION_MS", "JWT_REFRESH_EXPIRATION_MS")
    @classmethod
    def positive_lifetime(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("token lifetimes must be positive")
        return value

    @field_validator("BCRYPT_ROUNDS")
    @classmethod
    def bcrypt_rounds_range(cls, value: int) -> int:
        if not 4 <= value <= 31:
            raise ValueError("BCRYPT_ROUNDS must be between 4 and 31")
        return value

    @model_validator(mode="after")
    def fix_postgres_url(self) -> "Settings":
        # Some hosts hand out postgres:// instead of postgresql://
        if self.DATABASE_URL.startswith("postgres://"):
            self.DATABASE_URL = self.DATABASE_URL.replace(
                "postgres://", "postgresql://", 1
            )
        return self

    def jwt_config(self) -> JwtConfig:
        return JwtConfig(
            secret=self.JWT_SECRET,
            refresh_secret=self.JWT_REFRESH_SECRET or self.JWT_SECRET,
            expiration_ms=self.JWT_EXPIRATION_MS,
            refresh_expiration_ms=self.JWT_REFRESH_EXPIRATION_MS,
        )


settings = Settings()
