import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from rbac_admin.api.v1.router import api_router
from rbac_admin.core.config import settings
from rbac_admin.core.database import Base, engine
from rbac_admin.core.exceptions import ConfigurationError, RbacError
from rbac_admin.core.tokens import TokenService
from rbac_admin.schemas.common import ApiResponse

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

logger = logging.getLogger(__name__)

# Import all models so Base.metadata knows about them
import rbac_admin.models  # noqa: E402, F401

# Create any missing tables (fallback if alembic migration didn't run)
try:
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables verified/created successfully")
except Exception as e:
    logger.error("Failed to create database tables: %s", e)

app = FastAPI(
    title="RBAC Admin",
    description="Users, roles, resources, actions and permissions with JWT authentication.",
    version="1.0.0",
)

# Read-only after startup
app.state.token_service = TokenService(settings.jwt_config())

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router)


@app.exception_handler(RbacError)
async def rbac_error_handler(request: Request, exc: RbacError) -> JSONResponse:
    if isinstance(exc, ConfigurationError):
        logger.error("Configuration error on %s: %s", request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content=ApiResponse.error(exc.message).model_dump(),
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=ApiResponse.error(str(exc.detail)).model_dump(),
        headers=exc.headers,
    )


@app.get("/health", tags=["Health"])
def health_check() -> dict:
    return {"status": "ok"}
