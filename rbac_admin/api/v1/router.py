from fastapi import APIRouter

from rbac_admin.api.v1.endpoints import actions, auth, permissions, resources, roles, users

api_router = APIRouter(prefix="/api/v1")

# Public
api_router.include_router(auth.router, tags=["Auth"])

# Guarded by per-endpoint permissions
api_router.include_router(users.router, tags=["Users"])
api_router.include_router(roles.router, tags=["Roles"])
api_router.include_router(permissions.router, tags=["Permissions"])
api_router.include_router(resources.router, tags=["Resources"])
api_router.include_router(actions.router, tags=["Actions"])
