import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from rbac_admin.api.v1.endpoints.permissions import permission_to_dict
from rbac_admin.core.auth import require_permission
from rbac_admin.core.database import get_db
from rbac_admin.models.role import Role
from rbac_admin.schemas.common import ApiResponse
from rbac_admin.schemas.role import RoleCreate, RoleResponse, RoleUpdate
from rbac_admin.services import identity_store as store
from rbac_admin.services import roles as role_service

router = APIRouter()


def _role_to_dict(db: Session, role: Role) -> dict:
    return {
        "id": role.id,
        "name": role.name,
        "description": role.description,
        "permissions": sorted(
            (permission_to_dict(p) for p in role.permissions), key=lambda p: p["name"]
        ),
        "total_users": store.count_users_with_role(db, role.id),
        "created_at": role.created_at,
    }


@router.get(
    "/roles",
    response_model=list[RoleResponse],
    dependencies=[Depends(require_permission("ROLE", "LIST"))],
    summary="List roles",
)
def list_roles(db: Session = Depends(get_db)) -> list[dict]:
    return [_role_to_dict(db, role) for role in role_service.list_roles(db)]


@router.get(
    "/roles/{role_id}",
    response_model=RoleResponse,
    dependencies=[Depends(require_permission("ROLE", "READ"))],
    summary="Get role details",
)
def get_role(role_id: uuid.UUID, db: Session = Depends(get_db)) -> dict:
    return _role_to_dict(db, role_service.get_role(db, role_id))


@router.post(
    "/roles",
    response_model=RoleResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_permission("ROLE", "CREATE"))],
    summary="Create a role",
)
def create_role(body: RoleCreate, db: Session = Depends(get_db)) -> dict:
    role = role_service.create_role(db, body.name, body.description)
    return _role_to_dict(db, role)


@router.put(
    "/roles/{role_id}",
    response_model=RoleResponse,
    dependencies=[Depends(require_permission("ROLE", "UPDATE"))],
    summary="Update a role",
)
def update_role(role_id: uuid.UUID, body: RoleUpdate, db: Session = Depends(get_db)) -> dict:
    role = role_service.update_role(db, role_id, name=body.name, description=body.description)
    return _role_to_dict(db, role)


@router.delete(
    "/roles/{role_id}",
    response_model=ApiResponse,
    dependencies=[Depends(require_permission("ROLE", "DELETE"))],
    summary="Delete a role no user is assigned to",
)
def delete_role(role_id: uuid.UUID, db: Session = Depends(get_db)) -> ApiResponse:
    role_service.delete_role(db, role_id)
    return ApiResponse.ok("Role deleted successfully")


@router.post(
    "/roles/{role_id}/permissions/{permission_id}",
    response_model=RoleResponse,
    dependencies=[Depends(require_permission("ROLE", "UPDATE"))],
    summary="Assign a permission to a role",
)
def assign_permission(
    role_id: uuid.UUID,
    permission_id: uuid.UUID,
    db: Session = Depends(get_db),
) -> dict:
    role = role_service.assign_permission_to_role(db, role_id, permission_id)
    return _role_to_dict(db, role)


@router.delete(
    "/roles/{role_id}/permissions/{permission_id}",
    response_model=RoleResponse,
    dependencies=[Depends(require_permission("ROLE", "UPDATE"))],
    summary="Revoke a permission from a role",
)
def revoke_permission(
    role_id: uuid.UUID,
    permission_id: uuid.UUID,
    db: Session = Depends(get_db),
) -> dict:
    role = role_service.revoke_permission_from_role(db, role_id, permission_id)
    return _role_to_dict(db, role)
