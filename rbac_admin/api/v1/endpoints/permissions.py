import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from rbac_admin.core.auth import require_permission
from rbac_admin.core.database import get_db
from rbac_admin.models.permission import Permission
from rbac_admin.schemas.common import ApiResponse
from rbac_admin.schemas.permission import PermissionCreate, PermissionResponse, PermissionUpdate
from rbac_admin.services import catalog

router = APIRouter()


def permission_to_dict(permission: Permission) -> dict:
    return {
        "id": permission.id,
        "name": permission.name,
        "resource_name": permission.resource.name,
        "action_name": permission.action.name,
        "description": permission.description,
        "created_at": permission.created_at,
    }


@router.get(
    "/permissions",
    response_model=list[PermissionResponse],
    dependencies=[Depends(require_permission("PERMISSION", "LIST"))],
    summary="List permissions",
)
def list_permissions(db: Session = Depends(get_db)) -> list[dict]:
    return [permission_to_dict(p) for p in catalog.list_permissions(db)]


@router.get(
    "/permissions/{permission_id}",
    response_model=PermissionResponse,
    dependencies=[Depends(require_permission("PERMISSION", "READ"))],
    summary="Get permission details",
)
def get_permission(permission_id: uuid.UUID, db: Session = Depends(get_db)) -> dict:
    return permission_to_dict(catalog.get_permission(db, permission_id))


@router.post(
    "/permissions",
    response_model=PermissionResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_permission("PERMISSION", "CREATE"))],
    summary="Create a permission for a resource/action pair",
)
def create_permission(body: PermissionCreate, db: Session = Depends(get_db)) -> dict:
    permission = catalog.create_permission(
        db, body.resource_name, body.action_name, body.description
    )
    return permission_to_dict(permission)


@router.put(
    "/permissions/{permission_id}",
    response_model=PermissionResponse,
    dependencies=[Depends(require_permission("PERMISSION", "UPDATE"))],
    summary="Update a permission's description",
)
def update_permission(
    permission_id: uuid.UUID,
    body: PermissionUpdate,
    db: Session = Depends(get_db),
) -> dict:
    permission = catalog.update_permission_description(db, permission_id, body.description)
    return permission_to_dict(permission)


@router.delete(
    "/permissions/{permission_id}",
    response_model=ApiResponse,
    dependencies=[Depends(require_permission("PERMISSION", "DELETE"))],
    summary="Delete a permission",
)
def delete_permission(permission_id: uuid.UUID, db: Session = Depends(get_db)) -> ApiResponse:
    catalog.delete_permission(db, permission_id)
    return ApiResponse.ok("Permission deleted successfully")
