import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from rbac_admin.core.auth import Principal, get_current_principal, require_permission
from rbac_admin.core.database import get_db
from rbac_admin.core.exceptions import PermissionDeniedError
from rbac_admin.models.user import User
from rbac_admin.schemas.common import ApiResponse
from rbac_admin.schemas.user import UserCreate, UserResponse, UserUpdate
from rbac_admin.services import roles as role_service
from rbac_admin.services import users as user_service

router = APIRouter()


def user_to_dict(user: User) -> dict:
    return {
        "id": user.id,
        "email": user.email,
        "full_name": user.full_name,
        "role_name": user.role.name,
        "role_id": user.role_id,
        "created_at": user.created_at,
        "updated_at": user.updated_at,
    }


def _require_self_or(principal: Principal, user_id: uuid.UUID, action: str) -> None:
    if principal.user.id != user_id and not principal.can("USER", action):
        raise PermissionDeniedError(f"Missing permission: USER:{action}")


@router.get(
    "/users",
    response_model=list[UserResponse],
    dependencies=[Depends(require_permission("USER", "LIST"))],
    summary="List users",
)
def list_users(db: Session = Depends(get_db)) -> list[dict]:
    return [user_to_dict(u) for u in user_service.list_users(db)]


@router.get(
    "/users/check-permission",
    response_model=ApiResponse,
    dependencies=[Depends(get_current_principal)],
    summary="Check whether a user may perform an action on a resource",
)
def check_permission(
    user_id: uuid.UUID = Query(...),
    resource_name: str = Query(...),
    action_name: str = Query(...),
    db: Session = Depends(get_db),
) -> ApiResponse:
    allowed = role_service.has_permission(db, user_id, resource_name, action_name)
    if allowed:
        message = f"User has permission to perform {action_name} on {resource_name}"
    else:
        message = f"User does not have permission to perform {action_name} on {resource_name}"
    return ApiResponse(success=allowed, message=message)


@router.get("/users/{user_id}", response_model=UserResponse, summary="Get user details")
def get_user(
    user_id: uuid.UUID,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
) -> dict:
    _require_self_or(principal, user_id, "READ")
    return user_to_dict(user_service.get_user(db, user_id))


@router.post(
    "/users",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_permission("USER", "CREATE"))],
    summary="Create a user with an explicit role",
)
def create_user(body: UserCreate, db: Session = Depends(get_db)) -> dict:
    user = user_service.create_user(db, body.full_name, body.email, body.password, body.role)
    return user_to_dict(user)


@router.put("/users/{user_id}", response_model=UserResponse, summary="Update a user")
def update_user(
    user_id: uuid.UUID,
    body: UserUpdate,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
) -> dict:
    _require_self_or(principal, user_id, "UPDATE")
    if body.role is not None and not principal.can("USER", "UPDATE"):
        raise PermissionDeniedError("Missing permission: USER:UPDATE")

    user = user_service.update_user(
        db,
        user_id,
        full_name=body.full_name,
        email=body.email,
        password=body.password,
        role_name=body.role,
    )
    return user_to_dict(user)


@router.delete(
    "/users/{user_id}",
    response_model=ApiResponse,
    dependencies=[Depends(require_permission("USER", "DELETE"))],
    summary="Delete a user",
)
def delete_user(user_id: uuid.UUID, db: Session = Depends(get_db)) -> ApiResponse:
    user_service.delete_user(db, user_id)
    return ApiResponse.ok("User deleted successfully")
