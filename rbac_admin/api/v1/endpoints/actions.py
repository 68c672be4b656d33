import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from rbac_admin.core.auth import require_permission
from rbac_admin.core.database import get_db
from rbac_admin.schemas.common import ApiResponse
from rbac_admin.schemas.action import ActionCreate, ActionResponse, ActionUpdate
from rbac_admin.services import catalog

router = APIRouter()


@router.get(
    "/actions",
    response_model=list[ActionResponse],
    dependencies=[Depends(require_permission("ACTION", "LIST"))],
    summary="List actions",
)
def list_actions(db: Session = Depends(get_db)) -> list:
    return catalog.list_actions(db)


@router.get(
    "/actions/{action_id}",
    response_model=ActionResponse,
    dependencies=[Depends(require_permission("ACTION", "READ"))],
    summary="Get action details",
)
def get_action(action_id: uuid.UUID, db: Session = Depends(get_db)):
    return catalog.get_action(db, action_id)


@router.post(
    "/actions",
    response_model=ActionResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_permission("ACTION", "CREATE"))],
    summary="Create an action",
)
def create_action(body: ActionCreate, db: Session = Depends(get_db)):
    return catalog.create_action(db, body.name, body.description)


@router.put(
    "/actions/{action_id}",
    response_model=ActionResponse,
    dependencies=[Depends(require_permission("ACTION", "UPDATE"))],
    summary="Update an action",
)
def update_action(action_id: uuid.UUID, body: ActionUpdate, db: Session = Depends(get_db)):
    return catalog.update_action(db, action_id, name=body.name, description=body.description)


@router.delete(
    "/actions/{action_id}",
    response_model=ApiResponse,
    dependencies=[Depends(require_permission("ACTION", "DELETE"))],
    summary="Delete an action and its permissions",
)
def delete_action(action_id: uuid.UUID, db: Session = Depends(get_db)) -> ApiResponse:
    catalog.delete_action(db, action_id)
    return ApiResponse.ok("Action deleted successfully")
