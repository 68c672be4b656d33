import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from rbac_admin.core.auth import require_permission
from rbac_admin.core.database import get_db
from rbac_admin.schemas.common import ApiResponse
from rbac_admin.schemas.resource import ResourceCreate, ResourceResponse, ResourceUpdate
from rbac_admin.services import catalog

router = APIRouter()


@router.get(
    "/resources",
    response_model=list[ResourceResponse],
    dependencies=[Depends(require_permission("RESOURCE", "LIST"))],
    summary="List resources",
)
def list_resources(db: Session = Depends(get_db)) -> list:
    return catalog.list_resources(db)


@router.get(
    "/resources/{resource_id}",
    response_model=ResourceResponse,
    dependencies=[Depends(require_permission("RESOURCE", "READ"))],
    summary="Get resource details",
)
def get_resource(resource_id: uuid.UUID, db: Session = Depends(get_db)):
    return catalog.get_resource(db, resource_id)


@router.post(
    "/resources",
    response_model=ResourceResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_permission("RESOURCE", "CREATE"))],
    summary="Create a resource",
)
def create_resource(body: ResourceCreate, db: Session = Depends(get_db)):
    return catalog.create_resource(db, body.name, body.description)


@router.put(
    "/resources/{resource_id}",
    response_model=ResourceResponse,
    dependencies=[Depends(require_permission("RESOURCE", "UPDATE"))],
    summary="Update a resource",
)
def update_resource(resource_id: uuid.UUID, body: ResourceUpdate, db: Session = Depends(get_db)):
    return catalog.update_resource(db, resource_id, name=body.name, description=body.description)


@router.delete(
    "/resources/{resource_id}",
    response_model=ApiResponse,
    dependencies=[Depends(require_permission("RESOURCE", "DELETE"))],
    summary="Delete a resource and its permissions",
)
def delete_resource(resource_id: uuid.UUID, db: Session = Depends(get_db)) -> ApiResponse:
    catalog.delete_resource(db, resource_id)
    return ApiResponse.ok("Resource deleted successfully")
