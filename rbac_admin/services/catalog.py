"""
Resources, actions and the permission catalog built from them.

A permission is the pair (resource, action); at most one exists per pair and
the pair cannot be changed after creation, only the description.
"""
import logging
import uuid

from sqlalchemy.orm import Session

from rbac_admin.core.exceptions import AlreadyExistsError, NotFoundError
from rbac_admin.models import Action, Permission, Resource
from rbac_admin.services import identity_store as store

logger = logging.getLogger(__name__)


# ── Resources ──────────────────────────────────────────────────────────────

def list_resources(db: Session) -> list[Resource]:
    return db.query(Resource).order_by(Resource.name).all()


def get_resource(db: Session, resource_id: uuid.UUID) -> Resource:
    resource = db.get(Resource, resource_id)
    if not resource:
        raise NotFoundError(f"Resource not found with id: {resource_id}")
    return resource


def get_resource_by_name(db: Session, name: str) -> Resource:
    resource = store.find_resource_by_name(db, name)
    if not resource:
        raise NotFoundError(f"Resource not found with name: {name}")
    return resource


def create_resource(db: Session, name: str, description: str | None = None) -> Resource:
    if store.find_resource_by_name(db, name):
        raise AlreadyExistsError(f"Resource already exists with name: {name}")

    resource = store.save(db, Resource(name=name, description=description), "Resource")
    logger.info("Resource '%s' created", resource.name)
    return resource


def update_resource(
    db: Session,
    resource_id: uuid.UUID,
    name: str | None = None,
    description: str | None = None,
) -> Resource:
    resource = get_resource(db, resource_id)

    if name is not None and name != resource.name:
        if store.find_resource_by_name(db, name):
            raise AlreadyExistsError(f"Resource already exists with name: {name}")
        resource.name = name
    if description is not None:
        resource.description = description

    return store.save(db, resource, "Resource")


def delete_resource(db: Session, resource_id: uuid.UUID) -> None:
    resource = get_resource(db, resource_id)
    name = resource.name
    store.delete(db, resource)
    logger.info("Resource '%s' deleted with its permissions", name)


# ── Actions ────────────────────────────────────────────────────────────────

def list_actions(db: Session) -> list[Action]:
    return db.query(Action).order_by(Action.name).all()


def get_action(db: Session, action_id: uuid.UUID) -> Action:
    action = db.get(Action, action_id)
    if not action:
        raise NotFoundError(f"Action not found with id: {action_id}")
    return action


def get_action_by_name(db: Session, name: str) -> Action:
    action = store.find_action_by_name(db, name)
    if not action:
        raise NotFoundError(f"Action not found with name: {name}")
    return action


def create_action(db: Session, name: str, description: str | None = None) -> Action:
    if store.find_action_by_name(db, name):
        raise AlreadyExistsError(f"Action already exists with name: {name}")

    action = store.save(db, Action(name=name, description=description), "Action")
    logger.info("Action '%s' created", action.name)
    return action


def update_action(
    db: Session,
    action_id: uuid.UUID,
    name: str | None = None,
    description: str | None = None,
) -> Action:
    action = get_action(db, action_id)

    if name is not None and name != action.name:
        if store.find_action_by_name(db, name):
            raise AlreadyExistsError(f"Action already exists with name: {name}")
        action.name = name
    if description is not None:
        action.description = description

    return store.save(db, action, "Action")


def delete_action(db: Session, action_id: uuid.UUID) -> None:
    action = get_action(db, action_id)
    name = action.name
    store.delete(db, action)
    logger.info("Action '%s' deleted with its permissions", name)


# ── Permissions ────────────────────────────────────────────────────────────

def list_permissions(db: Session) -> list[Permission]:
    return db.query(Permission).all()


def get_permission(db: Session, permission_id: uuid.UUID) -> Permission:
    permission = store.find_permission_by_id(db, permission_id)
    if not permission:
        raise NotFoundError(f"Permission not found with id: {permission_id}")
    return permission


def create_permission(
    db: Session,
    resource_name: str,
    action_name: str,
    description: str | None = None,
) -> Permission:
    resource = get_resource_by_name(db, resource_name)
    action = get_action_by_name(db, action_name)

    if store.find_permission_by_resource_and_action(db, resource, action):
        raise AlreadyExistsError(
            f"Permission already exists for resource '{resource_name}' "
            f"and action '{action_name}'"
        )

    permission = Permission(resource=resource, action=action, description=description)
    permission = store.save(db, permission, "Permission")
    logger.info("Permission '%s' created", permission.name)
    return permission


def update_permission_description(
    db: Session, permission_id: uuid.UUID, description: str | None
) -> Permission:
    permission = get_permission(db, permission_id)
    permission.description = description
    return store.save(db, permission, "Permission")


def delete_permission(db: Session, permission_id: uuid.UUID) -> None:
    """Remove the permission; roles still holding it lose it as well."""
    permission = get_permission(db, permission_id)
    name = permission.name
    store.delete(db, permission)
    logger.info("Permission '%s' deleted", name)
