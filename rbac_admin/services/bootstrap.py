"""
Idempotent seeding of the default roles, catalog, grants and admin account.
"""
import logging

from sqlalchemy.orm import Session

from rbac_admin.core.security import hash_password
from rbac_admin.models import Permission, Role, RoleName, User
from rbac_admin.services import catalog
from rbac_admin.services import identity_store as store
from rbac_admin.services import roles as role_service

logger = logging.getLogger(__name__)

ROLE_DESCRIPTIONS: dict[RoleName, str] = {
    RoleName.ADMIN: "Administrator with full access",
    RoleName.MODERATOR: "Moderator with limited administrative access",
    RoleName.USER: "Regular user with basic access",
}

DEFAULT_RESOURCES: dict[str, str] = {
    "USER": "User management resource",
    "ROLE": "Role management resource",
    "PERMISSION": "Permission management resource",
    "RESOURCE": "Resource management resource",
    "ACTION": "Action management resource",
}

DEFAULT_ACTIONS: dict[str, str] = {
    "CREATE": "Create operation",
    "READ": "Read operation",
    "UPDATE": "Update operation",
    "DELETE": "Delete operation",
    "LIST": "List all operation",
}

READ_ACTIONS = {"READ", "LIST"}


def seed_roles(db: Session) -> dict[RoleName, Role]:
    seeded: dict[RoleName, Role] = {}
    for name, description in ROLE_DESCRIPTIONS.items():
        role = store.find_role_by_name(db, name)
        if role is None:
            role = role_service.create_role(db, name, description)
        seeded[name] = role
    return seeded


def seed_catalog(db: Session) -> list[Permission]:
    for name, description in DEFAULT_RESOURCES.items():
        if not store.find_resource_by_name(db, name):
            catalog.create_resource(db, name, description)
    for name, description in DEFAULT_ACTIONS.items():
        if not store.find_action_by_name(db, name):
            catalog.create_action(db, name, description)

    permissions: list[Permission] = []
    for resource_name in DEFAULT_RESOURCES:
        resource = store.find_resource_by_name(db, resource_name)
        for action_name in DEFAULT_ACTIONS:
            action = store.find_action_by_name(db, action_name)
            permission = store.find_permission_by_resource_and_action(db, resource, action)
            if permission is None:
                permission = catalog.create_permission(
                    db, resource_name, action_name,
                    f"{resource_name}:{action_name} permission",
                )
            permissions.append(permission)
    return permissions


def default_grants(role_name: RoleName, permission: Permission) -> bool:
    if role_name is RoleName.ADMIN:
        return True
    if role_name is RoleName.MODERATOR:
        return permission.action.name in READ_ACTIONS
    return permission.resource.name == "USER" and permission.action.name in READ_ACTIONS


def seed_grants(db: Session, roles: dict[RoleName, Role], permissions: list[Permission]) -> None:
    for role_name, role in roles.items():
        for permission in permissions:
            if default_grants(role_name, permission):
                role_service.assign_permission_to_role(db, role.id, permission.id)


def seed_admin(db: Session, email: str, password: str, full_name: str) -> User:
    existing = store.find_user_by_email(db, email)
    if existing:
        return existing

    admin_role = store.find_role_by_name(db, RoleName.ADMIN)
    user = User(
        full_name=full_name,
        email=email,
        password_hash=hash_password(password),
        role=admin_role,
    )
    user = store.save_user(db, user)
    logger.info("Created admin user %s", email)
    return user


def seed_all(db: Session, admin_email: str, admin_password: str, admin_full_name: str) -> None:
    roles = seed_roles(db)
    seed_admin(db, admin_email, admin_password, admin_full_name)
    permissions = seed_catalog(db)
    seed_grants(db, roles, permissions)
    logger.info("Seed complete: %d roles, %d permissions", len(roles), len(permissions))
