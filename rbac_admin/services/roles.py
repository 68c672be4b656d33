"""
Role ↔ permission graph and the per-user permission resolution used for
authorization. Roles are flat: a user's effective permissions are exactly
its role's permission set.
"""
import logging
import uuid

from sqlalchemy.orm import Session

from rbac_admin.core.exceptions import AlreadyExistsError, NotFoundError, RoleInUseError
from rbac_admin.models import Permission, Role, RoleName, User
from rbac_admin.services import identity_store as store
from rbac_admin.services.catalog import get_permission

logger = logging.getLogger(__name__)


def list_roles(db: Session) -> list[Role]:
    return db.query(Role).order_by(Role.name).all()


def get_role(db: Session, role_id: uuid.UUID) -> Role:
    role = store.find_role_by_id(db, role_id)
    if not role:
        raise NotFoundError(f"Role not found with id: {role_id}")
    return role


def get_role_by_name(db: Session, name: RoleName) -> Role:
    role = store.find_role_by_name(db, name)
    if not role:
        raise NotFoundError(f"Role not found with name: {name.value}")
    return role


def create_role(db: Session, name: RoleName, description: str | None = None) -> Role:
    if store.find_role_by_name(db, name):
        raise AlreadyExistsError(f"Role already exists with name: {name.value}")

    role = store.save_role(db, Role(name=name, description=description))
    logger.info("Role '%s' created", role.name.value)
    return role


def update_role(
    db: Session,
    role_id: uuid.UUID,
    name: RoleName | None = None,
    description: str | None = None,
) -> Role:
    role = get_role(db, role_id)

    if name is not None and name != role.name:
        if store.find_role_by_name(db, name):
            raise AlreadyExistsError(f"Role already exists with name: {name.value}")
        role.name = name
    if description is not None:
        role.description = description

    return store.save_role(db, role)


def delete_role(db: Session, role_id: uuid.UUID) -> None:
    """Delete a role. Rejected while any user still references it."""
    role = get_role(db, role_id)

    user_count = store.count_users_with_role(db, role_id)
    if user_count > 0:
        raise RoleInUseError(
            f"Cannot delete role: {user_count} user(s) still assigned to it"
        )

    name = role.name.value
    store.delete(db, role)
    logger.info("Role '%s' deleted", name)


def assign_permission_to_role(db: Session, role_id: uuid.UUID, permission_id: uuid.UUID) -> Role:
    role = get_role(db, role_id)
    permission = get_permission(db, permission_id)

    if permission in role.permissions:
        return role

    role.permissions.add(permission)
    role = store.save_role(db, role)
    logger.info("Permission '%s' assigned to role '%s'", permission.name, role.name.value)
    return role


def revoke_permission_from_role(db: Session, role_id: uuid.UUID, permission_id: uuid.UUID) -> Role:
    role = get_role(db, role_id)
    permission = get_permission(db, permission_id)

    if permission not in role.permissions:
        return role

    role.permissions.discard(permission)
    role = store.save_role(db, role)
    logger.info("Permission '%s' revoked from role '%s'", permission.name, role.name.value)
    return role


# ── Authorization ──────────────────────────────────────────────────────────

def permission_keys(permissions: set[Permission]) -> frozenset[tuple[str, str]]:
    return frozenset((p.resource.name, p.action.name) for p in permissions)


def effective_permissions_of(user: User) -> set[Permission]:
    return set(user.role.permissions)


def resolve_effective_permissions(db: Session, user_id: uuid.UUID) -> set[Permission]:
    user = store.find_user_by_id(db, user_id)
    if not user:
        raise NotFoundError(f"User not found with id: {user_id}")
    return effective_permissions_of(user)


def has_permission(db: Session, user_id: uuid.UUID, resource_name: str, action_name: str) -> bool:
    """Exact, case-sensitive match of both names against the user's role."""
    permissions = resolve_effective_permissions(db, user_id)
    return (resource_name, action_name) in permission_keys(permissions)
