"""
Lookup-by-unique-key and save operations over the relational store.

Uniqueness violations raised by the database surface as ``AlreadyExistsError``
so concurrent creates racing past a service-level check still get a typed error.
"""
import logging
import uuid

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from rbac_admin.core.database import Base
from rbac_admin.core.exceptions import AlreadyExistsError
from rbac_admin.models import Action, Permission, Resource, Role, RoleName, User

logger = logging.getLogger(__name__)


def save(db: Session, entity: Base, label: str) -> Base:
    db.add(entity)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        logger.info("Constraint violation while saving %s: %s", label, exc.orig)
        raise AlreadyExistsError(f"{label} already exists") from exc
    db.refresh(entity)
    return entity


def delete(db: Session, entity: Base) -> None:
    db.delete(entity)
    db.commit()


# ── Users ──────────────────────────────────────────────────────────────────

def find_user_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == email).first()


def find_user_by_id(db: Session, user_id: uuid.UUID) -> User | None:
    return db.get(User, user_id)


def exists_user_by_email(db: Session, email: str) -> bool:
    return db.query(User.id).filter(User.email == email).first() is not None


def save_user(db: Session, user: User) -> User:
    return save(db, user, "User")


# ── Roles ──────────────────────────────────────────────────────────────────

def find_role_by_name(db: Session, name: RoleName) -> Role | None:
    return db.query(Role).filter(Role.name == name).first()


def find_role_by_id(db: Session, role_id: uuid.UUID) -> Role | None:
    return db.get(Role, role_id)


def save_role(db: Session, role: Role) -> Role:
    return save(db, role, "Role")


def count_users_with_role(db: Session, role_id: uuid.UUID) -> int:
    return db.query(User).filter(User.role_id == role_id).count()


# ── Resources / actions / permissions ─────────────────────────────────────

def find_resource_by_name(db: Session, name: str) -> Resource | None:
    return db.query(Resource).filter(Resource.name == name).first()


def find_action_by_name(db: Session, name: str) -> Action | None:
    return db.query(Action).filter(Action.name == name).first()


def find_permission_by_resource_and_action(
    db: Session, resource: Resource, action: Action
) -> Permission | None:
    return (
        db.query(Permission)
        .filter(Permission.resource_id == resource.id, Permission.action_id == action.id)
        .first()
    )


def find_permission_by_id(db: Session, permission_id: uuid.UUID) -> Permission | None:
    return db.get(Permission, permission_id)
