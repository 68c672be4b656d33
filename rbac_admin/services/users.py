import logging
import uuid

from sqlalchemy.orm import Session

from rbac_admin.core.exceptions import AlreadyExistsError, NotFoundError
from rbac_admin.core.security import hash_password
from rbac_admin.models import RoleName, User
from rbac_admin.services import identity_store as store
from rbac_admin.services.roles import get_role_by_name

logger = logging.getLogger(__name__)


def list_users(db: Session) -> list[User]:
    return db.query(User).order_by(User.created_at).all()


def get_user(db: Session, user_id: uuid.UUID) -> User:
    user = store.find_user_by_id(db, user_id)
    if not user:
        raise NotFoundError(f"User not found with id: {user_id}")
    return user


def get_user_by_email(db: Session, email: str) -> User:
    user = store.find_user_by_email(db, email)
    if not user:
        raise NotFoundError(f"User not found with email: {email}")
    return user


def create_user(
    db: Session,
    full_name: str,
    email: str,
    password: str,
    role_name: RoleName,
) -> User:
    role = get_role_by_name(db, role_name)
    if store.exists_user_by_email(db, email):
        raise AlreadyExistsError("Email is already in use")

    user = User(
        full_name=full_name,
        email=email,
        password_hash=hash_password(password),
        role=role,
    )
    user = store.save_user(db, user)
    logger.info("User %s created with role '%s'", user.id, role.name.value)
    return user


def update_user(
    db: Session,
    user_id: uuid.UUID,
    full_name: str | None = None,
    email: str | None = None,
    password: str | None = None,
    role_name: RoleName | None = None,
) -> User:
    user = get_user(db, user_id)

    if full_name is not None:
        user.full_name = full_name
    if email is not None and email != user.email:
        if store.exists_user_by_email(db, email):
            raise AlreadyExistsError("Email is already in use")
        user.email = email
    if password is not None:
        user.password_hash = hash_password(password)
    if role_name is not None:
        user.role = get_role_by_name(db, role_name)

    return store.save_user(db, user)


def delete_user(db: Session, user_id: uuid.UUID) -> None:
    user = get_user(db, user_id)
    store.delete(db, user)
    logger.info("User %s deleted", user_id)
