import enum
import uuid
from datetime import datetime

from sqlalchemy import DateTime, Enum, String, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rbac_admin.core.database import Base
from rbac_admin.models.permission import role_permissions


class RoleName(str, enum.Enum):
    ADMIN = "ADMIN"
    MODERATOR = "MODERATOR"
    USER = "USER"


DEFAULT_ROLE = RoleName.USER


class Role(Base):
    __tablename__ = "roles"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[RoleName] = mapped_column(
        Enum(RoleName, native_enum=False, length=20), unique=True, nullable=False
    )
    description: Mapped[str | None] = mapped_column(String(500), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    permissions: Mapped[set["Permission"]] = relationship(  # noqa: F821
        secondary=role_permissions, back_populates="roles", collection_class=set
    )
    users: Mapped[list["User"]] = relationship(back_populates="role")  # noqa: F821
