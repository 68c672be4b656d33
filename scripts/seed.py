"""Seed script: creates the default roles, catalog, grants and admin account."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from rbac_admin.core.config import settings
from rbac_admin.core.database import Base, SessionLocal, engine
from rbac_admin.services.bootstrap import seed_all

import rbac_admin.models  # noqa: F401


def seed() -> None:
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        seed_all(db, settings.ADMIN_EMAIL, settings.ADMIN_PASSWORD, settings.ADMIN_FULL_NAME)
        print(f"Seed complete. Admin login: {settings.ADMIN_EMAIL}")
    finally:
        db.close()


if __name__ == "__main__":
    seed()
