"""
Seed script for the demo user and its default categories.
"""

import logging
from typing import Optional

from ledger.config import Settings, configure_logging, settings as default_settings
from ledger.database import (
    Base,
    SessionFactory,
    SessionLocal,
    UnitOfWork,
    ensure_sqlite_directory,
)
from ledger.models import Category, EntryType, User

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES = [
    ("Salary", EntryType.income),
    ("Other Income", EntryType.income),
    ("Housing", EntryType.expense),
    ("Utilities", EntryType.expense),
    ("Groceries", EntryType.expense),
    ("Restaurants", EntryType.expense),
    ("Transportation", EntryType.expense),
    ("Healthcare", EntryType.expense),
    ("Entertainment", EntryType.expense),
    ("Other", EntryType.expense),
]

# Placeholder; the demo user never logs in through this service
DEMO_PASSWORD_HASH = "!"


def seed_demo_data(session_factory: Optional[SessionFactory] = None,
                   config: Optional[Settings] = None) -> int:
    """
    Create the demo user and its default categories. Returns the number of
    categories created; an already seeded user is left untouched.
    """
    config = config or default_settings

    with UnitOfWork.start(session_factory or SessionLocal) as uow:
        db = uow.session
        user = db.query(User).filter(User.id == config.demo_user_id).first()
        if not user:
            user = User(
                id=config.demo_user_id,
                email=config.demo_user_email,
                password_hash=DEMO_PASSWORD_HASH,
            )
            db.add(user)
            db.flush()

        existing_count = db.query(Category).filter(Category.user_id == user.id).count()
        if existing_count > 0:
            logger.info(f"Categories already seeded ({existing_count} categories exist)")
            return 0

        for name, entry_type in DEFAULT_CATEGORIES:
            db.add(Category(user_id=user.id, name=name, type=entry_type))

        logger.info(f"Seeded {len(DEFAULT_CATEGORIES)} categories for user {user.id}")
        return len(DEFAULT_CATEGORIES)


if __name__ == "__main__":
    from ledger.database import engine

    configure_logging(default_settings.log_level)
    ensure_sqlite_directory(default_settings.database_url)
    Base.metadata.create_all(bind=engine)
    seed_demo_data()
