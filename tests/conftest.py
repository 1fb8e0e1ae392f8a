"""Shared test fixtures."""

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient
from datetime import date
from decimal import Decimal
import uuid

from ledger.database import Base, enable_sqlite_foreign_keys, get_db
from ledger.main import app
from ledger.models import Category, EntryType, Transaction, User
from ledger.services.category_service import CategoryService
from ledger.services.transaction_service import TransactionService


@pytest.fixture(scope="function")
def engine():
    """Fresh in-memory SQLite database for each test."""
    # Use StaticPool to ensure all connections use the same in-memory database
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    event.listen(engine, "connect", enable_sqlite_foreign_keys)

    # Create all tables
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture(scope="function")
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def client(db_session):
    """Create a test client with database override."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def category_service(session_factory):
    return CategoryService(session_factory)


@pytest.fixture
def transaction_service(session_factory):
    return TransactionService(session_factory)


def make_user(db_session, email):
    user = User(id=str(uuid.uuid4()), email=email, password_hash="hashed")
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def user(db_session):
    """The user most tests act as."""
    return make_user(db_session, "alice@example.com")


@pytest.fixture
def other_user(db_session):
    """A second user, for isolation checks."""
    return make_user(db_session, "bob@example.com")


@pytest.fixture
def sample_category(db_session, user):
    """Create a sample category."""
    category = Category(
        id=str(uuid.uuid4()),
        user_id=user.id,
        name="Groceries",
        type=EntryType.expense,
    )
    db_session.add(category)
    db_session.commit()
    db_session.refresh(category)
    return category


@pytest.fixture
def sample_transaction(db_session, user, sample_category):
    """Create a sample transaction."""
    txn = Transaction(
        id=str(uuid.uuid4()),
        user_id=user.id,
        category_id=sample_category.id,
        amount=Decimal("50.00"),
        type=EntryType.expense,
        date=date(2024, 1, 15),
        description="Whole Foods",
    )
    db_session.add(txn)
    db_session.commit()
    db_session.refresh(txn)
    return txn
