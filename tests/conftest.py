"""Pytest fixtures for testing"""

from datetime import datetime
from typing import Generator
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from expense_tracker.database import get_session, import_models
from expense_tracker.main import create_app
from expense_tracker.models.category import Category, CategoryType
from expense_tracker.models.enums import TransactionKind
from expense_tracker.models.financial_user import FinancialUser
from expense_tracker.models.transaction import Transaction
from expense_tracker.models.user import User
from expense_tracker.store import RecordStore


@pytest.fixture
def engine():
    """In-memory SQLite engine shared by every session of one test"""
    import_models()
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def session(engine) -> Generator[Session, None, None]:
    with Session(engine) as session:
        yield session


@pytest.fixture
def account(session: Session) -> User:
    user = User(email="owner@example.com", hashed_password="not-a-real-hash")
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


@pytest.fixture
def store(session: Session, account: User) -> RecordStore:
    return RecordStore(session, account.id)


@pytest.fixture
def financial_user(store: RecordStore) -> FinancialUser:
    financial_user = store.create(FinancialUser, name="Rahim")
    store.commit()
    return financial_user


@pytest.fixture
def expense_category(store: RecordStore) -> Category:
    category = store.create(Category, name="Food", type=CategoryType.expense)
    store.commit()
    return category


@pytest.fixture
def client(engine) -> TestClient:
    """FastAPI test client bound to the test database"""
    app = create_app()

    def override_get_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    return TestClient(app)


def register_and_login(client: TestClient, email: str, password: str = "secret123") -> dict:
    response = client.post("/auth/register", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    response = client.post("/auth/login", data={"username": email, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def auth_headers(client: TestClient) -> dict:
    return register_and_login(client, "alice@example.com")


def make_transaction(kind, amount, category_id=None, financial_user_id=None, date=None) -> Transaction:
    """Unsaved ledger transaction for pure aggregation tests"""
    return Transaction(
        account_id=uuid4(),
        voucher_id=f"V-{uuid4().hex[:8]}",
        title="test",
        amount=amount,
        kind=TransactionKind(kind),
        category_id=category_id,
        financial_user_id=financial_user_id,
        date=date or datetime(2024, 5, 15, 12, 0),
    )
