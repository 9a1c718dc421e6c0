"""Shared fixtures: an isolated in-memory database per test and a seeded user."""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret")

from datetime import date
from decimal import Decimal
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import settings
from app import models  # noqa: F401
from app.db.base import Base
from app.db.dependency import get_db
from app.models.account import Account
from app.models.card import Card
from app.models.category import Category
from app.models.enums import AccountType, CategoryType
from app.models.user import User
from app.utils.auth import create_access_token


@pytest.fixture(autouse=True)
def overdraft_defaults(monkeypatch):
    monkeypatch.setattr(settings, "BLOCK_OVERDRAFT_ON_TRANSFER", True)
    monkeypatch.setattr(settings, "BLOCK_OVERDRAFT_ON_EXPENSE", False)


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(bind=engine, autoflush=True, expire_on_commit=False)
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


def seed_user(db, email: str) -> SimpleNamespace:
    user = User(name=email.split("@")[0], email=email, hashed_password="not-a-real-hash")
    db.add(user)
    db.flush()

    checking = Account(user_id=user.id, name="Checking", type=AccountType.CHECKING, balance=Decimal("1000.00"))
    savings = Account(user_id=user.id, name="Savings", type=AccountType.SAVINGS, balance=Decimal("100.00"))
    db.add_all([checking, savings])
    db.flush()

    card = Card(
        user_id=user.id,
        account_id=checking.id,
        name="Visa",
        credit_limit=Decimal("5000.00"),
        closing_day=25,
        due_day=5,
    )
    groceries = Category(user_id=user.id, description="Food", type=CategoryType.EXPENSE)
    housing = Category(user_id=user.id, description="Housing", type=CategoryType.EXPENSE)
    salary = Category(user_id=user.id, description="Income", type=CategoryType.INCOME)
    db.add_all([card, groceries, housing, salary])
    db.commit()
    return SimpleNamespace(
        user=user,
        checking=checking,
        savings=savings,
        card=card,
        food=groceries,
        housing=housing,
        salary=salary,
    )


@pytest.fixture
def seed(db):
    return seed_user(db, "ana@example.com")


@pytest.fixture
def other(db, seed):
    return seed_user(db, "bruno@example.com")


@pytest.fixture
def client(session_factory):
    from main import app

    def override_get_db():
        session = session_factory()
        try:
            yield session
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    # server errors come back as responses, not raised into the test
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(seed):
    token = create_access_token({"sub": seed.user.email})
    return {"Authorization": f"Bearer {token}"}


def balance_of(db, account) -> Decimal:
    db.expire_all()
    return Decimal(str(db.get(Account, account.id).balance)).quantize(Decimal("0.01"))


def march(day: int, year: int = 2025) -> date:
    return date(year, 3, day)
