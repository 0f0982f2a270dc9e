"""Shared test fixtures."""

import os

# Keep the application engine off the local data directory
os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient
from datetime import date
from decimal import Decimal
import uuid

from app.database import Base
from app.dependencies import get_db, get_current_user_id
from app.main import app
from app.models.account import BankAccount, AccountType
from app.models.credit_card import CreditCard, CreditCardBalance
from app.models.currency import Currency
from app.models.recurring import RecurringTransaction, Frequency
from app.models.transaction import TransactionType

USER_ID = "user-1"
OTHER_USER_ID = "user-2"


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh database for each test using in-memory SQLite."""
    # Use StaticPool to ensure all connections use the same in-memory database
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # Create all tables
    Base.metadata.create_all(bind=engine)

    # Create session
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture(scope="function")
def client(db_session):
    """Create a test client with database and identity overrides."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_current_user_id] = lambda: USER_ID
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def sample_account(db_session):
    """Create a checking account with a 1000.00 USD balance."""
    account = BankAccount(
        id=str(uuid.uuid4()),
        user_id=USER_ID,
        name="Test Checking",
        bank_name="First Bank",
        account_type=AccountType.checking,
        currency=Currency.USD,
        balance=Decimal("1000.00"),
        is_active=True
    )
    db_session.add(account)
    db_session.commit()
    db_session.refresh(account)
    return account


@pytest.fixture
def other_account(db_session):
    """Create a savings account with a 500.00 USD balance."""
    account = BankAccount(
        id=str(uuid.uuid4()),
        user_id=USER_ID,
        name="Rainy Day",
        bank_name="First Bank",
        account_type=AccountType.savings,
        currency=Currency.USD,
        balance=Decimal("500.00"),
        is_active=True
    )
    db_session.add(account)
    db_session.commit()
    db_session.refresh(account)
    return account


@pytest.fixture
def foreign_account(db_session):
    """Create an account owned by a different user."""
    account = BankAccount(
        id=str(uuid.uuid4()),
        user_id=OTHER_USER_ID,
        name="Not Mine",
        bank_name="Other Bank",
        account_type=AccountType.checking,
        currency=Currency.USD,
        balance=Decimal("300.00"),
        is_active=True
    )
    db_session.add(account)
    db_session.commit()
    db_session.refresh(account)
    return account


@pytest.fixture
def sample_card(db_session):
    """Create a card with USD debt of 200.00 and MXN debt of 1500.00."""
    card = CreditCard(
        id=str(uuid.uuid4()),
        user_id=USER_ID,
        name="Travel Card",
        bank_name="Card Bank",
        cut_off_day=20,
        payment_due_day=10,
        is_active=True,
        balances=[
            CreditCardBalance(currency=Currency.USD, credit_limit=Decimal("5000.00"), balance=Decimal("200.00")),
            CreditCardBalance(currency=Currency.MXN, credit_limit=Decimal("40000.00"), balance=Decimal("1500.00")),
        ],
    )
    db_session.add(card)
    db_session.commit()
    db_session.refresh(card)
    return card


@pytest.fixture
def second_card(db_session):
    """Create a card with only a USD balance."""
    card = CreditCard(
        id=str(uuid.uuid4()),
        user_id=USER_ID,
        name="Grocery Card",
        bank_name="Card Bank",
        cut_off_day=5,
        payment_due_day=25,
        is_active=True,
        balances=[
            CreditCardBalance(currency=Currency.USD, credit_limit=Decimal("1000.00"), balance=Decimal("0.00")),
        ],
    )
    db_session.add(card)
    db_session.commit()
    db_session.refresh(card)
    return card


@pytest.fixture
def sample_recurring(db_session, sample_account):
    """Create a monthly rent expense that has never been generated."""
    recurring = RecurringTransaction(
        id=str(uuid.uuid4()),
        user_id=USER_ID,
        type=TransactionType.expense,
        amount=Decimal("100.00"),
        currency=Currency.USD,
        category="Housing",
        description="Rent",
        bank_account_id=sample_account.id,
        frequency=Frequency.monthly,
        start_date=date(2026, 1, 31),
        next_due_date=date(2026, 1, 31),
        is_active=True
    )
    db_session.add(recurring)
    db_session.commit()
    db_session.refresh(recurring)
    return recurring


@pytest.fixture
def account_balance(db_session):
    """Read an account balance straight from the database."""
    def read(account_id: str) -> Decimal:
        db_session.expire_all()
        return db_session.get(BankAccount, account_id).balance
    return read


@pytest.fixture
def card_balance(db_session):
    """Read a card's balance in one currency, or None if the row is missing."""
    def read(card_id: str, currency: Currency):
        db_session.expire_all()
        row = db_session.query(CreditCardBalance).filter(
            CreditCardBalance.credit_card_id == card_id,
            CreditCardBalance.currency == currency
        ).first()
        return row.balance if row else None
    return read
