"""Pytest fixtures for testing"""

import pytest
from datetime import date
from typing import Callable, Generator
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker, Session
from strafen_gateway.api.main import create_app
from strafen_gateway.infrastructure.database.models import Base
from strafen_gateway.infrastructure.database.session import build_engine, get_db, init_db
from strafen_gateway.domain.amount import Amount
from strafen_gateway.domain.models import (
    Fine,
    FineReason,
    LatePaymentInterest,
    PayedState,
    TimePeriod,
    TimeUnit,
    Unpayed,
)


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = build_engine(TEST_DATABASE_URL)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    init_db(engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session) -> TestClient:
    """Create FastAPI test client with test database"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


@pytest.fixture
def monthly_interest() -> LatePaymentInterest:
    """1% simple interest per month, no interest free period"""
    return LatePaymentInterest(
        interest_free_period=TimePeriod(0, TimeUnit.DAY),
        interest_period=TimePeriod(1, TimeUnit.MONTH),
        interest_rate=0.01,
        compound_interest=False,
    )


@pytest.fixture
def make_fine() -> Callable[..., Fine]:
    """Factory for fines of 100.00 issued on 2021-01-15"""

    def _make_fine(
        amount: Amount = Amount(100, 0),
        fine_date: date = date(2021, 1, 15),
        payed: PayedState = Unpayed(),
        number: int = 1,
        late_payment_interest: LatePaymentInterest | None = None,
        fine_id: str = "fine_1",
    ) -> Fine:
        return Fine(
            id=fine_id,
            date=fine_date,
            reason=FineReason(reason="Late for training", amount=amount),
            payed=payed,
            number=number,
            person_id="person_1",
            late_payment_interest=late_payment_interest,
        )

    return _make_fine
