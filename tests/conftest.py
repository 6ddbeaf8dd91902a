from __future__ import annotations

import os

os.environ.setdefault("APP_ENV", "test")

from decimal import Decimal  # noqa: E402

import httpx  # noqa: E402
import pytest  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from ledgerdesk.core.config import settings  # noqa: E402
from ledgerdesk.db import session as db_session_module  # noqa: E402
from ledgerdesk.db.base_class import Base  # noqa: E402
from ledgerdesk.db.session import SessionLocal  # noqa: E402
from ledgerdesk.models import models  # noqa: E402
from ledgerdesk.services import ecb_rates  # noqa: E402

TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")

test_engine = create_engine(
    TEST_DATABASE_URL,
    future=True,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

# Ensure application code uses the test engine
settings.ENV = "test"  # type: ignore[attr-defined]
db_session_module.engine = test_engine  # type: ignore[assignment]
SessionLocal.configure(bind=test_engine)

@pytest.fixture(autouse=True)
def _reset_database_state():
    """Ensure each test sees a fresh database schema."""
    Base.metadata.drop_all(bind=test_engine)
    Base.metadata.create_all(bind=test_engine)
    yield

@pytest.fixture(autouse=True)
def _block_outbound_http(monkeypatch):
    """No test may reach the network; tests that need FX data patch httpx.get themselves."""

    def refuse(url, *args, **kwargs):
        raise httpx.ConnectError("network disabled in tests", request=httpx.Request("GET", url))

    monkeypatch.setattr(httpx, "get", refuse)
    ecb_rates.clear_cache()
    yield
    ecb_rates.clear_cache()

@pytest.fixture
def db_session():
    """Provide a database session for tests."""
    session = SessionLocal()
    try:
        yield session
        session.commit()
    finally:
        session.close()

@pytest.fixture
def base_currency_usd(db_session):
    row = models.AppSettings(
        base_currency="USD",
        default_tax_percentage=Decimal("0"),
        default_quote_expiry_days=30,
        default_invoice_payment_terms_days=30,
    )
    db_session.add(row)
    db_session.commit()
    return row

@pytest.fixture
def customer(db_session):
    row = models.Customer(
        public_customer_id="234AB",
        company_contact_name="Acme Ltd",
        email="billing@acme.example.com",
        preferred_currency="USD",
    )
    db_session.add(row)
    db_session.commit()
    return row

# FastAPI TestClient fixture
from fastapi.testclient import TestClient  # noqa: E402
from ledgerdesk.api.main import app  # noqa: E402

@pytest.fixture
def client():  # noqa: D401 - simple factory fixture
    """Provide a FastAPI TestClient bound to the application."""
    return TestClient(app)
