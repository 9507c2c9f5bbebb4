# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Generator, Iterator
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

import pytest
from coincurve import PrivateKey
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("SECRET_KEY", "kaspa-brawl-test-secret")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("NONCE_BACKEND", "database")
os.environ.setdefault("NONCE_SWEEP_PROBABILITY", "0")
os.environ.setdefault("MOCK_BALANCES", "true")

from kaspa_brawl.core.settings import Settings, settings
from kaspa_brawl.db.session import Base
from kaspa_brawl.db.session import get_db as app_get_session
from kaspa_brawl.main import app as fastapi_app
from kaspa_brawl.models import User
from kaspa_brawl.repositories.nonces import InMemoryNonceStore
from kaspa_brawl.services.kaspa import address_from_public_key, personal_message_hash
from kaspa_brawl.services.tokens import TokenIssuer

TEST_DB_URL = "sqlite://"
FIXED_NOW = datetime(2026, 10, 19, 12, 0, tzinfo=UTC)


@dataclass
class Wallet:
    """A throwaway Kaspa wallet for signing test nonces."""

    private_key: PrivateKey
    public_key_hex: str
    address: str

    def sign(self, message: str) -> str:
        return self.private_key.sign_schnorr(personal_message_hash(message)).hex()


def make_wallet(prefix: str = "kaspa") -> Wallet:
    private_key = PrivateKey()
    xonly = private_key.public_key_xonly.format()
    return Wallet(
        private_key=private_key,
        public_key_hex=xonly.hex(),
        address=address_from_public_key(xonly, prefix),
    )


class FakeClock:
    """Manually advanced clock returning timezone-aware UTC datetimes."""

    def __init__(self, start: datetime = FIXED_NOW) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    connection = engine.connect()
    transaction = connection.begin()
    SessionLocal = sessionmaker(
        bind=connection,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )
    session = SessionLocal()
    session.begin_nested()

    @event.listens_for(session, "after_transaction_end")
    def restart_savepoint(sess: Session, trans) -> None:  # pragma: no cover - SQLAlchemy internals
        if trans.nested and not getattr(trans._parent, "nested", False):
            session.begin_nested()

    try:
        yield session
    finally:
        event.remove(session, "after_transaction_end", restart_savepoint)
        session.close()

        if transaction.is_active:
            transaction.rollback()
        connection.close()

        # Ensure each test sees a clean database even if commits occurred.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """Provide the Settings instance the application was started with."""
    return settings


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def memory_store() -> InMemoryNonceStore:
    return InMemoryNonceStore()


@pytest.fixture()
def wallet() -> Wallet:
    """Return a fresh wallet for the primary test player."""
    return make_wallet()


@pytest.fixture()
def other_wallet() -> Wallet:
    return make_wallet()


@pytest.fixture()
def player(db_session: Session, wallet: Wallet) -> Iterator[User]:
    """Create and return a persisted user for ``wallet``."""
    user = User(address=wallet.address)
    db_session.add(user)
    db_session.flush()
    db_session.refresh(user)
    yield user


@pytest.fixture()
def other_player(db_session: Session, other_wallet: Wallet) -> Iterator[User]:
    user = User(address=other_wallet.address)
    db_session.add(user)
    db_session.flush()
    db_session.refresh(user)
    yield user


@pytest.fixture()
def auth_headers(wallet: Wallet, test_settings: Settings) -> dict[str, str]:
    """Bearer headers for ``wallet``, as issued after a successful login."""
    token = TokenIssuer.from_settings(test_settings).issue(wallet.address).token
    return {"Authorization": f"Bearer {token}"}
