"""Pytest fixtures for testing."""

from collections.abc import AsyncGenerator
from decimal import Decimal
from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from ledger.core.deps import get_cache
from ledger.core.rate_limit import limiter
from ledger.db.base import Base
from ledger.db.session import get_db
from ledger.models import Account, ActionType, AssetType, Change
from main import app

# Test database URL (SQLite in-memory for fast tests)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


class FakeCache:
    """In-memory stand-in for the subset of ``redis.asyncio.Redis`` the catalogs use."""

    def __init__(self) -> None:
        self.store: dict[str, str] = {}
        self.ttls: dict[str, int] = {}

    async def get(self, key: str) -> str | None:
        return self.store.get(key)

    async def setex(self, key: str, ttl: int, value: Any) -> bool:
        self.store[key] = value.decode() if isinstance(value, bytes) else value
        self.ttls[key] = ttl
        return True

    async def delete(self, *keys: str) -> int:
        removed = 0
        for key in keys:
            if self.store.pop(key, None) is not None:
                self.ttls.pop(key, None)
                removed += 1
        return removed

    async def exists(self, *keys: str) -> int:
        return sum(1 for key in keys if key in self.store)

    async def ping(self) -> bool:
        return True


async def persist(db: AsyncSession, *objs: Any) -> None:
    """Commit objects and detach them so later rollbacks cannot expire them."""
    db.add_all(objs)
    await db.commit()
    for obj in objs:
        await db.refresh(obj)
        db.expunge(obj)


@pytest.fixture(autouse=True)
def reset_limiter():
    """Reset rate limiter storage so counts never leak between tests."""
    limiter.reset()
    yield
    limiter.reset()


@pytest_asyncio.fixture(scope="function")
async def test_engine():
    """Create a test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def test_db(test_engine) -> AsyncGenerator[AsyncSession]:
    """Create a test database session."""
    async_session_maker = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async with async_session_maker() as session:
        yield session


@pytest.fixture(scope="function")
def fake_cache() -> FakeCache:
    """Fresh in-memory catalog cache."""
    return FakeCache()


@pytest_asyncio.fixture(scope="function")
async def client(test_db: AsyncSession, fake_cache: FakeCache) -> AsyncGenerator[AsyncClient]:
    """Create a test client with database and cache overrides."""

    async def override_get_db() -> AsyncGenerator[AsyncSession]:
        yield test_db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_cache] = lambda: fake_cache

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest_asyncio.fixture(scope="function")
async def asset_type(test_db: AsyncSession) -> AssetType:
    """Active asset type."""
    usdt = AssetType(name="USDT", description="Tether USD", is_active=True)
    await persist(test_db, usdt)
    return usdt


@pytest_asyncio.fixture(scope="function")
async def inactive_asset_type(test_db: AsyncSession) -> AssetType:
    """Deactivated asset type."""
    legacy = AssetType(name="LEGACY", description="Retired points", is_active=False)
    await persist(test_db, legacy)
    return legacy


@pytest_asyncio.fixture(scope="function")
async def action_types(test_db: AsyncSession) -> dict[str, ActionType]:
    """Common action types keyed by name."""
    types = {
        "deposit": ActionType(
            name="deposit",
            description="Credit available balance",
            available_balance_change=Change.INC,
            frozen_balance_change=Change.NONE,
            total_income_change=Change.INC,
            total_expense_change=Change.NONE,
            is_active=True,
        ),
        "withdraw": ActionType(
            name="withdraw",
            description="Debit available balance",
            available_balance_change=Change.DEC,
            frozen_balance_change=Change.NONE,
            total_income_change=Change.NONE,
            total_expense_change=Change.INC,
            is_active=True,
        ),
        "freeze": ActionType(
            name="freeze",
            description="Move available balance to frozen",
            available_balance_change=Change.DEC,
            frozen_balance_change=Change.INC,
            total_income_change=Change.NONE,
            total_expense_change=Change.NONE,
            is_active=True,
        ),
        "unfreeze": ActionType(
            name="unfreeze",
            description="Move frozen balance back to available",
            available_balance_change=Change.INC,
            frozen_balance_change=Change.DEC,
            total_income_change=Change.NONE,
            total_expense_change=Change.NONE,
            is_active=True,
        ),
        "retired": ActionType(
            name="retired",
            description="No longer offered",
            available_balance_change=Change.INC,
            frozen_balance_change=Change.NONE,
            total_income_change=Change.NONE,
            total_expense_change=Change.NONE,
            is_active=False,
        ),
    }
    await persist(test_db, *types.values())
    return types


@pytest_asyncio.fixture(scope="function")
async def account(test_db: AsyncSession, asset_type: AssetType) -> Account:
    """Active account for user 1 holding 10.000000 available."""
    acct = Account(
        user_id=1,
        asset_type_id=asset_type.id,
        available_balance=Decimal("10"),
        frozen_balance=Decimal("0"),
        total_income=Decimal("10"),
        total_expense=Decimal("0"),
        is_active=True,
    )
    await persist(test_db, acct)
    return acct


@pytest_asyncio.fixture(scope="function")
async def inactive_account(test_db: AsyncSession, asset_type: AssetType) -> Account:
    """Deactivated account for user 2."""
    acct = Account(user_id=2, asset_type_id=asset_type.id, is_active=False)
    await persist(test_db, acct)
    return acct
