"""
Pytest configuration and shared fixtures for the train car database test suite.

This module provides:
- A file-backed async SQLite database seeded with a small fleet
- Service and connection-scope fixtures
- FastAPI test clients with the database dependency overridden
- Failure injection for the query path
"""
import os

# Must be set before the application modules read their configuration
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

from datetime import datetime
from typing import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from traindb.core.db import Base, ConnectionScope, get_db
from traindb.main import app
from traindb.models import CarMarriage, TrainCar, TrainModel
from traindb.schemas.train_car import MarriageOut, TrainCarOut
from traindb.services.train_car_service import TrainCarService

# Newest row; 2025-10-03 20:00 in Vancouver
LATEST_MODIFIED = datetime(2025, 10, 4, 3, 0)
OLDER_MODIFIED = datetime(2024, 6, 1, 12, 0)


def make_models():
    return [
        TrainModel(batch_id=1, common_name="Mark I", manufacturer="UTDC",
                   manufacture_location="Kingston, Ontario", years_manufactured="1984-1986",
                   full_name="UTDC ICTS Mark I"),
        TrainModel(batch_id=2, common_name="Mark II", manufacturer="Bombardier",
                   manufacture_location="Thunder Bay, Ontario\nKingston, Ontario",
                   years_manufactured="2000-2002", full_name="Bombardier ART 200"),
        TrainModel(batch_id=5, common_name="Mark V", manufacturer="Alstom",
                   manufacture_location="Sahagun, Mexico", years_manufactured="2023-2027",
                   full_name="Alstom Innovia Metro 300"),
    ]


def make_cars():
    return [
        TrainCar(vehicle_id=1, status="In Service", delivery_date="1985", enter_service_date="1985-12-11",
                 batch_id=1, notes="First car delivered.", last_modified=OLDER_MODIFIED),
        TrainCar(vehicle_id=2, status="In Service", delivery_date="1985", enter_service_date="1985-12-11",
                 batch_id=1, last_modified=OLDER_MODIFIED),
        TrainCar(vehicle_id=3, status="Retired", delivery_date="1985", batch_id=1,
                 last_modified=OLDER_MODIFIED),
        TrainCar(vehicle_id=4, status="In Service", delivery_date="1986", batch_id=1,
                 last_modified=OLDER_MODIFIED),
        TrainCar(vehicle_id=42, name="Spirit of Vancouver", status="In Service",
                 last_modified=OLDER_MODIFIED),
        TrainCar(vehicle_id=201, status="In Service", delivery_date="2002", enter_service_date="2002-08-15",
                 batch_id=2, last_modified=OLDER_MODIFIED),
        TrainCar(vehicle_id=202, status="In Service", delivery_date="2002", enter_service_date="2002-08-15",
                 batch_id=2, last_modified=LATEST_MODIFIED),
        TrainCar(vehicle_id=6011, status="In Testing", delivery_date="2024", batch_id=5,
                 last_modified=OLDER_MODIFIED),
        TrainCar(vehicle_id=6022, status="In Testing", delivery_date="2024", batch_id=5,
                 last_modified=OLDER_MODIFIED),
    ]


def make_marriages():
    # Inserted out of order; 999 has no car row and size 5 disagrees with the list
    return [
        CarMarriage(marriage_id=3, batch_id=2, cars=[201, 202], marriage_size=2),
        CarMarriage(marriage_id=1, batch_id=1, cars=[1, 2], marriage_size=2),
        CarMarriage(marriage_id=4, batch_id=5, cars=[6011, 6022, 999], marriage_size=5),
        CarMarriage(marriage_id=2, batch_id=1, cars=[3, 4], marriage_size=2),
    ]


@pytest_asyncio.fixture
async def async_engine(tmp_path):
    """
    File-backed SQLite so concurrent lookups each get a real pooled connection.
    """
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'traindb.db'}", echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def seeded_engine(async_engine):
    session_factory = async_sessionmaker(async_engine, expire_on_commit=False)
    async with session_factory() as session:
        session.add_all(make_models())
        await session.flush()
        session.add_all(make_cars())
        session.add_all(make_marriages())
        await session.commit()
    return async_engine


@pytest_asyncio.fixture
async def connection_scope(seeded_engine) -> AsyncGenerator[ConnectionScope, None]:
    async with ConnectionScope(seeded_engine) as scope:
        yield scope


@pytest.fixture
def train_car_service(connection_scope) -> TrainCarService:
    return TrainCarService(connection_scope)


@pytest.fixture
def failing_scope():
    """Scope whose every connection attempt fails with a driver error."""
    scope = MagicMock(spec=ConnectionScope)
    scope.connect = AsyncMock(side_effect=OperationalError(
        "SELECT secret_column FROM train_cars", {}, Exception("connection refused")
    ))
    return scope


def _override_db(target_app, engine):
    async def override_get_db():
        async with ConnectionScope(engine) as scope:
            yield scope

    target_app.dependency_overrides[get_db] = override_get_db


@pytest_asyncio.fixture
async def async_client(seeded_engine) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client against the full app, backed by the seeded database."""
    _override_db(app, seeded_engine)

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def local_client(seeded_engine) -> AsyncGenerator[AsyncClient, None]:
    """Client addressing the app through a loopback host, as in local development."""
    _override_db(app, seeded_engine)

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://localhost:8000") as client:
        yield client

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def failing_client(failing_scope) -> AsyncGenerator[AsyncClient, None]:
    async def override_get_db():
        yield failing_scope

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def sync_client():
    """Synchronous client for endpoints that never touch the database."""
    return TestClient(app)


# Presentation fixtures
@pytest.fixture
def sample_cars():
    return [
        TrainCarOut(vehicle_id=1, status="In Service", delivery_date="1985", batch_id=1,
                    notes="First car delivered.", model_common_name="Mark I"),
        TrainCarOut(vehicle_id=2, status="In Service", delivery_date="1985", batch_id=1,
                    model_common_name="Mark I"),
        TrainCarOut(vehicle_id=3, status="Retired", batch_id=1, model_common_name="Mark I"),
        TrainCarOut(vehicle_id=4, status="In Service", batch_id=1, model_common_name="Mark I"),
        TrainCarOut(vehicle_id=42, name="Spirit of Vancouver", status="In Service"),
        TrainCarOut(vehicle_id=6011, status="In Testing", batch_id=5, model_common_name="Mark V",
                    manufacture_location="Sahagun, Mexico\nLa Pocatiere, Quebec"),
        TrainCarOut(vehicle_id=6022, status="In Testing", batch_id=5, model_common_name="Mark V"),
    ]


@pytest.fixture
def sample_marriages():
    return [
        MarriageOut(marriage_id=1, batch_id=1, cars=[1, 2], marriage_size=2),
        MarriageOut(marriage_id=2, batch_id=1, cars=[3, 4], marriage_size=2),
        MarriageOut(marriage_id=4, batch_id=5, cars=[6011, 6022, 999], marriage_size=5),
        MarriageOut(marriage_id=7, batch_id=9, cars=[998], marriage_size=1),
    ]


@pytest.fixture
def rate_limited(monkeypatch):
    """Turns the limiter on with a limit of two requests per minute."""
    from traindb.middleware.rate_limit import limiter

    monkeypatch.setenv("RATE_LIMIT", "2/minute")
    limiter.reset()
    limiter.enabled = True

    yield limiter

    limiter.enabled = False
    limiter.reset()
