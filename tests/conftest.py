"""Fixtures partagées / Shared fixtures: base SQLite en mémoire, utilisateurs, client HTTP."""

import os

os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["DEBUG"] = "true"

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import presto.models  # noqa: F401
from presto.database import Base, get_db
from presto.main import app
from presto.models import Client, Company, Mission, User, UserSettings
from presto.rate_limit import limiter
from presto.services.exchange_rate_service import ExchangeRateService
from presto.utils.auth import create_access_token, hash_password

# Barème fixe, pivot USD / Fixed USD-pivoted rates
TEST_RATES = {"EUR": 0.5, "GBP": 0.25, "CHF": 1.0}


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def converter():
    return ExchangeRateService(rates=TEST_RATES)


@pytest.fixture
def make_user(db):
    async def _make(email="freelance@presto.dev", base_currency="EUR", holiday_country="FR"):
        user = User(
            email=email,
            hashed_password=hash_password("secret-password"),
            first_name="Alex",
            last_name="Martin",
            is_active=True,
            settings=UserSettings(
                theme="light", locale="en", base_currency=base_currency, holiday_country=holiday_country,
            ),
        )
        db.add(user)
        await db.flush()
        return user

    return _make


@pytest.fixture
def make_mission(db):
    """Mission avec son client et sa société / Mission with its own client and company."""

    async def _make(user, client=None, company=None, daily_rate=500.0, currency="EUR", holiday_country="FR",
                    client_name="Acme"):
        if client is None:
            client = Client(name=client_name, currency=currency, holiday_country=holiday_country, user_id=user.id)
            db.add(client)
        if company is None:
            company = Company(name="My Company", is_default=True, user_id=user.id)
            db.add(company)
        mission = Mission(
            name=f"Mission {client.name}",
            client=client,
            company=company,
            user_id=user.id,
            daily_rate=daily_rate,
        )
        db.add(mission)
        await db.flush()
        return mission

    return _make


@pytest.fixture
async def user(make_user):
    return await make_user()


@pytest.fixture
async def mission(make_mission, user):
    return await make_mission(user)


# --- API ---

@pytest.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.state.exchange_rates = ExchangeRateService(rates=TEST_RATES)
    limiter.enabled = False

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
    limiter.enabled = True


@pytest.fixture
def auth_headers(session_factory):
    """Créer un utilisateur en base et renvoyer ses en-têtes / Create a user and return its auth headers."""

    async def _make(email="freelance@presto.dev"):
        async with session_factory() as session:
            user = User(
                email=email,
                hashed_password=hash_password("secret-password"),
                first_name="Alex",
                last_name="Martin",
                is_active=True,
            )
            session.add(user)
            await session.commit()
            return {"Authorization": f"Bearer {create_access_token(user.id)}"}

    return _make
