"""Test fixtures: async SQLite DB per test + FastAPI client with get_db overridden.

- Each test gets a fresh SQLite file (tmp_path): sessions use separate connections,
  so UNIQUE conflicts behave like on PostgreSQL.
- The app engine (settings.DATABASE_URL) is never used: get_db is overridden.
"""

import logging
import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from fieldops.db.base import Base
from fieldops.db.session import get_db
from fieldops.main import app
from fieldops.models import Client, Specialite, Technicien, TypePaiement
from tests.payloads import mission_payload

# aiosqlite worker threads may log DEBUG lines after engine.dispose() returns;
# keep them out of log-capture streams of later tests.
logging.getLogger("aiosqlite").setLevel(logging.INFO)


@pytest.fixture
async def test_engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'fieldops.db'}", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
async def client(test_session_factory):
    """HTTP client on the ASGI app, DB dependency bound to the test database."""

    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture
async def client_row(test_db):
    """Client with a 45-day payment type."""
    tp = TypePaiement(libelle="Virement 45 jours", delai_paiement=45)
    test_db.add(tp)
    await test_db.flush()

    row = Client(nom="Hôtel Ivoire", email="contact@hotel-ivoire.ci", entreprise="Hôtel Ivoire", type_paiement_id=tp.id)
    test_db.add(row)
    await test_db.commit()
    return row


@pytest.fixture
async def technicien_row(test_db):
    sp = Specialite(libelle="Climatisation")
    test_db.add(sp)
    await test_db.flush()

    row = Technicien(nom="Koné", prenom="Moussa", contact="+225 07 12 34 56", specialite_id=sp.id)
    test_db.add(row)
    await test_db.commit()
    return row


@pytest.fixture
async def mission(client, client_row):
    """Mission created through the API (numbered INT-YYYY-0001)."""
    res = await client.post("/api/missions", json=mission_payload(client_row.id))
    assert res.status_code == 201
    return res.json()["data"]
