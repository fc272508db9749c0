# tests/conftest.py

import os
import tempfile

# Settings are read at import time, so the environment must be ready first
_DB_DIR = tempfile.mkdtemp(prefix="afyalink-tests-")
os.environ["APP_ENV"] = "test"
os.environ["DEBUG"] = "false"
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_DB_DIR}/test.db"
os.environ["JWT_SECRET"] = "test-secret-key"
os.environ["CREATE_TABLES_ON_STARTUP"] = "false"

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event

from afyalink.common.database.database import async_session, engine
from afyalink.main import app
from afyalink.models.models import Base

DEFAULT_PASSWORD = "s3cret-pass"


@event.listens_for(engine.sync_engine, "connect")
def _configure_sqlite(dbapi_connection, connection_record):
    # Transactions are opened explicitly in _begin_immediate
    dbapi_connection.isolation_level = None
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@event.listens_for(engine.sync_engine, "begin")
def _begin_immediate(conn):
    # One writer at a time; others wait on the busy timeout
    conn.exec_driver_sql("BEGIN IMMEDIATE")


@pytest.fixture(autouse=True)
async def database():
    """Fresh schema for every test."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield
    await engine.dispose()


@pytest.fixture
async def db_session():
    async with async_session() as session:
        yield session


@pytest.fixture
async def client():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def register(client):
    """Register a user and return (user, auth headers)."""
    async def _register(username, role="receptionist", password=DEFAULT_PASSWORD, **profile):
        response = await client.post(
            "/api/auth/register",
            json={"username": username, "password": password, "role": role, **profile},
        )
        assert response.status_code == 201, response.text
        body = response.json()
        return body["user"], {"Authorization": f"Bearer {body['token']}"}
    return _register


@pytest.fixture
async def staff(register):
    """One account per role."""
    accounts = {}
    for role in ("admin", "doctor", "nurse", "receptionist"):
        user, headers = await register(f"{role}1", role=role, first_name=role.title(), last_name="One")
        accounts[role] = {"user": user, "headers": headers}
    return accounts


@pytest.fixture
def create_patient(client, staff):
    async def _create_patient(**overrides):
        payload = {
            "first_name": "Jane",
            "last_name": "Doe",
            "date_of_birth": "1990-01-01",
            "gender": "Female",
            "contact_phone": "555-0100",
        }
        payload.update(overrides)
        response = await client.post(
            "/api/patients", json=payload, headers=staff["receptionist"]["headers"]
        )
        assert response.status_code == 201, response.text
        return response.json()["patient"]
    return _create_patient


@pytest.fixture
def book(client, staff):
    """Book an appointment as the receptionist and return the raw response."""
    async def _book(patient_id, doctor_id, date="2025-03-01", time="09:00", reason="Checkup"):
        return await client.post(
            "/api/appointments",
            json={
                "patient_id": patient_id,
                "doctor_id": doctor_id,
                "appointment_date": date,
                "appointment_time": time,
                "reason": reason,
            },
            headers=staff["receptionist"]["headers"],
        )
    return _book
