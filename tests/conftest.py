"""Shared fixtures.

Env is set before anything under ckforest is imported so Settings and the
engine pick up an in-memory SQLite database and a throwaway receipt dir.
HTTP tests go through the local ASGI app with httpx.AsyncClient.
"""
import os
import tempfile

os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["RECEIPT_LOCAL_DIR"] = tempfile.mkdtemp(prefix="ckforest-receipts-")
os.environ["API_PUBLIC_URL"] = "http://test"
os.environ["MANAGEMENT_API_KEY"] = "test-management-key"
os.environ.setdefault("LOG_LEVEL", "DEBUG")

import pytest
import httpx
from httpx import ASGITransport

from ckforest.db.session import Base, SessionLocal, engine
from ckforest.models.package import Package  # noqa: F401
from ckforest.models.booking import Booking  # noqa: F401
from ckforest.models.setting import Setting  # noqa: F401
from ckforest.services.package_service import ensure_default_packages
from ckforest.main import app


@pytest.fixture(scope="session")
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture(autouse=True)
def _tables():
    Base.metadata.create_all(engine)
    yield
    Base.metadata.drop_all(engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def packages(db):
    ensure_default_packages(db)
    return {p.id: p for p in db.query(Package).all()}


@pytest.fixture
async def client():
    async with httpx.AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c
