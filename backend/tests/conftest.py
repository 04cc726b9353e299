"""Pytest configuration and shared fixtures.

Points the application at an in-memory SQLite database and a temporary
upload directory before the package is imported, since settings are read
once at import time.
"""

import os
import tempfile

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="runbook-uploads-")
os.environ["LOG_LEVEL"] = "WARNING"

import httpx
import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from runbook_checklist import models  # noqa: F401
from runbook_checklist.client.api_client import RunbookApiClient
from runbook_checklist.core.database import Base, SessionLocal, engine
from runbook_checklist.main import app

from tests.payloads import DEPLOY_RUNBOOK


@pytest.fixture(autouse=True)
def reset_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def db_session():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def deploy_runbook(client):
    resp = client.post("/api/runbooks", json=DEPLOY_RUNBOOK)
    assert resp.status_code == 200, resp.text
    return resp.json()


@pytest.fixture
def deploy_execution(client, deploy_runbook):
    resp = client.post(
        "/api/executions",
        json={
            "runbookId": deploy_runbook["id"],
            "incidentId": "INC1",
            "operator": "alice",
            "priority": "high",
        },
    )
    assert resp.status_code == 200, resp.text
    return resp.json()


@pytest_asyncio.fixture
async def api_client():
    client = RunbookApiClient(
        base_url="http://testserver",
        transport=httpx.ASGITransport(app=app),
    )
    try:
        yield client
    finally:
        await client.close()
