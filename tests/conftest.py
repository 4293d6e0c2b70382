import uuid

import mongomock
import pytest
from fastapi.testclient import TestClient

from hotel_api.api.server import create_app
from hotel_api.config import Settings
from hotel_api.context import AppContext
from hotel_api.db import StoreHandle
from hotel_api.services.verification import VerificationResult


class StubVerifier:
    def __init__(self, success: bool = True, score: float = 0.9):
        self.success = success
        self.score = score
        self.calls = []

    def verify(self, token, remote_ip=None):
        self.calls.append((token, remote_ip))
        return VerificationResult(success=self.success, score=self.score)


BOOKING = {
    "guest_name": "A. Sharma",
    "phone": "+911234567890",
    "check_in": "2025-05-01",
    "check_out": "2025-05-03",
    "room_type": "Deluxe",
}


@pytest.fixture
def booking():
    return dict(BOOKING)


@pytest.fixture
def mongo_db():
    return mongomock.MongoClient()[f"hotel_test_{uuid.uuid4().hex[:8]}"]


@pytest.fixture
def make_ctx(mongo_db):
    def _make(ready=True, verifier=None, **overrides):
        overrides.setdefault("obs_on", False)
        settings = Settings(**overrides)
        store = StoreHandle(mongo_db if ready else None)
        return AppContext(settings=settings, store=store, verifier=verifier)

    return _make


@pytest.fixture
def make_client(make_ctx):
    def _make(raise_server_exceptions=True, **kwargs):
        app = create_app(ctx=make_ctx(**kwargs))
        return TestClient(app, raise_server_exceptions=raise_server_exceptions)

    return _make


@pytest.fixture
def client(make_client):
    return make_client()


@pytest.fixture
def stub_verifier():
    return StubVerifier
