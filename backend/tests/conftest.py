from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict
from uuid import UUID, uuid4

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from growth_map.api.deps import get_content_generator
from growth_map.core.auth import get_identity_provider
from growth_map.core.errors import AuthenticationError
from growth_map.db import Base
from growth_map.db.deps import get_db
from growth_map.main import app
from growth_map.services.content_generator import ContentGenerator

OWNER_TOKEN = "owner-token"
OTHER_TOKEN = "other-token"


class FakeIdentityProvider:
    def __init__(self, users: Dict[str, UUID]):
        self.users = users

    def authenticate(self, token: str) -> UUID:
        try:
            return self.users[token]
        except KeyError:
            raise AuthenticationError("Invalid or expired session")


@dataclass
class ApiHarness:
    client: TestClient
    session_factory: Callable[[], Session]
    owner_id: UUID
    other_id: UUID

    def headers(self, token: str = OWNER_TOKEN) -> Dict[str, str]:
        return {"Authorization": f"Bearer {token}"}

    def create_growth_map(self, **overrides) -> dict:
        body = {
            "title": "Learn Spanish",
            "description": "Hold a 20 minute conversation with a native speaker",
            "horizonMonths": 6,
            "dailyMinutes": 30,
            "tags": ["language"],
        }
        body.update(overrides)
        response = self.client.post("/growth-maps", json=body, headers=self.headers())
        assert response.status_code == 201, response.text
        return response.json()


@pytest.fixture()
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )

    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):  # pragma: no cover - sqlite setup
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(bind=engine)
    yield sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    engine.dispose()


@pytest.fixture()
def api(session_factory):
    owner_id, other_id = uuid4(), uuid4()

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    provider = FakeIdentityProvider({OWNER_TOKEN: owner_id, OTHER_TOKEN: other_id})
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_identity_provider] = lambda: provider
    app.dependency_overrides[get_content_generator] = lambda: ContentGenerator()
    with TestClient(app) as test_client:
        yield ApiHarness(test_client, session_factory, owner_id, other_id)
    app.dependency_overrides.clear()
