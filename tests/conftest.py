import os

# Keep the app's own engine off disk; must run before paperhub is imported.
os.environ.setdefault("DATABASE_URL", "sqlite://")

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from paperhub.main import app
from paperhub.db.session import Base, get_db
from paperhub.client.local_state import StateStore
from paperhub.client.store import RemoteStoreClient
import paperhub.db.models  # noqa: F401


@pytest.fixture
def db_engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_app(db_engine):
    TestingSession = sessionmaker(bind=db_engine, autocommit=False, autoflush=False)

    def override_get_db():
        db = TestingSession()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(db_app):
    return TestClient(db_app)


@pytest.fixture
async def store(db_app):
    http = httpx.AsyncClient(transport=httpx.ASGITransport(app=db_app), base_url="http://test")
    yield RemoteStoreClient("http://test", client=http)
    await http.aclose()


@pytest.fixture
def state_store(tmp_path):
    store = StateStore(str(tmp_path / "state.json"))
    store.load()
    return store
