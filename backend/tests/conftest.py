import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from app.database import get_session
from app.main import app
from app.utils.schedule_cache import get_schedule_cache

TEST_DATABASE_URL = "sqlite:///:memory:"

# ============================================================================
# Test Database Setup
# ============================================================================
# 1. A fresh sqlite:///:memory: engine per test, StaticPool so every
#    connection of that engine sees the same database
# 2. check_same_thread=False required for TestClient/threaded access
# 3. Models are registered by tests/__init__.py before create_all()
# 4. App dependency overridden to hand out the test session (see client_fixture)
# 5. The process-wide schedule cache is emptied around every test


@pytest.fixture(name="engine")
def engine_fixture():
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture(name="session")
def session_fixture(engine):
    """Provide a test database session"""
    with Session(engine) as session:
        yield session


@pytest.fixture(name="client")
def client_fixture(session: Session):
    """Provide a test client with overridden database session

    The override is set before TestClient() is created and cleared after.
    Startup (init_db) is not run, so the app never touches its own engine.
    """

    def get_session_override():
        return session

    app.dependency_overrides[get_session] = get_session_override
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def clear_schedule_cache():
    get_schedule_cache().clear()
    yield
    get_schedule_cache().clear()
