import pytest
from httpx import AsyncClient, ASGITransport

from taskboard.api.main import create_app
from taskboard.auth import AuthorizationGate
from taskboard.configs import Settings
from taskboard.db_models import TaskboardDB, init_db


SECRET_KEY = "test-secret-key-123!"


# This fixture ensures pytest runs async tests with asyncio
@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


@pytest.fixture
def settings(tmp_path):
    return Settings(
        secret_key=SECRET_KEY,
        database_path=str(tmp_path / "taskboard.db"),
        token_ttl_seconds=3600,
    )


@pytest.fixture
def db(settings):
    init_db(settings.database_path)
    db = TaskboardDB.connect(settings.database_path)
    yield db
    db.close()


@pytest.fixture
def gate(settings):
    return AuthorizationGate.from_settings(settings)


@pytest.fixture
def auth_headers(gate):
    def make(user_id: int) -> dict[str, str]:
        return {"Authorization": f"Bearer {gate.issue_token(user_id)}"}
    return make


@pytest.fixture
def app(settings):
    # ASGITransport does not run the lifespan, so create the tables here.
    init_db(settings.database_path)
    return create_app(settings)


@pytest.fixture
async def async_client(app):
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        yield ac
