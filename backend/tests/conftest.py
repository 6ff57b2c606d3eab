import pytest
from fastapi.testclient import TestClient

from ledger.config import Settings
from ledger.database.db_service import get_db_service
from ledger.database.session import get_db_context
from ledger.main import create_app


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        NODE_ENV="test",
        DATABASE_CLIENT="sqlite",
        DATABASE_URL=":memory:",
        METRICS_ENABLED=False,
    )


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as test_client:
        yield test_client


@pytest.fixture
def stored_transactions(client):
    """Read back every persisted transaction row."""

    def _read():
        with get_db_context() as session:
            return get_db_service(session).find("transactions")

    return _read
