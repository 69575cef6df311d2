import pytest
from fastapi.testclient import TestClient

from dessert_optimizer.core.config import Settings, get_settings
from dessert_optimizer.main import create_app


@pytest.fixture(autouse=True)
def _fresh_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def settings(monkeypatch) -> Settings:
    """
    Default settings, isolated from the caller's environment.
    """
    for var in (
        "PORT",
        "RELOAD",
        "LOG_LEVEL",
        "SOLVER_ID",
        "SOLVER_TIME_LIMIT_MS",
        "UNRESOLVED_POLICY",
    ):
        monkeypatch.delenv(var, raising=False)
    return Settings(_env_file=None)


@pytest.fixture()
def client(settings) -> TestClient:
    """
    Creates a fresh FastAPI app and TestClient for each test.
    This avoids shared state between tests.
    """
    app = create_app(settings)
    return TestClient(app)
