from collections.abc import Callable
from pathlib import Path

import pytest
from dependency_injector import providers
from fastapi import FastAPI
from fastapi.testclient import TestClient

from noise.board.manager import BoardManager
from noise.config import ConfigManager, NoiseConfig
from noise.database import DatabaseService
from noise.storage import LocalStorage
from noise.system.path_resolver import PathResolver
from noise.web.core.container import Container
from noise.web.core.factory import create_app


@pytest.fixture(scope="session")
def repo_root() -> Path:
    """Get the absolute path to the repository root."""
    return Path(__file__).parent.parent.resolve()


@pytest.fixture
def path_resolver(tmp_path: Path, repo_root: Path) -> PathResolver:
    """Provide a PathResolver whose writable paths all live in a temp directory.

    Tests must never write to the real data/ directory, so the config file,
    database and uploads are redirected below ``tmp_path``.
    """
    resolver = PathResolver()

    temp_data_dir = tmp_path / "data"
    temp_data_dir.mkdir(parents=True)
    temp_config_dir = tmp_path / "config"
    temp_config_dir.mkdir(parents=True)
    temp_database_dir = tmp_path / "database"
    temp_database_dir.mkdir(parents=True)

    resolver.app_dir = repo_root
    resolver.data_dir = temp_data_dir
    resolver.get_noise_config_path = lambda: temp_config_dir / "noise.yaml"
    resolver.get_database_path = lambda: temp_database_dir / "noise.db"

    return resolver


@pytest.fixture
def test_config(path_resolver: PathResolver) -> NoiseConfig:
    """Load a default config from the temp location, isolated from the process environment."""
    config = ConfigManager(path_resolver, environ={}).load()
    config.environment = "test"
    config.jwt.secret = "test-secret"
    # Individual tests opt back in to rate limiting
    config.rate_limit.enabled = False
    return config


@pytest.fixture
async def db_service(path_resolver: PathResolver):
    """Provide an initialized DatabaseService on a temp SQLite file."""
    service = DatabaseService(path_resolver.get_database_path())
    await service.initialize()
    yield service
    await service.dispose()


@pytest.fixture
def local_storage(tmp_path: Path) -> LocalStorage:
    """Provide local storage in a temp uploads directory."""
    return LocalStorage(tmp_path / "uploads")


@pytest.fixture
def board_manager(db_service: DatabaseService, local_storage: LocalStorage) -> BoardManager:
    """Provide a BoardManager backed by a real temp database and storage."""
    return BoardManager(db_service, local_storage, max_text_length=200)


@pytest.fixture
def app_factory(path_resolver: PathResolver, test_config: NoiseConfig):
    """Build FastAPI apps whose containers point at temp data.

    Overrides are applied on the container instance before ``create_app`` wires
    it, so every service the app builds uses the temp paths and test config.
    """
    containers: list[Container] = []

    def _create(config: NoiseConfig | None = None) -> FastAPI:
        container = Container()
        container.path_resolver.override(providers.Singleton(lambda: path_resolver))
        app_config = config or test_config
        container.config.override(providers.Singleton(lambda: app_config))
        containers.append(container)
        return create_app(container)

    yield _create

    for container in containers:
        container.unwire()
        container.reset_override()


@pytest.fixture
def app(app_factory: Callable[..., FastAPI]) -> FastAPI:
    """Create the FastAPI app with isolated paths and rate limiting disabled."""
    return app_factory()


@pytest.fixture
def client(app: FastAPI):
    """Provide a TestClient with the application lifespan running."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def create_session():
    """Provide a function that opens an anonymous session on a client.

    Returns:
        A callable taking a TestClient and returning ``(owner_id, headers)``

    Example:
        def test_something(client, create_session):
            owner_id, headers = create_session(client)
            client.post("/api/text-items", json={...}, headers=headers)
    """

    def _create(test_client: TestClient) -> tuple[str, dict[str, str]]:
        response = test_client.post("/api/session")
        assert response.status_code == 200
        body = response.json()
        return body["ownerId"], {"Authorization": f"Bearer {body['token']}"}

    return _create
