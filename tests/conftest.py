# tests/conftest.py
import pytest
from fastapi.testclient import TestClient

from leaderboard_service.config import Settings
from leaderboard_service.dependencies import get_avatar_uploader
from leaderboard_service.main import create_app

TEST_PASSWORD = "pw123"


class FakeAvatarUploader:
    """Reemplaza al uploader real: no sale a la red y recuerda lo que recibió."""

    def __init__(self):
        self.uploads = []

    async def upload(self, image: str) -> str:
        self.uploads.append(image)
        return f"https://res.cloudinary.com/demo/image/upload/avatars/{len(self.uploads)}.png"


@pytest.fixture
def settings():
    return Settings(database_url="sqlite://", jwt_secret_key="test-secret")


@pytest.fixture
def avatar_uploader():
    return FakeAvatarUploader()


@pytest.fixture
def app(settings, avatar_uploader):
    application = create_app(settings)
    application.dependency_overrides[get_avatar_uploader] = lambda: avatar_uploader
    return application


@pytest.fixture
def client(app):
    # El context manager dispara el lifespan, que crea las tablas
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def db(app, client):
    session = app.state.SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def tokens(app):
    return app.state.token_service


@pytest.fixture
def register(client):
    """Registra un usuario con datos válidos; los campos se pueden sobrescribir."""
    def _register(email="a@x.com", **overrides):
        payload = {
            "name": "Alice",
            "age": 12,
            "class": "5B",
            "email": email,
            "password": TEST_PASSWORD,
        }
        payload.update(overrides)
        return client.post("/api/auth/register", json=payload)
    return _register


@pytest.fixture
def auth_headers(register):
    r = register()
    assert r.status_code == 201, r.text
    return {"Authorization": f"Bearer {r.json()['token']}"}
