import os
import tempfile
from pathlib import Path

import httpx
import pytest
from fastapi.testclient import TestClient

_tmp_dir = Path(tempfile.mkdtemp(prefix="coze-chat-tests-"))
os.environ["DATABASE_URL"] = f"sqlite:///{_tmp_dir / 'test.db'}"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["COZE_API_BASE"] = "https://coze.test"
os.environ["COZE_BOT_ID"] = "bot-123"
os.environ["COZE_TOKEN_FILE"] = str(_tmp_dir / "coze_token")
(_tmp_dir / "coze_token").write_text("pat-test-token\n")

from config import Settings
from database import engine, SessionLocal
from main import app, get_coze_client
from models import Base
from services import CozeClient


@pytest.fixture(scope="function")
def settings():
    return Settings.from_env()


@pytest.fixture(scope="function", autouse=True)
def reset_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture(scope="function")
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def client():
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


class FakeCoze:
    """Records outbound requests and answers them from a path -> response map."""

    def __init__(self):
        self.responses = {}
        self.requests = []

    def respond(self, path, body, status_code=200):
        self.responses[path] = (status_code, body)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        status_code, body = self.responses[request.url.path]
        if isinstance(body, (bytes, str)):
            return httpx.Response(status_code, content=body)
        return httpx.Response(status_code, json=body)


@pytest.fixture(scope="function")
def fake_coze():
    return FakeCoze()


@pytest.fixture(scope="function")
def coze_client(settings, fake_coze):
    c = CozeClient(settings, transport=httpx.MockTransport(fake_coze.handler))
    yield c
    c.close()


@pytest.fixture(scope="function")
def proxied_client(client, coze_client):
    app.dependency_overrides[get_coze_client] = lambda: coze_client
    return client


@pytest.fixture(scope="function")
def login(client):
    def _login(email="alice@example.com", password="secret123", username="alice"):
        client.post("/auth/register", json={"username": username, "email": email, "password": password})
        response = client.post("/auth/login", json={"email": email, "password": password})
        result = response.json()["result"]
        return result["user"], {"Authorization": f"Bearer {result['token']}"}

    return _login


@pytest.fixture(scope="function")
def auth(login):
    return login()
