import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from services import TokenService


@pytest.fixture
def broken_db(monkeypatch):
    def failing_query(self, *args, **kwargs):
        raise OperationalError("SELECT 1", {}, Exception("database is locked"))

    def _break():
        monkeypatch.setattr(Session, "query", failing_query)

    return _break


def test_register_store_failure(client, broken_db):
    broken_db()

    response = client.post("/auth/register", json={
        "username": "alice", "email": "alice@example.com", "password": "secret123",
    })

    assert response.status_code == 500
    assert response.json() == {"code": 50001, "result": "Database error"}


def test_login_store_failure(client, broken_db):
    client.post("/auth/register", json={
        "username": "alice", "email": "alice@example.com", "password": "secret123",
    })
    broken_db()

    response = client.post("/auth/login", json={"email": "alice@example.com", "password": "secret123"})

    assert response.status_code == 500
    assert response.json() == {"code": 50003, "result": "Database error"}


def test_user_lookup_store_failure(client, settings, broken_db):
    headers = {"Authorization": f"Bearer {TokenService(settings).issue(1, 'user')}"}
    broken_db()

    by_id = client.get("/user/1", headers=headers)
    by_email = client.get("/user", params={"email": "alice@example.com"}, headers=headers)

    for response in (by_id, by_email):
        assert response.status_code == 500
        assert response.json() == {"code": 50003, "result": "Database error"}


def test_conversation_lookup_store_failure(proxied_client, settings, broken_db):
    headers = {"Authorization": f"Bearer {TokenService(settings).issue(1, 'user')}"}
    broken_db()

    response = proxied_client.get("/coze/conversation/message", params={"conversation_id": "A"}, headers=headers)

    assert response.status_code == 500
    assert response.json() == {"code": 50003, "result": "Database error"}
