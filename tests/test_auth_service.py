import pytest

from exceptions import DuplicateError, InvalidCredentialsError, NotFoundError
from services import AuthService, UserService


def test_verify_password_accepts_original_password():
    hashed = AuthService.hash_password("secret123")

    assert hashed != "secret123"
    assert AuthService.verify_password("secret123", hashed) is True


def test_verify_password_rejects_other_password():
    hashed = AuthService.hash_password("secret123")

    assert AuthService.verify_password("secret124", hashed) is False
    assert AuthService.verify_password("", hashed) is False


def test_hash_password_salts_every_hash():
    assert AuthService.hash_password("secret123") != AuthService.hash_password("secret123")


def test_verify_password_rejects_garbage_hash():
    assert AuthService.verify_password("secret123", "not-a-hash") is False


@pytest.mark.parametrize("subject_id, owner_id, expected", [
    (7, 7, True),
    ("7", 7, True),
    (7, "7", True),
    (" 7", "7", True),
    (7, 8, False),
    ("7", "8", False),
    ("abc", 7, False),
    (None, 7, False),
])
def test_assert_owner_compares_canonical_ids(subject_id, owner_id, expected):
    assert AuthService.assert_owner(subject_id, owner_id) is expected


def test_create_user_rejects_duplicate_email(db):
    UserService.create_user(db, username="alice", email="alice@example.com", hashed_password="h")

    with pytest.raises(DuplicateError):
        UserService.create_user(db, username="alice2", email="alice@example.com", hashed_password="h")

    assert UserService.exists_by_email(db, "alice@example.com")
    assert UserService.get_user_by_email(db, "alice@example.com").username == "alice"


def test_get_user_lookups(db):
    user = UserService.create_user(db, username="bob", email="bob@example.com", hashed_password="h")

    assert UserService.get_user_by_id(db, user.id).email == "bob@example.com"
    assert UserService.get_user_by_id(db, user.id + 1) is None
    assert UserService.get_user_by_email(db, "nobody@example.com") is None
    assert not UserService.exists_by_email(db, "nobody@example.com")


def test_authenticate_user(db):
    UserService.create_user(
        db, username="carol", email="carol@example.com",
        hashed_password=AuthService.hash_password("secret123")
    )

    assert AuthService.authenticate_user(db, "carol@example.com", "secret123").username == "carol"

    with pytest.raises(InvalidCredentialsError):
        AuthService.authenticate_user(db, "carol@example.com", "wrong-password")

    with pytest.raises(NotFoundError):
        AuthService.authenticate_user(db, "nobody@example.com", "secret123")
