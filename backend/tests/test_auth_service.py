import pytest

from backend.auth_service.service import AuthService, INVALID_CREDENTIALS
from backend.auth_service.utils import verify_token
from backend.common.errors import ValidationError, AuthError, ConflictError


@pytest.fixture
def service(credential_store):
    return AuthService(credential_store)


def test_register_lowercases_email_and_hashes_password(service, credential_store):
    user = service.register("Alice", "  Alice@Example.COM ", "secret123")

    assert user == {"name": "Alice", "email": "alice@example.com", "photoURL": ""}
    stored = credential_store.find_by_email("alice@example.com")
    assert stored["password_hash"] != "secret123"
    assert stored["password_hash"].startswith("$argon2")


def test_register_keeps_avatar_url(service):
    user = service.register("Alice", "alice@example.com", "secret123", "http://img/a.png")
    assert user["photoURL"] == "http://img/a.png"


@pytest.mark.parametrize("name,email,password", [
    ("", "alice@example.com", "pw"),
    ("Alice", "", "pw"),
    ("Alice", "alice@example.com", ""),
    (None, None, None),
])
def test_register_missing_fields(service, name, email, password):
    with pytest.raises(ValidationError):
        service.register(name, email, password)


def test_register_twice_same_email_any_case_conflicts(service):
    service.register("Alice", "alice@example.com", "secret123")

    with pytest.raises(ConflictError):
        service.register("Alice Again", "ALICE@example.com", "other")


def test_login_success_returns_token_and_public_user(service):
    service.register("Alice", "alice@example.com", "secret123", "http://img/a.png")

    result = service.login("Alice@example.com", "secret123")

    assert result["user"] == {"name": "Alice", "email": "alice@example.com", "photoURL": "http://img/a.png"}
    assert "password_hash" not in result["user"]
    claims = verify_token(result["token"])
    assert claims["email"] == "alice@example.com"
    assert claims["name"] == "Alice"
    assert claims["userId"] == 1


def test_login_wrong_password_and_unknown_email_look_the_same(service):
    service.register("Alice", "alice@example.com", "secret123")

    with pytest.raises(AuthError) as wrong_password:
        service.login("alice@example.com", "nope")
    with pytest.raises(AuthError) as unknown_email:
        service.login("nobody@example.com", "secret123")

    assert wrong_password.value.message == INVALID_CREDENTIALS
    assert unknown_email.value.message == INVALID_CREDENTIALS


def test_login_missing_credentials(service):
    with pytest.raises(ValidationError):
        service.login("", "")


def test_register_treats_non_strings_as_missing(service, credential_store):
    with pytest.raises(ValidationError):
        service.register("Alice", 123, "secret123")
    with pytest.raises(ValidationError):
        service.register("Alice", "alice@example.com", 12345678)

    assert credential_store.users == {}


def test_non_string_avatar_is_ignored(service):
    user = service.register("Alice", "alice@example.com", "secret123", {"url": "x"})
    assert user["photoURL"] == ""


def test_login_treats_non_strings_as_missing(service):
    with pytest.raises(ValidationError):
        service.login(["alice@example.com"], "secret123")
