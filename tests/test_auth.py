import jwt
import pytest

from backend import auth, config
from backend.models import Artisan, User
from conftest import signup


def test_signup_returns_session_and_creates_profile(client, db):
    resp = client.post("/auth/signup", json={"email": "Potter@Example.com ", "password": "secret123"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["email"] == "potter@example.com"
    assert body["token_type"] == "bearer"

    payload = jwt.decode(body["access_token"], config.JWT_SECRET, algorithms=["HS256"])
    assert payload["sub"] == body["user_id"]

    profile = db.get(Artisan, body["user_id"])
    assert profile is not None
    assert profile.name == "potter"
    assert profile.craft == "Not specified"


def test_signup_duplicate_email(client):
    signup(client)
    resp = client.post("/auth/signup", json={"email": "maker@example.com", "password": "another1"})
    assert resp.status_code == 400
    assert resp.json()["code"] == "auth/email-already-in-use"
    assert resp.json()["detail"] == "This email is already registered. Please log in."


def test_signup_weak_password(client):
    resp = client.post("/auth/signup", json={"email": "new@example.com", "password": "123"})
    assert resp.status_code == 400
    assert resp.json()["code"] == "auth/weak-password"


def test_signup_rejects_malformed_email(client):
    resp = client.post("/auth/signup", json={"email": "not-an-email", "password": "secret123"})
    assert resp.status_code == 422


def test_login_and_session(client):
    signup(client)
    resp = client.post("/auth/login", json={"email": "maker@example.com", "password": "secret123"})
    assert resp.status_code == 200
    token = resp.json()["access_token"]

    me = client.get("/auth/session", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["email"] == "maker@example.com"


def test_login_wrong_password(client):
    signup(client)
    resp = client.post("/auth/login", json={"email": "maker@example.com", "password": "wrong-one"})
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Invalid email or password."


def test_login_recreates_missing_profile(client, db):
    _, user_id = signup(client)
    db.delete(db.get(Artisan, user_id))
    db.commit()

    resp = client.post("/auth/login", json={"email": "maker@example.com", "password": "secret123"})
    assert resp.status_code == 200
    db.expire_all()
    assert db.get(Artisan, user_id) is not None


@pytest.mark.parametrize("headers", [{}, {"Authorization": "Bearer garbage"}, {"Authorization": "Basic abc"}])
def test_dashboard_requires_valid_session(client, headers):
    resp = client.get("/dashboard/products", headers=headers)
    assert resp.status_code == 401
    assert resp.json()["code"] == "auth/invalid-session"


def test_change_password(client, artisan):
    headers, _ = artisan
    resp = client.post("/auth/password", json={"password": "newpass1", "confirm_password": "newpass1"}, headers=headers)
    assert resp.status_code == 200

    old = client.post("/auth/login", json={"email": "maker@example.com", "password": "secret123"})
    assert old.status_code == 401
    new = client.post("/auth/login", json={"email": "maker@example.com", "password": "newpass1"})
    assert new.status_code == 200


def test_change_password_mismatch(client, artisan):
    headers, _ = artisan
    resp = client.post("/auth/password", json={"password": "newpass1", "confirm_password": "newpass2"}, headers=headers)
    assert resp.status_code == 422
    assert "Passwords do not match." in resp.text


def test_error_message_mapping():
    assert auth.auth_error_message("auth/invalid-credential") == "Invalid email or password."
    assert auth.auth_error_message("auth/something-else") == auth.GENERIC_MESSAGE
    assert auth.auth_error_message(None) == auth.GENERIC_MESSAGE
    assert auth.AuthError("auth/weak-password").message.startswith("The password is too weak")


def test_password_hashing_roundtrip():
    hashed = auth.hash_password("secret123")
    assert hashed != "secret123"
    assert auth.verify_password("secret123", hashed)
    assert not auth.verify_password("secret124", hashed)
    assert not auth.verify_password("secret123", "not-a-bcrypt-hash")


def test_token_for_deleted_user_is_rejected(db):
    user = User(email="gone@example.com", password_hash=auth.hash_password("secret123"))
    db.add(user)
    db.commit()
    token, _ = auth.create_token(user)
    db.delete(user)
    db.commit()

    with pytest.raises(auth.AuthError) as exc:
        auth.user_from_token(db, token)
    assert exc.value.code == "auth/invalid-session"
