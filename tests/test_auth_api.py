from datetime import timedelta

import pytest

from churchfinder.core.security import create_access_token
from churchfinder.models.user import UserStatus


pytestmark = pytest.mark.api

SIGNUP = {
    "email": "Newcomer@Example.com",
    "password": "s3cure-passw0rd",
    "display_name": "Newcomer",
    "home_latitude": 39.74,
    "home_longitude": -104.99,
    "home_city": "Denver",
    "home_state": "CO",
}


class TestSignup:
    def test_signup_returns_token_and_user(self, client):
        response = client.post("/api/auth/signup", json=SIGNUP)
        assert response.status_code == 201
        body = response.json()
        assert body["token_type"] == "bearer"
        assert body["user"]["email"] == "newcomer@example.com"
        assert body["user"]["role"] == "user"
        assert body["user"]["home_city"] == "Denver"

        me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {body['access_token']}"})
        assert me.status_code == 200
        assert me.json()["display_name"] == "Newcomer"

    def test_duplicate_email_conflicts(self, client):
        assert client.post("/api/auth/signup", json=SIGNUP).status_code == 201
        again = dict(SIGNUP, email="newcomer@example.com")
        assert client.post("/api/auth/signup", json=again).status_code == 409

    def test_short_password_is_rejected(self, client):
        assert client.post("/api/auth/signup", json=dict(SIGNUP, password="short")).status_code == 422

    def test_half_a_home_location_is_rejected(self, client):
        payload = dict(SIGNUP)
        payload.pop("home_longitude")
        assert client.post("/api/auth/signup", json=payload).status_code == 422

    def test_invalid_email_is_rejected(self, client):
        assert client.post("/api/auth/signup", json=dict(SIGNUP, email="not-an-email")).status_code == 422


class TestLogin:
    def test_login_with_valid_credentials(self, client, make_user, user_password):
        make_user(email="member@example.com")
        response = client.post("/api/auth/login", data={"username": "Member@example.com", "password": user_password})
        assert response.status_code == 200
        body = response.json()
        assert body["access_token"]
        assert body["user"]["email"] == "member@example.com"

    def test_wrong_password(self, client, make_user):
        make_user(email="member@example.com")
        response = client.post("/api/auth/login", data={"username": "member@example.com", "password": "nope-nope"})
        assert response.status_code == 401
        assert response.json()["detail"] == "Incorrect email or password"

    def test_unknown_user(self, client, user_password):
        response = client.post("/api/auth/login", data={"username": "ghost@example.com", "password": user_password})
        assert response.status_code == 401

    def test_disabled_account(self, client, make_user, user_password):
        make_user(email="gone@example.com", status=UserStatus.DISABLED)
        response = client.post("/api/auth/login", data={"username": "gone@example.com", "password": user_password})
        assert response.status_code == 403


class TestTokens:
    def test_me_requires_token(self, client):
        assert client.get("/api/auth/me").status_code == 401

    def test_garbage_token(self, client):
        response = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401

    def test_expired_token(self, client, make_user):
        user, _ = make_user()
        token = create_access_token(user.id, expires_delta=timedelta(minutes=-1))
        response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401
        assert response.json()["detail"] == "Token has expired"

    def test_token_for_deleted_user(self, client):
        token = create_access_token("00000000-0000-0000-0000-000000000000")
        response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 404

    def test_token_with_non_uuid_subject(self, client):
        token = create_access_token("42")
        response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 403
