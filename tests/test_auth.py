"""
Tests for registration, login and the user endpoints
"""
import pytest
from fastapi.testclient import TestClient

from jingjai.core.security import create_access_token, get_password_hash, verify_password
from jingjai.models.user import User, UserRole

API = "/api/v1"


@pytest.mark.unit
def test_verify_password(password):
    hashed = get_password_hash(password)
    assert verify_password(password, hashed)
    assert not verify_password("wrong", hashed)
    assert not verify_password(password, None)


@pytest.mark.integration
class TestAuthEndpoints:
    def test_register(self, anon_client):
        response = anon_client.post(
            f"{API}/auth/register",
            json={"email": "new@jingjai.co", "password": "pw-123456", "full_name": "New Hire"},
        )
        assert response.status_code == 200
        body = response.json()
        assert body["email"] == "new@jingjai.co"
        assert body["roles"] == ["staff"]
        assert "password" not in body

    def test_register_duplicate(self, anon_client, staff_user):
        response = anon_client.post(
            f"{API}/auth/register", json={"email": staff_user.email, "password": "x"}
        )
        assert response.status_code == 409
        assert response.json()["error"]["kind"] == "already-exists"

    def test_login_and_use_token(self, anon_client, staff_user, password):
        response = anon_client.post(
            f"{API}/auth/login", data={"username": staff_user.email, "password": password}
        )
        assert response.status_code == 200
        token = response.json()["access_token"]
        assert "access_token" in response.cookies

        me = anon_client.get(f"{API}/users/me", headers={"Authorization": f"Bearer {token}"})
        assert me.json()["email"] == staff_user.email

    def test_login_wrong_password(self, anon_client, staff_user):
        response = anon_client.post(
            f"{API}/auth/login", data={"username": staff_user.email, "password": "nope"}
        )
        assert response.status_code == 401
        assert response.json()["error"]["kind"] == "unauthenticated"

    def test_token_for_deleted_user(self, app, db):
        user = User(email="gone@jingjai.co")
        db.add(user)
        db.commit()
        token = create_access_token(user.email)
        db.delete(user)
        db.commit()

        client = TestClient(app, headers={"Authorization": f"Bearer {token}"})
        assert client.get(f"{API}/users/me").status_code == 401


@pytest.mark.integration
class TestUserEndpoints:
    def test_update_me(self, api, db, staff_user):
        response = api.put(f"{API}/users/me", json={"full_name": "Renamed", "password": "new-pass-1"})
        assert response.json()["full_name"] == "Renamed"
        db.refresh(staff_user)
        assert verify_password("new-pass-1", staff_user.password)

    def test_admin_only_listing(self, api):
        response = api.get(f"{API}/users")
        assert response.status_code == 403
        assert response.json()["error"]["kind"] == "permission-denied"

    def test_admin_creates_user(self, app, db):
        admin = User(email="boss@jingjai.co", roles=[UserRole.STAFF, UserRole.ADMIN])
        db.add(admin)
        db.commit()
        client = TestClient(app, headers={"Authorization": f"Bearer {create_access_token(admin.email)}"})

        response = client.post(
            f"{API}/users", json={"email": "crew@jingjai.co", "password": "pw", "roles": ["staff"]}
        )
        assert response.status_code == 200
        emails = [u["email"] for u in client.get(f"{API}/users").json()]
        assert sorted(emails) == ["boss@jingjai.co", "crew@jingjai.co"]
