"""Principal resolver and user directory endpoints."""

import jwt
import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

from taskdesk.auth import principal_from_claims
from taskdesk.errors import Unauthenticated
from taskdesk.models import Role, User


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


class TestPrincipalResolver:
    def test_valid_token_resolves_principal(self, client: TestClient, make_token):
        response = client.get("/api/users/me", headers=bearer(make_token("dana", "admin")))
        assert response.status_code == 200
        data = response.json()
        assert data["id"] == "dana"
        assert data["role"] == "admin"
        assert data["email"] == "dana@example.com"

    def test_missing_token(self, client: TestClient):
        response = client.get("/api/users/me")
        assert response.status_code == 401
        assert response.json()["error"] == "unauthenticated"

    def test_wrong_scheme(self, client: TestClient, make_token):
        response = client.get("/api/users/me", headers={"Authorization": f"Basic {make_token('dana')}"})
        assert response.status_code == 401

    def test_expired_token(self, client: TestClient, make_token):
        response = client.get("/api/users/me", headers=bearer(make_token("dana", expires_in=-60)))
        assert response.status_code == 401
        assert response.json()["message"] == "Token has expired"

    def test_bad_signature(self, client: TestClient):
        token = jwt.encode({"sub": "dana", "role": "admin"}, "not-the-secret", algorithm="HS256")
        response = client.get("/api/users/me", headers=bearer(token))
        assert response.status_code == 401
        assert response.json()["message"] == "Invalid token"

    def test_unknown_role(self, client: TestClient, make_token):
        response = client.get("/api/users/me", headers=bearer(make_token("dana", role="superuser")))
        assert response.status_code == 401

    def test_principal_from_claims_defaults_to_user_role(self):
        principal = principal_from_claims({"sub": "erin"})
        assert principal.id == "erin"
        assert principal.role == Role.user
        assert not principal.is_admin

    @pytest.mark.parametrize("claims", [{}, {"sub": ""}, {"role": "admin"}])
    def test_principal_from_claims_requires_subject(self, claims: dict):
        with pytest.raises(Unauthenticated):
            principal_from_claims(claims)


class TestUserDirectory:
    def test_directory_entry_refreshed_from_claims(self, client: TestClient, session: Session, make_token):
        client.get("/api/users/me", headers=bearer(make_token("frank", username="frank")))
        client.get(
            "/api/users/me",
            headers=bearer(make_token("frank", "admin", username="Frank F", email="ff@example.com")),
        )
        user = session.get(User, "frank")
        session.refresh(user)
        assert user.username == "Frank F"
        assert user.email == "ff@example.com"
        assert user.role == Role.admin

    def test_admin_lists_users(self, client: TestClient, admin: dict, alice: dict, bob: dict):
        response = client.get("/api/users/", headers=admin)
        assert response.status_code == 200
        assert [user["id"] for user in response.json()] == ["alice", "bob", "root"]

    def test_non_admin_cannot_list_users(self, client: TestClient, alice: dict):
        response = client.get("/api/users/", headers=alice)
        assert response.status_code == 403
        assert response.json()["error"] == "access_denied"
