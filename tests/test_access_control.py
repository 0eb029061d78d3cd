"""Tests for access rule evaluation and the bearer-token dependencies.

Run with: pytest tests/test_access_control.py -v
"""

import pytest

from app.models.user_models import UserRole
from app.services.access_control import (
    ADMIN_ONLY,
    ADMIN_OR_SELF,
    AUTHENTICATED,
    PUBLIC,
    Decision,
    evaluate,
    is_owner_or_admin,
)
from app.services.principal_resolver import Principal
from app.services.token_service import TokenKind


def principal(id: int = 1, role: UserRole = UserRole.STUDENT) -> Principal:
    return Principal(
        id=id,
        email=f"u{id}@campus.edu",
        username=f"u{id}",
        role=role,
        is_active=True,
        email_verified=False,
    )


class TestEvaluate:
    def test_public_allows_anonymous(self):
        assert evaluate(PUBLIC, None) == Decision.ALLOW

    @pytest.mark.parametrize("rule", [AUTHENTICATED, ADMIN_ONLY, ADMIN_OR_SELF])
    def test_anonymous_is_unauthenticated(self, rule):
        assert evaluate(rule, None, target_id=1) == Decision.UNAUTHENTICATED

    def test_authenticated_any(self):
        assert evaluate(AUTHENTICATED, principal()) == Decision.ALLOW

    def test_requires_role(self):
        assert evaluate(ADMIN_ONLY, principal(role=UserRole.ADMIN)) == Decision.ALLOW
        assert evaluate(ADMIN_ONLY, principal(role=UserRole.STUDENT)) == Decision.FORBIDDEN

    def test_role_or_self_for_student(self):
        """A student passes only when the target is themself."""
        student = principal(id=7)

        assert evaluate(ADMIN_OR_SELF, student, target_id=7) == Decision.ALLOW
        assert evaluate(ADMIN_OR_SELF, student, target_id=8) == Decision.FORBIDDEN
        assert evaluate(ADMIN_OR_SELF, student, target_id=None) == Decision.FORBIDDEN

    def test_role_or_self_for_admin(self):
        assert evaluate(ADMIN_OR_SELF, principal(id=1, role=UserRole.ADMIN), target_id=99) == Decision.ALLOW

    def test_unknown_rule(self):
        with pytest.raises(TypeError):
            evaluate(object(), principal())

    def test_owner_or_admin(self):
        assert is_owner_or_admin(principal(id=3), 3)
        assert not is_owner_or_admin(principal(id=3), 4)
        assert is_owner_or_admin(principal(id=3, role=UserRole.ADMIN), 4)


class TestBearerDependencies:
    """401 versus 403 at the HTTP boundary."""

    def test_missing_token_is_401(self, client):
        response = client.get("/api/v1/users/me")

        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"
        assert response.json()["status"] == 401

    def test_garbage_token_is_401(self, client):
        response = client.get("/api/v1/users/me", headers={"Authorization": "Bearer nope"})

        assert response.status_code == 401

    def test_refresh_token_is_not_an_access_token(self, client, codec, make_user):
        user = make_user()
        refresh = codec.issue(user.id, user.role, TokenKind.REFRESH)

        response = client.get("/api/v1/users/me", headers={"Authorization": f"Bearer {refresh}"})

        assert response.status_code == 401

    def test_valid_token_for_inactive_user_is_401(self, client, db, make_user, auth_headers):
        user = make_user()
        headers = auth_headers(user)
        user.is_active = False
        db.commit()

        assert client.get("/api/v1/users/me", headers=headers).status_code == 401

    def test_student_on_admin_route_is_403(self, client, make_user, auth_headers):
        response = client.get("/api/v1/users", headers=auth_headers(make_user()))

        assert response.status_code == 403
        body = response.json()
        assert body["error"] == "Access Denied"
        assert "ADMIN" not in body["message"]

    def test_admin_on_admin_route(self, client, make_user, auth_headers):
        admin = make_user(role=UserRole.ADMIN)

        assert client.get("/api/v1/users", headers=auth_headers(admin)).status_code == 200

    def test_self_update_allowed_other_forbidden(self, client, make_user, auth_headers):
        me = make_user()
        other = make_user()
        headers = auth_headers(me)

        own = client.put(f"/api/v1/users/{me.id}", json={"bio": "hello"}, headers=headers)
        theirs = client.put(f"/api/v1/users/{other.id}", json={"bio": "hi"}, headers=headers)

        assert own.status_code == 200
        assert own.json()["bio"] == "hello"
        assert theirs.status_code == 403

    def test_public_route_ignores_bad_token(self, client):
        response = client.get("/api/v1/events", headers={"Authorization": "Bearer nope"})

        assert response.status_code == 200
