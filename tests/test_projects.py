"""Tests for projects, likes and comments.

Run with: pytest tests/test_projects.py -v
"""

import threading
from datetime import timedelta

import pytest

from app.core.exceptions import ForbiddenError, NotFoundError
from app.crud import project as project_crud
from app.models.project_models import ProjectComment, ProjectLike
from app.models.user_models import UserRole
from app.schemas.project_schemas import ProjectUpdateSchema
from app.services import project_service
from app.services.principal_resolver import Principal
from app.utils.clock import utcnow


class TestToggleLike:
    def test_like_then_unlike(self, db, make_user, make_project):
        user = make_user()
        project = make_project(make_user())
        principal = Principal.from_user(user)

        liked = project_service.toggle_like(db, project.id, principal)
        unliked = project_service.toggle_like(db, project.id, principal)

        assert (liked.liked, liked.likes_count) == (True, 1)
        assert (unliked.liked, unliked.likes_count) == (False, 0)
        assert not project_crud.exists_like(db, user.id, project.id)

    def test_likes_from_different_users(self, db, make_user, make_project):
        project = make_project(make_user())

        for _ in range(3):
            project_service.toggle_like(db, project.id, Principal.from_user(make_user()))

        db.refresh(project)
        assert project.likes_count == 3

    def test_unlike_never_goes_negative(self, db, make_user, make_project):
        """A stale like row with a zero counter does not drive the count below zero."""
        user = make_user()
        project = make_project(make_user(), likes_count=0)
        db.add(ProjectLike(project_id=project.id, user_id=user.id))
        db.commit()

        result = project_service.toggle_like(db, project.id, Principal.from_user(user))

        assert result.liked is False
        assert result.likes_count == 0

    def test_like_over_http(self, client, make_user, make_project, auth_headers):
        user = make_user()
        project = make_project(make_user())
        headers = auth_headers(user)

        response = client.post(f"/api/v1/projects/{project.id}/like", headers=headers)

        assert response.status_code == 200
        assert response.json()["liked"] is True
        assert client.get(f"/api/v1/projects/{project.id}", headers=headers).json()["is_liked"] is True


class TestProjectCrud:
    def test_create_defaults(self, client, make_user, auth_headers):
        response = client.post(
            "/api/v1/projects",
            json={
                "title": "Study Buddy",
                "description": "Match students for study sessions",
                "category": "Mobile",
                "difficulty_level": "INTERMEDIATE",
                "required_skills": ["flutter"],
            },
            headers=auth_headers(make_user()),
        )

        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "SEEKING_COLLABORATORS"
        assert body["likes_count"] == 0
        assert body["is_owner"] is True

    def test_get_counts_views(self, client, make_user, make_project):
        project = make_project(make_user())

        client.get(f"/api/v1/projects/{project.id}")
        response = client.get(f"/api/v1/projects/{project.id}")

        assert response.json()["views_count"] == 2

    def test_only_owner_updates(self, db, make_user, make_project):
        owner = make_user()
        admin = make_user(role=UserRole.ADMIN)
        project = make_project(owner)

        payload = ProjectUpdateSchema(status="IN_DEVELOPMENT")
        updated = project_service.update_project(db, project.id, payload, Principal.from_user(owner))

        assert updated.status.value == "IN_DEVELOPMENT"
        with pytest.raises(ForbiddenError):
            project_service.update_project(db, project.id, payload, Principal.from_user(admin))

    def test_admin_can_delete(self, client, db, make_user, make_project, auth_headers):
        project = make_project(make_user())

        other = client.delete(f"/api/v1/projects/{project.id}", headers=auth_headers(make_user()))
        admin = client.delete(
            f"/api/v1/projects/{project.id}", headers=auth_headers(make_user(role=UserRole.ADMIN))
        )

        assert other.status_code == 403
        assert admin.status_code == 204
        assert client.get(f"/api/v1/projects/{project.id}").status_code == 404

    def test_filters_and_facets(self, client, make_user, make_project):
        owner = make_user()
        make_project(owner, title="A", category="Web", tags=["maps", "ui"], required_skills=["js"])
        make_project(owner, title="B", category="AI", tags=["ml"], required_skills=["python"], is_featured=True)

        assert client.get("/api/v1/projects/categories").json() == ["AI", "Web"]
        assert client.get("/api/v1/projects/tags").json() == ["maps", "ml", "ui"]
        assert client.get("/api/v1/projects/skills").json() == ["js", "python"]
        assert [p["title"] for p in client.get("/api/v1/projects/featured").json()["items"]] == ["B"]
        assert [p["title"] for p in client.get("/api/v1/projects/category/Web").json()["items"]] == ["A"]
        assert client.get(f"/api/v1/projects/owner/{owner.id}").json()["total"] == 2
        assert client.get("/api/v1/projects/status/SEEKING_COLLABORATORS").json()["total"] == 2
        assert client.get("/api/v1/projects/difficulty/ADVANCED").json()["total"] == 0

    def test_trending_counts_recent_likes_only(self, db, make_user, make_project):
        owner = make_user()
        old_favourite = make_project(owner, title="Old")
        rising = make_project(owner, title="Rising")
        now = utcnow()

        for _ in range(3):
            db.add(ProjectLike(project_id=old_favourite.id, user_id=make_user().id, created_at=now - timedelta(days=30)))
        db.add(ProjectLike(project_id=rising.id, user_id=make_user().id, created_at=now - timedelta(days=1)))
        db.commit()

        page = project_service.trending_projects(db, None, 0, 10, now=now)

        assert [p.title for p in page.items][0] == "Rising"
        assert page.total == 2


class TestComments:
    def test_comment_and_reply(self, client, db, make_user, make_project, auth_headers):
        project = make_project(make_user())
        headers = auth_headers(make_user())

        top = client.post(
            f"/api/v1/projects/{project.id}/comments", json={"content": "Nice idea"}, headers=headers
        ).json()
        reply = client.post(
            f"/api/v1/projects/{project.id}/comments",
            json={"content": "Agreed", "parent_comment_id": top["id"]},
            headers=headers,
        )

        assert reply.status_code == 201
        listing = client.get(f"/api/v1/projects/{project.id}/comments").json()
        assert listing["total"] == 1
        assert [r["content"] for r in listing["items"][0]["replies"]] == ["Agreed"]

        db.refresh(project)
        assert project.comments_count == 2

    def test_reply_to_other_project_is_rejected(self, client, make_user, make_project, auth_headers):
        owner = make_user()
        first = make_project(owner)
        second = make_project(owner)
        headers = auth_headers(make_user())
        top = client.post(
            f"/api/v1/projects/{first.id}/comments", json={"content": "Hi"}, headers=headers
        ).json()

        response = client.post(
            f"/api/v1/projects/{second.id}/comments",
            json={"content": "Wrong place", "parent_comment_id": top["id"]},
            headers=headers,
        )

        assert response.status_code == 400

    def test_blank_comment(self, client, make_user, make_project, auth_headers):
        project = make_project(make_user())

        response = client.post(
            f"/api/v1/projects/{project.id}/comments",
            json={"content": "   "},
            headers=auth_headers(make_user()),
        )

        assert response.status_code == 400

    def test_author_deletes_comment(self, client, db, make_user, make_project, auth_headers):
        project = make_project(make_user())
        author = make_user()
        comment = client.post(
            f"/api/v1/projects/{project.id}/comments",
            json={"content": "Oops"},
            headers=auth_headers(author),
        ).json()

        stranger = client.delete(
            f"/api/v1/projects/{project.id}/comments/{comment['id']}",
            headers=auth_headers(make_user()),
        )
        own = client.delete(
            f"/api/v1/projects/{project.id}/comments/{comment['id']}",
            headers=auth_headers(author),
        )

        assert stranger.status_code == 403
        assert own.status_code == 204
        db.refresh(project)
        assert project.comments_count == 0


def run_in_lockstep(session_factory, monkeypatch, lookup_name, action, count=2):
    """Run `action(session)` in `count` threads that all pass `lookup_name` before any writes."""
    original = getattr(project_crud, lookup_name)
    barrier = threading.Barrier(count)

    def lookup_then_wait(*args, **kwargs):
        found = original(*args, **kwargs)
        barrier.wait()
        return found

    monkeypatch.setattr(project_crud, lookup_name, lookup_then_wait)

    outcomes = []
    lock = threading.Lock()

    def attempt():
        session = session_factory()
        try:
            action(session)
            result = "ok"
        except NotFoundError:
            result = "not_found"
        finally:
            session.close()
        with lock:
            outcomes.append(result)

    threads = [threading.Thread(target=attempt) for _ in range(count)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    return outcomes


class TestConcurrentCounters:
    def test_double_unlike_decrements_once(self, session_factory, monkeypatch, db, make_user, make_project):
        """Two simultaneous unlikes by one user remove one like, not two."""
        liker = make_user()
        other = make_user()
        project = make_project(make_user(), likes_count=2)
        db.add_all([
            ProjectLike(project_id=project.id, user_id=liker.id),
            ProjectLike(project_id=project.id, user_id=other.id),
        ])
        db.commit()
        principal = Principal.from_user(liker)
        project_id = project.id

        outcomes = run_in_lockstep(
            session_factory,
            monkeypatch,
            "exists_like",
            lambda session: project_service.toggle_like(session, project_id, principal),
        )

        assert outcomes == ["ok", "ok"]
        db.expire_all()
        db.refresh(project)
        rows = db.query(ProjectLike).filter(ProjectLike.project_id == project.id).count()
        assert rows == 1
        assert project.likes_count == rows

    def test_double_comment_delete_decrements_once(
        self, session_factory, monkeypatch, db, make_user, make_project
    ):
        """Two simultaneous deletes of one comment: one wins, the other gets NotFound."""
        author = make_user()
        project = make_project(make_user(), comments_count=2)
        doomed = ProjectComment(project_id=project.id, user_id=author.id, content="first", is_active=True)
        kept = ProjectComment(project_id=project.id, user_id=author.id, content="second", is_active=True)
        db.add_all([doomed, kept])
        db.commit()
        principal = Principal.from_user(author)
        project_id, comment_id = project.id, doomed.id

        outcomes = run_in_lockstep(
            session_factory,
            monkeypatch,
            "find_active_comment",
            lambda session: project_service.delete_comment(session, project_id, comment_id, principal),
        )

        assert sorted(outcomes) == ["not_found", "ok"]
        db.expire_all()
        db.refresh(project)
        live = (
            db.query(ProjectComment)
            .filter(ProjectComment.project_id == project.id, ProjectComment.is_active.is_(True))
            .count()
        )
        assert live == 1
        assert project.comments_count == live

    def test_deleting_inactive_comment_is_not_found(self, db, make_user, make_project):
        author = make_user()
        project = make_project(make_user(), comments_count=0)
        comment = ProjectComment(project_id=project.id, user_id=author.id, content="gone", is_active=True)
        db.add(comment)
        db.commit()

        assert project_crud.deactivate_comment(db, comment.id) is True
        assert project_crud.deactivate_comment(db, comment.id) is False
        db.commit()

        with pytest.raises(NotFoundError):
            project_service.delete_comment(db, project.id, comment.id, Principal.from_user(author))
