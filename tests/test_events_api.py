"""HTTP tests for /api/v1/events.

Run with: pytest tests/test_events_api.py -v
"""

from datetime import date, timedelta

from app.models.user_models import UserRole


def event_payload(**overrides) -> dict:
    payload = {
        "title": "Robotics Meetup",
        "description": "Show and tell",
        "category": "Meetup",
        "event_date": (date.today() + timedelta(days=10)).isoformat(),
        "start_time": "10:00:00",
        "end_time": "12:00:00",
        "location": "Lab 3",
        "max_attendees": 2,
        "tags": ["robots", " robots ", ""],
    }
    payload.update(overrides)
    return payload


class TestCreateEvent:
    def test_admin_creates_event(self, client, make_user, auth_headers):
        admin = make_user(role=UserRole.ADMIN)

        response = client.post("/api/v1/events", json=event_payload(), headers=auth_headers(admin))

        assert response.status_code == 201
        body = response.json()
        assert body["current_attendees"] == 0
        assert body["available_spots"] == 2
        assert body["is_registration_open"] is True
        assert body["organizer"]["id"] == admin.id
        assert body["tags"] == ["robots"]

    def test_student_cannot_create(self, client, make_user, auth_headers):
        response = client.post("/api/v1/events", json=event_payload(), headers=auth_headers(make_user()))

        assert response.status_code == 403

    def test_end_before_start_is_rejected(self, client, make_user, auth_headers):
        admin = make_user(role=UserRole.ADMIN)

        response = client.post(
            "/api/v1/events",
            json=event_payload(start_time="12:00:00", end_time="10:00:00"),
            headers=auth_headers(admin),
        )

        assert response.status_code == 400

    def test_counter_cannot_be_set_by_client(self, client, make_user, auth_headers):
        admin = make_user(role=UserRole.ADMIN)

        response = client.post(
            "/api/v1/events",
            json=event_payload(current_attendees=2),
            headers=auth_headers(admin),
        )

        assert response.status_code == 201
        assert response.json()["current_attendees"] == 0


class TestReadEvents:
    def test_list_is_public_and_paged(self, client, make_user, make_event):
        organizer = make_user()
        for i in range(3):
            make_event(organizer, title=f"Event {i}")

        response = client.get("/api/v1/events", params={"page": 0, "size": 2})

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 3
        assert len(body["items"]) == 2
        assert body["page"] == 0 and body["size"] == 2

    def test_inactive_events_are_hidden(self, client, make_user, make_event):
        event = make_event(make_user(), is_active=False)

        assert client.get(f"/api/v1/events/{event.id}").status_code == 404
        assert client.get("/api/v1/events").json()["total"] == 0

    def test_bad_sort_field(self, client):
        response = client.get("/api/v1/events", params={"sort_by": "password_hash"})

        assert response.status_code == 400

    def test_is_registered_for_caller(self, client, make_user, make_event, auth_headers):
        user = make_user()
        event = make_event(make_user())
        headers = auth_headers(user)
        client.post(f"/api/v1/events/{event.id}/register", headers=headers)

        assert client.get(f"/api/v1/events/{event.id}", headers=headers).json()["is_registered"] is True
        assert client.get(f"/api/v1/events/{event.id}").json()["is_registered"] is False

    def test_search_category_and_categories(self, client, make_user, make_event):
        organizer = make_user()
        make_event(organizer, title="Python Workshop", category="Workshop")
        make_event(organizer, title="Chess Night", category="Social")

        search = client.get("/api/v1/events/search", params={"q": "python"}).json()
        by_category = client.get("/api/v1/events/category/Social").json()
        categories = client.get("/api/v1/events/categories").json()

        assert [e["title"] for e in search["items"]] == ["Python Workshop"]
        assert [e["title"] for e in by_category["items"]] == ["Chess Night"]
        assert categories == ["Social", "Workshop"]

    def test_upcoming_excludes_past(self, client, make_user, make_event):
        organizer = make_user()
        make_event(organizer, title="Later")
        make_event(organizer, title="Earlier", event_date=date.today() - timedelta(days=3))

        titles = [e["title"] for e in client.get("/api/v1/events/upcoming").json()["items"]]

        assert titles == ["Later"]

    def test_featured(self, client, make_user, make_event):
        organizer = make_user()
        make_event(organizer, title="Big One", is_featured=True)
        make_event(organizer, title="Small One")

        titles = [e["title"] for e in client.get("/api/v1/events/featured").json()["items"]]

        assert titles == ["Big One"]


class TestRegistrationEndpoints:
    def test_register_and_unregister(self, client, make_user, make_event, auth_headers):
        event = make_event(make_user(), max_attendees=2)
        headers = auth_headers(make_user())

        registered = client.post(f"/api/v1/events/{event.id}/register", headers=headers)
        assert registered.status_code == 201
        assert client.get(f"/api/v1/events/{event.id}").json()["current_attendees"] == 1

        mine = client.get("/api/v1/events/my-registrations", headers=headers).json()
        assert [e["id"] for e in mine["items"]] == [event.id]

        unregistered = client.delete(f"/api/v1/events/{event.id}/register", headers=headers)
        assert unregistered.status_code == 200
        assert client.get(f"/api/v1/events/{event.id}").json()["current_attendees"] == 0

    def test_register_requires_login(self, client, make_user, make_event):
        event = make_event(make_user())

        assert client.post(f"/api/v1/events/{event.id}/register").status_code == 401

    def test_duplicate_is_409(self, client, make_user, make_event, auth_headers):
        event = make_event(make_user())
        headers = auth_headers(make_user())
        client.post(f"/api/v1/events/{event.id}/register", headers=headers)

        response = client.post(f"/api/v1/events/{event.id}/register", headers=headers)

        assert response.status_code == 409

    def test_full_event_is_422(self, client, make_user, make_event, auth_headers):
        event = make_event(make_user(), max_attendees=1)
        client.post(f"/api/v1/events/{event.id}/register", headers=auth_headers(make_user()))

        response = client.post(f"/api/v1/events/{event.id}/register", headers=auth_headers(make_user()))

        assert response.status_code == 422
        assert response.json()["error"] == "Business Logic Error"

    def test_past_event_is_422(self, client, make_user, make_event, auth_headers):
        event = make_event(make_user(), event_date=date.today() - timedelta(days=2))

        response = client.post(f"/api/v1/events/{event.id}/register", headers=auth_headers(make_user()))

        assert response.status_code == 422

    def test_unregister_without_registration_is_422(self, client, make_user, make_event, auth_headers):
        event = make_event(make_user())

        response = client.delete(f"/api/v1/events/{event.id}/register", headers=auth_headers(make_user()))

        assert response.status_code == 422


class TestUpdateAndDelete:
    def test_organizer_updates(self, client, make_user, make_event, auth_headers):
        organizer = make_user()
        event = make_event(organizer)

        response = client.put(
            f"/api/v1/events/{event.id}", json={"title": "Renamed"}, headers=auth_headers(organizer)
        )

        assert response.status_code == 200
        assert response.json()["title"] == "Renamed"

    def test_other_student_cannot_update(self, client, make_user, make_event, auth_headers):
        event = make_event(make_user())

        response = client.put(
            f"/api/v1/events/{event.id}", json={"title": "Mine now"}, headers=auth_headers(make_user())
        )

        assert response.status_code == 403

    def test_capacity_cannot_drop_below_attendance(self, client, make_user, make_event, auth_headers):
        organizer = make_user()
        event = make_event(organizer, max_attendees=5, current_attendees=3)

        response = client.put(
            f"/api/v1/events/{event.id}", json={"max_attendees": 2}, headers=auth_headers(organizer)
        )

        assert response.status_code == 400

    def test_admin_soft_deletes(self, client, db, make_user, make_event, auth_headers):
        event = make_event(make_user())
        admin = make_user(role=UserRole.ADMIN)

        response = client.delete(f"/api/v1/events/{event.id}", headers=auth_headers(admin))

        assert response.status_code == 204
        db.refresh(event)
        assert event.is_active is False
