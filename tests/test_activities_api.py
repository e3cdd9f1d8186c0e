from datetime import datetime

import pytest

from campus_events.core.errors import NotFoundError
from campus_events.crud import activity as activity_crud
from campus_events.db.models import Activity, ActivityStatus, Like

MISSING_ID = "00000000-0000-0000-0000-000000000000"


def activity_payload(category, **overrides):
    payload = {
        "title": "Open Mic Night",
        "description": "Bring your guitar.",
        "location": "Courtyard",
        "startTime": "2030-03-01T19:00:00Z",
        "endTime": "2030-03-01T21:00:00Z",
        "categoryId": category.id,
        "tags": ["music", "social"],
    }
    payload.update(overrides)
    return payload


class TestCreateActivity:
    def test_author_is_caller(self, client, student, category, auth_headers):
        response = client.post("/api/activities", json=activity_payload(category), headers=auth_headers(student))
        assert response.status_code == 201
        activity = response.json()["activity"]
        assert activity["author"]["id"] == student.id
        assert activity["authorId"] == student.id
        assert activity["category"]["name"] == "Sports"
        assert activity["status"] == "UPCOMING"
        assert sorted(activity["tags"]) == ["music", "social"]
        assert activity["isLiked"] is False
        assert activity["counts"] == {"comments": 0, "likes": 0}
        assert activity["startTime"] == "2030-03-01T19:00:00"
        assert datetime.fromisoformat(activity["endTime"]) > datetime.fromisoformat(activity["startTime"])

    @pytest.mark.parametrize("end_time", ["2030-03-01T19:00:00Z", "2030-03-01T18:00:00Z"])
    def test_end_time_must_follow_start_time(self, client, student, category, auth_headers, end_time):
        response = client.post(
            "/api/activities",
            json=activity_payload(category, endTime=end_time),
            headers=auth_headers(student)
        )
        assert response.status_code == 400
        assert response.json() == {"error": {"message": "End time must be after start time"}}

    def test_end_time_is_optional(self, client, student, category, auth_headers):
        payload = activity_payload(category)
        del payload["endTime"]
        response = client.post("/api/activities", json=payload, headers=auth_headers(student))
        assert response.status_code == 201
        assert response.json()["activity"]["endTime"] is None

    def test_unknown_category(self, client, student, category, auth_headers):
        response = client.post(
            "/api/activities",
            json=activity_payload(category, categoryId=MISSING_ID),
            headers=auth_headers(student)
        )
        assert response.status_code == 400
        assert response.json() == {"error": {"message": "Invalid category"}}

    def test_invalid_payload(self, client, student, category, auth_headers):
        response = client.post(
            "/api/activities",
            json=activity_payload(category, title="", maxAttendees=-1),
            headers=auth_headers(student)
        )
        assert response.status_code == 400
        message = response.json()["error"]["message"]
        assert "title: " in message
        assert "maxAttendees: " in message

    def test_oversized_location_is_rejected_before_storage(self, client, student, category, auth_headers):
        response = client.post(
            "/api/activities",
            json=activity_payload(category, location="x" * 256),
            headers=auth_headers(student)
        )
        assert response.status_code == 400
        assert response.json()["error"]["message"].startswith("Validation failed: location:")

    def test_requires_authentication(self, client, category):
        response = client.post("/api/activities", json=activity_payload(category))
        assert response.status_code == 401


class TestListActivities:
    def test_cancelled_hidden_by_default(self, client, student, category, make_activity):
        visible = make_activity(student, category)
        make_activity(student, category, status=ActivityStatus.CANCELLED)

        body = client.get("/api/activities").json()
        assert [activity["id"] for activity in body["activities"]] == [visible.id]
        assert body["pagination"]["total"] == 1

    def test_explicit_cancelled_status(self, client, student, category, make_activity):
        make_activity(student, category)
        cancelled = make_activity(student, category, status=ActivityStatus.CANCELLED)

        body = client.get("/api/activities", params={"status": "CANCELLED"}).json()
        assert [activity["id"] for activity in body["activities"]] == [cancelled.id]

    def test_pagination(self, client, student, category, make_activity):
        for _ in range(25):
            make_activity(student, category)

        first = client.get("/api/activities", params={"limit": 10, "page": 1}).json()
        assert len(first["activities"]) == 10
        assert first["pagination"] == {"page": 1, "limit": 10, "total": 25, "pages": 3}

        last = client.get("/api/activities", params={"limit": 10, "page": 3}).json()
        assert len(last["activities"]) == 5

        ids = {a["id"] for page in (1, 2, 3)
               for a in client.get("/api/activities", params={"limit": 10, "page": page}).json()["activities"]}
        assert len(ids) == 25

    def test_default_page_and_limit(self, client, student, category, make_activity):
        make_activity(student, category)
        body = client.get("/api/activities", params={"page": "abc"}).json()
        assert body["pagination"] == {"page": 1, "limit": 20, "total": 1, "pages": 1}

    def test_ordered_by_start_time(self, client, student, category, make_activity):
        later = make_activity(student, category, start_time=datetime(2030, 6, 1, 9))
        earlier = make_activity(student, category, start_time=datetime(2030, 2, 1, 9))

        body = client.get("/api/activities").json()
        assert [activity["id"] for activity in body["activities"]] == [earlier.id, later.id]

    def test_filter_by_category(self, client, student, category, make_category, make_activity):
        other = make_category(name="Academic")
        make_activity(student, category)
        match = make_activity(student, other)

        body = client.get("/api/activities", params={"category": other.id}).json()
        assert [activity["id"] for activity in body["activities"]] == [match.id]

    def test_filter_by_date_range_is_inclusive(self, client, student, category, make_activity):
        make_activity(student, category, start_time=datetime(2030, 1, 1, 9))
        on_lower = make_activity(student, category, start_time=datetime(2030, 2, 1, 9))
        on_upper = make_activity(student, category, start_time=datetime(2030, 3, 1, 9))
        make_activity(student, category, start_time=datetime(2030, 4, 1, 9))

        body = client.get("/api/activities", params={
            "startDate": "2030-02-01T09:00:00Z",
            "endDate": "2030-03-01T09:00:00Z",
        }).json()
        assert [activity["id"] for activity in body["activities"]] == [on_lower.id, on_upper.id]

        only_lower = client.get("/api/activities", params={"startDate": "2030-03-01T00:00:00Z"}).json()
        assert len(only_lower["activities"]) == 2

    def test_search_is_case_insensitive_across_fields(self, client, student, category, make_activity):
        by_title = make_activity(student, category, title="Jazz Ensemble")
        by_description = make_activity(student, category, description="Live JAZZ in the lounge")
        by_location = make_activity(student, category, location="Jazz Hall")
        make_activity(student, category, title="Chess Club")

        body = client.get("/api/activities", params={"search": "jazz"}).json()
        assert {activity["id"] for activity in body["activities"]} == {by_title.id, by_description.id, by_location.id}

    def test_search_treats_wildcards_literally(self, client, student, category, make_activity):
        discount = make_activity(student, category, title="50% off pizza")
        make_activity(student, category, title="Chess Club", description="Weekly games", location="Library")

        body = client.get("/api/activities", params={"search": "%"}).json()
        assert [activity["id"] for activity in body["activities"]] == [discount.id]

        body = client.get("/api/activities", params={"search": "5_"}).json()
        assert body["pagination"]["total"] == 0

    def test_filter_by_tags_matches_any(self, client, student, category, make_activity):
        music = make_activity(student, category, tags=["music"])
        both = make_activity(student, category, tags=["food", "music"])
        food = make_activity(student, category, tags=["food"])
        make_activity(student, category, tags=["sports"])

        body = client.get("/api/activities", params=[("tags", "music"), ("tags", "food")]).json()
        assert {activity["id"] for activity in body["activities"]} == {music.id, both.id, food.id}

        body = client.get("/api/activities", params={"tags": "music"}).json()
        assert {activity["id"] for activity in body["activities"]} == {music.id, both.id}

    def test_invalid_filter_is_400(self, client):
        response = client.get("/api/activities", params={"status": "POSTPONED"})
        assert response.status_code == 400
        assert response.json()["error"]["message"].startswith("Validation failed: status:")

    def test_is_liked_is_per_caller(self, client, student, other_student, category, make_activity, add_like,
                                    auth_headers):
        liked = make_activity(student, category)
        not_liked = make_activity(student, category)
        add_like(student, liked)

        mine = client.get("/api/activities", headers=auth_headers(student)).json()["activities"]
        assert {a["id"]: a["isLiked"] for a in mine} == {liked.id: True, not_liked.id: False}
        assert mine[0]["counts"]["likes"] == 1

        theirs = client.get("/api/activities", headers=auth_headers(other_student)).json()["activities"]
        assert all(a["isLiked"] is False for a in theirs)

        anonymous = client.get("/api/activities").json()["activities"]
        assert all(a["isLiked"] is False for a in anonymous)

    def test_optional_auth_ignores_bad_token(self, client, student, category, make_activity):
        make_activity(student, category)
        response = client.get("/api/activities", headers={"Authorization": "Bearer not-a-token"})
        assert response.status_code == 200
        assert len(response.json()["activities"]) == 1


class TestGetActivity:
    def test_includes_comments_newest_first(self, client, student, other_student, category, make_activity,
                                            add_comment, auth_headers):
        activity = make_activity(student, category)
        add_comment(other_student, activity, content="first")
        add_comment(student, activity, content="second")

        response = client.get(f"/api/activities/{activity.id}", headers=auth_headers(student))
        assert response.status_code == 200
        body = response.json()["activity"]
        assert body["id"] == activity.id
        assert body["counts"]["comments"] == 2
        assert {comment["content"] for comment in body["comments"]} == {"first", "second"}
        assert body["comments"][0]["author"]["username"] in {"student", "other"}

    def test_missing_activity(self, client):
        response = client.get(f"/api/activities/{MISSING_ID}")
        assert response.status_code == 404
        assert response.json() == {"error": {"message": "Activity not found"}}


class TestUpdateActivity:
    @pytest.mark.parametrize("editor", ["student", "senate", "admin"])
    def test_author_and_privileged_roles_may_update(self, request, client, student, category, make_activity,
                                                    auth_headers, editor):
        activity = make_activity(student, category)
        user = request.getfixturevalue(editor)

        response = client.put(
            f"/api/activities/{activity.id}",
            json={"title": "Renamed", "status": "ONGOING"},
            headers=auth_headers(user)
        )
        assert response.status_code == 200
        body = response.json()["activity"]
        assert body["title"] == "Renamed"
        assert body["status"] == "ONGOING"
        assert body["description"] == activity.description
        assert body["authorId"] == student.id

    def test_other_student_is_forbidden(self, client, student, other_student, category, make_activity, auth_headers):
        activity = make_activity(student, category)
        response = client.put(
            f"/api/activities/{activity.id}",
            json={"title": "Hijacked"},
            headers=auth_headers(other_student)
        )
        assert response.status_code == 403
        assert response.json() == {"error": {"message": "Not authorized to update this activity"}}

    def test_revalidates_effective_time_pair(self, client, student, category, make_activity, auth_headers):
        activity = make_activity(
            student, category,
            start_time=datetime(2030, 5, 1, 10),
            end_time=datetime(2030, 5, 1, 12)
        )
        headers = auth_headers(student)

        response = client.put(f"/api/activities/{activity.id}", json={"startTime": "2030-05-01T13:00:00Z"},
                              headers=headers)
        assert response.status_code == 400

        response = client.put(f"/api/activities/{activity.id}", json={"endTime": "2030-05-01T09:00:00Z"},
                              headers=headers)
        assert response.status_code == 400

        response = client.put(f"/api/activities/{activity.id}", json={"endTime": "2030-05-01T15:00:00Z"},
                              headers=headers)
        assert response.status_code == 200
        assert response.json()["activity"]["endTime"] == "2030-05-01T15:00:00"

    def test_replaces_tags(self, client, student, category, make_activity, auth_headers):
        activity = make_activity(student, category, tags=["music", "food"])
        response = client.put(f"/api/activities/{activity.id}", json={"tags": ["food", "art"]},
                              headers=auth_headers(student))
        assert response.status_code == 200
        assert sorted(response.json()["activity"]["tags"]) == ["art", "food"]

    def test_unknown_category(self, client, student, category, make_activity, auth_headers):
        activity = make_activity(student, category)
        response = client.put(f"/api/activities/{activity.id}", json={"categoryId": MISSING_ID},
                              headers=auth_headers(student))
        assert response.status_code == 400
        assert response.json() == {"error": {"message": "Invalid category"}}

    def test_missing_activity(self, client, student, auth_headers):
        response = client.put(f"/api/activities/{MISSING_ID}", json={"title": "x"}, headers=auth_headers(student))
        assert response.status_code == 404


class TestDeleteActivity:
    @pytest.mark.parametrize("editor", ["student", "senate", "admin"])
    def test_author_and_privileged_roles_may_delete(self, request, client, student, category, make_activity,
                                                    auth_headers, editor):
        activity = make_activity(student, category)
        response = client.delete(f"/api/activities/{activity.id}", headers=auth_headers(request.getfixturevalue(editor)))
        assert response.status_code == 200
        assert response.json() == {"message": "Activity deleted successfully"}
        assert client.get(f"/api/activities/{activity.id}").status_code == 404

    def test_other_student_is_forbidden(self, client, student, other_student, category, make_activity, auth_headers):
        activity = make_activity(student, category)
        response = client.delete(f"/api/activities/{activity.id}", headers=auth_headers(other_student))
        assert response.status_code == 403
        assert client.get(f"/api/activities/{activity.id}").status_code == 200

    def test_removes_likes_and_comments(self, client, db, student, category, make_activity, add_like, add_comment,
                                        auth_headers):
        activity = make_activity(student, category)
        add_like(student, activity)
        add_comment(student, activity)

        assert client.delete(f"/api/activities/{activity.id}", headers=auth_headers(student)).status_code == 200
        assert db.query(Activity).count() == 0
        assert db.query(Like).count() == 0

    def test_missing_activity(self, client, student, auth_headers):
        assert client.delete(f"/api/activities/{MISSING_ID}", headers=auth_headers(student)).status_code == 404


class TestLikes:
    def test_like_toggles(self, client, student, category, make_activity, auth_headers):
        activity = make_activity(student, category)
        headers = auth_headers(student)
        url = f"/api/activities/{activity.id}/like"

        first = client.post(url, headers=headers).json()
        assert first == {"message": "Activity liked", "isLiked": True}
        assert client.post(url, headers=headers).json()["isLiked"] is False
        assert client.post(url, headers=headers).json()["isLiked"] is True

        detail = client.get(f"/api/activities/{activity.id}", headers=headers).json()["activity"]
        assert detail["isLiked"] is True
        assert detail["counts"]["likes"] == 1

    def test_likes_are_per_user(self, client, student, other_student, category, make_activity, auth_headers):
        activity = make_activity(student, category)
        url = f"/api/activities/{activity.id}/like"

        assert client.post(url, headers=auth_headers(student)).json()["isLiked"] is True
        assert client.post(url, headers=auth_headers(other_student)).json()["isLiked"] is True

        detail = client.get(f"/api/activities/{activity.id}").json()["activity"]
        assert detail["counts"]["likes"] == 2

    def test_missing_activity(self, client, student, auth_headers):
        response = client.post(f"/api/activities/{MISSING_ID}/like", headers=auth_headers(student))
        assert response.status_code == 404

    def test_requires_authentication(self, client, student, category, make_activity):
        activity = make_activity(student, category)
        assert client.post(f"/api/activities/{activity.id}/like").status_code == 401

    def test_like_lost_to_concurrent_insert_reports_liked(self, db, student, category, make_activity, add_like,
                                                          monkeypatch):
        activity = make_activity(student, category)
        add_like(student, activity)
        real_get_like = activity_crud.get_like
        lookups = []

        def stale_first_lookup(session, activity_id, user_id):
            lookups.append(activity_id)
            return None if len(lookups) == 1 else real_get_like(session, activity_id, user_id)

        monkeypatch.setattr(activity_crud, "get_like", stale_first_lookup)
        assert activity_crud.toggle_like(db, activity.id, student.id) is True
        assert db.query(Like).count() == 1

    def test_like_on_vanished_activity_is_not_found(self, db, student):
        with pytest.raises(NotFoundError):
            activity_crud.toggle_like(db, MISSING_ID, student.id)
        assert db.query(Like).count() == 0


class TestComments:
    def test_any_user_may_comment(self, client, student, other_student, category, make_activity, auth_headers):
        activity = make_activity(student, category)
        response = client.post(
            f"/api/activities/{activity.id}/comments",
            json={"content": "Count me in!"},
            headers=auth_headers(other_student)
        )
        assert response.status_code == 201
        comment = response.json()["comment"]
        assert comment["content"] == "Count me in!"
        assert comment["activityId"] == activity.id
        assert comment["author"]["id"] == other_student.id

    @pytest.mark.parametrize("content", ["", "x" * 501])
    def test_content_length_bounds(self, client, student, category, make_activity, auth_headers, content):
        activity = make_activity(student, category)
        response = client.post(
            f"/api/activities/{activity.id}/comments",
            json={"content": content},
            headers=auth_headers(student)
        )
        assert response.status_code == 400
        assert response.json()["error"]["message"].startswith("Validation failed: content:")

    def test_missing_activity(self, client, student, auth_headers):
        response = client.post(
            f"/api/activities/{MISSING_ID}/comments",
            json={"content": "Hello"},
            headers=auth_headers(student)
        )
        assert response.status_code == 404
