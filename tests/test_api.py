"""Tests for API endpoints"""

from hypeshelf.models import Recommendation


def add_recommendation(client, headers, **overrides):
    payload = {"title": "Dune", "genre": "sci-fi", "blurb": "Great book"}
    payload.update(overrides)
    return client.post("/api/v1/recommendations/", json=payload, headers=headers)


def test_root_endpoint(client):
    """Test root endpoint"""

    response = client.get("/")
    assert response.status_code == 200
    assert "message" in response.json()


def test_list_empty_feed(client):
    response = client.get("/api/v1/recommendations/")

    assert response.status_code == 200
    assert response.json() == []


def test_add_and_list(client, users, auth_headers):
    """Adding returns the id and the feed shows it"""

    response = add_recommendation(client, auth_headers("user_alice"), link="https://example.com/dune")

    assert response.status_code == 201
    new_id = response.json()["id"]

    feed = client.get("/api/v1/recommendations/").json()
    assert len(feed) == 1
    item = feed[0]
    assert item["id"] == new_id
    assert item["genre"] == "sci-fi"
    assert item["link"] == "https://example.com/dune"
    assert item["is_staff_pick"] is False
    assert item["owner_display_name"] == "Alice"
    assert item["caller_role"] is None
    assert item["is_owner"] is None


def test_list_with_token_includes_caller_context(client, users, auth_headers):
    add_recommendation(client, auth_headers("user_alice"))

    feed = client.get("/api/v1/recommendations/", headers=auth_headers("user_carol")).json()

    assert feed[0]["caller_role"] == "user"
    assert feed[0]["is_owner"] is False


def test_list_genre_filter(client, users, auth_headers):
    headers = auth_headers("user_alice")
    add_recommendation(client, headers)
    add_recommendation(client, headers, title="Scream", genre="horror")

    response = client.get("/api/v1/recommendations/", params={"genre": "horror"})

    assert response.status_code == 200
    assert [r["title"] for r in response.json()] == ["Scream"]


def test_list_unknown_genre_rejected(client):
    response = client.get("/api/v1/recommendations/", params={"genre": "jazz"})

    assert response.status_code == 422


def test_list_mine_anonymous(client):
    """Anonymous listMine is unauthenticated"""

    response = client.get("/api/v1/recommendations/mine")

    assert response.status_code == 401
    assert response.headers["WWW-Authenticate"] == "Bearer"


def test_list_mine_scoping(client, users, auth_headers):
    add_recommendation(client, auth_headers("user_alice"), title="Dune")
    add_recommendation(client, auth_headers("user_carol"), title="Alien", genre="horror")

    mine = client.get("/api/v1/recommendations/mine", headers=auth_headers("user_alice")).json()
    everything = client.get("/api/v1/recommendations/mine", headers=auth_headers("user_admin")).json()

    assert [r["title"] for r in mine] == ["Dune"]
    assert [r["title"] for r in everything] == ["Alien", "Dune"]


def test_unsynced_user_cannot_add(client, auth_headers):
    response = add_recommendation(client, auth_headers("user_nobody"))

    assert response.status_code == 404


def test_invalid_token_rejected(client):
    """A bad token is not downgraded to anonymous"""

    response = client.get(
        "/api/v1/recommendations/",
        headers={"Authorization": "Bearer invalid_token"},
    )

    assert response.status_code == 401


def test_add_anonymous(client):
    response = add_recommendation(client, {})

    assert response.status_code == 401


def test_add_empty_title(client, users, auth_headers):
    """Validation errors are reported per field"""

    response = add_recommendation(client, auth_headers("user_alice"), title="")

    assert response.status_code == 422
    body = response.json()
    assert body["detail"] == "Validation failed"
    assert [e["field"] for e in body["errors"]] == ["title"]
    assert body["errors"][0]["message"]


def test_add_anonymous_with_invalid_body(client, db_session):
    """The caller is checked before the fields"""

    response = add_recommendation(client, {}, title="", genre="jazz")

    assert response.status_code == 401
    assert db_session.query(Recommendation).count() == 0


def test_add_anonymous_with_missing_fields(client):
    response = client.post("/api/v1/recommendations/", json={})

    assert response.status_code == 401


def test_add_missing_fields(client, users, auth_headers):
    response = client.post("/api/v1/recommendations/", json={"title": "Dune"}, headers=auth_headers("user_alice"))

    assert response.status_code == 422
    assert sorted(e["field"] for e in response.json()["errors"]) == ["blurb", "genre"]


def test_add_unknown_genre(client, users, auth_headers):
    response = add_recommendation(client, auth_headers("user_alice"), genre="jazz")

    assert response.status_code == 422
    assert [e["field"] for e in response.json()["errors"]] == ["genre"]


def test_add_bad_link(client, users, auth_headers):
    response = add_recommendation(client, auth_headers("user_alice"), link="nope")

    assert response.status_code == 422
    assert [e["field"] for e in response.json()["errors"]] == ["link"]


def test_remove_permissions(client, db_session, users, auth_headers):
    new_id = add_recommendation(client, auth_headers("user_alice")).json()["id"]

    forbidden = client.delete(f"/api/v1/recommendations/{new_id}", headers=auth_headers("user_carol"))
    assert forbidden.status_code == 403
    assert db_session.get(Recommendation, new_id) is not None

    allowed = client.delete(f"/api/v1/recommendations/{new_id}", headers=auth_headers("user_alice"))
    assert allowed.status_code == 204

    missing = client.delete(f"/api/v1/recommendations/{new_id}", headers=auth_headers("user_alice"))
    assert missing.status_code == 404


def test_admin_can_remove_any(client, users, auth_headers):
    new_id = add_recommendation(client, auth_headers("user_alice")).json()["id"]

    response = client.delete(f"/api/v1/recommendations/{new_id}", headers=auth_headers("user_admin"))

    assert response.status_code == 204
    assert client.get("/api/v1/recommendations/").json() == []


def test_staff_pick(client, users, auth_headers):
    new_id = add_recommendation(client, auth_headers("user_alice")).json()["id"]
    url = f"/api/v1/recommendations/{new_id}/staff-pick"

    assert client.post(url, headers=auth_headers("user_alice")).status_code == 403
    assert client.post(url).status_code == 401
    assert client.post(url, headers=auth_headers("user_admin")).status_code == 204
    assert client.post(url, headers=auth_headers("user_admin")).status_code == 204

    feed = client.get("/api/v1/recommendations/").json()
    assert feed[0]["is_staff_pick"] is True


def test_staff_pick_missing(client, users, auth_headers):
    response = client.post("/api/v1/recommendations/999/staff-pick", headers=auth_headers("user_admin"))

    assert response.status_code == 404


def test_current_user(client, users, auth_headers):
    response = client.get("/api/v1/users/me", headers=auth_headers("user_admin"))

    assert response.status_code == 200
    data = response.json()
    assert data["external_id"] == "user_admin"
    assert data["role"] == "admin"


def test_current_user_anonymous(client):
    response = client.get("/api/v1/users/me")

    assert response.status_code == 200
    assert response.json() is None


def test_add_rate_limited(client, users, auth_headers):
    """Submissions are limited per caller"""

    headers = auth_headers("user_alice")
    statuses = [add_recommendation(client, headers, title=f"Film {i}").status_code for i in range(21)]

    assert statuses[:20] == [201] * 20
    assert statuses[20] == 429
