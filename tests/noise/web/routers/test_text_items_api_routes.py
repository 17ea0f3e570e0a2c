"""Tests for the text item endpoints."""

import uuid

import pytest


@pytest.fixture
def owner(client, create_session):
    """Open a session for the item owner."""
    return create_session(client)


@pytest.fixture
def text_item(client, owner):
    """Create a text item owned by ``owner``."""
    _, headers = owner
    response = client.post(
        "/api/text-items",
        json={"text": "hello", "x": 10, "y": 20, "font": "kapakana", "opacity": 50},
        headers=headers,
    )
    assert response.status_code == 201
    return response.json()


class TestCreateTextItem:
    """Test POST /api/text-items."""

    def test_create(self, client, owner, text_item):
        """Should create the item with camelCase fields."""
        owner_id, _ = owner

        assert text_item["ownerId"] == owner_id
        assert text_item["text"] == "hello"
        assert text_item["font"] == "kapakana"
        assert text_item["opacity"] == 50
        assert text_item["scale"] == 100
        assert text_item["createdAt"].endswith("Z")
        uuid.UUID(text_item["id"])

    def test_defaults(self, client, owner):
        """Should default font, opacity and scale."""
        _, headers = owner

        body = client.post(
            "/api/text-items", json={"text": "x", "x": 0, "y": 0}, headers=headers
        ).json()

        assert body["font"] == "rubik-glitch"
        assert body["opacity"] == 100
        assert body["scale"] == 100

    def test_requires_token(self, client):
        """Should return 401 without a bearer token."""
        response = client.post("/api/text-items", json={"text": "x", "x": 0, "y": 0})

        assert response.status_code == 401
        assert response.json() == {
            "error": "Unauthorized",
            "message": "Authorization token is required",
        }

    def test_rejects_invalid_token(self, client):
        """Should return 401 for a forged token."""
        response = client.post(
            "/api/text-items",
            json={"text": "x", "x": 0, "y": 0},
            headers={"Authorization": "Bearer forged"},
        )

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid or expired token"

    @pytest.mark.parametrize(
        "body",
        [
            {"text": "", "x": 0, "y": 0},
            {"text": "x" * 201, "x": 0, "y": 0},
            {"text": "x", "x": -5, "y": 0},
            {"text": "x", "x": 0, "y": 20000},
            {"text": "x", "x": 0, "y": 0, "opacity": 150},
            {"text": "x", "x": 0, "y": 0, "scale": 10},
            {"text": "x", "x": 0, "y": 0, "font": "papyrus"},
            {"x": 0, "y": 0},
        ],
    )
    def test_validation_errors(self, client, owner, body):
        """Should return 400 with field details for invalid bodies."""
        _, headers = owner

        response = client.post("/api/text-items", json=body, headers=headers)

        assert response.status_code == 400
        error = response.json()
        assert error["error"] == "Validation Error"
        assert error["message"] == "Invalid request data"
        assert error["details"][0]["field"].startswith("body")


class TestUpdateTextItem:
    """Test PATCH /api/text-items/{id}."""

    def test_partial_update(self, client, owner, text_item):
        """Should change only the supplied fields."""
        _, headers = owner

        response = client.patch(
            f"/api/text-items/{text_item['id']}", json={"x": 500, "opacity": 10}, headers=headers
        )

        assert response.status_code == 200
        body = response.json()
        assert body["x"] == 500
        assert body["opacity"] == 10
        assert body["y"] == 20
        assert body["text"] == "hello"

    def test_other_owner_forbidden(self, client, create_session, text_item):
        """Should return 403 when someone else edits the item."""
        _, other_headers = create_session(client)

        response = client.patch(
            f"/api/text-items/{text_item['id']}", json={"text": "mine"}, headers=other_headers
        )

        assert response.status_code == 403
        assert response.json() == {
            "error": "Forbidden",
            "message": "You can only update your own items",
        }

    def test_missing_item(self, client, owner):
        """Should return 404 for unknown ids."""
        _, headers = owner

        response = client.patch(f"/api/text-items/{uuid.uuid4()}", json={"x": 1}, headers=headers)

        assert response.status_code == 404
        assert response.json()["message"] == "Text item not found"

    def test_malformed_id(self, client, owner):
        """Should reject ids that are not UUIDs."""
        _, headers = owner

        response = client.patch("/api/text-items/not-a-uuid", json={"x": 1}, headers=headers)

        assert response.status_code == 400


class TestDeleteTextItem:
    """Test DELETE /api/text-items/{id}."""

    def test_delete(self, client, owner, text_item):
        """Should delete the item and return 204."""
        _, headers = owner

        response = client.delete(f"/api/text-items/{text_item['id']}", headers=headers)

        assert response.status_code == 204
        assert client.get("/api/board").json()["textItems"] == []

    def test_other_owner_forbidden(self, client, create_session, text_item):
        """Should return 403 when someone else deletes the item."""
        _, other_headers = create_session(client)

        response = client.delete(f"/api/text-items/{text_item['id']}", headers=other_headers)

        assert response.status_code == 403
        assert response.json()["message"] == "You can only delete your own items"

    def test_delete_twice(self, client, owner, text_item):
        """Should return 404 once the item is gone."""
        _, headers = owner
        client.delete(f"/api/text-items/{text_item['id']}", headers=headers)

        response = client.delete(f"/api/text-items/{text_item['id']}", headers=headers)

        assert response.status_code == 404
