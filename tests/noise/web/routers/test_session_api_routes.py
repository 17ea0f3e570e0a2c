"""Tests for the anonymous session endpoint."""

from noise.utils.auth import TokenService


class TestSessionApiRoutes:
    """Test POST /api/session."""

    def test_create_session(self, client, test_config):
        """Should return a token and owner id that verify against the configured secret."""
        response = client.post("/api/session")

        assert response.status_code == 200
        body = response.json()
        assert set(body) == {"token", "ownerId"}
        payload = TokenService(test_config.jwt).verify_token(body["token"])
        assert payload.owner_id == body["ownerId"]

    def test_each_session_is_a_new_owner(self, client):
        """Should issue a distinct owner id per session."""
        first = client.post("/api/session").json()
        second = client.post("/api/session").json()

        assert first["ownerId"] != second["ownerId"]
