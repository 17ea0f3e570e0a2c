"""Tests for rate limiting."""

import pytest
from fastapi.testclient import TestClient

from noise.web.middleware.rate_limit import FixedWindowRateLimiter


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


class TestFixedWindowRateLimiter:
    """Test window counting."""

    def test_allows_up_to_limit(self):
        """Should allow max_requests hits per window and reject the next."""
        limiter = FixedWindowRateLimiter(max_requests=2, window_seconds=60, clock=FakeClock())

        results = [limiter.hit("client") for _ in range(3)]

        assert [r.allowed for r in results] == [True, True, False]
        assert [r.remaining for r in results] == [1, 0, 0]

    def test_window_resets(self):
        """Should start a fresh window once the old one has passed."""
        clock = FakeClock()
        limiter = FixedWindowRateLimiter(max_requests=1, window_seconds=60, clock=clock)
        limiter.hit("client")

        clock.now += 60

        assert limiter.hit("client").allowed

    def test_keys_are_independent(self):
        """Should count each client separately."""
        limiter = FixedWindowRateLimiter(max_requests=1, window_seconds=60, clock=FakeClock())

        assert limiter.hit("a").allowed
        assert limiter.hit("b").allowed
        assert not limiter.hit("a").allowed

    def test_reset_seconds(self):
        """Should report the seconds left in the window."""
        clock = FakeClock()
        limiter = FixedWindowRateLimiter(max_requests=5, window_seconds=60, clock=clock)
        limiter.hit("client")

        clock.now += 15.5

        assert limiter.hit("client").reset_seconds == 45


@pytest.fixture
def limited_client(app_factory, test_config):
    """Client for an app with tight rate limits."""
    test_config.rate_limit.enabled = True
    test_config.rate_limit.max_requests = 3
    test_config.rate_limit.upload_max_requests = 1
    with TestClient(app_factory(test_config)) as client:
        yield client


class TestRateLimitMiddleware:
    """Test limits applied to the HTTP API."""

    def test_api_limit(self, limited_client):
        """Should return 429 with retry headers once the API limit is reached."""
        for _ in range(3):
            response = limited_client.get("/api/board")
            assert response.status_code == 200
        assert response.headers["RateLimit-Limit"] == "3"
        assert response.headers["RateLimit-Remaining"] == "0"

        response = limited_client.get("/api/board")

        assert response.status_code == 429
        assert response.json() == {
            "error": "Too Many Requests",
            "message": "Please try again later",
        }
        assert "Retry-After" in response.headers

    def test_upload_limit(self, limited_client, create_session):
        """Should apply the stricter upload limit to audio item requests."""
        _, headers = create_session(limited_client)

        def upload():
            return limited_client.post(
                "/api/audio-items",
                data={"x": "1", "y": "1"},
                files={"file": ("a.webm", b"webm", "audio/webm")},
                headers=headers,
            )

        assert upload().status_code == 201
        response = upload()

        assert response.status_code == 429
        assert response.json() == {
            "error": "Too Many Uploads",
            "message": "Please wait before uploading more files",
        }

    def test_health_not_limited(self, limited_client):
        """Should leave routes outside /api/ unlimited."""
        for _ in range(5):
            assert limited_client.get("/health").status_code == 200
