"""Tests for the board WebSocket feed."""

from starlette.routing import WebSocketRoute

from noise.web.routers import websocket_routes


class TestWebSocketRouter:
    """Test router structure."""

    def test_board_route_registered(self):
        """Should expose a single /board WebSocket route."""
        routes = websocket_routes.router.routes

        assert [getattr(route, "path", "") for route in routes] == ["/board"]
        assert all(isinstance(route, WebSocketRoute) for route in routes)


class TestBoardFeed:
    """Test mutations reaching connected clients."""

    def test_connect_and_disconnect(self, app, client):
        """Should track the socket while connected."""
        broadcaster = app.container.board_broadcaster()

        with client.websocket_connect("/ws/board"):
            assert len(broadcaster.active_websockets) == 1

        client.get("/health")
        assert broadcaster.active_websockets == set()

    def test_text_lifecycle_broadcast(self, client, create_session):
        """Should broadcast created, updated and deleted events to every client."""
        owner_id, headers = create_session(client)

        with (
            client.websocket_connect("/ws/board") as first,
            client.websocket_connect("/ws/board") as second,
        ):
            created = client.post(
                "/api/text-items", json={"text": "hi", "x": 1, "y": 2}, headers=headers
            ).json()
            for ws in (first, second):
                assert ws.receive_json() == {"type": "textItemCreated", "data": created}

            updated = client.patch(
                f"/api/text-items/{created['id']}", json={"x": 9}, headers=headers
            ).json()
            event = first.receive_json()
            assert event["type"] == "textItemUpdated"
            assert event["data"] == updated
            assert event["data"]["ownerId"] == owner_id

            client.delete(f"/api/text-items/{created['id']}", headers=headers)
            assert first.receive_json() == {
                "type": "textItemDeleted",
                "data": {"id": created["id"]},
            }

    def test_audio_upload_broadcast(self, client, create_session):
        """Should broadcast uploaded audio items with their public URL."""
        _, headers = create_session(client)

        with client.websocket_connect("/ws/board") as ws:
            created = client.post(
                "/api/audio-items",
                data={"x": "5", "y": "5", "visualFormat": "spectrum"},
                files={"file": ("a.webm", b"webm-bytes", "audio/webm")},
                headers=headers,
            ).json()

            event = ws.receive_json()

        assert event["type"] == "audioItemCreated"
        assert event["data"]["audioUrl"] == created["audioUrl"]
        assert event["data"]["visualFormat"] == "spectrum"

    def test_failed_mutation_is_not_broadcast(self, client, create_session):
        """Should only broadcast successful mutations."""
        _, owner_headers = create_session(client)
        _, other_headers = create_session(client)
        created = client.post(
            "/api/text-items", json={"text": "mine", "x": 0, "y": 0}, headers=owner_headers
        ).json()

        with client.websocket_connect("/ws/board") as ws:
            forbidden = client.delete(f"/api/text-items/{created['id']}", headers=other_headers)
            assert forbidden.status_code == 403

            client.delete(f"/api/text-items/{created['id']}", headers=owner_headers)
            # The first frame is the owner's delete, not the rejected attempt
            assert ws.receive_json()["type"] == "textItemDeleted"

    def test_client_pings_are_ignored(self, app, client, create_session):
        """Should stay in the room after text and binary keep-alive frames."""
        _, headers = create_session(client)
        broadcaster = app.container.board_broadcaster()

        with client.websocket_connect("/ws/board") as ws:
            ws.send_bytes(b"ping")
            ws.send_text("ping")
            created = client.post(
                "/api/text-items", json={"text": "still here", "x": 0, "y": 0}, headers=headers
            ).json()

            assert ws.receive_json() == {"type": "textItemCreated", "data": created}
            assert len(broadcaster.active_websockets) == 1
