"""Async HTTP client for the board REST API."""

import logging
from typing import Any

import httpx

from noise.client.models import BoardItem

logger = logging.getLogger(__name__)


class BoardApiError(Exception):
    """Raised when the API answers with an error body."""

    def __init__(self, status: int, error: str, message: str) -> None:
        super().__init__(f"{status} {error}: {message}")
        self.status = status
        self.error = error
        self.message = message


class BoardApiClient:
    """Client for session, board and item endpoints.

    Use as an async context manager, or call ``aclose()`` when done::

        async with BoardApiClient("http://localhost:3001") as api:
            await api.init_session()
            items = await api.load_board()
    """

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        owner_id: str | None = None,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.owner_id = owner_id
        self._client = httpx.AsyncClient(
            base_url=self.base_url, timeout=timeout, transport=transport
        )

    async def __aenter__(self) -> "BoardApiClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    def _headers(self) -> dict[str, str]:
        if self.token is None:
            return {}
        return {"Authorization": f"Bearer {self.token}"}

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:  # noqa: ANN401
        response = await self._client.request(method, url, headers=self._headers(), **kwargs)
        if response.is_error:
            try:
                body = response.json()
            except ValueError:
                body = {}
            error = body.get("error") or response.reason_phrase
            message = body.get("message") or response.text
            logger.debug(
                "Board API request failed",
                extra={"method": method, "url": url, "status": response.status_code},
            )
            raise BoardApiError(response.status_code, error, message)
        return response

    # ==================== Session ====================

    async def create_session(self) -> str:
        """Request a fresh anonymous owner id and token."""
        response = await self._request("POST", "/api/session")
        data = response.json()
        self.token = data["token"]
        self.owner_id = data["ownerId"]
        return self.owner_id

    async def init_session(self) -> str:
        """Reuse the stored session when present, otherwise create one.

        Returns:
            The owner id
        """
        if self.token and self.owner_id:
            return self.owner_id
        return await self.create_session()

    def is_owner(self, item: BoardItem) -> bool:
        return self.owner_id is not None and item.owner_id == self.owner_id

    # ==================== Board ====================

    async def load_board(self, limit: int = 100, offset: int = 0) -> list[BoardItem]:
        """Fetch a page of the board as display items, audio first."""
        response = await self._request(
            "GET", "/api/board", params={"limit": limit, "offset": offset}
        )
        data = response.json()
        audio = [BoardItem.from_api("audio", item, self.base_url) for item in data["audioItems"]]
        text = [BoardItem.from_api("text", item, self.base_url) for item in data["textItems"]]
        return audio + text

    # ==================== Audio items ====================

    async def create_audio_item(
        self,
        data: bytes,
        filename: str = "recording.webm",
        content_type: str = "audio/webm",
        x: float = 0,
        y: float = 0,
        visual_format: str | None = None,
        scale: float | None = None,
    ) -> BoardItem:
        form: dict[str, Any] = {"x": str(x), "y": str(y)}
        if visual_format is not None:
            form["visualFormat"] = visual_format
        if scale is not None:
            form["scale"] = str(scale)
        response = await self._request(
            "POST",
            "/api/audio-items",
            data=form,
            files={"file": (filename, data, content_type)},
        )
        return BoardItem.from_api("audio", response.json(), self.base_url)

    async def update_audio_item(self, item_id: str, **changes: Any) -> BoardItem:  # noqa: ANN401
        """Patch position, scale or ``visualFormat`` of an owned audio item."""
        response = await self._request("PATCH", f"/api/audio-items/{item_id}", json=changes)
        return BoardItem.from_api("audio", response.json(), self.base_url)

    async def rerecord_audio_item(
        self,
        item_id: str,
        data: bytes,
        filename: str = "recording.webm",
        content_type: str = "audio/webm",
    ) -> BoardItem:
        response = await self._request(
            "POST",
            f"/api/audio-items/{item_id}/rerecord",
            files={"file": (filename, data, content_type)},
        )
        return BoardItem.from_api("audio", response.json(), self.base_url)

    async def delete_audio_item(self, item_id: str) -> None:
        await self._request("DELETE", f"/api/audio-items/{item_id}")

    # ==================== Text items ====================

    async def create_text_item(
        self,
        text: str,
        x: float = 0,
        y: float = 0,
        font: str | None = None,
        opacity: float | None = None,
        scale: float | None = None,
    ) -> BoardItem:
        payload: dict[str, Any] = {"text": text, "x": x, "y": y}
        for key, value in (("font", font), ("opacity", opacity), ("scale", scale)):
            if value is not None:
                payload[key] = value
        response = await self._request("POST", "/api/text-items", json=payload)
        return BoardItem.from_api("text", response.json(), self.base_url)

    async def update_text_item(self, item_id: str, **changes: Any) -> BoardItem:  # noqa: ANN401
        """Patch text, font, opacity, position or scale of an owned text item."""
        response = await self._request("PATCH", f"/api/text-items/{item_id}", json=changes)
        return BoardItem.from_api("text", response.json(), self.base_url)

    async def delete_text_item(self, item_id: str) -> None:
        await self._request("DELETE", f"/api/text-items/{item_id}")
