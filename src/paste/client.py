"""
Paste-hosting API client.

- create_paste: POST a message to the paste server, which answers with the URL
- list_pastes / latest_paste_url: GET the configured user's existing pastes
"""

import logging
from typing import Any, Protocol

import httpx

from src.models import MessageEvent

CREATE_PATH = "/createGist"
DEFAULT_TIMEOUT_SECONDS = 10.0

logger = logging.getLogger(__name__)


class PasteApiError(Exception):
    """Raised when the paste-hosting API cannot be reached or answers badly."""


class PasteClientProtocol(Protocol):
    """Protocol type for the paste-hosting API."""

    async def create_paste(self, event: MessageEvent, idempotency_key: str | None = None) -> str:
        """Save a message as a paste.

        Args:
            event: Message whose text becomes the paste content
            idempotency_key: Key that lets the server drop retried duplicates

        Returns:
            URL of the created paste
        """
        ...

    async def latest_paste_url(self) -> str | None:
        """Return the link of the newest paste, or None if there are none."""
        ...


class PasteClient:
    """httpx-based implementation of PasteClientProtocol.

    Attributes:
        _base_url: Base URL of the paste server that creates pastes
        _list_api_url: Base URL of the API that lists pastes
        _list_user: User whose pastes are listed
        _http: Shared async HTTP client
    """

    def __init__(
        self,
        base_url: str,
        list_api_url: str,
        list_user: str,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._list_api_url = list_api_url.rstrip("/")
        self._list_user = list_user
        self._http = http_client or httpx.AsyncClient(timeout=timeout)

    async def aclose(self) -> None:
        await self._http.aclose()

    async def create_paste(self, event: MessageEvent, idempotency_key: str | None = None) -> str:
        headers = {"Idempotency-Key": idempotency_key} if idempotency_key else {}
        try:
            response = await self._http.post(
                f"{self._base_url}{CREATE_PATH}",
                json=event.model_dump(exclude_none=True),
                headers=headers,
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error("Paste creation failed: %s", e)
            raise PasteApiError(f"Paste creation failed: {e}") from e

        url = response.text.strip()
        if not url:
            raise PasteApiError("Paste server returned an empty response")

        logger.info("Created paste", extra={"url": url, "user_id": event.user})
        return url

    async def list_pastes(self) -> list[dict[str, Any]]:
        """Fetch the configured user's pastes, newest first.

        Raises:
            PasteApiError: On transport errors, non-2xx status or a non-list body
        """
        try:
            response = await self._http.get(f"{self._list_api_url}/users/{self._list_user}/gists")
            response.raise_for_status()
            pastes = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Listing pastes failed: %s", e)
            raise PasteApiError(f"Listing pastes failed: {e}") from e

        if not isinstance(pastes, list):
            raise PasteApiError("Unexpected paste list payload")
        return pastes

    async def latest_paste_url(self) -> str | None:
        pastes = await self.list_pastes()
        if not pastes:
            return None
        first = pastes[0]
        url: str | None = first.get("html_url") or first.get("url")
        return url
