"""HTTP client for the texttv.nu API."""

import asyncio
import json
import logging
from typing import Any, Dict, Optional
from urllib.parse import urlencode

import aiohttp

from .config import DEFAULT_APP_ID, DEFAULT_BASE_URL, AppConfig
from .exceptions import FetchFailureError

logger = logging.getLogger(__name__)

_JSON_CONTENT_TYPES = ("application/json", "text/json")


class TextTVClient:
    """Thin async client for the texttv.nu page endpoint."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        app_id: str = DEFAULT_APP_ID,
        include_plain_text_content: bool = True,
        timeout_seconds: float = 10.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.app_id = app_id
        self.include_plain_text_content = include_plain_text_content
        self.timeout_seconds = timeout_seconds
        self.session: Optional[aiohttp.ClientSession] = None

    @classmethod
    def from_config(cls, config: AppConfig) -> "TextTVClient":
        return cls(
            base_url=config.base_url,
            app_id=config.app_id,
            include_plain_text_content=config.include_plain_text_content,
            timeout_seconds=config.request_timeout_seconds,
        )

    async def __aenter__(self) -> "TextTVClient":
        """Async context manager entry."""
        self._ensure_session()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.close()

    def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure we have an active session."""
        if not self.session:
            self.session = aiohttp.ClientSession()
        return self.session

    async def close(self) -> None:
        if self.session:
            await self.session.close()
            self.session = None

    def build_url(self, page_number: int) -> str:
        """Build the request URL for a page, including query parameters."""
        params: Dict[str, str] = {
            "app": self.app_id,
            "includePlainTextContent": "1" if self.include_plain_text_content else "0",
        }
        return f"{self.base_url}/get/{page_number}?{urlencode(params)}"

    async def fetch_page_payload(self, page_number: int) -> Any:
        """Fetch the raw JSON payload for a page.

        Raises:
            FetchFailureError: On transport errors, timeouts, non-success
                status codes, non-JSON responses or unparsable bodies.
        """
        session = self._ensure_session()
        url = self.build_url(page_number)
        unavailable = f"Page {page_number} does not exist or is not available"

        logger.debug(f"GET {url}")
        try:
            async with session.request(
                "GET",
                url,
                timeout=aiohttp.ClientTimeout(total=self.timeout_seconds),
            ) as response:
                if not 200 <= response.status < 300:
                    raise FetchFailureError(f"HTTP error! status: {response.status}")

                content_type = response.headers.get("Content-Type", "")
                if not any(ct in content_type for ct in _JSON_CONTENT_TYPES):
                    # texttv.nu answers unknown pages with an HTML document
                    raise FetchFailureError(unavailable)

                try:
                    return await response.json(content_type=None)
                except (json.JSONDecodeError, ValueError) as e:
                    raise FetchFailureError(unavailable) from e
        except asyncio.TimeoutError as e:
            raise FetchFailureError(
                f"Request timed out after {self.timeout_seconds}s"
            ) from e
        except aiohttp.ClientError as e:
            raise FetchFailureError(str(e) or type(e).__name__) from e
