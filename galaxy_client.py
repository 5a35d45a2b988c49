from __future__ import annotations
import json
import logging
from typing import Any, Dict, Optional

import httpx

from config_settings import Settings
from galaxy_errors import RemoteApiError, RemoteConnectionError, RemoteTimeout

logger = logging.getLogger("galaxy_client")


class GalaxyClient:
    """Thin async wrapper over the Galaxy REST API.

    Every request carries the API key, so the key never has to reach the
    browser. Responses are returned as parsed JSON when the server says so and
    as plain text otherwise (``/datasets/{id}/display`` answers with text).
    """

    def __init__(self, settings: Settings, http: Optional[httpx.AsyncClient] = None):
        self.base_url = settings.GALAXY_URL.rstrip("/")
        self.api_key = settings.GALAXY_API_KEY
        self.timeout = settings.GALAXY_TIMEOUT
        self._http = http or httpx.AsyncClient()

    def url_for(self, endpoint: str) -> str:
        return f"{self.base_url}/api{endpoint}"

    async def call(
        self,
        endpoint: str,
        method: str = "GET",
        body: Optional[Any] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        url = self.url_for(endpoint)
        req_headers = {
            "x-api-key": self.api_key,
            "Content-Type": "application/json",
            **(headers or {}),
        }
        content = json.dumps(body) if body is not None else None

        logger.info("Galaxy API request: %s %s", method, url)
        try:
            response = await self._http.request(
                method, url, content=content, headers=req_headers, timeout=self.timeout
            )
        except httpx.TimeoutException as e:
            logger.error("Galaxy API request %s %s timed out: %s", method, endpoint, e)
            raise RemoteTimeout(endpoint, self.timeout) from e
        except httpx.RequestError as e:
            logger.error("Galaxy API request %s %s could not connect: %s", method, endpoint, e)
            raise RemoteConnectionError(endpoint, str(e)) from e

        if not response.is_success:
            error_text = response.text
            logger.error("Galaxy API request %s %s failed with %s: %s",
                         method, endpoint, response.status_code, error_text)
            raise RemoteApiError(response.status_code, error_text)

        content_type = response.headers.get("content-type", "")
        if "application/json" in content_type:
            return response.json()
        return response.text

    async def version(self) -> Any:
        return await self.call("/version")

    async def aclose(self) -> None:
        await self._http.aclose()
