"""
Health Diary Client — HTTP Client
==================================

What:  Thin async wrapper over httpx.AsyncClient for the Health Diary API.
How:   - Paths are relative to settings.api_url ("/entries" → {api_url}/entries)
       - JSON in, JSON out; 204 → None
       - "Authorization: Bearer <token>" whenever a token is stored
       - Non-2xx → ApiError subclass carrying status, message and field errors
       - Timeouts and transport failures → NetworkError

401 handling:
    When a request that carried a token is rejected with 401, the token is
    no longer valid: `on_unauthorized` is invoked (the app wires it to
    logout + navigate to /login) before the UnauthorizedError is raised.
    A 401 from a login attempt without a token is just a bad password.
"""

import inspect
import logging
from typing import Any, Awaitable, Callable, Optional, Union

import httpx

from healthdiary_client.config import ClientSettings
from healthdiary_client.core.storage import SessionStore
from healthdiary_client.exceptions import NetworkError, error_for_status

logger = logging.getLogger(__name__)

UnauthorizedHandler = Callable[[], Union[None, Awaitable[None]]]


class HttpClient:

    def __init__(
        self,
        settings: ClientSettings,
        session: SessionStore,
        on_unauthorized: Optional[UnauthorizedHandler] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings
        self.session = session
        self.on_unauthorized = on_unauthorized
        self._client = httpx.AsyncClient(
            base_url=settings.api_url,
            timeout=httpx.Timeout(settings.request_timeout),
            headers={"Content-Type": "application/json"},
            transport=transport,
        )

    def _auth_headers(self) -> dict:
        token = self.session.local.get(SessionStore.TOKEN_KEY)
        return {"Authorization": f"Bearer {token}"} if token else {}

    async def request(self, method: str, endpoint: str, data: Any = None) -> Any:
        """
        Send one request and decode the response.

        Raises:
            ApiError (subclass by status): the API answered with an error
            NetworkError: no usable response (timeout, connection, bad JSON)
        """
        headers = self._auth_headers()
        logger.debug("%s %s", method, endpoint)

        try:
            response = await self._client.request(
                method, endpoint, json=data, headers=headers,
            )
        except httpx.TimeoutException as e:
            logger.error("%s %s timed out after %.1fs", method, endpoint, self.settings.request_timeout)
            raise NetworkError("Request timed out", cause=e)
        except httpx.TransportError as e:
            logger.error("%s %s failed: %s", method, endpoint, str(e))
            raise NetworkError(cause=e)

        if response.is_success:
            if response.status_code == 204 or not response.content:
                return None
            try:
                return response.json()
            except ValueError as e:
                raise NetworkError("Invalid response from server", cause=e)

        if response.status_code == 401 and headers and self.on_unauthorized is not None:
            logger.info("Token rejected by the API, ending session")
            outcome = self.on_unauthorized()
            if inspect.isawaitable(outcome):
                await outcome

        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        error = error_for_status(
            response.status_code,
            body.get("message") or "Network error",
            body.get("errors"),
        )
        logger.warning("%s %s → %d: %s", method, endpoint, error.status, error.message)
        raise error

    async def get(self, endpoint: str) -> Any:
        return await self.request("GET", endpoint)

    async def post(self, endpoint: str, data: Any) -> Any:
        return await self.request("POST", endpoint, data)

    async def put(self, endpoint: str, data: Any) -> Any:
        return await self.request("PUT", endpoint, data)

    async def delete(self, endpoint: str) -> Any:
        return await self.request("DELETE", endpoint)

    async def aclose(self) -> None:
        await self._client.aclose()
