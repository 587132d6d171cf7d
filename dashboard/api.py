"""HTTP request wrapper for the FokusHub360 API."""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from .local_store import TOKEN_KEY, LocalStore

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


class ApiError(Exception):
    """A failed API call, carrying the HTTP status as a structured field."""

    def __init__(
        self,
        status_code: Optional[int],
        message: str,
        payload: Optional[dict] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.payload = payload or {}

    @property
    def is_unauthorized(self) -> bool:
        return self.status_code == 401

    def __str__(self) -> str:
        if self.status_code is None:
            return self.message
        return f"{self.status_code}: {self.message}"


class NetworkError(ApiError):
    """The request never produced an HTTP response."""

    def __init__(self, message: str):
        super().__init__(None, message)


def is_unauthorized_error(error: BaseException) -> bool:
    return isinstance(error, ApiError) and error.is_unauthorized


def _error_from_response(response: httpx.Response) -> ApiError:
    payload: dict = {}
    message = ""
    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict):
        payload = body
        message = str(body.get("detail") or body.get("message") or "")
    elif response.text:
        message = response.text
    return ApiError(response.status_code, message or response.reason_phrase, payload)


class ApiClient:
    """Thin JSON client that attaches the stored bearer token to every call."""

    def __init__(
        self,
        base_url: str,
        store: LocalStore,
        transport: Optional[httpx.BaseTransport] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.store = store
        self._http = httpx.Client(
            base_url=base_url, transport=transport, timeout=timeout
        )

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "ApiClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        token = self.store.get(TOKEN_KEY)
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def request(
        self,
        method: str,
        path: str,
        json: Any = None,
        data: Optional[dict] = None,
        files: Optional[dict] = None,
        params: Optional[dict] = None,
    ) -> Any:
        """Send a request and return the decoded JSON body.

        Raises ``ApiError`` for non-2xx responses and ``NetworkError`` when the
        server cannot be reached.
        """

        headers = self._headers()
        logger.debug(
            "API request %s %s (token: %s)", method, path, "Authorization" in headers
        )
        try:
            response = self._http.request(
                method,
                path,
                json=json,
                data=data,
                files=files,
                params=params,
                headers=headers,
            )
        except httpx.TransportError as exc:
            logger.warning("API request %s %s failed: %s", method, path, exc)
            raise NetworkError(str(exc) or exc.__class__.__name__) from exc

        logger.debug("API response %s %s -> %s", method, path, response.status_code)
        if response.is_error:
            raise _error_from_response(response)
        if not response.content:
            return None
        return response.json()

    def get(self, path: str, params: Optional[dict] = None) -> Any:
        return self.request("GET", path, params=params)

    def post(self, path: str, json: Any = None, **kwargs) -> Any:
        return self.request("POST", path, json=json, **kwargs)

    def put(self, path: str, json: Any = None) -> Any:
        return self.request("PUT", path, json=json)
