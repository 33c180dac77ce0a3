from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Optional

import requests
from requests import Response

from base import get_logger
from base.errors import ApiConnectionError, ApiError, UnauthorizedError

logger = get_logger(__name__)

TokenProvider = Callable[[], Optional[str]]
UnauthorizedHandler = Callable[[str], None]


@dataclass(frozen=True)
class ApiResponse:
    status_code: int
    payload: dict[str, Any] = field(default_factory=dict)

    @property
    def success(self) -> bool:
        return bool(self.payload.get("success", True))

    @property
    def message(self) -> Optional[str]:
        message = self.payload.get("message")
        return message if isinstance(message, str) else None

    @property
    def data(self) -> Any:
        return self.payload.get("data")


def decode_payload(response: Response) -> dict[str, Any]:
    if not response.content:
        return {}
    try:
        body = response.json()
    except ValueError:
        return {"message": response.text.strip()}
    if isinstance(body, dict):
        return body
    return {"data": body}


class ApiClient:
    """Thin wrapper around requests.Session for the dormitory API.

    Every request carries the current bearer token when one is stored. A 401
    answer to a request that carried a token hands that token to
    ``on_unauthorized`` (which purges the session and redirects to login) and
    is raised as UnauthorizedError. Other error statuses are raised unchanged
    as ApiError. Nothing is retried.
    """

    def __init__(
        self,
        base_url: str,
        token_provider: TokenProvider,
        *,
        timeout: float = 30.0,
        session: Optional[requests.Session] = None,
        on_unauthorized: Optional[UnauthorizedHandler] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.token_provider = token_provider
        self.timeout = timeout
        self.session = session or requests.Session()
        self.on_unauthorized = on_unauthorized

    def url_for(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def _headers(self, token: Optional[str]) -> dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[dict[str, Any]] = None,
        json: Any = None,
    ) -> ApiResponse:
        url = self.url_for(path)
        token = self.token_provider()
        logger.debug(f"{method} {url} (authenticated={bool(token)})")

        try:
            response = self.session.request(
                method,
                url,
                params=params,
                json=json,
                headers=self._headers(token),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(
                f"Request failed - method={method}, url={url}, "
                f"error_type={type(e).__name__}, error={e}"
            )
            raise ApiConnectionError() from e

        payload = decode_payload(response)

        if response.status_code == 401:
            logger.warning(f"401 from {method} {url}")
            if token and self.on_unauthorized:
                self.on_unauthorized(token)
            raise UnauthorizedError(payload)

        if not 200 <= response.status_code < 300:
            logger.error(
                f"Unexpected status code - method={method}, url={url}, "
                f"status_code={response.status_code}, "
                f"message={payload.get('message')!r}"
            )
            raise ApiError(response.status_code, payload)

        return ApiResponse(response.status_code, payload)

    def get(self, path: str, params: Optional[dict[str, Any]] = None) -> ApiResponse:
        return self.request("GET", path, params=params)

    def post(self, path: str, json: Any = None) -> ApiResponse:
        return self.request("POST", path, json=json)

    def put(self, path: str, json: Any = None) -> ApiResponse:
        return self.request("PUT", path, json=json)

    def delete(self, path: str) -> ApiResponse:
        return self.request("DELETE", path)
