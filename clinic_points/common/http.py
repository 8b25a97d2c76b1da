"""HTTP client for JSON APIs.

Requests are issued exactly once with the transport's default timeout; there is
no retry and no rate limiting.
"""

from __future__ import annotations

from types import TracebackType
from typing import Any

import requests
from requests.adapters import HTTPAdapter

from clinic_points.common.constants import USER_AGENT
from clinic_points.common.errors import GeocodeDecodeError, GeocodeError

MAX_ERROR_BODY_CHARS = 2000


class HttpRequestError(GeocodeError):
    error_code = "HTTP_ERROR"


class HttpStatusError(HttpRequestError):
    error_code = "HTTP_STATUS_ERROR"

    def __init__(self, status_code: int, body: str) -> None:
        super().__init__(f"Bad response status: {status_code}, {body[:MAX_ERROR_BODY_CHARS]}")
        self.status_code = status_code
        self.body = body


class InvalidJsonError(HttpRequestError, GeocodeDecodeError):
    error_code = "DECODE_ERROR"


class HttpClient:
    def __init__(self, *, session: requests.Session | None = None, pool_maxsize: int | None = None) -> None:
        self.session = session or requests.Session()
        if pool_maxsize is not None:
            # One pooled connection per concurrent worker.
            adapter = HTTPAdapter(pool_connections=1, pool_maxsize=pool_maxsize)
            self.session.mount("https://", adapter)
            self.session.mount("http://", adapter)

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "HttpClient":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def _headers(self, headers: dict[str, str] | None) -> dict[str, str]:
        out = {"User-Agent": USER_AGENT, "Accept": "application/json"}
        if headers:
            out.update(headers)
        return out

    def _raise_for_status(self, response: requests.Response) -> None:
        status = response.status_code
        if status != 200:
            body = response.text or ""
            raise HttpStatusError(status, body)

    def request_json(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        try:
            response = self.session.request(
                method=method,
                url=url,
                params=params,
                headers=self._headers(headers),
            )
        except requests.RequestException as exc:
            raise HttpRequestError(f"Request to {url} failed: {exc}") from exc
        self._raise_for_status(response)

        try:
            return response.json()
        except ValueError as exc:
            raise InvalidJsonError(f"Invalid JSON payload from {url}") from exc

    def get_json(
        self,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        return self.request_json("GET", url, params=params, headers=headers)
