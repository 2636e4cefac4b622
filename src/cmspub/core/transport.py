"""
HTTP transport for the content API.

Sends JSON or multipart requests with bearer authentication and classifies
every response into a decoded mapping, an APIError, or a TransportError.

Usage:
    with Transport("https://cms.example.com", token="...") as transport:
        data = transport.get("/api/v1/posts/hello-world")
        transport.put("/api/v1/posts/hello-world", {"status": "published"})
"""

import json
from pathlib import Path
from typing import Any, Optional
from urllib.parse import urlsplit, urlunsplit

import httpx

from cmspub.core.errors import APIError, TransportError, ValidationError
from cmspub.core.logging import get_logger

logger = get_logger(__name__)

DEFAULT_TIMEOUT = 30.0


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-standard JSON constant {name}")


def join_url(base_url: str, path: str) -> str:
    """Join path onto base_url segment-wise, keeping the query string of path verbatim."""
    base = urlsplit(base_url)
    endpoint, _, query = path.partition("?")
    segments = [s for s in f"{base.path}/{endpoint}".split("/") if s]
    return urlunsplit((base.scheme, base.netloc, "/" + "/".join(segments), query, ""))


def decode_response(status: int, raw: str) -> dict[str, Any]:
    """Classify a response body by status.

    Returns the decoded object ({} for an empty body). Raises APIError for
    status >= 400 and TransportError for a success body that is not a JSON object.
    """
    body: Optional[dict[str, Any]] = {}
    error: Optional[str] = None
    if raw.strip():
        try:
            decoded = json.loads(raw, parse_constant=_reject_constant)
        except ValueError as e:
            body, error = None, str(e)
        else:
            if isinstance(decoded, dict):
                body = decoded
            else:
                body, error = None, f"expected a JSON object, got {type(decoded).__name__}"

    if status >= 400:
        raise APIError(status, body=body, raw=raw)
    if body is None:
        raise TransportError(f"failed to decode response: {error}", code="invalid_response")
    return body


class Transport:
    """
    Synchronous client for one API base URL.

    Args:
        base_url: Scheme, host, and optional path prefix of the API.
        token: Bearer token; the Authorization header is omitted when empty.
        timeout: Per-request timeout in seconds.
        transport: Optional httpx transport (tests pass httpx.MockTransport).

    Raises:
        ValidationError: If base_url is blank.
    """

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        if not (base_url or "").strip():
            raise ValidationError("base URL is required", code="missing_base_url")
        self.base_url = base_url.strip().rstrip("/")
        self.token = token or ""

        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        self._client = httpx.Client(timeout=timeout, headers=headers, transport=transport)

    def __enter__(self) -> "Transport":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def request(
        self,
        method: str,
        path: str,
        json: Any = None,
        files: Optional[dict[str, Any]] = None,
        data: Optional[dict[str, str]] = None,
    ) -> dict[str, Any]:
        """
        Send one request and decode its response.

        Args:
            method: HTTP method.
            path: API path, optionally with a query string.
            json: JSON-serializable body, sent as application/json.
            files: Multipart file parts (mutually exclusive with json).
            data: Extra multipart form fields.

        Returns:
            The decoded JSON object.

        Raises:
            APIError: Status >= 400.
            TransportError: Network failure or undecodable success body.
        """
        url = join_url(self.base_url, path)
        logger.debug("api_request", method=method, url=url)
        try:
            response = self._client.request(method, url, json=json, files=files, data=data)
        except httpx.HTTPError as e:
            logger.debug("api_request_failed", method=method, url=url, error=str(e))
            raise TransportError(f"{method} {url} failed: {e}") from e

        logger.debug("api_response", method=method, url=url, status_code=response.status_code)
        return decode_response(response.status_code, response.text)

    def get(self, path: str) -> dict[str, Any]:
        return self.request("GET", path)

    def post(self, path: str, payload: Any) -> dict[str, Any]:
        return self.request("POST", path, json=payload)

    def put(self, path: str, payload: Any) -> dict[str, Any]:
        return self.request("PUT", path, json=payload)

    def delete(self, path: str) -> dict[str, Any]:
        return self.request("DELETE", path)

    def upload(
        self,
        path: str,
        file_path: Path,
        fields: Optional[dict[str, str]] = None,
        field_name: str = "file",
    ) -> dict[str, Any]:
        """POST file_path as a multipart part named field_name, with fields as form fields."""
        file_path = Path(file_path)
        try:
            handle = file_path.open("rb")
        except OSError as e:
            raise ValidationError(f"cannot read {file_path}: {e}", code="invalid_file") from e
        with handle:
            return self.request(
                "POST", path,
                files={field_name: (file_path.name, handle)},
                data=dict(fields or {}),
            )
