"""IGDB API client: request assembly and a thin sender over httpx."""

import sys
from typing import Any, Optional

import httpx

from igq.api.query import QueryBuilder

DEFAULT_BASE_URL = "https://api-v3.igdb.com"
API_KEY_HEADER = "user-key"
CONTENT_TYPE = "application/text"


class IGDBApiError(Exception):
    """Structured error from the IGDB API."""

    def __init__(self, status_code: int, message: str, detail: str = ""):
        self.status_code = status_code
        self.message = message
        self.detail = detail
        super().__init__(f"[{status_code}] {message}")

    @classmethod
    def from_response(cls, response: httpx.Response) -> "IGDBApiError":
        """Parse an IGDB error response."""
        try:
            body = response.json()
        except ValueError:
            return cls(
                status_code=response.status_code,
                message=response.text[:500] if response.text else "Unknown error",
            )

        # Errors come back either as a list of {title, cause} or as {message}
        if isinstance(body, list) and body and isinstance(body[0], dict):
            error = body[0]
            return cls(
                status_code=response.status_code,
                message=error.get("title", response.reason_phrase or "Unknown error"),
                detail=error.get("cause", ""),
            )
        if isinstance(body, dict):
            return cls(
                status_code=response.status_code,
                message=body.get("message", response.reason_phrase or "Unknown error"),
                detail=body.get("detail", ""),
            )
        return cls(
            status_code=response.status_code,
            message=response.reason_phrase or "Unknown error",
        )


def assemble_request(api_key: str, url: str, body: bytes) -> httpx.Request:
    """Build a GET request carrying a query body.

    Raises:
        httpx.InvalidURL: if ``url`` is malformed or not absolute.
    """
    target = httpx.URL(url)
    if not target.scheme or not target.host:
        raise httpx.InvalidURL(f"Not an absolute URL: {url!r}")

    return httpx.Request(
        "GET",
        target,
        headers={
            API_KEY_HEADER: api_key,
            "content-type": CONTENT_TYPE,
        },
        content=body,
    )


class IGDBClient:
    """HTTP client for the IGDB API.

    Builds requests from a QueryBuilder and hands them to httpx. Errors are
    raised, never retried.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        verbose: bool = False,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.verbose = verbose
        self._transport = transport

    def url(self, endpoint: str) -> str:
        """Build full endpoint URL."""
        return f"{self.base_url}/{endpoint.strip('/')}"

    def prepare(self, endpoint: str, builder: QueryBuilder) -> httpx.Request:
        """Build the request for ``endpoint`` without sending it."""
        return builder.build(self.api_key, self.url(endpoint))

    def send(self, request: httpx.Request) -> Any:
        """Send a built request and decode the JSON response."""
        if self.verbose:
            print(f"[HTTP] {request.method} {request.url}", file=sys.stderr)
            print(f"[HTTP] body={request.content.decode('utf-8')}", file=sys.stderr)

        with httpx.Client(transport=self._transport, timeout=30.0) as http:
            response = http.send(request)

        if self.verbose:
            print(f"[HTTP] {response.status_code} ({len(response.content)} bytes)", file=sys.stderr)

        if response.status_code >= 400:
            raise IGDBApiError.from_response(response)

        if not response.content:
            return []

        return response.json()

    def query(self, endpoint: str, builder: QueryBuilder) -> Any:
        """Execute a query against an endpoint (games, companies, ...)."""
        return self.send(self.prepare(endpoint, builder))
