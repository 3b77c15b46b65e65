"""Request and response records plus the server's fixed settings."""

from __future__ import annotations

from dataclasses import dataclass

PORT = 4000
SERVER_NAME = "cpider"
BUFFER_SIZE = 3000
MAX_REQUESTS_PER_CONNECTION = 20
SERVER_TIMEOUT = 10
THREAD_POOL_SIZE = 16

DEFAULT_CONNECTION = "keep-alive"


@dataclass
class HttpRequest:
    """A parsed HTTP request."""

    method: str | None = None
    path: str | None = None
    host: str | None = None
    content_type: str | None = None
    content_length: int = 0
    connection: str | None = DEFAULT_CONNECTION
    body: str | None = None

    def wants_close(self) -> bool:
        """True when the client asked for the connection to be closed."""
        return self.connection == "close"


@dataclass
class HttpResponse:
    """The response being built for one request."""

    status_code: int = 0
    content_type: str | None = None
    content_length: int = 0
    connection: str = DEFAULT_CONNECTION
    body: bytes = b""