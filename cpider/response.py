"""Building and sending HTTP responses."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from .logs import LogType, log_to_console
from .mime import DEFAULT_CONTENT_TYPE, content_type_for
from .models import (
    MAX_REQUESTS_PER_CONNECTION,
    SERVER_NAME,
    SERVER_TIMEOUT,
    HttpRequest,
    HttpResponse,
)

_STATUS_MESSAGES = {
    200: "OK",
    201: "Created",
    400: "Bad Request",
    401: "Unauthorized",
    404: "Not Found",
    415: "Unsupported Media Type",
    500: "Internal Server Error",
}


class StaticFileError(Exception):
    """A static file could not be served; carries the HTTP status to send."""

    def __init__(self, status_code: int, message: str = "") -> None:
        super().__init__(message or status_message(status_code))
        self.status_code = status_code


def status_message(status_code: int) -> str:
    """Reason phrase for a status code; unknown codes get "OK"."""
    return _STATUS_MESSAGES.get(status_code, "OK")


def _resolve_path(request: HttpRequest, response: HttpResponse, public_directory) -> Path:
    base = Path(public_directory)
    path = request.path or ""
    if path in ("/", "/home"):
        return base / "index.html"
    if "." not in path:
        return base / (path.lstrip("/") + ".html")
    extension = path.split(".", 1)[1]
    content_type = content_type_for(extension)
    if content_type is None:
        raise StaticFileError(415)
    response.content_type = content_type
    return base / path.lstrip("/")


def read_static_file(
    request: HttpRequest,
    response: HttpResponse,
    public_directory,
    client_id: int = 0,
) -> bytes:
    """Read the file a GET request names, setting its content type if known."""
    file_path = _resolve_path(request, response, public_directory)
    log_to_console(LogType.DEBUG, f"Actual Resource Path found: {file_path}", client_id)

    base = Path(public_directory).resolve()
    resolved = file_path.resolve()
    if resolved != base and base not in resolved.parents:
        log_to_console(LogType.ERROR, "The File doesn't exist, sire!", client_id)
        raise StaticFileError(404)

    try:
        handle = open(resolved, "rb")
    except IsADirectoryError as exc:
        log_to_console(LogType.ERROR, "Read Operation faild, sire!", client_id)
        raise StaticFileError(500) from exc
    except OSError as exc:
        log_to_console(LogType.ERROR, "The File doesn't exist, sire!", client_id)
        raise StaticFileError(404) from exc

    with handle:
        log_to_console(LogType.USER, "Requested HTML file opened, sire!", client_id)
        try:
            data = handle.read()
        except OSError as exc:
            log_to_console(LogType.ERROR, "Read Operation faild, sire!", client_id)
            raise StaticFileError(500) from exc

    log_to_console(LogType.USER, "File Read is successful, sire!", client_id)
    return data


def handle_post(
    request: HttpRequest,
    response: HttpResponse,
    records_path,
    client_id: int = 0,
) -> None:
    """Append the form fields of the body as one comma-separated record."""
    fields = [field for field in (request.body or "").split("&") if field]
    record = ", ".join(fields) + "\n"
    try:
        with open(records_path, "a", encoding="utf-8") as records:
            records.write(record)
    except OSError:
        log_to_console(LogType.ERROR, "Failed to add to the record, sire!", client_id)
        response.status_code = 500
        return
    log_to_console(LogType.INFO, "Record added, sire!", client_id)


def render_response(
    request: HttpRequest,
    response: HttpResponse,
    public_directory,
    records_path,
    client_id: int = 0,
) -> bytes:
    """Complete the response for the request and return its wire bytes."""
    response.content_type = DEFAULT_CONTENT_TYPE

    if response.status_code != 400 and request.method == "GET":
        response.status_code = 404
        log_to_console(LogType.USER, f"Requested Path: {request.path}", client_id)
        try:
            response.body = read_static_file(request, response, public_directory, client_id)
        except StaticFileError as exc:
            response.status_code = exc.status_code
        else:
            response.content_length = len(response.body)
            response.status_code = 200

    if response.status_code == 201:
        handle_post(request, response, records_path, client_id)

    message = status_message(response.status_code)

    if response.status_code != 200:
        response.body = (
            f"<html><body><h1>{response.status_code}, {message}</h1></body></html>"
        ).encode()
        response.content_length = len(response.body)

    if request.wants_close():
        response.connection = "close"

    head = (
        f"HTTP/1.1 {response.status_code} {message}\r\n"
        f"Content-Type: {response.content_type}\r\n"
        f"Content-Length: {response.content_length}\r\n"
        f"Connection: {response.connection}\r\n"
        f"Keep-Alive: timeout={SERVER_TIMEOUT}, max={MAX_REQUESTS_PER_CONNECTION}\r\n"
        f"Server: {SERVER_NAME}\r\n"
        "\r\n"
    )
    return head.encode() + response.body


def send_response(
    conn: Any,
    request: HttpRequest,
    response: HttpResponse,
    public_directory,
    records_path,
    client_id: int = 0,
) -> None:
    """Render the response and send all of it; raises OSError on failure."""
    conn.sendall(render_response(request, response, public_directory, records_path, client_id))