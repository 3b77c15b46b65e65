"""Parsing HTTP requests and serving one client connection."""

from __future__ import annotations

import re
import threading
from typing import Any, Callable

from .logs import LogType, log_to_console
from .models import (
    BUFFER_SIZE,
    MAX_REQUESTS_PER_CONNECTION,
    SERVER_TIMEOUT,
    HttpRequest,
    HttpResponse,
)
from .response import send_response

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
CONTACT_PATH = "/contact"

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")

Receiver = Callable[[], bytes]


class BadRequest(Exception):
    """The request could not be parsed; holds what was parsed so far."""

    def __init__(self, message: str, request: HttpRequest | None = None) -> None:
        super().__init__(message)
        self.request = request if request is not None else HttpRequest()


def _to_int(value: str) -> int:
    match = _LEADING_INT.match(value)
    return int(match.group(1)) if match else 0


def _decode(data: bytes | str) -> str:
    return data.decode("latin-1") if isinstance(data, (bytes, bytearray)) else data


def _receive_more(receive: Receiver) -> str:
    try:
        chunk = receive()
    except OSError:
        return ""
    return _decode(chunk) if chunk else ""


def _set_header(request: HttpRequest, key: str, value: str) -> bool:
    key = key.lower()
    if key == "host":
        request.host = value
    elif key == "content-length":
        request.content_length = _to_int(value)
    elif key == "content-type":
        request.content_type = value
    elif key == "connection":
        request.connection = value
    else:
        return False
    return True


def is_contact_post(request: HttpRequest) -> bool:
    """True for the form submission the server records."""
    return request.method == "POST" and request.path == CONTACT_PATH


def parse_request(data: bytes | str, receive: Receiver) -> HttpRequest:
    """Parse a request, calling receive() for more bytes when it is incomplete.

    Raises BadRequest when the request is malformed or the client stops
    sending before it is complete.
    """
    request = HttpRequest()
    text = _decode(data)

    if "\r\n" not in text:
        raise BadRequest("request line is not terminated", request)

    while "\r\n\r\n" not in text:
        more = _receive_more(receive)
        if not more:
            raise BadRequest("headers are not terminated", request)
        text += more

    head, _, body = text.partition("\r\n\r\n")
    request_line, *header_lines = head.split("\r\n")

    parts = request_line.split(" ")
    if len(parts) < 3:
        raise BadRequest("malformed request line", request)
    request.method, request.path = parts[0], parts[1]

    for line in header_lines:
        if not line:
            continue
        key, separator, value = line.partition(":")
        if not separator:
            raise BadRequest(f"malformed header line: {line!r}", request)
        _set_header(request, key, value.lstrip(" "))

    request.body = body

    if is_contact_post(request):
        if request.content_length == 0:
            raise BadRequest("content-length not given", request)
        if request.content_type != FORM_CONTENT_TYPE:
            raise BadRequest("content-type not given", request)
        while len(request.body) < request.content_length:
            more = _receive_more(receive)
            if not more:
                raise BadRequest("request body is incomplete", request)
            request.body += more

    return request


def _recv(conn: Any) -> bytes:
    try:
        return conn.recv(BUFFER_SIZE)
    except OSError:
        return b""


def handle_connection(
    conn: Any,
    client_id: int,
    public_directory,
    records_path="records.txt",
) -> None:
    """Serve requests on one connection until it closes or its quota is spent."""
    log_to_console(
        LogType.INFO,
        f"Thread:{threading.get_ident()} is handling this client",
        client_id,
    )
    try:
        conn.settimeout(SERVER_TIMEOUT)
    except OSError as exc:
        log_to_console(LogType.ERROR, f"setsockopt failed: {exc}", client_id)

    served = 0
    try:
        while served < MAX_REQUESTS_PER_CONNECTION:
            data = _recv(conn)
            if not data:
                log_to_console(LogType.USER, "Client is Inactive", client_id)
                break

            response = HttpResponse()
            try:
                request = parse_request(data, lambda: _recv(conn))
            except BadRequest as exc:
                request = exc.request
                response.status_code = 400
            else:
                if is_contact_post(request):
                    response.status_code = 201

            try:
                send_response(conn, request, response, public_directory, records_path, client_id)
            except OSError:
                log_to_console(
                    LogType.ERROR,
                    "Response failed to send, sire! Closing connection",
                    client_id,
                )
                break

            if response.status_code in (200, 201):
                log_to_console(
                    LogType.SUCCESS,
                    f"[{response.status_code}] Response sent successfully",
                    client_id,
                )
            else:
                log_to_console(
                    LogType.ERROR,
                    f"[{response.status_code}] Response sent with Failure",
                    client_id,
                )

            served += 1
            if request.wants_close():
                log_to_console(
                    LogType.INFO, "Client's demanding to close the connection", client_id
                )
                break
            if served >= MAX_REQUESTS_PER_CONNECTION:
                log_to_console(
                    LogType.INFO, "Client's exhausted his requests limit", client_id
                )
    finally:
        print("-" * 48)
        log_to_console(LogType.USER, "Connection with the Client is closed", client_id)
        print("-" * 48, flush=True)
        conn.close()