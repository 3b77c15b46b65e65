import pytest

from cpider.models import MAX_REQUESTS_PER_CONNECTION, SERVER_TIMEOUT
from cpider.request import BadRequest, handle_connection, parse_request


class FakeConn:
    def __init__(self, chunks, fail_send=False):
        self.chunks = list(chunks)
        self.sent = b""
        self.closed = False
        self.timeout = None
        self.fail_send = fail_send

    def settimeout(self, value):
        self.timeout = value

    def recv(self, size):
        return self.chunks.pop(0) if self.chunks else b""

    def sendall(self, data):
        if self.fail_send:
            raise OSError("broken pipe")
        self.sent += data

    def close(self):
        self.closed = True


def no_more():
    return b""


def feeder(chunks):
    pending = list(chunks)
    return lambda: pending.pop(0) if pending else b""


def test_parse_request_line_and_headers():
    data = b"GET /about HTTP/1.1\r\nHost: localhost\r\nConnection: close\r\n\r\n"
    request = parse_request(data, no_more)
    assert request.method == "GET"
    assert request.path == "/about"
    assert request.host == "localhost"
    assert request.connection == "close"
    assert request.wants_close()


def test_header_keys_are_case_insensitive():
    data = b"GET / HTTP/1.1\r\nHOST: example.com\r\ncOnTeNt-TyPe: text/plain\r\n\r\n"
    request = parse_request(data, no_more)
    assert request.host == "example.com"
    assert request.content_type == "text/plain"


def test_content_length_parses_leading_digits():
    data = b"GET / HTTP/1.1\r\nContent-Length: 12abc\r\n\r\n"
    assert parse_request(data, no_more).content_length == 12


def test_non_numeric_content_length_is_zero():
    data = b"GET / HTTP/1.1\r\nContent-Length: abc\r\n\r\n"
    assert parse_request(data, no_more).content_length == 0


def test_unknown_headers_are_ignored_and_connection_defaults():
    data = b"GET / HTTP/1.1\r\nAccept: */*\r\n\r\n"
    request = parse_request(data, no_more)
    assert request.connection == "keep-alive"
    assert not request.wants_close()


def test_missing_line_terminator_is_bad_request():
    with pytest.raises(BadRequest):
        parse_request(b"GET / HTTP/1.1", no_more)


def test_incomplete_headers_are_completed_by_receive():
    data = b"GET /a HTTP/1.1\r\nHost: x\r\n"
    request = parse_request(data, feeder([b"Connection: close\r\n\r\n"]))
    assert request.path == "/a"
    assert request.connection == "close"


def test_incomplete_headers_without_more_data_is_bad_request():
    with pytest.raises(BadRequest):
        parse_request(b"GET / HTTP/1.1\r\nHost: x\r\n", no_more)


def test_receive_error_is_bad_request():
    def broken():
        raise OSError("timed out")

    with pytest.raises(BadRequest):
        parse_request(b"GET / HTTP/1.1\r\n", broken)


def test_request_line_without_two_spaces_is_bad_request():
    with pytest.raises(BadRequest):
        parse_request(b"GET /\r\n\r\n", no_more)


def test_header_without_colon_is_bad_request_and_keeps_partial_request():
    data = b"GET / HTTP/1.1\r\nConnection: close\r\nbroken\r\n\r\n"
    with pytest.raises(BadRequest) as info:
        parse_request(data, no_more)
    assert info.value.request.connection == "close"


def test_contact_post_requires_content_length():
    data = (
        b"POST /contact HTTP/1.1\r\n"
        b"Content-Type: application/x-www-form-urlencoded\r\n\r\nname=a"
    )
    with pytest.raises(BadRequest):
        parse_request(data, no_more)


def test_contact_post_requires_form_content_type():
    data = b"POST /contact HTTP/1.1\r\nContent-Type: text/plain\r\nContent-Length: 6\r\n\r\nname=a"
    with pytest.raises(BadRequest):
        parse_request(data, no_more)


def test_contact_post_body_is_completed_by_receive():
    data = (
        b"POST /contact HTTP/1.1\r\n"
        b"Content-Type: application/x-www-form-urlencoded\r\n"
        b"Content-Length: 15\r\n\r\nname=ann"
    )
    request = parse_request(data, feeder([b"&age=30"]))
    assert request.body == "name=ann&age=30"
    assert len(request.body) == request.content_length


def test_contact_post_with_short_body_and_no_more_data_is_bad_request():
    data = (
        b"POST /contact HTTP/1.1\r\n"
        b"Content-Type: application/x-www-form-urlencoded\r\n"
        b"Content-Length: 40\r\n\r\nname=ann"
    )
    with pytest.raises(BadRequest):
        parse_request(data, no_more)


@pytest.fixture
def public(tmp_path):
    directory = tmp_path / "public"
    directory.mkdir()
    (directory / "index.html").write_bytes(b"<p>home</p>")
    return directory


def test_handle_connection_serves_file_and_closes(public, tmp_path):
    conn = FakeConn([b"GET / HTTP/1.1\r\nConnection: close\r\n\r\n", b"GET / HTTP/1.1\r\n\r\n"])
    handle_connection(conn, 7, public, tmp_path / "records.txt")
    assert conn.sent.startswith(b"HTTP/1.1 200 OK\r\n")
    assert conn.sent.endswith(b"<p>home</p>")
    assert b"Connection: close\r\n" in conn.sent
    assert conn.closed
    assert conn.timeout == SERVER_TIMEOUT
    assert len(conn.chunks) == 1


def test_handle_connection_keeps_alive_until_client_goes_quiet(public, tmp_path):
    request = b"GET / HTTP/1.1\r\n\r\n"
    conn = FakeConn([request, request])
    handle_connection(conn, 7, public, tmp_path / "records.txt")
    assert conn.sent.count(b"HTTP/1.1 200 OK") == 2
    assert conn.closed


def test_handle_connection_stops_at_request_limit(public, tmp_path):
    request = b"GET / HTTP/1.1\r\n\r\n"
    conn = FakeConn([request] * (MAX_REQUESTS_PER_CONNECTION + 5))
    handle_connection(conn, 7, public, tmp_path / "records.txt")
    assert conn.sent.count(b"HTTP/1.1 ") == MAX_REQUESTS_PER_CONNECTION
    assert len(conn.chunks) == 5


def test_handle_connection_answers_bad_request(public, tmp_path):
    conn = FakeConn([b"garbage"])
    handle_connection(conn, 7, public, tmp_path / "records.txt")
    assert conn.sent.startswith(b"HTTP/1.1 400 Bad Request\r\n")
    assert conn.closed


def test_handle_connection_records_contact_form(public, tmp_path):
    records = tmp_path / "records.txt"
    conn = FakeConn(
        [
            b"POST /contact HTTP/1.1\r\n"
            b"Content-Type: application/x-www-form-urlencoded\r\n"
            b"Content-Length: 15\r\nConnection: close\r\n\r\nname=ann",
            b"&age=30",
        ]
    )
    handle_connection(conn, 7, public, records)
    assert conn.sent.startswith(b"HTTP/1.1 201 Created\r\n")
    assert records.read_text(encoding="utf-8") == "name=ann, age=30\n"


def test_handle_connection_stops_when_send_fails(public, tmp_path):
    request = b"GET / HTTP/1.1\r\n\r\n"
    conn = FakeConn([request, request], fail_send=True)
    handle_connection(conn, 7, public, tmp_path / "records.txt")
    assert conn.closed
    assert len(conn.chunks) == 1