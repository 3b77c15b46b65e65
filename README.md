# cpider

cpider is a small HTTP/1.1 web server that serves the files in one directory.
A fixed pool of worker threads takes accepted connections from a shared work
queue. Each connection is kept alive for up to 20 requests or until the client
sends `Connection: close`. A connection that sends nothing for 10 seconds is
closed.

## Installing

```
pip install .
```

## Running

```
cpider path/to/public
```

Before it starts, the server checks the directory. It must exist and contain
at least two non-hidden entries whose names have an extension; otherwise the
command prints an error and exits with status 1. Entries whose extension has
no known content type are reported as unsupported, and a warning is printed
when `index.html` is missing. The server then listens on port 4000 on all
interfaces, with 16 worker threads, and appends form records to
`./records.txt` in the current working directory. Stop it with Ctrl-C.

## What it serves

- `GET /` and `GET /home` return `index.html`.
- `GET /about` (a path without a dot) returns `about.html`.
- `GET /style.css` returns the file as it is, with the content type for its
  extension (everything after the first dot). Known extensions are html, htm,
  css, js, json, txt, csv, xml, jpg, jpeg, png, gif, webp, svg, ico, mp4,
  webm, ogg, mp3, wav, pdf and zip. Unknown extensions get
  `415 Unsupported Media Type`; missing files and paths that lead outside the
  directory get `404 Not Found`; a path naming a directory gets
  `500 Internal Server Error`.
- `POST /contact` with `Content-Type: application/x-www-form-urlencoded` and
  a non-zero `Content-Length` appends the body's `&`-separated fields as one
  comma-separated line to the records file and answers `201 Created`. If the
  body is shorter than `Content-Length`, the server waits for the rest.
- Malformed requests, and `POST /contact` without the headers above, get
  `400 Bad Request`.
- Any other method or path is not handled: the reply carries status code `0`
  with the reason phrase `OK`.

Every response other than a served file has a small HTML body naming its
status. Every response carries `Content-Type`, `Content-Length`, `Connection`,
`Keep-Alive: timeout=10, max=20` and `Server: cpider` headers. Log lines go to
standard output, coloured by kind and tagged with the client's port.

## Using it from Python

```python
import threading

from cpider.server import Server

server = Server("public", port=0, pool_size=4, records_path="records.txt")
print("listening on", server.port)
thread = threading.Thread(target=server.serve_forever)
thread.start()
...
server.shutdown()
thread.join()
```

`Server` binds and starts its workers when it is created; `port=0` picks a
free port, available afterwards as `server.port`. `serve_forever()` blocks
until `shutdown()` is called from another thread, then closes the listening
socket.

The pieces can also be used without a socket:

- `cpider.server.scan_directory(directory)` performs the start-up check and
  returns the names of unsupported files, raising `DirectoryError` on failure.
- `cpider.request.parse_request(data, receive)` turns raw request bytes into
  an `HttpRequest`, calling `receive()` when it needs more bytes, and raises
  `BadRequest` for malformed input.
- `cpider.response.render_response(request, response, public_directory,
  records_path)` completes an `HttpResponse` and returns the bytes of the
  reply.
- `cpider.mime.content_type_for(extension)` and
  `cpider.mime.validate_content_type(extension)` look up content types.

## What it does not do

The server has no TLS, no directory listings, no percent-decoding or query
string handling in paths, no chunked transfer encoding, and no configuration
beyond the arguments of `Server`; the `cpider` command always uses the
defaults described above.

## Running the tests

```
pip install .[test]
pytest
```