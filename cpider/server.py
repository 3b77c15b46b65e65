"""Listening socket, worker pool and command-line entry point."""

from __future__ import annotations

import os
import socket
import sys
import threading
from pathlib import Path

from .logs import LogType, log_to_console
from .mime import validate_content_type
from .models import PORT, THREAD_POOL_SIZE
from .request import handle_connection
from .work_queue import WorkQueue

CONNECTIONS_BACKLOG = 256
DEFAULT_RECORDS_PATH = "./records.txt"
_ACCEPT_POLL_SECONDS = 0.5


class DirectoryError(Exception):
    """The public directory is missing or has nothing to serve."""


def scan_directory(directory) -> list[str]:
    """Check the public directory and return the names of unsupported files.

    Raises DirectoryError if it does not exist or holds fewer than two
    files with an extension.
    """
    try:
        names = sorted(os.listdir(directory))
    except OSError as exc:
        raise DirectoryError(
            "cannot find path, input a directory that actually exists lol!"
        ) from exc

    log_to_console(LogType.SUCCESS, "Scanning Directory, sire!")
    log_to_console(LogType.SUCCESS, "Scanning Assets for Service, sire!")

    unsupported: list[str] = []
    servable = 0
    for name in names:
        if name.startswith("."):
            continue
        _, dot, extension = name.partition(".")
        if not dot:
            continue
        if not validate_content_type(extension):
            log_to_console(
                LogType.WARNING, f"File: \x1b[35m{name}\x1b[0m is not supported"
            )
            unsupported.append(name)
        servable += 1

    if servable < 2:
        raise DirectoryError(
            "directory's empty, what do you want me to serve, nothingburger?"
        )

    if "index.html" not in names:
        log_to_console(
            LogType.WARNING,
            "File: \x1b[35mindex.html\x1b[0m for default home page is not given",
        )
    return unsupported


class Server:
    """A static file server with a fixed pool of worker threads."""

    def __init__(
        self,
        public_directory,
        port: int = PORT,
        pool_size: int = THREAD_POOL_SIZE,
        records_path=DEFAULT_RECORDS_PATH,
    ) -> None:
        self.public_directory = Path(public_directory)
        self.records_path = records_path
        self._queue = WorkQueue()
        self._ready = threading.Condition()
        self._stopping = threading.Event()

        try:
            self._socket = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        except OSError:
            log_to_console(LogType.ERROR, "Cannot create listening socket, sire!")
            raise
        log_to_console(LogType.INFO, "Listening Socket Created, sire!")
        self._socket.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)

        try:
            self._socket.bind(("", port))
        except OSError:
            log_to_console(LogType.ERROR, "Error binding, sire!")
            self._socket.close()
            raise
        log_to_console(LogType.INFO, "Binding port and ip successful, sire!")

        try:
            self._socket.listen(CONNECTIONS_BACKLOG)
        except OSError:
            log_to_console(LogType.ERROR, "Cannot listen somehow, sire!")
            self._socket.close()
            raise
        self._socket.settimeout(_ACCEPT_POLL_SECONDS)
        self.port: int = self._socket.getsockname()[1]

        log_to_console(
            LogType.INFO,
            f"Provisioning {pool_size} threads for the workload as commanded, sire!",
        )
        print("[Spinning Threads]: ", end="", flush=True)
        self._workers = []
        for _ in range(pool_size):
            worker = threading.Thread(target=self._worker_lifetime, daemon=True)
            worker.start()
            self._workers.append(worker)
            print("#", end="", flush=True)
        print(flush=True)

        log_to_console(LogType.INFO, f"Server Listening on Port {self.port}.... ")
        log_to_console(LogType.INFO, "Waiting for a client to connect.... ")

    def _worker_lifetime(self) -> None:
        while True:
            with self._ready:
                while not len(self._queue) and not self._stopping.is_set():
                    self._ready.wait()
                if self._stopping.is_set():
                    return
                job = self._queue.dequeue()
            if job is not None:
                handle_connection(
                    job.client_socket, job.client_id, self.public_directory, self.records_path
                )

    def serve_forever(self) -> None:
        """Accept connections and hand them to the workers until shut down."""
        try:
            while not self._stopping.is_set():
                try:
                    client, address = self._socket.accept()
                except socket.timeout:
                    continue
                except OSError:
                    if self._stopping.is_set():
                        break
                    log_to_console(
                        LogType.ERROR, "Cannot establish connection with client, sire!"
                    )
                    continue

                client.settimeout(None)
                client_id = address[1]
                print("-" * 48)
                log_to_console(LogType.SUCCESS, "A Client is connected", client_id)
                print("-" * 48, flush=True)
                with self._ready:
                    self._queue.enqueue(client, client_id)
                    self._ready.notify()
        finally:
            self._socket.close()

    def shutdown(self) -> None:
        """Stop accepting connections and let idle workers exit."""
        self._stopping.set()
        with self._ready:
            self._ready.notify_all()


def main(argv=None) -> int:
    """Serve the directory named on the command line."""
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) != 1:
        print("Usage: cpider-web-server <directory>", file=sys.stderr)
        return 1

    try:
        scan_directory(args[0])
    except DirectoryError as exc:
        print(exc, file=sys.stderr)
        return 1

    try:
        server = Server(args[0])
    except OSError:
        log_to_console(LogType.ERROR, "Error initializing server, sire!")
        return 1

    try:
        server.serve_forever()
    except KeyboardInterrupt:
        server.shutdown()
    return 0