"""FIFO of accepted client connections waiting for a worker."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Any, Iterator


@dataclass
class ClientJob:
    """An accepted connection and the id used to name it in logs."""

    client_socket: Any
    client_id: int

    def _describe(self) -> str:
        fileno = getattr(self.client_socket, "fileno", None)
        handle = fileno() if callable(fileno) else self.client_socket
        return f"({handle}, {self.client_id})"


class WorkQueue:
    """First-in first-out queue of client jobs."""

    def __init__(self) -> None:
        self._jobs: deque[ClientJob] = deque()

    def enqueue(self, client_socket: Any, client_id: int) -> ClientJob:
        """Append a job at the tail and return it."""
        job = ClientJob(client_socket, client_id)
        self._jobs.append(job)
        return job

    def dequeue(self) -> ClientJob | None:
        """Remove and return the head job, or None when empty."""
        return self._jobs.popleft() if self._jobs else None

    def __len__(self) -> int:
        return len(self._jobs)

    def __iter__(self) -> Iterator[ClientJob]:
        return iter(self._jobs)

    def __str__(self) -> str:
        return " <- ".join(job._describe() for job in self._jobs)