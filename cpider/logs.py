"""Coloured console logging."""

from __future__ import annotations

from enum import Enum


class LogType(Enum):
    """Kinds of log line, each with its label and ANSI colour code."""

    ERROR = ("ERROR", "31")
    INFO = ("INFO", "32")
    DEBUG = ("DEBUG", "33")
    USER = ("USER", "37")
    SUCCESS = ("SUCCESS", "34")
    WARNING = ("WARNING", "36")

    @property
    def flag(self) -> str:
        return self.value[0]

    @property
    def color(self) -> str:
        return self.value[1]


def format_log(log_type: LogType, message: str, client_id: int = 0) -> str:
    """Build a coloured log line; a non-zero client id is included."""
    prefix = f"\x1b[{log_type.color}m[{log_type.flag}] "
    if client_id:
        prefix += f"[Client: {client_id}] "
    return f"{prefix}{message}\x1b[0m"


def log_to_console(log_type: LogType, message: str, client_id: int = 0) -> None:
    """Print a coloured log line to standard output."""
    print(format_log(log_type, message, client_id), flush=True)