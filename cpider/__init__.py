"""A small threaded HTTP/1.1 server for static files and form records."""

__version__ = "0.1.0"