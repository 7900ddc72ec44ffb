"""Application settings read from the environment.

Protean's own settings (databases, event store, processing mode) live in
``domain.toml`` next to the domain module; this module only covers the knobs
the marketplace code reads directly.
"""

import os

DEFAULT_FRONTEND_URL = "http://localhost:5173"
DEFAULT_MAIL_SENDER = "orders@bazzarnet.local"
DEFAULT_PAGE_SIZE = 10


def current_env() -> str:
    return (os.getenv("PROTEAN_ENV") or os.getenv("ENVIRONMENT") or "development").lower()


def frontend_url() -> str:
    """Base URL used for order tracking links in customer emails."""
    return os.getenv("FRONTEND_URL", DEFAULT_FRONTEND_URL).rstrip("/")


def mail_sender() -> str:
    return os.getenv("MAIL_SENDER", DEFAULT_MAIL_SENDER)


def orders_page_size() -> int:
    try:
        return max(1, int(os.getenv("ORDERS_PAGE_SIZE", DEFAULT_PAGE_SIZE)))
    except ValueError:
        return DEFAULT_PAGE_SIZE


def log_dir() -> str | None:
    """Directory for rotating log files, or None to log to stdout only."""
    return os.getenv("LOG_DIR") or None
