"""Mailer registry for order notifications.

An ``InMemoryMailer`` is used until a real transport is installed at
startup with ``set_mailer``.
"""

from marketplace.notifications.mailer import InMemoryMailer, Mailer

_mailer: Mailer | None = None


def get_mailer() -> Mailer:
    global _mailer
    if _mailer is None:
        _mailer = InMemoryMailer()
    return _mailer


def set_mailer(mailer: Mailer) -> None:
    global _mailer
    _mailer = mailer


def reset_mailer() -> None:
    global _mailer
    _mailer = None
