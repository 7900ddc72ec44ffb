"""Outbound email: the message shape, the transport interface and the
in-memory transport used until a real one is installed."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from uuid import uuid4


@dataclass(frozen=True)
class EmailMessage:
    to: str
    subject: str
    body: str
    html_body: str | None = None
    sender: str | None = None


class Mailer(ABC):
    @abstractmethod
    def send(self, message: EmailMessage) -> dict:
        """Hand ``message`` to the transport.

        Returns:
            dict with keys: message_id, status ("sent" or "failed"), error (optional)
        """
        ...


class InMemoryMailer(Mailer):
    """Keeps every accepted message in ``outbox``."""

    def __init__(self):
        self.outbox: list[EmailMessage] = []
        self._failure: str | None = None
        self._raise_failure = False

    def fail(self, reason: str = "Mailbox unavailable", raise_error: bool = False):
        """Reject later messages, either with a failed status or by raising."""
        self._failure = reason
        self._raise_failure = raise_error

    def send(self, message: EmailMessage) -> dict:
        if self._failure and self._raise_failure:
            raise ConnectionError(self._failure)
        if self._failure:
            return {"message_id": None, "status": "failed", "error": self._failure}

        self.outbox.append(message)
        return {"message_id": f"msg-{uuid4().hex[:12]}", "status": "sent"}
