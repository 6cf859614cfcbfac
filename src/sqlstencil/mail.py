"""Plain-text notification e-mails."""

from __future__ import annotations

import smtplib
import textwrap
from email.message import EmailMessage
from email.utils import formataddr
from typing import Protocol

from sqlstencil.errors import MailMessageError

DEFAULT_SIGNATURE = (
    "-- \nThis e-mail has been automatically generated. Any direct reply may not be delivered."
)
WRAP_WIDTH = 70


class SmtpSender(Protocol):
    def send_message(self, msg: EmailMessage) -> object: ...


def _address(address: str, name: str | None) -> str:
    address = address.strip()
    return formataddr((name, address)) if name else address


def _wrap(text: str) -> str:
    lines = []
    for line in text.split("\n"):
        if len(line) <= WRAP_WIDTH:
            lines.append(line)
        else:
            lines.extend(textwrap.wrap(line, WRAP_WIDTH, break_long_words=False)
                         or [""])
    return "\n".join(lines)


class MailMessage:
    def __init__(self) -> None:
        self.subject = ""
        self.body = ""
        self.signature: str | None = DEFAULT_SIGNATURE
        self._to: str | None = None
        self._sender: str | None = None
        self._reply_to: str | None = None
        self._bounce: str | None = None

    def set_to(self, address: str, name: str | None = None) -> None:
        self._to = _address(address, name)

    def set_sender(self, address: str, name: str | None = None) -> None:
        self._sender = _address(address, name)

    def set_reply_to(self, address: str, name: str | None = None) -> None:
        self._reply_to = _address(address, name)

    def set_bounce(self, address: str) -> None:
        """Envelope sender for delivery failures (the Sender header)."""
        self._bounce = address.strip()

    def build(self) -> EmailMessage:
        """Compose the message. Raises MailMessageError when subject, body, recipient or sender is missing."""
        subject = self.subject.strip()
        body = self.body.strip()
        if not subject or not body or self._to is None or self._sender is None:
            raise MailMessageError("Mail message requires a subject, body, recipient and sender")

        text = body.replace("\r\n", "\n")
        if self.signature is not None:
            text += "\n" + self.signature.replace("\r\n", "\n")

        msg = EmailMessage()
        msg["Subject"] = subject
        msg["From"] = self._sender
        msg["To"] = self._to
        if self._reply_to is not None:
            msg["Reply-To"] = self._reply_to
        if self._bounce is not None:
            msg["Sender"] = self._bounce
        msg.set_content(_wrap(text))
        return msg

    def send(self, smtp: SmtpSender | None = None) -> None:
        """Hand the message to smtp, or to an MTA on localhost when none is given."""
        msg = self.build()
        if smtp is not None:
            smtp.send_message(msg)
            return
        with smtplib.SMTP("localhost") as server:
            server.send_message(msg)
