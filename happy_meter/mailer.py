"""SMTP transport for the weekly report email."""

from __future__ import annotations

import smtplib
import ssl
from dataclasses import dataclass
from email.message import EmailMessage
from typing import Optional


class MailerError(RuntimeError):
    """Raised when the SMTP server rejects or drops a message."""

    def __init__(self, recipient: str, error: str) -> None:
        super().__init__(f"Failed to send mail to {recipient}: {error}")
        self.recipient = recipient
        self.error = error


@dataclass(slots=True)
class Attachment:
    filename: str
    content: bytes
    maintype: str = "text"
    subtype: str = "csv"


def build_message(
    *,
    sender: str,
    recipient: str,
    subject: str,
    text: str,
    html: Optional[str] = None,
    attachments: tuple[Attachment, ...] = (),
) -> EmailMessage:
    message = EmailMessage()
    message["Subject"] = subject
    message["From"] = sender
    message["To"] = recipient
    message.set_content(text)
    if html:
        message.add_alternative(html, subtype="html")
    for attachment in attachments:
        if attachment.maintype == "text":
            message.add_attachment(
                attachment.content.decode("utf-8"),
                subtype=attachment.subtype,
                filename=attachment.filename,
            )
        else:
            message.add_attachment(
                attachment.content,
                maintype=attachment.maintype,
                subtype=attachment.subtype,
                filename=attachment.filename,
            )
    return message


class SmtpMailer:
    """Thin wrapper around :mod:`smtplib` with a bounded socket timeout."""

    def __init__(
        self,
        host: str,
        port: int,
        *,
        username: Optional[str] = None,
        password: Optional[str] = None,
        use_tls: bool = True,
        timeout: float = 10.0,
    ) -> None:
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.timeout = timeout

    def send(self, message: EmailMessage) -> None:
        recipient = str(message["To"])
        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
                if self.use_tls:
                    server.starttls(context=ssl.create_default_context())
                if self.username and self.password:
                    server.login(self.username, self.password)
                server.send_message(message)
        except (smtplib.SMTPException, OSError) as exc:
            raise MailerError(recipient, str(exc)) from exc


__all__ = ["Attachment", "MailerError", "SmtpMailer", "build_message"]
