import asyncio
import logging
from dataclasses import dataclass, field
from email.message import EmailMessage
from email.utils import make_msgid
from typing import Protocol

import aiosmtplib
import resend

from leadership_index.config import Settings

logger = logging.getLogger(__name__)


class MailConfigurationError(RuntimeError):
    """Mail settings are missing or inconsistent."""


@dataclass(frozen=True)
class Attachment:
    filename: str
    content: bytes
    mimetype: str = "application/pdf"


@dataclass(frozen=True)
class OutgoingEmail:
    to: str
    from_email: str
    subject: str
    html: str | None = None
    text: str | None = None
    attachments: list[Attachment] = field(default_factory=list)


class MailTransport(Protocol):
    async def send(self, message: OutgoingEmail) -> str:
        """Hand one message to the provider and return its message id."""
        ...


def build_mime_message(message: OutgoingEmail) -> EmailMessage:
    mime = EmailMessage()
    mime["From"] = message.from_email
    mime["To"] = message.to
    mime["Subject"] = message.subject
    mime["Message-ID"] = make_msgid()

    if message.text is not None:
        mime.set_content(message.text)
        if message.html is not None:
            mime.add_alternative(message.html, subtype="html")
    elif message.html is not None:
        mime.set_content(message.html, subtype="html")
    else:
        mime.set_content("")

    for attachment in message.attachments:
        maintype, _, subtype = attachment.mimetype.partition("/")
        mime.add_attachment(
            attachment.content,
            maintype=maintype,
            subtype=subtype or "octet-stream",
            filename=attachment.filename,
        )
    return mime


class SmtpTransport:
    """Sends through an SMTP relay."""

    def __init__(
        self,
        host: str,
        port: int = 587,
        username: str | None = None,
        password: str | None = None,
        use_tls: bool = True,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.use_tls = use_tls

    async def send(self, message: OutgoingEmail) -> str:
        mime = build_mime_message(message)

        # Port 465 uses implicit TLS, anything else upgrades with STARTTLS
        is_ssl_port = self.port == 465

        smtp_client = aiosmtplib.SMTP(
            hostname=self.host,
            port=self.port,
            use_tls=is_ssl_port,
            start_tls=not is_ssl_port and self.use_tls,
        )
        async with smtp_client:
            if self.username:
                await smtp_client.login(self.username, self.password or "")
            await smtp_client.send_message(mime)

        logger.info("SMTP message accepted by %s for %s", self.host, message.to)
        return mime.get("Message-ID", "")


class ResendTransport:
    """Sends through the Resend transactional email API."""

    def __init__(self, api_key: str):
        self.api_key = api_key

    def _send_sync(self, message: OutgoingEmail) -> str:
        # the SDK only reads its module-level key, so set it for each send
        resend.api_key = self.api_key
        params = {
            "from": message.from_email,
            "to": [message.to],
            "subject": message.subject,
        }
        if message.html is not None:
            params["html"] = message.html
        if message.text is not None:
            params["text"] = message.text
        if message.attachments:
            params["attachments"] = [
                {"filename": attachment.filename, "content": list(attachment.content)}
                for attachment in message.attachments
            ]

        email = resend.Emails.send(params)
        email_id = email.get("id", "") if isinstance(email, dict) else str(email)
        logger.info("Resend accepted message (email_id=%s, to=%s)", email_id, message.to)
        return email_id

    async def send(self, message: OutgoingEmail) -> str:
        # the resend client is synchronous
        return await asyncio.to_thread(self._send_sync, message)


def format_sender(settings: Settings) -> str | None:
    if not settings.smtp_from_email:
        return None
    if settings.smtp_from_name:
        return f"{settings.smtp_from_name} <{settings.smtp_from_email}>"
    return settings.smtp_from_email


def build_transport(settings: Settings) -> MailTransport:
    provider = settings.mail_provider.strip().lower()
    if provider == "smtp":
        return SmtpTransport(
            host=settings.smtp_host,
            port=settings.smtp_port,
            username=settings.smtp_username,
            password=settings.smtp_password,
            use_tls=settings.smtp_use_tls,
        )
    if provider == "resend":
        if not settings.resend_api_key:
            raise MailConfigurationError("RESEND_API_KEY is required when MAIL_PROVIDER=resend")
        return ResendTransport(settings.resend_api_key)
    raise MailConfigurationError(f"Unknown MAIL_PROVIDER {settings.mail_provider!r}")
