"""
Delivery of a scored submission: the full report to the admin and the
summary to the respondent.
"""

import asyncio
import logging

from leadership_index.email import Attachment, MailConfigurationError, MailTransport, OutgoingEmail
from leadership_index.reports import ReportBundle

logger = logging.getLogger(__name__)


class DeliveryError(Exception):
    """One or both report emails could not be sent."""


class DeliveryConfigurationError(DeliveryError, MailConfigurationError):
    """Transport, sender or admin address missing when a send was attempted."""


class DeliveryGateway:
    def __init__(self, transport: MailTransport | None, from_email: str | None, admin_email: str | None):
        self.transport = transport
        self.from_email = from_email
        self.admin_email = admin_email

    def _check_configured(self) -> None:
        missing = []
        if self.transport is None:
            missing.append("a usable MAIL_PROVIDER")
        if not self.from_email:
            missing.append("SMTP_FROM_EMAIL")
        if not self.admin_email:
            missing.append("ADMIN_EMAIL")
        if missing:
            raise DeliveryConfigurationError(f"Mail delivery is not configured: missing {', '.join(missing)}")

    def build_admin_message(self, org: str, reports: ReportBundle) -> OutgoingEmail:
        attachments = []
        if reports.pdf is not None:
            attachments.append(Attachment(filename=reports.pdf_filename or "leadership-report.pdf", content=reports.pdf))
        return OutgoingEmail(
            to=self.admin_email,
            from_email=self.from_email,
            subject=f"FULL REPORT — {org}",
            html=reports.internal_html,
            text=reports.internal_text,
            attachments=attachments,
        )

    def build_respondent_message(self, org: str, respondent_email: str, reports: ReportBundle) -> OutgoingEmail:
        return OutgoingEmail(
            to=respondent_email,
            from_email=self.from_email,
            subject=f"Your Leadership Team Snapshot — {org}",
            html=reports.summary_html,
            text=reports.summary_text,
        )

    async def deliver(self, org: str, respondent_email: str, reports: ReportBundle) -> None:
        """
        Send both messages concurrently and wait for both to settle.

        Raises DeliveryError if either send fails. There is no partial
        success: a delivered admin report with a failed respondent summary
        is still a failure for the caller.
        """
        self._check_configured()
        messages = {
            "admin report": self.build_admin_message(org, reports),
            "respondent summary": self.build_respondent_message(org, respondent_email, reports),
        }
        outcomes = await asyncio.gather(
            *(self.transport.send(message) for message in messages.values()),
            return_exceptions=True,
        )

        failures = []
        for (label, message), outcome in zip(messages.items(), outcomes):
            if isinstance(outcome, BaseException):
                logger.error("Failed to send %s to %s: %s", label, message.to, outcome, exc_info=outcome)
                failures.append(outcome)
            else:
                logger.info("Sent %s for %s (message_id=%s)", label, org, outcome)

        if failures:
            raise DeliveryError(f"{len(failures)} of {len(messages)} report emails failed") from failures[0]
