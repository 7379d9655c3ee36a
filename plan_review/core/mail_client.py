"""SMTP mail collaborator."""

import asyncio
import smtplib
from email.message import EmailMessage

from plan_review.core.exceptions import MailDispatchError
from plan_review.models.routing import MailMessage
from plan_review.utils.logging import get_logger

LOGGER = get_logger(__name__)


class SmtpMailClient:
    """Sends HTML messages with attachments over SMTP.

    ``smtplib`` is blocking, so each send runs in a worker thread.
    """

    def __init__(
        self,
        host: str,
        port: int,
        username: str = "",
        password: str = "",
        from_address: str = "noreply@civicstream.com",
        use_ssl: bool = False,
        timeout: int = 60,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.from_address = from_address
        self.use_ssl = use_ssl
        self.timeout = timeout

    def build_message(self, message: MailMessage) -> EmailMessage:
        email = EmailMessage()
        email["From"] = self.from_address
        email["To"] = message.to
        email["Subject"] = message.subject
        email.set_content("This message requires an HTML-capable mail client.")
        email.add_alternative(message.html, subtype="html")

        for attachment in message.attachments:
            maintype, _, subtype = attachment.content_type.partition("/")
            email.add_attachment(
                attachment.content,
                maintype=maintype,
                subtype=subtype or "octet-stream",
                filename=attachment.filename,
            )
        return email

    async def send(self, message: MailMessage) -> bool:
        """Send one message.

        Returns:
            True when the server accepted the message

        Raises:
            MailDispatchError: On connection, authentication or transport failure
        """
        email = self.build_message(message)
        try:
            await asyncio.to_thread(self._send_blocking, email)
        except (smtplib.SMTPException, OSError) as e:
            raise MailDispatchError(f"Failed to send mail to {message.to}: {e}", e) from e

        LOGGER.info(
            "Email sent",
            extra={"to": message.to, "subject": message.subject, "attachments": len(message.attachments)}
        )
        return True

    def _send_blocking(self, email: EmailMessage) -> None:
        if self.use_ssl:
            smtp = smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout)
        else:
            smtp = smtplib.SMTP(self.host, self.port, timeout=self.timeout)

        with smtp:
            if not self.use_ssl:
                smtp.starttls()
            if self.username:
                smtp.login(self.username, self.password)
            smtp.send_message(email)
