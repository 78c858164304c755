# workhub/services/email.py
import logging
import smtplib
from email.message import EmailMessage

logger = logging.getLogger(__name__)


class EmailService:
    """
    Sends HTML mail through one SMTP connection per call.
    Transport errors are not caught here; callers see them as-is.
    """

    def __init__(self, host: str, port: int, user: str | None = None,
                 password: str | None = None, transport_factory=smtplib.SMTP):
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.transport_factory = transport_factory

    def build_message(self, to: str, subject: str, html: str) -> EmailMessage:
        msg = EmailMessage()
        msg["Subject"] = subject
        msg["From"] = self.user or ""
        msg["To"] = to
        msg.set_content("This message requires an HTML capable mail client.")
        msg.add_alternative(html, subtype="html")
        return msg

    def send_email(self, to: str, subject: str, html: str) -> None:
        msg = self.build_message(to, subject, html)
        with self.transport_factory(self.host, self.port) as transport:
            transport.ehlo()
            if self.port in (587, 25):
                transport.starttls()
                transport.ehlo()
            if self.user and self.password:
                transport.login(self.user, self.password)
            transport.send_message(msg)
        logger.info("Sent email %r to %s", subject, to)
