"""SMTP delivery of operator notifications.

smtplib is synchronous; the orchestrator calls send() via asyncio.to_thread().
"""

import smtplib
from email.message import EmailMessage

import structlog

from certcheck.core.exceptions import NotificationError

logger = structlog.get_logger()


class EmailNotifier:
    def __init__(
        self,
        server: str,
        port: int,
        user: str,
        password: str,
        addressee: str,
        use_tls: bool = True,
        smtp_factory=smtplib.SMTP,
    ):
        self._server = server
        self._port = port
        self._user = user
        self._password = password
        self._addressee = addressee
        self._use_tls = use_tls
        self._smtp_factory = smtp_factory

    @classmethod
    def from_settings(cls, settings) -> "EmailNotifier":
        return cls(
            server=settings.certcheck_email_server,
            port=settings.certcheck_email_port,
            user=settings.certcheck_email_user,
            password=settings.certcheck_email_password.get_secret_value(),
            addressee=settings.certcheck_email_to,
            use_tls=not settings.certcheck_email_no_ssl,
        )

    def build_message(self, subject: str, html_body: str) -> EmailMessage:
        msg = EmailMessage()
        msg["From"] = self._user
        msg["To"] = self._addressee
        msg["Subject"] = subject
        msg.set_content(html_body, subtype="html", charset="utf-8")
        return msg

    def send(self, subject: str, html_body: str) -> None:
        """Deliver one message in its own SMTP session."""
        msg = self.build_message(subject, html_body)
        try:
            with self._smtp_factory(self._server, self._port) as smtp:
                if self._use_tls:
                    smtp.starttls()
                smtp.login(self._user, self._password)
                smtp.send_message(msg)
        except (smtplib.SMTPException, OSError, UnicodeError) as e:
            raise NotificationError(
                f"Cannot send e-mail via {self._server}:{self._port}: {e}",
                details={"server": self._server, "port": self._port, "subject": subject},
            )
        logger.info("notification_sent", to=self._addressee, subject=subject)
