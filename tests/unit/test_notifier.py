import smtplib

import pytest

from certcheck.core.exceptions import NotificationError
from certcheck.services.notifier import EmailNotifier


class FakeSMTP:
    """Records the SMTP conversation instead of talking to a server."""

    instances: list["FakeSMTP"] = []
    fail_on: str | None = None

    def __init__(self, host, port):
        self.host = host
        self.port = port
        self.calls = []
        self.sent = []
        FakeSMTP.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.calls.append("quit")
        return False

    def starttls(self):
        self._maybe_fail("starttls")
        self.calls.append("starttls")

    def login(self, user, password):
        self._maybe_fail("login")
        self.calls.append(("login", user, password))

    def send_message(self, msg):
        self._maybe_fail("send")
        self.calls.append("send")
        self.sent.append(msg)

    def _maybe_fail(self, step):
        if FakeSMTP.fail_on == step:
            raise smtplib.SMTPAuthenticationError(535, b"bad credentials")


@pytest.fixture(autouse=True)
def _reset_fake_smtp():
    FakeSMTP.instances = []
    FakeSMTP.fail_on = None
    yield


def _notifier(use_tls=True) -> EmailNotifier:
    return EmailNotifier(
        server="smtp.example",
        port=587,
        user="certcheck@example",
        password="hunter2",
        addressee="ops@example",
        use_tls=use_tls,
        smtp_factory=FakeSMTP,
    )


def test_send_uses_starttls_and_login():
    _notifier().send("Subject", "<p>body</p>")

    [smtp] = FakeSMTP.instances
    assert (smtp.host, smtp.port) == ("smtp.example", 587)
    assert smtp.calls == ["starttls", ("login", "certcheck@example", "hunter2"), "send", "quit"]


def test_send_without_tls():
    _notifier(use_tls=False).send("Subject", "<p>body</p>")

    [smtp] = FakeSMTP.instances
    assert "starttls" not in smtp.calls


def test_message_is_html_from_user_to_addressee():
    _notifier().send("Certificate problem", "<p>ünïcode body</p>")

    [msg] = FakeSMTP.instances[0].sent
    assert msg["From"] == "certcheck@example"
    assert msg["To"] == "ops@example"
    assert msg["Subject"] == "Certificate problem"
    assert msg.get_content_type() == "text/html"
    assert msg.get_content_charset() == "utf-8"
    assert "ünïcode" in msg.get_content()


def test_one_session_per_message():
    notifier = _notifier()
    notifier.send("a", "1")
    notifier.send("b", "2")
    assert len(FakeSMTP.instances) == 2


def test_smtp_failure_raises_notification_error():
    FakeSMTP.fail_on = "login"
    with pytest.raises(NotificationError) as exc:
        _notifier().send("Subject", "body")
    assert exc.value.code == "notification_error"
    assert exc.value.details["server"] == "smtp.example"


def test_connection_failure_raises_notification_error():
    def refuse(host, port):
        raise ConnectionRefusedError(111, "Connection refused")

    notifier = EmailNotifier("smtp.example", 25, "u", "p", "ops@example", smtp_factory=refuse)
    with pytest.raises(NotificationError):
        notifier.send("Subject", "body")


def test_unencodable_credentials_raise_notification_error():
    class AsciiOnlySMTP(FakeSMTP):
        def login(self, user, password):
            password.encode("ascii")

    notifier = EmailNotifier("smtp.example", 587, "u", "pässwort", "ops@example", smtp_factory=AsciiOnlySMTP)
    with pytest.raises(NotificationError) as exc:
        notifier.send("Subject", "body")
    assert "ascii" in exc.value.message
