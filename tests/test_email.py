from __future__ import annotations

import smtplib

import pytest

from workhub.services.email import EmailService


class FakeSMTP:
    instances: list["FakeSMTP"] = []

    def __init__(self, host, port):
        self.host, self.port = host, port
        self.calls: list[str] = []
        self.messages = []
        FakeSMTP.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.calls.append("quit")
        return False

    def ehlo(self):
        self.calls.append("ehlo")

    def starttls(self):
        self.calls.append("starttls")

    def login(self, user, password):
        self.calls.append(f"login:{user}")

    def send_message(self, msg):
        self.calls.append("send")
        self.messages.append(msg)


class BrokenSMTP(FakeSMTP):
    def send_message(self, msg):
        raise smtplib.SMTPRecipientsRefused({msg["To"]: (550, b"no such user")})


@pytest.fixture(autouse=True)
def reset_instances():
    FakeSMTP.instances.clear()


def test_send_email_over_starttls():
    service = EmailService("smtp.example.com", 587, "bot@example.com", "pw", transport_factory=FakeSMTP)
    service.send_email(to="a@b.com", subject="Hello", html="<p>Hi</p>")

    (transport,) = FakeSMTP.instances
    assert (transport.host, transport.port) == ("smtp.example.com", 587)
    assert transport.calls == ["ehlo", "starttls", "ehlo", "login:bot@example.com", "send", "quit"]

    msg = transport.messages[0]
    assert msg["From"] == "bot@example.com"
    assert msg["To"] == "a@b.com"
    assert msg["Subject"] == "Hello"
    assert msg.get_body(preferencelist=("html",)).get_content().strip() == "<p>Hi</p>"


def test_no_login_without_credentials():
    EmailService("localhost", 1025, transport_factory=FakeSMTP).send_email("a@b.com", "s", "<p/>")
    assert FakeSMTP.instances[0].calls == ["ehlo", "send", "quit"]


def test_transport_failure_propagates():
    service = EmailService("smtp.example.com", 587, "bot@example.com", "pw", transport_factory=BrokenSMTP)
    with pytest.raises(smtplib.SMTPRecipientsRefused):
        service.send_email(to="ghost@b.com", subject="Hello", html="<p>Hi</p>")
