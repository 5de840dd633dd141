import json
import smtplib
from unittest.mock import patch

import httpx
import pytest

from app.services.mailer import (
    ApiMailer,
    ConsoleMailer,
    MailConfigurationError,
    MailDeliveryError,
    OutgoingEmail,
    SmtpMailer,
    build_mailer,
    deliver_best_effort,
    password_reset_email,
    verification_email,
)
from shared.config import LinksConfig, MailConfig

LINKS = LinksConfig(api_base_url="http://api.test", frontend_base_url="http://front.test")
MESSAGE = OutgoingEmail(to="joe@example.com", subject="Hello", text="plain body", html="<p>html body</p>")


def _mail_config(**overrides) -> MailConfig:
    values = dict(
        backend="smtp",
        from_address="noreply@example.com",
        smtp_host="smtp.example.com",
        smtp_port=587,
        smtp_user="mailer",
        smtp_password="mail-pass",
        smtp_starttls=True,
        api_url="https://mail.example.com/v1/send",
        api_key="key-123",
        timeout=5.0,
    )
    values.update(overrides)
    return MailConfig(**values)


class TestTemplates:
    def test_verification_link_points_at_api(self):
        message = verification_email("joe@example.com", "abc123", LINKS)

        assert message.to == "joe@example.com"
        assert "http://api.test/auth/verify-email?token=abc123" in message.text
        assert 'href="http://api.test/auth/verify-email?token=abc123"' in message.html

    def test_reset_link_points_at_front_end(self):
        message = password_reset_email("joe@example.com", "abc123", LINKS)

        assert "http://front.test/reset-password?token=abc123" in message.text


class TestSmtpMailer:
    def test_sends_with_starttls_and_login(self):
        with patch("app.services.mailer.smtplib.SMTP") as smtp_cls:
            SmtpMailer(_mail_config()).send(MESSAGE)

        smtp_cls.assert_called_once_with(host="smtp.example.com", port=587, timeout=5.0)
        conn = smtp_cls.return_value.__enter__.return_value
        conn.starttls.assert_called_once()
        conn.login.assert_called_once_with("mailer", "mail-pass")
        sent = conn.send_message.call_args.args[0]
        assert sent["To"] == "joe@example.com"
        assert sent["From"] == "noreply@example.com"
        assert sent["Subject"] == "Hello"

    def test_skips_login_without_user(self):
        with patch("app.services.mailer.smtplib.SMTP") as smtp_cls:
            SmtpMailer(_mail_config(smtp_user=None, smtp_starttls=False)).send(MESSAGE)

        conn = smtp_cls.return_value.__enter__.return_value
        conn.starttls.assert_not_called()
        conn.login.assert_not_called()
        conn.send_message.assert_called_once()

    def test_missing_sender_is_a_configuration_error(self):
        with patch("app.services.mailer.smtplib.SMTP") as smtp_cls:
            with pytest.raises(MailConfigurationError):
                SmtpMailer(_mail_config(from_address=None)).send(MESSAGE)
        smtp_cls.assert_not_called()

    def test_transport_errors_become_delivery_errors(self):
        with patch("app.services.mailer.smtplib.SMTP") as smtp_cls:
            conn = smtp_cls.return_value.__enter__.return_value
            conn.send_message.side_effect = smtplib.SMTPException("relay denied")
            with pytest.raises(MailDeliveryError):
                SmtpMailer(_mail_config()).send(MESSAGE)

    def test_connection_refused_becomes_delivery_error(self):
        with patch("app.services.mailer.smtplib.SMTP", side_effect=ConnectionRefusedError()):
            with pytest.raises(MailDeliveryError):
                SmtpMailer(_mail_config()).send(MESSAGE)


class TestApiMailer:
    def test_posts_message_with_bearer_key(self):
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["url"] = str(request.url)
            captured["auth"] = request.headers["Authorization"]
            captured["body"] = json.loads(request.content)
            return httpx.Response(202, json={"id": "msg-1"})

        client = httpx.Client(transport=httpx.MockTransport(handler))
        ApiMailer(_mail_config(backend="api"), client=client).send(MESSAGE)

        assert captured["url"] == "https://mail.example.com/v1/send"
        assert captured["auth"] == "Bearer key-123"
        assert captured["body"] == {
            "from": "noreply@example.com",
            "to": ["joe@example.com"],
            "subject": "Hello",
            "text": "plain body",
            "html": "<p>html body</p>",
        }

    def test_rejection_becomes_delivery_error(self):
        client = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(422)))

        with pytest.raises(MailDeliveryError) as exc_info:
            ApiMailer(_mail_config(backend="api"), client=client).send(MESSAGE)
        assert "422" in str(exc_info.value)

    def test_network_failure_becomes_delivery_error(self):
        def handler(request):
            raise httpx.ConnectError("unreachable", request=request)

        client = httpx.Client(transport=httpx.MockTransport(handler))

        with pytest.raises(MailDeliveryError):
            ApiMailer(_mail_config(backend="api"), client=client).send(MESSAGE)

    def test_missing_api_key_is_a_configuration_error(self):
        with pytest.raises(MailConfigurationError):
            ApiMailer(_mail_config(backend="api", api_key=None)).send(MESSAGE)


class TestDelivery:
    def test_build_mailer_picks_transport(self):
        assert isinstance(build_mailer(_mail_config(backend="smtp")), SmtpMailer)
        assert isinstance(build_mailer(_mail_config(backend="api")), ApiMailer)
        assert isinstance(build_mailer(_mail_config(backend="console")), ConsoleMailer)

    def test_best_effort_reports_failure_instead_of_raising(self):
        class Broken(ConsoleMailer):
            def send(self, message):
                raise MailDeliveryError("down")

        assert deliver_best_effort(Broken(), MESSAGE, purpose="email_verification") is False

    def test_best_effort_does_not_hide_programming_errors(self):
        class Buggy(ConsoleMailer):
            def send(self, message):
                raise RuntimeError("bug")

        with pytest.raises(RuntimeError):
            deliver_best_effort(Buggy(), MESSAGE, purpose="email_verification")

    def test_console_mailer_accepts_message(self):
        assert deliver_best_effort(ConsoleMailer(), MESSAGE, purpose="password_reset") is True
