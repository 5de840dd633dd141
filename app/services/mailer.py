"""Transactional email: account verification and password reset messages."""

import smtplib
from dataclasses import dataclass
from email.message import EmailMessage
from html import escape

import httpx
import structlog

from shared.config import LinksConfig, MailConfig

logger = structlog.get_logger(__name__)


class MailDeliveryError(Exception):
    """Levantada quando a mensagem não pôde ser entregue ao transporte."""


class MailConfigurationError(MailDeliveryError):
    """Levantada quando falta configuração obrigatória do transporte (ex.: EMAIL_FROM)."""


@dataclass(frozen=True)
class OutgoingEmail:
    to: str
    subject: str
    text: str
    html: str


class Mailer:
    """Interface comum dos transportes de e-mail."""

    def send(self, message: OutgoingEmail) -> None:
        raise NotImplementedError


class ConsoleMailer(Mailer):
    """Transporte de desenvolvimento: escreve a mensagem no log em vez de enviar."""

    def send(self, message: OutgoingEmail) -> None:
        logger.info("email_logged", to=message.to, subject=message.subject, body=message.text)


class SmtpMailer(Mailer):
    """Envia mensagens por SMTP, abrindo uma conexão por mensagem.

    Parameters
    ----------
    config : MailConfig
        Host, porta, credenciais e remetente (``EMAIL_FROM``)
    """

    def __init__(self, config: MailConfig) -> None:
        self._config = config

    def _new_connection(self) -> smtplib.SMTP:
        return smtplib.SMTP(
            host=self._config.smtp_host or "",
            port=self._config.smtp_port,
            timeout=self._config.timeout,
        )

    def _compose(self, message: OutgoingEmail) -> EmailMessage:
        email = EmailMessage()
        email["From"] = self._config.from_address
        email["To"] = message.to
        email["Subject"] = message.subject
        email.set_content(message.text)
        email.add_alternative(message.html, subtype="html")
        return email

    def send(self, message: OutgoingEmail) -> None:
        if not self._config.from_address:
            raise MailConfigurationError("EMAIL_FROM is not configured")
        if not self._config.smtp_host:
            raise MailConfigurationError("SMTP_HOST is not configured")

        try:
            with self._new_connection() as conn:
                if self._config.smtp_starttls:
                    conn.starttls()
                if self._config.smtp_user:
                    conn.login(self._config.smtp_user, self._config.smtp_password or "")
                conn.send_message(self._compose(message))
        except (smtplib.SMTPException, OSError) as exc:
            raise MailDeliveryError(f"SMTP delivery failed: {exc}") from exc


class ApiMailer(Mailer):
    """Envia mensagens pela API HTTP de um provedor de e-mail.

    O corpo segue o formato comum desses provedores
    (``from``, ``to``, ``subject``, ``text``, ``html``) com autenticação Bearer.

    Parameters
    ----------
    config : MailConfig
        URL da API, chave, remetente e timeout
    client : httpx.Client | None
        Cliente HTTP reaproveitado; criado sob demanda quando omitido
    """

    def __init__(self, config: MailConfig, client: httpx.Client | None = None) -> None:
        self._config = config
        self._client = client

    def _payload(self, message: OutgoingEmail) -> dict:
        return {
            "from": self._config.from_address,
            "to": [message.to],
            "subject": message.subject,
            "text": message.text,
            "html": message.html,
        }

    def send(self, message: OutgoingEmail) -> None:
        if not self._config.from_address:
            raise MailConfigurationError("EMAIL_FROM is not configured")
        if not self._config.api_url or not self._config.api_key:
            raise MailConfigurationError("MAIL_API_URL and MAIL_API_KEY must be configured")

        headers = {
            "Authorization": f"Bearer {self._config.api_key}",
            "Content-Type": "application/json",
        }
        client = self._client or httpx.Client(timeout=self._config.timeout)
        try:
            response = client.post(self._config.api_url, json=self._payload(message), headers=headers)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise MailDeliveryError(
                f"Email provider rejected the message: {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise MailDeliveryError(f"Email provider unreachable: {exc}") from exc
        finally:
            if self._client is None:
                client.close()


def build_mailer(config: MailConfig) -> Mailer:
    if config.backend == "smtp":
        return SmtpMailer(config)
    if config.backend == "api":
        return ApiMailer(config)
    return ConsoleMailer()


def deliver_best_effort(mailer: Mailer, message: OutgoingEmail, purpose: str) -> bool:
    """Envia a mensagem sem deixar falha de entrega interromper o fluxo principal.

    Returns
    -------
    bool
        True se o transporte aceitou a mensagem, False se a falha foi registrada no log
    """
    try:
        mailer.send(message)
    except MailDeliveryError as exc:
        logger.error("email_delivery_failed", purpose=purpose, error=str(exc))
        return False
    logger.info("email_sent", purpose=purpose)
    return True


def verification_email(to: str, token: str, links: LinksConfig) -> OutgoingEmail:
    verify_link = f"{links.api_base_url}/auth/verify-email?token={token}"
    return OutgoingEmail(
        to=to,
        subject="Verify your Follow Us Everywhere email",
        text=f"Verify your account: {verify_link}",
        html=f'<p>Verify your account by clicking <a href="{escape(verify_link)}">this link</a>.</p>',
    )


def password_reset_email(to: str, token: str, links: LinksConfig) -> OutgoingEmail:
    reset_link = f"{links.frontend_base_url}/reset-password?token={token}"
    return OutgoingEmail(
        to=to,
        subject="Reset your Follow Us Everywhere password",
        text=f"Reset your password: {reset_link}",
        html=f'<p>Reset your password by clicking <a href="{escape(reset_link)}">this link</a>.</p>',
    )
