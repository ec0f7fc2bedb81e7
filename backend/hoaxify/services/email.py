from __future__ import annotations

import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formatdate
from html import escape as html_escape

import boto3
import resend
from botocore.exceptions import BotoCoreError, ClientError, EndpointConnectionError, NoCredentialsError

from hoaxify.core.config import settings

logger = logging.getLogger(__name__)


class EmailNotConfiguredError(RuntimeError):
    pass


class EmailDeliveryError(RuntimeError):
    """
    Raised when a provider is configured but delivery fails.
    """


def _normalize_provider(raw: str | None) -> str:
    """
    Supported providers:
    - smtp (default when unset)
    - resend
    - ses
    Legacy alias:
    - gmail -> smtp
    """
    provider = (raw or "").strip().lower()
    if not provider:
        return "smtp"
    if provider == "gmail":
        return "smtp"
    if provider in {"resend", "ses", "smtp"}:
        return provider
    raise EmailNotConfiguredError(
        f"Unsupported EMAIL_PROVIDER={provider!r}. Supported: smtp (default), resend, ses. Legacy alias: gmail -> smtp."
    )


def _require_from_email() -> str:
    if not settings.FROM_EMAIL:
        raise EmailNotConfiguredError("FROM_EMAIL is not set")
    return settings.FROM_EMAIL


def _send_email_ses(to_email: str, subject: str, text: str, html: str) -> str | None:
    region = (settings.AWS_REGION or "").strip()
    if not region:
        raise EmailNotConfiguredError("AWS_REGION is not set (required for SES)")
    from_email = _require_from_email()
    client = boto3.client("ses", region_name=region)

    try:
        res = client.send_email(
            Source=from_email,
            Destination={"ToAddresses": [to_email]},
            Message={
                "Subject": {"Data": subject, "Charset": "UTF-8"},
                "Body": {
                    "Text": {"Data": text, "Charset": "UTF-8"},
                    "Html": {"Data": html, "Charset": "UTF-8"},
                },
            },
        )
        msg_id = res.get("MessageId")
        logger.info("SES email sent: to=%s msg_id=%s", to_email, msg_id)
        return msg_id
    except NoCredentialsError as e:
        logger.exception("SES email failed (no AWS credentials)")
        raise EmailDeliveryError("SES email failed: AWS credentials not available") from e
    except EndpointConnectionError as e:
        logger.exception("SES email failed (endpoint connection)")
        raise EmailDeliveryError("SES email failed: could not connect to SES endpoint") from e
    except ClientError as e:
        logger.exception("SES email failed (client error)")
        code = (e.response or {}).get("Error", {}).get("Code", "ClientError")
        raise EmailDeliveryError(f"SES email failed: {code}") from e
    except BotoCoreError as e:
        logger.exception("SES email failed (botocore)")
        raise EmailDeliveryError("SES email failed") from e


def _send_email_resend(to_email: str, subject: str, text: str, html: str) -> str | None:
    api_key = (settings.RESEND_API_KEY or "").strip()
    if not api_key:
        raise EmailNotConfiguredError("RESEND_API_KEY is not set")

    payload = {
        "from": _require_from_email(),
        "to": [to_email],
        "subject": subject,
        "text": text,
        "html": html,
    }

    try:
        resend.api_key = api_key
        res = resend.Emails.send(payload)  # type: ignore[attr-defined]
    except Exception as e:  # noqa: BLE001
        raise EmailDeliveryError(f"Resend send failed: {e}") from e

    msg_id: str | None = None
    if isinstance(res, dict):
        if res.get("error"):
            raise EmailDeliveryError(f"Resend API error: {res.get('error')}")
        v = res.get("id")
        if isinstance(v, str) and v.strip():
            msg_id = v.strip()

    logger.info("Resend email sent: to=%s msg_id=%s", to_email, msg_id)
    return msg_id


def _send_email_smtp(to_email: str, subject: str, text: str, html: str) -> None:
    if not settings.SMTP_HOST:
        raise EmailNotConfiguredError("SMTP_HOST is not set")
    from_email = _require_from_email()

    msg = MIMEMultipart("alternative")
    msg["From"] = from_email
    msg["To"] = to_email
    msg["Subject"] = subject
    msg["Date"] = formatdate(localtime=True)
    msg.attach(MIMEText(text, "plain", "utf-8"))
    msg.attach(MIMEText(html, "html", "utf-8"))

    try:
        if settings.SMTP_USE_SSL:
            server: smtplib.SMTP = smtplib.SMTP_SSL(settings.SMTP_HOST, settings.SMTP_PORT, timeout=10)
        else:
            server = smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT, timeout=10)
    except OSError as e:
        logger.exception("SMTP connection failed")
        raise EmailDeliveryError("SMTP email failed: could not connect") from e

    try:
        server.ehlo()
        if settings.SMTP_USE_TLS and not settings.SMTP_USE_SSL:
            server.starttls()
            server.ehlo()

        if settings.SMTP_USERNAME:
            server.login(settings.SMTP_USERNAME, settings.SMTP_PASSWORD)

        server.sendmail(from_email, [to_email], msg.as_string())
        logger.info("SMTP email sent: to=%s", to_email)
    except smtplib.SMTPException as e:
        logger.exception("SMTP email failed")
        raise EmailDeliveryError(f"SMTP email failed: {e}") from e
    finally:
        try:
            server.quit()
        except smtplib.SMTPException:
            pass


def send_email(to_email: str, subject: str, text: str, html: str | None = None) -> str | None:
    """
    Sends email using configured provider.
    - EMAIL_PROVIDER=smtp (default): SMTP via stdlib
    - EMAIL_PROVIDER=resend: Resend API
    - EMAIL_PROVIDER=ses: AWS SES via boto3
    """
    html = html or f"<pre>{html_escape(text)}</pre>"
    provider = _normalize_provider(settings.EMAIL_PROVIDER)
    if provider == "smtp":
        _send_email_smtp(to_email=to_email, subject=subject, text=text, html=html)
        return None
    if provider == "ses":
        return _send_email_ses(to_email=to_email, subject=subject, text=text, html=html)
    return _send_email_resend(to_email=to_email, subject=subject, text=text, html=html)


# -----------------------------
# Account lifecycle emails
# -----------------------------
def _link_email(to_email: str, subject: str, intro: str, link: str, label: str) -> str | None:
    text = "\n".join([intro, "", link])
    html = (
        f"<div><b>{html_escape(intro)}</b></div>"
        f'<div><a href="{html_escape(link, quote=True)}">{html_escape(label)}</a></div>'
    )
    return send_email(to_email=to_email, subject=subject, text=text, html=html)


def send_account_activation(email: str, token: str) -> str | None:
    link = f"{settings.FRONTEND_BASE_URL}/#login?token={token}"
    return _link_email(
        email,
        "Account Activation",
        "Please click below link to activate your account",
        link,
        "Activate",
    )


def send_password_reset(email: str, token: str) -> str | None:
    link = f"{settings.FRONTEND_BASE_URL}/#/password-reset?reset={token}"
    return _link_email(
        email,
        "Password Reset",
        "Please click below link to reset your password",
        link,
        "Reset",
    )
