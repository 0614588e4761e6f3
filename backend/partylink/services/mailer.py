from __future__ import annotations

import logging
import smtplib
from email.message import EmailMessage

from partylink.core.config import settings

log = logging.getLogger("partylink.mailer")


def send_mail(*, to: str, subject: str, body: str) -> bool:
    """Best-effort plain-text email over SMTP.

    Returns True if the message was handed to the server, else False. Never raises.
    Without SMTP_HOST the mail is skipped; with MAIL_DEBUG_LOG it is written to
    the log instead (local development) and counts as sent.
    """
    if not settings.SMTP_HOST:
        if settings.MAIL_DEBUG_LOG:
            log.info("MAIL_DEBUG_LOG to=%s subject=%s\n%s", to, subject, body)
            return True
        log.warning("mail skipped: SMTP_HOST not configured (to=%s)", to)
        return False

    msg = EmailMessage()
    msg["From"] = settings.SMTP_FROM
    msg["To"] = to
    msg["Subject"] = subject
    msg.set_content(body)

    try:
        with smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT, timeout=10) as smtp:
            if settings.SMTP_STARTTLS:
                smtp.starttls()
            if settings.SMTP_USERNAME:
                smtp.login(settings.SMTP_USERNAME, settings.SMTP_PASSWORD)
            smtp.send_message(msg)
        return True
    except (smtplib.SMTPException, OSError) as e:
        log.exception("smtp send failed to=%s: %s", to, e)
        return False


def send_login_email(*, to: str, code: str, link: str) -> bool:
    body = (
        f"Your Partylink sign-in code is {code}\n\n"
        f"Or open this link to sign in:\n{link}\n\n"
        "If you didn't ask for this, you can ignore this email."
    )
    return send_mail(to=to, subject=f"Partylink code: {code}", body=body)
