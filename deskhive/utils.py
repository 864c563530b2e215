"""Utility functions for the application."""

import datetime
import secrets
import smtplib

from flask import current_app, render_template
from flask_mail import Message

from .constants import SMTP_AUTH_ERROR_CODE
from .extensions import mail


class EmailError(Exception):
    """Base class for email errors."""

    pass


def send_email(to, subject, template, **kwargs):
    """Send an email to a recipient.

    Raises:
        EmailError: If sending the email fails.
    """
    msg = Message(
        subject,
        recipients=[to],
        html=render_template(template, **kwargs),
        sender=current_app.config["MAIL_DEFAULT_SENDER"],
    )
    try:
        mail.send(msg)
    except smtplib.SMTPAuthenticationError as e:
        if e.smtp_code == SMTP_AUTH_ERROR_CODE:
            raise EmailError(
                "Authentication failed. Google requires you to use an App Password. "
                "Please verify your MAIL_USERNAME and MAIL_PASSWORD settings."
            ) from e
        raise EmailError(f"SMTP Authentication failed: {e}") from e
    except Exception as e:
        raise EmailError(f"Failed to send email: {e}") from e


def utcnow():
    """Return the current time as an aware UTC datetime."""
    return datetime.datetime.now(datetime.timezone.utc)


def random_code(alphabet, length):
    """Draw ``length`` symbols from ``alphabet`` using a CSPRNG."""
    return "".join(secrets.choice(alphabet) for _ in range(length))


def email_handle(email):
    """Return the part of an email address before the ``@``."""
    if not email:
        return ""
    return email.split("@", 1)[0]


def sort_newest_first(items, key="createdAt"):
    """Sort documents by a timestamp field, newest first.

    The sort is stable, so documents with equal timestamps keep the order the
    store returned them in.
    """
    return sorted(items, key=lambda item: item.get(key) or _EPOCH, reverse=True)


def sort_oldest_first(items, key="createdAt"):
    """Sort documents by a timestamp field, oldest first."""
    return sorted(items, key=lambda item: item.get(key) or _EPOCH)


_EPOCH = datetime.datetime(1970, 1, 1, tzinfo=datetime.timezone.utc)
