"""
Email service using SendGrid for transactional mail (password reset codes).
"""

import os
import logging
from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail, Email, To, Content
from dotenv import load_dotenv

from crickheroes.utils.constants import VERIFICATION_CODE_EXPIRATION_MINUTES

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


def get_bool_env(key: str, default: bool = True) -> bool:
    """
    Parse a boolean environment variable from a string value.

    "true", "1" and "yes" (any case) are True; anything else is False.

    Args:
        key: Environment variable name
        default: Default value if the variable is not set

    Returns:
        bool: Parsed boolean value
    """
    value = os.getenv(key)
    if value is None:
        return default
    return value.lower() in ("true", "1", "yes")


# SendGrid Configuration
SENDGRID_API_KEY = os.getenv("SENDGRID_API_KEY")
SENDGRID_FROM_EMAIL = os.getenv("SENDGRID_FROM_EMAIL", "noreply@crickheroes.club")
SENDGRID_FROM_NAME = os.getenv("SENDGRID_FROM_NAME", "CrickHeroes")
ENABLE_EMAIL = get_bool_env("ENABLE_EMAIL", default=True)

RESET_CODE_SUBJECT = "Your CrickHeroes Password Reset Code"


def send_email(to: str, subject: str, html: str) -> bool:
    """
    Send an HTML email via SendGrid.

    Args:
        to: Recipient email
        subject: Email subject
        html: HTML body

    Returns:
        bool: True if the email was sent (or sending is disabled), False on failure
    """
    if not ENABLE_EMAIL:
        logger.info("Email sending is disabled. Email to %s skipped.", to)
        return True

    if not SENDGRID_API_KEY:
        logger.warning("SENDGRID_API_KEY not configured. Email to %s skipped.", to)
        return True

    try:
        message = Mail(
            from_email=Email(SENDGRID_FROM_EMAIL, SENDGRID_FROM_NAME),
            to_emails=To(to),
            subject=subject,
            html_content=Content("text/html", html),
        )

        sg = SendGridAPIClient(SENDGRID_API_KEY)
        response = sg.send(message)

        if 200 <= response.status_code < 300:
            logger.info(f"Email '{subject}' sent to {to}")
            return True
        logger.error(f"SendGrid returned status {response.status_code}: {response.body}")
        return False
    except Exception as e:
        logger.error(f"Failed to send email to {to}: {str(e)}")
        return False


def render_reset_code_email(code: str) -> str:
    return f"""
    <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
      <h2 style="color: #f0c22c;">Password Reset Request</h2>
      <p>You requested to reset your password for your CrickHeroes account.</p>
      <p>Your verification code is: <strong style="font-size: 24px; color: #f0c22c;">{code}</strong></p>
      <p>This code will expire in {VERIFICATION_CODE_EXPIRATION_MINUTES} minutes.</p>
      <p>If you didn't request this reset, please ignore this email.</p>
      <hr style="border: none; border-top: 1px solid #eee; margin: 20px 0;">
      <p style="color: #888; font-size: 12px;">This is an automated message, please do not reply.</p>
    </div>
    """


def send_reset_code(to: str, code: str) -> bool:
    """Email a password reset code."""
    return send_email(to, RESET_CODE_SUBJECT, render_reset_code_email(code))
