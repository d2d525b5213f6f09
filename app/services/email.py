import html
import logging
import aiosmtplib
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart

from app.core.config import settings

logger = logging.getLogger(__name__)


def build_reset_link(reset_token: str) -> str:
    """Full reset URL when a frontend is configured, otherwise the bare token."""
    base = settings.reset_link_base
    if base:
        return f"{base}/reset-password?token={reset_token}"
    return reset_token


async def send_password_reset_email(
    email: str, reset_token: str, name: str | None = None
) -> None:
    """
    Send password reset email to user.

    Args:
        email: User's email address
        reset_token: Raw reset token (never stored server-side)
        name: Optional display name for the greeting

    Raises:
        ValueError: If SMTP is not configured.
        aiosmtplib.SMTPException: If the SMTP server rejects the message.
    """
    if not all([
        settings.smtp_host,
        settings.smtp_port,
        settings.smtp_from_email,
    ]):
        logger.warning("SMTP not configured - cannot send password reset email")
        raise ValueError("SMTP is not configured. Please configure SMTP settings in .env file.")

    greeting = f"Hi {name}," if name else "Hi there,"
    html_greeting = html.escape(greeting)
    reset_link = build_reset_link(reset_token)
    expire_minutes = settings.password_reset_token_expire_minutes

    message = MIMEMultipart("alternative")
    message["Subject"] = "Reset your Production Management password"
    message["From"] = settings.smtp_from_email
    message["To"] = email

    if settings.reset_link_base:
        text = f"""
{greeting}

We received a request to reset your password for the Production Management System.

Please open the following link to reset your password:
{reset_link}

This link will expire in {expire_minutes} minutes.

If you did not request this, you can safely ignore this email.
        """
        html_body = f"""
<html>
  <body style="font-family: Arial, sans-serif; color: #0b0f1a;">
    <h2 style="margin-bottom: 12px;">Reset your password</h2>
    <p>{html_greeting}</p>
    <p>We received a request to reset your password for the Production Management System.</p>
    <p>
      <a href="{reset_link}" style="display: inline-block; background: #ff7a00; color: #fff; padding: 10px 18px; border-radius: 6px; text-decoration: none;">Reset password</a>
    </p>
    <p>This link will expire in {expire_minutes} minutes.</p>
    <p>If you did not request this, you can safely ignore this email.</p>
  </body>
</html>
        """
    else:
        # No frontend configured - include the token itself
        text = f"""
{greeting}

We received a request to reset your password for the Production Management System.

Your password reset token is:
{reset_token}

This token will expire in {expire_minutes} minutes.

If you did not request this, you can safely ignore this email.
        """
        html_body = f"""
<html>
  <body style="font-family: Arial, sans-serif; color: #0b0f1a;">
    <h2 style="margin-bottom: 12px;">Reset your password</h2>
    <p>{html_greeting}</p>
    <p>Your password reset token is:</p>
    <p><code>{reset_token}</code></p>
    <p>This token will expire in {expire_minutes} minutes.</p>
    <p>If you did not request this, you can safely ignore this email.</p>
  </body>
</html>
        """

    message.attach(MIMEText(text, "plain"))
    message.attach(MIMEText(html_body, "html"))

    send_kwargs = {
        "hostname": settings.smtp_host,
        "port": settings.smtp_port,
    }
    if settings.smtp_user and settings.smtp_password:
        send_kwargs["username"] = settings.smtp_user
        send_kwargs["password"] = settings.smtp_password

    # Port 465 uses direct TLS, everything else STARTTLS when TLS is enabled
    if settings.smtp_use_tls:
        if settings.smtp_port == 465:
            send_kwargs["use_tls"] = True
        else:
            send_kwargs["start_tls"] = True

    await aiosmtplib.send(message, **send_kwargs)
