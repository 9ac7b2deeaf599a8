import logging
import smtplib
import ssl
from datetime import timedelta
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from warden_config.settings import Settings
from warden_identity.application.ports import Notifier

logger = logging.getLogger(__name__)

VERIFICATION_SUBJECT = "Verify your account - {app_name}"

VERIFICATION_TEXT = """Hello,

Thanks for signing up for {app_name}.

Your verification code is: {code}

The code is valid for {minutes} minutes. If it expires you can request a
new one from the sign-in page.

If you didn't create an account, you can safely ignore this email.

-- {app_name}
"""

VERIFICATION_HTML = """
<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
</head>
<body style="font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; background-color: #f9fafb; margin: 0; padding: 20px;">
    <div style="max-width: 600px; margin: 0 auto; background-color: #ffffff; border-radius: 8px; padding: 40px; box-shadow: 0 1px 3px rgba(0,0,0,0.1);">
        <h2 style="color: #111827; margin-top: 0;">Verify your account</h2>
        <p style="color: #374151; line-height: 1.6;">Thanks for signing up for {app_name}. Enter this code to activate your account:</p>
        <p style="margin: 30px 0; text-align: center; font-size: 32px; font-weight: 700; letter-spacing: 8px; color: #111827;">{code}</p>
        <p style="color: #6b7280; font-size: 14px;">The code is valid for {minutes} minutes.</p>
        <div style="margin-top: 40px; padding-top: 20px; border-top: 1px solid #e5e7eb;">
            <p style="color: #9ca3af; font-size: 13px; margin: 0;">If you didn't create an account, you can safely ignore this email.</p>
        </div>
    </div>
</body>
</html>
"""

PASSWORD_RESET_SUBJECT = "Password Reset Request - {app_name}"

PASSWORD_RESET_TEXT = """Hello,

You requested a password reset for your {app_name} account.

Open the link below to choose a new password (valid for {minutes} minutes):
{reset_link}

If you didn't request this, you can safely ignore this email.

-- {app_name}
"""

PASSWORD_RESET_HTML = """
<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
</head>
<body style="font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; background-color: #f9fafb; margin: 0; padding: 20px;">
    <div style="max-width: 600px; margin: 0 auto; background-color: #ffffff; border-radius: 8px; padding: 40px; box-shadow: 0 1px 3px rgba(0,0,0,0.1);">
        <h2 style="color: #111827; margin-top: 0;">Password Reset Request</h2>
        <p style="color: #374151; line-height: 1.6;">You requested a password reset for your {app_name} account.</p>
        <p style="color: #374151; line-height: 1.6;">The link below is valid for {minutes} minutes and can be used once.</p>
        <p style="margin: 30px 0; text-align: center;">
            <a href="{reset_link}" style="display: inline-block; padding: 14px 28px; background-color: #2563eb; color: #ffffff !important; text-decoration: none; border-radius: 6px; font-weight: 600; font-size: 16px;">Reset Password</a>
        </p>
        <p style="word-break: break-all; color: #2563eb; font-size: 14px;">{reset_link}</p>
        <div style="margin-top: 40px; padding-top: 20px; border-top: 1px solid #e5e7eb;">
            <p style="color: #9ca3af; font-size: 13px; margin: 0;">If you didn't request this, you can safely ignore this email.</p>
        </div>
    </div>
</body>
</html>
"""


class EmailService(Notifier):
    """SMTP notifier.

    Blocking; meant to be driven through ``NotificationDispatcher``. Delivery
    errors are logged and re-raised so the dispatcher sees them.
    """

    def __init__(self, settings: Settings):
        self._settings = settings

    def send_verification_code(
        self,
        to_email: str,
        code: str,
        valid_for: timedelta,
    ) -> None:
        if not self._settings.smtp_enabled:
            logger.warning("SMTP disabled, skipping verification email to %s", to_email)
            return

        context = {
            "app_name": self._settings.app_name,
            "code": code,
            "minutes": int(valid_for.total_seconds() // 60),
        }
        message = self._create_message(
            to_email=to_email,
            subject=VERIFICATION_SUBJECT.format(**context),
            text_body=VERIFICATION_TEXT.format(**context),
            html_body=VERIFICATION_HTML.format(**context),
        )
        self._send_email(to_email, message)

    def send_password_reset_link(self, to_email: str, reset_link: str) -> None:
        if not self._settings.smtp_enabled:
            logger.warning(
                "SMTP disabled, skipping password reset email to %s",
                to_email,
            )
            return

        context = {
            "app_name": self._settings.app_name,
            "reset_link": reset_link,
            "minutes": self._settings.password_reset_token_expire_minutes,
        }
        message = self._create_message(
            to_email=to_email,
            subject=PASSWORD_RESET_SUBJECT.format(**context),
            text_body=PASSWORD_RESET_TEXT.format(**context),
            html_body=PASSWORD_RESET_HTML.format(**context),
        )
        self._send_email(to_email, message)

    def _create_message(
        self,
        to_email: str,
        subject: str,
        text_body: str,
        html_body: str | None = None,
    ) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = f"{self._settings.smtp_from_name} <{self._settings.smtp_from_email}>"
        msg["To"] = to_email

        msg.attach(MIMEText(text_body, "plain"))
        if html_body:
            msg.attach(MIMEText(html_body, "html"))

        return msg

    def _send_email(self, to_email: str, message: MIMEMultipart) -> None:
        settings = self._settings
        if not settings.smtp_host:
            logger.error("SMTP host not configured, email to %s dropped", to_email)
            return

        password = (
            settings.smtp_password.get_secret_value() if settings.smtp_password else ""
        )

        try:
            if settings.smtp_use_tls and not settings.smtp_starttls:
                # Implicit TLS (port 465)
                with smtplib.SMTP_SSL(
                    settings.smtp_host,
                    settings.smtp_port,
                    context=ssl.create_default_context(),
                ) as server:
                    self._deliver(server, message, password)
            else:
                # STARTTLS (port 587) or plain
                with smtplib.SMTP(settings.smtp_host, settings.smtp_port) as server:
                    if settings.smtp_starttls:
                        server.starttls(context=ssl.create_default_context())
                    self._deliver(server, message, password)

            logger.info("Email sent to %s", to_email)

        except Exception as e:
            logger.error("Failed to send email to %s: %s", to_email, e)
            raise

    def _deliver(self, server: smtplib.SMTP, message: MIMEMultipart, password: str) -> None:
        if self._settings.smtp_user:
            server.login(self._settings.smtp_user, password)
        server.send_message(message)
