from dataclasses import dataclass
from email.message import EmailMessage
from typing import Optional
import logging
import smtplib

from config import settings
from utils.exceptions import NotificationError
from utils.timezone import format_registration_datetime

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NotificationConfig:
    """Настройки уведомлений админа, передаются явно при каждой отправке"""
    admin_email: Optional[str] = None
    admin_notification_enabled: bool = False

    @property
    def admin_recipient(self) -> Optional[str]:
        """Адрес админа, если уведомления включены и адрес задан"""
        if self.admin_notification_enabled and self.admin_email:
            return self.admin_email
        return None


@dataclass
class NotificationResult:
    user_sent: bool = False
    admin_sent: bool = False


class EmailSender:
    """Отправка писем через SMTP; без SMTP_HOST письма только пишутся в лог"""

    def __init__(
        self,
        host: Optional[str] = None,
        port: int = 587,
        username: Optional[str] = None,
        password: Optional[str] = None,
        use_tls: bool = True,
        sender: str = "noreply@example.com",
        timeout: int = 10
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.sender = sender
        self.timeout = timeout

    @classmethod
    def from_settings(cls) -> "EmailSender":
        return cls(
            host=settings.SMTP_HOST,
            port=settings.SMTP_PORT,
            username=settings.SMTP_USERNAME,
            password=settings.SMTP_PASSWORD,
            use_tls=settings.SMTP_USE_TLS,
            sender=settings.MAIL_FROM
        )

    def send(self, to: str, subject: str, body: str):
        message = EmailMessage()
        message["From"] = self.sender
        message["To"] = to
        message["Subject"] = subject
        message.set_content(body)

        if not self.host:
            logger.info(f"SMTP not configured, email to {to} not sent: {subject}")
            return

        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
                if self.use_tls:
                    smtp.starttls()
                if self.username:
                    smtp.login(self.username, self.password or "")
                smtp.send_message(message)
        except (smtplib.SMTPException, OSError) as e:
            raise NotificationError(f"Failed to send email to {to}: {e}") from e


def _registration_details(registration, event) -> str:
    text = f"Event: {event.name}\n"
    text += f"Category: {event.category}\n"
    text += f"Event Date: {event.event_date}\n\n"
    text += f"Full Name: {registration.full_name}\n"
    text += f"Email: {registration.email}\n"
    text += f"College Name: {registration.college_name}\n"
    text += f"Department: {registration.department}\n"
    text += f"Registered At: {format_registration_datetime(registration.created_at)}\n"
    return text


def build_user_confirmation(registration, event):
    """Тема и текст письма участнику"""
    subject = f"Registration Confirmation: {event.name}"
    body = f"Dear {registration.full_name},\n\n"
    body += f'Thank you for registering for "{event.name}" on {event.event_date}.\n\n'
    body += "Registration details:\n\n"
    body += _registration_details(registration, event)
    body += f"\nRegards,\n{settings.SITE_NAME}\n"
    return subject, body


def build_admin_notification(registration, event):
    """Тема и текст письма админу"""
    subject = f"New Event Registration: {event.name}"
    body = "A new registration has been received.\n\n"
    body += _registration_details(registration, event)
    return subject, body


def dispatch_registration_notifications(
    registration,
    event,
    config: NotificationConfig,
    sender: EmailSender
) -> NotificationResult:
    """Отправить письма по новой регистрации; ошибки только логируются"""
    result = NotificationResult()

    subject, body = build_user_confirmation(registration, event)
    try:
        sender.send(registration.email, subject, body)
        result.user_sent = True
    except Exception as e:
        logger.error(f"Ошибка отправки подтверждения по регистрации {registration.id}: {e}")

    admin_email = config.admin_recipient
    if not admin_email:
        return result

    subject, body = build_admin_notification(registration, event)
    try:
        sender.send(admin_email, subject, body)
        result.admin_sent = True
    except Exception as e:
        logger.error(f"Ошибка отправки уведомления админу по регистрации {registration.id}: {e}")

    return result
