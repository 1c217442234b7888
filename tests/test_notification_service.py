"""Тесты отправки писем по регистрации."""
import smtplib
from datetime import datetime
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from services.notification_service import (
    EmailSender,
    NotificationConfig,
    build_admin_notification,
    build_user_confirmation,
    dispatch_registration_notifications,
)
from tests.conftest import FakeSender
from utils.exceptions import NotificationError


@pytest.fixture
def registration():
    return SimpleNamespace(
        id=7,
        full_name="Jane Doe",
        email="jane@college.edu",
        college_name="City College",
        department="Physics",
        created_at=datetime(2026, 2, 10, 9, 30, 15),
    )


@pytest.fixture
def event():
    return SimpleNamespace(id=3, name="AI Hackathon", category="Hackathon", event_date="2026-03-20")


class TestNotificationConfig:

    def test_admin_recipient_requires_flag_and_address(self):
        assert NotificationConfig().admin_recipient is None
        assert NotificationConfig(admin_email="admin@x.com").admin_recipient is None
        assert NotificationConfig(admin_notification_enabled=True).admin_recipient is None
        assert NotificationConfig("admin@x.com", True).admin_recipient == "admin@x.com"


class TestMessages:

    def test_user_confirmation_contains_details(self, registration, event):
        subject, body = build_user_confirmation(registration, event)
        assert subject == "Registration Confirmation: AI Hackathon"
        assert "Dear Jane Doe" in body
        assert "Event Date: 2026-03-20" in body
        assert "Registered At: 2026-02-10 09:30:15" in body

    def test_admin_notification_contains_registrant(self, registration, event):
        subject, body = build_admin_notification(registration, event)
        assert subject == "New Event Registration: AI Hackathon"
        assert "Email: jane@college.edu" in body
        assert "Department: Physics" in body


class TestDispatch:

    def test_user_only_when_admin_disabled(self, registration, event):
        sender = FakeSender()
        result = dispatch_registration_notifications(registration, event, NotificationConfig("admin@x.com", False), sender)
        assert sender.recipients() == ["jane@college.edu"]
        assert result.user_sent and not result.admin_sent

    def test_both_when_enabled(self, registration, event):
        sender = FakeSender()
        result = dispatch_registration_notifications(registration, event, NotificationConfig("admin@x.com", True), sender)
        assert sender.recipients() == ["jane@college.edu", "admin@x.com"]
        assert result.user_sent and result.admin_sent

    def test_user_failure_still_tries_admin(self, registration, event):
        sender = FakeSender(fail_for={"jane@college.edu"})
        result = dispatch_registration_notifications(registration, event, NotificationConfig("admin@x.com", True), sender)
        assert sender.recipients() == ["admin@x.com"]
        assert not result.user_sent and result.admin_sent

    def test_failures_are_logged_not_raised(self, registration, event, caplog):
        sender = FakeSender(fail_for={"jane@college.edu", "admin@x.com"})
        result = dispatch_registration_notifications(registration, event, NotificationConfig("admin@x.com", True), sender)
        assert not result.user_sent and not result.admin_sent
        assert "регистрации 7" in caplog.text


class TestEmailSender:

    def test_without_host_only_logs(self):
        sender = EmailSender(host=None)
        with patch("services.notification_service.smtplib.SMTP") as smtp:
            sender.send("jane@college.edu", "Subject", "Body")
        smtp.assert_not_called()

    def test_sends_through_smtp(self):
        sender = EmailSender(host="smtp.x.com", port=2525, username="user", password="secret", sender="events@x.com")
        with patch("services.notification_service.smtplib.SMTP") as smtp:
            connection = smtp.return_value.__enter__.return_value
            sender.send("jane@college.edu", "Subject", "Body")

        smtp.assert_called_once_with("smtp.x.com", 2525, timeout=10)
        connection.starttls.assert_called_once()
        connection.login.assert_called_once_with("user", "secret")
        message = connection.send_message.call_args[0][0]
        assert message["To"] == "jane@college.edu"
        assert message["From"] == "events@x.com"

    def test_smtp_error_becomes_notification_error(self):
        sender = EmailSender(host="smtp.x.com", use_tls=False)
        with patch("services.notification_service.smtplib.SMTP") as smtp:
            smtp.return_value.__enter__.return_value.send_message.side_effect = smtplib.SMTPException("boom")
            with pytest.raises(NotificationError):
                sender.send("jane@college.edu", "Subject", "Body")

    def test_connection_error_becomes_notification_error(self):
        sender = EmailSender(host="smtp.x.com")
        with patch("services.notification_service.smtplib.SMTP", MagicMock(side_effect=ConnectionRefusedError())):
            with pytest.raises(NotificationError):
                sender.send("jane@college.edu", "Subject", "Body")
