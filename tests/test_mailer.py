"""Tests for the SMTP mailer."""

import smtplib
from unittest.mock import patch

import pytest

from core.climatiseur.exceptions import DeliveryError
from core.climatiseur.mailer import Mailer

PARAMS = {
    "address": "smtp.example.com",
    "port": 587,
    "domain": "example.com",
    "user_name": "climatiseur",
    "password": "secret",
    "enable_starttls_auto": True,
}


@patch("core.climatiseur.mailer.smtplib.SMTP")
def test_deliver_with_starttls_and_login(smtp_class):
    smtp = smtp_class.return_value.__enter__.return_value
    smtp.has_extn.return_value = True

    Mailer(PARAMS).deliver("alice@example.com", "me@example.com", "Subject", "Body")

    smtp_class.assert_called_once_with("smtp.example.com", 587, local_hostname="example.com", timeout=30.0)
    smtp.starttls.assert_called_once()
    smtp.login.assert_called_once_with("climatiseur", "secret")
    message = smtp.send_message.call_args[0][0]
    assert message["To"] == "alice@example.com"
    assert message["From"] == "me@example.com"
    assert message["Subject"] == "Subject"
    assert message.get_content().strip() == "Body"


@patch("core.climatiseur.mailer.smtplib.SMTP")
def test_deliver_without_auth(smtp_class):
    smtp = smtp_class.return_value.__enter__.return_value

    Mailer({"address": "localhost", "enable_starttls_auto": False}).deliver(
        "alice@example.com", "me@example.com", "Subject", "Body"
    )

    smtp_class.assert_called_once_with("localhost", 25, local_hostname=None, timeout=30.0)
    smtp.starttls.assert_not_called()
    smtp.login.assert_not_called()
    smtp.send_message.assert_called_once()


@pytest.mark.parametrize(
    "error", [OSError("connection refused"), smtplib.SMTPRecipientsRefused({"alice@example.com": (550, b"no")})]
)
@patch("core.climatiseur.mailer.smtplib.SMTP")
def test_failures_become_delivery_errors(smtp_class, error):
    smtp_class.return_value.__enter__.return_value.send_message.side_effect = error

    with pytest.raises(DeliveryError) as excinfo:
        Mailer(PARAMS).deliver("alice@example.com", "me@example.com", "Subject", "Body")

    assert excinfo.value.recipient == "alice@example.com"


@patch("core.climatiseur.mailer.smtplib.SMTP")
def test_header_injection_becomes_delivery_error(smtp_class):
    with pytest.raises(DeliveryError) as excinfo:
        Mailer(PARAMS).deliver("bad\naddr@example.com", "me@example.com", "Subject", "Body")

    assert excinfo.value.recipient == "bad\naddr@example.com"
    smtp_class.assert_not_called()
