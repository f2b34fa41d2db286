"""
Unit tests for the secret masking log filter.
"""

import logging

from utils.logging_config import SecretMaskingFilter


def masked(message, *args):
    record = logging.LogRecord("test", logging.INFO, __file__, 1, message, args, None)
    SecretMaskingFilter().filter(record)
    return record.getMessage()


def test_database_url_password():
    text = masked("Connecting to postgresql+asyncpg://pricing:hunter2secret@db:5432/pricing")
    assert "hunter2secret" not in text
    assert "postgresql+asyncpg://pricing:[REDACTED_PASSWORD]@db:5432/pricing" in text


def test_email_in_args():
    text = masked("Quote requested by %s", "buyer@example.com")
    assert text == "Quote requested by [REDACTED_EMAIL]"


def test_regular_message_untouched():
    assert masked("Resolved price for product bc-001: qty=150") == "Resolved price for product bc-001: qty=150"
