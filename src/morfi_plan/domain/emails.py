"""Recipient address rules."""

import re

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def is_valid_email(value: str) -> bool:
    """Return True when the address matches the accepted pattern."""
    return bool(EMAIL_PATTERN.match(value))


def valid_recipients(emails: list[str]) -> list[str]:
    """Return trimmed addresses that match the pattern, in order."""
    cleaned = (email.strip() for email in emails if email)
    return [email for email in cleaned if is_valid_email(email)]
