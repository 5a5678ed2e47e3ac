"""Input sanitizing and validation helpers for the login and submission forms."""

from __future__ import annotations

import re

EMAIL_PATTERN = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')
MIN_PASSWORD_LENGTH = 6


def sanitize_input(value: str | None) -> str:
    """Trim whitespace and drop angle brackets.

    This is a cosmetic filter; queries are parameterized by SQLAlchemy.
    """
    return (value or '').strip().replace('<', '').replace('>', '')


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_PATTERN.fullmatch(email))


def is_valid_password(password: str) -> bool:
    return len(password) >= MIN_PASSWORD_LENGTH


def parse_tags(raw: str | None) -> list[str]:
    """Split a comma separated tag string, keeping order and duplicates."""
    if not raw:
        return []
    return [tag.strip() for tag in raw.split(',') if tag.strip()]


__all__ = ['sanitize_input', 'is_valid_email', 'is_valid_password', 'parse_tags']
