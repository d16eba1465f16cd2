"""
Helper functions for input cleanup and log-safe formatting.
"""
import re


def sanitize_email(email: str) -> str:
    """Trim, lowercase and cap length."""
    return email.strip().lower()[:254]


def sanitize_phone(phone: str) -> str:
    """Keep digits and the leading plus sign only."""
    return re.sub(r"[^\d+]", "", phone)[:16]


def sanitize_text(text: str, max_length: int = 100) -> str:
    return text.strip()[:max_length]


def mask_phone(phone: str) -> str:
    """Hide all but the last three digits of a phone number."""
    if not phone:
        return ""
    return "*" * max(len(phone) - 3, 0) + phone[-3:]
