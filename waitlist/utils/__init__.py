"""Utilities module."""
from waitlist.utils.helpers import mask_phone, sanitize_email, sanitize_phone, sanitize_text
from waitlist.utils.validators import (
    validate_email,
    validate_phone,
    validate_first_name,
    validate_role,
    validate_otp_code,
    validate_leaderboard_limit,
)

__all__ = [
    "mask_phone", "sanitize_email", "sanitize_phone", "sanitize_text",
    "validate_email", "validate_phone", "validate_first_name", "validate_role",
    "validate_otp_code", "validate_leaderboard_limit",
]
