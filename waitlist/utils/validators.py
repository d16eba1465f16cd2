"""
Input validation utilities for waitlist endpoints.
"""
import re
from typing import Tuple, Optional

from waitlist.roles import normalize_role

EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")
# Belgian mobile numbers: +32 4xx xx xx xx
BELGIAN_MOBILE_PATTERN = re.compile(r"^\+324\d{8}$")
INVALID_PHONE_MESSAGE = "Numéro invalide. Exemple : +32 471 12 34 56"

LEADERBOARD_MIN_LIMIT = 1
LEADERBOARD_MAX_LIMIT = 100


def validate_email(email: Optional[str]) -> Tuple[bool, Optional[str]]:
    """
    Validate an email address.
    
    Args:
        email: Raw email from the request
        
    Returns:
        Tuple of (is_valid, error_message)
    """
    if not email or not email.strip():
        return False, "Email requis"
    
    email = email.strip()
    
    if len(email) > 254:
        return False, "Email trop long"
    
    if not EMAIL_PATTERN.match(email):
        return False, "Format email invalide"
    
    return True, None


def validate_phone(phone: Optional[str]) -> Tuple[bool, Optional[str]]:
    """
    Validate a Belgian mobile number.
    Spaces and punctuation are ignored.
    
    Returns:
        Tuple of (is_valid, error_message)
    """
    cleaned = re.sub(r"[^\d+]", "", phone or "")
    
    if not cleaned:
        return False, "Téléphone requis"
    
    if not BELGIAN_MOBILE_PATTERN.match(cleaned):
        return False, INVALID_PHONE_MESSAGE
    
    return True, None


def validate_first_name(first_name: Optional[str]) -> Tuple[bool, Optional[str]]:
    if not first_name or not first_name.strip():
        return False, "Prénom requis"
    return True, None


def validate_role(role: Optional[str]) -> Tuple[bool, Optional[str]]:
    """Validate a participant role (any accepted spelling)."""
    if not role:
        return False, "Rôle requis"
    
    if normalize_role(role) is None:
        return False, "Rôle invalide. Valeurs acceptées: client, influencer, beautypro"
    
    return True, None


def validate_otp_code(code: Optional[str]) -> Tuple[bool, Optional[str]]:
    """One-time codes are six digits."""
    if not code or not re.fullmatch(r"\d{6}", code.strip()):
        return False, "Le code doit contenir 6 chiffres"
    return True, None


def validate_leaderboard_limit(limit: int) -> Tuple[bool, Optional[str]]:
    if limit < LEADERBOARD_MIN_LIMIT or limit > LEADERBOARD_MAX_LIMIT:
        return False, f"Limite doit être entre {LEADERBOARD_MIN_LIMIT} et {LEADERBOARD_MAX_LIMIT}"
    return True, None
