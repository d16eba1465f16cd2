"""
Referral code generation and validation.
"""
import secrets

ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
CODE_LENGTH = 8
MAX_GENERATION_ATTEMPTS = 10


def generate_referral_code(length: int = CODE_LENGTH) -> str:
    """Random code over an alphabet without look-alike characters."""
    return "".join(secrets.choice(ALPHABET) for _ in range(length))


def is_valid_referral_code(code) -> bool:
    if not isinstance(code, str) or len(code) != CODE_LENGTH:
        return False
    return all(char in ALPHABET for char in code)


def referral_link(code: str, base_url: str) -> str:
    return f"{base_url.rstrip('/')}?ref={code}"
