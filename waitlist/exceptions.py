"""
Domain errors raised by waitlist services.
Routers translate them into HTTP responses.
"""
from typing import Optional


class WaitlistError(Exception):
    """Base class for waitlist errors."""
    
    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message


class ValidationFailed(WaitlistError):
    """Input rejected before any state change."""


class DuplicateSignup(WaitlistError):
    """Email or phone already registered."""


class InvalidReferralCode(WaitlistError):
    """Referral code does not match any user."""


class ReferralCodeExhausted(WaitlistError):
    """Could not find a free referral code."""


class UserNotFound(WaitlistError):
    """Requested user does not exist."""


class RateLimited(WaitlistError):
    """Too many attempts for this identifier."""
    
    def __init__(self, message: str = "", retry_after: Optional[int] = None):
        super().__init__(message)
        self.retry_after = retry_after


class VerificationFailed(WaitlistError):
    """One-time code rejected."""
    
    def __init__(self, message: str = "", reason: str = "mismatch"):
        super().__init__(message)
        self.reason = reason


class RankingInProgress(WaitlistError):
    """Another final ranking run holds the lock."""
