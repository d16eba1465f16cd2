"""
Domain error to HTTP response mapping.
"""
from fastapi import HTTPException, status

from waitlist.exceptions import (
    DuplicateSignup,
    InvalidReferralCode,
    RankingInProgress,
    RateLimited,
    ReferralCodeExhausted,
    UserNotFound,
    ValidationFailed,
    VerificationFailed,
    WaitlistError,
)

STATUS_CODES = {
    ValidationFailed: status.HTTP_400_BAD_REQUEST,
    InvalidReferralCode: status.HTTP_400_BAD_REQUEST,
    VerificationFailed: status.HTTP_400_BAD_REQUEST,
    UserNotFound: status.HTTP_404_NOT_FOUND,
    DuplicateSignup: status.HTTP_409_CONFLICT,
    RankingInProgress: status.HTTP_409_CONFLICT,
    RateLimited: status.HTTP_429_TOO_MANY_REQUESTS,
    ReferralCodeExhausted: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def to_http_exception(error: WaitlistError) -> HTTPException:
    """Build the HTTPException matching a domain error."""
    status_code = STATUS_CODES.get(type(error), status.HTTP_500_INTERNAL_SERVER_ERROR)

    headers = None
    if isinstance(error, RateLimited) and error.retry_after is not None:
        headers = {"Retry-After": str(error.retry_after)}

    detail = error.message
    if isinstance(error, VerificationFailed):
        detail = {"message": error.message, "reason": error.reason}

    return HTTPException(status_code=status_code, detail=detail, headers=headers)
