"""
Phone verification router.
"""
from fastapi import APIRouter, Depends

from api.dependencies import get_verification_service
from api.errors import to_http_exception
from api.schemas.verification import (
    ReferralAward, SendOtpRequest, SendOtpResponse, VerifyOtpRequest, VerifyOtpResponse
)
from waitlist.exceptions import WaitlistError
from waitlist.services import VerificationService

router = APIRouter()


@router.post("/send-otp", response_model=SendOtpResponse)
async def send_otp(
    payload: SendOtpRequest,
    verification_service: VerificationService = Depends(get_verification_service)
):
    """Send a one-time code by SMS."""
    try:
        expires_in = await verification_service.send_code(payload.phone)
    except WaitlistError as e:
        raise to_http_exception(e)
    return SendOtpResponse(expires_in=expires_in)


@router.post("/verify-otp", response_model=VerifyOtpResponse)
async def verify_otp(
    payload: VerifyOtpRequest,
    verification_service: VerificationService = Depends(get_verification_service)
):
    """
    Check a one-time code.
    When userId is given, the user is marked verified and their referrer credited.
    """
    try:
        result = await verification_service.verify_code(
            payload.phone, payload.code, user_id=payload.user_id
        )
    except WaitlistError as e:
        raise to_http_exception(e)

    referral = ReferralAward.from_result(result.award) if result.award else None
    return VerifyOtpResponse(referral=referral)
