"""
Webhook router.
Receives launch-phase validations from the app backend.
"""
from fastapi import APIRouter, Depends, HTTPException, status

from api.dependencies import get_referral_service
from api.schemas.admin import ReferralCompletedRequest, ReferralCompletedResponse
from api.schemas.verification import ReferralAward
from api.services.auth_service import require_admin
from waitlist.services import AwardStatus, ReferralService

router = APIRouter(dependencies=[Depends(require_admin)])


@router.post("/referral-completed", response_model=ReferralCompletedResponse)
async def referral_completed(
    payload: ReferralCompletedRequest,
    referral_service: ReferralService = Depends(get_referral_service)
):
    """
    Credit the referrer of a user who downloaded the app or validated
    their account after launch. Replays are acknowledged without effect.
    """
    result = await referral_service.award_launch_validation(payload.referred_user_id)

    if result.status == AwardStatus.FAILED:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Referral award failed",
        )

    return ReferralCompletedResponse(
        success=result.status != AwardStatus.SKIPPED,
        referral=ReferralAward.from_result(result),
    )
