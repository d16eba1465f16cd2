"""Phone verification schemas."""
from typing import List, Optional

from api.schemas.base import CamelModel
from waitlist.services.referral_service import AwardResult


class SendOtpRequest(CamelModel):
    phone: str = ""


class SendOtpResponse(CamelModel):
    success: bool = True
    expires_in: int


class VerifyOtpRequest(CamelModel):
    phone: str = ""
    code: str = ""
    user_id: Optional[int] = None


class ReferralAward(CamelModel):
    """Outcome of the referral credit triggered by an event."""
    status: str
    idempotency_key: Optional[str] = None
    points_awarded: int = 0
    provisional_points: Optional[int] = None
    milestones_reached: List[int] = []
    reason: Optional[str] = None

    @classmethod
    def from_result(cls, result: AwardResult) -> "ReferralAward":
        return cls(
            status=result.status.value,
            idempotency_key=result.idempotency_key,
            points_awarded=result.points_awarded,
            provisional_points=result.provisional_points,
            milestones_reached=result.milestones_reached,
            reason=result.reason,
        )


class VerifyOtpResponse(CamelModel):
    success: bool = True
    message: str = "Numéro vérifié avec succès"
    referral: Optional[ReferralAward] = None
