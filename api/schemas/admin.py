"""Admin and webhook schemas."""
from datetime import datetime
from typing import List, Optional

from pydantic import Field

from api.schemas.base import CamelModel
from api.schemas.verification import ReferralAward


class TopUser(CamelModel):
    email: str
    first_name: Optional[str] = None
    final_points: int


class RankingStatsResponse(CamelModel):
    total_users: int
    top_user: Optional[TopUser] = None
    jackpot_eligible_count: int
    failed_updates: int = Field(
        0, description="Users left unranked by this run; always 0 because the run is all-or-nothing"
    )
    timestamp: datetime


class RecalculateResponse(CamelModel):
    success: bool = True
    message: str = "Final points recalculated successfully"
    stats: RankingStatsResponse


class UserSummary(CamelModel):
    id: int
    email: str
    first_name: Optional[str] = None
    final_points: int
    provisional_points: int
    rank: Optional[int] = None
    early_bird: bool


class RankingSnapshotResponse(CamelModel):
    success: bool = True
    total_users: int
    early_birds: int
    jackpot_eligible_count: int
    top_user: Optional[UserSummary] = None
    top_jackpot_eligible: List[UserSummary]


class ReferralCompletedRequest(CamelModel):
    referred_user_id: int


class ReferralCompletedResponse(CamelModel):
    success: bool = True
    referral: ReferralAward
