"""API schemas module."""
from api.schemas.admin import (
    RankingSnapshotResponse, RankingStatsResponse, RecalculateResponse,
    ReferralCompletedRequest, ReferralCompletedResponse, TopUser, UserSummary
)
from api.schemas.leaderboard import (
    ExportResponse, ExportRow, LeaderboardEntryResponse, LeaderboardResponse
)
from api.schemas.verification import (
    ReferralAward, SendOtpRequest, SendOtpResponse, VerifyOtpRequest, VerifyOtpResponse
)
from api.schemas.waitlist import (
    EarlyBirdStatus, JoinWaitlistRequest, JoinWaitlistResponse, ProgressResponse, SignupUser
)

__all__ = [
    "RankingSnapshotResponse", "RankingStatsResponse", "RecalculateResponse",
    "ReferralCompletedRequest", "ReferralCompletedResponse", "TopUser", "UserSummary",
    "ExportResponse", "ExportRow", "LeaderboardEntryResponse", "LeaderboardResponse",
    "ReferralAward", "SendOtpRequest", "SendOtpResponse", "VerifyOtpRequest", "VerifyOtpResponse",
    "EarlyBirdStatus", "JoinWaitlistRequest", "JoinWaitlistResponse", "ProgressResponse", "SignupUser",
]
