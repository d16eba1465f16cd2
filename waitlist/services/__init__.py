"""Waitlist services module."""
from waitlist.services.leaderboard_service import LeaderboardService, LeaderboardEntry
from waitlist.services.ranking_service import RankingService, RankingStats
from waitlist.services.rate_limiter import RateLimiter, RateLimitResult
from waitlist.services.referral_service import (
    AwardResult,
    AwardStatus,
    ReferralService,
    build_idempotency_key,
)
from waitlist.services.signup_service import SignupService
from waitlist.services.sms_service import LoggingSmsSender, SmsSender
from waitlist.services.verification_service import (
    OtpCheck,
    OtpStore,
    VerificationResult,
    VerificationService,
)

__all__ = [
    "LeaderboardService", "LeaderboardEntry",
    "RankingService", "RankingStats",
    "RateLimiter", "RateLimitResult",
    "AwardResult", "AwardStatus", "ReferralService", "build_idempotency_key",
    "SignupService",
    "LoggingSmsSender", "SmsSender",
    "OtpCheck", "OtpStore", "VerificationResult", "VerificationService",
]
