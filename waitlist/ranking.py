"""
Deterministic final ranking.

Users are ranked by final points DESC, then by signup time ASC (earlier
signup wins a tie), then by user id ASC. Ranks are 1-based positions in
that order, so no two users ever share a rank.
"""
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, List

from waitlist.points import (
    PointWeights,
    ReferralCounters,
    calculate_points,
    is_eligible_for_jackpot,
)


@dataclass(frozen=True)
class RankingCandidate:
    """Input row for one user."""
    user_id: int
    counters: ReferralCounters
    early_bird_bonus: int
    created_at: datetime


@dataclass(frozen=True)
class RankedUser:
    """Ranking output for one user."""
    user_id: int
    final_points: int
    rank: int
    eligible_for_jackpot: bool
    is_top_rank: bool


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def rank_users(
    candidates: Iterable[RankingCandidate],
    weights: PointWeights,
    jackpot_threshold: int
) -> List[RankedUser]:
    """
    Compute final points, jackpot eligibility and rank for every user.
    
    Args:
        candidates: Whole user population
        weights: Final weight schedule
        jackpot_threshold: Minimum final points for the jackpot draw
        
    Returns:
        Users in rank order, rank 1 first
    """
    scored = [
        (calculate_points(c.counters, c.early_bird_bonus, weights), c)
        for c in candidates
    ]
    scored.sort(key=lambda item: (-item[0], _as_utc(item[1].created_at), item[1].user_id))
    
    return [
        RankedUser(
            user_id=candidate.user_id,
            final_points=final_points,
            rank=position,
            eligible_for_jackpot=is_eligible_for_jackpot(final_points, jackpot_threshold),
            is_top_rank=position == 1,
        )
        for position, (final_points, candidate) in enumerate(scored, start=1)
    ]
