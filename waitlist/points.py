"""
Point rules for the waitlist contest.

Referral counters are turned into a single total with a weight schedule:

    points = waitlist_clients      * w.waitlist_clients
           + waitlist_influencers  * w.waitlist_influencers
           + waitlist_pros         * w.waitlist_pros
           + app_downloads         * w.app_downloads
           + validated_influencers * w.validated_influencers
           + validated_pros        * w.validated_pros
           + early_bird_bonus

The provisional schedule counts every counter and drives the live
leaderboard. The final schedule only counts post-launch counters and is
applied once, at launch.
"""
from dataclasses import dataclass, fields
from typing import List, NamedTuple, Optional, Sequence


COUNTER_NAMES = (
    "waitlist_clients",
    "waitlist_influencers",
    "waitlist_pros",
    "app_downloads",
    "validated_influencers",
    "validated_pros",
)

# (threshold, tier name)
REWARD_TIERS = (
    (200, "Glow Elites"),
    (100, "Glow Icons"),
    (50, "Glow Circle Insiders"),
    (10, "Glow Starters"),
)


def _clamp(value) -> int:
    """Treat missing or negative values as zero."""
    try:
        value = int(value or 0)
    except (TypeError, ValueError, OverflowError):
        return 0
    return max(value, 0)


@dataclass(frozen=True)
class ReferralCounters:
    """Per-referrer counters for both contest phases."""
    waitlist_clients: int = 0
    waitlist_influencers: int = 0
    waitlist_pros: int = 0
    app_downloads: int = 0
    validated_influencers: int = 0
    validated_pros: int = 0


@dataclass(frozen=True)
class PointWeights:
    """Points earned per unit of each counter."""
    waitlist_clients: int = 0
    waitlist_influencers: int = 0
    waitlist_pros: int = 0
    app_downloads: int = 0
    validated_influencers: int = 0
    validated_pros: int = 0
    
    def for_counter(self, counter_field: str) -> int:
        return getattr(self, counter_field)


class MilestoneProgress(NamedTuple):
    target: int
    missing: int


def counters_from(source) -> ReferralCounters:
    """Build counters from any object (ORM row, dict) exposing the counter names."""
    if isinstance(source, dict):
        return ReferralCounters(**{name: _clamp(source.get(name)) for name in COUNTER_NAMES})
    return ReferralCounters(**{name: _clamp(getattr(source, name, 0)) for name in COUNTER_NAMES})


def calculate_points(
    counters: ReferralCounters,
    early_bird_bonus: int,
    weights: PointWeights
) -> int:
    """
    Compute a point total from referral counters.
    
    Never raises: negative or missing counters and bonus count as zero.
    
    Args:
        counters: Referral counters of one user
        early_bird_bonus: One-time signup bonus
        weights: Weight schedule to apply
        
    Returns:
        Non-negative point total
    """
    total = _clamp(early_bird_bonus)
    for field in fields(ReferralCounters):
        total += _clamp(getattr(counters, field.name)) * _clamp(weights.for_counter(field.name))
    return total


def calculate_user_points(user, weights: PointWeights) -> int:
    """Point total for an object exposing the counters and early_bird_bonus."""
    return calculate_points(counters_from(user), getattr(user, "early_bird_bonus", 0), weights)


def next_milestone(points: int, milestones: Sequence[int]) -> int:
    """
    Smallest milestone strictly greater than points.
    Past the last milestone the last one is returned (final tier).
    """
    for milestone in milestones:
        if points < milestone:
            return milestone
    return milestones[-1]


def milestone_progress(points: int, milestones: Sequence[int]) -> MilestoneProgress:
    """Next milestone and points still missing to reach it."""
    target = next_milestone(points, milestones)
    return MilestoneProgress(target=target, missing=max(target - points, 0))


def crossed_milestones(old_points: int, new_points: int, milestones: Sequence[int]) -> List[int]:
    """Milestones reached by going from old_points to new_points."""
    return [m for m in milestones if old_points < m <= new_points]


def reward_tier(points: int) -> Optional[str]:
    """Reward tier name for a total, None below the first tier."""
    for threshold, name in REWARD_TIERS:
        if points >= threshold:
            return name
    return None


def is_eligible_for_jackpot(final_points: int, threshold: int) -> bool:
    return final_points >= threshold
