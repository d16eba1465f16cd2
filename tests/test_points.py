"""
Tests for point rules.
"""
import pytest

from waitlist.points import (
    COUNTER_NAMES,
    PointWeights,
    ReferralCounters,
    calculate_points,
    calculate_user_points,
    counters_from,
    crossed_milestones,
    is_eligible_for_jackpot,
    milestone_progress,
    next_milestone,
    reward_tier,
)

PROVISIONAL = PointWeights(
    waitlist_clients=2,
    waitlist_influencers=15,
    waitlist_pros=25,
    app_downloads=10,
    validated_influencers=50,
    validated_pros=100,
)
FINAL = PointWeights(app_downloads=10, validated_influencers=50, validated_pros=100)
MILESTONES = [10, 50, 100, 200]


class TestCalculatePoints:
    """Tests for the points formula."""

    def test_zero_counters_no_bonus(self):
        """No referrals and no bonus is worth nothing."""
        assert calculate_points(ReferralCounters(), 0, PROVISIONAL) == 0

    def test_bonus_only(self):
        """The early-bird bonus alone counts."""
        assert calculate_points(ReferralCounters(), 50, PROVISIONAL) == 50

    def test_weighted_sum(self):
        """Each counter is multiplied by its weight."""
        counters = ReferralCounters(
            waitlist_clients=3,
            waitlist_influencers=1,
            waitlist_pros=2,
            app_downloads=1,
            validated_influencers=1,
            validated_pros=1,
        )
        assert calculate_points(counters, 50, PROVISIONAL) == 6 + 15 + 50 + 10 + 50 + 100 + 50

    def test_final_weights_ignore_waitlist_counters(self):
        """Only post-launch counters count in the final schedule."""
        counters = ReferralCounters(waitlist_pros=4, validated_pros=1)
        assert calculate_points(counters, 0, FINAL) == 100

    def test_negative_values_clamped(self):
        """Negative counters and bonus count as zero."""
        counters = ReferralCounters(waitlist_clients=-5, app_downloads=2)
        assert calculate_points(counters, -50, PROVISIONAL) == 20

    def test_non_finite_values_clamped(self):
        """Infinite or NaN inputs count as zero instead of raising."""
        counters = counters_from({"waitlist_clients": float("inf"), "app_downloads": 1})
        assert calculate_points(counters, float("nan"), PROVISIONAL) == 10
        assert calculate_points(ReferralCounters(), float("-inf"), PROVISIONAL) == 0

    @pytest.mark.parametrize("counter", COUNTER_NAMES)
    def test_monotonic_in_each_counter(self, counter):
        """Adding one referral never lowers the total."""
        base = ReferralCounters(waitlist_clients=1, validated_pros=1)
        bumped = counters_from({**base.__dict__, counter: getattr(base, counter) + 1})
        assert calculate_points(bumped, 0, PROVISIONAL) >= calculate_points(base, 0, PROVISIONAL)
        assert calculate_points(base, 0, PROVISIONAL) >= 0


class TestCountersFrom:
    """Tests for reading counters from rows and payloads."""

    def test_from_dict_with_missing_and_none(self):
        """Missing or null fields become zero."""
        counters = counters_from({"waitlist_pros": 2, "app_downloads": None})
        assert counters == ReferralCounters(waitlist_pros=2)

    def test_from_object(self):
        """Any object exposing the counter attributes works."""
        class Row:
            waitlist_clients = 4
            validated_influencers = "2"
            early_bird_bonus = 50

        counters = counters_from(Row())
        assert counters.waitlist_clients == 4
        assert counters.validated_influencers == 2
        assert calculate_user_points(Row(), PROVISIONAL) == 8 + 100 + 50


class TestMilestones:
    """Tests for milestone lookup."""

    def test_next_milestone_strictly_greater(self):
        assert next_milestone(0, MILESTONES) == 10
        assert next_milestone(10, MILESTONES) == 50
        assert next_milestone(99, MILESTONES) == 100

    def test_next_milestone_past_last(self):
        """Past the last threshold the final tier is returned."""
        assert next_milestone(250, MILESTONES) == 200

    def test_progress_missing_points(self):
        assert milestone_progress(42, MILESTONES) == (50, 8)
        assert milestone_progress(500, MILESTONES).missing == 0

    def test_crossed_milestones(self):
        assert crossed_milestones(48, 73, MILESTONES) == [50]
        assert crossed_milestones(0, 200, MILESTONES) == [10, 50, 100, 200]
        assert crossed_milestones(50, 50, MILESTONES) == []


class TestRewards:
    """Tests for tiers and jackpot eligibility."""

    def test_reward_tier(self):
        assert reward_tier(5) is None
        assert reward_tier(10) == "Glow Starters"
        assert reward_tier(120) == "Glow Icons"
        assert reward_tier(200) == "Glow Elites"

    def test_jackpot_threshold_inclusive(self):
        assert is_eligible_for_jackpot(100, 100)
        assert not is_eligible_for_jackpot(99, 100)
