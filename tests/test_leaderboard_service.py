"""
Tests for leaderboard reads, export and progress.
"""
from datetime import datetime, timedelta, timezone

import pytest

from waitlist.exceptions import UserNotFound, ValidationFailed
from waitlist.roles import Role
from waitlist.services import LeaderboardService

T0 = datetime(2025, 11, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def leaderboard_service(session_maker, app_settings):
    return LeaderboardService(session_maker, app_settings)


class TestGetLeaderboard:
    """Tests for LeaderboardService.get_leaderboard."""

    @pytest.mark.asyncio
    async def test_order_points_then_referrals_then_signup(self, leaderboard_service, create_user):
        await create_user(first_name="Late", provisional_points=30, ref_count=2, created_at=T0 + timedelta(hours=2))
        await create_user(first_name="Early", provisional_points=30, ref_count=2, created_at=T0)
        await create_user(first_name="MoreRefs", provisional_points=30, ref_count=5, created_at=T0 + timedelta(hours=3))
        await create_user(first_name="Top", provisional_points=90, created_at=T0 + timedelta(hours=4))

        entries = await leaderboard_service.get_leaderboard()

        assert [e.first_name for e in entries] == ["Top", "MoreRefs", "Early", "Late"]
        assert [e.rank for e in entries] == [1, 2, 3, 4]
        assert entries[1].referrals_count == 5

    @pytest.mark.asyncio
    async def test_role_filter_restarts_ranks(self, leaderboard_service, create_user):
        """Ranks are positions within the returned page."""
        await create_user(role=Role.CLIENT, provisional_points=100)
        await create_user(role=Role.INFLUENCER, provisional_points=50)
        await create_user(role=Role.INFLUENCER, provisional_points=20)

        entries = await leaderboard_service.get_leaderboard(role="influencer")

        assert [(e.rank, e.points) for e in entries] == [(1, 50), (2, 20)]
        assert all(e.role == "influencer" for e in entries)

    @pytest.mark.asyncio
    async def test_limit(self, leaderboard_service, create_user):
        for points in range(5):
            await create_user(provisional_points=points)
        entries = await leaderboard_service.get_leaderboard(limit=2)
        assert [e.points for e in entries] == [4, 3]

    @pytest.mark.asyncio
    async def test_missing_name_anonymised(self, leaderboard_service, create_user):
        await create_user(first_name=None)
        entries = await leaderboard_service.get_leaderboard()
        assert entries[0].first_name == "Anonyme"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("kwargs", [{"role": "admin"}, {"limit": 0}, {"limit": 101}])
    async def test_invalid_arguments(self, leaderboard_service, kwargs):
        with pytest.raises(ValidationFailed):
            await leaderboard_service.get_leaderboard(**kwargs)


class TestExport:
    """Tests for the admin export."""

    @pytest.mark.asyncio
    async def test_verified_only_by_default(self, leaderboard_service, create_user):
        await create_user(email="verified@example.com", phone_verified=True, phone="+32470000001")
        await create_user(email="pending@example.com")

        rows = await leaderboard_service.export()
        assert [r["email"] for r in rows] == ["verified@example.com"]

        rows = await leaderboard_service.export(include_unverified=True)
        assert len(rows) == 2

    @pytest.mark.asyncio
    async def test_csv(self, leaderboard_service, create_user):
        await create_user(first_name="Awa", phone_verified=True, provisional_points=12, early_bird=True)

        csv_text = leaderboard_service.to_csv(await leaderboard_service.export())
        header, row = csv_text.strip().split("\n")

        assert header.startswith('"Rank","Name","Email"')
        assert row.startswith('"1","Awa"')
        assert '"Yes"' in row
        assert '"No"' in row


class TestGetProgress:
    """Tests for LeaderboardService.get_progress."""

    @pytest.mark.asyncio
    async def test_breakdown_and_position(self, leaderboard_service, create_user):
        await create_user(provisional_points=80)
        user = await create_user(
            waitlist_clients=2, waitlist_influencers=1, early_bird_bonus=50, provisional_points=69
        )
        await create_user(provisional_points=10)

        progress = await leaderboard_service.get_progress(user.referral_code)

        assert progress["position"] == 2
        assert progress["counters"]["waitlist_clients"] == 2
        assert progress["early_bird_bonus"] == 50
        assert progress["next_milestone"] == 100
        assert progress["points_to_next_milestone"] == 31
        assert progress["tier"] == "Glow Circle Insiders"
        assert progress["post_launch"] is True

    @pytest.mark.asyncio
    async def test_unknown_code(self, leaderboard_service):
        with pytest.raises(UserNotFound):
            await leaderboard_service.get_progress("ZZZZZZZZ")
