"""
Final ranking service.
Runs the launch-time recalculation over the whole user population.
"""
import json
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import async_sessionmaker

from config import Settings, settings as default_settings
from database import async_session_maker
from database.kv_store import KeyValueStore
from database.models import User
from waitlist.exceptions import RankingInProgress
from waitlist.points import counters_from
from waitlist.ranking import RankingCandidate, rank_users
import structlog

logger = structlog.get_logger()

RANKING_LOCK_KEY = "ranking:lock"
LAUNCH_RANKING_MARKER_KEY = "ranking:launch_completed"


@dataclass
class RankingStats:
    """Summary of one ranking run."""
    total_users: int
    top_user: Optional[Dict[str, Any]]
    jackpot_eligible_count: int
    # Always 0 while the run is one transaction
    failed_updates: int
    timestamp: datetime


def _user_summary(user: User) -> Dict[str, Any]:
    return {
        "id": user.id,
        "email": user.email,
        "first_name": user.first_name,
        "final_points": user.final_points,
        "provisional_points": user.provisional_points,
        "rank": user.rank,
        "early_bird": user.early_bird,
    }


class RankingService:
    """
    Service computing final points, ranks and prize eligibility.

    A run holds a store-backed lock and writes every user in one
    transaction: either the whole leaderboard moves or nothing does.
    """

    def __init__(
        self,
        store: KeyValueStore,
        session_maker: Optional[async_sessionmaker] = None,
        app_settings: Optional[Settings] = None
    ):
        self._store = store
        self._session_maker = session_maker or async_session_maker
        self._settings = app_settings or default_settings

    async def run_final_ranking(self) -> RankingStats:
        """
        Recompute final points and ranks for all users.

        Raises:
            RankingInProgress: another run holds the lock
        """
        token = uuid.uuid4().hex
        acquired = await self._store.set_if_absent(
            RANKING_LOCK_KEY, token, ttl=self._settings.ranking_lock_ttl
        )
        if not acquired:
            raise RankingInProgress("Final ranking already in progress")

        logger.info("Starting final points recalculation")
        try:
            return await self._rank_population()
        finally:
            if await self._store.get(RANKING_LOCK_KEY) == token:
                await self._store.delete(RANKING_LOCK_KEY)

    async def _rank_population(self) -> RankingStats:
        weights = self._settings.final_weights
        threshold = self._settings.jackpot_threshold

        async with self._session_maker() as session:
            async with session.begin():
                result = await session.execute(select(User))
                users = list(result.scalars().all())
                logger.info("Users loaded for ranking", total_users=len(users))

                ranked = rank_users(
                    (
                        RankingCandidate(
                            user_id=user.id,
                            counters=counters_from(user),
                            early_bird_bonus=user.early_bird_bonus,
                            created_at=user.created_at,
                        )
                        for user in users
                    ),
                    weights,
                    threshold,
                )

                if ranked:
                    await session.execute(
                        update(User),
                        [
                            {
                                "id": entry.user_id,
                                "final_points": entry.final_points,
                                "rank": entry.rank,
                                "eligible_for_jackpot": entry.eligible_for_jackpot,
                                "is_top_rank": entry.is_top_rank,
                            }
                            for entry in ranked
                        ],
                    )

        by_id = {user.id: user for user in users}
        top_user = None
        if ranked:
            top = by_id[ranked[0].user_id]
            top_user = {
                "email": top.email,
                "first_name": top.first_name,
                "final_points": ranked[0].final_points,
            }

        stats = RankingStats(
            total_users=len(ranked),
            top_user=top_user,
            jackpot_eligible_count=sum(1 for entry in ranked if entry.eligible_for_jackpot),
            failed_updates=0,
            timestamp=datetime.now(timezone.utc),
        )

        logger.info(
            "Final points recalculation complete",
            total_users=stats.total_users,
            top_user=top_user["email"] if top_user else None,
            jackpot_eligible=stats.jackpot_eligible_count
        )
        return stats

    async def launch_snapshot(self, limit: int = 20) -> Dict[str, Any]:
        """Current launch standing without recomputing anything."""
        async with self._session_maker() as session:
            top_result = await session.execute(
                select(User).where(User.is_top_rank.is_(True)).limit(1)
            )
            top_user = top_result.scalar_one_or_none()

            eligible_result = await session.execute(
                select(User)
                .where(User.eligible_for_jackpot.is_(True))
                .order_by(User.final_points.desc(), User.rank.asc())
                .limit(limit)
            )
            eligible = list(eligible_result.scalars().all())

            total_users = await session.scalar(select(func.count(User.id))) or 0
            early_birds = await session.scalar(
                select(func.count(User.id)).where(User.early_bird.is_(True))
            ) or 0
            eligible_count = await session.scalar(
                select(func.count(User.id)).where(User.eligible_for_jackpot.is_(True))
            ) or 0

        return {
            "total_users": total_users,
            "early_birds": early_birds,
            "jackpot_eligible_count": eligible_count,
            "top_user": _user_summary(top_user) if top_user else None,
            "top_jackpot_eligible": [_user_summary(user) for user in eligible],
        }

    async def run_launch_ranking_once(self, now: Optional[datetime] = None) -> Optional[RankingStats]:
        """
        Run the final ranking the first time it is called after launch.

        Returns:
            Stats of the run, None when nothing was done
        """
        if not self._settings.is_post_launch(now):
            return None
        if await self._store.get(LAUNCH_RANKING_MARKER_KEY) is not None:
            return None

        stats = await self.run_final_ranking()
        await self._store.set(
            LAUNCH_RANKING_MARKER_KEY,
            json.dumps({"timestamp": stats.timestamp.isoformat(), "total_users": stats.total_users})
        )
        return stats
