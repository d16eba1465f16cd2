"""
Leaderboard read paths: public leaderboard, admin export and user progress.
"""
import csv
import io
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from sqlalchemy import and_, func, or_, select
from sqlalchemy.ext.asyncio import async_sessionmaker

from config import Settings, settings as default_settings
from database import async_session_maker
from database.models import User
from waitlist.exceptions import UserNotFound, ValidationFailed
from waitlist.points import COUNTER_NAMES, milestone_progress, reward_tier
from waitlist.roles import normalize_role
from waitlist.utils.validators import validate_leaderboard_limit
import structlog

logger = structlog.get_logger()

EXPORT_COLUMNS = [
    ("rank", "Rank"),
    ("name", "Name"),
    ("email", "Email"),
    ("phone", "Phone"),
    ("role", "Role"),
    ("points", "Points"),
    ("referrals", "Referrals"),
    ("phone_verified", "Phone Verified"),
    ("early_bird", "Early Bird"),
    ("final_points", "Final Points"),
    ("eligible_for_jackpot", "Eligible for Jackpot"),
    ("created_at", "Created At"),
]

LEADERBOARD_ORDER = (
    User.provisional_points.desc(),
    User.ref_count.desc(),
    User.created_at.asc(),
    User.id.asc(),
)


@dataclass(frozen=True)
class LeaderboardEntry:
    rank: int
    first_name: str
    role: str
    referrals_count: int
    points: int
    early_bird: bool


class LeaderboardService:
    """
    Service for leaderboard queries.
    """

    def __init__(
        self,
        session_maker: Optional[async_sessionmaker] = None,
        app_settings: Optional[Settings] = None
    ):
        self._session_maker = session_maker or async_session_maker
        self._settings = app_settings or default_settings

    async def get_leaderboard(
        self,
        role: Optional[str] = None,
        limit: int = 50
    ) -> List[LeaderboardEntry]:
        """
        Top users by provisional points.

        Rank is the position within the returned page, not the global
        rank written by the final ranking run.

        Raises:
            ValidationFailed: unknown role or limit outside [1, 100]
        """
        role_filter = None
        if role:
            role_filter = normalize_role(role)
            if role_filter is None:
                raise ValidationFailed(
                    "Filtre de rôle invalide. Valeurs acceptées: client, influencer, beautypro"
                )

        is_valid, error = validate_leaderboard_limit(limit)
        if not is_valid:
            raise ValidationFailed(error)

        query = select(User)
        if role_filter is not None:
            query = query.where(User.role == role_filter)
        query = query.order_by(*LEADERBOARD_ORDER).limit(limit)

        async with self._session_maker() as session:
            result = await session.execute(query)
            users = result.scalars().all()

        return [
            LeaderboardEntry(
                rank=position,
                first_name=user.first_name or "Anonyme",
                role=user.role.value,
                referrals_count=user.ref_count,
                points=user.provisional_points,
                early_bird=user.early_bird,
            )
            for position, user in enumerate(users, start=1)
        ]

    async def export(self, include_unverified: bool = False) -> List[Dict[str, Any]]:
        """Full leaderboard for administrators, verified users by default."""
        query = select(User)
        if not include_unverified:
            query = query.where(User.phone_verified.is_(True))
        query = query.order_by(*LEADERBOARD_ORDER)

        async with self._session_maker() as session:
            result = await session.execute(query)
            users = result.scalars().all()

        logger.info("Leaderboard exported", rows=len(users), include_unverified=include_unverified)

        return [
            {
                "rank": position,
                "name": user.first_name or "Anonymous",
                "email": user.email,
                "phone": user.phone or "",
                "role": user.role.value,
                "points": user.provisional_points,
                "referrals": user.ref_count,
                "phone_verified": user.phone_verified,
                "early_bird": user.early_bird,
                "final_points": user.final_points,
                "eligible_for_jackpot": user.eligible_for_jackpot,
                "created_at": user.created_at.isoformat(),
            }
            for position, user in enumerate(users, start=1)
        ]

    @staticmethod
    def to_csv(rows: List[Dict[str, Any]]) -> str:
        """Render export rows as CSV with every cell quoted."""
        buffer = io.StringIO()
        writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
        writer.writerow([header for _, header in EXPORT_COLUMNS])
        for row in rows:
            writer.writerow([
                ("Yes" if row[key] else "No") if isinstance(row[key], bool) else row[key]
                for key, _ in EXPORT_COLUMNS
            ])
        return buffer.getvalue()

    async def get_progress(self, referral_code: str) -> Dict[str, Any]:
        """
        Points breakdown and live standing of one user.

        Raises:
            UserNotFound: no user owns this referral code
        """
        async with self._session_maker() as session:
            result = await session.execute(
                select(User).where(User.referral_code == referral_code)
            )
            user = result.scalar_one_or_none()
            if user is None:
                raise UserNotFound("Utilisateur introuvable")

            ahead = await session.scalar(
                select(func.count(User.id)).where(
                    or_(
                        User.provisional_points > user.provisional_points,
                        and_(
                            User.provisional_points == user.provisional_points,
                            User.ref_count > user.ref_count,
                        ),
                        and_(
                            User.provisional_points == user.provisional_points,
                            User.ref_count == user.ref_count,
                            or_(
                                User.created_at < user.created_at,
                                and_(User.created_at == user.created_at, User.id < user.id),
                            ),
                        ),
                    )
                )
            ) or 0

        progress = milestone_progress(user.provisional_points, self._settings.milestones)
        breakdown = {name: getattr(user, name) for name in COUNTER_NAMES}

        return {
            "referral_code": user.referral_code,
            "first_name": user.first_name,
            "role": user.role.value,
            "counters": breakdown,
            "early_bird_bonus": user.early_bird_bonus,
            "provisional_points": user.provisional_points,
            "final_points": user.final_points,
            "rank": user.rank,
            "position": ahead + 1,
            "next_milestone": progress.target,
            "points_to_next_milestone": progress.missing,
            "tier": reward_tier(user.provisional_points),
            "post_launch": self._settings.is_post_launch(),
        }
