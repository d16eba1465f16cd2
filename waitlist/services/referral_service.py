"""
Referral award service.
Credits a referrer exactly once per (referrer, referred user, event type).
"""
import enum
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker

from config import Settings, settings as default_settings
from database import async_session_maker
from database.models import ReferralEvent, User
from waitlist.points import (
    calculate_points,
    counters_from,
    crossed_milestones,
    next_milestone,
)
from waitlist.roles import ReferralEventType, counter_field_for, normalize_role
import structlog

logger = structlog.get_logger()


class AwardStatus(enum.Enum):
    INSERTED = "inserted"
    ALREADY_EXISTS = "already_exists"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class AwardResult:
    """Outcome of one award attempt."""
    status: AwardStatus
    idempotency_key: Optional[str] = None
    points_awarded: int = 0
    provisional_points: Optional[int] = None
    milestones_reached: List[int] = field(default_factory=list)
    reason: Optional[str] = None

    @property
    def applied(self) -> bool:
        return self.status == AwardStatus.INSERTED


def build_idempotency_key(
    referrer_id: int,
    referred_user_id: int,
    event_type: ReferralEventType
) -> str:
    return f"{referrer_id}_{referred_user_id}_{event_type.value}"


class ReferralService:
    """
    Service applying referral awards.

    Event insert, counter increment and point recompute share one
    transaction, so a duplicate event rolls the increment back.
    """

    def __init__(
        self,
        session_maker: Optional[async_sessionmaker] = None,
        app_settings: Optional[Settings] = None
    ):
        self._session_maker = session_maker or async_session_maker
        self._settings = app_settings or default_settings

    async def award_referral(
        self,
        referrer_id: Optional[int],
        referred_user_id: int,
        role,
        event_type: ReferralEventType = ReferralEventType.WAITLIST_SIGNUP
    ) -> AwardResult:
        """
        Credit the referrer of a verified user.

        Args:
            referrer_id: User who shared the referral code
            referred_user_id: User who joined with it
            role: Role of the referred user (any accepted spelling)
            event_type: Phase the referral counts for

        Returns:
            AwardResult; never raises for duplicate or missing users
        """
        normalized = normalize_role(role)
        if normalized is None:
            logger.info("Referral skipped: unknown role", role=str(role), referrer_id=referrer_id)
            return AwardResult(status=AwardStatus.SKIPPED, reason="unknown_role")

        if referrer_id is None or referrer_id == referred_user_id:
            return AwardResult(status=AwardStatus.SKIPPED, reason="no_referrer")

        key = build_idempotency_key(referrer_id, referred_user_id, event_type)
        counter_field = counter_field_for(normalized, event_type)
        weights = self._settings.provisional_weights
        points_awarded = weights.for_counter(counter_field)
        milestones = self._settings.milestones

        try:
            async with self._session_maker() as session:
                async with session.begin():
                    existing = await session.scalar(
                        select(ReferralEvent.id).where(ReferralEvent.idempotency_key == key)
                    )
                    if existing is not None:
                        logger.info("Referral already processed", idempotency_key=key)
                        return AwardResult(status=AwardStatus.ALREADY_EXISTS, idempotency_key=key)

                    referrer = await session.get(User, referrer_id)
                    referred = await session.get(User, referred_user_id)
                    if referrer is None or referred is None:
                        logger.warning(
                            "Referral skipped: user not found",
                            referrer_id=referrer_id,
                            referred_user_id=referred_user_id
                        )
                        return AwardResult(
                            status=AwardStatus.SKIPPED,
                            idempotency_key=key,
                            reason="user_not_found"
                        )

                    old_points = referrer.provisional_points

                    session.add(ReferralEvent(
                        referrer_id=referrer_id,
                        referred_user_id=referred_user_id,
                        event_type=event_type,
                        role=normalized,
                        points_awarded=points_awarded,
                        idempotency_key=key,
                    ))
                    await session.flush()

                    values = {
                        counter_field: getattr(User, counter_field) + 1,
                        "last_ref_at": datetime.now(timezone.utc),
                    }
                    if event_type == ReferralEventType.WAITLIST_SIGNUP:
                        values["ref_count"] = User.ref_count + 1

                    await session.execute(
                        update(User)
                        .where(User.id == referrer_id)
                        .values(**values)
                        .execution_options(synchronize_session=False)
                    )

                    # Re-read inside the transaction so the recompute sees the incremented counters
                    await session.refresh(referrer)
                    new_points = calculate_points(
                        counters_from(referrer),
                        referrer.early_bird_bonus,
                        weights
                    )
                    referrer.provisional_points = new_points
                    referrer.points = new_points
                    referrer.next_milestone = next_milestone(new_points, milestones)
        except IntegrityError:
            # Concurrent delivery of the same event won the unique key
            logger.info("Referral already processed", idempotency_key=key)
            return AwardResult(status=AwardStatus.ALREADY_EXISTS, idempotency_key=key)
        except SQLAlchemyError as e:
            logger.error("Referral award failed", idempotency_key=key, error=str(e))
            return AwardResult(status=AwardStatus.FAILED, idempotency_key=key, reason=str(e))

        reached = crossed_milestones(old_points, new_points, milestones)
        logger.info(
            "Referral awarded",
            referrer_id=referrer_id,
            referred_user_id=referred_user_id,
            role=normalized.value,
            event_type=event_type.value,
            points_awarded=points_awarded,
            provisional_points=new_points
        )
        for milestone in reached:
            logger.info("Milestone reached", user_id=referrer_id, milestone=milestone)

        return AwardResult(
            status=AwardStatus.INSERTED,
            idempotency_key=key,
            points_awarded=points_awarded,
            provisional_points=new_points,
            milestones_reached=reached,
        )

    async def list_events(self, referrer_id: int) -> List[ReferralEvent]:
        """Referral events credited to a user, oldest first."""
        async with self._session_maker() as session:
            result = await session.execute(
                select(ReferralEvent)
                .where(ReferralEvent.referrer_id == referrer_id)
                .order_by(ReferralEvent.created_at, ReferralEvent.id)
            )
            return list(result.scalars().all())

    async def award_launch_validation(self, referred_user_id: int) -> AwardResult:
        """
        Credit the referrer of a user who validated after launch
        (app download or validated pro/influencer account).
        """
        async with self._session_maker() as session:
            referred = await session.get(User, referred_user_id)
            if referred is None:
                logger.warning("Launch validation for unknown user", referred_user_id=referred_user_id)
                return AwardResult(status=AwardStatus.SKIPPED, reason="user_not_found")
            referrer_id = referred.referred_by_id
            role = referred.role

        return await self.award_referral(
            referrer_id, referred_user_id, role, ReferralEventType.LAUNCH_VALIDATION
        )
