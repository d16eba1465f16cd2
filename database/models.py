"""
Database models for the Glow List waitlist.
Defines all SQLAlchemy ORM models.
"""
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import (
    String, Integer, Boolean, DateTime, Enum, ForeignKey, Index
)
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from database.connection import Base
from waitlist.roles import Role, ReferralEventType


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


participant_role = Enum(Role, name="participant_role", values_callable=_enum_values)


class User(Base):
    """
    Waitlist participant.
    Stores identity, referral counters and contest standing.
    """
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(254), unique=True, nullable=False, index=True)
    phone: Mapped[Optional[str]] = mapped_column(String(16), unique=True, nullable=True)
    first_name: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    last_name: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    city: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    role: Mapped[Role] = mapped_column(
        participant_role,
        default=Role.CLIENT,
        nullable=False,
        index=True
    )

    # Referral identity
    referral_code: Mapped[str] = mapped_column(String(16), unique=True, nullable=False, index=True)
    referred_by_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=True, index=True
    )

    phone_verified: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    skill_answer_correct: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # Waitlist phase counters
    waitlist_clients: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    waitlist_influencers: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    waitlist_pros: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # Post-launch counters
    app_downloads: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    validated_influencers: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    validated_pros: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    ref_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    last_ref_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    # Early bird
    early_bird: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False, index=True)
    early_bird_bonus: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # Derived standing
    provisional_points: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    points: Mapped[int] = mapped_column(Integer, default=0, nullable=False)  # legacy mirror of provisional_points
    final_points: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    rank: Mapped[int] = mapped_column(Integer, default=0, nullable=False)  # 0 = unranked
    next_milestone: Mapped[int] = mapped_column(Integer, default=10, nullable=False)
    eligible_for_jackpot: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_top_rank: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        onupdate=utcnow,
        nullable=False
    )

    __table_args__ = (
        Index("ix_users_leaderboard", "provisional_points", "ref_count", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, referral_code={self.referral_code})>"


class ReferralEvent(Base):
    """
    Append-only record of one credited referral.
    idempotency_key is unique: one event per (referrer, referred user, type).
    """
    __tablename__ = "referral_events"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    referrer_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    referred_user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    event_type: Mapped[ReferralEventType] = mapped_column(
        Enum(ReferralEventType, name="referral_event_type", values_callable=_enum_values),
        nullable=False
    )
    role: Mapped[Role] = mapped_column(
        participant_role,
        nullable=False
    )
    points_awarded: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    idempotency_key: Mapped[str] = mapped_column(String(128), unique=True, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        nullable=False,
        index=True
    )

    def __repr__(self) -> str:
        return f"<ReferralEvent(id={self.id}, key={self.idempotency_key})>"
