"""
Waitlist signup service.
Creates participants with a unique referral code and the early-bird bonus.
"""
from typing import Any, Dict, Optional

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from config import Settings, settings as default_settings
from database import async_session_maker
from database.models import User
from waitlist.exceptions import (
    DuplicateSignup,
    InvalidReferralCode,
    ReferralCodeExhausted,
    ValidationFailed,
)
from waitlist.points import next_milestone
from waitlist.referral_codes import (
    MAX_GENERATION_ATTEMPTS,
    generate_referral_code,
    is_valid_referral_code,
)
from waitlist.roles import normalize_role
from waitlist.utils.helpers import sanitize_email, sanitize_phone, sanitize_text
from waitlist.utils.validators import (
    validate_email,
    validate_first_name,
    validate_phone,
    validate_role,
)
import structlog

logger = structlog.get_logger()


class SignupService:
    """
    Service for joining the waitlist.

    No referral points are granted here: the referrer is only credited
    once the new user verifies their phone.
    """

    def __init__(
        self,
        session_maker: Optional[async_sessionmaker] = None,
        app_settings: Optional[Settings] = None
    ):
        self._session_maker = session_maker or async_session_maker
        self._settings = app_settings or default_settings

    async def join_waitlist(
        self,
        email: str,
        phone: str,
        first_name: str,
        role: str,
        skill_answer_correct: bool,
        last_name: Optional[str] = None,
        city: Optional[str] = None,
        referral_code: Optional[str] = None
    ) -> User:
        """
        Register a new participant.

        Raises:
            ValidationFailed: invalid input
            DuplicateSignup: email or phone already registered
            InvalidReferralCode: referral code matches nobody
            ReferralCodeExhausted: no free referral code found
        """
        for is_valid, error in (
            validate_email(email),
            validate_phone(phone),
            validate_first_name(first_name),
            validate_role(role),
        ):
            if not is_valid:
                raise ValidationFailed(error)

        if skill_answer_correct is not True:
            raise ValidationFailed("Réponse à la question d'habileté incorrecte ou manquante")

        clean_email = sanitize_email(email)
        clean_phone = sanitize_phone(phone)
        participant_role = normalize_role(role)

        async with self._session_maker() as session:
            existing = await session.execute(
                select(User).where(or_(User.email == clean_email, User.phone == clean_phone))
            )
            existing_user = existing.scalars().first()
            if existing_user:
                if existing_user.email == clean_email:
                    raise DuplicateSignup("Cet email est déjà inscrit")
                raise DuplicateSignup("Ce numéro de téléphone est déjà inscrit")

            referrer = None
            if referral_code:
                code = referral_code.strip().upper()
                if not is_valid_referral_code(code):
                    raise InvalidReferralCode("Code de parrainage invalide")
                result = await session.execute(select(User).where(User.referral_code == code))
                referrer = result.scalar_one_or_none()
                if referrer is None:
                    raise InvalidReferralCode("Code de parrainage invalide")

            own_code = await self._unique_referral_code(session)

            early_bird_count = await session.scalar(
                select(func.count(User.id)).where(User.early_bird.is_(True))
            ) or 0
            is_early_bird = early_bird_count < self._settings.early_bird_limit
            bonus = self._settings.early_bird_bonus if is_early_bird else 0

            user = User(
                email=clean_email,
                phone=clean_phone,
                first_name=sanitize_text(first_name, 50),
                last_name=sanitize_text(last_name, 50) if last_name else None,
                city=sanitize_text(city, 100) if city else None,
                role=participant_role,
                referral_code=own_code,
                referred_by_id=referrer.id if referrer else None,
                skill_answer_correct=True,
                early_bird=is_early_bird,
                early_bird_bonus=bonus,
                provisional_points=bonus,
                points=bonus,
                next_milestone=next_milestone(bonus, self._settings.milestones),
            )
            session.add(user)

            try:
                await session.commit()
            except IntegrityError:
                await session.rollback()
                raise DuplicateSignup("Cet email ou ce numéro est déjà inscrit")

            await session.refresh(user)

        logger.info(
            "New waitlist signup",
            user_id=user.id,
            role=participant_role.value,
            early_bird=is_early_bird,
            referred_by=user.referred_by_id
        )
        return user

    async def _unique_referral_code(self, session: AsyncSession) -> str:
        for _ in range(MAX_GENERATION_ATTEMPTS):
            code = generate_referral_code()
            taken = await session.scalar(select(User.id).where(User.referral_code == code))
            if taken is None:
                return code
        raise ReferralCodeExhausted(
            f"Unable to generate unique referral code after {MAX_GENERATION_ATTEMPTS} attempts"
        )

    async def early_bird_status(self) -> Dict[str, Any]:
        """Early-bird spots taken and left."""
        async with self._session_maker() as session:
            taken = await session.scalar(
                select(func.count(User.id)).where(User.early_bird.is_(True))
            ) or 0

        limit = self._settings.early_bird_limit
        return {"total": limit, "taken": taken, "spots_left": max(0, limit - taken)}
