"""
Phone verification service.
Issues one-time codes and, on success, releases the pending referral award.
"""
import enum
import json
import secrets
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import async_sessionmaker

from config import Settings, settings as default_settings
from database import async_session_maker
from database.kv_store import KeyValueStore
from database.models import User
from waitlist.exceptions import (
    DuplicateSignup,
    RateLimited,
    UserNotFound,
    ValidationFailed,
    VerificationFailed,
)
from waitlist.roles import ReferralEventType
from waitlist.services.rate_limiter import RateLimiter
from waitlist.services.referral_service import AwardResult, ReferralService
from waitlist.services.sms_service import SmsSender
from waitlist.utils.helpers import mask_phone, sanitize_phone
from waitlist.utils.validators import validate_otp_code, validate_phone
import structlog

logger = structlog.get_logger()


class OtpCheck(enum.Enum):
    OK = "ok"
    NOT_FOUND = "not-found"
    MISMATCH = "mismatch"
    TOO_MANY_ATTEMPTS = "too-many-attempts"


FAILURE_MESSAGES = {
    OtpCheck.NOT_FOUND: "Aucun code valide. Demande un nouveau code.",
    OtpCheck.MISMATCH: "Code de vérification invalide. Réessaie.",
    OtpCheck.TOO_MANY_ATTEMPTS: "Trop de tentatives. Demande un nouveau code.",
}


class OtpStore:
    """
    Single-use one-time codes keyed by phone number.
    Expiry is delegated to the store TTL.
    """

    def __init__(self, store: KeyValueStore, ttl_seconds: int, max_attempts: int):
        self._store = store
        self.ttl_seconds = ttl_seconds
        self.max_attempts = max_attempts

    @staticmethod
    def _key(phone: str) -> str:
        return f"otp:{phone}"

    async def put(self, phone: str, code: str) -> None:
        await self._store.set(
            self._key(phone),
            json.dumps({"code": code, "attempts": 0}),
            ttl=self.ttl_seconds
        )

    async def check(self, phone: str, code: str) -> OtpCheck:
        key = self._key(phone)
        raw = await self._store.get(key)
        if raw is None:
            return OtpCheck.NOT_FOUND

        entry = json.loads(raw)
        if entry["attempts"] >= self.max_attempts:
            await self._store.delete(key)
            return OtpCheck.TOO_MANY_ATTEMPTS

        if secrets.compare_digest(entry["code"], code):
            await self._store.delete(key)
            return OtpCheck.OK

        entry["attempts"] += 1
        remaining = await self._store.ttl(key)
        await self._store.set(key, json.dumps(entry), ttl=remaining or self.ttl_seconds)
        return OtpCheck.MISMATCH


@dataclass
class VerificationResult:
    verified: bool
    user_id: Optional[int] = None
    award: Optional[AwardResult] = None


def generate_otp() -> str:
    return f"{secrets.randbelow(900000) + 100000}"


class VerificationService:
    """
    Service for phone verification.
    """

    def __init__(
        self,
        store: KeyValueStore,
        sms_sender: SmsSender,
        referral_service: ReferralService,
        session_maker: Optional[async_sessionmaker] = None,
        app_settings: Optional[Settings] = None
    ):
        self._settings = app_settings or default_settings
        self._session_maker = session_maker or async_session_maker
        self._sms_sender = sms_sender
        self._referral_service = referral_service
        self._otp_store = OtpStore(
            store,
            ttl_seconds=self._settings.otp_ttl_seconds,
            max_attempts=self._settings.otp_max_attempts
        )
        self._send_limiter = RateLimiter(
            store, "sms", self._settings.sms_rate_limit, self._settings.sms_rate_window
        )
        self._verify_limiter = RateLimiter(
            store, "verify", self._settings.verify_rate_limit, self._settings.verify_rate_window
        )

    @staticmethod
    def _clean_phone(phone: str) -> str:
        is_valid, error = validate_phone(phone)
        if not is_valid:
            raise ValidationFailed(error)
        return sanitize_phone(phone)

    async def send_code(self, phone: str) -> int:
        """
        Issue and send a one-time code.

        Returns:
            Code lifetime in seconds
        """
        phone = self._clean_phone(phone)

        limit = await self._send_limiter.check(phone)
        if not limit.allowed:
            raise RateLimited("Trop de demandes. Réessaie plus tard.", retry_after=limit.retry_after)

        code = generate_otp()
        await self._otp_store.put(phone, code)
        await self._sms_sender.send(
            phone,
            f"Afroé - Ton code de vérification est: {code}. "
            f"Il expire dans {self._settings.otp_ttl_seconds // 60} minutes."
        )
        logger.info("Verification code issued", phone=mask_phone(phone))
        return self._settings.otp_ttl_seconds

    async def verify_code(
        self,
        phone: str,
        code: str,
        user_id: Optional[int] = None
    ) -> VerificationResult:
        """
        Check a one-time code and mark the user verified.

        A referred user credits its referrer; repeated verifications are
        absorbed by the award idempotency key.

        Raises:
            ValidationFailed: malformed phone or code
            RateLimited: too many attempts for this phone
            VerificationFailed: code rejected
            UserNotFound: user_id given but unknown
        """
        phone = self._clean_phone(phone)
        is_valid, error = validate_otp_code(code)
        if not is_valid:
            raise ValidationFailed(error)

        limit = await self._verify_limiter.check(phone)
        if not limit.allowed:
            raise RateLimited("Trop de tentatives. Réessaie plus tard.", retry_after=limit.retry_after)

        outcome = await self._otp_store.check(phone, code.strip())
        if outcome != OtpCheck.OK:
            logger.info("Verification failed", phone=mask_phone(phone), reason=outcome.value)
            raise VerificationFailed(FAILURE_MESSAGES[outcome], reason=outcome.value)

        await self._verify_limiter.reset(phone)

        if user_id is None:
            return VerificationResult(verified=True)

        async with self._session_maker() as session:
            result = await session.execute(select(User).where(User.id == user_id))
            user = result.scalar_one_or_none()
            if user is None:
                raise UserNotFound("Utilisateur introuvable")

            user.phone = phone
            user.phone_verified = True
            try:
                await session.commit()
            except IntegrityError:
                await session.rollback()
                raise DuplicateSignup("Ce numéro de téléphone est déjà inscrit")

            referrer_id = user.referred_by_id
            role = user.role

        logger.info("Phone verified", user_id=user_id, phone=mask_phone(phone))

        award = None
        if referrer_id is not None:
            award = await self._referral_service.award_referral(
                referrer_id, user_id, role, ReferralEventType.WAITLIST_SIGNUP
            )

        return VerificationResult(verified=True, user_id=user_id, award=award)
