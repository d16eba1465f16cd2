"""
Tests for waitlist signup.
"""
import pytest

from waitlist.exceptions import (
    DuplicateSignup,
    InvalidReferralCode,
    ReferralCodeExhausted,
    ValidationFailed,
)
from waitlist.referral_codes import is_valid_referral_code
from waitlist.roles import Role
from waitlist.services import SignupService
import waitlist.services.signup_service as signup_module


@pytest.fixture
def signup_service(session_maker, app_settings):
    return SignupService(session_maker, app_settings)


def form(**overrides):
    values = {
        "email": "awa@example.com",
        "phone": "+32 470 12 34 56",
        "first_name": "Awa",
        "role": "client",
        "skill_answer_correct": True,
    }
    values.update(overrides)
    return values


class TestJoinWaitlist:
    """Tests for SignupService.join_waitlist."""

    @pytest.mark.asyncio
    async def test_creates_early_bird(self, signup_service):
        user = await signup_service.join_waitlist(**form(email=" Awa@Example.com "))

        assert user.email == "awa@example.com"
        assert user.phone == "+32470123456"
        assert user.role == Role.CLIENT
        assert is_valid_referral_code(user.referral_code)
        assert user.early_bird is True
        assert user.early_bird_bonus == 50
        assert user.provisional_points == 50
        assert user.next_milestone == 100
        assert user.phone_verified is False

    @pytest.mark.asyncio
    async def test_early_bird_cap(self, session_maker, app_settings):
        app_settings.early_bird_limit = 1
        service = SignupService(session_maker, app_settings)

        first = await service.join_waitlist(**form())
        second = await service.join_waitlist(**form(email="b@example.com", phone="+32470123457"))

        assert first.early_bird is True
        assert second.early_bird is False
        assert second.provisional_points == 0
        assert await service.early_bird_status() == {"total": 1, "taken": 1, "spots_left": 0}

    @pytest.mark.asyncio
    async def test_referral_code_links_referrer_without_points(self, signup_service, get_user):
        """The referrer is only credited after phone verification."""
        referrer = await signup_service.join_waitlist(**form())
        referred = await signup_service.join_waitlist(**form(
            email="b@example.com",
            phone="+32470123457",
            role="Beauty Pro",
            referral_code=referrer.referral_code.lower(),
        ))

        assert referred.referred_by_id == referrer.id
        assert referred.role == Role.BEAUTY_PRO
        assert (await get_user(referrer.id)).waitlist_pros == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize("overrides", [
        {"email": "nope"},
        {"phone": "0470123456"},
        {"first_name": " "},
        {"role": "admin"},
        {"skill_answer_correct": False},
        {"skill_answer_correct": None},
    ])
    async def test_validation(self, signup_service, overrides):
        with pytest.raises(ValidationFailed):
            await signup_service.join_waitlist(**form(**overrides))

    @pytest.mark.asyncio
    async def test_duplicate_email_and_phone(self, signup_service):
        await signup_service.join_waitlist(**form())

        with pytest.raises(DuplicateSignup, match="email"):
            await signup_service.join_waitlist(**form(phone="+32470999999"))
        with pytest.raises(DuplicateSignup, match="téléphone"):
            await signup_service.join_waitlist(**form(email="other@example.com"))

    @pytest.mark.asyncio
    @pytest.mark.parametrize("code", ["ZZZZZZZZ", "bad"])
    async def test_invalid_referral_code(self, signup_service, code):
        with pytest.raises(InvalidReferralCode):
            await signup_service.join_waitlist(**form(referral_code=code))

    @pytest.mark.asyncio
    async def test_referral_code_exhausted(self, signup_service, monkeypatch):
        """Every candidate code colliding gives up after the attempt budget."""
        taken = await signup_service.join_waitlist(**form())
        monkeypatch.setattr(signup_module, "generate_referral_code", lambda: taken.referral_code)

        with pytest.raises(ReferralCodeExhausted):
            await signup_service.join_waitlist(**form(email="b@example.com", phone="+32470123457"))
