"""
Tests for roles, validators and helpers.
"""
import pytest

from waitlist.referral_codes import (
    ALPHABET,
    CODE_LENGTH,
    generate_referral_code,
    is_valid_referral_code,
    referral_link,
)
from waitlist.roles import ReferralEventType, Role, counter_field_for, normalize_role
from waitlist.utils.helpers import mask_phone, sanitize_email, sanitize_phone, sanitize_text
from waitlist.utils.validators import (
    validate_email,
    validate_first_name,
    validate_leaderboard_limit,
    validate_otp_code,
    validate_phone,
    validate_role,
)


class TestRoles:
    """Tests for role normalization."""

    @pytest.mark.parametrize("raw,expected", [
        ("client", Role.CLIENT),
        ("  Influencer ", Role.INFLUENCER),
        ("influenceur", Role.INFLUENCER),
        ("beautypro", Role.BEAUTY_PRO),
        ("Beauty  Pro", Role.BEAUTY_PRO),
        ("beauty-pro", Role.BEAUTY_PRO),
        (Role.CLIENT, Role.CLIENT),
    ])
    def test_accepted_spellings(self, raw, expected):
        assert normalize_role(raw) == expected

    @pytest.mark.parametrize("raw", ["", "admin", None, 3])
    def test_unknown_roles(self, raw):
        assert normalize_role(raw) is None

    def test_counter_fields_per_phase(self):
        """Each role maps to one counter per phase."""
        assert counter_field_for(Role.CLIENT, ReferralEventType.WAITLIST_SIGNUP) == "waitlist_clients"
        assert counter_field_for(Role.BEAUTY_PRO, ReferralEventType.WAITLIST_SIGNUP) == "waitlist_pros"
        assert counter_field_for(Role.CLIENT, ReferralEventType.LAUNCH_VALIDATION) == "app_downloads"
        assert counter_field_for(Role.INFLUENCER, ReferralEventType.LAUNCH_VALIDATION) == "validated_influencers"


class TestValidators:
    """Tests for input validators."""

    def test_validate_email(self):
        assert validate_email("jane@example.com") == (True, None)
        assert validate_email("")[0] is False
        assert validate_email("not-an-email")[0] is False
        assert validate_email("a" * 250 + "@x.be")[0] is False

    @pytest.mark.parametrize("phone", ["+32470123456", "+32 470 12 34 56", "+32-470-123-456"])
    def test_validate_phone_belgian_mobile(self, phone):
        assert validate_phone(phone) == (True, None)

    @pytest.mark.parametrize("phone", ["", "0470123456", "+3223456789", "+33612345678", "+324701234567"])
    def test_validate_phone_rejected(self, phone):
        assert validate_phone(phone)[0] is False

    def test_validate_first_name(self):
        assert validate_first_name("Awa")[0] is True
        assert validate_first_name("   ") == (False, "Prénom requis")

    def test_validate_role(self):
        assert validate_role("pro")[0] is True
        assert validate_role(None) == (False, "Rôle requis")
        assert validate_role("vip")[0] is False

    def test_validate_otp_code(self):
        assert validate_otp_code("123456")[0] is True
        assert validate_otp_code("12345")[0] is False
        assert validate_otp_code("12a456")[0] is False

    @pytest.mark.parametrize("limit,valid", [(0, False), (1, True), (50, True), (100, True), (101, False)])
    def test_validate_leaderboard_limit(self, limit, valid):
        assert validate_leaderboard_limit(limit)[0] is valid


class TestHelpers:
    """Tests for helper functions."""

    def test_sanitize_email(self):
        assert sanitize_email("  Jane.Doe@Example.COM ") == "jane.doe@example.com"

    def test_sanitize_phone(self):
        assert sanitize_phone("+32 470 12-34-56") == "+32470123456"

    def test_sanitize_text_truncates(self):
        assert sanitize_text("  Bruxelles  ") == "Bruxelles"
        assert sanitize_text("x" * 80, 50) == "x" * 50

    def test_mask_phone(self):
        assert mask_phone("+32470123456") == "*********456"
        assert mask_phone("") == ""


class TestReferralCodes:
    """Tests for referral code generation."""

    def test_generated_codes_are_valid(self):
        for _ in range(50):
            code = generate_referral_code()
            assert len(code) == CODE_LENGTH
            assert set(code) <= set(ALPHABET)
            assert is_valid_referral_code(code)

    def test_invalid_codes(self):
        assert not is_valid_referral_code("ABC")
        assert not is_valid_referral_code("ABCDEFG0")  # 0 is not in the alphabet
        assert not is_valid_referral_code(None)

    def test_referral_link(self):
        assert referral_link("ABCD2345", "https://afroe.be/") == "https://afroe.be?ref=ABCD2345"
