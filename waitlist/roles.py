"""
Participant roles and referral event types.
"""
import enum
from typing import Optional


class Role(enum.Enum):
    """Participant roles. The value is the canonical serialization."""
    CLIENT = "client"
    INFLUENCER = "influencer"
    BEAUTY_PRO = "beautypro"


class ReferralEventType(enum.Enum):
    """Phase in which a referral earned its points."""
    WAITLIST_SIGNUP = "waitlist_signup"        # referred user verified during the waitlist
    LAUNCH_VALIDATION = "launch_validation"    # referred user validated after launch


ROLE_ALIASES = {
    "client": Role.CLIENT,
    "influencer": Role.INFLUENCER,
    "influenceur": Role.INFLUENCER,
    "beautypro": Role.BEAUTY_PRO,
    "beauty_pro": Role.BEAUTY_PRO,
    "beauty-pro": Role.BEAUTY_PRO,
    "beauty pro": Role.BEAUTY_PRO,
    "pro": Role.BEAUTY_PRO,
}

COUNTER_FIELDS = {
    ReferralEventType.WAITLIST_SIGNUP: {
        Role.CLIENT: "waitlist_clients",
        Role.INFLUENCER: "waitlist_influencers",
        Role.BEAUTY_PRO: "waitlist_pros",
    },
    ReferralEventType.LAUNCH_VALIDATION: {
        Role.CLIENT: "app_downloads",
        Role.INFLUENCER: "validated_influencers",
        Role.BEAUTY_PRO: "validated_pros",
    },
}


def normalize_role(value) -> Optional[Role]:
    """
    Map any accepted role spelling to a Role.
    
    Args:
        value: Role, raw string from a request body or external payload
        
    Returns:
        Role or None if the value is not a known role
    """
    if isinstance(value, Role):
        return value
    if not isinstance(value, str):
        return None
    return ROLE_ALIASES.get(" ".join(value.strip().lower().split()))


def counter_field_for(role: Role, event_type: ReferralEventType) -> str:
    """Name of the referrer counter credited for this role and phase."""
    return COUNTER_FIELDS[event_type][role]
