"""Waitlist signup schemas."""
from typing import Dict, Optional

from api.schemas.base import CamelModel


class JoinWaitlistRequest(CamelModel):
    """Signup form. Missing fields are reported by the service as 400."""
    email: str = ""
    phone: str = ""
    first_name: str = ""
    last_name: Optional[str] = None
    city: Optional[str] = None
    role: str = ""
    referral_code: Optional[str] = None
    skill_answer_correct: Optional[bool] = None


class SignupUser(CamelModel):
    id: int
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: str
    referral_code: str
    referral_link: str
    early_bird: bool
    early_bird_bonus: int
    points: int
    next_milestone: int


class JoinWaitlistResponse(CamelModel):
    success: bool = True
    user: SignupUser


class EarlyBirdStatus(CamelModel):
    total: int
    taken: int
    spots_left: int


class ProgressResponse(CamelModel):
    """Points breakdown of one participant."""
    success: bool = True
    referral_code: str
    first_name: Optional[str] = None
    role: str
    counters: Dict[str, int]
    early_bird_bonus: int
    provisional_points: int
    final_points: int
    rank: Optional[int] = None
    position: int
    next_milestone: int
    points_to_next_milestone: int
    tier: Optional[str] = None
    post_launch: bool
