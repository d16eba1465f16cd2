"""
Waitlist router.
Handles signup and early-bird endpoints.
"""
from fastapi import APIRouter, Depends, HTTPException, status

from api.dependencies import get_app_settings, get_client_ip, get_signup_service, get_store
from api.errors import to_http_exception
from api.schemas.waitlist import (
    EarlyBirdStatus, JoinWaitlistRequest, JoinWaitlistResponse, SignupUser
)
from config import Settings
from database.kv_store import KeyValueStore
from waitlist.exceptions import WaitlistError
from waitlist.referral_codes import referral_link
from waitlist.services import RateLimiter, SignupService
import structlog

logger = structlog.get_logger()
router = APIRouter()


@router.post("/join-waitlist", response_model=JoinWaitlistResponse)
async def join_waitlist(
    payload: JoinWaitlistRequest,
    client_ip: str = Depends(get_client_ip),
    store: KeyValueStore = Depends(get_store),
    app_settings: Settings = Depends(get_app_settings),
    signup_service: SignupService = Depends(get_signup_service)
):
    """
    Join the waitlist and receive a referral code.
    """
    limiter = RateLimiter(
        store, "signup", app_settings.signup_rate_limit, app_settings.signup_rate_window
    )
    limit = await limiter.check(client_ip)
    if not limit.allowed:
        logger.warning("Signup rate limit exceeded", ip=client_ip)
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Trop de tentatives. Réessaie plus tard.",
            headers={"Retry-After": str(limit.retry_after or app_settings.signup_rate_window)},
        )

    try:
        user = await signup_service.join_waitlist(
            email=payload.email,
            phone=payload.phone,
            first_name=payload.first_name,
            role=payload.role,
            skill_answer_correct=payload.skill_answer_correct,
            last_name=payload.last_name,
            city=payload.city,
            referral_code=payload.referral_code,
        )
    except WaitlistError as e:
        raise to_http_exception(e)

    return JoinWaitlistResponse(
        user=SignupUser(
            id=user.id,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            role=user.role.value,
            referral_code=user.referral_code,
            referral_link=referral_link(user.referral_code, app_settings.app_url),
            early_bird=user.early_bird,
            early_bird_bonus=user.early_bird_bonus,
            points=user.provisional_points,
            next_milestone=user.next_milestone,
        )
    )


@router.get("/early-bird-count", response_model=EarlyBirdStatus)
async def early_bird_count(
    signup_service: SignupService = Depends(get_signup_service)
):
    """Early-bird spots taken and left."""
    return EarlyBirdStatus(**await signup_service.early_bird_status())
