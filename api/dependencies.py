"""
FastAPI dependencies.
Services are built per request from the state attached by create_app().
"""
from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import async_sessionmaker

from config import Settings
from database.kv_store import KeyValueStore
from waitlist.services import (
    LeaderboardService,
    RankingService,
    ReferralService,
    SignupService,
    SmsSender,
    VerificationService,
)


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> KeyValueStore:
    return request.app.state.store


def get_session_maker(request: Request) -> async_sessionmaker:
    return request.app.state.session_maker


def get_sms_sender(request: Request) -> SmsSender:
    return request.app.state.sms_sender


def get_client_ip(request: Request) -> str:
    """Client address, honouring the first X-Forwarded-For hop."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()
    return request.client.host if request.client else "unknown"


def get_signup_service(
    session_maker: async_sessionmaker = Depends(get_session_maker),
    app_settings: Settings = Depends(get_app_settings)
) -> SignupService:
    return SignupService(session_maker, app_settings)


def get_referral_service(
    session_maker: async_sessionmaker = Depends(get_session_maker),
    app_settings: Settings = Depends(get_app_settings)
) -> ReferralService:
    return ReferralService(session_maker, app_settings)


def get_verification_service(
    store: KeyValueStore = Depends(get_store),
    sms_sender: SmsSender = Depends(get_sms_sender),
    referral_service: ReferralService = Depends(get_referral_service),
    session_maker: async_sessionmaker = Depends(get_session_maker),
    app_settings: Settings = Depends(get_app_settings)
) -> VerificationService:
    return VerificationService(store, sms_sender, referral_service, session_maker, app_settings)


def get_leaderboard_service(
    session_maker: async_sessionmaker = Depends(get_session_maker),
    app_settings: Settings = Depends(get_app_settings)
) -> LeaderboardService:
    return LeaderboardService(session_maker, app_settings)


def get_ranking_service(
    store: KeyValueStore = Depends(get_store),
    session_maker: async_sessionmaker = Depends(get_session_maker),
    app_settings: Settings = Depends(get_app_settings)
) -> RankingService:
    return RankingService(store, session_maker, app_settings)
