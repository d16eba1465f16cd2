"""
Leaderboard router.
Public leaderboard, participant progress and admin export.
"""
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response

from api.dependencies import get_leaderboard_service
from api.errors import to_http_exception
from api.schemas.leaderboard import (
    ExportResponse, ExportRow, LeaderboardEntryResponse, LeaderboardResponse
)
from api.schemas.waitlist import ProgressResponse
from api.services.auth_service import require_admin
from waitlist.exceptions import ValidationFailed, WaitlistError
from waitlist.roles import normalize_role
from waitlist.services import LeaderboardService

router = APIRouter()


@router.get("/leaderboard", response_model=LeaderboardResponse)
async def get_leaderboard(
    role: Optional[str] = None,
    limit: str = "50",
    leaderboard_service: LeaderboardService = Depends(get_leaderboard_service)
):
    """
    Top participants by provisional points.
    """
    try:
        parsed_limit = int(limit.strip())
    except ValueError:
        raise to_http_exception(ValidationFailed("Limite doit être un nombre entier"))

    try:
        entries = await leaderboard_service.get_leaderboard(role=role, limit=parsed_limit)
    except WaitlistError as e:
        raise to_http_exception(e)

    role_filter = normalize_role(role) if role else None
    return LeaderboardResponse(
        leaderboard=[
            LeaderboardEntryResponse(
                rank=entry.rank,
                first_name=entry.first_name,
                role=entry.role,
                referrals_count=entry.referrals_count,
                points=entry.points,
                early_bird=entry.early_bird,
            )
            for entry in entries
        ],
        total=len(entries),
        filter=role_filter.value if role_filter else "all",
    )


@router.get(
    "/leaderboard/export",
    response_model=ExportResponse,
    dependencies=[Depends(require_admin)]
)
async def export_leaderboard(
    export_format: str = Query("json", alias="format", pattern="^(json|csv)$"),
    include_unverified: bool = False,
    leaderboard_service: LeaderboardService = Depends(get_leaderboard_service)
):
    """
    Export the leaderboard as JSON or CSV.
    """
    rows = await leaderboard_service.export(include_unverified=include_unverified)

    if export_format == "csv":
        filename = f"glow-list-leaderboard-{date.today().isoformat()}.csv"
        return Response(
            content=leaderboard_service.to_csv(rows),
            media_type="text/csv; charset=utf-8",
            headers={"Content-Disposition": f'attachment; filename="{filename}"'},
        )

    return ExportResponse(total=len(rows), data=[ExportRow(**row) for row in rows])


@router.get("/users/{referral_code}/progress", response_model=ProgressResponse)
async def get_progress(
    referral_code: str,
    leaderboard_service: LeaderboardService = Depends(get_leaderboard_service)
):
    """Points breakdown and live position of one participant."""
    try:
        progress = await leaderboard_service.get_progress(referral_code)
    except WaitlistError as e:
        raise to_http_exception(e)
    return ProgressResponse(**progress)
