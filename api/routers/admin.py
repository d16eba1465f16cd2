"""
Admin router.
Final points recalculation and launch standing.
"""
from fastapi import APIRouter, Depends

from api.dependencies import get_ranking_service
from api.errors import to_http_exception
from api.schemas.admin import (
    RankingSnapshotResponse, RankingStatsResponse, RecalculateResponse
)
from api.services.auth_service import require_admin
from waitlist.exceptions import WaitlistError
from waitlist.services import RankingService
import structlog

logger = structlog.get_logger()
router = APIRouter(dependencies=[Depends(require_admin)])


@router.post("/recalculate-final-points", response_model=RecalculateResponse)
async def recalculate_final_points(
    ranking_service: RankingService = Depends(get_ranking_service)
):
    """
    Recompute final points, ranks and jackpot eligibility for everyone.
    """
    logger.info("Final points recalculation requested")
    try:
        stats = await ranking_service.run_final_ranking()
    except WaitlistError as e:
        raise to_http_exception(e)

    return RecalculateResponse(
        stats=RankingStatsResponse(
            total_users=stats.total_users,
            top_user=stats.top_user,
            jackpot_eligible_count=stats.jackpot_eligible_count,
            failed_updates=stats.failed_updates,
            timestamp=stats.timestamp,
        )
    )


@router.get("/recalculate-final-points", response_model=RankingSnapshotResponse)
async def get_final_standing(
    ranking_service: RankingService = Depends(get_ranking_service)
):
    """Current top user and jackpot-eligible users, without recomputing."""
    snapshot = await ranking_service.launch_snapshot(limit=20)
    return RankingSnapshotResponse(**snapshot)
