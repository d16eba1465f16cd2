"""Leaderboard schemas."""
from typing import List

from api.schemas.base import CamelModel


class LeaderboardEntryResponse(CamelModel):
    rank: int
    first_name: str
    role: str
    referrals_count: int
    points: int
    early_bird: bool


class LeaderboardResponse(CamelModel):
    success: bool = True
    leaderboard: List[LeaderboardEntryResponse]
    total: int
    filter: str


class ExportRow(CamelModel):
    rank: int
    name: str
    email: str
    phone: str
    role: str
    points: int
    referrals: int
    phone_verified: bool
    early_bird: bool
    final_points: int
    eligible_for_jackpot: bool
    created_at: str


class ExportResponse(CamelModel):
    success: bool = True
    total: int
    data: List[ExportRow]
