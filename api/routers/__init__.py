"""API routers module."""
from api.routers import admin, leaderboard, verification, waitlist, webhooks

__all__ = ["admin", "leaderboard", "verification", "waitlist", "webhooks"]
