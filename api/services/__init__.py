"""API services module."""
from api.services.auth_service import require_admin

__all__ = ["require_admin"]
