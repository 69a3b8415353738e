"""HTTP surface for the write-path moderation core."""

from sportsapp.moderation.api.checks import router

__all__ = ["router"]
