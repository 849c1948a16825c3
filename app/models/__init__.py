"""Database models package."""

from app.models.league import League
from app.models.league_member import LeagueMember, MemberRole
from app.models.user import AuthToken, User

__all__ = ["League", "LeagueMember", "MemberRole", "User", "AuthToken"]
