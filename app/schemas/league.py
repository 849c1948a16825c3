"""League schemas for request/response validation."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class LeagueCreate(BaseModel):
    """Schema for the create-league dialog."""

    name: str = Field(..., max_length=200, description="League name")
    description: str | None = Field(None, max_length=1000, description="League description")


class LeagueJoin(BaseModel):
    """Schema for the join-league dialog."""

    code: str = Field(..., max_length=12, description="Invite code")


class LeagueSummary(BaseModel):
    """League row as listed on the dashboard."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    code: str
    description: str | None = None
    created_at: datetime | None = None


class LeagueCard(BaseModel):
    """Rendered dashboard card."""

    id: str
    name: str
    description: str
    code: str
    href: str


class Notification(BaseModel):
    """Non-blocking notification shown to the user (toast)."""

    title: str
    description: str
    variant: Literal["default", "destructive"] = "default"


class DashboardOut(BaseModel):
    """Dashboard state."""

    greeting: str
    is_loading: bool
    is_empty: bool
    leagues: list[LeagueCard]
    notifications: list[Notification] = []


class CreatedLeague(BaseModel):
    id: str
    code: str


class LeagueCreatedOut(BaseModel):
    league: CreatedLeague
    notification: Notification
    dashboard: DashboardOut


class LeagueJoinedOut(BaseModel):
    league_id: str
    notification: Notification
    dashboard: DashboardOut
