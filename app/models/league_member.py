"""League membership model."""

import enum
import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, String, UniqueConstraint

from app.database import Base


class MemberRole(str, enum.Enum):
    """Role of a user inside a league."""

    ADMIN = "ADMIN"
    MEMBER = "MEMBER"


class LeagueMember(Base):
    """League membership database model."""

    __tablename__ = "league_members"
    __table_args__ = (
        UniqueConstraint("league_id", "user_id", name="uq_league_members_league_user"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    league_id = Column(String(36), ForeignKey("leagues.id"), index=True, nullable=False)
    user_id = Column(String(36), index=True, nullable=False)
    role = Column(String(10), nullable=False, default=MemberRole.MEMBER.value)
    joined_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self) -> str:
        return f"<LeagueMember {self.user_id} in {self.league_id} ({self.role})>"
