"""League model."""

from datetime import datetime

from sqlalchemy import Column, DateTime, String, Text

from app.database import Base


class League(Base):
    """League database model."""

    __tablename__ = "leagues"

    id = Column(String(36), primary_key=True)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    code = Column(String(12), unique=True, index=True, nullable=False)
    owner_id = Column(String(36), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self) -> str:
        return f"<League {self.name} ({self.code})>"
