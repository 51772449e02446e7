"""SQLAlchemy model representing registered schools."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Column, DateTime, Integer, String, Text

from app.models.base import Base


class School(Base):
    __tablename__ = "schools"
    # Keep SQLite from recycling the ids of deleted rows.
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    address = Column(Text, nullable=False)
    city = Column(String(120), nullable=False)
    state = Column(String(120), nullable=False)
    contact = Column(String(10), nullable=False)
    email_id = Column(String(255), nullable=False)
    image = Column(Text, nullable=True)
    created_at = Column(
        DateTime,
        nullable=False,
        default=datetime.utcnow,
        index=True,
    )
    updated_at = Column(
        DateTime,
        nullable=False,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )


__all__ = ["School"]
