"""Activity feed and daily aggregate models."""

from datetime import datetime

from sqlalchemy import JSON, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from jobpilot.core.storage import Base, utc_now


class ActivityLog(Base):
    """Append-only pipeline event."""

    __tablename__ = "job_activity_log"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # system / search / ai / apply / response / chat / invite
    event_type: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    vacancy_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    details: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=utc_now, nullable=False, index=True
    )


class DailyStats(Base):
    """Per-day counters. Values only ever grow."""

    __tablename__ = "job_search_stats"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    date: Mapped[str] = mapped_column(String(10), nullable=False, unique=True)
    searches_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    vacancies_found: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    applications_sent: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    invitations_received: Mapped[int] = mapped_column(
        Integer, default=0, nullable=False
    )
    rejections_received: Mapped[int] = mapped_column(
        Integer, default=0, nullable=False
    )
    messages_sent: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    messages_received: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
