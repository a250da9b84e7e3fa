"""Search configuration models."""

from datetime import datetime

from sqlalchemy import (
    JSON,
    BigInteger,
    Boolean,
    DateTime,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from jobpilot.core.storage import Base, utc_now


class SearchTag(Base):
    """Search query (or informational tag) with lifetime counters."""

    __tablename__ = "job_search_tags"
    __table_args__ = (UniqueConstraint("tag_type", "value"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # query / primary / skill / industry
    tag_type: Mapped[str] = mapped_column(String(20), nullable=False, default="query")
    value: Mapped[str] = mapped_column(String(255), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    search_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    found_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    applied_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=utc_now, nullable=False
    )


class SearchSettings(Base):
    """Search settings row edited from the admin UI (always id=1)."""

    __tablename__ = "job_search_settings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    search_text: Mapped[str | None] = mapped_column(String(500), nullable=True)
    area_ids: Mapped[list[str] | None] = mapped_column(JSON, nullable=True)
    experience: Mapped[str | None] = mapped_column(String(50), nullable=True)
    schedule: Mapped[str | None] = mapped_column(String(50), nullable=True)
    employment: Mapped[str | None] = mapped_column(String(50), nullable=True)
    salary_from: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    only_with_salary: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False
    )
    auto_tags_enabled: Mapped[bool] = mapped_column(
        Boolean, default=True, nullable=False
    )
    min_ai_score: Mapped[int] = mapped_column(Integer, default=70, nullable=False)
    auto_apply_enabled: Mapped[bool] = mapped_column(
        Boolean, default=True, nullable=False
    )
    search_interval_minutes: Mapped[int] = mapped_column(
        Integer, default=60, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=utc_now, onupdate=utc_now, nullable=False
    )
