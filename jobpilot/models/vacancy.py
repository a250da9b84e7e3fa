"""Vacancy and application response models."""

from datetime import datetime

from sqlalchemy import (
    JSON,
    BigInteger,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from jobpilot.core.storage import Base, utc_now


class Vacancy(Base):
    """A posting discovered on HH.ru together with its AI evaluation."""

    __tablename__ = "job_vacancies"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    hh_vacancy_id: Mapped[str] = mapped_column(
        String(64), nullable=False, unique=True, index=True
    )
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    company: Mapped[str] = mapped_column(String(500), nullable=False)
    salary_from: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    salary_to: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    salary_currency: Mapped[str | None] = mapped_column(String(10), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    url: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="found", index=True
    )

    ai_score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    ai_recommendation: Mapped[str] = mapped_column(
        String(10), nullable=False, default="skip"
    )
    ai_priority: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    ai_match_reasons: Mapped[list[str]] = mapped_column(
        JSON, nullable=False, default=list
    )
    ai_concerns: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    ai_salary_assessment: Mapped[str] = mapped_column(
        Text, nullable=False, default=""
    )

    found_at: Mapped[datetime] = mapped_column(
        DateTime, default=utc_now, nullable=False, index=True
    )
    applied_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=utc_now, onupdate=utc_now, nullable=False
    )


class ApplicationResponse(Base):
    """The application submitted for a vacancy."""

    __tablename__ = "job_responses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    vacancy_id: Mapped[int] = mapped_column(
        ForeignKey("job_vacancies.id"), nullable=False, unique=True
    )
    hh_negotiation_id: Mapped[str] = mapped_column(String(64), nullable=False)
    cover_letter: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="sent")

    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=utc_now, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=utc_now, onupdate=utc_now, nullable=False
    )

    vacancy: Mapped[Vacancy] = relationship()
