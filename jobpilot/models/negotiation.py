"""Employer conversation models."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from jobpilot.core.storage import Base, utc_now
from jobpilot.models.vacancy import Vacancy


class Negotiation(Base):
    """Conversation thread attached to an application."""

    __tablename__ = "job_chats"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    vacancy_id: Mapped[int] = mapped_column(
        ForeignKey("job_vacancies.id"), nullable=False, unique=True
    )
    hh_chat_id: Mapped[str] = mapped_column(
        String(64), nullable=False, unique=True, index=True
    )
    employer_name: Mapped[str | None] = mapped_column(String(500), nullable=True)

    is_bot: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_human_confirmed: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False
    )
    # Once set, never reset
    telegram_invited: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False
    )
    unread_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    last_message_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=utc_now, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=utc_now, onupdate=utc_now, nullable=False
    )

    vacancy: Mapped[Vacancy] = relationship()


class ChatMessage(Base):
    """Single message in a negotiation."""

    __tablename__ = "job_chat_messages"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    chat_id: Mapped[int] = mapped_column(
        ForeignKey("job_chats.id"), nullable=False, index=True
    )
    # NULL for messages written by the pipeline itself
    hh_message_id: Mapped[str | None] = mapped_column(
        String(64), nullable=True, unique=True
    )
    author_type: Mapped[str] = mapped_column(String(20), nullable=False)
    text: Mapped[str] = mapped_column(Text, nullable=False, default="")
    is_auto_response: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False
    )
    ai_sentiment: Mapped[str | None] = mapped_column(String(20), nullable=True)
    ai_intent: Mapped[str | None] = mapped_column(String(20), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=utc_now, nullable=False
    )
