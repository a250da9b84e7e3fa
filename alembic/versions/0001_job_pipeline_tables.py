"""Create job pipeline tables.

Revision ID: 0001
Revises:
Create Date: 2026-10-18
"""

from collections.abc import Sequence

from alembic import op
import sqlalchemy as sa


revision: str = "0001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "hh_tokens",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("access_token", sa.String(255), nullable=False),
        sa.Column("refresh_token", sa.String(255), nullable=False),
        sa.Column("expires_in", sa.Integer(), nullable=False),
        sa.Column("obtained_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "job_vacancies",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("hh_vacancy_id", sa.String(64), nullable=False),
        sa.Column("title", sa.String(500), nullable=False),
        sa.Column("company", sa.String(500), nullable=False),
        sa.Column("salary_from", sa.BigInteger(), nullable=True),
        sa.Column("salary_to", sa.BigInteger(), nullable=True),
        sa.Column("salary_currency", sa.String(10), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("url", sa.String(500), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("ai_score", sa.Integer(), nullable=False),
        sa.Column("ai_recommendation", sa.String(10), nullable=False),
        sa.Column("ai_priority", sa.Integer(), nullable=False),
        sa.Column("ai_match_reasons", sa.JSON(), nullable=False),
        sa.Column("ai_concerns", sa.JSON(), nullable=False),
        sa.Column("ai_salary_assessment", sa.Text(), nullable=False),
        sa.Column("found_at", sa.DateTime(), nullable=False),
        sa.Column("applied_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_job_vacancies_hh_vacancy_id", "job_vacancies", ["hh_vacancy_id"], unique=True
    )
    op.create_index("ix_job_vacancies_status", "job_vacancies", ["status"])
    op.create_index("ix_job_vacancies_found_at", "job_vacancies", ["found_at"])

    op.create_table(
        "job_responses",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("vacancy_id", sa.Integer(), nullable=False),
        sa.Column("hh_negotiation_id", sa.String(64), nullable=False),
        sa.Column("cover_letter", sa.Text(), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["vacancy_id"], ["job_vacancies.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("vacancy_id"),
    )

    op.create_table(
        "job_chats",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("vacancy_id", sa.Integer(), nullable=False),
        sa.Column("hh_chat_id", sa.String(64), nullable=False),
        sa.Column("employer_name", sa.String(500), nullable=True),
        sa.Column("is_bot", sa.Boolean(), nullable=False),
        sa.Column("is_human_confirmed", sa.Boolean(), nullable=False),
        sa.Column("telegram_invited", sa.Boolean(), nullable=False),
        sa.Column("unread_count", sa.Integer(), nullable=False),
        sa.Column("last_message_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["vacancy_id"], ["job_vacancies.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("vacancy_id"),
    )
    op.create_index("ix_job_chats_hh_chat_id", "job_chats", ["hh_chat_id"], unique=True)

    op.create_table(
        "job_chat_messages",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("chat_id", sa.Integer(), nullable=False),
        sa.Column("hh_message_id", sa.String(64), nullable=True),
        sa.Column("author_type", sa.String(20), nullable=False),
        sa.Column("text", sa.Text(), nullable=False),
        sa.Column("is_auto_response", sa.Boolean(), nullable=False),
        sa.Column("ai_sentiment", sa.String(20), nullable=True),
        sa.Column("ai_intent", sa.String(20), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["chat_id"], ["job_chats.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("hh_message_id"),
    )
    op.create_index("ix_job_chat_messages_chat_id", "job_chat_messages", ["chat_id"])

    op.create_table(
        "job_search_tags",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("tag_type", sa.String(20), nullable=False),
        sa.Column("value", sa.String(255), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("search_count", sa.Integer(), nullable=False),
        sa.Column("found_count", sa.Integer(), nullable=False),
        sa.Column("applied_count", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("tag_type", "value"),
    )

    op.create_table(
        "job_search_settings",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("search_text", sa.String(500), nullable=True),
        sa.Column("area_ids", sa.JSON(), nullable=True),
        sa.Column("experience", sa.String(50), nullable=True),
        sa.Column("schedule", sa.String(50), nullable=True),
        sa.Column("employment", sa.String(50), nullable=True),
        sa.Column("salary_from", sa.BigInteger(), nullable=True),
        sa.Column("only_with_salary", sa.Boolean(), nullable=False),
        sa.Column("auto_tags_enabled", sa.Boolean(), nullable=False),
        sa.Column("min_ai_score", sa.Integer(), nullable=False),
        sa.Column("auto_apply_enabled", sa.Boolean(), nullable=False),
        sa.Column("search_interval_minutes", sa.Integer(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "job_activity_log",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("event_type", sa.String(20), nullable=False),
        sa.Column("vacancy_id", sa.Integer(), nullable=True),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("details", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_job_activity_log_event_type", "job_activity_log", ["event_type"])
    op.create_index("ix_job_activity_log_created_at", "job_activity_log", ["created_at"])

    op.create_table(
        "job_search_stats",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("date", sa.String(10), nullable=False),
        sa.Column("searches_count", sa.Integer(), nullable=False),
        sa.Column("vacancies_found", sa.Integer(), nullable=False),
        sa.Column("applications_sent", sa.Integer(), nullable=False),
        sa.Column("invitations_received", sa.Integer(), nullable=False),
        sa.Column("rejections_received", sa.Integer(), nullable=False),
        sa.Column("messages_sent", sa.Integer(), nullable=False),
        sa.Column("messages_received", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("date"),
    )

    # Owned by the admin UI, read by the pipeline
    op.create_table(
        "portfolio_about",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "portfolio_experience",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("company", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("date_from", sa.Date(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "portfolio_skills",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "portfolio_contacts",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("type", sa.String(50), nullable=False),
        sa.Column("value", sa.String(255), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )


def downgrade() -> None:
    for table in (
        "portfolio_contacts",
        "portfolio_skills",
        "portfolio_experience",
        "portfolio_about",
        "job_search_stats",
        "job_activity_log",
        "job_search_settings",
        "job_search_tags",
        "job_chat_messages",
        "job_chats",
        "job_responses",
        "job_vacancies",
        "hh_tokens",
    ):
        op.drop_table(table)
