"""Tests for prompt builder functionality."""

from jobpilot.schemas.hh import PostingDetail
from jobpilot.services.prompt_builder import (
    CLASSIFY_SYSTEM,
    EVALUATION_SYSTEM,
    build_classify_prompt,
    build_cover_letter_prompt,
    build_evaluation_prompt,
    build_handoff_prompt,
    build_intro_prompt,
    build_reply_prompt,
    build_search_tags_prompt,
)


class TestBuildEvaluationPrompt:
    """Tests for build_evaluation_prompt function."""

    def test_prompt_contains_posting_details(self, sample_detail):
        system, user = build_evaluation_prompt(sample_detail, "Опыт 5 лет")

        assert system == EVALUATION_SYSTEM
        assert "Python Developer" in user
        assert "Test Company" in user
        assert "200000 - 300000 RUR" in user
        assert "Python, FastAPI" in user
        assert "Опыт 5 лет" in user

    def test_missing_salary_and_skills(self):
        posting = PostingDetail(id="1", name="Backend", description="Описание")

        _, user = build_evaluation_prompt(posting, "")

        assert "Зарплата: не указана" in user
        assert "Ключевые навыки: не указаны" in user


class TestTextPrompts:
    def test_cover_letter_ends_with_contacts(self, sample_detail, contacts):
        _, user = build_cover_letter_prompt(sample_detail, "resume", contacts)

        assert user.endswith(
            f"Telegram: {contacts.telegram}\nEmail: {contacts.email}"
        )

    def test_classify_with_empty_history(self):
        system, user = build_classify_prompt("Здравствуйте", "")

        assert system == CLASSIFY_SYSTEM
        assert "(пусто)" in user
        assert "Здравствуйте" in user

    def test_reply_mentions_posting(self):
        _, user = build_reply_prompt("Когда удобно созвониться?", "resume", "Python Dev")

        assert "Вакансия: Python Dev" in user
        assert "Когда удобно созвониться?" in user

    def test_intro_and_handoff_carry_contacts(self, contacts):
        _, intro = build_intro_prompt("Письмо", contacts)
        _, handoff = build_handoff_prompt("Давайте обсудим", contacts)

        assert contacts.email in intro
        assert contacts.telegram in handoff
        assert contacts.email not in handoff

    def test_search_tags(self):
        system, user = build_search_tags_prompt("Python, FastAPI, PostgreSQL")

        assert "suggested_queries" in system
        assert "Python, FastAPI, PostgreSQL" in user
