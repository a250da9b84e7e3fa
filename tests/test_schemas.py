"""Tests for Pydantic schemas."""

import pytest
from pydantic import ValidationError

from jobpilot.schemas.candidate import SearchConfig
from jobpilot.schemas.hh import (
    NegotiationMessage,
    NegotiationSummary,
    PostingSummary,
    Salary,
    SearchFilters,
)


class TestSalary:
    def test_missing_salary(self):
        assert Salary.from_api(None) is None
        assert Salary.from_api({}) is None

    @pytest.mark.parametrize(
        "data,expected",
        [
            ({"from": 100, "to": 200, "currency": "USD"}, "100 - 200 USD"),
            ({"from": 100}, "от 100 RUR"),
            ({"to": 200}, "до 200 RUR"),
            ({"currency": "EUR"}, "не указана"),
        ],
    )
    def test_describe(self, data, expected):
        assert Salary.from_api(data).describe() == expected


class TestSearchFilters:
    def test_empty_filters(self):
        assert SearchFilters().to_params() == {}

    def test_only_set_values(self):
        params = SearchFilters(experience="between3And6", employment="full").to_params()
        assert params == {"experience": "between3And6", "employment": "full"}


class TestPostingSummary:
    """Tests for PostingSummary.from_api."""

    def test_missing_employer(self):
        posting = PostingSummary.from_api({"id": 1, "name": "Dev", "employer": None})
        assert posting.id == "1"
        assert posting.employer_name == "Unknown"
        assert posting.salary is None
        assert posting.url == ""


class TestNegotiationPayloads:
    def test_summary_without_state(self):
        summary = NegotiationSummary.from_api({"id": 5})
        assert summary.state == ""
        assert summary.vacancy_id == ""
        assert summary.has_updates is False

    def test_message_author_defaults_to_employer(self):
        message = NegotiationMessage.from_api({"id": 3, "text": None, "author": {}})
        assert message.author == "employer"
        assert message.text == ""


class TestSearchConfig:
    """Tests for the apply decision policy."""

    def test_defaults(self):
        config = SearchConfig()
        assert config.is_active is True
        assert config.min_ai_score == 70
        assert config.search_interval_minutes == 60

    @pytest.mark.parametrize(
        "score,recommendation,expected",
        [
            (85, "apply", True),
            (70, "maybe", True),
            (69, "apply", False),
            (95, "skip", False),
        ],
    )
    def test_should_apply(self, score, recommendation, expected):
        assert SearchConfig().should_apply(score, recommendation) is expected

    def test_auto_apply_disabled(self):
        config = SearchConfig(auto_apply_enabled=False)
        assert config.should_apply(100, "apply") is False

    def test_score_bounds(self):
        with pytest.raises(ValidationError):
            SearchConfig(min_ai_score=101)
        with pytest.raises(ValidationError):
            SearchConfig(search_interval_minutes=0)
