"""Tests for the evaluation oracle and LLM providers."""

import json
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest
from openai import APITimeoutError

from jobpilot.core.config import settings
from jobpilot.core.exceptions import OracleError
from jobpilot.schemas.oracle import MessageAnalysis, VacancyEvaluation
from jobpilot.services.llm.factory import get_llm_provider
from jobpilot.services.llm.providers import OpenAICompatibleProvider
from jobpilot.services.oracle import (
    EvaluationOracle,
    clean_json,
    fallback_analysis,
    looks_like_bot,
)

EVALUATION_JSON = {
    "score": 82,
    "recommendation": "apply",
    "priority": 4,
    "match_reasons": ["Python", "FastAPI"],
    "concerns": ["Офис"],
    "salary_assessment": "Выше рынка",
}


def make_oracle(answer=None, side_effect=None) -> EvaluationOracle:
    provider = MagicMock()
    provider.generate = AsyncMock(return_value=answer, side_effect=side_effect)
    return EvaluationOracle(provider)


class TestCleanJson:
    def test_plain_json_untouched(self):
        assert clean_json('{"a": 1}') == '{"a": 1}'

    def test_fenced_json(self):
        assert clean_json('```json\n{"a": 1}\n```') == '{"a": 1}'

    def test_bare_fence(self):
        assert clean_json('  ```\n{"a": 1}```  ') == '{"a": 1}'


class TestEvaluate:
    """Tests for EvaluationOracle.evaluate."""

    @pytest.mark.asyncio
    async def test_parses_fenced_answer(self, sample_detail):
        oracle = make_oracle(f"```json\n{json.dumps(EVALUATION_JSON)}\n```")

        evaluation = await oracle.evaluate(sample_detail, "resume")

        assert evaluation.score == 82
        assert evaluation.recommendation == "apply"
        assert evaluation.match_reasons == ["Python", "FastAPI"]

    @pytest.mark.asyncio
    async def test_prompt_contains_posting_and_profile(self, sample_detail):
        oracle = make_oracle(json.dumps(EVALUATION_JSON))

        await oracle.evaluate(sample_detail, "Опыт Python 5 лет")

        system_prompt, user_prompt = oracle.provider.generate.await_args.args
        assert "JSON" in system_prompt
        assert "Python Developer" in user_prompt
        assert "Test Company" in user_prompt
        assert "Опыт Python 5 лет" in user_prompt

    @pytest.mark.asyncio
    async def test_malformed_json(self, sample_detail):
        oracle = make_oracle("Отличная вакансия, откликайтесь!")
        with pytest.raises(OracleError):
            await oracle.evaluate(sample_detail, "resume")

    @pytest.mark.asyncio
    async def test_contract_violation(self, sample_detail):
        oracle = make_oracle(json.dumps({**EVALUATION_JSON, "score": 140}))
        with pytest.raises(OracleError):
            await oracle.evaluate(sample_detail, "resume")

    @pytest.mark.asyncio
    async def test_unknown_recommendation(self, sample_detail):
        oracle = make_oracle(json.dumps({**EVALUATION_JSON, "recommendation": "yes"}))
        with pytest.raises(OracleError):
            await oracle.evaluate(sample_detail, "resume")

    @pytest.mark.asyncio
    async def test_empty_answer(self, sample_detail):
        oracle = make_oracle("   ")
        with pytest.raises(OracleError):
            await oracle.evaluate(sample_detail, "resume")

    @pytest.mark.asyncio
    async def test_provider_failure_propagates(self, sample_detail):
        oracle = make_oracle(side_effect=OracleError("timeout"))
        with pytest.raises(OracleError):
            await oracle.evaluate(sample_detail, "resume")

    def test_conservative_default(self):
        evaluation = VacancyEvaluation.conservative()
        assert evaluation.score == 0
        assert evaluation.recommendation == "skip"
        assert evaluation.priority == 1


class TestClassifyMessage:
    @pytest.mark.asyncio
    async def test_accepts_telegram_field_name(self):
        answer = {
            "is_bot": False,
            "is_human_recruiter": True,
            "requires_response": True,
            "sentiment": "positive",
            "intent": "invitation",
            "should_invite_telegram": True,
        }
        oracle = make_oracle(json.dumps(answer))

        analysis = await oracle.classify_message("Давайте созвонимся", "")

        assert analysis.should_hand_off is True
        assert analysis.intent == "invitation"

    @pytest.mark.asyncio
    async def test_history_passed_to_prompt(self):
        oracle = make_oracle(json.dumps({"is_bot": True}))

        analysis = await oracle.classify_message("Пройдите тест", "Я: Добрый день")

        assert analysis.is_bot is True
        _, user_prompt = oracle.provider.generate.await_args.args
        assert "Я: Добрый день" in user_prompt
        assert "Пройдите тест" in user_prompt


class TestTextCapabilities:
    @pytest.mark.asyncio
    async def test_cover_letter_includes_contacts_in_prompt(
        self, sample_detail, contacts
    ):
        oracle = make_oracle("  Письмо  ")

        letter = await oracle.write_cover_letter(sample_detail, "resume", contacts)

        assert letter == "Письмо"
        _, user_prompt = oracle.provider.generate.await_args.args
        assert contacts.telegram in user_prompt
        assert contacts.email in user_prompt

    @pytest.mark.asyncio
    async def test_handoff_invite_mentions_telegram(self, contacts):
        oracle = make_oracle("Пишите в Telegram")

        await oracle.draft_handoff_invite("Интересно, расскажите", contacts)

        _, user_prompt = oracle.provider.generate.await_args.args
        assert contacts.telegram in user_prompt

    @pytest.mark.asyncio
    async def test_search_tags(self):
        oracle = make_oracle(
            json.dumps(
                {
                    "primary_tags": ["Python Developer"],
                    "skill_tags": ["Python"],
                    "industry_tags": ["IT"],
                    "suggested_queries": ["Python разработчик"],
                }
            )
        )

        tags = await oracle.generate_search_tags("resume")

        assert tags.suggested_queries == ["Python разработчик"]

    @pytest.mark.asyncio
    async def test_empty_text_answer(self, contacts):
        oracle = make_oracle("")
        with pytest.raises(OracleError):
            await oracle.draft_intro("letter", contacts)


class TestBotHeuristic:
    @pytest.mark.parametrize(
        "text",
        [
            "Пожалуйста, пройдите тест по ссылке",
            "Уважаемый соискатель, спасибо за отклик",
            "Ваше резюме просмотрено",
            "Выполните тестовое задание до пятницы",
        ],
    )
    def test_bot_messages(self, text):
        assert looks_like_bot(text) is True

    def test_human_message(self):
        text = (
            "Привет! Меня зовут Анна, я рекрутер. Понравился ваш опыт с FastAPI, "
            "давайте созвонимся завтра в 15:00 и обсудим детали проекта?"
        )
        assert looks_like_bot(text) is False

    def test_fallback_analysis_never_hands_off(self):
        analysis = fallback_analysis("Давайте созвонимся завтра, расскажу о команде и задачах")
        assert analysis.is_bot is False
        assert analysis.should_hand_off is False

        bot = fallback_analysis("Пройдите опрос")
        assert bot.is_bot is True
        assert bot.should_hand_off is False

    def test_conservative_analysis(self):
        analysis = MessageAnalysis.conservative()
        assert analysis.is_bot is False
        assert analysis.is_human_recruiter is True
        assert analysis.should_hand_off is False


class TestOpenAICompatibleProvider:
    """Tests for the OpenAI-compatible provider."""

    @pytest.fixture
    def provider(self):
        provider = OpenAICompatibleProvider(
            base_url="http://localhost:11434/v1", model="qwen3:14b"
        )
        provider.client = MagicMock()
        return provider

    def _response(self, content):
        response = MagicMock()
        choice = MagicMock()
        choice.message.content = content
        response.choices = [choice] if content is not None else []
        return response

    @pytest.mark.asyncio
    async def test_generate(self, provider):
        provider.client.chat.completions.create.return_value = self._response(
            "  Ответ  "
        )

        result = await provider.generate("system", "user")

        assert result == "Ответ"
        kwargs = provider.client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "qwen3:14b"
        assert kwargs["messages"] == [
            {"role": "system", "content": "system"},
            {"role": "user", "content": "user"},
        ]

    @pytest.mark.asyncio
    async def test_empty_choices(self, provider):
        provider.client.chat.completions.create.return_value = self._response(None)
        with pytest.raises(OracleError):
            await provider.generate("system", "user")

    @pytest.mark.asyncio
    async def test_empty_content(self, provider):
        provider.client.chat.completions.create.return_value = self._response("")
        with pytest.raises(OracleError):
            await provider.generate("system", "user")

    @pytest.mark.asyncio
    async def test_timeout(self, provider):
        provider.client.chat.completions.create.side_effect = APITimeoutError(
            request=httpx.Request("POST", "http://localhost:11434/v1/chat/completions")
        )
        with pytest.raises(OracleError):
            await provider.generate("system", "user")


class TestFactory:
    def test_ollama_provider(self):
        with patch.object(settings, "llm_provider", "ollama"):
            provider = get_llm_provider()

        assert isinstance(provider, OpenAICompatibleProvider)
        assert provider.model == settings.ollama_model
        assert provider.base_url == f"{settings.ollama_base_url}/v1"

    def test_openrouter_provider(self):
        with (
            patch.object(settings, "llm_provider", "openrouter"),
            patch.object(settings, "llm_api_key", "sk-test"),
        ):
            provider = get_llm_provider()

        assert provider.model == settings.llm_model
        assert provider.base_url == settings.llm_base_url

    def test_unknown_provider(self):
        with patch.object(settings, "llm_provider", "unknown"):
            with pytest.raises(ValueError):
                get_llm_provider()
