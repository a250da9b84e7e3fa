"""Language-model oracle: scoring, writing and message classification."""

import json
import logging
import re

from pydantic import BaseModel, ValidationError

from jobpilot.core.exceptions import OracleError
from jobpilot.schemas.candidate import Contacts
from jobpilot.schemas.hh import PostingDetail
from jobpilot.schemas.oracle import (
    MessageAnalysis,
    SearchTagSuggestions,
    VacancyEvaluation,
)
from jobpilot.services import prompt_builder
from jobpilot.services.llm.base import LLMProvider

logger = logging.getLogger(__name__)

BOT_PATTERNS = (
    "тестовое задание",
    "пройдите тест",
    "заполните анкету",
    "ответьте на вопросы",
    "пожалуйста, выберите",
    "выберите вариант",
    "нажмите кнопку",
    "автоматическое уведомление",
    "ваш отклик просмотрен",
    "благодарим за интерес",
    "оцените качество",
    "пройдите опрос",
    "заполните форму",
    "перейдите по ссылке",
    "нажмите для подтверждения",
)

TEMPLATE_STARTS = (
    "уважаемый кандидат",
    "уважаемый соискатель",
    "добрый день! ваш отклик",
    "здравствуйте! благодарим",
    "спасибо за ваш отклик!",
)


def looks_like_bot(text: str) -> bool:
    """Keyword heuristic used when the model cannot classify a message."""
    lowered = text.lower().strip()
    if any(pattern in lowered for pattern in BOT_PATTERNS):
        return True
    if lowered.startswith(TEMPLATE_STARTS):
        return True
    # Short platform notifications ("резюме просмотрено", "отклик получен")
    return len(lowered) < 100 and ("просмотр" in lowered or "получен" in lowered)


def fallback_analysis(text: str) -> MessageAnalysis:
    """Conservative classification: never hands off, bot flag from keywords."""
    return MessageAnalysis.conservative(is_bot=looks_like_bot(text))


def clean_json(text: str) -> str:
    """Strip markdown code fences around a JSON answer."""
    text = text.strip()
    text = re.sub(r"^```(?:json)?\s*", "", text)
    text = re.sub(r"\s*```$", "", text)
    return text.strip()


class EvaluationOracle:
    """Typed facade over an LLM provider.

    Every method raises OracleError when the provider fails or the answer
    does not fit the expected contract. Callers decide on the fallback.
    """

    def __init__(self, provider: LLMProvider):
        self.provider = provider

    async def _text(self, prompts: tuple[str, str]) -> str:
        system_prompt, user_prompt = prompts
        text = await self.provider.generate(system_prompt, user_prompt)
        if not text or not text.strip():
            raise OracleError("LLM returned an empty answer")
        return text.strip()

    async def _structured(self, prompts: tuple[str, str], model: type[BaseModel]):
        raw = await self._text(prompts)
        try:
            return model.model_validate(json.loads(clean_json(raw)))
        except (json.JSONDecodeError, ValidationError) as e:
            logger.warning(
                f"LLM answer does not match {model.__name__}: {e!s}; "
                f"raw: {raw[:300]}"
            )
            raise OracleError(f"Malformed {model.__name__}: {e!s}") from e

    async def evaluate(self, posting: PostingDetail, profile: str) -> VacancyEvaluation:
        """Score a posting against the candidate profile."""
        evaluation = await self._structured(
            prompt_builder.build_evaluation_prompt(posting, profile),
            VacancyEvaluation,
        )
        logger.info(
            f"Vacancy {posting.id} scored {evaluation.score} "
            f"({evaluation.recommendation})"
        )
        return evaluation

    async def write_cover_letter(
        self, posting: PostingDetail, profile: str, contacts: Contacts
    ) -> str:
        return await self._text(
            prompt_builder.build_cover_letter_prompt(posting, profile, contacts)
        )

    async def classify_message(self, text: str, history: str) -> MessageAnalysis:
        return await self._structured(
            prompt_builder.build_classify_prompt(text, history), MessageAnalysis
        )

    async def draft_reply(self, text: str, profile: str, posting_title: str) -> str:
        return await self._text(
            prompt_builder.build_reply_prompt(text, profile, posting_title)
        )

    async def draft_intro(self, cover_letter: str, contacts: Contacts) -> str:
        return await self._text(
            prompt_builder.build_intro_prompt(cover_letter, contacts)
        )

    async def draft_handoff_invite(self, context: str, contacts: Contacts) -> str:
        """One line inviting the recruiter to continue in Telegram."""
        return await self._text(
            prompt_builder.build_handoff_prompt(context, contacts)
        )

    async def generate_search_tags(self, profile: str) -> SearchTagSuggestions:
        return await self._structured(
            prompt_builder.build_search_tags_prompt(profile), SearchTagSuggestions
        )
