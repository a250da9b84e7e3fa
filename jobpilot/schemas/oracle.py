"""Output contracts of the language-model oracle."""

from typing import Literal

from pydantic import AliasChoices, BaseModel, Field


class VacancyEvaluation(BaseModel):
    """How well a vacancy fits the candidate."""

    score: int = Field(..., ge=0, le=100)
    recommendation: Literal["apply", "maybe", "skip"]
    priority: int = Field(..., ge=1, le=5)
    match_reasons: list[str] = Field(default_factory=list)
    concerns: list[str] = Field(default_factory=list)
    salary_assessment: str = ""

    @classmethod
    def conservative(cls) -> "VacancyEvaluation":
        """Default used when the oracle could not evaluate the vacancy."""
        return cls(score=0, recommendation="skip", priority=1)


class MessageAnalysis(BaseModel):
    """Classification of an employer message."""

    is_bot: bool = False
    is_human_recruiter: bool = False
    requires_response: bool = False
    sentiment: Literal["positive", "neutral", "negative"] = "neutral"
    intent: Literal["question", "invitation", "rejection", "info", "test"] = "info"
    should_hand_off: bool = Field(
        default=False,
        validation_alias=AliasChoices("should_hand_off", "should_invite_telegram"),
    )

    @classmethod
    def conservative(cls, is_bot: bool = False) -> "MessageAnalysis":
        return cls(is_bot=is_bot, is_human_recruiter=not is_bot)


class SearchTagSuggestions(BaseModel):
    """Search tags generated from the candidate profile."""

    primary_tags: list[str] = Field(default_factory=list)
    skill_tags: list[str] = Field(default_factory=list)
    industry_tags: list[str] = Field(default_factory=list)
    suggested_queries: list[str] = Field(default_factory=list)
