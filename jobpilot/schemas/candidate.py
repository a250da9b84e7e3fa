"""Candidate-side inputs of the pipeline."""

from pydantic import BaseModel, Field

from jobpilot.schemas.hh import SearchFilters


class Contacts(BaseModel):
    """Contacts injected into cover letters and chat messages."""

    telegram: str
    email: str


class SearchConfig(BaseModel):
    """Effective search settings for one search cycle."""

    is_active: bool = True
    search_text: str | None = None
    filters: SearchFilters = Field(default_factory=SearchFilters)
    auto_tags_enabled: bool = True
    auto_apply_enabled: bool = True
    min_ai_score: int = Field(default=70, ge=0, le=100)
    search_interval_minutes: int = Field(default=60, ge=1)

    def should_apply(self, score: int, recommendation: str) -> bool:
        """Decision policy for a freshly evaluated vacancy."""
        return (
            self.auto_apply_enabled
            and score >= self.min_ai_score
            and recommendation != "skip"
        )
