"""Pydantic schemas for API payloads and oracle outputs."""

from jobpilot.schemas.candidate import Contacts, SearchConfig
from jobpilot.schemas.hh import (
    NegotiationMessage,
    NegotiationSummary,
    PostingDetail,
    PostingSummary,
    Salary,
    SearchFilters,
)
from jobpilot.schemas.oracle import (
    MessageAnalysis,
    SearchTagSuggestions,
    VacancyEvaluation,
)

__all__ = [
    "Contacts",
    "MessageAnalysis",
    "NegotiationMessage",
    "NegotiationSummary",
    "PostingDetail",
    "PostingSummary",
    "Salary",
    "SearchConfig",
    "SearchFilters",
    "SearchTagSuggestions",
    "VacancyEvaluation",
]
