"""Database models."""

from jobpilot.models.activity import ActivityLog, DailyStats
from jobpilot.models.negotiation import ChatMessage, Negotiation
from jobpilot.models.profile import (
    PortfolioAbout,
    PortfolioContact,
    PortfolioExperience,
    PortfolioSkill,
)
from jobpilot.models.search import SearchSettings, SearchTag
from jobpilot.models.token import Token
from jobpilot.models.vacancy import ApplicationResponse, Vacancy

__all__ = [
    "ActivityLog",
    "ApplicationResponse",
    "ChatMessage",
    "DailyStats",
    "Negotiation",
    "PortfolioAbout",
    "PortfolioContact",
    "PortfolioExperience",
    "PortfolioSkill",
    "SearchSettings",
    "SearchTag",
    "Token",
    "Vacancy",
]
