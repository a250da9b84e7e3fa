"""Read-only views over collaborator-owned tables.

The admin UI owns the portfolio tables and the search settings row; the
pipeline only reads them, once per search cycle or monitor pass.
"""

import logging

from sqlalchemy import select

from jobpilot.core.config import settings
from jobpilot.core.storage import Store
from jobpilot.models.profile import (
    PortfolioAbout,
    PortfolioContact,
    PortfolioExperience,
    PortfolioSkill,
)
from jobpilot.models.search import SearchSettings
from jobpilot.schemas.candidate import Contacts, SearchConfig
from jobpilot.schemas.hh import SearchFilters

logger = logging.getLogger(__name__)


class CandidateProfile(Store):
    async def resume_text(self) -> str:
        """Résumé blob handed to the oracle: about, experience, skills."""
        async with self.session() as session:
            about = (
                await session.execute(select(PortfolioAbout).limit(1))
            ).scalar_one_or_none()
            experiences = (
                await session.execute(
                    select(PortfolioExperience).order_by(
                        PortfolioExperience.date_from.desc()
                    )
                )
            ).scalars().all()
            skills = (await session.execute(select(PortfolioSkill))).scalars().all()

        resume = f"Обо мне:\n{about.description if about else ''}\n\n"
        if experiences:
            resume += "Опыт работы:\n"
            for exp in experiences:
                resume += f"- {exp.title} в {exp.company} ({exp.description})\n"
            resume += "\n"
        if skills:
            resume += "Навыки:\n"
            for skill in skills:
                resume += f"- {skill.name}\n"
        return resume

    async def contacts(self) -> Contacts:
        async with self.session() as session:
            result = await session.execute(
                select(PortfolioContact).where(
                    PortfolioContact.type.in_(("telegram", "email"))
                )
            )
            found: dict[str, str] = {}
            for contact in result.scalars().all():
                found.setdefault(contact.type, contact.value)

        return Contacts(
            telegram=found.get("telegram") or settings.default_telegram,
            email=found.get("email") or settings.default_email,
        )

    async def search_config(self) -> SearchConfig:
        """Search settings row, or environment defaults when it is missing."""
        async with self.session() as session:
            row = await session.get(SearchSettings, 1)

        if row is None:
            logger.info("No search settings row, using environment defaults")
            return SearchConfig(
                search_text=settings.search_text,
                auto_tags_enabled=settings.auto_tags_enabled,
                auto_apply_enabled=settings.auto_apply_enabled,
                min_ai_score=settings.min_ai_score,
                search_interval_minutes=settings.search_interval_minutes,
            )

        return SearchConfig(
            is_active=row.is_active,
            search_text=row.search_text,
            filters=SearchFilters(
                area_ids=[str(a) for a in row.area_ids or []],
                salary=row.salary_from,
                experience=row.experience,
                employment=row.employment,
                schedule=row.schedule,
                only_with_salary=row.only_with_salary,
            ),
            auto_tags_enabled=row.auto_tags_enabled,
            auto_apply_enabled=row.auto_apply_enabled,
            min_ai_score=row.min_ai_score,
            search_interval_minutes=row.search_interval_minutes,
        )
