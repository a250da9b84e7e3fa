"""Vacancy persistence and status transitions."""

import logging
from datetime import datetime

from sqlalchemy import func, select, update

from jobpilot.core.storage import Store, utc_now
from jobpilot.models.negotiation import Negotiation
from jobpilot.models.vacancy import ApplicationResponse, Vacancy
from jobpilot.schemas.hh import PostingDetail
from jobpilot.schemas.oracle import VacancyEvaluation
from jobpilot.services.lifecycle import VacancyStatus, can_advance

logger = logging.getLogger(__name__)


class VacancyStore(Store):
    """One row per HH.ru vacancy id; status only moves forward."""

    async def exists(self, hh_vacancy_id: str) -> bool:
        async with self.session() as session:
            result = await session.execute(
                select(Vacancy.id).where(Vacancy.hh_vacancy_id == hh_vacancy_id)
            )
            return result.scalar_one_or_none() is not None

    async def get(self, vacancy_id: int) -> Vacancy | None:
        async with self.session() as session:
            return await session.get(Vacancy, vacancy_id)

    async def get_by_hh_id(self, hh_vacancy_id: str) -> Vacancy | None:
        async with self.session() as session:
            result = await session.execute(
                select(Vacancy).where(Vacancy.hh_vacancy_id == hh_vacancy_id)
            )
            return result.scalar_one_or_none()

    async def create(
        self,
        posting: PostingDetail,
        evaluation: VacancyEvaluation,
        status: VacancyStatus,
    ) -> Vacancy:
        """Store a freshly evaluated posting."""
        salary = posting.salary
        vacancy = Vacancy(
            hh_vacancy_id=posting.id,
            title=posting.name,
            company=posting.employer_name,
            salary_from=salary.salary_from if salary else None,
            salary_to=salary.salary_to if salary else None,
            salary_currency=salary.currency if salary else None,
            description=posting.description,
            url=posting.url,
            status=status,
            ai_score=evaluation.score,
            ai_recommendation=evaluation.recommendation,
            ai_priority=evaluation.priority,
            ai_match_reasons=evaluation.match_reasons,
            ai_concerns=evaluation.concerns,
            ai_salary_assessment=evaluation.salary_assessment,
        )
        async with self.session() as session:
            session.add(vacancy)
            await session.commit()
            await session.refresh(vacancy)
        return vacancy

    async def pending(self) -> list[Vacancy]:
        """Vacancies queued for application but never submitted."""
        async with self.session() as session:
            result = await session.execute(
                select(Vacancy)
                .where(Vacancy.status == VacancyStatus.FOUND)
                .order_by(Vacancy.ai_priority.desc(), Vacancy.found_at)
            )
            return list(result.scalars().all())

    async def latest_found_at(self) -> datetime | None:
        async with self.session() as session:
            result = await session.execute(select(func.max(Vacancy.found_at)))
            return result.scalar_one_or_none()

    async def mark_applied(
        self, vacancy_id: int, hh_negotiation_id: str, cover_letter: str
    ) -> Negotiation | None:
        """Record a successful submission in one transaction.

        Moves the vacancy to applied and creates its application response
        and negotiation. Returns None when the vacancy already moved past
        applied.
        """
        async with self.session() as session:
            vacancy = await session.get(Vacancy, vacancy_id)
            if vacancy is None or not can_advance(
                vacancy.status, VacancyStatus.APPLIED
            ):
                return None

            now = utc_now()
            vacancy.status = VacancyStatus.APPLIED
            vacancy.applied_at = now
            session.add(
                ApplicationResponse(
                    vacancy_id=vacancy.id,
                    hh_negotiation_id=hh_negotiation_id,
                    cover_letter=cover_letter,
                    status="sent",
                )
            )
            negotiation = Negotiation(
                vacancy_id=vacancy.id,
                hh_chat_id=hh_negotiation_id,
                employer_name=vacancy.company,
            )
            session.add(negotiation)
            await session.commit()
            await session.refresh(negotiation)
            logger.info(
                f"Vacancy {vacancy.hh_vacancy_id} applied, "
                f"negotiation {hh_negotiation_id}"
            )
            return negotiation

    async def advance_status(self, vacancy_id: int, new_status: VacancyStatus) -> bool:
        """Apply a forward transition. Returns whether anything changed."""
        async with self.session() as session:
            vacancy = await session.get(Vacancy, vacancy_id)
            if vacancy is None or not can_advance(vacancy.status, new_status):
                return False

            old_status = vacancy.status
            await session.execute(
                update(Vacancy)
                .where(Vacancy.id == vacancy_id, Vacancy.status == old_status)
                .values(status=new_status, updated_at=utc_now())
            )
            await session.commit()
            logger.info(
                f"Vacancy {vacancy.hh_vacancy_id}: {old_status} -> {new_status}"
            )
            return True
