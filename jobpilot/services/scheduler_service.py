"""Scheduler loop for the job search pipeline."""

import asyncio
import logging
from datetime import UTC, datetime, timedelta
from typing import Any

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.date import DateTrigger

from jobpilot.core.config import settings
from jobpilot.core.exceptions import AuthError, OracleError, PlatformError
from jobpilot.core.storage import utc_now
from jobpilot.models.negotiation import Negotiation
from jobpilot.models.vacancy import Vacancy
from jobpilot.schemas.candidate import Contacts, SearchConfig
from jobpilot.schemas.hh import PostingDetail
from jobpilot.schemas.oracle import VacancyEvaluation
from jobpilot.services.activity_ledger import ActivityLedger
from jobpilot.services.candidate import CandidateProfile
from jobpilot.services.hh_client import HHClient
from jobpilot.services.lifecycle import (
    VacancyStatus,
    can_advance,
    status_from_negotiation_state,
)
from jobpilot.services.llm.factory import get_llm_provider
from jobpilot.services.negotiation_monitor import NegotiationMonitor
from jobpilot.services.negotiation_store import NegotiationStore
from jobpilot.services.oracle import EvaluationOracle
from jobpilot.services.search_tags import SearchTagStore
from jobpilot.services.session_manager import SessionManager
from jobpilot.services.vacancy_store import VacancyStore

logger = logging.getLogger(__name__)

STATUS_MESSAGES = {
    VacancyStatus.VIEWED: "Отклик просмотрен",
    VacancyStatus.INVITED: "Приглашение",
    VacancyStatus.REJECTED: "Отказ",
}


class JobSearchScheduler:
    """Runs the pipeline tick after tick.

    Each tick is a one-shot job. The next one is scheduled only after the
    current tick finished, so ticks never overlap and a failing tick cannot
    stop the loop.
    """

    JOB_ID = "job_search_tick"

    def __init__(
        self,
        session_manager: SessionManager,
        hh_client: HHClient,
        oracle: EvaluationOracle,
        vacancies: VacancyStore,
        tags: SearchTagStore,
        candidate: CandidateProfile,
        ledger: ActivityLedger,
        monitor: NegotiationMonitor,
        tick_seconds: int | None = None,
        apply_delay: float | None = None,
        query_delay: float | None = None,
        max_queries: int | None = None,
    ):
        self.session_manager = session_manager
        self.hh_client = hh_client
        self.oracle = oracle
        self.vacancies = vacancies
        self.tags = tags
        self.candidate = candidate
        self.ledger = ledger
        self.monitor = monitor

        self.tick_seconds = tick_seconds or settings.scheduler_tick_seconds
        self.apply_delay = (
            settings.apply_delay_seconds if apply_delay is None else apply_delay
        )
        self.query_delay = (
            settings.query_delay_seconds if query_delay is None else query_delay
        )
        self.max_queries = max_queries or settings.max_queries_per_cycle

        self._scheduler: AsyncIOScheduler | None = None
        self._running = False
        self._tick_in_progress = False
        self._last_tick_at: datetime | None = None
        self._last_error: str | None = None

    @property
    def running(self) -> bool:
        return self._running

    async def start(self):
        """Start ticking; the first tick runs right away."""
        if self._running:
            logger.info("Job search scheduler already running")
            return

        self._running = True
        self._scheduler = AsyncIOScheduler(timezone="UTC")
        self._scheduler.start()
        logger.info("Job search scheduler started")
        await self.ledger.log("system", "Автоматический поиск запущен")
        self._schedule_tick(delay_seconds=0)

    async def stop(self):
        """Stop ticking. A tick already in flight finishes but is not followed."""
        if not self._running:
            return

        self._running = False
        if self._scheduler is not None:
            if self._scheduler.get_job(self.JOB_ID):
                self._scheduler.remove_job(self.JOB_ID)
            self._scheduler.shutdown(wait=False)
            self._scheduler = None
        logger.info("Job search scheduler stopped")
        await self.ledger.log("system", "Автоматический поиск остановлен")

    def status(self) -> dict[str, Any]:
        job = self._scheduler.get_job(self.JOB_ID) if self._scheduler else None
        return {
            "running": self._running,
            "tick_in_progress": self._tick_in_progress,
            "tick_seconds": self.tick_seconds,
            "last_tick_at": self._last_tick_at,
            "next_tick_at": job.next_run_time if job else None,
            "last_error": self._last_error,
        }

    def _schedule_tick(self, delay_seconds: float):
        if not self._running or self._scheduler is None:
            return
        self._scheduler.add_job(
            self._tick,
            trigger=DateTrigger(
                run_date=datetime.now(UTC) + timedelta(seconds=delay_seconds)
            ),
            id=self.JOB_ID,
            replace_existing=True,
            misfire_grace_time=None,
        )

    async def _tick(self):
        self._tick_in_progress = True
        try:
            await self.run_tick()
            self._last_error = None
        except Exception as e:
            logger.exception(f"Job search tick failed: {e}")
            self._last_error = str(e)
        finally:
            self._tick_in_progress = False
            self._last_tick_at = utc_now()
            self._schedule_tick(delay_seconds=self.tick_seconds)

    async def run_tick(self):
        """One pass: responses, messages, then a search when it is due."""
        try:
            await self.session_manager.get_valid_token()

            try:
                await self.check_responses()
            except PlatformError as e:
                logger.warning(f"Negotiation status check failed: {e.message}")

            try:
                await self.monitor.run()
            except PlatformError as e:
                logger.warning(f"Negotiation monitoring failed: {e.message}")

            config = await self.candidate.search_config()
            if await self._search_due(config):
                await self.run_search_cycle(config)
        except AuthError as e:
            logger.warning(f"Tick aborted, HH.ru authorization required: {e.detail}")
            await self.ledger.log("system", f"Нет доступа к HH.ru: {e.detail}")

    async def _search_due(self, config: SearchConfig) -> bool:
        if not config.is_active:
            return False
        latest = await self.vacancies.latest_found_at()
        if latest is None:
            return True
        elapsed_minutes = (utc_now() - latest).total_seconds() / 60
        return elapsed_minutes >= config.search_interval_minutes

    async def check_responses(self) -> int:
        """Advance vacancy statuses from the platform's negotiation states."""
        changed = 0
        for item in await self.hh_client.list_negotiations():
            if not item.vacancy_id:
                continue
            vacancy = await self.vacancies.get_by_hh_id(item.vacancy_id)
            if vacancy is None:
                continue

            new_status = status_from_negotiation_state(item.state)
            if not can_advance(vacancy.status, new_status):
                continue
            if not await self.vacancies.advance_status(vacancy.id, new_status):
                continue

            changed += 1
            await self.ledger.log(
                "response",
                f"{STATUS_MESSAGES.get(new_status, 'Статус отклика')}: "
                f"{vacancy.title} ({vacancy.company})",
                vacancy_id=vacancy.id,
                details={"state": item.state, "status": str(new_status)},
            )
            if new_status == VacancyStatus.INVITED:
                await self.ledger.bump_daily(invitations_received=1)
            elif new_status == VacancyStatus.REJECTED:
                await self.ledger.bump_daily(rejections_received=1)

        if changed:
            logger.info(f"Updated {changed} vacancy statuses from negotiations")
        return changed

    async def run_search_cycle(self, config: SearchConfig | None = None) -> dict:
        """Search, evaluate and apply."""
        config = config or await self.candidate.search_config()
        summary = {"queries": 0, "found": 0, "applied": 0, "skipped": 0, "errors": 0}

        logger.info("Starting job search cycle")
        await self.ledger.log("search", "Начинаю поиск вакансий")

        profile = await self.candidate.resume_text()
        contacts = await self.candidate.contacts()

        queries = await self._resolve_queries(config, profile)
        if not queries:
            logger.warning("No search queries available, skipping search")
            return summary

        resume_id = await self._resolve_resume_id()
        if not resume_id:
            logger.error("No resume found on HH.ru, skipping search")
            await self.ledger.log("system", "Не найдено резюме на HH.ru")
            return summary

        for vacancy in await self.vacancies.pending():
            if not config.should_apply(vacancy.ai_score, vacancy.ai_recommendation):
                continue
            try:
                detail = await self.hh_client.get_posting(vacancy.hh_vacancy_id)
            except PlatformError as e:
                logger.warning(
                    f"Cannot reload vacancy {vacancy.hh_vacancy_id}: {e.message}"
                )
                summary["errors"] += 1
                continue
            if await self._apply(vacancy, detail, profile, contacts, resume_id):
                summary["applied"] += 1
            else:
                summary["errors"] += 1

        for index, query in enumerate(queries[: self.max_queries]):
            if index:
                await asyncio.sleep(self.query_delay)
            await self._search_query(
                query, config, profile, contacts, resume_id, summary
            )

        await self.ledger.bump_daily(
            searches_count=summary["queries"], vacancies_found=summary["found"]
        )
        logger.info(
            f"Search cycle finished: {summary['found']} new, "
            f"{summary['applied']} applied, {summary['skipped']} skipped, "
            f"{summary['errors']} errors"
        )
        await self.ledger.log(
            "search",
            f"Поиск завершён: найдено {summary['found']}, "
            f"откликов {summary['applied']}",
            details=summary,
        )
        return summary

    async def _search_query(
        self,
        query: str,
        config: SearchConfig,
        profile: str,
        contacts: Contacts,
        resume_id: str,
        summary: dict,
    ):
        logger.info(f"Searching: {query}")
        await self.tags.increment(query, search_count=1)
        try:
            postings = await self.hh_client.search_postings(query, config.filters)
        except PlatformError as e:
            logger.warning(f"Search '{query}' failed: {e.message}")
            summary["errors"] += 1
            return
        summary["queries"] += 1

        new_count = 0
        for posting in postings:
            if await self.vacancies.exists(posting.id):
                continue
            try:
                detail = await self.hh_client.get_posting(posting.id)
            except PlatformError as e:
                logger.warning(f"Cannot load vacancy {posting.id}: {e.message}")
                summary["errors"] += 1
                continue

            try:
                evaluation = await self.oracle.evaluate(detail, profile)
            except OracleError as e:
                logger.warning(f"Evaluation of {posting.id} failed: {e.message}")
                evaluation = VacancyEvaluation.conservative()
            except Exception as e:
                logger.exception(f"Unexpected evaluation failure for {posting.id}: {e}")
                evaluation = VacancyEvaluation.conservative()

            apply = config.should_apply(evaluation.score, evaluation.recommendation)
            vacancy = await self.vacancies.create(
                detail,
                evaluation,
                VacancyStatus.FOUND if apply else VacancyStatus.SKIPPED,
            )
            new_count += 1
            summary["found"] += 1
            await self.ledger.log(
                "ai",
                f"Оценка {evaluation.score}/100: {detail.name} ({detail.employer_name})",
                vacancy_id=vacancy.id,
                details=evaluation.model_dump(),
            )

            if not apply:
                summary["skipped"] += 1
                continue
            if await self._apply(vacancy, detail, profile, contacts, resume_id, query):
                summary["applied"] += 1
            else:
                summary["errors"] += 1

        await self.tags.increment(query, found_count=new_count)

    async def _resolve_queries(self, config: SearchConfig, profile: str) -> list[str]:
        queries: list[str] = []
        if config.search_text and config.search_text.strip():
            queries.append(config.search_text.strip())

        if config.auto_tags_enabled:
            for query in await self.tags.active_queries():
                if query not in queries:
                    queries.append(query)

        if queries:
            return queries

        logger.info("No search queries configured, generating tags")
        try:
            suggestions = await self.oracle.generate_search_tags(profile)
        except OracleError as e:
            logger.error(f"Failed to generate search tags: {e.message}")
            return []
        queries = await self.tags.add_suggestions(suggestions)
        await self.ledger.log(
            "ai",
            f"Сгенерировано {len(queries)} поисковых запросов",
            details=suggestions.model_dump(),
        )
        return queries

    async def _resolve_resume_id(self) -> str | None:
        if settings.hh_resume_id:
            return settings.hh_resume_id
        try:
            resumes = await self.hh_client.get_my_resumes()
        except PlatformError as e:
            logger.error(f"Failed to fetch resumes: {e.message}")
            return None
        return str(resumes[0]["id"]) if resumes else None

    async def _apply(
        self,
        vacancy: Vacancy,
        detail: PostingDetail,
        profile: str,
        contacts: Contacts,
        resume_id: str,
        query: str | None = None,
    ) -> bool:
        """Write a cover letter, submit it and record the application."""
        try:
            cover_letter = await self.oracle.write_cover_letter(
                detail, profile, contacts
            )
        except OracleError as e:
            logger.warning(f"Cover letter for {detail.id} failed: {e.message}")
            return False

        try:
            negotiation_id = await self.hh_client.submit_application(
                detail.id, cover_letter, resume_id
            )
        except PlatformError as e:
            logger.warning(f"Application to {detail.id} failed: {e.message}")
            await self.ledger.log(
                "apply",
                f"Не удалось откликнуться: {detail.name}",
                vacancy_id=vacancy.id,
                details={"status_code": e.status_code, "error": e.message},
            )
            return False
        finally:
            await asyncio.sleep(self.apply_delay)

        negotiation = await self.vacancies.mark_applied(
            vacancy.id, negotiation_id, cover_letter
        )
        if negotiation is None:
            return False

        await self.ledger.log(
            "apply",
            f"Отклик отправлен: {detail.name} ({detail.employer_name})",
            vacancy_id=vacancy.id,
            details={"score": vacancy.ai_score, "negotiation_id": negotiation_id},
        )
        await self.ledger.bump_daily(applications_sent=1)
        if query:
            await self.tags.increment(query, applied_count=1)

        await self._send_intro(negotiation, cover_letter, contacts)
        return True

    async def _send_intro(
        self, negotiation: Negotiation, cover_letter: str, contacts: Contacts
    ):
        """Best effort: a failed intro never undoes the application."""
        try:
            intro = await self.oracle.draft_intro(cover_letter, contacts)
            await self.hh_client.send_message(negotiation.hh_chat_id, intro)
        except (OracleError, PlatformError) as e:
            logger.warning(
                f"Intro message for {negotiation.hh_chat_id} not sent: {e.message}"
            )
            return
        await self.ledger.log(
            "chat",
            "Отправлено вступительное сообщение",
            vacancy_id=negotiation.vacancy_id,
        )
        await self.ledger.bump_daily(messages_sent=1)


def create_scheduler(session_factory=None, provider=None) -> JobSearchScheduler:
    """Wire a scheduler from settings; stores share one session factory."""
    session_manager = SessionManager(session_factory)
    hh_client = HHClient(session_manager)
    oracle = EvaluationOracle(provider or get_llm_provider())
    candidate = CandidateProfile(session_factory)
    ledger = ActivityLedger(session_factory)
    monitor = NegotiationMonitor(
        hh_client, oracle, NegotiationStore(session_factory), candidate, ledger
    )
    return JobSearchScheduler(
        session_manager=session_manager,
        hh_client=hh_client,
        oracle=oracle,
        vacancies=VacancyStore(session_factory),
        tags=SearchTagStore(session_factory),
        candidate=candidate,
        ledger=ledger,
        monitor=monitor,
    )
