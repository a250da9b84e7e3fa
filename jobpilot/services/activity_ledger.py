"""User-visible activity feed and per-day counters.

Both are observability: a failed write is logged and never interrupts the
pipeline.
"""

import logging
from typing import Any

from sqlalchemy import select, update

from jobpilot.core.exceptions import PersistenceError
from jobpilot.core.storage import Store, utc_now
from jobpilot.models.activity import ActivityLog, DailyStats

logger = logging.getLogger(__name__)

COUNTERS = (
    "searches_count",
    "vacancies_found",
    "applications_sent",
    "invitations_received",
    "rejections_received",
    "messages_sent",
    "messages_received",
)


class ActivityLedger(Store):
    async def log(
        self,
        event_type: str,
        description: str,
        vacancy_id: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Append an event to the activity feed."""
        try:
            async with self.session() as session:
                session.add(
                    ActivityLog(
                        event_type=event_type,
                        vacancy_id=vacancy_id,
                        description=description,
                        details=details,
                    )
                )
                await session.commit()
        except PersistenceError as e:
            logger.warning(f"Failed to write activity '{description}': {e}")

    async def bump_daily(self, **counters: int) -> None:
        """Add to today's counters, creating the row on first use."""
        unknown = set(counters) - set(COUNTERS)
        if unknown:
            raise ValueError(f"Unknown daily counters: {sorted(unknown)}")
        counters = {name: amount for name, amount in counters.items() if amount}
        if not counters:
            return

        today = utc_now().date().isoformat()
        try:
            async with self.session() as session:
                result = await session.execute(
                    select(DailyStats.id).where(DailyStats.date == today)
                )
                if result.scalar_one_or_none() is None:
                    session.add(DailyStats(date=today, **counters))
                else:
                    await session.execute(
                        update(DailyStats)
                        .where(DailyStats.date == today)
                        .values(
                            **{
                                name: getattr(DailyStats, name) + amount
                                for name, amount in counters.items()
                            }
                        )
                    )
                await session.commit()
        except PersistenceError as e:
            logger.warning(f"Failed to update daily stats {counters}: {e}")

    async def today(self) -> DailyStats | None:
        async with self.session() as session:
            result = await session.execute(
                select(DailyStats).where(
                    DailyStats.date == utc_now().date().isoformat()
                )
            )
            return result.scalar_one_or_none()
