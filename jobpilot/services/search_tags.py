"""Search tag store."""

import logging

from sqlalchemy import select, update

from jobpilot.core.storage import Store
from jobpilot.models.search import SearchTag
from jobpilot.schemas.oracle import SearchTagSuggestions

logger = logging.getLogger(__name__)

QUERY = "query"


class SearchTagStore(Store):
    async def active_queries(self) -> list[str]:
        async with self.session() as session:
            result = await session.execute(
                select(SearchTag.value)
                .where(SearchTag.tag_type == QUERY, SearchTag.is_active)
                .order_by(SearchTag.id)
            )
            return list(result.scalars().all())

    async def add_suggestions(self, suggestions: SearchTagSuggestions) -> list[str]:
        """Persist generated tags, skipping ones that already exist.

        Returns the suggested queries that are now stored as active tags.
        """
        groups = {
            QUERY: suggestions.suggested_queries,
            "primary": suggestions.primary_tags,
            "skill": suggestions.skill_tags,
            "industry": suggestions.industry_tags,
        }
        async with self.session() as session:
            result = await session.execute(
                select(SearchTag.tag_type, SearchTag.value)
            )
            existing = {(row.tag_type, row.value) for row in result}

            for tag_type, values in groups.items():
                for value in values:
                    value = value.strip()
                    if not value or (tag_type, value) in existing:
                        continue
                    session.add(SearchTag(tag_type=tag_type, value=value))
                    existing.add((tag_type, value))
            await session.commit()

        queries = [q.strip() for q in suggestions.suggested_queries if q.strip()]
        logger.info(f"Stored {len(queries)} generated search queries")
        return queries

    async def increment(self, value: str, **counters: int) -> None:
        """Add to the counters of a query tag; unknown queries are ignored."""
        if not counters:
            return
        values = {
            name: getattr(SearchTag, name) + amount
            for name, amount in counters.items()
        }
        async with self.session() as session:
            await session.execute(
                update(SearchTag)
                .where(SearchTag.tag_type == QUERY, SearchTag.value == value)
                .values(**values)
            )
            await session.commit()
