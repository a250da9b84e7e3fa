"""Negotiation threads and their messages."""

import logging

from sqlalchemy import select, update
from sqlalchemy.orm import selectinload

from jobpilot.core.storage import Store, utc_now
from jobpilot.models.negotiation import ChatMessage, Negotiation
from jobpilot.models.vacancy import Vacancy
from jobpilot.schemas.hh import NegotiationMessage
from jobpilot.schemas.oracle import MessageAnalysis
from jobpilot.services.lifecycle import OPEN_STATUSES

logger = logging.getLogger(__name__)


class NegotiationStore(Store):
    async def list_open(self) -> list[Negotiation]:
        """Negotiations whose vacancy is still in play, with the vacancy loaded."""
        async with self.session() as session:
            result = await session.execute(
                select(Negotiation)
                .join(Vacancy, Negotiation.vacancy_id == Vacancy.id)
                .where(Vacancy.status.in_(OPEN_STATUSES))
                .options(selectinload(Negotiation.vacancy))
                .order_by(Negotiation.id)
            )
            return list(result.scalars().all())

    async def get(self, negotiation_id: int) -> Negotiation | None:
        async with self.session() as session:
            return await session.get(Negotiation, negotiation_id)

    async def has_message(self, hh_message_id: str) -> bool:
        async with self.session() as session:
            result = await session.execute(
                select(ChatMessage.id).where(
                    ChatMessage.hh_message_id == hh_message_id
                )
            )
            return result.scalar_one_or_none() is not None

    async def add_message(
        self,
        chat_id: int,
        author_type: str,
        text: str,
        hh_message_id: str | None = None,
        is_auto_response: bool = False,
    ) -> ChatMessage:
        """Store a message as-is."""
        message = ChatMessage(
            chat_id=chat_id,
            hh_message_id=hh_message_id,
            author_type=author_type,
            text=text,
            is_auto_response=is_auto_response,
        )
        async with self.session() as session:
            session.add(message)
            await session.commit()
            await session.refresh(message)
        return message

    async def record_employer_message(
        self,
        negotiation: Negotiation,
        message: NegotiationMessage,
        analysis: MessageAnalysis,
        auto_response: str | None = None,
        handed_off: bool = False,
    ) -> None:
        """Persist an employer message and the outcome of handling it.

        The message, its classification, the unread counter, the bot flag,
        the optional automatic response and the hand-off flags are committed
        together.
        """
        now = utc_now()
        values = {
            "unread_count": Negotiation.unread_count + 1,
            "is_bot": analysis.is_bot,
            "last_message_at": now,
            "updated_at": now,
        }
        if handed_off:
            values["telegram_invited"] = True
            values["is_human_confirmed"] = True

        async with self.session() as session:
            session.add(
                ChatMessage(
                    chat_id=negotiation.id,
                    hh_message_id=message.id,
                    author_type="employer",
                    text=message.text,
                    ai_sentiment=analysis.sentiment,
                    ai_intent=analysis.intent,
                )
            )
            if auto_response:
                session.add(
                    ChatMessage(
                        chat_id=negotiation.id,
                        author_type="applicant",
                        text=auto_response,
                        is_auto_response=True,
                    )
                )
            await session.execute(
                update(Negotiation)
                .where(Negotiation.id == negotiation.id)
                .values(**values)
            )
            await session.commit()

    async def history(self, chat_id: int, limit: int = 10) -> str:
        """Recent messages formatted for the classifier prompt."""
        async with self.session() as session:
            result = await session.execute(
                select(ChatMessage)
                .where(ChatMessage.chat_id == chat_id)
                .order_by(ChatMessage.id.desc())
                .limit(limit)
            )
            messages = list(reversed(result.scalars().all()))

        return "\n".join(
            f"{'Я' if m.author_type == 'applicant' else 'Работодатель'}: {m.text}"
            for m in messages
        )
