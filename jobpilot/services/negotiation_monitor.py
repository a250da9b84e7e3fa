"""Watches open negotiations and answers employer messages."""

import logging

from jobpilot.core.exceptions import OracleError, PlatformError
from jobpilot.models.negotiation import Negotiation
from jobpilot.schemas.candidate import Contacts
from jobpilot.schemas.hh import NegotiationMessage
from jobpilot.services.activity_ledger import ActivityLedger
from jobpilot.services.candidate import CandidateProfile
from jobpilot.services.hh_client import HHClient
from jobpilot.services.negotiation_store import NegotiationStore
from jobpilot.services.oracle import EvaluationOracle, fallback_analysis

logger = logging.getLogger(__name__)

HANDOFF_FALLBACK = "Кстати, для быстрой связи удобнее Telegram: {telegram}"


class NegotiationMonitor:
    """One pass over every negotiation whose vacancy is still open.

    Employer messages are stored only after their automatic answer (if any)
    went out, so a message whose answer failed is picked up again on the
    next pass.
    """

    def __init__(
        self,
        hh_client: HHClient,
        oracle: EvaluationOracle,
        negotiations: NegotiationStore,
        candidate: CandidateProfile,
        ledger: ActivityLedger,
    ):
        self.hh_client = hh_client
        self.oracle = oracle
        self.negotiations = negotiations
        self.candidate = candidate
        self.ledger = ledger

    async def run(self) -> int:
        """Process new messages. Returns how many employer messages were stored."""
        open_negotiations = await self.negotiations.list_open()
        if not open_negotiations:
            return 0

        profile = await self.candidate.resume_text()
        contacts = await self.candidate.contacts()

        processed = 0
        for negotiation in open_negotiations:
            try:
                processed += await self._process(negotiation, profile, contacts)
            except PlatformError as e:
                logger.warning(
                    f"Skipping negotiation {negotiation.hh_chat_id}: {e.message}"
                )
        if processed:
            logger.info(f"Negotiation monitor stored {processed} employer messages")
        return processed

    async def _process(
        self, negotiation: Negotiation, profile: str, contacts: Contacts
    ) -> int:
        messages = await self.hh_client.list_messages(negotiation.hh_chat_id)
        handed_off = negotiation.telegram_invited
        stored = 0

        for message in messages:
            if await self.negotiations.has_message(message.id):
                continue

            if message.author == "applicant":
                await self.negotiations.add_message(
                    negotiation.id, "applicant", message.text, hh_message_id=message.id
                )
                await self.ledger.log(
                    "chat",
                    f"Моё сообщение в чате: {negotiation.vacancy.title}",
                    vacancy_id=negotiation.vacancy_id,
                )
                continue

            outcome = await self._handle_employer_message(
                negotiation, message, profile, contacts, handed_off
            )
            if outcome is None:
                continue
            stored += 1
            handed_off = handed_off or outcome

        return stored

    async def _handle_employer_message(
        self,
        negotiation: Negotiation,
        message: NegotiationMessage,
        profile: str,
        contacts: Contacts,
        handed_off: bool,
    ) -> bool | None:
        """Classify, answer and persist one employer message.

        Returns whether the thread was handed off, or None when the message
        was left for the next pass.
        """
        history = await self.negotiations.history(negotiation.id)
        try:
            analysis = await self.oracle.classify_message(message.text, history)
        except OracleError as e:
            logger.warning(f"Falling back to heuristic classification: {e.message}")
            analysis = fallback_analysis(message.text)

        title = negotiation.vacancy.title
        reply = None
        hand_off = False
        try:
            if analysis.is_bot:
                reply = await self.oracle.draft_reply(message.text, profile, title)
            elif analysis.should_hand_off and not handed_off:
                answer = await self.oracle.draft_reply(message.text, profile, title)
                try:
                    invite = await self.oracle.draft_handoff_invite(
                        message.text, contacts
                    )
                except OracleError:
                    invite = HANDOFF_FALLBACK.format(telegram=contacts.telegram)
                reply = f"{answer}\n\n{invite}"
                hand_off = True

            if reply:
                await self.hh_client.send_message(negotiation.hh_chat_id, reply)
        except (OracleError, PlatformError) as e:
            logger.warning(
                f"Automatic answer in {negotiation.hh_chat_id} failed, "
                f"will retry message {message.id}: {e.message}"
            )
            return None

        await self.negotiations.record_employer_message(
            negotiation, message, analysis, auto_response=reply, handed_off=hand_off
        )

        await self.ledger.log(
            "chat",
            f"Новое сообщение от {negotiation.employer_name or 'работодателя'}",
            vacancy_id=negotiation.vacancy_id,
            details={
                "is_bot": analysis.is_bot,
                "intent": analysis.intent,
                "sentiment": analysis.sentiment,
            },
        )
        if hand_off:
            await self.ledger.log(
                "invite",
                f"Приглашение в Telegram отправлено: {title}",
                vacancy_id=negotiation.vacancy_id,
            )
        elif reply:
            await self.ledger.log(
                "chat",
                f"Автоответ боту: {title}",
                vacancy_id=negotiation.vacancy_id,
            )
        await self.ledger.bump_daily(
            messages_received=1, messages_sent=1 if reply else 0
        )
        return hand_off
