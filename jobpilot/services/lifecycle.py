"""Vacancy status lifecycle."""

from enum import StrEnum


class VacancyStatus(StrEnum):
    FOUND = "found"
    SKIPPED = "skipped"
    APPLIED = "applied"
    VIEWED = "viewed"
    INVITED = "invited"
    REJECTED = "rejected"


RANK: dict[str, int] = {
    VacancyStatus.FOUND: 0,
    VacancyStatus.SKIPPED: 0,
    VacancyStatus.APPLIED: 1,
    VacancyStatus.VIEWED: 2,
    VacancyStatus.INVITED: 3,
    VacancyStatus.REJECTED: 3,
}

# Statuses whose negotiation threads are still worth watching
OPEN_STATUSES = (
    VacancyStatus.APPLIED,
    VacancyStatus.VIEWED,
    VacancyStatus.INVITED,
)


def can_advance(current: str, new: str) -> bool:
    """Only strictly higher ranks are accepted.

    invited and rejected share the top rank, so whichever arrives first wins.
    """
    return RANK.get(new, 0) > RANK.get(current, 0)


def status_from_negotiation_state(state_id: str) -> VacancyStatus:
    """Map an HH.ru negotiation state id to a vacancy status."""
    if state_id == "invitation":
        return VacancyStatus.INVITED
    if state_id == "discard":
        return VacancyStatus.REJECTED
    if state_id == "response":
        return VacancyStatus.VIEWED
    return VacancyStatus.APPLIED
