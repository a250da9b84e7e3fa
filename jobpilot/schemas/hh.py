"""Typed views over HH.ru API payloads."""

import re
from typing import Any, Literal

from pydantic import BaseModel, Field


class Salary(BaseModel):
    """Salary range as published on HH.ru."""

    salary_from: int | None = None
    salary_to: int | None = None
    currency: str | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any] | None) -> "Salary | None":
        if not data:
            return None
        return cls(
            salary_from=data.get("from"),
            salary_to=data.get("to"),
            currency=data.get("currency"),
        )

    def describe(self) -> str:
        """Human readable range used in prompts."""
        currency = self.currency or "RUR"
        if self.salary_from and self.salary_to:
            return f"{self.salary_from} - {self.salary_to} {currency}"
        if self.salary_from:
            return f"от {self.salary_from} {currency}"
        if self.salary_to:
            return f"до {self.salary_to} {currency}"
        return "не указана"


class SearchFilters(BaseModel):
    """API-level filters for vacancy search."""

    area_ids: list[str] = Field(default_factory=list)
    salary: int | None = Field(default=None, description="Salary floor")
    experience: str | None = Field(
        default=None,
        description="noExperience, between1And3, between3And6, moreThan6",
    )
    employment: str | None = Field(
        default=None, description="full, part, project, volunteer, probation"
    )
    schedule: str | None = Field(
        default=None, description="fullDay, shift, flexible, remote, flyInFlyOut"
    )
    only_with_salary: bool = False

    def to_params(self) -> dict[str, Any]:
        params: dict[str, Any] = {}
        if self.area_ids:
            params["area"] = self.area_ids
        if self.salary:
            params["salary"] = self.salary
        if self.experience:
            params["experience"] = self.experience
        if self.employment:
            params["employment"] = self.employment
        if self.schedule:
            params["schedule"] = self.schedule
        if self.only_with_salary:
            params["only_with_salary"] = "true"
        return params


class PostingSummary(BaseModel):
    """Vacancy as returned by the search endpoint."""

    id: str
    name: str
    employer_name: str = "Unknown"
    salary: Salary | None = None
    url: str = ""

    @classmethod
    def from_api(cls, item: dict[str, Any]) -> "PostingSummary":
        return cls(
            id=str(item["id"]),
            name=item.get("name") or "",
            employer_name=(item.get("employer") or {}).get("name") or "Unknown",
            salary=Salary.from_api(item.get("salary")),
            url=item.get("alternate_url") or "",
        )


class PostingDetail(PostingSummary):
    """Full vacancy with description."""

    description: str = ""
    key_skills: list[str] = Field(default_factory=list)

    @classmethod
    def from_api(cls, item: dict[str, Any]) -> "PostingDetail":
        summary = PostingSummary.from_api(item)
        description = item.get("description") or ""
        if "<" in description:
            description = re.sub(r"<[^>]+>", " ", description)
            description = re.sub(r"\s+", " ", description).strip()
        return cls(
            **summary.model_dump(),
            description=description,
            key_skills=[
                skill.get("name", "") for skill in item.get("key_skills") or []
            ],
        )


class NegotiationSummary(BaseModel):
    """Negotiation (application thread) state."""

    id: str
    state: str
    vacancy_id: str
    has_updates: bool = False

    @classmethod
    def from_api(cls, item: dict[str, Any]) -> "NegotiationSummary":
        return cls(
            id=str(item["id"]),
            state=(item.get("state") or {}).get("id", ""),
            vacancy_id=str((item.get("vacancy") or {}).get("id", "")),
            has_updates=bool(item.get("has_updates", False)),
        )


class NegotiationMessage(BaseModel):
    """Message inside a negotiation."""

    id: str
    text: str = ""
    author: Literal["applicant", "employer"]

    @classmethod
    def from_api(cls, item: dict[str, Any]) -> "NegotiationMessage":
        participant = (item.get("author") or {}).get("participant_type")
        return cls(
            id=str(item["id"]),
            text=item.get("text") or "",
            author="applicant" if participant == "applicant" else "employer",
        )
