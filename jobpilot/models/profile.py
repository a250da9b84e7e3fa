"""Portfolio tables owned by the admin UI. The pipeline only reads them."""

from datetime import date

from sqlalchemy import Date, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from jobpilot.core.storage import Base


class PortfolioAbout(Base):
    __tablename__ = "portfolio_about"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")


class PortfolioExperience(Base):
    __tablename__ = "portfolio_experience"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    company: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    date_from: Mapped[date | None] = mapped_column(Date, nullable=True)


class PortfolioSkill(Base):
    __tablename__ = "portfolio_skills"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)


class PortfolioContact(Base):
    __tablename__ = "portfolio_contacts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # telegram / email / github ...
    type: Mapped[str] = mapped_column(String(50), nullable=False)
    value: Mapped[str] = mapped_column(String(255), nullable=False)
