"""Pytest configuration and fixtures."""

import os
from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

# Set test environment variables before importing jobpilot modules
os.environ.setdefault("HH_CLIENT_ID", "test_client_id")
os.environ.setdefault("HH_CLIENT_SECRET", "test_client_secret")
os.environ["LLM_PROVIDER"] = "ollama"
os.environ["OLLAMA_BASE_URL"] = "http://localhost:11434"
os.environ["OLLAMA_MODEL"] = "qwen3:14b"
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test.db")
os.environ.setdefault("SCHEDULER_ENABLED", "false")
os.environ["APPLY_DELAY_SECONDS"] = "0"
os.environ["QUERY_DELAY_SECONDS"] = "0"

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from jobpilot.core.storage import init_models, utc_now  # noqa: E402
from jobpilot.models.token import Token  # noqa: E402
from jobpilot.schemas.candidate import Contacts  # noqa: E402
from jobpilot.schemas.hh import PostingDetail, PostingSummary  # noqa: E402
from jobpilot.schemas.oracle import MessageAnalysis, VacancyEvaluation  # noqa: E402
from jobpilot.services.activity_ledger import ActivityLedger  # noqa: E402
from jobpilot.services.candidate import CandidateProfile  # noqa: E402
from jobpilot.services.negotiation_store import NegotiationStore  # noqa: E402
from jobpilot.services.search_tags import SearchTagStore  # noqa: E402
from jobpilot.services.session_manager import SessionManager  # noqa: E402
from jobpilot.services.vacancy_store import VacancyStore  # noqa: E402


@pytest.fixture
async def db_engine():
    """Fresh in-memory database per test."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await init_models(bind=engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def vacancy_store(session_factory):
    return VacancyStore(session_factory)


@pytest.fixture
def negotiation_store(session_factory):
    return NegotiationStore(session_factory)


@pytest.fixture
def tag_store(session_factory):
    return SearchTagStore(session_factory)


@pytest.fixture
def candidate(session_factory):
    return CandidateProfile(session_factory)


@pytest.fixture
def ledger(session_factory):
    return ActivityLedger(session_factory)


@pytest.fixture
def session_manager(session_factory):
    return SessionManager(session_factory)


@pytest.fixture
async def valid_token(session_factory):
    """A token that is far from expiry."""
    async with session_factory() as session:
        token = Token(
            access_token="access_123",
            refresh_token="refresh_123",
            expires_in=1209600,
            obtained_at=utc_now() - timedelta(hours=1),
        )
        session.add(token)
        await session.commit()
        return token


@pytest.fixture
def sample_vacancy():
    """Vacancy as returned by GET /vacancies/{id}."""
    return {
        "id": "12345",
        "name": "Python Developer",
        "employer": {"name": "Test Company", "id": "100"},
        "description": "<p>We are looking for a <b>Python</b> developer.</p>",
        "key_skills": [{"name": "Python"}, {"name": "FastAPI"}],
        "salary": {"from": 200000, "to": 300000, "currency": "RUR"},
        "alternate_url": "https://hh.ru/vacancy/12345",
    }


@pytest.fixture
def sample_detail(sample_vacancy):
    return PostingDetail.from_api(sample_vacancy)


@pytest.fixture
def sample_summary(sample_vacancy):
    return PostingSummary.from_api(sample_vacancy)


@pytest.fixture
def contacts():
    return Contacts(telegram="https://t.me/candidate", email="candidate@example.com")


@pytest.fixture
def good_evaluation():
    return VacancyEvaluation(
        score=85,
        recommendation="apply",
        priority=5,
        match_reasons=["Python", "FastAPI"],
        concerns=[],
        salary_assessment="В рынке",
    )


@pytest.fixture
def mock_hh_client():
    """Mock HH client for testing."""
    client = MagicMock()
    client.search_postings = AsyncMock(return_value=[])
    client.get_posting = AsyncMock()
    client.get_my_resumes = AsyncMock(return_value=[{"id": "resume_1"}])
    client.submit_application = AsyncMock(return_value="neg_1")
    client.list_negotiations = AsyncMock(return_value=[])
    client.list_messages = AsyncMock(return_value=[])
    client.send_message = AsyncMock()
    client.close = AsyncMock()
    return client


@pytest.fixture
def mock_oracle(good_evaluation):
    """Mock evaluation oracle for testing."""
    oracle = MagicMock()
    oracle.evaluate = AsyncMock(return_value=good_evaluation)
    oracle.write_cover_letter = AsyncMock(return_value="Сопроводительное письмо")
    oracle.classify_message = AsyncMock(return_value=MessageAnalysis())
    oracle.draft_reply = AsyncMock(return_value="Спасибо, готов ответить")
    oracle.draft_intro = AsyncMock(return_value="Буду рад обсудить вакансию")
    oracle.draft_handoff_invite = AsyncMock(return_value="Напишите мне в Telegram")
    oracle.generate_search_tags = AsyncMock()
    return oracle
