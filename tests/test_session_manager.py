"""Tests for HH.ru token lifecycle."""

from datetime import timedelta
from unittest.mock import AsyncMock, patch

import httpx
import pytest
from sqlalchemy import func, select

from jobpilot.core.exceptions import AuthError
from jobpilot.core.storage import utc_now
from jobpilot.models.token import Token
from jobpilot.services.session_manager import SessionManager


async def _add_token(session_factory, obtained_ago: timedelta, expires_in=3600):
    async with session_factory() as session:
        session.add(
            Token(
                access_token="old_access",
                refresh_token="old_refresh",
                expires_in=expires_in,
                obtained_at=utc_now() - obtained_ago,
            )
        )
        await session.commit()


async def _token_count(session_factory) -> int:
    async with session_factory() as session:
        result = await session.execute(select(func.count(Token.id)))
        return result.scalar_one()


class TestTokenModel:
    def test_is_expired_with_buffer(self):
        token = Token(
            access_token="a",
            refresh_token="r",
            expires_in=600,
            obtained_at=utc_now() - timedelta(seconds=400),
        )
        assert token.is_expired(buffer_seconds=300) is True
        assert token.is_expired(buffer_seconds=0) is False

    def test_expires_at(self):
        obtained = utc_now()
        token = Token(
            access_token="a", refresh_token="r", expires_in=60, obtained_at=obtained
        )
        assert token.expires_at == obtained + timedelta(seconds=60)


class TestGetValidToken:
    """Tests for SessionManager.get_valid_token."""

    @pytest.mark.asyncio
    async def test_no_token_raises(self, session_manager):
        with pytest.raises(AuthError):
            await session_manager.get_valid_token()

    @pytest.mark.asyncio
    async def test_fresh_token_returned_without_refresh(
        self, session_manager, valid_token
    ):
        with patch.object(
            SessionManager, "_request_refresh", new_callable=AsyncMock
        ) as refresh:
            token = await session_manager.get_valid_token()

        assert token == "access_123"
        refresh.assert_not_called()

    @pytest.mark.asyncio
    async def test_expiring_token_is_refreshed_and_appended(
        self, session_manager, session_factory
    ):
        # 4 minutes left, inside the 5 minute margin
        await _add_token(session_factory, timedelta(seconds=3600 - 240))

        with patch.object(
            SessionManager,
            "_request_refresh",
            new_callable=AsyncMock,
            return_value={
                "access_token": "new_access",
                "refresh_token": "new_refresh",
                "expires_in": 1209600,
            },
        ) as refresh:
            token = await session_manager.get_valid_token()

        assert token == "new_access"
        refresh.assert_awaited_once_with("old_refresh")
        assert await _token_count(session_factory) == 2
        latest = await session_manager.get_latest()
        assert latest.refresh_token == "new_refresh"

    @pytest.mark.asyncio
    async def test_refresh_rejected_raises_auth_error(
        self, session_manager, session_factory
    ):
        await _add_token(session_factory, timedelta(hours=2))
        with patch.object(
            SessionManager,
            "_request_refresh",
            new_callable=AsyncMock,
            side_effect=AuthError("rejected"),
        ):
            with pytest.raises(AuthError):
                await session_manager.get_valid_token()

        assert await _token_count(session_factory) == 1


class TestRequestRefresh:
    """Tests for the OAuth refresh request."""

    @pytest.mark.asyncio
    async def test_successful_refresh(self, session_factory):
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["url"] = str(request.url)
            captured["body"] = request.content.decode()
            return httpx.Response(
                200,
                json={
                    "access_token": "fresh",
                    "refresh_token": "fresh_refresh",
                    "expires_in": 1209600,
                },
            )

        manager = SessionManager(session_factory, transport=httpx.MockTransport(handler))
        data = await manager._request_refresh("old_refresh")

        assert data["access_token"] == "fresh"
        assert "obtained_at" in data
        assert captured["url"] == "https://hh.ru/oauth/token"
        assert "grant_type=refresh_token" in captured["body"]
        assert "refresh_token=old_refresh" in captured["body"]

    @pytest.mark.asyncio
    async def test_rejected_refresh(self, session_factory):
        transport = httpx.MockTransport(
            lambda request: httpx.Response(400, json={"error": "invalid_grant"})
        )
        manager = SessionManager(session_factory, transport=transport)

        with pytest.raises(AuthError):
            await manager._request_refresh("old_refresh")

    @pytest.mark.asyncio
    async def test_unreachable_endpoint(self, session_factory):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        manager = SessionManager(session_factory, transport=httpx.MockTransport(handler))

        with pytest.raises(AuthError):
            await manager._request_refresh("old_refresh")

    @pytest.mark.asyncio
    async def test_incomplete_token_pair(self, session_factory):
        transport = httpx.MockTransport(
            lambda request: httpx.Response(200, json={"access_token": "only"})
        )
        manager = SessionManager(session_factory, transport=transport)

        with pytest.raises(AuthError):
            await manager._request_refresh("old_refresh")
