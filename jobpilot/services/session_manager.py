"""HH.ru OAuth token lifecycle."""

import logging

import httpx
from sqlalchemy import select

from jobpilot.core.config import settings
from jobpilot.core.exceptions import AuthError
from jobpilot.core.storage import Store, utc_now
from jobpilot.models.token import Token

logger = logging.getLogger(__name__)


class SessionManager(Store):
    """Hands out a valid access token, refreshing it when close to expiry."""

    TOKEN_URL = "https://hh.ru/oauth/token"
    REFRESH_MARGIN_SECONDS = 300

    def __init__(
        self,
        session_factory=None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(session_factory)
        self._transport = transport

    async def get_latest(self) -> Token | None:
        """Get the most recent token."""
        async with self.session() as session:
            result = await session.execute(
                select(Token).order_by(Token.id.desc()).limit(1)
            )
            return result.scalar_one_or_none()

    async def save_token(self, token_data: dict) -> Token:
        """Append a token pair to the history."""
        async with self.session() as session:
            tok = Token(
                access_token=token_data["access_token"],
                refresh_token=token_data["refresh_token"],
                expires_in=int(token_data["expires_in"]),
                obtained_at=token_data.get("obtained_at") or utc_now(),
            )
            session.add(tok)
            await session.commit()
            await session.refresh(tok)
            return tok

    async def get_valid_token(self) -> str:
        """Return an access token valid for at least the safety margin."""
        token = await self.get_latest()
        if token is None:
            raise AuthError("No HH.ru token found. Please authorize first.")

        if not token.is_expired(buffer_seconds=self.REFRESH_MARGIN_SECONDS):
            return token.access_token

        logger.info("Refreshing HH token...")
        token_data = await self._request_refresh(token.refresh_token)
        new_token = await self.save_token(token_data)
        logger.info(f"HH token refreshed, valid until {new_token.expires_at}")
        return new_token.access_token

    async def _request_refresh(self, refresh_token: str) -> dict:
        """Exchange the refresh token for a new token pair."""
        data = {
            "grant_type": "refresh_token",
            "refresh_token": refresh_token,
            "client_id": settings.hh_client_id,
            "client_secret": settings.hh_client_secret,
        }

        async with httpx.AsyncClient(
            timeout=30.0, transport=self._transport
        ) as client:
            try:
                response = await client.post(self.TOKEN_URL, data=data)
                response.raise_for_status()
                token_data = response.json()
            except httpx.HTTPStatusError as e:
                logger.error(f"Token refresh failed: {e.response.text[:500]}")
                raise AuthError(
                    f"Token refresh rejected ({e.response.status_code}). "
                    "Please re-authenticate."
                ) from e
            except (httpx.RequestError, ValueError) as e:
                logger.error(f"Token refresh failed: {e}")
                raise AuthError(f"Token refresh failed: {e}") from e

        if not token_data.get("access_token") or not token_data.get("refresh_token"):
            raise AuthError("Token refresh returned an incomplete token pair")
        token_data.setdefault("expires_in", 1209600)
        token_data["obtained_at"] = utc_now()
        return token_data
