import asyncio
import logging
from typing import Any

import httpx
from pydantic import ValidationError

from jobpilot.core.config import settings
from jobpilot.core.exceptions import AuthError, PlatformError
from jobpilot.schemas.hh import (
    NegotiationMessage,
    NegotiationSummary,
    PostingDetail,
    PostingSummary,
    SearchFilters,
)

logger = logging.getLogger(__name__)

PAYLOAD_ERRORS = (KeyError, TypeError, AttributeError, ValidationError)

DEFAULT_HEADERS = {
    "Accept": "application/json",
    "Accept-Language": "ru-RU,ru;q=0.9,en;q=0.8",
}


class HHClient:
    """HeadHunter API client.

    Every request asks the session manager for a valid token. Failures are
    reported once: there is no retry inside the client, the scheduler simply
    tries again on a later tick.
    """

    API_BASE = "https://api.hh.ru"

    REQUEST_DELAY = 0.1
    PER_PAGE = 100
    MAX_PAGES = 20

    def __init__(
        self,
        session_manager,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.session_manager = session_manager
        self.client = httpx.AsyncClient(
            base_url=self.API_BASE,
            timeout=httpx.Timeout(30.0),
            limits=httpx.Limits(max_connections=10, max_keepalive_connections=5),
            headers={**DEFAULT_HEADERS, "HH-User-Agent": settings.hh_user_agent},
            transport=transport,
        )
        self._last_request_time = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def _rate_limit(self):
        """Keep a minimum spacing between requests."""
        loop = asyncio.get_running_loop()
        if self._last_request_time:
            elapsed = loop.time() - self._last_request_time
            if elapsed < self.REQUEST_DELAY:
                await asyncio.sleep(self.REQUEST_DELAY - elapsed)
        self._last_request_time = loop.time()

    async def _send(self, method: str, endpoint: str, **kwargs) -> httpx.Response:
        """Send an authenticated request and translate failures."""
        token = await self.session_manager.get_valid_token()
        headers = kwargs.pop("headers", {})
        headers["Authorization"] = f"Bearer {token}"

        await self._rate_limit()

        try:
            response = await self.client.request(
                method, endpoint, headers=headers, **kwargs
            )
        except httpx.HTTPError as e:
            logger.error(f"HH request {method} {endpoint} failed: {e!s}")
            raise PlatformError(503, f"Network error: {e!s}") from e

        response_text = response.text.lower()
        if "ddos-guard" in response_text or "checking your browser" in response_text:
            logger.error(
                f"Request blocked by DDoS protection. Endpoint: {endpoint}, "
                f"Status: {response.status_code}"
            )
            raise PlatformError(
                response.status_code,
                "Request blocked by DDoS protection",
                {"status_code": response.status_code},
            )

        if response.status_code == 401:
            raise AuthError("HH.ru rejected the access token")

        if response.status_code >= 400:
            try:
                error_data = response.json()
            except ValueError:
                error_data = {"message": response.text[:500]}
            logger.error(
                f"HH API error: {response.status_code} - {error_data}, "
                f"Endpoint: {endpoint}, Method: {method}"
            )
            raise PlatformError(response.status_code, str(error_data), error_data)

        return response

    async def _request(self, method: str, endpoint: str, **kwargs) -> dict:
        """Send a request and decode the JSON body."""
        response = await self._send(method, endpoint, **kwargs)
        if not response.text.strip():
            return {}
        try:
            data = response.json()
        except ValueError as e:
            logger.error(
                f"Failed to parse JSON response: {e}, "
                f"Response text: {response.text[:500]}"
            )
            raise PlatformError(
                response.status_code,
                f"Invalid JSON response: {e!s}",
                {"response_text": response.text[:500]},
            ) from e
        if not isinstance(data, dict):
            raise PlatformError(
                502,
                f"Malformed payload from {endpoint}: expected an object",
                {"response_text": response.text[:500]},
            )
        return data

    async def _drain(self, endpoint: str, params: dict[str, Any]) -> list[dict]:
        """Collect items from every page of a paginated listing."""
        items: list[dict] = []
        page = 0
        while True:
            data = await self._request(
                "GET",
                endpoint,
                params={**params, "page": page, "per_page": self.PER_PAGE},
            )
            items.extend(data.get("items") or [])

            pages = data.get("pages", 1)
            if not isinstance(pages, int):
                pages = 1
            page += 1
            if page >= pages:
                break
            if page >= self.MAX_PAGES:
                logger.warning(f"Reached page limit when listing {endpoint}")
                break
        return items

    @staticmethod
    def _parse(parser, items, what: str) -> list:
        """Turn raw items into models; a broken item fails the whole payload."""
        try:
            return [parser(item) for item in items]
        except PAYLOAD_ERRORS as e:
            logger.error(f"Malformed {what} payload: {e!r}")
            raise PlatformError(502, f"Malformed {what} payload: {e!r}") from e

    async def search_postings(
        self, query: str, filters: SearchFilters | None = None
    ) -> list[PostingSummary]:
        """Search vacancies, newest first, across all result pages."""
        params: dict[str, Any] = {"text": query, "order_by": "publication_time"}
        if filters:
            params.update(filters.to_params())

        items = await self._drain("/vacancies", params)
        logger.info(f"Search '{query}' returned {len(items)} vacancies")
        return self._parse(PostingSummary.from_api, items, "search")

    async def get_posting(self, posting_id: str) -> PostingDetail:
        """Get full vacancy details."""
        data = await self._request("GET", f"/vacancies/{posting_id}")
        return self._parse(PostingDetail.from_api, [data], "vacancy")[0]

    async def get_my_resumes(self) -> list[dict]:
        """Get user's resumes."""
        data = await self._request("GET", "/resumes/mine")
        return data.get("items") or []

    async def submit_application(
        self, posting_id: str, cover_letter: str, resume_id: str
    ) -> str:
        """Apply to a vacancy and return the negotiation id."""
        form_data = {
            "vacancy_id": posting_id,
            "resume_id": resume_id,
            "message": cover_letter.strip(),
        }
        response = await self._send(
            "POST",
            "/negotiations",
            data=form_data,
            headers={"Content-Type": "application/x-www-form-urlencoded"},
        )
        logger.info(f"Successfully applied to vacancy {posting_id}")

        if response.status_code in (201, 303):
            location = response.headers.get("Location", "")
            negotiation_id = location.rstrip("/").split("/")[-1]
            if negotiation_id:
                return negotiation_id

        try:
            data = response.json()
        except ValueError:
            data = None
        if isinstance(data, dict) and data.get("id"):
            return str(data["id"])
        return f"neg_{posting_id}"

    async def list_negotiations(self) -> list[NegotiationSummary]:
        """All of the user's negotiations."""
        items = await self._drain("/negotiations", {})
        return self._parse(NegotiationSummary.from_api, items, "negotiations")

    async def list_messages(self, negotiation_id: str) -> list[NegotiationMessage]:
        """Messages of a negotiation, oldest first."""
        data = await self._request(
            "GET", f"/negotiations/{negotiation_id}/messages"
        )
        return self._parse(
            NegotiationMessage.from_api, data.get("items") or [], "messages"
        )

    async def send_message(self, negotiation_id: str, text: str) -> None:
        """Post a message into a negotiation."""
        await self._send(
            "POST",
            f"/negotiations/{negotiation_id}/messages",
            data={"message": text},
        )
        logger.info(f"Message sent to negotiation {negotiation_id}")

    async def close(self):
        """Close the HTTP client."""
        await self.client.aclose()
