"""Async client for the remote facts table (Supabase / PostgREST)."""

import logging
from typing import Any

import httpx

from ..config import StoreConfig
from ..facts import Fact, VoteType

logger = logging.getLogger(__name__)

ORDER_COLUMN = VoteType.INTERESTING.value


class StoreError(Exception):
    """A store operation failed (network, HTTP status or bad payload)."""

    def __init__(self, operation: str, message: str) -> None:
        super().__init__(f"{operation} failed: {message}")
        self.operation = operation


class FactStore:
    """Thin wrapper over the PostgREST endpoints for the facts table.

    Every call returns domain objects or raises StoreError; the caller
    decides how to tell the user.
    """

    def __init__(
        self,
        config: StoreConfig,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        if not config.url:
            raise ValueError("SUPABASE_URL not set")
        if not config.key:
            raise ValueError("SUPABASE_KEY not set")

        self.config = config
        self._client = client or httpx.AsyncClient(timeout=config.timeout)
        self._owns_client = client is None

    @property
    def table_url(self) -> str:
        return f"{self.config.rest_url}/{self.config.table}"

    def _headers(self, *, returning: bool = False) -> dict[str, str]:
        headers = {
            "apikey": self.config.key,
            "Authorization": f"Bearer {self.config.key}",
            "Accept": "application/json",
        }
        if returning:
            headers["Prefer"] = "return=representation"
        return headers

    async def _request(
        self,
        operation: str,
        method: str,
        params: dict[str, str],
        *,
        json: Any = None,
        returning: bool = False,
    ) -> list[dict[str, Any]]:
        """Send one request and return the decoded list of rows."""
        try:
            response = await self._client.request(
                method,
                self.table_url,
                params=params,
                json=json,
                headers=self._headers(returning=returning),
            )
            response.raise_for_status()
            rows = response.json()
        except httpx.TimeoutException as e:
            raise StoreError(operation, f"timed out after {self.config.timeout}s") from e
        except httpx.HTTPStatusError as e:
            raise StoreError(operation, f"HTTP {e.response.status_code}") from e
        except httpx.RequestError as e:
            raise StoreError(operation, f"request failed: {e}") from e
        except ValueError as e:
            raise StoreError(operation, f"invalid JSON: {e}") from e

        if not isinstance(rows, list):
            raise StoreError(operation, "expected a list of rows")
        return rows

    def _parse(self, operation: str, rows: list[dict[str, Any]]) -> list[Fact]:
        try:
            return [Fact.from_row(row) for row in rows]
        except (KeyError, TypeError) as e:
            raise StoreError(operation, f"malformed row: {e}") from e

    async def select(
        self,
        category: str | None = None,
        limit: int | None = None,
    ) -> list[Fact]:
        """Fetch facts, most interesting first.

        Args:
            category: Only return facts in this category; all when None.
            limit: Row cap, defaults to the configured fetch limit.
        """
        params = {
            "select": "*",
            "order": f"{ORDER_COLUMN}.desc",
            "limit": str(limit or self.config.fetch_limit),
        }
        if category is not None:
            params["category"] = f"eq.{category}"

        rows = await self._request("select", "GET", params)
        logger.debug("Fetched %d facts (category=%s)", len(rows), category)
        return self._parse("select", rows)

    async def insert(self, text: str, source: str, category: str) -> Fact:
        """Insert a fact and return the row the store created."""
        params = {"select": "*", "limit": str(self.config.fetch_limit)}
        payload = [{"text": text, "source": source, "category": category}]

        rows = await self._request(
            "insert", "POST", params, json=payload, returning=True
        )
        facts = self._parse("insert", rows)
        if not facts:
            raise StoreError("insert", "no row returned")
        return facts[0]

    async def update_vote(self, fact_id: int, vote_type: VoteType, value: int) -> Fact:
        """Set one vote column on a fact and return the updated row."""
        params = {"id": f"eq.{fact_id}", "select": "*"}
        payload = {vote_type.value: value}

        rows = await self._request(
            "update", "PATCH", params, json=payload, returning=True
        )
        facts = self._parse("update", rows)
        if not facts:
            raise StoreError("update", f"fact {fact_id} not found")
        return facts[0]

    async def close(self) -> None:
        """Close the HTTP client if this store created it."""
        if self._owns_client:
            await self._client.aclose()
