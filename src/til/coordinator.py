"""Root coordinator: owns the state container and talks to the store."""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Awaitable, Callable

from .categories import ALL_CATEGORIES, is_valid_filter
from .facts import Fact, VoteType
from .form import FactForm
from .item import FactItem
from .logging import get_logger
from .state import (
    AppState,
    FetchFailed,
    FetchStarted,
    FetchSucceeded,
    SetCategory,
    StateStore,
    ToggleForm,
)
from .store import StoreError

if TYPE_CHECKING:
    from .store import FactStore

logger = logging.getLogger(__name__)

Alert = Callable[[str], Awaitable[None]]

LOAD_FAILED_MESSAGE = "There was a problem loading data"


async def _no_alert(message: str) -> None:
    logger.warning("Unhandled alert: %s", message)


class Coordinator:
    """Owns one session's canonical fact list.

    The form, the filter panel and the fact items never write state
    themselves: they send actions through ``dispatch`` and the reducer
    applies them.
    """

    def __init__(
        self,
        store: FactStore,
        alert: Alert | None = None,
        state: StateStore | None = None,
        chat_id: str | None = None,
    ) -> None:
        self.store = store
        self.alert = alert or _no_alert
        self.state_store = state or StateStore()
        self.chat_id = chat_id
        self.form = FactForm()
        self._items: dict[int, FactItem] = {}
        self.state_store.subscribe(self._on_state_change)

    @property
    def state(self) -> AppState:
        return self.state_store.state

    @property
    def facts(self) -> tuple[Fact, ...]:
        return self.state.facts

    def dispatch(self, action) -> AppState:
        return self.state_store.dispatch(action)

    def _on_state_change(self, old: AppState, new: AppState) -> None:
        if new.facts is not old.facts:
            self._prune_items(new.facts)

    def _prune_items(self, facts: tuple[Fact, ...]) -> None:
        """Drop idle vote controls for facts no longer in the list."""
        ids = {fact.id for fact in facts}
        for fact_id in list(self._items):
            if fact_id not in ids and not self._items[fact_id].is_updating:
                del self._items[fact_id]

    async def mount(self) -> None:
        """Initial load with the default filter."""
        await self.refresh()

    async def set_category(self, category: str) -> bool:
        """Select a filter; refreshes when it differs from the current one.

        Returns:
            True when a refresh was triggered.
        """
        if not is_valid_filter(category):
            raise ValueError(f"Unknown category: {category}")

        if category == self.state.current_category:
            return False

        self.dispatch(SetCategory(category))
        await self.refresh()
        return True

    async def refresh(self) -> None:
        """Fetch the facts for the current filter and replace the list.

        A newer refresh started while this one awaits the store makes its
        result stale; the reducer drops it. The loading flag is cleared
        however the fetch ends.
        """
        generation = self.state.generation + 1
        category = self.state.current_category
        self.dispatch(FetchStarted(generation))

        start = time.monotonic()
        settled = False
        try:
            facts = await self.store.select(
                category=None if category == ALL_CATEGORIES else category
            )
            stale = generation != self.state.generation
            self.dispatch(FetchSucceeded(generation, tuple(facts)))
            settled = True
        except StoreError as e:
            logger.warning("Loading facts for %s failed: %s", category, e)
            get_logger().log_store_error("select", str(e), chat_id=self.chat_id)
            self.dispatch(FetchFailed(generation))
            settled = True
            if generation == self.state.generation:
                await self.alert(LOAD_FAILED_MESSAGE)
            return
        finally:
            if not settled:
                self.dispatch(FetchFailed(generation))

        get_logger().log_fetch(
            category,
            len(facts),
            chat_id=self.chat_id,
            duration_ms=(time.monotonic() - start) * 1000,
            stale=stale,
        )

    def toggle_form(self) -> bool:
        """Open or close the submission form. Returns the new visibility."""
        return self.dispatch(ToggleForm()).show_form

    async def submit(self) -> Fact | None:
        """Post the form's current input."""
        return await self.form.submit(
            self.store, self.dispatch, self.alert, chat_id=self.chat_id
        )

    def get_fact(self, fact_id: int) -> Fact | None:
        for fact in self.facts:
            if fact.id == fact_id:
                return fact
        return None

    def item(self, fact_id: int) -> FactItem:
        """The vote controls for a fact, created on first use."""
        if fact_id not in self._items:
            self._items[fact_id] = FactItem(fact_id)
        return self._items[fact_id]

    async def vote(self, fact_id: int, vote_type: VoteType) -> Fact | None:
        """Add one vote of ``vote_type`` to a fact in the current list."""
        fact = self.get_fact(fact_id)
        if fact is None:
            await self.alert(f"Fact {fact_id} is not in the current list")
            return None

        return await self.item(fact_id).vote(
            fact, vote_type, self.store, self.dispatch, self.alert, chat_id=self.chat_id
        )
