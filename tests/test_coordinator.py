"""Tests for the root coordinator."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from til.coordinator import LOAD_FAILED_MESSAGE, Coordinator
from til.facts import VoteType
from til.state import AppState, StateStore
from til.store import StoreError

from .factories import make_fact


@pytest.fixture
def alert() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def coordinator(mock_store: AsyncMock, alert: AsyncMock) -> Coordinator:
    return Coordinator(mock_store, alert=alert, chat_id="test-chat")


@pytest.mark.asyncio
class TestRefresh:
    async def test_mount_fetches_all(self, coordinator: Coordinator, mock_store: AsyncMock):
        facts = [make_fact(1, interesting=3), make_fact(2, interesting=1)]
        mock_store.select.return_value = facts

        await coordinator.mount()

        mock_store.select.assert_awaited_once_with(category=None)
        assert coordinator.facts == tuple(facts)
        assert coordinator.state.is_loading is False

    async def test_loading_while_in_flight(self, coordinator: Coordinator, mock_store: AsyncMock):
        seen = []

        async def select(category=None):
            seen.append(coordinator.state.is_loading)
            return []

        mock_store.select.side_effect = select

        await coordinator.refresh()

        assert seen == [True]
        assert coordinator.state.is_loading is False

    async def test_failure_keeps_previous_list(
        self, coordinator: Coordinator, mock_store: AsyncMock, alert: AsyncMock
    ):
        facts = [make_fact(1)]
        mock_store.select.return_value = facts
        await coordinator.mount()

        mock_store.select.side_effect = StoreError("select", "HTTP 500")
        await coordinator.refresh()

        assert coordinator.facts == tuple(facts)
        assert coordinator.state.is_loading is False
        alert.assert_awaited_once_with(LOAD_FAILED_MESSAGE)

    async def test_unexpected_error_clears_loading(
        self, coordinator: Coordinator, mock_store: AsyncMock, alert: AsyncMock
    ):
        facts = [make_fact(1)]
        mock_store.select.return_value = facts
        await coordinator.mount()

        mock_store.select.side_effect = RuntimeError("boom")
        with pytest.raises(RuntimeError):
            await coordinator.refresh()

        assert coordinator.state.is_loading is False
        assert coordinator.facts == tuple(facts)
        alert.assert_not_awaited()

    async def test_uses_injected_state(self, mock_store: AsyncMock):
        state = StateStore(AppState(current_category="news"))
        mock_store.select.return_value = [make_fact(5, category="news")]
        coordinator = Coordinator(mock_store, state=state)

        await coordinator.refresh()

        mock_store.select.assert_awaited_once_with(category="news")
        assert state.state.facts == coordinator.facts
        assert coordinator.state_store is state

    async def test_default_alert_does_not_raise(self, mock_store: AsyncMock):
        mock_store.select.side_effect = StoreError("select", "down")
        coordinator = Coordinator(mock_store)

        await coordinator.refresh()

        assert coordinator.state.is_loading is False


@pytest.mark.asyncio
class TestSetCategory:
    async def test_triggers_one_scoped_fetch(self, coordinator: Coordinator, mock_store: AsyncMock):
        tech = [make_fact(3, category="technology", interesting=9), make_fact(4, category="technology")]
        mock_store.select.return_value = tech

        changed = await coordinator.set_category("technology")

        assert changed is True
        mock_store.select.assert_awaited_once_with(category="technology")
        assert coordinator.state.current_category == "technology"
        assert coordinator.facts == tuple(tech)
        assert all(f.category == "technology" for f in coordinator.facts)

    async def test_all_is_unscoped(self, coordinator: Coordinator, mock_store: AsyncMock):
        mock_store.select.return_value = []
        await coordinator.set_category("science")
        mock_store.select.reset_mock()

        await coordinator.set_category("all")

        mock_store.select.assert_awaited_once_with(category=None)

    async def test_same_category_does_not_fetch(self, coordinator: Coordinator, mock_store: AsyncMock):
        changed = await coordinator.set_category("all")

        assert changed is False
        mock_store.select.assert_not_awaited()

    async def test_unknown_category(self, coordinator: Coordinator, mock_store: AsyncMock):
        with pytest.raises(ValueError, match="Unknown category"):
            await coordinator.set_category("sports")
        mock_store.select.assert_not_awaited()

    async def test_superseded_fetch_is_discarded(
        self, coordinator: Coordinator, mock_store: AsyncMock
    ):
        science_gate = asyncio.Event()
        science = [make_fact(1, category="science")]
        history = [make_fact(2, category="history")]

        async def select(category=None):
            if category == "science":
                await science_gate.wait()
                return science
            return history

        mock_store.select.side_effect = select

        slow = asyncio.create_task(coordinator.set_category("science"))
        await asyncio.sleep(0)
        await coordinator.set_category("history")
        assert coordinator.facts == tuple(history)

        science_gate.set()
        await slow

        assert coordinator.state.current_category == "history"
        assert coordinator.facts == tuple(history)
        assert coordinator.state.is_loading is False

    async def test_superseded_failure_is_silent(
        self, coordinator: Coordinator, mock_store: AsyncMock, alert: AsyncMock
    ):
        science_gate = asyncio.Event()
        history_gate = asyncio.Event()

        async def select(category=None):
            if category == "science":
                await science_gate.wait()
                raise StoreError("select", "down")
            await history_gate.wait()
            return [make_fact(2, category="history")]

        mock_store.select.side_effect = select

        older = asyncio.create_task(coordinator.set_category("science"))
        await asyncio.sleep(0)
        newer = asyncio.create_task(coordinator.set_category("history"))
        await asyncio.sleep(0)

        science_gate.set()
        await older
        assert coordinator.state.is_loading is True
        alert.assert_not_awaited()

        history_gate.set()
        await newer
        assert coordinator.state.is_loading is False
        assert [f.id for f in coordinator.facts] == [2]


class TestToggleForm:
    def test_toggle(self, coordinator: Coordinator):
        assert coordinator.toggle_form() is True
        assert coordinator.state.show_form is True
        assert coordinator.toggle_form() is False


@pytest.mark.asyncio
class TestSubmit:
    async def test_successful_submission(self, coordinator: Coordinator, mock_store: AsyncMock):
        mock_store.select.return_value = [make_fact(1)]
        await coordinator.mount()
        coordinator.toggle_form()

        created = make_fact(2, category="science", text="Bananas are berries.")
        mock_store.insert.return_value = created
        coordinator.form.set_text("Bananas are berries.")
        coordinator.form.set_source("https://example.com/2")
        coordinator.form.set_category("science")

        fact = await coordinator.submit()

        assert fact == created
        mock_store.insert.assert_awaited_once_with(
            "Bananas are berries.", "https://example.com/2", "science"
        )
        assert len(coordinator.facts) == 2
        new = coordinator.facts[-1]
        assert (new.text, new.source, new.category) == (
            "Bananas are berries.",
            "https://example.com/2",
            "science",
        )
        assert (new.votes_interesting, new.votes_mind_blowing, new.votes_false) == (0, 0, 0)
        assert coordinator.form.text == ""
        assert coordinator.form.source == ""
        assert coordinator.form.category == ""
        assert coordinator.state.show_form is False


@pytest.mark.asyncio
class TestVote:
    async def test_vote_updates_only_that_fact(self, coordinator: Coordinator, mock_store: AsyncMock):
        facts = [make_fact(1, interesting=2), make_fact(2, interesting=1)]
        mock_store.select.return_value = facts
        await coordinator.mount()
        mock_store.update_vote.return_value = make_fact(2, interesting=2)

        fact = await coordinator.vote(2, VoteType.INTERESTING)

        mock_store.update_vote.assert_awaited_once_with(2, VoteType.INTERESTING, 2)
        assert fact.votes_interesting == 2
        assert coordinator.facts[0] == facts[0]
        assert coordinator.facts[1].votes_interesting == 2

    async def test_three_false_votes_dispute_a_fact(
        self, coordinator: Coordinator, mock_store: AsyncMock
    ):
        mock_store.select.return_value = [make_fact(1, interesting=1)]
        await coordinator.mount()

        async def update_vote(fact_id, vote_type, value):
            return make_fact(fact_id, interesting=1, false=value)

        mock_store.update_vote.side_effect = update_vote

        for _ in range(3):
            await coordinator.vote(1, VoteType.FALSE)

        fact = coordinator.get_fact(1)
        assert fact.votes_false == 3
        assert fact.is_disputed is True

    async def test_vote_on_missing_fact(
        self, coordinator: Coordinator, mock_store: AsyncMock, alert: AsyncMock
    ):
        result = await coordinator.vote(99, VoteType.FALSE)

        assert result is None
        mock_store.update_vote.assert_not_awaited()
        alert.assert_awaited_once()

    async def test_item_is_reused(self, coordinator: Coordinator):
        assert coordinator.item(1) is coordinator.item(1)
        assert coordinator.item(1) is not coordinator.item(2)

    async def test_refresh_drops_items_for_removed_facts(
        self, coordinator: Coordinator, mock_store: AsyncMock
    ):
        mock_store.select.return_value = [make_fact(1), make_fact(2)]
        await coordinator.mount()
        first = coordinator.item(1)
        coordinator.item(2)

        mock_store.select.return_value = [make_fact(1)]
        await coordinator.refresh()

        assert coordinator.item(1) is first
        assert 2 not in coordinator._items

    async def test_refresh_keeps_item_while_voting(
        self, coordinator: Coordinator, mock_store: AsyncMock
    ):
        mock_store.select.return_value = [make_fact(1)]
        await coordinator.mount()
        busy = coordinator.item(1)
        busy.is_updating = True

        mock_store.select.return_value = [make_fact(2)]
        await coordinator.refresh()

        assert coordinator.item(1) is busy
