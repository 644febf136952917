"""Tests for the reducer and the state container."""

import pytest

from til.state import (
    AppState,
    CloseForm,
    FactAdded,
    FactUpdated,
    FetchFailed,
    FetchStarted,
    FetchSucceeded,
    SetCategory,
    StateStore,
    ToggleForm,
    reduce,
)

from .factories import make_fact


class TestReduce:
    def test_initial_state(self):
        state = AppState()
        assert state.show_form is False
        assert state.facts == ()
        assert state.is_loading is False
        assert state.current_category == "all"
        assert state.generation == 0

    def test_set_category(self):
        state = reduce(AppState(), SetCategory("science"))
        assert state.current_category == "science"

    def test_toggle_form(self):
        state = reduce(AppState(), ToggleForm())
        assert state.show_form is True
        assert reduce(state, ToggleForm()).show_form is False

    def test_close_form(self):
        state = AppState(show_form=True)
        assert reduce(state, CloseForm()).show_form is False

    def test_fetch_started(self):
        state = reduce(AppState(), FetchStarted(3))
        assert state.is_loading is True
        assert state.generation == 3

    def test_fetch_succeeded_replaces_list(self):
        old = (make_fact(1), make_fact(2))
        new = (make_fact(3),)
        state = AppState(facts=old, is_loading=True, generation=1)

        state = reduce(state, FetchSucceeded(1, new))

        assert state.facts == new
        assert state.is_loading is False

    def test_stale_fetch_is_ignored(self):
        current = (make_fact(1),)
        state = AppState(facts=current, is_loading=True, generation=2)

        result = reduce(state, FetchSucceeded(1, (make_fact(9),)))

        assert result is state
        assert result.facts == current
        assert result.is_loading is True

    def test_fetch_failed_keeps_list(self):
        facts = (make_fact(1),)
        state = AppState(facts=facts, is_loading=True, generation=1)

        state = reduce(state, FetchFailed(1))

        assert state.facts == facts
        assert state.is_loading is False

    def test_stale_fetch_failure_is_ignored(self):
        state = AppState(is_loading=True, generation=2)
        assert reduce(state, FetchFailed(1)) is state

    def test_fact_added_appends_and_closes_form(self):
        state = AppState(facts=(make_fact(1),), show_form=True)
        new = make_fact(2)

        state = reduce(state, FactAdded(new))

        assert [f.id for f in state.facts] == [1, 2]
        assert state.facts[-1] == new
        assert state.show_form is False

    def test_fact_updated_replaces_by_id(self):
        facts = (make_fact(1), make_fact(2, interesting=4), make_fact(3))
        state = AppState(facts=facts)
        updated = make_fact(2, interesting=5)

        state = reduce(state, FactUpdated(updated))

        assert state.facts[0] is facts[0]
        assert state.facts[1] == updated
        assert state.facts[2] is facts[2]

    def test_fact_updated_unknown_id_changes_nothing(self):
        facts = (make_fact(1),)
        state = reduce(AppState(facts=facts), FactUpdated(make_fact(99)))
        assert state.facts == facts

    def test_unknown_action(self):
        with pytest.raises(TypeError, match="Unknown action"):
            reduce(AppState(), object())


class TestStateStore:
    def test_dispatch_replaces_state(self):
        store = StateStore()
        before = store.state

        after = store.dispatch(ToggleForm())

        assert store.state is after
        assert after is not before
        assert before.show_form is False

    def test_injected_initial_state(self):
        initial = AppState(current_category="news")
        store = StateStore(initial)
        assert store.state is initial

    def test_listener_receives_old_and_new(self):
        store = StateStore()
        seen = []
        store.subscribe(lambda old, new: seen.append((old.show_form, new.show_form)))

        store.dispatch(ToggleForm())

        assert seen == [(False, True)]

    def test_listener_not_called_for_ignored_action(self):
        store = StateStore(AppState(generation=2))
        seen = []
        store.subscribe(lambda old, new: seen.append(new))

        store.dispatch(FetchSucceeded(1, ()))

        assert seen == []

    def test_unsubscribe(self):
        store = StateStore()
        seen = []
        unsubscribe = store.subscribe(lambda old, new: seen.append(new))

        unsubscribe()
        store.dispatch(ToggleForm())

        assert seen == []
