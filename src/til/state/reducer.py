"""The single writer of application state."""

from dataclasses import dataclass, replace

from ..categories import ALL_CATEGORIES
from ..facts.models import Fact
from .actions import (
    Action,
    CloseForm,
    FactAdded,
    FactUpdated,
    FetchFailed,
    FetchStarted,
    FetchSucceeded,
    SetCategory,
    ToggleForm,
)


@dataclass(frozen=True)
class AppState:
    """Everything the UI renders from.

    Attributes:
        show_form: Whether the submission form is open.
        facts: The canonical list, in the order the store returned it.
        is_loading: A refresh for ``generation`` is in flight.
        current_category: Registry name or "all".
        generation: Token of the most recent refresh.
    """

    show_form: bool = False
    facts: tuple[Fact, ...] = ()
    is_loading: bool = False
    current_category: str = ALL_CATEGORIES
    generation: int = 0


def reduce(state: AppState, action: Action) -> AppState:
    """Return the state that results from applying ``action``.

    Fetch results are applied only when their generation matches the latest
    refresh; anything older was superseded by a filter change and is dropped.
    """
    if isinstance(action, SetCategory):
        return replace(state, current_category=action.category)

    if isinstance(action, ToggleForm):
        return replace(state, show_form=not state.show_form)

    if isinstance(action, CloseForm):
        return replace(state, show_form=False)

    if isinstance(action, FetchStarted):
        return replace(state, is_loading=True, generation=action.generation)

    if isinstance(action, FetchSucceeded):
        if action.generation != state.generation:
            return state
        return replace(state, facts=tuple(action.facts), is_loading=False)

    if isinstance(action, FetchFailed):
        if action.generation != state.generation:
            return state
        return replace(state, is_loading=False)

    if isinstance(action, FactAdded):
        return replace(state, facts=state.facts + (action.fact,), show_form=False)

    if isinstance(action, FactUpdated):
        updated = action.fact
        return replace(
            state,
            facts=tuple(updated if f.id == updated.id else f for f in state.facts),
        )

    raise TypeError(f"Unknown action: {action!r}")
