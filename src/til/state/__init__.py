"""Application state, actions and the reducer."""

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
from .container import StateStore
from .reducer import AppState, reduce

__all__ = [
    "Action",
    "AppState",
    "CloseForm",
    "FactAdded",
    "FactUpdated",
    "FetchFailed",
    "FetchStarted",
    "FetchSucceeded",
    "SetCategory",
    "StateStore",
    "ToggleForm",
    "reduce",
]
