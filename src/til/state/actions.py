"""Intents sent from the UI components to the reducer."""

from dataclasses import dataclass

from ..facts.models import Fact


@dataclass(frozen=True)
class SetCategory:
    category: str


@dataclass(frozen=True)
class ToggleForm:
    pass


@dataclass(frozen=True)
class CloseForm:
    pass


@dataclass(frozen=True)
class FetchStarted:
    """A refresh began; ``generation`` is the token its result must carry."""

    generation: int


@dataclass(frozen=True)
class FetchSucceeded:
    generation: int
    facts: tuple[Fact, ...]


@dataclass(frozen=True)
class FetchFailed:
    generation: int


@dataclass(frozen=True)
class FactAdded:
    fact: Fact


@dataclass(frozen=True)
class FactUpdated:
    fact: Fact


Action = (
    SetCategory
    | ToggleForm
    | CloseForm
    | FetchStarted
    | FetchSucceeded
    | FetchFailed
    | FactAdded
    | FactUpdated
)
