"""Injectable container holding the current AppState."""

import logging
from typing import Callable

from .actions import Action
from .reducer import AppState, reduce

logger = logging.getLogger(__name__)

Listener = Callable[[AppState, AppState], None]


class StateStore:
    """Owns one AppState and replaces it through ``reduce``.

    Components never mutate the state; they call ``dispatch`` and
    ``subscribe`` to hear about changes.
    """

    def __init__(self, initial: AppState | None = None) -> None:
        self._state = initial or AppState()
        self._listeners: list[Listener] = []

    @property
    def state(self) -> AppState:
        """The current state."""
        return self._state

    def dispatch(self, action: Action) -> AppState:
        """Apply an action and notify listeners if the state changed."""
        previous = self._state
        self._state = reduce(previous, action)

        if self._state is previous:
            logger.debug("Ignored %s", type(action).__name__)
            return self._state

        for listener in list(self._listeners):
            listener(previous, self._state)
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener. Returns a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe
