"""Per-fact vote flow."""

import logging
from typing import Awaitable, Callable

from .facts import Fact, VoteType
from .logging import get_logger
from .state import Action, FactUpdated
from .store import FactStore, StoreError

logger = logging.getLogger(__name__)

Alert = Callable[[str], Awaitable[None]]
Dispatch = Callable[[Action], object]

VOTE_FAILED_MESSAGE = "There was a problem recording your vote"


class FactItem:
    """Vote controls for one fact.

    ``is_updating`` disables the three vote buttons of this item while its
    request is in flight. Other items are unaffected.
    """

    BUSY_MESSAGE = "⏳ Your last vote on this fact is still being counted."

    def __init__(self, fact_id: int) -> None:
        self.fact_id = fact_id
        self.is_updating = False

    async def vote(
        self,
        fact: Fact,
        vote_type: VoteType,
        store: FactStore,
        dispatch: Dispatch,
        alert: Alert,
        chat_id: str | None = None,
    ) -> Fact | None:
        """Ask the store to add one vote and merge the returned row.

        Returns:
            The updated fact, or None if the item was busy or the store failed.
        """
        if self.is_updating:
            await alert(self.BUSY_MESSAGE)
            return None

        self.is_updating = True
        try:
            updated = await store.update_vote(fact.id, vote_type, fact.votes(vote_type) + 1)
        except StoreError as e:
            logger.warning("Vote on fact %s failed: %s", fact.id, e)
            get_logger().log_vote(fact.id, vote_type.value, chat_id=chat_id, error=str(e))
            await alert(VOTE_FAILED_MESSAGE)
            return None
        finally:
            self.is_updating = False

        dispatch(FactUpdated(updated))
        get_logger().log_vote(fact.id, vote_type.value, chat_id=chat_id)
        return updated
