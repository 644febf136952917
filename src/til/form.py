"""Fact submission form."""

import logging
from typing import Awaitable, Callable

from .facts import Fact
from .logging import get_logger
from .state import Action, FactAdded
from .store import FactStore, StoreError
from .validation import MAX_TEXT_LENGTH, validate_fact_input

logger = logging.getLogger(__name__)

Alert = Callable[[str], Awaitable[None]]
Dispatch = Callable[[Action], object]

SUBMIT_FAILED_MESSAGE = "There was a problem adding your fact"


class FormBusy(Exception):
    """The form is uploading; inputs and the post button are disabled."""


class FormInvalid(Exception):
    """The input did not pass client-side validation."""

    def __init__(self, errors: list[str]) -> None:
        super().__init__("; ".join(errors))
        self.errors = errors


class FactForm:
    """Text, source and category inputs plus the upload flag."""

    def __init__(self) -> None:
        self.text = ""
        self.source = ""
        self.category = ""
        self.is_uploading = False

    @property
    def remaining(self) -> int:
        """Characters left before the text limit (negative when over)."""
        return MAX_TEXT_LENGTH - len(self.text)

    @property
    def errors(self) -> list[str]:
        return validate_fact_input(self.text, self.source, self.category)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def _check_enabled(self) -> None:
        if self.is_uploading:
            raise FormBusy("Your fact is still being posted")

    def set_text(self, text: str) -> None:
        self._check_enabled()
        self.text = text

    def set_source(self, source: str) -> None:
        self._check_enabled()
        self.source = source.strip()

    def set_category(self, category: str) -> None:
        self._check_enabled()
        self.category = category

    def reset(self) -> None:
        """Clear the three inputs."""
        self.text = ""
        self.source = ""
        self.category = ""

    async def submit(
        self,
        store: FactStore,
        dispatch: Dispatch,
        alert: Alert,
        chat_id: str | None = None,
    ) -> Fact | None:
        """Validate, insert, and hand the created fact to the reducer.

        On success the inputs are cleared and FactAdded closes the form. On a
        store failure the user is alerted and the inputs are kept so the post
        can be retried.

        Raises:
            FormBusy: A previous submission is still uploading.
            FormInvalid: The input failed validation; nothing was sent.
        """
        self._check_enabled()

        errors = self.errors
        if errors:
            raise FormInvalid(errors)

        self.is_uploading = True
        try:
            fact = await store.insert(self.text, self.source, self.category)
        except StoreError as e:
            logger.warning("Submitting fact failed: %s", e)
            get_logger().log_submit(self.category, chat_id=chat_id, error=str(e))
            await alert(SUBMIT_FAILED_MESSAGE)
            return None
        finally:
            self.is_uploading = False

        dispatch(FactAdded(fact))
        self.reset()
        get_logger().log_submit(fact.category, chat_id=chat_id, fact_id=fact.id)
        return fact
