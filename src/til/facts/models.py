"""Data models for shared facts."""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class VoteType(Enum):
    """The three vote tallies, named as the store's columns."""

    INTERESTING = "votesInteresting"
    MIND_BLOWING = "votesMindBlowing"
    FALSE = "votesFalse"

    @property
    def emoji(self) -> str:
        return _VOTE_EMOJI[self]

    @classmethod
    def parse(cls, value: str) -> "VoteType":
        """Accept a column name or a short alias ("interesting", "mind", "false")."""
        key = value.strip()
        for vote_type in cls:
            if key == vote_type.value:
                return vote_type
        alias = key.lower().replace("-", "_")
        if alias in _ALIASES:
            return _ALIASES[alias]
        raise ValueError(f"Unknown vote type: {value}")


_VOTE_EMOJI = {
    VoteType.INTERESTING: "👍",
    VoteType.MIND_BLOWING: "🤯",
    VoteType.FALSE: "⛔️",
}

_ALIASES = {
    "interesting": VoteType.INTERESTING,
    "mind": VoteType.MIND_BLOWING,
    "mind_blowing": VoteType.MIND_BLOWING,
    "mindblowing": VoteType.MIND_BLOWING,
    "false": VoteType.FALSE,
}


@dataclass(frozen=True)
class Fact:
    """A fact shared by a user.

    Attributes:
        id: Store-assigned identifier.
        text: The statement itself (at most 200 characters).
        source: Link backing the statement.
        category: One of the registry's category names.
        votes_interesting: Count of 👍 votes.
        votes_mind_blowing: Count of 🤯 votes.
        votes_false: Count of ⛔️ votes.
        created_at: ISO timestamp set by the store, if returned.
    """

    id: int
    text: str
    source: str
    category: str
    votes_interesting: int = 0
    votes_mind_blowing: int = 0
    votes_false: int = 0
    created_at: str | None = None

    @property
    def is_disputed(self) -> bool:
        """More false votes than interesting and mind-blowing combined."""
        return self.votes_interesting + self.votes_mind_blowing < self.votes_false

    def votes(self, vote_type: VoteType) -> int:
        """Current tally for one vote type."""
        if vote_type is VoteType.INTERESTING:
            return self.votes_interesting
        if vote_type is VoteType.MIND_BLOWING:
            return self.votes_mind_blowing
        return self.votes_false

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Fact":
        """Create from a row returned by the store."""
        return cls(
            id=row["id"],
            text=row["text"],
            source=row["source"],
            category=row["category"],
            votes_interesting=row.get(VoteType.INTERESTING.value) or 0,
            votes_mind_blowing=row.get(VoteType.MIND_BLOWING.value) or 0,
            votes_false=row.get(VoteType.FALSE.value) or 0,
            created_at=row.get("created_at"),
        )
