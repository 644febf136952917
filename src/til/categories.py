"""Category registry: the fixed topic buckets and their display colors."""

from dataclasses import dataclass

ALL_CATEGORIES = "all"


@dataclass(frozen=True)
class Category:
    """A named topic bucket."""

    name: str
    color: str


CATEGORIES: tuple[Category, ...] = (
    Category("technology", "#3b82f6"),
    Category("science", "#16a34a"),
    Category("finance", "#ef4444"),
    Category("society", "#eab308"),
    Category("entertainment", "#db2777"),
    Category("health", "#14b8a6"),
    Category("history", "#f97316"),
    Category("news", "#8b5cf6"),
)

# Terminals and chat clients can't paint a hex color, so each registry
# color maps to the closest colored square emoji.
COLOR_EMOJI: dict[str, str] = {
    "#3b82f6": "🟦",
    "#16a34a": "🟩",
    "#ef4444": "🟥",
    "#eab308": "🟨",
    "#db2777": "🟪",
    "#14b8a6": "🟩",
    "#f97316": "🟧",
    "#8b5cf6": "🟪",
}


def category_names() -> list[str]:
    """Registry names in display order."""
    return [category.name for category in CATEGORIES]


def get_category(name: str) -> Category | None:
    """Look up a category by name, None when it isn't registered."""
    for category in CATEGORIES:
        if category.name == name:
            return category
    return None


def get_color(name: str) -> str | None:
    """Display color for a category name, None when unknown."""
    category = get_category(name)
    return category.color if category else None


def is_valid_filter(name: str) -> bool:
    """True for any registry name or the synthetic "all" filter."""
    return name == ALL_CATEGORIES or get_category(name) is not None
