"""Rendering of the header, filters, fact list and form.

Views are plain functions of state. They return text plus rows of
``Button``s; the Telegram bot turns buttons into inline keyboards and the
CLI prints them as hints.
"""

from dataclasses import dataclass

from .categories import ALL_CATEGORIES, CATEGORIES, COLOR_EMOJI, get_color
from .facts import Fact, VoteType
from .form import FactForm
from .state import AppState

APP_TITLE = "Today I Learned"
LOADING_MESSAGE = "Loading..."
EMPTY_LIST_MESSAGE = "No facts for this category yet! Create the first one 😎"
DISPUTED_TAG = "[⛔️ DISPUTED]"


@dataclass(frozen=True)
class Button:
    """A control: label shown to the user and the intent it sends."""

    label: str
    data: str
    disabled: bool = False


@dataclass(frozen=True)
class View:
    """Rendered text plus button rows."""

    text: str
    buttons: tuple[tuple[Button, ...], ...] = ()


def category_tag(category: str) -> str:
    """Colored tag for a category; bare name when it isn't registered."""
    color = get_color(category)
    if color is None:
        return f"#{category}"
    return f"{COLOR_EMOJI.get(color, '⬜')} #{category}"


def render_header(state: AppState) -> View:
    """Title and the share/close toggle."""
    label = "Close" if state.show_form else "Share a fact"
    return View(
        text=f"📚 {APP_TITLE}",
        buttons=((Button(label, "form:toggle"),),),
    )


def category_filters(per_row: int = 3) -> View:
    """One button per registry entry plus "All"."""
    buttons = [Button("All", f"cat:{ALL_CATEGORIES}")]
    for category in CATEGORIES:
        emoji = COLOR_EMOJI.get(category.color, "")
        buttons.append(Button(f"{emoji} {category.name}".strip(), f"cat:{category.name}"))

    rows = tuple(
        tuple(buttons[i : i + per_row]) for i in range(0, len(buttons), per_row)
    )
    return View(text="Filter by category:", buttons=rows)


def vote_buttons(fact: Fact, disabled: bool = False) -> tuple[Button, ...]:
    return tuple(
        Button(
            f"{vote_type.emoji} {fact.votes(vote_type)}",
            f"vote:{fact.id}:{vote_type.value}",
            disabled=disabled,
        )
        for vote_type in VoteType
    )


def render_fact(fact: Fact, is_updating: bool = False) -> View:
    """One fact with its disputed flag, source, tag and vote buttons."""
    text = fact.text
    if fact.is_disputed:
        text = f"{DISPUTED_TAG} {text}"

    lines = [
        text,
        f"(Source) {fact.source}",
        category_tag(fact.category),
    ]
    return View(text="\n".join(lines), buttons=(vote_buttons(fact, disabled=is_updating),))


def render_count(facts: tuple[Fact, ...] | list[Fact]) -> str:
    return f"There are {len(facts)} facts in the database. Add your own"


def render_fact_list(state: AppState) -> list[View]:
    """Loader, empty message, or one view per fact followed by the count."""
    if state.is_loading:
        return [View(text=LOADING_MESSAGE)]

    if not state.facts:
        return [View(text=EMPTY_LIST_MESSAGE)]

    views = [render_fact(fact) for fact in state.facts]
    views.append(View(text=render_count(state.facts)))
    return views


def render_form(form: FactForm) -> View:
    """Current input of the submission form and its controls."""
    disabled = form.is_uploading
    lines = [
        "✍️ Share a fact with the world...",
        f"Text: {form.text or '-'} ({form.remaining})",
        f"Source: {form.source or '-'}",
        f"Category: {form.category.upper() if form.category else 'Choose category:'}",
    ]
    if form.is_uploading:
        lines.append("Posting...")
    elif not form.text:
        lines.append("Send the fact as a message.")
    elif not form.source:
        lines.append("Now send a trustworthy source link.")

    category_row = tuple(
        Button(category.name.upper(), f"form:cat:{category.name}", disabled=disabled)
        for category in CATEGORIES
    )
    rows = (
        category_row[:4],
        category_row[4:],
        (
            Button("Post", "form:post", disabled=disabled),
            Button("Close", "form:close", disabled=disabled),
        ),
    )
    return View(text="\n".join(lines), buttons=rows)
