"""Tests for view rendering."""

from til.facts import VoteType
from til.form import FactForm
from til.state import AppState
from til.views import (
    DISPUTED_TAG,
    EMPTY_LIST_MESSAGE,
    LOADING_MESSAGE,
    category_filters,
    category_tag,
    render_fact,
    render_fact_list,
    render_form,
    render_header,
)

from .factories import make_fact


class TestHeader:
    def test_share_label(self):
        view = render_header(AppState())
        assert "Today I Learned" in view.text
        assert view.buttons[0][0].label == "Share a fact"

    def test_close_label(self):
        view = render_header(AppState(show_form=True))
        assert view.buttons[0][0].label == "Close"


class TestCategoryFilters:
    def test_all_plus_registry(self):
        view = category_filters()
        data = [button.data for row in view.buttons for button in row]
        assert data[0] == "cat:all"
        assert len(data) == 9
        assert "cat:technology" in data

    def test_rows(self):
        view = category_filters(per_row=4)
        assert [len(row) for row in view.buttons] == [4, 4, 1]


class TestCategoryTag:
    def test_known(self):
        assert category_tag("technology") == "🟦 #technology"

    def test_unknown_has_no_color(self):
        assert category_tag("sports") == "#sports"


class TestRenderFact:
    def test_plain_fact(self):
        fact = make_fact(4, interesting=3, mind_blowing=1, false=2)
        view = render_fact(fact)

        assert view.text.startswith(fact.text)
        assert fact.source in view.text
        assert DISPUTED_TAG not in view.text
        labels = [b.label for b in view.buttons[0]]
        assert labels == ["👍 3", "🤯 1", "⛔️ 2"]
        assert view.buttons[0][2].data == f"vote:4:{VoteType.FALSE.value}"

    def test_disputed_fact(self):
        view = render_fact(make_fact(1, interesting=1, false=3))
        assert view.text.startswith(DISPUTED_TAG)

    def test_updating_disables_all_votes(self):
        view = render_fact(make_fact(1), is_updating=True)
        assert all(button.disabled for button in view.buttons[0])


class TestRenderFactList:
    def test_loading(self):
        views = render_fact_list(AppState(is_loading=True, facts=(make_fact(1),)))
        assert [v.text for v in views] == [LOADING_MESSAGE]

    def test_empty(self):
        views = render_fact_list(AppState())
        assert [v.text for v in views] == [EMPTY_LIST_MESSAGE]

    def test_one_view_per_fact_plus_count(self):
        facts = (make_fact(1), make_fact(2), make_fact(3))
        views = render_fact_list(AppState(facts=facts))

        assert len(views) == 4
        assert views[-1].text == "There are 3 facts in the database. Add your own"


class TestRenderForm:
    def test_counter_and_prompt(self):
        form = FactForm()
        form.set_text("Short fact")
        view = render_form(form)

        assert "(190)" in view.text
        assert "source" in view.text.lower()

    def test_uploading_disables_controls(self):
        form = FactForm()
        form.is_uploading = True
        view = render_form(form)

        assert "Posting..." in view.text
        assert all(button.disabled for row in view.buttons for button in row)

    def test_category_shown_uppercase(self):
        form = FactForm()
        form.set_category("science")
        assert "Category: SCIENCE" in render_form(form).text
