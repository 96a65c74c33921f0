"""
Tests for deck.document.DocumentView and deck.host.PageHost.
"""

from __future__ import annotations

import logging

from deck.document import DocumentView, add_class, has_class, remove_class
from deck.host import PageHost

from conftest import PAGE_HTML, slide_fragment


def loaded_view(n: int = 3) -> DocumentView:
    view = DocumentView(PAGE_HTML)
    view.insert_fragments([slide_fragment(f"slide-{i}") for i in range(n)])
    return view


class TestDocumentView:

    def test_insert_appends_in_order(self):
        view = loaded_view(3)
        assert view.slide_ids() == ["slide-0", "slide-1", "slide-2"]
        container = view.soup.find(id="presentation-container")
        assert len(container.select(".slide")) == 3

    def test_set_active_clears_others(self):
        view = loaded_view(3)
        view.set_active(0)
        view.set_active(2)
        assert view.active_indices() == [2]

    def test_counters_and_controls(self):
        view = loaded_view(3)
        view.set_counters(2, 3)
        view.set_controls_enabled(prev_enabled=True, next_enabled=False)
        assert view.text_of("current-slide") == "2"
        assert view.text_of("total-slides") == "3"
        assert view.control_disabled("prev-btn") is False
        assert view.control_disabled("next-btn") is True
        view.set_controls_enabled(prev_enabled=True, next_enabled=True)
        assert view.control_disabled("next-btn") is False

    def test_control_targets_set_and_cleared(self):
        view = loaded_view(3)
        view.set_control_targets(0, 2)
        assert view.control_target("prev-btn") == "0"
        assert view.control_target("next-btn") == "2"
        view.set_control_targets(None, 2)
        assert view.control_target("prev-btn") is None
        assert not view.soup.find(id="prev-btn").has_attr("value")

    def test_print_mode_toggles_every_slide(self):
        view = loaded_view(3)
        view.set_active(1)
        view.set_print_mode(True)
        assert view.visible_indices() == [0, 1, 2]
        view.set_print_mode(False)
        assert view.visible_indices() == [1]
        assert "printing" not in (view.soup.body.get("class") or [])

    def test_missing_hooks_are_tolerated(self):
        view = DocumentView('<div id="presentation-container"></div>')
        view.insert_fragments([slide_fragment("a")])
        view.set_counters(1, 1)
        view.set_controls_enabled(False, False)
        view.hide_loading()
        view.set_print_mode(True)
        assert view.control_disabled("next-btn") is None

    def test_loading_error_replaces_indicator_text(self):
        view = DocumentView(PAGE_HTML)
        view.hide_loading()
        view.show_loading_error("broken")
        indicator = view.soup.find(id="loading-indicator")
        assert indicator.get_text(strip=True) == "broken"
        assert not indicator.has_attr("style")

    def test_render_round_trips_markup(self):
        view = loaded_view(2)
        view.set_active(1)
        html = view.render()
        again = DocumentView(html)
        assert again.active_indices() == [1]


class TestClassHelpers:

    def test_add_remove(self):
        view = DocumentView('<p id="x" class="a"></p>')
        el = view.soup.find(id="x")
        add_class(el, "b")
        add_class(el, "b")
        assert el["class"] == ["a", "b"]
        remove_class(el, "a")
        remove_class(el, "b")
        assert not el.has_attr("class")
        assert not has_class(el, "a")


class TestPageHost:

    def test_hash_normalized_and_change_dispatched(self):
        host = PageHost()
        seen = []
        host.add_event_listener("hashchange", seen.append)
        host.location_hash = "slide-2"
        host.location_hash = "#slide-2"
        assert host.location_hash == "#slide-2"
        assert seen == ["#slide-2"]

    def test_targeted_listeners(self):
        host = PageHost()
        clicks = []
        host.add_event_listener("click", lambda _e: clicks.append("next"), target="next-btn")
        host.click("prev-btn")
        host.click("next-btn")
        assert clicks == ["next"]

    def test_failing_listener_does_not_stop_others(self, caplog):
        host = PageHost()
        seen = []

        def bad(_e):
            raise ValueError("nope")

        host.add_event_listener("keydown", bad)
        host.add_event_listener("keydown", lambda e: seen.append(e.key))
        with caplog.at_level(logging.ERROR):
            host.press("ArrowRight")
        assert seen == ["ArrowRight"]
        assert "keydown" in caplog.text

    def test_remove_listener(self):
        host = PageHost()
        seen = []
        host.add_event_listener("afterprint", seen.append)
        host.remove_event_listener("afterprint", seen.append)
        host.print_document()
        assert seen == []
