"""
Slide views.

The controller drives a SlideView and never looks up document elements
itself. DocumentView implements the view over a BeautifulSoup document of
the presentation page, using the page's DOM hooks:

- #presentation-container   slide fragments are appended here
- #loading-indicator        hidden once loading completes
- #current-slide / #total-slides   1-based position counters
- #prev-btn / #next-btn     disabled at the deck boundaries; their value is the
                            index the control navigates to
- .slide / .active / .print-visible, and body.printing while printing

Missing hooks are tolerated; the corresponding update is skipped.
"""

from __future__ import annotations

from typing import Optional, Protocol

from bs4 import BeautifulSoup, Tag

SLIDE_CLASS = "slide"
ACTIVE_CLASS = "active"
PRINT_VISIBLE_CLASS = "print-visible"
PRINTING_CLASS = "printing"


class SlideView(Protocol):
    def insert_fragments(self, fragments: list[str]) -> None: ...
    def slide_ids(self) -> list[str]: ...
    def set_active(self, index: int) -> None: ...
    def set_counters(self, current: int, total: int) -> None: ...
    def set_controls_enabled(self, prev_enabled: bool, next_enabled: bool) -> None: ...
    def set_control_targets(self, prev_index: Optional[int], next_index: Optional[int]) -> None: ...
    def hide_loading(self) -> None: ...
    def show_loading_error(self, message: str) -> None: ...
    def set_print_mode(self, on: bool) -> None: ...


def _classes(el: Tag) -> list[str]:
    value = el.get("class") or []
    if isinstance(value, str):
        value = value.split()
    return list(value)


def add_class(el: Tag, name: str) -> None:
    classes = _classes(el)
    if name not in classes:
        classes.append(name)
    el["class"] = classes


def remove_class(el: Tag, name: str) -> None:
    classes = [c for c in _classes(el) if c != name]
    if classes:
        el["class"] = classes
    elif el.has_attr("class"):
        del el["class"]


def has_class(el: Tag, name: str) -> bool:
    return name in _classes(el)


class DocumentView:
    """SlideView over an HTML page parsed with BeautifulSoup."""

    def __init__(self, page_html: str) -> None:
        self.soup = BeautifulSoup(page_html, "html.parser")
        self._slides: list[Tag] = self._query_slides()

    @classmethod
    def from_template(cls, path) -> DocumentView:
        with open(path, encoding="utf-8") as f:
            return cls(f.read())

    # ── Lookups ──────────────────────────────────────────────────────

    def _by_id(self, element_id: str) -> Optional[Tag]:
        return self.soup.find(id=element_id)

    def _query_slides(self) -> list[Tag]:
        return self.soup.select(f".{SLIDE_CLASS}")

    @property
    def slides(self) -> list[Tag]:
        return list(self._slides)

    # ── Loading ──────────────────────────────────────────────────────

    def insert_fragments(self, fragments: list[str]) -> None:
        container = self._by_id("presentation-container")
        if container is None:
            raise LookupError("Page has no #presentation-container")
        parsed = BeautifulSoup("\n".join(fragments), "html.parser")
        for node in list(parsed.contents):
            container.append(node.extract())
        self._slides = self._query_slides()

    def slide_ids(self) -> list[str]:
        return [str(s.get("id") or "") for s in self._slides]

    def hide_loading(self) -> None:
        indicator = self._by_id("loading-indicator")
        if indicator is not None:
            indicator["style"] = "display: none;"

    def show_loading_error(self, message: str) -> None:
        indicator = self._by_id("loading-indicator")
        if indicator is None:
            return
        if indicator.has_attr("style"):
            del indicator["style"]
        indicator.clear()
        notice = self.soup.new_tag("div", attrs={"class": "loading-text"})
        notice.string = message
        indicator.append(notice)

    # ── Navigation display ───────────────────────────────────────────

    def set_active(self, index: int) -> None:
        for slide in self._slides:
            remove_class(slide, ACTIVE_CLASS)
        add_class(self._slides[index], ACTIVE_CLASS)

    def set_counters(self, current: int, total: int) -> None:
        for element_id, value in (("current-slide", current), ("total-slides", total)):
            el = self._by_id(element_id)
            if el is not None:
                el.string = str(value)

    def set_controls_enabled(self, prev_enabled: bool, next_enabled: bool) -> None:
        for element_id, enabled in (("prev-btn", prev_enabled), ("next-btn", next_enabled)):
            el = self._by_id(element_id)
            if el is None:
                continue
            if enabled:
                if el.has_attr("disabled"):
                    del el["disabled"]
            else:
                el["disabled"] = ""

    def set_control_targets(self, prev_index: Optional[int], next_index: Optional[int]) -> None:
        """Point each control at the slide it leads to; None clears the target."""
        for element_id, target in (("prev-btn", prev_index), ("next-btn", next_index)):
            el = self._by_id(element_id)
            if el is None:
                continue
            if target is None:
                if el.has_attr("value"):
                    del el["value"]
            else:
                el["value"] = str(target)

    def set_print_mode(self, on: bool) -> None:
        body = self.soup.body
        toggle = add_class if on else remove_class
        if body is not None:
            toggle(body, PRINTING_CLASS)
        for slide in self._slides:
            toggle(slide, PRINT_VISIBLE_CLASS)

    # ── Inspection ───────────────────────────────────────────────────

    def active_indices(self) -> list[int]:
        return [i for i, s in enumerate(self._slides) if has_class(s, ACTIVE_CLASS)]

    def visible_indices(self) -> list[int]:
        """Slides a stylesheet would show: active or forced print-visible."""
        return [
            i for i, s in enumerate(self._slides)
            if has_class(s, ACTIVE_CLASS) or has_class(s, PRINT_VISIBLE_CLASS)
        ]

    def control_disabled(self, element_id: str) -> Optional[bool]:
        el = self._by_id(element_id)
        return None if el is None else el.has_attr("disabled")

    def control_target(self, element_id: str) -> Optional[str]:
        el = self._by_id(element_id)
        return None if el is None else el.get("value")

    def text_of(self, element_id: str) -> Optional[str]:
        el = self._by_id(element_id)
        return None if el is None else el.get_text(strip=True)

    def render(self) -> str:
        return str(self.soup)
