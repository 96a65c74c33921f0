"""
Tests for PDF assembly and the export page sequence.

The browser is replaced by FakePage, which records the calls the export
makes and returns canned screenshots and printed pages.
"""

from __future__ import annotations

import io

import pytest
from PIL import Image
from pypdf import PdfReader, PdfWriter

from deck.config import PAGE_HEIGHT_IN, PAGE_WIDTH_IN
from deck.errors import ExportError
from webapp.export import (
    COUNT_SLIDES_JS,
    HIDE_NAVIGATION_JS,
    READY_JS,
    SHOW_ALL_JS,
    SHOW_ONLY_JS,
    export_pdf,
    run_strategy,
    viewer_url,
)
from webapp.pdf import fit_to_page, images_to_pdf, merge_pdfs, page_size_px


def png_bytes(size=(200, 100), color="navy") -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", size, color).save(buf, "PNG")
    return buf.getvalue()


def pdf_bytes(pages: int = 1) -> bytes:
    writer = PdfWriter()
    for _ in range(pages):
        writer.add_blank_page(width=792, height=612)
    buf = io.BytesIO()
    writer.write(buf)
    return buf.getvalue()


class FakePage:
    def __init__(self, total: int = 3) -> None:
        self.total = total
        self.calls: list[tuple] = []

    def goto(self, url, **kwargs):
        self.calls.append(("goto", url))

    def wait_for_function(self, expression, **kwargs):
        self.calls.append(("wait_for_function", expression))

    def wait_for_timeout(self, ms):
        self.calls.append(("wait", ms))

    def evaluate(self, expression, arg=None):
        self.calls.append(("evaluate", expression, arg))
        if expression == COUNT_SLIDES_JS:
            return self.total
        return None

    def add_style_tag(self, content=None):
        self.calls.append(("style", content))

    def screenshot(self, **kwargs):
        self.calls.append(("screenshot", kwargs))
        return png_bytes()

    def pdf(self, **kwargs):
        self.calls.append(("pdf", kwargs))
        return pdf_bytes(self.total if kwargs.get("prefer_css_page_size") else 1)

    def evaluated(self, expression):
        return [c[2] for c in self.calls if c[0] == "evaluate" and c[1] == expression]


# ---------------------------------------------------------------------------
# Geometry and assembly
# ---------------------------------------------------------------------------

class TestFitToPage:

    def test_wide_image_fills_width(self):
        assert fit_to_page((200, 100), (1000, 1000)) == (0, 250, 1000, 500)

    def test_same_aspect_fills_page(self):
        assert fit_to_page((1056, 816), (2112, 1632)) == (0, 0, 2112, 1632)

    def test_invalid_size(self):
        with pytest.raises(ValueError):
            fit_to_page((0, 10), (100, 100))


class TestImagesToPdf:

    def test_one_letter_landscape_page_per_image(self, tmp_path):
        out = images_to_pdf([png_bytes(), png_bytes(color="red"), png_bytes((50, 80))],
                            tmp_path / "deck.pdf")
        reader = PdfReader(str(out))
        assert len(reader.pages) == 3
        box = reader.pages[0].mediabox
        assert float(box.width) == pytest.approx(PAGE_WIDTH_IN * 72, abs=1)
        assert float(box.height) == pytest.approx(PAGE_HEIGHT_IN * 72, abs=1)

    def test_empty_is_an_error(self, tmp_path):
        with pytest.raises(ExportError):
            images_to_pdf([], tmp_path / "deck.pdf")

    def test_page_size_px(self):
        assert page_size_px(96) == (1056, 816)


class TestMergePdfs:

    def test_pages_kept_in_order(self, tmp_path):
        out = merge_pdfs([pdf_bytes(1), pdf_bytes(2), pdf_bytes(1)], tmp_path / "m.pdf")
        assert len(PdfReader(str(out)).pages) == 4

    def test_empty_is_an_error(self, tmp_path):
        with pytest.raises(ExportError):
            merge_pdfs([], tmp_path / "m.pdf")


# ---------------------------------------------------------------------------
# Export sequence
# ---------------------------------------------------------------------------

class TestRunStrategy:

    def test_screenshot_strategy(self, tmp_path):
        page = FakePage(total=3)
        out = run_strategy(page, "http://x/", "screenshot", tmp_path / "s.pdf")
        assert page.calls[0] == ("goto", "http://x/")
        assert page.calls[1] == ("wait_for_function", READY_JS)
        assert page.evaluated(HIDE_NAVIGATION_JS) == [None]
        assert page.evaluated(SHOW_ONLY_JS) == [0, 1, 2]
        assert sum(1 for c in page.calls if c[0] == "screenshot") == 3
        assert len(PdfReader(str(out)).pages) == 3

    def test_print_per_slide_strategy(self, tmp_path):
        page = FakePage(total=4)
        out = run_strategy(page, "http://x/", "print-per-slide", tmp_path / "p.pdf")
        assert page.evaluated(SHOW_ONLY_JS) == [0, 1, 2, 3]
        printed = [c[1] for c in page.calls if c[0] == "pdf"]
        assert len(printed) == 4
        assert printed[0]["width"] == "11in" and printed[0]["print_background"]
        assert len(PdfReader(str(out)).pages) == 4

    def test_print_strategy_shows_all_slides(self, tmp_path):
        page = FakePage(total=2)
        out = run_strategy(page, "http://x/?print=1", "print", tmp_path / "d.pdf")
        assert page.evaluated(SHOW_ALL_JS) == [None]
        assert sum(1 for c in page.calls if c[0] == "pdf") == 1
        assert len(PdfReader(str(out)).pages) == 2

    def test_empty_deck_is_an_error(self, tmp_path):
        with pytest.raises(ExportError):
            run_strategy(FakePage(total=0), "http://x/", "screenshot", tmp_path / "e.pdf")

    def test_unknown_strategy(self, tmp_path):
        with pytest.raises(ExportError):
            export_pdf(tmp_path, tmp_path / "x.pdf", strategy="fax")


def test_viewer_url():
    assert viewer_url(8080) == "http://127.0.0.1:8080/"
    assert viewer_url(8081, print_mode=True) == "http://127.0.0.1:8081/?print=1"
