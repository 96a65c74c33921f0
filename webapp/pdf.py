"""
PDF assembly for exported slides.

- images_to_pdf: fit raster screenshots onto fixed Letter-landscape pages (Pillow)
- merge_pdfs:    concatenate per-slide printed PDFs into one document (pypdf)
"""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Union

from PIL import Image
from pypdf import PdfReader, PdfWriter

from deck.config import PAGE_HEIGHT_IN, PAGE_WIDTH_IN, PDF_DPI
from deck.errors import ExportError

log = logging.getLogger(__name__)

ImageSource = Union[bytes, Image.Image]


def page_size_px(dpi: int = PDF_DPI) -> tuple[int, int]:
    return round(PAGE_WIDTH_IN * dpi), round(PAGE_HEIGHT_IN * dpi)


def fit_to_page(image_size: tuple[int, int], page_size: tuple[int, int]) -> tuple[int, int, int, int]:
    """Scale *image_size* to fit inside *page_size*, centred.

    Returns (x, y, width, height) of the placed image.
    """
    iw, ih = image_size
    pw, ph = page_size
    if iw <= 0 or ih <= 0:
        raise ValueError(f"Invalid image size: {image_size}")
    scale = min(pw / iw, ph / ih)
    w, h = max(1, round(iw * scale)), max(1, round(ih * scale))
    return (pw - w) // 2, (ph - h) // 2, w, h


def _open(source: ImageSource) -> Image.Image:
    if isinstance(source, Image.Image):
        return source
    return Image.open(io.BytesIO(source))


def compose_page(source: ImageSource, dpi: int = PDF_DPI) -> Image.Image:
    """Place one screenshot on a white page, preserving its aspect ratio."""
    img = _open(source).convert("RGB")
    page = Image.new("RGB", page_size_px(dpi), "white")
    x, y, w, h = fit_to_page(img.size, page.size)
    if (w, h) != img.size:
        img = img.resize((w, h), Image.LANCZOS)
    page.paste(img, (x, y))
    return page


def images_to_pdf(images: list[ImageSource], output: Path, dpi: int = PDF_DPI) -> Path:
    """Write one PDF page per image."""
    if not images:
        raise ExportError("No slide images to write")
    output = Path(output)
    output.parent.mkdir(parents=True, exist_ok=True)

    pages = [compose_page(img, dpi) for img in images]
    pages[0].save(
        output, "PDF", save_all=True, append_images=pages[1:], resolution=float(dpi),
    )
    log.info("Wrote %d pages to %s", len(pages), output)
    return output


def merge_pdfs(buffers: list[bytes], output: Path) -> Path:
    """Concatenate PDF documents (in order) into *output*."""
    if not buffers:
        raise ExportError("No printed pages to merge")
    output = Path(output)
    output.parent.mkdir(parents=True, exist_ok=True)

    writer = PdfWriter()
    for buf in buffers:
        for page in PdfReader(io.BytesIO(buf)).pages:
            writer.add_page(page)
    with open(output, "wb") as f:
        writer.write(f)
    log.info("Merged %d documents (%d pages) into %s", len(buffers), len(writer.pages), output)
    return output


def write_pdf(data: bytes, output: Path) -> Path:
    output = Path(output)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_bytes(data)
    log.info("Wrote %s (%.1f KB)", output, len(data) / 1024)
    return output
