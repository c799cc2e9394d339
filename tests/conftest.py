from __future__ import annotations

from pathlib import Path

import fitz
import pytest

A4_PORTRAIT = (595.0, 842.0)
A4_LANDSCAPE = (842.0, 595.0)


def write_pdf(path: Path, sizes: list[tuple[float, float]], label: str) -> Path:
    document = fitz.open()
    try:
        for index, (width, height) in enumerate(sizes):
            page = document.new_page(width=width, height=height)
            page.insert_text((72, 72), f"{label} page {index + 1}")
        path.write_bytes(document.tobytes(deflate=True, garbage=3))
    finally:
        document.close()
    return path


@pytest.fixture
def portrait_pdf(tmp_path: Path) -> Path:
    return write_pdf(tmp_path / "portrait.pdf", [A4_PORTRAIT] * 3, "Portrait")


@pytest.fixture
def landscape_pdf(tmp_path: Path) -> Path:
    return write_pdf(tmp_path / "landscape.pdf", [A4_LANDSCAPE], "Landscape")


@pytest.fixture
def single_page_pdf(tmp_path: Path) -> Path:
    return write_pdf(tmp_path / "single.pdf", [A4_PORTRAIT], "Single")
