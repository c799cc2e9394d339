from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, cast

import fitz  # type: ignore[import-untyped]

from pagemerge.domain.errors import ParsingError
from pagemerge.domain.models import (
    ClientResponse,
    Disposition,
    MetadataField,
    Orientation,
    OutputMode,
    PageSize,
)

logger = logging.getLogger(__name__)

ClientStream = Callable[[ClientResponse], None]

_DISPOSITIONS = {
    OutputMode.DOWNLOAD: Disposition.ATTACHMENT,
    OutputMode.BROWSER: Disposition.INLINE,
}


@dataclass(frozen=True)
class ImportedPage:
    document: fitz.Document
    page_index: int


class PyMuPdfAdapter:
    """Builds one output document out of pages imported from source PDFs.

    Only one source document is open at a time; opening the next source
    closes the previous one.
    """

    def __init__(self, client_stream: ClientStream | None = None) -> None:
        self.client_stream = client_stream
        self._output = fitz.open()
        self._source: fitz.Document | None = None
        self._metadata: dict[str, str] = {}

    @staticmethod
    def _optimized_bytes(document: fitz.Document) -> bytes:
        return cast(
            bytes,
            document.tobytes(
                garbage=4,
                clean=True,
                deflate=True,
                deflate_images=True,
                deflate_fonts=True,
            ),
        )

    @property
    def page_count(self) -> int:
        return int(self._output.page_count)

    def open_source(self, file_path: Path) -> int:
        self._close_source()
        try:
            self._source = fitz.open(str(file_path), filetype="pdf")
        except Exception as exc:
            raise ParsingError(f"Unable to open PDF '{file_path}'") from exc
        return int(self._source.page_count)

    def import_page(self, page_number: int) -> ImportedPage | None:
        if self._source is None:
            raise ParsingError("No source PDF is open")
        if not 1 <= page_number <= self._source.page_count:
            return None
        return ImportedPage(document=self._source, page_index=page_number - 1)

    def page_size(self, page: ImportedPage) -> PageSize:
        rect = page.document[page.page_index].rect
        return PageSize(width=float(rect.width), height=float(rect.height))

    def append_page(self, orientation: Orientation, size: PageSize) -> None:
        oriented = size.oriented(orientation)
        self._output.new_page(width=oriented.width, height=oriented.height)

    def render_imported_page(self, page: ImportedPage) -> None:
        target = self._output[self._output.page_count - 1]
        if not page.document[page.page_index].get_contents():
            # Nothing to draw; the appended page stays blank.
            return
        try:
            target.show_pdf_page(target.rect, page.document, page.page_index)
        except Exception as exc:
            raise ParsingError(f"Unable to copy page {page.page_index + 1}") from exc

    def set_metadata_field(self, field: MetadataField, value: str) -> None:
        self._metadata[field.value] = value
        self._output.set_metadata(dict(self._metadata))

    def output_bytes(self) -> bytes:
        try:
            return self._optimized_bytes(self._output)
        except Exception as exc:
            raise ParsingError("Unable to serialize merged PDF") from exc

    def write_output(self, destination: str, mode: OutputMode) -> bytes | str:
        """Deliver the output document.

        Returns the raw bytes for ``OutputMode.STRING``; for every other mode
        returns an error message, empty when delivery succeeded.
        """
        content = self.output_bytes()
        if mode == OutputMode.STRING:
            return content

        if mode == OutputMode.FILE:
            try:
                Path(destination).write_bytes(content)
            except OSError as exc:
                return f"Unable to write '{destination}': {exc}"
            return ""

        if self.client_stream is None:
            return f"No client stream attached for '{mode.value}' output"
        self.client_stream(
            ClientResponse(file_name=destination, content=content, disposition=_DISPOSITIONS[mode])
        )
        return ""

    def _close_source(self) -> None:
        if self._source is not None:
            self._source.close()
            self._source = None

    def close(self) -> None:
        self._close_source()
        self._output.close()
