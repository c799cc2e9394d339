from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from types import TracebackType
from typing import Mapping, cast

from pagemerge.adapters.pymupdf_adapter import PyMuPdfAdapter
from pagemerge.domain.errors import OutputError, SessionStateError, SourceNotFoundError
from pagemerge.domain.models import MergeResult, Orientation, OutputMode, SourceSpec
from pagemerge.services.merge_service import MergeService
from pagemerge.services.page_ranges import is_all_pages, parse_page_range

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    OPEN = "open"
    MERGED = "merged"
    FAILED = "failed"
    CLOSED = "closed"


class MergeSession:
    """One merge job: register sources, merge once, then save as often as needed.

    Example::

        with MergeSession() as session:
            session.add_source("a.pdf", "1,3,6,12-16").add_source("b.pdf")
            session.duplex_merge(metadata={"title": "Packet"})
            session.save("packet.pdf", "file")
    """

    def __init__(
        self, adapter: PyMuPdfAdapter | None = None, merge_service: MergeService | None = None
    ) -> None:
        self.adapter = adapter if adapter is not None else PyMuPdfAdapter()
        self.merge_service = merge_service if merge_service is not None else MergeService()
        self.state = SessionState.OPEN
        self._sources: list[SourceSpec] = []

    @property
    def sources(self) -> tuple[SourceSpec, ...]:
        return tuple(self._sources)

    def add_source(
        self,
        file_path: str | Path,
        pages: str | None = "all",
        orientation: Orientation | str | None = None,
    ) -> MergeSession:
        if self.state != SessionState.OPEN:
            raise SessionStateError(f"Cannot add sources to a {self.state.value} session.")

        path = Path(file_path)
        if not path.is_file():
            raise SourceNotFoundError(str(file_path))

        selection = None if is_all_pages(pages) else tuple(parse_page_range(pages or ""))
        source = SourceSpec(
            file_path=path, pages=selection, orientation=Orientation.coerce(orientation)
        )
        self._sources.append(source)
        logger.debug("Registered %s (pages=%s)", path, pages)
        return self

    def merge(
        self,
        orientation: Orientation | str | None = None,
        metadata: Mapping[str, str] | None = None,
    ) -> MergeResult:
        return self._do_merge(orientation, metadata, duplex=False)

    def duplex_merge(
        self,
        orientation: Orientation | str | None = None,
        metadata: Mapping[str, str] | None = None,
    ) -> MergeResult:
        return self._do_merge(orientation, metadata, duplex=True)

    def _do_merge(
        self,
        orientation: Orientation | str | None,
        metadata: Mapping[str, str] | None,
        duplex: bool,
    ) -> MergeResult:
        if self.state != SessionState.OPEN:
            raise SessionStateError(f"Cannot merge a {self.state.value} session.")

        global_orientation = Orientation.coerce(orientation)
        try:
            result = self.merge_service.execute(
                self._sources,
                self.adapter,
                orientation=global_orientation,
                duplex=duplex,
                metadata=metadata,
            )
        except Exception:
            self.state = SessionState.FAILED
            self.adapter.close()
            raise

        self.state = SessionState.MERGED
        return result

    def save(
        self, destination: str | Path = "newfile.pdf", mode: OutputMode | str = "file"
    ) -> bytes | bool:
        if self.state != SessionState.MERGED:
            raise SessionStateError(f"Cannot save a {self.state.value} session.")

        output_mode = OutputMode.from_name(mode)
        outcome = self.adapter.write_output(str(destination), output_mode)
        if output_mode == OutputMode.STRING:
            return cast(bytes, outcome)
        if outcome:
            raise OutputError(f"Error outputting PDF to '{output_mode.value}': {outcome}")

        logger.info("Saved merged PDF to %s (%s)", destination, output_mode.value)
        return True

    def close(self) -> None:
        if self.state != SessionState.CLOSED:
            if self.state != SessionState.FAILED:
                self.adapter.close()
            self.state = SessionState.CLOSED

    def __enter__(self) -> MergeSession:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()
