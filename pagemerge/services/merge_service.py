from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Mapping, Protocol, Sequence

from pagemerge.domain.errors import EmptySessionError, EmptySourceError, PageNotFoundError
from pagemerge.domain.models import (
    MergeResult,
    MetadataField,
    Orientation,
    PageSize,
    ResolvedPage,
    SourceSpec,
)

logger = logging.getLogger(__name__)

METADATA_FIELDS: dict[str, MetadataField] = {field.value: field for field in MetadataField}


class PageBuilder(Protocol):
    @property
    def page_count(self) -> int: ...

    def open_source(self, file_path: Path) -> int: ...

    def import_page(self, page_number: int) -> Any | None: ...

    def page_size(self, page: Any) -> PageSize: ...

    def append_page(self, orientation: Orientation, size: PageSize) -> None: ...

    def render_imported_page(self, page: Any) -> None: ...

    def set_metadata_field(self, field: MetadataField, value: str) -> None: ...


def resolve_orientation(
    override: Orientation | None, global_orientation: Orientation | None, size: PageSize
) -> Orientation:
    if override is not None:
        return override
    if global_orientation is None:
        return Orientation.infer(size.width, size.height)
    return global_orientation


def resolve_pages(source: SourceSpec, page_count: int) -> list[int]:
    if source.pages is None:
        return list(range(1, page_count + 1))
    return list(source.pages)


class MergeService:
    def apply_metadata(self, builder: PageBuilder, metadata: Mapping[str, str]) -> None:
        for key, value in metadata.items():
            field = METADATA_FIELDS.get(key.lower())
            if field is None:
                logger.debug("Ignoring unsupported metadata key %r", key)
                continue
            builder.set_metadata_field(field, value)

    def execute(
        self,
        sources: Sequence[SourceSpec],
        builder: PageBuilder,
        orientation: Orientation | None = None,
        duplex: bool = False,
        metadata: Mapping[str, str] | None = None,
    ) -> MergeResult:
        if not sources:
            raise EmptySessionError("No PDFs to merge.")

        if metadata:
            self.apply_metadata(builder, metadata)

        logger.info("Merging %d source(s), duplex=%s", len(sources), duplex)
        emitted: list[ResolvedPage] = []
        for source_index, source in enumerate(sources):
            page_count = builder.open_source(source.file_path)
            page_numbers = resolve_pages(source, page_count)
            if not page_numbers:
                raise EmptySourceError(f"PDF '{source.file_path}' has no pages to merge.")

            last_page: ResolvedPage | None = None
            for page_number in page_numbers:
                imported = builder.import_page(page_number)
                if imported is None:
                    raise PageNotFoundError(page_number, str(source.file_path))

                size = builder.page_size(imported)
                page_orientation = resolve_orientation(source.orientation, orientation, size)
                builder.append_page(page_orientation, size)
                builder.render_imported_page(imported)

                last_page = ResolvedPage(
                    source_index=source_index,
                    page_number=page_number,
                    orientation=page_orientation,
                    width=size.width,
                    height=size.height,
                )
                emitted.append(last_page)
                logger.debug(
                    "Copied page %d of %s as %s", page_number, source.file_path, page_orientation.name
                )

            if duplex and last_page is not None and builder.page_count % 2:
                builder.append_page(
                    last_page.orientation, PageSize(width=last_page.width, height=last_page.height)
                )
                emitted.append(
                    ResolvedPage(
                        source_index=source_index,
                        page_number=0,
                        orientation=last_page.orientation,
                        width=last_page.width,
                        height=last_page.height,
                        blank=True,
                    )
                )
                logger.debug("Padded %s with a blank page", source.file_path)

        result = MergeResult(pages=emitted)
        logger.info(
            "Merged %d page(s) including %d blank padding page(s)",
            result.page_count,
            result.blank_pages,
        )
        return result
