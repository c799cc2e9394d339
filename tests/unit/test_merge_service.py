from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import pytest

from pagemerge.domain.errors import EmptySessionError, EmptySourceError, PageNotFoundError
from pagemerge.domain.models import MetadataField, Orientation, PageSize, SourceSpec
from pagemerge.services.merge_service import MergeService, resolve_orientation, resolve_pages


@dataclass
class FakeBuilder:
    documents: dict[str, list[PageSize]]
    events: list[tuple] = field(default_factory=list)
    metadata: dict[MetadataField, str] = field(default_factory=dict)
    _current: list[PageSize] = field(default_factory=list)
    _pages: int = 0

    @property
    def page_count(self) -> int:
        return self._pages

    def open_source(self, file_path: Path) -> int:
        self._current = self.documents[file_path.name]
        self.events.append(("open", file_path.name))
        return len(self._current)

    def import_page(self, page_number: int) -> int | None:
        if not 1 <= page_number <= len(self._current):
            return None
        return page_number

    def page_size(self, page: int) -> PageSize:
        return self._current[page - 1]

    def append_page(self, orientation: Orientation, size: PageSize) -> None:
        self._pages += 1
        self.events.append(("append", orientation, size))

    def render_imported_page(self, page: int) -> None:
        self.events.append(("render", page))

    def set_metadata_field(self, field: MetadataField, value: str) -> None:
        self.metadata[field] = value
        self.events.append(("meta", field))


PORTRAIT = PageSize(width=595, height=842)
LANDSCAPE = PageSize(width=842, height=595)


def _builder() -> FakeBuilder:
    return FakeBuilder(
        documents={
            "a.pdf": [PORTRAIT, LANDSCAPE, PORTRAIT],
            "b.pdf": [LANDSCAPE],
            "empty.pdf": [],
        }
    )


@pytest.mark.unit
def test_resolve_orientation_precedence() -> None:
    assert resolve_orientation(Orientation.LANDSCAPE, Orientation.PORTRAIT, PORTRAIT) == (
        Orientation.LANDSCAPE
    )
    assert resolve_orientation(None, Orientation.LANDSCAPE, PORTRAIT) == Orientation.LANDSCAPE
    assert resolve_orientation(None, None, PORTRAIT) == Orientation.PORTRAIT
    assert resolve_orientation(None, None, LANDSCAPE) == Orientation.LANDSCAPE


@pytest.mark.unit
def test_resolve_pages_all_and_selection() -> None:
    assert resolve_pages(SourceSpec(file_path=Path("a.pdf")), 3) == [1, 2, 3]
    assert resolve_pages(SourceSpec(file_path=Path("a.pdf"), pages=(3, 1, 3)), 3) == [3, 1, 3]


@pytest.mark.unit
def test_execute_rejects_empty_source_list() -> None:
    builder = _builder()
    with pytest.raises(EmptySessionError):
        MergeService().execute([], builder)
    assert builder.events == []


@pytest.mark.unit
def test_execute_copies_pages_in_registration_order() -> None:
    builder = _builder()
    sources = [
        SourceSpec(file_path=Path("b.pdf")),
        SourceSpec(file_path=Path("a.pdf"), pages=(3, 1)),
    ]

    result = MergeService().execute(sources, builder)

    assert [(page.source_index, page.page_number) for page in result.pages] == [
        (0, 1),
        (1, 3),
        (1, 1),
    ]
    assert [event[1] for event in builder.events if event[0] == "render"] == [1, 3, 1]
    assert result.blank_pages == 0


@pytest.mark.unit
def test_execute_infers_orientation_per_page_without_global() -> None:
    result = MergeService().execute([SourceSpec(file_path=Path("a.pdf"))], _builder())
    assert [page.orientation for page in result.pages] == [
        Orientation.PORTRAIT,
        Orientation.LANDSCAPE,
        Orientation.PORTRAIT,
    ]


@pytest.mark.unit
def test_execute_global_orientation_yields_to_override() -> None:
    sources = [
        SourceSpec(file_path=Path("a.pdf"), pages=(1, 2)),
        SourceSpec(file_path=Path("b.pdf"), orientation=Orientation.PORTRAIT),
    ]
    result = MergeService().execute(sources, _builder(), orientation=Orientation.LANDSCAPE)
    assert [page.orientation for page in result.pages] == [
        Orientation.LANDSCAPE,
        Orientation.LANDSCAPE,
        Orientation.PORTRAIT,
    ]


@pytest.mark.unit
def test_execute_duplex_pads_each_odd_source() -> None:
    builder = _builder()
    sources = [SourceSpec(file_path=Path("b.pdf")), SourceSpec(file_path=Path("a.pdf"))]

    result = MergeService().execute(sources, builder, duplex=True)

    assert [page.blank for page in result.pages] == [False, True, False, False, False, True]
    assert builder.page_count == 6
    padding = result.pages[1]
    assert padding.source_index == 0
    assert padding.orientation == Orientation.LANDSCAPE
    assert (padding.width, padding.height) == (842, 595)


@pytest.mark.unit
def test_execute_duplex_skips_padding_on_even_count() -> None:
    sources = [SourceSpec(file_path=Path("a.pdf"), pages=(1, 2))]
    result = MergeService().execute(sources, _builder(), duplex=True)
    assert result.blank_pages == 0


@pytest.mark.unit
def test_execute_without_duplex_never_pads() -> None:
    sources = [SourceSpec(file_path=Path("b.pdf")), SourceSpec(file_path=Path("b.pdf"))]
    result = MergeService().execute(sources, _builder(), duplex=False)
    assert result.page_count == 2


@pytest.mark.unit
def test_execute_missing_page_aborts() -> None:
    builder = _builder()
    sources = [SourceSpec(file_path=Path("a.pdf"), pages=(1, 9))]

    with pytest.raises(PageNotFoundError) as excinfo:
        MergeService().execute(sources, builder)

    assert excinfo.value.page_number == 9
    assert excinfo.value.file_path == "a.pdf"


@pytest.mark.unit
def test_execute_rejects_source_without_pages() -> None:
    sources = [SourceSpec(file_path=Path("b.pdf")), SourceSpec(file_path=Path("empty.pdf"))]
    with pytest.raises(EmptySourceError):
        MergeService().execute(sources, _builder(), duplex=True)


@pytest.mark.unit
def test_execute_applies_known_metadata_before_pages() -> None:
    builder = _builder()
    MergeService().execute(
        [SourceSpec(file_path=Path("b.pdf"))],
        builder,
        metadata={"title": "Packet", "Author": "Ops", "producer": "ignored"},
    )

    assert builder.metadata == {MetadataField.TITLE: "Packet", MetadataField.AUTHOR: "Ops"}
    assert [event[0] for event in builder.events[:2]] == ["meta", "meta"]
