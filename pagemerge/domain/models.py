from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class Orientation(str, Enum):
    PORTRAIT = "P"
    LANDSCAPE = "L"

    @classmethod
    def coerce(cls, value: Orientation | str | None) -> Orientation | None:
        if value is None or isinstance(value, Orientation):
            return value
        cleaned = value.strip().upper()
        for member in cls:
            if cleaned in (member.value, member.name):
                return member
        raise ValueError(f"Unknown orientation '{value}'. Use P, L, portrait or landscape.")

    @classmethod
    def infer(cls, width: float, height: float) -> Orientation:
        return cls.PORTRAIT if width < height else cls.LANDSCAPE


class MetadataField(str, Enum):
    TITLE = "title"
    AUTHOR = "author"
    SUBJECT = "subject"
    KEYWORDS = "keywords"
    CREATOR = "creator"


class OutputMode(str, Enum):
    DOWNLOAD = "download"
    BROWSER = "browser"
    FILE = "file"
    STRING = "string"

    @classmethod
    def from_name(cls, name: OutputMode | str) -> OutputMode:
        if isinstance(name, OutputMode):
            return name
        try:
            return cls(name.strip().lower())
        except ValueError:
            return cls.BROWSER


class Disposition(str, Enum):
    ATTACHMENT = "attachment"
    INLINE = "inline"


@dataclass(frozen=True)
class PageSize:
    width: float
    height: float

    def oriented(self, orientation: Orientation) -> PageSize:
        short_side, long_side = sorted((self.width, self.height))
        if orientation == Orientation.PORTRAIT:
            return PageSize(width=short_side, height=long_side)
        return PageSize(width=long_side, height=short_side)


@dataclass(frozen=True)
class SourceSpec:
    file_path: Path
    pages: tuple[int, ...] | None = None
    orientation: Orientation | None = None

    @property
    def selects_all(self) -> bool:
        return self.pages is None


@dataclass(frozen=True)
class ResolvedPage:
    source_index: int
    page_number: int
    orientation: Orientation
    width: float
    height: float
    blank: bool = False


@dataclass(frozen=True)
class MergeResult:
    pages: list[ResolvedPage] = field(default_factory=list)

    @property
    def page_count(self) -> int:
        return len(self.pages)

    @property
    def blank_pages(self) -> int:
        return len([page for page in self.pages if page.blank])


@dataclass(frozen=True)
class ClientResponse:
    file_name: str
    content: bytes
    disposition: Disposition

    @property
    def headers(self) -> dict[str, str]:
        safe_name = self.file_name.replace("\\", "/").split("/")[-1].replace('"', "")
        return {
            "Content-Type": "application/pdf",
            "Content-Disposition": f'{self.disposition.value}; filename="{safe_name}"',
            "Content-Length": str(len(self.content)),
        }
