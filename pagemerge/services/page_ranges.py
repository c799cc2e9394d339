from __future__ import annotations

import re

from pagemerge.domain.errors import InvalidPageTokenError, InvalidRangeError

ALL_PAGES = "all"

_WHITESPACE = re.compile(r"\s+")
_SINGLE_PAGE = re.compile(r"\d+")
_PAGE_RANGE = re.compile(r"(\d+)-(\d+)")


def is_all_pages(selection: str | None) -> bool:
    return selection is None or selection.strip().lower() == ALL_PAGES


def _positive_page(token: str, value: str) -> int:
    page = int(value)
    if page < 1:
        raise InvalidPageTokenError(token)
    return page


def parse_page_range(expression: str) -> list[int]:
    """Expand an expression such as ``"1,3,6,12-16"`` into page numbers.

    Tokens keep their order and repeated pages are kept, so ``"2,2"`` selects
    page 2 twice.
    """
    compact = _WHITESPACE.sub("", expression)
    pages: list[int] = []
    for token in compact.split(","):
        if _SINGLE_PAGE.fullmatch(token):
            pages.append(_positive_page(token, token))
            continue

        range_match = _PAGE_RANGE.fullmatch(token)
        if range_match is None:
            raise InvalidPageTokenError(token)

        start = _positive_page(token, range_match.group(1))
        end = _positive_page(token, range_match.group(2))
        if start > end:
            raise InvalidRangeError(start, end)
        pages.extend(range(start, end + 1))
    return pages
