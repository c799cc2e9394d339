from __future__ import annotations


class PdfMergeError(Exception):
    pass


class SourceNotFoundError(PdfMergeError):
    def __init__(self, file_path: str) -> None:
        super().__init__(f"Could not locate PDF on '{file_path}'")
        self.file_path = file_path


class PageSelectionError(PdfMergeError):
    pass


class InvalidRangeError(PageSelectionError):
    def __init__(self, start: int, end: int) -> None:
        super().__init__(f"Starting page, '{start}' is greater than ending page '{end}'.")
        self.start = start
        self.end = end


class InvalidPageTokenError(PageSelectionError):
    def __init__(self, token: str) -> None:
        super().__init__(f"Invalid page token '{token}'. Use formats like 1,3,6,12-16.")
        self.token = token


class ParsingError(PdfMergeError):
    pass


class MergeError(PdfMergeError):
    pass


class EmptySessionError(MergeError):
    pass


class EmptySourceError(MergeError):
    pass


class PageNotFoundError(MergeError):
    def __init__(self, page_number: int, file_path: str) -> None:
        super().__init__(
            f"Could not load page '{page_number}' in PDF '{file_path}'. Check that the page exists."
        )
        self.page_number = page_number
        self.file_path = file_path


class SessionStateError(MergeError):
    pass


class OutputError(PdfMergeError):
    pass
