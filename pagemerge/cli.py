from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence

from pagemerge.adapters.pymupdf_adapter import PyMuPdfAdapter
from pagemerge.domain.errors import PdfMergeError
from pagemerge.domain.models import ClientResponse, MetadataField, OutputMode
from pagemerge.infrastructure.config import AppConfig
from pagemerge.infrastructure.logging_setup import configure_logging
from pagemerge.services.merge_session import MergeSession

logger = logging.getLogger(__name__)

SOURCE_SEPARATOR = "@"


def split_source(argument: str) -> tuple[str, str, str | None]:
    path, _, rest = argument.partition(SOURCE_SEPARATOR)
    pages, _, orientation = rest.partition(SOURCE_SEPARATOR)
    return path, pages or "all", orientation or None


def _stdout_stream(response: ClientResponse) -> None:
    sys.stdout.buffer.write(response.content)
    sys.stdout.buffer.flush()


def build_parser(config: AppConfig) -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="pagemerge",
        description="Merge PDFs, or page ranges of them, into one document.",
    )
    p.add_argument(
        "sources",
        nargs="+",
        metavar="SOURCE",
        help="path[@pages[@orientation]], e.g. report.pdf@1,3,6-8@landscape",
    )
    p.add_argument(
        "-o",
        "--output",
        default=config.output_name,
        help="Output PDF path, or '-' for stdout",
    )
    p.add_argument(
        "--mode",
        default="file",
        choices=[mode.value for mode in OutputMode],
        help="download and browser stream the PDF to stdout",
    )
    p.add_argument("--orientation", help="Global orientation: P or L (default: per page)")
    p.add_argument(
        "--duplex", action="store_true", help="Pad sources so each starts on a front side"
    )
    for field in MetadataField:
        p.add_argument(f"--{field.value}", help=f"Set the document {field.value}")
    p.add_argument("--log-level", default=config.log_level, help="Logging level")
    return p


def main(argv: Sequence[str] | None = None) -> int:
    config = AppConfig()
    args = build_parser(config).parse_args(argv)
    configure_logging(args.log_level)

    mode = OutputMode.from_name(args.mode)
    if args.output == "-" and mode == OutputMode.FILE:
        mode = OutputMode.BROWSER
    metadata = {
        field.value: getattr(args, field.value)
        for field in MetadataField
        if getattr(args, field.value) is not None
    }

    try:
        with MergeSession(PyMuPdfAdapter(client_stream=_stdout_stream)) as session:
            for argument in args.sources:
                path, pages, orientation = split_source(argument)
                session.add_source(path, pages, orientation)

            if args.duplex:
                result = session.duplex_merge(args.orientation, metadata)
            else:
                result = session.merge(args.orientation, metadata)

            outcome = session.save(args.output, mode)
            if isinstance(outcome, bytes):
                sys.stdout.buffer.write(outcome)
                sys.stdout.buffer.flush()
    except (PdfMergeError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    logger.info("Wrote %d page(s) from %d source(s)", result.page_count, len(args.sources))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
