from __future__ import annotations

import logging
import os
from dataclasses import dataclass


def _get_int_env(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        parsed = int(value)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _get_str_env(name: str, default: str) -> str:
    value = os.getenv(name, "").strip()
    return value or default


def _get_log_level_env(name: str, default: str) -> str:
    value = _get_str_env(name, default).upper()
    if not isinstance(logging.getLevelName(value), int):
        return default
    return value


@dataclass(frozen=True)
class AppConfig:
    max_pdf_size_mb: int = _get_int_env("PAGEMERGE_MAX_PDF_MB", 50)
    max_batch_size_mb: int = _get_int_env("PAGEMERGE_MAX_BATCH_MB", 100)
    output_name: str = _get_str_env("PAGEMERGE_OUTPUT_NAME", "newfile.pdf")
    log_level: str = _get_log_level_env("PAGEMERGE_LOG_LEVEL", "INFO")

    @property
    def max_pdf_size_bytes(self) -> int:
        return self.max_pdf_size_mb * 1024 * 1024

    @property
    def max_batch_size_bytes(self) -> int:
        return self.max_batch_size_mb * 1024 * 1024
