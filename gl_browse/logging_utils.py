"""Logging utilities for gl-browse."""

from __future__ import annotations

import json
import logging
import sys

from gl_browse.models import BrowseResult


class StructuredFormatter(logging.Formatter):
    """Formats plain records and browse results as text lines or JSON lines."""

    def __init__(self, json_mode: bool = False):
        super().__init__()
        self.json_mode = json_mode

    def format(self, record: logging.LogRecord) -> str:
        result = getattr(record, "browse_result", None)
        if result is not None:
            return self.format_result(record, result)
        if self.json_mode:
            return json.dumps({"level": record.levelname, "message": record.getMessage()})
        return f"[{record.levelname:<7}] {record.getMessage()}"

    def format_result(self, record: logging.LogRecord, result: BrowseResult) -> str:
        if self.json_mode:
            return json.dumps(result.to_dict())
        if result.opened:
            return f"[{record.levelname:<7}] Opened {result.url} with {' '.join(result.browser)}"
        return f"[{record.levelname:<7}] URL: {result.url}"


def setup_logging(json_mode: bool = False, verbose: bool = False) -> logging.Logger:
    logger = logging.getLogger("gl-browse")
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(StructuredFormatter(json_mode=json_mode))
    logger.addHandler(handler)
    return logger


def log_result(logger: logging.Logger, result: BrowseResult) -> None:
    """Emit a BrowseResult as one INFO record; the formatter decides its shape."""
    logger.info(result.url, extra={"browse_result": result})
