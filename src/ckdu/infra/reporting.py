from __future__ import annotations

"""
Diagnostic Error Reporter.

Structured sink for recoverable crawl failures. Each failure becomes one
stderr line in the fixed diagnostic format and is mirrored to the
application log at DEBUG level.
"""

import logging
import sys
from typing import List, Optional, TextIO

from ckdu.domain.errors import CrawlError

logger = logging.getLogger(__name__)


def format_error_line(error: CrawlError) -> str:
    """
    Render a crawl error in the diagnostic line format.

    Example:
        Error EACCES(13) occured when opening "./secret": Permission denied.
    """
    return (
        f"Error {error.errno_name}({error.code}) occured when "
        f"{error.action} \"{error.path}\": {error.description}"
    )


class ErrorReporter:
    """
    Collects and emits recoverable crawl errors.

    Attributes:
        errors: Every error reported so far, in report order.
    """

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self._stream = stream
        self.errors: List[CrawlError] = []

    @property
    def count(self) -> int:
        return len(self.errors)

    def report(self, error: CrawlError) -> None:
        line = format_error_line(error)
        self.errors.append(error)
        logger.debug(line)

        # Resolve lazily so pytest's capsys replacement is honoured
        stream = self._stream if self._stream is not None else sys.stderr
        print(line, file=stream, flush=True)
