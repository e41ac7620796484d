"""Single-flight reparsing for hosts that refresh on every edit.

Each refresh request takes a ticket from a monotonically increasing counter.
A parse that finishes after a newer request was issued is discarded, so the
stored result is always the one for the most recent text.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable
from pathlib import PurePath

from dspfkit.model import ParseResult
from dspfkit.parser import parse
from dspfkit.settings import StructureSettings

logger = logging.getLogger(__name__)


def is_dds_file(name: str | PurePath, extensions: Iterable[str] = (".dspf",)) -> bool:
    lowered = str(name).lower()
    return any(lowered.endswith(ext.lower()) for ext in extensions)


class StructureSession:
    def __init__(self, settings: StructureSettings | None = None) -> None:
        self.settings = settings or StructureSettings()
        self._lock = threading.Lock()
        self._latest = 0
        self._result: ParseResult | None = None
        self._document: str | None = None

    @property
    def result(self) -> ParseResult | None:
        with self._lock:
            return self._result

    @property
    def document(self) -> str | None:
        with self._lock:
            return self._document

    def request(self) -> int:
        """Issue a ticket; any ticket issued earlier becomes stale."""
        with self._lock:
            self._latest += 1
            return self._latest

    def is_current(self, ticket: int) -> bool:
        with self._lock:
            return ticket == self._latest

    def complete(
        self, ticket: int, text: str, document: str | None = None
    ) -> ParseResult | None:
        """Parse ``text`` for ``ticket`` and publish it unless it went stale."""
        result = parse(text, settings=self.settings)
        with self._lock:
            if ticket != self._latest:
                logger.debug(
                    "Discarding parse for stale ticket %d (latest %d)", ticket, self._latest
                )
                return None
            self._result = result
            self._document = document
        return result

    def refresh(self, text: str, document: str | None = None) -> ParseResult | None:
        """Reparse a document, or clear the stored model when it is not DDS source."""
        ticket = self.request()
        if document is not None and not is_dds_file(document, self.settings.extensions):
            with self._lock:
                if ticket == self._latest:
                    self._result = None
                    self._document = None
            return None
        return self.complete(ticket, text, document)

    def clear(self) -> None:
        with self._lock:
            self._latest += 1
            self._result = None
            self._document = None
