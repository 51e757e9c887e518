"""Append-only collector of diagnostic messages surfaced in the manifest document."""

from __future__ import annotations

import logging
from typing import Iterator, List

from exceptions import InvalidErrorMessage

logger = logging.getLogger(__name__)


class ErrorSink:
    """Ordered list of diagnostics added while a manifest script runs.

    Messages are delivered to the build tool inside the document; adding one
    never aborts the script.
    """

    def __init__(self):
        self._errors: List[str] = []

    def add(self, message: str) -> None:
        """Append ``message``.

        Raises:
            InvalidErrorMessage: if the message contains a literal quote.
        """
        if '"' in message:
            raise InvalidErrorMessage(f"Error message must not contain quotes: {message!r}")
        logger.debug("Manifest diagnostic recorded: %s", message)
        self._errors.append(message)

    def messages(self) -> List[str]:
        """Copy of the messages in insertion order."""
        return list(self._errors)

    def __iter__(self) -> Iterator[str]:
        return iter(self._errors)

    def __len__(self) -> int:
        return len(self._errors)
