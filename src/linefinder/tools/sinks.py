"""
Output sinks for linefinder.

Match tasks hand every matching unit to a sink through a single ``emit``
call. The console sink echoes the unit with the search term highlighted;
the file sink appends the raw unit to a shared output file, serializing
concurrent writers behind one lock.
"""

from abc import ABC, abstractmethod
import logging
import re
import threading
from typing import Optional, TextIO

from rich.console import Console
from rich.text import Text

from ..exceptions import OutputFileError


logger = logging.getLogger(__name__)

# Undecodable input bytes survive decoding as lone surrogates (surrogateescape).
_ESCAPED_BYTES = re.compile("[\udc80-\udcff]")


def highlight_term(line: str, term: str, style: str = "red") -> Text:
    """
    Build a display copy of a line with the term highlighted.

    Only literal, case-sensitive occurrences of ``term`` are styled; the
    text itself is never altered, so ``highlight_term(...).plain == line``.

    Args:
        line: Matched text unit
        term: Search term
        style: Rich style applied to each occurrence

    Returns:
        Rich Text ready to print
    """
    text = Text(line)
    text.highlight_words([term], style=style, case_sensitive=True)
    return text


class OutputSink(ABC):
    """Destination for matched units, shared by all match tasks."""

    @abstractmethod
    def emit(self, line: str) -> None:
        """Deliver one matched unit."""

    def close(self) -> None:
        """Release resources held by the sink."""

    def __enter__(self) -> 'OutputSink':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class ConsoleSink(OutputSink):
    """
    Prints matched units to the console with the term highlighted.

    Rich serializes each print, so concurrent emits interleave at line
    granularity but never within a line.
    """

    def __init__(self, term: str, console: Optional[Console] = None, style: str = "red"):
        """
        Initialize the console sink.

        Args:
            term: Search term to highlight
            console: Rich console to print to (stdout by default)
            style: Rich style for highlighted occurrences
        """
        self.term = term
        self.style = style
        self.console = console or Console(highlight=False)

    def emit(self, line: str) -> None:
        # A terminal cannot encode escaped bytes, so they are shown as U+FFFD.
        line = _ESCAPED_BYTES.sub("\ufffd", line)
        self.console.print(highlight_term(line, self.term, self.style), soft_wrap=True)


class FileSink(OutputSink):
    """
    Appends matched units, one per line, to a shared output file.

    The file is created (or truncated) when the sink is opened and closed
    exactly once. Writes are mutually exclusive; their order across tasks
    is not guaranteed to follow input order.
    """

    def __init__(self, path: str, handle: TextIO):
        self.path = path
        self._handle = handle
        self._lock = threading.Lock()
        self._closed = False

    @classmethod
    def create(cls, path: str, encoding: str = "utf-8", errors: str = "surrogateescape") -> 'FileSink':
        """
        Create or truncate the output file and wrap it in a sink.

        Args:
            path: Output file path
            encoding: Encoding for written lines
            errors: Codec error handler for unencodable characters

        Returns:
            An open FileSink

        Raises:
            OutputFileError: If the file cannot be created
        """
        try:
            handle = open(path, 'w', encoding=encoding, errors=errors, newline="")
        except OSError as e:
            raise OutputFileError(f"Cannot create output file {path}: {e}", path, original_error=e) from e

        logger.debug(f"Opened output file: {path}")
        return cls(path, handle)

    @property
    def closed(self) -> bool:
        return self._closed

    def emit(self, line: str) -> None:
        with self._lock:
            self._handle.write(line + "\n")

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._handle.close()
        logger.debug(f"Closed output file: {self.path}")
