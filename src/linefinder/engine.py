"""
Line search engine for linefinder.

The engine scans one input file for lines (``.txt``) or delimited-record
fields (``.csv``) that contain a search term, ignoring case. Every record is
checked by its own concurrent match task; matches go either to the console,
with the term highlighted, or to an output file.

Usage:
    config = configure("example", "input.txt", "output.txt")
    summary = LineSearchEngine(config).run()

A run is fail-fast: the first unreadable file, uncreatable output file,
malformed record or failed task aborts the whole search with an exception.
"""

from dataclasses import dataclass, field
import logging
import threading
from typing import Callable, List, Optional

from pydantic import ValidationError
from rich.console import Console

from .exceptions import ConfigurationError, InputFileError
from .models.config import EngineSettings, RecordFormat, SearchConfiguration
from .models.search_results import SearchSummary
from .tools.dispatch import TaskSpawner, create_spawner
from .tools.readers import NEWLINE_MODES, iter_records
from .tools.sinks import ConsoleSink, FileSink, OutputSink


logger = logging.getLogger(__name__)


def configure(term: str, input_path: str, output_path: Optional[str] = "") -> SearchConfiguration:
    """
    Build the configuration for one search.

    Args:
        term: Substring to search for; must not be empty
        input_path: File to scan; must not be empty
        output_path: File to write matches to; empty selects console output

    Returns:
        An immutable SearchConfiguration

    Raises:
        ConfigurationError: If the term or the input path is empty
    """
    if not term:
        raise ConfigurationError("no word is provided to be searched")
    if not input_path:
        raise ConfigurationError("no input file is provided")

    try:
        return SearchConfiguration(term=term, input_path=input_path, output_path=output_path)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid search configuration: {e}", original_error=e) from e


def contains_term(text: str, term: str) -> bool:
    """Check whether ``text`` contains ``term``, ignoring case."""
    return term.lower() in text.lower()


@dataclass
class _RunCounters:
    """Per-run counters updated concurrently by match tasks."""
    records_read: int = 0
    units_checked: int = 0
    matches: int = 0
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def record_units(self, checked: int, matched: int) -> None:
        with self._lock:
            self.units_checked += checked
            self.matches += matched


class LineSearchEngine:
    """
    Searches a single file for a term with one concurrent task per record.

    The engine holds no global state: its configuration is fixed at
    construction, and each ``run`` opens its own input, sink and spawner, so
    separate engines can search concurrently and one engine can run again.
    """

    def __init__(
        self,
        config: SearchConfiguration,
        settings: Optional[EngineSettings] = None,
        console: Optional[Console] = None,
        spawner_factory: Optional[Callable[[], TaskSpawner]] = None,
    ):
        """
        Initialize the search engine.

        Args:
            config: What to search for and where
            settings: Engine tunables; defaults are used when omitted
            console: Rich console for console output (stdout by default)
            spawner_factory: Builds the task spawner for each run; by default
                the spawner follows ``settings.max_workers``
        """
        self.config = config
        self.settings = settings or EngineSettings()
        self.console = console
        self._spawner_factory = spawner_factory or (lambda: create_spawner(self.settings.max_workers))

    @property
    def record_format(self) -> RecordFormat:
        return self.config.record_format

    def run(self) -> SearchSummary:
        """
        Execute the search and wait for every match task to finish.

        Returns:
            SearchSummary describing what was read and emitted

        Raises:
            InputFileError: If the input file cannot be opened or read
            OutputFileError: If the output file cannot be created
            FormatError: If a delimited record is malformed
            TaskError: If a match task failed
        """
        record_format = self.record_format
        logger.info(f"Searching {self.config.input_path} for '{self.config.term}' ({record_format.value})")

        stream = self._open_input(record_format)
        counters = _RunCounters()

        with stream:
            sink = self._open_sink()
            try:
                self._dispatch(stream, record_format, sink, counters)
            finally:
                sink.close()

        summary = SearchSummary(
            input_path=self.config.input_path,
            output_path=self.config.output_path,
            record_format=record_format,
            records_read=counters.records_read,
            units_checked=counters.units_checked,
            matches=counters.matches,
        )
        logger.info(f"Search finished: {summary}")
        return summary

    def _open_input(self, record_format: RecordFormat):
        path = self.config.input_path
        try:
            return open(
                path,
                'r',
                encoding=self.settings.encoding,
                errors=self.settings.encoding_errors,
                newline=NEWLINE_MODES[record_format],
            )
        except OSError as e:
            raise InputFileError(f"Cannot open input file {path}: {e}", path, original_error=e) from e

    def _open_sink(self) -> OutputSink:
        if self.config.writes_to_file():
            return FileSink.create(
                self.config.output_path,
                encoding=self.settings.encoding,
                errors=self.settings.encoding_errors,
            )
        return ConsoleSink(self.config.term, console=self.console, style=self.settings.highlight_style)

    def _dispatch(self, stream, record_format: RecordFormat, sink: OutputSink, counters: _RunCounters) -> None:
        """Launch one match task per record and wait for all of them."""
        spawner = self._spawner_factory()
        task = self._process_line if record_format is RecordFormat.TEXT else self._process_record

        try:
            for record in iter_records(stream, record_format, self.settings.csv):
                counters.records_read += 1
                spawner.spawn(task, record, sink, counters)
        except (OSError, UnicodeDecodeError) as e:
            spawner.drain()
            path = self.config.input_path
            raise InputFileError(f"Cannot read input file {path}: {e}", path, original_error=e) from e
        except BaseException:
            spawner.drain()
            raise

        logger.debug(f"Launched {spawner.tasks_launched} match tasks, waiting for completion")
        spawner.join()

    def _process_line(self, line: str, sink: OutputSink, counters: _RunCounters) -> None:
        matched = self._match_unit(line, sink)
        counters.record_units(1, int(matched))

    def _process_record(self, fields: List[str], sink: OutputSink, counters: _RunCounters) -> None:
        matched = 0
        for value in fields:
            if self._match_unit(value, sink):
                matched += 1
        counters.record_units(len(fields), matched)

    def _match_unit(self, unit: str, sink: OutputSink) -> bool:
        if not contains_term(unit, self.config.term):
            return False
        sink.emit(unit)
        return True


def search(
    term: str,
    input_path: str,
    output_path: Optional[str] = "",
    settings: Optional[EngineSettings] = None,
    console: Optional[Console] = None,
) -> SearchSummary:
    """
    Convenience function to configure and run a search in one call.

    Args:
        term: Substring to search for
        input_path: File to scan
        output_path: File to write matches to; empty selects console output
        settings: Engine tunables (optional)
        console: Rich console for console output (optional)

    Returns:
        SearchSummary of the completed run
    """
    config = configure(term, input_path, output_path)
    return LineSearchEngine(config, settings=settings, console=console).run()
