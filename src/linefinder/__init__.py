"""
linefinder - concurrent substring search over text and csv files

Scans a single input file for lines or fields containing a term, ignoring
case, and prints them with the term highlighted or writes them to a file.
"""

from .engine import LineSearchEngine, configure, contains_term, search
from .exceptions import (
    ConfigurationError,
    FormatError,
    InputFileError,
    LineFinderError,
    OutputFileError,
    SearchIOError,
    TaskError,
)
from .models import EngineSettings, RecordFormat, SearchConfiguration, SearchSummary

__version__ = "0.1.0"

__all__ = [
    'LineSearchEngine',
    'configure',
    'contains_term',
    'search',
    'ConfigurationError',
    'FormatError',
    'InputFileError',
    'LineFinderError',
    'OutputFileError',
    'SearchIOError',
    'TaskError',
    'EngineSettings',
    'RecordFormat',
    'SearchConfiguration',
    'SearchSummary',
]
