"""
Exception hierarchy for linefinder.

Every error raised by the library derives from LineFinderError so callers
(and the command-line entry point) can treat a failed search uniformly:

- LineFinderError
  - ConfigurationError   missing term/input path, invalid settings file
  - SearchIOError
    - InputFileError     input file cannot be opened or read
    - OutputFileError    output file cannot be created
  - FormatError          malformed delimited record
  - TaskError            an exception escaped a match task
"""

from typing import Optional


class LineFinderError(Exception):
    """
    Base class for all linefinder errors.

    Attributes:
        message: Human-readable description of the error
        original_error: The underlying exception, if any
    """

    def __init__(self, message: str, original_error: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ConfigurationError(LineFinderError):
    """Raised when search configuration or settings are invalid."""
    pass


class SearchIOError(LineFinderError):
    """Raised when an input or output file cannot be used."""

    def __init__(self, message: str, path: str, original_error: Optional[BaseException] = None):
        super().__init__(message, original_error)
        self.path = path


class InputFileError(SearchIOError):
    """Raised when the input file cannot be opened for reading."""
    pass


class OutputFileError(SearchIOError):
    """Raised when the output file cannot be created or truncated."""
    pass


class FormatError(LineFinderError):
    """Raised when a delimited record cannot be parsed."""

    def __init__(self, message: str, line_number: Optional[int] = None,
                 original_error: Optional[BaseException] = None):
        super().__init__(message, original_error)
        self.line_number = line_number


class TaskError(LineFinderError):
    """Raised by the dispatcher when a match task failed."""
    pass
