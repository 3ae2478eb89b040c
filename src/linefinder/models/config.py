"""
Configuration data models for linefinder.

This module defines the immutable per-search configuration (term and paths)
and the engine settings that tune how a search is executed: concurrency,
text decoding, highlight style and delimited-record parsing.
"""

import codecs
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from rich.errors import StyleSyntaxError
from rich.style import Style


class RecordFormat(Enum):
    """Record shapes understood by the reader, keyed by file extension."""
    TEXT = "text"
    CSV = "csv"
    UNSUPPORTED = "unsupported"

    @classmethod
    def from_path(cls, path: str) -> 'RecordFormat':
        """
        Detect the record format of a file from its extension.

        The comparison is case-sensitive: ``notes.TXT`` is not a text file.
        Unknown extensions map to UNSUPPORTED, which produces no records.

        Args:
            path: Input file path

        Returns:
            The detected RecordFormat
        """
        suffix = Path(path).suffix
        if suffix == ".txt":
            return cls.TEXT
        if suffix == ".csv":
            return cls.CSV
        return cls.UNSUPPORTED


class SearchConfiguration(BaseModel):
    """
    Immutable description of a single search.

    Attributes:
        term: Substring to look for (matched case-insensitively)
        input_path: File to scan
        output_path: File to write matches to; empty selects console output
    """

    model_config = ConfigDict(frozen=True)

    term: str = Field(..., min_length=1, description="Substring to search for")
    input_path: str = Field(..., min_length=1, description="File to scan")
    output_path: str = Field("", description="Output file, empty for console output")

    @field_validator('output_path', mode='before')
    @classmethod
    def validate_output_path(cls, v: Optional[str]) -> str:
        """Treat a missing output path as console mode."""
        return v or ""

    @property
    def record_format(self) -> RecordFormat:
        return RecordFormat.from_path(self.input_path)

    def writes_to_file(self) -> bool:
        """Check if matches go to an output file rather than the console."""
        return self.output_path != ""

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        data = self.model_dump()
        data['record_format'] = self.record_format.value
        return data

    def __str__(self) -> str:
        parts = [f"Term: '{self.term}'", f"Input: {self.input_path}"]
        parts.append(f"Output: {self.output_path or 'console'}")
        return " | ".join(parts)


class CSVSettings(BaseModel):
    """
    Settings for delimited-record parsing.

    Attributes:
        delimiter: Field separator character
        quotechar: Character used to quote fields
        strict_field_count: Require every record to have as many fields as the first
    """

    delimiter: str = Field(",", min_length=1, max_length=1, description="Field separator")
    quotechar: str = Field('"', min_length=1, max_length=1, description="Quote character")
    strict_field_count: bool = Field(True, description="Reject records with a differing field count")

    @field_validator('delimiter', 'quotechar')
    @classmethod
    def validate_special_chars(cls, v: str) -> str:
        if v in ("\r", "\n"):
            raise ValueError("Delimiter and quote character cannot be line terminators")
        return v


class EngineSettings(BaseModel):
    """
    Tunables for the search engine, usually loaded from a YAML settings file.

    Attributes:
        max_workers: Worker thread cap; None launches one thread per record
        encoding: Text encoding of the input file
        encoding_errors: Codec error handler for the input and output files
        highlight_style: Rich style applied to the term in console output
        csv: Delimited-record parsing settings
    """

    max_workers: Optional[int] = Field(None, gt=0, description="Worker thread cap, None for unbounded")
    encoding: str = Field("utf-8", description="Input file encoding")
    encoding_errors: str = Field("surrogateescape", description="Codec error handler")
    highlight_style: str = Field("red", description="Rich style for highlighted terms")
    csv: CSVSettings = Field(default_factory=CSVSettings, description="Delimited-record settings")

    @field_validator('encoding')
    @classmethod
    def validate_encoding(cls, v: str) -> str:
        """Ensure the encoding is known to the codec registry."""
        try:
            codecs.lookup(v)
        except LookupError:
            raise ValueError(f"Unknown encoding: {v}")
        return v

    @field_validator('encoding_errors')
    @classmethod
    def validate_encoding_errors(cls, v: str) -> str:
        try:
            codecs.lookup_error(v)
        except LookupError:
            raise ValueError(f"Unknown codec error handler: {v}")
        return v

    @field_validator('highlight_style')
    @classmethod
    def validate_highlight_style(cls, v: str) -> str:
        """Ensure the style string parses as a rich style."""
        try:
            Style.parse(v)
        except StyleSyntaxError as e:
            raise ValueError(f"Invalid highlight style '{v}': {e}")
        return v

    def is_unbounded(self) -> bool:
        """Check if the engine launches one thread per record."""
        return self.max_workers is None

    def validate_settings(self) -> List[str]:
        """
        Collect non-fatal warnings about these settings.

        Returns:
            List of warning messages
        """
        warnings = []

        if self.is_unbounded():
            warnings.append(
                "max_workers is not set; one thread is started per record, "
                "which may exhaust resources on large inputs"
            )
        elif self.max_workers > 256:
            warnings.append(f"Very high max_workers ({self.max_workers}) may exhaust resources")

        if self.encoding_errors in ("ignore", "replace"):
            warnings.append(
                f"encoding_errors '{self.encoding_errors}' alters undecodable bytes in file output"
            )

        return warnings

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return self.model_dump()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'EngineSettings':
        """Create settings from dictionary representation."""
        return cls.model_validate(data)

    def __str__(self) -> str:
        workers = "unbounded" if self.is_unbounded() else str(self.max_workers)
        return f"Workers: {workers} | Encoding: {self.encoding} | Style: {self.highlight_style}"


def validate_settings_dict(settings_data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Validate a settings dictionary using Pydantic.

    Args:
        settings_data: Dictionary containing settings data

    Returns:
        Validated and normalized settings dictionary

    Raises:
        ValueError: If settings are invalid
    """
    known_keys = set(EngineSettings.model_fields)
    unknown = sorted(set(settings_data) - known_keys)
    if unknown:
        raise ValueError(f"Unknown settings keys: {', '.join(unknown)}")

    try:
        return EngineSettings.model_validate(settings_data).to_dict()
    except Exception as e:
        raise ValueError(f"Settings validation failed: {e}") from e
