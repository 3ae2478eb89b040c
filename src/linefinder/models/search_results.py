"""
Search result data models for linefinder.

A search does not collect its matches (they stream straight to a sink), so
the result of a run is a summary of what was read and emitted.
"""

from typing import Any, Dict

from pydantic import BaseModel, Field, model_validator

from .config import RecordFormat


class SearchSummary(BaseModel):
    """
    Summary of a completed search run.

    Attributes:
        input_path: File that was scanned
        output_path: File matches were written to, empty for console output
        record_format: Record shape detected from the input extension
        records_read: Number of lines or delimited records read
        units_checked: Number of text units tested (lines, or csv fields)
        matches: Number of units emitted to the sink
    """

    input_path: str = Field(..., min_length=1, description="File that was scanned")
    output_path: str = Field("", description="Output file, empty for console output")
    record_format: RecordFormat = Field(..., description="Detected record format")
    records_read: int = Field(0, ge=0, description="Lines or records read")
    units_checked: int = Field(0, ge=0, description="Text units tested")
    matches: int = Field(0, ge=0, description="Units emitted to the sink")

    @model_validator(mode='after')
    def validate_counts(self):
        """Validate count consistency."""
        if self.matches > self.units_checked:
            raise ValueError("Matches cannot exceed the number of units checked")
        return self

    def has_matches(self) -> bool:
        return self.matches > 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert summary to dictionary representation."""
        data = self.model_dump()
        data['record_format'] = self.record_format.value
        return data

    def __str__(self) -> str:
        parts = [f"Input: {self.input_path} ({self.record_format.value})"]
        parts.append(f"Records: {self.records_read}")
        parts.append(f"Matches: {self.matches}")
        parts.append(f"Output: {self.output_path or 'console'}")
        return " | ".join(parts)
