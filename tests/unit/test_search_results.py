"""
Unit tests for search result data models.
"""

import pytest
from pydantic import ValidationError

from linefinder.models.config import RecordFormat
from linefinder.models.search_results import SearchSummary


class TestSearchSummary:
    """Test cases for SearchSummary model."""

    def test_valid_summary(self):
        summary = SearchSummary(
            input_path="data.csv",
            record_format=RecordFormat.CSV,
            records_read=2,
            units_checked=4,
            matches=1,
        )

        assert summary.has_matches() is True
        assert summary.output_path == ""

    def test_empty_summary(self):
        summary = SearchSummary(input_path="app.log", record_format=RecordFormat.UNSUPPORTED)

        assert summary.records_read == 0
        assert summary.has_matches() is False

    def test_matches_cannot_exceed_units(self):
        with pytest.raises(ValidationError, match="Matches cannot exceed"):
            SearchSummary(input_path="a.txt", record_format=RecordFormat.TEXT, units_checked=1, matches=2)

    def test_negative_counts_rejected(self):
        with pytest.raises(ValidationError):
            SearchSummary(input_path="a.txt", record_format=RecordFormat.TEXT, records_read=-1)

    def test_to_dict(self):
        summary = SearchSummary(
            input_path="a.txt",
            output_path="out.txt",
            record_format=RecordFormat.TEXT,
            records_read=3,
            units_checked=3,
            matches=2,
        )

        assert summary.to_dict() == {
            'input_path': 'a.txt',
            'output_path': 'out.txt',
            'record_format': 'text',
            'records_read': 3,
            'units_checked': 3,
            'matches': 2,
        }

    def test_str_representation(self):
        summary = SearchSummary(input_path="a.txt", record_format=RecordFormat.TEXT, units_checked=3, matches=2)
        text = str(summary)

        assert "Input: a.txt (text)" in text
        assert "Matches: 2" in text
        assert "Output: console" in text
