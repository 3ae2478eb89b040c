"""
Data models for linefinder.

This module contains the configuration and result structures shared by the
engine, the settings parser and the command-line entry point.
"""

from .config import CSVSettings, EngineSettings, RecordFormat, SearchConfiguration
from .search_results import SearchSummary

__all__ = ['CSVSettings', 'EngineSettings', 'RecordFormat', 'SearchConfiguration', 'SearchSummary']
