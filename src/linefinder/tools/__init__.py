"""
Search tools for linefinder.

This package contains the building blocks the engine composes: record
readers, output sinks and concurrent task dispatch.
"""
