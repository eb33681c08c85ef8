"""Unit tests for reference data sources.

This package contains unit tests for the file, HTTP and mock sources that
serve the CSV datasets.
"""
