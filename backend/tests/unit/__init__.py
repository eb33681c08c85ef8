"""Unit tests for the Industry Mapper backend.

This package contains unit tests for the reference data sources, the CSV
parsing and industry index services, the watchlist service and utilities.
"""
