"""Unit tests for database repositories."""
