"""Reference data source abstractions and implementations.

This package provides a source-agnostic interface for fetching the CSV
datasets the industry index is built from.

Available sources:
- HttpDataSource: CSV files served as static assets
- FileDataSource: CSV files in a local directory
- MockDataSource: In-memory sample data for testing
"""

from app.providers.base import (
    CSVDataset,
    DataSourceInterface,
    dataset_filenames,
)
from app.providers.file_source import FileDataSource
from app.providers.http_source import HttpDataSource
from app.providers.mock import MockDataSource

__all__ = [
    "CSVDataset",
    "DataSourceInterface",
    "dataset_filenames",
    "FileDataSource",
    "HttpDataSource",
    "MockDataSource",
]
