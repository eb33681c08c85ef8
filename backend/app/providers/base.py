"""Base data source interface for CSV reference data.

This module defines the contract that all reference data sources must
implement. A data source only knows how to return the raw text of a dataset;
parsing and indexing happen in the service layer.
"""
from abc import ABC, abstractmethod
from enum import Enum

from app.core.config import Settings


class CSVDataset(str, Enum):
    """The three reference datasets the industry index is built from."""

    BASIC_RS = "basic_rs"  # Stock name, industry, RS rating, fundamentals
    INDUSTRY_ANALYTICS = "industry_analytics"  # Industry catalog, first column only
    RESULTS_CALENDAR = "results_calendar"  # Quarterly results dates


def dataset_filenames(settings: Settings) -> dict[CSVDataset, str]:
    """Map each dataset to its configured file name."""
    return {
        CSVDataset.BASIC_RS: settings.basic_rs_filename,
        CSVDataset.INDUSTRY_ANALYTICS: settings.industry_analytics_filename,
        CSVDataset.RESULTS_CALENDAR: settings.results_calendar_filename,
    }


class DataSourceInterface(ABC):
    """
    Abstract interface for CSV reference data sources.

    This interface defines the contract that all data sources
    (HTTP, local files, Mock) must implement.
    """

    @property
    @abstractmethod
    def source_name(self) -> str:
        """Return the name of this source (e.g., 'http')."""
        pass

    @abstractmethod
    async def fetch_text(self, dataset: CSVDataset) -> str:
        """
        Fetch the raw CSV text of a dataset.

        Args:
            dataset: Which dataset to fetch

        Returns:
            The dataset contents as text

        Raises:
            DataSourceError: If the dataset cannot be retrieved
        """
        pass

    async def close(self) -> None:
        """Release any held resources. Sources without resources do nothing."""
        return None
