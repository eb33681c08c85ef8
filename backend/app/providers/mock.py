"""Mock data source for testing.

Serves small in-memory CSV payloads without touching disk or network.
Useful for unit tests, API tests, and development without the real datasets.
"""
import asyncio
import logging
from collections.abc import Iterable

from app.core.exceptions import DataSourceError
from app.providers.base import CSVDataset, DataSourceInterface

logger = logging.getLogger(__name__)

SAMPLE_BASIC_RS_CSV = """\
Stock Name,Name,Basic Industry,Price,RS Rating,Volume,EPS Latest Quarter,QoQ % EPS Latest,YoY% EPS Latest,Sales Latest Quarter,QoQ % Sales Latest,YoY % Sales Latest
TCS,Tata Consultancy Services,Computers - Software & Consulting,3450.5,72,1850000,12.3,4.1,8.9,64259,3.2,5.4
INFY,Infosys,Computers - Software & Consulting,1502.1,65,5300000,16.4,-2.3,4.5,40986,1.1,6.1
WIPRO,Wipro,Computers - Software & Consulting,248.7,48,9100000,3.1,0.5,2.2,22504,-0.4,-1.2
HDFCBANK,HDFC Bank,Private Sector Bank,1720.0,81,12000000,23.6,5.0,12.1,87460,4.8,9.7
ICICIBANK,ICICI Bank,Private Sector Bank,1255.4,88,15000000,16.8,3.9,14.2,42010,2.9,11.3
SBIN,State Bank of India,Public Sector Bank,780.2,70,21000000,20.1,-1.5,9.8,125000,2.2,8.0
RELIANCE,Reliance Industries,Refineries & Marketing,2890.0,60,6700000,29.9,1.2,-3.4,231132,0.8,2.5
SUNPHARMA,Sun Pharmaceutical Industries,Pharmaceuticals,1650.3,77,2100000,12.0,6.6,18.4,12653,4.0,9.1
"""

SAMPLE_INDUSTRY_ANALYTICS_CSV = """\
Computers - Software & Consulting,3,61.7
Private Sector Bank,2,84.5
Public Sector Bank,1,70.0
Refineries & Marketing,1,60.0
Pharmaceuticals,1,77.0
Cement & Cement Products,0,0
"""

SAMPLE_RESULTS_CALENDAR_CSV = """\
Stock Name,Company name,Quarterly Results Date
TCS,Tata Consultancy Services,10 Apr 2025
INFY,Infosys,17 Apr 2025
WIPRO,Wipro,16 Apr 2025
HDFCBANK,HDFC Bank,19 Apr 2025
ICICIBANK,ICICI Bank,19 Apr 2025
RELIANCE,Reliance Industries,25 Apr 2025
"""

SAMPLE_DATASETS: dict[CSVDataset, str] = {
    CSVDataset.BASIC_RS: SAMPLE_BASIC_RS_CSV,
    CSVDataset.INDUSTRY_ANALYTICS: SAMPLE_INDUSTRY_ANALYTICS_CSV,
    CSVDataset.RESULTS_CALENDAR: SAMPLE_RESULTS_CALENDAR_CSV,
}


class MockDataSource(DataSourceInterface):
    """
    Mock data source for testing.

    Useful for:
    - Unit tests that need predictable data
    - Simulating fetch failures (``fail``) and slow sources (``delay``)
    - Development environments without the real CSV files
    """

    def __init__(
        self,
        datasets: dict[CSVDataset, str] | None = None,
        fail: bool | Iterable[CSVDataset] = False,
        delay: float = 0.0,
    ):
        self.datasets = dict(SAMPLE_DATASETS if datasets is None else datasets)
        if isinstance(fail, bool):
            self.failing = set(CSVDataset) if fail else set()
        else:
            self.failing = set(fail)
        self.delay = delay
        self.fetch_count = 0

    @property
    def source_name(self) -> str:
        return "mock"

    async def fetch_text(self, dataset: CSVDataset) -> str:
        """Return the configured payload for a dataset."""
        self.fetch_count += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if dataset in self.failing:
            raise DataSourceError(f"Mock fetch failure for {dataset.value}")
        if dataset not in self.datasets:
            raise DataSourceError(f"No mock payload for {dataset.value}")
        return self.datasets[dataset]
