"""Shared pytest fixtures for testing infrastructure.

CRITICAL: Environment variables MUST be set before ANY imports.
"""
import os
import pathlib
import tempfile

# ===============================================================================
# CRITICAL: Set test environment variables FIRST, before ANY other imports!
# This ensures Settings classes pick up the test database and data source.
# ===============================================================================
TEST_DB_PATH = pathlib.Path(tempfile.mkdtemp(prefix="industry_mapper_test_")) / "test.db"
TEST_DATABASE_URL = f"sqlite+aiosqlite:///{TEST_DB_PATH}"

# Override environment variables BEFORE importing any app code
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = TEST_DATABASE_URL
os.environ["DATABASE_ECHO"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["DATA_SOURCE"] = "mock"

# Now import everything else AFTER environment is configured
from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from httpx import ASGITransport
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.ext.asyncio import async_sessionmaker
from sqlalchemy.ext.asyncio import create_async_engine

from app.core.config import Settings
from app.core.config import get_settings
from app.core.database import get_db_session
from app.core.deps import get_industry_mapper
from app.core.deps import get_results_calendar_service
from app.models import Base
from app.providers.base import CSVDataset
from app.providers.mock import MockDataSource
from app.services.industry_mapper import IndustryMapper
from app.services.results_calendar_service import ResultsCalendarService
from app.utils.structured_logging import configure_structured_logging

# Small dataset used by the index scenario tests
SCENARIO_BASIC_RS_CSV = """\
Stock Name,Name,Basic Industry,Price,RS Rating,Volume,EPS Latest Quarter,QoQ % EPS Latest,YoY% EPS Latest,Sales Latest Quarter,QoQ % Sales Latest,YoY % Sales Latest
AAA,Alpha,Tech,100,80,1000,1.5,2.0,3.0,500,1.0,2.0
BBB,Beta,Tech,200,70,2000,,,,,,
CCC,Gamma,Finance,300,60,3000,2.5,,,,,
"""

SCENARIO_INDUSTRY_ANALYTICS_CSV = """\
Tech,2,75
Finance,1,60
"""

SCENARIO_RESULTS_CALENDAR_CSV = """\
Stock Name,Company name,Quarterly Results Date
AAA,Alpha,5 Apr 2025
CCC,Gamma,
"""

SCENARIO_DATASETS = {
    CSVDataset.BASIC_RS: SCENARIO_BASIC_RS_CSV,
    CSVDataset.INDUSTRY_ANALYTICS: SCENARIO_INDUSTRY_ANALYTICS_CSV,
    CSVDataset.RESULTS_CALENDAR: SCENARIO_RESULTS_CALENDAR_CSV,
}


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """Create test settings with test database configuration.

    Returns:
        Settings: Test configuration
    """
    return Settings(
        environment="test",
        database_url=TEST_DATABASE_URL,
        database_echo=False,
        log_level="WARNING",
        data_source="mock",
        debug=True,
    )


@pytest.fixture(scope="session", autouse=True)
def configure_logging(test_settings: Settings):
    """Configure structured logging for tests.

    Args:
        test_settings: Test configuration
    """
    configure_structured_logging(log_level=test_settings.log_level)


@pytest_asyncio.fixture
async def test_engine(test_settings: Settings):
    """Per-test database engine with freshly created tables.

    Args:
        test_settings: Test configuration

    Yields:
        AsyncEngine: Test database engine
    """
    engine = create_async_engine(test_settings.database_url, echo=test_settings.database_echo)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    yield engine
    await engine.dispose()


@pytest.fixture
def test_session_factory(test_engine):
    """Create test session factory.

    Args:
        test_engine: Test database engine

    Returns:
        async_sessionmaker: Test session factory
    """
    return async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
        autocommit=False,
    )


@pytest_asyncio.fixture
async def db_session(test_session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Per-test session on the test database."""
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def mock_data_source() -> MockDataSource:
    """Mock data source serving the built-in NSE sample datasets."""
    return MockDataSource()


@pytest.fixture
def scenario_data_source() -> MockDataSource:
    """Mock data source with AAA/BBB in Tech and CCC in Finance."""
    return MockDataSource(datasets=SCENARIO_DATASETS)


@pytest_asyncio.fixture
async def industry_mapper(mock_data_source: MockDataSource) -> IndustryMapper:
    """Industry mapper initialized from the NSE sample datasets."""
    mapper = IndustryMapper(mock_data_source)
    await mapper.initialize()
    return mapper


@pytest_asyncio.fixture
async def scenario_mapper(scenario_data_source: MockDataSource) -> IndustryMapper:
    """Industry mapper initialized from the AAA/BBB/CCC scenario."""
    mapper = IndustryMapper(scenario_data_source)
    await mapper.initialize()
    return mapper


@pytest_asyncio.fixture
async def results_calendar(mock_data_source: MockDataSource) -> ResultsCalendarService:
    """Results calendar loaded from the NSE sample datasets."""
    service = ResultsCalendarService(mock_data_source)
    await service.load()
    return service


@pytest.fixture
def override_get_db_session(test_session_factory):
    """Override the get_db_session dependency for tests.

    Mirrors the production dependency: commit on success, rollback on error.
    """

    async def _get_test_db_session():
        async with test_session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    return _get_test_db_session


@pytest.fixture
def app(
    test_settings: Settings,
    override_get_db_session,
    industry_mapper: IndustryMapper,
    results_calendar: ResultsCalendarService,
):
    """Create FastAPI test application with dependency overrides.

    Returns:
        FastAPI: Test application instance
    """
    from app.main import app as main_app

    main_app.dependency_overrides[get_settings] = lambda: test_settings
    main_app.dependency_overrides[get_db_session] = override_get_db_session
    main_app.dependency_overrides[get_industry_mapper] = lambda: industry_mapper
    main_app.dependency_overrides[get_results_calendar_service] = lambda: results_calendar

    yield main_app

    main_app.dependency_overrides.clear()


@pytest.fixture
def client(app) -> TestClient:
    """Create synchronous test client.

    Args:
        app: Test application instance

    Returns:
        TestClient: Synchronous test client
    """
    return TestClient(app)


@pytest_asyncio.fixture
async def async_client(app) -> AsyncGenerator[AsyncClient, None]:
    """Create async test client.

    Args:
        app: Test application instance

    Yields:
        AsyncClient: Async test client
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client


# Pytest configuration
def pytest_configure(config):
    """Configure pytest with custom markers.

    Args:
        config: Pytest configuration
    """
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")
    config.addinivalue_line("markers", "slow: mark test as slow running")
