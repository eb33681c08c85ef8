"""Tests for Results Calendar API endpoints."""

import pytest
from httpx import AsyncClient

from app.core.deps import get_results_calendar_service
from app.providers.mock import MockDataSource
from app.services.results_calendar_service import ResultsCalendarService

ALL_SECTIONS = (
    "### 10-APR-2025,NSE:TCS, "
    "### 16-APR-2025,NSE:WIPRO, "
    "### 17-APR-2025,NSE:INFY, "
    "### 19-APR-2025,NSE:HDFCBANK,NSE:ICICIBANK, "
    "### 25-APR-2025,NSE:RELIANCE"
)


class TestResultsDates:
    """Tests for GET /api/v1/results-calendar/dates."""

    @pytest.mark.asyncio
    async def test_dates(self, async_client: AsyncClient):
        response = await async_client.get("/api/v1/results-calendar/dates")

        assert response.status_code == 200
        data = response.json()
        assert data["loaded"] is True
        assert data["count"] == 5
        assert [d["value"] for d in data["dates"]] == [
            "10-APR-2025",
            "16-APR-2025",
            "17-APR-2025",
            "19-APR-2025",
            "25-APR-2025",
        ]
        assert data["dates"][3] == {
            "value": "19-APR-2025",
            "label": "19-APR-2025 (2 symbols)",
            "date": "2025-04-19",
            "symbols": ["HDFCBANK", "ICICIBANK"],
        }
        # Sample dates are in the past, so the last date is suggested
        assert data["suggested_range_start"] in {d["value"] for d in data["dates"]}

    @pytest.mark.asyncio
    async def test_dates_when_load_failed(self, app, async_client: AsyncClient):
        failed = ResultsCalendarService(MockDataSource(fail=True))
        await failed.load()
        app.dependency_overrides[get_results_calendar_service] = lambda: failed

        response = await async_client.get("/api/v1/results-calendar/dates")

        assert response.status_code == 200
        assert response.json() == {
            "dates": [],
            "count": 0,
            "suggested_range_start": None,
            "loaded": False,
        }


class TestResultsExport:
    """Tests for GET /api/v1/results-calendar/export."""

    @pytest.mark.asyncio
    async def test_export_all(self, async_client: AsyncClient):
        response = await async_client.get("/api/v1/results-calendar/export")

        assert response.status_code == 200
        assert response.json() == {"text": ALL_SECTIONS, "section_count": 5}

    @pytest.mark.asyncio
    async def test_export_range_descending(self, async_client: AsyncClient):
        response = await async_client.get(
            "/api/v1/results-calendar/export",
            params={
                "date_filter": "range",
                "start_date": "16-APR-2025",
                "end_date": "19-apr-2025",
                "sort_order": "desc",
            },
        )

        assert response.status_code == 200
        assert response.json()["text"] == (
            "### 19-APR-2025,NSE:HDFCBANK,NSE:ICICIBANK, "
            "### 17-APR-2025,NSE:INFY, "
            "### 16-APR-2025,NSE:WIPRO"
        )

    @pytest.mark.asyncio
    async def test_export_selected_dates(self, async_client: AsyncClient):
        response = await async_client.get(
            "/api/v1/results-calendar/export",
            params=[
                ("date_filter", "select"),
                ("dates", "25-APR-2025"),
                ("dates", "10-APR-2025"),
            ],
        )

        assert response.status_code == 200
        assert response.json() == {
            "text": "### 10-APR-2025,NSE:TCS, ### 25-APR-2025,NSE:RELIANCE",
            "section_count": 2,
        }

    @pytest.mark.asyncio
    async def test_export_symbol_filter(self, async_client: AsyncClient):
        response = await async_client.get(
            "/api/v1/results-calendar/export", params={"symbol": "icici"}
        )

        assert response.json() == {
            "text": "### 19-APR-2025,NSE:ICICIBANK",
            "section_count": 1,
        }

    @pytest.mark.asyncio
    async def test_export_invalid_bound(self, async_client: AsyncClient):
        response = await async_client.get(
            "/api/v1/results-calendar/export",
            params={"date_filter": "range", "start_date": "2025-04-16"},
        )

        assert response.status_code == 400
        assert "start_date" in response.json()["detail"]

    @pytest.mark.asyncio
    async def test_export_unknown_filter(self, async_client: AsyncClient):
        response = await async_client.get(
            "/api/v1/results-calendar/export", params={"date_filter": "weekly"}
        )

        assert response.status_code == 422


class TestResultDateSymbols:
    """Tests for GET /api/v1/results-calendar/dates/{result_date}."""

    @pytest.mark.asyncio
    async def test_symbols_on_date(self, async_client: AsyncClient):
        response = await async_client.get("/api/v1/results-calendar/dates/19-APR-2025")

        assert response.status_code == 200
        assert response.json() == {
            "value": "19-APR-2025",
            "symbols": ["HDFCBANK", "ICICIBANK"],
            "count": 2,
        }

    @pytest.mark.asyncio
    async def test_date_is_normalized(self, async_client: AsyncClient):
        response = await async_client.get("/api/v1/results-calendar/dates/10-apr-2025")

        assert response.status_code == 200
        assert response.json()["symbols"] == ["TCS"]

    @pytest.mark.asyncio
    async def test_date_without_results(self, async_client: AsyncClient):
        response = await async_client.get("/api/v1/results-calendar/dates/11-APR-2025")

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_malformed_date(self, async_client: AsyncClient):
        response = await async_client.get("/api/v1/results-calendar/dates/2025-04-10")

        assert response.status_code == 400
