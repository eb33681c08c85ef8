"""Schemas for the results calendar export API."""
import datetime

from pydantic import Field

from app.schemas.base import StrictBaseModel


class ResultDateOptionSchema(StrictBaseModel):
    value: str = Field(description="Date as DD-MMM-YYYY")
    label: str = Field(description="e.g. '16-APR-2025 (3 symbols)'")
    date: datetime.date
    symbols: list[str]


class ResultDatesResponse(StrictBaseModel):
    """All results dates in chronological order."""

    dates: list[ResultDateOptionSchema]
    count: int
    suggested_range_start: str | None = Field(
        None, description="Today, the next date with results, or the last date"
    )
    loaded: bool


class ResultDateSymbolsResponse(StrictBaseModel):
    """Symbols reporting on one results date."""

    value: str = Field(description="Date as DD-MMM-YYYY")
    symbols: list[str]
    count: int


class ResultsCalendarExportResponse(StrictBaseModel):
    text: str = Field(description="'### DD-MMM-YYYY,NSE:A,NSE:B' sections joined by ', '")
    section_count: int

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "text": "### 16-APR-2025,NSE:WIPRO, ### 17-APR-2025,NSE:INFY",
                    "section_count": 2,
                }
            ]
        }
    }
