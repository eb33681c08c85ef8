"""API endpoints for browsing the industry index."""

from fastapi import APIRouter, Depends, Query

from app.core.deps import get_industry_mapper
from app.schemas.industry import (
    IndustryListResponse,
    IndustryStatsResponse,
    IndustrySymbolsResponse,
    TopIndustriesResponse,
    TopIndustry,
)
from app.services.industry_mapper import IndustryMapper

router = APIRouter()


@router.get(
    "",
    response_model=IndustryListResponse,
    summary="List Industries",
    description="All industry names in alphabetical order.",
    operation_id="list_industries",
)
async def list_industries(
    mapper: IndustryMapper = Depends(get_industry_mapper),
) -> IndustryListResponse:
    industries = mapper.list_industries()
    return IndustryListResponse(industries=industries, count=len(industries))


@router.get(
    "/stats",
    response_model=IndustryStatsResponse,
    summary="Index Statistics",
    description="Symbol and industry counts plus the load state of the index.",
    operation_id="get_industry_stats",
)
async def get_industry_stats(
    mapper: IndustryMapper = Depends(get_industry_mapper),
) -> IndustryStatsResponse:
    stats = mapper.stats()
    return IndustryStatsResponse(
        total_symbols=stats.total_symbols,
        mapped_industries=stats.mapped_industries,
        total_industries=stats.total_industries,
        ready=mapper.ready,
        degraded=mapper.degraded,
        load_error=mapper.load_error,
    )


@router.get(
    "/top",
    response_model=TopIndustriesResponse,
    summary="Largest Industries",
    description="Industries with the most symbols, largest first.",
    operation_id="get_top_industries",
)
async def get_top_industries(
    count: int = Query(10, ge=1, le=100, description="Number of industries to return"),
    mapper: IndustryMapper = Depends(get_industry_mapper),
) -> TopIndustriesResponse:
    return TopIndustriesResponse(
        items=[
            TopIndustry(industry=industry, count=size)
            for industry, size in mapper.top_industries(count)
        ]
    )


@router.get(
    "/{industry:path}/symbols",
    response_model=IndustrySymbolsResponse,
    summary="Symbols In Industry",
    description="Alphabetically sorted symbols of one industry. "
    "Unknown industries return an empty list.",
    operation_id="get_industry_symbols",
)
async def get_industry_symbols(
    industry: str,
    mapper: IndustryMapper = Depends(get_industry_mapper),
) -> IndustrySymbolsResponse:
    symbols = mapper.symbols_for_industry(industry)
    return IndustrySymbolsResponse(industry=industry, symbols=symbols, count=len(symbols))
