"""API endpoints for symbol lookup, cleaning and bulk processing."""
import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import Response

from app.core.config import get_settings
from app.core.deps import get_industry_mapper, get_validated_symbol
from app.core.rate_limit import limiter
from app.models.stock import ProcessResult
from app.schemas.symbols import (
    CleanSymbolsRequest,
    CleanSymbolsResponse,
    ExportCsvRequest,
    ExportFormat,
    IndustryShareSchema,
    MappedSymbolSchema,
    ProcessSymbolsRequest,
    ProcessSymbolsResponse,
    SymbolIndustryResponse,
    SymbolListResponse,
)
from app.services.export_service import (
    build_fundamentals_csv,
    build_mapping_csv,
    industry_distribution,
)
from app.services.industry_mapper import IndustryMapper

logger = logging.getLogger(__name__)
router = APIRouter()

CSV_FILENAMES = {
    ExportFormat.MAPPING: "industry_mapping.csv",
    ExportFormat.FUNDAMENTALS: "industry_fundamentals.csv",
}


def _to_response(result: ProcessResult) -> ProcessSymbolsResponse:
    """Convert a ProcessResult to the response schema."""
    return ProcessSymbolsResponse(
        mapped_symbols=[MappedSymbolSchema(**item.to_dict()) for item in result.mapped_symbols],
        invalid_symbols=result.invalid_symbols,
        categorized_output=result.categorized_output,
        flat_output=result.flat_output,
        distribution=[
            IndustryShareSchema(industry=s.industry, count=s.count, percentage=s.percentage)
            for s in industry_distribution(result.mapped_symbols)
        ],
        mapped_count=len(result.mapped_symbols),
        invalid_count=len(result.invalid_symbols),
    )


@router.get(
    "",
    response_model=SymbolListResponse,
    summary="List Symbols",
    description="All known symbols in alphabetical order.",
    operation_id="list_symbols",
)
async def list_symbols(
    mapper: IndustryMapper = Depends(get_industry_mapper),
) -> SymbolListResponse:
    symbols = mapper.list_symbols()
    return SymbolListResponse(symbols=symbols, count=len(symbols))


@router.get(
    "/{symbol}/industry",
    response_model=SymbolIndustryResponse,
    summary="Industry Of Symbol",
    description="Look up the industry of a single symbol. An NSE: prefix is accepted.",
    operation_id="get_symbol_industry",
    responses={
        400: {"description": "Invalid symbol format"},
        404: {"description": "Symbol not found"},
    },
)
async def get_symbol_industry(
    symbol: str = Depends(get_validated_symbol),
    mapper: IndustryMapper = Depends(get_industry_mapper),
) -> SymbolIndustryResponse:
    industry = mapper.industry_for_symbol(symbol)
    if industry is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Symbol '{symbol}' not found",
        )
    return SymbolIndustryResponse(symbol=symbol, industry=industry)


@router.post(
    "/clean",
    response_model=CleanSymbolsResponse,
    summary="Clean Symbols",
    description="Split pasted text on commas, semicolons and newlines; uppercase, "
    "strip NSE: prefixes and drop duplicates.",
    operation_id="clean_symbols",
)
async def clean_symbols(
    request: CleanSymbolsRequest,
    mapper: IndustryMapper = Depends(get_industry_mapper),
) -> CleanSymbolsResponse:
    symbols = mapper.clean_symbols(request.text)
    return CleanSymbolsResponse(symbols=symbols, count=len(symbols))


@router.post(
    "/process",
    response_model=ProcessSymbolsResponse,
    summary="Process Symbols",
    description="Map up to 999 symbols to industries and build both TradingView exports. "
    "Extra symbols are truncated, unknown symbols are reported as invalid.",
    operation_id="process_symbols",
    responses={
        429: {"description": "Rate limit exceeded"},
    },
)
@limiter.limit(get_settings().process_rate_limit)
async def process_symbols(
    request: Request,
    body: ProcessSymbolsRequest,
    mapper: IndustryMapper = Depends(get_industry_mapper),
) -> ProcessSymbolsResponse:
    result = await mapper.process_symbols(
        body.combined(), include_fundamentals=body.include_fundamentals
    )
    logger.info(
        f"Processed symbols: {len(result.mapped_symbols)} mapped, "
        f"{len(result.invalid_symbols)} invalid"
    )
    return _to_response(result)


@router.post(
    "/export/csv",
    summary="Export CSV",
    description="Download mapped symbols as CSV: 'mapping' (Symbol,Industry) or "
    "'fundamentals' (with latest-quarter figures and results date).",
    operation_id="export_symbols_csv",
    response_class=Response,
    responses={
        200: {"content": {"text/csv": {}}, "description": "CSV file"},
    },
)
async def export_symbols_csv(
    body: ExportCsvRequest,
    mapper: IndustryMapper = Depends(get_industry_mapper),
) -> Response:
    include_fundamentals = body.format == ExportFormat.FUNDAMENTALS
    result = await mapper.process_symbols(body.combined(), include_fundamentals=include_fundamentals)

    if include_fundamentals:
        content = build_fundamentals_csv(result.mapped_symbols)
    else:
        content = build_mapping_csv(result.mapped_symbols)

    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{CSV_FILENAMES[body.format]}"'},
    )
