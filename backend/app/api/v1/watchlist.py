"""API endpoints for the watchlist."""

from fastapi import APIRouter, Depends, HTTPException, status

from app.core.deps import get_validated_symbol, get_watchlist_service
from app.core.exceptions import DataValidationError
from app.schemas.watchlist import (
    WatchlistAddRequest,
    WatchlistContainsResponse,
    WatchlistReorderRequest,
    WatchlistResponse,
)
from app.services.watchlist_service import WatchlistService

router = APIRouter()


def _to_response(symbols: list[str]) -> WatchlistResponse:
    return WatchlistResponse(symbols=symbols, count=len(symbols))


@router.get(
    "",
    response_model=WatchlistResponse,
    summary="Get Watchlist",
    description="The current watchlist in display order.",
    operation_id="get_watchlist",
)
async def get_watchlist(
    service: WatchlistService = Depends(get_watchlist_service),
) -> WatchlistResponse:
    return _to_response(await service.get_symbols())


@router.post(
    "",
    response_model=WatchlistResponse,
    summary="Add To Watchlist",
    description="Add symbols given as a list and/or pasted text. Symbols already in "
    "the watchlist are ignored; new ones are appended in input order.",
    operation_id="add_to_watchlist",
)
async def add_to_watchlist(
    request: WatchlistAddRequest,
    service: WatchlistService = Depends(get_watchlist_service),
) -> WatchlistResponse:
    symbols = [*request.symbols, request.text] if request.text else request.symbols
    return _to_response(await service.add(symbols))


@router.delete(
    "",
    response_model=WatchlistResponse,
    summary="Clear Watchlist",
    description="Remove every symbol from the watchlist.",
    operation_id="clear_watchlist",
)
async def clear_watchlist(
    service: WatchlistService = Depends(get_watchlist_service),
) -> WatchlistResponse:
    return _to_response(await service.clear())


@router.put(
    "/order",
    response_model=WatchlistResponse,
    summary="Reorder Watchlist",
    description="Replace the watchlist order. The body must list exactly the current symbols.",
    operation_id="reorder_watchlist",
    responses={400: {"description": "Symbols are not a permutation of the watchlist"}},
)
async def reorder_watchlist(
    request: WatchlistReorderRequest,
    service: WatchlistService = Depends(get_watchlist_service),
) -> WatchlistResponse:
    try:
        symbols = await service.reorder(request.symbols)
    except DataValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return _to_response(symbols)


@router.get(
    "/{symbol}",
    response_model=WatchlistContainsResponse,
    summary="Check Watchlist",
    description="Whether a symbol is in the watchlist.",
    operation_id="watchlist_contains",
)
async def watchlist_contains(
    symbol: str = Depends(get_validated_symbol),
    service: WatchlistService = Depends(get_watchlist_service),
) -> WatchlistContainsResponse:
    return WatchlistContainsResponse(symbol=symbol, in_watchlist=await service.contains(symbol))


@router.delete(
    "/{symbol}",
    response_model=WatchlistResponse,
    summary="Remove From Watchlist",
    description="Remove one symbol. Removing a symbol that is not present is a no-op.",
    operation_id="remove_from_watchlist",
)
async def remove_from_watchlist(
    symbol: str = Depends(get_validated_symbol),
    service: WatchlistService = Depends(get_watchlist_service),
) -> WatchlistResponse:
    return _to_response(await service.remove(symbol))
