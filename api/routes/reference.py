"""
Reference data endpoints.

GET /api/v1/countries               → all countries (optional ?continent=)
GET /api/v1/countries/{continent}   → countries on one continent
GET /api/v1/continents              → distinct continents

The staging bucket never appears in any of these lists.
"""

from fastapi import APIRouter, Depends
from fastapi import Query as FQuery
from fastapi.responses import JSONResponse

from api.database import get_queries
from api.models import CountryOut
from expenditure.facade import ExpenditureQueries

router = APIRouter(tags=["reference"])

_CACHE_HEADER = {"Cache-Control": "max-age=3600"}


@router.get(
    "/countries",
    response_model=list[CountryOut],
    summary="List countries",
)
def list_countries(
    continent: str | None = FQuery(None, description="Only countries on this continent"),
    queries: ExpenditureQueries = Depends(get_queries),
) -> JSONResponse:
    """Return every country sorted by name, optionally filtered by continent."""
    data = [c.to_dict() for c in queries.list_countries(continent)]
    return JSONResponse(content=data, headers=_CACHE_HEADER)


@router.get(
    "/countries/{continent}",
    response_model=list[CountryOut],
    summary="List countries on a continent",
)
def list_countries_by_continent(
    continent: str,
    queries: ExpenditureQueries = Depends(get_queries),
) -> JSONResponse:
    """Return the countries of one continent; unknown continents give []."""
    data = [c.to_dict() for c in queries.list_countries(continent)]
    return JSONResponse(content=data, headers=_CACHE_HEADER)


@router.get(
    "/continents",
    response_model=list[str],
    summary="List continents",
)
def list_continents(queries: ExpenditureQueries = Depends(get_queries)) -> JSONResponse:
    """Return all distinct continents, sorted."""
    return JSONResponse(content=queries.list_continents(), headers=_CACHE_HEADER)
