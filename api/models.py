"""
Pydantic response models for the API.

Field names follow the JSON the front end already consumes:
name/continent/region/amount for year views, year/amount for series, and
country/expenditure_start/expenditure_end/growth_rate for growth rankings.
Amounts are in millions of currency units.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


# ── Reference data models ─────────────────────────────────────────────────────

class CountryOut(BaseModel):
    """A country (the staging bucket is never returned)."""
    id: int = Field(..., description="Stable country ID", examples=[42])
    name: str = Field(..., description="Country name, unique in the dataset", examples=["France"])
    continent: str = Field(..., description="Continent classification", examples=["europen"])
    region: str | None = Field(None, description="Finer-grained region, if known")
    iso_code: str | None = Field(None, description="ISO 3166 alpha-3 code", examples=["FRA"])
    population: int | None = Field(None, description="Population, if known")
    latitude: float | None = Field(None, description="Map latitude")
    longitude: float | None = Field(None, description="Map longitude")


# ── Expenditure models ────────────────────────────────────────────────────────

class YearExpenditureOut(BaseModel):
    """One country's recorded expenditure for a year."""
    name: str = Field(..., description="Country name", examples=["France"])
    continent: str = Field(..., description="Continent classification", examples=["europen"])
    region: str | None = Field(None, description="Finer-grained region, if known")
    amount: float = Field(..., description="Expenditure in millions", examples=[53639.0])


class TimeSeriesPointOut(BaseModel):
    """One recorded year of a country's series."""
    year: int = Field(..., description="Calendar year", examples=[2020])
    amount: float = Field(..., description="Expenditure in millions", examples=[52747.0])


class CountrySeriesOut(BaseModel):
    """Full series of one country keyed by year."""
    country: str = Field(..., description="Country name as requested", examples=["France"])
    years: dict[str, float] = Field(..., description="Recorded amounts keyed by year")


class GrowthRateOut(BaseModel):
    """Percentage change between two years for one country."""
    country: str = Field(..., description="Country name", examples=["France"])
    expenditure_start: float = Field(..., description="Amount in the start year")
    expenditure_end: float = Field(..., description="Amount in the end year")
    growth_rate: float = Field(..., description="(end - start) / start * 100", examples=[12.5])


class ContinentSummaryOut(BaseModel):
    """Aggregate of recorded amounts for one continent in one year."""
    continent: str = Field(..., description="Continent classification", examples=["african"])
    year: int = Field(..., description="Calendar year", examples=[2020])
    total_expenditure: float = Field(..., description="Sum of recorded amounts")
    avg_expenditure: float = Field(..., description="Mean of recorded amounts")
    country_count: int = Field(..., description="Countries with a recorded amount")


# ── Error model ───────────────────────────────────────────────────────────────

class ErrorResponse(BaseModel):
    """Standard error response body."""
    error: str = Field(..., description="Short error category", examples=["Not found"])
    detail: str | None = Field(None, description="Extended error detail")
    status_code: int = Field(..., ge=400, le=599, description="HTTP status code", examples=[404])
