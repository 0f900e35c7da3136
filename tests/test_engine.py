"""
Tests for expenditure/engine.py

Runs against every backend through the ``any_accessor`` fixture, plus a few
targeted in-memory datasets for ties, zero start amounts and missing years.
"""
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from expenditure import engine
from expenditure.accessor import InMemoryAccessor
from expenditure.errors import NotFound
from expenditure.models import Country, ExpenditureRecord


def _accessor(rows):
    """Build an accessor from (name, continent, {year: amount}) tuples."""
    countries, records = [], []
    for i, (name, continent, amounts) in enumerate(rows, start=1):
        countries.append(Country(i, name, continent))
        for year, amount in amounts.items():
            records.append(ExpenditureRecord(i, year, amount))
    return InMemoryAccessor(countries, records)


# ── Round-trip scenario ───────────────────────────────────────────────────────

class TestSampleScenario:
    def test_rank_by_year(self, any_accessor):
        rows = engine.rank_by_year(any_accessor, 2020)
        assert [(r.name, r.amount) for r in rows] == [("Beta", 200.0), ("Alpha", 100.0)]

    def test_rank_by_year_limited(self, any_accessor):
        rows = engine.rank_by_year(any_accessor, 2020, 1)
        assert [(r.name, r.amount) for r in rows] == [("Beta", 200.0)]

    def test_time_series(self, any_accessor):
        points = engine.time_series(any_accessor, "Alpha", 2020, 2021)
        assert [(p.year, p.amount) for p in points] == [(2020, 100.0), (2021, 150.0)]

    def test_growth_rates(self, any_accessor):
        rows = engine.growth_rates(any_accessor, 2020, 2021)
        assert [r.country for r in rows] == ["Alpha", "Beta"]
        assert rows[0].expenditure_start == 100.0
        assert rows[0].expenditure_end == 150.0
        assert rows[0].growth_rate == pytest.approx(50.0)
        assert rows[1].growth_rate == pytest.approx(-10.0)

    def test_list_all_excludes_staging_bucket(self, any_accessor):
        assert [c.name for c in engine.list_all(any_accessor)] == ["Alpha", "Beta"]

    def test_list_continents(self, any_accessor):
        assert engine.list_continents(any_accessor) == ["Asia", "Europe"]

    def test_continent_summary(self, any_accessor):
        summaries = engine.continent_summary(any_accessor, 2020)
        assert [(s.continent, s.total_expenditure, s.country_count)
                for s in summaries] == [("Europe", 200.0, 1), ("Asia", 100.0, 1)]


# ── Countries ─────────────────────────────────────────────────────────────────

class TestListAll:
    def test_filter_by_continent(self, memory_accessor):
        assert [c.name for c in engine.list_all(memory_accessor, "Europe")] == ["Beta"]

    def test_unknown_continent_is_empty(self, memory_accessor):
        assert engine.list_all(memory_accessor, "Atlantis") == []

    def test_sentinel_continent_is_empty(self, memory_accessor):
        assert engine.list_all(memory_accessor, "current_data") == []

    def test_sorted_by_name(self):
        acc = _accessor([("Zeta", "Asia", {}), ("Eta", "Asia", {}), ("Ares", "Asia", {})])
        assert [c.name for c in engine.list_all(acc)] == ["Ares", "Eta", "Zeta"]


class TestResolveCountry:
    def test_by_id(self, memory_accessor):
        assert engine.resolve_country(memory_accessor, 2).name == "Beta"

    def test_by_name(self, memory_accessor):
        assert engine.resolve_country(memory_accessor, "Alpha").id == 1

    def test_name_is_case_sensitive(self, memory_accessor):
        with pytest.raises(NotFound):
            engine.resolve_country(memory_accessor, "alpha")

    def test_unknown_id(self, memory_accessor):
        with pytest.raises(NotFound) as exc:
            engine.resolve_country(memory_accessor, 99)
        assert exc.value.key == 99

    def test_staging_bucket_by_name(self, any_accessor):
        with pytest.raises(NotFound):
            engine.resolve_country(any_accessor, "Gamma")

    def test_staging_bucket_by_id(self, any_accessor):
        with pytest.raises(NotFound):
            engine.resolve_country(any_accessor, 3)


# ── Per-year views ────────────────────────────────────────────────────────────

class TestRankByYear:
    def test_ties_broken_by_name(self):
        acc = _accessor([
            ("Charlie", "Asia", {2020: 50.0}),
            ("Bravo", "Asia", {2020: 50.0}),
            ("Delta", "Asia", {2020: 70.0}),
        ])
        assert [r.name for r in engine.rank_by_year(acc, 2020)] == ["Delta", "Bravo", "Charlie"]

    def test_missing_amounts_are_skipped(self):
        acc = _accessor([("Alpha", "Asia", {2020: None}), ("Beta", "Asia", {2020: 0.0})])
        rows = engine.rank_by_year(acc, 2020)
        assert [(r.name, r.amount) for r in rows] == [("Beta", 0.0)]

    def test_year_without_data_is_empty(self, any_accessor):
        assert engine.rank_by_year(any_accessor, 1800) == []

    def test_limit_larger_than_result(self, memory_accessor):
        assert len(engine.rank_by_year(memory_accessor, 2020, 10)) == 2

    def test_rows_carry_continent(self, memory_accessor):
        top = engine.rank_by_year(memory_accessor, 2020)[0]
        assert top.continent == "Europe"
        assert top.region is None


class TestExpenditureByYear:
    def test_sorted_by_name(self, any_accessor):
        rows = engine.expenditure_by_year(any_accessor, 2021)
        assert [(r.name, r.amount) for r in rows] == [("Alpha", 150.0), ("Beta", 180.0)]


class TestContinentSummary:
    def test_average_ignores_missing_years(self):
        acc = _accessor([
            ("Alpha", "Asia", {2020: 100.0}),
            ("Beta", "Asia", {2020: 300.0}),
            ("Gamma", "Asia", {2020: None}),
        ])
        (summary,) = engine.continent_summary(acc, 2020)
        assert summary.total_expenditure == 400.0
        assert summary.avg_expenditure == 200.0
        assert summary.country_count == 2
        assert summary.year == 2020


# ── Per-country series ────────────────────────────────────────────────────────

class TestTimeSeries:
    def test_open_bounds_return_everything(self, any_accessor):
        points = engine.time_series(any_accessor, 2)
        assert [(p.year, p.amount) for p in points] == [(2020, 200.0), (2021, 180.0)]

    def test_bounds_are_inclusive(self, memory_accessor):
        points = engine.time_series(memory_accessor, "Alpha", 2021, 2021)
        assert [p.year for p in points] == [2021]

    def test_absent_years_are_omitted(self):
        acc = _accessor([("Alpha", "Asia", {2019: 1.0, 2020: None, 2021: 3.0})])
        assert [p.year for p in engine.time_series(acc, "Alpha")] == [2019, 2021]

    def test_sorted_ascending(self):
        acc = _accessor([("Alpha", "Asia", {2022: 3.0, 2019: 1.0, 2020: 2.0})])
        assert [p.year for p in engine.time_series(acc, 1)] == [2019, 2020, 2022]

    def test_reversed_range_is_empty(self, memory_accessor):
        assert engine.time_series(memory_accessor, "Alpha", 2021, 2020) == []

    def test_unknown_country(self, any_accessor):
        with pytest.raises(NotFound):
            engine.time_series(any_accessor, "Nowhere")

    def test_staging_bucket_has_no_series(self, any_accessor):
        with pytest.raises(NotFound):
            engine.time_series(any_accessor, "Gamma")


# ── Growth ────────────────────────────────────────────────────────────────────

class TestGrowthRates:
    def test_zero_start_is_skipped(self):
        acc = _accessor([
            ("Alpha", "Asia", {2020: 0.0, 2021: 50.0}),
            ("Beta", "Asia", {2020: 10.0, 2021: 20.0}),
        ])
        assert [r.country for r in engine.growth_rates(acc, 2020, 2021)] == ["Beta"]

    def test_missing_end_is_skipped(self):
        acc = _accessor([
            ("Alpha", "Asia", {2020: 10.0}),
            ("Beta", "Asia", {2020: 10.0, 2021: None}),
        ])
        assert engine.growth_rates(acc, 2020, 2021) == []

    def test_zero_end_is_minus_hundred(self):
        acc = _accessor([("Alpha", "Asia", {2020: 10.0, 2021: 0.0})])
        (row,) = engine.growth_rates(acc, 2020, 2021)
        assert row.growth_rate == pytest.approx(-100.0)

    def test_ties_broken_by_name(self):
        acc = _accessor([
            ("Bravo", "Asia", {2020: 10.0, 2021: 20.0}),
            ("Alpha", "Asia", {2020: 5.0, 2021: 10.0}),
        ])
        assert [r.country for r in engine.growth_rates(acc, 2020, 2021)] == ["Alpha", "Bravo"]

    def test_start_after_end(self, memory_accessor):
        rows = engine.growth_rates(memory_accessor, 2021, 2020)
        assert [r.country for r in rows] == ["Beta", "Alpha"]
        assert rows[0].growth_rate == pytest.approx((200 - 180) * 100 / 180)

    def test_limit(self, memory_accessor):
        rows = engine.growth_rates(memory_accessor, 2020, 2021, 1)
        assert [r.country for r in rows] == ["Alpha"]

    def test_staging_bucket_never_ranked(self):
        acc = _accessor([("Gamma", "current_data", {2020: 1.0, 2021: 100.0})])
        assert engine.growth_rates(acc, 2020, 2021) == []


# ── Repeatability ─────────────────────────────────────────────────────────────

class TestRepeatedCalls:
    @pytest.mark.parametrize("call", [
        lambda acc: engine.rank_by_year(acc, 2020),
        lambda acc: engine.time_series(acc, "Alpha"),
        lambda acc: engine.growth_rates(acc, 2020, 2021),
        lambda acc: engine.list_all(acc),
        lambda acc: engine.continent_summary(acc, 2021),
    ], ids=["rank_by_year", "time_series", "growth_rates", "list_all", "continent_summary"])
    def test_same_snapshot_same_result(self, any_accessor, call):
        first = call(any_accessor)
        assert first
        assert call(any_accessor) == first
