"""
Unit tests for material comparison scoring.
"""

import pytest

from estimator.services.catalog import CatalogSnapshot
from estimator.services.comparison import (
    MaterialConfidenceScoreBuilder,
    best_matches,
    token_set,
)
from estimator.services.line_items import create_material


def material(name, unit="each", unit_cost=0.0, quantity=1):
    return create_material(owner_id="user-1", name=name, quantity=quantity, unit_cost=unit_cost, unit=unit)


class TestScoreBuilder:
    """Tests for MaterialConfidenceScoreBuilder."""

    def test_stud_against_catalog_stud(self, make_item):
        """Name 0.617, unit 1.0, cost 1.0 -> 0.77."""
        candidate = make_item(name="2x4 Stud 8ft", unit="each", default_unit_cost=3.98)
        result = MaterialConfidenceScoreBuilder(material("2x4 stud", unit_cost=3.90), candidate).build()

        assert result.confidence == pytest.approx(0.77, abs=0.005)
        assert result.confidence >= 0.75
        assert result.matched_attributes == ["name", "unit", "cost"]
        assert result.is_high_confidence
        assert result.rounded_confidence == "77%"

    def test_identical_material_scores_full(self, make_item):
        candidate = make_item(name="Construction Adhesive", unit="tube", default_unit_cost=6.5)
        result = MaterialConfidenceScoreBuilder(
            material("Construction Adhesive", unit="tube", unit_cost=6.5), candidate
        ).build()
        assert result.confidence >= 0.95

    def test_blank_unit_is_neutral(self, make_item):
        builder = MaterialConfidenceScoreBuilder(material("Shims", unit="  "), make_item(name="Shims"))
        assert builder.unit_similarity() == 0.4
        assert "unit" not in builder.matched_attributes

    def test_related_units(self, make_item):
        builder = MaterialConfidenceScoreBuilder(material("Tile", unit="sq"), make_item(unit="sqft"))
        assert builder.unit_similarity() == 0.7
        assert builder.reasons == ["Units are related (sq vs sqft)"]

    def test_unpriced_candidate(self, make_item):
        builder = MaterialConfidenceScoreBuilder(material("Tile", unit_cost=5), make_item(default_unit_cost=0))
        assert builder.cost_similarity() == 0.0
        assert builder.reasons == []

    def test_cost_bands(self, make_item):
        candidate = make_item(default_unit_cost=10.0)
        assert MaterialConfidenceScoreBuilder(material("x", unit_cost=8.0), candidate).cost_similarity() == 0.6
        assert MaterialConfidenceScoreBuilder(material("x", unit_cost=2.0), candidate).cost_similarity() == 0.2

    def test_tokens(self):
        assert token_set("1/2\" Drywall – 4x8") == {"1", "2", "drywall", "4x8"}
        assert token_set("---") == set()


class TestBestMatches:
    """Tests for ranking the catalog."""

    def test_stud_ranks_first(self, catalog):
        results = best_matches(material("2x4 stud", unit_cost=3.90), catalog)

        assert len(results) == 5
        assert results[0].catalog_item.id == "stud-2x4-8"
        confidences = [r.confidence for r in results]
        assert confidences == sorted(confidences, reverse=True)

    def test_confidence_bounds(self, catalog):
        for name in ("Paint", "", "Pressure-treated 4x4 post 10ft", "Hot tub"):
            for result in best_matches(material(name, unit_cost=12.0), catalog, limit=100):
                assert 0.0 <= result.confidence <= 1.0

    def test_limit_floor_of_one(self, catalog):
        assert len(best_matches(material("Grout"), catalog, limit=0)) == 1
        assert len(best_matches(material("Grout"), catalog, limit=3)) == 3

    def test_ties_broken_by_name(self, make_item):
        snapshot = CatalogSnapshot(items=(
            make_item(id="b", name="Widget B"),
            make_item(id="a", name="Widget A"),
        ))
        results = best_matches(material("Widget C", unit_cost=1.0), snapshot)
        assert [r.catalog_item.id for r in results] == ["a", "b"]

    def test_empty_catalog(self):
        assert best_matches(material("Anything"), CatalogSnapshot()) == []
