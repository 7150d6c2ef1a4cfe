"""
Unit tests for the quantity rule engine.

Tests cover:
- Base rules and waste application
- Unit rounding policy
- Coverage conversion and requirement fallback
- Missing input vs zero requirement reporting
"""

import math

import pytest

from estimator.services.quantity_engine import (
    BASE_RULES,
    RULE_REQUIREMENTS,
    QuantityContext,
    QuantityPath,
    QuantityReason,
    QuantityRule,
    compute_quantity,
    is_discrete_unit,
    quantity,
    round_for_unit,
)


FULL_CONTEXT = QuantityContext(
    wall_length_ft=12,
    wall_height_ft=8,
    room_floor_area_sqft=150,
    room_perimeter_ft=50,
    deck_area_sqft=120,
    deck_length_ft=12,
    deck_joist_span_ft=10,
    concrete_volume_cuft=2,
    opening_count=3,
    bathroom_count=1,
    tile_area_sqft=40,
)


# ==================
# RULE PATH
# ==================

class TestRulePath:
    """Tests for items computed from their quantity rule."""

    def test_studs_for_twenty_foot_wall(self, make_item):
        """ceil(20 / 1.333) + 1 = 16 studs with no waste."""
        stud = make_item(quantity_rule_key="studs_16oc_wall")
        result = compute_quantity(stud, QuantityContext(wall_length_ft=20))

        assert result.quantity == 16
        assert result.reason == QuantityReason.COMPUTED
        assert result.path == QuantityPath.RULE
        assert result.rule == QuantityRule.STUDS_16OC_WALL

    def test_paint_for_forty_foot_room(self, make_item):
        """40 ft × 8 ft × 2 coats / 350 = 1.83, rounded up to 2 gallons."""
        paint = make_item(unit="gallon", quantity_rule_key="paint_walls")
        ctx = QuantityContext(room_perimeter_ft=40, wall_height_ft=8)
        assert quantity(paint, ctx) == 2.0

    def test_bundled_stud_applies_waste(self, catalog):
        """16 studs × 1.1 = 17.6, rounded up to 18."""
        stud = catalog.material("stud-2x4-8")
        assert quantity(stud, QuantityContext(wall_length_ft=20)) == 18

    def test_waste_applied_after_base_rule(self, make_item):
        sheet = make_item(unit="sheet", waste_factor=0.1, quantity_rule_key="sheet_area_10pct_waste")
        ctx = QuantityContext(wall_length_ft=10, wall_height_ft=8)
        # ceil(80 / 32) = 3, × 1.1 = 3.3 -> 4
        assert quantity(sheet, ctx) == 4

    def test_plates(self, make_item):
        plate = make_item(quantity_rule_key="plates_wall")
        assert quantity(plate, QuantityContext(wall_length_ft=10)) == 2

    def test_fasteners_follow_sheet_count(self, make_item):
        screws = make_item(unit="box", quantity_rule_key="fasteners_per_sheet")
        ctx = QuantityContext(wall_length_ft=100, wall_height_ft=10)
        # 32 sheets × 40 screws / 250 per box = 5.12 -> 6
        assert quantity(screws, ctx) == 6

    def test_adhesive_fallbacks(self, make_item):
        adhesive = make_item(unit="tube", quantity_rule_key="adhesive_generic")
        assert quantity(adhesive, QuantityContext(room_floor_area_sqft=250)) == 3
        assert quantity(adhesive, QuantityContext(wall_length_ft=40)) == 3
        assert quantity(adhesive, QuantityContext()) == 1

    def test_bath_rules(self, make_item):
        outlet = make_item(quantity_rule_key="outlets_per_bath")
        pex = make_item(unit="coil", quantity_rule_key="pex_per_bath")
        ctx = QuantityContext(bathroom_count=2)
        assert quantity(outlet, ctx) == 4
        assert quantity(pex, ctx) == 2

    def test_unrecognised_coverage_unit_divides_rule_result(self, make_item):
        casing = make_item(quantity_rule_key="linear_ft_exact", coverage_quantity=8, coverage_unit="stick")
        assert quantity(casing, QuantityContext(room_perimeter_ft=40)) == 5


class TestMissingAndZero:
    """Tests that missing inputs are reported rather than guessed."""

    def test_missing_wall_length(self, make_item):
        stud = make_item(quantity_rule_key="studs_16oc_wall")
        result = compute_quantity(stud, QuantityContext())

        assert result.quantity == 0
        assert result.reason == QuantityReason.MISSING_INPUT
        assert not result.is_estimable

    def test_zero_requirement(self, make_item):
        caulk = make_item(unit="tube", quantity_rule_key="caulk_per_linear_ft")
        result = compute_quantity(caulk, QuantityContext(room_perimeter_ft=0))

        assert result.quantity == 0
        assert result.reason == QuantityReason.ZERO_REQUIREMENT

    @pytest.mark.parametrize("rule", [rule for rule in QuantityRule if rule != QuantityRule.ADHESIVE_GENERIC])
    def test_every_rule_needs_some_input(self, make_item, rule):
        item = make_item(quantity_rule_key=rule.value)
        assert compute_quantity(item, QuantityContext()).reason == QuantityReason.MISSING_INPUT


class TestNonFiniteGeometry:
    """Tests that NaN and infinite geometry never raises or propagates."""

    @staticmethod
    def _context_of(value):
        return QuantityContext(**{name: value for name in QuantityContext().to_dict()})

    @pytest.mark.parametrize("value", [float("inf"), float("-inf"), float("nan")])
    @pytest.mark.parametrize("rule", list(QuantityRule))
    def test_rule_path_treats_non_finite_as_missing(self, make_item, rule, value):
        item = make_item(quantity_rule_key=rule.value)
        assert compute_quantity(item, self._context_of(value)) == compute_quantity(item, QuantityContext())

    @pytest.mark.parametrize("value", [float("inf"), float("nan")])
    @pytest.mark.parametrize("rule", list(QuantityRule))
    def test_coverage_path_treats_non_finite_as_missing(self, make_item, rule, value):
        item = make_item(quantity_rule_key=rule.value, coverage_quantity=10, coverage_unit="sqft")
        assert compute_quantity(item, self._context_of(value)) == compute_quantity(item, QuantityContext())

    def test_single_infinite_field(self, make_item):
        stud = make_item(quantity_rule_key="studs_16oc_wall")
        ctx = QuantityContext(wall_length_ft=float("inf"), wall_height_ft=8)

        assert ctx.wall_length_ft is None
        assert ctx.wall_height_ft == 8
        assert compute_quantity(stud, ctx).reason == QuantityReason.MISSING_INPUT

    @pytest.mark.parametrize("rule", list(QuantityRule))
    def test_overflowing_geometry_stays_finite(self, make_item, rule):
        item = make_item(quantity_rule_key=rule.value)
        q = quantity(item, self._context_of(1e308))

        assert math.isfinite(q)
        assert q >= 0


class TestManualItems:
    """Tests for items without a usable quantity rule."""

    def test_no_rule_defaults_to_one(self, make_item):
        result = compute_quantity(make_item(), FULL_CONTEXT)

        assert result.quantity == 1
        assert result.reason == QuantityReason.MANUAL_DEFAULT
        assert result.path == QuantityPath.MANUAL

    def test_unknown_rule_key_is_manual(self, make_item):
        assert QuantityRule.from_key("bogus_rule") is None
        assert compute_quantity(make_item(quantity_rule_key="bogus_rule"), FULL_CONTEXT).quantity == 1

    def test_bundled_drip_cap(self, catalog):
        assert quantity(catalog.material("drip-cap"), QuantityContext()) == 1


# ==================
# COVERAGE PATH
# ==================

class TestCoveragePath:
    """Tests for items converted through their coverage."""

    def test_lvp_boxes(self, catalog):
        """200 sqft × 1.1 / 23.64 sqft per box = 9.31 -> 10 boxes."""
        lvp = catalog.material("lvp-floor-7x48")
        result = compute_quantity(lvp, QuantityContext(room_floor_area_sqft=200))

        assert result.quantity == 10
        assert result.path == QuantityPath.COVERAGE
        assert result.requirement == 200

    def test_fallback_to_tile_area(self, catalog):
        lvp = catalog.material("lvp-floor-7x48")
        # 50 × 1.1 / 23.64 = 2.33 -> 3
        assert quantity(lvp, QuantityContext(tile_area_sqft=50)) == 3

    def test_zero_floor_area_falls_through_to_next_source(self, catalog):
        lvp = catalog.material("lvp-floor-7x48")
        ctx = QuantityContext(room_floor_area_sqft=0, tile_area_sqft=50)
        assert quantity(lvp, ctx) == 3

    def test_underlayment_rolls(self, catalog):
        underlayment = catalog.material("underlayment-foam")
        assert quantity(underlayment, QuantityContext(room_floor_area_sqft=250)) == 3

    def test_rule_chain_missing_does_not_use_generic_chain(self, catalog):
        lvp = catalog.material("lvp-floor-7x48")
        result = compute_quantity(lvp, QuantityContext(room_perimeter_ft=40))

        assert result.quantity == 0
        assert result.reason == QuantityReason.MISSING_INPUT
        assert result.path == QuantityPath.COVERAGE

    def test_zero_requirement_on_coverage_path(self, catalog):
        lvp = catalog.material("lvp-floor-7x48")
        result = compute_quantity(lvp, QuantityContext(room_floor_area_sqft=0))
        assert result.reason == QuantityReason.ZERO_REQUIREMENT
        assert result.requirement == 0

    def test_generic_length_chain(self, make_item):
        trim = make_item(coverage_quantity=50, coverage_unit="lf")
        assert quantity(trim, QuantityContext(room_perimeter_ft=120)) == 3

    def test_generic_count_chain(self, make_item):
        kit = make_item(coverage_quantity=2, coverage_unit="opening")
        assert quantity(kit, QuantityContext(opening_count=5)) == 3

    def test_volume_coverage(self, make_item):
        bag = make_item(unit="bag", coverage_quantity=0.6, coverage_unit="cu ft")
        assert quantity(bag, QuantityContext(concrete_volume_cuft=3)) == 5


# ==================
# PROPERTIES
# ==================

class TestRounding:
    """Tests for the unit rounding policy."""

    def test_discrete_units(self):
        assert is_discrete_unit("Sheet")
        assert is_discrete_unit(" tube ")
        assert not is_discrete_unit("gallon")
        assert not is_discrete_unit("linear_ft")

    def test_discrete_minimum_one(self):
        assert round_for_unit(0.2, "box") == 1
        assert round_for_unit(2.01, "each") == 3

    def test_continuous_hundredths(self, make_item):
        trim = make_item(unit="linear_ft", waste_factor=0.1, quantity_rule_key="linear_ft_10pct_waste")
        result = quantity(trim, QuantityContext(room_perimeter_ft=33.333))

        assert result == 36.67
        assert round(result, 2) == result

    def test_discrete_results_are_whole(self, make_item):
        for rule in QuantityRule:
            q = quantity(make_item(unit="each", waste_factor=0.13, quantity_rule_key=rule.value), FULL_CONTEXT)
            assert q == int(q), rule


class TestEngineProperties:
    """Tests for engine-wide guarantees."""

    def test_every_rule_has_a_formula_and_requirements(self):
        assert set(BASE_RULES) == set(QuantityRule)
        assert set(RULE_REQUIREMENTS) == set(QuantityRule)

    def test_idempotent(self, catalog):
        for item in catalog.items:
            assert compute_quantity(item, FULL_CONTEXT) == compute_quantity(item, FULL_CONTEXT)

    def test_results_are_finite_and_non_negative(self, catalog):
        for item in catalog.items:
            for ctx in (QuantityContext(), FULL_CONTEXT):
                q = quantity(item, ctx)
                assert q >= 0
                assert q == q  # not NaN

    @pytest.mark.parametrize("rule", [
        QuantityRule.STUDS_16OC_WALL,
        QuantityRule.PLATES_WALL,
        QuantityRule.SHEET_AREA_10PCT_WASTE,
        QuantityRule.INSULATION_PER_SQFT,
    ])
    def test_monotonic_in_wall_length(self, make_item, rule):
        item = make_item(unit="each", quantity_rule_key=rule.value)
        quantities = [
            quantity(item, QuantityContext(wall_length_ft=length, wall_height_ft=8))
            for length in range(0, 100, 7)
        ]
        assert quantities == sorted(quantities)

    @pytest.mark.parametrize("rule", list(QuantityRule))
    def test_waste_never_reduces_quantity(self, make_item, rule):
        plain = make_item(unit="each", quantity_rule_key=rule.value)
        wasteful = make_item(unit="each", waste_factor=0.15, quantity_rule_key=rule.value)
        assert quantity(wasteful, FULL_CONTEXT) >= quantity(plain, FULL_CONTEXT)

    def test_negative_waste_rejected(self, make_item):
        with pytest.raises(AssertionError):
            compute_quantity(make_item(waste_factor=-0.1, quantity_rule_key="plates_wall"), FULL_CONTEXT)
