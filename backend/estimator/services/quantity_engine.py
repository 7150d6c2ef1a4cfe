"""
Quantity Rule Engine

Turns a catalog item plus job geometry into a purchasable quantity.

Two computation paths, tried in order:

1. Coverage path - the item declares coverage_quantity > 0 with a recognised
   coverage unit (area, length, count or volume). A requirement is picked
   from the context (rule-specific fallback chain first, then a generic chain
   for the coverage unit) and converted:
       needed = ceil(requirement × (1 + waste) / coverage)

2. Rule path - the item names a quantity rule. The rule's base formula runs on
   the context, the waste factor is applied, any unrecognised coverage
   quantity is divided out, and the result is rounded for the unit.

Items with neither are manual-only and default to a quantity of 1 so they still
surface in the material list.

Rounding (last step of every path):
- Discrete units (each, sheet, bag, box, coil, can, tube, roll): round up, min 1
- Everything else (sqft, linear_ft, gallon, ...): round up to 0.01

Missing context fields are not errors: the rule yields 0 and the result carries
the reason so callers can tell "can't estimate yet" from "nothing needed".
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional, Tuple

from estimator.services.catalog import CatalogItem, normalize_unit
from estimator.services.numeric import ceil_tolerant, ceil_to_hundredths, safe_number


STUD_SPACING_FT = 16.0 / 12.0
PLATE_BOARD_LENGTH_FT = 16.0
SHEET_AREA_SQFT = 32.0             # 4x8 sheet
PAINT_COVERAGE_SQFT_PER_GALLON = 350.0
PAINT_COATS = 2
CONCRETE_CUFT_PER_BAG = 0.6        # 80 lb bag
PEX_FT_PER_BATH = 80.0
PEX_FT_PER_COIL = 100.0

DISCRETE_UNITS = {"each", "sheet", "bag", "box", "coil", "can", "tube", "roll"}


class QuantityRule(str, Enum):
    """Quantity formulas a catalog item can reference by key."""
    STUDS_16OC_WALL = "studs_16oc_wall"
    PLATES_WALL = "plates_wall"
    SHEET_AREA_10PCT_WASTE = "sheet_area_10pct_waste"
    SHEET_AREA_15PCT_WASTE = "sheet_area_15pct_waste"
    FLOORING_10PCT_WASTE = "flooring_10pct_waste"
    ROLL_COVERAGE_100SQFT = "roll_coverage_100sqft"
    LINEAR_FT_10PCT_WASTE = "linear_ft_10pct_waste"
    LINEAR_FT_EXACT = "linear_ft_exact"
    PAINT_WALLS = "paint_walls"
    CAULK_PER_LINEAR_FT = "caulk_per_linear_ft"
    ADHESIVE_GENERIC = "adhesive_generic"
    FASTENERS_PER_SHEET = "fasteners_per_sheet"
    FASTENERS_PER_SQFT_DECK = "fasteners_per_sqft_deck"
    INSULATION_PER_SQFT = "insulation_per_sqft"
    CONCRETE_PER_CUFT = "concrete_per_cuft"
    DECK_BOARDS_16OC = "deck_boards_16oc"
    POSTS_LINEAR = "posts_linear"
    JOIST_HANGERS_PER_JOIST = "joist_hangers_per_joist"
    MEMBRANE_PER_SQFT = "membrane_per_sqft"
    THINSET_PER_SQFT = "thinset_per_sqft"
    GROUT_PER_SQFT = "grout_per_sqft"
    FOAM_PER_OPENING = "foam_per_opening"
    SHIMS_PER_OPENING = "shims_per_opening"
    OUTLETS_PER_BATH = "outlets_per_bath"
    PEX_PER_BATH = "pex_per_bath"

    @classmethod
    def from_key(cls, key: Optional[str]) -> Optional["QuantityRule"]:
        """Map a catalog rule key to a rule, None for absent/unknown keys."""
        if not key:
            return None
        try:
            return cls(key)
        except ValueError:
            return None


class QuantityPath(str, Enum):
    """Which computation produced a quantity."""
    COVERAGE = "coverage"
    RULE = "rule"
    MANUAL = "manual"


class QuantityReason(str, Enum):
    """Why a quantity has the value it has."""
    COMPUTED = "computed"
    MANUAL_DEFAULT = "manual_default"      # no rule: placeholder of 1
    MISSING_INPUT = "missing_input"        # a required context field is absent
    ZERO_REQUIREMENT = "zero_requirement"  # inputs present but nothing is needed


class CoverageKind(str, Enum):
    """What a coverage unit measures."""
    AREA = "area"
    LENGTH = "length"
    COUNT = "count"
    VOLUME = "volume"


# Normalized coverage unit spellings (see normalize_unit)
COVERAGE_UNIT_KINDS = {
    "sqft": CoverageKind.AREA,
    "sf": CoverageKind.AREA,
    "ft2": CoverageKind.AREA,
    "linearft": CoverageKind.LENGTH,
    "linft": CoverageKind.LENGTH,
    "lf": CoverageKind.LENGTH,
    "ft": CoverageKind.LENGTH,
    "each": CoverageKind.COUNT,
    "ea": CoverageKind.COUNT,
    "unit": CoverageKind.COUNT,
    "piece": CoverageKind.COUNT,
    "opening": CoverageKind.COUNT,
    "cuft": CoverageKind.VOLUME,
    "cubicft": CoverageKind.VOLUME,
    "cf": CoverageKind.VOLUME,
    "ft3": CoverageKind.VOLUME,
}


def coverage_kind(unit: Optional[str]) -> Optional[CoverageKind]:
    return COVERAGE_UNIT_KINDS.get(normalize_unit(unit))


@dataclass(frozen=True)
class QuantityContext:
    """
    Geometry captured for a job. Every field is optional; each rule reads only
    the fields it needs.
    """
    # Walls
    wall_length_ft: Optional[float] = None
    wall_height_ft: Optional[float] = None

    # Rooms / areas
    room_floor_area_sqft: Optional[float] = None
    room_perimeter_ft: Optional[float] = None

    # Decks / exterior surfaces
    deck_area_sqft: Optional[float] = None
    deck_length_ft: Optional[float] = None
    deck_joist_span_ft: Optional[float] = None

    # Concrete
    concrete_volume_cuft: Optional[float] = None

    # Openings (windows/doors)
    opening_count: Optional[int] = None

    # Bathrooms
    bathroom_count: Optional[int] = None

    # Tile areas
    tile_area_sqft: Optional[float] = None

    def __post_init__(self):
        # Non-finite geometry counts as not captured
        for name, value in self.to_dict().items():
            if isinstance(value, float) and not math.isfinite(value):
                object.__setattr__(self, name, None)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "wall_length_ft": self.wall_length_ft,
            "wall_height_ft": self.wall_height_ft,
            "room_floor_area_sqft": self.room_floor_area_sqft,
            "room_perimeter_ft": self.room_perimeter_ft,
            "deck_area_sqft": self.deck_area_sqft,
            "deck_length_ft": self.deck_length_ft,
            "deck_joist_span_ft": self.deck_joist_span_ft,
            "concrete_volume_cuft": self.concrete_volume_cuft,
            "opening_count": self.opening_count,
            "bathroom_count": self.bathroom_count,
            "tile_area_sqft": self.tile_area_sqft,
        }


@dataclass(frozen=True)
class QuantityResult:
    """A computed quantity together with how and why it was produced."""
    quantity: float
    reason: QuantityReason
    path: QuantityPath
    rule: Optional[QuantityRule] = None
    requirement: Optional[float] = None   # coverage path only

    @property
    def is_estimable(self) -> bool:
        return self.quantity > 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "quantity": self.quantity,
            "reason": self.reason.value,
            "path": self.path.value,
            "rule": self.rule.value if self.rule else None,
            "requirement": round(self.requirement, 4) if self.requirement is not None else None,
        }


# ==================
# BASE QUANTITY RULES
# ==================
# Each rule returns None when a required context field is missing.

def _studs_16oc_wall(ctx: QuantityContext) -> Optional[float]:
    if ctx.wall_length_ft is None:
        return None
    return ceil_tolerant(ctx.wall_length_ft / STUD_SPACING_FT) + 1.0


def _plates_wall(ctx: QuantityContext) -> Optional[float]:
    # double top plate + bottom plate, 16 ft boards
    if ctx.wall_length_ft is None:
        return None
    return ceil_tolerant((ctx.wall_length_ft * 3.0) / PLATE_BOARD_LENGTH_FT)


def _sheet_area(ctx: QuantityContext) -> Optional[float]:
    if ctx.wall_height_ft is None or ctx.wall_length_ft is None:
        return None
    return ceil_tolerant((ctx.wall_height_ft * ctx.wall_length_ft) / SHEET_AREA_SQFT)


def _flooring(ctx: QuantityContext) -> Optional[float]:
    return ctx.room_floor_area_sqft


def _roll_coverage_100sqft(ctx: QuantityContext) -> Optional[float]:
    if ctx.room_floor_area_sqft is None:
        return None
    return ceil_tolerant(ctx.room_floor_area_sqft / 100.0)


def _room_perimeter(ctx: QuantityContext) -> Optional[float]:
    return ctx.room_perimeter_ft


def _paint_walls(ctx: QuantityContext) -> Optional[float]:
    if ctx.room_perimeter_ft is None or ctx.wall_height_ft is None:
        return None
    total_area = ctx.room_perimeter_ft * ctx.wall_height_ft * PAINT_COATS
    return ceil_tolerant(total_area / PAINT_COVERAGE_SQFT_PER_GALLON)


def _caulk_per_linear_ft(ctx: QuantityContext) -> Optional[float]:
    # 1 tube per 30 linear ft
    if ctx.room_perimeter_ft is None:
        return None
    return ceil_tolerant(ctx.room_perimeter_ft / 30.0)


def _adhesive_generic(ctx: QuantityContext) -> Optional[float]:
    # 1 per 100 sqft of floor, else 1 per 16 ft of wall, else a single tube
    if ctx.room_floor_area_sqft is not None and ctx.room_floor_area_sqft > 0:
        return max(1.0, ceil_tolerant(ctx.room_floor_area_sqft / 100.0))
    if ctx.wall_length_ft is not None and ctx.wall_length_ft > 0:
        return max(1.0, ceil_tolerant(ctx.wall_length_ft / 16.0))
    return 1.0


def _fasteners_per_sheet(ctx: QuantityContext) -> Optional[float]:
    # 40 screws per sheet, 250 screws per lb
    sheets = _sheet_area(ctx)
    if sheets is None:
        return None
    return ceil_tolerant((sheets * 40.0) / 250.0)


def _fasteners_per_sqft_deck(ctx: QuantityContext) -> Optional[float]:
    # 12 screws per sqft, 150 per lb
    if ctx.deck_area_sqft is None:
        return None
    return ceil_tolerant((ctx.deck_area_sqft * 12.0) / 150.0)


def _insulation_per_sqft(ctx: QuantityContext) -> Optional[float]:
    # 1 bag per 40 sqft of wall
    if ctx.wall_height_ft is None or ctx.wall_length_ft is None:
        return None
    return ceil_tolerant((ctx.wall_height_ft * ctx.wall_length_ft) / 40.0)


def _concrete_per_cuft(ctx: QuantityContext) -> Optional[float]:
    if ctx.concrete_volume_cuft is None:
        return None
    return ceil_tolerant(ctx.concrete_volume_cuft / CONCRETE_CUFT_PER_BAG)


def _deck_boards_16oc(ctx: QuantityContext) -> Optional[float]:
    # 16 ft board covers roughly 8 sqft
    if ctx.deck_area_sqft is None:
        return None
    return ceil_tolerant(ctx.deck_area_sqft / 8.0)


def _posts_linear(ctx: QuantityContext) -> Optional[float]:
    # one post every 8 ft along the run
    if ctx.deck_length_ft is None:
        return None
    return ceil_tolerant(ctx.deck_length_ft / 8.0) + 1.0


def _joist_hangers_per_joist(ctx: QuantityContext) -> Optional[float]:
    if ctx.deck_length_ft is None:
        return None
    return ceil_tolerant(ctx.deck_length_ft / STUD_SPACING_FT)


def _membrane_per_sqft(ctx: QuantityContext) -> Optional[float]:
    # roll covers 300 sqft
    if ctx.tile_area_sqft is None:
        return None
    return ceil_tolerant(ctx.tile_area_sqft / 300.0)


def _thinset_per_sqft(ctx: QuantityContext) -> Optional[float]:
    # ~50 sqft per bag of floor tile
    if ctx.tile_area_sqft is None:
        return None
    return ceil_tolerant(ctx.tile_area_sqft / 50.0)


def _grout_per_sqft(ctx: QuantityContext) -> Optional[float]:
    # rated ~200 sqft per 25 lb bag; 150 leaves headroom
    if ctx.tile_area_sqft is None:
        return None
    return ceil_tolerant(ctx.tile_area_sqft / 150.0)


def _foam_per_opening(ctx: QuantityContext) -> Optional[float]:
    if ctx.opening_count is None:
        return None
    return max(1.0, float(ctx.opening_count))


def _shims_per_opening(ctx: QuantityContext) -> Optional[float]:
    # 1 pack per 2 openings
    if ctx.opening_count is None:
        return None
    return max(1.0, ceil_tolerant(ctx.opening_count / 2.0))


def _outlets_per_bath(ctx: QuantityContext) -> Optional[float]:
    if ctx.bathroom_count is None:
        return None
    return float(ctx.bathroom_count) * 2.0


def _pex_per_bath(ctx: QuantityContext) -> Optional[float]:
    if ctx.bathroom_count is None:
        return None
    return ceil_tolerant((ctx.bathroom_count * PEX_FT_PER_BATH) / PEX_FT_PER_COIL)


BaseRule = Callable[[QuantityContext], Optional[float]]

BASE_RULES: Dict[QuantityRule, BaseRule] = {
    QuantityRule.STUDS_16OC_WALL: _studs_16oc_wall,
    QuantityRule.PLATES_WALL: _plates_wall,
    QuantityRule.SHEET_AREA_10PCT_WASTE: _sheet_area,
    QuantityRule.SHEET_AREA_15PCT_WASTE: _sheet_area,
    QuantityRule.FLOORING_10PCT_WASTE: _flooring,
    QuantityRule.ROLL_COVERAGE_100SQFT: _roll_coverage_100sqft,
    QuantityRule.LINEAR_FT_10PCT_WASTE: _room_perimeter,
    QuantityRule.LINEAR_FT_EXACT: _room_perimeter,
    QuantityRule.PAINT_WALLS: _paint_walls,
    QuantityRule.CAULK_PER_LINEAR_FT: _caulk_per_linear_ft,
    QuantityRule.ADHESIVE_GENERIC: _adhesive_generic,
    QuantityRule.FASTENERS_PER_SHEET: _fasteners_per_sheet,
    QuantityRule.FASTENERS_PER_SQFT_DECK: _fasteners_per_sqft_deck,
    QuantityRule.INSULATION_PER_SQFT: _insulation_per_sqft,
    QuantityRule.CONCRETE_PER_CUFT: _concrete_per_cuft,
    QuantityRule.DECK_BOARDS_16OC: _deck_boards_16oc,
    QuantityRule.POSTS_LINEAR: _posts_linear,
    QuantityRule.JOIST_HANGERS_PER_JOIST: _joist_hangers_per_joist,
    QuantityRule.MEMBRANE_PER_SQFT: _membrane_per_sqft,
    QuantityRule.THINSET_PER_SQFT: _thinset_per_sqft,
    QuantityRule.GROUT_PER_SQFT: _grout_per_sqft,
    QuantityRule.FOAM_PER_OPENING: _foam_per_opening,
    QuantityRule.SHIMS_PER_OPENING: _shims_per_opening,
    QuantityRule.OUTLETS_PER_BATH: _outlets_per_bath,
    QuantityRule.PEX_PER_BATH: _pex_per_bath,
}


# ==================
# COVERAGE REQUIREMENTS
# ==================
# Requirement sources return None when their inputs are missing.

def _floor_area(ctx: QuantityContext) -> Optional[float]:
    return ctx.room_floor_area_sqft


def _tile_area(ctx: QuantityContext) -> Optional[float]:
    return ctx.tile_area_sqft


def _deck_area(ctx: QuantityContext) -> Optional[float]:
    return ctx.deck_area_sqft


def _wall_area(ctx: QuantityContext) -> Optional[float]:
    if ctx.wall_height_ft is None or ctx.wall_length_ft is None:
        return None
    return ctx.wall_height_ft * ctx.wall_length_ft


def _room_wall_area(ctx: QuantityContext) -> Optional[float]:
    if ctx.room_perimeter_ft is None or ctx.wall_height_ft is None:
        return None
    return ctx.room_perimeter_ft * ctx.wall_height_ft


def _painted_area(ctx: QuantityContext) -> Optional[float]:
    area = _room_wall_area(ctx)
    return area * PAINT_COATS if area is not None else None


def _wall_length(ctx: QuantityContext) -> Optional[float]:
    return ctx.wall_length_ft


def _plate_length(ctx: QuantityContext) -> Optional[float]:
    return ctx.wall_length_ft * 3.0 if ctx.wall_length_ft is not None else None


def _deck_length(ctx: QuantityContext) -> Optional[float]:
    return ctx.deck_length_ft


def _pex_length(ctx: QuantityContext) -> Optional[float]:
    return ctx.bathroom_count * PEX_FT_PER_BATH if ctx.bathroom_count is not None else None


def _openings(ctx: QuantityContext) -> Optional[float]:
    return float(ctx.opening_count) if ctx.opening_count is not None else None


def _bathrooms(ctx: QuantityContext) -> Optional[float]:
    return float(ctx.bathroom_count) if ctx.bathroom_count is not None else None


def _outlet_count(ctx: QuantityContext) -> Optional[float]:
    return ctx.bathroom_count * 2.0 if ctx.bathroom_count is not None else None


def _concrete_volume(ctx: QuantityContext) -> Optional[float]:
    return ctx.concrete_volume_cuft


RequirementChain = Tuple[Callable[[QuantityContext], Optional[float]], ...]

_FLOOR_CHAIN: RequirementChain = (_floor_area, _tile_area, _deck_area, _wall_area)

RULE_REQUIREMENTS: Dict[QuantityRule, Dict[CoverageKind, RequirementChain]] = {
    QuantityRule.FLOORING_10PCT_WASTE: {CoverageKind.AREA: _FLOOR_CHAIN},
    QuantityRule.ROLL_COVERAGE_100SQFT: {CoverageKind.AREA: _FLOOR_CHAIN},
    QuantityRule.ADHESIVE_GENERIC: {
        CoverageKind.AREA: (_floor_area, _wall_area),
        CoverageKind.LENGTH: (_wall_length,),
    },
    QuantityRule.SHEET_AREA_10PCT_WASTE: {CoverageKind.AREA: (_wall_area, _room_wall_area, _tile_area)},
    QuantityRule.SHEET_AREA_15PCT_WASTE: {CoverageKind.AREA: (_wall_area, _room_wall_area, _tile_area)},
    QuantityRule.INSULATION_PER_SQFT: {CoverageKind.AREA: (_wall_area, _room_wall_area)},
    QuantityRule.FASTENERS_PER_SHEET: {CoverageKind.AREA: (_wall_area,)},
    QuantityRule.PAINT_WALLS: {CoverageKind.AREA: (_painted_area,)},
    QuantityRule.DECK_BOARDS_16OC: {CoverageKind.AREA: (_deck_area,)},
    QuantityRule.FASTENERS_PER_SQFT_DECK: {CoverageKind.AREA: (_deck_area,)},
    QuantityRule.MEMBRANE_PER_SQFT: {CoverageKind.AREA: (_tile_area, _floor_area)},
    QuantityRule.THINSET_PER_SQFT: {CoverageKind.AREA: (_tile_area, _floor_area)},
    QuantityRule.GROUT_PER_SQFT: {CoverageKind.AREA: (_tile_area, _floor_area)},
    QuantityRule.LINEAR_FT_10PCT_WASTE: {CoverageKind.LENGTH: (_room_perimeter, _wall_length)},
    QuantityRule.LINEAR_FT_EXACT: {CoverageKind.LENGTH: (_room_perimeter, _wall_length)},
    QuantityRule.CAULK_PER_LINEAR_FT: {CoverageKind.LENGTH: (_room_perimeter, _wall_length)},
    QuantityRule.STUDS_16OC_WALL: {CoverageKind.LENGTH: (_wall_length,)},
    QuantityRule.PLATES_WALL: {CoverageKind.LENGTH: (_plate_length,)},
    QuantityRule.POSTS_LINEAR: {CoverageKind.LENGTH: (_deck_length,)},
    QuantityRule.JOIST_HANGERS_PER_JOIST: {CoverageKind.LENGTH: (_deck_length,)},
    QuantityRule.PEX_PER_BATH: {CoverageKind.LENGTH: (_pex_length,)},
    QuantityRule.FOAM_PER_OPENING: {CoverageKind.COUNT: (_openings,)},
    QuantityRule.SHIMS_PER_OPENING: {CoverageKind.COUNT: (_openings,)},
    QuantityRule.OUTLETS_PER_BATH: {CoverageKind.COUNT: (_outlet_count,)},
    QuantityRule.CONCRETE_PER_CUFT: {CoverageKind.VOLUME: (_concrete_volume,)},
}

GENERIC_REQUIREMENTS: Dict[CoverageKind, RequirementChain] = {
    CoverageKind.AREA: _FLOOR_CHAIN,
    CoverageKind.LENGTH: (_room_perimeter, _wall_length, _deck_length),
    CoverageKind.COUNT: (_openings, _bathrooms),
    CoverageKind.VOLUME: (_concrete_volume,),
}


def _first_available(chain: RequirementChain, ctx: QuantityContext) -> Optional[float]:
    """
    Walk a fallback chain. A positive value wins; a present-but-zero value is
    remembered so the caller can report a zero requirement rather than a
    missing one.
    """
    seen_zero = False
    for source in chain:
        value = source(ctx)
        if value is None:
            continue
        if value > 0:
            return value
        seen_zero = True
    return 0.0 if seen_zero else None


def requirement_for(
    rule: Optional[QuantityRule],
    kind: CoverageKind,
    context: QuantityContext,
) -> Optional[float]:
    """Select the area/length/count/volume an item must cover."""
    chain = RULE_REQUIREMENTS.get(rule, {}).get(kind) if rule else None
    if chain is None:
        chain = GENERIC_REQUIREMENTS[kind]
    return _first_available(chain, context)


# ==================
# ROUNDING
# ==================

def is_discrete_unit(unit: str) -> bool:
    return unit.strip().lower() in DISCRETE_UNITS


def round_for_unit(value: float, unit: str) -> float:
    """Apply the unit rounding policy to a positive quantity."""
    if is_discrete_unit(unit):
        return max(1.0, ceil_tolerant(value))
    return ceil_to_hundredths(value)


# ==================
# ENGINE
# ==================

def compute_quantity(item: CatalogItem, context: QuantityContext) -> QuantityResult:
    """
    Compute the purchasable quantity of a catalog item for a job.

    Args:
        item: Catalog item (unit, waste factor, coverage, rule key)
        context: Job geometry

    Returns:
        QuantityResult whose quantity is finite and never negative
    """
    assert item.waste_factor >= 0, f"negative waste factor on {item.id}"

    rule = QuantityRule.from_key(item.quantity_rule_key)
    waste_multiplier = 1.0 + item.waste_factor

    kind = coverage_kind(item.coverage_unit)
    if item.coverage_quantity and item.coverage_quantity > 0 and kind is not None:
        requirement = requirement_for(rule, kind, context)
        if requirement is None:
            return QuantityResult(0.0, QuantityReason.MISSING_INPUT, QuantityPath.COVERAGE, rule)
        requirement = safe_number(requirement)
        if requirement <= 0:
            return QuantityResult(
                0.0, QuantityReason.ZERO_REQUIREMENT, QuantityPath.COVERAGE, rule, requirement
            )
        needed = ceil_tolerant(requirement * waste_multiplier / item.coverage_quantity)
        return QuantityResult(
            quantity=safe_number(round_for_unit(needed, item.unit)),
            reason=QuantityReason.COMPUTED,
            path=QuantityPath.COVERAGE,
            rule=rule,
            requirement=requirement,
        )

    if rule is None:
        # Manual-only item: show it with a placeholder quantity
        return QuantityResult(1.0, QuantityReason.MANUAL_DEFAULT, QuantityPath.MANUAL)

    base = BASE_RULES[rule](context)
    if base is None:
        return QuantityResult(0.0, QuantityReason.MISSING_INPUT, QuantityPath.RULE, rule)
    base = safe_number(base)
    if base <= 0:
        return QuantityResult(0.0, QuantityReason.ZERO_REQUIREMENT, QuantityPath.RULE, rule)

    quantity = base * waste_multiplier
    if item.coverage_quantity and item.coverage_quantity > 0:
        quantity = ceil_tolerant(quantity / item.coverage_quantity)

    return QuantityResult(
        quantity=safe_number(round_for_unit(quantity, item.unit)),
        reason=QuantityReason.COMPUTED,
        path=QuantityPath.RULE,
        rule=rule,
    )


def quantity(item: CatalogItem, context: QuantityContext) -> float:
    """Shortcut for compute_quantity(...).quantity."""
    return compute_quantity(item, context).quantity
