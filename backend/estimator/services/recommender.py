"""
Materials Recommender - Core Data Models

Catalog-independent recommendations computed straight from job dimensions.
Each archetype lives in its own module under estimator.services.recommendations
and returns a list of MaterialRecommendation.

Rounding:
- Paint-type quantities round up to the half unit, minimum 1
- Everything else rounds up to a whole unit

Openings: each door removes 21 sq ft and each window 15 sq ft of wall area,
never going below zero.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional
from uuid import uuid4

from estimator.services.numeric import ceil_tolerant, ceil_to_half, safe_number


DOOR_AREA_SQFT = 21.0
WINDOW_AREA_SQFT = 15.0
DEFAULT_WASTE_FACTOR = 0.1


class MaterialJobType(str, Enum):
    """Job archetypes the recommender knows how to estimate."""
    INTERIOR_WALL_BUILD = "interior_wall_build"
    LVP_FLOORING = "lvp_flooring"
    PAINT_ROOM = "paint_room"
    BASIC_BATHROOM_REMODEL = "basic_bathroom_remodel"
    EXTERIOR_PAINT = "exterior_paint"
    TILE_BACKSPLASH = "tile_backsplash"
    DECK_BUILD = "deck_build"
    ROOF_SHINGLE_REPLACEMENT = "roof_shingle_replacement"


# Job type metadata: how each archetype reads the generic dimensions
JOB_TYPE_METADATA = {
    MaterialJobType.INTERIOR_WALL_BUILD: {
        "display_name": "Interior Wall Build",
        "length": "wall length (ft)",
        "secondary": "wall height (ft)",
        "uses_openings": False,
    },
    MaterialJobType.LVP_FLOORING: {
        "display_name": "LVP Flooring",
        "length": "room length (ft)",
        "secondary": "room width (ft)",
        "uses_openings": False,
    },
    MaterialJobType.PAINT_ROOM: {
        "display_name": "Paint Room",
        "length": "room length (ft)",
        "secondary": "room width (ft)",
        "uses_openings": True,
    },
    MaterialJobType.BASIC_BATHROOM_REMODEL: {
        "display_name": "Basic Bathroom Remodel",
        "length": "room length (ft)",
        "secondary": "room width (ft)",
        "uses_openings": True,
    },
    MaterialJobType.EXTERIOR_PAINT: {
        "display_name": "Exterior Paint",
        "length": "house length (ft)",
        "secondary": "house width (ft)",
        "uses_openings": True,
    },
    MaterialJobType.TILE_BACKSPLASH: {
        "display_name": "Tile Backsplash",
        "length": "backsplash run (ft)",
        "secondary": "backsplash height (ft)",
        "uses_openings": False,
    },
    MaterialJobType.DECK_BUILD: {
        "display_name": "Deck Build",
        "length": "deck length (ft)",
        "secondary": "deck width (ft)",
        "uses_openings": False,
    },
    MaterialJobType.ROOF_SHINGLE_REPLACEMENT: {
        "display_name": "Roof Shingle Replacement",
        "length": "roof length / eave run (ft)",
        "secondary": "roof width (ft)",
        "uses_openings": False,
    },
}


def _generate_recommendation_id() -> str:
    return f"rec_{uuid4().hex[:8]}"


@dataclass
class JobContext:
    """
    Dimensions captured for a recommendation request.

    length_ft/secondary_ft are read per archetype: width for floors and decks,
    height for walls and backsplashes.
    """
    job_type: MaterialJobType
    length_ft: Optional[float] = None
    secondary_ft: Optional[float] = None
    height_ft: Optional[float] = None      # wall height override
    area_sqft: Optional[float] = None      # direct area, wins over length × width
    door_count: int = 0
    window_count: int = 0
    coats: int = 2
    includes_ceiling: bool = False
    waste_factor: float = 0.0              # 0 means "use the archetype default"
    notes: Optional[str] = None

    def __post_init__(self):
        # Non-finite dimensions count as not supplied
        for name in ("length_ft", "secondary_ft", "height_ft", "area_sqft"):
            value = getattr(self, name)
            if value is not None and not math.isfinite(value):
                setattr(self, name, None)
        self.waste_factor = safe_number(self.waste_factor)

    @property
    def length(self) -> float:
        return safe_number(self.length_ft) or 0.0

    @property
    def secondary(self) -> float:
        return safe_number(self.secondary_ft) or 0.0

    @property
    def perimeter(self) -> float:
        return 2 * (self.length + self.secondary)

    @property
    def floor_area(self) -> float:
        """Supplied area, else length × width."""
        if self.area_sqft is not None:
            return self.area_sqft
        return self.length * self.secondary

    @property
    def opening_area(self) -> float:
        return self.door_count * DOOR_AREA_SQFT + self.window_count * WINDOW_AREA_SQFT

    @property
    def effective_coats(self) -> int:
        return max(self.coats, 1)

    def waste_or(self, default: float) -> float:
        return self.waste_factor if self.waste_factor > 0 else default

    def validate(self) -> List[str]:
        """Validate dimensions. Returns list of errors."""
        errors = []
        for label, value in (
            ("length_ft", self.length_ft),
            ("secondary_ft", self.secondary_ft),
            ("height_ft", self.height_ft),
            ("area_sqft", self.area_sqft),
        ):
            if value is not None and value < 0:
                errors.append(f"{label} must not be negative")
        if self.door_count < 0 or self.window_count < 0:
            errors.append("Opening counts must not be negative")
        if self.waste_factor < 0:
            errors.append("waste_factor must not be negative")
        return errors

    def to_dict(self) -> Dict[str, Any]:
        return {
            "job_type": self.job_type.value,
            "length_ft": self.length_ft,
            "secondary_ft": self.secondary_ft,
            "height_ft": self.height_ft,
            "area_sqft": self.area_sqft,
            "door_count": self.door_count,
            "window_count": self.window_count,
            "coats": self.coats,
            "includes_ceiling": self.includes_ceiling,
            "waste_factor": self.waste_factor,
            "notes": self.notes,
        }


@dataclass
class MaterialRecommendation:
    """A named line item recommended for a job, before catalog resolution."""
    recommendation_id: str
    name: str
    quantity: float
    unit: str                 # "gallon", "sheet", "sq ft", "lf", ...
    category: str             # "Paint", "Drywall", "Flooring", "Prep", ...
    notes: Optional[str] = None
    estimated_unit_cost: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "recommendation_id": self.recommendation_id,
            "name": self.name,
            "quantity": self.quantity,
            "unit": self.unit,
            "category": self.category,
            "notes": self.notes,
            "estimated_unit_cost": self.estimated_unit_cost,
        }


def create_recommendation(
    name: str,
    quantity: float,
    unit: str,
    category: str,
    notes: Optional[str] = None,
    estimated_unit_cost: Optional[float] = None,
) -> MaterialRecommendation:
    """Create a MaterialRecommendation with auto-generated ID."""
    return MaterialRecommendation(
        recommendation_id=_generate_recommendation_id(),
        name=name,
        quantity=safe_number(quantity),
        unit=unit,
        category=category,
        notes=notes,
        estimated_unit_cost=estimated_unit_cost,
    )


# ==================
# ROUNDING HELPERS
# ==================

def round_up(value: float) -> float:
    """Whole units, rounded up."""
    return ceil_tolerant(value)


def round_up_min(value: float, minimum: float = 1.0) -> float:
    """max(minimum, ceil(value))"""
    return max(minimum, ceil_tolerant(value))


def round_up_half(value: float) -> float:
    """Half units, rounded up, minimum 1 (paint-type items)."""
    return max(1.0, ceil_to_half(value))


def net_wall_area(perimeter: float, height: float, context: JobContext) -> float:
    """Wall area minus door/window allowances, floored at 0."""
    return max(0.0, perimeter * height - context.opening_area)


def wall_height(context: JobContext, default: float) -> float:
    return context.height_ft if context.height_ft is not None else default


def whole_sqft(value: float) -> int:
    """Truncated area for notes ("Approx. 340 sq ft")."""
    return int(math.floor(value))
