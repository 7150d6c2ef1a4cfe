"""
Roof Shingle Replacement Recommendations

Formulas:
- Roof area = supplied area, else length × width; waste defaults to 10%
- Squares = area × (1 + waste) / 100
- Shingle bundles = ceil(squares × 3)
- Synthetic underlayment = ceil(total / 1000) rolls
- Ice & water shield = max(1, ceil(2 × L × 3 / 200)) rolls   3 ft strip on both eaves
- Drip edge = ceil(perimeter / 10) pieces
- Starter strip = max(1, ceil(perimeter / 105)) bundles
- Ridge cap = max(1, ceil(L / 33)) bundles
- Roofing nails = ceil(squares × 2.5) lb
"""

from typing import List

from estimator.services.recommender import (
    DEFAULT_WASTE_FACTOR,
    JobContext,
    MaterialRecommendation,
    create_recommendation,
    round_up,
    round_up_min,
)


BUNDLES_PER_SQUARE = 3
UNDERLAYMENT_ROLL_SQFT = 1000.0
ICE_WATER_ROLL_SQFT = 200.0
DRIP_EDGE_PIECE_FT = 10.0
STARTER_BUNDLE_FT = 105.0
RIDGE_CAP_BUNDLE_FT = 33.0
NAILS_LB_PER_SQUARE = 2.5


def recommend_roof_shingles(context: JobContext) -> List[MaterialRecommendation]:
    length = context.length
    perimeter = context.perimeter
    waste = context.waste_or(DEFAULT_WASTE_FACTOR)

    total_area = context.floor_area * (1 + waste)
    squares = total_area / 100

    return [
        create_recommendation(
            name="Architectural shingles",
            quantity=round_up(squares * BUNDLES_PER_SQUARE),
            unit="bundle",
            category="Roofing",
            notes=f"{squares:.1f} squares incl. {round(waste * 100)}% waste",
        ),
        create_recommendation(
            name="Synthetic underlayment",
            quantity=round_up(total_area / UNDERLAYMENT_ROLL_SQFT),
            unit="roll",
            category="Roofing",
            notes="~1,000 sq ft per roll",
        ),
        create_recommendation(
            name="Ice & water shield",
            quantity=round_up_min(2 * length * 3 / ICE_WATER_ROLL_SQFT),
            unit="roll",
            category="Roofing",
            notes="3 ft along both eaves",
        ),
        create_recommendation(
            name="Drip edge",
            quantity=round_up(perimeter / DRIP_EDGE_PIECE_FT),
            unit="piece",
            category="Flashing",
            notes="10 ft pieces",
        ),
        create_recommendation(
            name="Starter strip shingles",
            quantity=round_up_min(perimeter / STARTER_BUNDLE_FT),
            unit="bundle",
            category="Roofing",
        ),
        create_recommendation(
            name="Ridge cap shingles",
            quantity=round_up_min(length / RIDGE_CAP_BUNDLE_FT),
            unit="bundle",
            category="Roofing",
        ),
        create_recommendation(
            name="Roofing nails",
            quantity=round_up(squares * NAILS_LB_PER_SQUARE),
            unit="lb",
            category="Fasteners",
        ),
    ]
