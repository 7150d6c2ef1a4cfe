"""
Tile Backsplash Recommendations

Formulas:
- Area = supplied area, else run length × height (height defaults to 1.5 ft)
- Tile (sq ft) = ceil(area × (1 + waste)), waste defaults to 15%
- Thinset/mastic = max(1, ceil(total / 50)) bags
- Grout = max(1, ceil(total / 150)) bags
- Spacers = max(1, ceil(total / 100)) bags
- Silicone = max(1, ceil(run length / 30)) tubes
- Grout sealer = max(1, ceil(total / 150)) bottles
"""

from typing import List

from estimator.services.recommender import (
    JobContext,
    MaterialRecommendation,
    create_recommendation,
    round_up,
    round_up_min,
)


DEFAULT_BACKSPLASH_HEIGHT_FT = 1.5
TILE_WASTE_FACTOR = 0.15


def recommend_tile_backsplash(context: JobContext) -> List[MaterialRecommendation]:
    length = context.length
    if context.secondary_ft is not None:
        height = context.secondary
    elif context.height_ft is not None:
        height = context.height_ft
    else:
        height = DEFAULT_BACKSPLASH_HEIGHT_FT

    area = context.area_sqft if context.area_sqft is not None else length * height
    waste = context.waste_or(TILE_WASTE_FACTOR)
    total = area * (1 + waste)

    return [
        create_recommendation(
            name="Backsplash tile",
            quantity=round_up(total),
            unit="sq ft",
            category="Tile",
            notes=f"Approx. {int(area)} sq ft plus {round(waste * 100)}% waste",
        ),
        create_recommendation(
            name="Thinset / mastic",
            quantity=round_up_min(total / 50),
            unit="bag",
            category="Tile Materials",
            notes="~50 sq ft per bag",
        ),
        create_recommendation(
            name="Grout",
            quantity=round_up_min(total / 150),
            unit="bag",
            category="Tile Materials",
        ),
        create_recommendation(
            name="Tile spacers",
            quantity=round_up_min(total / 100),
            unit="bag",
            category="Tile Materials",
        ),
        create_recommendation(
            name="Silicone caulk",
            quantity=round_up_min(length / 30),
            unit="tube",
            category="Sealants",
            notes="Countertop joint",
        ),
        create_recommendation(
            name="Grout sealer",
            quantity=round_up_min(total / 150),
            unit="bottle",
            category="Tile Materials",
        ),
    ]
