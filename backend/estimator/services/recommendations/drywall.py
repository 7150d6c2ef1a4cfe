"""
Drywall Recommendations (interior wall build)

Formulas:
- Board area = wall length × wall height × 1.1 (10% waste)
- Sheets = ceil(area / 32)            4×8 sheets
- Screws = sheets × 50
- Joint tape = max(1, ceil(area / 500)) rolls
- Joint compound = max(1, ceil(area / 250)) buckets
- Corner bead = ceil(length × 0.5 / 8) sticks, only when > 0
"""

from typing import List

from estimator.services.recommender import (
    JobContext,
    MaterialRecommendation,
    create_recommendation,
    round_up,
    round_up_min,
)


SHEET_AREA_SQFT = 32.0
SCREWS_PER_SHEET = 50
BOARD_WASTE = 1.1


def recommend_drywall(context: JobContext) -> List[MaterialRecommendation]:
    """
    Hang and finish one side of a wall.

    secondary_ft is the wall height; height_ft is used when it is missing,
    then 8 ft.
    """
    length = context.length
    if context.secondary_ft is not None:
        height = context.secondary
    elif context.height_ft is not None:
        height = context.height_ft
    else:
        height = 8.0

    area = length * height * BOARD_WASTE

    sheets = round_up(area / SHEET_AREA_SQFT)
    corner_length = length * 0.5
    bead_sticks = round_up(corner_length / 8) if corner_length > 0 else 0.0

    recommendations = [
        create_recommendation(
            name="1/2\" drywall – 4×8",
            quantity=sheets,
            unit="sheet",
            category="Drywall",
        ),
        create_recommendation(
            name="Drywall screws",
            quantity=sheets * SCREWS_PER_SHEET,
            unit="each",
            category="Fasteners",
            notes=f"~{SCREWS_PER_SHEET} per sheet",
        ),
        create_recommendation(
            name="Joint tape",
            quantity=round_up_min(area / 500),
            unit="roll",
            category="Drywall",
            notes="1 roll per ~500 sq ft",
        ),
        create_recommendation(
            name="Joint compound",
            quantity=round_up_min(area / 250),
            unit="bucket",
            category="Drywall",
            notes="1 bucket per ~250 sq ft",
        ),
    ]

    if bead_sticks > 0:
        recommendations.append(create_recommendation(
            name="Corner bead",
            quantity=bead_sticks,
            unit="stick",
            category="Drywall",
            notes="Estimated from wall length",
        ))

    return recommendations
