"""
Flooring Recommendations (LVP and similar floating floors)

Formulas:
- Floor area = supplied area, else length × width
- Flooring (sq ft) = ceil(area × (1 + waste)), waste defaults to 10%
- Underlayment = ceil(total / 100) rolls
- Shoe moulding = ceil(2 × (L + W)) linear ft
"""

from typing import List

from estimator.services.recommender import (
    DEFAULT_WASTE_FACTOR,
    JobContext,
    MaterialRecommendation,
    create_recommendation,
    round_up,
)


UNDERLAYMENT_ROLL_SQFT = 100.0


def recommend_flooring(context: JobContext) -> List[MaterialRecommendation]:
    waste = context.waste_or(DEFAULT_WASTE_FACTOR)
    total_area = context.floor_area * (1 + waste)

    return [
        create_recommendation(
            name="Flooring (e.g. LVP)",
            quantity=round_up(total_area),
            unit="sq ft",
            category="Flooring",
            notes=f"Includes {round(waste * 100)}% waste",
        ),
        create_recommendation(
            name="Underlayment",
            quantity=round_up(total_area / UNDERLAYMENT_ROLL_SQFT),
            unit="roll",
            category="Flooring",
            notes="100 sq ft per roll",
        ),
        create_recommendation(
            name="Shoe moulding / quarter round",
            quantity=round_up(context.perimeter),
            unit="lf",
            category="Trim",
            notes="Perimeter coverage",
        ),
    ]
