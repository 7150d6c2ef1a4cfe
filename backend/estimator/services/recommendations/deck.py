"""
Deck Build Recommendations

Formulas:
- Deck area = supplied area, else length × width
- Deck boards = ceil(area × (1 + waste) / 8)    16 ft boards, waste defaults to 10%
- Joists = ceil(L / (16/12)) + 1                 16" on center
- Joist hangers = joists
- Posts = ceil(L / 8) + 1
- Footing concrete = 3 bags per post
- Deck screws = ceil(area × 12 / 150) lb
"""

from typing import List

from estimator.services.recommender import (
    DEFAULT_WASTE_FACTOR,
    JobContext,
    MaterialRecommendation,
    create_recommendation,
    round_up,
)


BOARD_COVERAGE_SQFT = 8.0
JOIST_SPACING_FT = 16.0 / 12.0
POST_SPACING_FT = 8.0
CONCRETE_BAGS_PER_POST = 3
SCREWS_PER_SQFT = 12.0
SCREWS_PER_LB = 150.0


def recommend_deck(context: JobContext) -> List[MaterialRecommendation]:
    """
    Frame and surface a deck.

    Framing lines (joists, hangers, posts, footings) need a deck length and are
    left out without one.
    """
    length = context.length
    area = context.floor_area
    waste = context.waste_or(DEFAULT_WASTE_FACTOR)

    recommendations = [
        create_recommendation(
            name="Deck boards 5/4×6 16ft",
            quantity=round_up(area * (1 + waste) / BOARD_COVERAGE_SQFT),
            unit="each",
            category="Decking",
            notes=f"~{int(BOARD_COVERAGE_SQFT)} sq ft per board, {round(waste * 100)}% waste",
        ),
    ]

    if length > 0:
        joists = round_up(length / JOIST_SPACING_FT) + 1
        posts = round_up(length / POST_SPACING_FT) + 1
        recommendations.extend([
            create_recommendation(
                name="Joists 2×8",
                quantity=joists,
                unit="each",
                category="Framing",
                notes="16\" on center",
            ),
            create_recommendation(
                name="Joist hangers",
                quantity=joists,
                unit="each",
                category="Connectors",
                notes="One per joist",
            ),
            create_recommendation(
                name="4×4 posts",
                quantity=posts,
                unit="each",
                category="Framing",
                notes=f"One every {int(POST_SPACING_FT)} ft plus end post",
            ),
            create_recommendation(
                name="Concrete mix (footings)",
                quantity=posts * CONCRETE_BAGS_PER_POST,
                unit="bag",
                category="Concrete",
                notes=f"{CONCRETE_BAGS_PER_POST} bags per post",
            ),
        ])

    recommendations.append(create_recommendation(
        name="Deck screws",
        quantity=round_up(area * SCREWS_PER_SQFT / SCREWS_PER_LB),
        unit="lb",
        category="Fasteners",
        notes=f"~{int(SCREWS_PER_SQFT)} screws per sq ft",
    ))

    return recommendations
