"""
Paint Recommendations (interior room, exterior house)

Formulas:
- Wall area = 2 × (L + W) × height - openings (21 sq ft/door, 15 sq ft/window)
- Interior: 350 sq ft/gallon, ceiling (L × W) added when included
- Exterior: 300 sq ft/gallon, no ceiling
- Paint gallons = area × coats / coverage × (1 + waste), half-gallon rounding
- Primer (2+ coats) = raw gallons × 1.05, half-gallon rounding
"""

from typing import List

from estimator.services.recommender import (
    DEFAULT_WASTE_FACTOR,
    JobContext,
    MaterialRecommendation,
    create_recommendation,
    net_wall_area,
    round_up_half,
    round_up_min,
    wall_height,
    whole_sqft,
)


INTERIOR_COVERAGE_SQFT_PER_GALLON = 350.0
EXTERIOR_COVERAGE_SQFT_PER_GALLON = 300.0
PRIMER_FACTOR = 1.05


def _prep_and_tools(perimeter: float, coats: int) -> List[MaterialRecommendation]:
    tape_rolls = round_up_min(perimeter / 60)
    roller_covers = max(2.0, float(coats + 1))
    return [
        create_recommendation(
            name="Painter's tape",
            quantity=tape_rolls,
            unit="roll",
            category="Prep",
        ),
        create_recommendation(
            name="Roller covers",
            quantity=roller_covers,
            unit="piece",
            category="Paint",
            notes="Includes extras for cutting in",
        ),
    ]


def recommend_interior_paint(context: JobContext) -> List[MaterialRecommendation]:
    """
    Paint a room: walls, optional ceiling, primer and prep.

    Height defaults to 8 ft.
    """
    height = wall_height(context, 8.0)
    perimeter = context.perimeter

    wall_area = net_wall_area(perimeter, height, context)
    ceiling_area = context.floor_area if context.includes_ceiling else 0.0
    total_area = wall_area + ceiling_area
    coats = context.effective_coats

    raw_gallons = (total_area * coats) / INTERIOR_COVERAGE_SQFT_PER_GALLON
    gallons = round_up_half(raw_gallons * 1.1)

    recommendations = [
        create_recommendation(
            name="Interior wall paint",
            quantity=gallons,
            unit="gallon",
            category="Paint",
            notes=f"Approx. {whole_sqft(total_area)} sq ft, {coats} coat(s)",
        )
    ]

    if coats >= 2:
        recommendations.append(create_recommendation(
            name="Primer",
            quantity=round_up_half(raw_gallons * PRIMER_FACTOR),
            unit="gallon",
            category="Paint",
            notes=f"Coverage for ~{whole_sqft(total_area)} sq ft",
        ))

    recommendations.append(create_recommendation(
        name="Paintable caulk",
        quantity=round_up_min(perimeter / 30),
        unit="tube",
        category="Prep",
    ))
    recommendations.extend(_prep_and_tools(perimeter, coats))

    return recommendations


def recommend_exterior_paint(context: JobContext) -> List[MaterialRecommendation]:
    """
    Paint the outside walls of a house.

    Height defaults to 10 ft. Caulk adds a tube for every two openings on top
    of the perimeter allowance, and plastic sheeting protects the ground line.
    """
    height = wall_height(context, 10.0)
    perimeter = context.perimeter
    waste = context.waste_or(DEFAULT_WASTE_FACTOR)

    wall_area = net_wall_area(perimeter, height, context)
    coats = context.effective_coats

    raw_gallons = (wall_area * coats) / EXTERIOR_COVERAGE_SQFT_PER_GALLON
    gallons = round_up_half(raw_gallons * (1 + waste))

    recommendations = [
        create_recommendation(
            name="Exterior house paint",
            quantity=gallons,
            unit="gallon",
            category="Paint",
            notes=f"Approx. {whole_sqft(wall_area)} sq ft, {coats} coat(s)",
        )
    ]

    if coats >= 2:
        recommendations.append(create_recommendation(
            name="Exterior primer",
            quantity=round_up_half(raw_gallons * PRIMER_FACTOR),
            unit="gallon",
            category="Paint",
            notes=f"Coverage for ~{whole_sqft(wall_area)} sq ft",
        ))

    openings = context.door_count + context.window_count
    caulk_tubes = round_up_min(perimeter / 25) + round_up_min(openings / 2, minimum=0.0)

    recommendations.extend([
        create_recommendation(
            name="Exterior caulk",
            quantity=caulk_tubes,
            unit="tube",
            category="Prep",
            notes="Trim joints plus openings",
        ),
        create_recommendation(
            name="Masking plastic",
            quantity=round_up_min(perimeter / 100),
            unit="roll",
            category="Prep",
            notes="Ground and landscaping protection",
        ),
    ])
    recommendations.extend(_prep_and_tools(perimeter, coats))

    return recommendations
