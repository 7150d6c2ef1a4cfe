"""
Materials Recommendations Package

Rule-based recommendation functions, one per job archetype. Each takes a
JobContext and returns a list of MaterialRecommendation without consulting the
catalog.

Available recommendations:
- paint: interior room paint, exterior house paint
- drywall: interior wall build (sheets, screws, tape, compound, corner bead)
- flooring: LVP flooring (planks, underlayment, shoe moulding)
- tile: tile backsplash (tile, thinset, grout, spacers, silicone, sealer)
- deck: deck build (boards, joists, hangers, posts, footings, screws)
- roofing: roof shingle replacement (shingles, underlayment, flashing, nails)
"""

from typing import Callable, Dict, List

from estimator.services.recommender import JobContext, MaterialJobType, MaterialRecommendation
from estimator.services.recommendations.paint import recommend_interior_paint, recommend_exterior_paint
from estimator.services.recommendations.drywall import recommend_drywall
from estimator.services.recommendations.flooring import recommend_flooring
from estimator.services.recommendations.tile import recommend_tile_backsplash
from estimator.services.recommendations.deck import recommend_deck
from estimator.services.recommendations.roofing import recommend_roof_shingles


def recommend_bathroom_remodel(context: JobContext) -> List[MaterialRecommendation]:
    """
    Paint plus flooring for a bathroom.

    Returned as a plain concatenation; prep items from both lists are not
    merged.
    """
    return recommend_interior_paint(context) + recommend_flooring(context)


RECOMMENDATION_ENGINES: Dict[MaterialJobType, Callable[[JobContext], List[MaterialRecommendation]]] = {
    MaterialJobType.INTERIOR_WALL_BUILD: recommend_drywall,
    MaterialJobType.LVP_FLOORING: recommend_flooring,
    MaterialJobType.PAINT_ROOM: recommend_interior_paint,
    MaterialJobType.BASIC_BATHROOM_REMODEL: recommend_bathroom_remodel,
    MaterialJobType.EXTERIOR_PAINT: recommend_exterior_paint,
    MaterialJobType.TILE_BACKSPLASH: recommend_tile_backsplash,
    MaterialJobType.DECK_BUILD: recommend_deck,
    MaterialJobType.ROOF_SHINGLE_REPLACEMENT: recommend_roof_shingles,
}


def recommend_materials(context: JobContext) -> List[MaterialRecommendation]:
    """Dispatch a JobContext to its archetype's recommendation function."""
    return RECOMMENDATION_ENGINES[context.job_type](context)


__all__ = [
    "RECOMMENDATION_ENGINES",
    "recommend_materials",
    "recommend_interior_paint",
    "recommend_exterior_paint",
    "recommend_drywall",
    "recommend_flooring",
    "recommend_bathroom_remodel",
    "recommend_tile_backsplash",
    "recommend_deck",
    "recommend_roof_shingles",
]
