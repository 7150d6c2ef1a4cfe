"""
Material Resolution

Reconciles recommender output against the live catalog before it becomes a
job/invoice line item:

1. Find the catalog item that prices the recommendation (normalized name,
   exact first, then containment)
2. If the item's coverage unit matches the recommendation unit, convert the
   requirement into purchase units: ceil(quantity / coverage)
3. Otherwise adopt the catalog unit when the units are compatible
4. Unit cost: catalog price (with overrides) > fallback > estimate > 0
"""

import logging
from typing import List, Optional

from estimator.services.catalog import CatalogSnapshot, normalize_unit
from estimator.services.line_items import Material, create_material
from estimator.services.numeric import ceil_tolerant, debug_check_nan, safe_divide
from estimator.services.recommender import MaterialRecommendation

logger = logging.getLogger(__name__)


def units_match(lhs: Optional[str], rhs: Optional[str]) -> bool:
    if lhs is None or rhs is None:
        return False
    return normalize_unit(lhs) == normalize_unit(rhs)


def format_quantity(value: float) -> str:
    """'100' for whole numbers, '23.64' otherwise."""
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.2f}"


def resolve_material(
    recommendation: MaterialRecommendation,
    catalog: CatalogSnapshot,
    owner_id: str,
    fallback_unit_cost: Optional[float] = None,
) -> Material:
    """
    Turn a recommendation into a purchasable Material line item.

    Args:
        recommendation: Recommender output
        catalog: Catalog snapshot (with the owner's preferences applied)
        owner_id: Owner of the resulting line item
        fallback_unit_cost: Price to use when the catalog has no match

    Returns:
        Material with sanitized quantity and unit cost
    """
    item = catalog.pricing(recommendation.name)

    if item is not None:
        unit_cost = catalog.price(item)
    elif fallback_unit_cost is not None:
        unit_cost = fallback_unit_cost
    elif recommendation.estimated_unit_cost is not None:
        unit_cost = recommendation.estimated_unit_cost
    else:
        unit_cost = 0.0

    quantity = debug_check_nan(recommendation.quantity, f"{recommendation.name} quantity")
    unit = recommendation.unit
    notes = recommendation.notes
    product_url = catalog.product_url(item) if item is not None else None

    if (
        item is not None
        and item.coverage_quantity
        and item.coverage_quantity > 0
        and units_match(recommendation.unit, item.coverage_unit)
    ):
        quantity = ceil_tolerant(safe_divide(quantity, item.coverage_quantity))
        unit = item.unit
        coverage_note = (
            f"~{format_quantity(item.coverage_quantity)} {item.coverage_unit} per {item.unit}"
        )
        notes = f"{notes} ({coverage_note})" if notes else coverage_note
        logger.debug(f"Resolved {recommendation.name} via coverage of {item.id}")
    elif item is not None and units_match(recommendation.unit, item.unit):
        unit = item.unit

    return create_material(
        owner_id=owner_id,
        name=recommendation.name,
        quantity=quantity,
        unit_cost=unit_cost,
        product_url=product_url,
        unit=unit,
        notes=notes,
    )


def resolve_materials(
    recommendations: List[MaterialRecommendation],
    catalog: CatalogSnapshot,
    owner_id: str,
    fallback_unit_cost: Optional[float] = None,
) -> List[Material]:
    """Resolve a whole recommendation list, preserving order."""
    return [
        resolve_material(recommendation, catalog, owner_id, fallback_unit_cost)
        for recommendation in recommendations
    ]
