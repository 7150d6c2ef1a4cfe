"""
Comparison API Endpoints

Find the catalog items closest to an arbitrary material line item.
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter
from pydantic import BaseModel, ConfigDict, Field

from estimator.api.deps import Catalog
from estimator.core.config import settings
from estimator.services.comparison import best_matches
from estimator.services.line_items import create_material


router = APIRouter(prefix="/comparisons", tags=["comparisons"])


class BestMatchRequest(BaseModel):
    """Material to compare against the catalog."""
    model_config = ConfigDict(allow_inf_nan=False)

    name: str = Field(..., min_length=1, description="Material name, e.g. '2x4 stud'")
    unit: Optional[str] = Field(None, description="Unit, e.g. 'each'")
    unit_cost: float = Field(0.0, ge=0, description="Unit cost")
    quantity: float = Field(1.0, ge=0)
    limit: Optional[int] = Field(None, description="Maximum results (at least 1 is returned)")


@router.post("/best-matches")
async def find_best_matches(request: BestMatchRequest, catalog: Catalog) -> Dict[str, Any]:
    """Score every catalog item against the material, best first."""
    material = create_material(
        owner_id=settings.default_owner_id,
        name=request.name,
        quantity=request.quantity,
        unit_cost=request.unit_cost,
        unit=request.unit,
    )
    limit = settings.match_default_limit if request.limit is None else request.limit
    matches = best_matches(material, catalog, limit=limit)

    return {
        "material": material.to_dict(),
        "matches": [match.to_dict() for match in matches],
    }
