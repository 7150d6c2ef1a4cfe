"""
Estimate API Endpoints

Catalog-driven quantities:
- Single item quantity from job geometry (with the reason behind it)
- Full material list for a job type
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, ConfigDict, Field

from estimator.api.deps import Catalog
from estimator.services.job_generator import (
    JOB_MATERIAL_IDS,
    JOB_TYPE_METADATA,
    JobType,
    generate_materials,
)
from estimator.services.quantity_engine import QuantityContext, compute_quantity


router = APIRouter(prefix="/estimates", tags=["estimates"])


# ==================
# REQUEST/RESPONSE MODELS
# ==================

class QuantityContextRequest(BaseModel):
    """Job geometry. Every field is optional."""
    model_config = ConfigDict(allow_inf_nan=False)

    wall_length_ft: Optional[float] = Field(None, ge=0, description="Wall length in feet")
    wall_height_ft: Optional[float] = Field(None, ge=0, description="Wall height in feet")
    room_floor_area_sqft: Optional[float] = Field(None, ge=0, description="Room floor area in sq ft")
    room_perimeter_ft: Optional[float] = Field(None, ge=0, description="Room perimeter in feet")
    deck_area_sqft: Optional[float] = Field(None, ge=0, description="Deck area in sq ft")
    deck_length_ft: Optional[float] = Field(None, ge=0, description="Deck length in feet")
    deck_joist_span_ft: Optional[float] = Field(None, ge=0, description="Deck joist span in feet")
    concrete_volume_cuft: Optional[float] = Field(None, ge=0, description="Concrete volume in cu ft")
    opening_count: Optional[int] = Field(None, ge=0, description="Window/door openings")
    bathroom_count: Optional[int] = Field(None, ge=0, description="Bathrooms")
    tile_area_sqft: Optional[float] = Field(None, ge=0, description="Tiled area in sq ft")

    def to_context(self) -> QuantityContext:
        return QuantityContext(**self.model_dump())


class QuantityRequest(BaseModel):
    """Quantity for one catalog item."""
    item_id: str = Field(..., description="Catalog item id, e.g. 'stud-2x4-8'")
    context: QuantityContextRequest = Field(default_factory=QuantityContextRequest)


class GenerateRequest(BaseModel):
    """Material list for a job type."""
    job_type: str = Field(..., description=f"Job type: {', '.join(t.value for t in JobType)}")
    context: QuantityContextRequest = Field(default_factory=QuantityContextRequest)


class JobTypeInfoResponse(BaseModel):
    type: str
    display_name: str
    job_tag: str
    context_fields: List[str]
    material_ids: List[str]


# ==================
# HELPER FUNCTIONS
# ==================

def _parse_job_type(value: str) -> JobType:
    try:
        return JobType(value.lower())
    except ValueError:
        raise HTTPException(
            status_code=400,
            detail=f"Unknown job type: {value}. Valid types: {[t.value for t in JobType]}"
        )


# ==================
# ENDPOINTS
# ==================

@router.post("/quantity")
async def calculate_quantity(request: QuantityRequest, catalog: Catalog) -> Dict[str, Any]:
    """
    Compute the purchasable quantity of one catalog item.

    The response includes the reason ("computed", "missing_input",
    "zero_requirement", "manual_default") and the computation path.
    """
    item = catalog.material(request.item_id)
    if item is None:
        raise HTTPException(status_code=404, detail=f"Catalog item not found: {request.item_id}")

    result = compute_quantity(item, request.context.to_context())
    unit_price = catalog.price(item)

    return {
        "item": item.to_dict(),
        **result.to_dict(),
        "unit": item.unit,
        "unit_price": round(unit_price, 2),
        "total_cost": round(result.quantity * unit_price, 2),
    }


@router.get("/job-types", response_model=List[JobTypeInfoResponse])
async def list_job_types():
    """List job types with the context fields they read and their catalog ids."""
    return [
        JobTypeInfoResponse(
            type=job_type.value,
            display_name=metadata["display_name"],
            job_tag=metadata["job_tag"].value,
            context_fields=metadata["context_fields"],
            material_ids=JOB_MATERIAL_IDS[job_type],
        )
        for job_type, metadata in JOB_TYPE_METADATA.items()
    ]


@router.post("/generate")
async def generate_job_materials(request: GenerateRequest, catalog: Catalog) -> Dict[str, Any]:
    """
    Generate the material list for a job type.

    Items missing from the catalog and items with a zero quantity are left
    out.
    """
    job_type = _parse_job_type(request.job_type)
    materials = generate_materials(job_type, request.context.to_context(), catalog)

    return {
        "job_type": job_type.value,
        "display_name": JOB_TYPE_METADATA[job_type]["display_name"],
        "materials": [material.to_dict() for material in materials],
        "total_cost": round(sum(material.total_cost for material in materials), 2),
    }
