"""
Recommendation API Endpoints

Catalog-independent recommendations from raw job dimensions, optionally
resolved against the catalog into priced line items.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, ConfigDict, Field

from estimator.api.catalog import PreferencesRequest
from estimator.api.deps import Catalog
from estimator.core.config import settings
from estimator.services.recommendations import recommend_materials
from estimator.services.recommender import JOB_TYPE_METADATA, JobContext, MaterialJobType
from estimator.services.resolution import resolve_materials


router = APIRouter(prefix="/recommendations", tags=["recommendations"])


# ==================
# REQUEST/RESPONSE MODELS
# ==================

class RecommendationRequest(BaseModel):
    """Job dimensions for a recommendation."""
    model_config = ConfigDict(allow_inf_nan=False)

    job_type: str = Field(..., description=f"Job type: {', '.join(t.value for t in MaterialJobType)}")
    length_ft: Optional[float] = Field(None, ge=0, description="Length in feet")
    secondary_ft: Optional[float] = Field(None, ge=0, description="Width (floors, decks) or height (walls) in feet")
    height_ft: Optional[float] = Field(None, ge=0, description="Wall height override in feet")
    area_sqft: Optional[float] = Field(None, ge=0, description="Known area in sq ft")
    door_count: int = Field(0, ge=0)
    window_count: int = Field(0, ge=0)
    coats: int = Field(2, ge=1, le=5, description="Paint coats")
    includes_ceiling: bool = Field(False)
    waste_factor: float = Field(0.0, ge=0.0, le=1.0, description="Waste fraction, 0 for the job default")
    notes: Optional[str] = None

    # Resolution
    resolve: bool = Field(False, description="Resolve into priced catalog line items")
    owner_id: Optional[str] = Field(None, description="Owner of resolved line items")
    fallback_unit_cost: Optional[float] = Field(None, ge=0)
    preferences: Optional[PreferencesRequest] = Field(None, description="Owner catalog customisations")


class JobTypeInfoResponse(BaseModel):
    type: str
    display_name: str
    length: str
    secondary: str
    uses_openings: bool


# ==================
# ENDPOINTS
# ==================

@router.get("/job-types", response_model=List[JobTypeInfoResponse])
async def list_recommendation_job_types():
    """List archetypes and how each reads length/secondary."""
    return [
        JobTypeInfoResponse(type=job_type.value, **metadata)
        for job_type, metadata in JOB_TYPE_METADATA.items()
    ]


@router.post("")
async def recommend(request: RecommendationRequest, catalog: Catalog) -> Dict[str, Any]:
    """
    Recommend materials for a job.

    With resolve=true the recommendations are also converted into catalog
    priced line items for owner_id.
    """
    try:
        job_type = MaterialJobType(request.job_type.lower())
    except ValueError:
        raise HTTPException(
            status_code=400,
            detail=f"Unknown job type: {request.job_type}. Valid types: {[t.value for t in MaterialJobType]}"
        )

    context = JobContext(
        job_type=job_type,
        length_ft=request.length_ft,
        secondary_ft=request.secondary_ft,
        height_ft=request.height_ft,
        area_sqft=request.area_sqft,
        door_count=request.door_count,
        window_count=request.window_count,
        coats=request.coats,
        includes_ceiling=request.includes_ceiling,
        waste_factor=request.waste_factor,
        notes=request.notes,
    )

    errors = context.validate()
    if errors:
        raise HTTPException(status_code=400, detail=f"Invalid parameters: {'; '.join(errors)}")

    recommendations = recommend_materials(context)
    response: Dict[str, Any] = {
        "job_type": job_type.value,
        "display_name": JOB_TYPE_METADATA[job_type]["display_name"],
        "recommendations": [recommendation.to_dict() for recommendation in recommendations],
    }

    if request.resolve:
        if request.preferences is not None:
            catalog = catalog.with_preferences(request.preferences.to_preferences())
        materials = resolve_materials(
            recommendations,
            catalog,
            owner_id=request.owner_id or settings.default_owner_id,
            fallback_unit_cost=request.fallback_unit_cost,
        )
        response["materials"] = [material.to_dict() for material in materials]
        response["total_cost"] = round(sum(material.total for material in materials), 2)

    return response
