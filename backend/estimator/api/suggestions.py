"""
Keyword Suggestion API Endpoints
"""

from typing import Any, Dict

from fastapi import APIRouter
from pydantic import BaseModel, Field

from estimator.services.keyword_suggestions import suggest_materials


router = APIRouter(prefix="/suggestions", tags=["suggestions"])


class KeywordSuggestionRequest(BaseModel):
    description: str = Field("", description="Free-text job description")


@router.post("/keywords")
async def suggest_from_keywords(request: KeywordSuggestionRequest) -> Dict[str, Any]:
    """Suggest materials from a job description; falls back to a general kit."""
    materials = suggest_materials(request.description)
    return {
        "materials": [material.to_dict() for material in materials],
        "total_cost": round(sum(material.total_cost for material in materials), 2),
    }
