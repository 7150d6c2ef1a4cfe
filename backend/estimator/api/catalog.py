"""
Material Catalog API Endpoints

Read-only access to the loaded catalog snapshot.
"""

from typing import Dict, List, Optional

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel, ConfigDict, Field

from estimator.api.deps import Catalog
from estimator.core.config import settings
from estimator.services.catalog import MaterialCategory, MaterialPreferences
from estimator.services.job_generator import all_material_ids


router = APIRouter(prefix="/catalog", tags=["catalog"])


@router.get("/items")
async def list_catalog_items(
    catalog: Catalog,
    category: Optional[str] = Query(None, description="Filter by category, e.g. 'paint'"),
    job_tag: Optional[str] = Query(None, description="Filter by job tag, e.g. 'paint_room'"),
):
    """List catalog items, optionally filtered by category and/or job tag."""
    items = list(catalog.items)

    if category:
        try:
            category_enum = MaterialCategory(category.lower())
        except ValueError:
            raise HTTPException(
                status_code=400,
                detail=f"Unknown category: {category}. Valid categories: {[c.value for c in MaterialCategory]}"
            )
        items = [item for item in items if item.category == category_enum]

    if job_tag:
        items = [item for item in items if job_tag in item.job_tags]

    return {
        "version": catalog.version,
        "count": len(items),
        "items": [item.to_dict() for item in items],
    }


@router.get("/items/{item_id}")
async def get_catalog_item(item_id: str, catalog: Catalog):
    """Get a single catalog item with its effective price."""
    item = catalog.material(item_id)
    if item is None:
        raise HTTPException(status_code=404, detail=f"Catalog item not found: {item_id}")

    return {
        **item.to_dict(),
        "unit_price": round(catalog.price(item), 2),
    }


class PreferencesRequest(BaseModel):
    """One owner's catalog customisations."""
    model_config = ConfigDict(allow_inf_nan=False)

    owner_id: Optional[str] = Field(None, description="Owner the preferences belong to")
    price_overrides: Dict[str, float] = Field(default_factory=dict, description="Unit price by item id")
    product_url_overrides: Dict[str, str] = Field(default_factory=dict, description="Product URL by item id")
    removed_material_ids: List[str] = Field(default_factory=list, description="Items hidden for this owner")

    def to_preferences(self) -> MaterialPreferences:
        return MaterialPreferences(
            owner_id=self.owner_id or settings.default_owner_id,
            price_overrides=dict(self.price_overrides),
            product_url_overrides=dict(self.product_url_overrides),
            removed_material_ids=tuple(self.removed_material_ids),
        )


@router.post("/effective")
async def effective_catalog(preferences: PreferencesRequest, catalog: Catalog):
    """
    The catalog as one owner sees it.

    Removed items are left out, and prices and product URLs include the
    owner's overrides. material_ids lists every item a job type can produce.
    """
    snapshot = catalog.with_preferences(preferences.to_preferences())

    return {
        "version": snapshot.version,
        "count": len(snapshot),
        "items": [
            {
                **item.to_dict(),
                "unit_price": round(snapshot.price(item), 2),
                "product_url": snapshot.product_url(item),
            }
            for item in snapshot.items
        ],
        "material_ids": [
            material_id for material_id in all_material_ids(snapshot)
            if snapshot.material(material_id) is not None
        ],
    }
