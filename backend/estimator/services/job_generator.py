"""
Job-Type Material Generator

Connects a job archetype to an ordered list of catalog item IDs and asks the
quantity engine for each one.

- IDs missing from the catalog snapshot are skipped (catalog drift)
- Items whose quantity comes back as 0 are dropped
- Prices are the catalog default unit cost, unmodified
"""

import logging
from enum import Enum
from typing import Dict, List

from estimator.services.catalog import CatalogItem, CatalogSnapshot, MaterialJobTag
from estimator.services.line_items import GeneratedMaterial
from estimator.services.quantity_engine import QuantityContext, quantity

logger = logging.getLogger(__name__)


class JobType(str, Enum):
    """Job archetypes with a fixed catalog material list."""
    INTERIOR_WALL = "interior_wall"
    LVP_FLOOR = "lvp_floor"
    PAINT_ROOM = "paint_room"
    BASIC_BATH_REMODEL = "basic_bath_remodel"
    DECK_SURFACE_REPLACE = "deck_surface_replace"
    WINDOW_INSTALL = "window_install"


JOB_TYPE_METADATA = {
    JobType.INTERIOR_WALL: {
        "display_name": "Interior Wall Build",
        "job_tag": MaterialJobTag.INTERIOR_WALL_BUILD,
        "context_fields": ["wall_length_ft", "wall_height_ft"],
    },
    JobType.LVP_FLOOR: {
        "display_name": "LVP Flooring",
        "job_tag": MaterialJobTag.LVP_FLOORING,
        "context_fields": ["room_floor_area_sqft", "room_perimeter_ft"],
    },
    JobType.PAINT_ROOM: {
        "display_name": "Paint Room",
        "job_tag": MaterialJobTag.PAINT_ROOM,
        "context_fields": ["room_perimeter_ft", "wall_height_ft"],
    },
    JobType.BASIC_BATH_REMODEL: {
        "display_name": "Basic Bathroom Remodel",
        "job_tag": MaterialJobTag.BASIC_BATHROOM_REMODEL,
        "context_fields": [
            "wall_length_ft", "wall_height_ft", "room_perimeter_ft",
            "tile_area_sqft", "bathroom_count",
        ],
    },
    JobType.DECK_SURFACE_REPLACE: {
        "display_name": "Deck Surface Replacement",
        "job_tag": MaterialJobTag.DECK_SURFACE_REPLACE,
        "context_fields": ["deck_area_sqft"],
    },
    JobType.WINDOW_INSTALL: {
        "display_name": "Window Install",
        "job_tag": MaterialJobTag.WINDOW_INSTALL,
        "context_fields": ["opening_count", "room_perimeter_ft"],
    },
}


JOB_MATERIAL_IDS: Dict[JobType, List[str]] = {
    JobType.INTERIOR_WALL: [
        "stud-2x4-8",
        "plate-2x4-16",
        "ply-drywall-12-4x8",
        "screws-drywall-125",
        "insul-batt-r13",
    ],
    JobType.LVP_FLOOR: [
        "lvp-floor-7x48",
        "underlayment-foam",
        "trim-base-35",
        "caulk-painter",
        "construction-adhesive",
    ],
    JobType.PAINT_ROOM: [
        "paint-primer",
        "paint-int-eggshell",
        "caulk-painter",
    ],
    JobType.BASIC_BATH_REMODEL: [
        "cementboard-12-3x5",
        "tile-floor-porcelain",
        "thinset-modified",
        "grout-sanded",
        "membrane-waterproof",
        "gfc-outlet",
        "pex-12",
        "paint-int-eggshell",
        "caulk-painter",
    ],
    JobType.DECK_SURFACE_REPLACE: [
        "deck-board-54x16",
        "screws-deck-3",
    ],
    JobType.WINDOW_INSTALL: [
        "window-foam",
        "shims-mixed",
        "drip-cap",
        "caulk-painter",
    ],
}

# Caps for rules known to over-estimate on long walls
MAX_RECOMMENDED_QUANTITY: Dict[str, float] = {
    "screws-drywall-125": 5,
}


def materials_for_job(job_type: JobType, catalog: CatalogSnapshot) -> List[CatalogItem]:
    """
    Resolve the catalog items for a job type.

    The static ID list comes first, in order. User-owned catalog items tagged
    for the job are appended after it.
    """
    items: List[CatalogItem] = []
    for material_id in JOB_MATERIAL_IDS[job_type]:
        item = catalog.material(material_id)
        if item is None:
            logger.debug(f"Catalog item {material_id} missing for {job_type.value}, skipping")
            continue
        items.append(item)

    known = {item.id for item in items}
    tag = JOB_TYPE_METADATA[job_type]["job_tag"].value
    for item in catalog.materials_for_tag(tag):
        if not item.is_default and item.id not in known:
            items.append(item)
            known.add(item.id)

    return items


def generate_materials(
    job_type: JobType,
    context: QuantityContext,
    catalog: CatalogSnapshot,
) -> List[GeneratedMaterial]:
    """
    Generate the material list for a job.

    Args:
        job_type: Job archetype
        context: Job geometry
        catalog: Catalog snapshot to read items and prices from

    Returns:
        GeneratedMaterial list in job order, zero quantities dropped
    """
    generated = []
    for item in materials_for_job(job_type, catalog):
        qty = min(quantity(item, context), MAX_RECOMMENDED_QUANTITY.get(item.id, float("inf")))
        if qty <= 0:
            continue
        generated.append(GeneratedMaterial(
            name=item.name,
            quantity=qty,
            unit=item.unit,
            unit_cost=item.default_unit_cost,
            material=item,
        ))
    return generated


def all_material_ids(catalog: CatalogSnapshot) -> List[str]:
    """Every catalog ID any job type can produce, de-duplicated in first-seen order."""
    ids = [material_id for job_type in JobType for material_id in JOB_MATERIAL_IDS[job_type]]
    ids += catalog.custom_material_ids
    return list(dict.fromkeys(ids))
