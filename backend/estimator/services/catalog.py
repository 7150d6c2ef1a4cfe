"""
Material Catalog - Read-only snapshot of purchasable catalog items.

The catalog itself is owned by an external store (bundled defaults plus
user-owned items synced from remote storage). The estimator only ever reads a
snapshot. Snapshots are frozen: applying user preferences or reloading the
catalog produces a new snapshot instead of mutating the old one.
"""

import json
import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)

GLOBAL_SCOPE = "global"


class MaterialCategory(str, Enum):
    """Catalog categories used to group materials."""
    LUMBER_FRAMING = "lumber_framing"
    SHEETGOODS = "sheetgoods"
    DRYWALL_BACKER = "drywall_backer"
    TILE_MATERIALS = "tile_materials"
    TILE = "tile"
    FLOORING = "flooring"
    TRIM_FINISH = "trim_finish"
    PAINT = "paint"
    SEALANTS = "sealants"
    HARDWARE_FASTENERS = "hardware_fasteners"
    HARDWARE_CONNECTORS = "hardware_connectors"
    HARDWARE_MISC = "hardware_misc"
    INSULATION = "insulation"
    CONCRETE_MASONRY = "concrete_masonry"
    EXTERIOR_DECKING = "exterior_decking"
    EXTERIOR_STRUCTURAL = "exterior_structural"
    EXTERIOR_FLASHING = "exterior_flashing"
    ELECTRICAL = "electrical"
    PLUMBING = "plumbing"
    CUSTOM = "custom"


CATEGORY_DISPLAY_NAMES = {
    MaterialCategory.LUMBER_FRAMING: "Lumber & Framing",
    MaterialCategory.SHEETGOODS: "Sheet Goods",
    MaterialCategory.DRYWALL_BACKER: "Drywall & Backerboard",
    MaterialCategory.TILE_MATERIALS: "Tile Materials",
    MaterialCategory.TILE: "Tile",
    MaterialCategory.FLOORING: "Flooring",
    MaterialCategory.TRIM_FINISH: "Trim & Finish",
    MaterialCategory.PAINT: "Paint",
    MaterialCategory.SEALANTS: "Caulk & Sealants",
    MaterialCategory.HARDWARE_FASTENERS: "Fasteners",
    MaterialCategory.HARDWARE_CONNECTORS: "Connectors & Hangers",
    MaterialCategory.HARDWARE_MISC: "Misc Hardware",
    MaterialCategory.INSULATION: "Insulation",
    MaterialCategory.CONCRETE_MASONRY: "Concrete & Masonry",
    MaterialCategory.EXTERIOR_DECKING: "Decking",
    MaterialCategory.EXTERIOR_STRUCTURAL: "Exterior Structural",
    MaterialCategory.EXTERIOR_FLASHING: "Flashing",
    MaterialCategory.ELECTRICAL: "Electrical",
    MaterialCategory.PLUMBING: "Plumbing",
    MaterialCategory.CUSTOM: "Custom",
}


class MaterialJobTag(str, Enum):
    """Job archetype tags a catalog item can be offered for."""
    INTERIOR_WALL_BUILD = "interior_wall_build"
    LVP_FLOORING = "lvp_flooring"
    PAINT_ROOM = "paint_room"
    BASIC_BATHROOM_REMODEL = "basic_bathroom_remodel"
    DECK_SURFACE_REPLACE = "deck_surface_replace"
    WINDOW_INSTALL = "window_install"


def normalize_material_key(name: str) -> str:
    """
    Collapse a material name to lowercase alphanumerics for lookups.

    '1/2" Drywall – 4×8' -> '12drywall4x8'
    """
    cleaned = (
        name.strip()
        .lower()
        .replace("×", "x")
        .replace("–", "-")
        .replace("—", "-")
    )
    return "".join(ch for ch in cleaned if ch.isalnum())


def normalize_unit(unit: Optional[str]) -> str:
    """
    Collapse unit spellings so 'sq ft', 'Square Feet' and 'sqft' compare equal.
    """
    if not unit:
        return ""
    cleaned = (
        unit.strip()
        .lower()
        .replace("square", "sq")
        .replace("foot", "ft")
        .replace("feet", "ft")
    )
    return "".join(ch for ch in cleaned if ch.isalnum())


@dataclass(frozen=True)
class CatalogItem:
    """
    A purchasable catalog material.

    coverage_quantity/coverage_unit describe how much one purchase unit covers
    (e.g. one roll of underlayment covers 100 sqft). quantity_rule_key selects
    the quantity formula; items without one are manual-only.
    """
    id: str
    name: str
    category: MaterialCategory
    unit: str                              # "each", "sheet", "sqft", "linear_ft", "bag", ...
    default_unit_cost: float
    waste_factor: float = 0.0              # 0.10 for 10%
    quantity_rule_key: Optional[str] = None
    coverage_quantity: Optional[float] = None
    coverage_unit: Optional[str] = None
    product_url: Optional[str] = None
    owner_scope: str = GLOBAL_SCOPE        # "global" or the owning user id
    custom_category_label: Optional[str] = None
    job_tags: Tuple[str, ...] = ()

    @property
    def is_default(self) -> bool:
        return self.owner_scope == GLOBAL_SCOPE

    @property
    def display_category(self) -> str:
        if self.category == MaterialCategory.CUSTOM and self.custom_category_label:
            return self.custom_category_label
        return CATEGORY_DISPLAY_NAMES[self.category]

    def validate(self) -> List[str]:
        """Validate catalog invariants. Returns list of errors."""
        errors = []
        if not self.id:
            errors.append("Catalog item id is required")
        if self.waste_factor < 0:
            errors.append(f"{self.id}: waste_factor must not be negative")
        if self.coverage_quantity is not None and self.coverage_quantity <= 0:
            errors.append(f"{self.id}: coverage_quantity must be positive")
        if self.default_unit_cost < 0:
            errors.append(f"{self.id}: default_unit_cost must not be negative")
        return errors

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CatalogItem":
        coverage = data.get("coverage_quantity")
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            category=MaterialCategory(data.get("category", MaterialCategory.CUSTOM.value)),
            unit=str(data.get("unit", "each")),
            default_unit_cost=float(data.get("default_unit_cost", 0.0)),
            waste_factor=float(data.get("waste_factor", 0.0)),
            quantity_rule_key=data.get("quantity_rule_key"),
            coverage_quantity=float(coverage) if coverage is not None else None,
            coverage_unit=data.get("coverage_unit"),
            product_url=data.get("product_url"),
            owner_scope=str(data.get("owner_scope", GLOBAL_SCOPE)),
            custom_category_label=data.get("custom_category_label"),
            job_tags=tuple(data.get("job_tags", ())),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category.value,
            "display_category": self.display_category,
            "unit": self.unit,
            "default_unit_cost": round(self.default_unit_cost, 2),
            "waste_factor": self.waste_factor,
            "quantity_rule_key": self.quantity_rule_key,
            "coverage_quantity": self.coverage_quantity,
            "coverage_unit": self.coverage_unit,
            "product_url": self.product_url,
            "owner_scope": self.owner_scope,
            "is_default": self.is_default,
            "job_tags": list(self.job_tags),
        }


@dataclass(frozen=True)
class MaterialPreferences:
    """Per-user catalog customisations stored alongside the user's account."""
    owner_id: str
    price_overrides: Dict[str, float] = field(default_factory=dict)
    product_url_overrides: Dict[str, str] = field(default_factory=dict)
    removed_material_ids: Tuple[str, ...] = ()


@dataclass(frozen=True)
class CatalogSnapshot:
    """
    Immutable view of the catalog handed to the estimation engine.

    price_overrides and product_url_overrides are keyed by item id and take
    precedence over the item's own values.
    """
    items: Tuple[CatalogItem, ...] = ()
    price_overrides: Dict[str, float] = field(default_factory=dict)
    product_url_overrides: Dict[str, str] = field(default_factory=dict)
    version: str = "0.0.0"

    def __len__(self) -> int:
        return len(self.items)

    def material(self, material_id: str) -> Optional[CatalogItem]:
        """Find an item by id."""
        return next((item for item in self.items if item.id == material_id), None)

    def materials_for_tag(self, tag: str) -> List[CatalogItem]:
        return [item for item in self.items if tag in item.job_tags]

    def materials_in(self, category: MaterialCategory) -> List[CatalogItem]:
        return [item for item in self.items if item.category == category]

    @property
    def custom_material_ids(self) -> List[str]:
        """Ids of user-owned items, in catalog order."""
        return [item.id for item in self.items if not item.is_default]

    def price(self, item: CatalogItem) -> float:
        """Unit price with any user override applied."""
        return self.price_overrides.get(item.id, item.default_unit_cost)

    def product_url(self, item: CatalogItem) -> Optional[str]:
        return self.product_url_overrides.get(item.id) or item.product_url

    def pricing(self, material_name: str) -> Optional[CatalogItem]:
        """
        Find the catalog item that prices a free-text material name.

        Exact match on the normalized name wins; otherwise the first item whose
        normalized name contains, or is contained in, the target.
        """
        target = normalize_material_key(material_name)
        if not target:
            return None

        for item in self.items:
            if normalize_material_key(item.name) == target:
                return item

        for item in self.items:
            candidate = normalize_material_key(item.name)
            if candidate and (target in candidate or candidate in target):
                return item
        return None

    def with_preferences(self, preferences: MaterialPreferences) -> "CatalogSnapshot":
        """Return a new snapshot with the user's overrides and removals applied."""
        removed = set(preferences.removed_material_ids)
        return replace(
            self,
            items=tuple(item for item in self.items if item.id not in removed),
            price_overrides={**self.price_overrides, **preferences.price_overrides},
            product_url_overrides={
                **self.product_url_overrides,
                **preferences.product_url_overrides,
            },
        )

    def with_items(self, extra_items: List[CatalogItem]) -> "CatalogSnapshot":
        """Return a new snapshot with extra (typically user-owned) items appended."""
        known = {item.id for item in self.items}
        appended = tuple(item for item in extra_items if item.id not in known)
        return replace(self, items=self.items + appended)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "materials": [item.to_dict() for item in self.items],
            "price_overrides": dict(self.price_overrides),
        }


def catalog_from_dict(data: Dict[str, Any]) -> CatalogSnapshot:
    """
    Build a snapshot from a decoded catalog document.

    Entries that fail to decode or violate catalog invariants are skipped so a
    single bad entry cannot take the whole catalog down.
    """
    items: List[CatalogItem] = []
    seen_ids = set()

    for index, entry in enumerate(data.get("materials", [])):
        try:
            item = CatalogItem.from_dict(entry)
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Skipping malformed catalog entry #{index}: {e}")
            continue

        errors = item.validate()
        if errors:
            logger.warning(f"Skipping invalid catalog item: {'; '.join(errors)}")
            continue
        if item.id in seen_ids:
            logger.warning(f"Skipping duplicate catalog id: {item.id}")
            continue

        seen_ids.add(item.id)
        items.append(item)

    return CatalogSnapshot(items=tuple(items), version=str(data.get("version", "0.0.0")))


def load_catalog(path: Path) -> CatalogSnapshot:
    """Load a catalog JSON file. Returns an empty snapshot if it cannot be read."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        logger.error(f"Materials catalog not found: {path}")
        return CatalogSnapshot()
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Failed to load materials catalog {path}: {e}")
        return CatalogSnapshot()

    snapshot = catalog_from_dict(data)
    logger.info(f"Loaded {len(snapshot)} catalog items from {path}")
    return snapshot
