"""
Material Line Items - Core Data Models

Data structures handed back to jobs and invoices.

GeneratedMaterial:
- Produced by the job-type generator (from the catalog) and by the keyword
  suggestion engine (from fixed bundles)
- Not persisted; the caller turns it into a Material when the user accepts it

Material:
- The persisted line item that appears on a job or invoice
- total = quantity × unit_cost
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional
from uuid import uuid4

from estimator.services.catalog import CatalogItem
from estimator.services.numeric import debug_check_nan, safe_number


def _generate_material_id() -> str:
    """Generate a unique line item ID."""
    return str(uuid4())


@dataclass(frozen=True)
class GeneratedMaterial:
    """A suggested material with quantity and price, ready for review."""
    name: str
    quantity: float
    unit: str
    unit_cost: float
    material: Optional[CatalogItem] = None   # set when generated from the catalog

    @property
    def total_cost(self) -> float:
        return safe_number(self.quantity * self.unit_cost)

    @property
    def details(self) -> str:
        """Short display line, e.g. '4.0 gallons @ $42.00'."""
        return f"{self.quantity:.1f} {self.unit} @ ${self.unit_cost:,.2f}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "quantity": self.quantity,
            "unit": self.unit,
            "unit_cost": round(self.unit_cost, 2),
            "total_cost": round(self.total_cost, 2),
            "details": self.details,
            "material_id": self.material.id if self.material else None,
            "category": self.material.display_category if self.material else None,
        }


@dataclass
class Material:
    """Persisted material line item on a job or invoice."""
    id: str
    owner_id: str
    name: str
    quantity: float
    unit_cost: float
    product_url: Optional[str] = None
    unit: Optional[str] = None
    notes: Optional[str] = None

    @property
    def total(self) -> float:
        return safe_number(self.quantity * self.unit_cost)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "owner_id": self.owner_id,
            "name": self.name,
            "quantity": self.quantity,
            "unit_cost": round(self.unit_cost, 2),
            "total": round(self.total, 2),
            "product_url": self.product_url,
            "unit": self.unit,
            "notes": self.notes,
        }


def create_material(
    owner_id: str,
    name: str,
    quantity: float,
    unit_cost: float,
    product_url: Optional[str] = None,
    unit: Optional[str] = None,
    notes: Optional[str] = None,
) -> Material:
    """Create a Material with auto-generated ID and sanitized numbers."""
    return Material(
        id=_generate_material_id(),
        owner_id=owner_id,
        name=name,
        quantity=debug_check_nan(quantity, f"{name} quantity"),
        unit_cost=debug_check_nan(unit_cost, f"{name} unit cost"),
        product_url=product_url,
        unit=unit,
        notes=notes,
    )
