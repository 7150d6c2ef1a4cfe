"""
Keyword Material Suggestions

Fallback material list for a free-text job description when no geometry is
available. Each keyword set that matches the description adds its fixed
bundle; any match also adds the protection & cleanup bundle, and a description
that matches nothing gets the general construction kit.

Duplicate names are merged by summing quantities (unit and price from the
first occurrence); the result is sorted by name.
"""

from typing import Dict, List, Tuple

from estimator.services.line_items import GeneratedMaterial


# (name, quantity, unit, unit cost)
BundleEntry = Tuple[str, float, str, float]


PAINTING_BUNDLE: List[BundleEntry] = [
    ("Interior acrylic paint – eggshell", 4.0, "gallons", 42.0),
    ("Stain-blocking primer", 2.0, "gallons", 32.0),
    ("Painter's tape", 5.0, "rolls", 6.5),
    ("Plastic sheeting", 3.0, "rolls", 22.0),
    ("Canvas drop cloths", 3.0, "pieces", 18.0),
    ("Rollers, frames, and trays", 2.0, "kits", 35.0),
    ("Premium brush set", 1.0, "set", 28.0),
    ("Roller covers – 3/8\" nap", 6.0, "pieces", 3.5),
    ("Spackle and patch compound", 1.0, "tub", 9.5),
    ("Sanding sponges – fine/medium", 4.0, "pieces", 3.25),
    ("Paintable acrylic caulk", 6.0, "tubes", 5.25),
]

DRYWALL_BUNDLE: List[BundleEntry] = [
    ("1/2\" Drywall – 4x8 sheets", 40.0, "sheets", 15.5),
    ("All-purpose joint compound", 7.0, "buckets", 23.5),
    ("Paper joint tape", 10.0, "rolls", 4.5),
    ("Metal corner bead", 18.0, "pieces", 5.0),
    ("Drywall screws – 1-1/4\"", 20.0, "lbs", 7.5),
    ("Drywall adhesive", 8.0, "tubes", 7.0),
    ("Acoustical sealant", 6.0, "tubes", 8.5),
    ("Pole sander sheets – 120 grit", 2.0, "packs", 9.0),
]

FLOORING_BUNDLE: List[BundleEntry] = [
    ("Luxury vinyl plank flooring", 330.0, "sq ft", 2.85),
    ("Underlayment with vapor barrier", 4.0, "rolls", 52.0),
    ("Flooring transition strips", 6.0, "pieces", 18.0),
    ("Quarter-round/shoe molding", 12.0, "pieces", 9.5),
    ("Vapor barrier tape", 3.0, "rolls", 12.0),
    ("Construction adhesive", 8.0, "tubes", 6.5),
    ("Flooring spacers/shims", 2.0, "bags", 7.5),
    ("Saw blades – fine tooth", 2.0, "blades", 18.0),
]

EXTERIOR_STRUCTURE_BUNDLE: List[BundleEntry] = [
    ("Pressure-treated 6x6 posts – 10'", 8.0, "pieces", 42.0),
    ("Pressure-treated 2x10 beams – 12'", 12.0, "pieces", 38.0),
    ("Pressure-treated 2x8 joists – 12'", 22.0, "pieces", 26.0),
    ("5/4x6 decking boards – 12'", 90.0, "boards", 18.25),
    ("Joist hangers", 24.0, "pieces", 2.5),
    ("Structural screws/ledger fasteners", 2.0, "buckets", 120.0),
    ("Hidden deck fasteners", 6.0, "boxes", 75.0),
    ("Galvanized post bases and caps", 8.0, "sets", 16.0),
    ("Concrete mix for footings", 20.0, "bags", 6.5),
    ("Flashing tape for ledgers", 4.0, "rolls", 32.0),
    ("Railing hardware and balusters", 1.0, "lot", 350.0),
]

ROOFING_BUNDLE: List[BundleEntry] = [
    ("Architectural shingles", 12.0, "squares", 110.0),
    ("Synthetic felt underlayment", 12.0, "rolls", 25.0),
    ("Ice & water shield", 6.0, "rolls", 55.0),
    ("Drip edge flashing", 20.0, "pieces", 8.0),
    ("Starter strip shingles", 12.0, "bundles", 32.0),
    ("Roofing nails – coil", 50.0, "lbs", 1.35),
    ("Ridge vent and caps", 80.0, "ft", 3.5),
    ("Roof sealant/flash boots", 6.0, "tubes", 8.5),
]

ELECTRICAL_BUNDLE: List[BundleEntry] = [
    ("12/2 NM-B cable", 250.0, "ft", 0.82),
    ("14/2 NM-B cable", 250.0, "ft", 0.65),
    ("Single-gang electrical boxes", 20.0, "pieces", 2.5),
    ("Duplex receptacles – tamper resistant", 20.0, "pieces", 2.2),
    ("Single-pole switches", 8.0, "pieces", 3.0),
    ("GFCI outlets", 2.0, "pieces", 18.0),
    ("Cover plates – assorted", 20.0, "pieces", 1.35),
    ("Wire nuts/connectors", 5.0, "boxes", 4.75),
    ("Romex staples", 2.0, "boxes", 7.0),
    ("Electrical tape", 4.0, "rolls", 4.5),
]

PLUMBING_BUNDLE: List[BundleEntry] = [
    ("3/4\" PEX-A tubing", 200.0, "ft", 0.95),
    ("1/2\" PEX-A tubing", 300.0, "ft", 0.65),
    ("PEX elbows/tees/adapters", 30.0, "pieces", 4.0),
    ("Ball valves – 3/4\"", 4.0, "pieces", 12.5),
    ("Angle stops – 3/8\"", 10.0, "pieces", 6.0),
    ("PEX crimp rings/sleeves", 2.0, "boxes", 18.0),
    ("Pipe clamps/straps", 2.0, "boxes", 12.0),
    ("Teflon tape", 6.0, "rolls", 1.5),
    ("Plumber's putty/silicone", 2.0, "tubs", 5.5),
]

CONCRETE_BUNDLE: List[BundleEntry] = [
    ("Concrete mix – 60 lb bags", 45.0, "bags", 5.5),
    ("3/4\" clean gravel base", 2.0, "tons", 45.0),
    ("#4 rebar – 10' lengths", 40.0, "pieces", 8.25),
    ("Form boards 2x4x10", 20.0, "pieces", 7.25),
    ("Form stakes/fasteners", 30.0, "pieces", 2.5),
    ("Tie wire – 16 gauge", 2.0, "rolls", 7.0),
    ("Expansion joint material", 12.0, "boards", 9.0),
    ("Concrete sealer/curing compound", 2.0, "gallons", 34.0),
]

PROTECTION_AND_CLEANUP_BUNDLE: List[BundleEntry] = [
    ("Floor protection board", 5.0, "rolls", 36.0),
    ("Heavy-duty contractor bags", 2.0, "boxes", 18.0),
    ("Shop towels and rags", 4.0, "packs", 6.5),
    ("Construction debris dumpster – 10 yd", 1.0, "rental", 425.0),
]

GENERAL_CONSTRUCTION_KIT: List[BundleEntry] = [
    ("General framing lumber and sheathing", 1.0, "lot", 650.0),
    ("Screws, nails, and anchors assortment", 1.0, "lot", 185.0),
    ("Construction adhesive and sealants", 1.0, "lot", 120.0),
    ("Surface protection and masking", 1.0, "lot", 160.0),
    ("Debris haul-off/dumpster", 1.0, "rental", 425.0),
]


# Keyword sets are matched as plain substrings of the lowercased description
KEYWORD_BUNDLES: List[Tuple[Tuple[str, ...], List[BundleEntry]]] = [
    (("paint", "painting", "bedroom", "interior finish"), PAINTING_BUNDLE),
    (("drywall", "sheetrock", "basement", "framing"), DRYWALL_BUNDLE),
    (("floor", "flooring", "lvp", "laminate", "hardwood", "tile"), FLOORING_BUNDLE),
    (("deck", "porch", "fence", "pergola", "exterior structure"), EXTERIOR_STRUCTURE_BUNDLE),
    (("roof", "shingle", "reroof"), ROOFING_BUNDLE),
    (("electrical", "outlet", "receptacle", "switch", "lighting"), ELECTRICAL_BUNDLE),
    (("plumbing", "bath", "kitchen", "pipe", "water line"), PLUMBING_BUNDLE),
    (("concrete", "slab", "masonry", "sidewalk", "footing"), CONCRETE_BUNDLE),
]


def _materials(bundle: List[BundleEntry]) -> List[GeneratedMaterial]:
    return [
        GeneratedMaterial(name=name, quantity=quantity, unit=unit, unit_cost=unit_cost)
        for name, quantity, unit, unit_cost in bundle
    ]


def merge_duplicates(materials: List[GeneratedMaterial]) -> List[GeneratedMaterial]:
    """Sum quantities of same-named materials and sort by name."""
    merged: Dict[str, GeneratedMaterial] = {}
    for material in materials:
        existing = merged.get(material.name)
        if existing is None:
            merged[material.name] = material
        else:
            merged[material.name] = GeneratedMaterial(
                name=existing.name,
                quantity=existing.quantity + material.quantity,
                unit=existing.unit,
                unit_cost=existing.unit_cost,
            )
    return sorted(merged.values(), key=lambda material: material.name)


def suggest_materials(description: str) -> List[GeneratedMaterial]:
    """
    Suggest a material list from a free-text job description.

    Args:
        description: e.g. "Paint the bedroom and replace the baseboards"

    Returns:
        Merged GeneratedMaterial list sorted by name (never empty)
    """
    text = description.lower()
    materials: List[GeneratedMaterial] = []

    for keywords, bundle in KEYWORD_BUNDLES:
        if any(keyword in text for keyword in keywords):
            materials.extend(_materials(bundle))

    if materials:
        materials.extend(_materials(PROTECTION_AND_CLEANUP_BUNDLE))
    else:
        materials.extend(_materials(GENERAL_CONSTRUCTION_KIT))

    return merge_duplicates(materials)
