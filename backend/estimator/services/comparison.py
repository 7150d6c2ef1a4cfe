"""
Material Comparison - fuzzy "closest catalog item" scoring.

Confidence = 0.6 × name + 0.25 × unit + 0.15 × cost, clamped to [0, 1].

Name similarity: Jaccard over lowercase alphanumeric tokens (70%) blended
with a length-closeness score (30%).
Unit similarity: identical 1.0, prefix-related 0.7, unrelated 0.2, blank 0.4.
Cost similarity: relative delta ≤ 10% → 1.0, ≤ 25% → 0.6, else 0.2; a
candidate without a price scores 0.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set

from estimator.services.catalog import CatalogItem, CatalogSnapshot
from estimator.services.line_items import Material


NAME_WEIGHT = 0.6
UNIT_WEIGHT = 0.25
COST_WEIGHT = 0.15
HIGH_CONFIDENCE_THRESHOLD = 0.7

_TOKEN_SPLIT = re.compile(r"[\W_]+")


@dataclass
class MaterialMatchResult:
    """A scored catalog candidate for a material."""
    catalog_item: CatalogItem
    confidence: float                     # 0.0 - 1.0
    matched_attributes: List[str] = field(default_factory=list)   # "name", "unit", "cost"
    notes: List[str] = field(default_factory=list)

    @property
    def is_high_confidence(self) -> bool:
        return self.confidence >= HIGH_CONFIDENCE_THRESHOLD

    @property
    def rounded_confidence(self) -> str:
        """'77%'"""
        return f"{self.confidence * 100:.0f}%"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "catalog_item": self.catalog_item.to_dict(),
            "confidence": round(self.confidence, 4),
            "rounded_confidence": self.rounded_confidence,
            "is_high_confidence": self.is_high_confidence,
            "matched_attributes": self.matched_attributes,
            "notes": self.notes,
        }


def token_set(text: str) -> Set[str]:
    return {token for token in _TOKEN_SPLIT.split(text.lower()) if token}


def _normalized_unit(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value.lower() if value else None


class MaterialConfidenceScoreBuilder:
    """
    Scores one candidate against one source material.

    Reasons and matched attributes accumulate while scoring, in name, unit,
    cost order.
    """

    def __init__(self, source: Material, candidate: CatalogItem):
        self.source = source
        self.candidate = candidate
        self.reasons: List[str] = []
        self.matched_attributes: List[str] = []

    def build(self) -> MaterialMatchResult:
        name_score = self.name_similarity()
        unit_score = self.unit_similarity()
        cost_score = self.cost_similarity()

        weighted = name_score * NAME_WEIGHT + unit_score * UNIT_WEIGHT + cost_score * COST_WEIGHT

        return MaterialMatchResult(
            catalog_item=self.candidate,
            confidence=min(1.0, max(0.0, weighted)),
            matched_attributes=list(self.matched_attributes),
            notes=list(self.reasons),
        )

    def name_similarity(self) -> float:
        source_name = self.source.name
        candidate_name = self.candidate.name

        lhs = token_set(source_name)
        rhs = token_set(candidate_name)
        union = lhs | rhs
        if not union:
            return 0.0
        jaccard = len(lhs & rhs) / len(union)

        if jaccard >= 0.6:
            self.matched_attributes.append("name")
            self.reasons.append(f"Strong keyword overlap between {source_name} and {candidate_name}")
        elif jaccard > 0.3:
            self.reasons.append(f"Partial keyword overlap between {source_name} and {candidate_name}")

        length_delta = abs(len(source_name) - len(candidate_name))
        length_score = max(0.0, 1 - length_delta / max(len(source_name), 1))

        return min(1.0, jaccard * 0.7 + length_score * 0.3)

    def unit_similarity(self) -> float:
        source_unit = _normalized_unit(self.source.unit)
        candidate_unit = _normalized_unit(self.candidate.unit)
        if source_unit is None or candidate_unit is None:
            return 0.4

        if source_unit == candidate_unit:
            self.matched_attributes.append("unit")
            self.reasons.append(f"Units match ({source_unit})")
            return 1.0

        if source_unit.startswith(candidate_unit) or candidate_unit.startswith(source_unit):
            self.reasons.append(f"Units are related ({source_unit} vs {candidate_unit})")
            return 0.7

        return 0.2

    def cost_similarity(self) -> float:
        candidate_cost = self.candidate.default_unit_cost
        if candidate_cost <= 0:
            return 0.0

        delta = abs(candidate_cost - self.source.unit_cost)
        relative = delta / max(max(candidate_cost, self.source.unit_cost), 1.0)

        if relative <= 0.1:
            self.matched_attributes.append("cost")
            self.reasons.append("Unit cost is within 10% of catalog item")
            return 1.0

        if relative <= 0.25:
            self.reasons.append("Unit cost is within 25% of catalog item")
            return 0.6

        self.reasons.append("Unit cost differs significantly from catalog item")
        return 0.2


def best_matches(
    material: Material,
    catalog: CatalogSnapshot,
    limit: int = 5,
) -> List[MaterialMatchResult]:
    """
    Rank every catalog item against a material.

    Sorted by confidence (highest first), ties broken by catalog item name.
    At least one result is returned whenever the catalog is non-empty.
    """
    results = [
        MaterialConfidenceScoreBuilder(material, candidate).build()
        for candidate in catalog.items
    ]
    results.sort(key=lambda result: (-result.confidence, result.catalog_item.name))
    return results[:max(limit, 1)]
