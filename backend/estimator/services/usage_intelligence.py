"""
Usage Intelligence - material statistics from job and invoice history.

The history feed (jobs and invoices with their material line items) is folded
into per-material statistics and a co-occurrence index that power suggestion
chips ("frequently used", "used on similar jobs", "often bought with").

Pipeline:
1. Decode raw job/invoice documents into HistoryRecord (lossy, with defaults)
2. build_usage_index: pure fold over every record, rebuilt from scratch
3. MaterialIntelligenceStore: debounces rebuilds onto a worker thread and
   publishes each new UsageIndex with a single reference swap

Statistics are keyed by the trimmed, lowercased material name; the display
name is the first spelling seen.
"""

import logging
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import wait as wait_futures
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from functools import reduce
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple
from uuid import uuid4

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from estimator.core.config import settings
from estimator.services.numeric import debug_check_nan, parse_double, safe_divide, safe_number

logger = logging.getLogger(__name__)


def normalize_name(name: str) -> str:
    return name.strip().lower()


# ==================
# HISTORY DOCUMENTS
# ==================

def _lossy_number(value: Any) -> Any:
    """Accept numbers stored as text ("12,5"); blank or unparseable text is 0."""
    if isinstance(value, str):
        parsed = parse_double(value)
        return parsed if parsed is not None else 0.0
    if value is None:
        return 0.0
    return value


def _document_key(value: Any) -> str:
    return str(uuid4()) if value is None else str(value)


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class HistoryDocument(BaseModel):
    """Base for stored documents: camelCase or snake_case keys, extras ignored."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class MaterialRecord(HistoryDocument):
    """A material line item as stored on a job or invoice."""
    id: str = Field(default_factory=lambda: str(uuid4()))
    name: str
    quantity: float = 0.0
    unit_cost: float = 0.0
    unit: Optional[str] = None
    notes: Optional[str] = None
    product_url: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("productURL", "productUrl", "product_url"),
    )
    owner_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("ownerID", "ownerId", "owner_id"),
    )

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, v):
        return _document_key(v)

    @field_validator("quantity", "unit_cost", mode="before")
    @classmethod
    def lossy_number(cls, v):
        return _lossy_number(v)

    @field_validator("quantity", "unit_cost")
    @classmethod
    def finite_number(cls, v, info):
        return debug_check_nan(v, f"material {info.field_name}")


class JobDocument(HistoryDocument):
    id: str = Field(default_factory=lambda: str(uuid4()))
    name: str = "Untitled Job"
    category: str = "General"
    date_created: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    materials: List[MaterialRecord] = Field(default_factory=list)

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, v):
        return _document_key(v)

    @field_validator("date_created")
    @classmethod
    def aware_date(cls, v):
        return _as_utc(v)


class InvoiceDocument(HistoryDocument):
    id: str = Field(default_factory=lambda: str(uuid4()))
    invoice_number: Optional[str] = None
    title: str = "Invoice"
    client_name: str = ""
    due_date: Optional[datetime] = None
    materials: List[MaterialRecord] = Field(default_factory=list)

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, v):
        return _document_key(v)

    @field_validator("due_date")
    @classmethod
    def aware_date(cls, v):
        return _as_utc(v)


class HistorySource(str, Enum):
    JOB = "job"
    INVOICE = "invoice"


@dataclass(frozen=True)
class HistoryRecord:
    """One job or invoice reduced to what the aggregator needs."""
    source: HistorySource
    document_id: str
    job_type: str                         # job category, or invoice title
    timestamp: Optional[datetime]
    materials: Tuple[MaterialRecord, ...] = ()


def job_record(job: JobDocument) -> HistoryRecord:
    return HistoryRecord(
        source=HistorySource.JOB,
        document_id=job.id,
        job_type=job.category,
        timestamp=job.date_created,
        materials=tuple(job.materials),
    )


def invoice_record(invoice: InvoiceDocument) -> HistoryRecord:
    """
    Reduce an invoice to a history record.

    An invoice without a due date gets no usage timestamp, so its materials
    rank after dated usage on ties. This intentionally departs from stamping
    undated invoices with the rebuild time, which would make them look like
    the most recent usage and reorder results on every rebuild.
    """
    return HistoryRecord(
        source=HistorySource.INVOICE,
        document_id=invoice.id,
        job_type=invoice.title,
        timestamp=invoice.due_date,
        materials=tuple(invoice.materials),
    )


class HistoryDecoder:
    """
    Decodes raw job/invoice documents, skipping the ones that fail.

    Each failing document is logged once; repeated pushes of the same broken
    document stay quiet.
    """

    def __init__(self):
        self._reported: Set[str] = set()
        self._lock = threading.Lock()

    def _report(self, kind: str, document_id: str, error: Exception) -> None:
        key = f"{kind}:{document_id}"
        with self._lock:
            if key in self._reported:
                return
            self._reported.add(key)
        logger.warning(f"Failed to decode {kind} {document_id}: {error}")

    def decode_jobs(self, documents: Iterable[Any]) -> List[HistoryRecord]:
        records = []
        for index, data in enumerate(documents):
            try:
                records.append(job_record(JobDocument.model_validate(data)))
            except ValidationError as e:
                self._report("job", _document_id(data, index), e)
        return records

    def decode_invoices(self, documents: Iterable[Any]) -> List[HistoryRecord]:
        records = []
        for index, data in enumerate(documents):
            try:
                records.append(invoice_record(InvoiceDocument.model_validate(data)))
            except ValidationError as e:
                self._report("invoice", _document_id(data, index), e)
        return records


def _document_id(data: Any, index: int) -> str:
    if isinstance(data, dict) and data.get("id") is not None:
        return str(data["id"])
    return f"#{index}"


# ==================
# STATISTICS
# ==================

@dataclass(frozen=True)
class MaterialUsageStats:
    """Aggregated usage of one material across the history."""
    key: str
    name: str
    total_usage_count: int
    average_quantity: Optional[float]
    average_unit_cost: Optional[float]
    last_used_at: Optional[datetime]
    job_types: Dict[str, int] = field(default_factory=dict)
    most_common_unit: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "name": self.name,
            "total_usage_count": self.total_usage_count,
            "average_quantity": round(self.average_quantity, 4) if self.average_quantity is not None else None,
            "average_unit_cost": round(self.average_unit_cost, 2) if self.average_unit_cost is not None else None,
            "last_used_at": self.last_used_at.isoformat() if self.last_used_at else None,
            "job_types": dict(self.job_types),
            "most_common_unit": self.most_common_unit,
        }


def usage_sort_key(stats: MaterialUsageStats):
    """Most used first; ties go to the most recently used, undated last."""
    recency = stats.last_used_at.timestamp() if stats.last_used_at else float("-inf")
    return (-stats.total_usage_count, -recency)


@dataclass(frozen=True)
class _StatsAccumulator:
    key: str
    name: str
    usage_count: int = 0
    total_quantity: float = 0.0
    total_unit_cost: float = 0.0
    last_used_at: Optional[datetime] = None
    job_types: Dict[str, int] = field(default_factory=dict)
    unit_counts: Dict[str, int] = field(default_factory=dict)

    def add(self, material: MaterialRecord, job_type: str, used_at: Optional[datetime]) -> "_StatsAccumulator":
        job_types = dict(self.job_types)
        trimmed_type = job_type.strip()
        if trimmed_type:
            job_types[trimmed_type] = job_types.get(trimmed_type, 0) + 1

        unit_counts = dict(self.unit_counts)
        trimmed_unit = (material.unit or "").strip()
        if trimmed_unit:
            unit_counts[trimmed_unit] = unit_counts.get(trimmed_unit, 0) + 1

        last_used_at = self.last_used_at
        if used_at is not None and (last_used_at is None or used_at > last_used_at):
            last_used_at = used_at

        return replace(
            self,
            usage_count=self.usage_count + 1,
            total_quantity=self.total_quantity + safe_number(material.quantity),
            total_unit_cost=self.total_unit_cost + safe_number(material.unit_cost),
            last_used_at=last_used_at,
            job_types=job_types,
            unit_counts=unit_counts,
        )

    def build(self) -> MaterialUsageStats:
        has_usage = self.usage_count > 0
        # max() keeps the first maximal entry, so the earliest unit wins ties
        most_common_unit = (
            max(self.unit_counts.items(), key=lambda entry: entry[1])[0]
            if self.unit_counts else None
        )
        return MaterialUsageStats(
            key=self.key,
            name=self.name,
            total_usage_count=self.usage_count,
            average_quantity=safe_divide(self.total_quantity, self.usage_count) if has_usage else None,
            average_unit_cost=safe_divide(self.total_unit_cost, self.usage_count) if has_usage else None,
            last_used_at=self.last_used_at,
            job_types=self.job_types,
            most_common_unit=most_common_unit,
        )


@dataclass(frozen=True)
class _UsageFold:
    accumulators: Dict[str, _StatsAccumulator] = field(default_factory=dict)
    co_occurrence: Dict[str, Dict[str, int]] = field(default_factory=dict)


def _fold_record(state: _UsageFold, record: HistoryRecord) -> _UsageFold:
    accumulators = dict(state.accumulators)
    for material in record.materials:
        key = normalize_name(material.name)
        current = accumulators.get(key) or _StatsAccumulator(key=key, name=material.name)
        accumulators[key] = current.add(material, record.job_type, record.timestamp)

    co_occurrence = dict(state.co_occurrence)
    names = list(dict.fromkeys(normalize_name(material.name) for material in record.materials))
    for primary in names:
        partners = dict(co_occurrence.get(primary, {}))
        for secondary in names:
            if secondary != primary:
                partners[secondary] = partners.get(secondary, 0) + 1
        if len(names) > 1:
            co_occurrence[primary] = partners

    return _UsageFold(accumulators=accumulators, co_occurrence=co_occurrence)


@dataclass(frozen=True)
class UsageIndex:
    """Published, read-only usage statistics plus the co-occurrence index."""
    stats: Tuple[MaterialUsageStats, ...] = ()
    co_occurrence: Dict[str, Dict[str, int]] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.stats)

    def stats_for(self, name: str) -> Optional[MaterialUsageStats]:
        key = normalize_name(name)
        return next((stats for stats in self.stats if stats.key == key), None)

    def frequently_used(self, limit: int) -> List[MaterialUsageStats]:
        return sorted(self.stats, key=usage_sort_key)[:max(limit, 0)]

    def materials_for_job_type(self, job_type: str, limit: int) -> List[MaterialUsageStats]:
        """Materials used on jobs whose type contains job_type (case-insensitive)."""
        needle = job_type.strip().lower()
        if not needle:
            return []
        matching = [
            stats for stats in self.stats
            if any(needle in recorded.lower() for recorded in stats.job_types)
        ]
        return sorted(matching, key=usage_sort_key)[:max(limit, 0)]

    def commonly_used_with(self, name: str, limit: int) -> List[MaterialUsageStats]:
        """Materials that appeared on the same job/invoice, most shared first."""
        partners = self.co_occurrence.get(normalize_name(name))
        if not partners:
            return []
        by_key = {stats.key: stats for stats in self.stats}
        ranked = sorted(partners.items(), key=lambda entry: (-entry[1], entry[0]))
        matches = [by_key[key] for key, _ in ranked if key in by_key]
        return matches[:max(limit, 0)]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "material_count": len(self.stats),
            "stats": [stats.to_dict() for stats in self.stats],
        }


def build_usage_index(records: Iterable[HistoryRecord]) -> UsageIndex:
    """
    Fold the full history into a fresh UsageIndex.

    Args:
        records: Every job and invoice record, in feed order

    Returns:
        UsageIndex with stats sorted by usage (most used first)
    """
    folded = reduce(_fold_record, records, _UsageFold())
    stats = sorted(
        (accumulator.build() for accumulator in folded.accumulators.values()),
        key=usage_sort_key,
    )
    return UsageIndex(stats=tuple(stats), co_occurrence=folded.co_occurrence)


# ==================
# STORE
# ==================

class MaterialIntelligenceStore:
    """
    Holds the latest history feed and the published UsageIndex.

    Pushing jobs or invoices schedules a rebuild after a short debounce; the
    rebuild runs on a single background worker and replaces the published
    index in one assignment. Readers always see a complete index.
    """

    def __init__(self, debounce_seconds: Optional[float] = None):
        self.debounce_seconds = (
            settings.usage_rebuild_debounce_seconds if debounce_seconds is None else debounce_seconds
        )
        self._decoder = HistoryDecoder()
        self._lock = threading.Lock()
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="usage-rebuild")
        self._timer: Optional[threading.Timer] = None
        self._pending: Set[Future] = set()

        self._jobs: List[HistoryRecord] = []
        self._invoices: List[HistoryRecord] = []
        self._generation = 0
        self._published_generation = 0
        self._index = UsageIndex()

    @property
    def index(self) -> UsageIndex:
        return self._index

    # ---- feed ----

    def update_jobs(self, documents: Iterable[Any]) -> int:
        """Replace the cached jobs with a freshly pushed feed. Returns decoded count."""
        records = self._decoder.decode_jobs(documents)
        with self._lock:
            self._jobs = records
            self._generation += 1
        self.schedule_rebuild()
        return len(records)

    def update_invoices(self, documents: Iterable[Any]) -> int:
        """Replace the cached invoices with a freshly pushed feed. Returns decoded count."""
        records = self._decoder.decode_invoices(documents)
        with self._lock:
            self._invoices = records
            self._generation += 1
        self.schedule_rebuild()
        return len(records)

    def clear(self) -> None:
        """Drop all history (e.g. on sign-out) and publish an empty index."""
        with self._lock:
            self._cancel_timer()
            self._jobs = []
            self._invoices = []
            self._generation += 1
            self._published_generation = self._generation
            self._index = UsageIndex()

    # ---- rebuild ----

    def schedule_rebuild(self) -> None:
        with self._lock:
            self._cancel_timer()
            timer = threading.Timer(self.debounce_seconds, self._submit_rebuild)
            timer.daemon = True
            self._timer = timer
            timer.start()

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _submit_rebuild(self) -> None:
        with self._lock:
            future = self._executor.submit(self._rebuild)
            self._pending.add(future)
        future.add_done_callback(self._discard_future)

    def _discard_future(self, future: Future) -> None:
        with self._lock:
            self._pending.discard(future)
        error = future.exception()
        if error is not None:
            logger.error(f"Usage index rebuild failed: {error}")

    def _rebuild(self) -> UsageIndex:
        with self._lock:
            generation = self._generation
            records = self._jobs + self._invoices

        index = build_usage_index(records)

        with self._lock:
            # An older snapshot never replaces a newer one
            if generation >= self._published_generation:
                self._published_generation = generation
                self._index = index
                logger.info(f"Usage index rebuilt: {len(index)} materials from {len(records)} records")
            return self._index

    def rebuild_now(self) -> UsageIndex:
        """Rebuild synchronously on the calling thread and publish the result."""
        with self._lock:
            self._cancel_timer()
        return self._rebuild()

    def wait_idle(self, timeout: Optional[float] = None) -> bool:
        """
        Block until no rebuild is scheduled or running.

        Returns False if the timeout expired first.
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        while True:
            with self._lock:
                timer = self._timer
                pending = set(self._pending)
            remaining = None if deadline is None else max(0.0, deadline - time.monotonic())

            if timer is not None and timer.is_alive():
                timer.join(remaining)
                if timer.is_alive():
                    return False
                continue
            if pending:
                _, not_done = wait_futures(pending, timeout=remaining)
                if not_done:
                    return False
                continue
            return True

    def shutdown(self) -> None:
        with self._lock:
            self._cancel_timer()
        self._executor.shutdown(wait=True)

    # ---- queries ----

    def frequently_used(self, limit: Optional[int] = None) -> List[MaterialUsageStats]:
        return self.index.frequently_used(settings.usage_default_limit if limit is None else limit)

    def materials_for_job_type(self, job_type: str, limit: Optional[int] = None) -> List[MaterialUsageStats]:
        return self.index.materials_for_job_type(
            job_type, settings.usage_default_limit if limit is None else limit
        )

    def commonly_used_with(self, name: str, limit: Optional[int] = None) -> List[MaterialUsageStats]:
        return self.index.commonly_used_with(
            name, settings.usage_default_limit if limit is None else limit
        )
