"""
Unit tests for usage intelligence.

Tests cover:
- Lossy decoding of stored job/invoice documents
- Per-material statistics and co-occurrence
- Query ordering and limits
- Debounced background rebuilds
"""

import logging
from datetime import datetime, timezone

import pytest

from estimator.services.usage_intelligence import (
    HistoryDecoder,
    MaterialIntelligenceStore,
    build_usage_index,
)


def job(job_id, category, day, *materials):
    return {
        "id": job_id,
        "name": f"Job {job_id}",
        "category": category,
        "dateCreated": f"2024-01-{day:02d}T10:00:00Z",
        "materials": list(materials),
    }


def line(name, quantity=1, unit_cost=0, unit=None):
    item = {"name": name, "quantity": quantity, "unitCost": unit_cost}
    if unit is not None:
        item["unit"] = unit
    return item


@pytest.fixture
def decoder():
    return HistoryDecoder()


# ==================
# DECODING
# ==================

class TestDecoding:
    """Tests for HistoryDecoder."""

    def test_camel_case_job(self, decoder):
        [record] = decoder.decode_jobs([
            job("j1", "Drywall", 5, {
                "id": 42,
                "name": "Drywall screws",
                "quantity": 10,
                "unitCost": 7.5,
                "productURL": "https://example.com/screws",
                "ownerID": "user-1",
                "unit": "box",
            }),
        ])

        assert record.document_id == "j1"
        assert record.job_type == "Drywall"
        assert record.timestamp == datetime(2024, 1, 5, 10, 0, tzinfo=timezone.utc)
        [material] = record.materials
        assert material.id == "42"
        assert material.unit_cost == 7.5
        assert material.product_url == "https://example.com/screws"
        assert material.owner_id == "user-1"

    def test_job_defaults(self, decoder):
        [record] = decoder.decode_jobs([{"materials": [{"name": "Shims"}]}])

        assert record.job_type == "General"
        assert record.timestamp is not None
        assert record.document_id
        assert record.materials[0].quantity == 0.0

    def test_lossy_numbers(self, decoder):
        [record] = decoder.decode_jobs([
            job("j1", "Paint", 1, {"name": "Paint", "quantity": "12,5", "unitCost": "abc"}),
        ])
        assert record.materials[0].quantity == 12.5
        assert record.materials[0].unit_cost == 0.0

    def test_invoice_uses_title_and_due_date(self, decoder):
        records = decoder.decode_invoices([
            {"id": "i1", "invoiceNumber": "INV-1", "title": "Kitchen", "dueDate": "2024-02-01T00:00:00Z",
             "materials": [line("Grout")]},
            {"id": "i2", "materials": [line("Grout")]},
        ])

        assert records[0].job_type == "Kitchen"
        assert records[0].timestamp == datetime(2024, 2, 1, tzinfo=timezone.utc)
        assert records[1].job_type == "Invoice"
        assert records[1].timestamp is None

    def test_broken_document_skipped_and_logged_once(self, decoder, caplog):
        broken = {"id": "bad", "materials": [{"quantity": 1}]}
        good = job("j2", "Paint", 2, line("Paint"))

        with caplog.at_level(logging.WARNING):
            first = decoder.decode_jobs([broken, good])
            second = decoder.decode_jobs([broken, good])

        assert [r.document_id for r in first] == ["j2"]
        assert [r.document_id for r in second] == ["j2"]
        assert caplog.text.count("Failed to decode job bad") == 1

    def test_non_object_entries_skipped(self, decoder, caplog):
        with caplog.at_level(logging.WARNING):
            records = decoder.decode_jobs([42, "oops", None, job("j3", "Paint", 3, line("Paint"))])

        assert [r.document_id for r in records] == ["j3"]
        assert "Failed to decode job #0" in caplog.text
        assert "Failed to decode job #1" in caplog.text

    def test_non_finite_material_numbers_logged(self, decoder, caplog):
        with caplog.at_level(logging.WARNING):
            [record] = decoder.decode_jobs([
                job("j1", "Paint", 1, {"name": "Paint", "quantity": float("inf"), "unitCost": float("nan")}),
            ])

        assert record.materials[0].quantity == 0.0
        assert record.materials[0].unit_cost == 0.0
        assert "material quantity" in caplog.text
        assert "material unit_cost" in caplog.text


# ==================
# AGGREGATION
# ==================

class TestAggregation:
    """Tests for build_usage_index."""

    def test_average_quantity_over_three_jobs(self, decoder):
        records = decoder.decode_jobs([
            job("j1", "Drywall", 1, line("Drywall screws", 10, 7.0, "box")),
            job("j2", "Drywall", 2, line("Drywall screws", 20, 8.0, "lb")),
            job("j3", "Basement", 3, line("Drywall screws", 30, 9.0, "box")),
        ])
        stats = build_usage_index(records).stats_for("drywall screws")

        assert stats.total_usage_count == 3
        assert stats.average_quantity == 20
        assert stats.average_unit_cost == 8.0
        assert stats.last_used_at == datetime(2024, 1, 3, 10, 0, tzinfo=timezone.utc)
        assert stats.job_types == {"Drywall": 2, "Basement": 1}
        assert stats.most_common_unit == "box"

    def test_unit_tie_goes_to_first_seen(self, decoder):
        records = decoder.decode_jobs([
            job("j1", "Deck", 1, line("Deck screws", unit="lb")),
            job("j2", "Deck", 2, line("Deck screws", unit="box")),
        ])
        assert build_usage_index(records).stats_for("Deck screws").most_common_unit == "lb"

    def test_names_aggregate_case_insensitively(self, decoder):
        records = decoder.decode_jobs([
            job("j1", "Paint", 1, line(" Painter's Tape ")),
            job("j2", "Paint", 2, line("painter's tape")),
        ])
        index = build_usage_index(records)

        assert len(index) == 1
        assert index.stats[0].name == " Painter's Tape "
        assert index.stats[0].total_usage_count == 2

    def test_blank_job_type_not_counted(self, decoder):
        records = decoder.decode_jobs([job("j1", "   ", 1, line("Shims"))])
        assert build_usage_index(records).stats_for("shims").job_types == {}

    def test_co_occurrence_is_symmetric(self, decoder):
        records = decoder.decode_jobs([
            job("j1", "Paint", 1, line("Paint"), line("Tape"), line("Caulk")),
            job("j2", "Paint", 2, line("Paint"), line("Tape")),
            job("j3", "Paint", 3, line("Paint")),
        ])
        index = build_usage_index(records)

        for primary, partners in index.co_occurrence.items():
            for secondary, count in partners.items():
                assert index.co_occurrence[secondary][primary] == count
        assert index.co_occurrence["paint"] == {"tape": 2, "caulk": 1}

    def test_duplicate_lines_count_once_for_pairs(self, decoder):
        records = decoder.decode_jobs([
            job("j1", "Paint", 1, line("Paint"), line("Paint"), line("Tape")),
        ])
        index = build_usage_index(records)

        assert index.co_occurrence["paint"] == {"tape": 1}
        assert index.stats_for("paint").total_usage_count == 2

    def test_rebuild_is_pure(self, decoder):
        records = decoder.decode_jobs([
            job("j1", "Paint", 1, line("Paint", 2), line("Tape")),
            job("j2", "Deck", 2, line("Deck screws", 5)),
        ])
        assert build_usage_index(records) == build_usage_index(records)


class TestQueries:
    """Tests for UsageIndex queries."""

    @pytest.fixture
    def index(self, decoder):
        records = decoder.decode_jobs([
            job("j1", "Drywall", 1, line("Joint tape"), line("Screws"), line("Compound")),
            job("j2", "Drywall Repair", 4, line("Compound"), line("Screws")),
            job("j3", "Paint", 3, line("Paint"), line("Tape")),
        ])
        records += decoder.decode_invoices([{"id": "i1", "title": "Misc", "materials": [line("Sandpaper")]}])
        return build_usage_index(records)

    def test_frequently_used_orders_by_count_then_recency(self, index):
        names = [stats.key for stats in index.frequently_used(10)]

        # full ties keep first-seen order; undated invoice items sort last
        assert names == ["screws", "compound", "paint", "tape", "joint tape", "sandpaper"]

    def test_limits(self, index):
        assert len(index.frequently_used(2)) == 2
        assert index.frequently_used(0) == []
        assert index.frequently_used(-3) == []

    def test_job_type_substring(self, index):
        keys = {stats.key for stats in index.materials_for_job_type("DRYWALL", 10)}
        assert keys == {"joint tape", "screws", "compound"}
        assert index.materials_for_job_type("  ", 10) == []

    def test_commonly_used_with(self, index):
        keys = [stats.key for stats in index.commonly_used_with("Compound", 10)]

        assert keys == ["screws", "joint tape"]
        assert index.commonly_used_with("Sandpaper", 10) == []
        assert index.commonly_used_with("Unknown", 10) == []


# ==================
# STORE
# ==================

class TestIntelligenceStore:
    """Tests for MaterialIntelligenceStore."""

    @pytest.fixture
    def store(self):
        store = MaterialIntelligenceStore(debounce_seconds=0.01)
        yield store
        store.shutdown()

    def test_background_rebuild(self, store):
        assert store.update_jobs([job("j1", "Paint", 1, line("Paint", 2))]) == 1
        assert store.wait_idle(timeout=5)

        assert [stats.key for stats in store.frequently_used()] == ["paint"]

    def test_latest_feed_wins(self, store):
        store.update_jobs([job("j1", "Paint", 1, line("Paint"))])
        store.update_jobs([job("j2", "Deck", 2, line("Deck screws"))])
        store.update_invoices([{"id": "i1", "materials": [line("Grout")]}])
        assert store.wait_idle(timeout=5)

        assert {stats.key for stats in store.frequently_used()} == {"deck screws", "grout"}

    def test_rebuild_now(self, store):
        store.update_jobs([job("j1", "Paint", 1, line("Paint"), line("Tape"))])
        index = store.rebuild_now()

        assert len(index) == 2
        assert store.index is index
        assert [s.key for s in store.commonly_used_with("paint")] == ["tape"]
        assert [s.key for s in store.materials_for_job_type("pai")] == ["paint", "tape"]

    def test_clear(self, store):
        store.update_jobs([job("j1", "Paint", 1, line("Paint"))])
        store.rebuild_now()
        store.clear()

        assert len(store.index) == 0
        assert store.wait_idle(timeout=5)
        assert store.frequently_used() == []
