"""Tests for the allocation engine."""

import logging
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from dataclasses import FrozenInstanceError

from models.invoice import InvoiceTotals, BillingPeriod
from models.usage import UnitUsage
from models.options import AllocationOptions
from engine.allocation_engine import (
    round_to_unit,
    filter_active_units,
    resolve_building_total_usage,
    allocate_unit,
    compute_unit_allocations,
)
from engine.errors import FatalInputError, ConfigLookupError
from data.config_store import DictConfigStore
from data.sample_data import SAMPLE_INVOICE, SAMPLE_BUILDING_TOTAL_USAGE


def make_usage(unit_id="201", usage=100, previous=1000):
    return UnitUsage(unit_id, previous, previous + usage, usage)


class FailingStore:
    def __init__(self, error):
        self.error = error

    def get(self, key):
        raise self.error


class TestRoundToUnit:
    def test_rounds_to_nearest_multiple(self):
        assert round_to_unit(14.9, 10) == 10
        assert round_to_unit(15.1, 10) == 20
        assert round_to_unit(1234567.4, 10) == 1234570

    def test_ties_away_from_zero(self):
        assert round_to_unit(15, 10) == 20
        assert round_to_unit(25, 10) == 30
        assert round_to_unit(-15, 10) == -20
        assert round_to_unit(2.5, 1) == 3
        assert round_to_unit(-2.5, 1) == -3

    def test_result_is_multiple(self):
        for amount in [0.1, 99.99, 4321.5, -777.7, 5625260.2]:
            assert round_to_unit(amount, 10) % 10 == 0


class TestFilterActiveUnits:
    def test_excludes_vacant(self):
        usages = [make_usage("201", 100), make_usage("202", 0), make_usage("203", 5)]
        active = filter_active_units(usages, exclude_vacant=True)
        assert [u.unit_id for u in active] == ["201", "203"]

    def test_keeps_all_when_disabled(self):
        usages = [make_usage("201", 100), make_usage("202", 0)]
        assert len(filter_active_units(usages, exclude_vacant=False)) == 2


class TestResolveBuildingTotalUsage:
    def test_override_wins(self):
        store = DictConfigStore({"building.total_usage_default": "30000"})
        assert resolve_building_total_usage(12345, store) == 12345.0

    def test_explicit_zero_override_is_kept(self):
        assert resolve_building_total_usage(0) == 0.0

    def test_config_store_value(self):
        store = DictConfigStore({"building.total_usage_default": "30000"})
        assert resolve_building_total_usage(None, store) == 30000.0

    def test_missing_key_uses_fallback(self):
        assert resolve_building_total_usage(None, DictConfigStore()) == 25231.0

    def test_no_store_uses_fallback(self):
        assert resolve_building_total_usage() == 25231.0

    def test_store_failure_is_logged_and_ignored(self, caplog):
        store = FailingStore(ConfigLookupError("database down"))
        with caplog.at_level(logging.WARNING):
            assert resolve_building_total_usage(None, store) == 25231.0
        assert "database down" in caplog.text

    def test_unexpected_store_error_falls_back(self):
        store = FailingStore(RuntimeError("boom"))
        assert resolve_building_total_usage(None, store) == 25231.0

    def test_unparseable_value_falls_back(self):
        store = DictConfigStore({"building.total_usage_default": "lots"})
        assert resolve_building_total_usage(None, store) == 25231.0


class TestAllocateUnit:
    def test_components_prorated_by_ratio(self):
        alloc = allocate_unit(SAMPLE_INVOICE, make_usage("201", 100), 25231, 10)
        ratio = 100 / 25231

        assert alloc.usage_ratio == pytest.approx(ratio)
        assert alloc.basic_fee == round_to_unit(1397760 * ratio, 1)
        assert alloc.power_fee == round_to_unit(3238894 * ratio, 1)
        assert alloc.power_factor_fee == round_to_unit(-13977 * ratio, 1)
        assert alloc.power_factor_fee < 0

    def test_total_uses_unrounded_components(self):
        alloc = allocate_unit(SAMPLE_INVOICE, make_usage("201", 100), 25231, 10)
        expected = (SAMPLE_INVOICE.component_total - SAMPLE_INVOICE.round_down) * 100 / 25231

        assert alloc.total_before_round == pytest.approx(expected)
        assert alloc.total_amount == round_to_unit(alloc.total_before_round, 10)
        assert alloc.total_amount % 10 == 0

    def test_explanation_and_period(self):
        alloc = allocate_unit(SAMPLE_INVOICE, make_usage("201", 100), 25231, 10, "2025-6-10 ~ 2025-7-9")
        assert alloc.billing_period == "2025-6-10 ~ 2025-7-9"
        assert len(alloc.explanation_steps) == 4
        assert "Usage ratio" in alloc.explanation_steps[0]


class TestComputeUnitAllocations:
    def test_ratio_uses_building_usage_not_unit_sum(self):
        """Two units against the full building usage (common load included)."""
        usages = [make_usage("201", 100), make_usage("202", 150)]
        allocs = compute_unit_allocations(SAMPLE_INVOICE, usages, SAMPLE_BUILDING_TOTAL_USAGE)

        assert allocs[0].usage_ratio == pytest.approx(0.003963, abs=1e-6)
        assert allocs[1].usage_ratio == pytest.approx(0.005945, abs=1e-6)
        assert allocs[0].usage_ratio != pytest.approx(100 / 250)
        for alloc in allocs:
            ratio = alloc.usage / 25231
            assert alloc.basic_fee == round_to_unit(SAMPLE_INVOICE.basic_fee * ratio, 1)
            assert alloc.climate_fee == round_to_unit(SAMPLE_INVOICE.climate_fee * ratio, 1)
            assert alloc.fuel_fee == round_to_unit(SAMPLE_INVOICE.fuel_fee * ratio, 1)
            assert alloc.vat == round_to_unit(SAMPLE_INVOICE.vat * ratio, 1)
            assert alloc.power_fund == round_to_unit(SAMPLE_INVOICE.power_fund * ratio, 1)

    def test_zero_building_usage_is_fatal(self):
        with pytest.raises(FatalInputError):
            compute_unit_allocations(SAMPLE_INVOICE, [make_usage()], 0)

    def test_negative_usage_is_fatal(self):
        with pytest.raises(FatalInputError, match="202"):
            compute_unit_allocations(
                SAMPLE_INVOICE, [make_usage("201", 10), make_usage("202", -5)], 25231
            )

    def test_vacant_units_excluded(self):
        usages = [make_usage("201", 100), make_usage("202", 0)]
        allocs = compute_unit_allocations(SAMPLE_INVOICE, usages, 25231)
        assert [a.unit_id for a in allocs] == ["201"]

    def test_vacant_units_kept_with_zero_bill(self):
        usages = [make_usage("201", 100), make_usage("202", 0)]
        options = AllocationOptions(exclude_vacant=False)
        allocs = compute_unit_allocations(SAMPLE_INVOICE, usages, 25231, options)

        assert len(allocs) == 2
        assert allocs[1].total_amount == 0
        assert allocs[1].usage_ratio == 0

    def test_more_usage_never_lowers_share(self):
        base = [make_usage("201", 100), make_usage("202", 150)]
        more = [make_usage("201", 120), make_usage("202", 150)]
        before = compute_unit_allocations(SAMPLE_INVOICE, base, 25231)[0]
        after = compute_unit_allocations(SAMPLE_INVOICE, more, 25231)[0]

        assert after.usage_ratio > before.usage_ratio
        for attr in ["basic_fee", "power_fee", "climate_fee", "fuel_fee", "vat", "power_fund"]:
            assert getattr(after, attr) >= getattr(before, attr)
        assert after.total_amount >= before.total_amount

    def test_inputs_not_mutated(self):
        usages = [make_usage("201", 100), make_usage("202", 0)]
        snapshot = list(usages)
        compute_unit_allocations(SAMPLE_INVOICE, usages, 25231)
        assert usages == snapshot

    def test_billing_period_label(self):
        period = BillingPeriod(display_text="2025-6-10 ~ 2025-7-9")
        allocs = compute_unit_allocations(SAMPLE_INVOICE, [make_usage()], 25231, billing_period=period)
        assert allocs[0].billing_period == "2025-6-10 ~ 2025-7-9"


class TestInvoiceTotals:
    def test_component_total_matches_sample(self):
        assert SAMPLE_INVOICE.component_total == SAMPLE_INVOICE.total_amount

    def test_invoice_is_immutable(self):
        invoice = InvoiceTotals(1, 2, 3, 4, 5, 6, 7, 0, 28)
        with pytest.raises(FrozenInstanceError):
            invoice.basic_fee = 10


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
