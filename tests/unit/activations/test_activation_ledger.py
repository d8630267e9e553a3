"""
Unit tests for ActivationLedger domain service.
"""

from dataclasses import replace
from datetime import datetime, timezone

import pytest

from activations.domain.activation import ClientInfo
from activations.domain.services import ActivationLedger
from core.domain.exceptions import QuotaExceededError


class TestActivationLedger:
    """Tests for ActivationLedger service."""

    def test_activate_binds_machine(self, sample_record):
        """Test activation binds and records client metadata."""
        now = datetime(2024, 1, 1, tzinfo=timezone.utc)
        client = ClientInfo(ip="10.0.0.1", os="linux", app="1.2.0")

        record = ActivationLedger.activate(sample_record, "machine-1", client, now)

        assert record.bound_machine_ids == ("machine-1",)
        entry = record.activations[0]
        assert entry.machine_id == "machine-1"
        assert entry.timestamp == now
        assert (entry.ip, entry.os, entry.app) == ("10.0.0.1", "linux", "1.2.0")

    def test_quota_enforced(self, sample_record):
        """Test three machines bind and the fourth is rejected."""
        record = sample_record
        for machine in ("m1", "m2", "m3"):
            record = ActivationLedger.activate(record, machine)

        assert record.active_device_count == 3
        assert ActivationLedger.can_activate(record, "m4") is False
        with pytest.raises(QuotaExceededError) as exc_info:
            ActivationLedger.activate(record, "m4")
        assert exc_info.value.reason == "QuotaExceeded"
        assert exc_info.value.message == "Maximum activations reached"

    def test_reactivate_is_noop(self, sample_record):
        """Test re-activating a bound machine changes nothing."""
        record = ActivationLedger.activate(sample_record, "m1")

        again = ActivationLedger.activate(record, "m1")

        assert again is record
        assert again.active_device_count == 1
        assert len(again.activations) == 1

    def test_reactivate_allowed_when_full(self, sample_record):
        """Test a bound machine still verifies on a full license."""
        record = sample_record
        for machine in ("m1", "m2", "m3"):
            record = ActivationLedger.activate(record, machine)

        assert ActivationLedger.can_activate(record, "m2") is True
        assert ActivationLedger.activate(record, "m2") is record

    def test_lowered_limit_keeps_bound_machines(self, sample_record):
        """Test a limit lowered below the bound count blocks only new machines."""
        record = sample_record
        for machine in ("m1", "m2", "m3"):
            record = ActivationLedger.activate(record, machine)
        record = replace(record, max_activations=2)

        assert ActivationLedger.activate(record, "m3") is record
        with pytest.raises(QuotaExceededError):
            ActivationLedger.activate(record, "m4")

        record = ActivationLedger.deactivate(record, "m1")
        with pytest.raises(QuotaExceededError):
            ActivationLedger.activate(record, "m4")

        record = ActivationLedger.deactivate(record, "m2")
        assert ActivationLedger.activate(record, "m4").is_bound("m4")

    def test_deactivate_then_reactivate(self, sample_record):
        """Test a freed slot can be reused and history is retained."""
        record = sample_record
        for machine in ("m1", "m2", "m3"):
            record = ActivationLedger.activate(record, machine)

        record = ActivationLedger.deactivate(record, "m2")
        assert record.bound_machine_ids == ("m1", "m3")

        record = ActivationLedger.activate(record, "m4")
        assert record.active_device_count == 3
        assert [entry.machine_id for entry in record.activations] == ["m1", "m2", "m3", "m4"]

    def test_deactivate_unbound_is_noop(self, sample_record):
        """Test deactivating an unknown machine changes nothing."""
        assert ActivationLedger.deactivate(sample_record, "ghost") is sample_record

    def test_blank_machine_id_rejected(self, sample_record):
        """Test an empty machine identifier is rejected."""
        with pytest.raises(ValueError):
            ActivationLedger.activate(sample_record, "")
