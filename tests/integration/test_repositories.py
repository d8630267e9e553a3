"""
Integration tests for repository implementations.
"""

import asyncio
import uuid

import pytest
from asgiref.sync import async_to_sync

from activations.domain.activation import ClientInfo
from activations.domain.services import ActivationLedger
from activations.infrastructure.models import ActivationEntry as ActivationEntryModel
from core.domain.exceptions import DuplicateLicenseError, LicenseNotFoundError, QuotaExceededError
from core.domain.value_objects import Platform
from licenses.domain.license import LicenseRecord


def _record_like(record, signer, **overrides):
    """A fresh record for the same buyer with a new key."""
    issued = signer.issue({"email": str(record.email)})
    fields = {
        "license_key": issued.token,
        "email": str(record.email),
        "platform": record.platform,
        "sale_id": f"sale-{uuid.uuid4().hex[:8]}",
        "token_payload": issued.payload,
        "max_activations": record.max_activations,
    }
    fields.update(overrides)
    return LicenseRecord.create(**fields)


@pytest.mark.django_db
@pytest.mark.integration
class TestDjangoLicenseRepository:
    """Integration tests for DjangoLicenseRepository."""

    def test_create_and_find(self, license_repository, sample_record):
        """Test saving and finding a license by id, key and sale."""
        saved = async_to_sync(license_repository.create)(sample_record)

        assert saved.id == sample_record.id
        by_id = async_to_sync(license_repository.find_by_id)(saved.id)
        by_key = async_to_sync(license_repository.find_by_key)(saved.license_key)
        by_sale = async_to_sync(license_repository.find_by_sale)(
            Platform.GUMROAD, sample_record.sale_id
        )
        assert by_id.id == by_key.id == by_sale.id == saved.id
        assert str(by_key.email) == "buyer@example.com"
        assert by_key.token_payload == sample_record.token_payload
        assert by_key.expires_at == sample_record.expires_at

    def test_find_not_found(self, license_repository):
        """Test lookups of unknown licenses return None."""
        assert async_to_sync(license_repository.find_by_id)(uuid.uuid4()) is None
        assert async_to_sync(license_repository.find_by_key)("unknown-key") is None
        assert async_to_sync(license_repository.find_by_sale)(Platform.STRIPE, "nope") is None

    def test_find_by_sale_is_per_platform(self, license_repository, sample_record):
        """Test the same sale ID on another platform is a different sale."""
        async_to_sync(license_repository.create)(sample_record)

        found = async_to_sync(license_repository.find_by_sale)(
            Platform.APPSUMO, sample_record.sale_id
        )

        assert found is None

    def test_duplicate_sale_rejected(self, license_repository, sample_record, signer):
        """Test a second license for the same sale is rejected."""
        async_to_sync(license_repository.create)(sample_record)
        duplicate = _record_like(sample_record, signer, sale_id=sample_record.sale_id)

        with pytest.raises(DuplicateLicenseError):
            async_to_sync(license_repository.create)(duplicate)

    def test_duplicate_key_rejected(self, license_repository, sample_record, signer):
        """Test a second license with the same key is rejected."""
        async_to_sync(license_repository.create)(sample_record)
        duplicate = _record_like(
            sample_record,
            signer,
            license_key=sample_record.license_key,
            token_payload=sample_record.token_payload,
        )

        with pytest.raises(DuplicateLicenseError):
            async_to_sync(license_repository.create)(duplicate)

    def test_list_all_newest_first(self, license_repository, sample_record, signer):
        """Test listing returns every license, newest first."""
        async_to_sync(license_repository.create)(sample_record)
        newer = async_to_sync(license_repository.create)(_record_like(sample_record, signer))

        records = async_to_sync(license_repository.list_all)()

        assert [r.id for r in records] == [newer.id, sample_record.id]

    def test_list_all_filters_by_email(self, license_repository, sample_record, signer):
        """Test the email filter is applied in the query, ignoring case."""
        async_to_sync(license_repository.create)(sample_record)
        other = async_to_sync(license_repository.create)(
            _record_like(sample_record, signer, email="other@example.com")
        )

        records = async_to_sync(license_repository.list_all)(email="OTHER@example.com")

        assert [r.id for r in records] == [other.id]
        assert async_to_sync(license_repository.list_all)(email="nobody@example.com") == []

    def test_set_active(self, license_repository, sample_record):
        """Test toggling the active flag persists."""
        saved = async_to_sync(license_repository.create)(sample_record)

        updated = async_to_sync(license_repository.set_active)(saved.id, False)

        assert updated.is_active is False
        assert async_to_sync(license_repository.find_by_id)(saved.id).is_active is False

    def test_set_active_not_found(self, license_repository):
        """Test toggling an unknown license raises."""
        with pytest.raises(LicenseNotFoundError):
            async_to_sync(license_repository.set_active)(uuid.uuid4(), True)

    def test_mutate_persists_binding_and_history(self, license_repository, sample_record):
        """Test an activation is stored in the live set and in history."""
        saved = async_to_sync(license_repository.create)(sample_record)

        before, after = async_to_sync(license_repository.mutate)(
            saved.license_key,
            lambda r: ActivationLedger.activate(r, "machine-1", ClientInfo(ip="10.0.0.1")),
        )

        assert before.bound_machine_ids == ()
        assert after.bound_machine_ids == ("machine-1",)
        reloaded = async_to_sync(license_repository.find_by_key)(saved.license_key)
        assert reloaded.bound_machine_ids == ("machine-1",)
        assert [e.machine_id for e in reloaded.activations] == ["machine-1"]
        assert reloaded.activations[0].ip == "10.0.0.1"

    def test_mutate_unbind_keeps_history(self, license_repository, sample_record):
        """Test unbinding frees the slot but keeps the history entry."""
        saved = async_to_sync(license_repository.create)(sample_record)
        async_to_sync(license_repository.mutate)(
            saved.license_key, lambda r: ActivationLedger.activate(r, "machine-1")
        )

        async_to_sync(license_repository.mutate)(
            saved.license_key, lambda r: ActivationLedger.deactivate(r, "machine-1")
        )

        reloaded = async_to_sync(license_repository.find_by_key)(saved.license_key)
        assert reloaded.bound_machine_ids == ()
        assert len(reloaded.activations) == 1
        assert ActivationEntryModel.objects.filter(license_id=saved.id).count() == 1

    def test_mutate_no_change_returns_same_record(self, license_repository, sample_record):
        """Test a no-op mutation writes nothing."""
        saved = async_to_sync(license_repository.create)(sample_record)

        before, after = async_to_sync(license_repository.mutate)(
            saved.license_key, lambda r: ActivationLedger.deactivate(r, "machine-1")
        )

        assert after is before

    def test_mutate_failure_writes_nothing(self, license_repository, sample_record, signer):
        """Test a raising mutation leaves the record untouched."""
        saved = async_to_sync(license_repository.create)(
            _record_like(sample_record, signer, max_activations=1)
        )
        async_to_sync(license_repository.mutate)(
            saved.license_key, lambda r: ActivationLedger.activate(r, "machine-1")
        )

        with pytest.raises(QuotaExceededError):
            async_to_sync(license_repository.mutate)(
                saved.license_key, lambda r: ActivationLedger.activate(r, "machine-2")
            )

        reloaded = async_to_sync(license_repository.find_by_key)(saved.license_key)
        assert reloaded.bound_machine_ids == ("machine-1",)
        assert len(reloaded.activations) == 1

    def test_mutate_sees_current_row_not_caller_snapshot(
        self, license_repository, sample_record, signer
    ):
        """Test each mutation runs on the stored state, not an earlier read."""
        saved = async_to_sync(license_repository.create)(
            _record_like(sample_record, signer, max_activations=1)
        )
        stale = async_to_sync(license_repository.find_by_key)(saved.license_key)
        async_to_sync(license_repository.mutate)(
            saved.license_key, lambda r: ActivationLedger.activate(r, "machine-1")
        )
        seen = []

        def bind_second(record):
            seen.append(record)
            return ActivationLedger.activate(record, "machine-2")

        with pytest.raises(QuotaExceededError):
            async_to_sync(license_repository.mutate)(saved.license_key, bind_second)

        assert stale.bound_machine_ids == ()
        assert seen[0].bound_machine_ids == ("machine-1",)

    def test_overlapping_activations_respect_quota(
        self, license_repository, sample_record, signer
    ):
        """Test concurrent activations on a two-seat license bind exactly two."""
        saved = async_to_sync(license_repository.create)(
            _record_like(sample_record, signer, max_activations=2)
        )
        machines = ["machine-1", "machine-2", "machine-3", "machine-4"]

        async def activate_all():
            return await asyncio.gather(
                *(
                    license_repository.mutate(
                        saved.license_key, lambda r, m=m: ActivationLedger.activate(r, m)
                    )
                    for m in machines
                ),
                return_exceptions=True,
            )

        results = async_to_sync(activate_all)()

        refused = [r for r in results if isinstance(r, QuotaExceededError)]
        bound = [r for r in results if not isinstance(r, Exception)]
        assert len(bound) == 2
        assert len(refused) == 2
        reloaded = async_to_sync(license_repository.find_by_key)(saved.license_key)
        assert reloaded.active_device_count == 2
        assert len(reloaded.activations) == 2
        assert set(reloaded.bound_machine_ids) == {after.bound_machine_ids[-1] for _, after in bound}

    def test_mutate_not_found(self, license_repository):
        """Test mutating an unknown key raises."""
        with pytest.raises(LicenseNotFoundError):
            async_to_sync(license_repository.mutate)("unknown-key", lambda r: r)
