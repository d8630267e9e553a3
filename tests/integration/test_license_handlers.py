"""
Integration tests for issuance, verification and deactivation handlers.
"""

import uuid
from datetime import datetime, timedelta, timezone

import pytest
from asgiref.sync import async_to_sync

from activations.application.commands.deactivate_machine import DeactivateMachineCommand
from activations.application.handlers.deactivate_machine_handler import DeactivateMachineHandler
from core.domain.exceptions import (
    InvalidPurchaseEventError,
    InvalidSignatureError,
    LicenseExpiredError,
    LicenseInactiveError,
    LicenseNotFoundError,
    QuotaExceededError,
)
from core.domain.value_objects import Platform
from licenses.application.commands.set_license_active import SetLicenseActiveCommand
from licenses.application.commands.verify_license import VerifyLicenseCommand
from licenses.application.handlers.license_status_handlers import (
    ListLicensesHandler,
    SetLicenseActiveHandler,
)
from licenses.application.handlers.verify_license_handler import VerifyLicenseHandler
from licenses.application.queries.list_licenses import ListLicensesQuery
from licenses.models import License
from purchases.application.commands.create_manual_license import CreateManualLicenseCommand
from purchases.application.handlers.create_manual_license_handler import (
    CreateManualLicenseHandler,
)
from purchases.domain.purchase import PurchaseEvent


@pytest.fixture
def verify_handler(license_repository, settings_signer):
    """Fixture for VerifyLicenseHandler."""
    return VerifyLicenseHandler(license_repository=license_repository, signer=settings_signer)


@pytest.fixture
def deactivate_handler(license_repository, settings_signer):
    """Fixture for DeactivateMachineHandler."""
    return DeactivateMachineHandler(
        license_repository=license_repository, signer=settings_signer
    )


def _verify(handler, key, machine_id=None):
    command = VerifyLicenseCommand(license_key=key, machine_id=machine_id)
    return async_to_sync(handler.handle)(command)


def _set_active(license_repository, license_id, is_active):
    handler = SetLicenseActiveHandler(license_repository=license_repository)
    return async_to_sync(handler.handle)(
        SetLicenseActiveCommand(license_id=license_id, is_active=is_active)
    )


@pytest.mark.django_db
@pytest.mark.integration
class TestIssueLicenseFromPurchaseHandler:
    """Integration tests for purchase issuance."""

    def test_issue_creates_signed_license(self, issue_handler, purchase_event, settings_signer):
        """Test a purchase issues one license whose key verifies."""
        result = async_to_sync(issue_handler.handle)(purchase_event)

        assert result.created is True
        assert result.license.platform == "gumroad"
        assert result.license.sale_id == "abc123"
        assert result.license.max_activations == 3
        payload = settings_signer.verify(result.license.license_key)
        assert payload["email"] == "buyer@example.com"
        assert payload["productId"] == "prod-1"
        assert payload["metadata"] == {"product_name": "Resume Generator"}

    def test_replayed_purchase_returns_same_license(self, issue_handler, purchase_event):
        """Test delivering the same sale twice yields one license."""
        first = async_to_sync(issue_handler.handle)(purchase_event)
        second = async_to_sync(issue_handler.handle)(purchase_event)

        assert second.created is False
        assert second.license.id == first.license.id
        assert second.license.license_key == first.license.license_key
        assert License.objects.filter(platform="gumroad", sale_id="abc123").count() == 1

    def test_same_sale_on_other_platform_is_new(self, issue_handler, purchase_event):
        """Test sale IDs are only unique per platform."""
        async_to_sync(issue_handler.handle)(purchase_event)
        other = PurchaseEvent(
            platform=Platform.STRIPE,
            sale_id="abc123",
            email="buyer@example.com",
            product_id="prod-1",
        )

        result = async_to_sync(issue_handler.handle)(other)

        assert result.created is True
        assert License.objects.count() == 2


@pytest.mark.django_db
@pytest.mark.integration
class TestCreateManualLicenseHandler:
    """Integration tests for manual license creation."""

    def test_create_manual_license(self, issue_handler):
        """Test an admin-created license gets a manual sale ID."""
        handler = CreateManualLicenseHandler(issue_handler=issue_handler)
        expires_at = datetime.now(timezone.utc) + timedelta(days=30)

        result = async_to_sync(handler.handle)(
            CreateManualLicenseCommand(
                email="vip@example.com",
                name="VIP",
                expires_at=expires_at,
                notes="Conference giveaway",
                max_activations=5,
                metadata={"tier": "gold"},
            )
        )

        assert result.created is True
        assert result.license.platform == "manual"
        assert result.license.sale_id.startswith("manual-")
        assert result.license.product_id == "manual"
        assert result.license.notes == "Conference giveaway"
        assert result.license.max_activations == 5
        assert result.license.metadata == {"tier": "gold"}

    def test_two_manual_licenses_are_distinct(self, issue_handler):
        """Test each manual creation issues a new license."""
        handler = CreateManualLicenseHandler(issue_handler=issue_handler)
        command = CreateManualLicenseCommand(email="vip@example.com")

        first = async_to_sync(handler.handle)(command)
        second = async_to_sync(handler.handle)(command)

        assert first.license.id != second.license.id

    def test_invalid_email_rejected(self, issue_handler):
        """Test manual creation validates the email."""
        handler = CreateManualLicenseHandler(issue_handler=issue_handler)

        with pytest.raises(InvalidPurchaseEventError):
            async_to_sync(handler.handle)(CreateManualLicenseCommand(email="not-an-email"))


@pytest.mark.django_db
@pytest.mark.integration
class TestVerifyLicenseHandler:
    """Integration tests for license verification."""

    def test_verify_without_machine(self, verify_handler, db_license):
        """Test a valid key verifies without binding anything."""
        result = _verify(verify_handler, db_license.license_key)

        assert result.valid is True
        assert result.email == "buyer@example.com"
        assert result.name == "Test Buyer"
        assert result.active_devices == 0
        assert result.newly_bound is False

    def test_verify_binds_machine_once(self, verify_handler, db_license):
        """Test re-verifying a bound machine does not use another slot."""
        first = _verify(verify_handler, db_license.license_key, "machine-1")
        second = _verify(verify_handler, db_license.license_key, "machine-1")

        assert first.newly_bound is True
        assert first.active_devices == 1
        assert second.newly_bound is False
        assert second.active_devices == 1

    def test_quota_exceeded(self, verify_handler, db_license):
        """Test a machine beyond the limit is refused and not recorded."""
        for machine_id in ("machine-1", "machine-2", "machine-3"):
            _verify(verify_handler, db_license.license_key, machine_id)

        with pytest.raises(QuotaExceededError) as exc_info:
            _verify(verify_handler, db_license.license_key, "machine-4")

        assert exc_info.value.reason == "QuotaExceeded"
        assert exc_info.value.message == "Maximum activations reached"
        stored = License.objects.get(id=db_license.id)
        assert stored.machine_ids == ["machine-1", "machine-2", "machine-3"]

    def test_deactivate_frees_slot(self, verify_handler, deactivate_handler, db_license):
        """Test deactivating a machine lets a new one bind."""
        for machine_id in ("machine-1", "machine-2", "machine-3"):
            _verify(verify_handler, db_license.license_key, machine_id)

        result = async_to_sync(deactivate_handler.handle)(
            DeactivateMachineCommand(license_key=db_license.license_key, machine_id="machine-2")
        )
        rebound = _verify(verify_handler, db_license.license_key, "machine-4")

        assert result.was_bound is True
        assert result.active_devices == 2
        assert result.message == "Machine deactivated successfully"
        assert rebound.newly_bound is True
        assert rebound.active_devices == 3

    def test_deactivate_unbound_machine_is_noop(self, deactivate_handler, db_license):
        """Test deactivating an unknown machine succeeds without change."""
        result = async_to_sync(deactivate_handler.handle)(
            DeactivateMachineCommand(license_key=db_license.license_key, machine_id="ghost")
        )

        assert result.was_bound is False
        assert result.message == "Machine was not activated"

    def test_deactivate_forged_key(self, deactivate_handler, signer):
        """Test a key signed with another secret cannot deactivate."""
        forged = signer.issue({"email": "buyer@example.com"}).token

        with pytest.raises(InvalidSignatureError):
            async_to_sync(deactivate_handler.handle)(
                DeactivateMachineCommand(license_key=forged, machine_id="machine-1")
            )

    def test_validly_signed_unknown_key(self, verify_handler, settings_signer):
        """Test a well-signed key without a record is NotFound."""
        token = settings_signer.issue({"email": "ghost@example.com"}).token

        with pytest.raises(LicenseNotFoundError):
            _verify(verify_handler, token)

    def test_inactive_license(self, verify_handler, license_repository, db_license):
        """Test a disabled license fails and binds nothing."""
        _set_active(license_repository, db_license.id, False)

        with pytest.raises(LicenseInactiveError):
            _verify(verify_handler, db_license.license_key, "machine-1")

        assert License.objects.get(id=db_license.id).machine_ids == []

    def test_reactivated_license_verifies(self, verify_handler, license_repository, db_license):
        """Test re-enabling a license makes it usable again."""
        _set_active(license_repository, db_license.id, False)
        _set_active(license_repository, db_license.id, True)

        assert _verify(verify_handler, db_license.license_key).valid is True

    def test_expired_license(self, verify_handler, issue_handler):
        """Test a license past its expiry fails."""
        event = PurchaseEvent(
            platform=Platform.MANUAL,
            sale_id=f"manual-{uuid.uuid4()}",
            email="late@example.com",
            product_id="manual",
            expires_at=datetime.now(timezone.utc) - timedelta(days=1),
        )
        issued = async_to_sync(issue_handler.handle)(event)

        with pytest.raises(LicenseExpiredError):
            _verify(verify_handler, issued.license.license_key)


@pytest.mark.django_db
@pytest.mark.integration
class TestListLicensesHandler:
    """Integration tests for listing licenses."""

    def test_list_filters_by_email(self, license_repository, issue_handler, db_license):
        """Test the email filter is case-insensitive."""
        other = PurchaseEvent(
            platform=Platform.GUMROAD, sale_id="zzz", email="other@example.com", product_id="p"
        )
        async_to_sync(issue_handler.handle)(other)
        handler = ListLicensesHandler(license_repository=license_repository)

        everything = async_to_sync(handler.handle)(ListLicensesQuery())
        filtered = async_to_sync(handler.handle)(ListLicensesQuery(email="BUYER@example.com"))

        assert len(everything) == 2
        assert [dto.id for dto in filtered] == [db_license.id]
