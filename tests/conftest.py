"""
Pytest configuration and shared fixtures.
"""

import uuid
from datetime import datetime, timedelta, timezone

import pytest
from asgiref.sync import async_to_sync

from activations.domain.activation import ActivationEntry
from core.domain.value_objects import Platform
from licenses.application.services.signing import get_license_signer
from licenses.domain.license import LicenseRecord
from licenses.domain.license_token import LicenseSigner, SigningConfig
from licenses.infrastructure.repositories.django_license_repository import DjangoLicenseRepository
from purchases.application.handlers.issue_license_handler import IssueLicenseFromPurchaseHandler
from purchases.domain.channel_config import ChannelConfig
from purchases.domain.purchase import PurchaseEvent

ADMIN_SECRET = "test-admin-secret"


@pytest.fixture
def signer():
    """Fixture for a LicenseSigner with a fixed test secret."""
    return LicenseSigner(SigningConfig(secret="unit-test-secret"))


@pytest.fixture
def settings_signer():
    """Fixture for the LicenseSigner built from Django settings."""
    return get_license_signer()


@pytest.fixture
def license_repository():
    """Fixture for LicenseRepository."""
    return DjangoLicenseRepository()


@pytest.fixture
def channel_config():
    """Fixture for ChannelConfig with test credentials."""
    return ChannelConfig(
        gumroad_seller_id="test-seller",
        appsumo_secret="test-appsumo-secret",
        stripe_webhook_secret="whsec_test_secret",
    )


@pytest.fixture
def sample_record(signer):
    """Fixture for a sample LicenseRecord entity."""
    expires_at = datetime.now(timezone.utc) + timedelta(days=365)
    issued = signer.issue({"email": "buyer@example.com", "productId": "prod-1"})
    return LicenseRecord.create(
        license_key=issued.token,
        email="buyer@example.com",
        platform=Platform.GUMROAD,
        sale_id=f"sale-{uuid.uuid4().hex[:8]}",
        token_payload=issued.payload,
        max_activations=3,
        expires_at=expires_at,
        name="Test Buyer",
        product_id="prod-1",
    )


@pytest.fixture
def sample_entry():
    """Fixture for a sample ActivationEntry entity."""
    return ActivationEntry.create(machine_id="machine-1")


@pytest.fixture
def purchase_event():
    """Fixture for a Gumroad PurchaseEvent."""
    return PurchaseEvent(
        platform=Platform.GUMROAD,
        sale_id="abc123",
        email="buyer@example.com",
        product_id="prod-1",
        name="Test Buyer",
        expires_at=datetime.now(timezone.utc) + timedelta(days=365),
        metadata={"product_name": "Resume Generator"},
    )


@pytest.fixture
def issue_handler(license_repository, settings_signer):
    """Fixture for IssueLicenseFromPurchaseHandler using the settings secret."""
    return IssueLicenseFromPurchaseHandler(
        license_repository=license_repository, signer=settings_signer
    )


@pytest.fixture
def db_license(db, issue_handler, purchase_event):
    """Fixture for a LicenseDTO saved in database."""
    return async_to_sync(issue_handler.handle)(purchase_event).license


@pytest.fixture
def api_client():
    """Fixture for DRF API client."""
    from rest_framework.test import APIClient

    return APIClient()


@pytest.fixture
def admin_client(api_client):
    """Fixture for DRF API client carrying the admin secret."""
    api_client.credentials(HTTP_X_ADMIN_SECRET=ADMIN_SECRET)
    return api_client
