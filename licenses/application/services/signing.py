"""
License signer factory.

Builds the signer from Django settings so the domain layer receives
its configuration explicitly.
"""
from django.conf import settings

from licenses.domain.license_token import LicenseSigner, SigningConfig


def get_signing_config() -> SigningConfig:
    """
    Read the signing configuration from settings.

    Returns:
        SigningConfig with LICENSE_SIGNING_SECRET
    """
    return SigningConfig(secret=settings.LICENSE_SIGNING_SECRET)


def get_license_signer() -> LicenseSigner:
    """
    Build a LicenseSigner for the configured secret.

    Returns:
        LicenseSigner instance
    """
    return LicenseSigner(get_signing_config())
