"""
Domain exceptions.

Domain exceptions represent business rule violations
and domain-specific error conditions.
"""


class DomainException(Exception):
    """Base exception for all domain exceptions."""

    def __init__(self, message: str, code: str = None):
        """
        Initialize domain exception.

        Args:
            message: Human-readable error message
            code: Machine-readable error code
        """
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class LicenseException(DomainException):
    """Base exception for license-related errors."""

    pass


class LicenseVerificationError(LicenseException):
    """
    Base exception for verification failures.

    The ``reason`` attribute is the structured reason string reported
    to clients in ``{"valid": false, "reason": ...}`` responses.
    """

    reason = "Invalid"

    def __init__(self, message: str, code: str = None):
        super().__init__(message, code=code)


class InvalidTokenFormatError(LicenseVerificationError):
    """Raised when a license token cannot be decoded."""

    reason = "InvalidFormat"

    def __init__(self, message: str = "Invalid license format"):
        super().__init__(message, code="INVALID_FORMAT")


class InvalidSignatureError(LicenseVerificationError):
    """Raised when a license token signature does not match its payload."""

    reason = "InvalidSignature"

    def __init__(self, message: str = "Invalid signature"):
        super().__init__(message, code="INVALID_SIGNATURE")


class LicenseExpiredError(LicenseVerificationError):
    """Raised when a license has expired."""

    reason = "Expired"

    def __init__(self, message: str = "License has expired"):
        super().__init__(message, code="LICENSE_EXPIRED")


class LicenseInactiveError(LicenseVerificationError):
    """Raised when a license has been disabled by an administrator."""

    reason = "Inactive"

    def __init__(self, message: str = "License is inactive"):
        super().__init__(message, code="LICENSE_INACTIVE")


class LicenseNotFoundError(LicenseVerificationError):
    """Raised when a license is not found."""

    reason = "NotFound"

    def __init__(self, message: str = "License not found"):
        super().__init__(message, code="LICENSE_NOT_FOUND")


class QuotaExceededError(LicenseVerificationError):
    """Raised when the activation limit of a license is reached."""

    reason = "QuotaExceeded"

    def __init__(self, message: str = "Maximum activations reached"):
        super().__init__(message, code="QUOTA_EXCEEDED")


class DuplicateLicenseError(LicenseException):
    """
    Raised by the store when a license key or a (platform, sale_id)
    pair already exists.
    """

    def __init__(self, message: str = "License already exists for this sale"):
        super().__init__(message, code="DUPLICATE_SALE")


class AuthenticationException(DomainException):
    """Base exception for authenticity failures."""

    pass


class WebhookAuthenticationError(AuthenticationException):
    """Raised when a webhook delivery fails its channel authenticity check."""

    def __init__(self, message: str = "Webhook authentication failed"):
        super().__init__(message, code="UNAUTHENTICATED")


class AdminAuthenticationError(AuthenticationException):
    """Raised when an admin request carries a missing or wrong secret."""

    def __init__(self, message: str = "Invalid admin secret"):
        super().__init__(message, code="UNAUTHENTICATED")


class InvalidPurchaseEventError(DomainException):
    """Raised when an authenticated purchase payload lacks required fields."""

    def __init__(self, message: str = "Invalid purchase event"):
        super().__init__(message, code="INVALID_PURCHASE_EVENT")
