"""
Licenses module - License records and signed license keys.

This module handles:
- LicenseRecord entity and domain logic
- Signing and verifying license tokens
- License verification decisions
- Admin enable/disable of licenses
"""
