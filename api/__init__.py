"""
API module - REST surface over the license core.

This module contains:
- License verification and machine deactivation endpoints
- Admin license management endpoints
- Sales channel webhook endpoints
"""
