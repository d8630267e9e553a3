"""
Purchases module - License issuance from sales channels.

This module handles:
- Normalizing purchase webhooks (Gumroad, AppSumo, Stripe)
- Channel-specific authenticity checks
- Exactly-once license issuance per (platform, sale_id)
"""
