"""
Activations module - Machine bindings and activation history.

This module handles:
- Activation history entries
- Activation quota enforcement
- Machine activation/deactivation
"""
