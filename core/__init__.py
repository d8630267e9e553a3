"""
Core module for shared domain infrastructure.

This module contains:
- Domain events, exceptions and value objects
- Infrastructure abstractions (event bus)
- Middleware components
- Observability (tracing, metrics, health checks)
"""
