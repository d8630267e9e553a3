"""
ListLicensesQuery.

Query to list licenses for the admin API.
"""
from dataclasses import dataclass
from typing import Optional


@dataclass
class ListLicensesQuery:
    """Query to list licenses, optionally for one buyer email."""

    email: Optional[str] = None
