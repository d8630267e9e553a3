"""
Value objects for the domain.

Value objects are immutable objects that are defined by their attributes
rather than their identity. They have no identity and are compared by value.
"""
from abc import ABC
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional


@dataclass(frozen=True)
class ValueObject(ABC):
    """
    Base class for value objects.

    Value objects are immutable and compared by value.
    """

    def __eq__(self, other):
        """Compare value objects by their attributes."""
        if not isinstance(other, self.__class__):
            return False
        return self.__dict__ == other.__dict__

    def __hash__(self):
        """Make value objects hashable."""
        return hash(tuple(sorted(self.__dict__.items())))


@dataclass(frozen=True)
class Email(ValueObject):
    """Email value object with validation."""

    value: str

    def __post_init__(self):
        """Validate email format."""
        if not self.value or "@" not in self.value:
            raise ValueError(f"Invalid email address: {self.value}")

    def __str__(self) -> str:
        """Return email as string."""
        return self.value


@dataclass(frozen=True)
class MachineId(ValueObject):
    """Identifier of a client device a license is bound to."""

    value: str

    def __post_init__(self):
        """Validate machine identifier."""
        if not self.value or len(self.value.strip()) == 0:
            raise ValueError("Machine identifier cannot be empty")
        if len(self.value) > 255:
            raise ValueError("Machine identifier too long")

    def __str__(self) -> str:
        """Return identifier as string."""
        return self.value


class Platform(Enum):
    """Sales channel a license was issued from."""

    MANUAL = "manual"
    GUMROAD = "gumroad"
    APPSUMO = "appsumo"
    STRIPE = "stripe"
    OTHER = "other"

    def __str__(self) -> str:
        """Return platform as string."""
        return self.value


def normalize_metadata(metadata: Optional[Mapping[str, Any]]) -> Dict[str, str]:
    """
    Coerce a loosely typed metadata map into ``Dict[str, str]``.

    Metadata is opaque pass-through: keys and values are stringified,
    ``None`` values are dropped, nothing is interpreted.
    """
    if not metadata:
        return {}
    return {str(key): str(value) for key, value in metadata.items() if value is not None}
