"""
ProcessWebhookCommand.

Command carrying one sales channel webhook delivery.
"""
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from core.domain.value_objects import Platform


@dataclass
class ProcessWebhookCommand:
    """
    Command to process a webhook delivery.

    ``payload`` is None when the body could not be parsed.
    """

    platform: Platform
    body: bytes
    headers: Mapping[str, str]
    payload: Optional[Mapping[str, Any]]
