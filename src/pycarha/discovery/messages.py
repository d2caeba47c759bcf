"""Outbound message value type."""

from __future__ import annotations

import dataclasses
from typing import Any


@dataclasses.dataclass(frozen=True)
class DiscoveryMessage:
    """One message for the bus client.

    ``payload`` is a JSON-serializable dict, or a bare scalar for the few
    topics that carry a single value (``"true"``, an image URL, a metric).
    Config messages are retained; state messages usually are not.
    """

    topic: str
    payload: Any
    retain: bool = False
