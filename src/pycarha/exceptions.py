"""Custom exception hierarchy for pycarha."""

from __future__ import annotations


class CarError(Exception):
    """Base exception for all pycarha errors."""


class CarConfigError(CarError):
    """Invalid or missing configuration."""


class CarCacheError(CarError):
    """A cache file could not be written or removed.

    Only raised from explicit persistence calls.  The regular cache
    read/merge paths degrade to an empty cache instead.
    """

    def __init__(self, message: str, *, path: str = "") -> None:
        self.path = path
        super().__init__(message)


class CarTransportError(CarError):
    """Upstream vehicle-cloud request failed (network, non-200, invalid JSON).

    Raised by the transport collaborator; the bridge only inspects it to
    build polling-status payloads.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class CarPublishError(CarError):
    """The MQTT client rejected a publish request."""

    def __init__(self, message: str, *, topic: str = "", rc: int | None = None) -> None:
        self.topic = topic
        self.rc = rc
        super().__init__(message)
