"""Error taxonomy shared by the adapters and the aggregation pipeline."""

from __future__ import annotations


class AdapterError(Exception):
    """Base class for failures that downgrade a network to "no data"."""

    kind = "AdapterError"

    def __init__(self, message: str, *, network_id: str | None = None):
        super().__init__(message)
        self.network_id = network_id


class NetworkUnavailable(AdapterError):
    """Transport failure, timeout or non-2xx upstream response."""

    kind = "NetworkUnavailable"


class NotFound(AdapterError):
    """The validator, pool or account is absent from the upstream response."""

    kind = "NotFound"


class MalformedResponse(AdapterError):
    """Schema mismatch or an unparsable field in an upstream payload."""

    kind = "MalformedResponse"


class MalformedAmount(MalformedResponse, ValueError):
    """A balance string that is not a non-negative integer."""

    kind = "MalformedAmount"


class Unauthorized(AdapterError):
    """Key-gated source rejected the request or no key is configured."""

    kind = "Unauthorized"


class RateLimited(AdapterError):
    """Upstream answered with HTTP 429 or an explicit rate-limit message."""

    kind = "RateLimited"


class RegistryError(Exception):
    """Raised when the static network registry cannot be loaded.

    This is the only failure allowed to escape an aggregation cycle.
    """
