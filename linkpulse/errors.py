"""Typed failures raised by the LinkPulse core (no logic)."""


class LinkPulseError(Exception):
    """Base class for every failure the core reports to its caller."""


class AliasConflict(LinkPulseError):
    """The requested code is already registered."""


class AllocationExhausted(LinkPulseError):
    """No free generated code was found within the bounded attempts."""


class NotFound(LinkPulseError):
    """No link is registered under the given code."""


class NoRecordsFound(LinkPulseError):
    """A topic or owner query matched no links."""


class StoreUnavailable(LinkPulseError):
    """The backing store failed (connection refused, timeout, ...)."""
