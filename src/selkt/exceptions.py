"""selkt exceptions."""

from __future__ import annotations


class SelktError(Exception):
    """Base exception for selkt errors."""

    pass


class UnknownTierError(SelktError, LookupError):
    """Raised when a listener tier name is not one of the store's tiers."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Tier {name!r} does not exist")
        self.name = name


class FlushLimitError(SelktError, RuntimeError):
    """Raised when cascading updates keep re-queueing notifiers past the flush limit."""

    pass
