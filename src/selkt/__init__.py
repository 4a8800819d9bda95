"""selkt: fine-grained reactive stores with dynamic dependency tracking."""

from importlib.metadata import version as _version

__version__ = _version("selkt")

from selkt._tracking import collect, flush, get_pending_count, set_flush_limit
from selkt.action import flushed, transaction
from selkt.computed import Computation, compute
from selkt.equality import deep_equal, shallow_equal, shallow_equal_array, strict_equal
from selkt.exceptions import FlushLimitError, SelktError, UnknownTierError
from selkt.select import Selection, select
from selkt.setter import Mutator, Value, modify
from selkt.store import ImmutableStore, Store, Subscription, set_scheduler
# textual NOT auto-imported — opt-in only

__all__ = [
    "Store",
    "ImmutableStore",
    "Subscription",
    "Value",
    "Mutator",
    "modify",
    "select",
    "Selection",
    "collect",
    "compute",
    "Computation",
    "flush",
    "flushed",
    "transaction",
    "get_pending_count",
    "set_flush_limit",
    "set_scheduler",
    "strict_equal",
    "shallow_equal_array",
    "shallow_equal",
    "deep_equal",
    "SelktError",
    "UnknownTierError",
    "FlushLimitError",
]
