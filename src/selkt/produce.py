"""Structural sharing for ImmutableStore.

produce() runs a mutator against a deep copy of the current state (the
"draft"), then walks the result alongside the original and swaps every part
that did not change back to the original object. Unchanged subtrees keep
their identity, and an update that changes nothing returns the original
state itself, so ``produce(state, setter) is state`` means "no change".

Shared containers are dicts, lists, plain tuples and objects with a
``__dict__``. Anything else is compared with ``==`` as a whole.
"""

from __future__ import annotations

import copy
from typing import Any, TypeVar

from selkt.setter import Value, as_setter, modify

T = TypeVar("T")


def produce(base: T, setter: Any) -> T:
    """Apply setter to a draft of base and return the structurally shared result.

    A Value setter is adopted as-is, without drafting or sharing.
    """
    setter = as_setter(setter)
    if isinstance(setter, Value):
        return setter.value
    draft = copy.deepcopy(base)
    return share(modify(draft, setter), base)


def share(new: Any, old: Any) -> Any:
    """Return new, with every part equal to the matching part of old replaced by old's."""
    if new is old:
        return old
    if type(new) is not type(old):
        return new

    if isinstance(new, dict):
        return old if _share_items(new, old) else new

    if isinstance(new, list):
        unchanged = len(new) == len(old)
        for i in range(min(len(new), len(old))):
            new[i] = share(new[i], old[i])
            unchanged = unchanged and new[i] is old[i]
        return old if unchanged else new

    if type(new) is tuple:
        items = [share(n, o) for n, o in zip(new, old)]
        if len(new) == len(old) and all(n is o for n, o in zip(items, old)):
            return old
        return tuple(items) + new[len(old):]

    if hasattr(new, "__dict__") and not isinstance(new, type):
        return old if _share_items(vars(new), vars(old)) else new

    return old if new == old else new


def _share_items(new: dict, old: dict) -> bool:
    """Share values of new in place. True when new ends up identical to old."""
    unchanged = len(new) == len(old)
    for key in new:
        if key in old:
            new[key] = share(new[key], old[key])
            unchanged = unchanged and new[key] is old[key]
        else:
            unchanged = False
    return unchanged
