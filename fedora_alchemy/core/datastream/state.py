"""
Local state of a datastream's attributes.
"""

from __future__ import annotations

from typing import Any

__all__ = [
    "AttributeState",
]


class AttributeState:
    """
    Values assigned by user along with the set of attributes changed since
    the last synchronization with Fedora.
    """

    overrides: dict[str, Any]
    """Mapping of attribute name to value set by user"""

    dirty: set[str]
    """Names of attributes set since last reset"""

    previous: dict[str, Any]
    """Value of each dirty attribute before it was first changed"""

    def __init__(self):
        self.overrides = dict()
        self.dirty = set()
        self.previous = dict()

    def __str__(self):
        fields = ", ".join(
            f"{name}={self.previous[name]!r}->{self.overrides.get(name)!r}"
            for name in sorted(self.dirty)
        )
        return f"{{{fields}}}"

    def is_set(self, name: str) -> bool:
        return name in self.overrides

    def assign(self, name: str, value: Any, current: Any):
        """
        Store value set by user, marking it dirty unless it equals the
        currently visible value.
        """
        if value == current:
            return

        self.mark_dirty(name, current)
        self.overrides[name] = value

    def mark_dirty(self, name: str, previous: Any = None):
        """
        Add attribute to dirty set, keeping the value from before its first
        change.
        """
        if name not in self.dirty:
            self.previous[name] = previous
            self.dirty.add(name)

    def reset(self):
        self.overrides.clear()
        self.dirty.clear()
        self.previous.clear()
