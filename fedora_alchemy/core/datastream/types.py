from enum import Enum, auto

from rich.markup import escape

__all__ = [
    "State",
]


class State(Enum):
    """
    What a {obj}`Datastream.save` would do right now. Never stored: it's
    worked out from the cached profile and the set of changed attributes
    each time {obj}`Datastream.state` is read.
    """

    CLEAN = auto()
    """Exists in Fedora and nothing was assigned since it was last synced"""

    CREATE = auto()
    """Profile is empty, so saving adds the datastream"""

    UPDATE = auto()
    """Exists in Fedora with assigned attributes or content to send"""

    @property
    def color(self) -> str:
        return _COLORS[self]

    def __str__(self) -> str:
        return f"{escape('[')}[{self.color}]{self.name}[/{self.color}]{escape(']')}"


_COLORS = {
    State.CLEAN: "cyan",
    State.CREATE: "bright_green",
    State.UPDATE: "bright_yellow",
}
