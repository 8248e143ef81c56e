"""
Registry of functions invoked around lifecycle operations of an entity.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Callable, Generator, Literal

__all__ = [
    "Hooks",
    "Event",
    "Phase",
]

type Event = Literal["initialize", "save", "create", "destroy"]
type Phase = Literal["before", "after"]

type HookFunc = Callable[[Any], None]

EVENTS: tuple[str, ...] = ("initialize", "save", "create", "destroy")
PHASES: tuple[str, ...] = ("before", "after")

# events which only support hooks after the operation
_AFTER_ONLY = {"initialize"}


class Hooks:
    """
    Functions registered to run before or after an entity operation.

    Each entity class owns a registry; a subclass starts with a copy of its
    parent's hooks, so hooks added to the subclass don't affect the parent.

    Example:

    ```
    @Datastream.hooks.after("save")
    def log_save(ds: Datastream):
        print(f"Saved {ds}")
    ```
    """

    _funcs: dict[tuple[str, str], list[HookFunc]]

    def __init__(self, parent: Hooks | None = None):
        self._funcs = {(e, p): [] for e in EVENTS for p in PHASES}

        if parent is not None:
            for key, funcs in parent._funcs.items():
                self._funcs[key] += funcs

    def register(self, event: Event, phase: Phase, func: HookFunc) -> HookFunc:
        """
        Register function to invoke with the entity upon the given event.
        """
        assert event in EVENTS, f"Unknown event: {event}"
        assert phase in PHASES, f"Unknown phase: {phase}"
        assert not (
            event in _AFTER_ONLY and phase == "before"
        ), f"Event {event} only supports hooks after the operation"

        self._funcs[(event, phase)].append(func)
        return func

    def unregister(self, event: Event, phase: Phase, func: HookFunc):
        self._funcs[(event, phase)].remove(func)

    def before(self, event: Event) -> Callable[[HookFunc], HookFunc]:
        """
        Decorator to register a function invoked before an operation.
        """
        return lambda func: self.register(event, "before", func)

    def after(self, event: Event) -> Callable[[HookFunc], HookFunc]:
        """
        Decorator to register a function invoked after an operation.
        """
        return lambda func: self.register(event, "after", func)

    def get(self, event: Event, phase: Phase) -> list[HookFunc]:
        return list(self._funcs[(event, phase)])

    @contextmanager
    def bracket(self, event: Event, entity: Any) -> Generator[None, None, None]:
        """
        Run hooks around the enclosed operation. If the operation raises,
        the exception propagates and "after" hooks are skipped.
        """
        for func in self._funcs[(event, "before")]:
            func(entity)

        yield

        for func in self._funcs[(event, "after")]:
            func(entity)
