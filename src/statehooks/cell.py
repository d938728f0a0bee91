"""Value cells — a single mutable value wrapped in update hooks.

Unlike Signal, a ValueCell has no equality gate: every set() runs both
hooks, even when the value is unchanged.

Construction schedules one deferred set() of the current value. Once the
scheduler runs it, the hooks fire a single time after setup, so callers can
wire the hooks to something that did not exist yet when the cell was built.
"""

from __future__ import annotations

from typing import Callable, Generic, TypeVar

from statehooks import _scheduling
from statehooks._scheduling import Scheduler

T = TypeVar("T")

Hook = Callable[[], None]


def _noop() -> None:
    pass


class ValueCell(Generic[T]):
    """A value with before/after update hooks."""

    __slots__ = ("value", "_before_update", "_after_update")

    def __init__(
        self,
        value: T,
        *,
        after_update: Hook = _noop,
        before_update: Hook = _noop,
        scheduler: Scheduler | None = None,
    ) -> None:
        self.value = value
        self._before_update = before_update
        self._after_update = after_update
        _scheduling.resolve(scheduler).schedule(self._reassert)

    def get(self) -> T:
        return self.value

    def set(self, value: T) -> None:
        """Run before_update, assign, run after_update."""
        self._before_update()
        self.value = value
        self._after_update()

    def _reassert(self) -> None:
        self.set(self.value)

    def __repr__(self) -> str:
        return f"ValueCell({self.value!r})"


def use_state(
    value: T,
    after_update: Hook = _noop,
    before_update: Hook = _noop,
    *,
    scheduler: Scheduler | None = None,
) -> ValueCell[T]:
    """Factory for a ValueCell.

    Usage:
        renders = []
        cell = use_state(0, after_update=lambda: renders.append(cell.value))
        cell.set(1)       # renders == [1]
        flush()           # renders == [1, 1], the deferred re-assertion
    """
    return ValueCell(
        value,
        after_update=after_update,
        before_update=before_update,
        scheduler=scheduler,
    )
