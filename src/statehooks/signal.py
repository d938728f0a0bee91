"""Signals — an equality-gated value with derived nodes and effects.

A Signal is the root of a small graph:

- derive(fn) builds a DerivedNode that memoizes fn() against a snapshot of
  the signal's value. It recomputes only when the signal moved since the
  snapshot, and raises its dirty flag only when the result changed. Reading
  through Derived.get() clears the flag.
- use_effect(fn, deps) registers a side effect. On every changing set(),
  an effect with no deps runs; an effect with deps asks each of them to
  update() and runs if any is dirty.

Every dependency is updated on each set(), whether or not an effect ends up
running, so derived values used as triggers stay fresh. A dirty flag stays
up until someone reads the node, so an effect keeps firing on later sets
until its dependency is read.
"""

from __future__ import annotations

from typing import Callable, Generic, Iterable, TypeVar, Union

T = TypeVar("T")
U = TypeVar("U")


def _same(a: object, b: object) -> bool:
    return a is b or a == b


class DerivedNode(Generic[T]):
    """Memoized computation over a Signal. Used as a dependency token."""

    __slots__ = ("_source", "_fn", "value", "derived_from", "dirty")

    def __init__(self, source: Signal, fn: Callable[[], T]) -> None:
        self._source = source
        self._fn = fn
        self.value: T = fn()
        self.derived_from = source.get()
        self.dirty = False

    def update(self) -> None:
        """Recompute if the source moved since the last snapshot."""
        current = self._source.get()
        if _same(current, self.derived_from):
            return
        self.derived_from = current
        next_value = self._fn()
        if not _same(next_value, self.value):
            self.value = next_value
            self.dirty = True

    def __repr__(self) -> str:
        state = "dirty" if self.dirty else "clean"
        return f"DerivedNode({self.value!r}, {state})"


class Derived(Generic[T]):
    """Read accessor for a DerivedNode."""

    __slots__ = ("node",)

    def __init__(self, node: DerivedNode[T]) -> None:
        self.node = node

    def get(self) -> T:
        """Bring the node up to date, clear its dirty flag, return the value."""
        self.node.update()
        self.node.dirty = False
        return self.node.value

    def __repr__(self) -> str:
        return f"Derived({self.node!r})"


Dependency = Union[Derived, DerivedNode]


class Effect:
    """A registered side effect. Call dispose() to unregister it."""

    __slots__ = ("_fn", "_dependencies", "_owner")

    def __init__(
        self,
        owner: Signal,
        fn: Callable[[], None],
        dependencies: tuple[DerivedNode, ...],
    ) -> None:
        self._owner: Signal | None = owner
        self._fn = fn
        self._dependencies = dependencies

    @property
    def disposed(self) -> bool:
        return self._owner is None

    @property
    def dependencies(self) -> tuple[DerivedNode, ...]:
        return self._dependencies

    def _should_run(self) -> bool:
        if not self._dependencies:
            return True
        # Update every dependency, no short-circuit.
        dirty = False
        for node in self._dependencies:
            node.update()
            dirty = node.dirty or dirty
        return dirty

    def _run(self) -> None:
        self._fn()

    def dispose(self) -> None:
        """Stop this effect. Idempotent."""
        if self._owner is not None:
            self._owner._remove_effect(self)
            self._owner = None

    def __repr__(self) -> str:
        state = "disposed" if self.disposed else "active"
        name = getattr(self._fn, "__name__", repr(self._fn))
        return f"Effect({name}, {state})"


class Signal(Generic[T]):
    """An equality-gated value that owns derived nodes and effects."""

    __slots__ = ("_value", "_effects")

    def __init__(self, value: T) -> None:
        self._value = value
        self._effects: list[Effect] = []

    def get(self) -> T:
        return self._value

    def set(self, value: T) -> None:
        """Write a new value and run the effects it triggers.

        Setting a value equal to the current one does nothing. Effects run
        in registration order; one that raises stops the rest.
        """
        if _same(value, self._value):
            return
        self._value = value
        for effect in list(self._effects):
            if effect.disposed:
                continue
            if effect._should_run():
                effect._run()

    def derive(self, fn: Callable[[], U]) -> Derived[U]:
        """Create a memoized derived value. fn runs once, right away."""
        return Derived(DerivedNode(self, fn))

    def use_effect(
        self,
        fn: Callable[[], None],
        dependencies: Iterable[Dependency] = (),
    ) -> Effect:
        """Register fn to run when set() dirties one of its dependencies.

        With no dependencies, fn runs on every changing set(). fn does not
        run at registration.
        """
        nodes = tuple(
            dep.node if isinstance(dep, Derived) else dep for dep in dependencies
        )
        effect = Effect(self, fn, nodes)
        self._effects.append(effect)
        return effect

    def _remove_effect(self, effect: Effect) -> None:
        try:
            self._effects.remove(effect)
        except ValueError:
            pass

    @property
    def effect_count(self) -> int:
        return len(self._effects)

    def dispose(self) -> None:
        """Drop every registered effect."""
        for effect in list(self._effects):
            effect.dispose()

    def __repr__(self) -> str:
        return f"Signal({self._value!r})"


def use_signal(value: T) -> Signal[T]:
    """Factory for a Signal.

    Usage:
        count = use_signal(2)
        doubled = count.derive(lambda: count.get() * 2)
        log = []
        count.use_effect(lambda: log.append(doubled.get()), [doubled])

        count.set(3)  # log == [6]
        count.set(3)  # equal value, nothing runs
    """
    return Signal(value)
