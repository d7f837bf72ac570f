"""
Binsize Collections
"""

# Standard library -----------------------------------------------------------------------------------------------------
from collections.abc import Mapping, Iterable, Iterator
from typing import TypeVar, Generic

# Local ----------------------------------------------------------------------------------------------------------------
from .formatters import fmt_value

# Classes --------------------------------------------------------------------------------------------------------------

K = TypeVar("K")
V = TypeVar("V")


class BiDirectionalMap(Mapping[K, V], Generic[K, V]):
    """
    A read-only bidirectional map with Mapping-compatible API on the forward direction.

    - Forward direction (key -> value) implements the stdlib Mapping protocol.
      Membership (x in bimap) applies to KEYS only, like dict.
    - Reverse direction (value -> key) available via get_key(value) and has_value(value).
    - Both keys and values must be unique and hashable; the map is fixed at construction.

    Examples:
        >>> steps = BiDirectionalMap({1: "K", 2: "M"})
        >>> steps[2], steps.get_key("K")
        ('M', 1)
    """

    __slots__ = ("_forward_map", "_backward_map")

    def __init__(self, initial: Mapping[K, V] | Iterable[tuple[K, V]] = ()) -> None:
        forward: dict[K, V] = {}
        backward: dict[V, K] = {}
        pairs = initial.items() if isinstance(initial, Mapping) else initial
        for key, value in pairs:
            if key in forward:
                raise ValueError(f"Key {fmt_value(key)} already exists (maps to {forward[key]!r})")
            if value in backward:
                raise ValueError(f"Value {fmt_value(value)} already exists (mapped from {backward[value]!r})")
            forward[key] = value
            backward[value] = key
        self._forward_map = forward
        self._backward_map = backward

    def __getitem__(self, key: K) -> V:
        return self._forward_map[key]

    def __iter__(self) -> Iterator[K]:
        return iter(self._forward_map)

    def __len__(self) -> int:
        return len(self._forward_map)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._forward_map!r})"

    def get_key(self, value: V) -> K:
        """Lookup key by value."""
        return self._backward_map[value]

    def has_value(self, value: V) -> bool:
        """True if value exists in reverse map."""
        return value in self._backward_map
