"""Symbolic world facts: values, assertions and immutable states.

A :class:`State` is a set of ``(key, value)`` assertions describing either the
world as an agent perceives it or a goal condition. Values are tagged so that
``True`` and ``1`` are different facts and entity references never collide
with plain integers.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterable, Iterator, List, Mapping, Tuple, Union


class ValueKind(str, Enum):
    BOOL = "bool"
    NUMBER = "number"
    STRING = "string"
    ENTITY = "entity"


@dataclass(frozen=True, slots=True)
class EntityRef:
    """Reference to a world entity used as a fact value."""

    entity_id: int

    def __str__(self) -> str:
        return f"#{self.entity_id}"


RawValue = Union[bool, int, float, str, EntityRef]


@dataclass(frozen=True, slots=True)
class Value:
    """Discriminated scalar. Equality and hashing cover ``(kind, payload)``."""

    kind: ValueKind
    payload: RawValue

    @classmethod
    def of(cls, raw: "RawValue | Value") -> "Value":
        """Wrap ``raw`` in the matching tag."""

        if isinstance(raw, Value):
            return raw
        # bool before number: bool is an int subclass
        if isinstance(raw, bool):
            return cls(ValueKind.BOOL, raw)
        if isinstance(raw, (int, float)):
            return cls(ValueKind.NUMBER, raw)
        if isinstance(raw, str):
            return cls(ValueKind.STRING, raw)
        if isinstance(raw, EntityRef):
            return cls(ValueKind.ENTITY, raw)
        raise TypeError(f"Unsupported fact value {raw!r} of type {type(raw).__name__}")

    @property
    def raw(self) -> RawValue:
        return self.payload

    def canonical(self) -> str:
        payload = self.payload
        # 1 and 1.0 compare equal, so they must serialize alike too
        if self.kind is ValueKind.NUMBER and isinstance(payload, float) and payload.is_integer():
            payload = int(payload)
        return f"{self.kind.value}:{payload!s}"

    def __str__(self) -> str:
        return str(self.payload)


@dataclass(frozen=True, slots=True)
class Assertion:
    """A single symbolic fact."""

    key: str
    value: Value

    @classmethod
    def of(cls, key: str, raw: "RawValue | Value") -> "Assertion":
        if not isinstance(key, str) or not key:
            raise ValueError(f"Fact key must be a non-empty string, got {key!r}")
        return cls(key, Value.of(raw))

    def canonical(self) -> str:
        return f"{self.key}={self.value.canonical()}"

    def __str__(self) -> str:
        return f"{self.key}:{self.value}"


AssertionLike = Union[Assertion, Tuple[str, Any]]


def _coerce(item: AssertionLike) -> Assertion:
    if isinstance(item, Assertion):
        return item
    key, raw = item
    return Assertion.of(key, raw)


class State:
    """Immutable set of :class:`Assertion` objects.

    Two assertions sharing a key may coexist when built explicitly; states
    derived through :meth:`apply` never keep a stale assertion for a key the
    effects replaced.
    """

    __slots__ = ("_assertions",)

    def __init__(self, assertions: Iterable[AssertionLike] = ()) -> None:
        self._assertions: FrozenSet[Assertion] = frozenset(_coerce(a) for a in assertions)

    @classmethod
    def from_dict(cls, facts: Mapping[str, Any]) -> "State":
        return cls(Assertion.of(k, v) for k, v in facts.items())

    @classmethod
    def coerce(cls, value: "State | Mapping[str, Any] | Iterable[AssertionLike] | None") -> "State":
        """Accept a ``State``, a plain mapping or an iterable of pairs."""

        if value is None:
            return EMPTY_STATE
        if isinstance(value, State):
            return value
        if isinstance(value, Mapping):
            return cls.from_dict(value)
        return cls(value)

    # ------------------------------------------------------------------
    # Set protocol
    # ------------------------------------------------------------------
    def __iter__(self) -> Iterator[Assertion]:
        return iter(self._assertions)

    def __len__(self) -> int:
        return len(self._assertions)

    def __contains__(self, item: object) -> bool:
        if isinstance(item, tuple):
            item = _coerce(item)  # type: ignore[arg-type]
        return item in self._assertions

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, State):
            return NotImplemented
        return self._assertions == other._assertions

    def __hash__(self) -> int:
        return hash(self._assertions)

    def __repr__(self) -> str:
        return f"State({{{self.pretty()}}})"

    @property
    def assertions(self) -> FrozenSet[Assertion]:
        return self._assertions

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def keys(self) -> FrozenSet[str]:
        return frozenset(a.key for a in self._assertions)

    def values_for(self, key: str) -> List[Value]:
        return [a.value for a in self._assertions if a.key == key]

    def get(self, key: str, default: Any = None) -> Any:
        """Return the raw value for ``key``; ambiguous keys resolve to the lowest canonical form."""

        matches = sorted(self.values_for(key), key=Value.canonical)
        if not matches:
            return default
        return matches[0].raw

    def satisfies(self, goal: "State") -> bool:
        """``True`` when every assertion of ``goal`` is present in this state.

        Matching is by exact key and value; there is no partial credit and no
        negation.
        """

        return goal._assertions <= self._assertions

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------
    def apply(self, effects: "State") -> "State":
        """Return a new state with ``effects`` applied as replace-by-key."""

        replaced = effects.keys()
        kept = (a for a in self._assertions if a.key not in replaced)
        result = State.__new__(State)
        result._assertions = frozenset(kept) | effects._assertions
        return result

    def with_assertion(self, key: str, raw: Any) -> "State":
        """Return a new state that also holds ``key=raw`` (set union)."""

        result = State.__new__(State)
        result._assertions = self._assertions | {Assertion.of(key, raw)}
        return result

    def without_key(self, key: str) -> "State":
        result = State.__new__(State)
        result._assertions = frozenset(a for a in self._assertions if a.key != key)
        return result

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------
    def serialize(self) -> str:
        """Canonical string form, identical for equal states."""

        return ";".join(sorted(a.canonical() for a in self._assertions))

    def to_dict(self) -> Dict[str, Any]:
        return {a.key: a.value.raw for a in sorted(self._assertions, key=Assertion.canonical)}

    def pretty(self) -> str:
        return ", ".join(str(a) for a in sorted(self._assertions, key=Assertion.canonical))


EMPTY_STATE = State()


__all__ = [
    "ValueKind",
    "EntityRef",
    "Value",
    "Assertion",
    "State",
    "EMPTY_STATE",
]
