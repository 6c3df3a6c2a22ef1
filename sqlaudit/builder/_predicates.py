"""Predicate variants and global placeholder numbering.

Builders hold predicates as small immutable values and render them once, at
build time, through a single :class:`ParameterBinder`. The binder owns the
running placeholder counter and the argument list, so fragments authored
independently (each starting its own placeholders at 1) compose into one
consistently numbered statement.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol, Union

from sqlaudit.exceptions import (
    ExtraParameterError,
    MissingParameterError,
    ParameterError,
    ParameterStyleMismatchError,
)
from sqlaudit.parameters import ParameterStyle, ParameterValidator

__all__ = (
    "AnyOf",
    "Assignment",
    "Between",
    "Condition",
    "Fragment",
    "InList",
    "IsNull",
    "Like",
    "ParameterBinder",
    "Predicate",
    "render_conjunction",
    "to_fragment",
)

_validator = ParameterValidator()

Condition = Union[str, tuple[Any, ...]]
"""A fragment string, or a ``(fragment, *values)`` tuple."""


class ParameterBinder:
    """Accumulates bound values and hands out global ``$n`` placeholders."""

    __slots__ = ("_parameters",)

    def __init__(self) -> None:
        self._parameters: list[Any] = []

    @property
    def parameters(self) -> list[Any]:
        return list(self._parameters)

    @property
    def count(self) -> int:
        return len(self._parameters)

    def bind(self, value: Any) -> str:
        """Append ``value`` and return its placeholder token."""
        self._parameters.append(value)
        return f"${len(self._parameters)}"

    def bind_fragment(self, fragment: "Fragment") -> str:
        """Rewrite a fragment's local placeholders onto the global sequence.

        Every local index ``k`` becomes ``$(offset + k)`` where ``offset`` is
        the number of values bound before this fragment. The fragment's values
        are appended in local index order.

        Returns:
            The fragment text with global placeholders.
        """
        offset = len(self._parameters)
        parts: list[str] = []
        current_pos = 0
        for position, length, local_index in fragment.placeholders:
            parts.append(fragment.text[current_pos:position])
            parts.append(f"${offset + local_index}")
            current_pos = position + length
        parts.append(fragment.text[current_pos:])
        self._parameters.extend(fragment.values)
        return "".join(parts)


class Predicate(Protocol):
    def render(self, binder: ParameterBinder) -> str: ...


@dataclass(frozen=True)
class Fragment:
    """Caller-authored SQL text with its own local placeholders.

    Use :meth:`create` so the placeholders are checked against the values
    when the fragment is accumulated rather than when it reaches the database.
    """

    text: str
    values: tuple[Any, ...] = ()
    placeholders: tuple[tuple[int, int, int], ...] = field(default=(), repr=False)

    @classmethod
    def create(cls, text: str, values: Sequence[Any] = ()) -> "Fragment":
        """Parse ``text`` and pair its placeholders with ``values``.

        ``?`` placeholders are numbered by appearance. ``$N`` placeholders keep
        their number and may repeat, in which case all occurrences share one
        value. A fragment may not mix the two styles.

        Raises:
            ParameterStyleMismatchError: If ``?`` and ``$N`` are mixed.
            MissingParameterError: If a placeholder has no value.
            ExtraParameterError: If a value has no placeholder.
            ParameterError: If a numeric placeholder is ``$0``.

        Returns:
            The validated fragment.
        """
        values = tuple(values)
        found = _validator.extract_parameters(text)
        styles = {info.style for info in found}
        if len(styles) > 1:
            msg = "Fragment mixes '?' and '$N' placeholders"
            raise ParameterStyleMismatchError(msg, text)

        placeholders: list[tuple[int, int, int]] = []
        for ordinal, info in enumerate(found, start=1):
            local_index = info.index if info.style is ParameterStyle.NUMERIC else ordinal
            if local_index is None or local_index < 1:
                msg = f"Placeholder {info.placeholder_text} is not a valid 1-based position"
                raise ParameterError(msg, text)
            placeholders.append((info.position, len(info.placeholder_text), local_index))

        referenced = {local_index for _, _, local_index in placeholders}
        highest = max(referenced, default=0)
        if highest > len(values):
            msg = f"Fragment references ${highest} but only {len(values)} value(s) were supplied"
            raise MissingParameterError(msg, text)
        if len(referenced) < len(values):
            msg = f"Fragment has {len(referenced)} placeholder(s) but {len(values)} value(s) were supplied"
            raise ExtraParameterError(msg, text)
        return cls(text=text, values=values, placeholders=tuple(placeholders))

    def render(self, binder: ParameterBinder) -> str:
        return binder.bind_fragment(self)


@dataclass(frozen=True)
class InList:
    column: str
    values: tuple[Any, ...]
    negate: bool = False

    def render(self, binder: ParameterBinder) -> str:
        operator = "NOT IN" if self.negate else "IN"
        placeholders = ", ".join(binder.bind(value) for value in self.values)
        return f"{self.column} {operator} ({placeholders})"


@dataclass(frozen=True)
class Like:
    column: str
    pattern: Any

    def render(self, binder: ParameterBinder) -> str:
        return f"{self.column} LIKE {binder.bind(self.pattern)}"


@dataclass(frozen=True)
class Between:
    column: str
    start: Any
    end: Any

    def render(self, binder: ParameterBinder) -> str:
        start = binder.bind(self.start)
        end = binder.bind(self.end)
        return f"{self.column} BETWEEN {start} AND {end}"


@dataclass(frozen=True)
class IsNull:
    column: str
    negate: bool = False

    def render(self, binder: ParameterBinder) -> str:
        return f"{self.column} IS NOT NULL" if self.negate else f"{self.column} IS NULL"


@dataclass(frozen=True)
class AnyOf:
    """A group of predicates joined by OR and rendered in parentheses."""

    conditions: tuple[Predicate, ...]

    def render(self, binder: ParameterBinder) -> str:
        return "(" + " OR ".join(condition.render(binder) for condition in self.conditions) + ")"


@dataclass(frozen=True)
class Assignment:
    """A ``column = value`` SET item."""

    column: str
    value: Any

    def render(self, binder: ParameterBinder) -> str:
        return f"{self.column} = {binder.bind(self.value)}"


def to_fragment(condition: Condition) -> Fragment:
    """Normalize a fragment string or ``(fragment, *values)`` tuple.

    Raises:
        ParameterError: If a tuple condition is empty or does not start with text.

    Returns:
        The validated fragment.
    """
    if isinstance(condition, str):
        return Fragment.create(condition)
    if not condition or not isinstance(condition[0], str):
        msg = "Tuple conditions must be (fragment, *values)"
        raise ParameterError(msg)
    return Fragment.create(condition[0], condition[1:])


def render_conjunction(predicates: Sequence[Predicate], binder: ParameterBinder) -> str:
    """Render predicates in order, joined by AND."""
    return " AND ".join(predicate.render(binder) for predicate in predicates)
