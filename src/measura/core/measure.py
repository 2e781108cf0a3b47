"""Values tagged with a unit expression.

Arithmetic on measures builds the result tag symbolically: multiplying a
``Base(m)`` measure by a ``Base(s)`` measure produces a ``Mul(Base(m),
Base(s))`` tag and nothing is normalized. The only way to move a value to a
differently spelled tag is :meth:`Measure.unify`, which runs the canonical
form comparison and refuses anything that is not the very same unit.

Addition, subtraction and ordering comparisons require structurally identical
tags and raise ``TypeError`` otherwise, in the same way an operand of the
wrong type would; unify one side first when the spellings differ. Measures
with different tags are never ``==``.
"""

from __future__ import annotations

import math
import operator
from dataclasses import dataclass
from typing import Any, Callable, Generic, Iterable, Optional, TypeVar

from .base import BaseUnitLike
from .canonical import CanonicalForm, canonicalize, render
from .expr import DIMENSIONLESS, Base, Dimensionless, Inv, Mul, UnitExpr, as_unit_expr
from .unify import guard, try_unify

T = TypeVar("T")
V = TypeVar("V")


@dataclass(frozen=True)
class Measure(Generic[T]):
    """A value paired with the unit expression it is measured in."""

    value: T
    unit: UnitExpr

    def __post_init__(self) -> None:
        object.__setattr__(self, "unit", as_unit_expr(self.unit))

    # -- Construction -----------------------------------------------------
    @classmethod
    def lift(cls, value: T, base_unit: BaseUnitLike) -> "Measure[T]":
        return cls(value, Base(base_unit))

    @classmethod
    def dimensionless(cls, value: T) -> "Measure[T]":
        return cls(value, DIMENSIONLESS)

    @classmethod
    def zero(cls, unit: object) -> "Measure[int]":
        """Additive identity tagged with ``unit``."""
        return cls(0, as_unit_expr(unit))

    # -- Consumption ------------------------------------------------------
    def into_inner(self) -> T:
        return self.value

    def is_zero(self) -> bool:
        return bool(self.value == 0)

    def unwrap(self) -> T:
        """Return the value of a dimensionless measure."""
        if not isinstance(self.unit, Dimensionless):
            raise TypeError(
                f"unwrap() requires a dimensionless measure, got unit {self.unit}; "
                "use into_inner() to discard the unit explicitly"
            )
        return self.value

    def unify(self, target: object, *, context: Optional[str] = None) -> "Measure[T]":
        """Re-tag this measure with ``target`` if both denote the same unit."""
        target_expr = as_unit_expr(target)
        mismatch = try_unify(self.unit, target_expr)
        if mismatch is not None:
            guard(mismatch, context=context)
        return Measure(self.value, target_expr)

    def as_runtime(self) -> CanonicalForm:
        """Canonical form of the unit tag (for display and debugging)."""
        return canonicalize(self.unit)

    def map_value(self, fn: Callable[[T], V]) -> "Measure[V]":
        """Change the value representation, keeping the unit tag."""
        return Measure(fn(self.value), self.unit)

    # -- Unit-building arithmetic -----------------------------------------
    def multiply(self, other: "Measure[Any]") -> "Measure[Any]":
        return Measure(self.value * other.value, Mul(self.unit, other.unit))

    def invert(self) -> "Measure[Any]":
        return Measure(1 / self.value, Inv(self.unit))

    def divide(self, other: "Measure[Any]") -> "Measure[Any]":
        return Measure(self.value / other.value, Mul(self.unit, Inv(other.unit)))

    def sqrt(self) -> "Measure[Any]":
        """Square root of a measure tagged ``Mul(a, a)``; the result is tagged ``a``."""
        unit = self.unit
        if not (isinstance(unit, Mul) and unit.left == unit.right):
            raise TypeError(f"sqrt() requires a unit of the form Mul(a, a), got {unit}")
        root = getattr(self.value, "sqrt", None)
        value = root() if callable(root) else math.sqrt(self.value)
        return Measure(value, unit.left)

    def __mul__(self, other: object) -> "Measure[Any]":
        if isinstance(other, Measure):
            return self.multiply(other)
        return Measure(self.value * other, self.unit)

    def __rmul__(self, other: object) -> "Measure[Any]":
        return Measure(other * self.value, self.unit)

    def __truediv__(self, other: object) -> "Measure[Any]":
        if isinstance(other, Measure):
            return self.divide(other)
        return Measure(self.value / other, self.unit)

    def __rtruediv__(self, other: object) -> "Measure[Any]":
        return Measure(other / self.value, Inv(self.unit))

    # -- Same-unit arithmetic ---------------------------------------------
    def _require_same_tag(self, other: object, op: str) -> "Measure[Any]":
        if not isinstance(other, Measure):
            raise TypeError(f"Cannot {op} a Measure and {type(other).__name__}")
        if other.unit != self.unit:
            raise TypeError(
                f"Cannot {op} measures tagged {self.unit} and {other.unit}; unify one side first"
            )
        return other

    def __add__(self, other: object) -> "Measure[Any]":
        rhs = self._require_same_tag(other, "add")
        return Measure(self.value + rhs.value, self.unit)

    def __sub__(self, other: object) -> "Measure[Any]":
        rhs = self._require_same_tag(other, "subtract")
        return Measure(self.value - rhs.value, self.unit)

    def __neg__(self) -> "Measure[Any]":
        return Measure(-self.value, self.unit)

    def __abs__(self) -> "Measure[Any]":
        return Measure(abs(self.value), self.unit)

    def _compare(self, other: object, op: Callable[[Any, Any], Any], name: str) -> Any:
        rhs = self._require_same_tag(other, name)
        return op(self.value, rhs.value)

    def __eq__(self, other: object) -> Any:
        if not isinstance(other, Measure):
            return NotImplemented
        if other.unit != self.unit:
            return False
        return self.value == other.value

    def __lt__(self, other: object) -> Any:
        return self._compare(other, operator.lt, "compare")

    def __le__(self, other: object) -> Any:
        return self._compare(other, operator.le, "compare")

    def __gt__(self, other: object) -> Any:
        return self._compare(other, operator.gt, "compare")

    def __ge__(self, other: object) -> Any:
        return self._compare(other, operator.ge, "compare")

    def __repr__(self) -> str:
        return f"Measure({self.value!r}, {render(self.as_runtime())!r})"


def lift(value: T, base_unit: BaseUnitLike) -> Measure[T]:
    return Measure.lift(value, base_unit)


def multiply(left: Measure[Any], right: Measure[Any]) -> Measure[Any]:
    return left.multiply(right)


def invert(measure: Measure[Any]) -> Measure[Any]:
    return measure.invert()


def divide(left: Measure[Any], right: Measure[Any]) -> Measure[Any]:
    return left.divide(right)


def unify(measure: Measure[T], target: object, *, context: Optional[str] = None) -> Measure[T]:
    return measure.unify(target, context=context)


def into_inner(measure: Measure[T]) -> T:
    return measure.into_inner()


def measure_sum(measures: Iterable[Measure[Any]], unit: object) -> Measure[Any]:
    """Sum ``measures``, all tagged exactly ``unit``; an empty input sums to ``0``."""
    total = Measure.zero(unit)
    for item in measures:
        total = total + item
    return total


def measure_product(measures: Iterable[Measure[Any]]) -> Measure[Any]:
    """Multiply ``measures`` left to right; an empty input is dimensionless ``1``."""
    result: Measure[Any] = Measure.dimensionless(1)
    for index, item in enumerate(measures):
        result = item if index == 0 else result.multiply(item)
    return result


__all__ = [
    "Measure",
    "divide",
    "into_inner",
    "invert",
    "lift",
    "measure_product",
    "measure_sum",
    "multiply",
    "unify",
]
