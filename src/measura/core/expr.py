"""Unit expressions: algebraic terms over base units.

The four constructors below are plain data. Building them never normalizes
anything, so ``Mul(METER, Inv(SECOND))`` and ``Mul(Inv(SECOND), METER)`` stay
distinct values; deciding that they denote the same unit is the job of
:mod:`measura.core.canonical`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Union

from .base import BaseUnitLike


class UnitExpr:
    """Common base of the unit expression constructors."""

    __slots__ = ()

    def __mul__(self, other: object) -> "UnitExpr":
        try:
            rhs = as_unit_expr(other)
        except TypeError:
            return NotImplemented
        return Mul(self, rhs)

    def __rmul__(self, other: object) -> "UnitExpr":
        try:
            lhs = as_unit_expr(other)
        except TypeError:
            return NotImplemented
        return Mul(lhs, self)

    def __truediv__(self, other: object) -> "UnitExpr":
        try:
            rhs = as_unit_expr(other)
        except TypeError:
            return NotImplemented
        return Mul(self, Inv(rhs))

    def __rtruediv__(self, other: object) -> "UnitExpr":
        if other == 1:
            return Inv(self)
        try:
            lhs = as_unit_expr(other)
        except TypeError:
            return NotImplemented
        return Mul(lhs, Inv(self))

    def __pow__(self, exponent: int) -> "UnitExpr":
        if isinstance(exponent, bool) or not isinstance(exponent, int):
            raise TypeError(f"Unit exponent must be an integer, got {type(exponent).__name__}")
        if exponent == 0:
            return DIMENSIONLESS
        result: UnitExpr = self
        for _ in range(abs(exponent) - 1):
            result = Mul(result, self)
        return result if exponent > 0 else Inv(result)

    def inverse(self) -> "UnitExpr":
        return Inv(self)

    def __str__(self) -> str:
        return spell(self)


@dataclass(frozen=True)
class Dimensionless(UnitExpr):
    """The multiplicative identity."""


@dataclass(frozen=True)
class Base(UnitExpr):
    unit: BaseUnitLike


@dataclass(frozen=True)
class Mul(UnitExpr):
    left: UnitExpr
    right: UnitExpr

    def __post_init__(self) -> None:
        object.__setattr__(self, "left", as_unit_expr(self.left))
        object.__setattr__(self, "right", as_unit_expr(self.right))


@dataclass(frozen=True)
class Inv(UnitExpr):
    inner: UnitExpr

    def __post_init__(self) -> None:
        object.__setattr__(self, "inner", as_unit_expr(self.inner))


DIMENSIONLESS = Dimensionless()

UnitLike = Union[UnitExpr, BaseUnitLike]


def as_unit_expr(value: object) -> UnitExpr:
    """Coerce a base unit into ``Base(unit)``; pass unit expressions through."""
    if isinstance(value, UnitExpr):
        return value
    if isinstance(value, BaseUnitLike):
        return Base(value)
    raise TypeError(f"Expected a unit expression or base unit, got {type(value).__name__}")


def walk(expr: UnitExpr) -> Iterator[BaseUnitLike]:
    """Yield the base units of ``expr`` in left-to-right tree order."""
    stack: List[UnitExpr] = [expr]
    while stack:
        node = stack.pop()
        if isinstance(node, Base):
            yield node.unit
        elif isinstance(node, Mul):
            stack.append(node.right)
            stack.append(node.left)
        elif isinstance(node, Inv):
            stack.append(node.inner)


def spell(expr: UnitExpr) -> str:
    """Render the expression as written, without normalizing it."""
    parts: List[str] = []
    # Pending items are either nodes or literal text, popped in output order.
    stack: List[Union[UnitExpr, str]] = [expr]
    while stack:
        item = stack.pop()
        if isinstance(item, str):
            parts.append(item)
        elif isinstance(item, Dimensionless):
            parts.append("1")
        elif isinstance(item, Base):
            parts.append(item.unit.name)
        elif isinstance(item, Mul):
            stack.extend([")", item.right, " * ", item.left, "("])
        elif isinstance(item, Inv):
            stack.extend(["^-1", item.inner])
        else:
            raise TypeError(f"Unknown unit expression node '{type(item).__name__}'")
    return "".join(parts)


__all__ = [
    "DIMENSIONLESS",
    "Base",
    "Dimensionless",
    "Inv",
    "Mul",
    "UnitExpr",
    "UnitLike",
    "as_unit_expr",
    "spell",
    "walk",
]
