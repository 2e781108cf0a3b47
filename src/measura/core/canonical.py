"""Canonical forms of unit expressions.

A canonical form maps each base unit to a nonzero integer exponent. Two unit
expressions denote the same unit exactly when their canonical forms are
equal, whatever order or nesting was used to build them::

    canonicalize(Mul(Base(m), Inv(Base(s)))) == canonicalize(Mul(Inv(Base(s)), Base(m)))

Exponents of a product add up key by key, an inverse negates every exponent,
and entries that reach zero are dropped, so ``Mul(a, Inv(a))`` collapses to
the empty (dimensionless) form.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

from .base import BaseUnitLike
from .expr import DIMENSIONLESS, Base, Dimensionless, Inv, Mul, UnitExpr, as_unit_expr


def _sort_key(item: Tuple[BaseUnitLike, int]) -> Tuple[str, str]:
    unit = item[0]
    return unit.name, repr(unit)


@dataclass(frozen=True, eq=False)
class CanonicalForm:
    """Immutable base-unit -> exponent mapping, ordered by unit name."""

    exponents: Tuple[Tuple[BaseUnitLike, int], ...] = ()

    @classmethod
    def from_mapping(cls, mapping: Mapping[BaseUnitLike, int]) -> "CanonicalForm":
        filtered = {unit: exp for unit, exp in mapping.items() if exp != 0}
        for unit, exp in filtered.items():
            if isinstance(exp, bool) or not isinstance(exp, int):
                raise TypeError(f"Exponent for {unit.name} must be an integer, got {exp!r}")
        return cls(exponents=tuple(sorted(filtered.items(), key=_sort_key)))

    def as_dict(self) -> Dict[BaseUnitLike, int]:
        return dict(self.exponents)

    def is_dimensionless(self) -> bool:
        return not self.exponents

    def exponent_of(self, unit: BaseUnitLike) -> int:
        for candidate, exp in self.exponents:
            if candidate == unit:
                return exp
        return 0

    def power(self, exponent: int) -> "CanonicalForm":
        return CanonicalForm.from_mapping({unit: exp * exponent for unit, exp in self.exponents})

    def root(self, degree: int) -> "CanonicalForm":
        """Divide every exponent by ``degree``; fail unless all divide evenly."""
        if degree <= 0:
            raise ValueError("Root degree must be a positive integer")
        rooted: Dict[BaseUnitLike, int] = {}
        for unit, exp in self.exponents:
            if exp % degree:
                raise ValueError(
                    f"Cannot take root {degree} of {render(self)}: exponent of {unit.name} is {exp}"
                )
            rooted[unit] = exp // degree
        return CanonicalForm.from_mapping(rooted)

    def to_expr(self) -> UnitExpr:
        """Build a unit expression denoting this canonical form."""
        factors: List[UnitExpr] = []
        for unit, exp in self.exponents:
            factors.append(Base(unit) ** exp)
        if not factors:
            return DIMENSIONLESS
        result = factors[0]
        for factor in factors[1:]:
            result = Mul(result, factor)
        return result

    def __iter__(self) -> Iterator[Tuple[BaseUnitLike, int]]:
        return iter(self.exponents)

    def __len__(self) -> int:
        return len(self.exponents)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CanonicalForm):
            return NotImplemented
        return frozenset(self.exponents) == frozenset(other.exponents)

    def __hash__(self) -> int:
        return hash(frozenset(self.exponents))

    def __str__(self) -> str:
        return render(self)

    def __repr__(self) -> str:
        return f"CanonicalForm({render(self)!r})"


EMPTY = CanonicalForm()


def canonicalize(expr: object) -> CanonicalForm:
    """Reduce ``expr`` (a unit expression or base unit) to its canonical form."""
    root = as_unit_expr(expr)
    totals: Dict[BaseUnitLike, int] = defaultdict(int)
    # Explicit stack so deeply nested products (``m ** 5000``) do not recurse.
    stack: List[Tuple[UnitExpr, int]] = [(root, 1)]
    while stack:
        node, sign = stack.pop()
        if isinstance(node, Dimensionless):
            continue
        if isinstance(node, Base):
            totals[node.unit] += sign
        elif isinstance(node, Mul):
            stack.append((node.right, sign))
            stack.append((node.left, sign))
        elif isinstance(node, Inv):
            stack.append((node.inner, -sign))
        else:
            raise TypeError(f"Unknown unit expression node '{type(node).__name__}'")
    return CanonicalForm.from_mapping(totals)


def combine(forms: Iterable[CanonicalForm]) -> CanonicalForm:
    """Canonical form of the product of ``forms``."""
    totals: Dict[BaseUnitLike, int] = defaultdict(int)
    for form in forms:
        for unit, exp in form.exponents:
            totals[unit] += exp
    return CanonicalForm.from_mapping(totals)


def _name(unit: BaseUnitLike) -> str:
    return unit.name


def _format_factor(name: str, exponent: int) -> str:
    if exponent == 1:
        return name
    return f"{name}^{exponent}"


def render(form: CanonicalForm, label: Optional[Callable[[BaseUnitLike], str]] = None) -> str:
    """Render ``form`` as ``name`` / ``name^exp`` factors sorted by name.

    ``label`` replaces the plain unit name, e.g. to tell apart two distinct
    units that happen to share one.
    """
    if form.is_dimensionless():
        return "1"
    if label is None:
        label = _name
    return " * ".join(_format_factor(label(unit), exp) for unit, exp in form.exponents)


def same_unit(left: object, right: object) -> bool:
    return canonicalize(left) == canonicalize(right)


__all__ = [
    "EMPTY",
    "CanonicalForm",
    "canonicalize",
    "combine",
    "render",
    "same_unit",
]
