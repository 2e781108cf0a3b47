"""Core unit-of-measure engine."""

from .base import BaseUnit, BaseUnitLike, RegistryError, UnitRegistry
from .canonical import CanonicalForm, canonicalize, combine, render, same_unit
from .expr import DIMENSIONLESS, Base, Dimensionless, Inv, Mul, UnitExpr, as_unit_expr, spell, walk
from .measure import (
    Measure,
    divide,
    into_inner,
    invert,
    lift,
    measure_product,
    measure_sum,
    multiply,
    unify,
)
from .si import (
    AMPERE,
    CANDELA,
    DEFAULT_REGISTRY,
    KELVIN,
    KILOGRAM,
    METER,
    MOLE,
    SECOND,
    SI_BASE_UNITS,
)
from .unify import Mismatch, UnitMismatchError, check_unify, guard, try_unify

__all__ = [
    "AMPERE",
    "CANDELA",
    "DEFAULT_REGISTRY",
    "DIMENSIONLESS",
    "KELVIN",
    "KILOGRAM",
    "METER",
    "MOLE",
    "SECOND",
    "SI_BASE_UNITS",
    "Base",
    "BaseUnit",
    "BaseUnitLike",
    "CanonicalForm",
    "Dimensionless",
    "Inv",
    "Measure",
    "Mismatch",
    "Mul",
    "RegistryError",
    "UnitExpr",
    "UnitMismatchError",
    "UnitRegistry",
    "as_unit_expr",
    "canonicalize",
    "check_unify",
    "combine",
    "divide",
    "guard",
    "into_inner",
    "invert",
    "lift",
    "measure_product",
    "measure_sum",
    "multiply",
    "render",
    "same_unit",
    "spell",
    "try_unify",
    "unify",
    "walk",
]
