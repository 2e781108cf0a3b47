"""measura - values tagged with units of measure."""

from . import core
from .core import (
    DIMENSIONLESS,
    Base,
    BaseUnit,
    CanonicalForm,
    Dimensionless,
    Inv,
    Measure,
    Mul,
    UnitMismatchError,
    canonicalize,
    lift,
    try_unify,
    unify,
)
from .version import __version__

__all__ = [
    "core",
    "DIMENSIONLESS",
    "Base",
    "BaseUnit",
    "CanonicalForm",
    "Dimensionless",
    "Inv",
    "Measure",
    "Mul",
    "UnitMismatchError",
    "canonicalize",
    "lift",
    "try_unify",
    "unify",
    "__version__",
]
