"""International System of Units base units."""

from __future__ import annotations

from .base import BaseUnit, UnitRegistry

SECOND = BaseUnit("s", "second")
METER = BaseUnit("m", "meter")
KILOGRAM = BaseUnit("kg", "kilogram")
AMPERE = BaseUnit("A", "ampere")
KELVIN = BaseUnit("K", "kelvin")
MOLE = BaseUnit("mol", "mole")
CANDELA = BaseUnit("cd", "candela")

SI_BASE_UNITS = (SECOND, METER, KILOGRAM, AMPERE, KELVIN, MOLE, CANDELA)

_ALIASES = {
    SECOND: ("sec", "second", "seconds"),
    METER: ("meter", "metre", "meters", "metres"),
    KILOGRAM: ("kilogram", "kilograms"),
    AMPERE: ("amp", "ampere", "amperes"),
    KELVIN: ("kelvin",),
    MOLE: ("mole", "moles"),
    CANDELA: ("candela",),
}


def install_si(registry: UnitRegistry) -> UnitRegistry:
    """Register the SI base units and their long names in ``registry``."""
    for unit in SI_BASE_UNITS:
        registry.register(unit, aliases=_ALIASES[unit])
    return registry


DEFAULT_REGISTRY = install_si(UnitRegistry())


__all__ = [
    "AMPERE",
    "CANDELA",
    "DEFAULT_REGISTRY",
    "KELVIN",
    "KILOGRAM",
    "METER",
    "MOLE",
    "SECOND",
    "SI_BASE_UNITS",
    "install_si",
]
