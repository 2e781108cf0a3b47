"""Base units and the optional name registry.

A base unit is anything exposing a stable ``name`` and hash/equality. The
engine never consults a table to decide identity: two base units declared in
unrelated modules merge in a canonical form as soon as they compare equal.
:class:`UnitRegistry` only exists so that text (``"m/s"``) can be resolved to
base units and aliases can be looked up.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Dict, Iterable, Mapping, Protocol, Tuple, runtime_checkable

if TYPE_CHECKING:
    from .expr import UnitExpr
    from .measure import Measure

logger = logging.getLogger(__name__)


class RegistryError(ValueError):
    """Raised when a name or alias is already bound to another base unit."""


@runtime_checkable
class BaseUnitLike(Protocol):
    """Capability every base unit must provide."""

    @property
    def name(self) -> str: ...

    def __hash__(self) -> int: ...

    def __eq__(self, other: object) -> bool: ...


@dataclass(frozen=True)
class BaseUnit:
    """An atomic, named unit such as ``m``, ``kg`` or ``EUR``.

    Identity is the name: ``BaseUnit("km") == BaseUnit("km")`` regardless of
    where either was declared. ``description`` is display-only.
    """

    name: str
    description: str = field(default="", compare=False)

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name.strip():
            raise ValueError("Base unit name must be a non-empty string")

    def new(self, value: Any) -> "Measure":
        """Lift ``value`` into a measure tagged with this unit."""
        from .measure import lift

        return lift(value, self)

    # -- Symbolic operators -----------------------------------------------
    def __mul__(self, other: object) -> "UnitExpr":
        from .expr import Base

        return Base(self) * other

    def __rmul__(self, other: object) -> "UnitExpr":
        from .expr import Base

        return other * Base(self)

    def __truediv__(self, other: object) -> "UnitExpr":
        from .expr import Base

        return Base(self) / other

    def __rtruediv__(self, other: object) -> "UnitExpr":
        from .expr import Base

        return other / Base(self)

    def __pow__(self, exponent: int) -> "UnitExpr":
        from .expr import Base

        return Base(self) ** exponent

    def __str__(self) -> str:
        return self.name


class UnitRegistry:
    """Append-only lookup of base units by name and alias.

    Writers serialize on a lock and publish a fresh read-only snapshot;
    readers only ever dereference the current snapshot.
    """

    def __init__(self, units: Iterable[BaseUnitLike] = ()) -> None:
        self._lock = threading.Lock()
        self._entries: Mapping[str, BaseUnitLike] = MappingProxyType({})
        for unit in units:
            self.register(unit)

    def register(self, unit: BaseUnitLike, *, aliases: Iterable[str] = ()) -> BaseUnitLike:
        if not isinstance(unit, BaseUnitLike):
            raise TypeError(f"{unit!r} does not provide a base unit name")
        keys: Tuple[str, ...] = (unit.name, *aliases)
        with self._lock:
            current = self._entries
            for key in keys:
                bound = current.get(key)
                if bound is not None and bound != unit:
                    raise RegistryError(
                        f"Name '{key}' is already bound to base unit '{bound.name}'"
                    )
            if all(key in current for key in keys):
                return unit
            updated: Dict[str, BaseUnitLike] = dict(current)
            for key in keys:
                updated.setdefault(key, unit)
            self._entries = MappingProxyType(updated)
        logger.debug("registered base unit %s (aliases=%s)", unit.name, list(aliases))
        return unit

    def snapshot(self) -> Mapping[str, BaseUnitLike]:
        """Return the current read-only name -> unit mapping."""
        return self._entries

    def get(self, name: str) -> BaseUnitLike | None:
        return self._entries.get(name)

    def resolve(self, name: str) -> BaseUnitLike:
        unit = self._entries.get(name)
        if unit is None:
            raise KeyError(name)
        return unit

    def names(self) -> Tuple[str, ...]:
        return tuple(sorted(self._entries))

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)


__all__ = ["BaseUnit", "BaseUnitLike", "RegistryError", "UnitRegistry"]
