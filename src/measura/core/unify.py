"""Unification of unit expressions and the runtime guard behind ``unify``.

``try_unify`` only proves "these are the same unit, spelled differently". It
never proposes a conversion factor: ``km * s^-1`` and ``m * s^-1`` do not
unify even though one is a multiple of the other.

When no static analysis has proven a ``unify`` call safe ahead of time, the
check happens here, at runtime, on every call. A failure is reported through
:func:`guard`, which logs the discrepancy and raises
:class:`UnitMismatchError`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Optional, Set, Tuple

from .. import config
from ..observability import log_event
from .base import BaseUnitLike
from .canonical import CanonicalForm, canonicalize, render, same_unit

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Mismatch:
    """Both canonical forms of a failed unification."""

    expected: CanonicalForm
    found: CanonicalForm

    def rendered(self) -> Tuple[str, str]:
        """Render ``(expected, found)``; distinct units sharing a name are shown by ``repr``."""
        seen: Dict[str, BaseUnitLike] = {}
        shared: Set[str] = set()
        for unit, _ in (*self.expected, *self.found):
            if seen.setdefault(unit.name, unit) != unit:
                shared.add(unit.name)

        def label(unit: BaseUnitLike) -> str:
            return repr(unit) if unit.name in shared else unit.name

        return render(self.expected, label), render(self.found, label)

    def report(self, context: Optional[str] = None) -> str:
        expected, found = self.rendered()
        message = f"expected unit of measure: {expected}, found unit of measure: {found}"
        if context:
            return f"{context}: {message}"
        return message


class UnitMismatchError(AssertionError):
    """A value was unified against a unit it does not have.

    This is a broken contract, equivalent to what a static unit checker would
    have rejected before the program ran; callers are not expected to recover.
    """

    def __init__(self, mismatch: Mismatch, context: Optional[str] = None) -> None:
        self.mismatch = mismatch
        self.context = context
        super().__init__(mismatch.report(context))

    @property
    def expected(self) -> CanonicalForm:
        return self.mismatch.expected

    @property
    def found(self) -> CanonicalForm:
        return self.mismatch.found


def try_unify(source: object, target: object) -> Optional[Mismatch]:
    """Return ``None`` if ``source`` and ``target`` are the same unit, else a :class:`Mismatch`."""
    found = canonicalize(source)
    expected = canonicalize(target)
    if found == expected:
        if config.TRACE_UNIFY:
            logger.debug("unified %s with %s", render(found), render(expected))
        return None
    return Mismatch(expected=expected, found=found)


def guard(mismatch: Mismatch, *, context: Optional[str] = None) -> None:
    """Report ``mismatch`` and abort the current unification."""
    error = UnitMismatchError(mismatch, context)
    expected, found = mismatch.rendered()
    log_event(
        "unit mismatch",
        level=logging.ERROR,
        expected=expected,
        found=found,
        context=context,
    )
    raise error


def check_unify(source: object, target: object, *, context: Optional[str] = None) -> None:
    """Raise :class:`UnitMismatchError` unless ``source`` unifies with ``target``."""
    mismatch = try_unify(source, target)
    if mismatch is not None:
        guard(mismatch, context=context)


__all__ = [
    "Mismatch",
    "UnitMismatchError",
    "check_unify",
    "guard",
    "same_unit",
    "try_unify",
]
