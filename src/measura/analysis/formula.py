"""Ahead-of-time unit checking of symbolic formulas.

Given a formula such as ``"d / t"`` and the declared unit of every symbol,
:func:`infer_unit` builds the unit expression the formula evaluates to,
without touching any value. :func:`check_formula` then compares that result
with the unit the caller intends to ``unify`` it against, so the check can
run in a build or review step instead of at the ``unify`` call site.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from fractions import Fraction
from typing import Any, Dict, Mapping, Optional

import sympy as sp

from ..core.canonical import canonicalize, render
from ..core.expr import DIMENSIONLESS, Inv, Mul, UnitExpr, as_unit_expr
from ..core.unify import try_unify
from ..units.parse import parse_unit_expr

logger = logging.getLogger(__name__)


_TOKEN_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_RESERVED_NAMES = {
    "sin",
    "cos",
    "tan",
    "exp",
    "sqrt",
    "log",
    "Abs",
    "Eq",
    "pi",
}


class FormulaError(ValueError):
    """Raised when a formula cannot be given a unit."""


@dataclass(frozen=True)
class FormulaCheck:
    """Outcome of checking a formula against an expected unit."""

    formula: str
    ok: bool
    inferred: UnitExpr
    expected: UnitExpr
    message: str

    @property
    def inferred_canonical(self) -> str:
        return render(canonicalize(self.inferred))

    @property
    def expected_canonical(self) -> str:
        return render(canonicalize(self.expected))

    def to_dict(self) -> Dict[str, object]:
        return {
            "formula": self.formula,
            "ok": self.ok,
            "inferred": self.inferred_canonical,
            "expected": self.expected_canonical,
            "message": self.message,
        }


def _coerce_unit(value: object) -> UnitExpr:
    if isinstance(value, str):
        return parse_unit_expr(value)
    return as_unit_expr(value)


def _sympify_side(source: str, locals_map: Mapping[str, Any], formula: str) -> sp.Basic:
    try:
        return sp.sympify(source, locals=dict(locals_map))
    except (sp.SympifyError, SyntaxError, TypeError) as exc:
        raise FormulaError(f"Cannot parse formula '{formula}': {exc}") from exc


def _sympify(formula: str | sp.Basic, names: Mapping[str, object]) -> sp.Basic:
    if isinstance(formula, sp.Basic):
        return formula
    source = formula.strip()
    if not source:
        raise FormulaError("Formula is empty")
    # Keep user symbols such as ``E`` or ``S`` from resolving to SymPy builtins.
    locals_map: Dict[str, Any] = {name: sp.Symbol(name) for name in names}
    for token in _TOKEN_RE.findall(source):
        if token not in _RESERVED_NAMES:
            locals_map.setdefault(token, sp.Symbol(token))
    if "==" not in source and "=" in source:
        left, right = source.split("=", 1)
        lhs = _sympify_side(left.strip(), locals_map, formula)
        rhs = _sympify_side(right.strip(), locals_map, formula)
        # Unevaluated so that ``x = x`` stays an equation instead of ``true``.
        return sp.Eq(lhs, rhs, evaluate=False)
    return _sympify_side(source, locals_map, formula)


def _require_dimensionless(unit: UnitExpr, what: str) -> None:
    form = canonicalize(unit)
    if not form.is_dimensionless():
        raise FormulaError(f"{what} requires a dimensionless argument, got {render(form)}")


def _power(base: UnitExpr, exponent: sp.Expr, node: sp.Basic) -> UnitExpr:
    if exponent.is_Float:
        fraction = Fraction(float(exponent)).limit_denominator(10_000)
        exponent = sp.Rational(fraction.numerator, fraction.denominator)
    if exponent.is_Integer:
        return base ** int(exponent)
    if exponent.is_Rational:
        try:
            form = canonicalize(base).power(int(exponent.p)).root(int(exponent.q))
        except ValueError as exc:
            raise FormulaError(str(exc)) from exc
        return form.to_expr()
    _require_dimensionless(base, f"Power '{sp.sstr(node)}'")
    return DIMENSIONLESS


def _infer(node: sp.Basic, units: Mapping[str, UnitExpr]) -> UnitExpr:
    if isinstance(node, sp.Equality):
        lhs = _infer(node.lhs, units)
        rhs = _infer(node.rhs, units)
        mismatch = try_unify(rhs, lhs)
        if mismatch is not None:
            raise FormulaError(f"Equation '{sp.sstr(node)}': {mismatch.report()}")
        return lhs

    if node.is_number:
        return DIMENSIONLESS

    if node.is_Symbol:
        name = str(node)
        if name not in units:
            raise FormulaError(f"No unit declared for symbol '{name}'")
        return units[name]

    if node.is_Add:
        terms = [_infer(arg, units) for arg in node.args]
        first = terms[0]
        for term_unit, term in zip(terms[1:], node.args[1:]):
            mismatch = try_unify(term_unit, first)
            if mismatch is not None:
                raise FormulaError(f"Cannot add '{sp.sstr(term)}': {mismatch.report()}")
        return first

    if node.is_Mul:
        result: Optional[UnitExpr] = None
        for arg in node.args:
            if arg.is_number:
                continue
            if arg.is_Pow and arg.exp.is_number and arg.exp.is_negative:
                factor = Inv(_infer(sp.Pow(arg.base, -arg.exp), units))
            else:
                factor = _infer(arg, units)
            result = factor if result is None else Mul(result, factor)
        return DIMENSIONLESS if result is None else result

    if node.is_Pow:
        return _power(_infer(node.base, units), node.exp, node)

    if node.is_Function:
        if isinstance(node, sp.Abs):
            return _infer(node.args[0], units)
        for arg in node.args:
            _require_dimensionless(_infer(arg, units), f"Function '{node.func.__name__}'")
        return DIMENSIONLESS

    raise FormulaError(f"Unsupported expression element: {type(node).__name__}")


def infer_unit(formula: str | sp.Basic, units: Mapping[str, object]) -> UnitExpr:
    """Return the unit expression ``formula`` evaluates to under ``units``."""

    declared = {name: _coerce_unit(unit) for name, unit in units.items()}
    expr = _sympify(formula, declared)
    unit = _infer(expr, declared)
    logger.debug("inferred %s for %s", render(canonicalize(unit)), sp.sstr(expr))
    return unit


def check_formula(
    formula: str | sp.Basic,
    units: Mapping[str, object],
    target: object,
) -> FormulaCheck:
    """Check that ``formula`` has the same unit as ``target``; never raises on a mismatch."""

    expected = _coerce_unit(target)
    text = formula if isinstance(formula, str) else sp.sstr(formula)
    try:
        inferred = infer_unit(formula, units)
    except FormulaError as exc:
        return FormulaCheck(formula=text, ok=False, inferred=DIMENSIONLESS, expected=expected, message=str(exc))

    mismatch = try_unify(inferred, expected)
    if mismatch is None:
        return FormulaCheck(formula=text, ok=True, inferred=inferred, expected=expected, message="ok")
    return FormulaCheck(
        formula=text,
        ok=False,
        inferred=inferred,
        expected=expected,
        message=mismatch.report(),
    )


__all__ = ["FormulaCheck", "FormulaError", "check_formula", "infer_unit"]
