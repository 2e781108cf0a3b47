"""Command-line interface for measura."""

from __future__ import annotations

from typing import Dict, Optional, Tuple

import click
from pydantic import BaseModel, Field

from ..analysis.formula import check_formula
from ..core.canonical import canonicalize, render
from ..core.expr import UnitExpr, spell
from ..core.unify import UnitMismatchError, check_unify
from ..observability import configure_logging
from ..units.parse import UnitParseError, parse_unit_expr


class CanonicalPayload(BaseModel):
    expression: str
    spelled: str
    canonical: str
    exponents: Dict[str, int] = Field(default_factory=dict)


class UnifyPayload(BaseModel):
    ok: bool
    source: str
    target: str
    canonical: str


class FormulaPayload(BaseModel):
    formula: str
    ok: bool
    inferred: str
    expected: str
    message: str


def _parse(text: str, param_hint: str, strict: bool) -> UnitExpr:
    try:
        return parse_unit_expr(text, strict=strict or None)
    except UnitParseError as exc:
        raise click.BadParameter(str(exc), param_hint=param_hint) from exc


def _parse_declarations(pairs: Tuple[str, ...], strict: bool) -> Dict[str, UnitExpr]:
    declared: Dict[str, UnitExpr] = {}
    for pair in pairs:
        name, sep, unit_text = pair.partition("=")
        if not sep or not name.strip():
            raise click.BadParameter(f"Expected NAME=UNIT, got '{pair}'", param_hint="--unit")
        declared[name.strip()] = _parse(unit_text, "--unit", strict)
    return declared


@click.group()
@click.option("--log-level", default=None, help="Logging level (defaults to MEASURA_LOG_LEVEL).")
@click.option("--strict", is_flag=True, help="Reject unit names the registry does not know.")
@click.pass_context
def cli(ctx: click.Context, log_level: Optional[str], strict: bool) -> None:
    """Inspect and unify units of measure."""

    configure_logging(log_level)
    ctx.ensure_object(dict)
    ctx.obj["strict"] = strict


@cli.command("canonicalize")
@click.argument("expression")
@click.pass_context
def canonicalize_cmd(ctx: click.Context, expression: str) -> None:
    """Print the canonical form of EXPRESSION."""

    expr = _parse(expression, "EXPRESSION", ctx.obj["strict"])
    form = canonicalize(expr)
    payload = CanonicalPayload(
        expression=expression,
        spelled=spell(expr),
        canonical=render(form),
        exponents={unit.name: exp for unit, exp in form.exponents},
    )
    click.echo(payload.model_dump_json(indent=2))


@cli.command()
@click.argument("source")
@click.argument("target")
@click.pass_context
def unify(ctx: click.Context, source: str, target: str) -> None:
    """Check that SOURCE can be relabeled as TARGET."""

    strict = ctx.obj["strict"]
    source_expr = _parse(source, "SOURCE", strict)
    target_expr = _parse(target, "TARGET", strict)
    try:
        check_unify(source_expr, target_expr)
    except UnitMismatchError as exc:
        click.echo(str(exc), err=True)
        ctx.exit(1)
    payload = UnifyPayload(
        ok=True,
        source=source,
        target=target,
        canonical=render(canonicalize(target_expr)),
    )
    click.echo(payload.model_dump_json(indent=2))


@cli.command()
@click.argument("formula")
@click.option("--unit", "units", multiple=True, help="Unit of a symbol, as NAME=UNIT. Repeatable.")
@click.option("--target", required=True, help="Unit the formula is expected to have.")
@click.pass_context
def check(ctx: click.Context, formula: str, units: Tuple[str, ...], target: str) -> None:
    """Check the unit of FORMULA against --target without evaluating it."""

    strict = ctx.obj["strict"]
    declared = _parse_declarations(units, strict)
    result = check_formula(formula, declared, _parse(target, "--target", strict))
    payload = FormulaPayload(
        formula=result.formula,
        ok=result.ok,
        inferred=result.inferred_canonical,
        expected=result.expected_canonical,
        message=result.message,
    )
    click.echo(payload.model_dump_json(indent=2))
    if not result.ok:
        ctx.exit(1)


if __name__ == "__main__":
    cli()
