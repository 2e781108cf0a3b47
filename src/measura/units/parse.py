"""Parse unit expressions written as text (``"kg*m/s^2"``, ``"EUR / h"``).

The parser keeps the spelling it was given: ``"m/s"`` becomes
``Mul(Base(m), Inv(Base(s)))`` and ``"s^-1 m"`` becomes
``Mul(Inv(Base(s)), Base(m))``. Deciding that the two are the same unit is
left to :func:`measura.core.canonical.canonicalize`.
"""

from __future__ import annotations

import re
from typing import List, Optional, Tuple

from .. import config
from ..core.base import BaseUnit, BaseUnitLike, UnitRegistry
from ..core.expr import DIMENSIONLESS, Base, Inv, Mul, UnitExpr
from ..core.si import DEFAULT_REGISTRY


class UnitParseError(ValueError):
    """Raised when a unit expression cannot be parsed."""

    def __init__(self, message: str, text: str, position: int | None = None) -> None:
        pointer = ""
        if position is not None and 0 <= position <= len(text):
            pointer = f"\n{text}\n{' ' * position}^"
        super().__init__(f"{message}{pointer}")
        self.text = text
        self.position = position


_Token = Tuple[str, str, int]


_SUPERSCRIPT_TRANS = str.maketrans({
    "⁰": "0",
    "¹": "1",
    "²": "2",
    "³": "3",
    "⁴": "4",
    "⁵": "5",
    "⁶": "6",
    "⁷": "7",
    "⁸": "8",
    "⁹": "9",
    "⁻": "-",
})


_TOKEN_RE = re.compile(
    r"""
    (?P<space>\s+)
    |(?P<lpar>\()
    |(?P<rpar>\))
    |(?P<op>[*/])
    |(?P<pow>\^)
    |(?P<num>[+-]?\d+)
    |(?P<sym>[A-Za-zµμΩ°$€£¥%_][A-Za-z0-9µμΩ°$€£¥%_]*)
    """,
    re.VERBOSE,
)


def _normalize_input(text: str) -> str:
    text = text.replace("·", "*").replace("×", "*").replace("**", "^")

    def replace_superscripts(match: re.Match[str]) -> str:
        return f"{match.group(1)}^{match.group(2).translate(_SUPERSCRIPT_TRANS)}"

    return re.sub(r"([^\s⁰¹²³⁴⁵⁶⁷⁸⁹⁻])([⁰¹²³⁴⁵⁶⁷⁸⁹⁻]+)", replace_superscripts, text)


def _tokenize(text: str) -> List[_Token]:
    tokens: List[_Token] = []
    pos = 0
    while pos < len(text):
        match = _TOKEN_RE.match(text, pos)
        if not match:
            raise UnitParseError(f"Unexpected character '{text[pos]}' in unit expression", text, pos)
        if match.lastgroup != "space":
            tokens.append((match.lastgroup or "", match.group(0), match.start()))
        pos = match.end()
    return tokens


class _TokenStream:
    def __init__(self, tokens: List[_Token], original: str) -> None:
        self.tokens = tokens
        self.original = original
        self.index = 0

    def peek(self) -> Optional[_Token]:
        if self.index >= len(self.tokens):
            return None
        return self.tokens[self.index]

    def pop(self, expected: str | None = None) -> _Token:
        token = self.peek()
        if token is None:
            raise UnitParseError("Unexpected end of unit expression", self.original, len(self.original))
        kind, value, start = token
        if expected and kind != expected:
            raise UnitParseError(f"Expected {expected} but found '{value}'", self.original, start)
        self.index += 1
        return token


class _Parser:
    def __init__(self, stream: _TokenStream, registry: UnitRegistry, strict: bool) -> None:
        self.stream = stream
        self.registry = registry
        self.strict = strict

    def expr(self) -> UnitExpr:
        # ``*``, ``/`` and juxtaposition share one level and associate left.
        result = self.factor()
        while True:
            token = self.stream.peek()
            if not token:
                return result
            kind, value, _ = token
            if kind == "op" and value == "/":
                self.stream.pop("op")
                result = Mul(result, Inv(self.factor()))
            elif kind == "op" and value == "*":
                self.stream.pop("op")
                result = Mul(result, self.factor())
            elif kind in {"sym", "num", "lpar"}:
                result = Mul(result, self.factor())
            else:
                return result

    def factor(self) -> UnitExpr:
        atom = self.atom()
        token = self.stream.peek()
        if token and token[0] == "pow":
            self.stream.pop("pow")
            _, text, _ = self.stream.pop("num")
            return atom ** int(text)
        return atom

    def atom(self) -> UnitExpr:
        token = self.stream.peek()
        if token is None:
            raise UnitParseError("Unexpected end of unit expression", self.stream.original, len(self.stream.original))
        kind, value, start = token
        if kind == "lpar":
            self.stream.pop("lpar")
            inner = self.expr()
            self.stream.pop("rpar")
            return inner
        if kind == "sym":
            self.stream.pop("sym")
            return Base(self.resolve(value, start))
        if kind == "num":
            self.stream.pop("num")
            if int(value) != 1:
                raise UnitParseError(
                    f"Scale factor '{value}' is not a unit; only '1' is accepted",
                    self.stream.original,
                    start,
                )
            return DIMENSIONLESS
        raise UnitParseError(f"Unexpected token '{value}'", self.stream.original, start)

    def resolve(self, name: str, position: int) -> BaseUnitLike:
        unit = self.registry.get(name)
        if unit is not None:
            return unit
        if self.strict:
            raise UnitParseError(f"Unknown unit symbol '{name}'", self.stream.original, position)
        return BaseUnit(name)


def parse_unit_expr(
    text: str,
    *,
    registry: UnitRegistry | None = None,
    strict: bool | None = None,
) -> UnitExpr:
    """Parse ``text`` into a unit expression that keeps the written spelling."""

    if registry is None:
        registry = DEFAULT_REGISTRY
    if strict is None:
        strict = config.STRICT_UNIT_NAMES

    stripped = text.strip()
    if not stripped:
        raise UnitParseError("Unit expression is empty", text, 0)

    normalized = _normalize_input(stripped)
    stream = _TokenStream(_tokenize(normalized), normalized)
    parser = _Parser(stream, registry, strict)
    expr = parser.expr()
    leftover = stream.peek()
    if leftover is not None:
        raise UnitParseError(f"Unexpected token '{leftover[1]}'", normalized, leftover[2])
    return expr


__all__ = ["UnitParseError", "parse_unit_expr"]
