"""Text front-end for unit expressions."""

from .parse import UnitParseError, parse_unit_expr

__all__ = ["UnitParseError", "parse_unit_expr"]
