"""Optional ahead-of-time unit analysis."""

from .formula import FormulaCheck, FormulaError, check_formula, infer_unit

__all__ = ["FormulaCheck", "FormulaError", "check_formula", "infer_unit"]
