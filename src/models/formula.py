"""
Formula helpers: find the table columns a model formula refers to.

Lets fitting code raise MissingColumn up front instead of surfacing a
patsy evaluation error from deep inside statsmodels.
"""

from __future__ import annotations

import ast
from typing import List

import pandas as pd
import patsy.builtins
from patsy import ModelDesc

from src.data.tables import require_columns

# Contrast codings and stateful transforms (Treatment, Sum, center, ...)
PATSY_BUILTINS = frozenset(patsy.builtins.__all__)


def _names_in_code(code: str) -> List[str]:
    """Variable names referenced by one patsy factor expression.

    Function names (C, np.log, I, ...), patsy builtins and keyword values
    are skipped; only the first argument of C(...) is data. Q("name")
    yields name.
    """
    names: List[str] = []

    def visit(node: ast.AST) -> None:
        if isinstance(node, ast.Call):
            func = node.func
            if (
                isinstance(func, ast.Name)
                and func.id == "Q"
                and node.args
                and isinstance(node.args[0], ast.Constant)
                and isinstance(node.args[0].value, str)
            ):
                names.append(node.args[0].value)
                return
            args = node.args
            if isinstance(func, ast.Name) and func.id == "C":
                args = args[:1]
            for child in args:
                visit(child)
            return
        if isinstance(node, ast.Attribute):
            return
        if isinstance(node, ast.Name):
            if node.id not in PATSY_BUILTINS:
                names.append(node.id)
            return
        for child in ast.iter_child_nodes(node):
            visit(child)

    visit(ast.parse(code.strip(), mode="eval").body)
    return names


def formula_variables(formula: str, side: str = "both") -> List[str]:
    """Return column names used by a formula, in first-seen order.

    Args:
        formula: patsy formula, e.g. "y ~ x * C(group)".
        side: "both", "lhs" (response only) or "rhs" (predictors only).
    """
    desc = ModelDesc.from_formula(formula)
    termlists = {
        "both": desc.lhs_termlist + desc.rhs_termlist,
        "lhs": desc.lhs_termlist,
        "rhs": desc.rhs_termlist,
    }[side]

    seen: List[str] = []
    for term in termlists:
        for factor in term.factors:
            for name in _names_in_code(factor.code):
                if name not in seen:
                    seen.append(name)
    return seen


def check_formula_columns(formula: str, frame: pd.DataFrame, side: str = "both") -> None:
    """Raise MissingColumn if frame lacks a column the formula needs."""
    require_columns(frame, formula_variables(formula, side=side))


def quote_column(name: str) -> str:
    """Quote a column name for use inside a formula when it is not an identifier."""
    if name.isidentifier():
        return name
    escaped = name.replace("\\", "\\\\").replace('"', '\\"')
    return f'Q("{escaped}")'
