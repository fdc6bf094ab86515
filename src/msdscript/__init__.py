"""MSDScript: a small expression language with an evaluator and two printers."""

from .evaluator import eval_expr
from .parser_rd import (
    BadInputError,
    IntegerOverflowError,
    InvalidInputError,
    ParseError,
    parse,
    parse_stream,
)
from .tree import (
    AddExpr,
    BoolExpr,
    CallExpr,
    EqExpr,
    Expr,
    FunExpr,
    IfExpr,
    LetExpr,
    MultExpr,
    NumExpr,
    VarExpr,
)
from .types import (
    BoolVal,
    Env,
    FunVal,
    InvalidOperandError,
    MsdRuntimeError,
    NumVal,
    UnboundVariableError,
    Value,
)

__all__ = [
    "AddExpr",
    "BadInputError",
    "BoolExpr",
    "BoolVal",
    "CallExpr",
    "Env",
    "EqExpr",
    "Expr",
    "FunExpr",
    "FunVal",
    "IfExpr",
    "IntegerOverflowError",
    "InvalidInputError",
    "InvalidOperandError",
    "LetExpr",
    "MsdRuntimeError",
    "MultExpr",
    "NumExpr",
    "NumVal",
    "ParseError",
    "UnboundVariableError",
    "Value",
    "VarExpr",
    "eval_expr",
    "parse",
    "parse_stream",
]
