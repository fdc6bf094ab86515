"""AST node classes for MSDScript expressions.

Nodes are frozen dataclasses, so structural equality and hashing come for
free and a tree can never be modified once built. Evaluation and printing
live in evaluator.py and printer.py; the methods here only dispatch to them.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .types import Env, Value


class Expr:
    """Common interface of every expression node."""
    __slots__ = ()

    def evaluate(self, env: Optional[Env] = None) -> Value:
        from .evaluator import eval_expr  # local import to avoid cycle
        return eval_expr(self, env)

    def to_canonical_string(self) -> str:
        from .printer import to_canonical
        return to_canonical(self)

    def to_pretty_string(self) -> str:
        from .printer import to_pretty
        return to_pretty(self)

    def __str__(self) -> str:
        return self.to_canonical_string()


@dataclass(frozen=True)
class NumExpr(Expr):
    value: int


@dataclass(frozen=True)
class BoolExpr(Expr):
    value: bool


@dataclass(frozen=True)
class VarExpr(Expr):
    name: str


@dataclass(frozen=True)
class AddExpr(Expr):
    lhs: Expr
    rhs: Expr


@dataclass(frozen=True)
class MultExpr(Expr):
    lhs: Expr
    rhs: Expr


@dataclass(frozen=True)
class EqExpr(Expr):
    lhs: Expr
    rhs: Expr


@dataclass(frozen=True)
class LetExpr(Expr):
    """`_let name = rhs _in body`; rhs is evaluated outside the new binding."""
    name: str
    rhs: Expr
    body: Expr


@dataclass(frozen=True)
class IfExpr(Expr):
    condition: Expr
    then_expr: Expr
    else_expr: Expr


@dataclass(frozen=True)
class FunExpr(Expr):
    param: str
    body: Expr


@dataclass(frozen=True)
class CallExpr(Expr):
    callee: Expr
    arg: Expr


def children(node: Expr) -> tuple[Expr, ...]:
    match node:
        case AddExpr(lhs, rhs) | MultExpr(lhs, rhs) | EqExpr(lhs, rhs):
            return (lhs, rhs)
        case LetExpr(_, rhs, body):
            return (rhs, body)
        case IfExpr(cond, then_expr, else_expr):
            return (cond, then_expr, else_expr)
        case FunExpr(_, body):
            return (body,)
        case CallExpr(callee, arg):
            return (callee, arg)
        case _:
            return ()


def free_variables(node: Expr) -> frozenset[str]:
    """Names that occur in node without an enclosing binder."""
    match node:
        case VarExpr(name):
            return frozenset((name,))
        case LetExpr(name, rhs, body):
            return free_variables(rhs) | (free_variables(body) - {name})
        case FunExpr(param, body):
            return free_variables(body) - {param}
        case _:
            found: frozenset[str] = frozenset()
            for child in children(node):
                found |= free_variables(child)
            return found


def is_closed(node: Expr) -> bool:
    return not free_variables(node)
