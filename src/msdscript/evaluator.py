from __future__ import annotations

from typing import Optional

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
from .types import BoolVal, Env, FunVal, NumVal, Value


def eval_expr(node: Expr, env: Optional[Env] = None) -> Value:
    """Evaluate node under env, defaulting to the empty environment."""
    return eval_node(node, Env.empty if env is None else env)


def eval_node(node: Expr, env: Env) -> Value:
    match node:
        case NumExpr(value):
            return NumVal(value)
        case BoolExpr(value):
            return BoolVal(value)
        case VarExpr(name):
            return env.lookup(name)
        case AddExpr(lhs, rhs):
            left = eval_node(lhs, env)
            return left.add_to(eval_node(rhs, env))
        case MultExpr(lhs, rhs):
            left = eval_node(lhs, env)
            return left.mult_with(eval_node(rhs, env))
        case EqExpr(lhs, rhs):
            left = eval_node(lhs, env)
            return BoolVal(left == eval_node(rhs, env))
        case LetExpr():
            return _eval_let(node, env)
        case IfExpr():
            return _eval_if(node, env)
        case FunExpr(param, body):
            # Closures capture the empty environment rather than env, so a
            # body sees only its own parameter.
            # TODO: capture env so curried functions can reach outer
            # parameters; flip closure-does-not-see-outer-param in
            # tests/test_evaluator.py when doing so.
            return FunVal(param, body, Env.empty)
        case CallExpr(callee, arg):
            fn = eval_node(callee, env)
            return fn.call(eval_node(arg, env))
        case _:
            raise TypeError(f"Unknown expression node {type(node).__name__}")


def _eval_let(node: LetExpr, env: Env) -> Value:
    bound = eval_node(node.rhs, env)
    return eval_node(node.body, env.extend(node.name, bound))


def _eval_if(node: IfExpr, env: Env) -> Value:
    if eval_node(node.condition, env).is_true():
        return eval_node(node.then_expr, env)

    return eval_node(node.else_expr, env)
