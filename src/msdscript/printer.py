"""Canonical and pretty renderings of MSDScript expressions.

The canonical form parenthesizes every operator and keyword expression and
omits optional spaces. The pretty form drops every parenthesis that the
grammar does not need and puts keyword clauses on their own lines, aligned
under the keyword that opened them. Both forms parse back to the tree they
were printed from.
"""
from __future__ import annotations

import io
from enum import IntEnum

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


def _bool_text(value: bool) -> str:
    return "_true" if value else "_false"


# ---------- Canonical ----------

def to_canonical(node: Expr) -> str:
    match node:
        case NumExpr(value):
            return str(value)
        case BoolExpr(value):
            return _bool_text(value)
        case VarExpr(name):
            return name
        case AddExpr(lhs, rhs):
            return f"({to_canonical(lhs)}+{to_canonical(rhs)})"
        case MultExpr(lhs, rhs):
            return f"({to_canonical(lhs)}*{to_canonical(rhs)})"
        case EqExpr(lhs, rhs):
            return f"({to_canonical(lhs)}=={to_canonical(rhs)})"
        case LetExpr(name, rhs, body):
            return f"(_let {name}={to_canonical(rhs)} _in {to_canonical(body)})"
        case IfExpr(cond, then_expr, else_expr):
            return (f"(_if {to_canonical(cond)} _then {to_canonical(then_expr)}"
                    f" _else {to_canonical(else_expr)})")
        case FunExpr(param, body):
            return f"(_fun ({param}) {to_canonical(body)})"
        case CallExpr(callee, arg):
            return f"{to_canonical(callee)}({to_canonical(arg)})"
        case _:
            raise TypeError(f"Unknown expression node {type(node).__name__}")


# ---------- Pretty ----------

class Precedence(IntEnum):
    """Binding strength of the context an expression is printed in."""
    NONE = 0
    ADD = 1
    MULT = 2
    CALL = 3


class ColumnWriter:
    """Text buffer that knows the column of the next character it writes."""

    def __init__(self) -> None:
        self._buf = io.StringIO()
        self.column = 0

    def write(self, text: str) -> None:
        self._buf.write(text)
        newline = text.rfind("\n")
        if newline < 0:
            self.column += len(text)
        else:
            self.column = len(text) - newline - 1

    def newline(self, indent: int) -> None:
        self.write("\n" + " " * indent)

    def getvalue(self) -> str:
        return self._buf.getvalue()


def pretty_print_at(
    node: Expr,
    out: ColumnWriter,
    prec: Precedence,
    left: bool,
    followed: bool,
) -> None:
    """Write node to out as it must appear in a given context.

    prec is the precedence of the enclosing operator, left is set when node
    is that operator's left operand (or a callee), and followed is set when
    more of the enclosing expression is printed after node without a closing
    parenthesis in between. A keyword expression extends as far right as it
    can, so it needs parentheses whenever it is followed.
    """
    match node:
        case NumExpr(value):
            out.write(str(value))

        case BoolExpr(value):
            out.write(_bool_text(value))

        case VarExpr(name):
            out.write(name)

        case AddExpr(lhs, rhs):
            wrap = prec >= Precedence.MULT or (prec == Precedence.ADD and left)
            _open(out, wrap)
            pretty_print_at(lhs, out, Precedence.ADD, True, True)
            out.write(" + ")
            pretty_print_at(rhs, out, Precedence.ADD, False, followed and not wrap)
            _close(out, wrap)

        case MultExpr(lhs, rhs):
            wrap = prec >= Precedence.MULT and left
            _open(out, wrap)
            pretty_print_at(lhs, out, Precedence.MULT, True, False)
            out.write(" * ")
            pretty_print_at(rhs, out, Precedence.MULT, False, followed and not wrap)
            _close(out, wrap)

        case EqExpr(lhs, rhs):
            wrap = prec > Precedence.NONE
            _open(out, wrap)
            pretty_print_at(lhs, out, Precedence.ADD, False, True)
            out.write(" == ")
            pretty_print_at(rhs, out, Precedence.NONE, False, followed and not wrap)
            _close(out, wrap)

        case LetExpr(name, rhs, body):
            wrap = left or followed
            _open(out, wrap)
            indent = out.column
            out.write(f"_let {name} = ")
            pretty_print_at(rhs, out, Precedence.NONE, False, False)
            out.newline(indent)
            out.write("_in ")
            pretty_print_at(body, out, Precedence.NONE, False, False)
            _close(out, wrap)

        case IfExpr(cond, then_expr, else_expr):
            wrap = left or followed
            _open(out, wrap)
            indent = out.column
            out.write("_if ")
            pretty_print_at(cond, out, Precedence.NONE, False, False)
            out.newline(indent)
            out.write("_then ")
            pretty_print_at(then_expr, out, Precedence.NONE, False, False)
            out.newline(indent)
            out.write("_else ")
            pretty_print_at(else_expr, out, Precedence.NONE, False, False)
            _close(out, wrap)

        case FunExpr(param, body):
            wrap = left or followed
            _open(out, wrap)
            indent = out.column
            out.write(f"_fun ({param})")
            out.newline(indent)
            pretty_print_at(body, out, Precedence.NONE, False, False)
            _close(out, wrap)

        case CallExpr(callee, arg):
            pretty_print_at(callee, out, Precedence.CALL, True, True)
            out.write("(")
            pretty_print_at(arg, out, Precedence.NONE, False, False)
            out.write(")")

        case _:
            raise TypeError(f"Unknown expression node {type(node).__name__}")


def _open(out: ColumnWriter, wrap: bool) -> None:
    if wrap:
        out.write("(")


def _close(out: ColumnWriter, wrap: bool) -> None:
    if wrap:
        out.write(")")


def to_pretty(node: Expr) -> str:
    out = ColumnWriter()
    pretty_print_at(node, out, Precedence.NONE, False, False)
    return out.getvalue()
