"""
Recursive Descent Parser for MSDScript

Works directly on characters: there is no separate token stream. Every
production is chosen from a single character of lookahead (or from the
keyword that follows an underscore), so the parser never backtracks.

Grammar (lowest to highest precedence):

    expr      := comparg ( "==" expr )?
    comparg   := addend ( "+" comparg )?
    addend    := multicand ( "*" addend )?
    multicand := inner ( "(" expr ")" )*
    inner     := number | "(" expr ")" | identifier | "_" keyword-body

`==`, `+` and `*` recurse into the same nonterminal on their right, so
chains written without parentheses group to the right: `1+2+3` is
`1+(2+3)`. Calls are a postfix loop and group to the left.
"""
from __future__ import annotations

import string
from typing import Callable, NoReturn, Optional, TextIO

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

# Numerals must fit a signed 32-bit integer.
MAX_INT = 2**31 - 1

WHITESPACE = frozenset(" \t\n\r\v\f")
DIGITS = frozenset(string.digits)
LETTERS = frozenset(string.ascii_letters)
KEYWORD_CHARS = LETTERS | {"_"}

# ============================================================================
# Errors
# ============================================================================

class ParseError(Exception):
    """Parse error with position info"""
    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
        self.message = message
        self.line = line
        self.column = column
        super().__init__(
            f"{message} at line {line}, col {column}" if line is not None else message
        )

class BadInputError(ParseError):
    """Input does not have the shape of an expression."""

class InvalidInputError(ParseError):
    """A token is malformed, or text is left over after the expression."""

class IntegerOverflowError(ParseError):
    """A numeral does not fit in MAX_INT."""

# ============================================================================
# Parser
# ============================================================================

class Parser:
    """
    Recursive descent parser for MSDScript.

    Position is tracked as (line, column), both 1-based, for error messages.
    """

    def __init__(self, source: str):
        self.source = source
        self.pos = 0
        self.line = 1
        self.column = 1

    # ========================================================================
    # Character Navigation
    # ========================================================================

    def peek(self) -> str:
        """Look at the next character; '' at end of input"""
        if self.pos < len(self.source):
            return self.source[self.pos]
        return ""

    def at_end(self) -> bool:
        return self.pos >= len(self.source)

    def advance(self) -> str:
        """Consume and return the next character ('' at end of input)"""
        ch = self.peek()
        if not ch:
            return ch

        self.pos += 1
        if ch == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1

        return ch

    def check(self, chars: frozenset[str] | str) -> bool:
        """Check if the next character is one of chars"""
        ch = self.peek()
        return bool(ch) and ch in chars

    def match(self, ch: str) -> bool:
        """Consume the next character if it is ch"""
        if self.peek() == ch:
            self.advance()
            return True
        return False

    def expect(self, ch: str, message: Optional[str] = None) -> str:
        """Consume ch or raise BadInputError"""
        if self.peek() != ch:
            self.error(message or f"expected '{ch}', got {self._describe()}")
        return self.advance()

    def expect_str(self, text: str) -> None:
        for ch in text:
            self.expect(ch, f"expected '{text}', got {self._describe()}")

    def skip_whitespace(self) -> None:
        while self.check(WHITESPACE):
            self.advance()

    def take_while(self, chars: frozenset[str]) -> str:
        start = self.pos
        while self.check(chars):
            self.advance()
        return self.source[start:self.pos]

    def error(self, message: str, exc_type: type[ParseError] = BadInputError) -> NoReturn:
        raise exc_type(message, self.line, self.column)

    def _describe(self) -> str:
        ch = self.peek()
        return repr(ch) if ch else "end of input"

    # ========================================================================
    # Top-Level Parsing
    # ========================================================================

    def parse(self) -> Expr:
        """Parse one complete expression; only whitespace may follow it"""
        expr = self.parse_expr()
        self.skip_whitespace()

        if not self.at_end():
            self.error(f"unexpected {self._describe()} after expression", InvalidInputError)

        return expr

    # ========================================================================
    # Operators
    # ========================================================================

    def parse_expr(self) -> Expr:
        """expr := comparg ( "==" expr )?"""
        lhs = self.parse_comparg()
        self.skip_whitespace()

        if self.check("="):
            self.expect_str("==")
            return EqExpr(lhs, self.parse_expr())

        return lhs

    def parse_comparg(self) -> Expr:
        """comparg := addend ( "+" comparg )?"""
        lhs = self.parse_addend()
        self.skip_whitespace()

        if self.match("+"):
            return AddExpr(lhs, self.parse_comparg())

        return lhs

    def parse_addend(self) -> Expr:
        """addend := multicand ( "*" addend )?"""
        lhs = self.parse_multicand()
        self.skip_whitespace()

        if self.match("*"):
            return MultExpr(lhs, self.parse_addend())

        return lhs

    def parse_multicand(self) -> Expr:
        """multicand := inner ( "(" expr ")" )*"""
        expr = self.parse_inner()
        self.skip_whitespace()

        while self.match("("):
            arg = self.parse_expr()
            self.skip_whitespace()
            self.expect(")")
            expr = CallExpr(expr, arg)
            self.skip_whitespace()

        return expr

    # ========================================================================
    # Primary Expressions
    # ========================================================================

    def parse_inner(self) -> Expr:
        self.skip_whitespace()
        ch = self.peek()

        if ch == "-" or ch in DIGITS:
            return self.parse_number()

        if ch == "(":
            self.advance()
            expr = self.parse_expr()
            self.skip_whitespace()
            self.expect(")")
            return expr

        if ch in LETTERS:
            return VarExpr(self.parse_identifier())

        if ch == "_":
            return self.parse_keyword_expr()

        self.error(f"unexpected {self._describe()}")

    def parse_number(self) -> NumExpr:
        """number := "-"? digit+, rejected once it would exceed MAX_INT"""
        negative = self.match("-")

        if negative and not self.check(DIGITS):
            self.error(f"expected digit after '-', got {self._describe()}", InvalidInputError)

        n = 0
        while self.check(DIGITS):
            digit = int(self.peek())

            if n > (MAX_INT - digit) // 10:
                self.error("integer literal overflows", IntegerOverflowError)

            self.advance()
            n = 10 * n + digit

        return NumExpr(-n if negative else n)

    def parse_identifier(self) -> str:
        return self.take_while(LETTERS)

    def parse_binding_name(self, what: str) -> str:
        self.skip_whitespace()
        name = self.parse_identifier()

        if not name:
            self.error(f"expected {what} name, got {self._describe()}")

        return name

    def parse_keyword(self) -> str:
        """Read a keyword run (letters and underscores)"""
        return self.take_while(KEYWORD_CHARS)

    def expect_keyword(self, keyword: str) -> None:
        self.skip_whitespace()
        found = self.parse_keyword()

        if found != keyword:
            self.error(f"expected '{keyword}', got {found!r}" if found else
                       f"expected '{keyword}', got {self._describe()}")

    # ========================================================================
    # Keyword Expressions
    # ========================================================================

    def parse_keyword_expr(self) -> Expr:
        self.expect("_")
        keyword = self.parse_keyword()

        handler = self._KEYWORDS.get(keyword)
        if handler is None:
            self.error(f"unknown keyword '_{keyword}'")

        return handler(self)

    def parse_let(self) -> LetExpr:
        """_let name = expr _in expr"""
        name = self.parse_binding_name("variable")
        self.skip_whitespace()
        self.expect("=")
        rhs = self.parse_expr()
        self.expect_keyword("_in")
        body = self.parse_expr()

        return LetExpr(name, rhs, body)

    def parse_if(self) -> IfExpr:
        """_if expr _then expr _else expr"""
        condition = self.parse_expr()
        self.expect_keyword("_then")
        then_expr = self.parse_expr()
        self.expect_keyword("_else")
        else_expr = self.parse_expr()

        return IfExpr(condition, then_expr, else_expr)

    def parse_fun(self) -> FunExpr:
        """_fun ( name ) expr"""
        self.skip_whitespace()
        self.expect("(")
        param = self.parse_binding_name("parameter")
        self.skip_whitespace()
        self.expect(")")
        body = self.parse_expr()

        return FunExpr(param, body)

    def parse_true(self) -> BoolExpr:
        return BoolExpr(True)

    def parse_false(self) -> BoolExpr:
        return BoolExpr(False)

    _KEYWORDS: dict[str, Callable[['Parser'], Expr]] = {
        "let": parse_let,
        "true": parse_true,
        "false": parse_false,
        "if": parse_if,
        "fun": parse_fun,
    }


def parse(source: str) -> Expr:
    """Parse source text into an expression tree."""
    return Parser(source).parse()


def parse_stream(stream: TextIO) -> Expr:
    """Read stream to the end and parse its contents as one expression."""
    return parse(stream.read())
