from __future__ import annotations

import io

import pytest

from tests.support.harness import (
    BadInputError,
    InvalidInputError,
    ParseError,
    parse,
)
from msdscript.parser_rd import Parser, parse_stream
from msdscript.tree import (
    AddExpr,
    BoolExpr,
    CallExpr,
    EqExpr,
    FunExpr,
    IfExpr,
    LetExpr,
    MultExpr,
    NumExpr,
    VarExpr,
)

PARSE_CASES = [
    pytest.param("5", NumExpr(5), id="num"),
    pytest.param("  \t 5 \n", NumExpr(5), id="num-surrounding-space"),
    pytest.param("-17", NumExpr(-17), id="num-negative"),
    pytest.param("x", VarExpr("x"), id="var"),
    pytest.param("someLongName", VarExpr("someLongName"), id="var-mixed-case"),
    pytest.param("_true", BoolExpr(True), id="true"),
    pytest.param("_false", BoolExpr(False), id="false"),
    pytest.param("(((1)))", NumExpr(1), id="nested-parens"),
    pytest.param("1+2", AddExpr(NumExpr(1), NumExpr(2)), id="add"),
    pytest.param("1 * 2", MultExpr(NumExpr(1), NumExpr(2)), id="mult"),
    pytest.param("1==2", EqExpr(NumExpr(1), NumExpr(2)), id="eq"),
    pytest.param(
        "1 + 2 + 3",
        AddExpr(NumExpr(1), AddExpr(NumExpr(2), NumExpr(3))),
        id="add-right-assoc",
    ),
    pytest.param(
        "1 * 2 * 3",
        MultExpr(NumExpr(1), MultExpr(NumExpr(2), NumExpr(3))),
        id="mult-right-assoc",
    ),
    pytest.param(
        "1 == 2 == 3",
        EqExpr(NumExpr(1), EqExpr(NumExpr(2), NumExpr(3))),
        id="eq-right-assoc",
    ),
    pytest.param(
        "1 + 2 * 3",
        AddExpr(NumExpr(1), MultExpr(NumExpr(2), NumExpr(3))),
        id="mult-binds-tighter",
    ),
    pytest.param(
        "1 * 2 + 3",
        AddExpr(MultExpr(NumExpr(1), NumExpr(2)), NumExpr(3)),
        id="mult-on-left",
    ),
    pytest.param(
        "1 + 1 == y",
        EqExpr(AddExpr(NumExpr(1), NumExpr(1)), VarExpr("y")),
        id="eq-lowest",
    ),
    pytest.param(
        "(1 + 2) * 3",
        MultExpr(AddExpr(NumExpr(1), NumExpr(2)), NumExpr(3)),
        id="parens-override",
    ),
    pytest.param(
        "_let x = 5 _in x + 1",
        LetExpr("x", NumExpr(5), AddExpr(VarExpr("x"), NumExpr(1))),
        id="let-body-extends-right",
    ),
    pytest.param(
        "_let x=5 _in x",
        LetExpr("x", NumExpr(5), VarExpr("x")),
        id="let-tight",
    ),
    pytest.param(
        "(_let x = 5 _in x) + 1",
        AddExpr(LetExpr("x", NumExpr(5), VarExpr("x")), NumExpr(1)),
        id="let-parenthesized",
    ),
    pytest.param(
        "_let x = _let y = 6 _in y * 2 _in x + 1",
        LetExpr(
            "x",
            LetExpr("y", NumExpr(6), MultExpr(VarExpr("y"), NumExpr(2))),
            AddExpr(VarExpr("x"), NumExpr(1)),
        ),
        id="let-in-rhs",
    ),
    pytest.param(
        "_if 1 == 2 _then _true _else _false",
        IfExpr(EqExpr(NumExpr(1), NumExpr(2)), BoolExpr(True), BoolExpr(False)),
        id="if",
    ),
    pytest.param(
        "_fun (x) x + 1",
        FunExpr("x", AddExpr(VarExpr("x"), NumExpr(1))),
        id="fun",
    ),
    pytest.param(
        "_fun(x)x",
        FunExpr("x", VarExpr("x")),
        id="fun-tight",
    ),
    pytest.param("f(1)", CallExpr(VarExpr("f"), NumExpr(1)), id="call"),
    pytest.param(
        "f(1)(2)",
        CallExpr(CallExpr(VarExpr("f"), NumExpr(1)), NumExpr(2)),
        id="call-left-assoc",
    ),
    pytest.param("f (1)", CallExpr(VarExpr("f"), NumExpr(1)), id="call-space-before-paren"),
    pytest.param(
        "(_fun (x) x * 2)(21)",
        CallExpr(FunExpr("x", MultExpr(VarExpr("x"), NumExpr(2))), NumExpr(21)),
        id="call-fun-literal",
    ),
    pytest.param(
        "2 * f(3)",
        MultExpr(NumExpr(2), CallExpr(VarExpr("f"), NumExpr(3))),
        id="call-binds-tighter-than-mult",
    ),
    pytest.param(
        "_let f = _fun (x) x _in f(1)",
        LetExpr("f", FunExpr("x", VarExpr("x")), CallExpr(VarExpr("f"), NumExpr(1))),
        id="fun-body-stops-at-in",
    ),
    pytest.param(
        "1\n+\n2",
        AddExpr(NumExpr(1), NumExpr(2)),
        id="newlines-are-whitespace",
    ),
]


@pytest.mark.parametrize("source, expected", PARSE_CASES)
def test_parse(source: str, expected: object) -> None:
    assert parse(source) == expected


ERROR_CASES = [
    pytest.param("", BadInputError, id="empty"),
    pytest.param("   ", BadInputError, id="only-space"),
    pytest.param("()", BadInputError, id="empty-parens"),
    pytest.param("(1", BadInputError, id="unclosed-paren"),
    pytest.param("-", InvalidInputError, id="lone-minus"),
    pytest.param(" -   5  ", InvalidInputError, id="minus-then-space"),
    pytest.param("0 + ", BadInputError, id="dangling-plus"),
    pytest.param("0        ++", BadInputError, id="double-plus"),
    pytest.param("*t", BadInputError, id="leading-star"),
    pytest.param("x Y", InvalidInputError, id="trailing-var"),
    pytest.param("x_z", InvalidInputError, id="underscore-in-var"),
    pytest.param("1 2", InvalidInputError, id="trailing-num"),
    pytest.param("1)", InvalidInputError, id="trailing-paren"),
    pytest.param("1 = 2", BadInputError, id="single-equals"),
    pytest.param("_leet x = 5 _in 1", BadInputError, id="unknown-keyword"),
    pytest.param("_let x 5 _in 1", BadInputError, id="let-missing-equals"),
    pytest.param("_let x = 5 _on 1", BadInputError, id="let-wrong-in"),
    pytest.param("_let = 5 _in 1", BadInputError, id="let-missing-name"),
    pytest.param("_let x = 5", BadInputError, id="let-missing-body"),
    pytest.param("_if _true _then 1", BadInputError, id="if-missing-else"),
    pytest.param("_if _true _else 1 _then 2", BadInputError, id="if-clauses-swapped"),
    pytest.param("_fun x x", BadInputError, id="fun-missing-parens"),
    pytest.param("_fun () 1", BadInputError, id="fun-missing-param"),
    pytest.param("_fun (x 1", BadInputError, id="fun-unclosed-param"),
    pytest.param("f(1", BadInputError, id="call-unclosed"),
    pytest.param("@", BadInputError, id="stray-char"),
]


@pytest.mark.parametrize("source, expected_exc", ERROR_CASES)
def test_parse_errors(source: str, expected_exc: type) -> None:
    with pytest.raises(expected_exc):
        parse(source)


def test_parse_error_classes_share_base() -> None:
    for exc_type in (BadInputError, InvalidInputError):
        assert issubclass(exc_type, ParseError)


def test_parse_error_reports_position() -> None:
    with pytest.raises(ParseError) as exc_info:
        parse("1 +\n  *")

    err = exc_info.value
    assert err.line == 2
    assert err.column == 3
    assert "line 2, col 3" in str(err)


def test_trailing_input_position_points_at_leftover() -> None:
    with pytest.raises(InvalidInputError) as exc_info:
        parse("x Y")

    assert exc_info.value.column == 3


def test_parse_stream_reads_to_end() -> None:
    stream = io.StringIO("_let x = 2\n_in x * x\n")
    assert parse_stream(stream) == LetExpr(
        "x", NumExpr(2), MultExpr(VarExpr("x"), VarExpr("x"))
    )


def test_parser_tracks_columns_across_lines() -> None:
    parser = Parser("a\nbc")
    for _ in range(3):
        parser.advance()

    assert (parser.line, parser.column) == (2, 2)
    assert parser.peek() == "c"
