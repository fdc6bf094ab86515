from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar, Optional
from typing_extensions import TypeAlias

if TYPE_CHECKING:
    from .tree import BoolExpr, Expr, FunExpr, NumExpr

# ---------- Exceptions ----------

class MsdRuntimeError(Exception):
    """Base class for failures raised while evaluating an expression."""

class UnboundVariableError(MsdRuntimeError):
    def __init__(self, name: str):
        super().__init__(f"free variable: {name}")
        self.name = name

class InvalidOperandError(MsdRuntimeError):
    def __init__(self, recv: 'Value', op: str, operand: Optional['Value'] = None):
        if operand is None:
            message = f"invalid type for {type(recv).__name__}.{op}()"
        else:
            message = f"invalid type for {type(recv).__name__}.{op}(): {type(operand).__name__}"

        super().__init__(message)
        self.receiver = recv
        self.op = op
        self.operand = operand

# ---------- Value Model ----------

@dataclass(frozen=True)
class NumVal:
    value: int

    def to_expr(self) -> 'NumExpr':
        from .tree import NumExpr
        return NumExpr(self.value)

    def add_to(self, rhs: 'Value') -> 'NumVal':
        if not isinstance(rhs, NumVal):
            raise InvalidOperandError(self, "add_to", rhs)

        return NumVal(self.value + rhs.value)

    def mult_with(self, rhs: 'Value') -> 'NumVal':
        if not isinstance(rhs, NumVal):
            raise InvalidOperandError(self, "mult_with", rhs)

        return NumVal(self.value * rhs.value)

    def is_true(self) -> bool:
        raise InvalidOperandError(self, "is_true")

    def call(self, arg: 'Value') -> 'Value':
        raise InvalidOperandError(self, "call", arg)

    def to_string(self) -> str:
        return str(self.value)

    def __repr__(self) -> str:
        return self.to_string()

@dataclass(frozen=True)
class BoolVal:
    value: bool

    def to_expr(self) -> 'BoolExpr':
        from .tree import BoolExpr
        return BoolExpr(self.value)

    def add_to(self, rhs: 'Value') -> 'Value':
        raise InvalidOperandError(self, "add_to", rhs)

    def mult_with(self, rhs: 'Value') -> 'Value':
        raise InvalidOperandError(self, "mult_with", rhs)

    def is_true(self) -> bool:
        return self.value

    def call(self, arg: 'Value') -> 'Value':
        raise InvalidOperandError(self, "call", arg)

    def to_string(self) -> str:
        return "_true" if self.value else "_false"

    def __repr__(self) -> str:
        return self.to_string()

@dataclass(frozen=True)
class FunVal:
    """A closure: parameter name, body and the environment it was built in.

    Two closures are equal when parameter and body match; the captured
    environment does not take part in comparison.
    """
    param: str
    body: 'Expr'
    env: 'Env' = field(default_factory=lambda: Env.empty, compare=False)

    def to_expr(self) -> 'FunExpr':
        from .tree import FunExpr
        return FunExpr(self.param, self.body)

    def add_to(self, rhs: 'Value') -> 'Value':
        raise InvalidOperandError(self, "add_to", rhs)

    def mult_with(self, rhs: 'Value') -> 'Value':
        raise InvalidOperandError(self, "mult_with", rhs)

    def is_true(self) -> bool:
        raise InvalidOperandError(self, "is_true")

    def call(self, arg: 'Value') -> 'Value':
        from .evaluator import eval_node  # local import to avoid cycle
        return eval_node(self.body, ExtendedEnv(self.param, arg, self.env))

    def to_string(self) -> str:
        return "[function]"

    def __repr__(self) -> str:
        return self.to_string()

Value: TypeAlias = NumVal | BoolVal | FunVal

# ---------- Lexical Environment ----------

class Env:
    """Persistent association list from names to values.

    Environments are never mutated; extending one returns a new link whose
    parent is the old environment, so a closure or an outer scope keeps
    seeing exactly the bindings it was given.
    """
    empty: ClassVar['Env']

    def lookup(self, name: str) -> Value:
        raise NotImplementedError

    def extend(self, name: str, value: Value) -> 'ExtendedEnv':
        return ExtendedEnv(name, value, self)

class EmptyEnv(Env):
    def lookup(self, name: str) -> Value:
        raise UnboundVariableError(name)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, EmptyEnv)

    def __hash__(self) -> int:
        return hash(EmptyEnv)

    def __repr__(self) -> str:
        return "EmptyEnv()"

class ExtendedEnv(Env):
    __slots__ = ('name', 'value', 'parent')

    def __init__(self, name: str, value: Value, parent: Env):
        self.name = name
        self.value = value
        self.parent = parent

    def lookup(self, name: str) -> Value:
        env: Env = self

        while isinstance(env, ExtendedEnv):
            if env.name == name:
                return env.value
            env = env.parent

        return env.lookup(name)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ExtendedEnv):
            return False

        return (self.name == other.name
                and self.value == other.value
                and self.parent == other.parent)

    def __hash__(self) -> int:
        return hash((self.name, self.value, self.parent))

    def __repr__(self) -> str:
        return f"ExtendedEnv({self.name!r}, {self.value!r}, {self.parent!r})"

Env.empty = EmptyEnv()
