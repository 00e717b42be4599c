"""
Letfun expression model
Immutable expression trees built programmatically (there is no textual syntax)
"""

from dataclasses import dataclass
from enum import Enum
from typing import Sequence, Tuple, Union


# ============================================================================
# OPERATORS
# ============================================================================

class BinaryOperator(Enum):
    """Binary operators; the value is the tag shown in trace descriptions"""
    ADD = "BIN_OP:PLUS"
    SUB = "BIN_OP:MINUS"
    MUL = "BIN_OP:TIMES"
    DIV = "BIN_OP:DIV"
    MOD = "BIN_OP:MOD"
    EQUAL = "COMP:EQ"


# ============================================================================
# EXPRESSION VARIANTS
# ============================================================================

@dataclass(frozen=True)
class IntLiteral:
    """Integer constant"""
    value: int

    def __str__(self) -> str:
        return f"INT_CONST:{self.value}"


@dataclass(frozen=True)
class BoolLiteral:
    """Boolean constant"""
    value: bool

    def __str__(self) -> str:
        return f"BOOL_CONST:{str(self.value).lower()}"


@dataclass(frozen=True)
class BinaryOp:
    """Strict binary operation, left operand evaluated first"""
    op: BinaryOperator
    left: 'Expression'
    right: 'Expression'

    def __str__(self) -> str:
        return self.op.value


@dataclass(frozen=True)
class If:
    condition: 'Expression'
    then_branch: 'Expression'
    else_branch: 'Expression'

    def __str__(self) -> str:
        return "IF"


@dataclass(frozen=True)
class VarRead:
    name: str

    def __str__(self) -> str:
        return f"VARIABLE:{self.name}"


@dataclass(frozen=True)
class VarWrite:
    """Assignment to an existing binding; evaluates to the assigned value"""
    name: str
    value: 'Expression'

    def __str__(self) -> str:
        return f"ASSIGN:{self.name}"


@dataclass(frozen=True)
class Let:
    """Binding of name to bound_value, visible only inside body"""
    name: str
    bound_value: 'Expression'
    body: 'Expression'

    def __str__(self) -> str:
        return f"LET:{self.name}"


@dataclass(frozen=True)
class Seq:
    """Evaluates first for its effects, then yields second"""
    first: 'Expression'
    second: 'Expression'

    def __str__(self) -> str:
        return "SEQ"


@dataclass(frozen=True)
class FunctionDecl:
    """Function declaration, visible in its own body and in rest"""
    name: str
    params: Tuple[str, ...]
    body: 'Expression'
    rest: 'Expression'

    def __post_init__(self) -> None:
        if not isinstance(self.params, tuple):
            raise TypeError(f"params of '{self.name}' must be a tuple, got {type(self.params).__name__}")
        if len(set(self.params)) != len(self.params):
            raise ValueError(f"Duplicate parameter name in function '{self.name}': {self.params}")

    def __str__(self) -> str:
        return f"FUNC_DECLARATION:{self.name}"


@dataclass(frozen=True)
class Call:
    function_name: str
    arguments: Tuple['Expression', ...]

    def __post_init__(self) -> None:
        if not isinstance(self.arguments, tuple):
            raise TypeError(f"arguments of call to '{self.function_name}' must be a tuple")

    def __str__(self) -> str:
        return f"FUNC_CALL:{self.function_name}"


Expression = Union[IntLiteral, BoolLiteral, BinaryOp, If, VarRead, VarWrite, Let, Seq, FunctionDecl, Call]

EXPRESSION_TYPES = (IntLiteral, BoolLiteral, BinaryOp, If, VarRead, VarWrite, Let, Seq, FunctionDecl, Call)


# ============================================================================
# BUILDERS
# ============================================================================

def int_const(value: int) -> IntLiteral:
    """Create an integer literal"""
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"Integer literal requires int, got {type(value).__name__}")
    return IntLiteral(value)


def bool_const(value: bool) -> BoolLiteral:
    """Create a boolean literal"""
    if not isinstance(value, bool):
        raise TypeError(f"Boolean literal requires bool, got {type(value).__name__}")
    return BoolLiteral(value)


def add(left: Expression, right: Expression) -> BinaryOp:
    return BinaryOp(BinaryOperator.ADD, left, right)


def sub(left: Expression, right: Expression) -> BinaryOp:
    return BinaryOp(BinaryOperator.SUB, left, right)


def mul(left: Expression, right: Expression) -> BinaryOp:
    return BinaryOp(BinaryOperator.MUL, left, right)


def div(left: Expression, right: Expression) -> BinaryOp:
    return BinaryOp(BinaryOperator.DIV, left, right)


def mod(left: Expression, right: Expression) -> BinaryOp:
    return BinaryOp(BinaryOperator.MOD, left, right)


def equal(left: Expression, right: Expression) -> BinaryOp:
    return BinaryOp(BinaryOperator.EQUAL, left, right)


def if_branch(condition: Expression, then_branch: Expression, else_branch: Expression) -> If:
    return If(condition, then_branch, else_branch)


def var(name: str) -> VarRead:
    return VarRead(name)


def assign(name: str, value: Expression) -> VarWrite:
    return VarWrite(name, value)


def let(name: str, bound_value: Expression, body: Expression) -> Let:
    return Let(name, bound_value, body)


def seq(first: Expression, second: Expression) -> Seq:
    return Seq(first, second)


def function(name: str, params: Union[str, Sequence[str]], body: Expression, rest: Expression) -> FunctionDecl:
    """Create a function declaration

    Args:
        name: Function name, bound in both body and rest
        params: A single parameter name or a sequence of names
        body: Function body
        rest: Expression evaluated with the function in scope

    Examples:
        function("f", "n", ...)            # f(n)
        function("f", ["top", "bot"], ...) # f(top, bot)
    """
    if isinstance(params, str):
        params = (params,)
    return FunctionDecl(name, tuple(params), body, rest)


def call(function_name: str, *arguments: Expression) -> Call:
    """Create a call; arguments are given positionally"""
    if len(arguments) == 1 and isinstance(arguments[0], (list, tuple)):
        arguments = tuple(arguments[0])
    return Call(function_name, tuple(arguments))


def is_expression(node) -> bool:
    """Check if node is one of the expression variants"""
    return isinstance(node, EXPRESSION_TYPES)
