"""
Letfun Standard Library
Runtime values and the primitive operators behind BinaryOp
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, Tuple, Union, TYPE_CHECKING
import operator

from error_handling import DivisionByZero
from expressions import BinaryOperator, Expression
from utilities import binary_arithmetic_op, kind_of, operation_error

if TYPE_CHECKING:
  from interpreter import Environment


# ============================================================================
# RUNTIME VALUES
# ============================================================================

@dataclass(frozen=True)
class IntValue:
  value: int
  kind = 'INT'

  def __str__(self) -> str:
    return f"INT:{self.value}"


@dataclass(frozen=True)
class BoolValue:
  value: bool
  kind = 'BOOL'

  def __str__(self) -> str:
    return f"BOOL:{str(self.value).lower()}"


@dataclass(frozen=True)
class FunctionValue:
  """Closure: parameters and body plus the environment of the declaration site

  The captured environment is shared, not copied, so later assignments in
  that scope are visible on the next call.
  """
  name: str
  params: Tuple[str, ...]
  body: Expression
  captured_env: 'Environment' = field(repr=False)
  kind = 'FUNC'

  def __str__(self) -> str:
    return f"FUNC:{self.name}"


Value = Union[IntValue, BoolValue, FunctionValue]


# ============================================================================
# INTEGER DIVISION
# ============================================================================

def truncating_div(x: int, y: int) -> int:
  """Integer quotient rounded toward zero: -7 / 2 == -3"""
  quotient = abs(x) // abs(y)
  return quotient if (x < 0) == (y < 0) else -quotient


def truncating_mod(x: int, y: int) -> int:
  """Remainder matching truncating_div; the sign follows the dividend"""
  return x - y * truncating_div(x, y)


def _check_divisor(name: str) -> Callable[[Value], None]:
  def check(divisor: Value) -> None:
    if divisor.value == 0:
      raise DivisionByZero(name)
  return check


# ============================================================================
# COMPARISON FUNCTIONS
# ============================================================================

def letfun_eq(x: Value, y: Value) -> BoolValue:
  """Equality of two values of the same kind"""
  if kind_of(x) != kind_of(y):
    raise operation_error("Equality", "operands of the same kind", x, y)
  return BoolValue(x == y)


# ============================================================================
# ARITHMETIC FUNCTIONS
# ============================================================================

letfun_add = binary_arithmetic_op(operator.add, "Addition", IntValue)
letfun_sub = binary_arithmetic_op(operator.sub, "Subtraction", IntValue)
letfun_mul = binary_arithmetic_op(operator.mul, "Multiplication", IntValue)
letfun_div = binary_arithmetic_op(truncating_div, "Division", IntValue, _check_divisor("Division"))
letfun_mod = binary_arithmetic_op(truncating_mod, "Modulo", IntValue, _check_divisor("Modulo"))


# ============================================================================
# BUILT-IN OPERATOR REGISTRY
# ============================================================================

BUILTIN_OPERATORS: Dict[BinaryOperator, Callable[[Value, Value], Value]] = {
    BinaryOperator.ADD: letfun_add,
    BinaryOperator.SUB: letfun_sub,
    BinaryOperator.MUL: letfun_mul,
    BinaryOperator.DIV: letfun_div,
    BinaryOperator.MOD: letfun_mod,
    BinaryOperator.EQUAL: letfun_eq,
}


def apply_operator(op: BinaryOperator, left: Value, right: Value) -> Value:
  """Apply a built-in operator to two evaluated operands"""
  if op not in BUILTIN_OPERATORS:
    raise ValueError(f"Unknown operation: {op}")
  return BUILTIN_OPERATORS[op](left, right)
