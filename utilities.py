"""
Utilities module for the Letfun interpreter
Contains common helper functions to reduce code duplication
"""

from typing import Any, Callable, Optional

from error_handling import ArityMismatch, TypeMismatch


# ==================== TYPE CHECKING UTILITIES ====================

def kind_of(value: Any) -> str:
  """
  Get the kind tag of a runtime value

  Args:
    value: Runtime value

  Returns:
    'INT', 'BOOL', 'FUNC', or the Python type name for foreign objects
  """
  return getattr(value, 'kind', type(value).__name__)


def is_kind(value: Any, kind: str) -> bool:
  return kind_of(value) == kind


# ==================== ERROR MESSAGE BUILDERS ====================

def type_mismatch_error(context: str, expected: str, actual: Any) -> TypeMismatch:
  """
  Generate type mismatch error

  Args:
    context: What required the value (e.g. "If condition")
    expected: Expected kind
    actual: Actual runtime value

  Returns:
    TypeMismatch with formatted message
  """
  return TypeMismatch(expected, kind_of(actual), context)


def arity_error(func_name: str, expected: int, got: int) -> ArityMismatch:
  """
  Generate arity mismatch error

  Args:
    func_name: Function name
    expected: Expected number of arguments
    got: Actual number of arguments

  Returns:
    ArityMismatch with formatted message
  """
  return ArityMismatch(func_name, expected, got)


def operation_error(op: str, expected: str, left: Any, right: Any) -> TypeMismatch:
  """
  Generate operation error

  Args:
    op: Operation name
    expected: Expected operand kinds, e.g. "INT and INT"
    left: Left operand value
    right: Right operand value

  Returns:
    TypeMismatch with formatted message
  """
  return TypeMismatch(expected, f"{kind_of(left)} and {kind_of(right)}", op)


# ==================== VALIDATION UTILITIES ====================

def require_kind(value: Any, kind: str, context: str) -> None:
  """
  Validate that a value has the expected kind

  Raises:
    TypeMismatch if validation fails
  """
  if not is_kind(value, kind):
    raise type_mismatch_error(context, kind, value)


# ==================== BINARY OPERATION FACTORIES ====================

def binary_arithmetic_op(
  op: Callable[[int, int], int],
  op_name: str,
  make_result: Callable[[int], Any],
  zero_divisor_check: Optional[Callable[[Any], None]] = None
) -> Callable[[Any, Any], Any]:
  """
  Factory for binary integer operations

  Args:
    op: Function on raw ints (e.g., operator.add)
    op_name: Name for error messages
    make_result: Wraps the raw int into a runtime value
    zero_divisor_check: Optional check applied to the right operand

  Returns:
    Function that performs the arithmetic operation on two runtime values

  Examples:
    letfun_sub = binary_arithmetic_op(operator.sub, "Subtraction", IntValue)
    letfun_sub(IntValue(5), IntValue(3)) -> IntValue(2)
  """
  def arithmetic(x: Any, y: Any) -> Any:
    if not (is_kind(x, 'INT') and is_kind(y, 'INT')):
      raise operation_error(op_name, "INT and INT", x, y)
    if zero_divisor_check is not None:
      zero_divisor_check(y)
    return make_result(op(x.value, y.value))

  return arithmetic
