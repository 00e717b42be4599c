"""
Letfun Interpreter
Tree-walking evaluator over immutable expression trees
State lives in environments (bindings) and the execution context (step counter, depth)
"""

import sys
from typing import Any, Callable, Dict, List, Optional, Tuple

from error_handling import LetfunRuntimeError, NotCallable, StackExhausted, UnboundVariable
from expressions import (
    BinaryOp,
    BoolLiteral,
    Call,
    Expression,
    FunctionDecl,
    If,
    IntLiteral,
    Let,
    Seq,
    VarRead,
    VarWrite,
    is_expression,
)
from stdlib import (
    BoolValue,
    FunctionValue,
    IntValue,
    Value,
    apply_operator,
)
from utilities import arity_error, kind_of, require_kind


Observer = Callable[[int, str, Value], None]

DEFAULT_MAX_DEPTH = 3000

# Each nesting level costs two Python frames
FRAMES_PER_LEVEL = 2
RECURSION_HEADROOM = 500


# ============================================================================
# ENVIRONMENT
# ============================================================================

class Environment:
  """One scope frame: its own bindings plus a link to the enclosing frame"""

  def __init__(self, parent: Optional['Environment'] = None, bindings: Optional[Dict[str, Value]] = None):
    self.parent = parent
    self.bindings: Dict[str, Value] = dict(bindings or {})

  def define(self, name: str, value: Value) -> None:
    """Bind name in this frame, shadowing any outer binding"""
    self.bindings[name] = value

  def lookup(self, name: str) -> Value:
    """Look up a value in the environment chain"""
    frame = self._frame_of(name)
    if frame is None:
      raise UnboundVariable(name, self.snapshot())
    return frame.bindings[name]

  def assign(self, name: str, value: Value) -> None:
    """Overwrite the binding in the frame where name was defined"""
    frame = self._frame_of(name)
    if frame is None:
      raise UnboundVariable(name, self.snapshot())
    frame.bindings[name] = value

  def is_defined(self, name: str) -> bool:
    return self._frame_of(name) is not None

  def child_scope(self) -> 'Environment':
    return Environment(parent=self)

  def snapshot(self) -> Dict[str, Value]:
    """Every visible binding, innermost frame wins"""
    frames: List[Environment] = []
    env: Optional[Environment] = self
    while env is not None:
      frames.append(env)
      env = env.parent

    visible: Dict[str, Value] = {}
    for frame in reversed(frames):
      visible.update(frame.bindings)
    return visible

  @property
  def depth(self) -> int:
    """Number of enclosing frames"""
    count = 0
    env = self.parent
    while env is not None:
      count += 1
      env = env.parent
    return count

  def _frame_of(self, name: str) -> Optional['Environment']:
    env: Optional[Environment] = self
    while env is not None:
      if name in env.bindings:
        return env
      env = env.parent
    return None

  def __repr__(self) -> str:
    return f"Environment(names={list(self.bindings)}, depth={self.depth})"


def make_runtime_env(parent: Optional[Environment] = None, bindings: Optional[Dict[str, Value]] = None) -> Environment:
  """Create a runtime environment"""
  return Environment(parent, bindings)


# ============================================================================
# EXECUTION CONTEXT
# ============================================================================

def make_execution_context(observer: Optional[Observer] = None,
                           max_depth: Optional[int] = DEFAULT_MAX_DEPTH) -> Dict:
  """Create the mutable per-run state threaded through evaluation"""
  return {
      'step': 0,
      'depth': 0,
      'max_depth': max_depth,
      'observer': observer,
  }


def format_trace_event(step: int, description: str, value: Value) -> str:
  return f"PC={step} -> {description} => {value}"


def print_trace(step: int, description: str, value: Value) -> None:
  """Observer that prints every evaluation step"""
  print(format_trace_event(step, description, value))


# ============================================================================
# EVALUATION FUNCTIONS
# ============================================================================

def eval_ast(node: Expression, env: Environment, context: Dict) -> Value:
  """
  Evaluate an expression node and return its value.
  Takes the next step index on entry and reports (step, description, value)
  to the observer once the value is known.
  """
  step = context['step']
  context['step'] = step + 1
  context['depth'] += 1

  try:
    max_depth = context['max_depth']
    if max_depth is not None and context['depth'] > max_depth:
      raise StackExhausted(max_depth)

    if isinstance(node, IntLiteral):
      value = eval_int_literal(node, env, context)
    elif isinstance(node, BoolLiteral):
      value = eval_bool_literal(node, env, context)
    elif isinstance(node, BinaryOp):
      value = eval_binary_op(node, env, context)
    elif isinstance(node, If):
      value = eval_if(node, env, context)
    elif isinstance(node, VarRead):
      value = eval_var_read(node, env, context)
    elif isinstance(node, VarWrite):
      value = eval_var_write(node, env, context)
    elif isinstance(node, Let):
      value = eval_let(node, env, context)
    elif isinstance(node, Seq):
      value = eval_seq(node, env, context)
    elif isinstance(node, FunctionDecl):
      value = eval_function_decl(node, env, context)
    elif isinstance(node, Call):
      value = eval_function_call(node, env, context)
    else:
      raise TypeError(f"Unknown expression type: {type(node).__name__}")
  except LetfunRuntimeError as e:
    # Innermost failing node records the scope it failed in
    if e.env_snapshot is None:
      e.env_snapshot = env.snapshot()
    raise
  finally:
    context['depth'] -= 1

  observer = context['observer']
  if observer is not None:
    observer(step, str(node), value)
  return value


def eval_int_literal(node: IntLiteral, env: Environment, context: Dict) -> Value:
  return IntValue(node.value)


def eval_bool_literal(node: BoolLiteral, env: Environment, context: Dict) -> Value:
  return BoolValue(node.value)


def eval_binary_op(node: BinaryOp, env: Environment, context: Dict) -> Value:
  """Evaluate binary operation, both operands strictly and left first"""
  left_val = eval_ast(node.left, env, context)
  right_val = eval_ast(node.right, env, context)
  return apply_operator(node.op, left_val, right_val)


def eval_if(node: If, env: Environment, context: Dict) -> Value:
  """Evaluate the condition, then exactly one branch"""
  cond_val = eval_ast(node.condition, env, context)
  require_kind(cond_val, 'BOOL', "If condition")

  if cond_val.value:
    return eval_ast(node.then_branch, env, context)
  return eval_ast(node.else_branch, env, context)


def eval_var_read(node: VarRead, env: Environment, context: Dict) -> Value:
  return env.lookup(node.name)


def eval_var_write(node: VarWrite, env: Environment, context: Dict) -> Value:
  """Assign to the frame that defines the name and yield the new value"""
  value = eval_ast(node.value, env, context)
  env.assign(node.name, value)
  return value


def eval_let(node: Let, env: Environment, context: Dict) -> Value:
  value = eval_ast(node.bound_value, env, context)

  body_env = env.child_scope()
  body_env.define(node.name, value)
  return eval_ast(node.body, body_env, context)


def eval_seq(node: Seq, env: Environment, context: Dict) -> Value:
  eval_ast(node.first, env, context)
  return eval_ast(node.second, env, context)


def eval_function_decl(node: FunctionDecl, env: Environment, context: Dict) -> Value:
  """Create a closure over a new scope that also binds the function's own name"""
  scope = env.child_scope()
  func_value = FunctionValue(node.name, node.params, node.body, scope)
  scope.define(node.name, func_value)
  return eval_ast(node.rest, scope, context)


def eval_function_call(node: Call, env: Environment, context: Dict) -> Value:
  """Evaluate function application with lexical scoping"""
  func_value = env.lookup(node.function_name)
  if not isinstance(func_value, FunctionValue):
    raise NotCallable(node.function_name, kind_of(func_value), env.snapshot())

  if len(node.arguments) != len(func_value.params):
    raise arity_error(node.function_name, len(func_value.params), len(node.arguments))

  # Arguments see the caller's scope, the body sees the declaration's scope
  arg_values = []
  for arg in node.arguments:
    arg_values.append(eval_ast(arg, env, context))

  call_env = func_value.captured_env.child_scope()
  for param, arg_val in zip(func_value.params, arg_values):
    call_env.define(param, arg_val)

  return eval_ast(func_value.body, call_env, context)


# ============================================================================
# PROGRAM EVALUATION
# ============================================================================

def run_in_context(expr: Expression, env: Optional[Environment], context: Dict) -> Value:
  """Evaluate a whole program with an already prepared execution context"""
  if not is_expression(expr):
    raise TypeError(f"Cannot evaluate {type(expr).__name__}, expected an expression")
  if env is None:
    env = make_runtime_env()

  old_limit = sys.getrecursionlimit()
  max_depth = context['max_depth']
  if max_depth is not None:
    sys.setrecursionlimit(max(old_limit, FRAMES_PER_LEVEL * max_depth + RECURSION_HEADROOM))

  try:
    return eval_ast(expr, env, context)
  except RecursionError:
    raise StackExhausted() from None
  finally:
    sys.setrecursionlimit(old_limit)


def eval_program(expr: Expression, env: Optional[Environment] = None, observer: Optional[Observer] = None,
                 max_depth: Optional[int] = DEFAULT_MAX_DEPTH) -> Tuple[Value, int]:
  """
  Evaluate a program and return (result_value, steps).
  Every call is an independent run with its own step counter.
  """
  context = make_execution_context(observer, max_depth)
  value = run_in_context(expr, env, context)
  return value, context['step']


def evaluate(expr: Expression, env: Optional[Environment] = None, observer: Optional[Observer] = None,
             max_depth: Optional[int] = DEFAULT_MAX_DEPTH) -> Value:
  """Evaluate a program and return only its value"""
  value, _ = eval_program(expr, env, observer, max_depth)
  return value


# ============================================================================
# FACTORY FUNCTIONS
# ============================================================================

def create_interpreter(observer: Optional[Observer] = None, debug: bool = False,
                       max_depth: Optional[int] = DEFAULT_MAX_DEPTH):
  """Factory function returning an interpreter"""
  if observer is None and debug:
    observer = print_trace

  state: Dict[str, Any] = {'context': make_execution_context(observer, max_depth)}

  def interpret(expr: Expression, env: Optional[Environment] = None) -> Value:
    state['context'] = make_execution_context(observer, max_depth)
    return run_in_context(expr, env, state['context'])

  return type('Interpreter', (), {
      'evaluate': lambda self, expr, env=None: interpret(expr, env),
      'steps': property(lambda self: state['context']['step']),
      'observer': staticmethod(observer) if observer is not None else None,
      'debug': debug,
      'max_depth': max_depth,
  })()


def create_debug_interpreter():
  """Factory function returning a debug interpreter"""
  return create_interpreter(debug=True)
