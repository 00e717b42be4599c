"""
Environment tests for Letfun
Scope chains, shadowing and assignment to the defining frame
"""

import pytest
from error_handling import UnboundVariable
from interpreter import Environment, make_runtime_env
from stdlib import BoolValue, IntValue


class TestDefineAndLookup:
  """Test define and lookup along the chain"""

  def test_lookup_in_current_frame(self, env):
    env.define("x", IntValue(1))
    assert env.lookup("x") == IntValue(1)

  def test_lookup_walks_to_parent(self, env):
    env.define("x", IntValue(1))
    child = env.child_scope().child_scope()
    assert child.lookup("x") == IntValue(1)

  def test_unbound_lookup(self, env):
    with pytest.raises(UnboundVariable) as excinfo:
      env.child_scope().lookup("z")
    assert excinfo.value.name == "z"

  def test_define_shadows_without_touching_parent(self, env):
    env.define("x", IntValue(1))
    child = env.child_scope()
    child.define("x", IntValue(2))
    assert child.lookup("x") == IntValue(2)
    assert env.lookup("x") == IntValue(1)

  def test_parent_does_not_see_child_bindings(self, env):
    env.child_scope().define("y", IntValue(3))
    assert not env.is_defined("y")


class TestAssign:
  """Assignment mutates the frame where the name was bound"""

  def test_assign_updates_defining_frame(self, env):
    env.define("x", IntValue(1))
    child = env.child_scope()
    child.assign("x", IntValue(5))
    assert env.lookup("x") == IntValue(5)
    assert "x" not in child.bindings

  def test_assign_targets_innermost_binding(self, env):
    env.define("x", IntValue(1))
    child = env.child_scope()
    child.define("x", IntValue(2))
    child.assign("x", IntValue(3))
    assert child.lookup("x") == IntValue(3)
    assert env.lookup("x") == IntValue(1)

  def test_assign_undeclared_is_error(self, env):
    with pytest.raises(UnboundVariable):
      env.assign("missing", IntValue(0))
    assert not env.is_defined("missing")


class TestIntrospection:
  """Test snapshot and depth"""

  def test_snapshot_innermost_wins(self, env):
    env.define("x", IntValue(1))
    env.define("flag", BoolValue(True))
    child = env.child_scope()
    child.define("x", IntValue(2))
    assert child.snapshot() == {"x": IntValue(2), "flag": BoolValue(True)}

  def test_depth(self):
    root = make_runtime_env()
    assert root.depth == 0
    assert root.child_scope().child_scope().depth == 2

  def test_initial_bindings_are_copied(self):
    bindings = {"x": IntValue(1)}
    env = Environment(bindings=bindings)
    env.define("y", IntValue(2))
    assert "y" not in bindings

  def test_unbound_error_carries_snapshot(self, env):
    env.define("x", IntValue(1))
    with pytest.raises(UnboundVariable) as excinfo:
      env.lookup("y")
    assert excinfo.value.env_snapshot == {"x": IntValue(1)}
