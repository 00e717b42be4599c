"""
Expression model tests for Letfun
Construction, descriptions and immutability of expression trees
"""

import dataclasses

import pytest
from expressions import (
    BinaryOp,
    BinaryOperator,
    Call,
    FunctionDecl,
    IntLiteral,
    add,
    assign,
    bool_const,
    call,
    div,
    equal,
    function,
    if_branch,
    int_const,
    is_expression,
    let,
    mod,
    mul,
    seq,
    sub,
    var,
)


class TestBuilders:
  """Test the builder functions"""

  def test_literals(self):
    assert int_const(474) == IntLiteral(474)
    assert bool_const(True).value is True

  def test_int_const_rejects_bool(self):
    with pytest.raises(TypeError):
      int_const(True)

  def test_bool_const_rejects_int(self):
    with pytest.raises(TypeError):
      bool_const(1)

  def test_arithmetic_builders(self):
    left, right = int_const(1), int_const(2)
    assert add(left, right).op is BinaryOperator.ADD
    assert sub(left, right).op is BinaryOperator.SUB
    assert mul(left, right).op is BinaryOperator.MUL
    assert div(left, right).op is BinaryOperator.DIV
    assert mod(left, right).op is BinaryOperator.MOD
    assert equal(left, right).op is BinaryOperator.EQUAL

  def test_function_single_param_string(self):
    decl = function("f", "n", var("n"), call("f", int_const(1)))
    assert decl.params == ("n",)

  def test_function_param_list(self):
    decl = function("f", ["top", "bot"], var("top"), int_const(0))
    assert decl.params == ("top", "bot")

  def test_call_positional_and_sequence_arguments(self):
    assert call("f", int_const(1), int_const(2)) == call("f", [int_const(1), int_const(2)])
    assert call("f", int_const(1)).arguments == (int_const(1),)
    assert call("g").arguments == ()

  def test_duplicate_params_rejected(self):
    with pytest.raises(ValueError):
      function("f", ["x", "x"], var("x"), int_const(0))

  def test_params_must_be_tuple(self):
    with pytest.raises(TypeError):
      FunctionDecl("f", ["x"], var("x"), int_const(0))

  def test_call_arguments_must_be_tuple(self):
    with pytest.raises(TypeError):
      Call("f", [int_const(1)])


class TestDescriptions:
  """Test the trace descriptions of each variant"""

  def test_literal_descriptions(self):
    assert str(int_const(474)) == "INT_CONST:474"
    assert str(bool_const(False)) == "BOOL_CONST:false"

  def test_operator_descriptions(self):
    one = int_const(1)
    assert str(add(one, one)) == "BIN_OP:PLUS"
    assert str(sub(one, one)) == "BIN_OP:MINUS"
    assert str(mul(one, one)) == "BIN_OP:TIMES"
    assert str(div(one, one)) == "BIN_OP:DIV"
    assert str(mod(one, one)) == "BIN_OP:MOD"
    assert str(equal(one, one)) == "COMP:EQ"

  def test_binding_descriptions(self):
    one = int_const(1)
    assert str(var("bot")) == "VARIABLE:bot"
    assert str(assign("x", one)) == "ASSIGN:x"
    assert str(let("bot", one, one)) == "LET:bot"
    assert str(seq(one, one)) == "SEQ"
    assert str(if_branch(bool_const(True), one, one)) == "IF"
    assert str(function("f", "n", one, one)) == "FUNC_DECLARATION:f"
    assert str(call("f", one)) == "FUNC_CALL:f"


class TestImmutability:
  """Expression trees cannot be changed after construction"""

  def test_nodes_are_frozen(self):
    node = add(int_const(1), int_const(2))
    with pytest.raises(dataclasses.FrozenInstanceError):
      node.left = int_const(5)

  def test_structural_equality_and_hashing(self):
    first = let("x", int_const(1), var("x"))
    second = let("x", int_const(1), var("x"))
    assert first == second
    assert hash(first) == hash(second)

  def test_is_expression(self):
    assert is_expression(BinaryOp(BinaryOperator.ADD, int_const(1), int_const(2)))
    assert not is_expression(42)
    assert not is_expression("x")
