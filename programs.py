"""
Demonstration programs for the Letfun driver
Each entry builds a fresh expression tree and records what it should produce
"""

from typing import Callable, Dict, List, Optional

from expressions import (
    Expression,
    add,
    assign,
    bool_const,
    call,
    div,
    equal,
    function,
    if_branch,
    int_const,
    let,
    seq,
    sub,
    var,
)


# ============================================================================
# PROGRAM BUILDERS
# ============================================================================

def p1() -> Expression:
  """474"""
  return int_const(474)


def p2() -> Expression:
  """(400 + 74) / 3"""
  return div(add(int_const(400), int_const(74)), int_const(3))


def p3() -> Expression:
  """((400 + 74) / 3) == 158"""
  return equal(p2(), int_const(158))


def p4() -> Expression:
  """if (((400 + 74) / 3) == 158) then 474 else 474 / 0"""
  return if_branch(
      p3(),
      int_const(474),
      div(int_const(474), int_const(0))
  )


def p5() -> Expression:
  """
  let bot = 3 in
    (let bot = 2 in bot)
    +
    (if (bot == 0) then 474 / 0 else (400 + 74) / bot)
  """
  return let(
      "bot", int_const(3),
      add(
          let("bot", int_const(2), var("bot")),
          if_branch(
              equal(var("bot"), int_const(0)),
              div(int_const(474), int_const(0)),
              div(add(int_const(400), int_const(74)), var("bot"))
          )
      )
  )


def p6() -> Expression:
  """
  function f(top, bot) = if (bot == 0) then 0 else top / bot

  let bot = 3 in
    (let bot = 2 in bot)
    +
    (f(400 + 74, bot) + f(470 + 4, 0))
  """
  return function(
      "f", ["top", "bot"],
      if_branch(
          equal(var("bot"), int_const(0)),
          int_const(0),
          div(var("top"), var("bot"))
      ),
      let(
          "bot", int_const(3),
          add(
              let("bot", int_const(2), var("bot")),
              add(
                  call("f", add(int_const(400), int_const(74)), var("bot")),
                  call("f", add(int_const(470), int_const(4)), int_const(0))
              )
          )
      )
  )


def countdown(start: int = 5) -> Expression:
  """function f(n) = if n == 0 then 0 else f(n - 1) in f(start)"""
  return function(
      "f", "n",
      if_branch(
          equal(var("n"), int_const(0)),
          int_const(0),
          call("f", sub(var("n"), int_const(1)))
      ),
      call("f", int_const(start))
  )


def counter() -> Expression:
  """
  let count = 0 in
    function bump(by) = count := count + by in
      bump(1); bump(2); bump(3)
  """
  return let(
      "count", int_const(0),
      function(
          "bump", "by",
          assign("count", add(var("count"), var("by"))),
          seq(call("bump", int_const(1)), seq(call("bump", int_const(2)), call("bump", int_const(3))))
      )
  )


def lexical() -> Expression:
  """
  let x = 1 in
    function get(unused) = x in
      let x = 2 in get(true)
  """
  return let(
      "x", int_const(1),
      function(
          "get", "unused",
          var("x"),
          let("x", int_const(2), call("get", bool_const(True)))
      )
  )


def div_by_zero() -> Expression:
  """let d = 0 in 474 / d"""
  return let("d", int_const(0), div(int_const(474), var("d")))


# ============================================================================
# PROGRAM REGISTRY
# ============================================================================

def make_program(name: str, builder: Callable[[], Expression], expected: Optional[str] = None,
                 error: Optional[str] = None) -> Dict:
  """Create a registry entry; expected is the displayed result, error the raised error kind"""
  doc = (builder.__doc__ or "").strip()
  return {
      'name': name,
      'builder': builder,
      'description': " ".join(doc.split()),
      'expected': expected,
      'error': error,
  }


PROGRAMS: Dict[str, Dict] = {
    "p1": make_program("p1", p1, "INT:474"),
    "p2": make_program("p2", p2, "INT:158"),
    "p3": make_program("p3", p3, "BOOL:true"),
    "p4": make_program("p4", p4, "INT:474"),
    "p5": make_program("p5", p5, "INT:160"),
    "p6": make_program("p6", p6, "INT:160"),
    "countdown": make_program("countdown", countdown, "INT:0"),
    "counter": make_program("counter", counter, "INT:6"),
    "lexical": make_program("lexical", lexical, "INT:1"),
    "div-by-zero": make_program("div-by-zero", div_by_zero, error="DivisionByZero"),
}


def get_program(name: str) -> Dict:
  """Get a registered program by name"""
  if name in PROGRAMS:
    return PROGRAMS[name]
  else:
    raise KeyError(f"Unknown program: {name}")


def list_programs() -> List[str]:
  """List all registered program names"""
  return list(PROGRAMS.keys())
