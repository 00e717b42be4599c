"""
Letfun - Main Entry Point
Demonstration driver: builds the registered example programs and evaluates them
"""

import sys
import argparse
from typing import List, Optional

from error_handling import LetfunRuntimeError, format_runtime_error
from interpreter import DEFAULT_MAX_DEPTH, create_interpreter, print_trace
from programs import PROGRAMS, get_program, list_programs


VERSION = 'Letfun v0.1.0 (Tree-walking Interpreter)'


def create_arg_parser() -> argparse.ArgumentParser:
  """Create command line argument parser"""
  parser = argparse.ArgumentParser(
      prog='letfun',
      description='Letfun - expression language with lets, assignment and closures',
      formatter_class=argparse.RawDescriptionHelpFormatter,
      epilog="""
Examples:
  %(prog)s                        # Run the f(top,bot) example (p6)
  %(prog)s p5 --trace             # Run p5 and print every evaluation step
  %(prog)s --all                  # Run every registered program
  %(prog)s --list                 # Show the registered programs
  %(prog)s div-by-zero --debug    # Show the environment at the error
        """
  )

  parser.add_argument(
      'program',
      nargs='?',
      default='p6',
      help='Registered program to run (default: p6)'
  )

  parser.add_argument(
      '--all',
      action='store_true',
      help='Run every registered program'
  )

  parser.add_argument(
      '--list',
      action='store_true',
      help='List registered programs and exit'
  )

  parser.add_argument(
      '--trace',
      action='store_true',
      help='Print each evaluation step as PC=<n> -> <node> => <value>'
  )

  parser.add_argument(
      '--max-depth',
      type=int,
      default=DEFAULT_MAX_DEPTH,
      help=f'Maximum evaluation nesting depth, each call nests about two levels (default: {DEFAULT_MAX_DEPTH})'
  )

  parser.add_argument(
      '--debug',
      action='store_true',
      help='Show environment snapshots on errors and tracebacks on crashes'
  )

  parser.add_argument(
      '--version',
      action='version',
      version=VERSION
  )

  return parser


def show_programs() -> None:
  """Print registered programs with their descriptions"""
  print("Registered programs:")
  for name in list_programs():
    program = PROGRAMS[name]
    print(f"  {name:<12} {program['description']}")


def run_program(name: str, trace: bool = False, debug: bool = False,
                max_depth: Optional[int] = DEFAULT_MAX_DEPTH) -> bool:
  """Build and evaluate one registered program, return whether it behaved as registered"""
  try:
    program = get_program(name)
  except KeyError:
    print(f"Error: Unknown program '{name}'")
    print(f"  Hint: Use --list to see the registered programs")
    return False

  interpreter = create_interpreter(observer=print_trace if trace else None, max_depth=max_depth)

  if debug:
    print(f"Running {name}: {program['description']}")

  try:
    result = interpreter.evaluate(program['builder']())
  except LetfunRuntimeError as e:
    print(format_runtime_error(e, debug=debug, program=name))
    # Programs that demonstrate an error succeed when they raise it
    return program['error'] == type(e).__name__
  except Exception as e:
    print(f"Unexpected error while running '{name}': {e}")
    if debug:
      import traceback
      traceback.print_exc()
    return False

  print(f">>> Result: {result} | PC: {interpreter.steps}")

  if program['error'] is not None:
    print(f"Mismatch in '{name}': expected {program['error']}, but the program finished")
    return False
  if program['expected'] is not None and str(result) != program['expected']:
    print(f"Mismatch in '{name}': expected {program['expected']}, got {result}")
    return False
  return True


def main(argv: Optional[List[str]] = None) -> None:
  """Main entry point for Letfun"""
  arg_parser = create_arg_parser()
  args = arg_parser.parse_args(argv)

  if args.list:
    show_programs()
    return

  names = list_programs() if args.all else [args.program]

  failures = 0
  for name in names:
    if len(names) > 1:
      print(f"--- {name} ---")
    if not run_program(name, trace=args.trace, debug=args.debug, max_depth=args.max_depth):
      failures += 1

  if failures:
    sys.exit(1)


if __name__ == "__main__":
  main()
