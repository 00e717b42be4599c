"""
Runtime error handling for the Letfun interpreter
Every evaluation failure is a LetfunRuntimeError and aborts the whole run
"""

from typing import Dict, Optional, Any


# ============================================================================
# DATA STRUCTURES (Immutable Dictionaries)
# ============================================================================

def make_error_report(
    kind: str,
    message: str,
    env_snapshot: Optional[Dict[str, Any]] = None,
    program: Optional[str] = None
) -> Dict:
    """Create an immutable error report structure"""
    return {
        'kind': kind,
        'message': message,
        'env_snapshot': env_snapshot or {},
        'program': program,
    }


def format_error_report(report: Dict, debug: bool = False, max_bindings: int = 10) -> str:
    """Format error report as string"""
    banner = "=" * 70
    where = f" in '{report['program']}'" if report['program'] else ""
    error_msg = f"{banner}\n"
    error_msg += f"Runtime Error{where}\n"
    error_msg += f"{banner}\n"
    error_msg += f"\n{report['kind']}: {report['message']}\n"

    if debug and report['env_snapshot']:
        error_msg += "\nEnvironment at error:\n"
        bindings = list(report['env_snapshot'].items())
        for name, value in bindings[:max_bindings]:
            val_str = str(value).replace('\n', ' ')[:60]
            error_msg += f"  {name} = {val_str}\n"
        if len(bindings) > max_bindings:
            error_msg += f"  ... and {len(bindings) - max_bindings} more bindings\n"

    error_msg += f"\n{banner}\n"
    return error_msg


# ============================================================================
# EXCEPTION CLASSES
# ============================================================================

class LetfunRuntimeError(Exception):
    """Base class for every error raised while evaluating a program"""

    def __init__(self, message: str, env_snapshot: Optional[Dict[str, Any]] = None):
        self.message = message
        self.env_snapshot = env_snapshot
        super().__init__(message)


class UnboundVariable(LetfunRuntimeError):
    """Lookup or assignment of a name no enclosing scope defines"""

    def __init__(self, name: str, env_snapshot: Optional[Dict[str, Any]] = None):
        self.name = name
        super().__init__(f"Unbound variable: {name}", env_snapshot)


class TypeMismatch(LetfunRuntimeError):
    """Operand kind does not match what the operation expects"""

    def __init__(self, expected: str, found: str, context: Optional[str] = None,
                 env_snapshot: Optional[Dict[str, Any]] = None):
        self.expected = expected
        self.found = found
        self.context = context
        prefix = f"{context} requires" if context else "Expected"
        super().__init__(f"{prefix} {expected}, got {found}", env_snapshot)


class NotCallable(TypeMismatch):
    """Call of a name bound to something other than a function"""

    def __init__(self, name: str, found: str, env_snapshot: Optional[Dict[str, Any]] = None):
        self.name = name
        super().__init__("FUNC", found, f"Call of '{name}'", env_snapshot)


class ArityMismatch(LetfunRuntimeError):
    """Call with a different number of arguments than the function declares"""

    def __init__(self, name: str, expected: int, got: int, env_snapshot: Optional[Dict[str, Any]] = None):
        self.name = name
        self.expected = expected
        self.got = got
        super().__init__(f"{name} requires {expected} arguments, got {got}", env_snapshot)


class DivisionByZero(LetfunRuntimeError):
    """Integer division or remainder with a zero divisor"""

    def __init__(self, operator: str = "Division"):
        self.operator = operator
        super().__init__(f"{operator} by zero")


class StackExhausted(LetfunRuntimeError):
    """Evaluation nested deeper than the interpreter allows"""

    def __init__(self, limit: Optional[int] = None):
        self.limit = limit
        if limit is None:
            message = "Maximum evaluation depth exceeded"
        else:
            message = f"Maximum evaluation depth of {limit} exceeded"
        super().__init__(message)


# ============================================================================
# PURE FUNCTIONS
# ============================================================================

def error_to_report(error: LetfunRuntimeError, program: Optional[str] = None) -> Dict:
    """Convert a runtime error into an error report dict"""
    return make_error_report(
        kind=type(error).__name__,
        message=error.message,
        env_snapshot=error.env_snapshot,
        program=program
    )


def format_runtime_error(error: LetfunRuntimeError, debug: bool = False, program: Optional[str] = None) -> str:
    """Format a runtime error for display by the driver"""
    return format_error_report(error_to_report(error, program), debug=debug)
