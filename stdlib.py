"""
fzbz Standard Library
Host functions injected into the root environment before evaluation
"""

import sys
from typing import Callable, Dict, Optional, TextIO

from environment import Environment
from values import NIL, Value, make_function


# ============================================================================
# PRINT FUNCTIONS
# ============================================================================

def fzbz_puts(value: Value, stdout: Optional[TextIO] = None) -> Value:
  """Print a value followed by a newline; returns nil"""
  out = stdout if stdout is not None else sys.stdout
  out.write(value.to_display_string() + "\n")
  return NIL


def make_puts(stdout: Optional[TextIO] = None) -> Value:
  """Bind `puts` to an output stream (None means sys.stdout at call time)"""
  return make_function(lambda value: fzbz_puts(value, stdout), "puts")


# ============================================================================
# BUILTIN REGISTRY
# ============================================================================

BUILTINS: Dict[str, Callable[[Optional[TextIO]], Value]] = {
    'puts': make_puts,
}


def create_builtin_env(stdout: Optional[TextIO] = None) -> Environment:
  """Create the root environment holding every builtin"""
  env = Environment()
  for name, factory in BUILTINS.items():
    env.bind(name, factory(stdout))
  return env
