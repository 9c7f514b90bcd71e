"""
Lexical scope frames for the fzbz interpreter
"""

from typing import Dict, List, Optional

from error_handling import UndefinedVariableError
from values import Value


class Environment:
  """One frame of lexical scope: bindings plus a fixed link to the enclosing frame.

  Inner frames may share an outer frame; binding only ever writes to the frame
  it is called on.
  """

  def __init__(self, outer: Optional['Environment'] = None, bindings: Optional[Dict[str, Value]] = None):
    self._outer = outer
    self.bindings: Dict[str, Value] = dict(bindings or {})

  @property
  def outer(self) -> Optional['Environment']:
    return self._outer

  def lookup(self, name: str) -> Value:
    """Look up a value in the environment chain"""
    env = self
    while env is not None:
      if name in env.bindings:
        return env.bindings[name]
      env = env._outer
    raise UndefinedVariableError(name)

  def bind(self, name: str, value: Value) -> None:
    self.bindings[name] = value

  def extend(self, bindings: Optional[Dict[str, Value]] = None) -> 'Environment':
    """Return a new child frame whose outer is this frame"""
    return Environment(self, bindings)

  def contains(self, name: str) -> bool:
    try:
      self.lookup(name)
    except UndefinedVariableError:
      return False
    return True

  def depth(self) -> int:
    depth, env = 0, self._outer
    while env is not None:
      depth, env = depth + 1, env._outer
    return depth

  def names(self) -> List[str]:
    """All visible names, innermost first, shadowed names listed once"""
    seen: List[str] = []
    env = self
    while env is not None:
      seen.extend(name for name in env.bindings if name not in seen)
      env = env._outer
    return seen

  def __repr__(self) -> str:
    return f"<Environment depth={self.depth()} bindings={sorted(self.bindings)}>"
