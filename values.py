"""
fzbz runtime values
A closed set of tagged values: Nil, Bool, Integer, String, Function
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

from error_handling import FzbzTypeError, InternalLogicError


INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


class ValueType(Enum):
  NIL = "Nil"
  BOOL = "Bool"
  INTEGER = "Integer"
  STRING = "String"
  FUNCTION = "Function"


@dataclass(frozen=True)
class Value:
  """Immutable runtime value; `type` selects which payload `value` holds"""
  type: ValueType
  value: Any = None
  name: str = ""

  # ==================== ACCESSORS ====================

  def as_bool(self) -> bool:
    if self.type is ValueType.BOOL:
      return self.value
    if self.type is ValueType.INTEGER:
      return self.value != 0
    raise FzbzTypeError(f"type error: expected Bool, got {self.type.value}")

  def as_integer(self) -> int:
    if self.type is ValueType.INTEGER:
      return self.value
    raise FzbzTypeError(f"type error: expected Integer, got {self.type.value}")

  def as_string(self) -> str:
    if self.type is ValueType.STRING:
      return self.value
    raise FzbzTypeError(f"type error: expected String, got {self.type.value}")

  def as_function(self) -> Callable[['Value'], 'Value']:
    if self.type is ValueType.FUNCTION:
      return self.value
    raise FzbzTypeError(f"type error: expected Function, got {self.type.value}")

  # ==================== COMPARISON / DISPLAY ====================

  def equals(self, other: 'Value') -> bool:
    """Language-level `==`; only defined between values of one variant"""
    if self.type is not other.type:
      raise FzbzTypeError(
          f"type error: cannot compare {self.type.value} with {other.type.value}")
    if self.type is ValueType.NIL:
      return True
    if self.type is ValueType.FUNCTION:
      raise FzbzTypeError("type error: function values are not comparable")
    return self.value == other.value

  def to_display_string(self) -> str:
    if self.type is ValueType.NIL:
      return "nil"
    if self.type is ValueType.BOOL:
      return "true" if self.value else "false"
    if self.type is ValueType.INTEGER:
      return str(self.value)
    if self.type is ValueType.STRING:
      return self.value
    raise InternalLogicError("invalid internal condition: cannot display a function value")

  def __repr__(self) -> str:
    if self.type is ValueType.FUNCTION:
      return f"<function {self.name or '?'}>"
    if self.type is ValueType.STRING:
      return f"String({self.value!r})"
    if self.type is ValueType.NIL:
      return "Nil"
    return f"{self.type.value}({self.to_display_string()})"


# ============================================================================
# CONSTRUCTORS
# ============================================================================

NIL = Value(ValueType.NIL)
TRUE = Value(ValueType.BOOL, True)
FALSE = Value(ValueType.BOOL, False)


def make_nil() -> Value:
  return NIL


def make_bool(b: bool) -> Value:
  return TRUE if b else FALSE


def make_integer(n: int) -> Value:
  """Create an Integer value, restricted to signed 64-bit"""
  if isinstance(n, bool) or not isinstance(n, int):
    raise InternalLogicError(f"invalid internal condition: {n!r} is not an integer")
  if not INT64_MIN <= n <= INT64_MAX:
    raise InternalLogicError(f"integer out of range: {n}")
  return Value(ValueType.INTEGER, n)


def make_string(s: str) -> Value:
  return Value(ValueType.STRING, s)


def make_function(fn: Callable[[Value], Value], name: str = "") -> Value:
  """Wrap a host callable; the language itself never builds these"""
  return Value(ValueType.FUNCTION, fn, name)
