"""
Utilities module for the fzbz interpreter
Contains small helpers shared by the evaluator and the CLI
"""

from pathlib import Path
from typing import Union

from error_handling import FzbzDivisionError


# ==================== ARITHMETIC UTILITIES ====================

def truncated_remainder(dividend: int, divisor: int) -> int:
  """
  Remainder of truncated division; the sign follows the dividend

  Args:
    dividend: Left operand of `%`
    divisor: Right operand of `%`

  Returns:
    dividend - divisor * trunc(dividend / divisor)

  Examples:
    truncated_remainder(7, 3) -> 1
    truncated_remainder(-7, 3) -> -1
    truncated_remainder(7, -3) -> 1
  """
  if divisor == 0:
    raise FzbzDivisionError("division by zero")
  remainder = abs(dividend) % abs(divisor)
  return -remainder if dividend < 0 else remainder


# ==================== SOURCE UTILITIES ====================

def read_source(path: Union[str, Path]) -> str:
  """
  Read a program file as text

  Raises OSError when the file cannot be opened and UnicodeDecodeError
  when it is not valid UTF-8.
  """
  with open(path, 'r', encoding='utf-8') as f:
    return f.read()
