"""
fzbz Interpreter
Recursive tree-walking evaluation of the collapsed AST
Output happens only through the builtins held by the root environment
"""

import sys
from typing import Optional, TextIO

from environment import Environment
from error_handling import FzbzRuntimeError, InternalLogicError
from parsing import (
    AstNode, CALL, CONDITION, FOR, IDENTIFIER, MULTIPLICATIVE, NUMBER, STRING, TERNARY,
    create_debug_parser, create_parser
)
from stdlib import create_builtin_env
from utilities import truncated_remainder
from values import NIL, Value, make_bool, make_integer, make_string


# ============================================================================
# DISPATCH
# ============================================================================

def eval_ast(ast_node: AstNode, env: Environment, debug: bool = False) -> Value:
  """
  Evaluate an AST node in `env` and return its value.
  Runtime errors leave with the position of the innermost failing node.
  """
  if debug:
    print(f"Evaluating: {ast_node.kind} at {ast_node.line}:{ast_node.column}", file=sys.stderr)

  node_type = ast_node.kind

  try:
    if node_type == TERNARY:
      return eval_ternary(ast_node, env, debug)
    elif node_type == CONDITION:
      return eval_condition(ast_node, env, debug)
    elif node_type == MULTIPLICATIVE:
      return eval_multiplicative(ast_node, env, debug)
    elif node_type == CALL:
      return eval_call(ast_node, env, debug)
    elif node_type == FOR:
      return eval_for(ast_node, env, debug)
    elif node_type == IDENTIFIER:
      return eval_identifier(ast_node, env, debug)
    elif node_type == STRING:
      return eval_string(ast_node, env, debug)
    elif node_type == NUMBER:
      return eval_number(ast_node, env, debug)
    else:
      raise InternalLogicError(f"invalid internal condition: unknown node kind '{node_type}'")
  except FzbzRuntimeError as e:
    raise e.locate(ast_node.line, ast_node.column)


# ============================================================================
# RULES
# ============================================================================

def eval_ternary(ast_node: AstNode, env: Environment, debug: bool = False) -> Value:
  """Evaluate `cond ? a : b`; both branches run, then one result is selected"""
  cond_node, then_node, else_node = ast_node.children
  cond = eval_ast(cond_node, env, debug).as_bool()
  then_val = eval_ast(then_node, env, debug)
  else_val = eval_ast(else_node, env, debug)
  return then_val if cond else else_val


def eval_condition(ast_node: AstNode, env: Environment, debug: bool = False) -> Value:
  """Evaluate `lhs == rhs`"""
  lhs_node, rhs_node = ast_node.children
  lhs = eval_ast(lhs_node, env, debug)
  rhs = eval_ast(rhs_node, env, debug)
  return make_bool(lhs.equals(rhs))


def eval_multiplicative(ast_node: AstNode, env: Environment, debug: bool = False) -> Value:
  """Left fold of `%` over Integer operands"""
  first, *rest = ast_node.children
  acc = eval_ast(first, env, debug).as_integer()
  for operand_node in rest:
    operand = eval_ast(operand_node, env, debug).as_integer()
    acc = truncated_remainder(acc, operand)
  return make_integer(acc)


def eval_call(ast_node: AstNode, env: Environment, debug: bool = False) -> Value:
  """Evaluate function application by juxtaposition"""
  callee_node, arg_node = ast_node.children
  fn = eval_ast(callee_node, env, debug).as_function()
  arg = eval_ast(arg_node, env, debug)
  return fn(arg)


def eval_for(ast_node: AstNode, env: Environment, debug: bool = False) -> Value:
  """Evaluate `for i from a to b body`, one fresh frame per iteration"""
  ident_node, from_node, to_node, body = ast_node.children
  ident = ident_node.text
  start = eval_ast(from_node, env, debug).as_integer()
  stop = eval_ast(to_node, env, debug).as_integer()

  for i in range(start, stop + 1):
    if debug:
      print(f"  {ident} = {i}", file=sys.stderr)
    iteration_env = env.extend({ident: make_integer(i)})
    eval_ast(body, iteration_env, debug)

  return NIL


def eval_identifier(ast_node: AstNode, env: Environment, debug: bool = False) -> Value:
  """Evaluate identifier by looking up in environment"""
  return env.lookup(ast_node.text)


def eval_string(ast_node: AstNode, env: Environment, debug: bool = False) -> Value:
  """Evaluate string literal"""
  return make_string(ast_node.text)


def eval_number(ast_node: AstNode, env: Environment, debug: bool = False) -> Value:
  """Evaluate number literal"""
  if not ast_node.text or not ast_node.text.isdigit():
    raise InternalLogicError(f"invalid internal condition: bad number literal {ast_node.text!r}")
  return make_integer(int(ast_node.text))


# ============================================================================
# ENTRY POINTS
# ============================================================================

def evaluate(ast_node: AstNode, env: Optional[Environment] = None, debug: bool = False) -> Value:
  """Evaluate an AST; without an environment a fresh root with builtins is used"""
  if env is None:
    env = create_builtin_env()
  return eval_ast(ast_node, env, debug)


class Interpreter:
  """Holds the root environment for one program run (or one REPL session)"""

  def __init__(self, stdout: Optional[TextIO] = None, debug: bool = False):
    self.stdout = stdout
    self.debug = debug
    self.global_env = create_builtin_env(stdout)
    self._parser = None

  def run(self, ast_node: AstNode) -> Value:
    return eval_ast(ast_node, self.global_env, self.debug)

  def run_source(self, text: str) -> Value:
    """Parse and run source text; parse failures raise FzbzParseError"""
    if self._parser is None:
      self._parser = create_debug_parser() if self.debug else create_parser()
    return self.run(self._parser.parse_string(text))


# Factory functions for creating interpreters
def create_interpreter(stdout: Optional[TextIO] = None, debug: bool = False) -> Interpreter:
  """Create an fzbz interpreter"""
  return Interpreter(stdout=stdout, debug=debug)


def create_debug_interpreter(stdout: Optional[TextIO] = None) -> Interpreter:
  """Create an fzbz interpreter with debug enabled"""
  return Interpreter(stdout=stdout, debug=True)
