"""
Evaluator tests for the fzbz language
"""

import io

import pytest

from error_handling import (
    FzbzDivisionError, FzbzTypeError, InternalLogicError, UndefinedVariableError
)
from interpreter import create_debug_interpreter, create_interpreter, evaluate
from parsing import create_parser
from stdlib import create_builtin_env
from values import FALSE, NIL, TRUE, make_integer, make_string


class TestModulo:
  """Multiplicative expressions fold `%` from the left"""

  def test_simple(self, run_program):
    assert run_program("5 % 3") == (make_integer(2), "")

  def test_left_fold(self, run_program):
    value, _ = run_program("7 % 3 % 2")
    assert value == make_integer(1)

  def test_parenthesized_right_operand(self, run_program):
    value, _ = run_program("7 % (5 % 3)")
    assert value == make_integer(1)

  def test_modulo_by_zero(self, run_program):
    with pytest.raises(FzbzDivisionError):
      run_program("5 % 0")

  def test_string_operand_is_type_error(self, run_program):
    with pytest.raises(FzbzTypeError):
      run_program("'a' % 1")

  def test_right_string_operand_is_type_error(self, run_program):
    with pytest.raises(FzbzTypeError):
      run_program("1 % 'a'")


class TestCondition:
  """`==` compares values of the same variant"""

  @pytest.mark.parametrize("source, expected", [
      ("1==1", TRUE),
      ("1 == 2", FALSE),
      ("'a'=='a'", TRUE),
      ("'a'=='b'", FALSE),
      ("(1==1) == (2==2)", TRUE),
      ("(for i from 1 to 0 i) == (for i from 1 to 0 i)", TRUE),
  ])
  def test_equality(self, run_program, source, expected):
    value, _ = run_program(source)
    assert value == expected

  def test_mixed_variants_raise(self, run_program):
    with pytest.raises(FzbzTypeError):
      run_program("1 == 'a'")

  def test_functions_are_not_comparable(self, run_program):
    with pytest.raises(FzbzTypeError):
      run_program("puts == puts")


class TestTernary:
  """Both branches are evaluated, the condition picks one result"""

  def test_selects_then_branch(self, run_program):
    assert run_program("1==1 ? 'yes' : 'no'") == (make_string("yes"), "")

  def test_selects_else_branch(self, run_program):
    value, _ = run_program("1==2 ? 'yes' : 'no'")
    assert value == make_string("no")

  def test_integer_condition(self, run_program):
    assert run_program("0 ? 'yes' : 'no'")[0] == make_string("no")
    assert run_program("3 ? 'yes' : 'no'")[0] == make_string("yes")

  def test_both_branches_run(self, run_program):
    value, output = run_program("1==1 ? puts 'a' : puts 'b'")
    assert value == NIL
    assert output == "a\nb\n"

  def test_string_condition_is_type_error(self, run_program):
    with pytest.raises(FzbzTypeError):
      run_program("'x' ? 1 : 2")


class TestCalls:
  """Juxtaposition calls a Function value with one argument"""

  def test_puts_returns_nil(self, run_program):
    assert run_program("puts 'hello'") == (NIL, "hello\n")

  @pytest.mark.parametrize("source, output", [
      ("puts 5 % 3", "2\n"),
      ("puts 1 == 1", "true\n"),
      ("puts 1 == 2", "false\n"),
      ("puts for i from 1 to 0 i", "nil\n"),
      ("puts ''", "\n"),
      ("(puts) 'x'", "x\n"),
      ("puts puts 1", "1\nnil\n"),
  ])
  def test_display(self, run_program, source, output):
    assert run_program(source)[1] == output

  def test_undefined_variable(self, run_program):
    with pytest.raises(UndefinedVariableError) as exc_info:
      run_program("puts x")
    assert exc_info.value.name == "x"
    assert exc_info.value.message == "undefined variable 'x'"
    assert (exc_info.value.line, exc_info.value.column) == (1, 6)

  def test_undefined_callee(self, run_program):
    with pytest.raises(UndefinedVariableError):
      run_program("print 1")

  def test_calling_a_non_function(self, run_program):
    with pytest.raises(FzbzTypeError):
      run_program("1 2")

  def test_displaying_a_function(self, run_program):
    with pytest.raises(InternalLogicError):
      run_program("puts puts")


class TestForLoops:
  """Ascending inclusive loops with one frame per iteration"""

  def test_counts_up(self, run_program):
    assert run_program("for i from 1 to 3 puts i") == (NIL, "1\n2\n3\n")

  def test_empty_range(self, run_program):
    assert run_program("for i from 5 to 1 puts i") == (NIL, "")

  def test_single_iteration(self, run_program):
    assert run_program("for i from 7 to 7 puts i")[1] == "7\n"

  def test_nested_shadowing(self, run_program):
    _, output = run_program("for i from 1 to 2 (for i from 10 to 11 puts i)")
    assert output == "10\n11\n10\n11\n"

  def test_inner_loop_leaves_outer_binding_alone(self, run_program):
    source = "for i from 1 to 2 (1 ? (for i from 10 to 11 puts i) : puts i)"
    assert run_program(source)[1] == "10\n11\n1\n10\n11\n2\n"

  def test_loop_variable_not_visible_after_loop(self):
    parser = create_parser()
    interpreter = create_interpreter(stdout=io.StringIO())
    interpreter.run(parser.parse_string("for i from 1 to 2 i"))
    assert not interpreter.global_env.contains("i")

  def test_loop_variable_shadows_builtin(self, run_program):
    with pytest.raises(FzbzTypeError):
      run_program("for puts from 1 to 1 puts 1")

  def test_fizzbuzz(self, run_program):
    source = (
        "for i from 1 to 15\n"
        "  puts (i % 15 == 0 ? 'FizzBuzz' : (i % 3 == 0 ? 'Fizz' : (i % 5 == 0 ? 'Buzz' : i)))\n"
    )
    expected = ["1", "2", "Fizz", "4", "Buzz", "Fizz", "7", "8", "Fizz", "Buzz",
                "11", "Fizz", "13", "14", "FizzBuzz"]
    assert run_program(source)[1].splitlines() == expected


class TestLiterals:
  """Leaves evaluate to their literal values"""

  def test_string(self, run_program):
    assert run_program("'a b'")[0] == make_string("a b")

  def test_number(self, run_program):
    assert run_program("007")[0] == make_integer(7)

  def test_largest_integer(self, run_program):
    assert run_program("9223372036854775807")[0] == make_integer(2 ** 63 - 1)

  def test_string_keeps_tabs(self, run_program):
    assert run_program("puts 'a\tb'")[1] == "a\tb\n"

  def test_number_out_of_range(self, run_program):
    with pytest.raises(InternalLogicError):
      run_program("9223372036854775808")


class TestEntryPoints:
  """evaluate() and the Interpreter facade"""

  def test_evaluate_defaults_to_stdout(self, capsys):
    ast = create_parser().parse_string("puts 'hi'")
    assert evaluate(ast) == NIL
    assert capsys.readouterr().out == "hi\n"

  def test_evaluate_in_given_environment(self):
    env = create_builtin_env().extend({"x": make_integer(10)})
    ast = create_parser().parse_string("x % 4")
    assert evaluate(ast, env) == make_integer(2)

  def test_interpreter_keeps_root_environment(self):
    out = io.StringIO()
    interpreter = create_interpreter(stdout=out)
    interpreter.run_source("puts 1")
    interpreter.run_source("puts 2")
    assert out.getvalue() == "1\n2\n"
    assert interpreter.global_env.contains("puts")

  def test_debug_trace_goes_to_stderr(self, capsys):
    out = io.StringIO()
    interpreter = create_debug_interpreter(stdout=out)
    interpreter.run_source("for i from 1 to 2 puts i")
    err = capsys.readouterr().err
    assert "Evaluating: For" in err
    assert "i = 2" in err
    assert out.getvalue() == "1\n2\n"

  def test_debug_interpreter_prints_concrete_tree(self, capsys):
    interpreter = create_debug_interpreter(stdout=io.StringIO())
    interpreter.run_source("puts 1")
    assert "Concrete tree:" in capsys.readouterr().err
