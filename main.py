"""
fzbz Programming Language - Main Entry Point
Reads one program file, parses it and evaluates it
"""

import sys
import argparse
from typing import List, Optional

# Readline support for history in interactive mode
try:
  import readline
  READLINE_AVAILABLE = True
except ImportError:
  READLINE_AVAILABLE = False

from error_handling import FzbzParseError, FzbzRuntimeError, FzbzUsageError, format_parse_error
from interpreter import create_interpreter
from parsing import create_debug_parser, create_parser, pretty_print_ast
from utilities import read_source

__version__ = "0.1.0"

EXIT_OK = 0
EXIT_USAGE = 1
EXIT_UNREADABLE = 2
EXIT_PARSE_ERROR = 3
EXIT_RUNTIME_ERROR = 4

USAGE = "usage: fzbz [source file path]"


class FzbzArgumentParser(argparse.ArgumentParser):
  """Argument parser that reports bad invocations as FzbzUsageError"""

  def error(self, message):
    raise FzbzUsageError(f"{self.prog}: error: {message}")


def create_arg_parser() -> argparse.ArgumentParser:
  """Create command line argument parser"""
  parser = FzbzArgumentParser(
      prog='fzbz',
      description='fzbz - a tiny expression language with for loops, % and puts',
      formatter_class=argparse.RawDescriptionHelpFormatter,
      epilog="""
Examples:
  %(prog)s fizzbuzz.fzbz          # Run a program
  %(prog)s --ast fizzbuzz.fzbz    # Parse and show the AST
  %(prog)s --debug fizzbuzz.fzbz  # Run with evaluation trace on stderr
  %(prog)s -i                     # Interactive mode
        """
  )

  parser.add_argument(
      'script',
      nargs='?',
      help='fzbz source file to execute'
  )

  parser.add_argument(
      '-i', '--interactive',
      action='store_true',
      help='Start interactive mode'
  )

  parser.add_argument(
      '--ast',
      action='store_true',
      help='Parse file and show the AST instead of running it'
  )

  parser.add_argument(
      '--debug',
      action='store_true',
      help='Trace parsing and evaluation on stderr'
  )

  parser.add_argument(
      '--version',
      action='version',
      version=f'fzbz {__version__}'
  )

  return parser


def run_script_file(script_path: str, show_ast: bool = False, debug: bool = False) -> int:
  """Run an fzbz script file and return the process exit code"""
  try:
    source = read_source(script_path)
  except (OSError, UnicodeDecodeError):
    print("can't open the source file.", file=sys.stderr)
    return EXIT_UNREADABLE

  parser = create_debug_parser() if debug else create_parser()
  try:
    ast = parser.parse_string(source)
  except FzbzParseError as e:
    print(format_parse_error(e, verbose=debug), file=sys.stderr)
    return EXIT_PARSE_ERROR

  if show_ast:
    print(pretty_print_ast(ast), end='')
    return EXIT_OK

  interpreter = create_interpreter(debug=debug)
  try:
    interpreter.run(ast)
  except FzbzRuntimeError as e:
    print(e.message, file=sys.stderr)
    if debug and e.line is not None:
      print(f"  at {script_path}:{e.line}:{e.column}", file=sys.stderr)
    return EXIT_RUNTIME_ERROR
  except RecursionError:
    print("maximum recursion depth exceeded", file=sys.stderr)
    return EXIT_RUNTIME_ERROR

  return EXIT_OK


def run_interactive_mode(debug: bool = False) -> None:
  """Read-eval-print loop over single-line expressions sharing one root environment"""
  print(f"fzbz {__version__} - Interactive Mode")
  print("Type 'exit' to quit, ':help' for commands")
  if READLINE_AVAILABLE:
    print("Readline enabled: Use ↑/↓ for history")
  print()

  parser = create_debug_parser() if debug else create_parser()
  interpreter = create_interpreter(debug=debug)

  while True:
    try:
      code = input("fzbz> ")
    except (KeyboardInterrupt, EOFError):
      print("\nGoodbye!")
      break

    code = code.strip()
    if code == "exit":
      break
    if not code:
      continue

    if code == ":help":
      print("REPL Commands:")
      print("  :ast <expr>   - Show the AST of an expression")
      print("  :env          - Show visible names")
      print("  :help         - Show this help")
      print("  exit          - Exit REPL")
      continue

    if code == ":env":
      for name in interpreter.global_env.names():
        print(f"  {name} = {interpreter.global_env.lookup(name)!r}")
      continue

    try:
      if code.startswith(":ast "):
        print(pretty_print_ast(parser.parse_string(code[5:])), end='')
        continue

      result = interpreter.run(parser.parse_string(code))
      print(f"=> {result!r}")
    except FzbzParseError as e:
      print(format_parse_error(e, verbose=True))
    except FzbzRuntimeError as e:
      print(f"Runtime error: {e.message}")


def main(argv: Optional[List[str]] = None) -> int:
  """Main entry point for fzbz"""
  arg_parser = create_arg_parser()
  try:
    args = arg_parser.parse_args(argv)
    if args.interactive:
      run_interactive_mode(debug=args.debug)
      return EXIT_OK
    if not args.script:
      raise FzbzUsageError(USAGE)
  except FzbzUsageError as e:
    print(e.message, file=sys.stderr)
    return EXIT_USAGE

  return run_script_file(args.script, show_ast=args.ast, debug=args.debug)


if __name__ == "__main__":
  sys.exit(main())
