"""
Error taxonomy and parse diagnostics for the fzbz language
Parse failures carry line/column, runtime failures carry the failing node's position
"""

from typing import List, Optional
from pyparsing import ParseBaseException
import re


# ============================================================================
# ERROR TYPES
# ============================================================================

class FzbzError(Exception):
    """Base class for every error raised by the fzbz toolchain"""
    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class FzbzUsageError(FzbzError):
    """Bad command line invocation"""
    pass


class FzbzParseError(FzbzError):
    """Grammar mismatch with source position"""
    def __init__(self, message: str, line: int = 1, column: int = 1,
                 context: Optional[str] = None, suggestions: Optional[List[str]] = None):
        self.line = line
        self.column = column
        self.context = context
        self.suggestions = suggestions or []
        super().__init__(message)

    def diagnostic(self) -> str:
        return f"{self.line}:{self.column}: {self.message}"

    def __str__(self) -> str:
        return self.diagnostic()


class FzbzRuntimeError(FzbzError):
    """Base class for errors raised while evaluating an AST"""
    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
        self.line = line
        self.column = column
        super().__init__(message)

    def locate(self, line: Optional[int], column: Optional[int]) -> 'FzbzRuntimeError':
        """Attach a source position unless a deeper node already did"""
        if self.line is None:
            self.line = line
            self.column = column
        return self


class FzbzTypeError(FzbzRuntimeError):
    """Value used through the accessor of another variant"""
    pass


class UndefinedVariableError(FzbzRuntimeError):
    """Identifier not bound in any enclosing frame"""
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"undefined variable '{name}'")


class FzbzDivisionError(FzbzRuntimeError):
    """Modulo by zero"""
    pass


class InternalLogicError(FzbzRuntimeError):
    """A state the grammar is supposed to rule out"""
    pass


# ============================================================================
# PARSE DIAGNOSTICS
# ============================================================================

def get_context_lines(source_text: str, line_num: int, col_num: int, context_lines: int = 1) -> str:
    """Get context lines around the error"""
    lines = source_text.split('\n')
    start_line = max(0, line_num - context_lines - 1)
    end_line = min(len(lines), line_num + context_lines)

    context_parts = []
    for i in range(start_line, end_line):
        line_prefix = f"{i+1:4d}: "
        context_parts.append(f"{line_prefix}{lines[i]}")
        if i == line_num - 1:
            context_parts.append(f"{'':6}{' ' * (col_num - 1)}^")

    return '\n'.join(context_parts)


def extract_got(source_text: str, line_num: int, col_num: int) -> str:
    """Extract what was actually found at the error location"""
    lines = source_text.split('\n')

    if line_num <= len(lines):
        error_line = lines[line_num - 1]
        if col_num <= len(error_line):
            got_text = error_line[col_num - 1:col_num + 9].strip()
            if got_text:
                return got_text
        return "end of line" if line_num < len(lines) else "end of input"
    return "end of input"


def describe_failure(exc: ParseBaseException, got: str) -> str:
    """One-line description in the style `syntax error, unexpected ...`"""
    expected = re.sub(r",?\s*found\s+.*$", "", exc.msg).strip()
    if got in ("end of input", "end of line"):
        return f"syntax error, unexpected {got}. {expected}".rstrip(". ") + "."
    return f"syntax error, unexpected '{got.split()[0]}'. {expected}".rstrip(". ") + "."


def generate_suggestions(got: str) -> List[str]:
    """Generate helpful suggestions based on the error"""
    suggestions = []

    if got.startswith('"'):
        suggestions.append("String literals use single quotes: 'text'")

    if re.match(r"(for|from|to)\b", got):
        suggestions.append("A loop is written `for <name> from <number> to <number> <expression>`")

    if got.startswith("="):
        suggestions.append("Equality is written `==`; there is no assignment")

    if got[:1] in "+-*/<>!":
        suggestions.append("The only operators are `%`, `==` and `? :`")

    return suggestions


def enhance_parse_exception(exc: ParseBaseException, source_text: str) -> FzbzParseError:
    """Convert pyparsing exception to an fzbz parse error"""
    line_num = exc.lineno
    col_num = exc.column
    got = extract_got(source_text, line_num, col_num)

    return FzbzParseError(
        message=describe_failure(exc, got),
        line=line_num,
        column=col_num,
        context=get_context_lines(source_text, line_num, col_num),
        suggestions=generate_suggestions(got)
    )


def format_parse_error(error: FzbzParseError, verbose: bool = False) -> str:
    """Format parse error; verbose adds source context and suggestions"""
    error_msg = error.diagnostic()
    if not verbose:
        return error_msg

    if error.context:
        error_msg += f"\n{error.context}"

    for suggestion in error.suggestions:
        error_msg += f"\n  - {suggestion}"

    return error_msg
