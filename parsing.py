"""
fzbz Programming Language Parser
pyparsing grammar producing a concrete tree that is collapsed into a compact AST
"""

import sys
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional, TextIO, Tuple

from pyparsing import (
    Forward, Keyword, Optional as PyParsingOptional, ParseBaseException,
    ParserElement, Regex, Suppress, ZeroOrMore, col, lineno
)

from error_handling import FzbzParseError, enhance_parse_exception
from utilities import read_source

# Enable packrat parsing for performance
ParserElement.enable_packrat()


# AST node kinds
TERNARY = "Ternary"
CONDITION = "Condition"
MULTIPLICATIVE = "Multiplicative"
CALL = "Call"
FOR = "For"
IDENTIFIER = "Identifier"
STRING = "String"
NUMBER = "Number"

# Grouping kind that only exists in the concrete tree
PRIMARY = "Primary"

LEAF_KINDS = (IDENTIFIER, STRING, NUMBER)


@dataclass(frozen=True)
class AstNode:
    """Immutable syntax tree node; leaves carry `text`, interior nodes carry `children`"""
    kind: str
    text: Optional[str] = None
    children: Tuple['AstNode', ...] = ()
    line: int = field(default=0, compare=False)
    column: int = field(default=0, compare=False)

    @property
    def is_leaf(self) -> bool:
        return self.kind in LEAF_KINDS

    def __str__(self) -> str:
        if self.is_leaf:
            return f"{self.kind}({self.text!r})"
        children_str = ", ".join(str(child) for child in self.children)
        return f"{self.kind}([{children_str}])"


WHITESPACE = " \t\r\n"


def _position(s: str, loc: int) -> Tuple[int, int]:
    """Line and column of the first token at or after `loc`"""
    while loc < len(s) and s[loc] in WHITESPACE:
        loc += 1
    return lineno(loc, s), col(loc, s)


def _leaf(kind: str, strip_quotes: bool = False):
    def action(s: str, loc: int, toks) -> AstNode:
        text = toks[0][1:-1] if strip_quotes else toks[0]
        return AstNode(kind, text, (), *_position(s, loc))
    return action


def _interior(kind: str):
    def action(s: str, loc: int, toks) -> AstNode:
        return AstNode(kind, None, tuple(toks), *_position(s, loc))
    return action


class FzbzGrammar:
    """fzbz grammar definition using pyparsing"""

    def __init__(self, debug: bool = False):
        self.debug = debug
        self._setup_grammar()

    def _setup_grammar(self):
        """Build the expression grammar from the tokens up to the ternary"""

        expression = Forward()

        # Keywords
        for_kw = Keyword("for")
        from_kw = Keyword("from")
        to_kw = Keyword("to")
        keyword = for_kw | from_kw | to_kw

        # Tokens
        identifier = (~keyword + Regex(r"[a-zA-Z][a-zA-Z0-9_]*")).set_parse_action(_leaf(IDENTIFIER))
        string_literal = Regex(r"'[^']*'").set_parse_action(_leaf(STRING, strip_quotes=True))
        number = Regex(r"[0-9]+").set_parse_action(_leaf(NUMBER))
        identifier.set_name("identifier")
        string_literal.set_name("string")
        number.set_name("number")

        # for <ident> from <number> to <number> <expression>
        for_expr = (
            Suppress(for_kw) + identifier +
            Suppress(from_kw) + number +
            Suppress(to_kw) + number +
            expression
        ).set_parse_action(_interior(FOR))

        parenthesized = Suppress("(") + expression + Suppress(")")

        primary = (
            for_expr |
            identifier |
            parenthesized |
            string_literal |
            number
        ).set_parse_action(_interior(PRIMARY))

        # Application by juxtaposition: a primary followed by its argument
        call = (primary + PyParsingOptional(expression)).set_parse_action(_interior(CALL))

        multiplicative = (
            call + ZeroOrMore(Suppress("%") + call)
        ).set_parse_action(_interior(MULTIPLICATIVE))

        condition = (
            multiplicative + PyParsingOptional(Suppress("==") + multiplicative)
        ).set_parse_action(_interior(CONDITION))

        ternary = (
            condition + PyParsingOptional(Suppress("?") + expression + Suppress(":") + expression)
        ).set_parse_action(_interior(TERNARY))

        expression <<= ternary
        expression.set_name("expression")
        # Tabs are source characters, not column padding
        expression.parse_with_tabs()
        primary.set_name("expression")

        # Store the main parsers
        self.expression = expression
        self.ternary = ternary
        self.condition = condition
        self.multiplicative = multiplicative
        self.call = call
        self.primary = primary
        self.for_expr = for_expr
        self.identifier = identifier
        self.string_literal = string_literal
        self.number = number

    def parse_concrete(self, text: str) -> AstNode:
        """Parse a whole program into the uncollapsed tree; raises ParseException"""
        return self.expression.parse_string(text, parse_all=True)[0]

    def parse_program(self, text: str) -> AstNode:
        """Parse a complete fzbz program into a collapsed AST"""
        try:
            concrete = self.parse_concrete(text)
        except ParseBaseException as e:
            raise enhance_parse_exception(e, text) from e
        except RecursionError as e:
            raise FzbzParseError("syntax error, expression nested too deeply") from e

        if self.debug:
            print("Concrete tree:", file=sys.stderr)
            print(pretty_print_ast(concrete), file=sys.stderr, end="")

        return collapse_ast(concrete)


def collapse_ast(node: AstNode) -> AstNode:
    """Replace every interior node that has a single child by that child"""
    if node.is_leaf:
        return node
    children = tuple(collapse_ast(child) for child in node.children)
    if len(children) == 1:
        return children[0]
    return replace(node, children=children)


class FzbzParser:
    """Main fzbz parser"""

    def __init__(self, debug: bool = False):
        self.debug = debug
        self.grammar = FzbzGrammar(debug)

    def parse_file(self, filepath: str) -> AstNode:
        """Parse an fzbz source file"""
        return self.grammar.parse_program(read_source(filepath))

    def parse_string(self, text: str) -> AstNode:
        """Parse fzbz source code from string"""
        return self.grammar.parse_program(text)


# Factory functions for creating parsers
def create_parser(debug: bool = False) -> FzbzParser:
    """Create an fzbz parser"""
    return FzbzParser(debug=debug)


def create_debug_parser() -> FzbzParser:
    """Create an fzbz parser with debug enabled"""
    return FzbzParser(debug=True)


_default_parser: Optional[FzbzParser] = None


def parse(source: str, out: Optional[TextIO] = None) -> Optional[AstNode]:
    """Parse source text; on failure log `line:column: message` to `out` and return None"""
    global _default_parser
    if _default_parser is None:
        _default_parser = create_parser()

    try:
        return _default_parser.parse_string(source)
    except FzbzParseError as e:
        stream = out if out is not None else sys.stderr
        stream.write(e.diagnostic() + "\n")
        return None


# Utility functions for working with the AST
def pretty_print_ast(node: AstNode, indent: int = 0) -> str:
    """Pretty print an AST node for debugging"""
    result = "  " * indent + node.kind
    if node.text is not None:
        result += f"({node.text!r})"
    result += "\n"

    for child in node.children:
        result += pretty_print_ast(child, indent + 1)

    return result


def ast_to_dict(node: AstNode) -> Dict[str, Any]:
    """Convert AST to dictionary representation"""
    return {
        "kind": node.kind,
        "text": node.text,
        "line": node.line,
        "column": node.column,
        "children": [ast_to_dict(child) for child in node.children]
    }
