# Core
from .Parsec import Parser, State, ParseOutcome, GrammarError
from .Prim import run_parser, constant, never, lookahead, rest, end_of_input, lazy, parser_trace

# Characters
from .Char import (
    satisfy, any_char, exact_char, char, literal, string,
    one_of, none_of, digit, letter, space, spaces
)

# Combinators
from .Combinators import choice, between, quoted, brackets, interleave
