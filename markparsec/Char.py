from typing import Callable, Iterable

from .Parsec import Parser, ParseOutcome, State


# Core function: Succeeds if the character satisfies a predicate
def satisfy(f: Callable[[str], bool]) -> Parser[str]:
    """Succeeds for any character where f returns True. Returns the parsed character."""
    def parse(state: State) -> ParseOutcome:
        if state.at_end:
            return None
        token = state.text[state.pos]
        if f(token):
            return state.advance(1, token)
        return None
    return Parser(parse)


def any_char() -> Parser[str]:
    """Parses any character and returns it."""
    return satisfy(lambda _: True)


def exact_char(c: str) -> Parser[str]:
    """Parses the single character c and returns it."""
    return satisfy(lambda x: x == c)


char = exact_char


def literal(s: str) -> Parser[str]:
    """Parses the exact string s and returns it."""
    def parse(state: State) -> ParseOutcome:
        if state.text.startswith(s, state.pos):
            return state.advance(len(s), s)
        return None
    return Parser(parse)


string = literal


def one_of(cs: Iterable[str]) -> Parser[str]:
    """Succeeds if the current character is in cs."""
    allowed = frozenset(cs)
    return satisfy(lambda c: c in allowed)


def none_of(cs: Iterable[str]) -> Parser[str]:
    """Succeeds if the current character is not in cs."""
    forbidden = frozenset(cs)
    return satisfy(lambda c: c not in forbidden)


def digit() -> Parser[str]:
    return satisfy(lambda c: c in '0123456789')


def letter() -> Parser[str]:
    return satisfy(str.isalpha)


def space() -> Parser[str]:
    return satisfy(str.isspace)


def spaces() -> Parser[list]:
    """Zero or more whitespace characters."""
    return space().many()
