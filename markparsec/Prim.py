import logging
from typing import Any, Callable, Optional

from .Parsec import Parser, ParseOutcome, State, T

logger = logging.getLogger(__name__)


def run_parser(parser: Parser[T], text: str) -> ParseOutcome:
    """Apply a composed parser to text. Returns the final State or None on failure."""
    return parser(State(text))


def constant(value: T) -> Parser[T]:
    """A parser that succeeds with value without consuming input."""
    def parse(state: State) -> ParseOutcome:
        return state.with_value(value)
    return Parser(parse)


def never() -> Parser[Any]:
    """A parser that always fails."""
    def parse(state: State) -> ParseOutcome:
        return None
    return Parser(parse)


def lookahead(predicate: Callable[[str], bool]) -> Parser[Any]:
    """Zero-width assertion on the remainder. On success the state is returned as is."""
    def parse(state: State) -> ParseOutcome:
        if predicate(state.remainder):
            return state
        return None
    return Parser(parse)


def rest() -> Parser[str]:
    """Consume everything that is left."""
    def parse(state: State) -> ParseOutcome:
        return State(state.text, len(state.text), state.remainder)
    return Parser(parse)


def end_of_input() -> Parser[bool]:
    """Succeeds with True only if no input remains."""
    def parse(state: State) -> ParseOutcome:
        if state.at_end:
            return state.with_value(True)
        return None
    return Parser(parse)


def lazy(thunk: Callable[[], Parser[T]]) -> Parser[T]:
    """Build the parser on first use, for grammars that refer to themselves."""
    cache: Optional[Parser[T]] = None

    def parse(state: State) -> ParseOutcome:
        nonlocal cache
        if cache is None:
            cache = thunk()
        return cache(state)
    return Parser(parse)


def parser_trace(label: str) -> Parser[Any]:
    """Zero-width parser that logs the current position and remainder."""
    def parse(state: State) -> ParseOutcome:
        logger.debug("%s: %r at %d", label, state.preview(), state.pos)
        return state
    return Parser(parse)
