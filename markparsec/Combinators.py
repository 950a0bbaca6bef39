from typing import Any, Callable, List, TypeVar

from .Char import literal
from .Parsec import GrammarError, Parser, ParseOutcome, State, T
from .Prim import never

ItemType = TypeVar('ItemType')


def choice(parsers: List[Parser[T]]) -> Parser[T]:
    """
    Applies a list of parsers in order until one succeeds.
    Returns the value of the succeeding parser, or fails if none succeed.
    """
    if not parsers:
        return never()
    result = parsers[0]
    for p in parsers[1:]:
        result = result | p
    return result


def between(open: Parser[Any], close: Parser[Any], p: Parser[T]) -> Parser[T]:
    """
    Parses 'open', then 'p', then 'close', returning the result of 'p'.
    """
    return open.seq(p).pass_(close)


def quoted(delimiter: str) -> Parser[str]:
    """
    Parses text enclosed in a pair of delimiter strings and returns the text
    in between. The first delimiter after the opening one closes the span.
    """
    exact = literal(delimiter)

    def until_delimiter(state: State) -> ParseOutcome:
        end = state.text.find(delimiter, state.pos)
        if end < 0:
            return None
        return State(state.text, end, state.text[state.pos:end])

    return exact.seq(Parser(until_delimiter)).pass_(exact)


def brackets(left: str, right: str) -> Parser[str]:
    """
    Parses a bracketed group, nested groups of the same bracket pair
    included, and returns the text between the outermost brackets.
    """
    if len(left) != 1 or len(right) != 1:
        raise GrammarError(f"Brackets must be single characters, got {left!r} and {right!r}")
    if left == right:
        raise GrammarError(f"Left and right brackets must differ, got {left!r} twice")

    def parse(state: State) -> ParseOutcome:
        text = state.text
        start = state.pos
        if start >= len(text) or text[start] != left:
            return None
        index = start + 1
        balance = 1
        while balance and index < len(text):
            c = text[index]
            if c == left:
                balance += 1
            elif c == right:
                balance -= 1
            index += 1
        if balance:
            return None
        return State(text, index, text[start + 1:index - 1])
    return Parser(parse)


def interleave(
    element: Parser[ItemType],
    from_text: Callable[[str], ItemType],
    condition: Callable[[str], bool],
) -> Parser[List[ItemType]]:
    """
    Scans while condition(remainder) holds, collecting what element parses.
    Characters element cannot parse are gathered into runs, and each run is
    converted with from_text and placed between the elements around it.
    Fails if nothing at all was collected.

    condition receives the remainder as a fresh string on every step, so a
    scan of n characters copies O(n**2) characters in total.
    """
    def parse(state: State) -> ParseOutcome:
        text = state.text
        pos = state.pos
        elements: List[ItemType] = []
        run_start = pos

        while pos < len(text) and condition(text[pos:]):
            result = element(State(text, pos))
            if result is None:
                pos += 1
                continue
            if result.pos == pos:
                raise GrammarError("interleave: element parser succeeded without consuming input")
            if run_start < pos:
                elements.append(from_text(text[run_start:pos]))
            elements.append(result.value)
            pos = result.pos
            run_start = pos

        if run_start < pos:
            elements.append(from_text(text[run_start:pos]))
        if not elements:
            return None
        return State(text, pos, elements)
    return Parser(parse)
