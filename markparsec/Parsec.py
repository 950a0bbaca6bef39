import logging
from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, Generic, List, Optional, TypeVar

T = TypeVar('T')  # Generic type for parser results
U = TypeVar('U')

logger = logging.getLogger(__name__)

PREVIEW_LENGTH = 30


class GrammarError(Exception):
    """Raised when a parser expression is composed in a way that cannot work.

    This is distinct from an ordinary parse failure (a ``None`` outcome): it
    points at a bug in the grammar, not at the input.
    """


@dataclass(frozen=True)
class State(Generic[T]):
    """Parser state: shared input text, offset of the unconsumed suffix, carried value."""
    text: str
    pos: int = 0
    value: Optional[T] = None

    @property
    def remainder(self) -> str:
        return self.text[self.pos:]

    @property
    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def advance(self, n: int, value: Any) -> 'State':
        """Consume n characters and carry value."""
        return State(self.text, self.pos + n, value)

    def with_value(self, value: Any) -> 'State':
        return replace(self, value=value)

    def preview(self) -> str:
        tail = self.text[self.pos:self.pos + PREVIEW_LENGTH]
        return tail + ('...' if len(self.text) - self.pos > PREVIEW_LENGTH else '')


ParseOutcome = Optional[State]
# None is Failure; a State is Success, its value being the parsed value


def _require_mapping(value: Any, side: str) -> Mapping:
    if not isinstance(value, Mapping):
        raise GrammarError(
            f"{side} parser of a key-merging combinator must produce a mapping, "
            f"got {type(value).__name__}"
        )
    return value


def _extract(value: Any, key: Optional[str]) -> str:
    """Pick the input for the inner parser of an inversed combinator."""
    if key is not None:
        source = _require_mapping(value, "Left")
        if key not in source:
            raise GrammarError(f"Left parser result has no field {key!r}")
        value = source[key]
    if not isinstance(value, str):
        raise GrammarError(
            f"Inversed combinators re-parse text, got {type(value).__name__}"
        )
    return value


class Parser(Generic[T]):
    """A parser wraps a function from State to ParseOutcome.

    Parsers are immutable: every combinator returns a new Parser and leaves
    its operands untouched, so one parser value can be reused for any number
    of inputs.
    """
    def __init__(self, parse_fn: Callable[[State], ParseOutcome]):
        self.parse_fn = parse_fn

    def __call__(self, state: State) -> ParseOutcome:
        return self.parse_fn(state)

    def run(self, text: str) -> ParseOutcome:
        """Apply the parser to text with no carried value."""
        return self(State(text))

    def save(self, key: str) -> 'Parser[Dict[str, T]]':
        """Wrap the result into a single-entry mapping {key: result}."""
        def parse(state: State) -> ParseOutcome:
            result = self(state)
            if result is None:
                return None
            return result.with_value({key: result.value})
        return Parser(parse)

    # Key-merging sequence (&)
    def bind(self, other: 'Parser[Mapping]') -> 'Parser[Dict[str, Any]]':
        """Run self, then other on the leftover text; merge both mappings.

        Example:
            header = (char('#').many(1).fmap(len).save('level')
                      .bind(rest().save('title')))
        """
        def parse(state: State) -> ParseOutcome:
            left = self(state)
            if left is None:
                return None
            right = other(left)
            if right is None:
                return None
            merged = dict(_require_mapping(left.value, "Left"))
            merged.update(_require_mapping(right.value, "Right"))
            return right.with_value(merged)
        return Parser(parse)

    def bind_inversed(self, other: 'Parser[Mapping]', key: Optional[str] = None) -> 'Parser[Dict[str, Any]]':
        """Like bind, but other parses the text self extracted (or its field key).

        The overall progress is the one made by self; whatever other leaves
        unconsumed inside the extracted text is dropped.

        Example:
            link = (brackets('[', ']').save('text')
                    .bind(brackets('(', ')').save('target'))
                    .bind_inversed(url.save('href'), 'target'))
        """
        def parse(state: State) -> ParseOutcome:
            left = self(state)
            if left is None:
                return None
            right = other(State(_extract(left.value, key)))
            if right is None:
                return None
            merged = dict(_require_mapping(left.value, "Left"))
            merged.update(_require_mapping(right.value, "Right"))
            return left.with_value(merged)
        return Parser(parse)

    # Sequence (*>)
    def seq(self, other: 'Parser[U]') -> 'Parser[U]':
        """Run self, then other on the leftover text; keep other's result."""
        def parse(state: State) -> ParseOutcome:
            left = self(state)
            if left is None:
                return None
            return other(left)
        return Parser(parse)

    def seq_inversed(self, other: 'Parser[U]', key: Optional[str] = None) -> 'Parser[U]':
        """Run other on the text self extracted; keep other's result and self's progress."""
        def parse(state: State) -> ParseOutcome:
            left = self(state)
            if left is None:
                return None
            right = other(State(_extract(left.value, key)))
            if right is None:
                return None
            return left.with_value(right.value)
        return Parser(parse)

    # Sequence (<*)
    def pass_(self, other: 'Parser[Any]') -> 'Parser[T]':
        """Run self, then other; keep self's result but other's progress."""
        def parse(state: State) -> ParseOutcome:
            left = self(state)
            if left is None:
                return None
            right = other(left)
            if right is None:
                return None
            return right.with_value(left.value)
        return Parser(parse)

    # Alternative (<|>)
    def or_(self, other: 'Parser[T]') -> 'Parser[T]':
        """Try self; on failure try other from the same state. First success wins."""
        def parse(state: State) -> ParseOutcome:
            result = self(state)
            if result is not None:
                return result
            return other(state)
        return Parser(parse)

    def many(self, min: int = 0, max: int = 0,
             condition: Optional[Callable[[str], bool]] = None) -> 'Parser[List[T]]':
        """Repeat self, collecting results in order.

        Repetition stops on the first failure, on an empty remainder, when
        condition(remainder) is false, or when max results are collected.
        Fewer than min results is a failure. Zero means no bound.
        """
        def parse(state: State) -> ParseOutcome:
            values: List[T] = []
            current = state
            while not current.at_end:
                if max and len(values) >= max:
                    break
                if condition is not None and not condition(current.remainder):
                    break
                result = self(State(current.text, current.pos, state.value))
                if result is None:
                    break
                if not max and result.pos == current.pos:
                    raise GrammarError(
                        "many: applied parser succeeded without consuming input"
                    )
                values.append(result.value)
                current = result
            if min and len(values) < min:
                return None
            return State(current.text, current.pos, values)
        return Parser(parse)

    def fmap(self, f: Callable[[T], U]) -> 'Parser[U]':
        """Map the result through f."""
        def parse(state: State) -> ParseOutcome:
            result = self(state)
            if result is None:
                return None
            return result.with_value(f(result.value))
        return Parser(parse)

    map = fmap

    def with_default(self, default: T) -> 'Parser[T]':
        """Never fail: on failure yield default without consuming anything."""
        def parse(state: State) -> ParseOutcome:
            result = self(state)
            if result is None:
                return State(state.text, state.pos, default)
            return result
        return Parser(parse)

    def traced(self, label: str) -> 'Parser[T]':
        """Log entry and outcome of this parser at DEBUG level."""
        def parse(state: State) -> ParseOutcome:
            logger.debug("%s: trying at %d: %r", label, state.pos, state.preview())
            result = self(state)
            if result is None:
                logger.debug("%s: failed at %d", label, state.pos)
            else:
                logger.debug("%s: matched %r, now at %d", label, result.value, result.pos)
            return result
        return Parser(parse)

    def __or__(self, other: 'Parser[T]') -> 'Parser[T]':
        return self.or_(other)

    def __and__(self, other: 'Parser[Mapping]') -> 'Parser[Dict[str, Any]]':
        return self.bind(other)

    def __gt__(self, other: 'Parser[U]') -> 'Parser[U]':
        return self.seq(other)

    def __lt__(self, other: 'Parser[Any]') -> 'Parser[T]':
        return self.pass_(other)
