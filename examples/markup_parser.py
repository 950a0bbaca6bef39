import logging
from dataclasses import dataclass
from typing import Optional

from markparsec import (
    Parser, brackets, char, interleave, lazy, literal, lookahead,
    quoted, rest, run_parser, satisfy,
)

# 1. Document model
@dataclass
class Text:
    content: str

@dataclass
class Bold:
    children: list

@dataclass
class Italic:
    children: list

@dataclass
class Link:
    text: str
    href: str
    hint: Optional[str]

@dataclass
class Header:
    level: int
    children: list

@dataclass
class ListItem:
    children: list

@dataclass
class Paragraph:
    children: list

# 2. Inline markup
def make_stars(n: int) -> Parser[str]:
    # the inside of *italic* or **bold** must not start with another star
    not_star = lookahead(lambda text: text[:1] not in ("", "*"))
    return quoted("*" * n).seq_inversed(not_star.seq(rest()))

until_space = satisfy(lambda c: not c.isspace()).many(1).fmap(''.join)
hint = char(' ').many().seq(quoted('"'))

link = (
    brackets('[', ']').save('text')
    .bind(brackets('(', ')').save('target'))
    .bind_inversed(until_space.save('href').bind(hint.with_default(None).save('hint')), 'target')
    .fmap(lambda d: Link(d['text'], d['href'], d['hint']))
)

def inline_content():
    return interleave(link | bold | italic, Text, lambda text: not text.startswith('\n'))

inline = lazy(inline_content)
bold = make_stars(2).seq_inversed(inline).fmap(Bold)
italic = make_stars(1).seq_inversed(inline).fmap(Italic)

# 3. Block markup, one per line
line_end = char('\n').many()

header = (
    char('#').many(1, 6).fmap(len).save('level')
    .pass_(char(' ').many(1))
    .bind(inline.save('children'))
    .fmap(lambda d: Header(d['level'], d['children']))
)

list_item = (
    literal('* ')
    .seq(inline)
    .fmap(ListItem)
)

paragraph = inline.fmap(Paragraph)

block = (header | list_item | paragraph).pass_(line_end)
document = line_end.seq(block.many())


if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG)
    source = (
        "# Parsers *for* [markup](https://example.org \"Example\")\n"
        "\n"
        "Plain text with **bold and *nested* words**.\n"
        "* an item\n"
        "* another [item](#here)\n"
    )
    result = run_parser(document.traced("document"), source)
    if result is None:
        print("Parse failed")
    else:
        for node in result.value:
            print(node)
