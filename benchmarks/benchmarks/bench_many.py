from markparsec.Char import char
from markparsec.Combinators import brackets, interleave
from markparsec.Prim import run_parser


class TimeMany:
    def setup(self):
        self.parser = char("a").many()
        self.small = "a" * 1000
        self.medium = "a" * 10000
        self.large = "a" * 100000

    def time_many_small(self):
        run_parser(self.parser, self.small)

    def time_many_medium(self):
        run_parser(self.parser, self.medium)

    def time_many_large(self):
        run_parser(self.parser, self.large)


class TimeInterleave:
    def setup(self):
        self.parser = interleave(brackets("(", ")"), str, lambda text: True)
        self.medium = "text (group) " * 200
        self.large = "text (group) " * 2000

    def time_interleave_medium(self):
        run_parser(self.parser, self.medium)

    def time_interleave_large(self):
        run_parser(self.parser, self.large)
