import logging

import pytest

from markparsec.Char import any_char, exact_char, literal, satisfy
from markparsec.Combinators import quoted
from markparsec.Parsec import GrammarError, Parser, State
from markparsec.Prim import constant, never, rest, run_parser

is_digit = lambda c: c in "0123456789"


def run(parser, input_str):
    res = run_parser(parser, input_str)
    return None if res is None else (res.value, res.remainder)


def first_word():
    return satisfy(lambda c: c != " ").many(1).fmap("".join)


# --- Entry point and state ---


def test_run_method_matches_run_parser():
    p = exact_char("a")
    assert p.run("ab") == run_parser(p, "ab")
    assert p.run("ab").remainder == "b"


def test_state_is_offset_into_shared_text():
    res = literal("ab").run("abcd")
    assert res.text == "abcd"
    assert res.pos == 2
    assert res.remainder == "cd"


# --- save / bind ---


def test_save():
    p = exact_char("A").save("found")
    assert run(p, "A cat") == ({"found": "A"}, " cat")
    assert run(p, "a cat") is None


def test_bind():
    p = literal("Alice").save("first").bind(literal("Bob").save("second"))
    assert run(p, "AliceBobPete") == ({"first": "Alice", "second": "Bob"}, "Pete")
    assert run(p, "AliceEve") is None
    assert run(p, "Bob") is None


def test_bind_right_key_wins():
    p = literal("a").save("k").bind(literal("b").save("k"))
    assert run(p, "ab") == ({"k": "b"}, "")


def test_bind_does_not_mutate_left_result(initial_state):
    left_value = {"first": "x"}
    p = constant(left_value).bind(constant({"second": "y"}))
    res = p(initial_state("text"))
    assert res.value == {"first": "x", "second": "y"}
    assert left_value == {"first": "x"}


def test_bind_operator():
    p = literal("a").save("a") & literal("b").save("b")
    assert run(p, "abc") == ({"a": "a", "b": "b"}, "c")


def test_bind_requires_mappings():
    with pytest.raises(GrammarError):
        run(literal("a").bind(literal("b").save("b")), "ab")
    with pytest.raises(GrammarError):
        run(literal("a").save("a").bind(literal("b")), "ab")


def test_bind_failure_is_not_a_grammar_error():
    # the contract is only checked once both sides produced a value
    assert run(literal("a").bind(literal("b")), "xx") is None


# --- bind_inversed ---


def test_bind_inversed():
    p = quoted('"').save("allQuoted").bind_inversed(first_word().save("word"), "allQuoted")
    assert run(p, '"found word" rest') == ({"allQuoted": "found word", "word": "found"}, " rest")


def test_bind_inversed_fails_when_inner_fails():
    p = quoted('"').save("q").bind_inversed(literal("x").save("x"), "q")
    assert run(p, '"abc" rest') is None


def test_bind_inversed_errors():
    p = quoted('"').save("q").bind_inversed(first_word().save("w"), "missing")
    with pytest.raises(GrammarError):
        run(p, '"abc"')

    non_text = constant({"n": 1}).bind_inversed(first_word().save("w"), "n")
    with pytest.raises(GrammarError):
        run(non_text, "abc")

    whole_mapping = literal("a").save("a").bind_inversed(first_word().save("w"))
    with pytest.raises(GrammarError):
        run(whole_mapping, "abc")


# --- seq / seq_inversed / pass_ ---


def test_seq():
    p = literal("ignored ").seq(literal("PRISE"))
    assert run(p, "ignored PRISE rest") == ("PRISE", " rest")
    assert run(p, "PRISE rest") is None


def test_seq_operator():
    p = literal("ignored ") > literal("PRISE")
    assert run(p, "ignored PRISE") == ("PRISE", "")


def test_seq_inversed():
    p = quoted('"').seq_inversed(first_word())
    assert run(p, '"found word" rest') == ("found", " rest")


def test_seq_inversed_with_key():
    p = quoted('"').save("q").seq_inversed(first_word(), "q")
    assert run(p, '"found word" rest') == ("found", " rest")


def test_pass():
    p = exact_char("2").many(1).fmap(len).pass_(exact_char(" ").many())
    assert run(p, "2go on") == (1, "go on")
    assert run(p, "2 go on") == (1, "go on")
    assert run(p, "22222     go on") == (5, "go on")


def test_pass_operator_requires_trailing_syntax():
    p = quoted("'") < exact_char(";")
    assert run(p, "'x';rest") == ("x", "rest")
    assert run(p, "'x' rest") is None


# --- or_ ---


def test_or():
    p = exact_char("2").or_(exact_char("3"))
    assert run(p, "2rest") == ("2", "rest")
    assert run(p, "3rest") == ("3", "rest")
    assert run(p, "4") is None
    assert run(p, "") is None


def test_or_retries_from_original_position():
    # the first branch consumes 'a' before failing; the second still sees 'a'
    p = (exact_char("a") > exact_char("b")) | exact_char("a")
    assert run(p, "ac") == ("a", "c")


def test_or_first_success_wins():
    p = literal("a") | literal("ab")
    assert run(p, "ab") == ("a", "b")


# --- many ---


def test_many_bounds_and_condition():
    not_last = lambda text: text.startswith("sahsah")
    p = literal("sah").many(2, 3, not_last)

    assert run(p, "sahsahsah-boo") == (["sah", "sah"], "sah-boo")
    assert run(p, "sahsahsahsah-boo") == (["sah", "sah", "sah"], "sah-boo")
    assert run(p, "sah-boo") is None
    assert run(p, "sahsah-boo") is None


def test_many_stops_at_max():
    p = literal("sah").many(2, 3, lambda text: True)
    assert run(p, "sahsahsah-boo") == (["sah", "sah", "sah"], "-boo")
    assert run(p, "sahsahsahsah") == (["sah", "sah", "sah"], "sah")
    assert run(p, "sah-boo") is None


def test_many_unbounded():
    p = exact_char("a").many()
    assert run(p, "aaab") == (["a", "a", "a"], "b")
    assert run(p, "b") == ([], "b")
    assert run(p, "") == ([], "")


def test_many_condition_sees_remainder():
    seen = []

    def condition(text):
        seen.append(text)
        return True

    run(any_char().many(condition=condition), "abc")
    assert seen == ["abc", "bc", "c"]


def test_many_zero_width_element():
    with pytest.raises(GrammarError):
        run(constant(1).many(), "abc")

    # bounded repetition of a zero-width parser terminates on its own
    assert run(constant(1).many(max=3), "abc") == ([1, 1, 1], "abc")


def test_many_threads_carried_value(initial_state):
    seen = []

    def parse(state):
        seen.append(state.value)
        return any_char()(state)

    p = Parser(parse).many(max=2)
    p(initial_state("xyz", value="ctx"))
    assert seen == ["ctx", "ctx"]


# --- fmap / with_default ---


def test_fmap():
    p = satisfy(is_digit).many(1).fmap(len).save("digitsCount")
    assert run(p, "31415 etc") == ({"digitsCount": 5}, " etc")
    assert run(p, "etc") is None


def test_map_alias():
    assert run(any_char().map(str.upper), "ab") == ("A", "b")


def test_with_default():
    p = satisfy(is_digit).many(1).fmap(lambda cs: int("".join(cs))).with_default(50)
    assert run(p, "12345") == (12345, "")
    assert run(p, "12345 rest") == (12345, " rest")
    assert run(p, "no digits") == (50, "no digits")


def test_with_default_reports_unconsumed_remainder():
    p = (literal("ab") > literal("cd")).with_default("none")
    assert run(p, "abxx") == ("none", "abxx")


# --- traced ---


def test_traced_logs_outcome(caplog):
    p = satisfy(is_digit).many(1).traced("digits")

    with caplog.at_level(logging.DEBUG, logger="markparsec.Parsec"):
        assert run(p, "42x") == (["4", "2"], "x")
        assert run(p, "x") is None

    assert "digits: trying at 0: '42x'" in caplog.text
    assert "digits: matched ['4', '2'], now at 2" in caplog.text
    assert "digits: failed at 0" in caplog.text


# --- immutability ---


def test_combinators_leave_operands_untouched():
    a = literal("a")
    b = literal("b")
    _ = a | b
    _ = a > b
    _ = a.many()
    assert run(a, "b") is None
    assert run(b, "a") is None
    assert run(never().or_(a), "a") == ("a", "")


def test_state_is_immutable():
    state = State("abc")
    literal("ab")(state)
    assert state.pos == 0
    with pytest.raises(Exception):
        state.pos = 1


def test_rest_after_bind():
    p = literal("#").save("mark").bind(rest().save("body"))
    assert run(p, "# Title") == ({"mark": "#", "body": " Title"}, "")
