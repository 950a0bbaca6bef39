# tests/conftest.py
import pytest

from markparsec.Parsec import State


@pytest.fixture
def initial_state():
    def _make(text, value=None):
        return State(text, 0, value)

    return _make
