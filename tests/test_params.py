import pytest

from sqlprettify.options import Parameters
from sqlprettify.params import Params, UnresolvedParameterError
from sqlprettify.tokens import TokenType


def test_no_params() -> None:
    params = Params()
    assert params.get(TokenType.PLACEHOLDER.make("?")) == "?"
    assert params.get(TokenType.PLACEHOLDER.make(":x", key="x")) == ":x"


def test_positional() -> None:
    params = Params(Parameters(["1", "'two'"]))
    assert params.get(TokenType.PLACEHOLDER.make("?")) == "1"
    assert params.get(TokenType.PLACEHOLDER.make("%s")) == "'two'"
    with pytest.raises(UnresolvedParameterError):
        params.get(TokenType.PLACEHOLDER.make("?"))


def test_indexed_and_named() -> None:
    params = Params(Parameters(["a", "b"], {"name": "c", "3": "d"}))
    assert params.get(TokenType.PLACEHOLDER.make("$2", key="2")) == "b"
    assert params.get(TokenType.PLACEHOLDER.make("?1", key="1")) == "a"
    assert params.get(TokenType.PLACEHOLDER.make("?3", key="3")) == "d"
    assert params.get(TokenType.PLACEHOLDER.make(":name", key="name")) == "c"
    for token in [
        TokenType.PLACEHOLDER.make("$4", key="4"),
        TokenType.PLACEHOLDER.make("$0", key="0"),
        TokenType.PLACEHOLDER.make(":other", key="other"),
    ]:
        with pytest.raises(UnresolvedParameterError):
            params.get(token)
