from dataclasses import dataclass
from typing import Optional

from .options import Parameters
from .tokens import Token


class UnresolvedParameterError(Exception):
    pass


@dataclass
class Params:
    """Resolves placeholder tokens to their substitution values."""

    params: Optional[Parameters] = None
    index: int = 0

    def get(self, token: Token) -> str:
        if self.params is None:
            return token.value
        key = token.key
        if key is None:
            return self._get_positional(token)
        if key in self.params.named:
            return str(self.params.named[key])
        if key.isdigit():
            position = int(key)
            if 1 <= position <= len(self.params.positional):
                return str(self.params.positional[position - 1])
        raise UnresolvedParameterError(f"no value for parameter {token.value!r}")

    def _get_positional(self, token: Token) -> str:
        assert self.params is not None
        if self.index >= len(self.params.positional):
            raise UnresolvedParameterError(
                f"no value for positional parameter {self.index + 1} ({token.value!r})"
            )
        value = self.params.positional[self.index]
        self.index += 1
        return str(value)
