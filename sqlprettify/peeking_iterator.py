from dataclasses import dataclass, field
from typing import Callable, Optional


@dataclass
class PeekingIterator:
    """Cursor over the characters of a SQL string."""

    text: str
    next_pos: int = 0
    length: int = field(init=False)

    def __post_init__(self) -> None:
        self.length = len(self.text)

    def next(self) -> str:
        next_pos = self.next_pos
        if next_pos < self.length:
            self.next_pos = next_pos + 1
            return self.text[next_pos]
        raise StopIteration

    def __iter__(self) -> "PeekingIterator":
        return self

    def __next__(self) -> str:
        return self.next()

    def wind_back(self, count: int = 1) -> None:
        self.next_pos -= count

    def has_next(self) -> bool:
        return self.next_pos < self.length

    def peek(self, offset: int = 0) -> Optional[str]:
        pos = self.next_pos + offset
        if pos < self.length:
            return self.text[pos]
        return None

    def startswith(self, prefix: str) -> bool:
        return self.text.startswith(prefix, self.next_pos)

    def take(self, count: int) -> str:
        text = self.text[self.next_pos : self.next_pos + count]
        self.next_pos += len(text)
        return text

    def consume_while(self, predicate: Callable[[str], bool]) -> str:
        start = self.next_pos
        while self.next_pos < self.length and predicate(self.text[self.next_pos]):
            self.next_pos += 1
        return self.text[start : self.next_pos]

    def consume_until(self, end: str) -> str:
        """Consume up to and including ``end``, or to the end of the text."""
        index = self.text.find(end, self.next_pos)
        if index == -1:
            stop = self.length
        else:
            stop = index + len(end)
        text = self.text[self.next_pos : stop]
        self.next_pos = stop
        return text
