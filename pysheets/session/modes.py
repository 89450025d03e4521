"""
Modes of the edit session. Each mode carries only its own data: the Edit
mode owns the edit buffer and its insertion point, the Command mode owns
the command line.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from pysheets.config import CELL_TEXT_MAX


@dataclass
class NormalMode:
    NAME: ClassVar[str] = "NORMAL"


@dataclass
class EditMode:
    buffer: str = ""
    offset: int = 0
    NAME: ClassVar[str] = "EDIT"

    def __post_init__(self) -> None:
        self.offset = max(0, min(self.offset, len(self.buffer)))

    def insert(self, ch: str) -> bool:
        if len(self.buffer) + len(ch) > CELL_TEXT_MAX:
            return False
        self.buffer = self.buffer[:self.offset] + ch + self.buffer[self.offset:]
        self.offset += len(ch)
        return True

    def backspace(self) -> None:
        """Remove the character before the insertion point."""
        if self.offset > 0:
            self.buffer = self.buffer[:self.offset - 1] + self.buffer[self.offset:]
            self.offset -= 1

    def delete(self) -> None:
        """Remove the character at the insertion point."""
        if self.offset < len(self.buffer):
            self.buffer = self.buffer[:self.offset] + self.buffer[self.offset + 1:]

    def left(self) -> None:
        if self.offset > 0:
            self.offset -= 1

    def right(self) -> None:
        if self.offset < len(self.buffer):
            self.offset += 1

    def home(self) -> None:
        self.offset = 0

    def end(self) -> None:
        self.offset = len(self.buffer)

    def clear(self) -> None:
        self.buffer = ""
        self.offset = 0


@dataclass
class CommandMode:
    buffer: str = ""
    NAME: ClassVar[str] = "COMMAND"
