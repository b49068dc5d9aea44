"""Unreviewed-count badge.

Green when nothing is waiting, red when something is, and a black "!" when the
last cycle failed.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from rich.text import Text

GREEN = "#4d4"
RED = "#f00"
BLACK = "#000"
ERROR_TEXT = "!"

_RICH_COLORS = {GREEN: "green", RED: "red", BLACK: "black"}


class BaseBadge(ABC):
    @abstractmethod
    def set_text(self, text: str) -> None: ...

    @abstractmethod
    def set_color(self, color: str) -> None: ...

    def show_count(self, count: int) -> None:
        self.set_text(str(count))
        self.set_color(GREEN if count == 0 else RED)

    def show_error(self) -> None:
        self.set_text(ERROR_TEXT)
        self.set_color(BLACK)


class ConsoleBadge(BaseBadge):
    """Keeps the last badge state and renders it as a rich Text."""

    def __init__(self):
        self.text = ""
        self.color = GREEN

    def set_text(self, text: str) -> None:
        self.text = text

    def set_color(self, color: str) -> None:
        self.color = color

    def render(self) -> Text:
        style = _RICH_COLORS.get(self.color, "white")
        return Text(f" {self.text} ", style=f"bold white on {style}")
