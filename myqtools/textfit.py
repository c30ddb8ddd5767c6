"""Helpers for fitting numbers and text into fixed-width terminal columns."""

from __future__ import annotations

import shutil
import subprocess
import sys
from typing import Callable, Iterable, Protocol, Sequence


class _Blankable(Protocol):
    def blank_line(self) -> str: ...


def term_size() -> tuple[int, int]:
    """Return the terminal's (height, width).

    Asks ``stty size`` first and falls back to the standard library's
    estimate when that does not work.
    """
    try:
        completed = subprocess.run(
            ["stty", "size"],
            stdin=sys.stdin,
            capture_output=True,
            text=True,
            check=False,
        )
        height, width = completed.stdout.split()
        return int(height), int(width)
    except (OSError, ValueError):
        size = shutil.get_terminal_size()
        return size.lines, size.columns


def calculate_diff(bigger: float, smaller: float) -> float:
    """Difference of two counters; if the counter went down, return ``bigger``."""
    if bigger < smaller:
        # The counter rolled over or was reset; best effort.
        return bigger
    return bigger - smaller


def calculate_rate(bigger: float, smaller: float, seconds: float) -> float:
    """Rate of change per second; the plain difference if ``seconds`` <= 0."""
    diff = calculate_diff(bigger, smaller)
    if seconds <= 0:
        return diff
    return diff / seconds


def fit_string(text: str, length: int) -> str:
    """Truncate ``text`` to ``length`` or right-align it in that width."""
    if len(text) > length:
        return text[:length]
    return text.rjust(length)


def fit_string_left(text: str, length: int) -> str:
    """Truncate ``text`` to ``length`` or left-align it in that width."""
    if len(text) > length:
        return text[:length]
    return text.ljust(length)


def _collect(
    viewers: Iterable[_Blankable], get_output: Callable[[_Blankable], Sequence[str]]
) -> tuple[list[_Blankable], list[list[str]], int]:
    viewers = list(viewers)
    outputs = [list(get_output(viewer)) for viewer in viewers]
    max_lines = max((len(out) for out in outputs), default=0)
    return viewers, outputs, max_lines


def push_col_output_down(
    viewers: Iterable[_Blankable], get_output: Callable[[_Blankable], Sequence[str]]
) -> list[str]:
    """Join column outputs side by side, padding short columns at the top."""
    viewers, outputs, max_lines = _collect(viewers, get_output)
    padded = [
        [viewer.blank_line()] * (max_lines - len(out)) + out
        for viewer, out in zip(viewers, outputs)
    ]
    return [" ".join(row) for row in zip(*padded)]


def push_col_output_up(
    viewers: Iterable[_Blankable], get_output: Callable[[_Blankable], Sequence[str]]
) -> list[str]:
    """Join column outputs side by side, padding short columns at the bottom."""
    viewers, outputs, max_lines = _collect(viewers, get_output)
    padded = [
        out + [viewer.blank_line()] * (max_lines - len(out))
        for viewer, out in zip(viewers, outputs)
    ]
    return [" ".join(row) for row in zip(*padded)]