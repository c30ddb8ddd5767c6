"""Base columns: names, help, headers and fitting numbers into a width."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from myqtools.state import State
from myqtools.textfit import fit_string


@runtime_checkable
class StateViewer(Protocol):
    """Renders data from a State into a fixed width, with a header."""

    name: str

    def short_help(self) -> str: ...

    def detailed_help(self) -> list[str]: ...

    def get_sources(self) -> list[str]: ...

    def header(self, state: State) -> list[str]: ...

    def data(self, state: State) -> list[str]: ...

    def blank_line(self) -> str: ...


class Units(enum.Enum):
    """The kind of numeric value a column shows."""

    NUMBER = "Number"
    MEMORY = "Memory"
    SECOND = "Second"
    MICROSECOND = "Microsecond"
    NANOSECOND = "Nanosecond"
    PERCENT = "Percent"


_UNITS: dict[Units, dict[float, str]] = {
    Units.NUMBER: {1: "", 1000: "k", 1000000: "m", 1000000000: "g"},
    Units.MEMORY: {
        1: "b",
        1024: "K",
        1048576: "M",
        1073741824: "G",
        1099511627776: "T",
    },
    Units.SECOND: {
        1000: "ks",
        1: "s",
        0.001: "ms",
        0.000001: "µs",
        0.000000001: "ns",
    },
    Units.MICROSECOND: {1000000000: "ks", 1000000: "s", 1000: "ms", 1: "µs"},
    Units.NANOSECOND: {1000000000: "s", 1000000: "ms", 1000: "µs", 1: "ns"},
    Units.PERCENT: {1: "%"},
}


def parse_units(text: str) -> Units:
    """Map a units name such as ``Memory`` to a Units member."""
    try:
        return Units(text)
    except ValueError:
        raise ValueError(f"invalid UnitType: {text}") from None


def _fmt(value: float, precision: int, unit: str = "") -> str:
    return f"{value:.{precision}f}{unit}"


@dataclass
class Column:
    """Attributes and behaviour shared by every column."""

    name: str = ""
    description: str = ""
    type: str = ""
    length: int = 0
    sources: list[str] = field(default_factory=list)

    def short_help(self) -> str:
        return f"{self.name}: {self.description}"

    def detailed_help(self) -> list[str]:
        return [self.short_help()]

    def get_sources(self) -> list[str]:
        return list(self.sources)

    def header(self, state: State) -> list[str]:
        return [fit_string(self.name, self.length)]

    def blank_line(self) -> str:
        return fit_string(" ", self.length)


@dataclass
class NumberColumn(Column):
    """A column showing a number scaled to a unit suffix."""

    units: Units = Units.NUMBER
    precision: int = 0

    def fit_number(self, value: float, precision: int) -> str:
        """Render ``value`` in at most ``length`` characters, or ``#`` marks."""
        units = _UNITS[self.units]
        for factor in sorted(units):
            unit = units[factor]
            raw = value / factor
            text = _fmt(raw, precision, unit)
            left = self.length - len(text)

            if raw < 0 or (self.length + precision) - len(text) < 0:
                continue
            if left < 0:
                if precision > 0:
                    return self.fit_number(value, precision - 1)
                return text
            if left > 1 and factor != 1:
                return _fmt(raw, left - 1, unit)
            if factor != 1 and raw < 1 and left > 0 and _fmt(raw, 1) != "1.0":
                # text was rounded up; show a leading-dot decimal instead
                return _fmt(raw, precision + left, unit)[1:]
            if factor != 1 and text == f"0{unit}":
                if left > 0:
                    return _fmt(raw, precision + 1, unit)[1:]
                return "#" * self.length
            return text

        text = _fmt(value, precision)
        if len(text) > self.length and precision > 0:
            return self.fit_number(value, precision - 1)
        return "#" * self.length