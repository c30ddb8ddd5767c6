"""Columns that render numbers and text from a State, and their YAML definitions."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Mapping

import yaml

from myqtools.columns import Column, NumberColumn, Units, parse_units
from myqtools.sample import SourceKey, parse_source_key
from myqtools.sampleset import SampleSetError
from myqtools.state import State
from myqtools.textfit import calculate_diff, calculate_rate, fit_string


class ColumnParseError(ValueError):
    """A column definition is invalid."""


def _no_key() -> SourceKey:
    return SourceKey("", "")


def _render(col: NumberColumn, compute: Callable[[State], float], state: State) -> str:
    try:
        raw = compute(state)
    except SampleSetError:
        return fit_string("-", col.length)
    return fit_string(col.fit_number(raw, col.precision), col.length)


def _previous_f(state: State, key: SourceKey) -> float:
    if state.previous is None:
        return 0.0
    return state.previous.get_f(key)


@dataclass
class DiffCol(NumberColumn):
    """The change of a counter since the previous sample."""

    key: SourceKey = field(default_factory=_no_key)

    def diff(self, state: State) -> float:
        """Raise SampleSetError if the current value is missing or not a number."""
        current = state.current.get_float(self.key)
        return calculate_diff(current, _previous_f(state, self.key))

    def data(self, state: State) -> list[str]:
        return [_render(self, self.diff, state)]


@dataclass
class GaugeCol(NumberColumn):
    """The current value of a key, as a number if possible, else as text."""

    key: SourceKey = field(default_factory=_no_key)

    def data(self, state: State) -> list[str]:
        current = state.current
        try:
            text = self.fit_number(current.get_float(self.key), self.precision)
        except SampleSetError:
            try:
                text = current.get_string(self.key)
            except SampleSetError:
                text = "-"
        return [fit_string(text, self.length)]


@dataclass
class PercentCol(NumberColumn):
    """One current value as a percentage of another."""

    numerator: SourceKey = field(default_factory=_no_key)
    denominator: SourceKey = field(default_factory=_no_key)

    def percent(self, state: State) -> float:
        """Raise SampleSetError if either value is missing or not a number."""
        numerator = state.current.get_float(self.numerator)
        denominator = state.current.get_float(self.denominator)
        try:
            ratio = numerator / denominator
        except ZeroDivisionError:
            ratio = math.nan if numerator == 0 else math.copysign(math.inf, numerator)
        return ratio * 100

    def data(self, state: State) -> list[str]:
        return [_render(self, self.percent, state)]


@dataclass
class RateCol(NumberColumn):
    """The per-second change of a counter."""

    key: SourceKey = field(default_factory=_no_key)

    def rate(self, state: State) -> float:
        """Raise SampleSetError if the current value is missing or not a number."""
        current = state.current.get_float(self.key)
        return calculate_rate(current, _previous_f(state, self.key), state.seconds_diff())

    def data(self, state: State) -> list[str]:
        return [_render(self, self.rate, state)]


@dataclass
class RateSumCol(NumberColumn):
    """The per-second change of the sum of every key matching the patterns."""

    keys: list[SourceKey] = field(default_factory=list)

    def rate(self, state: State) -> float:
        """Raise SampleSetError if no key matches."""
        expanded = state.current.expand_source_keys(self.keys)
        if not expanded:
            raise SampleSetError(f"no keys found: {self.name}")
        current = state.current.get_float_sum(expanded)
        previous = 0.0 if state.previous is None else state.previous.get_float_sum(expanded)
        return calculate_rate(current, previous, state.seconds_diff())

    def data(self, state: State) -> list[str]:
        return [_render(self, self.rate, state)]


@dataclass
class SampleTimeCol(Column):
    """The time column: wall-clock time when live, uptime otherwise."""

    name: str = "time"
    length: int = 8

    def data(self, state: State) -> list[str]:
        return [fit_string(state.time_string(), self.length)]


@dataclass
class SortedExpandedCountsCol(NumberColumn):
    """One line per distinct change, largest first, naming the keys that changed by it."""

    keys: list[SourceKey] = field(default_factory=list)

    def data(self, state: State) -> list[str]:
        expanded = state.current.expand_source_keys(self.keys)
        by_diff: dict[float, list[str]] = {}
        for sk in expanded:
            diff = calculate_diff(state.current.get_f(sk), _previous_f(state, sk))
            if diff <= 0:
                continue
            by_diff.setdefault(diff, []).append(sk.key)

        return [
            f"{fit_string(self.fit_number(diff, 0), 10)} [{' '.join(by_diff[diff])}]"
            for diff in sorted(by_diff, reverse=True)
        ]


_SINGLE_KEY_FIELDS: dict[str, tuple[type[NumberColumn], tuple[str, ...]]] = {
    "Rate": (RateCol, ("key",)),
    "Gauge": (GaugeCol, ("key",)),
    "Diff": (DiffCol, ("key",)),
    "Percent": (PercentCol, ("numerator", "denominator")),
}
_MULTI_KEY_TYPES: dict[str, type[NumberColumn]] = {
    "RateSum": RateSumCol,
    "SortedExpandedCounts": SortedExpandedCountsCol,
}


def _text(mapping: Mapping[str, Any], name: str) -> str:
    value = mapping.get(name)
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        raise ColumnParseError(f"{name} must be a string, got: {value!r}")
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _int(mapping: Mapping[str, Any], name: str) -> int:
    value = mapping.get(name)
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise ColumnParseError(f"{name} must be an integer, got: {value!r}")
    return value


def _source_key(value: Any) -> SourceKey:
    if value is None:
        return _no_key()
    if isinstance(value, (dict, list)):
        raise ColumnParseError(f"sourcekey must be a string, got: {value!r}")
    try:
        return parse_source_key(str(value))
    except ValueError as exc:
        raise ColumnParseError(str(exc)) from None


def _base_fields(mapping: Mapping[str, Any]) -> dict[str, Any]:
    """The attributes every column has, read from a definition mapping."""
    sources = mapping.get("sources") or []
    if not isinstance(sources, list):
        raise ColumnParseError(f"sources must be a list, got: {sources!r}")
    return {
        "name": _text(mapping, "name"),
        "description": _text(mapping, "description"),
        "type": _text(mapping, "type"),
        "length": _int(mapping, "length"),
        "sources": [str(source) for source in sources],
    }


def _number_fields(mapping: Mapping[str, Any]) -> dict[str, Any]:
    fields = _base_fields(mapping)
    units = mapping.get("units")
    if units is None:
        fields["units"] = Units.NUMBER
    else:
        try:
            fields["units"] = parse_units(str(units))
        except ValueError as exc:
            raise ColumnParseError(str(exc)) from None
    fields["precision"] = _int(mapping, "precision")
    return fields


def column_from_mapping(mapping: Mapping[str, Any]) -> NumberColumn:
    """Build a column from one definition; its ``type`` picks the class."""
    if not isinstance(mapping, Mapping):
        raise ColumnParseError(f"column definition must be a mapping, got: {mapping!r}")
    col_type = _text(mapping, "type")

    if col_type in _SINGLE_KEY_FIELDS:
        cls, key_fields = _SINGLE_KEY_FIELDS[col_type]
        fields = _number_fields(mapping)
        for name in key_fields:
            fields[name] = _source_key(mapping.get(name))
        return cls(**fields)

    if col_type in _MULTI_KEY_TYPES:
        raw_keys = mapping.get("keys") or []
        if not isinstance(raw_keys, list):
            raise ColumnParseError(f"keys must be a list, got: {raw_keys!r}")
        fields = _number_fields(mapping)
        fields["keys"] = [_source_key(item) for item in raw_keys]
        return _MULTI_KEY_TYPES[col_type](**fields)

    raise ColumnParseError(f"invalid column type: {col_type}")


def parse_columns(items: Iterable[Mapping[str, Any]] | None) -> list[NumberColumn]:
    """Build a column for every definition in ``items``."""
    if items is None:
        return []
    if isinstance(items, (Mapping, str)):
        raise ColumnParseError("expected a list of columns")
    return [column_from_mapping(item) for item in items]


def parse_columns_yaml(yaml_str: str) -> list[NumberColumn]:
    """Build columns from a YAML list of definitions."""
    try:
        loaded = yaml.safe_load(yaml_str)
    except yaml.YAMLError as exc:
        raise ColumnParseError(f"invalid yaml: {exc}") from exc
    if loaded is None:
        return []
    if not isinstance(loaded, list):
        raise ColumnParseError("expected a list of columns")
    return parse_columns(loaded)