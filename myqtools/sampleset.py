"""A collection of samples taken at one moment, with typed accessors."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable

from myqtools.sample import Sample, SourceKey

_INT_RE = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


class SampleSetError(Exception):
    """A value could not be found or converted."""


def _parse_int(text: str) -> int:
    if not _INT_RE.fullmatch(text):
        raise SampleSetError(f"invalid integer: {text!r}")
    value = int(text)
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise SampleSetError(f"integer out of range: {text!r}")
    return value


def _parse_float(text: str) -> float:
    if not text or "_" in text or any(ch.isspace() for ch in text):
        raise SampleSetError(f"invalid float: {text!r}")
    try:
        value = float(text)
    except ValueError:
        raise SampleSetError(f"invalid float: {text!r}") from None
    if math.isinf(value) and not text.lstrip("+-").lower().startswith("inf"):
        raise SampleSetError(f"float out of range: {text!r}")
    return value


@dataclass
class SampleSet:
    """Samples from several sources, taken together."""

    samples: dict[str, Sample] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)
    uptime: int = 0

    def set_sample(self, name: str, sample: Sample) -> None:
        self.samples[name] = sample

    def has_source(self, name: str) -> bool:
        return name in self.samples

    def errors(self) -> list[Exception]:
        """The collection errors of every sample in the set."""
        return [
            sample.error
            for sample in self.samples.values()
            if sample is not None and sample.error is not None
        ]

    def get_string(self, key: SourceKey) -> str:
        sample = self.samples.get(key.source_name)
        if sample is None:
            raise SampleSetError(f"source ({key.source_name}) not found")
        try:
            return sample.get_string(key.key)
        except KeyError:
            raise SampleSetError(f"key not found: {key}") from None

    def get_int(self, key: SourceKey) -> int:
        return _parse_int(self.get_string(key))

    def get_float(self, key: SourceKey) -> float:
        return _parse_float(self.get_string(key))

    def get_i(self, key: SourceKey) -> int:
        """Like get_int, but 0 on any failure."""
        try:
            return self.get_int(key)
        except SampleSetError:
            return 0

    def get_f(self, key: SourceKey) -> float:
        """Like get_float, but 0.0 on any failure."""
        try:
            return self.get_float(key)
        except SampleSetError:
            return 0.0

    def get_str(self, key: SourceKey) -> str:
        """Like get_string, but an empty string on any failure."""
        try:
            return self.get_string(key)
        except SampleSetError:
            return ""

    def get_numeric(self, key: SourceKey) -> int | float:
        """Return an int if the value parses as one, else a float."""
        try:
            return self.get_int(key)
        except SampleSetError:
            pass
        try:
            return self.get_float(key)
        except SampleSetError:
            raise SampleSetError(
                f"value is not numeric: `{self.get_str(key)}`"
            ) from None

    def get_float_sum(self, keys: Iterable[SourceKey]) -> float:
        return sum((self.get_f(key) for key in keys), 0.0)

    def expand_source_keys(self, keys: Iterable[SourceKey]) -> list[SourceKey]:
        """Expand keys whose key part is a regex into every matching key.

        Keys that are not valid patterns are passed through unchanged; keys
        naming an unknown source are dropped.
        """
        results: list[SourceKey] = []
        for sk in keys:
            try:
                pattern = re.compile(sk.key)
            except re.error:
                results.append(sk)
                continue
            sample = self.samples.get(sk.source_name)
            if sample is None:
                continue
            results.extend(
                SourceKey(sk.source_name, name)
                for name in sample.keys()
                if pattern.search(name)
            )
        return results