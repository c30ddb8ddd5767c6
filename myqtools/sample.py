"""Samples of server data, and the keys that address values inside them."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

import yaml


@dataclass(frozen=True)
class Source:
    """A named origin of samples, such as global status or global variables."""

    name: str
    description: str = ""


@dataclass(frozen=True)
class SourceKey:
    """Identifies a single key within a single source."""

    source_name: str
    key: str

    def __str__(self) -> str:
        return f"{self.source_name}/{self.key}"


def parse_source_key(text: str) -> SourceKey:
    """Parse ``source/key``; everything after the first slash is the key."""
    name, sep, key = text.partition("/")
    if not sep:
        raise ValueError(f"sourcekey invalid format: {text}")
    return SourceKey(name, key)


def _scalar_text(item: Any) -> str:
    if isinstance(item, (dict, list)):
        raise ValueError(f"sourcekey must be a string, got: {item!r}")
    if isinstance(item, bool):
        return "true" if item else "false"
    if item is None:
        return ""
    return str(item)


def parse_source_keys(yaml_str: str) -> list[SourceKey]:
    """Parse a YAML list of ``source/key`` strings."""
    try:
        loaded = yaml.safe_load(yaml_str)
    except yaml.YAMLError as exc:
        raise ValueError(f"invalid yaml: {exc}") from exc
    if loaded is None:
        return []
    if not isinstance(loaded, list):
        raise ValueError("expected a list of source keys")
    return [parse_source_key(_scalar_text(item)) for item in loaded]


@dataclass
class Sample:
    """The values of one source at a given moment."""

    data: dict[str, str] = field(default_factory=dict)
    error: Exception | None = None
    timestamp: datetime = field(default_factory=datetime.now)

    def get_string(self, key: str) -> str:
        """Return the raw value of ``key``; raise KeyError if it is absent."""
        try:
            return self.data[key]
        except KeyError:
            raise KeyError(key) from None

    def keys(self) -> list[str]:
        """All keys held by this sample."""
        return list(self.data)

    def __len__(self) -> int:
        return len(self.data)