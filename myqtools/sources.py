"""A catalog of known sources, read from YAML."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator

import yaml

from myqtools.sample import Source


@dataclass
class SourceCatalog:
    """Known sources, in the order they were defined, looked up by name."""

    sources: list[Source] = field(default_factory=list)
    _by_name: dict[str, Source] = field(default_factory=dict, repr=False)

    def parse(self, yaml_str: str) -> None:
        """Replace the catalog with the sources listed in ``yaml_str``."""
        try:
            loaded = yaml.safe_load(yaml_str)
        except yaml.YAMLError as exc:
            raise ValueError(f"invalid yaml: {exc}") from exc
        if loaded is None:
            loaded = []
        if not isinstance(loaded, list):
            raise ValueError("expected a list of sources")

        sources = []
        for item in loaded:
            if not isinstance(item, dict):
                raise ValueError(f"invalid source entry: {item!r}")
            sources.append(
                Source(
                    name=str(item.get("name") or ""),
                    description=str(item.get("description") or ""),
                )
            )
        self.sources = sources
        self._by_name = {source.name: source for source in sources}

    def get(self, name: str) -> Source:
        """Look up a source by name; raise KeyError if it is unknown."""
        try:
            return self._by_name[name]
        except KeyError:
            raise KeyError(f"Source not found: {name}") from None

    def __iter__(self) -> Iterator[Source]:
        return iter(self.sources)

    def __len__(self) -> int:
        return len(self.sources)