"""Load states from status (and optional variables) output files."""

from __future__ import annotations

from datetime import timedelta
from pathlib import Path
from typing import Iterable, Iterator

from myqtools.fileparser import FileParser
from myqtools.sample import Sample
from myqtools.state import State


class LoaderError(Exception):
    """A loader could not be set up."""


class FileLoader:
    """Produces a State for every record in a status file."""

    def __init__(self, status_file: str | Path, var_file: str | Path = "") -> None:
        self.status_parser = FileParser(status_file)
        self.variables_parser = FileParser(var_file) if var_file else None
        self.variables_sample: Sample | None = None
        self.first_uptime = 0

    def initialize(self, interval: float | timedelta, sources: Iterable[str] = ()) -> None:
        try:
            self.status_parser.initialize(interval)
        except (OSError, ValueError) as exc:
            raise LoaderError(f"error initializing status file loader: {exc}") from exc

        if self.variables_parser is None:
            return
        try:
            self.variables_parser.initialize(interval)
        except (OSError, ValueError) as exc:
            raise LoaderError(f"error initializing variables file loader: {exc}") from exc
        # Only the first variables sample is used.
        self.variables_sample = self.variables_parser.next_sample()
        if self.variables_sample is not None and self.variables_sample.error is not None:
            raise LoaderError(f"error parsing variables: {self.variables_sample.error}")

    def states(self) -> Iterator[State]:
        """Yield one State per status record, linked to the previous one."""
        previous = None
        for sample in self.status_parser:
            state = State()
            state.current.set_sample("status", sample)
            if self.variables_sample is not None:
                state.current.set_sample("variables", self.variables_sample)
            state.previous = previous

            if "uptime" in sample.data:
                try:
                    uptime = int(sample.data["uptime"])
                except ValueError:
                    uptime = 0
                if self.first_uptime == 0:
                    self.first_uptime = uptime
                state.current.uptime = uptime - self.first_uptime

            yield state
            previous = state.current