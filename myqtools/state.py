"""The state of the monitored server: the current and previous sample sets."""

from __future__ import annotations

from dataclasses import dataclass, field

from myqtools.sampleset import SampleSet


@dataclass
class State:
    """Current and previous sample sets, live or loaded from a file."""

    current: SampleSet = field(default_factory=SampleSet)
    previous: SampleSet | None = None
    live: bool = False

    def seconds_diff(self) -> float:
        """Seconds between the previous and current sets, 0 if unknown."""
        if self.previous is None:
            return 0.0
        if self.live:
            diff = (self.current.timestamp - self.previous.timestamp).total_seconds()
            return diff if diff > 0 else 0.0
        return float(self.current.uptime - self.previous.uptime)

    def time_string(self) -> str:
        """What to print in the time column."""
        if self.live:
            return self.current.timestamp.strftime("%H:%M:%S")
        return f"{self.current.uptime}s"