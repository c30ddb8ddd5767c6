"""Parse files of SHOW STATUS / SHOW VARIABLES output into samples."""

from __future__ import annotations

import enum
from datetime import timedelta
from pathlib import Path
from typing import Iterator

from myqtools.sample import Sample

END_STRING = b"MYQTOOLSEND"
_TABULAR_MATCH = b"| Variable_name"
_UPTIME = b"Uptime"


class OutputType(enum.Enum):
    """Layout of the parsed output."""

    BATCH = "batch"
    TABULAR = "tabular"


def _seconds(interval: float | timedelta) -> float:
    if isinstance(interval, timedelta):
        return interval.total_seconds()
    return float(interval)


def _parse_float_or_zero(text: bytes) -> float:
    try:
        return float(text.decode("ascii"))
    except (UnicodeDecodeError, ValueError):
        return 0.0


class FileParser:
    """Reads a file of status output and yields one Sample per record."""

    def __init__(self, file_name: str | Path) -> None:
        self.file_name = Path(file_name)
        self.output_type = OutputType.BATCH
        self._records: Iterator[bytes] | None = None

    def initialize(self, interval: float | timedelta) -> None:
        """Open the file and prepare to read records ``interval`` seconds apart.

        Raises OSError if the file cannot be read and ValueError if the
        interval is shorter than one second.
        """
        data = self.file_name.read_bytes()
        seconds = _seconds(interval)
        if seconds < 1:
            raise ValueError(f"interval cannot be less than 1s ({seconds}s)")

        if data.startswith((b"+", b"|")):
            self.output_type = OutputType.TABULAR
            match = _TABULAR_MATCH
        else:
            self.output_type = OutputType.BATCH
            match = END_STRING
        self._records = self._split_records(data, match, seconds)

    @staticmethod
    def _split_records(data: bytes, match: bytes, seconds: float) -> Iterator[bytes]:
        prev_uptime = 0.0

        def skip_interval(record: bytes) -> bool:
            nonlocal prev_uptime
            start = record.find(_UPTIME) + len(_UPTIME)
            nl = record.find(b"\n", start)
            value = record[start:nl] if nl >= 0 else b""
            current = _parse_float_or_zero(value.strip(b"| ").strip())
            if prev_uptime > 0 and current - prev_uptime < seconds:
                return True
            prev_uptime = current
            return False

        pos = 0
        while pos < len(data):
            chunk = data[pos:]
            end = chunk.find(match)
            if end < 0:
                yield chunk
                return
            nl = chunk.find(b"\n", end)
            pos += len(chunk) if nl < 0 else nl + 1
            if end == 0:
                continue
            record = chunk[:end]
            if seconds > 1 and skip_interval(record):
                continue
            yield record

    def _parse_record(self, record: bytes) -> Sample:
        sample = Sample()
        divider = 0
        for raw_line in record.split(b"\n"):
            line = raw_line.rstrip(b"\r")
            if self.output_type is OutputType.TABULAR:
                if not line.startswith(b"|"):
                    continue
                if divider == 0:
                    divider = line.find(b" | ")
                elif len(line) < divider:
                    continue
                key = line[:divider].strip(b"| ")
                value = line[divider:].strip(b"| ")
            else:
                fields = line.split(b"\t")
                if len(fields) != 2:
                    continue
                key, value = fields
            sample.data[key.decode("utf-8", "replace").lower()] = value.decode(
                "utf-8", "replace"
            )
        return sample

    def next_sample(self) -> Sample | None:
        """Return the next non-empty sample, or None at end of file."""
        if self._records is None:
            raise RuntimeError("parser is not initialized")
        for record in self._records:
            sample = self._parse_record(record)
            if len(sample) > 0:
                return sample
        return None

    def __iter__(self) -> Iterator[Sample]:
        while (sample := self.next_sample()) is not None:
            yield sample