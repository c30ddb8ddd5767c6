"""Load states from a live MySQL server."""

from __future__ import annotations

import time
from datetime import timedelta
from typing import Any, Iterable, Iterator
from urllib.parse import unquote

import pymysql

from myqtools.sample import Sample
from myqtools.state import State

STATUS_QUERY = "SELECT VARIABLE_NAME, VARIABLE_VALUE FROM performance_schema.global_status"
VARIABLES_QUERY = (
    "SELECT VARIABLE_NAME, VARIABLE_VALUE FROM performance_schema.global_variables"
)


class DSNError(ValueError):
    """A data source name is malformed."""


def parse_dsn(dsn: str) -> dict[str, Any]:
    """Parse ``[user[:password]@][net[(addr)]]/dbname[?params]``."""
    slash = dsn.rfind("/")
    if slash < 0:
        raise DSNError("invalid DSN: missing the slash separating the database name")
    head, tail = dsn[:slash], dsn[slash + 1 :]

    user = password = ""
    at = head.rfind("@")
    if at >= 0:
        user, _, password = head[:at].partition(":")
        head = head[at + 1 :]

    net, addr = head, ""
    if "(" in head:
        if not head.endswith(")"):
            raise DSNError(
                "invalid DSN: network address not terminated (missing closing brace)"
            )
        net, _, addr = head[:-1].partition("(")
    net = net or "tcp"
    if net == "tcp":
        addr = addr or "127.0.0.1:3306"
        if ":" not in addr.rsplit("]", 1)[-1]:
            addr += ":3306"
    elif net == "unix":
        addr = addr or "/tmp/mysql.sock"

    dbname, _, query = tail.partition("?")
    params = {}
    for item in filter(None, query.split("&")):
        name, sep, value = item.partition("=")
        if not sep:
            raise DSNError(f"invalid DSN: invalid parameter {item!r}")
        params[name] = unquote(value)

    return {
        "user": user,
        "password": password,
        "net": net,
        "addr": addr,
        "dbname": unquote(dbname),
        "params": params,
    }


class LiveLoader:
    """Collects global status and variables from a server every interval."""

    def __init__(self, dsn: str) -> None:
        self.dsn = dsn
        self.interval = 1.0
        self._settings: dict[str, Any] | None = None
        self._connection: Any = None

    def initialize(self, interval: float | timedelta, sources: Iterable[str] = ()) -> None:
        """Check the DSN and remember the interval; raises DSNError."""
        if isinstance(interval, timedelta):
            interval = interval.total_seconds()
        self.interval = float(interval)
        self._settings = parse_dsn(self.dsn)

    def _connect(self) -> Any:
        if self._connection is None:
            if self._settings is None:
                raise RuntimeError("loader is not initialized")
            s = self._settings
            kwargs: dict[str, Any] = {"user": s["user"] or None}
            password = s["password"]
            if password:
                kwargs["password"] = password
            if s["dbname"]:
                kwargs["database"] = s["dbname"]
            if s["net"] == "unix":
                kwargs["unix_socket"] = s["addr"]
            else:
                host, _, port = s["addr"].rpartition(":")
                kwargs["host"] = host.strip("[]")
                kwargs["port"] = int(port)
            self._connection = pymysql.connect(**kwargs)
        return self._connection

    def get_sample(self, query: str) -> Sample:
        """Run ``query`` and return its name/value rows as a Sample."""
        sample = Sample()
        try:
            connection = self._connect()
            with connection.cursor() as cursor:
                cursor.execute(query)
                rows = cursor.fetchall()
        except (pymysql.MySQLError, OSError, ValueError) as exc:
            self._connection = None
            sample.error = RuntimeError(f"cannot run query ({query}): {exc}")
            return sample
        for row in rows:
            try:
                name, value = row[0], row[1]
            except (IndexError, TypeError) as exc:
                sample.error = RuntimeError(f"Error parsing query results ({query}): {exc}")
                return sample
            if isinstance(name, bytes):
                name = name.decode("utf-8", "replace")
            if isinstance(value, bytes):
                value = value.decode("utf-8", "replace")
            sample.data[str(name).lower()] = "" if value is None else str(value)
        return sample

    def _state(self, previous) -> State:
        state = State(live=True)
        state.current.set_sample("status", self.get_sample(STATUS_QUERY))
        state.current.set_sample("variables", self.get_sample(VARIABLES_QUERY))
        state.previous = previous
        return state

    def states(self) -> Iterator[State]:
        """Yield a State right away, then one every interval, forever."""
        previous = None
        next_tick = time.monotonic()
        while True:
            state = self._state(previous)
            yield state
            previous = state.current
            next_tick += self.interval
            delay = next_tick - time.monotonic()
            if delay > 0:
                time.sleep(delay)