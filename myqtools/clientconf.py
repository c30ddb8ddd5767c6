"""Build MySQL client settings from defaults, option files and command-line flags."""

from __future__ import annotations

import argparse
import configparser
import getpass
import ssl
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Iterable

CLIENT = "client"
_TOPLEVEL = "__toplevel__"
# A section name that no option file can declare, so no values leak between sections.
_NO_DEFAULTS = "\x00defaults"


class ClientConfigError(Exception):
    """One or more problems were found while building the client settings.

    ``config`` holds whatever settings could still be built, if any.
    """

    def __init__(self, errors: Iterable[str], config: MySQLConfig | None = None) -> None:
        self.errors = list(errors)
        self.config = config
        super().__init__("; ".join(self.errors))


@dataclass
class ClientFlags:
    """Connection settings given on the command line; empty means unset."""

    user: str = ""
    password: str = ""
    host: str = ""
    port: str = ""
    socket: str = ""
    ssl_cert: str = ""
    ssl_key: str = ""
    ssl_ca: str = ""


@dataclass
class MySQLConfig:
    """Resolved connection settings."""

    user: str = ""
    passwd: str = ""
    net: str = ""
    addr: str = ""
    dbname: str = ""
    tls_config: str = ""
    ssl_context: ssl.SSLContext | None = None

    def format_dsn(self) -> str:
        """Render as ``user:passwd@net(addr)/dbname?params``."""
        parts = []
        if self.user or self.passwd:
            parts.append(self.user)
            if self.passwd:
                parts.append(f":{self.passwd}")
            parts.append("@")
        if self.net:
            parts.append(self.net)
            if self.addr:
                parts.append(f"({self.addr})")
        parts.append(f"/{self.dbname}")
        if self.tls_config:
            parts.append(f"?tls={self.tls_config}")
        return "".join(parts)


_ARGUMENTS = (
    ("-u", "--user", "mysql user, defaults to your username"),
    ("-p", "--password", "mysql password"),
    ("-h", "--host", "mysql host, defaults to 127.0.0.1"),
    ("-P", "--port", "mysql port, defaults to 3306"),
    ("-S", "--socket", "mysql socket"),
    (None, "--ssl-cert", "mysql ssl cert"),
    (None, "--ssl-key", "mysql ssl key"),
    (None, "--ssl-ca", "mysql ssl CA"),
)


def add_mysql_arguments(parser: argparse.ArgumentParser) -> None:
    """Add the standard MySQL connection options to ``parser``.

    A short option that clashes with one already defined (such as ``-h``
    for help) is left out; the long form is always added.
    """
    for short, long, help_text in _ARGUMENTS:
        dest = long.lstrip("-").replace("-", "_")
        if short is not None:
            try:
                parser.add_argument(short, long, dest=dest, default="", help=help_text)
                continue
            except argparse.ArgumentError:
                pass
        parser.add_argument(long, dest=dest, default="", help=help_text)


def flags_from_args(args: argparse.Namespace) -> ClientFlags:
    """Collect the MySQL options from parsed arguments."""
    values = {}
    for item in fields(ClientFlags):
        value = getattr(args, item.name, "")
        values[item.name] = "" if value is None else str(value)
    return ClientFlags(**values)


def cnf_files() -> list[str]:
    """Option files that may hold a [client] section, in reading order."""
    files = ["/etc/my.cnf", "/etc/mysql/my.cnf"]
    try:
        home = Path.home()
    except (RuntimeError, KeyError, OSError):
        return files
    files.extend([f"{home}/.my.cnf", f"{home}/.mylogin.cnf"])
    return files


def _new_parser() -> configparser.ConfigParser:
    parser = configparser.ConfigParser(
        allow_no_value=True,
        strict=False,
        interpolation=None,
        default_section=_NO_DEFAULTS,
    )
    parser.optionxform = str  # keep option names as written
    return parser


def _current_user() -> str:
    try:
        return getpass.getuser()
    except (OSError, KeyError, ImportError):
        return "root"


def init_cnf() -> configparser.ConfigParser:
    """A fresh option set with the built-in [client] defaults."""
    cnf = _new_parser()
    cnf.add_section(CLIENT)
    cnf.set(CLIENT, "user", _current_user())
    cnf.set(CLIENT, "host", "127.0.0.1")
    cnf.set(CLIENT, "port", "3306")
    return cnf


def _append_file(cnf: configparser.ConfigParser, file: str) -> None:
    text = Path(file).read_bytes().decode("utf-8")
    try:
        cnf.read_string(text, source=file)
    except configparser.MissingSectionHeaderError:
        # Directives such as !includedir may come before any section.
        cnf.read_string(f"[{_TOPLEVEL}]\n{text}", source=file)


def append_files(cnf: configparser.ConfigParser, files: Iterable[str]) -> None:
    """Read each option file into ``cnf``; later files override earlier ones.

    Files that do not exist are skipped. Other problems are collected and
    raised together as ClientConfigError after every file has been tried.
    """
    errors = []
    for file in files:
        try:
            _append_file(cnf, str(file))
        except FileNotFoundError:
            continue
        except (OSError, UnicodeDecodeError, configparser.Error) as exc:
            errors.append(f"{file}: {exc}")
    if errors:
        raise ClientConfigError(errors)


def apply_flags(cnf: configparser.ConfigParser, flags: ClientFlags) -> None:
    """Write every flag that is set into the [client] section."""
    if not cnf.has_section(CLIENT):
        cnf.add_section(CLIENT)
    for item in fields(ClientFlags):
        value = getattr(flags, item.name)
        if value:
            cnf.set(CLIENT, item.name.replace("_", "-"), value)


def _client_values(cnf: configparser.ConfigParser) -> dict[str, str]:
    return {
        key: "true" if value is None else value
        for key, value in cnf.items(CLIENT, raw=True)
    }


def cnf_to_config(cnf: configparser.ConfigParser) -> MySQLConfig:
    """Translate the [client] section into connection settings.

    SSL problems raise ClientConfigError, which carries the settings
    built so far.
    """
    config = MySQLConfig()
    if not cnf.has_section(CLIENT):
        return config
    client = _client_values(cnf)

    if "user" in client:
        config.user = client["user"]
    if "password" in client:
        config.passwd = client["password"]

    if "socket" in client:
        config.addr = client["socket"]
        config.net = "unix"

    # A host takes precedence over a socket.
    if "host" in client:
        port = client.get("port", "3306")
        config.addr = f"{client['host']}:{port}"
        config.net = "tcp"

    errors = []
    ca_data = None
    if "ssl-ca" in client:
        try:
            pem = Path(client["ssl-ca"]).read_bytes()
        except OSError as exc:
            errors.append(f"ssl-ca error: {exc}")
        else:
            try:
                text = pem.decode("ascii")
                ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT).load_verify_locations(cadata=text)
            except (UnicodeDecodeError, ssl.SSLError, ValueError):
                errors.append("failed to append PEM")
            else:
                ca_data = text

    cert = client.get("ssl-cert")
    key = client.get("ssl-key")
    if (cert is None) != (key is None):
        errors.append("need both ssl-cert and ssl-key set")
    elif cert is not None and key is not None:
        context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
        try:
            context.load_cert_chain(cert, key)
        except (OSError, ssl.SSLError, ValueError) as exc:
            errors.append(f"ssl-cert/key error: {exc}")
        else:
            if ca_data is not None:
                context.load_verify_locations(cadata=ca_data)
            config.ssl_context = context
            config.tls_config = "custom"

    if errors:
        raise ClientConfigError(errors, config)
    return config


def generate_config(
    flags: ClientFlags | None = None, files: Iterable[str] | None = None
) -> MySQLConfig:
    """Merge defaults, option files and flags, later sources winning.

    ``files`` defaults to the standard option files. Problems raise
    ClientConfigError, whose ``config`` still holds the merged settings.
    """
    if flags is None:
        flags = ClientFlags()
    if files is None:
        files = cnf_files()

    errors: list[str] = []
    cnf = init_cnf()
    try:
        append_files(cnf, files)
    except ClientConfigError as exc:
        errors.extend(exc.errors)
    apply_flags(cnf, flags)

    try:
        config = cnf_to_config(cnf)
    except ClientConfigError as exc:
        errors.extend(exc.errors)
        config = exc.config

    if errors:
        raise ClientConfigError(errors, config)
    return config