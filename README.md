# myqtools

Building blocks for compact, iostat-like views of MySQL server activity.

`myqtools` reads the global status and global variables of a MySQL server,
either live from a running server or from files captured earlier with
`mysqladmin extended-status` (tabular output) or the `mysql` client in batch
mode. It turns successive samples into fixed-width columns: rates per second,
differences between samples, gauges, percentages and sums over many counters.
Numbers are scaled with unit suffixes (`k`, `m`, `K`, `M`, `ms`, `µs`, ...) so
that every value fits its column.

## Modules

- `myqtools.sample`: `Sample` holds the key/value pairs read from one source
  (such as `status` or `variables`) at one moment. `SourceKey` names one key in
  one source; `parse_source_key("status/connections")` builds one, and
  `parse_source_keys` reads a YAML list of them. `Source` describes a source.
- `myqtools.sources`: `SourceCatalog` reads a YAML list of sources
  (`name`, `description`) and looks them up with `SourceCatalog.get`.
- `myqtools.sampleset`: `SampleSet` groups the samples taken together and
  gives typed access (`get_string`, `get_int`, `get_float`, `get_numeric`,
  `get_float_sum`, and the forgiving `get_str`, `get_i`, `get_f`). Failures
  raise `SampleSetError`. Keys may be regular expressions, expanded with
  `SampleSet.expand_source_keys`.
- `myqtools.state`: `State` holds the current and previous sample sets;
  `State.seconds_diff` gives the seconds between them (from timestamps when
  live, from uptime otherwise) and `State.time_string` the label for the time
  column (`HH:MM:SS` when live, `<uptime>s` otherwise).
- `myqtools.fileparser`: `FileParser` reads captured status output, detects
  batch or tabular layout (`OutputType`), and yields one `Sample` per record,
  skipping records whose uptime is closer than the chosen interval.
- `myqtools.fileloader`: `FileLoader` turns a status file, and optionally a
  variables file, into a stream of `State` objects (`FileLoader.states`).
  Setup problems raise `LoaderError`.
- `myqtools.liveloader`: `LiveLoader` queries `performance_schema` on a
  running server through PyMySQL and yields a `State` right away and then
  once per interval, without end. `parse_dsn` reads DSNs of the form
  `user:password@tcp(host:port)/dbname?params`; malformed ones raise
  `DSNError`.
- `myqtools.clientconf`: builds connection settings from built-in defaults,
  the usual option files (`cnf_files()`: `/etc/my.cnf`, `/etc/mysql/my.cnf`,
  `~/.my.cnf`, `~/.mylogin.cnf`) and command-line flags, later sources
  winning. `add_mysql_arguments` adds `--user/-u`, `--password/-p`,
  `--host/-h`, `--port/-P`, `--socket/-S`, `--ssl-cert`, `--ssl-key` and
  `--ssl-ca` to an `argparse` parser; `flags_from_args` collects them into
  `ClientFlags`; `generate_config` returns a `MySQLConfig` whose
  `format_dsn` renders a DSN. Problems raise `ClientConfigError`.
- `myqtools.textfit`: `fit_string`, `fit_string_left`, `calculate_diff`,
  `calculate_rate`, `term_size`, and the helpers that lay columns side by side.
- `myqtools.columns`, `myqtools.metrics`, `myqtools.views`: the column types
  `RateCol`, `DiffCol`, `GaugeCol`, `PercentCol`, `RateSumCol`,
  `SortedExpandedCountsCol` and `SampleTimeCol`, grouped into `GroupCol`s and
  `View`s. `parse_columns_yaml` builds columns from YAML; `ViewCatalog` reads
  a YAML list of views. Invalid definitions raise `ColumnParseError`.

## Example

```python
from myqtools.clientconf import ClientFlags, generate_config
from myqtools.sample import parse_source_key
from myqtools.textfit import calculate_rate, fit_string

print(parse_source_key("status/connections"))   # status/connections

# 100 new connections over 5 seconds
print(calculate_rate(200, 100, 5))   # 20.0

# values are right-aligned and cut to the column width
print(repr(fit_string("f", 4)))      # '   f'
print(repr(fit_string("fooey", 4)))  # 'fooe'

# defaults plus a user flag, reading no option files
config = generate_config(ClientFlags(user="monitor"), files=[])
print(config.format_dsn())           # monitor@tcp(127.0.0.1:3306)/
```

Views are described in YAML. Every view has a name, a description and
groups of columns:

```yaml
- name: cttf
  description: Connections, threads, tables and files
  groups:
    - name: Connects
      description: Connection related metrics
      cols:
        - name: cons
          description: Connections per second
          type: Rate
          key: status/connections
          units: Number
          length: 4
          precision: 0
        - name: conn
          description: Threads connected
          type: Gauge
          key: status/threads_connected
          units: Number
          length: 4
          precision: 0
```

Units are one of `Number`, `Memory`, `Second`, `Microsecond`, `Nanosecond`
and `Percent`.

To render a captured status file with such a view:

```python
from myqtools.fileloader import FileLoader
from myqtools.views import ViewCatalog

catalog = ViewCatalog()
catalog.parse(open("views.yaml").read())
view = catalog.get_viewer("cttf")

loader = FileLoader("status.txt")
loader.initialize(1)
for number, state in enumerate(loader.states()):
    if number == 0:
        print("\n".join(view.header(state)))
    print("\n".join(view.data(state)))
```

## What the package does not do

There is no command-line program: the package offers the parts, and the
loop that picks a view, prints headers and data and repeats the header is
left to the caller. No view or source definitions are built in; they have
to be supplied as YAML.

## Running the tests

Install the `test` extra and run `pytest` from the project directory.