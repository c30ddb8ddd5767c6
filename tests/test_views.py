import pytest

from myqtools.columns import Units
from myqtools.metrics import ColumnParseError, GaugeCol, RateCol
from myqtools.sample import Sample, SourceKey
from myqtools.sampleset import SampleSet
from myqtools.state import State
from myqtools.views import GroupCol, View, ViewCatalog


def rate_col():
    return RateCol(
        name="cons",
        description="Connections per second",
        type="Rate",
        key=SourceKey("status", "connections"),
        length=4,
        units=Units.NUMBER,
        precision=0,
    )


def gauge_col():
    return GaugeCol(
        name="conn",
        description="Threads connected",
        type="Gauge",
        key=SourceKey("status", "threads_connect"),
        length=4,
        units=Units.NUMBER,
        precision=0,
    )


def group_col():
    return GroupCol(
        name="Connects",
        description="Connection related metrics",
        type="Group",
        cols=[rate_col(), gauge_col()],
    )


def group_state():
    state = State()
    state.current.set_sample(
        "status", Sample(data={"connections": "15", "threads_connect": "4"})
    )
    prev = SampleSet()
    prev.set_sample("status", Sample(data={"connections": "10", "threads_connect": "3"}))
    state.previous = prev
    return state


def make_view():
    return View(name="Test View", description="My Test View", groups=[group_col()])


def test_group_col_header():
    lines = group_col().header(group_state())
    assert lines == ["Connects ", "cons conn"]


def test_group_col_header_fixed_length():
    gc = group_col()
    gc.length = 12
    assert gc.header(group_state())[0] == "Connects    "


def test_group_col_data():
    assert group_col().data(group_state()) == ["   5    4"]


def test_group_col_detailed_help():
    assert group_col().detailed_help() == [
        "Connects: Connection related metrics",
        "   cons: Connections per second",
        "   conn: Threads connected",
    ]


def test_view_header():
    lines = make_view().header(group_state())
    assert lines == [
        "         Connects ",
        "    time cons conn",
    ]


def test_view_data():
    assert make_view().data(group_state()) == ["      0s    5    4"]


def test_view_detailed_help():
    assert make_view().detailed_help() == [
        "Test View: My Test View",
        "   Connects: Connection related metrics",
        "      cons: Connections per second",
        "      conn: Threads connected",
    ]


def test_view_get_sources():
    assert make_view().get_sources() == []


VIEWS_YAML = """---
- name: cttf
  description: Connections, threads, tables and files
  groups:
    - name: Connects
      description: Connection related metrics
      cols:
        - name: cons
          description: Connections per second
          key: status/connections
          type: Rate
          units: Number
          length: 4
          precision: 0
        - name: conn
          description: Threads connected
          key: status/threads_connect
          type: Gauge
          units: Number
          length: 4
          precision: 0
- name: aaa
  description: Another view
  cols:
    - name: conn
      description: Threads connected
      key: status/threads_connect
      type: Gauge
      units: Number
      length: 4
      precision: 0
"""


def test_defs_parse():
    catalog = ViewCatalog()
    catalog.parse(VIEWS_YAML)
    assert len(catalog.views) == 2
    assert catalog.names == ["aaa", "cttf"]

    cttf = catalog.views["cttf"]
    assert len(cttf.groups) == 1
    group = cttf.groups[0]
    assert group.name == "Connects"
    assert len(group.cols) == 2
    assert group.cols[0].name == "cons"
    assert group.cols[0] == rate_col()
    assert catalog.views["aaa"].cols == [gauge_col()]


def test_parsed_view_renders():
    catalog = ViewCatalog()
    catalog.parse(VIEWS_YAML)
    view = catalog.get_viewer("cttf")
    assert view.data(group_state()) == ["      0s    5    4"]


def test_get_viewer():
    catalog = ViewCatalog()
    catalog.parse(VIEWS_YAML)
    assert catalog.get_viewer("cttf").name == "cttf"
    with pytest.raises(KeyError, match="view bad not found"):
        catalog.get_viewer("bad")


def test_parse_bad_column_type():
    catalog = ViewCatalog()
    with pytest.raises(ColumnParseError):
        catalog.parse("- name: v\n  cols:\n    - name: x\n      type: Nope\n")


def test_parse_not_a_list():
    catalog = ViewCatalog()
    with pytest.raises(ColumnParseError):
        catalog.parse("name: v\n")