import pytest

from myqtools.sample import Source
from myqtools.sources import SourceCatalog

SOURCES_YAML = """---
- name: status
  description: MySQL server global status counters
- name: variables
  description: MySQL server global variables
"""


def make_catalog():
    catalog = SourceCatalog()
    catalog.parse(SOURCES_YAML)
    return catalog


def test_parse_keeps_order():
    catalog = make_catalog()
    assert len(catalog) == 2
    assert [s.name for s in catalog] == ["status", "variables"]


def test_get_source():
    source = make_catalog().get("status")
    assert source == Source("status", "MySQL server global status counters")


def test_get_source_missing():
    with pytest.raises(KeyError):
        make_catalog().get("fooey")


def test_parse_replaces_previous():
    catalog = make_catalog()
    catalog.parse("- name: status\n")
    assert len(catalog) == 1
    assert catalog.get("status").description == ""
    with pytest.raises(KeyError):
        catalog.get("variables")


def test_parse_bad_yaml():
    with pytest.raises(ValueError):
        SourceCatalog().parse("?")


def test_parse_bad_entry():
    with pytest.raises(ValueError):
        SourceCatalog().parse("- just a string\n")


def test_empty_catalog():
    catalog = SourceCatalog()
    catalog.parse("")
    assert len(catalog) == 0