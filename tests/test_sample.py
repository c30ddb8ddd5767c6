from datetime import datetime

import pytest

from myqtools.sample import (
    Sample,
    Source,
    SourceKey,
    parse_source_key,
    parse_source_keys,
)


def make_sample():
    return Sample(data={"string": "String", "int": "10", "float": "1.4256"})


def test_sample_error():
    sample = Sample(error=RuntimeError("test error"))
    assert isinstance(sample.error, RuntimeError)
    assert str(sample.error) == "test error"


def test_sample_without_error():
    assert make_sample().error is None


def test_sample_length():
    assert len(make_sample()) == 3


def test_sample_timestamp():
    before = datetime.now()
    sample = make_sample()
    after = datetime.now()
    assert before <= sample.timestamp <= after


def test_sample_keys():
    assert sorted(make_sample().keys()) == ["float", "int", "string"]


def test_sample_get_string():
    assert make_sample().get_string("int") == "10"


def test_sample_get_string_missing():
    with pytest.raises(KeyError):
        make_sample().get_string("what key?")


def test_source_key_parse():
    keys = parse_source_keys("---\n- source/key\n- source/key/extra\n")
    assert keys == [SourceKey("source", "key"), SourceKey("source", "key/extra")]


def test_source_key_parse_bad_yaml():
    with pytest.raises(ValueError):
        parse_source_keys("?")


def test_source_key_parse_bad_format():
    with pytest.raises(ValueError) as info:
        parse_source_keys("---\n- sourcekey\n")
    assert str(info.value) == "sourcekey invalid format: sourcekey"


def test_parse_single_source_key():
    sk = parse_source_key("status/connections")
    assert sk.source_name == "status"
    assert sk.key == "connections"


def test_source_key_str_round_trip():
    sk = SourceKey("status", "com_set.*")
    assert parse_source_key(str(sk)) == sk


def test_source_defaults():
    src = Source("status")
    assert src.description == ""
    assert src.name == "status"