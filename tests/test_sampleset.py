import pytest

from myqtools.sample import Sample, SourceKey
from myqtools.sampleset import SampleSet, SampleSetError


def make_set():
    ss = SampleSet()
    ss.set_sample(
        "testing",
        Sample(data={"string": "String", "int": "10", "float": "1.4256"}),
    )
    return ss


def key(name):
    return SourceKey("testing", name)


def test_missing_key():
    with pytest.raises(SampleSetError):
        make_set().get_string(key("what key?"))


def test_missing_source():
    with pytest.raises(SampleSetError) as info:
        make_set().get_string(SourceKey("nope", "int"))
    assert str(info.value) == "source (nope) not found"


def test_conversions():
    ss = make_set()
    value = ss.get_int(key("int"))
    assert isinstance(value, int) and value == 10
    with pytest.raises(SampleSetError):
        ss.get_int(key("intbad"))
    fvalue = ss.get_float(key("float"))
    assert isinstance(fvalue, float) and fvalue == 1.4256
    with pytest.raises(SampleSetError):
        ss.get_float(key("floatbad"))
    assert ss.get_string(key("string")) == "String"


def test_conversion_errors():
    ss = make_set()
    with pytest.raises(SampleSetError):
        ss.get_float(key("string"))
    with pytest.raises(SampleSetError):
        ss.get_int(key("string"))
    assert ss.get_f(key("string")) == 0.0
    assert ss.get_i(key("string")) == 0
    with pytest.raises(SampleSetError):
        ss.get_int(key("float"))
    assert ss.get_float(key("int")) == 10.0


@pytest.mark.parametrize("text", ["", " 10", "1_0", "notanumber"])
def test_strict_int_parsing(text):
    ss = SampleSet()
    ss.set_sample("s", Sample(data={"v": text}))
    with pytest.raises(SampleSetError):
        ss.get_int(SourceKey("s", "v"))


def test_get_str():
    ss = make_set()
    assert ss.get_str(key("string")) == "String"
    assert ss.get_str(key("int")) == "10"
    assert ss.get_str(key("missing")) == ""


def test_get_numeric():
    ss = make_set()
    ivalue = ss.get_numeric(key("int"))
    assert isinstance(ivalue, int) and ivalue == 10
    fvalue = ss.get_numeric(key("float"))
    assert isinstance(fvalue, float) and fvalue == 1.4256
    with pytest.raises(SampleSetError) as info:
        ss.get_numeric(key("string"))
    assert str(info.value) == "value is not numeric: `String`"


def test_get_float_sum():
    total = make_set().get_float_sum([key("int"), key("float")])
    assert total == pytest.approx(11.4256)


def test_expand_source_keys():
    ss = make_set()
    ss.set_sample(
        "testing",
        Sample(data={"prefix": "String", "prefab": "10", "something else": "1.4256"}),
    )
    expanded = ss.expand_source_keys([key("pre*")])
    assert sorted(sk.key for sk in expanded) == ["prefab", "prefix"]


def test_expand_source_keys_regex():
    ss = make_set()
    ss.set_sample(
        "testing",
        Sample(data={"prefix": "String", "prefab": "10", "fabpre": "1.4256"}),
    )
    expanded = ss.expand_source_keys([key("^pre*")])
    assert len(expanded) == 2
    assert all(sk.source_name == "testing" for sk in expanded)


def test_expand_invalid_pattern_passes_through():
    bad = key("(")
    assert make_set().expand_source_keys([bad]) == [bad]


def test_expand_unknown_source_dropped():
    assert make_set().expand_source_keys([SourceKey("nope", "int")]) == []


def test_has_source():
    ss = make_set()
    assert ss.has_source("testing")
    assert not ss.has_source("variables")


def test_errors_collected():
    ss = make_set()
    assert ss.errors() == []
    failure = RuntimeError("boom")
    ss.set_sample("broken", Sample(error=failure))
    assert ss.errors() == [failure]