from datetime import timedelta

import pytest

from myqtools.fileparser import FileParser, OutputType
from myqtools.sample import SourceKey
from myqtools.sampleset import SampleSet, SampleSetError


def _tabular(uptimes):
    sep = "+---------------------------+----------+\n"
    out = []
    for i, up in enumerate(uptimes):
        out.append(sep)
        out.append("| Variable_name             | Value    |\n")
        out.append(sep)
        out.append(f"| Connections               | {10 + i}       |\n")
        out.append("| Compression               | OFF      |\n")
        out.append("| Wsrep_local_send_queue_avg | 0.500000 |\n")
        out.append(f"| Uptime                    | {up}      |\n")
        out.append(sep)
    return "".join(out)


def _batch(uptimes):
    out = []
    for i, up in enumerate(uptimes):
        out.append("Variable_name\tValue\n")
        out.append(f"Connections\t{10 + i}\n")
        out.append("Compression\tOFF\n")
        out.append("Wsrep_local_send_queue_avg\t0.500000\n")
        out.append("Binlog_snapshot_file\tmysql-bin.000001\n")
        out.append(f"Uptime\t{up}\n")
        out.append("MYQTOOLSEND\n")
    return "".join(out)


def _parser(path, interval=1):
    fp = FileParser(path)
    fp.initialize(interval)
    return fp


def test_missing_file(tmp_path):
    with pytest.raises(OSError):
        _parser(tmp_path / "nope")


def test_empty_file(tmp_path):
    p = tmp_path / "empty"
    p.write_text("")
    assert _parser(p).next_sample() is None


def test_bad_interval(tmp_path):
    p = tmp_path / "empty"
    p.write_text("")
    with pytest.raises(ValueError):
        FileParser(p).initialize(timedelta(microseconds=1))


def _check_types(sample):
    ss = SampleSet()
    ss.set_sample("status", sample)
    assert ss.get_int(SourceKey("status", "connections")) == 10
    assert ss.get_float(SourceKey("status", "wsrep_local_send_queue_avg")) == 0.5
    with pytest.raises(SampleSetError):
        ss.get_float(SourceKey("status", "compression"))
    assert ss.get_string(SourceKey("status", "compression")) == "OFF"


def test_single_tabular(tmp_path):
    p = tmp_path / "admin"
    p.write_text(_tabular([100]))
    fp = _parser(p)
    sample = fp.next_sample()
    assert fp.output_type is OutputType.TABULAR
    assert sample.error is None
    _check_types(sample)
    assert fp.next_sample() is None


def test_single_batch(tmp_path):
    p = tmp_path / "batch"
    p.write_text(_batch([100]))
    fp = _parser(p)
    sample = fp.next_sample()
    assert fp.output_type is OutputType.BATCH
    _check_types(sample)
    assert sample.data["binlog_snapshot_file"] == "mysql-bin.000001"


@pytest.mark.parametrize("maker", [_tabular, _batch])
def test_two_samples(tmp_path, maker):
    p = tmp_path / "two"
    p.write_text(maker([100, 101]))
    samples = list(_parser(p))
    assert [s.data["uptime"] for s in samples] == ["100", "101"]


@pytest.mark.parametrize("maker", [_tabular, _batch])
def test_interval_skips(tmp_path, maker):
    p = tmp_path / "lots"
    p.write_text(maker(list(range(100, 111))))
    samples = list(_parser(p, timedelta(seconds=5)))
    assert [s.data["uptime"] for s in samples] == ["100", "105", "110"]


def test_batch_without_terminator(tmp_path):
    p = tmp_path / "b"
    p.write_text("Uptime\t5\nQuestions\t7")
    samples = list(_parser(p))
    assert samples[0].data == {"uptime": "5", "questions": "7"}