import io
import sys

import pytest
from hypothesis import given
from hypothesis import strategies as st

from minios.sperf import (
    SyscallStat,
    collect,
    format_report,
    main,
    parse_line,
    ratios,
)


def test_parse_line_name_and_time():
    line = 'read(3, "abc", 3) = 3 <0.000125>'
    assert parse_line(line) == SyscallStat("read", 0.000125)


def test_parse_line_strips_newline():
    assert parse_line("close(3) = 0 <0.25>\n") == SyscallStat("close", 0.25)


def test_parse_line_without_paren_is_whole_name():
    line = "+++ exited with 0 +++"
    assert parse_line(line) == SyscallStat(line, 0.0)


def test_parse_line_without_time():
    assert parse_line("exit_group(0) = ?") == SyscallStat("exit_group", 0.0)


def test_parse_line_angle_in_arguments_spoils_time():
    line = 'open("<x") = 3 <0.5>'
    assert parse_line(line).time == 0.0


def test_collect_sums_and_keeps_first_seen_order():
    lines = ["read() = 1 <0.5>", "write() = 1 <0.25>", "read() = 1 <0.5>"]
    stats = collect(lines)
    assert [s.name for s in stats] == ["read", "write"]
    assert stats[0].time == pytest.approx(1.0)
    assert stats[1].time == pytest.approx(0.25)


def test_format_report_worked_example():
    stats = [
        SyscallStat("a", 0.5),
        SyscallStat("b", 0.25),
        SyscallStat("c", 0.125),
        SyscallStat("d", 0.125),
    ]
    assert format_report(stats) == "a (50.000000%)\nb (25.000000%)\n"


def test_ratios_needs_two_entries():
    with pytest.raises(ValueError):
        ratios([SyscallStat("only", 1.0)])


def test_ratios_zero_total():
    with pytest.raises(ValueError):
        ratios([SyscallStat("a", 0.0), SyscallStat("b", 0.0), SyscallStat("c", 0.0)])


@given(st.lists(st.floats(min_value=0.001, max_value=100.0), min_size=2, max_size=10))
def test_ratios_invariants(times):
    stats = [SyscallStat(f"s{n}", t) for n, t in enumerate(times)]
    result = ratios(stats)
    assert len(result) == len(stats) - 2
    shares = [share for _, share in result]
    assert shares == sorted(shares, reverse=True)
    assert all(0.0 <= share <= 1.0 for share in shares)
    assert sum(shares) <= 1.0 + 1e-9
    assert {name for name, _ in result} == {s.name for s in stats[:-2]}


def test_main_reads_stdin_and_drops_partial_line(monkeypatch, capsys):
    log = (
        "read() = 0 <0.3>\n"
        "write() = 0 <0.1>\n"
        "exit_group(0) = ?\n"
        "+++ exited with 0 +++\n"
        "partial("
    )
    monkeypatch.setattr(sys, "stdin", io.StringIO(log))
    assert main([]) == 0
    out = capsys.readouterr().out
    lines = out.splitlines()
    assert len(lines) == 2
    assert lines[0].startswith("read (")
    assert lines[1].startswith("write (")
    assert "exit_group" not in out
    assert "partial" not in out


def test_main_reports_error_on_short_input(monkeypatch, capsys):
    monkeypatch.setattr(sys, "stdin", io.StringIO("read() = 0 <0.3>\n"))
    assert main([]) == 1
    assert "sperf" in capsys.readouterr().err