"""Summarise the share of time spent in each system call of a timed strace log.

The log is read from standard input.  Each line is expected in the form
``name(arguments) = result <seconds>``.
"""

from __future__ import annotations

import re
import sys
from dataclasses import dataclass
from typing import Iterable

_FLOAT_PREFIX = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")
_TIME_FIELD = re.compile(r"<([^>]*)>")


@dataclass
class SyscallStat:
    """Accumulated time of one system call."""

    name: str
    time: float = 0.0


def _leading_float(text: str) -> float:
    """Parse the longest numeric prefix of ``text``; 0.0 when there is none."""
    match = _FLOAT_PREFIX.match(text)
    return float(match.group(1)) if match else 0.0


def parse_line(line: str) -> SyscallStat:
    """Split one log line into the call name and the time it took.

    The name is everything before the first ``(``; a line without one is a name
    of its own.  The text of every ``<...>`` field after the name is joined and
    its numeric prefix is taken as the time.
    """
    line = line.rstrip("\n")
    name, paren, rest = line.partition("(")
    if not paren:
        return SyscallStat(name, 0.0)
    time_text = "".join(_TIME_FIELD.findall(paren + rest))
    return SyscallStat(name, _leading_float(time_text))


def collect(lines: Iterable[str]) -> list[SyscallStat]:
    """Sum the time of every call, keeping the order in which names first appear."""
    totals: dict[str, SyscallStat] = {}
    for line in lines:
        entry = parse_line(line)
        if entry.name in totals:
            totals[entry.name].time += entry.time
        else:
            totals[entry.name] = entry
    return list(totals.values())


def ratios(stats: Iterable[SyscallStat]) -> list[tuple[str, float]]:
    """Share of the total time for each call, largest first.

    The total includes every call, but the last two names to appear (the
    process exit and the trailer line) are left out of the result.
    """
    stats = list(stats)
    if len(stats) < 2:
        raise ValueError("at least two distinct lines are needed")
    total = sum(stat.time for stat in stats)
    if total == 0:
        raise ValueError("total time is zero")
    shares = [(stat.name, stat.time / total) for stat in stats[:-2]]
    return list(reversed(sorted(shares, key=lambda pair: pair[1])))


def format_report(stats: Iterable[SyscallStat]) -> str:
    """Render the report, one ``name (percent%)`` line per call."""
    return "".join(f"{name} ({share * 100:f}%)\n" for name, share in ratios(stats))


def main(argv: list[str] | None = None) -> int:
    """Read a log from standard input and print the time shares."""
    data = sys.stdin.read()
    # Only newline-terminated lines are complete; a trailing fragment is dropped.
    complete = data.split("\n")[:-1]
    try:
        report = format_report(collect(complete))
    except ValueError as exc:
        print(f"sperf: {exc}", file=sys.stderr)
        return 1
    sys.stdout.write(report)
    return 0


if __name__ == "__main__":
    sys.exit(main())