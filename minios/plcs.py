"""Longest common subsequence length computed diagonal by diagonal on worker threads.

Cells on one anti-diagonal of the table depend only on earlier diagonals, so
each diagonal is split among the workers and computed in parallel.  A round
finishes only when every worker has stored its share.
"""

from __future__ import annotations

import sys
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Iterator

MAXN = 10000
MAX_THREAD = 16


def diagonal_cells(n: int, m: int, round_no: int) -> list[tuple[int, int]]:
    """Cells ``(i, j)`` with ``i + j == round_no - 1`` in an ``n`` by ``m`` table.

    Rounds are numbered from 1 to ``n + m - 1``.  When ``m < n`` the cells run
    from the top row downwards, otherwise from the bottom row upwards.
    """
    if n < 1 or m < 1:
        raise ValueError("table dimensions must be positive")
    if not 1 <= round_no <= n + m - 1:
        raise ValueError(f"round {round_no} is outside [1, {n + m - 1}]")
    short = min(n, m)
    if round_no <= short:
        count = round_no
    else:
        count = min(max(n, m) - (round_no - short), short)
    if m < n:
        i = 0 if round_no <= short else round_no - short
        j = m - 1 if round_no >= short else round_no - 1
        return [(i + k, j - k) for k in range(count)]
    i = round_no - 1 if round_no <= short else n - 1
    j = round_no - short if round_no >= short else 0
    return [(i - k, j + k) for k in range(count)]


def _split(cells: list[tuple[int, int]], threads: int) -> Iterator[list[tuple[int, int]]]:
    """Share ``cells`` out: one per worker when few, otherwise even runs with the rest on the last."""
    if len(cells) <= threads:
        for cell in cells:
            yield [cell]
        return
    average = len(cells) // threads
    for worker in range(threads):
        start = worker * average
        stop = len(cells) if worker == threads - 1 else start + average
        yield cells[start:stop]


def lcs_length(a: str, b: str, threads: int = 1) -> int:
    """Length of the longest common subsequence of ``a`` and ``b``."""
    if not 1 <= threads <= MAX_THREAD:
        raise ValueError(f"thread count must lie in [1, {MAX_THREAD}]")
    if len(a) > MAXN or len(b) > MAXN:
        raise ValueError(f"strings longer than {MAXN} characters are not supported")
    n, m = len(a), len(b)
    if not n or not m:
        return 0

    dp = [[0] * m for _ in range(n)]
    lock = threading.Lock()

    def value(i: int, j: int) -> int:
        return dp[i][j] if i >= 0 and j >= 0 else 0

    def work(cells: list[tuple[int, int]]) -> None:
        results = [
            max(value(i - 1, j), value(i, j - 1), value(i - 1, j - 1) + (a[i] == b[j]))
            for i, j in cells
        ]
        with lock:
            for (i, j), result in zip(cells, results):
                dp[i][j] = result

    with ThreadPoolExecutor(max_workers=threads) as pool:
        for round_no in range(1, n + m):
            futures = [
                pool.submit(work, chunk)
                for chunk in _split(diagonal_cells(n, m, round_no), threads)
            ]
            for future in futures:
                future.result()
    return dp[n - 1][m - 1]


def main(argv: list[str] | None = None) -> int:
    """Read two strings from standard input and print their LCS length.

    The optional first argument is the number of worker threads.
    """
    args = sys.argv[1:] if argv is None else argv
    try:
        threads = int(args[0]) if args else 1
    except ValueError:
        print(f"plcs: invalid thread count {args[0]!r}", file=sys.stderr)
        return 1
    words = sys.stdin.read().split()
    if len(words) < 2:
        print("plcs: two strings are required on standard input", file=sys.stderr)
        return 1
    try:
        result = lcs_length(words[0], words[1], threads)
    except ValueError as exc:
        print(f"plcs: {exc}", file=sys.stderr)
        return 1
    print(result)
    return 0


if __name__ == "__main__":
    sys.exit(main())