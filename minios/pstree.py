"""Print the process tree read from a proc filesystem."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass

PROC_ROOT = "/proc"
VERSION_TEXT = "pstree: version 1.0"

# Long option name -> (short letter, takes an argument)
_LONG_OPTIONS = {
    "show-pids": ("p", False),
    "numeric-sort": ("n", True),
    "version": ("V", False),
}
_SHORT_OPTIONS = {"p": False, "n": True, "V": False}


@dataclass(frozen=True)
class ProcessInfo:
    """One process as described by its stat file."""

    pid: int
    ppid: int
    name: str
    threads: int
    fork_time: str = ""


@dataclass
class Options:
    """Command-line options."""

    show_pids: bool = False
    numeric_sort: bool = False
    sort_arg: str = ""
    version: bool = False
    flags_count: int = 0


def parse_stat(text: str) -> ProcessInfo:
    """Parse the contents of a ``stat`` file: pid, name, parent pid and thread count."""
    open_paren = text.find("(")
    close_paren = text.rfind(")")
    if open_paren < 0 or close_paren < open_paren:
        raise ValueError("stat text has no process name in parentheses")
    pid_text = text[:open_paren].strip()
    name = text[open_paren + 1 : close_paren]
    rest = text[close_paren + 1 :].split()
    # rest[0] is field 3 (state), so field n sits at rest[n - 3].
    if len(rest) < 18:
        raise ValueError("stat text has too few fields")
    return ProcessInfo(
        pid=int(pid_text),
        ppid=int(rest[1]),
        name=name,
        threads=int(rest[17]),
    )


def read_processes(proc_root: str | None = None) -> list[ProcessInfo]:
    """Read every ``<root>/<entry>/stat`` file, ordered by pid.

    Symbolic links such as ``self`` are not followed, and processes that vanish
    while being read are skipped.
    """
    root = PROC_ROOT if proc_root is None else proc_root
    processes = []
    with os.scandir(root) as entries:
        for entry in entries:
            if not entry.is_dir(follow_symlinks=False):
                continue
            stat_path = os.path.join(entry.path, "stat")
            if os.path.islink(stat_path) or not os.path.isfile(stat_path):
                continue
            try:
                with open(stat_path, encoding="utf-8", errors="replace") as handle:
                    processes.append(parse_stat(handle.read()))
            except (OSError, ValueError):
                continue
    processes.sort(key=lambda process: process.pid)
    return processes


def build_tree(processes: list[ProcessInfo]) -> dict[int, list[ProcessInfo]]:
    """Map each pid to its children, in the order the processes are given."""
    tree: dict[int, list[ProcessInfo]] = {process.pid: [] for process in processes}
    for process in processes:
        if process.pid == 1:
            continue
        tree.setdefault(process.ppid, []).append(process)
    return tree


def _subtree_size(tree: dict[int, list[ProcessInfo]], root: ProcessInfo) -> int:
    seen = set()
    stack = [root]
    while stack:
        node = stack.pop()
        if node.pid in seen:
            continue
        seen.add(node.pid)
        stack.extend(tree.get(node.pid, []))
    return len(seen)


def render_tree(tree: dict[int, list[ProcessInfo]], root: ProcessInfo) -> str:
    """Draw the tree below ``root`` with ``----`` between parents and children."""
    total = _subtree_size(tree, root)
    parts: list[str] = []
    printed = 0

    def visit(node, real_count, mask_count, real_len, mask_len, last_space_len, last):
        nonlocal printed
        if printed > total:
            return
        children = tree.get(node.pid, [])
        printed += 1
        if len(children) >= 2:
            parts.append(f"{node.name}----")
            real_count = mask_count
            real_len = mask_len
        elif not children:
            parts.append(f"{node.name}\n")
            if printed < total:
                width = 4 * real_count + 2 + real_len if last else last_space_len
                parts.append(" " * width + "--")
        else:
            parts.append(f"{node.name}----")
        for position, child in enumerate(children):
            visit(
                child,
                real_count,
                mask_count + 1,
                real_len,
                mask_len + len(child.name),
                4 * real_count + 2 + real_len,
                position == len(children) - 1,
            )

    visit(root, -1, 0, 0, len(root.name), 0, False)
    return "".join(parts)


def _warn(message: str) -> None:
    print(f"pstree: {message}", file=sys.stderr)


def _apply(options: Options, letter: str, value: str) -> None:
    if letter == "p":
        options.show_pids = True
    elif letter == "n":
        options.numeric_sort = True
        options.sort_arg = value
    elif letter == "V":
        options.version = True
    options.flags_count += 1


def parse_args(argv: list[str]) -> Options:
    """Parse ``-p/--show-pids``, ``-n/--numeric-sort ARG`` and ``-V/--version``.

    Unknown options are reported on standard error and otherwise ignored.
    """
    options = Options()
    args = list(argv)
    index = 0
    while index < len(args):
        arg = args[index]
        index += 1
        if arg == "--":
            break
        if arg.startswith("--"):
            name, has_value, value = arg[2:].partition("=")
            if name in _LONG_OPTIONS:
                matches = [name]
            else:
                matches = [key for key in _LONG_OPTIONS if key.startswith(name)]
            if len(matches) != 1:
                _warn(f"unrecognized option '{arg}'")
                continue
            key = matches[0]
            letter, needs_value = _LONG_OPTIONS[key]
            if needs_value:
                if not has_value:
                    if index >= len(args):
                        _warn(f"option '--{key}' requires an argument")
                        continue
                    value = args[index]
                    index += 1
            elif has_value:
                _warn(f"option '--{key}' doesn't allow an argument")
                continue
            _apply(options, letter, value)
        elif arg.startswith("-") and arg != "-":
            position = 1
            while position < len(arg):
                letter = arg[position]
                position += 1
                if letter not in _SHORT_OPTIONS:
                    _warn(f"invalid option -- '{letter}'")
                    continue
                if _SHORT_OPTIONS[letter]:
                    value = arg[position:]
                    if not value:
                        if index >= len(args):
                            _warn(f"option requires an argument -- '{letter}'")
                            break
                        value = args[index]
                        index += 1
                    _apply(options, letter, value)
                    break
                _apply(options, letter, "")
    return options


def main(argv: list[str] | None = None) -> int:
    """List the processes, then print the tree rooted at pid 1 (or the version)."""
    options = parse_args(sys.argv[1:] if argv is None else argv)
    processes = read_processes(PROC_ROOT)
    for process in processes:
        print(
            f"pid is {process.pid}, ppid is {process.ppid}, "
            f"process name is {process.name}, number of threads: {process.threads}, "
            f"fork time: {process.fork_time}"
        )
    if options.version:
        print(VERSION_TEXT, file=sys.stderr)
        return 0
    root = next((process for process in processes if process.pid == 1), None)
    if root is None:
        _warn("no process with pid 1")
        return 1
    sys.stdout.write(render_tree(build_tree(processes), root))
    return 0


if __name__ == "__main__":
    sys.exit(main())