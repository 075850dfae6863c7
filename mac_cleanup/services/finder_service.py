"""Depth-bounded search for dependency and cache directories/files."""
from __future__ import annotations

import os
from typing import Callable, Iterable, Iterator, Tuple

from ..core.constants import FINDER_DENYLIST
from ..utils.disk import size_of

Predicate = Callable[[os.DirEntry], bool]


def dir_named(*names: str) -> Predicate:
    wanted = frozenset(names)

    def _match(entry: os.DirEntry) -> bool:
        return entry.name in wanted and entry.is_dir(follow_symlinks=False)

    return _match


def file_with_extension(*exts: str) -> Predicate:
    wanted = tuple(e if e.startswith(".") else f".{e}" for e in exts)

    def _match(entry: os.DirEntry) -> bool:
        return entry.name.endswith(wanted) and entry.is_file(follow_symlinks=False)

    return _match


def any_of(*predicates: Predicate) -> Predicate:
    def _match(entry: os.DirEntry) -> bool:
        return any(p(entry) for p in predicates)

    return _match


def _descendable(entry: os.DirEntry) -> bool:
    if entry.name.startswith(".") or entry.name in FINDER_DENYLIST:
        return False
    try:
        return entry.is_dir(follow_symlinks=False)
    except OSError:
        return False


def find(roots: Iterable[str], predicate: Predicate, max_depth: int) -> Iterator[str]:
    """
    Yield paths under roots matching predicate, lazily, in traversal order.

    A root's children are depth 1 and nothing deeper than max_depth is
    examined. A matched directory is not descended into. Dot directories,
    the denylist and symlinked directories are never entered.
    """
    for root in roots:
        if not os.path.isdir(root):
            continue
        stack = [(root, 1)]
        while stack:
            current, depth = stack.pop()
            if depth > max_depth:
                continue
            try:
                with os.scandir(current) as it:
                    entries = list(it)
            except OSError:
                continue
            subdirs = []
            for entry in entries:
                try:
                    if predicate(entry):
                        yield entry.path
                        continue
                except OSError:
                    continue
                if _descendable(entry):
                    subdirs.append(entry.path)
            # reversed so the stack pops in listing order
            stack.extend((d, depth + 1) for d in reversed(subdirs))


def find_with_sizes(roots: Iterable[str], predicate: Predicate, max_depth: int) -> Iterator[Tuple[str, int]]:
    for path in find(roots, predicate, max_depth):
        yield path, size_of(path)
