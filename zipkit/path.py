"""Path helpers for turning archive entry names into safe relative paths."""

from __future__ import annotations

import os
from pathlib import PurePath


def simplified_components(path: str | os.PathLike[str]) -> list[str] | None:
    """Return the normal components of ``path`` with parent references resolved.

    Returns ``None`` for absolute paths, paths with a drive prefix, and paths
    whose ``..`` components climb above the starting point.
    """
    pure = PurePath(path)
    if pure.anchor:
        return None
    out: list[str] = []
    for part in pure.parts:
        if part == "..":
            if not out:
                return None
            out.pop()
        elif part != ".":
            out.append(part)
    return out