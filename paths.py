import os
from pathlib import Path

from errors import PathResolutionError


def expand_path(p: str) -> str:
    """
    Expands a leading ~ to the current user's home directory.
    Absolute paths and other relative paths are returned unchanged.
    """
    if os.path.isabs(p):
        return p
    if p == "~" or p.startswith("~/"):
        try:
            home = str(Path.home())
        except (RuntimeError, KeyError) as e:
            raise PathResolutionError(f"Cannot determine home directory for {p}: {e}") from e
        if home == "~":
            raise PathResolutionError(f"Cannot determine home directory for {p}")
        return home + p[1:]
    return p
