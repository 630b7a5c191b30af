"""Config file locator.

Algorithm
---------
Walk from *start* upward through its parents looking for a file literally
named ``.editorconfig``.  The first directory that contains one governs
*start*.  No caching happens here; see :mod:`ecc.core.resolver`.

Why canonical directories
-------------------------
The resolver keys its cache by directory.  ``a/b/../b`` and a symlink to
``a/b`` must land on the same entry, otherwise one subtree gets two
inconsistent resolutions.
"""

from __future__ import annotations

import os
from pathlib import Path

# File name that marks a governing config.
_MARKER = ".editorconfig"


def canonical_dir(path: Path | str) -> Path:
    """Return an absolute, symlink-free, case-normalised directory path."""
    resolved = Path(path).resolve()
    return Path(os.path.normcase(resolved))


def find_editorconfig(start: Path) -> Path | None:
    """Return the nearest ``.editorconfig`` at or above *start*.

    Parameters
    ----------
    start:
        Directory to start searching from.  Need not exist.

    Returns
    -------
    Path | None
        Path to the config file, or ``None`` when the filesystem root is
        reached without a hit.
    """
    origin = canonical_dir(start)
    for candidate in [origin, *origin.parents]:
        config = candidate / _MARKER
        if config.is_file():
            return config
    return None
