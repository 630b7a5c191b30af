"""Directory cache + baseline owner.

One :class:`EditorConfigContext` per logical run (e.g. one CLI invocation
formatting many files).  It maps canonical directories to their governing
:class:`~ecc.core.node.ConfigNode` so the filesystem is walked at most once
per subtree.

Invariants
----------
* A directory with no governing config maps to ``NOT_FOUND``, and so does
  every ancestor up to the filesystem root (filled in one pass).
* A directory governed by a config in ancestor ``G`` maps, together with
  every directory between it and ``G``, to the *same* node instance.
* Replacing the baseline drops every entry, since any memoised options
  may depend on it through ``unset`` or a root-level fallback.

Not thread-safe: guard the context with a lock if files are processed in
parallel.
"""

from __future__ import annotations

from pathlib import Path

import structlog

from ecc.core.models import NOT_FOUND, FormattingOptions, Found, Resolution
from ecc.core.node import ConfigNode
from ecc.core.parser import parse_editorconfig
from ecc.core.paths import canonical_dir, find_editorconfig

logger = structlog.get_logger()


class EditorConfigContext:
    """Resolves formatting options for files against ``.editorconfig`` cascades."""

    def __init__(self, baseline: FormattingOptions | None = None) -> None:
        self._baseline = baseline.model_copy() if baseline is not None else FormattingOptions()
        self._entries: dict[Path, Resolution] = {}

    # ── Baseline ────────────────────────────────────────────
    @property
    def baseline(self) -> FormattingOptions:
        """A copy of the current baseline options."""
        return self._baseline.model_copy()

    @baseline.setter
    def baseline(self, value: FormattingOptions) -> None:
        self._baseline = value.model_copy()
        self.clear()

    def clear(self) -> None:
        """Forget every cached directory and node."""
        self._entries.clear()
        logger.debug("resolution_cache_cleared")

    @property
    def cache_size(self) -> int:
        return len(self._entries)

    # ── Resolution ──────────────────────────────────────────
    def resolve(self, directory: Path | str) -> Resolution:
        """Return ``Found(node)`` for *directory*'s governing config, or ``NOT_FOUND``."""
        return self._resolve(canonical_dir(directory))

    def _resolve(self, directory: Path) -> Resolution:
        cached = self._entries.get(directory)
        if cached is not None:
            return cached

        config_file = find_editorconfig(directory)
        if config_file is None:
            for d in [directory, *directory.parents]:
                self._entries[d] = NOT_FOUND
            logger.debug("editorconfig_missing", directory=directory)
            return NOT_FOUND

        config_dir = config_file.parent
        found = Found(parse_editorconfig(config_file, self._parent_of))
        # directory, its ancestors below config_dir, and config_dir itself
        for d in [directory, *directory.parents]:
            self._entries[d] = found
            if d == config_dir:
                break
        return found

    def _parent_of(self, config_dir: Path) -> ConfigNode | None:
        if config_dir.parent == config_dir:
            return None
        above = self._resolve(config_dir.parent)
        return above.node if isinstance(above, Found) else None

    # ── Entry points ────────────────────────────────────────
    def get_options(self, file_path: Path | str) -> FormattingOptions:
        """Return independently-owned options for *file_path*."""
        directory = Path(file_path).absolute().parent
        resolution = self.resolve(directory)
        if isinstance(resolution, Found):
            return resolution.node.get_options(self._baseline).model_copy()
        return self._baseline.model_copy()

    def get_value(
        self,
        file_path: Path | str,
        key: str,
        glob: str,
        include_wildcard: bool = True,
    ) -> str | None:
        """Raw cascaded value of *key* for the config governing *file_path*."""
        directory = Path(file_path).absolute().parent
        resolution = self.resolve(directory)
        if isinstance(resolution, Found):
            return resolution.node.get_value(key.lower(), glob, include_wildcard)
        return None
