"""ECC domain exceptions.

The resolution engine is lenient about *content*: malformed lines, unknown
sections and unparsable values never raise.  The only failure it reports is
an I/O problem on a config file it has already located.
"""

from __future__ import annotations

from pathlib import Path


# ── Base ────────────────────────────────────────────────────
class ECCError(Exception):
    """Root exception for all ECC errors."""


# ── Config files ────────────────────────────────────────────
class ConfigReadFailed(ECCError):
    """A located ``.editorconfig`` could not be opened or read."""

    def __init__(self, path: Path | str, reason: str | None = None) -> None:
        why = f": {reason}" if reason else ""
        super().__init__(f"Could not read config file {path}{why}")
        self.path = Path(path)
        self.reason = reason
