"""``.editorconfig`` parser (restricted, lenient subset).

Only what the formatter consumes is kept:

* sections whose header names ``*``, ``*.kt``, ``*.kts``, ``*.md`` or
  ``*.java`` (optionally brace-expanded: ``[{*.kt,*.kts}]``);
* the width / indent / one-line-collapse keys listed in
  :data:`ecc.core.models.RECOGNIZED_KEYS`;
* the ``root`` flag, wherever it appears.

Everything else is skipped without complaint.  A broken config file must
never stop a formatting run; it just contributes nothing.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from pathlib import Path

import structlog

from ecc.core.errors import ConfigReadFailed
from ecc.core.models import KEY_ROOT, RECOGNIZED_GLOBS, RECOGNIZED_KEYS, Section
from ecc.core.node import ConfigNode

logger = structlog.get_logger()

_COMMENT_PREFIXES = ("#", ";")


@dataclass(frozen=True)
class ParsedConfig:
    """Result of parsing one file, before it is linked into a cascade."""

    root: bool = False
    sections: tuple[Section, ...] = field(default_factory=tuple)


def _header_globs(header: str) -> list[str]:
    """``[{*.kt,*.kts}]`` → ``["*.kt", "*.kts"]`` (one brace layer only)."""
    inner = header.removeprefix("[").removesuffix("]")
    inner = inner.removeprefix("{").removesuffix("}")
    return inner.split(",")


def _parse_bool(value: str) -> bool | None:
    lowered = value.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    return None


def parse_lines(lines: Iterable[str]) -> ParsedConfig:
    """Parse config text (already split into lines).

    Lines are stripped before they are classified.  ``root`` is honoured
    wherever it appears, inside a section or not.  Keys outside a retained
    section, unknown keys and lines without ``=`` are dropped.
    """
    root = False
    blocks: list[tuple[str, dict[str, str]]] = []
    current: dict[str, str] | None = None

    for raw in lines:
        line = raw.strip()
        if not line or line.startswith(_COMMENT_PREFIXES):
            continue

        if line.startswith("["):
            if any(glob in RECOGNIZED_GLOBS for glob in _header_globs(line)):
                current = {}
                blocks.append((line, current))
            else:
                current = None
                logger.debug("section_dropped", header=line)
            continue

        key, sep, value = line.partition("=")
        if not sep:
            continue
        key = key.strip().lower()
        value = value.strip()

        if key == KEY_ROOT:
            root = _parse_bool(value) is True
        elif key in RECOGNIZED_KEYS and current is not None:
            current[key] = value

    sections = tuple(Section(header, props) for header, props in blocks)
    return ParsedConfig(root=root, sections=sections)


def read_editorconfig(path: Path) -> ParsedConfig:
    """Read and parse *path*.

    The file is read completely and closed before parsing starts.
    Undecodable bytes are replaced rather than rejected.

    Raises
    ------
    ConfigReadFailed
        If the file cannot be opened or read.
    """
    try:
        with path.open(encoding="utf-8", errors="replace") as fh:
            lines = fh.readlines()
    except OSError as exc:
        raise ConfigReadFailed(path, exc.strerror or str(exc)) from exc

    parsed = parse_lines(lines)
    logger.debug(
        "editorconfig_parsed",
        path=path,
        root=parsed.root,
        sections=len(parsed.sections),
    )
    return parsed


def parse_editorconfig(
    path: Path,
    parent_of: Callable[[Path], ConfigNode | None] | None = None,
) -> ConfigNode:
    """Read *path* and build its :class:`ConfigNode`.

    Parameters
    ----------
    path:
        The ``.editorconfig`` file to read.
    parent_of:
        Called with the directory holding *path* to obtain the next config
        up the tree.  It is never called for a ``root = true`` file, so
        nothing above a root boundary is looked at.

    Raises
    ------
    ConfigReadFailed
        If the file cannot be opened or read.
    """
    parsed = read_editorconfig(path)
    parent = None
    if not parsed.root and parent_of is not None:
        parent = parent_of(path.parent)
    return ConfigNode(source=path, root=parsed.root, sections=parsed.sections, parent=parent)
