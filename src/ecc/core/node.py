"""Parsed config file linked into its cascade.

A :class:`ConfigNode` is one ``.editorconfig`` plus a reference to the next
governing file above it.  Nodes are immutable apart from the memoised
options, which are computed on first use and then reused.

Cascade rules
-------------
* Within a file the **last** eligible section defining a key wins.
* On a miss the lookup continues in the parent, unless this node is root.
* Markdown comment width never comes from a bare ``[*]`` section; only a
  section naming ``*.md`` may set it.
* ``unset`` resets a field to the *baseline*, skipping the parent chain.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path

import structlog
from pydantic import ValidationError

from ecc.core.models import (
    KEY_INDENT_SIZE,
    KEY_JAVA_ONE_LINE,
    KEY_KOTLIN_ONE_LINE,
    KEY_MAX_LINE_LENGTH,
    KEY_TAB_WIDTH,
    KEY_TOOL_ONE_LINE,
    UNSET,
    FormattingOptions,
    Section,
)

logger = structlog.get_logger()

_INT_RE = re.compile(r"[+-]?\d+")


def _parse_int(value: str) -> int | None:
    return int(value) if _INT_RE.fullmatch(value) else None


def _parse_inverted_bool(value: str) -> bool | None:
    # The properties say "do NOT wrap if one line"; the field says "collapse".
    lowered = value.lower()
    if lowered == "true":
        return False
    if lowered == "false":
        return True
    return None


@dataclass(frozen=True)
class PropertyRule:
    """How one options field is looked up and parsed."""

    field: str
    lookups: tuple[tuple[str, str], ...]  # (key, glob), first present wins
    parse: Callable[[str], int | bool | None]
    include_wildcard: bool = True


PROPERTY_RULES: tuple[PropertyRule, ...] = (
    PropertyRule("max_line_width", ((KEY_MAX_LINE_LENGTH, "*.kt"),), _parse_int),
    PropertyRule(
        "max_comment_width",
        ((KEY_MAX_LINE_LENGTH, "*.md"),),
        _parse_int,
        include_wildcard=False,
    ),
    PropertyRule("hanging_indent", ((KEY_INDENT_SIZE, "*.kt"),), _parse_int),
    PropertyRule("tab_width", ((KEY_TAB_WIDTH, "*.kt"),), _parse_int),
    PropertyRule(
        "collapse_single_line",
        (
            (KEY_TOOL_ONE_LINE, "*.kt"),
            (KEY_KOTLIN_ONE_LINE, "*.kt"),
            (KEY_JAVA_ONE_LINE, "*.java"),
        ),
        _parse_inverted_bool,
    ),
)


class ConfigNode:
    """One parsed ``.editorconfig`` in a cascade."""

    __slots__ = ("_options", "_parent", "_root", "_sections", "_source")

    def __init__(
        self,
        source: Path,
        *,
        root: bool,
        sections: Sequence[Section],
        parent: ConfigNode | None = None,
    ) -> None:
        self._source = source
        self._root = root
        self._sections = tuple(sections)
        # A root file is an absolute boundary, whatever exists above it.
        self._parent = None if root else parent
        self._options: FormattingOptions | None = None

    @property
    def source(self) -> Path:
        return self._source

    @property
    def root(self) -> bool:
        return self._root

    @property
    def sections(self) -> tuple[Section, ...]:
        return self._sections

    @property
    def parent(self) -> ConfigNode | None:
        return self._parent

    def chain(self) -> list[ConfigNode]:
        """This node followed by its ancestors, nearest first."""
        nodes: list[ConfigNode] = []
        node: ConfigNode | None = self
        while node is not None:
            nodes.append(node)
            node = node.parent
        return nodes

    # ── Value lookup ────────────────────────────────────────
    def get_value(self, key: str, glob: str, include_wildcard: bool = True) -> str | None:
        """Return the effective raw value of *key* for files matching *glob*.

        Parameters
        ----------
        key:
            Lowercase property name, e.g. ``max_line_length``.
        glob:
            File-type glob; a section is eligible when its header contains it.
        include_wildcard:
            Whether a bare ``[*]`` section is also eligible.
        """
        node: ConfigNode | None = self
        while node is not None:
            value: str | None = None
            for section in node.sections:
                if section.applies_to(glob, include_wildcard=include_wildcard):
                    value = section.properties.get(key, value)
            if value is not None or node.root:
                return value
            node = node.parent
        return None

    # ── Options ─────────────────────────────────────────────
    def get_options(self, baseline: FormattingOptions) -> FormattingOptions:
        """Return the options for files governed by this node (memoised).

        The memo is filled once.  Callers must not mix baselines on the same
        node; :class:`ecc.core.resolver.EditorConfigContext` discards every
        node when its baseline changes.  The returned object is shared: copy
        it before handing it out.
        """
        if self._options is None:
            self._options = self._compute_options(baseline)
        return self._options

    def _compute_options(self, baseline: FormattingOptions) -> FormattingOptions:
        if self.parent is None:
            options = baseline.model_copy()
        else:
            options = self.parent.get_options(baseline).model_copy()

        for rule in PROPERTY_RULES:
            raw = self._first_value(rule)
            if raw is None:
                continue
            if raw == UNSET:
                setattr(options, rule.field, getattr(baseline, rule.field))
                continue
            parsed = rule.parse(raw)
            if parsed is None:
                continue
            try:
                setattr(options, rule.field, parsed)
            except ValidationError:
                logger.debug("override_rejected", field=rule.field, value=raw, config=self.source)

        return options

    def _first_value(self, rule: PropertyRule) -> str | None:
        for key, glob in rule.lookups:
            value = self.get_value(key, glob, rule.include_wildcard)
            if value is not None:
                return value
        return None

    def __repr__(self) -> str:
        return f"ConfigNode({str(self.source)!r}, root={self.root})"
