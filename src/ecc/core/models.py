"""ECC domain models: options, sections and resolution results."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from ecc.core.node import ConfigNode


# ── Recognised vocabulary ───────────────────────────────────
# Section globs we keep; any other section is dropped at parse time.
RECOGNIZED_GLOBS = frozenset({"*", "*.kt", "*.kts", "*.md", "*.java"})

WILDCARD_HEADER = "[*]"

# Literal value meaning "use the baseline, ignore the cascade".
UNSET = "unset"

KEY_ROOT = "root"
KEY_MAX_LINE_LENGTH = "max_line_length"
KEY_INDENT_SIZE = "indent_size"
KEY_TAB_WIDTH = "tab_width"
KEY_TOOL_ONE_LINE = "kdoc_formatter_doc_do_not_wrap_if_one_line"
KEY_KOTLIN_ONE_LINE = "ij_kotlin_doc_do_not_wrap_if_one_line"
KEY_JAVA_ONE_LINE = "ij_java_doc_do_not_wrap_if_one_line"

RECOGNIZED_KEYS = frozenset({
    KEY_MAX_LINE_LENGTH,
    KEY_INDENT_SIZE,
    KEY_TAB_WIDTH,
    KEY_TOOL_ONE_LINE,
    KEY_KOTLIN_ONE_LINE,
    KEY_JAVA_ONE_LINE,
})

# Widths and indents are 32-bit signed ints for the formatter.
MAX_INT = 2**31 - 1


class FormattingOptions(BaseModel):
    """Concrete formatting options for one file.

    Mutable on purpose: the calculator starts from a copy of the inherited
    options and overwrites fields one by one.  Assignment is validated, so a
    nonsensical override (``max_line_length = 0``, or one past
    :data:`MAX_INT`) is rejected.
    """

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    max_line_width: int = Field(default=72, ge=1, le=MAX_INT)
    max_comment_width: int = Field(default=72, ge=1, le=MAX_INT)
    hanging_indent: int = Field(default=4, ge=0, le=MAX_INT)
    tab_width: int = Field(default=8, ge=1, le=MAX_INT)
    collapse_single_line: bool = True


@dataclass(frozen=True)
class Section:
    """One retained ``[glob]`` block of a config file.

    *properties* is stored as a read-only view of a private copy.
    """

    header: str  # literal line, e.g. "[{*.kt,*.kts}]"
    properties: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "properties", MappingProxyType(dict(self.properties)))

    def applies_to(self, glob: str, *, include_wildcard: bool) -> bool:
        """Eligibility test: exact ``[*]`` (if allowed) or substring match."""
        if include_wildcard and self.header == WILDCARD_HEADER:
            return True
        return glob in self.header


# ── Resolution result (tagged variant) ─────────────────────
@dataclass(frozen=True)
class Found:
    node: ConfigNode


@dataclass(frozen=True)
class NotFound:
    """No governing config exists for a directory."""


NOT_FOUND = NotFound()

Resolution = Found | NotFound
