"""Tests for ecc.core.node: value lookup and options calculation."""

from __future__ import annotations

from pathlib import Path

import pytest
from structlog.testing import capture_logs

from ecc.core.models import MAX_INT, FormattingOptions, Section
from ecc.core.node import ConfigNode
from ecc.core.parser import parse_lines

BASELINE = FormattingOptions(
    max_line_width=72,
    max_comment_width=72,
    hanging_indent=4,
    tab_width=8,
    collapse_single_line=True,
)


def _node(text: str, parent: ConfigNode | None = None, name: str = "node") -> ConfigNode:
    parsed = parse_lines(text.splitlines())
    return ConfigNode(Path(f"/cfg/{name}/.editorconfig"), root=parsed.root, sections=parsed.sections, parent=parent)


# ── Construction ────────────────────────────────────────────
def test_root_node_never_keeps_parent() -> None:
    parent = _node("[*]\ntab_width=2\n", name="up")
    node = ConfigNode(Path("/cfg/.editorconfig"), root=True, sections=(), parent=parent)
    assert node.parent is None


def test_chain_lists_nearest_first() -> None:
    top = _node("root=true\n", name="top")
    mid = _node("", parent=top, name="mid")
    leaf = _node("", parent=mid, name="leaf")
    assert leaf.chain() == [leaf, mid, top]


def test_section_eligibility() -> None:
    wildcard = Section("[*]")
    kotlin = Section("[{*.kt,*.kts}]")
    assert wildcard.applies_to("*.md", include_wildcard=True)
    assert not wildcard.applies_to("*.md", include_wildcard=False)
    assert kotlin.applies_to("*.kt", include_wildcard=False)
    assert not kotlin.applies_to("*.md", include_wildcard=True)


# ── get_value ───────────────────────────────────────────────
class TestGetValue:
    def test_last_eligible_section_wins(self) -> None:
        node = _node("[*.kt]\nmax_line_length=80\n[{*.kt,*.kts}]\nmax_line_length=120\n")
        assert node.get_value("max_line_length", "*.kt") == "120"

    def test_later_wildcard_shadows_earlier_specific(self) -> None:
        node = _node("[*.kt]\nmax_line_length=80\n[*]\nmax_line_length=90\n")
        assert node.get_value("max_line_length", "*.kt") == "90"

    def test_section_without_key_does_not_clear_value(self) -> None:
        node = _node("[*.kt]\nmax_line_length=80\n[*]\ntab_width=2\n")
        assert node.get_value("max_line_length", "*.kt") == "80"

    def test_wildcard_excluded_when_requested(self) -> None:
        node = _node("[*]\nmax_line_length=40\n")
        assert node.get_value("max_line_length", "*.md", include_wildcard=False) is None
        assert node.get_value("max_line_length", "*.md") == "40"

    def test_miss_falls_through_to_parent(self) -> None:
        parent = _node("[*.kt]\ntab_width=3\n", name="up")
        node = _node("[*.kt]\nindent_size=2\n", parent=parent)
        assert node.get_value("tab_width", "*.kt") == "3"

    def test_nearer_value_shadows_parent(self) -> None:
        parent = _node("[*.kt]\ntab_width=3\n", name="up")
        node = _node("[*.kt]\ntab_width=5\n", parent=parent)
        assert node.get_value("tab_width", "*.kt") == "5"

    def test_root_stops_lookup(self) -> None:
        node = _node("root=true\n[*.kt]\nindent_size=2\n")
        assert node.get_value("tab_width", "*.kt") is None

    def test_absent_everywhere(self) -> None:
        parent = _node("", name="up")
        assert _node("", parent=parent).get_value("tab_width", "*.kt") is None


# ── get_options ─────────────────────────────────────────────
class TestGetOptions:
    def test_no_overrides_equals_baseline(self) -> None:
        assert _node("root=true\n").get_options(BASELINE) == BASELINE

    def test_all_fields(self) -> None:
        node = _node(
            "[*]\n"
            "max_line_length=100\n"
            "indent_size=2\n"
            "tab_width=4\n"
            "[*.md]\n"
            "max_line_length=80\n"
            "[*.kt]\n"
            "kdoc_formatter_doc_do_not_wrap_if_one_line=true\n"
        )
        opts = node.get_options(BASELINE)
        assert opts.max_line_width == 100
        assert opts.max_comment_width == 80
        assert opts.hanging_indent == 2
        assert opts.tab_width == 4
        assert opts.collapse_single_line is False

    def test_markdown_width_not_inherited_from_wildcard(self) -> None:
        opts = _node("[*]\nmax_line_length=40\n").get_options(BASELINE)
        assert opts.max_line_width == 40
        assert opts.max_comment_width == BASELINE.max_comment_width

    def test_markdown_section_sets_only_comment_width(self) -> None:
        opts = _node("[*.md]\nmax_line_length=40\n").get_options(BASELINE)
        assert opts.max_comment_width == 40
        assert opts.max_line_width == BASELINE.max_line_width

    def test_parent_options_inherited(self) -> None:
        parent = _node("root=true\n[*.kt]\ntab_width=3\n", name="up")
        node = _node("[*.kt]\nindent_size=6\n", parent=parent)
        opts = node.get_options(BASELINE)
        assert opts.tab_width == 3
        assert opts.hanging_indent == 6

    def test_unset_reverts_to_baseline_not_parent(self) -> None:
        top = _node("root=true\n[*]\nmax_line_length=100\n", name="top")
        mid = _node("[*]\nmax_line_length=unset\n", parent=top, name="mid")
        leaf = _node("[*.kt]\ntab_width=2\n", parent=mid, name="leaf")
        assert top.get_options(BASELINE).max_line_width == 100
        assert mid.get_options(BASELINE).max_line_width == BASELINE.max_line_width
        assert leaf.get_options(BASELINE).max_line_width == BASELINE.max_line_width

    @pytest.mark.parametrize("raw", ["abc", "12px", "1.5", "", "1_000"])
    def test_unparsable_integer_keeps_inherited(self, raw: str) -> None:
        parent = _node("root=true\n[*]\nmax_line_length=100\n", name="up")
        node = _node(f"[*.kt]\nmax_line_length={raw}\n", parent=parent)
        assert node.get_options(BASELINE).max_line_width == 100

    @pytest.mark.parametrize("raw", ["0", "-5"])
    def test_out_of_range_integer_keeps_inherited(self, raw: str) -> None:
        opts = _node(f"[*.kt]\nmax_line_length={raw}\ntab_width={raw}\n").get_options(BASELINE)
        assert opts.max_line_width == BASELINE.max_line_width
        assert opts.tab_width == BASELINE.tab_width

    def test_rejected_override_is_logged(self) -> None:
        node = _node("[*.kt]\nmax_line_length=0\n")
        with capture_logs() as logs:
            opts = node.get_options(BASELINE)
        assert opts.max_line_width == BASELINE.max_line_width
        rejected = [e for e in logs if e["event"] == "override_rejected"]
        assert len(rejected) == 1
        assert rejected[0]["field"] == "max_line_width"
        assert rejected[0]["value"] == "0"
        assert rejected[0]["log_level"] == "debug"

    @pytest.mark.parametrize("raw", [str(MAX_INT + 1), "99999999999999999999"])
    def test_integer_past_32_bits_keeps_inherited(self, raw: str) -> None:
        parent = _node("root=true\n[*]\nmax_line_length=100\n", name="up")
        node = _node(f"[*.kt]\nmax_line_length={raw}\nindent_size={raw}\n", parent=parent)
        opts = node.get_options(BASELINE)
        assert opts.max_line_width == 100
        assert opts.hanging_indent == BASELINE.hanging_indent

    def test_largest_32_bit_integer_accepted(self) -> None:
        assert _node(f"[*.kt]\ntab_width={MAX_INT}\n").get_options(BASELINE).tab_width == MAX_INT

    def test_zero_hanging_indent_is_allowed(self) -> None:
        assert _node("[*.kt]\nindent_size=0\n").get_options(BASELINE).hanging_indent == 0

    def test_signed_integer_accepted(self) -> None:
        assert _node("[*.kt]\ntab_width=+3\n").get_options(BASELINE).tab_width == 3

    @pytest.mark.parametrize("raw, expected", [("true", False), ("TRUE", False), ("false", True), ("False", True)])
    def test_collapse_flag_is_inverted(self, raw: str, expected: bool) -> None:
        node = _node(f"[*.kt]\nij_kotlin_doc_do_not_wrap_if_one_line={raw}\n")
        assert node.get_options(BASELINE).collapse_single_line is expected

    def test_collapse_flag_garbage_keeps_inherited(self) -> None:
        node = _node("[*.kt]\nkdoc_formatter_doc_do_not_wrap_if_one_line=maybe\n")
        assert node.get_options(BASELINE).collapse_single_line is True

    def test_collapse_java_key_needs_java_section(self) -> None:
        java = _node("[*.java]\nij_java_doc_do_not_wrap_if_one_line=true\n")
        kotlin_only = _node("[*.kt]\nij_java_doc_do_not_wrap_if_one_line=true\n")
        assert java.get_options(BASELINE).collapse_single_line is False
        assert kotlin_only.get_options(BASELINE).collapse_single_line is True

    def test_collapse_tool_key_beats_ide_keys(self) -> None:
        parent = _node("root=true\n[*.kt]\nkdoc_formatter_doc_do_not_wrap_if_one_line=false\n", name="up")
        node = _node("[*.kt]\nij_kotlin_doc_do_not_wrap_if_one_line=true\n", parent=parent)
        assert node.get_options(BASELINE).collapse_single_line is True

    def test_collapse_unset_reverts_to_baseline(self) -> None:
        baseline = BASELINE.model_copy(update={"collapse_single_line": False})
        parent = _node("root=true\n[*.kt]\nij_kotlin_doc_do_not_wrap_if_one_line=false\n", name="up")
        node = _node("[*.kt]\nkdoc_formatter_doc_do_not_wrap_if_one_line=unset\n", parent=parent)
        assert parent.get_options(baseline).collapse_single_line is True
        assert node.get_options(baseline).collapse_single_line is False

    def test_options_are_memoised(self) -> None:
        node = _node("[*.kt]\ntab_width=3\n")
        first = node.get_options(BASELINE)
        assert node.get_options(BASELINE) is first

    def test_baseline_is_not_mutated(self) -> None:
        baseline = BASELINE.model_copy()
        _node("[*]\nmax_line_length=120\n").get_options(baseline)
        assert baseline == BASELINE
