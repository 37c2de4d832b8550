"""Classify where the cursor sits syntactically, from the text before it."""

import re

from .models import ContextFlags

# Each probe looks at the end of the current line only
AFTER_DOT_RE = re.compile(r"\.(?:[A-Za-z_][A-Za-z0-9_]*)?$")
AFTER_FIELD_ACCESS_RE = re.compile(r"\.[A-Za-z_][A-Za-z0-9_]*\.[A-Za-z0-9_]*$")
AFTER_SELECT_RE = re.compile(r"\bselect\s*\(\s*$")
AFTER_MAP_RE = re.compile(r"\bmap\s*\(\s*$")
AFTER_FILTER_RE = re.compile(r"\bfilter\s*\(\s*$")
AFTER_SORT_BY_RE = re.compile(r"\bsort_by\s*\(\s*$")
AFTER_GROUP_BY_RE = re.compile(r"\bgroup_by\s*\(\s*$")
IN_CONDITION_RE = re.compile(r"\b(?:if|elif|select)\s*\([^)]*$")
AFTER_COMPARISON_RE = re.compile(r"[=!<>]=?\s*$")

PARTIAL_WORD_RE = re.compile(r"[A-Za-z0-9_$@]*$")


def current_line(text_before_cursor: str) -> str:
    """Last line of the text before the cursor."""
    return (text_before_cursor or "").split("\n")[-1]


def partial_word(text_before_cursor: str) -> str:
    """The identifier being typed immediately before the cursor."""
    return PARTIAL_WORD_RE.search(current_line(text_before_cursor)).group()


def analyze_context(text_before_cursor: str) -> ContextFlags:
    """Probe the end of the current line for completion context.

    Pure and deterministic. Only the line the cursor is on is inspected;
    earlier lines of a multi-line script are ignored.
    """
    line = current_line(text_before_cursor)
    return ContextFlags(
        after_dot=bool(AFTER_DOT_RE.search(line)),
        after_field_access=bool(AFTER_FIELD_ACCESS_RE.search(line)),
        after_pipe=line.strip().endswith("|"),
        after_select=bool(AFTER_SELECT_RE.search(line)),
        after_map=bool(AFTER_MAP_RE.search(line)),
        after_filter=bool(AFTER_FILTER_RE.search(line)),
        after_sort_by=bool(AFTER_SORT_BY_RE.search(line)),
        after_group_by=bool(AFTER_GROUP_BY_RE.search(line)),
        in_condition=bool(IN_CONDITION_RE.search(line)),
        after_comparison=bool(AFTER_COMPARISON_RE.search(line)),
    )
