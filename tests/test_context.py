"""Tests for cursor context analysis."""

import pytest

from jqplay.context import analyze_context, current_line, partial_word
from jqplay.models import ContextFlags


class TestAnalyzeContext:
    """Tests for analyze_context."""

    def test_after_select(self):
        flags = analyze_context("select(")

        assert flags.after_select is True
        assert flags.after_pipe is False
        assert flags.after_dot is False
        assert flags.in_condition is True

    def test_trailing_dot(self):
        flags = analyze_context(".users[] | .")

        assert flags.after_dot is True
        assert flags.after_pipe is False

    def test_field_access_chain(self):
        flags = analyze_context(".users.")

        assert flags.after_dot is True
        assert flags.after_field_access is True

    def test_after_pipe_ignores_trailing_space(self):
        assert analyze_context(".users[] |  ").after_pipe is True

    @pytest.mark.parametrize("text,flag", [
        ("map(", "after_map"),
        (".[] | map( ", "after_map"),
        ("filter(", "after_filter"),
        ("sort_by(", "after_sort_by"),
        ("group_by (", "after_group_by"),
        ("if (.a", "in_condition"),
        (".age >= ", "after_comparison"),
        (".name == ", "after_comparison"),
        (".a != ", "after_comparison"),
    ])
    def test_single_flags(self, text, flag):
        assert getattr(analyze_context(text), flag) is True

    def test_closed_condition(self):
        assert analyze_context("select(.a == 1)").in_condition is False

    def test_only_current_line_counts(self):
        flags = analyze_context("select(\n.a")

        assert flags.after_select is False
        assert flags.after_dot is True

    def test_empty_text(self):
        assert analyze_context("") == ContextFlags()
        assert analyze_context("").active() == []

    def test_active_names(self):
        assert analyze_context("map(").active() == ["after_map"]


class TestPartialWord:
    """Tests for partial_word and current_line."""

    @pytest.mark.parametrize("text,word", [
        ("", ""),
        (".foo", "foo"),
        (".users[] | sel", "sel"),
        ("$__lo", "$__lo"),
        ("@bas", "@bas"),
        ("select(", ""),
        ("a\nto_ent", "to_ent"),
    ])
    def test_partial_word(self, text, word):
        assert partial_word(text) == word

    def test_current_line(self):
        assert current_line("a\nb\nc") == "c"
        assert current_line(None) == ""
