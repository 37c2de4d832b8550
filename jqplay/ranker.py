"""Rank completion candidates for the jq editor.

Scores are penalties: every pattern starts at BASE_SCORE and context
rules deduct from it, so lower means more relevant. Field candidates
come from the author's own data and always sort ahead of patterns.
"""

import json
import re
from dataclasses import dataclass
from typing import Iterable, Optional

from .models import CompletionCandidate, ContextFlags, JsonPath, PatternEntry, FIELD, PATTERN
from .patterns import PATTERN_CATALOG

BASE_SCORE = 500
FIELD_SCORE = 0
FIELD_CATEGORY = "Field"

UTILITY_PARAMS_RE = re.compile(r"(\w+)\((.*?)\)")


@dataclass(frozen=True)
class ContextRule:
    """A deduction applied when any of ``flags`` is set and the pattern matches."""
    flags: tuple
    deduction: int
    categories: tuple = ()
    names: tuple = ()

    def applies(self, context: ContextFlags, pattern: PatternEntry) -> bool:
        if not any(getattr(context, flag) for flag in self.flags):
            return False
        if self.categories and pattern.category not in self.categories:
            return False
        if self.names and pattern.name not in self.names:
            return False
        return True


CONDITION_FLAGS = ("after_select", "after_filter", "in_condition")

CONTEXT_RULES = (
    ContextRule(("after_dot",), 300, ("Basic",), ("Field access", "Array iteration")),
    ContextRule(("after_pipe",), 200, ("Filtering", "Transformation")),
    ContextRule(("after_pipe",), 100, names=("Filter by condition",)),
    ContextRule(CONDITION_FLAGS, 300, ("Comparison",)),
    ContextRule(CONDITION_FLAGS, 200, ("Basic",), ("Field access",)),
    ContextRule(("after_map",), 300, ("Transformation",)),
    ContextRule(("after_map",), 200, ("Basic",), ("Field access",)),
    ContextRule(("after_map",), 250, ("Object",)),
    ContextRule(("after_sort_by", "after_group_by"), 300, ("Basic",), ("Field access",)),
    ContextRule(("after_comparison",), 300, ("Basic",), ("Field access",)),
    ContextRule(("after_comparison",), 250, ("Value",)),
)


def score_pattern(pattern: PatternEntry, context: ContextFlags, rules: Iterable = CONTEXT_RULES) -> int:
    """Apply every matching rule to the base score, never going below zero."""
    score = BASE_SCORE
    for rule in rules:
        if rule.applies(context, pattern):
            score -= rule.deduction
    return max(score, 0)


def rank_suggestions(
    word: str,
    context: ContextFlags,
    paths: Iterable[JsonPath] = (),
    catalog: Optional[Iterable[PatternEntry]] = None,
) -> list:
    """Build the ordered, deduplicated completion list.

    Args:
        word: Partial word before the cursor. Empty matches everything.
        context: Flags from analyze_context.
        paths: JSON paths of the current sample.
        catalog: Pattern catalog, defaults to PATTERN_CATALOG.

    Returns:
        CompletionCandidates sorted by sort_key. Never empty when the
        catalog has entries.
    """
    catalog = tuple(PATTERN_CATALOG if catalog is None else catalog)
    needle = (word or "").lower()

    merged = {}
    for path in paths:
        if needle in path.path.lower():
            _add_first(merged, _field_candidate(path, context))

    for index, pattern in enumerate(catalog):
        if _pattern_matches(pattern, needle):
            _add_first(merged, _pattern_candidate(pattern, index, context))

    if not merged:
        for index, pattern in enumerate(catalog):
            _add_first(merged, _pattern_candidate(pattern, index, context))

    return sorted(merged.values(), key=lambda candidate: candidate.sort_key)


def _add_first(merged: dict, candidate: CompletionCandidate) -> None:
    """Keep the first candidate seen for a label."""
    if candidate.label not in merged:
        merged[candidate.label] = candidate


def _pattern_matches(pattern: PatternEntry, needle: str) -> bool:
    return needle in pattern.name.lower() or needle in pattern.snippet.lower()


def _field_candidate(path: JsonPath, context: ContextFlags) -> CompletionCandidate:
    insert_text = path.path
    # The author already typed the dot
    if (context.after_dot or context.after_field_access) and insert_text.startswith("."):
        insert_text = insert_text[1:]

    description = f"Access field: {path.path}"
    if path.kind == "primitive":
        description += f" (e.g. {_preview(path.sample_value)})"
    else:
        description += f" ({path.kind})"

    return CompletionCandidate(
        label=path.path,
        insert_text=insert_text,
        kind=FIELD,
        category=FIELD_CATEGORY,
        description=description,
        score=FIELD_SCORE,
        # "-" sorts before the "_" that follows a pattern's score
        sort_key=f"{FIELD_SCORE:03d}-{path.path}",
    )


def _pattern_candidate(pattern: PatternEntry, index: int, context: ContextFlags) -> CompletionCandidate:
    score = score_pattern(pattern, context)
    label = pattern.label
    description = pattern.description

    if pattern.category == "Utility":
        params = UTILITY_PARAMS_RE.search(pattern.snippet)
        if params:
            names = [p.strip() for p in params.group(2).split(";")]
            label = f"{label} ({', '.join(names)})"
            description = f"{description}\n\nUsage: {params.group(1)}({'; '.join(names)})"

    return CompletionCandidate(
        label=label,
        insert_text=pattern.snippet,
        kind=PATTERN,
        category=pattern.category,
        description=f"{description}\n\nCategory: {pattern.category}",
        score=score,
        sort_key=f"{score:03d}_{pattern.category}_{index:03d}",
    )


def _preview(value, limit: int = 40) -> str:
    text = json.dumps(value, ensure_ascii=False, default=str)
    if len(text) > limit:
        text = text[:limit] + "..."
    return text
