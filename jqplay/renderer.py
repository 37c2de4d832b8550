"""Render results, diagnostics and suggestions as terminal text."""

import json
from typing import Any, Iterable, Optional

from .models import Diagnostic, ConversationAttempt, RESOLVED, BROKEN, AWAITING_DECISION

KIND_LABELS = {
    "syntax": "Syntax error",
    "type": "Type error",
    "environment": "Environment error",
    "unknown": "Error",
}

STATE_LABELS = {
    RESOLVED: "RESOLVED",
    BROKEN: "BROKEN",
    AWAITING_DECISION: "WAITING",
}


def render_output(result: Any) -> str:
    """Format a jq result for display.

    Strings print without quotes, arrays of scalars one per line,
    everything else as indented JSON.
    """
    if result is None:
        return "null"
    if isinstance(result, str):
        return result
    if isinstance(result, bool):
        return "true" if result else "false"
    if isinstance(result, (int, float)):
        return str(result)

    if isinstance(result, list) and all(_is_scalar(item) for item in result):
        return "\n".join(render_output(item) for item in result)

    try:
        return json.dumps(result, indent=2, ensure_ascii=False)
    except (TypeError, ValueError):
        return str(result)


def render_diagnostic(diagnostic: Diagnostic, script: str) -> str:
    """Render a diagnostic, underlining its span in the script when known."""
    lines = [f"{KIND_LABELS.get(diagnostic.kind, 'Error')}: {diagnostic.message}"]

    if diagnostic.span is None:
        return "\n".join(lines)

    start, end = diagnostic.span.start, diagnostic.span.end
    # Zero-width spans (end of input) still get one caret
    mark_end = max(end, start + 1)
    lines.append("")
    offset = 0
    for script_line in script.split("\n"):
        line_end = offset + len(script_line)
        col_start = max(start - offset, 0)
        # A span starting on the newline belongs to the next line
        past_line_end = col_start >= len(script_line) and end > start
        if start <= line_end and mark_end > offset and not past_line_end:
            col_end = min(mark_end - offset, len(script_line))
            lines.append(f"  {script_line}")
            lines.append(f"  {' ' * col_start}{'^' * max(col_end - col_start, 1)}")
        offset = line_end + 1

    return "\n".join(lines)


def render_candidates(candidates: Iterable, limit: Optional[int] = None) -> str:
    """Render completion candidates, best first."""
    candidates = list(candidates)
    shown = candidates if limit is None else candidates[:limit]
    if not shown:
        return "No suggestions"

    width = max(len(c.label) for c in shown)
    lines = []
    for c in shown:
        lines.append(f"{c.score:>4}  {c.label:<{width}}  {c.insert_text}")

    if len(candidates) > len(shown):
        lines.append(f"  ... +{len(candidates) - len(shown)} more")
    return "\n".join(lines)


def render_paths(paths: Iterable) -> str:
    """Render JSON paths with their selectors and kinds."""
    paths = list(paths)
    if not paths:
        return "No paths"
    width = max(len(p.path) for p in paths)
    return "\n".join(f"{p.path:<{width}}  {p.selector}  ({p.kind})" for p in paths)


def render_patterns(catalog: Iterable, category: Optional[str] = None) -> str:
    """Render the pattern catalog grouped by category."""
    lines = []
    current = None
    for entry in catalog:
        if category and entry.category.lower() != category.lower():
            continue
        if entry.category != current:
            if current is not None:
                lines.append("")
            lines.append(f"{entry.category}:")
            current = entry.category
        lines.append(f"  {entry.name:<26} {entry.snippet}")
    if not lines:
        return "No patterns"
    return "\n".join(lines)


def render_attempt(attempt: ConversationAttempt) -> str:
    """Render one synthesis attempt as a small box."""
    W = 60
    lines = []
    status = "VALID" if attempt.is_valid else "INVALID"
    header = f"─ ATTEMPT {attempt.index} · {status} "
    lines.append(f"┌{header}{'─' * max(W - len(header), 0)}┐")
    for script_line in attempt.generated_script.split("\n"):
        lines.append(f"│ {_truncate(script_line, W - 2):<{W - 2}} │")
    if attempt.error_message:
        lines.append(f"├{'─' * W}┤")
        for message_line in attempt.error_message.split("\n"):
            lines.append(f"│ {_truncate(message_line, W - 2):<{W - 2}} │")
    lines.append(f"└{'─' * W}┘")
    return "\n".join(lines)


def render_session(session) -> str:
    """Render every attempt of a retry session and its state."""
    lines = []
    for attempt in session.attempts:
        lines.append(render_attempt(attempt))
    label = STATE_LABELS.get(session.state, session.state.upper())
    lines.append(f"Session {label} after {len(session.attempts)} attempt(s)")
    return "\n".join(lines)


def _truncate(text: str, width: int) -> str:
    if len(text) > width:
        return text[:width - 3] + "..."
    return text


def _is_scalar(value: Any) -> bool:
    return value is None or isinstance(value, (str, int, float, bool))
