"""Turn jq's free-text error messages into positioned diagnostics.

This is a heuristic layer on top of jq's own output, not a parser: jq is
the authority on whether a script is valid, and this module only adds a
best-effort position and a cleaned-up message. Anything it cannot
recognise comes back as an "unknown" diagnostic with no span.
"""

import re
from typing import Optional

from .models import Diagnostic, Span, SYNTAX, TYPE, ENVIRONMENT, UNKNOWN

# Process could not be started at all
NOT_FOUND_MARKERS = ("ENOENT", "command not found", "executable not found")
SPAWN_RE = re.compile(r"failed to spawn|\bspawn \S+ E[A-Z]+", re.IGNORECASE)

NOT_FOUND_MESSAGE = "jq command-line tool not found. Please install jq to evaluate scripts."
SPAWN_MESSAGE = "Failed to spawn jq process. Please ensure jq is installed and accessible."

SYNTAX_MARKER = "syntax error"

# jq reporting on the script or its data, as opposed to the adapter failing to run it
JQ_MESSAGE_RE = re.compile(r"^\s*jq: error\b", re.MULTILINE)

TYPE_NAMES = r"(?:null|boolean|number|string|array|object)"

# "string ("a") and number (1) cannot be added", "Cannot index number with "x"", ...
TYPE_ERROR_PATTERNS = (
    re.compile(rf"\b{TYPE_NAMES}\b \(.*?\) and \b{TYPE_NAMES}\b \(.*?\) cannot be"),
    re.compile(r"cannot be (?:added|subtracted|multiplied|divided|negated|matched|parsed)"),
    re.compile(rf"Cannot index {TYPE_NAMES} with"),
    re.compile(rf"Cannot iterate over {TYPE_NAMES}"),
    re.compile(rf"\b{TYPE_NAMES}\b \(.*?\) (?:has no keys|cannot be)"),
)

END_OF_INPUT_RE = re.compile(r"unexpected (?:end of (?:file|input)|\$end)", re.IGNORECASE)
UNTERMINATED_RE = re.compile(r"unterminated '([^']+)'", re.IGNORECASE)

# The program excerpt jq prints after "at <top-level>, line N:"
ERROR_EXPR_RE = re.compile(r"at <top-level>, line \d+:\n(.*?)(?:\njq:|\Z)", re.DOTALL)
MARKER_BLOCK_RE = re.compile(r"(?:\.\.\.\s*)?at <top-level>, line \d+:\n.*?(?=\njq:|\Z)", re.DOTALL)

QUOTED_LITERAL_RE = re.compile(r'"((?:[^"\\]|\\.)*)"')

MESSAGE_PREFIX_RE = re.compile(
    r"^\s*(?:Error:\s*)?(?:jq: error(?: \(at [^)]*\))?:\s*|jq:\s*|compile error:\s*|error:\s*)+",
    re.IGNORECASE,
)
COMPILE_ERROR_COUNT_RE = re.compile(r"^\s*(?:jq:\s*)?\d+ compile errors?\s*$", re.MULTILINE)
WHILE_PARSING_RE = re.compile(r"\s*\(while parsing[^)]*\)")


def classify_error(raw_error_text: str, script_text: str) -> Diagnostic:
    """Classify a jq error message and locate the problem in the script.

    Rules are tried in order, first match wins: environment, syntax,
    type, unknown. Never raises.

    Args:
        raw_error_text: Error text exactly as the interpreter produced it.
        script_text: The script that produced the error.

    Returns:
        Diagnostic whose span, when present, lies within script_text.
    """
    raw = raw_error_text or ""
    script = script_text or ""

    probe = MARKER_BLOCK_RE.sub("", raw)

    # jq's own messages quote script and data, which may contain any marker
    if not JQ_MESSAGE_RE.search(probe):
        if _contains_any(probe, NOT_FOUND_MARKERS):
            return Diagnostic(kind=ENVIRONMENT, message=NOT_FOUND_MESSAGE, raw_message=raw)
        if SPAWN_RE.search(probe):
            return Diagnostic(kind=ENVIRONMENT, message=SPAWN_MESSAGE, raw_message=raw)

    message = clean_error_message(raw)

    if SYNTAX_MARKER in probe:
        return Diagnostic(kind=SYNTAX, message=message, raw_message=raw,
                          span=_syntax_span(raw, probe, script))

    if any(pattern.search(probe) for pattern in TYPE_ERROR_PATTERNS):
        return Diagnostic(kind=TYPE, message=message, raw_message=raw,
                          span=_type_span(probe, script))

    return Diagnostic(kind=UNKNOWN, message=message, raw_message=raw)


def extract_error_expression(raw_error_text: str) -> Optional[str]:
    """Return the program excerpt jq quotes after its line marker, if any."""
    match = ERROR_EXPR_RE.search(raw_error_text or "")
    if not match:
        return None
    expr = match.group(1).strip()
    return expr or None


def clean_error_message(raw_error_text: str) -> str:
    """Strip jq's prefixes, parse asides and line-marker blocks."""
    text = MARKER_BLOCK_RE.sub("", raw_error_text or "")
    text = COMPILE_ERROR_COUNT_RE.sub("", text)
    text = WHILE_PARSING_RE.sub("", text)

    lines = []
    for line in text.splitlines():
        line = MESSAGE_PREFIX_RE.sub("", line).strip()
        if line and line != "...":
            lines.append(line)

    cleaned = "\n".join(lines).strip()
    if not cleaned:
        cleaned = (raw_error_text or "").strip() or "Unknown jq error"
    return cleaned


def _syntax_span(raw: str, probe: str, script: str) -> Optional[Span]:
    """Position a syntax error relative to the quoted sub-expression."""
    expr = extract_error_expression(raw)
    if expr is None:
        return None

    length = len(expr)
    if END_OF_INPUT_RE.search(probe):
        # Zero-width caret after the expression
        start = end = length
    else:
        unterminated = UNTERMINATED_RE.search(probe)
        if unterminated:
            keyword_index = expr.find(unterminated.group(1))
            start, end = max(keyword_index, 0), length
        else:
            start, end = 0, length

    # jq quotes the program (or a line of it); shift into script coordinates
    offset = script.find(expr)
    if offset > 0:
        start += offset
        end += offset
    return _clamp(start, end, script)


def _type_span(message: str, script: str) -> Span:
    """Locate the first quoted literal of a type error, else the whole script."""
    literal = next((m.group(1) for m in QUOTED_LITERAL_RE.finditer(message) if m.group(1)), None)
    if literal is not None:
        index = script.find(literal)
        if index != -1:
            return _clamp(index, index + len(literal), script)
    return Span(0, len(script))


def _clamp(start: int, end: int, script: str) -> Span:
    """Keep 0 <= start <= end <= len(script)."""
    limit = len(script)
    start = min(max(start, 0), limit)
    end = min(max(end, start), limit)
    return Span(start, end)


def _contains_any(text: str, markers: tuple) -> bool:
    return any(marker in text for marker in markers)
