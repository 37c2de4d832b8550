"""jqplay - Diagnostics, completions and generation for jq scripts.

jqplay runs jq scripts against sample JSON, turns jq's error text into
positioned diagnostics, ranks context-aware completions and asks Claude
to write a script when you only know the output you want.

Basic usage:
    from jqplay import EditorSession

    editor = EditorSession()
    editor.set_sample('{"users": [{"name": "a"}]}')
    candidates = editor.edit(".users[] | sel")
    evaluation = editor.evaluate()

Classifying an error yourself:
    from jqplay import classify_error

    diagnostic = classify_error(raw_error_text, script_text)
    print(diagnostic.kind, diagnostic.span)

Generating a script:
    from jqplay import ClaudeAssistant, JqInterpreter, run_generation

    session = editor.open_synthesis('["a"]')
    attempt = run_generation(session, ClaudeAssistant(), JqInterpreter())  # Requires ANTHROPIC_API_KEY
"""

__version__ = "0.1.0"

from .models import (
    ScriptDocument,
    JsonPath,
    PatternEntry,
    Span,
    Diagnostic,
    ContextFlags,
    CompletionCandidate,
    Evaluation,
    SynthesisTask,
    ConversationAttempt,
)
from .exceptions import (
    JqPlayError,
    InterpreterError,
    InterpreterUnavailableError,
    TransportError,
    InvalidTransitionError,
)
from .errors import classify_error, clean_error_message
from .context import analyze_context, partial_word
from .patterns import PATTERN_CATALOG
from .ranker import rank_suggestions, score_pattern
from .introspect import extract_json_paths, extend_selector, JsonPathCache
from .interpreter import JqInterpreter, evaluate_script
from .assistant import ClaudeAssistant, build_prompt, extract_script
from .session import RetrySession, run_generation
from .editor import EditorSession
from .cli import main

__all__ = [
    # Models
    "ScriptDocument",
    "JsonPath",
    "PatternEntry",
    "Span",
    "Diagnostic",
    "ContextFlags",
    "CompletionCandidate",
    "Evaluation",
    "SynthesisTask",
    "ConversationAttempt",
    # Exceptions
    "JqPlayError",
    "InterpreterError",
    "InterpreterUnavailableError",
    "TransportError",
    "InvalidTransitionError",
    # Diagnostics
    "classify_error",
    "clean_error_message",
    # Completion
    "analyze_context",
    "partial_word",
    "PATTERN_CATALOG",
    "rank_suggestions",
    "score_pattern",
    "extract_json_paths",
    "extend_selector",
    "JsonPathCache",
    # Evaluation
    "JqInterpreter",
    "evaluate_script",
    # Synthesis
    "ClaudeAssistant",
    "build_prompt",
    "extract_script",
    "RetrySession",
    "run_generation",
    # Editor
    "EditorSession",
    # CLI
    "main",
]
