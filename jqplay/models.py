"""Data models for the jq playground editor core."""

from dataclasses import dataclass
from typing import Any, Optional

# Diagnostic kinds
SYNTAX = "syntax"
TYPE = "type"
ENVIRONMENT = "environment"
UNKNOWN = "unknown"

# Candidate kinds
FIELD = "field"
PATTERN = "pattern"

# Retry session states
IDLE = "idle"
GENERATING = "generating"
AWAITING_DECISION = "awaiting_decision"
RESOLVED = "resolved"
BROKEN = "broken"


@dataclass
class ScriptDocument:
    """The script being edited and where the cursor sits in it."""
    text: str = ""
    cursor_offset: int = 0

    def text_before_cursor(self) -> str:
        offset = max(0, min(self.cursor_offset, len(self.text)))
        return self.text[:offset]


@dataclass(frozen=True)
class JsonPath:
    """A path found in the sample JSON."""
    path: str
    selector: str
    kind: str  # "object", "array" or "primitive"
    sample_value: Any = None


@dataclass(frozen=True)
class PatternEntry:
    """A named jq snippet from the static catalog."""
    name: str
    snippet: str
    description: str
    category: str

    @property
    def label(self) -> str:
        return f"[{self.category}] {self.name}"


@dataclass(frozen=True)
class Span:
    """Half-open character range [start, end) into a script."""
    start: int
    end: int


@dataclass(frozen=True)
class Diagnostic:
    """Structured description of why a script failed."""
    kind: str  # "syntax", "type", "environment" or "unknown"
    message: str
    raw_message: str
    span: Optional[Span] = None


@dataclass(frozen=True)
class ContextFlags:
    """What the author is typing, judged from the text before the cursor."""
    after_dot: bool = False
    after_field_access: bool = False
    after_pipe: bool = False
    after_select: bool = False
    after_map: bool = False
    after_filter: bool = False
    after_sort_by: bool = False
    after_group_by: bool = False
    in_condition: bool = False
    after_comparison: bool = False

    def active(self) -> list:
        """Names of the flags that are set."""
        return [name for name, value in vars(self).items() if value]


@dataclass(frozen=True)
class CompletionCandidate:
    """One completion suggestion."""
    label: str
    insert_text: str
    kind: str  # "field" or "pattern"
    category: str
    description: str
    score: int
    sort_key: str


@dataclass(frozen=True)
class Evaluation:
    """Outcome of running a script against the sample JSON."""
    ok: bool
    result: Any = None
    diagnostic: Optional[Diagnostic] = None


@dataclass(frozen=True)
class SynthesisTask:
    """Fixed inputs of one "generate a script for this output" task."""
    input_json: str
    desired_output: str
    extra_instructions: Optional[str] = None


@dataclass(frozen=True)
class ConversationAttempt:
    """One round of script synthesis and its validity outcome."""
    index: int
    generated_script: str
    is_valid: bool
    raw_model_output: str
    error_message: Optional[str] = None
    output: Any = None

