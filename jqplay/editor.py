"""Per-editor state: the script, the sample JSON and an optional retry session."""

import json
from typing import Any, Optional

from .context import analyze_context, partial_word
from .interpreter import JqInterpreter, evaluate_script
from .introspect import JsonPathCache
from .models import Evaluation, ScriptDocument, SynthesisTask, RESOLVED
from .patterns import PATTERN_CATALOG
from .ranker import rank_suggestions
from .session import DEFAULT_MAX_ATTEMPTS, RetrySession


class EditorSession:
    """Everything one editor owns. Nothing here is shared between editors."""

    def __init__(self, interpreter=None, catalog=PATTERN_CATALOG, max_attempts: Optional[int] = DEFAULT_MAX_ATTEMPTS):
        self.interpreter = interpreter or JqInterpreter()
        self.catalog = tuple(catalog)
        self.max_attempts = max_attempts
        self.document = ScriptDocument()
        self.sample_text = ""
        self.path_cache = JsonPathCache()
        self.retry_session: Optional[RetrySession] = None

    def set_sample(self, sample_text: str) -> None:
        """Replace the sample JSON; cached paths are dropped."""
        if sample_text != self.sample_text:
            self.sample_text = sample_text
            self.path_cache.invalidate()

    @property
    def json_paths(self) -> list:
        return self.path_cache.paths_for(self.sample_text)

    def sample_data(self) -> Any:
        """Parsed sample JSON. Raises ValueError when it is not valid JSON."""
        return json.loads(self.sample_text)

    def edit(self, text: str, cursor_offset: Optional[int] = None) -> list:
        """Apply a keystroke's worth of change and return fresh completions."""
        self.document.text = text
        self.document.cursor_offset = len(text) if cursor_offset is None else cursor_offset
        return self.completions()

    def completions(self) -> list:
        before = self.document.text_before_cursor()
        return rank_suggestions(
            partial_word(before),
            analyze_context(before),
            self.json_paths,
            self.catalog,
        )

    def evaluate(self) -> Evaluation:
        """Run the current script against the sample JSON."""
        return evaluate_script(self.interpreter, self.document.text, self.sample_data())

    def open_synthesis(self, desired_output: str, extra_instructions: Optional[str] = None) -> RetrySession:
        """Start a new retry session for this editor, replacing any old one."""
        task = SynthesisTask(
            input_json=self.sample_text,
            desired_output=desired_output,
            extra_instructions=extra_instructions,
        )
        self.retry_session = RetrySession(task, max_attempts=self.max_attempts)
        return self.retry_session

    def apply_resolved_script(self) -> bool:
        """Copy a resolved session's script into the document and close the session."""
        session = self.retry_session
        if session is None or session.state != RESOLVED:
            return False
        script = session.last_attempt.generated_script
        self.document.text = script
        self.document.cursor_offset = len(script)
        self.close_synthesis()
        return True

    def close_synthesis(self) -> None:
        self.retry_session = None
