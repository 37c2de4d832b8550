"""Ask Claude to write a jq script, and pull the script out of its reply."""

import os
import re
import sys
from typing import Iterable, Optional

from .exceptions import TransportError
from .models import SynthesisTask

DEFAULT_MODEL = "claude-sonnet-4-20250514"

# Synthesis prompt template
SYNTHESIS_PROMPT = '''You are an expert in jq, a powerful command-line JSON processor.
You methodically examine the input JSON and the desired output JSON, then generate a jq query that transforms the input into the output by reasoning through the transformation script and the input and the output.

Input JSON:
```json
{input_json}
```

Desired Output JSON:
```json
{desired_output}
```
{extra_instructions}{history}
Please provide ONLY the jq query without any explanation or markdown formatting.
The query should be a pure jq script that follows standard jq syntax.
It should be as simple and efficient as possible.
Do not include any explanatory text, comments, or non-jq syntax.'''

HISTORY_HEADER = "Previous attempts to generate a jq query that failed for this task:"
HISTORY_FOOTER = ("Please generate a new jq query that addresses the issues with the previous attempts. "
                  "Try a different approach if necessary.")

# Reply cleanup
FENCED_BLOCK_RE = re.compile(r"```[^\n`]*\n(.*?)```", re.DOTALL)
FENCE_RE = re.compile(r"```(?:jq|json|bash|shell|sh|text)?[ \t]*\n?", re.IGNORECASE)
LEADING_PHRASE_RES = (
    re.compile(r"^jq query:?\s*", re.IGNORECASE),
    re.compile(r"^here(?:'?s| is)? (?:the|a|your) (?:jq\s+)?query:?\s*", re.IGNORECASE),
    re.compile(r"^the (?:jq\s+)?query (?:is|would be):?\s*", re.IGNORECASE),
)
HTML_TAG_RE = re.compile(r"</?(?:code|pre|p|br|span|div)\b[^>]*>", re.IGNORECASE)


def render_attempt(attempt) -> str:
    """Render one prior attempt for the transcript."""
    if attempt.is_valid:
        verdict = "This query was valid but did not meet requirements."
    else:
        verdict = f"This query was invalid with error: {attempt.error_message or 'Unknown error'}"
    return f"Attempt {attempt.index}:\n```\n{attempt.generated_script}\n```\n{verdict}\n"


def render_history(attempts: Iterable) -> str:
    """Render every prior attempt, oldest first."""
    attempts = list(attempts)
    if not attempts:
        return ""
    body = "\n".join(render_attempt(attempt) for attempt in attempts)
    return f"\n{HISTORY_HEADER}\n\n{body}\n{HISTORY_FOOTER}\n"


def build_prompt(task: SynthesisTask, attempts: Iterable = ()) -> str:
    """Assemble the synthesis prompt from the task and the failure trail."""
    extra = ""
    if task.extra_instructions and task.extra_instructions.strip():
        extra = f"\nAdditional instructions: {task.extra_instructions.strip()}\n"

    return SYNTHESIS_PROMPT.format(
        input_json=task.input_json.strip(),
        desired_output=task.desired_output.strip(),
        extra_instructions=extra,
        history=render_history(attempts),
    )


def extract_script(response_text: str) -> str:
    """Strip code fences, backticks, lead-in phrases and wrapping quotes.

    Returns an empty string when nothing script-like is left.
    """
    text = (response_text or "").strip()

    fenced = FENCED_BLOCK_RE.search(text)
    if fenced:
        text = fenced.group(1)
    else:
        text = FENCE_RE.sub("", text)

    text = text.replace("`", "")
    text = text.strip()
    for pattern in LEADING_PHRASE_RES:
        text = pattern.sub("", text)
    text = HTML_TAG_RE.sub("", text).strip()

    return _strip_wrapping_quotes(text)


def _strip_wrapping_quotes(text: str) -> str:
    """Remove one pair of matching outer quotes that enclose no others."""
    if len(text) >= 2 and text[0] == text[-1] and text[0] in ("'", '"'):
        inner = text[1:-1]
        if text[0] not in inner:
            return inner.strip()
    return text


class ClaudeAssistant:
    """Synthesis assistant backed by the Anthropic Messages API.

    Requires:
        ANTHROPIC_API_KEY environment variable (or ``api_key``).
    """

    def __init__(self, model: str = DEFAULT_MODEL, api_key: Optional[str] = None, max_tokens: int = 1024):
        self.model = model
        self.api_key = api_key
        self.max_tokens = max_tokens
        self._client = None

    def synthesize(self, prompt: str) -> str:
        """Send the prompt and return the raw reply text.

        Raises:
            TransportError: the SDK is missing, no key is configured, the
                API call failed or the reply had no text.
        """
        client = self._get_client()

        try:
            print("Generating jq script with Claude...", file=sys.stderr)
            response = client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                messages=[{"role": "user", "content": prompt}]
            )
        except Exception as e:
            raise TransportError(f"Failed to generate jq query: {e}") from e

        text = "".join(
            getattr(block, "text", "") for block in (response.content or [])
        )
        if not text.strip():
            raise TransportError("Empty or invalid response from Claude API")
        return text

    def _get_client(self):
        if self._client is not None:
            return self._client

        try:
            import anthropic
        except ImportError as e:
            raise TransportError("anthropic package not installed. Run: pip install anthropic") from e

        api_key = self.api_key or os.environ.get("ANTHROPIC_API_KEY")
        if not api_key:
            raise TransportError("ANTHROPIC_API_KEY environment variable not set")

        self._client = anthropic.Anthropic(api_key=api_key)
        return self._client
