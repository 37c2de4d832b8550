"""Run jq scripts through the jq command-line tool."""

import json
import os
import subprocess
from typing import Any, Optional

from .errors import classify_error
from .exceptions import InterpreterError
from .models import Evaluation

DEFAULT_JQ = "jq"
DEFAULT_TIMEOUT = 10.0


class JqInterpreter:
    """Black-box jq: ``evaluate(script, data)`` returns the result or raises.

    Every failure is raised as InterpreterError carrying free text; a
    missing executable is reported with "command not found" so that the
    classifier can tell it apart from a bad script.
    """

    def __init__(self, jq_path: Optional[str] = None, timeout: float = DEFAULT_TIMEOUT):
        self.jq_path = jq_path or os.environ.get("JQPLAY_JQ", DEFAULT_JQ)
        self.timeout = timeout

    def evaluate(self, script: str, data: Any) -> Any:
        """Run ``script`` against ``data``.

        Args:
            script: jq program text.
            data: Parsed JSON input.

        Returns:
            The single output value, a list when jq emits several values,
            or None when it emits nothing. Blank scripts return ``data``.

        Raises:
            InterpreterError: jq is missing, timed out or rejected the script.
        """
        if not script or not script.strip():
            return data

        try:
            completed = subprocess.run(
                [self.jq_path, "-c", script],
                input=json.dumps(data),
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except FileNotFoundError as e:
            raise InterpreterError(f"{self.jq_path}: command not found ({e})") from e
        except OSError as e:
            raise InterpreterError(f"Failed to spawn {self.jq_path}: {e}") from e
        except subprocess.TimeoutExpired as e:
            raise InterpreterError(f"jq timed out after {self.timeout:g}s") from e

        if completed.returncode != 0:
            message = completed.stderr.strip() or f"jq exited with status {completed.returncode}"
            raise InterpreterError(message)

        return parse_jq_output(completed.stdout)


def parse_jq_output(stdout: str) -> Any:
    """Parse jq's compact output, one JSON value per line."""
    values = []
    for line in stdout.splitlines():
        line = line.strip()
        if not line:
            continue
        try:
            values.append(json.loads(line))
        except json.JSONDecodeError:
            # Raw (-r style) output, keep the text
            values.append(line)

    if not values:
        return None
    if len(values) == 1:
        return values[0]
    return values


def evaluate_script(interpreter, script: str, data: Any) -> Evaluation:
    """Run a script and classify any failure into a Diagnostic."""
    try:
        result = interpreter.evaluate(script, data)
    except InterpreterError as e:
        return Evaluation(ok=False, diagnostic=classify_error(e.raw_message, script))
    return Evaluation(ok=True, result=result)
