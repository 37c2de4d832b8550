"""Multi-attempt jq script synthesis as an explicit state machine.

    idle --request_generation--> generating
    generating --receive--> resolved | awaiting_decision
    awaiting_decision --request_continue--> generating
    awaiting_decision --request_break--> broken

Attempts are append-only. A transport failure while generating records
nothing and puts the session back where it was before the request.
"""

import json
from typing import Optional

from .assistant import build_prompt, extract_script
from .exceptions import InterpreterUnavailableError, InvalidTransitionError, TransportError
from .interpreter import evaluate_script
from .models import (
    ConversationAttempt,
    SynthesisTask,
    IDLE,
    GENERATING,
    AWAITING_DECISION,
    RESOLVED,
    BROKEN,
    ENVIRONMENT,
)

DEFAULT_MAX_ATTEMPTS = 5


class RetrySession:
    """One "generate a script for this desired output" task."""

    def __init__(self, task: SynthesisTask, max_attempts: Optional[int] = DEFAULT_MAX_ATTEMPTS):
        self.task = task
        self.max_attempts = max_attempts
        self._attempts = []
        self._state = IDLE
        self._state_before_request = IDLE
        self.last_error = None
        # Raises ValueError on malformed JSON before any request is made
        self._input_data = json.loads(task.input_json)
        json.loads(task.desired_output)

    @property
    def state(self) -> str:
        return self._state

    @property
    def attempts(self) -> tuple:
        return tuple(self._attempts)

    @property
    def is_finished(self) -> bool:
        return self._state in (RESOLVED, BROKEN)

    @property
    def can_continue(self) -> bool:
        if self._state != AWAITING_DECISION:
            return False
        return self.max_attempts is None or len(self._attempts) < self.max_attempts

    @property
    def last_attempt(self) -> Optional[ConversationAttempt]:
        return self._attempts[-1] if self._attempts else None

    def request_generation(self) -> str:
        """idle -> generating. Returns the first prompt."""
        self._require(IDLE, "request generation")
        return self._begin()

    def request_continue(self) -> str:
        """awaiting_decision -> generating. Returns a prompt with every prior attempt."""
        self._require(AWAITING_DECISION, "continue")
        if not self.can_continue:
            raise InvalidTransitionError(
                self._state, "continue", f"attempt limit of {self.max_attempts} reached"
            )
        return self._begin()

    def request_break(self) -> None:
        """awaiting_decision -> broken. Attempts stay available."""
        self._require(AWAITING_DECISION, "break")
        self._state = BROKEN

    def receive(self, raw_output: str, interpreter) -> ConversationAttempt:
        """Settle the pending request with the assistant's reply.

        Extracts the script, runs it against the task's input and
        records the attempt.

        Raises:
            InvalidTransitionError: no request is pending.
            TransportError: the reply held no script; nothing is recorded.
            InterpreterUnavailableError: jq itself is missing; nothing is recorded.
        """
        self._require(GENERATING, "receive a reply")

        script = extract_script(raw_output)
        if not script:
            self._abort()
            raise TransportError("Failed to extract a jq query from the assistant response")

        evaluation = evaluate_script(interpreter, script, self._input_data)
        diagnostic = evaluation.diagnostic
        if diagnostic is not None and diagnostic.kind == ENVIRONMENT:
            self._abort()
            raise InterpreterUnavailableError(diagnostic)

        attempt = ConversationAttempt(
            index=len(self._attempts) + 1,
            generated_script=script,
            is_valid=evaluation.ok,
            raw_model_output=raw_output,
            error_message=None if evaluation.ok else diagnostic.message,
            output=evaluation.result,
        )
        self._attempts.append(attempt)
        self._state = RESOLVED if attempt.is_valid else AWAITING_DECISION
        return attempt

    def receive_failure(self, error: Exception) -> None:
        """Settle the pending request with a transport failure. Records nothing."""
        self._require(GENERATING, "receive a failure")
        self.last_error = error
        self._abort()

    def _begin(self) -> str:
        prompt = build_prompt(self.task, self._attempts)
        self.last_error = None
        self._state_before_request = self._state
        self._state = GENERATING
        return prompt

    def _abort(self) -> None:
        self._state = self._state_before_request

    def _require(self, state: str, action: str) -> None:
        if self._state != state:
            raise InvalidTransitionError(self._state, action)


def run_generation(session: RetrySession, assistant, interpreter) -> ConversationAttempt:
    """Drive one request through the assistant and settle the session.

    Starts a fresh request from idle, or continues from awaiting_decision.

    Raises:
        InvalidTransitionError: the session cannot issue a request now.
        TransportError: the assistant failed; the session state is restored.
        InterpreterUnavailableError: jq is missing; the session state is restored.

    Any other exception from the assistant or the interpreter also
    restores the session state before it propagates.
    """
    if session.state == IDLE:
        prompt = session.request_generation()
    else:
        prompt = session.request_continue()

    try:
        raw_output = assistant.synthesize(prompt)
        return session.receive(raw_output, interpreter)
    except Exception as e:
        if session.state == GENERATING:
            session.receive_failure(e)
        raise
