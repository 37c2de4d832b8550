"""Exceptions raised by the jq playground core."""

from typing import Optional

from .models import Diagnostic


class JqPlayError(Exception):
    """Base class for jqplay errors."""


class InterpreterError(JqPlayError):
    """The jq interpreter rejected a script or could not be run.

    ``raw_message`` is jq's untouched error text, the input to the
    error classifier.
    """

    def __init__(self, raw_message: str):
        super().__init__(raw_message)
        self.raw_message = raw_message


class InterpreterUnavailableError(JqPlayError):
    """A generated script could not be validated because jq is missing."""

    def __init__(self, diagnostic: Diagnostic):
        super().__init__(diagnostic.message)
        self.diagnostic = diagnostic


class TransportError(JqPlayError):
    """The synthesis assistant could not produce a response.

    Never recorded as a conversation attempt.
    """


class InvalidTransitionError(JqPlayError):
    """A retry session action was requested from a state that forbids it."""

    def __init__(self, state: str, action: str, reason: Optional[str] = None):
        message = f"Cannot {action} while session is {state}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.state = state
        self.action = action
