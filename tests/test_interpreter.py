"""Tests for the jq subprocess adapter."""

import subprocess
from unittest.mock import MagicMock, patch

import pytest

from jqplay.exceptions import InterpreterError
from jqplay.interpreter import JqInterpreter, evaluate_script, parse_jq_output
from jqplay.models import SYNTAX, ENVIRONMENT

from tests.fakes import FakeInterpreter, SYNTAX_ERROR_TEXT


def _completed(stdout="", stderr="", returncode=0):
    return MagicMock(stdout=stdout, stderr=stderr, returncode=returncode)


class TestJqInterpreter:
    """Tests for JqInterpreter.evaluate."""

    def test_runs_jq_with_script_and_input(self):
        with patch("jqplay.interpreter.subprocess.run", return_value=_completed('"Ada"\n')) as run:
            result = JqInterpreter(jq_path="/opt/jq", timeout=3).evaluate(".name", {"name": "Ada"})

        assert result == "Ada"
        args, kwargs = run.call_args
        assert args[0] == ["/opt/jq", "-c", ".name"]
        assert kwargs["input"] == '{"name": "Ada"}'
        assert kwargs["timeout"] == 3

    def test_blank_script_returns_input(self):
        with patch("jqplay.interpreter.subprocess.run") as run:
            assert JqInterpreter().evaluate("  ", {"a": 1}) == {"a": 1}
        run.assert_not_called()

    def test_nonzero_exit_raises_stderr(self):
        completed = _completed(stderr=SYNTAX_ERROR_TEXT + "\n", returncode=3)
        with patch("jqplay.interpreter.subprocess.run", return_value=completed):
            with pytest.raises(InterpreterError) as exc_info:
                JqInterpreter().evaluate("{foo: .bar,}", {})

        assert exc_info.value.raw_message == SYNTAX_ERROR_TEXT

    def test_nonzero_exit_without_stderr(self):
        with patch("jqplay.interpreter.subprocess.run", return_value=_completed(returncode=5)):
            with pytest.raises(InterpreterError, match="status 5"):
                JqInterpreter().evaluate(".a", {})

    def test_missing_executable(self):
        with patch("jqplay.interpreter.subprocess.run", side_effect=FileNotFoundError(2, "No such file")):
            with pytest.raises(InterpreterError, match="command not found"):
                JqInterpreter(jq_path="nojq").evaluate(".a", {})

    def test_permission_denied(self):
        with patch("jqplay.interpreter.subprocess.run", side_effect=PermissionError(13, "denied")):
            with pytest.raises(InterpreterError, match="Failed to spawn"):
                JqInterpreter().evaluate(".a", {})

    def test_timeout(self):
        error = subprocess.TimeoutExpired(cmd="jq", timeout=1)
        with patch("jqplay.interpreter.subprocess.run", side_effect=error):
            with pytest.raises(InterpreterError, match="timed out after 1s"):
                JqInterpreter(timeout=1).evaluate(".a", {})


class TestParseJqOutput:
    """Tests for parse_jq_output."""

    def test_single_value(self):
        assert parse_jq_output('{"a":1}\n') == {"a": 1}

    def test_multiple_values_become_list(self):
        assert parse_jq_output("1\n2\n3\n") == [1, 2, 3]

    def test_no_output(self):
        assert parse_jq_output("") is None

    def test_raw_text_kept(self):
        assert parse_jq_output("not json\n1") == ["not json", 1]


class TestEvaluateScript:
    """Tests for evaluate_script."""

    def test_success(self):
        evaluation = evaluate_script(FakeInterpreter({".a": 1}), ".a", {"a": 1})

        assert evaluation.ok is True
        assert evaluation.result == 1
        assert evaluation.diagnostic is None

    def test_failure_is_classified(self):
        interpreter = FakeInterpreter({"{foo: .bar,}": InterpreterError(SYNTAX_ERROR_TEXT)})
        evaluation = evaluate_script(interpreter, "{foo: .bar,}", {})

        assert evaluation.ok is False
        assert evaluation.diagnostic.kind == SYNTAX

    def test_missing_jq_is_environment(self):
        with patch("jqplay.interpreter.subprocess.run", side_effect=FileNotFoundError(2, "No such file")):
            evaluation = evaluate_script(JqInterpreter(), ".a", {})

        assert evaluation.diagnostic.kind == ENVIRONMENT


class TestSpawnFailures:
    """Tests for failures to start jq at all."""

    def test_exec_format_error(self):
        with patch("jqplay.interpreter.subprocess.run", side_effect=OSError(8, "Exec format error")):
            with pytest.raises(InterpreterError, match="Failed to spawn /tmp/not-jq"):
                JqInterpreter(jq_path="/tmp/not-jq").evaluate(".a", {})

    def test_exec_format_error_is_environment(self):
        with patch("jqplay.interpreter.subprocess.run", side_effect=OSError(8, "Exec format error")):
            evaluation = evaluate_script(JqInterpreter(), ".a", {})

        assert evaluation.diagnostic.kind == ENVIRONMENT


class TestJqPath:
    """Tests for choosing the jq executable."""

    def test_env_read_at_construction(self, monkeypatch):
        monkeypatch.setenv("JQPLAY_JQ", "/opt/jq-1.7")
        assert JqInterpreter().jq_path == "/opt/jq-1.7"

    def test_default(self, monkeypatch):
        monkeypatch.delenv("JQPLAY_JQ", raising=False)
        assert JqInterpreter().jq_path == "jq"

    def test_explicit_path_wins(self, monkeypatch):
        monkeypatch.setenv("JQPLAY_JQ", "/opt/jq-1.7")
        assert JqInterpreter(jq_path="/usr/bin/jq").jq_path == "/usr/bin/jq"
