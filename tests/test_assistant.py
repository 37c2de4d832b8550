"""
Tests for the synthesis assistant.

Tests cover:
- Script extraction from model replies
- Prompt assembly with the attempt history
- ClaudeAssistant error handling (no network)
"""

from unittest.mock import MagicMock, patch

import pytest

from jqplay.assistant import ClaudeAssistant, build_prompt, extract_script, render_history
from jqplay.exceptions import TransportError
from jqplay.models import ConversationAttempt, SynthesisTask


class TestExtractScript:
    """Tests for extract_script."""

    @pytest.mark.parametrize("reply", [
        "```jq\n.items | map(.id)\n```",
        "`.items | map(.id)`",
        "Here is the jq query: .items | map(.id)",
        "jq query: .items | map(.id)",
        "'.items | map(.id)'",
        "```\n.items | map(.id)\n```",
        "Sure.\n```shell\n.items | map(.id)\n```\nThis maps ids.",
        "<code>.items | map(.id)</code>",
        "  .items | map(.id)  \n",
    ])
    def test_reply_forms_agree(self, reply):
        assert extract_script(reply) == ".items | map(.id)"

    def test_inner_quotes_are_kept(self):
        assert extract_script('"a" + "b"') == '"a" + "b"'

    def test_string_literal_script_unwrapped_once(self):
        assert extract_script("'\"x\"'") == '"x"'

    @pytest.mark.parametrize("reply", ["", "   ", "``````", None])
    def test_empty(self, reply):
        assert extract_script(reply) == ""


class TestBuildPrompt:
    """Tests for build_prompt and render_history."""

    def test_first_prompt_has_no_history(self):
        task = SynthesisTask(input_json='{"a": 1}', desired_output="1")
        prompt = build_prompt(task)

        assert '{"a": 1}' in prompt
        assert "Previous attempts" not in prompt
        assert "Additional instructions" not in prompt

    def test_extra_instructions(self):
        task = SynthesisTask(input_json="{}", desired_output="{}", extra_instructions="  keep order ")
        assert "Additional instructions: keep order" in build_prompt(task)

    def test_history_lists_every_attempt(self):
        attempts = [
            ConversationAttempt(1, ".a +", False, "raw", "syntax error, unexpected end of file"),
            ConversationAttempt(2, ".a", True, "raw"),
        ]
        task = SynthesisTask(input_json="{}", desired_output="{}")
        prompt = build_prompt(task, attempts)

        assert "Attempt 1:\n```\n.a +\n```" in prompt
        assert "This query was invalid with error: syntax error, unexpected end of file" in prompt
        assert "Attempt 2:" in prompt
        assert "This query was valid but did not meet requirements." in prompt
        assert prompt.index("Attempt 1:") < prompt.index("Attempt 2:")

    def test_render_history_empty(self):
        assert render_history([]) == ""


class TestClaudeAssistant:
    """Tests for ClaudeAssistant without touching the network."""

    def test_missing_api_key(self, monkeypatch):
        monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
        pytest.importorskip("anthropic")

        with pytest.raises(TransportError, match="ANTHROPIC_API_KEY"):
            ClaudeAssistant().synthesize("prompt")

    def test_returns_reply_text(self):
        client = MagicMock()
        client.messages.create.return_value = MagicMock(content=[MagicMock(text="```jq\n.a\n```")])
        assistant = ClaudeAssistant(model="claude-test")

        with patch.object(assistant, "_get_client", return_value=client):
            assert assistant.synthesize("prompt") == "```jq\n.a\n```"

        kwargs = client.messages.create.call_args.kwargs
        assert kwargs["model"] == "claude-test"
        assert kwargs["messages"] == [{"role": "user", "content": "prompt"}]

    def test_api_failure_is_transport_error(self):
        client = MagicMock()
        client.messages.create.side_effect = RuntimeError("overloaded")
        assistant = ClaudeAssistant()

        with patch.object(assistant, "_get_client", return_value=client):
            with pytest.raises(TransportError, match="overloaded"):
                assistant.synthesize("prompt")

    def test_empty_reply_is_transport_error(self):
        client = MagicMock()
        client.messages.create.return_value = MagicMock(content=[])
        assistant = ClaudeAssistant()

        with patch.object(assistant, "_get_client", return_value=client):
            with pytest.raises(TransportError, match="Empty"):
                assistant.synthesize("prompt")
