"""Tests for tool result normalization and visibility."""

import json

import pytest

from chatstream.runner.formatter import (
    TRUNCATION_MARKER,
    format_mcp_tool_result,
    format_thought,
    format_tool_result,
    should_hide_tool_result,
    truncate_result,
)


class TestFormatToolResult:
    """Tests for format_tool_result."""

    def test_string_passes_through(self):
        """String results are shown as they are."""
        assert format_tool_result("hello", "Bash") == "hello"

    def test_none_is_empty(self):
        """A missing result is empty text."""
        assert format_tool_result(None, "Bash") == ""

    def test_structured_payload_is_json(self):
        """Structured payloads of ordinary tools are pretty-printed JSON."""
        payload = [{"type": "text", "text": "x"}]
        assert format_tool_result(payload, "Read") == json.dumps(payload, indent=2)

    def test_mcp_text_items(self):
        """MCP results contribute their text items."""
        content = [{"type": "text", "text": "one"}, {"type": "text", "text": "two"}]
        assert format_tool_result(content, "mcp__docs__search") == "one\ntwo"

    def test_custom_mcp_prefix(self):
        """The MCP prefix is configurable."""
        content = [{"type": "text", "text": "one"}]
        assert format_tool_result(content, "ext.docs", mcp_prefix="ext.") == "one"


class TestThinkingResults:
    """Tests for thinking tool rendering."""

    TOOL = "mcp__sequential-thinking__sequentialthinking"

    def test_thought_record(self):
        """A thought record renders as a step line and its body."""
        record = {
            "thought": "Check the edge cases.",
            "thoughtNumber": 2,
            "totalThoughts": 5,
            "nextThoughtNeeded": True,
        }
        content = [{"type": "text", "text": json.dumps(record)}]
        assert format_tool_result(content, self.TOOL) == (
            "🧠 Step 2/5 • continue\nCheck the edge cases."
        )

    def test_final_and_revision_status(self):
        """Final thoughts are complete; revisions name the revised step."""
        final = {"thought": "Done.", "thoughtNumber": 3, "totalThoughts": 3, "nextThoughtNeeded": False}
        revision = {"thought": "Redo.", "thoughtNumber": 4, "totalThoughts": 5,
                    "isRevision": True, "revisesThought": 2}
        assert format_thought(final, 1).startswith("🧠 Step 3/3 • complete")
        assert format_thought(revision, 1).startswith("🧠 Step 4/5 • revising step 2")

    def test_progress_only_record_uses_invocation_input(self):
        """A record without a thought shows progress and the requested thought."""
        record = {"thoughtNumber": 1, "totalThoughts": 4, "nextThoughtNeeded": True}
        content = [{"type": "text", "text": json.dumps(record)}]
        text = format_mcp_tool_result(content, self.TOOL, {"thought": "Start here."})
        assert text == "🧠 Thinking Step 1/4 ⏳\nCurrent thought: Start here."

    def test_unparseable_text_is_shown_raw(self):
        """Text that is not JSON is emitted unchanged."""
        content = [{"type": "text", "text": "plain words"}]
        assert format_mcp_tool_result(content, self.TOOL) == "plain words"

    def test_other_record_is_dumped(self):
        """Unrecognized records are dumped as JSON."""
        content = [{"type": "text", "text": json.dumps({"status": "ok"})}]
        assert format_mcp_tool_result(content, self.TOOL) == json.dumps({"status": "ok"}, indent=2)

    def test_thought_object_items(self):
        """Items that are already thought objects render the same way."""
        content = [{"thought": "Inline.", "thoughtNumber": 1, "totalThoughts": 1,
                    "nextThoughtNeeded": False}]
        assert format_mcp_tool_result(content, self.TOOL) == "🧠 Step 1/1 • complete\nInline."


class TestTruncateResult:
    """Tests for truncate_result."""

    def test_short_text_unchanged(self):
        assert truncate_result("abc", limit=3) == "abc"

    def test_long_text_truncated(self):
        """Text over the limit is cut and marked."""
        assert truncate_result("abcdef", limit=3) == "abc" + TRUNCATION_MARKER

    def test_default_limit(self):
        """The default limit is 50,000 characters."""
        text = truncate_result("x" * 50_001)
        assert text == "x" * 50_000 + "\n\n[... truncated due to length ...]"


class TestShouldHideToolResult:
    """Tests for the visibility rule."""

    @pytest.mark.parametrize("tool", ["AskUserQuestion", "ExitPlanMode"])
    def test_control_flow_tools_always_hidden(self, tool):
        """Control-flow tools are hidden even when they fail."""
        assert should_hide_tool_result(tool, is_error=False) is True
        assert should_hide_tool_result(tool, is_error=True) is True

    @pytest.mark.parametrize("tool", ["Read", "Edit", "TodoWrite", "MultiEdit"])
    def test_quiet_tools(self, tool):
        """Quiet tools are hidden on success and shown on error."""
        assert should_hide_tool_result(tool, is_error=False) is True
        assert should_hide_tool_result(tool, is_error=True) is False

    def test_other_tools_shown(self):
        """Ordinary tools are shown."""
        assert should_hide_tool_result("Bash", is_error=False) is False
        assert should_hide_tool_result(None, is_error=False) is False

    def test_custom_sets(self):
        """Both tool sets can be replaced."""
        assert should_hide_tool_result("Bash", False, always_hidden=set(), quiet={"Bash"}) is True
        assert should_hide_tool_result("Read", False, always_hidden=set(), quiet=set()) is False
