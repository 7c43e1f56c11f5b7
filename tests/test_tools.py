"""Tests for tool status text, details and input normalization."""

from chatstream.runner.tools import (
    DEFAULT_TOOL_STATUS,
    get_tool_details,
    get_tool_status_text,
    normalize_tool_input,
)


class TestToolStatusText:
    """Tests for get_tool_status_text."""

    def test_known_tool(self):
        assert get_tool_status_text("Bash") == "Executing command"

    def test_unknown_tool(self):
        """Unmapped tools fall back to the default status."""
        assert get_tool_status_text("Mystery") == DEFAULT_TOOL_STATUS
        assert get_tool_status_text(None) == DEFAULT_TOOL_STATUS

    def test_mcp_tools(self):
        """MCP tool statuses are derived from the server and action."""
        assert get_tool_status_text("mcp__github__search_issues") == "Searching via github"
        assert get_tool_status_text("mcp__db__run_query") == "Querying db"
        assert get_tool_status_text("mcp__x__deep_thinking") == "Analyzing with enhanced reasoning"
        assert get_tool_status_text("mcp__db__ping") == "Processing with db"


class TestToolDetails:
    """Tests for get_tool_details."""

    def test_file_tools_show_file_name(self):
        assert get_tool_details("Edit", {"file_path": "/work/src/app.py"}) == "app.py"

    def test_long_command_truncated(self):
        """Commands longer than 50 characters are truncated."""
        command = "x" * 60
        assert get_tool_details("Bash", {"command": command}) == "x" * 50 + "..."

    def test_search_pattern_with_path(self):
        details = get_tool_details("Grep", {"pattern": "TODO", "path": "src", "glob": "*.py"})
        assert details == '"TODO" in src (*.py)'

    def test_web_fetch_host(self):
        assert get_tool_details("WebFetch", {"url": "https://example.com/a/b"}) == "example.com"

    def test_web_fetch_malformed_url(self):
        """An unparseable URL falls back to the truncated URL text."""
        assert get_tool_details("WebFetch", {"url": "http://[::1/x"}) == "http://[::1/x"

    def test_no_details(self):
        """Tools without a meaningful parameter have no details."""
        assert get_tool_details("TodoWrite", {"todos": []}) == ""
        assert get_tool_details("Bash", None) == ""


class TestNormalizeToolInput:
    """Tests for normalize_tool_input."""

    def test_windows_paths(self):
        """Backslashes in file tool paths become forward slashes on Windows."""
        result = normalize_tool_input("Write", {"file_path": "C:\\work\\a.txt"}, platform="win32")
        assert result["file_path"] == "C:/work/a.txt"

    def test_posix_paths_untouched(self):
        result = normalize_tool_input("Write", {"file_path": "a\\b"}, platform="linux")
        assert result["file_path"] == "a\\b"

    def test_read_defaults(self):
        """Read calls get explicit bounds without overriding given ones."""
        assert normalize_tool_input("Read", {"file_path": "/a"}, platform="linux") == {
            "file_path": "/a",
            "offset": 0,
            "limit": 500,
        }
        assert normalize_tool_input("Read", {"limit": 10}, platform="linux")["limit"] == 10

    def test_returns_copy(self):
        """The caller's input is never modified."""
        original = {"file_path": "/a"}
        normalize_tool_input("Read", original, platform="linux")
        assert original == {"file_path": "/a"}
