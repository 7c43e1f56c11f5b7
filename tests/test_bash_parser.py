"""Tests for shell command classification."""

import pytest

from chatstream.operations.bash import (
    BASH_PATTERNS,
    analyze_bash_command,
    match_directory_create,
    match_directory_delete,
    match_file_delete,
    match_rename,
)
from chatstream.operations.models import OperationType


class TestFileDelete:
    """Tests for rm classification."""

    def test_recursive_rm_with_quoted_path(self):
        """rm -rf with a quoted path keeps the spaces in the path."""
        op = analyze_bash_command('rm -rf "/tmp/a b"')
        assert op.type == OperationType.FILE_DELETE
        assert op.data.file_path == "/tmp/a b"
        assert op.data.content == ""

    @pytest.mark.parametrize("command", ["rm notes.txt", "rm -f notes.txt", "rm -f -r notes.txt"])
    def test_flag_groups(self, command):
        """Any number of flag groups precede the path."""
        op = match_file_delete(command)
        assert op is not None
        assert op.data.file_path == "notes.txt"

    @pytest.mark.parametrize(
        "command, path",
        [
            ("rm -- notes.txt", "notes.txt"),
            ("rm -f -- notes.txt", "notes.txt"),
            ('rm -- "my notes.txt"', "my notes.txt"),
        ],
    )
    def test_end_of_options_marker(self, command, path):
        """A bare -- between the flags and the path is skipped."""
        op = analyze_bash_command(command)
        assert op.type == OperationType.FILE_DELETE
        assert op.data.file_path == path

    def test_single_quotes(self):
        """Single-quoted paths are accepted."""
        assert match_file_delete("rm 'my file.txt'").data.file_path == "my file.txt"

    def test_rm_after_separator(self):
        """rm inside a compound command is found."""
        op = analyze_bash_command("cd /work && rm build.log")
        assert op.data.file_path == "build.log"

    def test_rm_inside_another_word_is_ignored(self):
        """Words that merely contain 'rm' are not deletions."""
        assert analyze_bash_command("npm run format") is None
        assert analyze_bash_command("terraform plan") is None


class TestDirectoryOperations:
    """Tests for rmdir and mkdir classification."""

    def test_rmdir(self):
        """rmdir is a directory delete, not a file delete."""
        op = analyze_bash_command("rmdir old_dir")
        assert op.type == OperationType.DIRECTORY_DELETE
        assert op.data.dir_path == "old_dir"

    def test_mkdir_with_parents_flag(self):
        """mkdir -p creates the named directory."""
        op = analyze_bash_command("mkdir -p foo/bar")
        assert op.type == OperationType.DIRECTORY_CREATE
        assert op.data.dir_path == "foo/bar"

    def test_mkdir_quoted(self):
        """Quoted directory names keep their spaces."""
        assert match_directory_create('mkdir "new folder"').data.dir_path == "new folder"

    def test_rmdir_matcher_ignores_rm(self):
        """The rmdir matcher does not fire on rm."""
        assert match_directory_delete("rm -r foo") is None


class TestRename:
    """Tests for mv classification."""

    @pytest.mark.parametrize(
        "command, old_path, new_path",
        [
            ('mv "a b.txt" "c d.txt"', "a b.txt", "c d.txt"),
            ('mv "a b.txt" c.txt', "a b.txt", "c.txt"),
            ('mv a.txt "b c.txt"', "a.txt", "b c.txt"),
            ("mv a.txt b.txt", "a.txt", "b.txt"),
        ],
    )
    def test_quoting_permutations(self, command, old_path, new_path):
        """Every combination of quoted and unquoted arguments is understood."""
        op = match_rename(command)
        assert op.type == OperationType.FILE_RENAME
        assert op.data.old_path == old_path
        assert op.data.new_path == new_path

    def test_git_mv(self):
        """mv as a subcommand word is still a rename."""
        op = analyze_bash_command("git mv src/a.py src/b.py")
        assert op.data.old_path == "src/a.py"
        assert op.data.new_path == "src/b.py"

    def test_end_of_options_marker(self):
        op = match_rename("mv -- a.txt b.txt")
        assert (op.data.old_path, op.data.new_path) == ("a.txt", "b.txt")

    def test_single_argument_is_not_a_rename(self):
        """mv needs two paths."""
        assert match_rename("mv onlyone") is None


class TestAnalyzeBashCommand:
    """Tests for the ordered pattern table."""

    def test_pattern_order(self):
        """Patterns are consulted in a fixed, explicit order."""
        assert [name for name, _ in BASH_PATTERNS] == [
            "directory_delete",
            "file_delete",
            "file_rename",
            "directory_create",
        ]

    @pytest.mark.parametrize("command", ["ls -la", "echo hello", "git status", "", "   "])
    def test_non_mutating_commands(self, command):
        """Commands that do not touch the file system yield nothing."""
        assert analyze_bash_command(command) is None
