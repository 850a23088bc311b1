"""Unit tests for function_provider module."""

import subprocess
from unittest.mock import Mock, patch

import pytest

from docsh.exceptions import FunctionNotFoundError, ProviderError
from docsh.function_provider import (
    BashFunctionProvider,
    TextFunctionProvider,
    expand_library_files,
)

DECLARE_OUTPUT = 'greet () \n{ \n    : "Say hello";\n    echo hello\n}\n'


class TestBashFunctionProvider:
    """Tests for BashFunctionProvider."""

    @patch("docsh.function_provider.subprocess.run")
    def test_get_source(self, mock_run):
        mock_run.return_value = Mock(returncode=0, stdout=DECLARE_OUTPUT, stderr="")

        source = BashFunctionProvider().get_source("greet")

        assert source.name == "greet"
        assert source.lines[2] == '    : "Say hello";'

    @patch("docsh.function_provider.subprocess.run")
    def test_name_passed_as_positional_parameter(self, mock_run, tmp_path):
        lib = tmp_path / "lib.sh"
        lib.write_text("greet() { :; }\n")
        mock_run.return_value = Mock(returncode=0, stdout=DECLARE_OUTPUT, stderr="")

        BashFunctionProvider(library_files=[lib], shell="/bin/bash", timeout=5).get_source(
            "greet; rm -rf /"
        )

        cmd = mock_run.call_args[0][0]
        assert cmd[0] == "/bin/bash"
        assert cmd[1] == "-c"
        assert cmd[2] == BashFunctionProvider.SCRIPT
        assert cmd[3:] == ["docsh", "greet; rm -rf /", str(lib)]
        assert mock_run.call_args[1]["timeout"] == 5
        assert "shell" not in mock_run.call_args[1]

    @patch("docsh.function_provider.subprocess.run")
    def test_unknown_function(self, mock_run):
        mock_run.return_value = Mock(returncode=1, stdout="", stderr="")

        with pytest.raises(FunctionNotFoundError, match="unknown function: 'nope'"):
            BashFunctionProvider().get_source("nope")

    @patch("docsh.function_provider.subprocess.run")
    def test_has_function(self, mock_run):
        mock_run.side_effect = [
            Mock(returncode=0, stdout=DECLARE_OUTPUT, stderr=""),
            Mock(returncode=1, stdout="", stderr=""),
        ]
        provider = BashFunctionProvider()

        assert provider.has_function("greet")
        assert not provider.has_function("nope")

    @patch("docsh.function_provider.subprocess.run")
    def test_timeout(self, mock_run):
        mock_run.side_effect = subprocess.TimeoutExpired(cmd="bash", timeout=10)

        with pytest.raises(ProviderError, match="timed out"):
            BashFunctionProvider().get_source("greet")

    @patch("docsh.function_provider.subprocess.run")
    def test_missing_shell(self, mock_run):
        mock_run.side_effect = FileNotFoundError("no such file")

        with pytest.raises(ProviderError, match="Shell not found: zsh5"):
            BashFunctionProvider(shell="zsh5").get_source("greet")


class TestTextFunctionProvider:
    """Tests for TextFunctionProvider."""

    def test_single_definition(self):
        provider = TextFunctionProvider(DECLARE_OUTPUT)
        assert provider.names == ["greet"]
        assert provider.get_source("greet").lines[-1] == "}"

    def test_multiple_definitions(self):
        text = DECLARE_OUTPUT + "declare -fx greet\nbye () \n{ \n    : 'Leave';\n}\n"
        provider = TextFunctionProvider(text)
        assert provider.names == ["greet", "bye"]
        assert provider.get_source("bye").lines == ("bye () ", "{ ", "    : 'Leave';", "}")

    def test_brace_on_signature_line_is_split(self):
        provider = TextFunctionProvider("f() {\n    : doc;\n}\n")
        assert provider.get_source("f").lines == ("f()", "{", "    : doc;", "}")

    def test_indented_closing_brace_does_not_end_definition(self):
        text = "f () \n{ \n    [[ -n $1 ]] && {\n        : doc;\n    }\n}\n"
        source = TextFunctionProvider(text).get_source("f")
        assert len(source.lines) == 6

    def test_unterminated_definition_is_kept(self):
        provider = TextFunctionProvider("f () \n{ \n    : doc;\n")
        assert provider.get_source("f").lines == ("f () ", "{ ", "    : doc;")

    def test_unknown_function(self):
        provider = TextFunctionProvider(DECLARE_OUTPUT)
        with pytest.raises(FunctionNotFoundError):
            provider.get_source("other")
        assert not provider.has_function("other")

    def test_no_definitions(self):
        assert TextFunctionProvider("just some text\n").names == []


class TestExpandLibraryFiles:
    """Tests for expand_library_files()."""

    def test_glob_patterns(self, tmp_path):
        (tmp_path / "b.sh").write_text("")
        (tmp_path / "a.sh").write_text("")
        (tmp_path / "notes.txt").write_text("")

        files = expand_library_files([str(tmp_path / "*.sh")])

        assert [f.name for f in files] == ["a.sh", "b.sh"]

    def test_home_expansion(self, tmp_path, monkeypatch):
        monkeypatch.setenv("HOME", str(tmp_path))
        (tmp_path / "lib.sh").write_text("")

        assert expand_library_files(["~/lib.sh"]) == [tmp_path / "lib.sh"]

    def test_missing_files_are_skipped(self, tmp_path, caplog):
        with caplog.at_level("WARNING"):
            files = expand_library_files([str(tmp_path / "missing.sh")])
        assert files == []
        assert "Library file not found" in caplog.text

    def test_directories_are_skipped(self, tmp_path):
        (tmp_path / "dir.sh").mkdir()
        assert expand_library_files([str(tmp_path / "*.sh")]) == []
