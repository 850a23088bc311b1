"""
Shared test fixtures and configuration for docsh tests.

This module provides common fixtures used across all test types:
- Isolation from the user's ~/.docsh/config.toml
- Function definition dumps in `declare -pf` format
- Builders for FunctionSource objects
"""

import textwrap

import pytest

from tests.utils import make_source

# ============================================================================
# CONFIG ISOLATION
# ============================================================================


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point docsh at a config path inside tmp_path.

    Tests should NEVER read or modify the real ~/.docsh/config.toml.
    The file does not exist unless a test writes it.
    """
    config_path = tmp_path / "docsh-config" / "config.toml"
    monkeypatch.setenv("DOCSH_CONFIG", str(config_path))
    monkeypatch.delenv("NO_COLOR", raising=False)
    return config_path


# ============================================================================
# FUNCTION SOURCE FIXTURES
# ============================================================================


@pytest.fixture
def source_factory():
    """Factory fixture building FunctionSource objects from body text."""
    return make_source


@pytest.fixture
def quoted_defn():
    """declare -pf output of a function with a multi-line quoted docstring."""
    return textwrap.dedent(
        '''\
        greet ()
        {
            : "Print a greeting.

            Usage: greet [-l] <name>

            Options
              -l : shout it
            ";
            echo "hello $1"
        }
        '''
    )


@pytest.fixture
def heredoc_defn():
    """declare -pf output of a function documented with a here-doc."""
    return textwrap.dedent(
        """\
        backup ()
        {
            [[ $# -eq 0 || $1 == -h ]] && {
                : <<'EOF'
        Back up a directory.

        Usage: backup <dir>
        EOF

                docsh -TD;
                return
            };
            tar czf "$1.tgz" "$1"
        }
        """
    )


@pytest.fixture
def docs_only_defn():
    """declare -pf output of a function whose body is only its docs.

    Bash prints no ';' after the last statement of a body.
    """
    return 'hello () \n{ \n    : "Print a greeting.\n\n    Usage: hello"\n}\n'
