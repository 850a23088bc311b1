"""
Test utilities for docsh tests.

This module provides helpers for building function definitions the way
`declare -pf` prints them.
"""

import textwrap

from docsh.models import FunctionSource


def make_source(body: str, name: str = "myfunc") -> FunctionSource:
    """Wrap dedented body text in a declare -pf style definition.

    Args:
        body: Function body; common indentation is removed, then every
            non-empty line is indented by four spaces
        name: Function name

    Returns:
        FunctionSource with signature, braces and body lines
    """
    body_lines = textwrap.dedent(body).strip("\n").splitlines()
    lines = [f"{name} () ", "{ ", *(f"    {line}" if line else line for line in body_lines), "}"]
    return FunctionSource(name=name, lines=tuple(lines))


def make_defn(body: str, name: str = "myfunc") -> str:
    """Same as make_source(), as text."""
    return "\n".join(make_source(body, name).lines) + "\n"
