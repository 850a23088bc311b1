"""Indirection references: docs kept in a separate file.

A function can point at its documentation instead of carrying it:

    myfunc() {
        : docsh ./myfunc.md;
        ...
    }

When the extracted docstring is exactly that one line, the referenced file
is read in its place. Unreadable files leave the line as literal text.
"""

import logging
import re
from pathlib import Path

from docsh.exceptions import UnreadableIndirectionFileError
from docsh.models import Docstring

logger = logging.getLogger(__name__)

# "docsh PATH" or "cat PATH", optionally still carrying the colon marker
REFERENCE_PATTERN = re.compile(r"^[ \t]*(?::[ \t]+)?(?:docsh|cat)[ \t]+(\S.*?)[ \t]*$")


def parse_reference(line: str) -> str | None:
    """Return the referenced path of an indirection line, or None."""
    match = REFERENCE_PATTERN.match(line)
    if not match:
        return None
    return match.group(1).strip("'\"")


def read_reference(path_str: str, base_dir: Path | None = None) -> Docstring:
    """Read the documentation file named by an indirection reference.

    Args:
        path_str: Referenced path (`~` is expanded)
        base_dir: Directory for relative paths (default: current directory)

    Returns:
        Docstring with the file's lines

    Raises:
        UnreadableIndirectionFileError: File is missing or unreadable
    """
    path = Path(path_str).expanduser()
    if not path.is_absolute():
        path = (base_dir or Path.cwd()) / path

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise UnreadableIndirectionFileError(f"Cannot read docs file {path}: {e}") from e

    logger.debug(f"Read docs from {path}")
    return Docstring.from_text(text.rstrip("\n"))


def resolve_indirection(docstring: Docstring, base_dir: Path | None = None) -> Docstring:
    """Replace a one-line indirection reference with the file it names.

    Multi-line docstrings, and lines that are not references, are returned
    unchanged. So is the reference line itself when the file can't be read.
    """
    if not docstring.is_single_line:
        return docstring

    path_str = parse_reference(docstring.lines[0])
    if path_str is None:
        return docstring

    try:
        return read_reference(path_str, base_dir)
    except UnreadableIndirectionFileError as e:
        logger.debug(f"{e}; using the reference line as documentation")
        return docstring


__all__ = ["parse_reference", "read_reference", "resolve_indirection"]
