"""Data models for docstring extraction.

FunctionSource is the read-only input (a `declare -pf` style dump), DocToken
kinds are the constructs the extractor recognizes, and Docstring is the
accumulated result handed to the renderer.
"""

import re
from dataclasses import dataclass, field

# Line 1 is the signature, line 2 the opening brace
_BODY_START = 2

# Closing brace of a declare -pf dump
_CLOSING_PATTERN = re.compile(r"^\}[ \t]*;?[ \t]*$")

# "name () " as printed by declare -pf, or "function name" / "function name ()"
_SIGNATURE_PATTERN = re.compile(r"^\s*(?:function\s+)?([^\s()]+)\s*(?:\(\s*\))?")


@dataclass(frozen=True)
class FunctionSource:
    """Text lines of one function definition.

    Line 1 is the signature, line 2 the opening brace, the last line the
    closing brace. Lines in between are body statements.
    """

    name: str
    lines: tuple[str, ...]

    @classmethod
    def from_text(cls, text: str, name: str | None = None) -> "FunctionSource":
        """Build a FunctionSource from a function definition dump.

        Args:
            text: Function definition text, e.g. output of `declare -pf NAME`
            name: Function name (default: parsed from the signature line)

        Returns:
            FunctionSource with one entry per physical line
        """
        lines = tuple(text.splitlines())
        if name is None:
            name = ""
            if lines:
                match = _SIGNATURE_PATTERN.match(lines[0])
                if match:
                    name = match.group(1)
        return cls(name=name, lines=lines)

    @property
    def body_end(self) -> int:
        """Index one past the last body line.

        The closing brace is never body. A dump cut short before its
        closing brace (no `}` line) keeps every line after the preamble.
        """
        if len(self.lines) > _BODY_START and _CLOSING_PATTERN.match(self.lines[-1]):
            return len(self.lines) - 1
        return len(self.lines)

    @property
    def body(self) -> tuple[str, ...]:
        """Lines between the opening and closing delimiters."""
        return self.lines[_BODY_START : self.body_end]


@dataclass(frozen=True)
class PlainColon:
    """Unquoted text after a colon marker, e.g. `: some text;`."""

    text: str

    @property
    def doc_lines(self) -> tuple[str, ...]:
        return (self.text,)


@dataclass(frozen=True)
class QuotedColon:
    """Quoted string after a colon marker or a render invocation."""

    quote_char: str
    text: str
    is_multiline: bool = False

    @property
    def doc_lines(self) -> tuple[str, ...]:
        return tuple(self.text.split("\n"))


@dataclass(frozen=True)
class HereDoc:
    """Colon here-document, e.g. `: <<'EOF'` ... `EOF`."""

    marker: str
    lines: tuple[str, ...] = ()

    @property
    def doc_lines(self) -> tuple[str, ...]:
        return self.lines


DocToken = PlainColon | QuotedColon | HereDoc


@dataclass(frozen=True)
class Docstring:
    """Extracted documentation for one function.

    An empty Docstring (no lines) means no documentation was found. An
    explicit blank marker such as `: "";` yields one empty line instead.
    """

    lines: tuple[str, ...] = field(default=())

    @property
    def text(self) -> str:
        """Lines joined by newlines, without a trailing newline."""
        return "\n".join(self.lines)

    @property
    def found(self) -> bool:
        return len(self.lines) > 0

    @property
    def is_single_line(self) -> bool:
        return len(self.lines) == 1

    def __len__(self) -> int:
        return len(self.lines)

    def __iter__(self):
        return iter(self.lines)

    @classmethod
    def from_text(cls, text: str) -> "Docstring":
        """Build a Docstring from newline-separated text."""
        if not text:
            return cls()
        return cls(lines=tuple(text.split("\n")))
