"""Docstring rendering for terminal output.

Normalizes the indentation of an extracted docstring and applies light
styling:
- Bold for lines starting with a heading word (Usage, Options, Examples...)
- Dim URLs
- Italics for `inline code` and for the lines of ``` fenced blocks

Styles are emitted with click.style(); whether they reach the terminal is
decided by the caller (click.echo strips them for pipes unless color=True).
"""

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

import click

DEFAULT_HEADING_WORDS: tuple[str, ...] = (
    "Usage",
    "Option",
    "Command",
    "Example",
    "Note",
    "Notable",
    "Patterns",
)

URL_PATTERN = re.compile(r"([a-zA-Z0-9]+://[a-zA-Z0-9@/.?&=-]+)")
INLINE_CODE_PATTERN = re.compile(r"(^|[^`])`([^`]+)`")
FENCE_PATTERN = re.compile(r"^[ \t]*```")


@dataclass
class RenderOptions:
    """Formatting options for a rendered docstring."""

    title: str | None = None
    description: str | None = None
    describe_from_body: bool = False  # take the description from line 1
    indent: int = 2
    heading_words: Sequence[str] = DEFAULT_HEADING_WORDS


def strip_common_indent(lines: Sequence[str]) -> list[str]:
    """Remove the indentation shared by lines 2..N.

    The first line is left alone: in `: "Summary` it directly follows the
    opening quote, while the rest of the block is indented with the code.
    Blank lines don't count towards the common indentation.
    """
    result = list(lines)
    indents = [len(line) - len(line.lstrip()) for line in result[1:] if line.strip()]
    if not indents:
        return result

    common = min(indents)
    for index in range(1, len(result)):
        result[index] = result[index][common:]
    return result


class DocstringRenderer:
    """Render docstring lines as styled, indented text."""

    def __init__(self, options: RenderOptions | None = None):
        self.options = options or RenderOptions()
        words = "|".join(re.escape(word) for word in self.options.heading_words)
        self.heading_pattern = re.compile(rf"^((?:{words})[^:]*)")
        self.lead = " " * self.options.indent

    def render(self, lines: Iterable[str]) -> str:
        """Render docstring lines to a single block of text.

        Args:
            lines: Docstring lines as extracted

        Returns:
            Styled text without a trailing newline
        """
        body = strip_common_indent(list(lines))
        while body and not body[-1].strip():
            body.pop()

        description = self.options.description
        if self.options.describe_from_body and body:
            description = body[0]
            body = body[1:]

        styled = self.style_body(body)

        if self.options.title:
            header = "\n" + self.lead + click.style(self.options.title, bold=True, underline=True)
            if description:
                header += f" : {description}"
            return "\n".join([header, *styled, ""])

        if description:
            return "\n".join([self.lead + description, *styled])

        return "\n".join(styled)

    def style_body(self, lines: Sequence[str]) -> list[str]:
        """Style and indent body lines, tracking fenced code blocks."""
        result: list[str] = []
        in_fence = False

        for line in lines:
            if FENCE_PATTERN.match(line):
                in_fence = not in_fence
                result.append(self.lead + line)
            elif in_fence:
                result.append(self.lead + (click.style(line, italic=True) if line else line))
            else:
                result.append(self.lead + self.style_line(line))

        return result

    def style_line(self, line: str) -> str:
        """Apply heading, URL and inline code styles to one line."""
        line = self.heading_pattern.sub(lambda m: click.style(m.group(1), bold=True), line)
        line = URL_PATTERN.sub(lambda m: click.style(m.group(1), dim=True), line)
        line = INLINE_CODE_PATTERN.sub(
            lambda m: m.group(1) + click.style(m.group(2), italic=True), line
        )
        return line


def render(lines: Iterable[str], options: RenderOptions | None = None) -> str:
    """Render docstring lines with the given options."""
    return DocstringRenderer(options).render(lines)


__all__ = [
    "DEFAULT_HEADING_WORDS",
    "DocstringRenderer",
    "RenderOptions",
    "render",
    "strip_common_indent",
]
