"""Docstring extraction from shell function definitions.

The extractor scans the text of a function definition (as printed by
`declare -pf`) and collects the documentation block at the top of the body.
Three encodings are recognized, tried in this order on every line:

    : <<'EOF'              here-doc, body kept verbatim up to the marker
    ...
    EOF

    : "first line          quoted string, single or multi-line, closed by
      more text";          the quote character followed by ';'

    : plain text;          unquoted text closed by ';'

A render invocation such as `docsh -TD "text ...";` opens a quoted block in
the same way as `: "`. The optional prefixes `(` and `false && ` are allowed
before the colon.

Scanning:
- Lines 1-2 (signature and opening brace) are never inspected.
- Line 3 is skipped when it is a guard test, e.g. `[[ $1 == -h ]] && {`.
- Blank lines between constructs are skipped.
- The first line that matches no form ends the scan.
- The closing brace is never read. `declare -pf` drops the ';' after the
  last statement of a body, so on the last body line a closing quote (or,
  for the plain form, the end of the line) is enough.

Double-quoted content is unescaped (\\" \\\\ \\$ \\` \\!); single-quoted
content is kept as written.
"""

import logging
import re
from collections.abc import Iterator
from typing import ClassVar

from docsh.exceptions import MalformedHereDocError
from docsh.models import Docstring, DocToken, FunctionSource, HereDoc, PlainColon, QuotedColon

logger = logging.getLogger(__name__)

# Optional leading whitespace, then "(" or "false && "
_PREFIX = r"^[ \t]*(?:\([ \t]*|false[ \t]*&&[ \t]*)?"

# Line 1 is the signature, line 2 the opening brace
_BODY_START = 2
_GUARD_LINE = 2


class DocstringExtractor:
    """Extract docstrings from function definition text.

    Example:
        >>> source = FunctionSource.from_text('f () \\n{ \\n    : "hello";\\n}')
        >>> DocstringExtractor().extract(source).lines
        ('hello',)
    """

    HEREDOC_OPEN: ClassVar[re.Pattern] = re.compile(_PREFIX + r":[ \t]+<<-?(?!<)")
    HEREDOC_START: ClassVar[re.Pattern] = re.compile(
        _PREFIX + r":[ \t]+<<-?[ \t]?(['\"]?)([A-Za-z0-9_]+)\1[ \t]*$"
    )
    QUOTED_START: ClassVar[dict[str, re.Pattern]] = {
        "'": re.compile(_PREFIX + r":[ \t]+'(.*)$"),
        '"': re.compile(_PREFIX + r":[ \t]+\"(.*)$"),
    }
    PLAIN: ClassVar[re.Pattern] = re.compile(_PREFIX + r":[ \t]+([^'\"\s].*?);[ \t]*$")
    PLAIN_LAST: ClassVar[re.Pattern] = re.compile(_PREFIX + r":[ \t]+([^'\"\s].*?);?[ \t]*$")
    GUARD: ClassVar[re.Pattern] = re.compile(r"^[ \t]*(?:\[\[|\[[ \t]|test[ \t]|\(\(|if[ \t])")
    ESCAPE: ClassVar[re.Pattern] = re.compile(r"\\([\"\\$`!])")

    def __init__(self, renderer_name: str = "docsh"):
        """Initialize the extractor.

        Args:
            renderer_name: Command name whose quoted argument also opens a
                docstring, e.g. `docsh -TD "..."`
        """
        self.renderer_name = renderer_name
        self.render_start = re.compile(
            r"^[ \t]*"
            + re.escape(renderer_name)
            + r"(?:[ \t]+-[A-Za-z0-9]+)*[ \t]+(['\"])(.*)$"
        )

    def extract(self, source: FunctionSource) -> Docstring:
        """Extract the docstring of a function.

        Args:
            source: Function definition text

        Returns:
            Docstring (empty if the body does not start with documentation)

        Raises:
            MalformedHereDocError: A here-doc start line has no terminator
        """
        lines: tuple[str, ...] = ()
        for token in self.iter_tokens(source):
            lines += token.doc_lines

        if not lines:
            logger.debug(f"No docstring found in function '{source.name}'")
        return Docstring(lines=lines)

    def iter_tokens(self, source: FunctionSource) -> Iterator[DocToken]:
        """Yield documentation constructs from the head of a function body.

        Args:
            source: Function definition text

        Yields:
            PlainColon, QuotedColon or HereDoc tokens in source order

        Raises:
            MalformedHereDocError: A here-doc start line has no terminator
        """
        lines = source.lines
        end = source.body_end
        index = _BODY_START

        if end > _GUARD_LINE and self.GUARD.match(lines[_GUARD_LINE]):
            logger.debug(f"Skipping guard line: {lines[_GUARD_LINE].strip()}")
            index += 1

        while index < end:
            line = lines[index]
            if not line.strip():
                index += 1
                continue

            result = self._read_token(lines, index, end)
            if result is None:
                logger.debug(f"Docstring scan stopped at line {index + 1}: {line.strip()}")
                return
            token, index = result
            yield token

    def _read_token(
        self, lines: tuple[str, ...], index: int, end: int
    ) -> tuple[DocToken, int] | None:
        """Recognize the construct starting at lines[index].

        Args:
            lines: Function definition lines
            index: Line to recognize
            end: Index one past the last body line

        Returns:
            (token, index of the next unread line), or None if no form matches
        """
        line = lines[index]

        if self.HEREDOC_OPEN.match(line):
            match = self.HEREDOC_START.match(line)
            if not match:
                raise MalformedHereDocError(line, index + 1)
            return self._read_heredoc(lines, index, end, match.group(2))

        for quote, pattern in self.QUOTED_START.items():
            match = pattern.match(line)
            if match:
                return self._read_quoted(lines, index, end, quote, match.group(1))

        match = self.render_start.match(line)
        if match:
            return self._read_quoted(lines, index, end, match.group(1), match.group(2))

        plain = self.PLAIN_LAST if index == end - 1 else self.PLAIN
        match = plain.match(line)
        if match:
            return PlainColon(text=match.group(1)), index + 1

        return None

    def _read_heredoc(
        self, lines: tuple[str, ...], index: int, end: int, marker: str
    ) -> tuple[HereDoc, int]:
        terminator = re.compile(r"[ \t]*" + re.escape(marker))
        body: list[str] = []

        index += 1
        while index < end:
            line = lines[index]
            index += 1
            if terminator.fullmatch(line):
                return HereDoc(marker=marker, lines=tuple(body)), index
            body.append(line)

        logger.debug(f"Here-doc '{marker}' not terminated before end of body")
        return HereDoc(marker=marker, lines=tuple(body)), index

    def _read_quoted(
        self, lines: tuple[str, ...], index: int, end: int, quote: str, rest: str
    ) -> tuple[QuotedColon, int]:
        """Read a quoted string whose text after the opening quote is `rest`.

        The string ends on the first line ending in the closing quote followed
        by ';', or in the closing quote alone on the last body line. This
        anchor is a heuristic: an escaped quote right before ';' at the end of
        a line also closes the string.
        """
        last = end - 1
        if self._is_closed(rest, quote, index == last):
            text = self._unquote(self._strip_anchor(rest, quote), quote)
            return QuotedColon(quote_char=quote, text=text), index + 1

        parts = [self._unquote(rest, quote)]
        index += 1
        while index < end:
            line = lines[index]
            closed = self._is_closed(line, quote, index == last)
            index += 1
            if closed:
                parts.append(self._unquote(self._strip_anchor(line, quote), quote))
                token = QuotedColon(quote_char=quote, text="\n".join(parts), is_multiline=True)
                return token, index
            parts.append(self._unquote(line, quote))

        logger.debug("Quoted docstring not closed before end of body")
        token = QuotedColon(quote_char=quote, text="\n".join(parts), is_multiline=True)
        return token, index

    @staticmethod
    def _is_closed(text: str, quote: str, last: bool = False) -> bool:
        text = text.rstrip(" \t")
        return text.endswith(quote + ";") or (last and text.endswith(quote))

    @staticmethod
    def _strip_anchor(text: str, quote: str) -> str:
        text = text.rstrip(" \t")
        if text.endswith(quote + ";"):
            return text[:-2]
        return text[:-1]

    def _unquote(self, text: str, quote: str) -> str:
        if quote == '"':
            return self.unescape(text)
        return text

    @classmethod
    def unescape(cls, text: str) -> str:
        """Replace \\" \\\\ \\$ \\` and \\! with the literal character."""
        return cls.ESCAPE.sub(r"\1", text)


_default_extractor = DocstringExtractor()


def extract(source: FunctionSource) -> Docstring:
    """Extract a docstring with the default extractor."""
    return _default_extractor.extract(source)


__all__ = ["DocstringExtractor", "extract"]
