"""Custom exceptions for docsh."""


class DocshError(Exception):
    """Base exception for docsh errors."""

    exit_code = 1


class NoDocumentationError(DocshError):
    """Function has no documentation block."""

    exit_code = 1


class FunctionNotFoundError(DocshError):
    """Function is not defined in the inspected shell."""

    exit_code = 3


class ProviderError(DocshError):
    """Function text could not be obtained from the shell."""

    exit_code = 3


class MalformedHereDocError(DocshError):
    """Here-doc start line has no parsable terminator identifier."""

    exit_code = 4

    def __init__(self, line: str, line_number: int):
        self.line = line
        self.line_number = line_number
        super().__init__(
            f"Malformed here-doc on line {line_number}: no terminator in {line.strip()!r}"
        )


class UnreadableIndirectionFileError(DocshError):
    """Indirection reference names a file that cannot be read."""

    pass
