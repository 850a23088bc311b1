"""Function text providers.

A provider returns the source text of a named shell function in the shape
printed by `declare -pf`:

    name ()
    {
        body...
    }

BashFunctionProvider asks a shell for it (after sourcing library files).
TextFunctionProvider serves definitions from text that is already at hand,
e.g. `declare -pf` output piped into docsh.

Security:
- No shell=True in subprocess calls
- The function name is passed as a positional parameter, never interpolated
- Subprocess timeout enforcement
"""

import glob
import logging
import os
import re
import subprocess
from abc import ABC, abstractmethod
from collections.abc import Iterable
from pathlib import Path

from docsh.exceptions import FunctionNotFoundError, ProviderError
from docsh.models import FunctionSource

logger = logging.getLogger(__name__)


class FunctionTextProvider(ABC):
    """Source of function definition text."""

    @abstractmethod
    def get_source(self, name: str) -> FunctionSource:
        """Return the definition of function `name`.

        Raises:
            FunctionNotFoundError: No such function
            ProviderError: The definition could not be obtained
        """

    def has_function(self, name: str) -> bool:
        """Check if function `name` is defined."""
        try:
            self.get_source(name)
        except FunctionNotFoundError:
            return False
        return True


class BashFunctionProvider(FunctionTextProvider):
    """Read function definitions from a bash subprocess.

    Functions exported into the environment are visible without sourcing
    anything; other functions are found by sourcing `library_files` first.
    """

    # $1 is the function name, the remaining parameters are files to source
    SCRIPT = (
        'name=$1; shift; '
        'for f in "$@"; do . "$f" >/dev/null 2>&1; done; '
        'declare -pf -- "$name"'
    )

    def __init__(
        self,
        library_files: Iterable[str | Path] = (),
        shell: str = "bash",
        timeout: int = 10,
    ):
        """Initialize the provider.

        Args:
            library_files: Shell files (or glob patterns) to source before lookup
            shell: Shell executable (default: bash)
            timeout: Subprocess timeout in seconds (default: 10)
        """
        self.library_files = expand_library_files(library_files)
        self.shell = shell
        self.timeout = timeout

    def get_source(self, name: str) -> FunctionSource:
        cmd = [self.shell, "-c", self.SCRIPT, "docsh", name, *map(str, self.library_files)]
        logger.debug(f"Looking up function '{name}' with {self.shell}")

        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                stdin=subprocess.DEVNULL,
                check=False,
            )
        except FileNotFoundError as e:
            raise ProviderError(f"Shell not found: {self.shell}") from e
        except subprocess.TimeoutExpired as e:
            raise ProviderError(f"Function lookup timed out after {self.timeout}s") from e

        if result.returncode != 0 or not result.stdout.strip():
            raise FunctionNotFoundError(f"unknown function: '{name}'")

        return FunctionSource.from_text(result.stdout, name=name)


class TextFunctionProvider(FunctionTextProvider):
    """Serve function definitions from in-memory text.

    The text may hold several definitions. Each starts at a `name () ` line
    and ends at a `}` line, both at column 0.
    """

    SIGNATURE = re.compile(r"^(?:function[ \t]+)?([^\s()=]+)[ \t]*\([ \t]*\)[ \t]*\{?[ \t]*$")
    CLOSING = re.compile(r"^\}[ \t]*;?[ \t]*$")

    def __init__(self, text: str):
        self.definitions = self.split_definitions(text)

    @property
    def names(self) -> list[str]:
        """Function names in order of appearance."""
        return list(self.definitions)

    def get_source(self, name: str) -> FunctionSource:
        try:
            return self.definitions[name]
        except KeyError as e:
            raise FunctionNotFoundError(f"unknown function: '{name}'") from e

    @classmethod
    def split_definitions(cls, text: str) -> dict[str, FunctionSource]:
        """Split text into function definitions keyed by name."""
        definitions: dict[str, FunctionSource] = {}
        name: str | None = None
        current: list[str] = []

        for line in text.splitlines():
            if name is None:
                match = cls.SIGNATURE.match(line)
                if match:
                    name = match.group(1)
                    signature = line.rstrip()
                    # "f() {" is split so the body always starts on line 3
                    if signature.endswith("{"):
                        current = [signature[:-1].rstrip(), "{"]
                    else:
                        current = [line]
                continue

            current.append(line)
            if cls.CLOSING.match(line):
                definitions[name] = FunctionSource(name=name, lines=tuple(current))
                name = None

        if name is not None:
            logger.debug(f"Definition of '{name}' has no closing brace")
            definitions[name] = FunctionSource(name=name, lines=tuple(current))

        return definitions


def expand_library_files(patterns: Iterable[str | Path]) -> list[Path]:
    """Expand `~` and glob patterns into a list of existing files."""
    files: list[Path] = []
    for pattern in patterns:
        expanded = os.path.expanduser(str(pattern))
        matches = sorted(glob.glob(expanded))
        if not matches:
            logger.warning(f"Library file not found: {pattern}")
            continue
        files.extend(Path(m) for m in matches if Path(m).is_file())
    return files


__all__ = [
    "BashFunctionProvider",
    "FunctionTextProvider",
    "TextFunctionProvider",
    "expand_library_files",
]
