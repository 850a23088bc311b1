"""docsh - Python-style docstrings for shell functions

Philosophy:
- Ruthless simplicity
- One-way data flow (function text -> docstring -> styled output)
- Never guess: stop at the first line that is not documentation

docsh reads the documentation block at the top of a shell function body
(colon lines, quoted colon strings, or colon here-docs) and prints it with
light terminal styling.
"""

from docsh.exceptions import DocshError, MalformedHereDocError
from docsh.extractor import DocstringExtractor, extract
from docsh.models import Docstring, FunctionSource

__version__ = "0.1.0"
__all__ = [
    "DocshError",
    "Docstring",
    "DocstringExtractor",
    "FunctionSource",
    "MalformedHereDocError",
    "__version__",
    "extract",
]
