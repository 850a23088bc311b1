"""CLI entry point for docsh.

Print documentation for shell functions and scripts.

Commands:
    docsh myfunc                 # Docs of a function defined in the shell
    docsh -TD -f myfunc          # ...with title and description header
    docsh 'line 1' 'line 2'      # Render literal doc-strings
    docsh - < README.txt         # Read the doc-string from stdin
    declare -pf myfunc | docsh --defn - -T
"""

import logging
import os
import re
import sys

import click
from rich.console import Console

from docsh import __version__
from docsh.config_manager import ConfigError, ConfigManager, DocshConfig
from docsh.exceptions import (
    DocshError,
    FunctionNotFoundError,
    NoDocumentationError,
    ProviderError,
)
from docsh.extractor import DocstringExtractor
from docsh.function_provider import (
    BashFunctionProvider,
    FunctionTextProvider,
    TextFunctionProvider,
)
from docsh.indirection import resolve_indirection
from docsh.models import Docstring, FunctionSource
from docsh.renderer import DocstringRenderer, RenderOptions

logger = logging.getLogger(__name__)

# Characters bash accepts in function names, minus the exotic ones
FUNCTION_NAME_PATTERN = re.compile(r"[A-Za-z_][\w:.@+-]*")


def _build_provider(
    defn_text: str | None, sources: tuple[str, ...], config: DocshConfig
) -> FunctionTextProvider:
    if defn_text is not None:
        return TextFunctionProvider(defn_text)
    return BashFunctionProvider(
        library_files=[*config.library_files, *sources],
        shell=config.shell,
        timeout=config.shell_timeout,
    )


def _resolve_color(color: bool | None, config: DocshConfig) -> bool | None:
    """Decide whether to keep styles: True, False, or None for auto-detect."""
    if color is not None:
        return color
    if os.environ.get("NO_COLOR"):
        return False
    return {"always": True, "never": False}.get(config.color)


def _find_function(provider: FunctionTextProvider, name: str) -> FunctionSource | None:
    """Return the definition of `name`, or None when it isn't a usable function."""
    try:
        return provider.get_source(name)
    except FunctionNotFoundError:
        return None
    except ProviderError as e:
        logger.debug(f"Treating '{name}' as doc-string text: {e}")
        return None


def collect_docstring(
    doc_strings: tuple[str, ...],
    func_name: str | None,
    provider: FunctionTextProvider,
    extractor: DocstringExtractor,
) -> tuple[Docstring, str | None]:
    """Work out where the docs come from and return them.

    A single argument is looked up as a function once; when the lookup fails
    (unknown name, or no shell to ask) it is rendered as text.

    Args:
        doc_strings: Positional arguments
        func_name: Function named with -f (optional)
        provider: Source of function definitions
        extractor: Docstring extractor

    Returns:
        (docstring, function name or None)

    Raises:
        click.UsageError: No doc-strings and no function to read them from
        NoDocumentationError: The function has no docstring
        DocshError: Function lookup for -f or extraction failed
    """
    if func_name is None and doc_strings == ("-",):
        text = click.get_text_stream("stdin").read()
        return Docstring.from_text(text.rstrip("\n")), None

    source = None
    if (
        func_name is None
        and len(doc_strings) == 1
        and FUNCTION_NAME_PATTERN.fullmatch(doc_strings[0])
    ):
        source = _find_function(provider, doc_strings[0])
        if source is not None:
            func_name = doc_strings[0]
            doc_strings = ()

    if doc_strings:
        return Docstring.from_text("\n".join(doc_strings)), func_name

    if func_name is None:
        if isinstance(provider, TextFunctionProvider) and provider.names:
            func_name = provider.names[0]
        else:
            raise click.UsageError("No function name to use for doc-strings")

    if source is None:
        source = provider.get_source(func_name)
    docstring = extractor.extract(source)
    if not docstring.found:
        raise NoDocumentationError(f"No docs available for function '{func_name}'")

    return resolve_indirection(docstring), func_name


def output_text(text: str, color: bool | None, use_pager: bool) -> None:
    """Print text, through the pager when stdout is a terminal."""
    if use_pager and click.get_text_stream("stdout").isatty():
        click.echo_via_pager(text + "\n", color=color)
    else:
        click.echo(text, color=color)


@click.command(context_settings={"help_option_names": ["--help", "-h"]})
@click.argument("doc_strings", nargs=-1)
@click.option("-D", "describe", is_flag=True, help="Use the first docstring line as description")
@click.option("-d", "description", type=str, help="Render this description above the docs")
@click.option("-f", "func_name", type=str, help="Get the doc-strings from this function")
@click.option("-T", "show_title", is_flag=True, help="Render the function name as a title")
@click.option(
    "--defn",
    type=click.File("r"),
    help="Read function definitions (declare -pf output) from FILE, '-' for stdin",
)
@click.option(
    "--source",
    "-s",
    "sources",
    multiple=True,
    type=click.Path(),
    help="Shell file to source before lookup",
)
@click.option("--config", "config_path", type=click.Path(), help="Config file path")
@click.option("--init-config", is_flag=True, help="Write a default config file and exit")
@click.option("--color/--no-color", default=None, help="Force styled output on or off")
@click.option("--pager/--no-pager", default=None, help="Page output on a terminal")
@click.option("--verbose", "-v", is_flag=True, help="Show debug output")
@click.version_option(version=__version__)
@click.pass_context
def main(
    ctx: click.Context,
    doc_strings: tuple[str, ...],
    describe: bool,
    description: str | None,
    func_name: str | None,
    show_title: bool,
    defn,
    sources: tuple[str, ...],
    config_path: str | None,
    init_config: bool,
    color: bool | None,
    pager: bool | None,
    verbose: bool,
) -> None:
    """Print documentation for shell functions and scripts.

    DOC_STRINGS may be a function name, '-' to read the doc-string from
    stdin, or one or more strings that are joined with newlines.

    Function docs are read from the first lines of the function body: colon
    lines (: "docs...";), quoted multi-line strings, or colon here-docs
    (: <<'EOF' ... EOF). A guard test on the first line is skipped.

    \b
    Examples:
        docsh myfunc
        docsh -TD -f myfunc
        docsh -s ~/.bash_lib/myfunc.sh myfunc
        declare -pf myfunc | docsh --defn - -T

    \b
    Exit status:
        0  docs printed
        1  no docs found
        2  usage error
        3  unknown function
        4  malformed here-doc
        5  config error
    """
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO, format="%(message)s")
    console = Console(stderr=True)

    try:
        if init_config:
            target = config_path or str(ConfigManager.get_config_path())
            if os.path.exists(os.path.expanduser(target)):
                raise ConfigError(f"Config file already exists: {target}")
            path = ConfigManager.save_config(DocshConfig(), target)
            click.echo(f"Wrote default config to {path}")
            return

        config = ConfigManager.load_config(config_path)
        provider = _build_provider(defn.read() if defn else None, sources, config)
        extractor = DocstringExtractor(renderer_name=config.renderer_name)

        docstring, func_name = collect_docstring(doc_strings, func_name, provider, extractor)

        if show_title and not func_name:
            raise click.UsageError("No function name to use as title")

        options = RenderOptions(
            title=func_name if show_title else None,
            description=description,
            describe_from_body=describe and description is None,
            indent=config.indent,
            heading_words=config.heading_words,
        )
        text = DocstringRenderer(options).render(docstring.lines)

    except NoDocumentationError as e:
        console.print(f"Warning: {e}", style="yellow", markup=False)
        ctx.exit(e.exit_code)
    except DocshError as e:
        console.print(f"Error: {e}", style="red", markup=False)
        ctx.exit(e.exit_code)

    use_pager = pager if pager is not None else config.pager
    output_text(text, _resolve_color(color, config), use_pager)


if __name__ == "__main__":
    sys.exit(main())
