"""Command-line interface for JSON Butler."""

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from . import __version__
from .butler import DEFAULT_NAMESPACE, DEFAULT_TYPE_NAME, JSONButler
from .commands import ConvertPascalCaseCommand, CreateTypeFromJsonCommand, SerializeTypeCommand
from .resolvers import ImportTypeResolver, SourceFileTypeResolver
from .types import (
    Clipboard,
    CodeStyle,
    ContractResolverSettings,
    EditorSurface,
    Formatting,
    MessageSink,
    NamePrompt,
    ReferenceLoopHandling,
    SerializationMode,
    TypeNameRequest,
)


class TextSelection(EditorSurface):
    """Selection read from a file, stdin or an argument."""

    def __init__(self, text: str):
        self.text = text

    def get_selected_text(self) -> str:
        return self.text


class FixedNamePrompt(NamePrompt):
    """Names taken from command-line options."""

    def __init__(self, namespace: str, type_name: str):
        self.request = TypeNameRequest(namespace=namespace, type_name=type_name)

    def prompt_for_namespace_and_name(self) -> Optional[TypeNameRequest]:
        return self.request


class OutputClipboard(Clipboard):
    """Writes copied text to a file, or to stdout when no file is given."""

    def __init__(self, output: Optional[Path] = None):
        self.output = output

    def copy_to_clipboard(self, text: str) -> None:
        if self.output:
            self.output.write_text(text, encoding="utf-8")
        else:
            click.echo(text, nl=not text.endswith("\n"))


class EchoMessages(MessageSink):
    """Shows messages on stderr."""

    def show_message(self, text: str) -> None:
        click.echo(text, err=True)


def _read_input(input_file: Path) -> str:
    if str(input_file) == "-":
        return click.get_text_stream("stdin").read()
    return input_file.read_text(encoding="utf-8")


@click.group()
@click.version_option(version=__version__)
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose output')
def main(verbose: bool):
    """JSON Butler - Generate types from JSON samples and JSON samples from types."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@main.command()
@click.argument('input_file', type=click.Path(exists=True, dir_okay=False, allow_dash=True, path_type=Path))
@click.option('--namespace', '-n', default=DEFAULT_NAMESPACE, help='Namespace of the generated types')
@click.option('--name', '-t', 'type_name', default=DEFAULT_TYPE_NAME, help='Name of the root type')
@click.option('--style', '-s', type=click.Choice([s.value for s in CodeStyle]),
              default=CodeStyle.DATACLASS.value, help='Code style (default: dataclass)')
@click.option('--output', '-o', type=click.Path(dir_okay=False, path_type=Path),
              help='Write the source to this file instead of stdout')
@click.option('--strict', is_flag=True, help='Emit nothing when samples conflict')
def generate(input_file: Path, namespace: str, type_name: str, style: str,
             output: Optional[Path], strict: bool):
    """Generate type definitions from a JSON sample."""
    butler = JSONButler(default_style=CodeStyle(style), block_on_conflicts=strict)
    command = CreateTypeFromJsonCommand(
        editor=TextSelection(_read_input(input_file)),
        prompt=FixedNamePrompt(namespace, type_name),
        clipboard=OutputClipboard(output),
        messages=EchoMessages(),
        butler=butler,
    )
    if not command.execute():
        sys.exit(1)


@main.command()
@click.argument('qualified_name')
@click.option('--source', type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help='Resolve the type from this file without importing its package')
@click.option('--mode', type=click.Choice([m.value for m in SerializationMode]),
              default=SerializationMode.DECLARED_ONLY.value, help='Member visibility')
@click.option('--loop-handling', type=click.Choice([r.value for r in ReferenceLoopHandling]),
              default=ReferenceLoopHandling.IGNORE.value, help='Reference loop handling')
@click.option('--compact', is_flag=True, help='Write compact JSON')
@click.option('--output', '-o', type=click.Path(dir_okay=False, path_type=Path),
              help='Write the JSON to this file instead of stdout')
def serialize(qualified_name: str, source: Optional[Path], mode: str, loop_handling: str,
              compact: bool, output: Optional[Path]):
    """Generate a representative JSON document for a type."""
    settings = ContractResolverSettings(
        serialization_mode=SerializationMode(mode),
        reference_loop_handling=ReferenceLoopHandling(loop_handling),
        formatting=Formatting.COMPACT if compact else Formatting.INDENTED,
    )
    resolver = SourceFileTypeResolver(str(source)) if source else ImportTypeResolver()
    command = SerializeTypeCommand(
        editor=TextSelection(qualified_name),
        resolver=resolver,
        clipboard=OutputClipboard(output),
        messages=EchoMessages(),
        settings=settings,
    )
    if not command.execute():
        sys.exit(1)


@main.command()
@click.argument('text')
def pascal(text: str):
    """Convert text into a PascalCase identifier."""
    command = ConvertPascalCaseCommand(
        editor=TextSelection(text),
        clipboard=OutputClipboard(),
        messages=EchoMessages(),
    )
    if not command.execute():
        sys.exit(1)


if __name__ == '__main__':
    main()
