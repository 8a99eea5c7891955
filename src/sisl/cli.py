"""Command-line interface for SISL."""

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from . import __version__
from .error_handler import EXIT_ERROR
from .transformer import SislTransformer


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr
    )


@click.command()
@click.version_option(version=__version__)
@click.option('--dumps', 'dumps_mode', is_flag=True, help='Convert JSON (or XML with --xml) to SISL')
@click.option('--loads', 'loads_mode', is_flag=True, help='Convert SISL or a fragment array to JSON (or XML with --xml)')
@click.option('--max-length', type=click.IntRange(min=1), default=None,
              help='Split --dumps output into parts of at most N bytes')
@click.option('--xml', 'use_xml', is_flag=True, help='Read (--dumps) or write (--loads) XML instead of JSON')
@click.option('--input', '-i', 'input_path', type=click.Path(dir_okay=False, path_type=Path),
              default=None, help='Input file (default: stdin)')
@click.option('--output', '-o', 'output_path', type=click.Path(dir_okay=False, path_type=Path),
              default=None, help='Output file (default: stdout)')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose output')
@click.pass_context
def main(ctx: click.Context, dumps_mode: bool, loads_mode: bool, max_length: Optional[int],
         use_xml: bool, input_path: Optional[Path], output_path: Optional[Path],
         verbose: bool):
    """SISL - convert between JSON/XML and explicitly typed SISL text."""
    if dumps_mode and loads_mode:
        raise click.UsageError("Cannot use both --dumps and --loads")
    if not dumps_mode and not loads_mode:
        raise click.UsageError("Must specify --dumps or --loads")
    if max_length is not None and not dumps_mode:
        raise click.UsageError("--max-length can only be used with --dumps")

    _configure_logging(verbose)
    transformer = SislTransformer()

    try:
        text = transformer.file_writer.read_input(input_path)
        if dumps_mode:
            result = transformer.dumps_json_text(text, max_length=max_length, xml=use_xml)
        else:
            result = transformer.loads_text(text, xml=use_xml)
        if not result.endswith("\n"):
            result += "\n"
        transformer.file_writer.write_output(result, output_path)
    except Exception as e:
        response = transformer.error_handler.handle_error(e)
        click.echo(f"Error: {response.message}", err=True)
        if verbose or response.exit_code != EXIT_ERROR:
            click.echo(f"Hint: {response.suggested_action}", err=True)
        ctx.exit(response.exit_code)


if __name__ == '__main__':
    main()
