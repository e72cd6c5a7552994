"""Command-line interface for the bsky toolkit."""

import logging
import click
from pathlib import Path
from typing import Optional

from . import __version__
from .config import ToolkitConfig
from .error_handler import ErrorHandler
from .memory.arena import TmpArena
from .parser import JSONParser
from .serializer import JSONSerializer
from .types import ToolkitError


@click.group()
@click.version_option(version=__version__)
@click.option('--arena-size', type=click.IntRange(min=1), default=None,
              help='Temporary arena capacity in bytes (default: $BSKY_TMP_ARENA_CAPACITY or 8MiB)')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose output')
@click.pass_context
def main(ctx: click.Context, arena_size: Optional[int], verbose: bool):
    """bsky toolkit - parse and compact JSON with a temporary arena."""
    config = ToolkitConfig.from_env()
    if arena_size is not None:
        config = ToolkitConfig(arena_capacity=arena_size, log_level=config.log_level)

    logging.basicConfig(
        level=logging.DEBUG if verbose else config.logging_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    ctx.obj = TmpArena(config.arena_capacity)


@main.command()
@click.argument('input_file', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option('--output', '-o', type=click.Path(dir_okay=False, path_type=Path),
              help='Output JSON file path')
@click.pass_obj
def compact(arena: TmpArena, input_file: Path, output: Optional[Path]):
    """Parse a JSON file and write it back in compact form."""
    with arena.session():
        try:
            value = JSONParser(arena).parse(input_file.read_bytes())
            text = JSONSerializer(arena).dumps(value)
        except ToolkitError as e:
            response = ErrorHandler(arena).handle_error(e)
            click.echo(f"❌ Error: {e}", err=True)
            click.echo(f"   • {response.suggested_action}", err=True)
            raise SystemExit(1)
        except ValueError as e:
            click.echo(f"❌ Error: {e}", err=True)
            raise SystemExit(1)

        if output:
            output.write_bytes(bytes(text))
            click.echo(f"✅ Successfully wrote {len(text)} bytes to {output}")
        else:
            click.echo(str(text))


@main.command()
@click.argument('input_file', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_obj
def validate(arena: TmpArena, input_file: Path):
    """Check that a file holds a single well-formed JSON value."""
    with arena.session():
        result = ErrorHandler(arena).validate_input(input_file.read_bytes())

    if result.is_valid:
        click.echo(f"✅ {input_file} is valid JSON")
        return

    click.echo(f"❌ {input_file} is not valid JSON:")
    for error in result.errors:
        location = f" at offset {error.position}" if error.position is not None else ""
        click.echo(f"   • {error.code.value}{location}")
    raise SystemExit(1)


if __name__ == '__main__':
    main()
