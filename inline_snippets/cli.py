"""
Inlines GitHub code snippets into an mdast document tree stored as JSON.
The transformed tree is printed to stdout, or written back with --in-place.
"""

from __future__ import annotations

from pathlib import Path

import click
from .config import ConfigError, build_config
from .exceptions import SerializationError, SnippetError
from .filesystem import (
    enforce_file_size,
    get_max_file_size,
    normalize_filepath,
    read_text,
    write_atomically,
)
from .serialization import dumps, loads
from .transform import inline_snippets_sync

__all__ = ["cli"]


@click.command()
@click.version_option()
@click.option("--marker", "inline_marker", help="Link label that flags a snippet link")
@click.option("--origin-comment", help="Comment placed above each snippet; <url> is the link")
@click.option("--timeout", type=float, help="Seconds allowed for each fetch")
@click.option("--max-concurrency", type=int, help="Maximum number of simultaneous fetches")
@click.option("--in-place", is_flag=True, help="Rewrite the tree file instead of printing it")
@click.argument("filepath", type=click.Path(exists=True, dir_okay=False))
def cli(
    filepath: str,
    inline_marker: str | None = None,
    origin_comment: str | None = None,
    timeout: float | None = None,
    max_concurrency: int | None = None,
    in_place: bool = False,
):
    """
    Entry point for inlining snippets into a document tree file.

    Args:
        filepath: Path to the mdast JSON file to process.
        inline_marker: Override for the link label that flags snippets.
        origin_comment: Override for the comment placed above snippets.
        timeout: Override for the per-fetch timeout in seconds.
        max_concurrency: Override for the number of simultaneous fetches.
        in_place: Rewrite the file instead of printing the result.

    Returns:
        None.

    Raises:
        click.BadParameter: If the path is invalid or configuration values are
            unsupported.
        click.ClickException: If the tree cannot be read, contains a malformed
            snippet reference, or cannot be written back.

    Examples:
        inline-snippets build/post.json --origin-comment "Source: <url>"
    """
    base_dir = Path.cwd().resolve()
    try:
        path = normalize_filepath(filepath, base_dir)
    except ValueError as error:
        raise click.BadParameter(str(error)) from error

    try:
        config = build_config(
            path.parent,
            inline_marker=inline_marker,
            origin_comment=origin_comment,
            timeout=timeout,
            max_concurrency=max_concurrency,
            on_error=lambda error: click.echo(f"Warning: {error}", err=True),
        )
    except ConfigError as error:
        raise click.BadParameter(str(error)) from error

    try:
        max_file_size = get_max_file_size()
    except ValueError as error:
        raise click.ClickException(str(error)) from error

    try:
        initial_stat = enforce_file_size(path, max_file_size)
        tree = loads(read_text(path))
    except (IOError, SerializationError) as error:
        raise click.ClickException(str(error)) from error

    try:
        tree = inline_snippets_sync(tree, config)
    except SnippetError as error:
        raise click.ClickException(str(error)) from error

    output = dumps(tree)
    if in_place:
        try:
            write_atomically(path, output + "\n", initial_stat)
        except IOError as error:
            raise click.ClickException(str(error)) from error
    else:
        click.echo(output)


if __name__ == "__main__":
    cli()
