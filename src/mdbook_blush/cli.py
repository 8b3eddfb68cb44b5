"""Main CLI application."""

import logging
import sys
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from mdbook_blush.commands.install import DEFAULT_CSS_DIR
from mdbook_blush.core.preprocessor import BlushPreprocessor

app = typer.Typer(
    name="mdbook-blush",
    help="mdBook preprocessor that renders ==word== as small caps.",
    add_completion=False,
)

# stdout carries the book JSON, so everything human-readable goes to stderr.
console = Console(stderr=True)


def configure_logging(verbose: bool) -> None:
    """Route log records through rich on stderr."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_time=False, show_path=False)],
        force=True,
    )


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Log every chapter as it is rewritten",
        ),
    ] = False,
) -> None:
    """mdBook preprocessor that renders ==word== as small caps.

    Run without arguments to read a book from stdin and write the rewritten
    book to stdout, the way mdBook calls preprocessors.
    """
    configure_logging(verbose)

    if ctx.invoked_subcommand is None:
        from mdbook_blush.commands.preprocess import execute_preprocess

        try:
            execute_preprocess(sys.stdin.buffer, sys.stdout)
        except Exception as e:
            console.print(f"[red]Error: {escape(str(e))}[/]")
            raise typer.Exit(1)


@app.command()
def supports(
    renderer: Annotated[
        str,
        typer.Argument(help="The renderer to check"),
    ],
) -> None:
    """Exit with status 0 if RENDERER can display small caps, 1 otherwise."""
    if not BlushPreprocessor().supports_renderer(renderer):
        raise typer.Exit(1)


@app.command()
def install(
    book_root_dir: Annotated[
        Path,
        typer.Argument(
            help="Book root directory (must contain book.toml)",
            metavar="DIR",
            file_okay=False,
        ),
    ] = Path("."),
    css_dir: Annotated[
        Path,
        typer.Option(
            "--css-dir",
            help="Override css installation path",
            metavar="DIR",
        ),
    ] = DEFAULT_CSS_DIR,
) -> None:
    """Register the preprocessor and its stylesheet in book.toml."""
    from mdbook_blush.commands.install import execute_install

    try:
        execute_install(book_root_dir=book_root_dir, css_dir=css_dir)
    except Exception as e:
        console.print(f"[red]Error: {escape(str(e))}[/]")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
