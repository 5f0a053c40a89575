"""Command-line entry point for article-reader."""

import sys

import click
from rich.console import Console

from article_reader.dependencies import get_article_reader_service, get_settings
from article_reader.logging_config import configure_application_logging
from article_reader.services.article_reader_service import ArticleFetchError
from article_reader.terminal.markers import resolve_view

console = Console(stderr=True)


@click.group()
@click.version_option(version="0.1.0")
def main():
    """article-reader - read web articles in the terminal."""
    pass


@main.command()
@click.argument("url")
@click.option("--title", default="", help="Title shown in the header (extracted when omitted).")
@click.option("--width", type=click.IntRange(min=20, max=400), default=None, help="Render width.")
@click.option("--indent", "indentation_symbol", default=None, help="Prefix for every block.")
@click.option("--summary/--no-summary", default=False, help="Prepend an AI summary.")
@click.option("--expanded", is_flag=True, help="Show the full article below the summary.")
@click.option("--raw", is_flag=True, help="Print the marker-encoded document unchanged.")
def read(url, title, width, indentation_symbol, summary, expanded, raw):
    """Fetch URL and print it as a terminal document."""
    settings = get_settings()
    configure_application_logging(settings, console_stream=sys.stderr)
    service = get_article_reader_service()

    render_width = width or min(console.width, settings.max_width)
    indentation = (
        indentation_symbol
        if indentation_symbol is not None
        else settings.default_indentation_symbol
    )
    render = service.get_article_with_summary if summary else service.get_article

    try:
        document = render(url, title, render_width, indentation)
    except ArticleFetchError as exc:
        console.print(f"Error: {exc}", style="red", markup=False, highlight=False)
        sys.exit(1)

    if not raw:
        document = resolve_view(document, expanded=expanded)
    click.echo(document)


if __name__ == "__main__":
    main()
