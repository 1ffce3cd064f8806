"""Main CLI entry point."""

import asyncio
import sys
from pathlib import Path
from typing import Any, Awaitable, Callable, Coroutine, List, Optional, TypeVar

import click

from .. import __version__
from ..config import ConfigManager
from ..config.config_manager import candidate_paths
from ..core.models import ViewSnapshot, display_rating
from ..core.services import MovieListController
from ..infrastructure import Container, setup_logging
from ..utils import ConfigurationError, format_date

T = TypeVar("T")

SORT_CHOICES = ["none", "title", "rating"]


@click.group()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, path_type=Path),
    help="Path to configuration file",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.version_option(version=__version__, prog_name="movieverse")
@click.pass_context
def cli(ctx: click.Context, config: Optional[Path], verbose: bool) -> None:
    """MovieVerse - browse and manage a remote movie collection."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["config_path"] = config

    # Skip configuration loading for commands that don't need it
    if ctx.invoked_subcommand in ("init", "validate"):
        return

    # Tests may inject a ready container
    if "container" in ctx.obj:
        return

    try:
        config_manager = ConfigManager(config)
        app_config = config_manager.load_config()

        if verbose:
            app_config.logging.level = "DEBUG"
        setup_logging(app_config.logging)

        container = Container(config_manager)
        container.configure_default_services()

        ctx.obj["config"] = app_config
        ctx.obj["container"] = container

    except (ConfigurationError, FileNotFoundError, ValueError) as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)


@cli.command(name="list")
@click.option("--page", "-p", type=click.IntRange(min=1), default=1, help="Page number")
@click.option("--sort", "-s", type=click.Choice(SORT_CHOICES), help="Sort order")
@click.option("--query", "-q", help="Search titles and genres")
@click.option("--genre", "-g", help="Only this genre")
@click.option("--min-date", help="Released on or after (YYYY-MM-DD)")
@click.option("--min-rating", help="Rating at least")
@click.pass_context
def list_movies(
    ctx: click.Context,
    page: int,
    sort: Optional[str],
    query: Optional[str],
    genre: Optional[str],
    min_date: Optional[str],
    min_rating: Optional[str],
) -> None:
    """List one page of movies, optionally filtered."""
    container = ctx.obj["container"]

    async def run(controller: MovieListController) -> bool:
        controller.set_filter_field("query", query or "")
        controller.set_filter_field("genre", genre)
        controller.set_filter_field("min_release_date", min_date)
        controller.set_filter_field("min_rating", min_rating)
        return await controller.fetch_page(page, sort)

    _finish(_run_with_controller(container, run))


@cli.command()
@click.option("--title", prompt=True, help="Movie title")
@click.option("--genre", prompt=True, help="Genre")
@click.option("--release-date", prompt="Release date (YYYY-MM-DD)", help="Release date")
@click.option("--rating", prompt="Rating (e.g. 8.5)", help="Rating")
@click.pass_context
def add(ctx: click.Context, title: str, genre: str, release_date: str, rating: str) -> None:
    """Add a movie and show the first page."""
    container = ctx.obj["container"]

    async def run(controller: MovieListController) -> bool:
        controller.open_add_form()
        _fill_form(controller, title, genre, release_date, rating)
        return await controller.submit_form()

    _finish(_run_with_controller(container, run), success="Movie added.")


@cli.command()
@click.argument("movie_id")
@click.option("--page", "-p", type=click.IntRange(min=1), default=1, help="Page to show after")
@click.option("--title", prompt=True, help="Movie title")
@click.option("--genre", prompt=True, help="Genre")
@click.option("--release-date", prompt="Release date (YYYY-MM-DD)", help="Release date")
@click.option("--rating", prompt="Rating (e.g. 8.5)", help="Rating")
@click.pass_context
def update(
    ctx: click.Context,
    movie_id: str,
    page: int,
    title: str,
    genre: str,
    release_date: str,
    rating: str,
) -> None:
    """Update a movie and show the page it is on."""
    container = ctx.obj["container"]

    async def run(controller: MovieListController) -> bool:
        if not await controller.fetch_page(page):
            return False
        return await controller.update(
            movie_id,
            {"title": title, "genre": genre, "release_date": release_date, "rating": rating},
        )

    _finish(_run_with_controller(container, run), success="Movie updated.")


@cli.command()
@click.argument("movie_id")
@click.option("--page", "-p", type=click.IntRange(min=1), default=1, help="Page to show after")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete(ctx: click.Context, movie_id: str, page: int, yes: bool) -> None:
    """Delete a movie."""
    container = ctx.obj["container"]

    if not yes and not click.confirm("Are you sure you want to delete this movie?"):
        click.echo("Cancelled.")
        return

    async def run(controller: MovieListController) -> bool:
        if not await controller.fetch_page(page):
            return False
        return await controller.delete(movie_id)

    _finish(_run_with_controller(container, run), success="Movie deleted.")


@cli.command()
@click.option(
    "--output",
    "-o",
    type=click.Path(path_type=Path),
    default=Path.cwd() / "config" / "config.yaml",
    help="Output path for configuration file",
)
@click.option("--base-url", help="Backend base URL")
def init(output: Path, base_url: Optional[str]) -> None:
    """Initialize configuration file."""
    try:
        if output.exists():
            if not click.confirm(f"Configuration file {output} already exists. Overwrite?"):
                return

        output.parent.mkdir(parents=True, exist_ok=True)

        ConfigManager.create_default_config(output, base_url=base_url)
        click.echo(f"Configuration file created at: {output}")
        if not base_url:
            click.echo("Set MOVIEVERSE_BACKEND_URL or edit backend.base_url in the file.")

    except OSError as e:
        click.echo(f"Failed to create configuration: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.argument("path", required=False, type=click.Path(exists=True, path_type=Path))
@click.pass_context
def validate(ctx: click.Context, path: Optional[Path]) -> None:
    """Validate a configuration file."""
    target = path or ctx.obj.get("config_path")
    if target is None:
        target = next((p for p in candidate_paths() if p.exists()), None)
    if target is None:
        click.echo("No configuration file found. Run 'movieverse init' first.", err=True)
        sys.exit(1)

    problem = ConfigManager(load_env=True).validate_config_file(target)
    if problem:
        click.echo(f"✗ {target}: {problem}", err=True)
        sys.exit(1)
    click.echo(f"✓ {target} is valid")


@cli.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show configuration and backend reachability."""
    container = ctx.obj["container"]
    config = container.get_config()

    click.echo("MovieVerse Status")
    click.echo("=" * 40)
    click.echo(f"Backend: {config.backend.base_url}")
    click.echo(f"Send credentials: {'yes' if config.backend.with_credentials else 'no'}")
    click.echo(f"Default sort: {config.view.default_sort or 'none'}")

    async def run(controller: MovieListController) -> bool:
        return await controller.fetch_page(1)

    snapshot = asyncio.run(_run_with_controller(container, run, render=False))
    if snapshot.last_error is None:
        click.echo(f"Backend Status: ✓ {snapshot.page.total_pages} page(s)")
    else:
        click.echo(f"Backend Status: ✗ {snapshot.last_error}")
        sys.exit(1)


async def _run_with_controller(
    container: Container,
    action: Callable[[MovieListController], Awaitable[T]],
    render: bool = True,
) -> ViewSnapshot:
    """Run ``action`` against the controller and return the final snapshot."""
    controller = container.get(MovieListController)
    try:
        await action(controller)
        snapshot = controller.snapshot()
    finally:
        await container.close()

    if render:
        _render(snapshot, container.get_config().view.genres)
    return snapshot


def _finish(coro: Coroutine[Any, Any, ViewSnapshot], success: Optional[str] = None) -> None:
    """Run a command coroutine and exit non-zero on a surfaced error."""
    try:
        snapshot = asyncio.run(coro)
    except KeyboardInterrupt:
        click.echo("\nOperation cancelled by user.")
        sys.exit(1)

    if snapshot.last_error is not None:
        click.echo(f"Error: {snapshot.last_error}", err=True)
        sys.exit(1)
    if success:
        click.echo(success)


def _fill_form(
    controller: MovieListController, title: str, genre: str, release_date: str, rating: str
) -> None:
    controller.set_form_field("title", title)
    controller.set_form_field("genre", genre)
    controller.set_form_field("release_date", release_date)
    controller.set_form_field("rating", rating)


def _render(snapshot: ViewSnapshot, fallback_genres: Optional[List[str]] = None) -> None:
    """Print the snapshot as a table."""
    headers = ("Title", "Genre", "Release Date", "Rating", "ID")
    rows = [
        (
            movie.title,
            movie.genre,
            format_date(movie.release_date),
            display_rating(movie.rating),
            movie.id,
        )
        for movie in snapshot.view
    ]
    widths = [
        max([len(header)] + [len(row[index]) for row in rows])
        for index, header in enumerate(headers)
    ]

    click.echo("  ".join(header.ljust(width) for header, width in zip(headers, widths)))
    click.echo("  ".join("-" * width for width in widths))
    for row in rows:
        click.echo("  ".join(value.ljust(width) for value, width in zip(row, widths)))

    if not rows:
        click.echo("No movies match the current filters.")

    page = snapshot.page
    click.echo("")
    click.echo(
        f"Page {page.current_page} of {page.total_pages}"
        f" - showing {len(rows)} of {snapshot.record_count}"
        f" - sort: {page.sort_key.value or 'none'}"
    )

    genres = snapshot.available_genres or tuple(fallback_genres or ())
    if genres:
        click.echo(f"Genres: {', '.join(genres)}")


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
