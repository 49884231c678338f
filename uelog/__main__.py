"""Entry point for uelog CLI."""

from dataclasses import replace
from pathlib import Path

import rich_click as click
from rich.console import Console

from uelog.core.config import Config, ConfigError, ConfigLoader
from uelog.core.pipeline import run
from uelog.core.sources import list_folder
from uelog.models.filter_def import FieldFilter
from uelog.utils.output import open_sink

click.rich_click.TEXT_MARKUP = "rich"
click.rich_click.SHOW_ARGUMENTS = True


def _load_config(config_path: str | None) -> Config:
    """Load an explicit config file, or merge the discovered ones.

    Raises:
        ConfigError: If a config file is invalid.
        FileNotFoundError: If an explicit config file does not exist.
    """
    loader = ConfigLoader()
    if config_path:
        return loader.load(Path(config_path))
    return loader.load_merged()


def _override_filter(
    current: FieldFilter,
    include: tuple[str, ...],
    exclude: tuple[str, ...],
) -> FieldFilter:
    """Apply --type/--category style options on top of a configured filter.

    Args:
        current: Filter from the config file.
        include: Values to add to the whitelist.
        exclude: Values to add to the blacklist.

    Returns:
        The filter to use. Unchanged if no values were given.
    """
    if not include and not exclude:
        return current
    return current.model_copy(update={
        "ignore": False,
        "whitelist": [*current.whitelist, *include],
        "blacklist": [*current.blacklist, *exclude],
    })


def _collect_file_names(files: tuple[str, ...], config: Config) -> list[str]:
    """Get the source names for this run.

    Files named on the command line win. Otherwise, in folder mode, every
    file in the configured folder is used.
    """
    if files:
        return list(files)
    if config.loading.directory == "folder" and config.loading.folder_path:
        return list_folder(Path(config.loading.folder_path))
    return []


@click.command()
@click.argument("files", nargs=-1, type=str)
@click.option(
    "--version",
    is_flag=True,
    help="Show version and exit."
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=False, dir_okay=False),
    help="Path to a uelog.toml file. Disables config discovery."
)
@click.option(
    "--folder",
    type=click.Path(file_okay=False),
    help="Parse every file in this folder (folder mode)."
)
@click.option(
    "--consolidate/--per-file",
    default=None,
    help="Merge all files into one report, or keep one report per file."
)
@click.option(
    "--summarize/--no-summarize",
    default=None,
    help="Print a summary right after each file is parsed."
)
@click.option(
    "--log-list/--no-log-list",
    default=None,
    help="Print the full entry list on the console."
)
@click.option(
    "--output",
    "output_file",
    type=click.Path(dir_okay=False),
    help="Also write the report to this text file."
)
@click.option(
    "--type",
    "types",
    type=str,
    multiple=True,
    help="Severity type to include (e.g., 'Error', 'Warning'). Can be repeated."
)
@click.option(
    "--exclude-type",
    "exclude_types",
    type=str,
    multiple=True,
    help="Severity type to exclude. Can be repeated."
)
@click.option(
    "--category",
    "categories",
    type=str,
    multiple=True,
    help="Category to include (e.g., 'Temp' for LogTemp). Can be repeated."
)
@click.option(
    "--exclude-category",
    "exclude_categories",
    type=str,
    multiple=True,
    help="Category to exclude. Can be repeated."
)
@click.option(
    "--debug",
    is_flag=True,
    help="Show debug diagnostics such as the count order around sorting."
)
@click.option(
    "--no-color",
    is_flag=True,
    help="Disable colored console output."
)
@click.pass_context
def cli(
    ctx: click.Context,
    files: tuple[str, ...],
    version: bool,
    config_path: str | None,
    folder: str | None,
    consolidate: bool | None,
    summarize: bool | None,
    log_list: bool | None,
    output_file: str | None,
    types: tuple[str, ...],
    exclude_types: tuple[str, ...],
    categories: tuple[str, ...],
    exclude_categories: tuple[str, ...],
    debug: bool,
    no_color: bool,
) -> None:
    """uelog - Summarize and deduplicate game engine log files.

    Parses [bold]LogCategory: Type: message[/bold] statements, folds
    duplicates together and reports counts by type and category.
    """
    if version:
        from uelog import __version__
        click.echo(f"uelog {__version__}")
        return

    console = Console(highlight=False)

    try:
        config = _load_config(config_path)
    except (ConfigError, FileNotFoundError) as e:
        console.print(f"[red]Error:[/red] {e}")
        ctx.exit(1)
        return

    # Command-line options take precedence over config files
    if folder is not None:
        config.loading = replace(config.loading, directory="folder", folder_path=folder)
    if consolidate is not None:
        config.parsing.consolidate = consolidate
    if summarize is not None:
        config.parsing.summarize = summarize
    if log_list is not None:
        config.display.log_list = log_list
    if output_file is not None:
        config.output.write_to_file = True
        config.output.path = output_file
    if debug:
        config.output.debug = True
    if no_color:
        config.output.color = False

    config.display.filters.type = _override_filter(
        config.display.filters.type, types, exclude_types
    )
    config.display.filters.category = _override_filter(
        config.display.filters.category, categories, exclude_categories
    )

    if not config.output.color:
        console = Console(highlight=False, no_color=True)

    report_path = Path(config.output.path) if config.output.write_to_file else None

    # The report file is closed on every exit path; errors still propagate
    with open_sink(console, report_path, debug=config.output.debug) as sink:
        try:
            file_names = _collect_file_names(files, config)
        except NotADirectoryError as e:
            console.print(f"[red]Error:[/red] {e}")
            ctx.exit(1)
            return

        run(file_names, config, sink)


if __name__ == "__main__":
    cli()
