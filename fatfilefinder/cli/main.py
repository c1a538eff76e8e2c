"""Main CLI interface for FatFileFinder."""

import click
import logging
from pathlib import Path
from typing import Optional
from rich.console import Console
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn

from .. import __version__
from ..core.scanner import FileScanner
from ..core.actions import ActionExecutor
from ..core.models import SearchCriteria, SizeFormat, TraversalMode, ScanResult
from ..core.sizes import format_size
from ..core.config import AppConfig
from ..core.exceptions import (
    FatFileFinderError, FileSystemError, ValidationError, SizeFormatError,
    AccessDeniedError, PathNotFoundError, ActionError
)
from ..core.error_handler import ErrorHandler

# Rich consoles for results and for error reports
console = Console()
error_console = Console(stderr=True)

ARCHIVE_QUESTION = "Do you want to compress these files into a ZIP archive? (y/n)"
RELOCATE_QUESTION = "Do you want to move these files to a temporary directory? (y/n)"


class FinderCommand(click.Command):
    """Command that exits with status 1 on usage errors."""

    def parse_args(self, ctx, args):
        try:
            return super().parse_args(ctx, args)
        except click.UsageError as e:
            e.exit_code = 1
            raise


@click.command(cls=FinderCommand)
@click.version_option(version=__version__)
@click.option('-d', '--directory', required=True,
              help='The directory to search for files.')
@click.option('-s', '--size', 'size_text', required=True,
              help='The minimum file size in bytes, optionally with a KB, MB or GB suffix.')
@click.option('-e', '--extensions', default='',
              help='Comma-separated list of file extensions to filter by (or leave blank for all).')
@click.option('-p', '--pattern', default='',
              help='The regex pattern to filter file names by (or leave blank for none).')
@click.option('--size-format', type=click.Choice(['units', 'bytes']),
              help='Accept KB/MB/GB suffixes (units) or plain byte counts only (default from config)')
@click.option('--first-match/--all-matches', default=None,
              help='Stop at the first matching file (default from config)')
@click.option('--config', '-c', 'config_file', type=click.Path(path_type=Path),
              help='Configuration file path')
@click.option('--log-level', type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR']),
              help='Set logging level (overrides config)')
@click.option('--log-file', type=click.Path(path_type=Path),
              help='Log file path (overrides config)')
@click.option('--verbose', '-v', is_flag=True, help='Show scan progress and statistics')
def cli(directory: str, size_text: str, extensions: str, pattern: str, size_format: Optional[str],
        first_match: Optional[bool], config_file: Optional[Path], log_level: Optional[str],
        log_file: Optional[Path], verbose: bool):
    """FatFileFinder - Find large files and archive or move them."""
    app_config = _setup(config_file, log_level, log_file)

    # Use config defaults if options not specified
    if size_format is None:
        size_format = app_config.scan.size_format
    if first_match is None:
        first_match = app_config.scan.first_match

    try:
        criteria = SearchCriteria.from_cli(
            directory, size_text, extensions, pattern, SizeFormat(size_format)
        )
    except ValidationError as e:
        handle_cli_error(e, "command setup")
        raise click.Abort()

    mode = TraversalMode.FIRST if first_match else TraversalMode.ALL

    try:
        run_finder(criteria, mode, app_config, verbose)
    except click.Abort:
        raise
    except Exception as e:
        handle_cli_error(e, "run")
        raise click.Abort()


def _setup(config_file: Optional[Path], log_level: Optional[str],
           log_file: Optional[Path]) -> AppConfig:
    """Load configuration and set up logging."""
    from ..core.config import setup_config, LoggingConfig
    from ..core.logging_config import setup_logging

    app_config = setup_config(config_file).get_config()

    # Override logging config if command line options provided
    if log_level or log_file:
        logging_config = LoggingConfig(
            level=log_level or app_config.logging.level,
            file_path=log_file or app_config.logging.file_path,
            file_enabled=bool(log_file) or app_config.logging.file_enabled,
            console_enabled=app_config.logging.console_enabled,
            format=app_config.logging.format,
            file_max_size_mb=app_config.logging.file_max_size_mb,
            file_backup_count=app_config.logging.file_backup_count
        )
        app_config.logging = logging_config

    setup_logging(app_config.logging)
    return app_config


def run_finder(criteria: SearchCriteria, mode: TraversalMode, app_config: AppConfig,
               verbose: bool = False) -> ScanResult:
    """
    Scan for matching files, print them and offer the archive and move actions.

    Args:
        criteria: Search criteria built from the command line
        mode: Collect all matches or stop at the first one
        app_config: Application configuration
        verbose: Show a progress spinner and scan statistics

    Returns:
        The ScanResult the actions were applied to
    """
    error_handler = ErrorHandler()
    scanner = FileScanner(config=app_config, error_handler=error_handler)

    if verbose:
        console.print(f"[bold blue]Scanning {escape(criteria.root_path)}[/bold blue]", highlight=False)
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True
        ) as progress:
            scan_task = progress.add_task("Scanning files...", total=None)
            scanner.progress_callback = lambda scanned, found: progress.update(
                scan_task, description=f"Scanned {scanned} files, {found} matches..."
            )
            result = scanner.scan(criteria, mode)
    else:
        result = scanner.scan(criteria, mode)

    if not result.matches:
        console.print("No files found that match the criteria.")
        _print_scan_summary(result, verbose)
        return result

    console.print("Files found:")
    for matched in result.matches:
        console.print(f"{matched.path} - {matched.size} bytes",
                      markup=False, highlight=False, soft_wrap=True)
    _print_scan_summary(result, verbose)

    executor = ActionExecutor(
        config=app_config,
        error_handler=error_handler,
        move_callback=lambda source, destination: console.print(
            f"Moved: {source} to {destination}", markup=False, highlight=False, soft_wrap=True
        )
    )

    if _confirm(ARCHIVE_QUESTION):
        zip_path = (_read_line("Enter the output ZIP file path", prompt_suffix=":\n") or "").strip()
        if not zip_path:
            console.print("[yellow]No output path given, skipping archive.[/yellow]")
        else:
            archive_result = executor.archive(result.matches, zip_path)
            if archive_result.complete:
                console.print("[green]✓[/green] Files compressed successfully.")
            else:
                console.print(
                    f"[bold yellow]Archive incomplete:[/bold yellow] {len(archive_result.archived)} of "
                    f"{len(result.matches)} file(s) written, {len(archive_result.errors)} error(s)"
                )

    if _confirm(RELOCATE_QUESTION):
        relocation = executor.relocate(result.matches)
        if relocation.complete:
            console.print("[green]✓[/green] Files moved successfully.")
        else:
            console.print(
                f"[bold yellow]Move incomplete:[/bold yellow] {len(relocation.moved)} of "
                f"{len(result.matches)} file(s) moved, {len(relocation.errors)} error(s)"
            )

    return result


def _read_line(text: str, prompt_suffix: str) -> Optional[str]:
    """Prompt for one line of input; returns None once stdin is exhausted."""
    try:
        return click.prompt(text, default="", show_default=False, prompt_suffix=prompt_suffix)
    except click.Abort as e:
        # click turns both EOF and Ctrl-C into Abort; only EOF counts as an answer
        if isinstance(e.__context__, EOFError):
            return None
        raise


def _confirm(question: str) -> bool:
    """Ask a yes/no question; only 'y' (any case, surrounding blanks ignored) confirms."""
    answer = _read_line(question, prompt_suffix="\n")
    return answer is not None and answer.strip().lower() == "y"


def _print_scan_summary(result: ScanResult, verbose: bool):
    if result.matches:
        console.print(
            f"Found [bold cyan]{len(result.matches)}[/bold cyan] file(s), "
            f"[bold]{format_size(result.total_size)}[/bold] in total"
        )

    if verbose:
        console.print(
            f"Scanned {result.files_scanned} files in {result.directories_scanned} "
            f"directories in {result.duration:.2f} seconds",
            highlight=False
        )

    if result.errors:
        console.print(f"[bold yellow]Warnings: {len(result.errors)}[/bold yellow]")
        if verbose:
            for error in result.errors[:10]:  # Show first 10 errors
                console.print(f"  [yellow]- {escape(str(error))}[/yellow]", highlight=False)
            if len(result.errors) > 10:
                console.print(f"  [dim]... and {len(result.errors) - 10} more warnings[/dim]")


def handle_cli_error(error: Exception, operation: str = "operation") -> None:
    """
    Handle CLI errors with appropriate user feedback.

    Args:
        error: The exception that occurred
        operation: Description of the operation that failed
    """
    if isinstance(error, SizeFormatError):
        error_console.print(f"[bold red]Invalid Size:[/bold red] {escape(str(error))}")
        error_console.print("[yellow]Examples: 2048, 500KB, 10MB, 2GB.[/yellow]")
    elif isinstance(error, ValidationError):
        error_console.print(f"[bold red]Invalid Criteria:[/bold red] {escape(str(error))}")
    elif isinstance(error, PathNotFoundError):
        error_console.print(f"[bold red]Error:[/bold red] {escape(str(error))}")
        error_console.print("[yellow]Please check that the path exists and is accessible.[/yellow]")
    elif isinstance(error, AccessDeniedError):
        error_console.print(f"[bold red]Permission Error:[/bold red] {escape(str(error))}")
        error_console.print("[yellow]Please check file/directory permissions or run with appropriate privileges.[/yellow]")
    elif isinstance(error, ActionError):
        error_console.print(f"[bold red]Action Error:[/bold red] {escape(str(error))}")
    elif isinstance(error, FileSystemError):
        error_console.print(f"[bold red]File System Error:[/bold red] {escape(str(error))}")
        error_console.print("[yellow]Please check file system permissions and available space.[/yellow]")
    elif isinstance(error, FatFileFinderError):
        error_console.print(f"[bold red]Error:[/bold red] {escape(str(error))}")
    else:
        error_console.print(f"[bold red]Unexpected Error:[/bold red] {escape(str(error))}")
        error_console.print("[yellow]An unexpected error occurred. Please check the logs for more details.[/yellow]")

    # Log the full error for debugging
    logging.getLogger(__name__).error(f"CLI error in {operation}: {error}", exc_info=error)


if __name__ == "__main__":
    cli()
