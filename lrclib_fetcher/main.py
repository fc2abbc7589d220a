"""
Main CLI interface for lrclib-fetcher

Command-line entry point (`lrclib-fetch`) built with Click:
- fetch: scan a music directory and write lyrics files next to audio files
- lookup: resolve lyrics for a single artist/title and print them
- config: show or persist configuration
- doctor: configuration, dependency and connectivity diagnostics
"""

import sys
import click
import functools
from pathlib import Path

import requests

from . import __version__
from .batch.orchestrator import FetchSummary, create_lyrics_fetcher
from .config.settings import get_settings, reload_settings
from .lyrics.lrclib import get_lrclib_client, reset_lrclib_client
from .lyrics.models import LyricSearchOptions, TrackMetadata
from .lyrics.resolver import get_lyrics_resolver, reset_lyrics_resolver
from .utils.logger import configure_from_settings, get_logger, get_current_log_file
from .utils.helpers import format_duration, parse_duration_string, truncate_string
from .utils.validation import (
    validate_music_directory,
    validate_batch_size,
    validate_delay,
    validate_log_level
)


logger = get_logger(__name__)


def print_banner():
    """Print application banner to console"""
    title = "LRCLib Fetcher  ·  synced lyrics from lrclib.net"
    rule = "─" * (len(title) + 4)
    click.echo(click.style(f"\n{rule}\n  {title}\n{rule}\n", fg="cyan", bold=True))


def handle_error(func):
    """
    Turn exceptions escaping a command into an exit status

    Ctrl-C exits with 130; anything else is logged and exits with 1.
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except KeyboardInterrupt:
            click.echo(click.style("\nInterrupted, stopping.", fg='yellow'))
            sys.exit(130)
        except Exception as e:
            logger.error(f"Command failed: {e}")
            click.echo(click.style(f"Error: {e}", fg='red'), err=True)
            sys.exit(1)
    return wrapper


def fail(message: str) -> None:
    """Print an error in red and exit with status 1"""
    click.echo(click.style(message, fg='red'), err=True)
    sys.exit(1)


def reset_lookup_components() -> None:
    """Drop cached client and resolver so they pick up changed settings"""
    reset_lyrics_resolver()
    reset_lrclib_client()


@click.group(invoke_without_command=True)
@click.option('--version', is_flag=True, help='Show version information')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose (debug) logging')
@click.option('--config', type=click.Path(), help='Path to config file')
@click.pass_context
def cli(ctx, version, verbose, config):
    """
    LRCLib Fetcher - synchronized lyrics for your local music files

    Looks up each audio file on lrclib.net and saves the lyrics beside it as
    .lrc (synchronized) or .txt (plain text).
    """
    ctx.ensure_object(dict)

    if version:
        click.echo(f"lrclib-fetcher v{__version__}")
        return

    if config:
        reload_settings(config)
        reset_lookup_components()
        configure_from_settings()
        click.echo(f"Loaded config: {config}")

    if verbose:
        ctx.obj['verbose'] = True
        get_settings().logging.level = 'DEBUG'
        configure_from_settings()
        logger.debug("Verbose mode enabled")

    if ctx.invoked_subcommand is None:
        print_banner()
        click.echo(ctx.get_help())


@cli.command()
@click.argument('directory', type=click.Path())
@click.option('--recursive/--no-recursive', default=None, help='Scan subdirectories')
@click.option('--skip-existing/--no-skip-existing', default=None,
              help='Skip files that already have lyrics')
@click.option('--overwrite', '-o', is_flag=True, default=None, help='Overwrite existing lyrics files')
@click.option('--batch-size', '-b', type=int, help='Number of files to process in parallel')
@click.option('--delay', '-d', type=int, help='Delay between batches in milliseconds')
@click.option('--allow-title-only', is_flag=True, default=None,
              help='Search by title only if artist searches fail')
@click.option('--prefer-synced/--no-prefer-synced', default=None,
              help='Prefer synchronized lyrics over plain text')
@click.option('--log-level', help='Log level (debug, info, warning, error, critical)')
@click.option('--log-file', type=click.Path(), help='Path to log file')
@handle_error
def fetch(directory, recursive, skip_existing, overwrite, batch_size, delay,
          allow_title_only, prefer_synced, log_level, log_file):
    """
    Fetch lyrics for every audio file in DIRECTORY

    Command-line options override the configuration file and LRCLIB_*
    environment variables for this run only.
    """
    is_valid, error_msg = validate_music_directory(directory)
    if not is_valid:
        fail(f"Invalid music directory: {error_msg}")

    if batch_size is not None:
        is_valid, error_msg = validate_batch_size(batch_size)
        if not is_valid:
            fail(error_msg)

    if delay is not None:
        is_valid, error_msg = validate_delay(delay)
        if not is_valid:
            fail(error_msg)

    if log_level is not None:
        is_valid, error_msg = validate_log_level(log_level)
        if not is_valid:
            fail(error_msg)

    settings = get_settings()

    if recursive is not None:
        settings.files.recursive = recursive
    if skip_existing is not None:
        settings.files.skip_existing = skip_existing
    if overwrite:
        settings.files.overwrite_existing = True
    if batch_size is not None:
        settings.batch.size = batch_size
    if delay is not None:
        settings.batch.delay_ms = delay
    if allow_title_only:
        settings.search.allow_title_only_search = True
    if prefer_synced is not None:
        settings.search.prefer_synced = prefer_synced

    if log_level or log_file:
        if log_level:
            settings.logging.level = log_level.upper()
        if log_file:
            settings.logging.file = str(Path(log_file).expanduser().resolve())
        configure_from_settings()

    fetcher = create_lyrics_fetcher(settings)
    results = fetcher.process_directory(Path(directory).expanduser())

    if not results:
        click.echo("No audio files found")
        return

    print_summary(FetchSummary.from_results(results))


def print_summary(summary: FetchSummary) -> None:
    """Print run totals and grouped failure reasons"""
    click.echo(click.style(
        f"\nProcessed {summary.total} files ({summary.successful} successful)",
        fg='green'
    ))
    click.echo(f"   Written: {summary.written} "
               f"(synced: {summary.synced}, plain: {summary.plain}, instrumental: {summary.instrumental})")
    click.echo(f"   Skipped (lyrics already present): {summary.skipped}")
    click.echo(f"   Not found: {summary.not_found}")
    click.echo(f"   Failed: {summary.failed}")

    if summary.error_counts:
        click.echo(click.style(f"\n{summary.unsuccessful} files failed:", fg='yellow'))
        for message, count in summary.error_counts.items():
            click.echo(click.style(f"  - {count} files: {message}", fg='yellow'))


@cli.command()
@click.option('--artist', '-a', required=True, help='Artist name')
@click.option('--title', '-t', required=True, help='Track title')
@click.option('--album', help='Album name (used by the exact match search)')
@click.option('--duration', help='Track length in seconds or m:ss (used by the exact match search)')
@click.option('--allow-title-only', is_flag=True, default=None, help='Enable the title-only search')
@click.option('--prefer-synced/--no-prefer-synced', default=None,
              help='Prefer synchronized lyrics over plain text')
@click.option('--full', is_flag=True, help='Print the complete lyrics instead of a preview')
@handle_error
def lookup(artist, title, album, duration, allow_title_only, prefer_synced, full):
    """
    Look up lyrics for a single track and print them
    """
    duration_seconds = None
    if duration:
        duration_seconds = parse_duration_string(duration)
        if duration_seconds is None:
            fail(f"Invalid duration: {duration}")

    defaults = get_settings().search_options()
    options = LyricSearchOptions(
        allow_title_only_search=defaults.allow_title_only_search or bool(allow_title_only),
        prefer_synced=defaults.prefer_synced if prefer_synced is None else prefer_synced,
    )

    metadata = TrackMetadata(artist=artist, title=title, album=album, duration=duration_seconds)
    result = get_lyrics_resolver().resolve(metadata, options)

    if result is None:
        click.echo(click.style(f'No lyrics found for "{metadata}"', fg='yellow'))
        return

    click.echo(click.style(f"{result.artist} - {result.title}", fg='green', bold=True))
    if result.album:
        click.echo(f"   Album: {result.album}")
    if duration_seconds:
        click.echo(f"   Duration: {format_duration(duration_seconds)}")
    click.echo(f"   Type: {result.kind}")
    click.echo(f"   Source: {result.source}")

    text = result.synced_lyrics or result.plain_lyrics
    if text:
        click.echo("")
        click.echo(text if full else truncate_string(text, 500))


@cli.group()
def config():
    """
    Inspect or change persisted settings
    """
    pass


@config.command()
@handle_error
def show():
    """
    Print the effective settings
    """
    settings = get_settings()

    click.echo("Current Configuration:\n")

    click.echo("Search:")
    click.echo(f"   Allow title-only search: {settings.search.allow_title_only_search}")
    click.echo(f"   Prefer synced lyrics: {settings.search.prefer_synced}")

    click.echo("\nFiles:")
    click.echo(f"   Recursive: {settings.files.recursive}")
    click.echo(f"   Skip existing: {settings.files.skip_existing}")
    click.echo(f"   Overwrite existing: {settings.files.overwrite_existing}")
    click.echo(f"   Extensions: {', '.join(settings.files.extensions)}")

    click.echo("\nBatch:")
    click.echo(f"   Size: {settings.batch.size}")
    click.echo(f"   Delay: {settings.batch.delay_ms}ms")

    click.echo("\nNetwork:")
    click.echo(f"   API: {settings.network.base_url}")
    click.echo(f"   Timeout: {settings.network.request_timeout}s")
    click.echo(f"   Retry attempts: {settings.network.retry_attempts}")

    click.echo("\nLogging:")
    click.echo(f"   Level: {settings.logging.level}")
    click.echo(f"   File: {settings.logging.file or '(none)'}")


@config.command('set')
@click.option('--allow-title-only/--no-allow-title-only', default=None, help='Set title-only search')
@click.option('--prefer-synced/--no-prefer-synced', default=None, help='Set synced lyrics preference')
@click.option('--batch-size', type=int, help='Set batch size')
@click.option('--delay', type=int, help='Set delay between batches (ms)')
@click.option('--log-level', help='Set log level')
@handle_error
def set_config(allow_title_only, prefer_synced, batch_size, delay, log_level):
    """
    Change settings and save them to the user config file

    Changes are written to the user configuration file and persist across runs.
    Nothing is written while any setting, changed or not, is invalid.
    """
    settings = get_settings()
    changes = []

    if allow_title_only is not None:
        settings.search.allow_title_only_search = allow_title_only
        changes.append(f"Allow title-only search: {allow_title_only}")

    if prefer_synced is not None:
        settings.search.prefer_synced = prefer_synced
        changes.append(f"Prefer synced lyrics: {prefer_synced}")

    if batch_size is not None:
        is_valid, error_msg = validate_batch_size(batch_size)
        if not is_valid:
            fail(error_msg)
        settings.batch.size = batch_size
        changes.append(f"Batch size: {batch_size}")

    if delay is not None:
        is_valid, error_msg = validate_delay(delay)
        if not is_valid:
            fail(error_msg)
        settings.batch.delay_ms = delay
        changes.append(f"Delay: {delay}ms")

    if log_level is not None:
        is_valid, error_msg = validate_log_level(log_level)
        if not is_valid:
            fail(error_msg)
        settings.logging.level = log_level.upper()
        changes.append(f"Log level: {log_level.upper()}")

    if changes:
        if not settings.validate():
            fail("Configuration not saved")
        saved_to = settings.save_config()
        click.echo(f"Configuration updated ({saved_to}):")
        for change in changes:
            click.echo(f"   • {change}")
    else:
        click.echo("No changes specified")


@cli.command()
@click.option('--check-api', is_flag=True, help='Also send a test request to the LRCLIB API')
@handle_error
def doctor(check_api):
    """
    Check dependencies, configuration and LRCLIB reachability

    Checks configuration validity, required dependencies, logging and
    (optionally) LRCLIB connectivity.
    """
    click.echo("Checking lrclib-fetcher setup...\n")

    issues = []
    settings = get_settings()

    errors = settings.get_validation_errors()
    if errors:
        click.echo("Configuration: Invalid")
        issues.extend(errors)
    else:
        click.echo("Configuration: OK")

    dependencies = [
        ('mutagen', 'mutagen', 'required for reading audio tags'),
        ('requests', 'requests', 'required for LRCLIB access'),
        ('yaml', 'PyYAML', 'required for configuration files'),
        ('tqdm', 'tqdm', 'required for progress bars'),
    ]

    for module_name, display_name, purpose in dependencies:
        try:
            __import__(module_name)
            click.echo(f"{display_name}: OK")
        except ImportError:
            click.echo(f"{display_name}: Not installed")
            issues.append(f"{display_name} is {purpose}")

    click.echo(f"LRCLIB API: {settings.network.base_url}")
    if check_api:
        try:
            get_lrclib_client().get_lyrics({'artist_name': 'Daft Punk', 'track_name': 'Digital Love'})
            click.echo("LRCLIB connectivity: OK")
        except requests.RequestException as e:
            click.echo(f"LRCLIB connectivity: Error - {e}")
            issues.append("LRCLIB API is not reachable")

    current_log = get_current_log_file()
    if current_log:
        click.echo(f"Logging: {current_log}")
    else:
        click.echo("Logging: Console only")

    if issues:
        click.echo(f"\n{len(issues)} problem(s) found:")
        for issue in issues:
            click.echo(f"   • {issue}")
    else:
        click.echo("\nEverything looks fine.")


if __name__ == '__main__':
    cli()
