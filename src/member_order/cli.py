"""
Main CLI entry point for member-order
"""

import json
import logging
import sys
import traceback
from pathlib import Path

import click

from . import __version__
from .commands.reorder import AstFileProcessor, ReorderCommand
from .core.backup_manager import BackupManager
from .core.base_processor import ProcessingStatus
from .core.config import Config

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@click.group()
@click.version_option(
    version=__version__,
    prog_name="member-order",
)
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True),
    help="Configuration file path",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output",
)
@click.option(
    "--quiet",
    "-q",
    is_flag=True,
    help="Suppress output",
)
@click.pass_context
def cli(
    ctx,
    config: str | None,
    verbose: bool,
    quiet: bool,
):
    """Dependency-first ordering of class, interface and type literal members

    Reads ESTree JSON syntax trees (typescript-estree or babel) and moves
    every member read through `this` before the members reading it.
    """
    ctx.ensure_object(dict)

    # Load configuration
    if config:
        ctx.obj["config"] = Config.from_file(Path(config))
    else:
        ctx.obj["config"] = Config.load_hierarchy(Path.cwd())

    # Apply CLI flags
    if verbose or ctx.obj["config"].verbose:
        ctx.obj["config"].verbose = True
        logging.getLogger().setLevel(logging.DEBUG)

    if quiet:
        ctx.obj["config"].quiet = True
        logging.getLogger().setLevel(logging.WARNING)


@cli.command()
@click.argument(
    "path",
    type=click.Path(exists=True),
)
@click.option(
    "--recursive",
    "-r",
    is_flag=True,
    help="Process directories recursively",
)
@click.option(
    "--dry-run",
    is_flag=True,
    help="Preview changes without applying",
)
@click.option(
    "--check",
    is_flag=True,
    help="Exit with status 1 if any file would be reordered",
)
@click.option(
    "--no-backup",
    is_flag=True,
    help="Skip creating backup files",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False),
    help="Write the result to this file (single input file only)",
)
@click.pass_context
def reorder(
    ctx,
    path: str,
    recursive: bool,
    dry_run: bool,
    check: bool,
    no_backup: bool,
    output: str | None,
):
    """Reorder declaration members in JSON AST files

    Examples:
        member-order reorder ./ast/component.json
        member-order reorder ./ast -r --dry-run
        member-order reorder ./ast/model.json -o ./ast/model.sorted.json
    """
    config = ctx.obj["config"]
    config.dry_run = config.dry_run or dry_run
    config.check = config.check or check
    if no_backup:
        config.backup.enabled = False

    errors = config.validate()
    if errors:
        for error in errors:
            click.echo(f"❌ {error}", err=True)
        sys.exit(2)

    command = ReorderCommand(config)
    try:
        results = command.execute(
            Path(path),
            recursive=recursive,
            output=Path(output) if output else None,
        )
    except ValueError as e:
        raise click.UsageError(str(e)) from e

    if not config.quiet:
        for result in results:
            if result.status != ProcessingStatus.NO_CHANGES or config.verbose:
                click.echo(str(result))

    if any(r.status == ProcessingStatus.ERROR for r in results):
        click.echo("❌ Reordering failed!", err=True)
        sys.exit(1)

    if config.check and any(r.changes_applied for r in results):
        click.echo("Some declarations are not in dependency order.", err=True)
        sys.exit(1)

    if not config.quiet:
        click.echo("✅ Reordering completed successfully!")


@cli.command()
@click.argument(
    "file",
    type=click.Path(exists=True, dir_okay=False),
)
@click.option(
    "--json",
    "as_json",
    is_flag=True,
    help="Print the dependency maps as JSON",
)
@click.pass_context
def deps(ctx, file: str, as_json: bool):
    """Show the closed dependency map of every declaration in a file"""
    processor = AstFileProcessor(ctx.obj["config"])
    try:
        maps = processor.analyze_file(Path(file))
    except (OSError, ValueError) as e:
        raise click.ClickException(f"Cannot analyze {file}: {e}") from e

    if as_json:
        click.echo(
            json.dumps(
                [{"declaration": kind, "dependencies": m} for kind, m in maps],
                indent=2,
            )
        )
        return

    for index, (kind, dependency_map) in enumerate(maps, start=1):
        click.echo(f"{index}. {kind}")
        if not dependency_map:
            click.echo("   (no self references)")
        for name, names in dependency_map.items():
            click.echo(f"   {name} -> {', '.join(names)}")


@cli.command()
def init():
    """Initialize configuration in current directory

    Creates a default .member-order.yaml configuration file in the current
    directory.
    """
    config_path = Path.cwd() / ".member-order.yaml"

    if config_path.exists():
        click.confirm(f"{config_path} already exists. Overwrite?", abort=True)

    Config().save(config_path)

    click.echo(f"Created configuration file: {config_path}")
    click.echo("Edit this file to customize your settings.")


def backup_manager_for(config: Config) -> BackupManager:
    return BackupManager(
        backup_dir=config.backup.directory,
        compression=config.backup.compression,
        keep_sessions=config.backup.keep_sessions,
    )


def echo_sessions(manager: BackupManager) -> None:
    """Print every session, newest first, with the files it holds"""
    sessions = manager.list_sessions()
    if not sessions:
        click.echo("No backup sessions found.")
        return

    click.echo(f"Found {len(sessions)} backup sessions:")
    for session in sessions:
        kind = "archive" if session.get("compressed") else "directory"
        click.echo(f"  - {session['session_id']} ({kind}, {session['timestamp']})")
        if "files_backed_up" in session:
            for file_path in session["files_backed_up"]:
                click.echo(f"      {file_path}")


@cli.command()
@click.option(
    "--sessions",
    is_flag=True,
    help="List backup sessions and the files they hold",
)
@click.option(
    "--restore",
    metavar="SESSION_ID",
    help="Copy every file of a session back to its original path",
)
@click.option(
    "--clean",
    is_flag=True,
    help="Remove sessions beyond backup.keep_sessions",
)
@click.pass_context
def backup(
    ctx,
    sessions: bool,
    restore: str | None,
    clean: bool,
):
    """Manage the backup sessions written by `reorder`"""
    config = ctx.obj["config"]
    manager = backup_manager_for(config)

    if sessions:
        echo_sessions(manager)
        return

    if restore:
        click.confirm(f"Overwrite the files saved in {restore}?", abort=True)
        if not manager.restore_session(restore):
            click.echo(f"Failed to restore session: {restore}", err=True)
            sys.exit(1)
        click.echo(f"Successfully restored session: {restore}")
        return

    if clean:
        removed = manager.prune_sessions()
        click.echo(
            f"Removed {removed} sessions, kept the "
            f"{config.backup.keep_sessions} most recent."
        )
        return

    click.echo("Use --sessions, --restore, or --clean")


def main():
    """Main entry point"""
    try:
        cli(obj={})
    except KeyboardInterrupt:
        click.echo("\nOperation cancelled by user.", err=True)
        sys.exit(130)
    except Exception as e:
        logger.error(f"Unexpected error: {e}")
        if "--verbose" in sys.argv or "-v" in sys.argv:
            traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
