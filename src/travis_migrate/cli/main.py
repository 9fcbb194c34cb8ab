"""Main CLI entry point for Travis CI Migration Tool."""

import sys
from typing import List, Optional, Tuple
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .. import __version__
from ..api.exceptions import error_chain
from ..config.config import Config
from ..migration.engine import MigrationEngine
from ..migration.orchestrator import MigrationSummary, RepositoryMigrationResult
from ..utils.logging import setup_logging

console = Console()

DEFAULT_CONFIG_PATHS = ['config.yaml', 'config.yml', '.travis-migrate.yaml']


@click.group()
@click.version_option(version=__version__, prog_name='travis-migrate')
@click.option(
    '--config',
    '-c',
    type=click.Path(exists=True),
    help='Path to configuration file',
)
@click.option(
    '--verbose',
    '-v',
    is_flag=True,
    help='Enable verbose logging',
)
@click.pass_context
def cli(ctx: click.Context, config: Optional[str], verbose: bool) -> None:
    """Travis CI Migration Tool - Migrate repositories from travis-ci.org to travis-ci.com."""
    ctx.ensure_object(dict)

    if config:
        ctx.obj['config_path'] = config
    ctx.obj['verbose'] = verbose

    # Basic logging until the configuration is loaded
    setup_logging('DEBUG' if verbose else 'INFO')


@cli.command()
@click.option(
    '--output',
    '-o',
    default='config.yaml',
    help='Output configuration file path',
)
def init(output: str) -> None:
    """Initialize a new configuration file."""
    try:
        Config.create_template(output)
    except OSError as e:
        console.print(f'[red]✗[/red] Failed to create configuration: {e}')
        sys.exit(1)

    console.print(f'[green]✓[/green] Configuration template created at: {output}')
    console.print(f'[yellow]Please edit {output} with your API tokens[/yellow]')


@cli.command(name='list')
@click.argument('account')
@click.pass_context
def list_repos(ctx: click.Context, account: str) -> None:
    """List repositories that can be migrated."""
    try:
        config = _load_config(ctx)
        with MigrationEngine(config) as engine:
            repositories = engine.list_repositories(account)
    except Exception as e:
        _fail(ctx, 'Listing repositories failed', e)

    if not repositories:
        console.print('[yellow]No repos to migrate found[/yellow]')
        return

    table = Table(title=f'Repositories to migrate ({len(repositories)})')
    table.add_column('Slug', style='cyan')
    table.add_column('Migration status', style='green')
    for repository in repositories:
        table.add_row(repository.slug, repository.migration_status or '-')
    console.print(table)


@cli.command(name='migrate-repo')
@click.argument('slug')
@click.option(
    '--dry-run',
    is_flag=True,
    help='Only read, show the changes that would be made',
)
@click.pass_context
def migrate_repo(ctx: click.Context, slug: str, dry_run: bool) -> None:
    """Migrate a repository."""
    console.print(
        Panel.fit(
            f'[bold blue]Travis CI Migration Tool[/bold blue]\nMigrating {slug}...',
            border_style='blue',
        )
    )

    try:
        config = _load_config(ctx)
        with MigrationEngine(config) as engine:
            result = engine.migrate_repository(slug, dry_run=dry_run or None)
    except Exception as e:
        _fail(ctx, f'Migration of {slug} failed', e)

    _display_results([result])
    if result.dry_run:
        console.print(f'[green]✓[/green] Dry run of {slug} completed')
    else:
        console.print(f'[green]✓[/green] {slug} migrated')


@cli.command(name='migrate-account')
@click.argument('account')
@click.option(
    '--exclude',
    '-e',
    multiple=True,
    help='Repository slug to skip (repeatable)',
)
@click.option(
    '--dry-run',
    is_flag=True,
    help='Only read, show the changes that would be made',
)
@click.pass_context
def migrate_account(
    ctx: click.Context, account: str, exclude: Tuple[str, ...], dry_run: bool
) -> None:
    """Migrate all repositories in an account."""
    console.print(
        Panel.fit(
            f'[bold blue]Travis CI Migration Tool[/bold blue]\n'
            f'Migrating repositories of {account}...',
            border_style='blue',
        )
    )

    try:
        config = _load_config(ctx)
        with MigrationEngine(config) as engine:
            summary = engine.migrate_account(
                account, exclude=exclude, dry_run=dry_run or None
            )
    except Exception as e:
        _fail(ctx, f'Migration of {account} failed', e)

    _display_summary(summary)
    if summary.failed:
        sys.exit(1)


def _load_config(ctx: click.Context) -> Config:
    """Load configuration from file or environment."""
    config_path = ctx.obj.get('config_path')

    if config_path:
        config = Config.from_file(config_path)
    else:
        config = next(
            (Config.from_file(p) for p in DEFAULT_CONFIG_PATHS if Path(p).exists()),
            None,
        )
        if config is None:
            config = Config.from_env()

    verbose = ctx.obj.get('verbose', False)
    setup_logging(
        level='DEBUG' if verbose else config.logging.level,
        log_file=config.logging.file,
        log_format=config.logging.format,
    )
    return config


def _fail(ctx: click.Context, message: str, error: Exception) -> None:
    """Report an error with its cause chain and exit."""
    chain = error_chain(error)
    console.print(f'[red]✗[/red] {escape(message)}: {escape(chain[0])}')
    for cause in chain[1:]:
        console.print(f'  [red]caused by:[/red] {escape(cause)}')
    if ctx.obj.get('verbose'):
        console.print_exception()
    sys.exit(1)


def _display_results(results: List[RepositoryMigrationResult]) -> None:
    """Display per-repository results."""
    table = Table(title='Migration Results')
    table.add_column('Repository', style='cyan')
    table.add_column('Status')
    table.add_column('Crons', style='blue')
    table.add_column('Branches updated', style='blue')
    table.add_column('Error', style='red')

    styles = {
        'completed': 'green',
        'failed': 'red',
        'skipped': 'yellow',
        'in_progress': 'blue',
    }
    for result in results:
        status = result.status.value
        if result.dry_run and result.success:
            status = 'dry run'
        table.add_row(
            result.slug,
            f'[{styles[result.status.value]}]{status}[/]',
            str(result.crons_restored),
            ', '.join(result.branches_updated) or '-',
            escape(result.error_message or ''),
        )

    console.print(table)


def _display_summary(summary: MigrationSummary) -> None:
    """Display account migration summary."""
    if not summary.results:
        console.print('[yellow]No repos to migrate found[/yellow]')
        return

    _display_results(summary.results)
    console.print(
        f'[green]{summary.successful} migrated[/green], '
        f'[red]{summary.failed} failed[/red], '
        f'[yellow]{summary.skipped} skipped[/yellow]'
    )

    if summary.completed_at:
        duration = summary.completed_at - summary.started_at
        console.print(f'\n[blue]Migration Duration:[/blue] {duration}')


def main() -> None:
    """Main entry point for the CLI application."""
    try:
        cli()
    except KeyboardInterrupt:
        console.print('\n[red]Migration interrupted by user[/red]')
        sys.exit(1)


if __name__ == '__main__':
    main()
