"""fieldshift CLI tool."""

import asyncio
import json
import logging
import sys

import click
from pydantic import ValidationError

from fieldshift.core.client import StoreClientManager
from fieldshift.core.exceptions import ConfigurationError, FieldshiftError
from fieldshift.core.settings import StoreSettings
from fieldshift.migrations import MigrationRunner, RenameField


def configure_logging(verbose: bool = False) -> None:
    """Send progress logging to stdout as plain messages."""
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter("%(message)s"))

    root = logging.getLogger("fieldshift")
    root.handlers = [handler]
    root.setLevel(logging.DEBUG if verbose else logging.INFO)


def load_settings(**overrides) -> StoreSettings:
    """Build settings from the environment plus any CLI overrides.

    Raises:
        ConfigurationError: If required connection settings are missing
            or a value is invalid
    """
    values = {k: v for k, v in overrides.items() if v is not None}
    try:
        settings = StoreSettings(**values)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}")

    missing = settings.missing_fields()
    if missing:
        raise ConfigurationError(missing_fields=missing)
    return settings


def _fail(error: Exception) -> None:
    if isinstance(error, FieldshiftError):
        message = str(error)
    else:
        message = f"{type(error).__name__}: {error}"
    click.echo(message, err=True)
    sys.exit(1)


@click.group()
def cli():
    """fieldshift - Rename a field on content store documents."""
    pass


@cli.command()
@click.option("--type", "document_type", help="Document type to migrate")
@click.option("--from", "source_field", help="Field to rename")
@click.option("--to", "target_field", help="New field name")
@click.option("--batch-size", type=int, help="Documents per transaction")
@click.option("--dry-run", is_flag=True, help="Show the first batch without committing")
@click.option("--json", "as_json", is_flag=True, help="Print the run summary as JSON")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def run(document_type, source_field, target_field, batch_size, dry_run, as_json, verbose):
    """Migrate documents until none are left in the old shape.

    With no options, everything is read from the environment
    (SANITY_STUDIO_PROJECT_ID, SANITY_STUDIO_PROJECT_DATASET,
    SANITY_STUDIO_PROJECT_TOKEN and the FIELDSHIFT_* variables).

    Examples:
        # Rename post.body to post.excerpt
        fieldshift run --type post --from body --to excerpt

        # Preview the first batch
        fieldshift run --dry-run
    """
    configure_logging(verbose)

    async def _run():
        settings = load_settings(
            document_type=document_type,
            source_field=source_field,
            target_field=target_field,
            batch_size=batch_size,
        )
        operation = RenameField(
            settings.document_type, settings.source_field, settings.target_field
        )
        manager = StoreClientManager(settings)

        async with manager.get_async_client() as client:
            runner = MigrationRunner(
                client, operation, batch_size=settings.batch_size, dry_run=dry_run
            )
            return await runner.run()

    try:
        report = asyncio.run(_run())
    except Exception as e:
        _fail(e)

    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2))
    elif dry_run:
        click.echo(f"Dry run: {report.documents_migrated} document(s) would be patched")
    else:
        click.echo(
            f"✅ Migrated {report.documents_migrated} document(s) "
            f"in {report.batches} batch(es)"
        )


@cli.command()
@click.option("--type", "document_type", help="Document type to check")
@click.option("--from", "source_field", help="Field being renamed")
@click.option("--to", "target_field", help="New field name")
def status(document_type, source_field, target_field):
    """Show how many documents still need migrating."""

    async def _status():
        settings = load_settings(
            document_type=document_type,
            source_field=source_field,
            target_field=target_field,
        )
        operation = RenameField(
            settings.document_type, settings.source_field, settings.target_field
        )
        manager = StoreClientManager(settings)

        async with manager.get_async_client() as client:
            runner = MigrationRunner(client, operation)
            return operation, await runner.count_remaining()

    try:
        operation, remaining = asyncio.run(_status())
    except Exception as e:
        _fail(e)

    if remaining:
        click.echo(f"○ {operation}: {remaining} document(s) pending")
    else:
        click.echo(f"✓ {operation}: nothing to migrate")


@cli.command()
def version():
    """Show fieldshift version."""
    from fieldshift import __version__

    click.echo(f"fieldshift version: {__version__}")


if __name__ == "__main__":
    cli()
