"""CLI for privatedata."""

import asyncio
import json
import logging
import sys
from pathlib import Path

import click

from privatedata import __version__
from privatedata.config import (
    DEFAULT_IGNORED_PROPERTIES,
    DEFAULT_PRIORITY_PROPERTIES,
    KeepConversionConfig,
    MetadataOptions,
    ScrapeConfig,
    Settings,
    get_settings,
)
from privatedata.keep.converter import NoteConverter
from privatedata.linkedin.client import UnipileClient
from privatedata.linkedin.scraper import ContactScraper, read_profile_urls, write_report
from privatedata.models import ContactRecord


def _require_settings(ctx: click.Context) -> Settings:
    settings: Settings | None = ctx.obj.get("settings")
    if settings is None:
        click.echo(f"Error loading settings: {ctx.obj.get('settings_error')}", err=True)
        click.echo("Set UNIPILE_DSN, UNIPILE_API_KEY and UNIPILE_ACCOUNT_ID in .env", err=True)
        ctx.exit(1)
    return settings


@click.group()
@click.version_option(version=__version__)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """Convert personal data exports: LinkedIn contacts and Google Keep notes."""
    ctx.ensure_object(dict)

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
        stream=sys.stdout,
    )

    # Load settings; only the LinkedIn commands need them
    try:
        settings = get_settings()
        ctx.obj["settings"] = settings
    except Exception as e:
        ctx.obj["settings_error"] = str(e)


@main.command("scrape-contacts")
@click.option(
    "--input",
    "input_file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=ScrapeConfig.model_fields["input_file"].default,
    show_default=True,
    help="JSON array of LinkedIn profile URLs",
)
@click.option(
    "--output-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=ScrapeConfig.model_fields["output_dir"].default,
    show_default=True,
    help="Directory for the timestamped JSON report",
)
@click.option("--delay", type=float, default=5.0, show_default=True, help="Base seconds between lookups")
@click.option("--jitter", type=float, default=1.0, show_default=True, help="Random extra seconds between lookups")
@click.option("--region", default="US", show_default=True, help="Default phone number region")
@click.pass_context
def scrape_contacts(
    ctx: click.Context,
    input_file: Path,
    output_dir: Path,
    delay: float,
    jitter: float,
    region: str,
) -> None:
    """Fetch contact details for LinkedIn profiles and write a JSON report.

    Profiles are looked up one at a time with a pause between lookups.
    A failed lookup is logged and skipped; it never aborts the batch.
    """
    settings = _require_settings(ctx)
    config = ScrapeConfig(
        input_file=input_file,
        output_dir=output_dir,
        delay_seconds=delay,
        jitter_seconds=jitter,
        default_region=region.upper(),
    )

    async def run() -> None:
        urls = read_profile_urls(config.input_file)
        client = UnipileClient(settings)
        scraper = ContactScraper(client, config)
        try:
            records = await scraper.run(urls)
        finally:
            await client.close()

        path = write_report(records, config.output_dir)
        stats = scraper.stats

        click.echo("\n" + "=" * 50)
        click.echo("SCRAPE COMPLETE")
        click.echo("=" * 50)
        click.echo(f"  Added: {stats.added}")
        click.echo(f"  Invalid URLs: {stats.invalid_urls}")
        click.echo(f"  Rejected profiles: {stats.rejected}")
        click.echo(f"  Errors: {stats.failed}")
        if stats.errors:
            click.echo("\n  Error details:")
            for error in stats.errors[:5]:  # Show first 5
                click.echo(f"    - {error}")
            if len(stats.errors) > 5:
                click.echo(f"    ... and {len(stats.errors) - 5} more")
        click.echo(f"\nReport: {path}")

    try:
        asyncio.run(run())
    except KeyboardInterrupt:
        click.echo("\nScrape interrupted by user")
        ctx.exit(130)
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)


@main.command()
@click.argument("url")
@click.option("--region", default="US", show_default=True, help="Default phone number region")
@click.pass_context
def profile(ctx: click.Context, url: str, region: str) -> None:
    """Look up one LinkedIn profile URL and print its contact record."""
    settings = _require_settings(ctx)
    config = ScrapeConfig(delay_seconds=0, jitter_seconds=0, default_region=region.upper())

    async def run() -> ContactRecord | None:
        client = UnipileClient(settings)
        scraper = ContactScraper(client, config)
        try:
            return await scraper.scrape_one(url)
        finally:
            await client.close()

    try:
        record = asyncio.run(run())
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    if record is None:
        click.echo(f"No contact record for {url}", err=True)
        ctx.exit(1)
    click.echo(json.dumps(record.model_dump(by_alias=True), indent=2, ensure_ascii=False))


@main.command("convert-keep")
@click.option(
    "--input-dir",
    required=True,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Extracted Google Keep export directory",
)
@click.option(
    "--output-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path("private-data/outputs"),
    show_default=True,
    help="Base directory; a timestamped folder is created inside it",
)
@click.option("--dry-run", is_flag=True, help="Log intended writes and deletions without touching files")
@click.option("--one-note", is_flag=True, help="Only process the first note")
@click.option("--delete-originals", is_flag=True, help="Delete each JSON note after it is converted")
@click.option(
    "--ignore",
    "ignore_keys",
    multiple=True,
    help=f"Property left out of metadata (repeatable, default: {', '.join(DEFAULT_IGNORED_PROPERTIES)})",
)
@click.option(
    "--priority",
    "priority_keys",
    multiple=True,
    help=f"Property listed first in metadata (repeatable, default: {', '.join(DEFAULT_PRIORITY_PROPERTIES)})",
)
@click.pass_context
def convert_keep(
    ctx: click.Context,
    input_dir: Path,
    output_dir: Path,
    dry_run: bool,
    one_note: bool,
    delete_originals: bool,
    ignore_keys: tuple[str, ...],
    priority_keys: tuple[str, ...],
) -> None:
    """Convert a Google Keep export into Markdown files.

    Notes are sorted into unsorted/, archive/ and trash/ folders.
    """
    if dry_run:
        click.echo("DRY RUN MODE: No files will be written or deleted")
        click.echo()

    metadata = MetadataOptions(
        ignore_keys=ignore_keys or DEFAULT_IGNORED_PROPERTIES,
        priority_keys=priority_keys or DEFAULT_PRIORITY_PROPERTIES,
    )
    config = KeepConversionConfig.with_timestamped_output(
        output_dir,
        input_dir=input_dir,
        dry_run=dry_run,
        test_one_note=one_note,
        delete_originals=delete_originals,
        metadata=metadata,
    )

    try:
        stats = NoteConverter(config).run()
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    click.echo("\n" + "=" * 50)
    click.echo("CONVERSION COMPLETE")
    click.echo("=" * 50)
    click.echo(f"  Notes total: {stats.discovered}")
    click.echo(f"  Processed: {stats.processed}")
    click.echo(f"  Unsorted: {stats.unsorted}")
    click.echo(f"  Archived: {stats.archived}")
    click.echo(f"  Trashed: {stats.trashed}")
    if delete_originals:
        click.echo(f"  Deleted originals: {stats.deleted}")
    click.echo(f"  Errors: {stats.failed}")
    if not dry_run:
        click.echo(f"\nOutput: {config.output_dir}")


if __name__ == "__main__":
    main()
