"""
Scenesift CLI
Command-line interface for selecting landscape photos from region manifests.
"""

import logging
import sys
from typing import Optional, Tuple

import click

from .config import ConfigError, Settings, load_settings
from .manifest import ManifestParseError
from .store import CacheCorruptionError


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging for command-line runs."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        force=True,
    )


def _settings_or_exit(**overrides) -> Settings:
    try:
        return load_settings(**overrides)
    except ConfigError as e:
        click.echo(f"❌ {e}", err=True)
        sys.exit(1)


@click.group()
@click.version_option(version="0.1.0")
def cli():
    """Scenesift - pick landscape photos from Flickr manifests"""
    pass


@cli.command()
@click.option("--region", "-r", "regions", multiple=True, help="Only process this region (repeatable)")
@click.option("--target-count", "-n", type=int, help="Override TARGET_COUNT")
@click.option("--verbose", "-v", is_flag=True, help="Debug logging")
def run(regions: Tuple[str, ...], target_count: Optional[int], verbose: bool):
    """Select photos for every region, resuming from cached analyses."""
    from .runner import run_regions

    overrides = {}
    if target_count is not None:
        overrides["target_count"] = target_count
    settings = _settings_or_exit(**overrides)
    configure_logging("DEBUG" if verbose else settings.log_level)

    try:
        report = run_regions(settings, regions=regions or None)
    except (CacheCorruptionError, ManifestParseError) as e:
        logging.getLogger(__name__).error(str(e))
        click.echo(f"❌ {e}", err=True)
        sys.exit(1)

    click.echo("")
    click.echo("=" * 60)
    for summary in report.regions:
        icon = "✅" if summary.ok else "❌"
        click.echo(
            f"{icon} {summary.region:<20} {summary.state:<10} "
            f"{summary.passed}/{settings.target_count} selected, "
            f"{summary.processed} processed, {summary.api_calls} API calls"
        )
        if summary.skipped:
            click.echo(f"   ⏭️  {summary.skipped} skipped (rejected by vision service)")
        if summary.error_message:
            click.echo(f"   ↳ {summary.error_message}")
    click.echo("=" * 60)

    if not report.ok:
        sys.exit(1)


@cli.command()
def status():
    """Show manifest, cache and selection counts per region."""
    from .runner import region_status

    settings = _settings_or_exit()
    configure_logging("WARNING")

    try:
        statuses = region_status(settings)
    except (CacheCorruptionError, ManifestParseError) as e:
        click.echo(f"❌ {e}", err=True)
        sys.exit(1)

    click.echo("📊 Region Status")
    click.echo("=" * 60)
    click.echo(f"{'Region':<20} {'Manifest':>10} {'Cached':>10} {'Selected':>10}")
    for s in statuses:
        manifest = "invalid" if s.manifest_entries is None else str(s.manifest_entries)
        click.echo(f"{s.region:<20} {manifest:>10} {s.cached_analyses:>10} {s.selected:>10}")


@cli.command()
@click.argument("region")
@click.option("--failed-only", is_flag=True, help="Only list photos that fail a rule")
def recheck(region: str, failed_only: bool):
    """Reclassify a region's cached analyses without calling the API."""
    from .formatter import web_url
    from .runner import recheck_region

    settings = _settings_or_exit()
    configure_logging("WARNING")

    try:
        results = recheck_region(settings, region)
    except (CacheCorruptionError, ManifestParseError) as e:
        click.echo(f"❌ {e}", err=True)
        sys.exit(1)

    passed = 0
    for picture, verdict in results:
        if verdict.passed:
            passed += 1
            if failed_only:
                continue
            click.echo(f"OK {web_url(picture, settings.site_host)} {picture.title}")
        else:
            click.echo(f"NG {web_url(picture, settings.site_host)} {picture.title}: {','.join(verdict.issues)}")

    click.echo(f"\n{passed} of {len(results)} cached analyses pass")


def main():
    cli()


if __name__ == "__main__":
    main()
