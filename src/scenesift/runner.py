"""
Run Controller

Discovers region manifests and processes each region independently. A
region with an unreadable manifest is recorded as invalid and the run moves
on; cache corruption aborts the whole run.
"""

import logging
from typing import Iterable, List, Optional, Tuple

from .classifier import classify
from .config import Settings
from .manifest import ManifestParseError, discover_manifests, parse_manifest_file
from .models import Classification, ManifestEntry, RegionStatus, RegionSummary, RunReport
from .processor import RegionProcessor
from .store import AnalysisStore, SelectionWriter, read_selection
from .vision_backend import VisionClient

logger = logging.getLogger(__name__)


def run_regions(
    settings: Settings,
    client: Optional[VisionClient] = None,
    regions: Optional[Iterable[str]] = None,
    processor: Optional[RegionProcessor] = None,
) -> RunReport:
    """
    Process every discovered region, or only the named ones.

    Args:
        settings: Run configuration
        client: Vision client to use; one is created (and closed) if omitted
        regions: Optional region names to restrict the run to
        processor: Pre-built processor (otherwise built from settings and client)

    Returns:
        RunReport with one summary per attempted region

    Raises:
        ManifestParseError: If the manifest directory does not exist
        CacheCorruptionError: If any region's cache cannot be decoded
    """
    manifests = discover_manifests(settings.manifest_dir)
    settings.ensure_directories()

    if regions is not None:
        wanted = list(regions)
        for name in wanted:
            if name not in manifests:
                logger.warning(f"No manifest for region {name}, ignoring")
        manifests = {name: path for name, path in manifests.items() if name in wanted}

    if not manifests:
        logger.warning(f"No manifests found in {settings.manifest_dir}")

    owns_client = client is None and processor is None
    if owns_client:
        client = VisionClient(
            settings.azure_endpoint,
            settings.azure_key,
            timeout=settings.request_timeout,
        )
    processor = processor or RegionProcessor(settings, client)

    report = RunReport()
    try:
        for region, path in manifests.items():
            try:
                entries = parse_manifest_file(path)
            except ManifestParseError as e:
                logger.error(f"Skipping region {region}: {e}")
                report.regions.append(
                    RegionSummary(region=region, state="invalid", error_message=str(e))
                )
                continue

            report.regions.append(processor.process(region, entries))
    finally:
        if owns_client:
            client.close()

    return report


def region_status(settings: Settings) -> List[RegionStatus]:
    """Manifest, cache and selection counts for every region. Never writes."""
    statuses = []
    for region, path in discover_manifests(settings.manifest_dir).items():
        status = RegionStatus(region=region)
        try:
            status.manifest_entries = len(parse_manifest_file(path))
        except ManifestParseError as e:
            logger.warning(f"Cannot read manifest for {region}: {e}")
        status.cached_analyses = len(AnalysisStore.for_region(settings.analyses_dir, region).load())
        status.selected = len(read_selection(SelectionWriter.for_region(settings.out_dir, region).path))
        statuses.append(status)
    return statuses


def recheck_region(settings: Settings, region: str) -> List[Tuple[ManifestEntry, Classification]]:
    """
    Reclassify a region's cached analyses without calling the vision API.

    Returns:
        (cached picture, classification) in manifest order; uncached entries are omitted

    Raises:
        ManifestParseError: If the region has no readable manifest
        CacheCorruptionError: If the region's cache cannot be decoded
    """
    manifests = discover_manifests(settings.manifest_dir)
    if region not in manifests:
        raise ManifestParseError(f"No manifest for region {region} in {settings.manifest_dir}")

    cached = AnalysisStore.for_region(settings.analyses_dir, region).load()
    results = []
    for entry in parse_manifest_file(manifests[region]):
        hit = cached.get(entry.id)
        if hit is not None:
            results.append((hit.picture, classify(hit.analysis, settings.thresholds)))
    return results
