"""
Region Processor

Scans one region's manifest in order, reusing cached analyses and fetching
the rest, until the target number of qualifying photos has been selected or
the manifest runs out.
"""

import logging
from typing import Callable, Dict, List, Optional

from .classifier import classify
from .config import Settings
from .formatter import format_verdict_line, preview_url, web_url
from .models import AnalysisEntry, EntryOutcome, ManifestEntry, RegionSummary
from .store import AnalysisStore, SelectionWriter
from .vision_backend import ServiceError, VisionClient

logger = logging.getLogger(__name__)


class RegionProcessor:
    """
    Processes regions one at a time.

    Per-entry results are reported as EntryOutcome values. A photo the
    service refuses (HTTP 400) is skipped; any other service failure stops
    the region as "aborted". Cache corruption and I/O errors propagate.
    """

    def __init__(
        self,
        settings: Settings,
        client: VisionClient,
        on_outcome: Optional[Callable[[EntryOutcome], None]] = None,
    ):
        self.settings = settings
        self.client = client
        self.on_outcome = on_outcome
        self.thresholds = settings.thresholds

    def process(self, region: str, entries: List[ManifestEntry]) -> RegionSummary:
        """
        Select up to target_count passing photos from one region.

        Args:
            region: Region name (manifest file stem)
            entries: Manifest entries in manifest order

        Returns:
            RegionSummary with state done, exhausted or aborted
        """
        logger.info(f"Processing region {region}")
        target = self.settings.target_count

        store = AnalysisStore.for_region(self.settings.analyses_dir, region)
        preexisting = store.load()
        summary = RegionSummary(region=region, state="exhausted")

        with store, SelectionWriter.for_region(self.settings.out_dir, region) as out:
            summary.output_path = out.path

            for entry in entries:
                if summary.passed >= target:
                    break

                try:
                    outcome = self._process_entry(entry, preexisting, store, summary)
                except ServiceError as e:
                    if not e.is_image_rejected:
                        logger.error(f"Aborting region {region} at {entry.id}: {e}")
                        summary.state = "aborted"
                        summary.error_message = str(e)
                        break
                    logger.warning(f"Skipping {entry.id} ({web_url(entry, self.settings.site_host)}): {e}")
                    outcome = EntryOutcome(entry_id=entry.id, status="skipped", error_message=str(e))
                    summary.skipped += 1

                if outcome.status == "passed":
                    out.write(entry.id)

                summary.processed += 1
                if self.on_outcome:
                    self.on_outcome(outcome)

        if summary.state != "aborted" and summary.passed >= target:
            summary.state = "done"

        logger.info(f"Wrote {summary.output_path}")
        logger.info(
            f"Found {summary.passed} after processing {summary.processed} "
            f"({summary.api_calls} API calls)"
        )
        return summary

    def _process_entry(
        self,
        entry: ManifestEntry,
        preexisting: Dict[str, AnalysisEntry],
        store: AnalysisStore,
        summary: RegionSummary,
    ) -> EntryOutcome:
        cached = preexisting.get(entry.id)
        if cached is not None:
            picture, analysis = cached.picture, cached.analysis
        else:
            image_url = preview_url(entry, self.settings.media_host, self.settings.preview_size)
            analysis = self.client.analyze(image_url)
            picture = entry
            fetched = AnalysisEntry(picture=picture, analysis=analysis)
            store.append(fetched)
            # Repeated ids later in the manifest reuse this analysis
            preexisting[entry.id] = fetched
            summary.api_calls += 1

        verdict = classify(analysis, self.thresholds)
        if verdict.passed:
            summary.passed += 1

        logger.info(
            format_verdict_line(
                summary.passed,
                self.settings.target_count,
                web_url(entry, self.settings.site_host),
                entry.title,
                verdict.issues,
            )
        )

        return EntryOutcome(
            entry_id=picture.id,
            status="passed" if verdict.passed else "rejected",
            issues=verdict.issues,
            from_cache=cached is not None,
        )
