"""
Scenesift Data Models
Pydantic models for manifest entries, vision analyses, cache records and run results.
"""

from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ManifestEntry(BaseModel):
    """One candidate photo from a region manifest."""

    model_config = ConfigDict(frozen=True)

    id: str
    owner: str = ""
    secret: str = ""
    server: str = ""
    title: str = ""


# --- Vision analysis document ---
# Field aliases are the camelCase keys returned by the analyze endpoint.


class _AnalysisModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class AdultInfo(_AnalysisModel):
    is_adult_content: bool = Field(default=False, alias="isAdultContent")
    is_racy_content: bool = Field(default=False, alias="isRacyContent")
    is_gory_content: bool = Field(default=False, alias="isGoryContent")


class ColorInfo(_AnalysisModel):
    is_bw_img: bool = Field(default=False, alias="isBWImg")


class ImageTag(_AnalysisModel):
    name: str
    confidence: float = 0.0


class BoundingRect(_AnalysisModel):
    """Object bounding box in pixels."""

    x: int = 0
    y: int = 0
    w: int = 0
    h: int = 0

    @property
    def area(self) -> int:
        return self.w * self.h


class DetectedObject(_AnalysisModel):
    rectangle: BoundingRect = Field(default_factory=BoundingRect)
    object: str = ""
    confidence: float = 0.0


class ImageMetadata(_AnalysisModel):
    width: int = 0
    height: int = 0
    format: str = ""


class ImageAnalysis(_AnalysisModel):
    """
    Structured result of analyzing one image.

    Sections missing from the service response decode to empty values;
    unknown keys (requestId, modelVersion, ...) are ignored.
    """

    adult: AdultInfo = Field(default_factory=AdultInfo)
    color: ColorInfo = Field(default_factory=ColorInfo)
    tags: List[ImageTag] = Field(default_factory=list)
    objects: List[DetectedObject] = Field(default_factory=list)
    metadata: ImageMetadata = Field(default_factory=ImageMetadata)


class AnalysisEntry(BaseModel):
    """A cache record pairing a manifest entry with its analysis."""

    model_config = ConfigDict(frozen=True)

    picture: ManifestEntry
    analysis: ImageAnalysis


# --- Classification & run results ---


class Classification(BaseModel):
    """Verdict for one analysis."""

    issues: List[str] = Field(default_factory=list, description="Failed rule codes, in rule order")

    @property
    def passed(self) -> bool:
        return not self.issues


class EntryOutcome(BaseModel):
    """What happened to one manifest entry during a region scan."""

    entry_id: str
    status: str = Field(description="passed | rejected | skipped")
    issues: List[str] = Field(default_factory=list)
    from_cache: bool = False
    error_message: Optional[str] = None


class RegionSummary(BaseModel):
    """Result of processing one region."""

    region: str
    state: str = Field(description="done | exhausted | aborted | invalid")
    passed: int = 0
    processed: int = 0
    api_calls: int = 0
    skipped: int = 0
    output_path: Optional[Path] = None
    error_message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.state in ("done", "exhausted")


class RunReport(BaseModel):
    """Summaries for every region touched by one run."""

    regions: List[RegionSummary] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return all(r.ok for r in self.regions)


class RegionStatus(BaseModel):
    """Read-only snapshot of a region's files."""

    region: str
    manifest_entries: Optional[int] = None  # None if the manifest is unreadable
    cached_analyses: int = 0
    selected: int = 0
