"""
Shared fixtures for Scenesift tests.
"""

import copy
import json
from pathlib import Path

import pytest

from scenesift.config import Settings
from scenesift.models import ImageAnalysis, ManifestEntry

LANDSCAPE_DOC = {
    "adult": {"isAdultContent": False, "isRacyContent": False, "isGoryContent": False},
    "color": {"isBWImg": False},
    "tags": [
        {"name": "outdoor", "confidence": 0.9},
        {"name": "nature", "confidence": 0.85},
        {"name": "mountain", "confidence": 0.9},
        {"name": "sky", "confidence": 0.95},
    ],
    "objects": [],
    "metadata": {"width": 100, "height": 100, "format": "Jpeg"},
}

PORTRAIT_DOC = {
    "adult": {"isAdultContent": False, "isRacyContent": False, "isGoryContent": False},
    "color": {"isBWImg": False},
    "tags": [{"name": "person", "confidence": 0.99}, {"name": "indoor", "confidence": 0.9}],
    "objects": [{"rectangle": {"x": 10, "y": 10, "w": 60, "h": 80}, "object": "person", "confidence": 0.9}],
    "metadata": {"width": 100, "height": 100, "format": "Jpeg"},
}


@pytest.fixture
def landscape_doc():
    """A fresh copy of an analysis document that passes every rule."""
    return copy.deepcopy(LANDSCAPE_DOC)


@pytest.fixture
def make_analysis():
    """Build an ImageAnalysis from a landscape or portrait document."""
    def _make(passing: bool = True) -> ImageAnalysis:
        doc = LANDSCAPE_DOC if passing else PORTRAIT_DOC
        return ImageAnalysis.model_validate(copy.deepcopy(doc))
    return _make


@pytest.fixture
def make_entry():
    def _make(photo_id: str, title: str = "") -> ManifestEntry:
        return ManifestEntry(
            id=photo_id,
            owner=f"owner{photo_id}",
            secret=f"s{photo_id}",
            server="65535",
            title=title or f"Photo {photo_id}",
        )
    return _make


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings isolated to a temporary working tree."""
    return Settings(
        _env_file=None,
        azure_endpoint="https://vision.test",
        azure_key="test-key",
        target_count=3,
        manifest_dir=tmp_path / "ingest_manifests",
        analyses_dir=tmp_path / "analyses",
        out_dir=tmp_path / "out",
    )


@pytest.fixture
def write_manifest(settings):
    """Write a region manifest from ManifestEntry objects (or raw text)."""
    def _write(region: str, entries) -> Path:
        settings.manifest_dir.mkdir(parents=True, exist_ok=True)
        path = settings.manifest_dir / f"{region}.json"
        if isinstance(entries, str):
            path.write_text(entries, encoding="utf-8")
        else:
            path.write_text(json.dumps([e.model_dump() for e in entries]), encoding="utf-8")
        return path
    return _write
