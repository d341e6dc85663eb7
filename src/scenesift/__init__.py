"""
Scenesift Landscape Selection Pipeline

Resumable per-region photo selection backed by a cached vision analysis log.
"""

from .classifier import ClassifierThresholds, classify
from .config import ConfigError, Settings, load_settings
from .manifest import ManifestParseError
from .models import AnalysisEntry, ImageAnalysis, ManifestEntry, RegionSummary, RunReport
from .processor import RegionProcessor
from .runner import run_regions
from .store import AnalysisStore, CacheCorruptionError
from .vision_backend import ServiceError, VisionClient

__all__ = [
    # Models
    "AnalysisEntry",
    "ImageAnalysis",
    "ManifestEntry",
    "RegionSummary",
    "RunReport",
    # Configuration
    "Settings",
    "load_settings",
    # Pipeline
    "AnalysisStore",
    "VisionClient",
    "ClassifierThresholds",
    "classify",
    "RegionProcessor",
    "run_regions",
    # Errors
    "ConfigError",
    "ManifestParseError",
    "CacheCorruptionError",
    "ServiceError",
]
