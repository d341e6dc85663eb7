"""
Manifest Loader

Each region is described by one JSON file holding an array of Flickr photo
references. The region name is the file name without its extension.
"""

import json
import logging
from pathlib import Path
from typing import Dict, List

from pydantic import TypeAdapter, ValidationError

from .models import ManifestEntry

logger = logging.getLogger(__name__)

_ENTRIES = TypeAdapter(List[ManifestEntry])


class ManifestParseError(Exception):
    """Raised when a manifest file is missing, unreadable or malformed."""
    pass


def discover_manifests(manifest_dir: Path) -> Dict[str, Path]:
    """
    Find region manifests.

    Args:
        manifest_dir: Directory holding <region>.json files

    Returns:
        Region name -> manifest path, ordered by region name

    Raises:
        ManifestParseError: If the directory does not exist
    """
    manifest_dir = Path(manifest_dir)
    if not manifest_dir.is_dir():
        raise ManifestParseError(f"Manifest directory not found: {manifest_dir}")

    return {
        path.stem: path
        for path in sorted(manifest_dir.glob("*.json"))
        if path.is_file()
    }


def parse_manifest_file(path: Path) -> List[ManifestEntry]:
    """
    Parse one manifest.

    Raises:
        ManifestParseError: If the file cannot be read or is not an array of entries
    """
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except OSError as e:
        raise ManifestParseError(f"Cannot read manifest {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ManifestParseError(f"Malformed JSON in manifest {path}: {e}") from e

    try:
        entries = _ENTRIES.validate_python(data)
    except ValidationError as e:
        raise ManifestParseError(
            f"Unexpected manifest structure in {path}: {e.error_count()} error(s)"
        ) from e

    logger.debug(f"Parsed {len(entries)} entries from {path}")
    return entries
