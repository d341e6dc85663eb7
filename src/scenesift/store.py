"""
Analysis Store

Append-only NDJSON log of vision analyses, one file per region. Every
successful API call is written and synced before the next photo is
considered, so an interrupted run never pays for the same analysis twice.

Also home to the per-run selection file writer.
"""

import json
import logging
import os
from pathlib import Path
from typing import Dict, Optional, Set, TextIO

from pydantic import ValidationError

from .models import AnalysisEntry

logger = logging.getLogger(__name__)


class CacheCorruptionError(Exception):
    """Raised when a cache record cannot be decoded."""
    pass


class AnalysisStore:
    """
    Persistent analysis cache for one region.

    No update or delete: each photo id is written at most once over the
    lifetime of the file.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self._file: Optional[TextIO] = None
        self._appended: Set[str] = set()

    @classmethod
    def for_region(cls, analyses_dir: Path, region: str) -> "AnalysisStore":
        return cls(Path(analyses_dir) / f"{region}.ndjson")

    def load(self) -> Dict[str, AnalysisEntry]:
        """
        Read every record in the cache file.

        Returns:
            Photo id -> cached entry. Empty if the file does not exist yet.
            When an id occurs more than once, the last record in the file wins.

        Raises:
            CacheCorruptionError: If any line is not a valid record
        """
        existing: Dict[str, AnalysisEntry] = {}
        if not self.path.exists():
            return existing

        duplicates = 0
        # Read as bytes: pydantic reports invalid UTF-8 as a ValidationError
        with open(self.path, "rb") as f:
            for line_no, line in enumerate(f, start=1):
                if not line.strip():
                    continue
                try:
                    entry = AnalysisEntry.model_validate_json(line)
                except ValidationError as e:
                    raise CacheCorruptionError(
                        f"Corrupt record at {self.path}:{line_no}: {e.errors()[0]['msg']}"
                    ) from e
                if entry.picture.id in existing:
                    duplicates += 1
                existing[entry.picture.id] = entry

        if duplicates:
            logger.warning(
                f"{self.path} holds {duplicates} duplicate record(s); using the last of each"
            )
        logger.info(f"Read {len(existing)} preexisting analyses from {self.path}")
        return existing

    def open(self) -> "AnalysisStore":
        """Open the cache file for appending, creating it if needed."""
        if self._file is None:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._file = open(self.path, "a", encoding="utf-8")
        return self

    def append(self, entry: AnalysisEntry) -> None:
        """
        Durably append one record.

        Raises:
            ValueError: If this id was already appended through this store
            RuntimeError: If the store is not open
        """
        if self._file is None:
            raise RuntimeError(f"Analysis store {self.path} is not open")

        entry_id = entry.picture.id
        if entry_id in self._appended:
            raise ValueError(f"Analysis for {entry_id} already appended to {self.path}")

        self._file.write(entry.model_dump_json(by_alias=True) + "\n")
        self._file.flush()
        os.fsync(self._file.fileno())
        self._appended.add(entry_id)

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None

    def __enter__(self) -> "AnalysisStore":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class SelectionWriter:
    """
    Writes the ids selected by the current run.

    Opening truncates any previous selection: the file reflects one run,
    not history.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self.count = 0
        self._file: Optional[TextIO] = None

    @classmethod
    def for_region(cls, out_dir: Path, region: str) -> "SelectionWriter":
        return cls(Path(out_dir) / f"{region}.ndjson")

    def open(self) -> "SelectionWriter":
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._file = open(self.path, "w", encoding="utf-8")
        self.count = 0
        return self

    def write(self, photo_id: str) -> None:
        if self._file is None:
            raise RuntimeError(f"Selection file {self.path} is not open")
        self._file.write(json.dumps(photo_id) + "\n")
        self._file.flush()
        self.count += 1

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None

    def __enter__(self) -> "SelectionWriter":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def read_selection(path: Path) -> list:
    """Ids listed in a selection file, or [] if it does not exist."""
    path = Path(path)
    if not path.exists():
        return []
    with open(path, "r", encoding="utf-8") as f:
        return [json.loads(line) for line in f if line.strip()]
