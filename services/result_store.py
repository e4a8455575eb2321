"""Directory-of-JSON-documents store for finished analyses.

Each record lives in its own file named ``<timestamp>_<safe-name>.json``
under the analysis directory. Files are written once and never modified;
retention is based on file modification time.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import re
import time
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List

from models.analysis_models import AnalysisRecord
from models.errors import NotFoundError

LOGGER = logging.getLogger(__name__)
DEFAULT_RETENTION_SECONDS = 24 * 60 * 60
_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")


def sanitize_name(name: str) -> str:
    """Keep letters, digits, spaces and hyphens, then hyphenate whitespace."""
    cleaned = re.sub(r"[^A-Za-z0-9\s-]", "", name or "")
    cleaned = re.sub(r"\s+", "-", cleaned.strip())
    return cleaned or "unnamed-analysis"


def _parse_timestamp(value: str) -> float:
    return datetime.fromisoformat(value.replace("Z", "+00:00")).timestamp()


class ResultStore:
    """Persist, list, fetch and purge analysis records.

    Args:
        directory: Folder holding the JSON documents; created if missing.
        retention_seconds: Age after which a record is hidden and purgeable.
        clock: Returns the current Unix time; injectable for tests.
    """

    def __init__(
        self,
        directory: Path | str,
        retention_seconds: int = DEFAULT_RETENTION_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.directory = Path(directory)
        self.retention_seconds = retention_seconds
        self._clock = clock
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
        except Exception as exc:
            raise RuntimeError(f"Failed to create or access analysis directory at {self.directory}") from exc

    def _cutoff(self) -> float:
        return self._clock() - self.retention_seconds

    def build_key(self, record: AnalysisRecord) -> str:
        """Derive the storage key from the record's creation time and name."""
        timestamp = re.sub(r"[:.+]", "-", record.created_at)
        return f"{timestamp}_{sanitize_name(record.name)}"

    def _path_for(self, key: str) -> Path:
        if not _KEY_PATTERN.match(key or ""):
            raise NotFoundError(f"Analysis {key} not found")
        return self.directory / f"{key}.json"

    async def save(self, record: AnalysisRecord) -> str:
        """Write ``record`` as a new document and return its storage key."""
        key = self.build_key(record)
        payload = json.dumps(record.to_dict(), indent=2)

        def _write() -> str:
            candidates = (key, f"{key}_{record.id[:8]}", f"{key}_{record.id}")
            for candidate in candidates:
                try:
                    with open(self.directory / f"{candidate}.json", "x", encoding="utf-8") as f:
                        f.write(payload)
                    return candidate
                except FileExistsError:
                    continue
            raise FileExistsError(f"Analysis record {key} already exists")

        stored_key = await asyncio.to_thread(_write)
        LOGGER.info("Saved analysis %s as %s", record.id, stored_key)
        return stored_key

    async def get(self, key: str) -> AnalysisRecord:
        """Return the record stored under ``key``.

        Raises:
            NotFoundError: If the key is malformed or no document exists.
        """
        path = self._path_for(key)
        try:
            data = await asyncio.to_thread(self._read_json, path)
        except FileNotFoundError as exc:
            raise NotFoundError(f"Analysis {key} not found") from exc
        return AnalysisRecord.from_dict(data)

    async def list_recent(self) -> List[Dict[str, Any]]:
        """Return summaries of records inside the retention window, newest first."""
        return await asyncio.to_thread(self._list_recent_sync)

    async def purge_expired(self) -> int:
        """Delete records whose modification time is older than the retention window."""
        return await asyncio.to_thread(self._purge_expired_sync)

    @staticmethod
    def _read_json(path: Path) -> Dict[str, Any]:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)

    def _documents(self) -> List[Path]:
        return sorted(p for p in self.directory.iterdir() if p.suffix == ".json" and p.is_file())

    def _list_recent_sync(self) -> List[Dict[str, Any]]:
        cutoff = self._cutoff()
        summaries: List[Dict[str, Any]] = []

        for path in self._documents():
            try:
                if os.stat(path).st_mtime < cutoff:
                    continue
                record = AnalysisRecord.from_dict(self._read_json(path))
                created = _parse_timestamp(record.created_at)
            except FileNotFoundError:
                # purged concurrently
                continue
            except (OSError, ValueError, KeyError, TypeError) as exc:
                LOGGER.warning("Skipping unreadable analysis %s: %s", path.name, exc)
                continue
            if created < cutoff:
                continue
            summaries.append(
                {
                    "id": path.stem,
                    "name": record.name or "Unnamed Analysis",
                    "created_at": record.created_at,
                    "image_count": len(record.results),
                    "status": record.status,
                    "_created": created,
                }
            )

        summaries.sort(key=lambda item: item["_created"], reverse=True)
        for item in summaries:
            del item["_created"]
        return summaries

    def _purge_expired_sync(self) -> int:
        cutoff = self._cutoff()
        removed = 0
        for path in self._documents():
            try:
                if os.stat(path).st_mtime < cutoff:
                    path.unlink()
                    removed += 1
                    LOGGER.info("Cleaned up old analysis: %s", path.name)
            except FileNotFoundError:
                continue
        return removed
