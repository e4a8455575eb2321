"""In-memory and persisted representations of analysis jobs."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional
from uuid import uuid4

from models.analysis_mode import AnalysisMode

TEXT_OUTPUT_HEADER = (
    "Added the folder to the project with images in it. use the below to rename the images "
    "and put them in relevant spots on the site. Replace images and adjust content as necessary. "
    "Ensure you move the images to the proper location within the project so they show up\n\n"
)


class JobStatus(str, Enum):
    QUEUED = "queued"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def terminal(self) -> bool:
        return self in (JobStatus.COMPLETED, JobStatus.FAILED)


def utc_now_iso() -> str:
    """Return the current UTC time as an ISO-8601 string with millisecond precision."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds")


@dataclass
class ImageInput:
    """An uploaded image held in memory until its job is analysed.

    Attributes:
        data: Raw image bytes.
        mime_type: MIME type reported by the client (always ``image/*``).
        original_name: Filename supplied with the upload.
    """

    data: bytes
    mime_type: str
    original_name: str


@dataclass
class AnalysisResult:
    """Analysis outcome for one image, in the same position as its input."""

    original_filename: str
    analysis_text: str
    failed: bool = False
    suggested_filename: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "original_filename": self.original_filename,
            "analysis_text": self.analysis_text,
            "failed": self.failed,
            "suggested_filename": self.suggested_filename,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AnalysisResult":
        return cls(
            original_filename=data.get("original_filename", ""),
            analysis_text=data.get("analysis_text", ""),
            failed=bool(data.get("failed", False)),
            suggested_filename=data.get("suggested_filename"),
        )


@dataclass
class Job:
    """One submitted batch of images awaiting or undergoing analysis.

    Only the queue worker mutates ``status``, ``results``, ``error_message``
    and ``text_output``.
    """

    mode: AnalysisMode
    images: List[ImageInput]
    name: str = ""
    id: str = field(default_factory=lambda: uuid4().hex)
    created_at: str = field(default_factory=utc_now_iso)
    status: JobStatus = JobStatus.QUEUED
    results: List[AnalysisResult] = field(default_factory=list)
    error_message: Optional[str] = None
    text_output: Optional[str] = None
    record_key: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.name or "Unnamed Analysis"

    def summary(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.display_name,
            "status": self.status.value,
            "image_count": len(self.images),
            "created_at": self.created_at,
        }


@dataclass(frozen=True)
class AnalysisRecord:
    """Persisted, immutable outcome of a completed or failed job."""

    id: str
    name: str
    created_at: str
    mode: str
    status: str
    results: List[AnalysisResult]
    text_output: str
    error_message: Optional[str] = None

    @classmethod
    def from_job(cls, job: Job) -> "AnalysisRecord":
        return cls(
            id=job.id,
            name=job.name,
            created_at=job.created_at,
            mode=job.mode.name,
            status=job.status.value,
            results=list(job.results),
            text_output=job.text_output or build_text_output(job.results),
            error_message=job.error_message,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "created_at": self.created_at,
            "mode": self.mode,
            "status": self.status,
            "results": [result.to_dict() for result in self.results],
            "text_output": self.text_output,
            "error_message": self.error_message,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AnalysisRecord":
        return cls(
            id=data["id"],
            name=data.get("name", ""),
            created_at=data["created_at"],
            mode=data.get("mode", ""),
            status=data.get("status", JobStatus.COMPLETED.value),
            results=[AnalysisResult.from_dict(item) for item in data.get("results", [])],
            text_output=data.get("text_output", ""),
            error_message=data.get("error_message"),
        )


def build_text_output(results: List[AnalysisResult]) -> str:
    """Join every result's analysis under the operator instruction header."""
    return TEXT_OUTPUT_HEADER + "\n\n---\n\n".join(result.analysis_text for result in results)
