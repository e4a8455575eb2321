"""In-process FIFO of analysis jobs drained by a single worker task."""

from __future__ import annotations

import asyncio
import logging
from typing import Dict, List, Optional, Sequence

from models.analysis_mode import AnalysisMode
from models.analysis_models import (
    AnalysisRecord,
    AnalysisResult,
    ImageInput,
    Job,
    JobStatus,
    build_text_output,
)
from models.errors import ConflictError, ImageNamerError, NotFoundError
from services.openai.analysis_prompts import build_failure_report
from services.queue.batch_processor import BatchProcessor
from services.queue.pacer import Pacer
from services.result_store import ResultStore

LOGGER = logging.getLogger(__name__)


class JobQueue:
    """Ordered job queue with exactly one consumer.

    ``_processing`` is set synchronously before the worker task is created,
    which is enough on a single event loop to keep a second worker from
    starting. The head job is the only one that can be ``processing``.
    """

    def __init__(self, processor: BatchProcessor, store: ResultStore, pacer: Optional[Pacer] = None) -> None:
        self.processor = processor
        self.store = store
        self.pacer = pacer or processor.pacer
        self._jobs: List[Job] = []
        self._processing = False
        self._worker: Optional[asyncio.Task] = None

    def __len__(self) -> int:
        return len(self._jobs)

    @property
    def is_processing(self) -> bool:
        return self._processing

    def submit(self, images: Sequence[ImageInput], mode: AnalysisMode, name: str = "") -> Job:
        """Append a new queued job and start the worker if it is idle."""
        job = Job(mode=mode, images=list(images), name=(name or "").strip())
        self._jobs.append(job)
        LOGGER.info(
            "Analysis queued: %s (%d images) - Position %d in queue",
            job.display_name,
            len(job.images),
            len(self._jobs),
        )
        self._ensure_worker()
        return job

    def position(self, job_id: str) -> int:
        """Return the 1-based position of a live job."""
        for index, job in enumerate(self._jobs, start=1):
            if job.id == job_id:
                return index
        raise NotFoundError(f"Analysis {job_id} not found in queue")

    def list(self) -> List[Dict[str, object]]:
        return [job.summary() for job in self._jobs]

    def remove(self, job_id: str) -> Job:
        """Remove a queued job.

        Raises:
            NotFoundError: If no live job has ``job_id``.
            ConflictError: If the job is currently processing.
        """
        job = next((item for item in self._jobs if item.id == job_id), None)
        if job is None:
            raise NotFoundError(f"Analysis {job_id} not found in queue")
        if job.status is JobStatus.PROCESSING:
            raise ConflictError("Cannot remove analysis that is currently processing")

        self._jobs.remove(job)
        LOGGER.info("Analysis removed from queue: %s (%d images)", job.display_name, len(job.images))
        return job

    async def wait_idle(self) -> None:
        """Wait until the worker has drained the queue."""
        while self._worker is not None:
            await asyncio.shield(self._worker)

    async def aclose(self) -> None:
        """Cancel the worker task, abandoning any in-flight job."""
        worker = self._worker
        if worker is None:
            return
        worker.cancel()
        try:
            await worker
        except asyncio.CancelledError:
            pass

    def _ensure_worker(self) -> None:
        if self._processing or not self._jobs:
            return
        self._processing = True
        self._worker = asyncio.create_task(self._run())

    async def _run(self) -> None:
        try:
            while self._jobs:
                job = self._jobs[0]
                await self._process_job(job)
                self._jobs.remove(job)
                if self._jobs:
                    await self.pacer.between_jobs()
        finally:
            self._processing = False
            self._worker = None

    async def _process_job(self, job: Job) -> None:
        job.status = JobStatus.PROCESSING
        LOGGER.info("Processing analysis: %s (%d images)", job.display_name, len(job.images))

        try:
            results = await self.processor.process(job)
            job.results = results
            job.text_output = build_text_output(results)
            job.status = JobStatus.COMPLETED
            job.record_key = await self.store.save(AnalysisRecord.from_job(job))
        except Exception as exc:  # pylint: disable=broad-exception-caught
            LOGGER.exception("Error processing analysis %s", job.id)
            self._mark_failed(job, exc)
            await self._persist_failure(job)
            return

        LOGGER.info("Analysis completed: %s", job.display_name)

    @staticmethod
    def _mark_failed(job: Job, exc: Exception) -> None:
        job.status = JobStatus.FAILED
        job.error_message = exc.message if isinstance(exc, ImageNamerError) else str(exc) or type(exc).__name__
        job.results = [
            AnalysisResult(
                original_filename=image.original_name,
                analysis_text=build_failure_report(image.original_name),
                failed=True,
            )
            for image in job.images
        ]
        job.text_output = build_text_output(job.results)

    async def _persist_failure(self, job: Job) -> None:
        try:
            job.record_key = await self.store.save(AnalysisRecord.from_job(job))
        except Exception:  # pylint: disable=broad-exception-caught
            LOGGER.exception("Failed to persist failure record for analysis %s", job.id)
