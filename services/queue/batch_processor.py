"""Run one job's images through the analysis client in paced batches."""

from __future__ import annotations

import logging
import math
from typing import List, Optional

from models.analysis_models import AnalysisResult, ImageInput, Job
from services.analysis_client import AnalysisClient, extract_suggested_filename
from services.openai.analysis_prompts import build_failure_report
from services.queue.pacer import Pacer

LOGGER = logging.getLogger(__name__)
DEFAULT_BATCH_SIZE = 5


class BatchProcessor:
    """Analyse a job image by image, batch by batch.

    A failing image yields a failed placeholder result instead of aborting
    the job, so the output always has one result per input image.
    """

    def __init__(self, client: AnalysisClient, pacer: Optional[Pacer] = None, batch_size: int = DEFAULT_BATCH_SIZE) -> None:
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1.")
        self.client = client
        self.pacer = pacer or Pacer()
        self.batch_size = batch_size

    def batches(self, images: List[ImageInput]) -> List[List[ImageInput]]:
        """Split images into consecutive batches of at most ``batch_size``."""
        return [images[i:i + self.batch_size] for i in range(0, len(images), self.batch_size)]

    async def process(self, job: Job) -> List[AnalysisResult]:
        """Return one result per image of ``job``, in input order.

        Raises:
            JobProcessingError: If the job's provider is not configured.
        """
        self.client.ensure_available(job.mode)

        batches = self.batches(job.images)
        total_batches = math.ceil(len(job.images) / self.batch_size)
        results: List[AnalysisResult] = []

        for batch_number, batch in enumerate(batches, start=1):
            LOGGER.info(
                "Processing batch %d of %d (%d images) for job %s",
                batch_number,
                total_batches,
                len(batch),
                job.id,
            )
            for index, image in enumerate(batch):
                results.append(await self._analyze_one(image, job))
                if index < len(batch) - 1:
                    await self.pacer.between_requests()

            if batch_number < total_batches:
                LOGGER.info("Waiting %.1f seconds before next batch...", self.pacer.batch_interval)
                await self.pacer.between_batches()

        return results

    async def _analyze_one(self, image: ImageInput, job: Job) -> AnalysisResult:
        try:
            analysis = await self.client.analyze(image, job.mode)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            LOGGER.error("Error processing %s in job %s: %s", image.original_name, job.id, exc)
            return AnalysisResult(
                original_filename=image.original_name,
                analysis_text=build_failure_report(image.original_name),
                failed=True,
            )
        return AnalysisResult(
            original_filename=image.original_name,
            analysis_text=analysis,
            suggested_filename=extract_suggested_filename(analysis, image.original_name),
        )
