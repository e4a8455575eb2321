from fastapi import Request, UploadFile
from typing import Any, Dict, List, Optional

from models.analysis_mode import AnalysisMode
from services.queue.job_queue import JobQueue
from services.result_store import ResultStore
from utils.media_validation import read_image_uploads


async def submit_analysis(
    request: Request,
    files: Optional[List[UploadFile]],
    analysis_mode: Optional[str],
    analysis_name: Optional[str],
) -> Dict[str, Any]:
    """Validate an upload batch and queue it for analysis.

    Args:
        request: FastAPI Request (used to access app.state for the queue and settings).
        files: Uploaded images, in the order they should be analysed.
        analysis_mode: Mode wire name; empty selects ``search-basic``.
        analysis_name: Optional display label for the job.

    Returns:
        A dict containing: success, job_id, queue_position, message

    Raises:
        ValidationError: If the mode is unknown or any upload is rejected. No job is created.
    """
    settings = request.app.state.settings
    job_queue: JobQueue = request.app.state.job_queue

    mode = AnalysisMode.parse(analysis_mode)
    images = await read_image_uploads(
        files or [], max_files=settings.max_upload_files, max_bytes=settings.max_upload_bytes
    )

    job = job_queue.submit(images, mode, analysis_name or "")
    position = job_queue.position(job.id)

    return {
        "success": True,
        "job_id": job.id,
        "queue_position": position,
        "message": "Analysis started" if position == 1 else f"Analysis queued at position {position}",
    }


async def list_analyses(request: Request) -> List[Dict[str, Any]]:
    """Summaries of persisted analyses from the retention window, newest first."""
    store: ResultStore = request.app.state.result_store
    return await store.list_recent()


async def get_analysis(request: Request, analysis_id: str) -> Dict[str, Any]:
    """Return the full persisted record for ``analysis_id``.

    Raises:
        NotFoundError: If no record is stored under that id.
    """
    store: ResultStore = request.app.state.result_store
    record = await store.get(analysis_id)
    return {"key": analysis_id, **record.to_dict()}
