"""Queue introspection helpers."""

from typing import Any, Dict

from fastapi import Request

from services.queue.job_queue import JobQueue


async def get_queue_status(request: Request) -> Dict[str, Any]:
	"""Return live job summaries with the worker's busy flag."""
	job_queue: JobQueue = request.app.state.job_queue
	return {
		"queue": job_queue.list(),
		"is_processing": job_queue.is_processing,
		"queue_length": len(job_queue),
	}


async def remove_from_queue(request: Request, job_id: str) -> Dict[str, Any]:
	"""Remove a queued job; processing jobs cannot be removed."""
	job_queue: JobQueue = request.app.state.job_queue
	job = job_queue.remove(job_id)
	return {"success": True, "message": f'Analysis "{job.display_name}" removed from queue'}
