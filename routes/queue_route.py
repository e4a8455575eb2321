from fastapi import APIRouter, Depends, HTTPException, Request

from controllers.auth_controller import require_auth
from controllers.queue_controller import get_queue_status, remove_from_queue
from models.errors import ImageNamerError

router = APIRouter(prefix="/api/queue", dependencies=[Depends(require_auth)], tags=["queue"])


@router.get("")
async def get_queue(request: Request):
	"""Return the live queue and whether the worker is busy."""
	return await get_queue_status(request)


@router.delete("/{job_id}")
async def delete_queue_item(request: Request, job_id: str):
	"""Remove a queued analysis."""
	try:
		return await remove_from_queue(request, job_id)
	except ImageNamerError as exc:
		raise HTTPException(status_code=exc.status_code, detail=exc.message) from exc
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))
