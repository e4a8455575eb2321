"""FastAPI routes for submitting and reading image analyses."""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile

from controllers.analysis_controller import get_analysis, list_analyses, submit_analysis
from controllers.auth_controller import require_auth
from models.errors import ImageNamerError

router = APIRouter(dependencies=[Depends(require_auth)], tags=["analysis"])


@router.post("/analyze", summary="Queue a batch of images for analysis")
async def analyze_images(
    request: Request,
    images: Optional[List[UploadFile]] = File(None),
    analysis_mode: Optional[str] = Form(None, alias="analysisMode"),
    analysis_name: Optional[str] = Form(None, alias="analysisName"),
):
    """Validate the uploaded images and add them to the analysis queue."""
    try:
        return await submit_analysis(request, images, analysis_mode, analysis_name)
    except ImageNamerError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message) from exc
    except HTTPException:
        raise
    except Exception as exc:  # pylint: disable=broad-exception-caught
        raise HTTPException(status_code=500, detail="Internal server error") from exc


@router.get("/api/analyses")
async def get_recent_analyses(request: Request):
    """Return analyses saved within the retention window."""
    try:
        return await list_analyses(request)
    except Exception as exc:  # pylint: disable=broad-exception-caught
        raise HTTPException(status_code=500, detail="Failed to get analyses") from exc


@router.get("/api/analyses/{analysis_id}")
async def get_analysis_by_id(request: Request, analysis_id: str):
    """Return one saved analysis."""
    try:
        return await get_analysis(request, analysis_id)
    except ImageNamerError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message) from exc
    except Exception as exc:  # pylint: disable=broad-exception-caught
        raise HTTPException(status_code=500, detail=str(exc)) from exc
