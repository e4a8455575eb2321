"""Landing page, login and logout routes."""

from pathlib import Path

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import FileResponse, RedirectResponse
from pydantic import BaseModel

from controllers.auth_controller import is_authenticated, login, logout

PUBLIC_DIR = Path(__file__).resolve().parent.parent / "public"

router = APIRouter(tags=["auth"])


class LoginPayload(BaseModel):
	username: str = ""
	password: str = ""


def _serve_page(name: str) -> FileResponse:
	page_path = PUBLIC_DIR / name
	if not page_path.exists():
		raise HTTPException(status_code=404, detail="Frontend not found")
	return FileResponse(page_path)


@router.get("/", include_in_schema=False)
async def serve_landing(request: Request):
	"""Serve the login page, or send authenticated users to the analysis page."""
	if is_authenticated(request):
		return RedirectResponse("/imageanalysis", status_code=302)
	return _serve_page("login.html")


@router.get("/login", include_in_schema=False)
async def legacy_login_page():
	return RedirectResponse("/", status_code=302)


@router.post("/login")
async def login_route(request: Request, payload: LoginPayload):
	return await login(request, payload.username, payload.password)


@router.post("/logout")
async def logout_route(request: Request):
	return await logout(request)


@router.get("/imageanalysis", include_in_schema=False)
async def serve_analysis_page(request: Request):
	"""Serve the analysis frontend to authenticated users."""
	if not is_authenticated(request):
		return RedirectResponse("/", status_code=302)
	return _serve_page("index.html")
