import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.staticfiles import StaticFiles
from starlette.middleware.sessions import SessionMiddleware

from models.analysis_mode import Provider
from routes.analysis_route import router as analysis_router
from routes.auth_route import router as auth_router
from routes.queue_route import router as queue_router
from services.analysis_client import AnalysisClient
from services.queue.batch_processor import BatchProcessor
from services.queue.job_queue import JobQueue
from services.queue.pacer import Pacer
from services.result_store import ResultStore
from utils.result_cleaner import ResultCleaner
from utils.settings import load_settings

BASE_DIR = Path(__file__).resolve().parent
PUBLIC_DIR = BASE_DIR / "public"

from dotenv import load_dotenv

load_dotenv()  # Load environment variables from .env file if present

logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
LOGGER = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan manager to initialize:
      - the provider clients (OpenAI vision, Perplexity search)
      - the result store at ANALYSIS_DIR and its retention cleaner
      - the single-worker analysis queue
    and attach them to `app.state`.
    """
    settings = app.state.settings

    result_store = ResultStore(settings.analysis_dir, retention_seconds=settings.retention_seconds)
    app.state.result_store = result_store

    analysis_client = AnalysisClient.from_settings(settings)
    app.state.analysis_client = analysis_client

    pacer = Pacer(
        request_interval=settings.delay_between_requests,
        batch_interval=settings.delay_between_batches,
        job_interval=settings.delay_between_jobs,
    )
    processor = BatchProcessor(analysis_client, pacer=pacer, batch_size=settings.batch_size)
    job_queue = JobQueue(processor, result_store)
    app.state.job_queue = job_queue

    # Production runs serverless: purge once per cold start instead of hourly.
    cleaner = ResultCleaner(result_store, interval_seconds=settings.cleanup_interval_seconds)
    await cleaner.start(periodic=not settings.is_production)
    app.state.result_cleaner = cleaner

    if settings.default_admin_password:
        LOGGER.warning("ADMIN_PASSWORD_HASH is not set; using the default administrator password")
    LOGGER.info("Analysis storage and queueing system initialized at %s", settings.analysis_dir)

    try:
        yield
    finally:
        await cleaner.stop()
        await job_queue.aclose()
        try:
            await analysis_client.aclose()
        except Exception:
            # Ignore shutdown errors to avoid masking more important issues.
            LOGGER.debug("Error closing provider clients", exc_info=True)


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application instance.
    """
    settings = load_settings()

    app = FastAPI(lifespan=lifespan)
    app.state.settings = settings

    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.session_secret,
        max_age=settings.session_max_age,
        https_only=settings.is_production,
        same_site="lax",
    )

    # Serve static assets from the public directory, if it exists.
    if PUBLIC_DIR.exists():
        app.mount("/public", StaticFiles(directory=PUBLIC_DIR), name="public")

    @app.get("/health")
    async def health(request: Request):
        """
        Simple health check that reports provider availability and queue depth.
        """
        state = request.app.state
        client = getattr(state, "analysis_client", None)
        job_queue = getattr(state, "job_queue", None)
        return {
            "ok": True,
            "openai_available": client is not None and client.is_available(Provider.VISION),
            "search_available": client is not None and client.is_available(Provider.SEARCH),
            "queue_length": len(job_queue) if job_queue is not None else 0,
        }

    # Register application routers
    app.include_router(auth_router)
    app.include_router(analysis_router)
    app.include_router(queue_router)

    return app


app = create_app()
