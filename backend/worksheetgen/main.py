import logging

from fastapi import FastAPI

from .cache import WorksheetCache
from .db import init_db
from .gemini_client import GeminiClient
from .generator import WorksheetGenerator
from .settings import settings
from .routers import auth
from .routers import progress
from .routers import topics
from .routers import worksheets

logging.basicConfig(
	level=getattr(logging, settings.log_level.upper(), logging.INFO),
	format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logging.getLogger("httpx").setLevel(logging.WARNING)

app = FastAPI(title="Worksheet Generator API")
app.include_router(auth.router)
app.include_router(topics.router)
app.include_router(worksheets.router)
app.include_router(progress.router)


@app.get("/info")
def root():
	return {"status": "ok", "gemini_configured": bool(settings.gemini_api_key)}


@app.on_event("startup")
async def startup_event():
	# Initialize DB schema
	init_db()
	# One cache per process, shared by every request through the generator
	app.state.generator = WorksheetGenerator(
		GeminiClient(),
		WorksheetCache(ttl_seconds=settings.cache_ttl_seconds),
		retry_limit=settings.retry_limit,
		retry_delay=settings.retry_delay_seconds,
	)
	if not settings.gemini_api_key:
		logging.getLogger(__name__).warning("GEMINI_API_KEY is not set; worksheet generation will fail fast")


@app.on_event("shutdown")
async def shutdown_event():
	generator = getattr(app.state, "generator", None)
	if generator is not None:
		await generator.client.aclose()
