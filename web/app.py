"""
FastAPI application setup for the audition-match Web UI.
"""

from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI

from audition_platform.runtime.config import get_db_path
from audition_platform.services import get_default_scheduler, reschedule_pending_announcements

from . import __version__ as WEB_VERSION
from .routes import router

# Load .env file (if present) so AUDITIONS_* settings are available via os.environ
load_dotenv()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Timers die with the process; re-deliver announcements left scheduled
    reschedule_pending_announcements(get_db_path(), get_default_scheduler())
    yield


# App
app = FastAPI(
    title="audition-match",
    description="One-round matching of auditionees to groups",
    version=WEB_VERSION,
    lifespan=lifespan,
)

# Include API routes
app.include_router(router)


@app.get("/")
async def index():
    """Basic service info."""
    return {"name": "audition-match", "version": WEB_VERSION}
