"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from .config import Settings, get_settings
from .routers import library, metadata, titles
from .store import get_store

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def init_library() -> None:
    """Create the library folders and the metadata file if missing."""
    current = get_settings()
    current.movies_path.mkdir(parents=True, exist_ok=True)
    current.series_path.mkdir(parents=True, exist_ok=True)
    get_store().ensure_exists()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    init_library()
    current = get_settings()
    logger.info("Movies: %s", current.movies_path.resolve())
    logger.info("Series: %s", current.series_path.resolve())
    yield


app = FastAPI(
    title="Videoshelf API",
    description="Local movie and series library with editable titles",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS for the web front-end
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(library.router)
app.include_router(titles.router)
app.include_router(metadata.router)

# Video files, at the URLs the listings hand out
app.mount(
    "/videos/movies",
    StaticFiles(directory=settings.movies_path, check_dir=False),
    name="movies",
)
app.mount(
    "/videos/series",
    StaticFiles(directory=settings.series_path, check_dir=False),
    name="series",
)


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {"message": "Videoshelf API", "status": "running"}


@app.get("/health")
async def health(current: Settings = Depends(get_settings)) -> dict[str, str]:
    """Health check endpoint."""
    return {
        "status": "healthy",
        "movies_dir": str(current.movies_path),
        "series_dir": str(current.series_path),
    }


def run() -> None:
    """Serve the app with uvicorn using the configured host and port."""
    import uvicorn

    uvicorn.run(
        "videoshelf.main:app",
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level,
    )


if __name__ == "__main__":
    run()
