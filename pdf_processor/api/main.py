import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI

from pdf_processor.api.errors import register_exception_handlers
from pdf_processor.api.routers import health, pdf
from pdf_processor.config import Settings, get_settings
from pdf_processor.utils.files import ensure_directories, purge_stale_files
from pdf_processor.utils.logging import configure_logging

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the FastAPI app around one `Settings` instance.

    The instance is installed as the override for `get_settings`, so every
    dependency in the request path sees the same configuration.
    """
    if settings is None:
        settings = get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        ensure_directories(settings.upload_dir, settings.output_dir)
        purge_stale_files(
            (settings.upload_dir, settings.output_dir),
            settings.stale_file_max_age_seconds,
        )
        base_url = f"http://localhost:{settings.port}"
        logger.info("PDF processing API server running on port %d", settings.port)
        logger.info("Health check: %s/health", base_url)
        logger.info("Process PDF: POST %s/process-pdf", base_url)
        logger.info("Test interface: %s/test", base_url)
        yield

    app = FastAPI(
        title="PDF Page Processor",
        description="Extracts page 2 of an uploaded PDF with pdftk.",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.dependency_overrides[get_settings] = lambda: settings

    register_exception_handlers(app)
    app.include_router(health.router)
    app.include_router(pdf.router)
    return app


configure_logging(get_settings().log_level)
app = create_app()


def run() -> None:
    settings = get_settings()
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    run()
