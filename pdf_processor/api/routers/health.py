from pathlib import Path

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse

from pdf_processor.api.auth import verify_basic_auth
from pdf_processor.models.domain import HealthResponse

STATIC_DIR = Path(__file__).resolve().parents[2] / "static"

router = APIRouter(
    tags=["health"],
    dependencies=[Depends(verify_basic_auth)],
)


@router.get("/health", response_model=HealthResponse)
async def health():
    return HealthResponse(status="OK", message="PDF processing API is running")


@router.get("/test", response_class=FileResponse)
async def test_page():
    """Serves the browser upload form used for manual testing."""
    return FileResponse(STATIC_DIR / "test.html", media_type="text/html")
