import base64
import io
from pathlib import Path
from typing import Iterator, Optional, Sequence

import pytest
from fastapi.testclient import TestClient
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from pdf_processor.api.deps import get_executor
from pdf_processor.api.main import create_app
from pdf_processor.config import Settings
from pdf_processor.models.domain import CommandResult

API_KEY = "test-api-key"
BASIC_USER = "admin"
BASIC_PASSWORD = "s3cret:with-colon"

FAKE_PAGE_BYTES = b"%PDF-1.4\n% page two only\n%%EOF\n"


class FakeExecutor:
    """Records commands instead of running them.

    On a zero exit it writes ``output_bytes`` to the command's last
    argument, which is where pdftk writes its result.
    """

    def __init__(self) -> None:
        self.result = CommandResult(returncode=0)
        self.output_bytes: Optional[bytes] = FAKE_PAGE_BYTES
        self.raises: Optional[BaseException] = None
        self.calls: list[tuple[list[str], Optional[float]]] = []

    async def run(self, command: Sequence[str], timeout: Optional[float] = None) -> CommandResult:
        self.calls.append((list(command), timeout))
        if self.raises is not None:
            raise self.raises
        if self.result.returncode == 0 and self.output_bytes is not None:
            Path(command[-1]).write_bytes(self.output_bytes)
        return self.result


def basic_header(username: str, password: str) -> dict:
    token = base64.b64encode(f"{username}:{password}".encode()).decode()
    return {"Authorization": f"Basic {token}"}


def bearer_header(token: str = API_KEY) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    return Settings(
        _env_file=None,
        api_key=API_KEY,
        basic_auth_username=BASIC_USER,
        basic_auth_password=BASIC_PASSWORD,
        upload_dir=tmp_path / "uploads",
        output_dir=tmp_path / "output",
        process_timeout_seconds=5,
    )


@pytest.fixture()
def api_headers() -> dict:
    return bearer_header()


@pytest.fixture()
def basic_headers() -> dict:
    return basic_header(BASIC_USER, BASIC_PASSWORD)


@pytest.fixture()
def executor() -> FakeExecutor:
    return FakeExecutor()


@pytest.fixture()
def client(settings: Settings, executor: FakeExecutor) -> Iterator[TestClient]:
    app = create_app(settings)
    app.dependency_overrides[get_executor] = lambda: executor
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """Generate a minimal single-page PDF with known text content."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Hello PDF World")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def multi_page_pdf_bytes() -> bytes:
    """Generate a three-page PDF with known text on each page."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Page one content")
    c.showPage()
    c.drawString(72, 720, "Page two content")
    c.showPage()
    c.drawString(72, 720, "Page three content")
    c.save()
    return buf.getvalue()
