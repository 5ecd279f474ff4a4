import shlex
from enum import Enum
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from pdf_processor.exceptions import PdfServiceError


class UploadedFile(BaseModel):
    path: Path
    content_type: str
    size: int


class CommandResult(BaseModel):
    """Outcome of one external command invocation."""

    returncode: Optional[int] = None  # None when the process was killed on timeout
    stdout: str = ""
    stderr: str = ""
    timed_out: bool = False

    @property
    def ok(self) -> bool:
        return not self.timed_out and self.returncode == 0

    @property
    def message(self) -> str:
        return self.stderr.strip() or self.stdout.strip()


class JobState(str, Enum):
    CREATED = "created"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class ProcessingJob(BaseModel):
    """One upload-to-output transformation attempt."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    input_file: UploadedFile
    output_path: Path
    command: List[str]
    state: JobState = JobState.CREATED
    error: Optional[PdfServiceError] = None

    @property
    def command_line(self) -> str:
        return shlex.join(self.command)

    def mark_running(self) -> None:
        self._transition(JobState.CREATED, JobState.RUNNING)

    def mark_succeeded(self) -> None:
        self._transition(JobState.RUNNING, JobState.SUCCEEDED)

    def mark_failed(self, error: PdfServiceError) -> None:
        self._transition(JobState.RUNNING, JobState.FAILED)
        self.error = error

    def _transition(self, expected: JobState, target: JobState) -> None:
        if self.state is not expected:
            raise RuntimeError(f"Cannot move job from {self.state.value} to {target.value}")
        self.state = target


class HealthResponse(BaseModel):
    status: str
    message: str


class ErrorResponse(BaseModel):
    error: str
    details: Optional[str] = None
