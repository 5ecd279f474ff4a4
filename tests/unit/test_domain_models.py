from pathlib import Path

import pytest

from pdf_processor.exceptions import ToolExecutionError
from pdf_processor.models.domain import CommandResult, JobState, ProcessingJob, UploadedFile


def _make_job() -> ProcessingJob:
    return ProcessingJob(
        input_file=UploadedFile(path=Path("/tmp/in put.pdf"), content_type="application/pdf", size=10),
        output_path=Path("/tmp/out.pdf"),
        command=["pdftk", "/tmp/in put.pdf", "cat", "2", "output", "/tmp/out.pdf"],
    )


class TestCommandResult:
    def test_ok_on_zero_exit(self) -> None:
        assert CommandResult(returncode=0).ok

    def test_not_ok_on_timeout(self) -> None:
        assert not CommandResult(returncode=0, timed_out=True).ok

    def test_message_prefers_stderr(self) -> None:
        result = CommandResult(returncode=1, stdout="out", stderr="  err\n")
        assert result.message == "err"

    def test_message_falls_back_to_stdout(self) -> None:
        assert CommandResult(returncode=1, stdout="out\n").message == "out"


class TestProcessingJob:
    def test_starts_created(self) -> None:
        assert _make_job().state is JobState.CREATED

    def test_command_line_is_shell_quoted(self) -> None:
        assert _make_job().command_line.startswith("pdftk '/tmp/in put.pdf' cat 2")

    def test_created_running_succeeded(self) -> None:
        job = _make_job()
        job.mark_running()
        job.mark_succeeded()
        assert job.state is JobState.SUCCEEDED
        assert job.error is None

    def test_failed_records_error(self) -> None:
        job = _make_job()
        error = ToolExecutionError(details="boom")
        job.mark_running()
        job.mark_failed(error)
        assert job.state is JobState.FAILED
        assert job.error is error

    def test_cannot_succeed_without_running(self) -> None:
        with pytest.raises(RuntimeError, match="created"):
            _make_job().mark_succeeded()

    def test_cannot_run_twice(self) -> None:
        job = _make_job()
        job.mark_running()
        with pytest.raises(RuntimeError):
            job.mark_running()
