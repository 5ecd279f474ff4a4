"""Page extraction through the pdftk command-line tool."""

import logging
from pathlib import Path
from typing import Optional

from pdf_processor.exceptions import MalformedOrOutOfRangeInput, PdfServiceError, ToolExecutionError
from pdf_processor.models.domain import CommandResult, ProcessingJob, UploadedFile
from pdf_processor.services.executor import CommandExecutor
from pdf_processor.utils.files import OUTPUT_PREFIX, safe_unlink, unique_filename

logger = logging.getLogger(__name__)

TARGET_PAGE = 2

# Fragments pdftk prints when the input itself is the problem
# (missing page, unreadable or corrupted PDF).
_INPUT_ERROR_MARKERS = ("errors", "no output created", "range error")

_MISSING_OUTPUT = "Output file was not created. The PDF might not have a second page."


def is_input_error(message: str) -> bool:
    lowered = message.lower()
    return any(marker in lowered for marker in _INPUT_ERROR_MARKERS)


class PageExtractor:
    """Builds and runs ``pdftk <in> cat <page> output <out>`` for one job."""

    def __init__(
        self,
        executor: CommandExecutor,
        output_dir: Path,
        *,
        binary: str = "pdftk",
        timeout: Optional[float] = None,
        page: int = TARGET_PAGE,
    ) -> None:
        self._executor = executor
        self._output_dir = output_dir
        self._binary = binary
        self._timeout = timeout
        self._page = page

    def create_job(self, input_file: UploadedFile) -> ProcessingJob:
        output_path = self._output_dir / unique_filename(OUTPUT_PREFIX)
        command = [
            self._binary,
            str(input_file.path),
            "cat",
            str(self._page),
            "output",
            str(output_path),
        ]
        return ProcessingJob(input_file=input_file, output_path=output_path, command=command)

    async def run(self, job: ProcessingJob) -> ProcessingJob:
        """Execute the job's command and settle its state.

        On success the input and output files are left in place for
        delivery. On failure both are removed right away and the
        classified `PdfServiceError` is raised.
        """
        job.mark_running()
        logger.info("Running: %s", job.command_line)

        try:
            result = await self._executor.run(job.command, timeout=self._timeout)
        except OSError as exc:
            logger.error("Could not start %s: %s", self._binary, exc)
            error = ToolExecutionError(details=f"Could not start {self._binary}: {exc}")
            raise self._fail(job, error) from exc

        error = self._classify(result, job.output_path)
        if error is not None:
            raise self._fail(job, error)

        job.mark_succeeded()
        logger.info("Extracted page %d into %s", self._page, job.output_path.name)
        return job

    def _classify(self, result: CommandResult, output_path: Path) -> Optional[PdfServiceError]:
        if result.timed_out:
            return ToolExecutionError(
                details=f"{self._binary} did not finish within {self._timeout:g} seconds"
            )
        if result.returncode != 0:
            message = result.message or f"{self._binary} exited with status {result.returncode}"
            if is_input_error(message):
                return MalformedOrOutOfRangeInput(details=message)
            return ToolExecutionError(details=message)
        if not output_path.exists():
            return MalformedOrOutOfRangeInput(details=_MISSING_OUTPUT)
        return None

    def _fail(self, job: ProcessingJob, error: PdfServiceError) -> PdfServiceError:
        job.mark_failed(error)
        logger.warning("Job failed (%s): %s", type(error).__name__, error.details)
        safe_unlink(job.input_file.path)
        safe_unlink(job.output_path)
        return error
