import logging

from starlette.responses import FileResponse
from starlette.types import Message, Receive, Scope, Send

from pdf_processor.models.domain import JobState, ProcessingJob
from pdf_processor.utils.files import safe_unlink

logger = logging.getLogger(__name__)

DOWNLOAD_FILENAME = "processed.pdf"
_RANGE_HEADERS = (b"range", b"if-range")


def discard_job(job: ProcessingJob) -> None:
    """Remove every artifact of a job."""
    safe_unlink(job.input_file.path)
    safe_unlink(job.output_path)


def release_job(job: ProcessingJob, *, transferred: bool) -> None:
    """Clean up after delivery.

    The input is always removed. The output is removed only when the
    transfer finished; otherwise it is left for the startup sweep.
    """
    safe_unlink(job.input_file.path)
    if transferred:
        safe_unlink(job.output_path)
    else:
        logger.warning("Transfer of %s did not complete; output kept", job.output_path.name)


class JobFileResponse(FileResponse):
    """Streams a succeeded job's output and releases the job afterwards.

    The whole file is always sent: ``Range`` and ``If-Range`` request
    headers are dropped so a partial (206) reply can never be mistaken for
    a finished download. The transfer counts as complete only once the
    final body message has been handed to the server.
    """

    def __init__(self, job: ProcessingJob) -> None:
        if job.state is not JobState.SUCCEEDED:
            raise ValueError(f"Cannot deliver a job in state {job.state.value}")
        super().__init__(
            job.output_path,
            media_type="application/pdf",
            filename=DOWNLOAD_FILENAME,
        )
        self.job = job

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        completed = False

        async def tracking_send(message: Message) -> None:
            nonlocal completed
            await send(message)
            if message["type"] == "http.response.pathsend":
                completed = True
            elif message["type"] == "http.response.body" and not message.get("more_body", False):
                completed = True

        try:
            await super().__call__(_without_range(scope), receive, tracking_send)
        finally:
            release_job(self.job, transferred=completed)


def _without_range(scope: Scope) -> Scope:
    headers = [(key, value) for key, value in scope.get("headers", []) if key.lower() not in _RANGE_HEADERS]
    return {**scope, "headers": headers}
