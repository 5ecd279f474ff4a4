import logging
from pathlib import Path
from typing import BinaryIO, Optional

from starlette.concurrency import run_in_threadpool
from starlette.datastructures import FormData, UploadFile

from pdf_processor.exceptions import (
    NoFileProvided,
    PayloadTooLarge,
    UnexpectedFileField,
    UnsupportedMediaType,
)
from pdf_processor.models.domain import UploadedFile
from pdf_processor.utils.files import INPUT_PREFIX, safe_unlink, unique_filename

logger = logging.getLogger(__name__)

UPLOAD_FIELD = "pdf"
PDF_MEDIA_TYPE = "application/pdf"
_CHUNK_SIZE = 64 * 1024
MULTIPART_OVERHEAD_ALLOWANCE = 64 * 1024


class UploadIntake:
    """Validates the multipart upload and persists it under a generated name."""

    def __init__(self, upload_dir: Path, max_bytes: int) -> None:
        self._upload_dir = upload_dir
        self._max_bytes = max_bytes

    def check_declared_length(self, content_length: Optional[str]) -> None:
        """Reject a request whose ``Content-Length`` already exceeds the limit.

        Runs before the multipart body is parsed. The allowance covers the
        multipart framing around a file of exactly the maximum size. A
        missing or unparsable header is left to the per-file check.
        """
        if content_length is None:
            return
        try:
            declared = int(content_length)
        except ValueError:
            return
        if declared > self._max_bytes + MULTIPART_OVERHEAD_ALLOWANCE:
            logger.info("Rejected request declaring %d bytes before parsing", declared)
            raise self._too_large()

    async def accept(self, form: FormData) -> UploadedFile:
        """Validate the ``pdf`` field of ``form`` and store it on disk.

        Checks run in order: stray file fields, presence, content type, size.
        Nothing is written to the upload directory unless the content type is
        PDF, and a partial file is removed if the size limit is hit mid-copy.
        """
        for field, value in form.multi_items():
            if isinstance(value, UploadFile) and field != UPLOAD_FIELD:
                raise UnexpectedFileField(f"Unexpected file field '{field}'. Upload the PDF as '{UPLOAD_FIELD}'")

        uploads = [value for value in form.getlist(UPLOAD_FIELD) if isinstance(value, UploadFile)]
        if not uploads:
            raise NoFileProvided()
        if len(uploads) > 1:
            raise UnexpectedFileField()
        upload = uploads[0]

        content_type = (upload.content_type or "").split(";", 1)[0].strip().lower()
        if content_type != PDF_MEDIA_TYPE:
            logger.info("Rejected upload with content type %r", upload.content_type)
            raise UnsupportedMediaType()

        if upload.size is not None and upload.size > self._max_bytes:
            raise self._too_large()

        destination = self._upload_dir / unique_filename(INPUT_PREFIX)
        size = await run_in_threadpool(self._copy, upload.file, destination)
        logger.info("Stored upload %s (%d bytes)", destination.name, size)
        return UploadedFile(path=destination, content_type=content_type, size=size)

    def _copy(self, source: BinaryIO, destination: Path) -> int:
        written = 0
        source.seek(0)
        # "x" mode: never overwrite another request's file
        target = destination.open("xb")
        try:
            with target:
                while True:
                    chunk = source.read(_CHUNK_SIZE)
                    if not chunk:
                        break
                    written += len(chunk)
                    if written > self._max_bytes:
                        raise self._too_large()
                    target.write(chunk)
        except Exception:
            safe_unlink(destination)
            raise
        return written

    def _too_large(self) -> PayloadTooLarge:
        limit_mb = self._max_bytes / (1024 * 1024)
        return PayloadTooLarge(f"File too large. Maximum size is {limit_mb:g}MB.")
