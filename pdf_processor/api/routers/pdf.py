import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import FileResponse

from pdf_processor.api.auth import verify_api_key
from pdf_processor.api.deps import get_page_extractor, get_upload_intake
from pdf_processor.exceptions import InternalError, PdfServiceError
from pdf_processor.models.domain import ErrorResponse
from pdf_processor.services.delivery import JobFileResponse, discard_job
from pdf_processor.services.pdftk import PageExtractor
from pdf_processor.services.uploads import UploadIntake

logger = logging.getLogger(__name__)

router = APIRouter(
    tags=["pdf"],
    dependencies=[Depends(verify_api_key)],
)

# Upper bounds for the multipart parser. Only one "pdf" file is accepted, so
# a second file part is already an error.
_MAX_FORM_FILES = 2
_MAX_FORM_FIELDS = 16


@router.post(
    "/process-pdf",
    response_class=FileResponse,
    responses={
        200: {"content": {"application/pdf": {}}, "description": "Page 2 as a single-page PDF"},
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def process_pdf(
    request: Request,
    intake: UploadIntake = Depends(get_upload_intake),
    extractor: PageExtractor = Depends(get_page_extractor),
):
    """
    Extract page 2 of the uploaded PDF (multipart field ``pdf``) and return it
    as ``processed.pdf``.

    The body is parsed here rather than declared as a ``File`` parameter so
    that authentication runs before any upload is read.
    """
    intake.check_declared_length(request.headers.get("content-length"))
    async with request.form(max_files=_MAX_FORM_FILES, max_fields=_MAX_FORM_FIELDS) as form:
        uploaded = await intake.accept(form)

    job = extractor.create_job(uploaded)
    try:
        await extractor.run(job)
    except PdfServiceError:
        raise
    except Exception as exc:
        logger.error("Unexpected error while processing %s", uploaded.path.name, exc_info=True)
        discard_job(job)
        raise InternalError() from exc

    return JobFileResponse(job)
