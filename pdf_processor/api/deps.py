from functools import lru_cache

from fastapi import Depends

from pdf_processor.config import Settings, get_settings
from pdf_processor.services.executor import CommandExecutor, SubprocessExecutor
from pdf_processor.services.pdftk import PageExtractor
from pdf_processor.services.uploads import UploadIntake


@lru_cache()
def get_executor() -> CommandExecutor:
    """Provides the process-wide command executor; tests override this."""
    return SubprocessExecutor()


def get_upload_intake(settings: Settings = Depends(get_settings)) -> UploadIntake:
    return UploadIntake(settings.upload_dir, settings.max_upload_bytes)


def get_page_extractor(
    settings: Settings = Depends(get_settings),
    executor: CommandExecutor = Depends(get_executor),
) -> PageExtractor:
    return PageExtractor(
        executor,
        settings.output_dir,
        binary=settings.pdftk_binary,
        timeout=settings.process_timeout_seconds,
    )
