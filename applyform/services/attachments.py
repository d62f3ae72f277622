from pathlib import PurePath

from applyform.core.config import get_settings
from applyform.core.errors import AttachmentTooLargeError, UnsupportedFileTypeError
from applyform.forms.state import Attachment

FILE_TYPE_MESSAGE = "Please upload a PDF or Word document (.pdf, .doc, .docx)."

CONTENT_TYPES = {
    ".pdf": "application/pdf",
    ".doc": "application/msword",
    ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
}


def _format_limit(max_bytes: int) -> str:
    for unit, scale in (("MB", 1024 * 1024), ("KB", 1024)):
        if max_bytes >= scale:
            return f"{max_bytes / scale:g}{unit}"
    return f"{max_bytes} bytes"


def size_limit_message(max_bytes: int) -> str:
    return f"File size must be less than {_format_limit(max_bytes)}. Please choose a smaller file."


SIZE_LIMIT_MESSAGE = size_limit_message(10 * 1024 * 1024)


def attachment_extension(filename: str) -> str:
    return PurePath(filename or "").suffix.lower()


def check_selection(filename: str, size: int) -> None:
    """Picker-level checks: extension filter and the size ceiling. Content is not inspected."""
    settings = get_settings()
    if not filename or attachment_extension(filename) not in settings.attachment_extensions:
        raise UnsupportedFileTypeError(FILE_TYPE_MESSAGE)
    if size > settings.max_attachment_bytes:
        raise AttachmentTooLargeError(size_limit_message(settings.max_attachment_bytes))


def pick_attachment(filename: str, content: bytes, content_type: str | None = None) -> Attachment:
    check_selection(filename, len(content))
    return Attachment(
        filename=PurePath(filename).name,
        size=len(content),
        content_type=content_type or CONTENT_TYPES.get(attachment_extension(filename), "application/octet-stream"),
        content=content,
    )
