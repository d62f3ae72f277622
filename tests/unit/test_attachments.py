import pytest

from applyform.core.config import get_settings
from applyform.core.errors import AttachmentTooLargeError, UnsupportedFileTypeError
from applyform.forms.state import Attachment
from applyform.services import form_machine as machine
from applyform.services.attachments import (
    SIZE_LIMIT_MESSAGE,
    check_selection,
    pick_attachment,
    size_limit_message,
)

TEN_MIB = 10 * 1024 * 1024


def test_pick_attachment_infers_content_type_and_strips_directories():
    attachment = pick_attachment("uploads/Cover Letter.PDF", b"%PDF-1.4")

    assert attachment.filename == "Cover Letter.PDF"
    assert attachment.size == 8
    assert attachment.content_type == "application/pdf"


def test_pick_attachment_keeps_declared_content_type():
    attachment = pick_attachment("resume.docx", b"PK", "application/octet-stream")

    assert attachment.content_type == "application/octet-stream"


@pytest.mark.parametrize("filename", ["resume.txt", "resume", "", "resume.pdf.exe"])
def test_only_pdf_and_word_extensions_are_accepted(filename):
    with pytest.raises(UnsupportedFileTypeError):
        check_selection(filename, 10)


def test_size_ceiling_is_inclusive():
    check_selection("resume.pdf", TEN_MIB)

    with pytest.raises(AttachmentTooLargeError) as excinfo:
        check_selection("resume.pdf", TEN_MIB + 1)
    assert str(excinfo.value) == SIZE_LIMIT_MESSAGE


def test_oversized_pick_leaves_previous_file_in_place():
    existing = Attachment(filename="old.pdf", size=3, content=b"old")
    state = machine.attach_file(machine.start_session(), "resume", existing)

    try:
        check_selection("huge.pdf", 10_485_761)
    except AttachmentTooLargeError as exc:
        state = machine.reject_file(state, "resume", str(exc))

    assert state.draft.resume == existing
    assert state.errors == {"resume": SIZE_LIMIT_MESSAGE}


def test_size_message_follows_configured_limit(monkeypatch):
    monkeypatch.setattr(get_settings(), "max_attachment_bytes", 2 * 1024 * 1024)

    with pytest.raises(AttachmentTooLargeError) as excinfo:
        check_selection("resume.pdf", 2 * 1024 * 1024 + 1)

    assert str(excinfo.value) == "File size must be less than 2MB. Please choose a smaller file."


def test_size_message_formats_small_limits():
    assert size_limit_message(512) == "File size must be less than 512 bytes. Please choose a smaller file."
    assert size_limit_message(1536) == "File size must be less than 1.5KB. Please choose a smaller file."


def test_configured_extensions_limit_the_picker(monkeypatch):
    monkeypatch.setattr(get_settings(), "allowed_attachment_extensions", ".PDF")

    check_selection("resume.pdf", 10)
    with pytest.raises(UnsupportedFileTypeError):
        check_selection("resume.docx", 10)
