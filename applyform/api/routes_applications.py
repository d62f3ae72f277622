from functools import partial
from os import SEEK_END

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status

from applyform.api.deps import get_store
from applyform.api.schemas import (
    ApplicationView,
    FieldValueRequest,
    OptionToggleRequest,
    ReviewResponse,
    application_view,
)
from applyform.core.enums import SubmissionStatus
from applyform.core.errors import (
    ApplicationClosedError,
    ApplicationFormError,
    AttachmentRejectedError,
    SessionNotFoundError,
    SubmissionInFlightError,
    SubmissionNotReadyError,
)
from applyform.core.logging import get_logger
from applyform.forms.state import SubmittedApplication
from applyform.services import submission_service
from applyform.services.attachments import check_selection, pick_attachment
from applyform.services.form_machine import (
    DOCUMENT_SLOTS,
    attach_file,
    next_step,
    previous_step,
    reject_file,
    set_field,
    toggle_option,
)
from applyform.services.review import build_review
from applyform.services.session_store import SessionStore

logger = get_logger(__name__)

router = APIRouter(prefix="/applications", tags=["applications"])


def _call(func, *args):
    try:
        return func(*args)
    except SessionNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Application not found") from exc
    except (ApplicationClosedError, SubmissionInFlightError, SubmissionNotReadyError) as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    except ApplicationFormError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


def _upload_size(file: UploadFile) -> int:
    stream = file.file
    stream.seek(0, SEEK_END)
    size = stream.tell()
    stream.seek(0)
    return size


@router.post("", response_model=ApplicationView, status_code=status.HTTP_201_CREATED)
def create_application(store: SessionStore = Depends(get_store)):
    session = store.create()
    return application_view(session.id, session.state)


@router.get("/{session_id}", response_model=ApplicationView)
def get_application(session_id: str, store: SessionStore = Depends(get_store)):
    state = _call(store.get_state, session_id)
    return application_view(session_id, state)


@router.put("/{session_id}/fields/{name}", response_model=ApplicationView)
def update_field(
    session_id: str,
    name: str,
    payload: FieldValueRequest,
    store: SessionStore = Depends(get_store),
):
    state = _call(store.apply, session_id, set_field, name, payload.value)
    return application_view(session_id, state)


@router.post("/{session_id}/options/{name}", response_model=ApplicationView)
def toggle_field_option(
    session_id: str,
    name: str,
    payload: OptionToggleRequest,
    store: SessionStore = Depends(get_store),
):
    state = _call(store.apply, session_id, toggle_option, name, payload.value, payload.checked)
    return application_view(session_id, state)


@router.post("/{session_id}/documents/{slot}", response_model=ApplicationView)
def upload_document(
    session_id: str,
    slot: str,
    file: UploadFile = File(...),
    store: SessionStore = Depends(get_store),
):
    if slot not in DOCUMENT_SLOTS:
        raise HTTPException(status_code=404, detail="Unknown document slot")

    filename = file.filename or ""
    try:
        check_selection(filename, _upload_size(file))
    except AttachmentRejectedError as exc:
        _call(store.apply, session_id, reject_file, slot, str(exc))
        logger.info(
            "Document rejected",
            extra={"extra": {"session_id": session_id, "slot": slot, "filename": filename, "reason": str(exc)}},
        )
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    attachment = pick_attachment(filename, file.file.read(), file.content_type)
    state = _call(store.apply, session_id, attach_file, slot, attachment)
    return application_view(session_id, state)


@router.post("/{session_id}/next", response_model=ApplicationView)
def advance_step(session_id: str, store: SessionStore = Depends(get_store)):
    state = _call(store.apply, session_id, next_step)
    return application_view(session_id, state)


@router.post("/{session_id}/previous", response_model=ApplicationView)
def go_back(session_id: str, store: SessionStore = Depends(get_store)):
    state = _call(store.apply, session_id, previous_step)
    return application_view(session_id, state)


@router.get("/{session_id}/review", response_model=ReviewResponse)
def review_application(session_id: str, store: SessionStore = Depends(get_store)):
    state = _call(store.get_state, session_id)
    if isinstance(state, SubmittedApplication):
        raise HTTPException(status_code=409, detail="Application has already been submitted")
    return {"id": session_id, "sections": build_review(state.draft)}


@router.post("/{session_id}/submit", response_model=ApplicationView)
def submit_application(session_id: str, store: SessionStore = Depends(get_store)):
    cfg = submission_service.default_submission_config()
    sender = partial(submission_service.submit_application, **cfg)
    state = _call(store.submit, session_id, sender)

    if not isinstance(state, SubmittedApplication) and state.submission == SubmissionStatus.FAILED and state.notice:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=state.notice)
    return application_view(session_id, state)
