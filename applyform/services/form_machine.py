from datetime import datetime, timezone
from typing import Any

from applyform.core.enums import EducationLevel, FormStep, Position, SubmissionStatus, YesNo
from applyform.core.errors import (
    ApplicationClosedError,
    ApplicationFormError,
    FieldTypeError,
    InvalidFieldValueError,
    SubmissionInFlightError,
    SubmissionNotReadyError,
    UnknownFieldError,
)
from applyform.core.logging import get_logger
from applyform.forms.state import (
    ApplicationDraft,
    Attachment,
    FormState,
    SessionState,
    SubmittedApplication,
)
from applyform.services.branching import (
    LIST_FIELD_OPTIONS,
    LIST_FIELDS,
    YES_NO_FIELDS,
    active_fields,
    empty_answers,
    resolve_group,
)
from applyform.services.validation import validate_step

logger = get_logger(__name__)

TEXT_FIELDS = {
    "fullName": "full_name",
    "email": "email",
    "phone": "phone",
    "fieldOfStudy": "field_of_study",
}
DOCUMENT_SLOTS = {
    "coverLetter": "cover_letter",
    "resume": "resume",
}


def start_session() -> FormState:
    return FormState()


def _require_open(state: SessionState) -> FormState:
    if isinstance(state, SubmittedApplication):
        raise ApplicationClosedError("Application has already been submitted")
    return state


def _without_error(errors: dict[str, str], name: str) -> dict[str, str]:
    return {key: msg for key, msg in errors.items() if key != name}


def _require_str(name: str, value: Any) -> str:
    if not isinstance(value, str):
        raise FieldTypeError(f"{name} expects a string, got {type(value).__name__}")
    return value


def _require_choice(name: str, value: Any, enum_cls):
    text = _require_str(name, value)
    try:
        return enum_cls(text)
    except ValueError as exc:
        raise InvalidFieldValueError(f"{text!r} is not a valid option for {name}") from exc


def _require_options(name: str, value: Any) -> tuple[str, ...]:
    if not isinstance(value, (list, tuple)) or not all(isinstance(item, str) for item in value):
        raise FieldTypeError(f"{name} expects a list of strings")
    allowed = LIST_FIELD_OPTIONS[name]
    for item in value:
        if item not in allowed:
            raise InvalidFieldValueError(f"{item!r} is not a valid option for {name}")
    return tuple(dict.fromkeys(value))


def _with_position(draft: ApplicationDraft, position: Position) -> ApplicationDraft:
    previous_group = resolve_group(draft.position)
    next_group = resolve_group(position)
    update: dict[str, Any] = {"position": position}
    # Answers only survive a position change within the same role group.
    if next_group != previous_group or draft.role is None:
        update["role"] = empty_answers(next_group)
    return draft.model_copy(update=update)


def _with_role_value(draft: ApplicationDraft, name: str, value: Any) -> ApplicationDraft:
    fields = active_fields(draft.position)
    if name not in fields:
        raise UnknownFieldError(f"{name} is not a question for the selected position")

    if name in LIST_FIELDS:
        coerced: Any = _require_options(name, value)
    elif name in YES_NO_FIELDS:
        coerced = _require_choice(name, value, YesNo)
    else:
        coerced = _require_str(name, value)

    answers = draft.role or empty_answers(resolve_group(draft.position))
    answers = answers.model_copy(update={fields[name]: coerced})
    return draft.model_copy(update={"role": answers})


def set_field(state: SessionState, name: str, value: Any) -> FormState:
    """Overwrite one field and drop its stale error message.

    Text and choice fields are replaced outright, list fields are replaced as a
    whole. Documents go through ``attach_file`` instead.
    """
    state = _require_open(state)
    draft = state.draft

    if name in TEXT_FIELDS:
        draft = draft.model_copy(update={TEXT_FIELDS[name]: _require_str(name, value)})
    elif name == "education":
        draft = draft.model_copy(update={"education": _require_choice(name, value, EducationLevel)})
    elif name == "position":
        draft = _with_position(draft, _require_choice(name, value, Position))
    elif name in DOCUMENT_SLOTS:
        raise UnknownFieldError(f"{name} is a document slot; attach a file instead")
    else:
        draft = _with_role_value(draft, name, value)

    return state.model_copy(update={"draft": draft, "errors": _without_error(state.errors, name)})


def toggle_option(state: SessionState, name: str, value: str, checked: bool) -> FormState:
    state = _require_open(state)
    if name not in LIST_FIELDS:
        raise UnknownFieldError(f"{name} is not a multi-select field")
    fields = active_fields(state.draft.position)
    if name not in fields:
        raise UnknownFieldError(f"{name} is not a question for the selected position")

    role = state.draft.role or empty_answers(resolve_group(state.draft.position))
    current = list(getattr(role, fields[name]))
    if checked and value not in current:
        current.append(value)
    elif not checked:
        current = [item for item in current if item != value]
    return set_field(state, name, current)


def attach_file(state: SessionState, slot: str, attachment: Attachment) -> FormState:
    state = _require_open(state)
    if slot not in DOCUMENT_SLOTS:
        raise UnknownFieldError(f"{slot} is not a document slot")
    draft = state.draft.model_copy(update={DOCUMENT_SLOTS[slot]: attachment})
    return state.model_copy(update={"draft": draft, "errors": _without_error(state.errors, slot)})


def reject_file(state: SessionState, slot: str, message: str) -> FormState:
    """Record a rejected pick; whatever was already in the slot stays."""
    state = _require_open(state)
    if slot not in DOCUMENT_SLOTS:
        raise UnknownFieldError(f"{slot} is not a document slot")
    return state.model_copy(update={"errors": {**state.errors, slot: message}})


def _require_settled(state: SessionState) -> FormState:
    state = _require_open(state)
    if state.submission == SubmissionStatus.SUBMITTING:
        raise SubmissionInFlightError("Cannot change step while the application is being submitted")
    return state


def next_step(state: SessionState) -> FormState:
    state = _require_settled(state)
    if state.step == FormStep.WELCOME:
        return state.model_copy(update={"step": FormStep.PERSONAL_INFO})

    errors = validate_step(state.step, state.draft)
    if errors:
        logger.info(
            "Step blocked by validation",
            extra={"extra": {"step": int(state.step), "fields": sorted(errors)}},
        )
        return state.model_copy(update={"errors": errors})

    step = FormStep(min(state.step + 1, FormStep.REVIEW))
    return state.model_copy(update={"step": step, "errors": {}})


def previous_step(state: SessionState) -> FormState:
    state = _require_settled(state)
    return state.model_copy(update={"step": FormStep(max(state.step - 1, FormStep.WELCOME))})


def begin_submit(state: SessionState) -> FormState:
    """Claim the in-flight slot if the review step passes validation.

    The returned state is ``SUBMITTING`` only when the caller should send the
    request; otherwise it carries the validation errors and nothing is sent.
    """
    state = _require_open(state)
    if state.submission == SubmissionStatus.SUBMITTING:
        raise SubmissionInFlightError("A submission is already in progress")
    if state.step != FormStep.REVIEW:
        raise SubmissionNotReadyError("Submission is only available from the review step")

    errors = validate_step(FormStep.REVIEW, state.draft)
    if errors:
        return state.model_copy(update={"errors": errors, "notice": None})
    return state.model_copy(
        update={"errors": {}, "submission": SubmissionStatus.SUBMITTING, "notice": None}
    )


def finish_submit(state: SessionState, result) -> SessionState:
    state = _require_open(state)
    if state.submission != SubmissionStatus.SUBMITTING:
        raise ApplicationFormError("No submission is in progress")

    if result.ok:
        return SubmittedApplication(
            position=state.draft.position,
            submitted_at=datetime.now(timezone.utc),
            response_status=result.status_code,
        )
    return state.model_copy(
        update={"step": FormStep.REVIEW, "submission": SubmissionStatus.FAILED, "notice": result.notice}
    )
