from datetime import datetime
from typing import Any

from pydantic import BaseModel

from applyform.core.enums import SubmissionStatus
from applyform.forms.state import ApplicationDraft, SessionState, SubmittedApplication
from applyform.services.branching import section_label
from applyform.services.review import progress


class FieldValueRequest(BaseModel):
    value: str | list[str]


class OptionToggleRequest(BaseModel):
    value: str
    checked: bool = True


class ApplicationView(BaseModel):
    id: str
    submitted: bool
    submission: SubmissionStatus
    step: int | None = None
    progress: str | None = None
    section_label: str | None = None
    draft: dict[str, Any] | None = None
    errors: dict[str, str] = {}
    notice: str | None = None
    submitted_at: datetime | None = None


class ReviewSection(BaseModel):
    title: str
    items: list[dict[str, str]]


class ReviewResponse(BaseModel):
    id: str
    sections: list[ReviewSection]


def draft_view(draft: ApplicationDraft) -> dict[str, Any]:
    data = draft.model_dump(mode="json", by_alias=True, exclude={"role", "cover_letter", "resume"})
    if draft.role is not None:
        data.update(draft.role.model_dump(mode="json", by_alias=True, exclude={"group"}))
    for slot, attachment in (("coverLetter", draft.cover_letter), ("resume", draft.resume)):
        data[slot] = {"filename": attachment.filename, "size": attachment.size} if attachment else None
    return data


def application_view(session_id: str, state: SessionState) -> ApplicationView:
    if isinstance(state, SubmittedApplication):
        return ApplicationView(
            id=session_id,
            submitted=True,
            submission=state.submission,
            submitted_at=state.submitted_at,
        )

    return ApplicationView(
        id=session_id,
        submitted=False,
        submission=state.submission,
        step=int(state.step),
        progress=progress(state.step),
        section_label=section_label(state.draft.position) if state.draft.position else None,
        draft=draft_view(state.draft),
        errors=dict(state.errors),
        notice=state.notice,
    )
