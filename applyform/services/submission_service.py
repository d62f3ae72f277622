from typing import Any

import httpx
from pydantic import BaseModel

from applyform.core.config import get_settings
from applyform.core.logging import get_logger
from applyform.forms.state import ApplicationDraft
from applyform.services.branching import LIST_FIELDS, active_fields

logger = get_logger(__name__)

REJECTED_NOTICE = "Something went wrong. Please try again."
NETWORK_NOTICE = "Error submitting form."
LIST_SEPARATOR = ", "


class SubmissionResult(BaseModel):
    status: str
    reason: str | None = None
    status_code: int | None = None
    notice: str | None = None
    response: Any = None

    @property
    def ok(self) -> bool:
        return self.status == "submitted"


def _text(value: Any) -> str:
    if value is None:
        return ""
    if hasattr(value, "value"):
        return str(value.value)
    return str(value)


def build_submission_fields(draft: ApplicationDraft) -> dict[str, str]:
    """Universal fields plus the active role group's answers, ready for multipart.

    Lists are flattened with ", ". Empty values are left out entirely.
    """
    fields: dict[str, str] = {
        "fullName": draft.full_name,
        "email": draft.email,
        "phone": draft.phone,
        "education": _text(draft.education),
        "fieldOfStudy": draft.field_of_study,
        "position": _text(draft.position),
    }

    if draft.role is not None:
        for name, attr in active_fields(draft.position).items():
            value = getattr(draft.role, attr)
            if name in LIST_FIELDS:
                fields[name] = LIST_SEPARATOR.join(value)
            else:
                fields[name] = _text(value)

    return {name: value for name, value in fields.items() if value}


def build_submission_files(draft: ApplicationDraft) -> dict[str, tuple[str, bytes, str]]:
    files: dict[str, tuple[str, bytes, str]] = {}
    if draft.cover_letter is not None:
        files["coverLetter"] = (
            draft.cover_letter.filename,
            draft.cover_letter.content,
            draft.cover_letter.content_type,
        )
    if draft.resume is not None:
        files["resume"] = (draft.resume.filename, draft.resume.content, draft.resume.content_type)
    return files


def _response_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text[:300]


def _post(
    client: httpx.Client,
    endpoint: str,
    fields: dict[str, str],
    files: dict[str, tuple[str, bytes, str]],
) -> httpx.Response:
    return client.post(
        endpoint,
        data=fields,
        files=files,
        headers={"Accept": "application/json"},
    )


def submit_application(
    draft: ApplicationDraft,
    *,
    endpoint: str,
    mode: str = "http",
    timeout_seconds: float | None = None,
    client: httpx.Client | None = None,
) -> SubmissionResult:
    """Send the application as one multipart POST. Never retries."""
    fields = build_submission_fields(draft)
    files = build_submission_files(draft)
    log_extra = {"endpoint": endpoint, "position": fields.get("position"), "fields": sorted(fields)}

    if mode == "mock":
        logger.info("Mock submission accepted", extra={"extra": log_extra})
        return SubmissionResult(status="submitted", reason="mock_mode")

    try:
        if client is not None:
            response = _post(client, endpoint, fields, files)
        else:
            client_kwargs: dict[str, Any] = {}
            if timeout_seconds is not None:
                client_kwargs["timeout"] = timeout_seconds
            with httpx.Client(**client_kwargs) as owned_client:
                response = _post(owned_client, endpoint, fields, files)
    except httpx.HTTPError as exc:
        logger.error(
            "Submission network error",
            extra={"extra": {**log_extra, "error": f"{type(exc).__name__}: {exc}"}},
        )
        return SubmissionResult(
            status="failed",
            reason=f"network:{type(exc).__name__}",
            notice=NETWORK_NOTICE,
        )

    if response.is_success:
        logger.info(
            "Submission accepted",
            extra={"extra": {**log_extra, "status_code": response.status_code}},
        )
        return SubmissionResult(
            status="submitted",
            status_code=response.status_code,
            response=_response_body(response),
        )

    body = _response_body(response)
    logger.error(
        "Submission rejected",
        extra={"extra": {**log_extra, "status_code": response.status_code, "response": body}},
    )
    return SubmissionResult(
        status="rejected",
        reason=f"http_{response.status_code}",
        status_code=response.status_code,
        notice=REJECTED_NOTICE,
        response=body,
    )


def default_submission_config() -> dict[str, Any]:
    settings = get_settings()
    return {
        "endpoint": settings.submission_endpoint,
        "mode": settings.submission_mode,
        "timeout_seconds": settings.submission_timeout_seconds,
    }
