import re

from applyform.core.enums import FormStep
from applyform.forms.state import ApplicationDraft
from applyform.services.branching import GROUP_FIELDS, GROUP_MODELS, LIST_FIELDS, YES_NO_FIELDS, resolve_group

# Shape check only: something@something.something, matched anywhere in the value.
EMAIL_PATTERN = re.compile(r"\S+@\S+\.\S+")

REQUIRED_MESSAGE = "This field is required"

ROLE_FIELD_MESSAGES = {
    "subjects": "Please select at least one subject",
    "gradeLevels": "Please select at least one grade level",
    "curriculum": "Please select at least one curriculum option",
    "lessonPlans": "Please select an option",
}


def _blank(value: str | None) -> bool:
    return not (value or "").strip()


def validate_personal_info(draft: ApplicationDraft) -> dict[str, str]:
    errors: dict[str, str] = {}
    if _blank(draft.full_name):
        errors["fullName"] = "Full name is required"
    if _blank(draft.email):
        errors["email"] = "Email is required"
    elif not EMAIL_PATTERN.search(draft.email):
        errors["email"] = "Invalid email format"
    if _blank(draft.phone):
        errors["phone"] = "Phone number is required"
    if not draft.education:
        errors["education"] = "Education level is required"
    if _blank(draft.field_of_study):
        errors["fieldOfStudy"] = "Field of study is required"
    if not draft.position:
        errors["position"] = "Position is required"
    return errors


def validate_role_answers(draft: ApplicationDraft) -> dict[str, str]:
    group = resolve_group(draft.position)
    if group is None:
        return {}

    answers = draft.role
    if answers is None or answers.group != group:
        answers = GROUP_MODELS[group]()

    errors: dict[str, str] = {}
    for alias, attr in GROUP_FIELDS[group].items():
        value = getattr(answers, attr)
        if alias in LIST_FIELDS:
            missing = not value
        elif alias in YES_NO_FIELDS:
            missing = value is None
        else:
            missing = _blank(value)
        if missing:
            errors[alias] = ROLE_FIELD_MESSAGES.get(alias, REQUIRED_MESSAGE)
    return errors


def validate_documents(draft: ApplicationDraft) -> dict[str, str]:
    errors: dict[str, str] = {}
    if draft.cover_letter is None:
        errors["coverLetter"] = "Cover letter is required"
    if draft.resume is None:
        errors["resume"] = "Resume is required"
    return errors


def validate_step(step: int, draft: ApplicationDraft) -> dict[str, str]:
    """Return the full error set for ``step``; an empty dict means the step passes.

    The review step only re-checks personal info. Role answers and documents are
    checked when the applicant leaves those steps, not again at submit time.
    """
    step = FormStep(step)
    if step == FormStep.PERSONAL_INFO:
        return validate_personal_info(draft)
    if step == FormStep.ROLE_QUESTIONS:
        return validate_role_answers(draft)
    if step == FormStep.DOCUMENTS:
        return validate_documents(draft)
    if step == FormStep.REVIEW:
        return validate_personal_info(draft)
    return {}
