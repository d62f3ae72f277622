from typing import Any

from applyform.core.enums import FormStep
from applyform.forms.state import ApplicationDraft
from applyform.services.branching import LIST_FIELDS, active_fields

STEP_TITLES = {
    FormStep.PERSONAL_INFO: "Personal Info",
    FormStep.ROLE_QUESTIONS: "Role Questions",
    FormStep.DOCUMENTS: "Upload Documents",
    FormStep.REVIEW: "Review & Submit",
}

PERSONAL_LABELS = {
    "fullName": "Full Name",
    "email": "Email",
    "phone": "Phone",
    "education": "Education",
    "fieldOfStudy": "Field of Study",
    "position": "Position",
}

ROLE_LABELS = {
    "teachingQualification": "Teaching Qualification",
    "teachingExperience": "Teaching Experience",
    "subjects": "Subjects",
    "gradeLevels": "Grade Levels",
    "curriculum": "Curriculum Experience",
    "classroomManagement": "Classroom Management",
    "engageStudents": "Student Engagement",
    "lessonPlans": "Lesson Plans Experience",
    "availability": "Availability",
    "busAssistantRole": "Understanding of Role",
    "childExperience": "Child Experience",
    "morningAfternoonAvailable": "Morning/Afternoon Availability",
    "childSafety": "Child Safety",
    "schoolEnvironmentExperience": "School Environment Experience",
    "livesNearSchool": "Lives Near School",
    "startAvailability": "Start Availability",
    "childMindingExperience": "Child Minding Experience",
    "outdoorSafety": "Outdoor Safety Approach",
    "workWithTeacher": "Work with Teacher",
    "multipleChildren": "Multiple Children",
}


def progress(step: int) -> str | None:
    step = FormStep(step)
    if step == FormStep.WELCOME:
        return None
    return f"Step {int(step)} of {len(STEP_TITLES)}: {STEP_TITLES[step]}"


def _display(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, tuple):
        return ", ".join(value)
    if hasattr(value, "value"):
        return str(value.value)
    return str(value)


def build_review(draft: ApplicationDraft) -> list[dict[str, Any]]:
    personal_values = {
        "fullName": draft.full_name,
        "email": draft.email,
        "phone": draft.phone,
        "education": draft.education,
        "fieldOfStudy": draft.field_of_study,
        "position": draft.position,
    }
    personal = [
        {"field": name, "label": label, "value": _display(personal_values[name])}
        for name, label in PERSONAL_LABELS.items()
    ]

    role_items = []
    if draft.role is not None:
        for name, attr in active_fields(draft.position).items():
            value = getattr(draft.role, attr)
            role_items.append(
                {
                    "field": name,
                    "label": ROLE_LABELS[name],
                    "value": ", ".join(value) if name in LIST_FIELDS else _display(value),
                }
            )

    documents = [
        {
            "field": "coverLetter",
            "label": "Cover Letter",
            "value": draft.cover_letter.filename if draft.cover_letter else "",
        },
        {
            "field": "resume",
            "label": "Resume",
            "value": draft.resume.filename if draft.resume else "",
        },
    ]

    return [
        {"title": "Personal Information", "items": personal},
        {"title": "Position-Specific Responses", "items": role_items},
        {"title": "Uploaded Documents", "items": documents},
    ]
