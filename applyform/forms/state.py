from datetime import datetime
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from applyform.core.enums import EducationLevel, FormStep, Position, RoleGroup, SubmissionStatus, YesNo

# Field names on the wire (and in error maps) are the camelCase aliases.
_FORM_MODEL_CONFIG = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class Attachment(BaseModel):
    model_config = _FORM_MODEL_CONFIG

    filename: str
    size: int
    content_type: str = "application/octet-stream"
    content: bytes = Field(default=b"", repr=False)


class TeacherAnswers(BaseModel):
    model_config = _FORM_MODEL_CONFIG

    group: Literal[RoleGroup.TEACHER] = RoleGroup.TEACHER
    teaching_qualification: YesNo | None = None
    teaching_experience: str = ""
    subjects: tuple[str, ...] = ()
    grade_levels: tuple[str, ...] = ()
    curriculum: tuple[str, ...] = ()
    classroom_management: str = ""
    engage_students: str = ""
    lesson_plans: YesNo | None = None
    availability: str = ""


class BusAnswers(BaseModel):
    model_config = _FORM_MODEL_CONFIG

    group: Literal[RoleGroup.BUS] = RoleGroup.BUS
    bus_assistant_role: str = ""
    child_experience: str = ""
    morning_afternoon_available: str = ""
    child_safety: str = ""


class CleanerAnswers(BaseModel):
    model_config = _FORM_MODEL_CONFIG

    group: Literal[RoleGroup.CLEANER] = RoleGroup.CLEANER
    school_environment_experience: str = ""
    lives_near_school: str = ""
    start_availability: str = ""


class MinderAnswers(BaseModel):
    model_config = _FORM_MODEL_CONFIG

    group: Literal[RoleGroup.MINDER] = RoleGroup.MINDER
    child_minding_experience: str = ""
    outdoor_safety: str = ""
    work_with_teacher: str = ""
    multiple_children: str = ""


RoleAnswers = Annotated[
    Union[TeacherAnswers, BusAnswers, CleanerAnswers, MinderAnswers],
    Field(discriminator="group"),
]


class ApplicationDraft(BaseModel):
    model_config = _FORM_MODEL_CONFIG

    full_name: str = ""
    email: str = ""
    phone: str = ""
    education: EducationLevel | None = None
    field_of_study: str = ""
    position: Position | None = None
    role: RoleAnswers | None = None
    cover_letter: Attachment | None = None
    resume: Attachment | None = None


class FormState(BaseModel):
    """An open application session.

    Every transition in ``applyform.services.form_machine`` returns a new
    instance; ``errors`` holds the result of the latest validation pass keyed by
    wire field name, minus any field edited since.
    """

    model_config = ConfigDict(frozen=True)

    step: FormStep = FormStep.WELCOME
    draft: ApplicationDraft = Field(default_factory=ApplicationDraft)
    errors: dict[str, str] = Field(default_factory=dict)
    submission: SubmissionStatus = SubmissionStatus.IDLE
    notice: str | None = None


class SubmittedApplication(BaseModel):
    """Terminal session state. The draft is discarded once the backend accepts it."""

    model_config = ConfigDict(frozen=True)

    submission: Literal[SubmissionStatus.SUCCEEDED] = SubmissionStatus.SUCCEEDED
    position: Position | None = None
    submitted_at: datetime
    response_status: int | None = None


SessionState = Union[FormState, SubmittedApplication]


def wire_fields(model: type[BaseModel]) -> dict[str, str]:
    """Map wire (alias) names to attribute names, skipping the union tag."""
    return {
        (info.alias or name): name
        for name, info in model.model_fields.items()
        if name != "group"
    }
