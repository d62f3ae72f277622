from applyform.core.enums import Position, RoleGroup
from applyform.forms.state import BusAnswers, CleanerAnswers, MinderAnswers, TeacherAnswers, wire_fields

POSITION_GROUPS: dict[Position, RoleGroup] = {
    Position.SCHOOL_TEACHER: RoleGroup.TEACHER,
    Position.ASSISTANT_SCHOOL_TEACHER: RoleGroup.TEACHER,
    Position.BUS_ASSISTANT: RoleGroup.BUS,
    Position.SCHOOL_CLEANER: RoleGroup.CLEANER,
    Position.CHILD_MINDER: RoleGroup.MINDER,
}

GROUP_MODELS = {
    RoleGroup.TEACHER: TeacherAnswers,
    RoleGroup.BUS: BusAnswers,
    RoleGroup.CLEANER: CleanerAnswers,
    RoleGroup.MINDER: MinderAnswers,
}

# Wire field name -> attribute name, in question order.
GROUP_FIELDS: dict[RoleGroup, dict[str, str]] = {
    group: wire_fields(model) for group, model in GROUP_MODELS.items()
}

LIST_FIELDS = frozenset({"subjects", "gradeLevels", "curriculum"})
YES_NO_FIELDS = frozenset({"teachingQualification", "lessonPlans"})

DEFAULT_SECTION_LABEL = "Section 2 of 5"
SECTION_LABELS: dict[Position, str] = {
    Position.SCHOOL_TEACHER: "Section 2 of 5",
    Position.BUS_ASSISTANT: "Section 3 of 5",
    Position.SCHOOL_CLEANER: "Section 4 of 5",
    Position.CHILD_MINDER: "Section 5 of 5",
}

SUBJECT_OPTIONS = (
    "Mathematics",
    "English Language",
    "Science",
    "Social Studies",
    "Arts & Crafts",
    "Music",
    "Physical Education",
)

GRADE_LEVEL_OPTIONS = (
    "Early Years / Pre-K",
    "Kindergarten",
    "Lower Primary (Grades 1–3)",
    "Upper Primary (Grades 4–6)",
)

CURRICULUM_OPTIONS = (
    "British Curriculum (e.g., EYFS, Key Stages, IGCSE, A-Levels)",
    "American Curriculum",
    "Nigerian Curriculum (e.g., UBE, WAEC, NECO)",
    "International Baccalaureate (IB)",
    "Montessori",
    "Cambridge Curriculum",
    "Canadian Curriculum",
    "French Curriculum",
    "No, I haven't worked with any specific curriculum",
)

LIST_FIELD_OPTIONS: dict[str, tuple[str, ...]] = {
    "subjects": SUBJECT_OPTIONS,
    "gradeLevels": GRADE_LEVEL_OPTIONS,
    "curriculum": CURRICULUM_OPTIONS,
}


def resolve_group(position: Position | str | None) -> RoleGroup | None:
    if not position:
        return None
    try:
        return POSITION_GROUPS.get(Position(position))
    except ValueError:
        return None


def section_label(position: Position | str | None) -> str:
    """Heading shown above the role questions; purely cosmetic."""
    try:
        return SECTION_LABELS.get(Position(position), DEFAULT_SECTION_LABEL)
    except ValueError:
        return DEFAULT_SECTION_LABEL


def active_fields(position: Position | str | None) -> dict[str, str]:
    group = resolve_group(position)
    if group is None:
        return {}
    return GROUP_FIELDS[group]


def empty_answers(group: RoleGroup | None):
    if group is None:
        return None
    return GROUP_MODELS[group]()
