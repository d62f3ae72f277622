from applyform.core.enums import Position, RoleGroup
from applyform.forms.state import BusAnswers, TeacherAnswers
from applyform.services.branching import GROUP_FIELDS, empty_answers, resolve_group, section_label


def test_resolve_group_maps_every_position():
    assert resolve_group("School Teacher") == RoleGroup.TEACHER
    assert resolve_group(Position.ASSISTANT_SCHOOL_TEACHER) == RoleGroup.TEACHER
    assert resolve_group("Bus Assistant") == RoleGroup.BUS
    assert resolve_group("School Cleaner") == RoleGroup.CLEANER
    assert resolve_group("Child Minder") == RoleGroup.MINDER


def test_resolve_group_without_position_is_none():
    assert resolve_group(None) is None
    assert resolve_group("") is None
    assert resolve_group("Head Teacher") is None


def test_group_fields_match_question_sets():
    assert list(GROUP_FIELDS[RoleGroup.TEACHER]) == [
        "teachingQualification",
        "teachingExperience",
        "subjects",
        "gradeLevels",
        "curriculum",
        "classroomManagement",
        "engageStudents",
        "lessonPlans",
        "availability",
    ]
    assert list(GROUP_FIELDS[RoleGroup.BUS]) == [
        "busAssistantRole",
        "childExperience",
        "morningAfternoonAvailable",
        "childSafety",
    ]
    assert list(GROUP_FIELDS[RoleGroup.CLEANER]) == [
        "schoolEnvironmentExperience",
        "livesNearSchool",
        "startAvailability",
    ]
    assert list(GROUP_FIELDS[RoleGroup.MINDER]) == [
        "childMindingExperience",
        "outdoorSafety",
        "workWithTeacher",
        "multipleChildren",
    ]


def test_section_label_lookup():
    assert section_label("School Teacher") == "Section 2 of 5"
    assert section_label("Bus Assistant") == "Section 3 of 5"
    assert section_label("School Cleaner") == "Section 4 of 5"
    assert section_label("Child Minder") == "Section 5 of 5"
    # Not in the lookup table, falls back to the default heading.
    assert section_label("Assistant School Teacher") == "Section 2 of 5"
    assert section_label(None) == "Section 2 of 5"


def test_empty_answers_builds_the_group_variant():
    assert isinstance(empty_answers(RoleGroup.TEACHER), TeacherAnswers)
    assert isinstance(empty_answers(RoleGroup.BUS), BusAnswers)
    assert empty_answers(None) is None
