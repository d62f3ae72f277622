import enum


class Position(str, enum.Enum):
    SCHOOL_TEACHER = "School Teacher"
    SCHOOL_CLEANER = "School Cleaner"
    BUS_ASSISTANT = "Bus Assistant"
    ASSISTANT_SCHOOL_TEACHER = "Assistant School Teacher"
    CHILD_MINDER = "Child Minder"


class EducationLevel(str, enum.Enum):
    SSCE = "SSCE"
    NCE = "NCE"
    OND = "OND"
    HND = "HND"
    BACHELORS_DEGREE = "BACHELORS DEGREE"
    MASTER_DEGREE = "MASTER DEGREE"


class RoleGroup(str, enum.Enum):
    TEACHER = "teacher"
    BUS = "bus"
    CLEANER = "cleaner"
    MINDER = "minder"


class YesNo(str, enum.Enum):
    YES = "yes"
    NO = "no"


class FormStep(enum.IntEnum):
    WELCOME = 0
    PERSONAL_INFO = 1
    ROLE_QUESTIONS = 2
    DOCUMENTS = 3
    REVIEW = 4


class SubmissionStatus(str, enum.Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
