class ApplicationFormError(ValueError):
    """Base class for misuse of the application form state machine."""


class UnknownFieldError(ApplicationFormError):
    pass


class FieldTypeError(ApplicationFormError):
    pass


class InvalidFieldValueError(ApplicationFormError):
    pass


class ApplicationClosedError(ApplicationFormError):
    pass


class SubmissionInFlightError(ApplicationFormError):
    pass


class SubmissionNotReadyError(ApplicationFormError):
    pass


class AttachmentRejectedError(ApplicationFormError):
    pass


class UnsupportedFileTypeError(AttachmentRejectedError):
    pass


class AttachmentTooLargeError(AttachmentRejectedError):
    pass


class SessionNotFoundError(LookupError):
    pass
