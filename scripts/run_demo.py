from applyform.core.enums import SubmissionStatus
from applyform.forms.state import SubmittedApplication
from applyform.services.attachments import pick_attachment
from applyform.services.form_machine import attach_file, next_step, set_field
from applyform.services.review import build_review
from applyform.services.session_store import SessionStore
from applyform.services.submission_service import submit_application

PERSONAL_INFO = {
    "fullName": "Jane Doe",
    "email": "jane@x.com",
    "phone": "555-0100",
    "education": "BACHELORS DEGREE",
    "fieldOfStudy": "Education",
    "position": "School Cleaner",
}

CLEANER_ANSWERS = {
    "schoolEnvironmentExperience": "Two years cleaning classrooms at a primary school.",
    "livesNearSchool": "Yes, about ten minutes away.",
    "startAvailability": "Immediately.",
}


def main() -> None:
    store = SessionStore()
    session = store.create()

    store.apply(session.id, next_step)
    for name, value in PERSONAL_INFO.items():
        store.apply(session.id, set_field, name, value)
    store.apply(session.id, next_step)

    for name, value in CLEANER_ANSWERS.items():
        store.apply(session.id, set_field, name, value)
    store.apply(session.id, next_step)

    store.apply(session.id, attach_file, "coverLetter", pick_attachment("cover_letter.pdf", b"%PDF-1.4 cover"))
    store.apply(session.id, attach_file, "resume", pick_attachment("resume.docx", b"PK resume"))
    state = store.apply(session.id, next_step)

    print(f"Reached step {int(state.step)} with errors={state.errors}")
    for section in build_review(state.draft):
        print(section["title"])
        for item in section["items"]:
            print(f"  {item['label']}: {item['value']}")

    state = store.submit(
        session.id,
        lambda draft: submit_application(draft, endpoint="https://example.invalid/form", mode="mock"),
    )
    if isinstance(state, SubmittedApplication):
        print(f"Application submitted at {state.submitted_at.isoformat()}")
    elif state.submission == SubmissionStatus.FAILED:
        print(f"Submission failed: {state.notice}")
    else:
        print(f"Submission blocked: errors={state.errors}")
    print("Demo flow completed.")


if __name__ == "__main__":
    main()
