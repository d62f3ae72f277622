import pytest

from applyform.core.config import get_settings
from applyform.core.enums import FormStep, SubmissionStatus
from applyform.core.errors import SessionNotFoundError, SubmissionInFlightError
from applyform.forms.state import ApplicationDraft, FormState, SubmittedApplication
from applyform.services.form_machine import next_step, previous_step, set_field
from applyform.services.session_store import SessionStore
from applyform.services.submission_service import NETWORK_NOTICE, REJECTED_NOTICE, SubmissionResult

READY_DRAFT = ApplicationDraft(
    full_name="Jane Doe",
    email="jane@x.com",
    phone="555-0100",
    education="BACHELORS DEGREE",
    field_of_study="Education",
    position="School Cleaner",
)


def _store_at_review(draft: ApplicationDraft = READY_DRAFT):
    store = SessionStore()
    session = store.create()
    session.state = FormState(step=FormStep.REVIEW, draft=draft)
    return store, session


def test_get_unknown_session_raises():
    with pytest.raises(SessionNotFoundError):
        SessionStore().get("missing")


def test_apply_replaces_session_state():
    store = SessionStore()
    session = store.create()

    state = store.apply(session.id, set_field, "fullName", "Jane Doe")

    assert store.get_state(session.id) is state
    assert state.draft.full_name == "Jane Doe"


def test_discard_forgets_session():
    store = SessionStore()
    session = store.create()

    store.discard(session.id)

    with pytest.raises(SessionNotFoundError):
        store.get(session.id)


def test_resubmit_while_in_flight_sends_nothing():
    store, session = _store_at_review()
    sent = []
    nested = {}

    def sender(draft):
        sent.append(draft)
        with pytest.raises(SubmissionInFlightError):
            store.submit(session.id, sender)
        nested["status"] = store.get(session.id).state.submission
        return SubmissionResult(status="submitted", status_code=200)

    state = store.submit(session.id, sender)

    assert len(sent) == 1
    assert nested["status"] == SubmissionStatus.SUBMITTING
    assert isinstance(state, SubmittedApplication)


def test_fields_stay_editable_while_in_flight():
    store, session = _store_at_review()

    def sender(draft):
        store.apply(session.id, set_field, "phone", "555-0199")
        return SubmissionResult(status="rejected", reason="http_500", status_code=500, notice=REJECTED_NOTICE)

    state = store.submit(session.id, sender)

    assert state.submission == SubmissionStatus.FAILED
    assert state.draft.phone == "555-0199"


def test_guard_clears_after_failure_and_retry_sends_again():
    store, session = _store_at_review()
    outcomes = [
        SubmissionResult(status="failed", reason="network:ConnectError", notice=NETWORK_NOTICE),
        SubmissionResult(status="submitted", status_code=200),
    ]
    calls = {"count": 0}

    def sender(draft):
        calls["count"] += 1
        return outcomes[calls["count"] - 1]

    first = store.submit(session.id, sender)
    assert first.submission == SubmissionStatus.FAILED
    assert first.step == FormStep.REVIEW

    second = store.submit(session.id, sender)
    assert calls["count"] == 2
    assert isinstance(second, SubmittedApplication)


def test_guard_clears_when_sender_raises():
    store, session = _store_at_review()

    def sender(draft):
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        store.submit(session.id, sender)

    state = store.get(session.id).state
    assert state.submission == SubmissionStatus.FAILED
    assert state.notice == NETWORK_NOTICE


def test_invalid_review_never_calls_sender():
    store, session = _store_at_review(READY_DRAFT.model_copy(update={"email": "abc"}))

    def sender(draft):
        raise AssertionError("validation should have blocked the request")

    state = store.submit(session.id, sender)

    assert state.submission == SubmissionStatus.IDLE
    assert state.errors == {"email": "Invalid email format"}


def test_step_changes_refused_while_in_flight_and_failure_stays_on_review():
    store, session = _store_at_review()
    refused = []

    def sender(draft):
        for transition in (previous_step, next_step):
            with pytest.raises(SubmissionInFlightError):
                store.apply(session.id, transition)
            refused.append(transition.__name__)
        return SubmissionResult(status="failed", reason="network:ConnectError", notice=NETWORK_NOTICE)

    state = store.submit(session.id, sender)

    assert refused == ["previous_step", "next_step"]
    assert state.step == FormStep.REVIEW
    assert state.submission == SubmissionStatus.FAILED

    retry = store.submit(session.id, lambda draft: SubmissionResult(status="submitted", status_code=200))
    assert isinstance(retry, SubmittedApplication)


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def test_idle_sessions_are_evicted_after_ttl():
    clock = FakeClock()
    store = SessionStore(ttl_seconds=60, clock=clock)
    stale = store.create()
    clock.now += 30
    fresh = store.create()

    clock.now += 45
    store.create()

    assert len(store) == 2
    with pytest.raises(SessionNotFoundError):
        store.get(stale.id)
    assert store.get(fresh.id).id == fresh.id


def test_access_keeps_a_session_alive():
    clock = FakeClock()
    store = SessionStore(ttl_seconds=60, clock=clock)
    session = store.create()

    for _ in range(5):
        clock.now += 50
        store.apply(session.id, set_field, "fullName", "Jane Doe")

    assert store.get_state(session.id).draft.full_name == "Jane Doe"


def test_in_flight_session_survives_ttl():
    clock = FakeClock()
    store = SessionStore(ttl_seconds=60, clock=clock)
    session = store.create()
    session.state = FormState(step=FormStep.REVIEW, draft=READY_DRAFT)

    def slow_sender(draft):
        clock.now += 500
        store.create()
        return SubmissionResult(status="submitted", status_code=200)

    state = store.submit(session.id, slow_sender)

    assert isinstance(state, SubmittedApplication)
    assert store.get_state(session.id) is state


def test_ttl_defaults_to_settings(monkeypatch):
    clock = FakeClock()
    store = SessionStore(clock=clock)
    monkeypatch.setattr(get_settings(), "session_ttl_seconds", 10)
    session = store.create()

    clock.now += 11
    store.create()

    with pytest.raises(SessionNotFoundError):
        store.get(session.id)
