import pytest
import requests

from conftest import http_error, make_response
from logic.case_detail import ERROR, LOADED, CaseDetailModel

CASE = {
    "id": 7,
    "reference_number": "DC-2024-007",
    "status": "Pending",
    "stage": "Front Office Receipt",
    "case_details": "Citizen detained abroad",
    "progress_notes": [],
}


@pytest.fixture
def model(fake_api):
    fake_api.will("get_case", make_response(200, CASE))
    m = CaseDetailModel(fake_api, 7)
    m.load()
    return m


@pytest.mark.unit
class TestLoad:
    def test_loaded(self, model, fake_api):
        assert model.state == LOADED
        assert model.case.reference_number == "DC-2024-007"
        assert model.case.case_details == "Citizen detained abroad"
        assert fake_api.calls_to("get_case") == [("get_case", 7)]

    def test_empty_body_is_not_found(self, fake_api):
        fake_api.will("get_case", make_response(200))
        m = CaseDetailModel(fake_api, 99)

        m.load()

        assert m.state == LOADED
        assert m.not_found

    def test_failure_is_error_state(self, fake_api):
        fake_api.will("get_case", http_error(404, {"message": "Case not found"}))
        m = CaseDetailModel(fake_api, 99)

        m.load()

        assert m.state == ERROR
        assert m.error == "Case not found"
        assert not m.not_found

    def test_failure_without_message(self, fake_api):
        fake_api.will("get_case", requests.Timeout("slow"))
        m = CaseDetailModel(fake_api, 7)

        m.load()

        assert m.error == "Failed to fetch case details"


@pytest.mark.unit
class TestStatusUpdate:
    def test_blank_input_sends_nothing(self, model, fake_api):
        model.status_input = "   "

        assert not model.can_submit_status
        assert model.submit_status() is False
        assert fake_api.calls_to("update_status") == []

    def test_success_clears_input_and_refetches(self, model, fake_api):
        model.status_input = "  In Progress "

        assert model.submit_status() is True

        assert fake_api.calls_to("update_status") == [("update_status", 7, "In Progress")]
        assert len(fake_api.calls_to("get_case")) == 2
        assert model.status_input == ""
        assert model.action_error == ""

    def test_failure_keeps_input_and_case(self, model, fake_api):
        fake_api.will("update_status", http_error(400, {"message": "Invalid status"}))
        model.status_input = "Bogus"

        assert model.submit_status() is False

        assert model.status_input == "Bogus"
        assert model.action_error == "Invalid status"
        assert model.state == LOADED
        assert model.case is not None
        assert len(fake_api.calls_to("get_case")) == 1

    def test_failure_default_message(self, model, fake_api):
        fake_api.will("update_status", requests.ConnectionError("down"))
        model.status_input = "Closed"

        model.submit_status()

        assert model.action_error == "Failed to update status"


@pytest.mark.unit
class TestProgressNote:
    def test_blank_note_sends_nothing(self, model, fake_api):
        model.note_input = "\t\n"

        assert model.submit_note() is False
        assert fake_api.calls_to("add_progress_note") == []

    def test_note_is_added_then_case_refetched(self, fake_api):
        with_note = dict(CASE, progress_notes=[
            {"note": "Called family", "created_at": "2024-01-15T09:30:00Z"},
        ])
        fake_api.will("get_case", make_response(200, CASE), make_response(200, with_note))
        m = CaseDetailModel(fake_api, 7)
        m.load()
        m.note_input = "Called family"

        assert m.submit_note() is True

        assert [c[0] for c in fake_api.calls] == ["get_case", "add_progress_note", "get_case"]
        assert fake_api.calls_to("add_progress_note") == [("add_progress_note", 7, {"note": "Called family"})]
        assert m.note_input == ""
        assert [n.note for n in m.case.progress_notes] == ["Called family"]
        assert m.case.progress_notes[0].created_display == "15/01/2024, 12:30:00"

    def test_failure_keeps_note(self, model, fake_api):
        fake_api.will("add_progress_note", requests.ConnectionError("down"))
        model.note_input = "Called family"

        assert model.submit_note() is False

        assert model.note_input == "Called family"
        assert model.action_error == "Failed to add note"

    def test_success_clears_previous_action_error(self, model, fake_api):
        fake_api.will("add_progress_note", requests.ConnectionError("down"), make_response(201, {}))
        model.note_input = "Called family"
        model.submit_note()

        assert model.submit_note() is True

        assert model.action_error == ""


@pytest.mark.unit
class TestOneSubmissionAtATime:
    def test_second_claim_is_refused(self, model):
        model.set_inputs("", "Called family")

        assert model.claim_submit() is True
        assert model.claim_submit() is False
        assert not model.can_submit_note

    def test_inputs_frozen_while_submitting(self, model):
        model.set_inputs("", "Called family")
        model.claim_submit()

        model.set_inputs("", "Called family again")

        assert model.note_input == "Called family"

    def test_double_submit_posts_once(self, model, fake_api):
        model.set_inputs("", "Called family")

        # two quick Enters: only the first gets a worker
        started = [model.can_submit_note and model.claim_submit() for _ in range(2)]
        assert started == [True, False]
        model.submit_note()
        model.release_submit()

        assert len(fake_api.calls_to("add_progress_note")) == 1
        assert len(fake_api.calls_to("get_case")) == 2
        assert model.note_input == ""
        assert not model.can_submit_note

    def test_release_allows_next_submission(self, model):
        model.set_inputs("Closed", "")
        model.claim_submit()

        model.release_submit()

        assert model.can_submit_status
        assert model.claim_submit() is True

    def test_no_claim_before_case_is_loaded(self, fake_api):
        m = CaseDetailModel(fake_api, 7)

        assert m.claim_submit() is False
