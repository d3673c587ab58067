from datetime import datetime, timezone

import pytest
import requests

from conftest import http_error, make_response
from logic.intake import CREATING, IDLE, UPLOAD_ERROR, UPLOADING, IntakeModel

NOW = datetime(2024, 1, 15, 9, 30, tzinfo=timezone.utc)


def fill(model):
    model.set_field("sender_name", "Mission Doha")
    model.set_field("subject", "Medical evacuation")
    model.set_field("country_of_origin", "Qatar")
    model.set_field("distressed_person_name", "Jane Wanjiku")
    model.set_field("nature_of_case", "Emergency")
    model.set_field("case_details", "Hospitalised, needs travel documents")


@pytest.fixture
def model(fake_api, navigator):
    fake_api.will("create_case", make_response(201, {"id": 42}))
    m = IntakeModel(fake_api, navigator, now=NOW)
    fill(m)
    return m


@pytest.mark.unit
class TestValidation:
    def test_missing_fields_block_submit(self, fake_api, navigator):
        m = IntakeModel(fake_api, navigator)
        m.set_field("sender_name", "Mission Doha")

        assert m.submit() is False

        assert m.error == "Please fill in all required fields"
        assert fake_api.calls == []
        assert navigator.routes == []

    def test_whitespace_counts_as_missing(self, model):
        model.set_field("subject", "   ")

        assert model.missing_fields() == ["subject"]

    def test_nature_must_be_known(self, model):
        model.set_field("nature_of_case", "Whenever")

        assert model.missing_fields() == ["nature_of_case"]

    def test_unknown_field(self, model):
        with pytest.raises(KeyError):
            model.set_field("priority", "high")


@pytest.mark.unit
class TestSubmit:
    def test_without_files(self, model, fake_api, navigator):
        assert model.submit() is True

        assert len(fake_api.calls_to("create_case")) == 1
        assert fake_api.calls_to("upload_document") == []
        assert navigator.routes == ["/cases/42"]
        assert model.phase == IDLE

    def test_payload(self, model, fake_api):
        model.set_field("subject", "  Medical evacuation  ")

        model.submit()

        payload = fake_api.calls_to("create_case")[0][1]
        assert payload["subject"] == "Medical evacuation"
        assert payload["status"] == "Pending"
        assert payload["stage"] == "Front Office Receipt"
        assert payload["receiving_date"] == NOW.isoformat()
        assert payload["nature_of_case"] == "Emergency"

    def test_uploads_in_selection_order(self, model, fake_api, navigator):
        model.set_files(["a.pdf", "b.png", "c.docx"])

        assert model.submit() is True

        assert fake_api.calls_to("upload_document") == [
            ("upload_document", 42, "a.pdf"),
            ("upload_document", 42, "b.png"),
            ("upload_document", 42, "c.docx"),
        ]
        assert [c[0] for c in fake_api.calls] == ["create_case"] + ["upload_document"] * 3
        assert model.upload_progress == (3, 3)
        assert navigator.routes == ["/cases/42"]

    def test_first_failed_upload_stops_the_rest(self, model, fake_api, navigator):
        fake_api.will("upload_document", make_response(201, {}), http_error(500, {"message": "Disk full"}))
        model.set_files(["a.pdf", "b.png", "c.docx"])

        assert model.submit() is False

        assert [c[2] for c in fake_api.calls_to("upload_document")] == ["a.pdf", "b.png"]
        assert model.upload_error == UPLOAD_ERROR
        assert model.error == "Disk full"
        # the created case is left on the server
        assert fake_api.calls_to("delete_case") == []
        assert navigator.routes == []
        assert model.phase == IDLE

    def test_create_failure(self, fake_api, navigator):
        fake_api.will("create_case", http_error(400, {"message": "Subject too long"}))
        m = IntakeModel(fake_api, navigator)
        fill(m)
        m.set_files(["a.pdf"])

        assert m.submit() is False

        assert m.error == "Subject too long"
        assert fake_api.calls_to("upload_document") == []
        assert navigator.routes == []

    def test_create_without_id(self, fake_api, navigator):
        fake_api.will("create_case", make_response(201, {"ok": True}))
        m = IntakeModel(fake_api, navigator)
        fill(m)

        assert m.submit() is False

        assert m.error == "Error creating case"
        assert navigator.routes == []

    def test_connection_failure_on_create(self, fake_api, navigator):
        fake_api.will("create_case", requests.ConnectionError("refused"))
        m = IntakeModel(fake_api, navigator)
        fill(m)

        m.submit()

        assert m.error == "Error creating case"

    def test_resubmit_clears_previous_errors(self, model, fake_api, navigator):
        fake_api.will("upload_document", http_error(500), make_response(201, {}))
        model.set_files(["a.pdf"])
        model.submit()

        assert model.submit() is True

        assert model.error == ""
        assert model.upload_error == ""


@pytest.mark.unit
class TestProgressLabel:
    def test_label_follows_phase(self, model, fake_api):
        seen = []
        fake_api.before_call = lambda name, args: seen.append((name, model.phase, model.submit_label))
        model.set_files(["a.pdf", "b.png"])

        model.submit()

        assert seen == [
            ("create_case", CREATING, "Creating case..."),
            ("upload_document", UPLOADING, "Uploading documents (0/2)..."),
            ("upload_document", UPLOADING, "Uploading documents (1/2)..."),
        ]
        assert model.submit_label == "Submit Case"
        assert not model.busy
