"""Shared fakes for the unit tests.

Nothing here opens a socket or a Tk window: the API client is driven
through a recording ``requests.Session`` and the view models through a
recording fake of the API client.
"""

import json

import pytest
import requests


def make_response(status=200, body=None, raw=None, url="http://backend.test/api"):
    response = requests.Response()
    response.status_code = status
    response.url = url
    if raw is not None:
        response._content = raw
    elif body is not None:
        response._content = json.dumps(body).encode("utf-8")
        response.headers["Content-Type"] = "application/json"
    else:
        response._content = b""
    return response


def http_error(status, body=None, raw=None):
    response = make_response(status, body=body, raw=raw)
    return requests.HTTPError(f"{status} Error", response=response)


class RecordingSession(requests.Session):
    """requests.Session that records outgoing calls and replays canned responses."""

    def __init__(self, responses=None):
        super().__init__()
        self.sent = []
        self.responses = list(responses or [])

    def request(self, method, url, **kwargs):
        self.sent.append((method, url, kwargs))
        if self.responses:
            return self.responses.pop(0)
        return make_response(200, {})


class FakeApi:
    """
    Stand-in for ApiClient.

    ``will(name, *outcomes)`` queues responses or exceptions for an
    operation; the last queued outcome repeats once the others are used.
    """

    def __init__(self):
        self.calls = []
        self.outcomes = {}
        self.before_call = None

    def will(self, name, *outcomes):
        self.outcomes.setdefault(name, []).extend(outcomes)

    def calls_to(self, name):
        return [c for c in self.calls if c[0] == name]

    def _call(self, name, *args):
        self.calls.append((name,) + args)
        if self.before_call is not None:
            self.before_call(name, args)
        queued = self.outcomes.get(name)
        if not queued:
            outcome = make_response(200, {})
        elif len(queued) > 1:
            outcome = queued.pop(0)
        else:
            outcome = queued[0]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def list_cases(self, page=1, limit=10):
        return self._call("list_cases", page, limit)

    def get_case(self, case_id):
        return self._call("get_case", case_id)

    def create_case(self, case_data):
        return self._call("create_case", case_data)

    def delete_case(self, case_id):
        return self._call("delete_case", case_id)

    def update_status(self, case_id, status, stage=None):
        return self._call("update_status", case_id, status)

    def add_progress_note(self, case_id, note):
        return self._call("add_progress_note", case_id, note)

    def upload_document(self, case_id, path):
        return self._call("upload_document", case_id, path)

    def dashboard_stats(self):
        return self._call("dashboard_stats")

    def logout(self):
        self.calls.append(("logout",))


class Navigator:
    def __init__(self):
        self.routes = []

    def __call__(self, route):
        self.routes.append(route)


@pytest.fixture
def fake_api():
    return FakeApi()


@pytest.fixture
def navigator():
    return Navigator()
