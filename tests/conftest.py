"""Shared fixtures: test settings, a fake Panopto SOAP gateway and REST API."""
import os
import time
import uuid
from datetime import datetime, timezone

# Settings are read at import time, so configure them before importing the app
RECORDER_A = "11111111-1111-1111-1111-111111111111"
RECORDER_B = "22222222-2222-2222-2222-222222222222"
DEFAULT_FOLDER = "33333333-3333-3333-3333-333333333333"

os.environ.update(
    {
        "PANOPTO_HOSTNAME": "panopto.example.edu",
        "PANOPTO_USERNAME": "svc-account",
        "PANOPTO_PASSWORD": "svc-secret",
        "PANOPTO_DEFAULT_FOLDER": DEFAULT_FOLDER,
        "BASIC_AUTH_USERNAME": "proxy-user",
        "BASIC_AUTH_PASSWORD": "proxy-pass",
        "RECORDERS": (
            f'[{{"id": "{RECORDER_A}", "name": "Lecture Hall A"}},'
            f' {{"id": "{RECORDER_B}", "name": "Lecture Hall B"}}]'
        ),
        "ENVIRONMENT": "test",
    }
)

import httpx
import pytest
from fastapi.testclient import TestClient
from zeep.exceptions import Fault

from panoproxy.dependencies import get_panopto_client
from panoproxy.main import app
from panoproxy.schemas.session import LoginResponse, RemoteRecorder, SessionInfo
from panoproxy.services.panopto import PanoptoClient


class FakeSoapGateway:
    """In-memory stand-in for PanoptoSoapGateway."""

    def __init__(self):
        self.login_calls = 0
        self.login_delay = 0.0
        self.login_error = None
        self.login_response = LoginResponse(
            accepted=True,
            set_cookie=".ASPXAUTH=abc123; path=/; HttpOnly",
            cookies={".ASPXAUTH": "abc123"},
        )
        self.recorders = {}
        self.sessions = {}
        self.failing = set()
        self.calls = []
        self.auth_seen = []
        self.closed = False

    def _call(self, name, auth):
        self.calls.append(name)
        self.auth_seen.append(auth)
        if name in self.failing:
            raise Fault(f"{name} failed")

    def log_on_with_password(self, username, password):
        self.login_calls += 1
        if self.login_delay:
            time.sleep(self.login_delay)
        if self.login_error is not None:
            raise self.login_error
        return self.login_response

    def get_remote_recorders_by_id(self, auth, recorder_ids):
        self._call("get_remote_recorders_by_id", auth)
        return [self.recorders[value] for value in recorder_ids if value in self.recorders]

    def get_sessions_by_id(self, auth, session_ids):
        self._call("get_sessions_by_id", auth)
        return [self.sessions[value].model_copy() for value in session_ids if value in self.sessions]

    def update_recording_time(self, auth, session_id, start, end):
        self._call("update_recording_time", auth)
        session = self.sessions.get(session_id)
        if session is None:
            raise Fault(f"Session {session_id} not found")
        self.sessions[session_id] = session.model_copy(
            update={"startTime": start, "duration": (end - start).total_seconds()}
        )

    def schedule_recording(self, auth, name, folder_id, is_broadcast, start, end, recorder_ids):
        self._call("schedule_recording", auth)
        session_id = uuid.uuid4()
        self.sessions[session_id] = SessionInfo(
            id=session_id,
            name=name,
            folderId=folder_id,
            startTime=start,
            duration=(end - start).total_seconds(),
            remoteRecorderIds=list(recorder_ids),
        )
        return [session_id]

    def add_recorder(self, recorder_id, state="Previewing", sessions=()):
        recorder_id = uuid.UUID(str(recorder_id))
        self.recorders[recorder_id] = RemoteRecorder(
            id=recorder_id,
            name=f"Recorder {recorder_id}",
            state=state,
            scheduledRecordings=[session.id for session in sessions],
        )
        for session in sessions:
            self.sessions[session.id] = session
        return recorder_id

    def close(self):
        self.closed = True


class FakeRestApi:
    """httpx.MockTransport handler for the Panopto 4.1 REST endpoints."""

    def __init__(self):
        self.requests = []
        self.internal_ids = {}
        self.pause_body = '"5a1f8c2e-0d3b-4c57-9e6a-7b8c9d0e1f2a"'
        self.status_code = 200
        self.failing_paths = set()

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.status_code != 200:
            return httpx.Response(self.status_code, text="Server error")

        path = request.url.path
        params = request.url.params
        if any(path.endswith(suffix) for suffix in self.failing_paths):
            return httpx.Response(500, text="Server error")
        if path.endswith("/SessionMetadata"):
            internal_id = self.internal_ids.get(params.get("deliveryid"))
            if internal_id is None:
                return httpx.Response(404, text="Not found")
            return httpx.Response(200, json={"sessionPublicID": internal_id, "Name": "Lecture"})
        if path.endswith("/Pause"):
            return httpx.Response(200, text=self.pause_body)
        if path.endswith("/PauseDuration"):
            return httpx.Response(200, text="")
        return httpx.Response(404, text="Unknown endpoint")


def make_session(start_time=None, duration=1800.0, **kwargs) -> SessionInfo:
    return SessionInfo(id=kwargs.pop("id", uuid.uuid4()), startTime=start_time, duration=duration, **kwargs)


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


@pytest.fixture
def gateway():
    return FakeSoapGateway()


@pytest.fixture
def rest_api():
    return FakeRestApi()


@pytest.fixture
def panopto_client(gateway, rest_api):
    return PanoptoClient(
        hostname="panopto.example.edu",
        username="svc-account",
        password="svc-secret",
        timeout=5.0,
        gateway=gateway,
        transport=httpx.MockTransport(rest_api),
    )


@pytest.fixture
def api(panopto_client):
    """TestClient with the fake client injected and valid proxy credentials."""
    app.dependency_overrides[get_panopto_client] = lambda: panopto_client
    client = TestClient(app)
    client.auth = ("proxy-user", "proxy-pass")
    yield client
    app.dependency_overrides.clear()


@pytest.fixture
def anonymous_api(panopto_client):
    """TestClient without credentials."""
    app.dependency_overrides[get_panopto_client] = lambda: panopto_client
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def frozen_now(monkeypatch):
    """Pin utc_now() in the route modules."""
    now = utc(2026, 3, 10, 14, 0, 0)
    monkeypatch.setattr("panoproxy.api.sessions.utc_now", lambda: now)
    monkeypatch.setattr("panoproxy.api.recorders.utc_now", lambda: now)
    return now


