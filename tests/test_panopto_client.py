"""Tests for the Panopto adapter's operations and failure sentinels."""
import asyncio
import uuid
from datetime import timedelta

import pytest
from zeep.exceptions import Fault

from conftest import make_session, utc
from panoproxy.constants import LoginState
from panoproxy.services.panopto import PanoptoClient

RECORDER_ID = uuid.UUID("11111111-1111-1111-1111-111111111111")


def run(coro):
    return asyncio.run(coro)


class TestConstruction:
    @pytest.mark.parametrize(
        "hostname,username,password",
        [("", "user", "pass"), ("host", " ", "pass"), ("host", "user", "")],
    )
    def test_incomplete_configuration_raises(self, gateway, hostname, username, password):
        with pytest.raises(ValueError):
            PanoptoClient(hostname, username, password, gateway=gateway)

    def test_hostname_gets_https_scheme(self, panopto_client):
        assert panopto_client.base_url == "https://panopto.example.edu"

    def test_explicit_scheme_is_kept(self, gateway):
        client = PanoptoClient("http://panopto.local/", "user", "pass", gateway=gateway)
        assert client.base_url == "http://panopto.local"

    def test_unreachable_vendor_fails_operations_not_construction(self):
        client = PanoptoClient("http://127.0.0.1:9", "user", "pass", timeout=2.0)

        async def scenario():
            try:
                return (
                    await client.get_remote_recorder_state(RECORDER_ID),
                    await client.get_sessions_list(RECORDER_ID),
                )
            finally:
                await client.aclose()

        assert run(scenario()) == ("Error: Not logged in", [])
        assert client.login.state == LoginState.UNAUTHENTICATED

    def test_aclose_closes_gateway(self, panopto_client, gateway):
        run(panopto_client.aclose())
        assert gateway.closed
        assert panopto_client.http.is_closed


class TestRecorderState:
    def test_returns_state(self, panopto_client, gateway):
        gateway.add_recorder(RECORDER_ID, state="Recording")

        assert run(panopto_client.get_remote_recorder_state(RECORDER_ID)) == "Recording"
        assert gateway.auth_seen[0].user_key == "svc-account"

    def test_unknown_recorder(self, panopto_client):
        assert run(panopto_client.get_remote_recorder_state(RECORDER_ID)) == "Unknown"

    def test_fault_returns_error(self, panopto_client, gateway):
        gateway.failing.add("get_remote_recorders_by_id")

        assert run(panopto_client.get_remote_recorder_state(RECORDER_ID)) == "Error"

    def test_login_failure_skips_vendor_call(self, panopto_client, gateway):
        gateway.login_error = Fault("bad credentials")

        assert run(panopto_client.get_remote_recorder_state(RECORDER_ID)) == "Error: Not logged in"
        assert gateway.calls == []


class TestSessionsList:
    def test_resolves_scheduled_recordings(self, panopto_client, gateway):
        sessions = [make_session(utc(2026, 3, 10, 9)), make_session(utc(2026, 3, 11, 9))]
        gateway.add_recorder(RECORDER_ID, sessions=sessions)

        result = run(panopto_client.get_sessions_list(RECORDER_ID))

        assert [session.id for session in result] == [session.id for session in sessions]
        assert gateway.calls == ["get_remote_recorders_by_id", "get_sessions_by_id"]

    def test_no_scheduled_recordings_is_empty_list(self, panopto_client, gateway):
        gateway.add_recorder(RECORDER_ID)

        assert run(panopto_client.get_sessions_list(RECORDER_ID)) == []
        assert gateway.calls == ["get_remote_recorders_by_id"]

    def test_unknown_recorder_is_empty_list(self, panopto_client):
        assert run(panopto_client.get_sessions_list(RECORDER_ID)) == []

    @pytest.mark.parametrize("failing", ["get_remote_recorders_by_id", "get_sessions_by_id"])
    def test_fault_is_empty_list(self, panopto_client, gateway, failing):
        gateway.add_recorder(RECORDER_ID, sessions=[make_session(utc(2026, 3, 10, 9))])
        gateway.failing.add(failing)

        assert run(panopto_client.get_sessions_list(RECORDER_ID)) == []

    def test_login_failure_is_empty_list(self, panopto_client, gateway):
        gateway.login_error = Fault("bad credentials")

        assert run(panopto_client.get_sessions_list(RECORDER_ID)) == []
        assert gateway.calls == []


class TestSessionDetails:
    def test_returns_sessions(self, panopto_client, gateway):
        session = make_session(utc(2026, 3, 10, 9))
        gateway.sessions[session.id] = session

        result = run(panopto_client.get_session_details([session.id]))

        assert [item.id for item in result] == [session.id]

    def test_no_match_is_none(self, panopto_client):
        assert run(panopto_client.get_session_details([uuid.uuid4()])) is None

    def test_fault_is_none(self, panopto_client, gateway):
        gateway.failing.add("get_sessions_by_id")

        assert run(panopto_client.get_session_details([uuid.uuid4()])) is None


class TestUpdateSessionTime:
    def test_round_trip_through_session_details(self, panopto_client, gateway):
        session = make_session(utc(2026, 3, 10, 9), duration=1800)
        gateway.sessions[session.id] = session
        start, end = utc(2026, 3, 10, 10), utc(2026, 3, 10, 11, 30)

        async def scenario():
            first = await panopto_client.update_session_time(session.id, start, end)
            second = await panopto_client.update_session_time(session.id, start, end)
            return first, second, await panopto_client.get_session_details([session.id])

        first, second, details = run(scenario())

        assert first is True and second is True
        assert details[0].startTime == start
        assert details[0].startTime + timedelta(seconds=details[0].duration) == end

    def test_naive_times_are_sent_as_utc(self, panopto_client, gateway):
        session = make_session(utc(2026, 3, 10, 9))
        gateway.sessions[session.id] = session
        naive_start = utc(2026, 3, 10, 10).replace(tzinfo=None)

        run(panopto_client.update_session_time(session.id, naive_start, naive_start + timedelta(hours=1)))

        assert gateway.sessions[session.id].startTime == utc(2026, 3, 10, 10)

    def test_fault_is_false(self, panopto_client):
        assert run(panopto_client.update_session_time(uuid.uuid4(), utc(2026, 3, 10), utc(2026, 3, 10, 1))) is False

    def test_login_failure_is_false(self, panopto_client, gateway):
        gateway.login_error = Fault("bad credentials")

        assert run(panopto_client.update_session_time(uuid.uuid4(), utc(2026, 3, 10), utc(2026, 3, 10, 1))) is False
        assert gateway.calls == []


class TestCreateRecording:
    def test_schedules_on_single_recorder(self, panopto_client, gateway):
        folder_id = uuid.uuid4()
        start = utc(2026, 3, 10, 9)

        session_id = run(
            panopto_client.create_recording(RECORDER_ID, "Lecture 1", start, timedelta(minutes=50), folder_id)
        )

        created = gateway.sessions[session_id]
        assert created.name == "Lecture 1"
        assert created.folderId == folder_id
        assert created.remoteRecorderIds == [RECORDER_ID]
        assert created.duration == 3000

    def test_fault_is_none(self, panopto_client, gateway):
        gateway.failing.add("schedule_recording")

        assert run(
            panopto_client.create_recording(RECORDER_ID, "x", utc(2026, 3, 10), timedelta(hours=1), uuid.uuid4())
        ) is None

    def test_empty_result_is_none(self, panopto_client, gateway, monkeypatch):
        monkeypatch.setattr(gateway, "schedule_recording", lambda *args: [])

        assert run(
            panopto_client.create_recording(RECORDER_ID, "x", utc(2026, 3, 10), timedelta(hours=1), uuid.uuid4())
        ) is None


class TestRestOperations:
    def test_internal_session_id_is_parsed_case_insensitively(self, panopto_client, rest_api):
        delivery_id, internal_id = uuid.uuid4(), uuid.uuid4()
        rest_api.internal_ids[str(delivery_id)] = str(internal_id)

        assert run(panopto_client.get_internal_session_id(delivery_id)) == internal_id
        request = rest_api.requests[0]
        assert request.url.path == "/Panopto/PublicAPI/4.1/SessionMetadata"
        assert request.headers["accept"] == "application/json"

    def test_rest_calls_carry_login_cookie(self, panopto_client, rest_api):
        delivery_id = uuid.uuid4()
        rest_api.internal_ids[str(delivery_id)] = str(uuid.uuid4())

        run(panopto_client.get_internal_session_id(delivery_id))

        assert ".ASPXAUTH=abc123" in rest_api.requests[0].headers["cookie"]

    def test_internal_session_id_non_2xx_is_none(self, panopto_client):
        assert run(panopto_client.get_internal_session_id(uuid.uuid4())) is None

    def test_pause_strips_quotes(self, panopto_client, rest_api):
        result = run(panopto_client.pause_session(uuid.uuid4()))

        assert result == uuid.UUID("5a1f8c2e-0d3b-4c57-9e6a-7b8c9d0e1f2a")
        assert rest_api.requests[0].method == "POST"

    @pytest.mark.parametrize("body", ['"not-a-guid"', "", "null"])
    def test_pause_unparsable_body_is_none(self, panopto_client, rest_api, body):
        rest_api.pause_body = body

        assert run(panopto_client.pause_session(uuid.uuid4())) is None

    def test_pause_server_error_is_none(self, panopto_client, rest_api):
        rest_api.status_code = 500

        assert run(panopto_client.pause_session(uuid.uuid4())) is None

    def test_update_pause_duration_sends_parameters(self, panopto_client, rest_api):
        session_id, pause_id = uuid.uuid4(), uuid.uuid4()

        assert run(panopto_client.update_pause_duration(session_id, pause_id, 42)) is True
        params = rest_api.requests[0].url.params
        assert params["sessionId"] == str(session_id)
        assert params["pauseId"] == str(pause_id)
        assert params["durationSeconds"] == "42"

    def test_update_pause_duration_error_is_false(self, panopto_client, rest_api):
        rest_api.status_code = 400

        assert run(panopto_client.update_pause_duration(uuid.uuid4(), uuid.uuid4(), 5)) is False

    def test_login_failure_skips_rest_call(self, panopto_client, gateway, rest_api):
        gateway.login_error = Fault("bad credentials")

        assert run(panopto_client.pause_session(uuid.uuid4())) is None
        assert rest_api.requests == []
