"""Blocking zeep gateway to the Panopto SOAP services.

Every method here is synchronous and may raise (zeep ``Fault``, ``requests``
transport errors). ``PanoptoClient`` runs them on worker threads and turns
failures into sentinels.
"""
import threading
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional
from uuid import UUID

import requests
from requests.cookies import RequestsCookieJar
from zeep import Client, Settings as ZeepSettings
from zeep.helpers import serialize_object
from zeep.transports import Transport

from panoproxy.schemas.session import (
    AuthenticationInfo,
    LoginResponse,
    RemoteRecorder,
    SessionInfo,
    soap_items,
)
from panoproxy.utils.logger import logger
from panoproxy.utils.serialization import ensure_utc, parse_uuid
from panoproxy.utils.url import soap_service_url

# WCF binding names published by the Panopto 4.6 WSDLs
AUTH_BINDING = "{http://tempuri.org/}BasicHttpBinding_IAuth"
RECORDER_BINDING = "{http://tempuri.org/}BasicHttpBinding_IRemoteRecorderManagement"
SESSION_BINDING = "{http://tempuri.org/}BasicHttpBinding_ISessionManagement"

SERVICES = {
    "auth": ("Auth.svc", AUTH_BINDING),
    "recorders": ("RemoteRecorderManagement.svc", RECORDER_BINDING),
    "sessions": ("SessionManagement.svc", SESSION_BINDING),
}


class _CapturedResponse:
    """Holder filled with the raw HTTP response of a captured call."""
    response: Optional[requests.Response] = None


class CapturingTransport(Transport):
    """zeep transport that can expose the raw HTTP response of a call."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._local = threading.local()

    @contextmanager
    def capture_response(self):
        """Scope in which the HTTP response of the next SOAP call is kept."""
        captured = _CapturedResponse()
        self._local.captured = captured
        try:
            yield captured
        finally:
            self._local.captured = None

    def post_xml(self, address, envelope, headers):
        response = super().post_xml(address, envelope, headers)
        captured = getattr(self._local, "captured", None)
        if captured is not None:
            captured.response = response
        return response


def _guid_array(ids: Iterable[UUID]) -> dict:
    return {"guid": [str(value) for value in ids]}


class PanoptoSoapGateway:
    """
    Auth, RemoteRecorderManagement and SessionManagement SOAP clients.

    Nothing is fetched at construction. Each service's WSDL is loaded on its
    first call, on the calling worker thread, so an unreachable Panopto fails
    that call instead of startup.
    """

    def __init__(self, base_url: str, cookies: RequestsCookieJar, timeout: float):
        self.base_url = base_url
        self.timeout = timeout
        self.session = requests.Session()
        self.session.cookies = cookies

        self._zeep_settings = ZeepSettings(strict=False, xml_huge_tree=True)
        self._lock = threading.Lock()
        self._services: Dict[str, Any] = {}
        self._transports: Dict[str, CapturingTransport] = {}

    def _service(self, name: str):
        """Return the named service proxy, loading its WSDL on first use."""
        with self._lock:
            if name not in self._services:
                service_file, binding = SERVICES[name]
                address = soap_service_url(self.base_url, service_file)
                transport = CapturingTransport(
                    session=self.session, timeout=self.timeout, operation_timeout=self.timeout
                )
                client = Client(f"{address}?singleWsdl", transport=transport, settings=self._zeep_settings)
                self._services[name] = client.create_service(binding, address)
                self._transports[name] = transport
                logger.info(f"[PANOPTO] Loaded SOAP service {service_file}")
            return self._services[name]

    def log_on_with_password(self, username: str, password: str) -> LoginResponse:
        """Call LogOnWithPassword and report the Set-Cookie it returned."""
        auth = self._service("auth")
        with self._transports["auth"].capture_response() as captured:
            accepted = auth.LogOnWithPassword(username, password)

        response = captured.response
        if response is None:
            logger.warning("[LOGIN] No HTTP response captured from LogOnWithPassword")
            return LoginResponse(accepted=bool(accepted))

        return LoginResponse(
            accepted=bool(accepted),
            set_cookie=response.headers.get("Set-Cookie"),
            cookies=response.cookies.get_dict(),
        )

    def get_remote_recorders_by_id(self, auth: AuthenticationInfo, recorder_ids: List[UUID]) -> List[RemoteRecorder]:
        result = self._service("recorders").GetRemoteRecordersById(auth.as_soap(), _guid_array(recorder_ids))
        recorders = soap_items(serialize_object(result, dict), "RemoteRecorder")
        return [RemoteRecorder.from_soap(item) for item in recorders if item]

    def get_sessions_by_id(self, auth: AuthenticationInfo, session_ids: List[UUID]) -> List[SessionInfo]:
        result = self._service("sessions").GetSessionsById(auth.as_soap(), _guid_array(session_ids))
        sessions = soap_items(serialize_object(result, dict), "Session")
        return [SessionInfo.from_soap(item) for item in sessions if item]

    def update_recording_time(self, auth: AuthenticationInfo, session_id: UUID, start: datetime, end: datetime) -> None:
        self._service("recorders").UpdateRecordingTime(
            auth.as_soap(), str(session_id), ensure_utc(start), ensure_utc(end)
        )

    def schedule_recording(
        self,
        auth: AuthenticationInfo,
        name: str,
        folder_id: UUID,
        is_broadcast: bool,
        start: datetime,
        end: datetime,
        recorder_ids: List[UUID],
    ) -> List[UUID]:
        """Schedule a recording and return the created session ids."""
        recorder_settings = {"RecorderSettings": [{"RecorderId": str(value)} for value in recorder_ids]}
        result = self._service("recorders").ScheduleRecording(
            auth.as_soap(),
            name,
            str(folder_id),
            is_broadcast,
            ensure_utc(start),
            ensure_utc(end),
            recorder_settings,
        )
        data = serialize_object(result, dict) or {}
        session_ids = [parse_uuid(value) for value in soap_items(data.get("SessionIDs"), "guid")]
        return [value for value in session_ids if value is not None]

    def close(self) -> None:
        """Close the shared HTTP session and forget the loaded services."""
        try:
            self.session.close()
        except Exception as e:
            logger.warning(f"[PANOPTO] Error closing SOAP session: {e}")
        self._services.clear()
        self._transports.clear()
