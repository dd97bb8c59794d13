"""Panopto adapter: recorder and session operations behind one vendor login."""
import asyncio
from datetime import datetime, timedelta
from typing import List, Optional
from uuid import UUID

import httpx
from requests.cookies import RequestsCookieJar

from panoproxy.constants import (
    RECORDER_STATE_ERROR,
    RECORDER_STATE_NOT_LOGGED_IN,
    RECORDER_STATE_UNKNOWN,
)
from panoproxy.schemas.session import AuthenticationInfo, SessionInfo
from panoproxy.services.login import LoginManager
from panoproxy.services.soap import PanoptoSoapGateway
from panoproxy.utils.exceptions import NotLoggedInError
from panoproxy.utils.logger import logger, vendor_operation
from panoproxy.utils.serialization import ensure_utc, parse_uuid
from panoproxy.utils.url import REST_API_PATH, build_base_url, cookie_domain


class PanoptoClient:
    """
    Adapter over the Panopto SOAP and REST APIs.

    Every public operation logs in lazily, makes its vendor call and returns a
    sentinel (None, False, [] or an error string) instead of raising.
    """

    def __init__(
        self,
        hostname: str,
        username: str,
        password: str,
        timeout: float = 300.0,
        gateway=None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if not hostname or not hostname.strip():
            raise ValueError("Panopto hostname must be configured. Set PANOPTO_HOSTNAME.")
        if not username or not username.strip():
            raise ValueError("Panopto username must be configured. Set PANOPTO_USERNAME.")
        if not password or not password.strip():
            raise ValueError("Panopto password must be configured. Set PANOPTO_PASSWORD.")

        self.base_url = build_base_url(hostname)
        self.cookies = RequestsCookieJar()

        # WSDLs load on first use, so construction needs no network
        self.gateway = gateway if gateway is not None else PanoptoSoapGateway(self.base_url, self.cookies, timeout)

        self.login = LoginManager(
            gateway=self.gateway,
            cookies=self.cookies,
            cookie_domain=cookie_domain(self.base_url),
            username=username,
            password=password,
        )

        # Shares the cookie jar with the SOAP transports
        self.http = httpx.AsyncClient(
            base_url=self.base_url,
            cookies=self.cookies,
            headers={"Accept": "application/json"},
            follow_redirects=True,
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings) -> "PanoptoClient":
        return cls(
            hostname=settings.panopto_hostname,
            username=settings.panopto_username,
            password=settings.panopto_password,
            timeout=settings.panopto_timeout_seconds,
        )

    async def _require_login(self) -> AuthenticationInfo:
        if not await self.login.ensure_logged_in() or self.login.auth_info is None:
            raise NotLoggedInError("Panopto login failed")
        return self.login.auth_info

    # --- SOAP operations ---

    @vendor_operation(
        "get_remote_recorder_state",
        fallback=RECORDER_STATE_ERROR,
        not_logged_in=RECORDER_STATE_NOT_LOGGED_IN,
    )
    async def get_remote_recorder_state(self, remote_recorder_id: UUID) -> str:
        """Return the recorder's state, "Unknown" if Panopto does not know it."""
        auth = await self._require_login()
        recorders = await asyncio.to_thread(self.gateway.get_remote_recorders_by_id, auth, [remote_recorder_id])
        if recorders:
            return recorders[0].state
        return RECORDER_STATE_UNKNOWN

    @vendor_operation("get_sessions_list", fallback=[])
    async def get_sessions_list(self, remote_recorder_id: UUID) -> List[SessionInfo]:
        """
        List every session scheduled on a recorder.

        The list is not filtered by date; an empty list covers both "nothing
        scheduled" and failures.
        """
        auth = await self._require_login()
        recorders = await asyncio.to_thread(self.gateway.get_remote_recorders_by_id, auth, [remote_recorder_id])
        if not recorders or not recorders[0].scheduledRecordings:
            return []

        sessions = await self.get_session_details(recorders[0].scheduledRecordings)
        return sessions or []

    @vendor_operation("get_session_details")
    async def get_session_details(self, session_ids: List[UUID]) -> Optional[List[SessionInfo]]:
        """Look up sessions by id; None when none resolve or the call fails."""
        auth = await self._require_login()
        sessions = await asyncio.to_thread(self.gateway.get_sessions_by_id, auth, list(session_ids))
        return sessions or None

    @vendor_operation("update_session_time", fallback=False)
    async def update_session_time(self, session_id: UUID, new_start_time: datetime, new_end_time: datetime) -> bool:
        auth = await self._require_login()
        start, end = ensure_utc(new_start_time), ensure_utc(new_end_time)
        await asyncio.to_thread(self.gateway.update_recording_time, auth, session_id, start, end)
        logger.debug(f"[PANOPTO] UpdateRecordingTime for session {session_id}: {start.isoformat()} - {end.isoformat()}")
        return True

    @vendor_operation("create_recording")
    async def create_recording(
        self,
        remote_recorder_id: UUID,
        session_name: str,
        start_time: datetime,
        duration: timedelta,
        folder_id: UUID,
    ) -> Optional[UUID]:
        """
        Schedule a non-broadcast recording on a single recorder.

        Args:
            remote_recorder_id: Recorder that captures the session
            session_name: Name of the new session
            start_time: Scheduled start
            duration: Length of the recording; end = start + duration
            folder_id: Destination folder

        Returns:
            The first created session id, or None
        """
        auth = await self._require_login()
        start = ensure_utc(start_time)
        end = start + duration
        session_ids = await asyncio.to_thread(
            self.gateway.schedule_recording,
            auth,
            session_name,
            folder_id,
            False,
            start,
            end,
            [remote_recorder_id],
        )
        if not session_ids:
            return None
        logger.debug(
            f"[PANOPTO] Scheduled session {session_ids[0]} on recorder {remote_recorder_id} "
            f"from {start.isoformat()} to {end.isoformat()}"
        )
        return session_ids[0]

    # --- REST operations ---

    @vendor_operation("get_internal_session_id")
    async def get_internal_session_id(self, delivery_id: UUID) -> Optional[UUID]:
        """Resolve the internal session id from a public delivery id."""
        await self._require_login()
        response = await self.http.get(
            f"{REST_API_PATH}/SessionMetadata",
            params={"deliveryid": str(delivery_id)},
        )
        response.raise_for_status()
        metadata = {key.lower(): value for key, value in response.json().items()}
        return parse_uuid(metadata.get("sessionpublicid"))

    @vendor_operation("pause_session")
    async def pause_session(self, internal_session_id: UUID) -> Optional[UUID]:
        """Pause a session; returns the pause ticket."""
        await self._require_login()
        response = await self.http.post(
            f"{REST_API_PATH}/Pause",
            params={"sessionId": str(internal_session_id)},
        )
        response.raise_for_status()
        pause_id = parse_uuid(response.text)
        if pause_id is None:
            logger.warning(f"[PANOPTO] Could not parse pause id from response: {response.text!r}")
        return pause_id

    @vendor_operation("update_pause_duration", fallback=False)
    async def update_pause_duration(self, internal_session_id: UUID, pause_id: UUID, duration_seconds: int) -> bool:
        await self._require_login()
        response = await self.http.post(
            f"{REST_API_PATH}/PauseDuration",
            params={
                "sessionId": str(internal_session_id),
                "pauseId": str(pause_id),
                "durationSeconds": str(int(duration_seconds)),
            },
        )
        response.raise_for_status()
        return True

    async def aclose(self) -> None:
        """Release the REST client and the SOAP transports."""
        await self.http.aclose()
        try:
            self.gateway.close()
        except Exception as e:
            logger.warning(f"[PANOPTO] Error closing SOAP gateway: {e}")
