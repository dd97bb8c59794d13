"""Session management endpoints."""
from datetime import datetime, timedelta
from uuid import UUID
from fastapi import APIRouter, Depends, Query

from panoproxy.auth.basic_auth import verify_basic_auth
from panoproxy.config import settings
from panoproxy.dependencies import get_panopto_client
from panoproxy.schemas.session import (
    CreateRecordingResponse,
    PauseSessionResponse,
    ResumeSessionResponse,
    SessionInfo,
    StartSessionResponse,
    StopSessionResponse,
    UpdateTimeResponse,
)
from panoproxy.services.panopto import PanoptoClient
from panoproxy.services.scheduling import compute_pause_duration, compute_start_window, compute_stop_window
from panoproxy.utils.exceptions import configuration_error, not_found_error, operation_failed
from panoproxy.utils.logger import logger
from panoproxy.utils.serialization import ensure_utc, parse_uuid, utc_now

router = APIRouter(prefix="/session", tags=["sessions"], dependencies=[Depends(verify_basic_auth)])


async def _get_session_or_404(client: PanoptoClient, session_id: UUID) -> SessionInfo:
    sessions = await client.get_session_details([session_id])
    if not sessions:
        raise not_found_error("Session", sessionId=session_id)
    return sessions[0]


@router.post("/update-time", response_model=UpdateTimeResponse)
async def update_session_time(
    sessionId: UUID = Query(..., description="Session ID"),
    newStartTime: datetime = Query(..., description="New start time"),
    newEndTime: datetime = Query(..., description="New end time"),
    client: PanoptoClient = Depends(get_panopto_client),
) -> UpdateTimeResponse:
    """Set an explicit start/end window on a session."""
    success = await client.update_session_time(sessionId, newStartTime, newEndTime)
    if not success:
        raise operation_failed("Failed to update session time", sessionId=sessionId)

    return UpdateTimeResponse(
        sessionId=sessionId,
        newStartTime=newStartTime,
        newEndTime=newEndTime,
        success=True,
        message="Session time updated successfully",
    )


@router.post("/start", response_model=StartSessionResponse)
async def start_session(
    sessionId: UUID = Query(..., description="Session ID"),
    client: PanoptoClient = Depends(get_panopto_client),
) -> StartSessionResponse:
    """
    Start a scheduled session now.

    The start moves to now; the end is computed from the configured baseline
    (the original start by default) plus the session duration.
    """
    session = await _get_session_or_404(client, sessionId)
    new_start_time, new_end_time = compute_start_window(session, utc_now(), settings.start_end_baseline)

    success = await client.update_session_time(sessionId, new_start_time, new_end_time)
    if not success:
        raise operation_failed("Failed to start session", sessionId=sessionId)

    logger.info(f"Started session {sessionId}: {new_start_time.isoformat()} - {new_end_time.isoformat()}")
    return StartSessionResponse(
        sessionId=sessionId,
        originalStartTime=session.startTime,
        newStartTime=new_start_time,
        endTime=new_end_time,
        success=True,
        message="Session started successfully",
    )


@router.post("/pause", response_model=PauseSessionResponse)
async def pause_session(
    sessionId: UUID = Query(..., description="Session (delivery) ID"),
    client: PanoptoClient = Depends(get_panopto_client),
) -> PauseSessionResponse:
    """Pause a recording session and return the pause ticket."""
    internal_session_id = await client.get_internal_session_id(sessionId)
    if internal_session_id is None:
        raise operation_failed("Failed to pause session", sessionId=sessionId)

    pause_id = await client.pause_session(internal_session_id)
    if pause_id is None:
        raise operation_failed("Failed to pause session", sessionId=sessionId)

    return PauseSessionResponse(
        sessionId=sessionId,
        pauseId=pause_id,
        success=True,
        message="Session paused successfully",
    )


@router.post("/resume", response_model=ResumeSessionResponse)
async def resume_session(
    sessionId: UUID = Query(..., description="Session (delivery) ID"),
    pauseId: UUID = Query(..., description="Pause ID returned by /session/pause"),
    pauseStartTime: datetime = Query(..., description="When the pause started"),
    client: PanoptoClient = Depends(get_panopto_client),
) -> ResumeSessionResponse:
    """Resume a paused session by reporting how long the pause lasted."""
    internal_session_id = await client.get_internal_session_id(sessionId)
    if internal_session_id is None:
        raise operation_failed("Failed to resume session", sessionId=sessionId)

    resume_time = utc_now()
    duration_seconds = compute_pause_duration(pauseStartTime, resume_time)

    success = await client.update_pause_duration(internal_session_id, pauseId, duration_seconds)
    if not success:
        raise operation_failed("Failed to resume session", sessionId=sessionId, pauseId=pauseId)

    return ResumeSessionResponse(
        sessionId=sessionId,
        pauseId=pauseId,
        pauseStartTime=ensure_utc(pauseStartTime),
        resumeTime=resume_time,
        durationSeconds=duration_seconds,
        success=True,
        message="Session resumed successfully",
    )


@router.post("/stop", response_model=StopSessionResponse)
async def stop_session(
    sessionId: UUID = Query(..., description="Session ID"),
    client: PanoptoClient = Depends(get_panopto_client),
) -> StopSessionResponse:
    """End a session now, keeping its start time."""
    session = await _get_session_or_404(client, sessionId)
    window = compute_stop_window(session, utc_now())
    if window is None:
        raise operation_failed("Session start time is not available", sessionId=sessionId)

    start_time, new_end_time = window
    success = await client.update_session_time(sessionId, start_time, new_end_time)
    if not success:
        raise operation_failed("Failed to stop session", sessionId=sessionId)

    return StopSessionResponse(
        sessionId=sessionId,
        originalStartTime=start_time,
        newEndTime=new_end_time,
        success=True,
        message="Session stopped successfully",
    )


@router.post("/create", response_model=CreateRecordingResponse)
async def create_recording(
    remoteRecorderId: UUID = Query(..., description="Remote recorder ID"),
    sessionName: str = Query(..., description="Name of the new session"),
    startTime: datetime = Query(..., description="Scheduled start"),
    duration: timedelta = Query(..., description="Duration, ISO 8601 (e.g. PT1H)"),
    client: PanoptoClient = Depends(get_panopto_client),
) -> CreateRecordingResponse:
    """Schedule a new recording in the default folder."""
    folder_id = parse_uuid(settings.panopto_default_folder)
    if folder_id is None:
        raise configuration_error(
            "PANOPTO_DEFAULT_FOLDER is not configured or invalid",
            remoteRecorderId=remoteRecorderId,
            sessionName=sessionName,
        )

    session_id = await client.create_recording(remoteRecorderId, sessionName, startTime, duration, folder_id)
    if session_id is None:
        raise operation_failed(
            "Failed to create recording",
            remoteRecorderId=remoteRecorderId,
            sessionName=sessionName,
        )

    start_time = ensure_utc(startTime)
    return CreateRecordingResponse(
        sessionId=session_id,
        remoteRecorderId=remoteRecorderId,
        sessionName=sessionName,
        startTime=start_time,
        endTime=start_time + duration,
        folderId=folder_id,
        success=True,
        message="Recording created successfully",
    )
