"""Remote recorder endpoints."""
import asyncio
from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends, Query

from panoproxy.auth.basic_auth import verify_basic_auth
from panoproxy.config import settings
from panoproxy.dependencies import get_panopto_client
from panoproxy.schemas.recorder import (
    AllSessionsResponse,
    RecorderListItem,
    RecorderSessions,
    RecorderSessionsResponse,
    RecorderStateResponse,
)
from panoproxy.services.panopto import PanoptoClient
from panoproxy.services.scheduling import filter_sessions_on_day
from panoproxy.utils.serialization import utc_now

router = APIRouter(tags=["recorders"], dependencies=[Depends(verify_basic_auth)])


@router.get("/recorder/state", response_model=RecorderStateResponse)
async def get_remote_recorder_state(
    remoteRecorderId: UUID = Query(..., description="Remote recorder ID"),
    client: PanoptoClient = Depends(get_panopto_client),
) -> RecorderStateResponse:
    """Get the current state of a remote recorder."""
    state = await client.get_remote_recorder_state(remoteRecorderId)
    return RecorderStateResponse(remoteRecorderId=remoteRecorderId, state=state)


@router.get("/recorder/sessions", response_model=RecorderSessionsResponse)
async def get_sessions_list(
    remoteRecorderId: UUID = Query(..., description="Remote recorder ID"),
    client: PanoptoClient = Depends(get_panopto_client),
) -> RecorderSessionsResponse:
    """List today's (UTC) sessions scheduled on a remote recorder."""
    all_sessions = await client.get_sessions_list(remoteRecorderId)
    sessions = filter_sessions_on_day(all_sessions, utc_now().date())
    return RecorderSessionsResponse(
        remoteRecorderId=remoteRecorderId,
        sessionCount=len(sessions),
        sessions=sessions,
    )


@router.get("/sessions", response_model=AllSessionsResponse)
async def get_all_sessions(
    client: PanoptoClient = Depends(get_panopto_client),
) -> AllSessionsResponse:
    """List today's (UTC) sessions for every configured recorder."""
    today = utc_now().date()
    results = await asyncio.gather(
        *(client.get_sessions_list(recorder.id) for recorder in settings.recorders)
    )

    recorders = []
    for recorder, all_sessions in zip(settings.recorders, results):
        sessions = filter_sessions_on_day(all_sessions, today)
        recorders.append(
            RecorderSessions(
                id=recorder.id,
                name=recorder.name,
                sessionCount=len(sessions),
                sessions=sessions,
            )
        )

    return AllSessionsResponse(
        totalSessionCount=sum(recorder.sessionCount for recorder in recorders),
        recorders=recorders,
    )


@router.get("/recorders", response_model=List[RecorderListItem])
async def list_recorders() -> List[RecorderListItem]:
    """List the configured remote recorders."""
    return [RecorderListItem(name=recorder.name, id=recorder.id) for recorder in settings.recorders]
