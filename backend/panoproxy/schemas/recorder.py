"""Schemas for the recorder routes."""
from pydantic import BaseModel
from typing import List
from uuid import UUID

from panoproxy.schemas.session import SessionInfo


class RecorderStateResponse(BaseModel):
    """Response schema for /recorder/state."""
    remoteRecorderId: UUID
    state: str


class RecorderSessionsResponse(BaseModel):
    """Response schema for /recorder/sessions."""
    remoteRecorderId: UUID
    sessionCount: int
    sessions: List[SessionInfo]


class RecorderSessions(BaseModel):
    """One configured recorder with today's sessions."""
    id: UUID
    name: str
    sessionCount: int
    sessions: List[SessionInfo]


class AllSessionsResponse(BaseModel):
    """Response schema for /sessions."""
    totalSessionCount: int
    recorders: List[RecorderSessions]


class RecorderListItem(BaseModel):
    """Item of the /recorders response."""
    name: str
    id: UUID
