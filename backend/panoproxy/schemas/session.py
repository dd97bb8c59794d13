"""Schemas for Panopto sessions, recorders and the proxy's session routes."""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from panoproxy.utils.serialization import ensure_utc, parse_uuid


def soap_items(value: Any, item_name: str) -> List[Any]:
    """
    Flatten a WCF ``ArrayOfX`` value into a list.

    zeep hands these back either as a plain list or as a mapping with a single
    ``item_name`` key holding the list.
    """
    if value is None:
        return []
    if isinstance(value, list):
        return value
    if isinstance(value, dict):
        items = value.get(item_name)
        if items is None:
            return []
        return items if isinstance(items, list) else [items]
    return [value]


@dataclass(frozen=True)
class AuthenticationInfo:
    """Credential stamp re-sent with every SOAP call."""
    user_key: str
    password: str

    def as_soap(self) -> Dict[str, Any]:
        return {"UserKey": self.user_key, "Password": self.password, "AuthCode": None}


@dataclass
class LoginResponse:
    """Result of LogOnWithPassword plus what the raw HTTP response carried."""
    accepted: bool
    set_cookie: Optional[str] = None
    cookies: Dict[str, str] = field(default_factory=dict)


class RemoteRecorder(BaseModel):
    """Remote recorder as returned by GetRemoteRecordersById."""
    id: UUID
    name: Optional[str] = None
    state: str = "Unknown"
    scheduledRecordings: List[UUID] = Field(default_factory=list)

    @classmethod
    def from_soap(cls, data: Dict[str, Any]) -> "RemoteRecorder":
        """Convert a serialized zeep RemoteRecorder to the schema."""
        state = data.get("State")
        return cls(
            id=parse_uuid(data.get("Id")),
            name=data.get("Name"),
            state=str(state) if state is not None else "Unknown",
            scheduledRecordings=[
                parse_uuid(guid) for guid in soap_items(data.get("ScheduledRecordings"), "guid")
                if parse_uuid(guid) is not None
            ],
        )


class SessionInfo(BaseModel):
    """Session as returned by GetSessionsById."""
    id: UUID
    name: Optional[str] = None
    folderId: Optional[UUID] = None
    folderName: Optional[str] = None
    startTime: Optional[datetime] = None
    duration: Optional[float] = Field(None, description="Duration in seconds")
    state: Optional[str] = None
    remoteRecorderIds: List[UUID] = Field(default_factory=list)
    viewerUrl: Optional[str] = None
    description: Optional[str] = None

    @classmethod
    def from_soap(cls, data: Dict[str, Any]) -> "SessionInfo":
        """Convert a serialized zeep Session to the schema."""
        state = data.get("State")
        return cls(
            id=parse_uuid(data.get("Id")),
            name=data.get("Name"),
            folderId=parse_uuid(data.get("FolderId")),
            folderName=data.get("FolderName"),
            startTime=ensure_utc(data.get("StartTime")),
            duration=data.get("Duration"),
            state=str(state) if state is not None else None,
            remoteRecorderIds=[
                parse_uuid(guid) for guid in soap_items(data.get("RemoteRecorderIds"), "guid")
                if parse_uuid(guid) is not None
            ],
            viewerUrl=data.get("ViewerUrl"),
            description=data.get("Description"),
        )


class UpdateTimeResponse(BaseModel):
    """Response schema for /session/update-time."""
    sessionId: UUID
    newStartTime: datetime
    newEndTime: datetime
    success: bool
    message: str


class StartSessionResponse(BaseModel):
    """Response schema for /session/start."""
    sessionId: UUID
    originalStartTime: Optional[datetime] = None
    newStartTime: datetime
    endTime: datetime
    success: bool
    message: str


class StopSessionResponse(BaseModel):
    """Response schema for /session/stop."""
    sessionId: UUID
    originalStartTime: datetime
    newEndTime: datetime
    success: bool
    message: str


class PauseSessionResponse(BaseModel):
    """Response schema for /session/pause."""
    sessionId: UUID
    pauseId: UUID
    success: bool
    message: str


class ResumeSessionResponse(BaseModel):
    """Response schema for /session/resume."""
    sessionId: UUID
    pauseId: UUID
    pauseStartTime: datetime
    resumeTime: datetime
    durationSeconds: int
    success: bool
    message: str


class CreateRecordingResponse(BaseModel):
    """Response schema for /session/create."""
    sessionId: UUID
    remoteRecorderId: UUID
    sessionName: str
    startTime: datetime
    endTime: datetime
    folderId: UUID
    success: bool
    message: str
