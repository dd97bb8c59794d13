"""Pydantic schemas for vendor data and route responses."""
from panoproxy.schemas.session import AuthenticationInfo, LoginResponse, RemoteRecorder, SessionInfo
from panoproxy.schemas.recorder import RecorderListItem, RecorderSessions

__all__ = [
    "AuthenticationInfo",
    "LoginResponse",
    "RemoteRecorder",
    "SessionInfo",
    "RecorderListItem",
    "RecorderSessions",
]
