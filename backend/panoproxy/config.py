"""Application configuration using Pydantic settings."""
from pydantic import BaseModel
from pydantic_settings import BaseSettings
from typing import List, Literal, Optional
from uuid import UUID


class RecorderConfig(BaseModel):
    """A remote recorder exposed by /recorders and /sessions."""
    id: UUID
    name: str


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Panopto
    panopto_hostname: str
    panopto_username: str
    panopto_password: str
    panopto_default_folder: Optional[str] = None  # Folder UUID used by /session/create
    panopto_timeout_seconds: float = 300.0  # 5 minutes, SOAP operations and REST calls

    # Basic auth gate
    basic_auth_username: str
    basic_auth_password: str
    basic_auth_realm: str = "PanoProxy"

    # Recorder registry, JSON list: [{"id": "...", "name": "..."}]
    recorders: List[RecorderConfig] = []

    # Baseline for the end time computed by /session/start: "original" or "now"
    start_end_baseline: Literal["original", "now"] = "original"

    # API Configuration
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    environment: str = "development"

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
