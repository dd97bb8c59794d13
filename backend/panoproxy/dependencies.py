"""Panopto client lifecycle and request dependencies."""
from fastapi import Request

from panoproxy.config import settings
from panoproxy.services.panopto import PanoptoClient
from panoproxy.utils.logger import logger


def create_panopto_client() -> PanoptoClient:
    """Build the process-wide client; raises on incomplete configuration."""
    logger.info(f"Creating Panopto client for {settings.panopto_hostname}")
    return PanoptoClient.from_settings(settings)


def get_panopto_client(request: Request) -> PanoptoClient:
    """Dependency for getting the shared Panopto client."""
    return request.app.state.panopto_client
