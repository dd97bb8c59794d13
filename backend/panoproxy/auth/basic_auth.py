"""HTTP Basic authentication gate for the proxy routes."""
import base64
import binascii
from typing import Optional
from fastapi import Header

from panoproxy.config import settings
from panoproxy.utils.logger import logger
from panoproxy.utils.exceptions import authentication_error


def check_basic_credentials(
    authorization: Optional[str],
    expected_username: str,
    expected_password: str,
) -> bool:
    """
    Check an Authorization header against the configured pair.

    Args:
        authorization: Raw Authorization header value
        expected_username: Configured username
        expected_password: Configured password

    Returns:
        True only for a well-formed Basic header carrying exactly that pair
    """
    if not authorization or authorization[:6].lower() != "basic ":
        return False

    encoded = authorization[6:].strip()
    try:
        credentials = base64.b64decode(encoded, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError, ValueError):
        return False

    if ":" not in credentials:
        return False

    username, password = credentials.split(":", 1)
    return username == expected_username and password == expected_password


def verify_basic_auth(
    authorization: Optional[str] = Header(None, alias="Authorization", description="HTTP Basic credentials"),
) -> None:
    """
    Reject the request unless it carries the configured Basic credentials.

    Raises ProxyError (401, with a WWW-Authenticate challenge) otherwise.
    """
    if not check_basic_credentials(authorization, settings.basic_auth_username, settings.basic_auth_password):
        logger.debug("[AUTH] Rejected request with missing or invalid Basic credentials")
        raise authentication_error(settings.basic_auth_realm)
