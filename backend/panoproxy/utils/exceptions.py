"""Custom exceptions and error handling utilities."""
from fastapi import status
from typing import Any, Dict, Optional, Sequence


class AppException(Exception):
    """Base exception for application errors."""
    pass


class NotLoggedInError(AppException):
    """Raised inside the Panopto adapter when the vendor login failed."""
    pass


class ProxyError(AppException):
    """
    Raised by routes to return a ``{..., success: false, message}`` body.

    Rendered by the exception handler registered in ``panoproxy.main``.
    """

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_400_BAD_REQUEST,
        headers: Optional[Dict[str, str]] = None,
        **fields: Any,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.headers = headers
        self.fields = fields

    def to_body(self) -> Dict[str, Any]:
        """Build the JSON body; context fields come first."""
        return {**self.fields, "success": False, "message": self.message}


def operation_failed(message: str, **fields: Any) -> ProxyError:
    """
    Create a standardized 400 failure for a vendor operation.

    Args:
        message: Human-readable failure message
        **fields: Request context echoed in the body (e.g. sessionId)

    Returns:
        ProxyError with 400 status
    """
    return ProxyError(message, status.HTTP_400_BAD_REQUEST, **fields)


def not_found_error(resource: str, **fields: Any) -> ProxyError:
    """
    Create a standardized 404 error.

    Args:
        resource: Name of the resource (e.g., "Session")
        **fields: Request context echoed in the body

    Returns:
        ProxyError with 404 status
    """
    return ProxyError(f"{resource} not found", status.HTTP_404_NOT_FOUND, **fields)


def authentication_error(realm: str, message: str = "Invalid credentials") -> ProxyError:
    """
    Create a standardized 401 authentication error with a Basic challenge.

    Args:
        realm: Realm named in the WWW-Authenticate header
        message: Authentication error message

    Returns:
        ProxyError with 401 status
    """
    return ProxyError(
        message,
        status.HTTP_401_UNAUTHORIZED,
        headers={"WWW-Authenticate": f'Basic realm="{realm}"'},
    )


def configuration_error(message: str, **fields: Any) -> ProxyError:
    """Create a 400 error for missing or invalid per-request configuration."""
    return ProxyError(message, status.HTTP_400_BAD_REQUEST, **fields)


def validation_error(errors: Sequence[Dict[str, Any]]) -> ProxyError:
    """
    Create a 400 error from FastAPI request validation errors.

    Args:
        errors: ``RequestValidationError.errors()``

    Returns:
        ProxyError naming the first offending parameter
    """
    if not errors:
        return ProxyError("Invalid request", status.HTTP_400_BAD_REQUEST)

    first = errors[0]
    location = [str(part) for part in first.get("loc", ()) if part not in ("query", "header", "body", "path")]
    parameter = ".".join(location) or "request"
    if first.get("type") == "missing":
        message = f"Missing required parameter: {parameter}"
    else:
        message = f"Invalid value for parameter {parameter}: {first.get('msg', 'invalid')}"
    return ProxyError(message, status.HTTP_400_BAD_REQUEST)
