"""Logging configuration for the application."""
import copy
import functools
import logging
import sys
import time
from panoproxy.config import settings
from panoproxy.utils.exceptions import NotLoggedInError

# Configure root logger
logger = logging.getLogger("panoproxy")
logger.setLevel(logging.DEBUG if settings.environment == "development" else logging.INFO)

# Create console handler
handler = logging.StreamHandler(sys.stdout)
handler.setLevel(logging.DEBUG if settings.environment == "development" else logging.INFO)

# Create formatter
formatter = logging.Formatter(
    "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
handler.setFormatter(formatter)

# Add handler to logger if not already added
if not logger.handlers:
    logger.addHandler(handler)

# Prevent duplicate logs
logger.propagate = False


def _is_success(result) -> bool:
    if result is None or result is False:
        return False
    if isinstance(result, str):
        return not result.startswith("Error") and result != "Unknown"
    return True


def vendor_operation(operation: str, fallback=None, not_logged_in=None):
    """
    Wrap an async Panopto call so it never raises and logs exactly once.

    The wrapped coroutine's result is returned as is. Any exception becomes
    ``fallback``; a NotLoggedInError becomes ``not_logged_in`` (or
    ``fallback`` when not given). One event with ``operation``, ``outcome``
    and ``elapsed_ms`` extras is emitted when the call exits.

    Args:
        operation: Name used in the log event
        fallback: Value returned when the call raises
        not_logged_in: Value returned when the vendor login failed
    """
    if not_logged_in is None:
        not_logged_in = fallback

    def decorator(func):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            started = time.monotonic()
            error = None
            try:
                result = await func(*args, **kwargs)
            except NotLoggedInError as e:
                error = e
                result = copy.copy(not_logged_in)
            except Exception as e:
                error = e
                result = copy.copy(fallback)

            elapsed_ms = (time.monotonic() - started) * 1000
            outcome = "success" if error is None and _is_success(result) else "failure"
            extra = {"operation": operation, "outcome": outcome, "elapsed_ms": round(elapsed_ms, 1)}

            if isinstance(error, NotLoggedInError):
                logger.error(f"[PANOPTO] {operation} failed: not logged in", extra=extra)
            elif error is not None:
                logger.error(
                    f"[PANOPTO] {operation} failed after {elapsed_ms:.0f}ms: {error}",
                    exc_info=error,
                    extra=extra,
                )
            elif outcome == "success":
                logger.info(f"[PANOPTO] {operation} succeeded in {elapsed_ms:.0f}ms", extra=extra)
            else:
                logger.warning(
                    f"[PANOPTO] {operation} returned no result ({result!r}) in {elapsed_ms:.0f}ms",
                    extra=extra,
                )
            return result

        return wrapper

    return decorator


__all__ = ["logger", "vendor_operation"]
