"""URL utility functions."""
import urllib.parse

SOAP_API_PATH = "/Panopto/PublicAPI/4.6"
REST_API_PATH = "/Panopto/PublicAPI/4.1"


def build_base_url(hostname: str) -> str:
    """
    Turn a configured Panopto hostname into a base URL.

    Args:
        hostname: Bare hostname or full URL

    Returns:
        Base URL with scheme and no trailing slash
    """
    hostname = hostname.strip()
    if not hostname.lower().startswith(("http://", "https://")):
        hostname = f"https://{hostname}"
    return hostname.rstrip("/")


def soap_service_url(base_url: str, service: str) -> str:
    """Address of a SOAP service, e.g. ``Auth.svc``."""
    return f"{base_url}{SOAP_API_PATH}/{service}"


def cookie_domain(base_url: str) -> str:
    """Host the shared cookie jar keys vendor cookies under."""
    return urllib.parse.urlparse(base_url).hostname or ""
