"""Vendor login handshake shared by every Panopto call."""
import asyncio
from typing import Optional

from requests.cookies import RequestsCookieJar

from panoproxy.constants import LoginState
from panoproxy.schemas.session import AuthenticationInfo
from panoproxy.utils.logger import logger


class LoginManager:
    """
    Runs the LogOnWithPassword handshake once and caches its result.

    The state moves UNAUTHENTICATED -> AUTHENTICATING -> AUTHENTICATED under a
    single lock. Callers arriving while a handshake is in flight wait on the
    lock and then see its outcome, so concurrent first requests cause exactly
    one vendor login. A failed handshake returns to UNAUTHENTICATED and the
    next caller tries again.
    """

    def __init__(self, gateway, cookies: RequestsCookieJar, cookie_domain: str, username: str, password: str):
        self.gateway = gateway
        self.cookies = cookies
        self.cookie_domain = cookie_domain
        self._username = username
        self._password = password
        self._lock = asyncio.Lock()
        self.state = LoginState.UNAUTHENTICATED
        self.auth_info: Optional[AuthenticationInfo] = None

    @property
    def is_logged_in(self) -> bool:
        return self.state == LoginState.AUTHENTICATED

    async def ensure_logged_in(self) -> bool:
        """
        Make sure the vendor handshake has succeeded.

        Returns:
            True once logged in, False if the handshake failed
        """
        if self.is_logged_in:
            return True

        async with self._lock:
            if self.is_logged_in:
                return True

            self.state = LoginState.AUTHENTICATING
            success = False
            try:
                success = await asyncio.to_thread(self._log_in)
            finally:
                self.state = LoginState.AUTHENTICATED if success else LoginState.UNAUTHENTICATED
            return success

    def _log_in(self) -> bool:
        try:
            response = self.gateway.log_on_with_password(self._username, self._password)
        except Exception as e:
            logger.error(f"[LOGIN] SOAP login failed: {e}", exc_info=True)
            return False

        # A false result counts as a failed handshake even without a fault
        if not response.accepted:
            logger.error(f"[LOGIN] Panopto rejected the login for user {self._username}")
            return False

        if response.set_cookie:
            for name, value in response.cookies.items():
                self.cookies.set(name, value, domain=self.cookie_domain, path="/")
            logger.info(
                f"[LOGIN] Stored cookies for {self.cookie_domain}: {', '.join(sorted(response.cookies)) or 'none'}"
            )
        else:
            logger.warning("[LOGIN] No Set-Cookie header in the login response")

        self.auth_info = AuthenticationInfo(user_key=self._username, password=self._password)
        logger.info("[LOGIN] SOAP login successful")
        return True
