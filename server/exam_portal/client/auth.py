"""
Explicit authentication context for client code.

Holds the identity of the logged-in user between `login()` and `logout()`.
Components that need the identity receive this object instead of reading
shared global state.
"""
import logging
from typing import Awaitable, Callable, List, Optional

from exam_portal.client.api import ExamApiClient
from exam_portal.errors import AuthError
from exam_portal.models.user import UserRole

logger = logging.getLogger(__name__)

LogoutListener = Callable[[], Awaitable[None]]


class AuthContext:
    def __init__(self, api: ExamApiClient):
        self.api = api
        self.token: Optional[str] = None
        self.email: Optional[str] = None
        self.role: Optional[UserRole] = None
        self._logout_listeners: List[LogoutListener] = []

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None

    async def login(self, email: str, password: str, expected_role: UserRole) -> "AuthContext":
        """
        Log in and keep the identity only if the account has `expected_role`.
        A student account cannot enter through the teacher login and vice versa.
        """
        result = await self.api.login(email, password)
        if result.role != expected_role:
            logger.info("Role mismatch for %s: %s", result.email, result.role.value)
            raise AuthError(f"This login is for {expected_role.value}s only")

        self.token = result.token
        self.email = result.email
        self.role = result.role
        self.api.set_token(result.token)
        return self

    def add_logout_listener(self, listener: LogoutListener) -> None:
        if listener not in self._logout_listeners:
            self._logout_listeners.append(listener)

    def remove_logout_listener(self, listener: LogoutListener) -> None:
        if listener in self._logout_listeners:
            self._logout_listeners.remove(listener)

    async def logout(self) -> None:
        """Tear down everything bound to this identity, then forget it."""
        for listener in list(self._logout_listeners):
            await listener()
        self._logout_listeners.clear()
        self.token = None
        self.email = None
        self.role = None
        self.api.set_token(None)
