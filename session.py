"""
Mock authentication: a single current identity checked against a fixed
credential registry. No hashing, no tokens, no expiry.
"""

from typing import Iterable, List, Optional

from app_logger import get_logger
from schemas import Credential, SessionUser
import seed

logger = get_logger("session")


class Session:
    def __init__(self, registry: Optional[Iterable[Credential]] = None) -> None:
        self._registry: List[Credential] = list(seed.credentials() if registry is None else registry)
        self.current_user: Optional[SessionUser] = None

    def login(self, email: str, password: str) -> bool:
        found = next(
            (c for c in self._registry if c.email == email and c.password == password),
            None,
        )
        if found is None:
            logger.warning("Login failed for %s", email)
            return False
        self.current_user = found.identity()
        logger.info("Logged in %s as %s", email, found.role)
        return True

    def logout(self) -> None:
        if self.current_user is not None:
            logger.info("Logged out %s", self.current_user.email)
        self.current_user = None

    def is_authenticated(self) -> bool:
        return self.current_user is not None

    @property
    def role(self) -> Optional[str]:
        return self.current_user.role if self.current_user else None
