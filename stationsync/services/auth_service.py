"""인증 서비스 — 사용자 디렉토리 기반 로그인/로그아웃.

Auth Service — login against the remote user directory and logout.
"""

import logging

from stationsync.schemas.common import Session, UserRecord
from stationsync.services import normalizer
from stationsync.services.gateway import RemoteGateway
from stationsync.services.session_state import SessionState
from stationsync.services.store import ApplicationStore
from stationsync.utils.exceptions import UnauthorizedError
from stationsync.utils.password import verify_password

logger = logging.getLogger(__name__)


class AuthService:
    """로그인/로그아웃 서비스."""

    def __init__(
        self,
        gateway: RemoteGateway,
        session_state: SessionState,
        store: ApplicationStore,
    ) -> None:
        self.gateway = gateway
        self.session_state = session_state
        self.store = store

    async def login(self, email: str, password: str) -> Session:
        """이메일과 비밀번호로 로그인합니다.

        Re-reads the user directory, matches the email case-insensitively
        and compares the password digest. The previous session's
        collections are discarded.

        Raises:
            TransportFailure: 디렉토리를 읽을 수 없음 (Directory unreachable)
            UnauthorizedError: 사용자 없음 또는 비밀번호 불일치 (Invalid credentials)
        """
        users: list[UserRecord] = normalizer.normalize_users(await self.gateway.query("getUsers"))
        wanted: str = email.strip().lower()
        user: UserRecord | None = next((u for u in users if u.email.strip().lower() == wanted), None)

        if user is None or not user.password or not verify_password(password, user.password):
            logger.info("Login rejected for %s", email)
            raise UnauthorizedError("Invalid email or password")

        self.store.reset()
        ticket: int = self.store.begin_refresh("users")
        self.store.apply_refresh("users", ticket, users)
        return self.session_state.login(user)

    def logout(self) -> None:
        """세션과 모든 컬렉션을 비웁니다."""
        self.session_state.logout()
        self.store.reset()
