"""세션 상태 — 프로세스 전역 현재 세션 보관.

Session State — holds at most one active session. Nothing is persisted
across sessions.
"""

import logging
from typing import Any

from stationsync.schemas.common import Session, UserRecord
from stationsync.utils.exceptions import UnauthorizedError

logger = logging.getLogger(__name__)

# 관리자가 갱신할 수 있는 세션 필드 — Fields an administrator may push into a live session
_PATCHABLE_FIELDS: frozenset[str] = frozenset({"name", "role", "assigned_station"})


class SessionState:
    """현재 세션 보관소."""

    def __init__(self) -> None:
        self._session: Session | None = None

    @property
    def current(self) -> Session | None:
        return self._session

    def require(self) -> Session:
        """활성 세션 반환 — raise UnauthorizedError when logged out."""
        if self._session is None:
            raise UnauthorizedError()
        return self._session

    def login(self, user: UserRecord) -> Session:
        """세션 생성 — the only way to populate the session."""
        self._session = Session(
            email=user.email,
            name=user.name,
            role=user.role,
            assigned_station=user.assigned_station,
            force_change_password=user.force_change_password,
        )
        logger.info("Session started for %s (%s)", user.email, user.role)
        return self._session

    def logout(self) -> None:
        """세션 제거 — unconditional."""
        if self._session is not None:
            logger.info("Session ended for %s", self._session.email)
        self._session = None

    def apply_profile_patch(self, fields: dict[str, Any]) -> Session | None:
        """관리자가 보낸 역할/역/이름 변경을 현재 세션에 병합합니다.

        Unknown keys are ignored; a missing session makes this a no-op.
        """
        if self._session is None:
            return None
        updates = {k: v for k, v in fields.items() if k in _PATCHABLE_FIELDS and v is not None}
        if updates:
            # 검증을 거치도록 재생성 — Rebuild so role values are validated
            self._session = Session.model_validate({**self._session.model_dump(), **updates})
        return self._session

    def clear_force_change_password(self) -> None:
        """비밀번호 변경 완료 후 강제 변경 플래그 해제 — session-local, no round trip."""
        if self._session is not None:
            self._session = self._session.model_copy(update={"force_change_password": False})


# 전역 세션 싱글턴 — Global session singleton
session_state: SessionState = SessionState()
