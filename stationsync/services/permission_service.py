"""권한 게이트 — 역할/역 기반 변경 및 조회 권한 판단.

Permission Gate — decides whether a session may perform an operation or
see an entity. Every mutation entry point consults it; UI-level hiding of
controls reads the same predicate and is never a second source of truth.

Permission Matrix (역할별 권한):
    - 작업 생성, 사용자 수정, 연락처 저장: admin
    - 감사 로그 / 연락처 / 사용자 디렉토리 조회: admin
    - 체크리스트 템플릿 편집, 체크리스트 제출: 조회 전용 역할 제외 전원
    - 작업 진행 갱신, 회의 기록 저장, 비밀번호 변경: 로그인한 전원
    - 비밀번호 강제 변경 중에는 비밀번호 변경 외 모든 변경 거부
"""

from collections.abc import Iterable
from enum import Enum
from typing import Protocol, TypeVar

from stationsync.constants import ALL_STATIONS, READ_ONLY_ROLES, ROLE_ADMIN
from stationsync.schemas.common import Session
from stationsync.utils.exceptions import AuthorizationFailure, UnauthorizedError


class Operation(str, Enum):
    """권한 검사 대상 작업 — Operations guarded by the gate."""

    CREATE_TASK = "createTask"
    UPDATE_TASK = "updateTask"
    SAVE_MEETING = "saveMeeting"
    SAVE_CONTACT = "saveContact"
    UPDATE_USER = "updateUser"
    CHANGE_PASSWORD = "changePassword"
    SAVE_CHECKLIST_TEMPLATE = "saveChecklistTemplate"
    SUBMIT_CHECKLIST = "submitChecklist"
    VIEW_LOGS = "viewLogs"
    VIEW_CONTACTS = "viewContacts"
    VIEW_USERS = "viewUsers"


_ADMIN_ONLY: frozenset[Operation] = frozenset({
    Operation.CREATE_TASK,
    Operation.UPDATE_USER,
    Operation.SAVE_CONTACT,
    Operation.VIEW_LOGS,
    Operation.VIEW_CONTACTS,
    Operation.VIEW_USERS,
})

_WRITABLE_ROLES_ONLY: frozenset[Operation] = frozenset({
    Operation.SAVE_CHECKLIST_TEMPLATE,
    Operation.SUBMIT_CHECKLIST,
})

_ANY_SESSION: frozenset[Operation] = frozenset({
    Operation.UPDATE_TASK,
    Operation.SAVE_MEETING,
    Operation.CHANGE_PASSWORD,
})

_VIEWS: frozenset[Operation] = frozenset({
    Operation.VIEW_LOGS,
    Operation.VIEW_CONTACTS,
    Operation.VIEW_USERS,
})


class StationScoped(Protocol):
    station_code: str | None


EntityT = TypeVar("EntityT", bound=StationScoped)


class PermissionGate:
    """순수 권한 판단기 — pure predicates over a session."""

    def can_perform(self, session: Session | None, operation: Operation) -> bool:
        """세션이 작업을 수행할 수 있는지 판단합니다. 명시되지 않은 작업은 거부."""
        if session is None:
            return False
        if (
            session.force_change_password
            and operation not in _VIEWS
            and operation is not Operation.CHANGE_PASSWORD
        ):
            return False
        if operation in _ADMIN_ONLY:
            return session.role == ROLE_ADMIN
        if operation in _WRITABLE_ROLES_ONLY:
            return session.role not in READ_ONLY_ROLES
        return operation in _ANY_SESSION

    def require(self, session: Session | None, operation: Operation) -> Session:
        """권한이 없으면 예외 — Return the session or raise.

        Raises:
            UnauthorizedError: 활성 세션 없음 (No active session)
            AuthorizationFailure: 권한 부족 또는 비밀번호 변경 필요
        """
        if session is None:
            raise UnauthorizedError()
        if not self.can_perform(session, operation):
            if session.force_change_password and operation not in _VIEWS:
                raise AuthorizationFailure("Password change required before other changes")
            raise AuthorizationFailure(f"Role '{session.role}' may not perform {operation.value}")
        return session

    def is_station_scoped(self, session: Session) -> bool:
        return session.role != ROLE_ADMIN and session.assigned_station != ALL_STATIONS

    def can_view_station(self, session: Session | None, station_code: str | None) -> bool:
        """역 범위 가시성 — scoped sessions see only their own station, exactly."""
        if session is None:
            return False
        if not self.is_station_scoped(session):
            return True
        return station_code is not None and station_code == session.assigned_station

    def filter_visible(self, session: Session | None, entities: Iterable[EntityT]) -> list[EntityT]:
        """가시 엔티티만 순서대로 반환합니다."""
        return [e for e in entities if self.can_view_station(session, e.station_code)]


# 전역 게이트 싱글턴 — Global gate singleton
permission_gate: PermissionGate = PermissionGate()
