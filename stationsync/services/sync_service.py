"""동기화 서비스 — 원격 컬렉션 조회 및 저장소 갱신.

Sync Service — read paths. Each fetch issues one read, normalizes the
body and replaces the collection wholesale.

Failure handling:
    - TransportFailure: 경고 로그, 컬렉션 유지 (logged, collection unchanged)
    - 실패/잘못된 본문: 정규화 결과인 빈 목록으로 교체 (replaced by the empty result)
    - 그 외 예외 (권한 등)는 호출자에게 전파 (everything else propagates)
"""

import asyncio
import logging
from collections.abc import Callable, Sequence
from typing import Any

from stationsync.constants import ALL_STATIONS, ALL_STATIONS_QUERY, get_station_name_by_code
from stationsync.schemas.common import (
    AuditLog,
    ChecklistItem,
    ChecklistSubmission,
    Contact,
    Meeting,
    Session,
    Task,
    UserRecord,
)
from stationsync.services import normalizer
from stationsync.services.gateway import RemoteGateway
from stationsync.services.permission_service import Operation, PermissionGate, permission_gate
from stationsync.services.session_state import SessionState
from stationsync.services.store import ApplicationStore
from stationsync.utils.exceptions import TransportFailure

logger = logging.getLogger(__name__)


def station_query_for(session: Session) -> str:
    """getTasks 의 station 파라미터 — sentinel or unknown code maps to every station."""
    if session.assigned_station == ALL_STATIONS:
        return ALL_STATIONS_QUERY
    return get_station_name_by_code(session.assigned_station) or ALL_STATIONS_QUERY


class SyncService:
    """원격 컬렉션 동기화 서비스.

    Args:
        gateway: 원격 게이트웨이 (Remote gateway)
        session_state: 현재 세션 보관소 (Session holder)
        store: 컬렉션 저장소 (Collection store)
        gate: 권한 게이트 (Permission gate)
    """

    def __init__(
        self,
        gateway: RemoteGateway,
        session_state: SessionState,
        store: ApplicationStore,
        gate: PermissionGate = permission_gate,
    ) -> None:
        self.gateway = gateway
        self.session_state = session_state
        self.store = store
        self.gate = gate

    async def _refresh(
        self,
        collection: str,
        action: str,
        normalize: Callable[[Any], Sequence[Any]],
        params: dict[str, str] | None = None,
    ) -> bool:
        """조회 1회 후 저장소에 적용합니다. 적용되었으면 True."""
        ticket: int = self.store.begin_refresh(collection)
        try:
            body = await self.gateway.query(action, params)
        except TransportFailure as exc:
            logger.warning("Refresh of %s failed: %s", collection, exc.detail)
            self.store.abandon_refresh(collection, ticket)
            return False
        return self.store.apply_refresh(collection, ticket, normalize(body))

    # --- 사용자 (Users) ---

    async def fetch_users(self) -> list[UserRecord]:
        """사용자 디렉토리를 다시 읽고 활성 세션의 프로필을 갱신합니다.

        Re-reading the directory is the only way administrator-pushed role
        or station changes reach the live session.
        """
        if await self._refresh("users", "getUsers", normalizer.normalize_users):
            session = self.session_state.current
            if session is not None:
                own = next(
                    (u for u in self.store.items("users") if u.email.lower() == session.email.lower()),
                    None,
                )
                if own is not None:
                    self.session_state.apply_profile_patch({
                        "name": own.name,
                        "role": own.role,
                        "assigned_station": own.assigned_station,
                    })
        return list(self.store.items("users"))

    async def list_users(self) -> list[UserRecord]:
        """관리자용 사용자 목록 — admin only."""
        self.gate.require(self.session_state.current, Operation.VIEW_USERS)
        return await self.fetch_users()

    # --- 작업 (Tasks) ---

    async def fetch_tasks(self) -> list[Task]:
        session = self.session_state.require()
        await self._refresh(
            "tasks", "getTasks", normalizer.normalize_tasks, {"station": station_query_for(session)}
        )
        return self.visible_tasks()

    def visible_tasks(self) -> list[Task]:
        return self.gate.filter_visible(self.session_state.current, self.store.items("tasks"))

    # --- 회의 (Meetings) ---

    async def fetch_meetings(self) -> list[Meeting]:
        self.session_state.require()
        await self._refresh("meetings", "getMeetings", normalizer.normalize_meetings)
        return list(self.store.items("meetings"))

    # --- 관리자 데이터 (Admin datasets) ---

    async def fetch_contacts(self) -> list[Contact]:
        self.gate.require(self.session_state.current, Operation.VIEW_CONTACTS)
        await self._refresh("contacts", "getContacts", normalizer.normalize_contacts)
        return list(self.store.items("contacts"))

    async def fetch_logs(self) -> list[AuditLog]:
        self.gate.require(self.session_state.current, Operation.VIEW_LOGS)
        await self._refresh("logs", "getLogs", normalizer.normalize_logs)
        return list(self.store.items("logs"))

    # --- 체크리스트 (Checklists) ---

    async def fetch_checklist_submissions(self) -> bool:
        return await self._refresh(
            "checklist_submissions",
            "getChecklistSubmissions",
            normalizer.normalize_checklist_submissions,
        )

    async def fetch_checklist_template(self) -> bool:
        return await self._refresh(
            "checklist_template", "getChecklistTemplate", normalizer.normalize_checklist_template
        )

    async def fetch_checklist_data(self) -> tuple[bool, bool]:
        """제출 목록과 템플릿을 동시에 조회합니다.

        Both reads run concurrently and apply independently; a failure on
        one never blocks the other.

        Returns:
            tuple[bool, bool]: (제출 목록 적용 여부, 템플릿 적용 여부)
        """
        self.session_state.require()
        submissions_ok, template_ok = await asyncio.gather(
            self.fetch_checklist_submissions(),
            self.fetch_checklist_template(),
        )
        return submissions_ok, template_ok

    def visible_submissions(self) -> list[ChecklistSubmission]:
        return self.gate.filter_visible(
            self.session_state.current, self.store.items("checklist_submissions")
        )

    def checklist_template(self) -> list[ChecklistItem]:
        return list(self.store.items("checklist_template"))
