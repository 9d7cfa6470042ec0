"""변경 조정자 — 원격 상태를 바꾸는 유일한 경로.

Mutation Coordinator — the only path through which remote state changes.

Sequence for every mutation:
    1. 세션 확인 및 권한 게이트 통과 — 실패 시 네트워크 호출 없이 거부
       (session + permission gate; rejected before any network call)
    2. 첨부 파일 인코딩 — 크기 초과 시 전송 전에 거부
       (attachment encoding; oversized files rejected before dispatch)
    3. 명령 전송 (dispatch the command)
    4. 성공 시 영향받은 컬렉션 재조회 — 로컬 패치 없음
       (on success, re-read the affected collections; no local patching)
    5. 실패 시 로컬 상태 유지, 사유를 호출자에게 전달
       (on failure, local state untouched and the reason propagates)

The one local change is clearing the forced-password-change flag after a
successful password change.
"""

import logging
from typing import Any

from fastapi import UploadFile

from stationsync.config import settings
from stationsync.constants import TASK_STATUSES, get_station_name_by_code
from stationsync.schemas.common import (
    ChecklistItem,
    ChecklistSubmissionCreate,
    FilePayload,
    MeetingCreate,
    RegisterRequest,
    Session,
    TaskCreate,
    UserUpdate,
)
from stationsync.services.file_encoder import FileEncoder, file_encoder
from stationsync.services.gateway import RemoteGateway
from stationsync.services.permission_service import Operation, PermissionGate, permission_gate
from stationsync.services.session_state import SessionState
from stationsync.services.store import ApplicationStore
from stationsync.services.sync_service import SyncService
from stationsync.utils.exceptions import AuthorizationFailure, ValidationFailure
from stationsync.utils.password import hash_password

logger = logging.getLogger(__name__)


class MutationService:
    """원격 변경 조정 서비스.

    Args:
        gateway: 원격 게이트웨이 (Remote gateway)
        session_state: 현재 세션 보관소 (Session holder)
        store: 컬렉션 저장소 (Collection store)
        sync: 재조회에 사용하는 동기화 서비스 (Sync service used for refreshes)
        encoder: 첨부 파일 인코더 (Attachment encoder)
        gate: 권한 게이트 (Permission gate)
    """

    def __init__(
        self,
        gateway: RemoteGateway,
        session_state: SessionState,
        store: ApplicationStore,
        sync: SyncService | None = None,
        encoder: FileEncoder = file_encoder,
        gate: PermissionGate = permission_gate,
    ) -> None:
        self.gateway = gateway
        self.session_state = session_state
        self.store = store
        self.sync = sync or SyncService(gateway, session_state, store, gate)
        self.encoder = encoder
        self.gate = gate

    def _authorize(self, operation: Operation) -> Session:
        return self.gate.require(self.session_state.current, operation)

    async def _encode(self, attachment: UploadFile | None) -> FilePayload | None:
        if attachment is None:
            return None
        return await self.encoder.encode(attachment)

    @staticmethod
    def _file_fields(payload: FilePayload | None) -> dict[str, Any]:
        """첨부 파일 필드 — file object plus the configured destination folder."""
        fields: dict[str, Any] = {"folderId": settings.UPLOAD_FOLDER_ID}
        if payload is not None:
            fields["file"] = payload.model_dump(by_alias=True)
        return fields

    # --- 작업 (Tasks) ---

    async def create_task(self, data: TaskCreate) -> dict[str, Any]:
        """작업 생성 (admin). 성공 시 작업 목록 재조회."""
        session = self._authorize(Operation.CREATE_TASK)
        result = await self.gateway.command(
            "createTask",
            {"adminEmail": session.email, "taskData": data.model_dump(by_alias=True)},
        )
        logger.info("Task created by %s for %s", session.email, data.station_name)
        await self.sync.fetch_tasks()
        return result

    async def update_task(
        self,
        uid: str,
        status: str,
        current_attachment_url: str | None = None,
        attachment: UploadFile | None = None,
    ) -> dict[str, Any]:
        """작업 진행 상태 갱신 (첨부 파일 선택).

        Raises:
            AuthorizationFailure: 권한 없음 또는 다른 역의 작업
            ValidationFailure: 알 수 없는 상태값 또는 첨부 파일 크기 초과
        """
        session = self._authorize(Operation.UPDATE_TASK)
        if not uid:
            raise ValidationFailure("Task id is required")
        if status not in TASK_STATUSES:
            raise ValidationFailure(f"Unknown task status: {status}")

        # 로컬에 있는 작업이면 역 범위 확인 — Station scope check for locally known tasks
        known = next((t for t in self.store.items("tasks") if t.uid == uid), None)
        if known is not None and not self.gate.can_view_station(session, known.station_code):
            raise AuthorizationFailure("Task belongs to another station")

        file_payload = await self._encode(attachment)
        result = await self.gateway.command(
            "updateTask",
            {
                "userEmail": session.email,
                "uid": uid,
                "status": status,
                "currentAttachmentUrl": current_attachment_url,
                **self._file_fields(file_payload),
            },
        )
        await self.sync.fetch_tasks()
        return result

    # --- 회의 (Meetings) ---

    async def save_meeting(
        self, data: MeetingCreate, attachment: UploadFile | None = None
    ) -> dict[str, Any]:
        """회의 기록 추가 — append-only; attachment URL is produced remotely."""
        session = self._authorize(Operation.SAVE_MEETING)
        file_payload = await self._encode(attachment)
        result = await self.gateway.command(
            "saveMeeting",
            {
                "userEmail": session.email,
                "data": data.model_dump(by_alias=True),
                **self._file_fields(file_payload),
            },
        )
        await self.sync.fetch_meetings()
        return result

    # --- 연락처 (Contacts) ---

    async def save_contact(self, data: dict[str, Any]) -> dict[str, Any]:
        """연락처 upsert (admin)."""
        session = self._authorize(Operation.SAVE_CONTACT)
        if not data:
            raise ValidationFailure("Contact data is required")
        result = await self.gateway.command("saveContact", {"userEmail": session.email, "data": data})
        await self.sync.fetch_contacts()
        return result

    # --- 사용자 (Users) ---

    async def update_user(self, target_email: str, updates: UserUpdate) -> dict[str, Any]:
        """사용자 레코드 수정 (admin). 성공 시 디렉토리 재조회 — 자기 자신이면 세션도 갱신."""
        session = self._authorize(Operation.UPDATE_USER)
        changes: dict[str, Any] = updates.model_dump(by_alias=True, exclude_none=True)
        if not target_email or not changes:
            raise ValidationFailure("Target email and at least one change are required")
        result = await self.gateway.command(
            "updateUser",
            {"adminEmail": session.email, "targetEmail": target_email, "updates": changes},
        )
        await self.sync.fetch_users()
        return result

    async def register_user(self, data: RegisterRequest) -> dict[str, Any]:
        """자가 등록 — no session required, nothing to refresh."""
        return await self.gateway.command("registerUser", {"user": data.model_dump(by_alias=True)})

    async def change_password(self, new_password: str) -> dict[str, Any]:
        """비밀번호 변경 — 평문은 전송하지 않고 SHA-256 다이제스트만 전송.

        On success the forced-change flag is cleared locally.
        """
        session = self._authorize(Operation.CHANGE_PASSWORD)
        if not new_password:
            raise ValidationFailure("New password is required")
        result = await self.gateway.command(
            "changePassword",
            {"email": session.email, "newPassword": hash_password(new_password)},
        )
        self.session_state.clear_force_change_password()
        logger.info("Password changed for %s", session.email)
        return result

    # --- 체크리스트 (Checklists) ---

    async def save_checklist_template(self, items: list[ChecklistItem]) -> dict[str, Any]:
        """템플릿 전체 교체 — wholesale replacement, then both checklist reads."""
        session = self._authorize(Operation.SAVE_CHECKLIST_TEMPLATE)
        result = await self.gateway.command(
            "saveChecklistTemplate",
            {"userEmail": session.email, "items": [i.model_dump(by_alias=True) for i in items]},
        )
        await self.sync.fetch_checklist_data()
        return result

    async def submit_checklist(self, data: ChecklistSubmissionCreate) -> dict[str, Any]:
        """월간 체크리스트 제출. 역 범위 세션은 자기 역만 제출 가능."""
        session = self._authorize(Operation.SUBMIT_CHECKLIST)
        if not self.gate.can_view_station(session, data.station_code):
            raise AuthorizationFailure("Checklist belongs to another station")
        document: dict[str, Any] = data.model_dump(by_alias=True)
        document["stationName"] = get_station_name_by_code(data.station_code) or data.station_code
        result = await self.gateway.command(
            "submitChecklist", {"userEmail": session.email, "data": document}
        )
        await self.sync.fetch_checklist_data()
        return result
