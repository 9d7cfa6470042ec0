"""원격 엔티티 Pydantic 스키마 정의.

Remote entity Pydantic schema definitions.
Every entity the remote store returns is validated into one of these
models. Remote keys are camelCase; Python attributes are snake_case.
Closed sets use Literal types. A blank or unknown task status is kept as
unset; a submission keeps its valid results and drops the malformed ones.
"""

from typing import Annotated, Any

import logging

from pydantic import (
    AliasChoices,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)
from pydantic.alias_generators import to_camel

from stationsync.constants import ALL_STATIONS, TASK_STATUSES, CheckStatus, TaskStatus, UserRole

logger = logging.getLogger(__name__)


def _blank_to_none(value: Any) -> Any:
    """빈 문자열을 None 으로 — Empty or whitespace-only text becomes None."""
    if value is None:
        return None
    if isinstance(value, str) and not value.strip():
        return None
    return value


# 선택 텍스트 필드 — Optional text, blanks collapse to None
OptionalText = Annotated[str | None, BeforeValidator(_blank_to_none)]


def _none_to_empty(value: Any) -> Any:
    return "" if value is None else value


# 표시용 텍스트 — null 은 빈 문자열로 (Display text, null collapses to "")
DisplayText = Annotated[str, BeforeValidator(_none_to_empty)]


def _known_task_status(value: Any) -> Any:
    """알 수 없는 작업 상태는 None — Blank or unknown status cells become unset."""
    if isinstance(value, str) and value.strip() in TASK_STATUSES:
        return value.strip()
    return None


# 선택 작업 상태 — Optional task status
OptionalTaskStatus = Annotated[TaskStatus | None, BeforeValidator(_known_task_status)]


class RemoteModel(BaseModel):
    """원격 페이로드 공통 베이스.

    Common base for remote payloads: camelCase aliases, population by
    field name, unknown keys ignored, numbers coerced to text.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        coerce_numbers_to_str=True,
    )


# === 사용자 / 세션 (User / Session) ===


class UserRecord(RemoteModel):
    """사용자 디렉토리 레코드 (getUsers).

    Attributes:
        email: 로그인 이메일 (Login email, identity)
        name: 표시 이름 (Display name)
        role: 역할 (Role, closed set)
        assigned_station: 담당 역 코드 또는 "ALL" (Station code or the all-stations sentinel)
        password: 저장된 SHA-256 다이제스트 — 응답에서 제외 (Stored digest, never dumped)
        force_change_password: 비밀번호 강제 변경 여부 (Forced password change flag)
        organization: 소속 기관 (Organization, optional)
    """

    email: str
    name: str = ""
    role: UserRole
    assigned_station: str = ALL_STATIONS
    password: OptionalText = Field(default=None, exclude=True, repr=False)
    force_change_password: bool = False
    organization: OptionalText = None


class Session(RemoteModel):
    """활성 세션 — Active session record (never persisted)."""

    model_config = ConfigDict(frozen=True)

    email: str
    name: str = ""
    role: UserRole
    assigned_station: str = ALL_STATIONS
    force_change_password: bool = False


class UserUpdate(RemoteModel):
    """관리자 사용자 수정 요청 — Admin-pushed user fields (partial)."""

    name: str | None = None
    role: UserRole | None = None
    assigned_station: str | None = None
    force_change_password: bool | None = None


class RegisterRequest(RemoteModel):
    """자가 등록 요청 — Self-registration payload (registerUser.user)."""

    name: str = Field(min_length=1)
    email: str = Field(min_length=3)
    organization: str = ""


# === 작업 (Task) ===


class Task(RemoteModel):
    """정규화된 작업 엔티티.

    Normalized task entity built from a positional row.
    station_code is always looked up from station_name; None when the
    directory has no match.
    status is None when the cell is blank or outside the known set.
    """

    uid: str
    station_name: str
    station_code: str | None = None
    item_code: str = ""
    item_name: str = ""
    deadline: str = ""
    status: OptionalTaskStatus = None
    executor_email: OptionalText = None
    last_updated: OptionalText = None
    attachment_url: OptionalText = None


class TaskCreate(RemoteModel):
    """작업 생성 요청 (createTask.taskData)."""

    station_name: str = Field(min_length=1)
    item_code: str = ""
    item_name: str = Field(min_length=1)
    deadline: str = Field(min_length=1)
    executor_email: str | None = None


# === 회의 (Meeting) ===


class Meeting(RemoteModel):
    """회의 기록 — append-only meeting record."""

    id: str
    date: str = ""
    subject: str = ""
    summary: str = ""
    created_by: OptionalText = None
    attachment_url: OptionalText = None


class MeetingCreate(RemoteModel):
    """회의 기록 생성 요청 (saveMeeting.data). attachment_url 은 원격이 생성."""

    date: str = Field(min_length=1)
    subject: str = Field(min_length=1)
    summary: str = ""


# === 연락처 (Contact) ===


class Contact(RemoteModel):
    """연락처 — identifier plus organization-specific fields kept as-is."""

    model_config = ConfigDict(extra="allow")

    id: OptionalText = None


# === 체크리스트 (Checklist) ===


class ChecklistItem(RemoteModel):
    """체크리스트 템플릿 항목 — template entry."""

    id: str
    category: str = ""
    content: str = ""


class ChecklistResult(RemoteModel):
    """항목별 점검 결과 — per-item result of a submission."""

    item_id: str
    category: str = ""
    content: str = ""
    status: CheckStatus
    note: OptionalText = None
    photo_url: OptionalText = None


class ChecklistSubmission(RemoteModel):
    """월간 체크리스트 제출 기록.

    station_name is never empty once normalized: it is backfilled from
    the directory, falling back to the raw station code.
    """

    id: str
    year_month: str
    station_code: str
    station_name: DisplayText = ""
    submitted_by: OptionalText = None
    submitted_at: OptionalText = None
    results: list[ChecklistResult] = Field(default_factory=list)

    @field_validator("results", mode="before")
    @classmethod
    def _keep_valid_results(cls, value: Any) -> list[Any]:
        """잘못된 결과 항목만 버림 — drop malformed results, keep the submission."""
        if not isinstance(value, list):
            return []
        results: list[ChecklistResult] = []
        for index, raw in enumerate(value):
            try:
                results.append(ChecklistResult.model_validate(raw))
            except ValidationError as exc:
                logger.debug("Dropped malformed checklist result at index %d: %s", index, exc)
        return results


class ChecklistSubmissionCreate(RemoteModel):
    """체크리스트 제출 요청 (submitChecklist.data)."""

    year_month: str = Field(pattern=r"^\d{4}-\d{2}$")
    station_code: str = Field(min_length=1)
    results: list[ChecklistResult] = Field(min_length=1)


# === 감사 로그 (Audit log) ===


class AuditLog(RemoteModel):
    """시스템 로그 — read-only, administrator-visible."""

    id: OptionalText = None
    timestamp: str = ""
    actor: str = Field(default="", validation_alias=AliasChoices("actor", "user", "userEmail", "email"))
    action: str = ""
    details: OptionalText = None


# === 첨부 파일 (Attachment) ===


class FilePayload(RemoteModel):
    """전송용 첨부 파일 — {name, type, content} sent with updateTask/saveMeeting."""

    name: str
    type: str
    content: str


# === 공통 응답 (Common responses) ===


class MessageResponse(BaseModel):
    """단순 메시지 응답 — Generic message response."""

    message: str
