"""엔티티 정규화 — 원격 응답 본문을 타입이 있는 엔티티로 변환.

Entity Normalizer — turns raw, shape-inconsistent response bodies into
typed entity lists.

Rules shared by every entity type:
    - 본문에 ``success: true`` 가 없으면 빈 목록 (No explicit success => empty list)
    - 컬렉션은 의미 키(예: "tasks") 또는 일반 키("data") 아래에 있음 — 둘 다 영구 지원
      (The collection sits under a semantic key or the generic "data" key)
    - 잘못된 모양의 요소는 조용히 버리고 나머지는 순서대로 유지
      (Malformed elements are dropped, the rest keep their order)
    - 이 모듈의 함수는 예외를 던지지 않음 (Functions here never raise)
"""

import logging
from collections.abc import Callable, Sequence
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from stationsync.constants import get_station_code_by_name, get_station_name_by_code
from stationsync.schemas.common import (
    AuditLog,
    ChecklistItem,
    ChecklistSubmission,
    Contact,
    Meeting,
    Task,
    UserRecord,
)
from stationsync.services.gateway import is_success

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

# 일반 폴백 키 — Generic fallback collection key
GENERIC_KEY: str = "data"

# 작업 행의 위치 계약 — Ordinal contract of a positional task row
TASK_ROW_FIELDS: tuple[str, ...] = (
    "uid",
    "station_name",
    "item_code",
    "item_name",
    "deadline",
    "status",
    "executor_email",
    "last_updated",
    "attachment_url",
)
# 상태 열까지는 있어야 작업 행으로 인정 — Rows shorter than this are malformed
TASK_ROW_MIN_FIELDS: int = TASK_ROW_FIELDS.index("status") + 1


def extract_collection(body: Any, key: str) -> list[Any]:
    """성공 응답에서 컬렉션을 꺼냅니다.

    Return the list under ``key`` or, failing that, under the generic key.
    Anything else (unsuccessful body, missing list) yields an empty list.
    """
    if not is_success(body):
        return []
    for candidate in (key, GENERIC_KEY):
        value = body.get(candidate)
        if isinstance(value, list):
            return value
    return []


def _validate_each(
    raw_items: Sequence[Any],
    model: type[ModelT],
    prepare: Callable[[Any], Any] | None = None,
) -> list[ModelT]:
    entities: list[ModelT] = []
    for index, raw in enumerate(raw_items):
        try:
            candidate = prepare(raw) if prepare else raw
            if candidate is None:
                raise ValueError("unsupported element shape")
            entities.append(model.model_validate(candidate))
        except (ValidationError, ValueError, TypeError) as exc:
            logger.debug("Dropped malformed %s at index %d: %s", model.__name__, index, exc)
    return entities


# === 작업 (Task) ===


def _task_row_to_dict(row: Any) -> dict[str, Any] | None:
    """위치 기반 행을 필드 딕셔너리로 변환 — station_code 는 항상 디렉토리에서 유도."""
    if not isinstance(row, (list, tuple)) or len(row) < TASK_ROW_MIN_FIELDS:
        return None
    padded: list[Any] = list(row[: len(TASK_ROW_FIELDS)])
    padded += [None] * (len(TASK_ROW_FIELDS) - len(padded))
    fields: dict[str, Any] = dict(zip(TASK_ROW_FIELDS, padded))
    station_name = fields["station_name"]
    fields["station_code"] = get_station_code_by_name(station_name if isinstance(station_name, str) else None)
    return fields


def normalize_tasks(body: Any) -> list[Task]:
    """getTasks 응답 정규화 — rows arrive as positional sequences."""
    return _validate_each(extract_collection(body, "tasks"), Task, _task_row_to_dict)


# === 체크리스트 (Checklist) ===


def repair_submission(submission: ChecklistSubmission) -> ChecklistSubmission:
    """역 이름 보정 — 비어 있으면 디렉토리 이름, 없으면 코드 원문으로 채움.

    Backfill a missing, null or blank station name from the directory,
    falling back to the raw code. Idempotent; identifier and results are never touched.
    """
    if submission.station_name.strip():
        return submission
    name: str = get_station_name_by_code(submission.station_code) or submission.station_code
    return submission.model_copy(update={"station_name": name})


def normalize_checklist_submissions(body: Any) -> list[ChecklistSubmission]:
    """getChecklistSubmissions 응답 정규화 (역 이름 보정 포함)."""
    submissions = _validate_each(extract_collection(body, "submissions"), ChecklistSubmission)
    return [repair_submission(s) for s in submissions]


def normalize_checklist_template(body: Any) -> list[ChecklistItem]:
    """getChecklistTemplate 응답 정규화."""
    return _validate_each(extract_collection(body, "template"), ChecklistItem)


# === 기타 컬렉션 (Other collections) ===


def normalize_users(body: Any) -> list[UserRecord]:
    """getUsers 응답 정규화.

    The user directory is served either as a bare list or wrapped like
    every other collection; both are accepted.
    """
    raw_items: list[Any] = body if isinstance(body, list) else extract_collection(body, "users")
    return _validate_each(raw_items, UserRecord)


def normalize_meetings(body: Any) -> list[Meeting]:
    return _validate_each(extract_collection(body, "meetings"), Meeting)


def normalize_contacts(body: Any) -> list[Contact]:
    return _validate_each(extract_collection(body, "contacts"), Contact)


def normalize_logs(body: Any) -> list[AuditLog]:
    return _validate_each(extract_collection(body, "logs"), AuditLog)
