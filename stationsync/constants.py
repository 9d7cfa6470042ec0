"""도메인 상수 — 정적 역(站) 디렉토리, 역할, 상태값.

Domain constants — static station directory, roles and closed status sets.
The station directory is the single source for name <-> code lookups;
remote payloads are never trusted for station codes.
"""

from typing import Literal

# === 역(站) 디렉토리 (Station directory) ===

# (코드, 이름) 순서 보존 — Ordered (code, name) pairs
STATIONS: tuple[tuple[str, str], ...] = (
    ("ZX", "忠孝站"),
    ("XY", "信義站"),
    ("MS", "民生站"),
    ("SS", "松山站"),
    ("DA", "大安站"),
    ("ZS", "中山站"),
    ("NG", "南港站"),
    ("NH", "內湖站"),
)

_CODE_BY_NAME: dict[str, str] = {name: code for code, name in STATIONS}
_NAME_BY_CODE: dict[str, str] = {code: name for code, name in STATIONS}

# 세션의 "전체 역" 센티널 — Session sentinel meaning no station scoping
ALL_STATIONS: str = "ALL"
# getTasks 의 station 파라미터로 보내는 "전체" 값 — Remote query value for every station
ALL_STATIONS_QUERY: str = "全部"


def get_station_code_by_name(name: str | None) -> str | None:
    """역 이름으로 코드를 조회합니다. 없으면 None (추측하지 않음)."""
    if not name:
        return None
    return _CODE_BY_NAME.get(name.strip())


def get_station_name_by_code(code: str | None) -> str | None:
    """역 코드로 이름을 조회합니다. 없으면 None."""
    if not code:
        return None
    return _NAME_BY_CODE.get(code.strip())


# === 역할 (Roles) ===

ROLE_ADMIN: str = "admin"
ROLE_STATION_MANAGER: str = "station_manager"
ROLE_STAFF: str = "staff"
ROLE_OPERATOR: str = "operator"
ROLE_MANAGER_DEPT: str = "manager_dept"

UserRole = Literal["admin", "station_manager", "staff", "operator", "manager_dept"]

# 조회 전용 역할 — 체크리스트 템플릿 편집/제출 불가 (View-only roles)
READ_ONLY_ROLES: frozenset[str] = frozenset({ROLE_OPERATOR, ROLE_MANAGER_DEPT})


# === 작업 상태 (Task status) ===

TASK_NOT_STARTED: str = "未完成"
TASK_IN_PROGRESS: str = "進行中"
TASK_COMPLETED: str = "已完成"

TaskStatus = Literal["未完成", "進行中", "已完成"]
TASK_STATUSES: frozenset[str] = frozenset({TASK_NOT_STARTED, TASK_IN_PROGRESS, TASK_COMPLETED})


# === 체크리스트 결과 상태 (Checklist result status) ===

CHECK_NORMAL: str = "正常"
CHECK_ISSUE: str = "異常"
CHECK_NOT_APPLICABLE: str = "不適用"

CheckStatus = Literal["正常", "異常", "不適用"]
