"""테스트 인프라 — 가짜 원격 엔드포인트, 서비스, httpx 클라이언트 픽스처.

Test infrastructure — fake remote endpoint on httpx.MockTransport, the
sync services wired to it, and an httpx client for the local API with
dependency overrides.
"""

import inspect
import json
from collections.abc import AsyncGenerator
from typing import Any

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from stationsync.api.deps import get_file_encoder, get_gateway, get_session_state, get_store
from stationsync.constants import ALL_STATIONS
from stationsync.main import app
from stationsync.schemas.common import Session, UserRecord
from stationsync.services.auth_service import AuthService
from stationsync.services.file_encoder import FileEncoder
from stationsync.services.gateway import RemoteGateway
from stationsync.services.mutation_service import MutationService
from stationsync.services.session_state import SessionState
from stationsync.services.store import ApplicationStore
from stationsync.services.sync_service import SyncService
from stationsync.utils.events import AxiomEventSink
from stationsync.utils.password import hash_password

REMOTE_URL = "https://remote.test/exec"


# ---------------------------------------------------------------------------
# 가짜 원격 엔드포인트 (Fake remote endpoint)
# ---------------------------------------------------------------------------
class FakeRemote:
    """요청을 기록하는 가짜 원격 서비스.

    ``reads[action]`` / ``writes[action]`` hold the response for an action:
    a JSON-able value, a raw ``str`` body, an exception to raise, or a
    (possibly async) callable taking the request.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.reads: dict[str, Any] = {}
        self.writes: dict[str, Any] = {}

    @property
    def write_bodies(self) -> list[dict[str, Any]]:
        return [json.loads(r.content) for r in self.requests if r.method == "POST"]

    @property
    def read_actions(self) -> list[str]:
        return [r.url.params["action"] for r in self.requests if r.method == "GET"]

    async def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.method == "GET":
            action = request.url.params.get("action")
            reply = self.reads.get(action, {"success": False, "msg": "unknown action"})
        else:
            action = json.loads(request.content).get("action")
            reply = self.writes.get(action, {"success": True})

        if callable(reply):
            reply = reply(request)
            if inspect.isawaitable(reply):
                reply = await reply
        if isinstance(reply, Exception):
            raise reply
        if isinstance(reply, str):
            return httpx.Response(200, text=reply)
        return httpx.Response(200, json=reply)


# ---------------------------------------------------------------------------
# 샘플 데이터 (Sample data)
# ---------------------------------------------------------------------------
def user_record(
    email: str,
    role: str,
    station: str = ALL_STATIONS,
    password: str = "secret123",
    force_change: bool = False,
) -> dict[str, Any]:
    """원격 디렉토리 형식의 사용자 레코드 — camelCase remote shape."""
    return {
        "email": email,
        "name": email.split("@")[0],
        "role": role,
        "assignedStation": station,
        "password": hash_password(password),
        "forceChangePassword": force_change,
    }


USERS: list[dict[str, Any]] = [
    user_record("admin@x.com", "admin"),
    user_record("zx@x.com", "station_manager", "ZX"),
    user_record("op@x.com", "operator"),
    user_record("new@x.com", "staff", "XY", force_change=True),
]

TASK_ROWS: list[list[Any]] = [
    ["T1", "忠孝站", "A1", "保養", "2024-05-01", "未完成", "u@x.com", "2024-04-20", ""],
    ["T2", "信義站", "A2", "清潔", "2024-05-02", "進行中", "v@x.com", "2024-04-21", "https://files/a.pdf"],
    ["T3", "忠孝站", "A3", "巡檢", "2024-05-03", "已完成", "", "", ""],
]

SUBMISSIONS: list[dict[str, Any]] = [
    {
        "id": "S1",
        "yearMonth": "2024-05",
        "stationCode": "ZX",
        "submittedBy": "zx@x.com",
        "submittedAt": "2024-05-03T10:00:00Z",
        "results": [{"itemId": "I1", "category": "消防", "content": "滅火器", "status": "正常"}],
    },
    {
        "id": "S2",
        "yearMonth": "2024-05",
        "stationCode": "XY",
        "stationName": "信義站",
        "results": [],
    },
]

TEMPLATE: list[dict[str, Any]] = [
    {"id": "I1", "category": "消防", "content": "滅火器"},
    {"id": "I2", "category": "環境", "content": "地面清潔"},
]


def make_session(role: str, station: str = ALL_STATIONS, force_change: bool = False) -> Session:
    return Session(
        email=f"{role}@x.com",
        name=role,
        role=role,
        assigned_station=station,
        force_change_password=force_change,
    )


def login_as(
    state: SessionState, role: str, station: str = ALL_STATIONS, force_change: bool = False
) -> Session:
    """원격 호출 없이 세션을 만듭니다 — Start a session without a remote round trip."""
    return state.login(UserRecord(
        email=f"{role}@x.com",
        name=role,
        role=role,
        assigned_station=station,
        force_change_password=force_change,
    ))


# ---------------------------------------------------------------------------
# 서비스 픽스처 (Service fixtures)
# ---------------------------------------------------------------------------
@pytest.fixture
def remote() -> FakeRemote:
    fake = FakeRemote()
    fake.reads.update({
        "getUsers": USERS,
        "getTasks": {"success": True, "tasks": TASK_ROWS},
        "getMeetings": {"success": True, "meetings": []},
        "getContacts": {"success": True, "contacts": []},
        "getLogs": {"success": True, "logs": []},
        "getChecklistSubmissions": {"success": True, "submissions": SUBMISSIONS},
        "getChecklistTemplate": {"success": True, "template": TEMPLATE},
    })
    return fake


@pytest_asyncio.fixture
async def gateway(remote: FakeRemote) -> AsyncGenerator[RemoteGateway, None]:
    gw = RemoteGateway(
        base_url=REMOTE_URL,
        transport=httpx.MockTransport(remote.handle),
        sink=AxiomEventSink(token="", dataset=""),
    )
    yield gw
    await gw.aclose()


@pytest.fixture
def state() -> SessionState:
    return SessionState()


@pytest.fixture
def store() -> ApplicationStore:
    return ApplicationStore()


@pytest.fixture
def encoder() -> FileEncoder:
    return FileEncoder(max_bytes=1024)


@pytest.fixture
def sync(gateway: RemoteGateway, state: SessionState, store: ApplicationStore) -> SyncService:
    return SyncService(gateway, state, store)


@pytest.fixture
def mutations(
    gateway: RemoteGateway,
    state: SessionState,
    store: ApplicationStore,
    sync: SyncService,
    encoder: FileEncoder,
) -> MutationService:
    return MutationService(gateway, state, store, sync=sync, encoder=encoder)


@pytest.fixture
def auth(gateway: RemoteGateway, state: SessionState, store: ApplicationStore) -> AuthService:
    return AuthService(gateway, state, store)


@pytest_asyncio.fixture
async def client(
    gateway: RemoteGateway,
    state: SessionState,
    store: ApplicationStore,
    encoder: FileEncoder,
) -> AsyncGenerator[AsyncClient, None]:
    """로컬 API 테스트 클라이언트 — 싱글턴 의존성을 오버라이드합니다."""
    app.dependency_overrides[get_gateway] = lambda: gateway
    app.dependency_overrides[get_session_state] = lambda: state
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_file_encoder] = lambda: encoder

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
