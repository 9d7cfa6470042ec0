"""원격 게이트웨이 — 단일 엔드포인트 액션 디스패처.

Remote Gateway — single-endpoint action dispatcher.
Reads are ``GET <endpoint>?action=<name>&...``; writes are ``POST <endpoint>``
with a JSON document ``{"action": <name>, ...}`` sent as text/plain.
Every call is independent: no caching, no deduplication, no retry.
"""

import json
import logging
import time
from typing import Any

import httpx

from stationsync.config import settings
from stationsync.utils.events import AxiomEventSink, event_sink, mask_sensitive
from stationsync.utils.exceptions import GENERIC_FAILURE_MESSAGE, RemoteRejection, TransportFailure

logger = logging.getLogger(__name__)

# 원격 서비스는 text/plain 본문만 CORS preflight 없이 받음
_WRITE_HEADERS: dict[str, str] = {"Content-Type": "text/plain;charset=utf-8"}

# 타임아웃 미지정 표시 — None 은 "무제한" 으로 그대로 전달
_USE_SETTINGS: Any = object()


def is_success(body: Any) -> bool:
    """응답 본문에 명시적 성공 표시가 있는지 확인합니다.

    Only a dict carrying ``success: true`` counts as a successful result.
    """
    return isinstance(body, dict) and body.get("success") is True


def failure_message(body: Any) -> str:
    """실패 응답의 사람이 읽을 메시지 — remote message verbatim, else the generic notice."""
    if isinstance(body, dict):
        for key in ("msg", "message", "error"):
            value = body.get(key)
            if isinstance(value, str) and value.strip():
                return value
    return GENERIC_FAILURE_MESSAGE


class RemoteGateway:
    """원격 액션 디스패치 서비스 클라이언트.

    Client for the remote action-dispatch service.

    Args:
        base_url: 엔드포인트 URL — 기본값은 설정의 SCRIPT_URL (Endpoint, defaults to settings)
        transport: httpx 전송 계층 — 테스트에서 MockTransport 주입 (Injected transport for tests)
        timeout: 요청 타임아웃 초 — 생략하면 설정값, None 이면 무제한
            (Timeout in seconds; omitted uses settings, None disables it)
        sink: 이벤트 싱크 (Structured event sink)
    """

    def __init__(
        self,
        base_url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float | None | object = _USE_SETTINGS,
        sink: AxiomEventSink | None = None,
    ) -> None:
        self._base_url: str = settings.SCRIPT_URL if base_url is None else base_url
        self._transport = transport
        self._timeout: float | None = (
            settings.REQUEST_TIMEOUT_SECONDS if timeout is _USE_SETTINGS else timeout
        )
        self._sink: AxiomEventSink = sink or event_sink
        self._client: httpx.AsyncClient | None = None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                transport=self._transport,
                timeout=self._timeout,
                follow_redirects=True,
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def query(self, action: str, params: dict[str, str] | None = None) -> Any:
        """읽기 쿼리를 보내고 파싱된 본문을 반환합니다.

        Issue one read. The parsed body is returned as-is; deciding whether
        it is a usable result is left to the normalizer, which treats any
        unsuccessful or malformed body as "no data".

        Args:
            action: 액션 이름 (e.g. "getTasks")
            params: 추가 쿼리 파라미터 (Extra query parameters)

        Returns:
            Any: 파싱된 JSON 본문 (Parsed JSON body)

        Raises:
            TransportFailure: 네트워크 장애, 미설정 엔드포인트, JSON 이 아닌 본문
        """
        query_params: dict[str, str] = {"action": action, **(params or {})}
        return await self._send("query", action, "GET", params=query_params)

    async def command(self, action: str, payload: dict[str, Any] | None = None) -> dict[str, Any]:
        """쓰기 명령을 보냅니다. 성공 응답만 반환합니다.

        Issue one write. Never retried.

        Returns:
            dict: ``success: true`` 를 포함한 응답 본문 (Successful response body)

        Raises:
            TransportFailure: 네트워크 장애 또는 파싱 불가 응답
            RemoteRejection: 명시적 성공 표시가 없는 응답 — 원격 메시지 그대로 전달
        """
        document: dict[str, Any] = {"action": action, **(payload or {})}
        body = await self._send(
            "command",
            action,
            "POST",
            content=json.dumps(document, ensure_ascii=False).encode("utf-8"),
            headers=_WRITE_HEADERS,
            logged_payload=document,
        )
        if not is_success(body):
            message = failure_message(body)
            logger.info("Remote rejected %s: %s", action, message)
            raise RemoteRejection(message)
        return body

    async def _send(
        self,
        kind: str,
        action: str,
        method: str,
        logged_payload: dict[str, Any] | None = None,
        **request_kwargs: Any,
    ) -> Any:
        if not self._base_url:
            logger.warning("Remote endpoint not configured; %s %s skipped", kind, action)
            raise TransportFailure("Remote endpoint not configured")

        start_time = time.time()
        status_code: int | None = None
        error: str | None = None
        body: Any = None
        try:
            response = await self.client.request(method, self._base_url, **request_kwargs)
            status_code = response.status_code
            try:
                body = response.json()
            except (json.JSONDecodeError, UnicodeDecodeError) as exc:
                error = "non-json body"
                raise TransportFailure("Remote service returned a non-JSON body") from exc
            return body
        except httpx.HTTPError as exc:
            error = f"{type(exc).__name__}: {str(exc)[:300]}"
            logger.warning("Remote %s %s failed: %s", kind, action, error)
            raise TransportFailure() from exc
        finally:
            event: dict[str, Any] = {
                "kind": kind,
                "action": action,
                "status_code": status_code,
                "duration_ms": round((time.time() - start_time) * 1000, 2),
                "success": is_success(body),
            }
            if request_kwargs.get("params"):
                event["params"] = mask_sensitive(request_kwargs["params"])
            if logged_payload is not None:
                event["payload"] = mask_sensitive(logged_payload)
            if error:
                event["error"] = error
            self._sink.emit(event)


# 전역 게이트웨이 싱글턴 — Global gateway singleton
remote_gateway: RemoteGateway = RemoteGateway()
