"""Axiom API 로깅 미들웨어.

Axiom API logging middleware.
Captures local API request/response data and ships one structured event
per request through the shared Axiom sink. Sensitive fields are masked;
multipart bodies (attachments) are never captured.
"""

import json
import time
from typing import Any

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from stationsync.utils.events import AxiomEventSink, event_sink, mask_sensitive

# 로깅 제외 경로 — Paths excluded from logging
_SKIP_PATHS = {"/health", "/docs", "/redoc", "/openapi.json"}


class AxiomLoggingMiddleware(BaseHTTPMiddleware):
    """모든 API 요청/응답을 Axiom에 로깅하는 미들웨어.

    Captures: method, path, query params, JSON request body, status code,
    error detail.
    """

    def __init__(self, app: Any, sink: AxiomEventSink | None = None) -> None:
        super().__init__(app)
        self._sink: AxiomEventSink = sink or event_sink

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        # 제외 경로 또는 Axiom 미설정시 패스스루 — Skip excluded paths / unconfigured sink
        if request.url.path in _SKIP_PATHS or not self._sink.enabled:
            return await call_next(request)

        start_time = time.time()
        method = request.method
        path = request.url.path
        query_params = dict(request.query_params) if request.query_params else None

        # JSON 본문만 수집 — Only JSON bodies are captured
        request_body: Any = None
        if method in ("POST", "PUT", "PATCH") and request.headers.get("content-type", "").startswith(
            "application/json"
        ):
            try:
                body_bytes = await request.body()
                if body_bytes:
                    request_body = mask_sensitive(json.loads(body_bytes))
            except (json.JSONDecodeError, UnicodeDecodeError):
                request_body = "(non-json body)"

        error_detail: str | None = None
        status_code: int = 500
        try:
            response = await call_next(request)
            status_code = response.status_code

            # 에러 응답시 body에서 사유 추출 — Extract error detail from error responses
            if status_code >= 400:
                resp_body = b""
                async for chunk in response.body_iterator:
                    resp_body += chunk if isinstance(chunk, bytes) else chunk.encode("utf-8")

                try:
                    error_data = json.loads(resp_body)
                    error_detail = str(error_data.get("detail", error_data))[:500]
                except (json.JSONDecodeError, UnicodeDecodeError, AttributeError):
                    error_detail = resp_body.decode("utf-8", errors="replace")[:500]

                # 소비한 body를 다시 응답으로 반환 — Re-wrap consumed body
                response = Response(
                    content=resp_body,
                    status_code=status_code,
                    headers=dict(response.headers),
                    media_type=response.media_type,
                )
        except Exception as exc:
            error_detail = f"{type(exc).__name__}: {str(exc)[:300]}"
            raise
        finally:
            log_event: dict[str, Any] = {
                "source": "local_api",
                "method": method,
                "path": path,
                "status_code": status_code,
                "duration_ms": round((time.time() - start_time) * 1000, 2),
            }
            if query_params:
                log_event["query_params"] = mask_sensitive(query_params)
            if request_body is not None:
                log_event["request_body"] = request_body
            if error_detail:
                log_event["error"] = error_detail
            self._sink.emit(log_event)

        return response
