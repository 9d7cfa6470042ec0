"""Axiom 구조화 이벤트 전송 모듈.

Axiom structured event shipping module.
One sink shared by the remote gateway (outbound calls) and the local API
middleware (inbound requests). Sensitive fields are masked and large
strings such as base64 attachments are truncated before shipping.
"""

import logging
import re
from typing import Any

from axiom_py import Client as AxiomClient

from stationsync.config import settings

logger = logging.getLogger(__name__)

# 마스킹 대상 필드 패턴 — Fields to mask in request/response bodies
_SENSITIVE_KEYS = re.compile(
    r"(password|passwd|secret|token|authorization|api_key|apikey|credential)",
    re.IGNORECASE,
)


def mask_sensitive(data: Any, depth: int = 0) -> Any:
    """민감 필드 자동 마스킹 — Recursively mask sensitive fields in dicts/lists."""
    if depth > 5:
        return "..."
    if isinstance(data, dict):
        return {
            k: "***" if _SENSITIVE_KEYS.search(str(k)) else mask_sensitive(v, depth + 1)
            for k, v in data.items()
        }
    if isinstance(data, list):
        return [mask_sensitive(item, depth + 1) for item in data[:20]]
    return truncate(data)


def truncate(value: Any, max_len: int = 2000) -> Any:
    """로그 크기 제한 — Truncate large values to prevent oversized logs."""
    if isinstance(value, str) and len(value) > max_len:
        return value[:max_len] + "...(truncated)"
    return value


class AxiomEventSink:
    """Axiom 데이터셋으로 이벤트를 보내는 싱크.

    Ships structured events to an Axiom dataset. Disabled (no-op) when the
    token or dataset is not configured. Ingest failures never propagate.
    """

    def __init__(self, token: str | None = None, dataset: str | None = None) -> None:
        token = settings.AXIOM_API_TOKEN if token is None else token
        self._dataset: str = settings.AXIOM_DATASET if dataset is None else dataset
        self._client: AxiomClient | None = None

        if token and self._dataset:
            self._client = AxiomClient(token=token)

    @property
    def enabled(self) -> bool:
        return self._client is not None

    def emit(self, event: dict[str, Any]) -> None:
        """이벤트 1건 전송 — Send one event; failures are logged at debug level."""
        if self._client is None:
            return
        try:
            self._client.ingest_events(self._dataset, [event])
        except Exception as exc:  # noqa: BLE001 — 로깅 실패가 요청을 깨지 않도록
            logger.debug("Axiom ingest failed: %s", exc)


# 전역 싱크 싱글턴 — Global sink singleton
event_sink: AxiomEventSink = AxiomEventSink()
