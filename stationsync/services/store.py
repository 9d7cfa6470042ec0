"""애플리케이션 저장소 — 컬렉션별 최신 조회 결과 보관.

Application Store — one state record per collection.

Each collection is replaced wholesale by a refresh. Refreshes carry a
monotonically increasing ticket per collection; a response whose ticket
is older than the latest dispatched one is discarded, so a slow stale
read can never overwrite a newer one.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

COLLECTIONS: tuple[str, ...] = (
    "tasks",
    "users",
    "meetings",
    "contacts",
    "logs",
    "checklist_submissions",
    "checklist_template",
)


@dataclass
class CollectionState:
    """컬렉션 상태.

    Attributes:
        items: 마지막으로 적용된 엔티티 (Last applied entities, immutable)
        latest_ticket: 마지막으로 발급한 조회 번호 (Latest dispatched ticket)
        applied_ticket: 마지막으로 적용된 조회 번호 (Ticket of the applied items)
        pending: 최신 조회가 진행 중인지 (Whether the latest refresh is in flight)
    """

    items: tuple[Any, ...] = ()
    latest_ticket: int = 0
    applied_ticket: int = 0
    pending: bool = False


class ApplicationStore:
    """컬렉션 저장소 — narrow mutation API over all collection state."""

    def __init__(self) -> None:
        self._collections: dict[str, CollectionState] = {}
        self.reset()

    def _get(self, name: str) -> CollectionState:
        try:
            return self._collections[name]
        except KeyError:
            raise KeyError(f"Unknown collection: {name}") from None

    def reset(self) -> None:
        """전체 초기화 — used on login and logout."""
        self._collections = {name: CollectionState() for name in COLLECTIONS}

    def begin_refresh(self, name: str) -> int:
        """새 조회 번호를 발급하고 진행 중으로 표시합니다."""
        state = self._get(name)
        state.latest_ticket += 1
        state.pending = True
        return state.latest_ticket

    def apply_refresh(self, name: str, ticket: int, items: Sequence[Any]) -> bool:
        """조회 결과 적용 — discarded when a newer request for the same collection
        has already been dispatched.

        Returns:
            bool: 적용되었으면 True (True when applied)
        """
        state = self._get(name)
        if ticket < state.latest_ticket:
            logger.debug("Discarded stale %s refresh #%d (latest #%d)", name, ticket, state.latest_ticket)
            return False
        state.items = tuple(items)
        state.applied_ticket = ticket
        state.pending = False
        return True

    def abandon_refresh(self, name: str, ticket: int) -> None:
        """실패한 조회 — items stay untouched; pending clears if this was the latest."""
        state = self._get(name)
        if ticket == state.latest_ticket:
            state.pending = False

    def items(self, name: str) -> tuple[Any, ...]:
        return self._get(name).items

    def is_pending(self, name: str) -> bool:
        return self._get(name).pending

    def state(self, name: str) -> CollectionState:
        return self._get(name)


# 전역 저장소 싱글턴 — Global store singleton
app_store: ApplicationStore = ApplicationStore()
