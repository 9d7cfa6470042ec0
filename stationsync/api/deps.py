"""FastAPI 의존성 주입 모듈 — 세션 및 서비스 구성.

FastAPI dependency injection module.
Process-wide singletons (gateway, session, store, encoder) are exposed
through provider functions so tests can override them; services are
cheap per-request objects built from those providers.
"""

from typing import Annotated

from fastapi import Depends

from stationsync.schemas.common import Session
from stationsync.services.auth_service import AuthService
from stationsync.services.file_encoder import FileEncoder, file_encoder
from stationsync.services.gateway import RemoteGateway, remote_gateway
from stationsync.services.mutation_service import MutationService
from stationsync.services.session_state import SessionState, session_state
from stationsync.services.store import ApplicationStore, app_store
from stationsync.services.sync_service import SyncService


def get_gateway() -> RemoteGateway:
    return remote_gateway


def get_session_state() -> SessionState:
    return session_state


def get_store() -> ApplicationStore:
    return app_store


def get_file_encoder() -> FileEncoder:
    return file_encoder


def get_sync_service(
    gateway: Annotated[RemoteGateway, Depends(get_gateway)],
    state: Annotated[SessionState, Depends(get_session_state)],
    store: Annotated[ApplicationStore, Depends(get_store)],
) -> SyncService:
    return SyncService(gateway, state, store)


def get_mutation_service(
    gateway: Annotated[RemoteGateway, Depends(get_gateway)],
    state: Annotated[SessionState, Depends(get_session_state)],
    store: Annotated[ApplicationStore, Depends(get_store)],
    sync: Annotated[SyncService, Depends(get_sync_service)],
    encoder: Annotated[FileEncoder, Depends(get_file_encoder)],
) -> MutationService:
    return MutationService(gateway, state, store, sync=sync, encoder=encoder)


def get_auth_service(
    gateway: Annotated[RemoteGateway, Depends(get_gateway)],
    state: Annotated[SessionState, Depends(get_session_state)],
    store: Annotated[ApplicationStore, Depends(get_store)],
) -> AuthService:
    return AuthService(gateway, state, store)


def get_current_session(
    state: Annotated[SessionState, Depends(get_session_state)],
) -> Session:
    """활성 세션을 반환합니다.

    Raises:
        UnauthorizedError(401): 로그인되지 않음 (No active session)
    """
    return state.require()
