"""관리자 라우터 — 연락처, 사용자 디렉토리, 감사 로그.

Admin Router — contact directory, user administration and audit logs.
Every endpoint is gated to the administrator role by the permission gate.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends

from stationsync.api.deps import get_mutation_service, get_sync_service
from stationsync.schemas.common import AuditLog, Contact, UserRecord, UserUpdate
from stationsync.services.mutation_service import MutationService
from stationsync.services.sync_service import SyncService

router: APIRouter = APIRouter()


@router.get("/contacts", response_model=list[Contact])
async def list_contacts(
    sync: Annotated[SyncService, Depends(get_sync_service)],
) -> list[Contact]:
    return await sync.fetch_contacts()


@router.post("/contacts", response_model=list[Contact])
async def save_contact(
    data: Annotated[dict[str, Any], Body()],
    mutations: Annotated[MutationService, Depends(get_mutation_service)],
) -> list[Contact]:
    """연락처 upsert — returns the refreshed directory."""
    await mutations.save_contact(data)
    return list(mutations.store.items("contacts"))


@router.get("/users", response_model=list[UserRecord])
async def list_users(
    sync: Annotated[SyncService, Depends(get_sync_service)],
) -> list[UserRecord]:
    return await sync.list_users()


@router.put("/users/{email}", response_model=list[UserRecord])
async def update_user(
    email: str,
    data: UserUpdate,
    mutations: Annotated[MutationService, Depends(get_mutation_service)],
) -> list[UserRecord]:
    """사용자 역할/역 수정 — returns the refreshed directory."""
    await mutations.update_user(email, data)
    return list(mutations.store.items("users"))


@router.get("/logs", response_model=list[AuditLog])
async def list_logs(
    sync: Annotated[SyncService, Depends(get_sync_service)],
) -> list[AuditLog]:
    return await sync.fetch_logs()
