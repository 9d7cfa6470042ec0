"""작업 라우터 — 작업 조회, 생성, 진행 상태 갱신.

Task Router — list, create (admin) and progress update with an optional
multipart attachment.

Permission Matrix (역할별 권한):
    - 조회: 로그인 전원, 역 범위 필터 적용
    - 생성: admin
    - 진행 갱신: 로그인 전원 (자기 역의 작업)
"""

from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, UploadFile

from stationsync.api.deps import get_mutation_service, get_sync_service
from stationsync.schemas.common import Task, TaskCreate
from stationsync.services.mutation_service import MutationService
from stationsync.services.sync_service import SyncService

router: APIRouter = APIRouter()


@router.get("", response_model=list[Task])
async def list_tasks(
    sync: Annotated[SyncService, Depends(get_sync_service)],
) -> list[Task]:
    """작업 목록 — re-read from the remote store, scoped to the session's station."""
    return await sync.fetch_tasks()


@router.post("", response_model=list[Task], status_code=201)
async def create_task(
    data: TaskCreate,
    mutations: Annotated[MutationService, Depends(get_mutation_service)],
) -> list[Task]:
    """작업 생성 — admin only. Returns the refreshed task list."""
    await mutations.create_task(data)
    return mutations.sync.visible_tasks()


@router.post("/{uid}/progress", response_model=list[Task])
async def update_task_progress(
    uid: str,
    mutations: Annotated[MutationService, Depends(get_mutation_service)],
    status: Annotated[str, Form()],
    current_attachment_url: Annotated[str | None, Form()] = None,
    file: Annotated[UploadFile | None, File()] = None,
) -> list[Task]:
    """작업 진행 상태 갱신 — optional attachment, returns the refreshed task list."""
    await mutations.update_task(uid, status, current_attachment_url, file)
    return mutations.sync.visible_tasks()
