"""회의 기록 라우터 — 조회 및 추가 (첨부 파일 선택)."""

from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, UploadFile

from stationsync.api.deps import get_mutation_service, get_sync_service
from stationsync.schemas.common import Meeting, MeetingCreate
from stationsync.services.mutation_service import MutationService
from stationsync.services.sync_service import SyncService

router: APIRouter = APIRouter()


@router.get("", response_model=list[Meeting])
async def list_meetings(
    sync: Annotated[SyncService, Depends(get_sync_service)],
) -> list[Meeting]:
    return await sync.fetch_meetings()


@router.post("", response_model=list[Meeting], status_code=201)
async def create_meeting(
    mutations: Annotated[MutationService, Depends(get_mutation_service)],
    date: Annotated[str, Form()],
    subject: Annotated[str, Form()],
    summary: Annotated[str, Form()] = "",
    file: Annotated[UploadFile | None, File()] = None,
) -> list[Meeting]:
    """회의 기록 추가 — returns the refreshed meeting list."""
    data = MeetingCreate(date=date, subject=subject, summary=summary)
    await mutations.save_meeting(data, file)
    return list(mutations.store.items("meetings"))
