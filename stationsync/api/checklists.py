"""체크리스트 라우터 — 복합 조회, 템플릿 교체, 월간 제출.

Checklist Router — combined view (submissions + template), wholesale
template replacement and monthly submission.

Permission Matrix (역할별 권한):
    - 조회: 로그인 전원, 역 범위 필터 적용
    - 템플릿 교체 / 제출: 조회 전용 역할(operator, manager_dept) 제외
"""

from typing import Annotated

from fastapi import APIRouter, Depends

from stationsync.api.deps import get_mutation_service, get_sync_service
from stationsync.schemas.common import ChecklistSubmissionCreate
from stationsync.schemas.views import ChecklistTemplateReplace, ChecklistView
from stationsync.services.mutation_service import MutationService
from stationsync.services.sync_service import SyncService

router: APIRouter = APIRouter()


def _view(sync: SyncService, submissions_loaded: bool, template_loaded: bool) -> ChecklistView:
    return ChecklistView(
        submissions=sync.visible_submissions(),
        template=sync.checklist_template(),
        submissions_loaded=submissions_loaded,
        template_loaded=template_loaded,
    )


@router.get("", response_model=ChecklistView)
async def get_checklists(
    sync: Annotated[SyncService, Depends(get_sync_service)],
) -> ChecklistView:
    """제출 목록과 템플릿을 동시에 조회합니다."""
    submissions_loaded, template_loaded = await sync.fetch_checklist_data()
    return _view(sync, submissions_loaded, template_loaded)


@router.put("/template", response_model=ChecklistView)
async def replace_template(
    data: ChecklistTemplateReplace,
    mutations: Annotated[MutationService, Depends(get_mutation_service)],
) -> ChecklistView:
    await mutations.save_checklist_template(data.items)
    return _view(mutations.sync, True, True)


@router.post("/submissions", response_model=ChecklistView, status_code=201)
async def submit_checklist(
    data: ChecklistSubmissionCreate,
    mutations: Annotated[MutationService, Depends(get_mutation_service)],
) -> ChecklistView:
    await mutations.submit_checklist(data)
    return _view(mutations.sync, True, True)
