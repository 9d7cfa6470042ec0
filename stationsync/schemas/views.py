"""로컬 API 조회/요청 뷰 스키마.

View schemas for the local API: combined checklist view and template
replacement request.
"""

from pydantic import BaseModel

from stationsync.schemas.common import ChecklistItem, ChecklistSubmission


class ChecklistView(BaseModel):
    """체크리스트 복합 뷰 — submissions and template fetched together.

    Attributes:
        submissions: 역 범위 필터 적용된 제출 목록 (Station-scoped submissions)
        template: 현재 템플릿 (Current template)
        submissions_loaded: 제출 목록 조회 성공 여부 (Whether the submissions read succeeded)
        template_loaded: 템플릿 조회 성공 여부 (Whether the template read succeeded)
    """

    submissions: list[ChecklistSubmission]
    template: list[ChecklistItem]
    submissions_loaded: bool
    template_loaded: bool


class ChecklistTemplateReplace(BaseModel):
    """템플릿 전체 교체 요청 — wholesale template replacement."""

    items: list[ChecklistItem]


class StationEntry(BaseModel):
    """역 디렉토리 항목."""

    code: str
    name: str
