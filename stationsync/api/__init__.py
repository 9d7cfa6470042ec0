"""로컬 API 라우터 패키지 — 모든 엔드포인트 통합.

Local API Router package — aggregates every endpoint used by the
presentation layer into a single router.

Included routers:
    - auth: 로그인/로그아웃/등록/비밀번호 변경 (Session lifecycle)
    - tasks: 작업 조회/생성/진행 갱신 (Task tracking)
    - meetings: 회의 기록 (Meeting records)
    - checklists: 월간 체크리스트 (Monthly venue checklists)
    - admin: 연락처/사용자/감사 로그 (Admin datasets)
    - stations: 역 디렉토리 (Station directory)
"""

from fastapi import APIRouter

from stationsync.api.admin import router as admin_router
from stationsync.api.auth import router as auth_router
from stationsync.api.checklists import router as checklists_router
from stationsync.api.meetings import router as meetings_router
from stationsync.api.stations import router as stations_router
from stationsync.api.tasks import router as tasks_router

api_router: APIRouter = APIRouter()

api_router.include_router(auth_router, prefix="/auth", tags=["Auth"])
api_router.include_router(tasks_router, prefix="/tasks", tags=["Tasks"])
api_router.include_router(meetings_router, prefix="/meetings", tags=["Meetings"])
api_router.include_router(checklists_router, prefix="/checklists", tags=["Checklists"])
# 연락처/사용자/로그: /contacts, /users, /logs (admin datasets)
api_router.include_router(admin_router, tags=["Admin"])
api_router.include_router(stations_router, prefix="/stations", tags=["Stations"])
